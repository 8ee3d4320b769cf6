import pytest

from shared.errors import ConflictError, DuplicateError, ForbiddenError, NotFoundError, ValidationError
from shared.models.category import CategoryListQuery, CreateCategoryRequest, UpdateCategoryRequest
from shared.models.product import CreateProductRequest


def _create(service, caller, **fields):
    return service.create(caller, CreateCategoryRequest(**fields))


def test_root_and_child_levels(categories, vendor):
    electronics = _create(categories, vendor, name="Electronics", shop_id="shop-1")
    assert electronics.slug == "electronics"
    assert electronics.level == 0
    assert electronics.product_count == 0

    phones = _create(categories, vendor, name="Smartphones", parent_id=electronics.id, shop_id="shop-1")
    assert phones.level == 1
    assert phones.parent_name == "Electronics"

    refreshed = categories.get(vendor, electronics.id)
    assert refreshed.children_count == 1


def test_self_parent_is_rejected_and_row_unchanged(categories, vendor):
    category = _create(categories, vendor, name="Electronics", shop_id="shop-1")

    with pytest.raises(ValidationError, match="cannot be its own parent"):
        categories.update(vendor, UpdateCategoryRequest(id=category.id, parent_id=category.id, name="Renamed"))

    unchanged = categories.get(vendor, category.id)
    assert unchanged.name == "Electronics"
    assert unchanged.parent_id is None


def test_missing_parent(categories, vendor):
    with pytest.raises(NotFoundError, match="Parent category not found"):
        _create(categories, vendor, name="Orphan", parent_id="nope", shop_id="shop-1")


def test_reparenting_recomputes_level(categories, vendor):
    root = _create(categories, vendor, name="Root", shop_id="shop-1")
    child = _create(categories, vendor, name="Child", parent_id=root.id, shop_id="shop-1")
    other = _create(categories, vendor, name="Other", shop_id="shop-1")

    moved = categories.update(vendor, UpdateCategoryRequest(id=other.id, parent_id=child.id))
    assert moved.level == 2

    detached = categories.update(vendor, UpdateCategoryRequest(id=other.id, parent_id=None))
    assert detached.level == 0
    assert detached.parent_id is None


def test_patch_only_writes_sent_fields(categories, vendor):
    category = _create(categories, vendor, name="Audio", shop_id="shop-1", description="Speakers", featured=True)
    updated = categories.update(vendor, UpdateCategoryRequest(id=category.id, sort_order=4))
    assert updated.sort_order == 4
    assert updated.description == "Speakers"
    assert updated.featured is True
    assert updated.slug == "audio"


def test_duplicate_slug_in_shop(categories, vendor, other_vendor):
    _create(categories, vendor, name="Audio", shop_id="shop-1")
    with pytest.raises(DuplicateError, match="already exists in this shop"):
        _create(categories, vendor, name="Audio", shop_id="shop-1")
    # another shop may reuse the slug
    assert _create(categories, other_vendor, name="Audio", shop_id="shop-2").slug == "audio"


def test_duplicate_slug_on_update(categories, vendor):
    _create(categories, vendor, name="Audio", shop_id="shop-1")
    video = _create(categories, vendor, name="Video", shop_id="shop-1")
    with pytest.raises(DuplicateError):
        categories.update(vendor, UpdateCategoryRequest(id=video.id, slug="audio"))


def test_admin_global_category(categories, admin, vendor):
    category = _create(categories, admin, name="Seasonal")
    assert category.shop_id == "global"

    page = categories.get_page(admin, CategoryListQuery(shop_id="global"))
    assert [c.id for c in page.data] == [category.id]

    # vendors do not manage global categories
    with pytest.raises(NotFoundError):
        categories.get(vendor, category.id)
    with pytest.raises(ValidationError):
        _create(categories, vendor, name="Mine")


def test_vendor_cannot_create_in_foreign_shop(categories, vendor):
    with pytest.raises(ForbiddenError):
        _create(categories, vendor, name="Sneaky", shop_id="shop-2")


def test_vendor_scope_hides_other_shops(categories, vendor, other_vendor):
    mine = _create(categories, vendor, name="Mine", shop_id="shop-1")
    _create(categories, other_vendor, name="Theirs", shop_id="shop-2")

    page = categories.get_page(vendor, CategoryListQuery())
    assert [c.id for c in page.data] == [mine.id]
    assert page.total == 1

    # asking for another shop never widens the scope
    assert categories.get_page(vendor, CategoryListQuery(shop_id="shop-2")).total == 0

    with pytest.raises(NotFoundError):
        categories.update(other_vendor, UpdateCategoryRequest(id=mine.id, name="Taken"))


def test_delete_blocked_by_subcategories(categories, vendor, kafka):
    parent = _create(categories, vendor, name="Parent", shop_id="shop-1")
    child = _create(categories, vendor, name="Child", parent_id=parent.id, shop_id="shop-1")

    with pytest.raises(ConflictError, match="has subcategories"):
        categories.delete(vendor, parent.id)

    categories.delete(vendor, child.id)
    categories.delete(vendor, parent.id)
    assert kafka.types().count("category.deleted") == 2


def test_delete_blocked_by_products(categories, products, vendor):
    category = _create(categories, vendor, name="Phones", shop_id="shop-1")
    products.create(vendor, CreateProductRequest(
        shop_id="shop-1", name="Phone", selling_price_cents=1000, category_id=category.id,
    ))

    with pytest.raises(ConflictError, match='Cannot delete category "Phones" with 1 associated products'):
        categories.delete(vendor, category.id)


def test_toggles(categories, vendor):
    category = _create(categories, vendor, name="Toys", shop_id="shop-1")
    assert categories.toggle_active(vendor, category.id).is_active is False
    assert categories.toggle_featured(vendor, category.id).featured is True
    assert categories.toggle_active(vendor, category.id).is_active is True


def test_list_filters_and_total(categories, vendor):
    root = _create(categories, vendor, name="Root", shop_id="shop-1", sort_order=1)
    for i in range(3):
        _create(categories, vendor, name=f"Child {i}", parent_id=root.id, shop_id="shop-1", sort_order=i)

    roots = categories.get_page(vendor, CategoryListQuery(root_only=True))
    assert [c.id for c in roots.data] == [root.id]

    children = categories.get_page(vendor, CategoryListQuery(parent_id=root.id, limit=2))
    assert len(children.data) == 2
    assert children.total == 3
    assert [c.name for c in children.data] == ["Child 0", "Child 1"]

    searched = categories.get_page(vendor, CategoryListQuery(search="child 2"))
    assert [c.name for c in searched.data] == ["Child 2"]

    beyond = categories.get_page(vendor, CategoryListQuery(offset=10))
    assert beyond.data == []
    assert beyond.total == 4


def test_events_only_for_successful_mutations(categories, vendor, kafka):
    category = _create(categories, vendor, name="Books", shop_id="shop-1")
    with pytest.raises(DuplicateError):
        _create(categories, vendor, name="Books", shop_id="shop-1")

    assert kafka.types() == ["category.created"]
    assert kafka.events[0]["entity_id"] == category.id
    assert kafka.events[0]["data"]["slug"] == "books"


def test_storefront_lists_active_categories_in_order(categories, vendor):
    _create(categories, vendor, name="Zeta", shop_id="shop-1", sort_order=0)
    _create(categories, vendor, name="Alpha", shop_id="shop-1", sort_order=0)
    hidden = _create(categories, vendor, name="Hidden", shop_id="shop-1", is_active=False)
    _create(categories, vendor, name="Later", shop_id="shop-1", sort_order=5, featured=True)

    names = [c.name for c in categories.list_storefront()]
    assert names == ["Alpha", "Zeta", "Later"]
    assert hidden.name not in names
    assert [c.name for c in categories.list_storefront(featured=True)] == ["Later"]
