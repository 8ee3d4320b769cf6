import pytest

from shared.errors import DuplicateError, NotFoundError, ValidationError
from shared.models.brand import CreateBrandRequest
from shared.models.category import CreateCategoryRequest
from shared.models.product import (
    CreateProductRequest,
    ProductImageInput,
    ProductListQuery,
    ProductSortField,
    ProductStatus,
    UpdateProductRequest,
)
from shared.models.tag import CreateTagRequest


def _product(service, caller, name, shop_id="shop-1", **fields):
    fields.setdefault("selling_price_cents", 1000)
    return service.create(caller, CreateProductRequest(shop_id=shop_id, name=name, **fields))


def _images(count, primary=None):
    return [
        ProductImageInput(url=f"https://img.test/{i}.png", is_primary=(i == primary))
        for i in range(count)
    ]


def test_create_hydrates_relations(products, categories, brands, tags, vendor, kafka):
    category = categories.create(vendor, CreateCategoryRequest(shop_id="shop-1", name="Audio"))
    brand = brands.create(vendor, CreateBrandRequest(shop_id="shop-1", name="TechPro"))
    tag = tags.create(vendor, CreateTagRequest(shop_id="shop-1", name="New"))

    product = _product(
        products, vendor, "Wireless Earbuds",
        selling_price_cents=4999, regular_price_cents=5999, cost_price_cents=2000,
        category_id=category.id, brand_id=brand.id, tag_ids=[tag.id, tag.id],
        images=_images(2),
    )

    assert product.slug == "wireless-earbuds"
    assert product.category.name == "Audio"
    assert product.brand.slug == "techpro"
    assert [t.id for t in product.tags] == [tag.id]
    assert product.cost_price_cents == 2000
    assert product.shop.id == "shop-1"
    assert categories.get(vendor, category.id).product_count == 1
    assert kafka.types()[-1] == "product.created"


def test_exactly_one_primary_image_listed_first(products, vendor):
    product = _product(products, vendor, "Lamp", images=_images(3, primary=2))
    assert [img.is_primary for img in product.images] == [True, False, False]
    assert product.images[0].url == "https://img.test/2.png"
    assert [img.url for img in product.images[1:]] == ["https://img.test/0.png", "https://img.test/1.png"]


def test_first_image_becomes_primary_by_default(products, vendor):
    product = _product(products, vendor, "Desk", images=_images(2))
    assert sum(img.is_primary for img in product.images) == 1
    assert product.images[0].url == "https://img.test/0.png"
    assert product.images[0].is_primary


def test_paging_counts_products_not_image_rows(products, vendor):
    for name in ("Alpha", "Bravo", "Charlie"):
        _product(products, vendor, name, images=_images(3))

    query = ProductListQuery(limit=2, sort_by=ProductSortField.NAME, sort_direction="asc")
    page = products.get_page(vendor, query)
    assert [p.name for p in page.data] == ["Alpha", "Bravo"]
    assert all(len(p.images) == 3 for p in page.data)
    assert page.total == 3

    second = products.get_page(vendor, query.model_copy(update={"offset": 2}))
    assert [p.name for p in second.data] == ["Charlie"]

    beyond = products.get_page(vendor, query.model_copy(update={"offset": 5}))
    assert beyond.data == []
    assert beyond.total == 3


def test_filters(products, tags, vendor):
    tag = tags.create(vendor, CreateTagRequest(shop_id="shop-1", name="Sale"))
    _product(products, vendor, "Cheap", selling_price_cents=500, stock=0, tag_ids=[tag.id])
    _product(products, vendor, "Mid", selling_price_cents=2500, stock=3, low_stock_threshold=5)
    _product(products, vendor, "Pricey", selling_price_cents=9900, stock=50, status=ProductStatus.ACTIVE)

    def names(**filters):
        page = products.get_page(vendor, ProductListQuery(sort_by="name", sort_direction="asc", **filters))
        return [p.name for p in page.data], page.total

    assert names(tag_id=tag.id) == (["Cheap"], 1)
    assert names(min_price_cents=1000, max_price_cents=5000) == (["Mid"], 1)
    assert names(in_stock=True) == (["Mid", "Pricey"], 2)
    assert names(in_stock=False) == (["Cheap"], 1)
    assert names(low_stock=True) == (["Cheap", "Mid"], 2)
    assert names(status=ProductStatus.ACTIVE) == (["Pricey"], 1)
    assert names(search="pric") == (["Pricey"], 1)


def test_sort_by_selling_price(products, vendor):
    _product(products, vendor, "B", selling_price_cents=300)
    _product(products, vendor, "A", selling_price_cents=100)
    _product(products, vendor, "C", selling_price_cents=200)
    page = products.get_page(vendor, ProductListQuery(sort_by=ProductSortField.SELLING_PRICE, sort_direction="desc"))
    assert [p.selling_price_cents for p in page.data] == [300, 200, 100]


def test_price_range_must_be_ordered():
    with pytest.raises(ValueError):
        ProductListQuery(min_price_cents=500, max_price_cents=100)


def test_category_slug_filter_with_global_category(products, categories, admin, vendor):
    global_category = categories.create(admin, CreateCategoryRequest(name="Gifts"))
    _product(products, vendor, "Mug", category_id=global_category.id)
    _product(products, vendor, "Plate")

    page = products.get_page(vendor, ProductListQuery(category_slug="gifts"))
    assert [p.name for p in page.data] == ["Mug"]
    assert categories.get(admin, global_category.id).product_count == 1


def test_references_must_be_in_the_product_shop(products, brands, categories, vendor, other_vendor):
    foreign_brand = brands.create(other_vendor, CreateBrandRequest(shop_id="shop-2", name="Otto"))
    foreign_category = categories.create(other_vendor, CreateCategoryRequest(shop_id="shop-2", name="Camping"))

    with pytest.raises(NotFoundError, match="Brand not found."):
        _product(products, vendor, "Tent", brand_id=foreign_brand.id)
    with pytest.raises(NotFoundError, match="Category not found."):
        _product(products, vendor, "Tent", category_id=foreign_category.id)
    with pytest.raises(NotFoundError, match="Tag not found."):
        _product(products, vendor, "Tent", tag_ids=["missing"])

    # nothing was written by the failed attempts
    assert products.get_page(vendor, ProductListQuery()).total == 0


def test_update_moves_category_count(products, categories, vendor):
    first = categories.create(vendor, CreateCategoryRequest(shop_id="shop-1", name="First"))
    second = categories.create(vendor, CreateCategoryRequest(shop_id="shop-1", name="Second"))
    product = _product(products, vendor, "Thing", category_id=first.id)

    products.update(vendor, UpdateProductRequest(id=product.id, category_id=second.id))
    assert categories.get(vendor, first.id).product_count == 0
    assert categories.get(vendor, second.id).product_count == 1

    products.delete(vendor, product.id)
    assert categories.get(vendor, second.id).product_count == 0


def test_partial_update_keeps_unsent_fields(products, vendor):
    product = _product(products, vendor, "Kettle", sku="KT-1", images=_images(2), stock=7)
    updated = products.update(vendor, UpdateProductRequest(id=product.id, name="Electric Kettle"))

    assert updated.name == "Electric Kettle"
    assert updated.slug == "kettle"
    assert updated.sku == "KT-1"
    assert updated.stock == 7
    assert len(updated.images) == 2

    replaced = products.update(vendor, UpdateProductRequest(id=product.id, images=_images(1)))
    assert len(replaced.images) == 1


def test_update_price_rule_checks_stored_values(products, vendor):
    product = _product(products, vendor, "Chair", selling_price_cents=1000, regular_price_cents=1200)
    with pytest.raises(ValidationError, match="Regular price"):
        products.update(vendor, UpdateProductRequest(id=product.id, selling_price_cents=1500))
    assert products.get(vendor, product.id).selling_price_cents == 1000


def test_regular_below_selling_rejected_on_create():
    with pytest.raises(ValueError):
        CreateProductRequest(shop_id="shop-1", name="Bad", selling_price_cents=1000, regular_price_cents=900)


def test_duplicate_product_slug(products, vendor):
    _product(products, vendor, "Lamp")
    with pytest.raises(DuplicateError):
        _product(products, vendor, "Lamp")


def test_vendor_scope(products, vendor, other_vendor, admin):
    mine = _product(products, vendor, "Mine")
    theirs = _product(products, other_vendor, "Theirs", shop_id="shop-2")

    assert [p.id for p in products.get_page(vendor, ProductListQuery()).data] == [mine.id]
    with pytest.raises(NotFoundError, match="Product not found."):
        products.delete(vendor, theirs.id)
    with pytest.raises(NotFoundError):
        products.update(vendor, UpdateProductRequest(id=theirs.id, name="Hijacked"))

    everything = products.get_page(admin, ProductListQuery())
    assert everything.total == 2
    assert {p.shop.vendor_name for p in everything.data} == {"Vera Goods", "Otto Supplies"}


def test_toggles_emit_dedicated_events(products, vendor, kafka):
    product = _product(products, vendor, "Fan")
    assert products.toggle_featured(vendor, product.id).is_featured is True
    assert products.toggle_active(vendor, product.id).is_active is False
    assert kafka.types()[-2:] == ["product.featured_toggled", "product.active_toggled"]


def test_storefront_only_shows_published_products_without_cost(products, categories, vendor):
    category = categories.create(vendor, CreateCategoryRequest(shop_id="shop-1", name="Home"))
    visible = _product(products, vendor, "Visible", status=ProductStatus.ACTIVE, category_id=category.id,
                       cost_price_cents=10)
    _product(products, vendor, "Draft", category_id=category.id)
    _product(products, vendor, "Uncategorized", status=ProductStatus.ACTIVE)
    _product(products, vendor, "Hidden", status=ProductStatus.ACTIVE, category_id=category.id, is_active=False)

    page = products.list_storefront(ProductListQuery())
    assert [p.id for p in page.data] == [visible.id]
    assert page.data[0].cost_price_cents is None
    assert page.total == 1
