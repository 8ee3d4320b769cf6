import pytest

from shared.errors import ConflictError, DuplicateError
from shared.models.attribute import (
    AttributeListQuery,
    AttributeType,
    AttributeValueInput,
    CreateAttributeRequest,
    UpdateAttributeRequest,
)
from shared.models.product import CreateProductRequest, ProductAttributeInput


def _color(service, caller, name="Color"):
    return service.create(caller, CreateAttributeRequest(
        shop_id="shop-1",
        name=name,
        type=AttributeType.COLOR,
        values=[
            AttributeValueInput(name="Black", value="#000000"),
            AttributeValueInput(name="Off White", value="#FAF9F6"),
            AttributeValueInput(name="Navy Blue", slug="navy"),
        ],
    ))


def test_values_are_kept_in_order(attributes, vendor):
    color = _color(attributes, vendor)
    assert color.type == AttributeType.COLOR
    assert [v.name for v in color.values] == ["Black", "Off White", "Navy Blue"]
    assert [v.slug for v in color.values] == ["black", "off-white", "navy"]
    assert [v.sort_order for v in color.values] == [0, 1, 2]


def test_update_replaces_values_only_when_given(attributes, vendor):
    color = _color(attributes, vendor)

    renamed = attributes.update(vendor, UpdateAttributeRequest(id=color.id, name="Colour"))
    assert renamed.name == "Colour"
    assert len(renamed.values) == 3

    replaced = attributes.update(vendor, UpdateAttributeRequest(
        id=color.id, values=[AttributeValueInput(name="Red")],
    ))
    assert [v.name for v in replaced.values] == ["Red"]

    cleared = attributes.update(vendor, UpdateAttributeRequest(id=color.id, values=[]))
    assert cleared.values == []


def test_listing_pages_attributes_not_value_rows(attributes, vendor):
    for name in ("Color", "Finish", "Material"):
        _color(attributes, vendor, name=name)

    page = attributes.get_page(vendor, AttributeListQuery(limit=2, sort_by="name"))
    assert [a.name for a in page.data] == ["Color", "Finish"]
    assert all(len(a.values) == 3 for a in page.data)
    assert page.total == 3

    bare = attributes.get_page(vendor, AttributeListQuery(include_values=False))
    assert all(a.values == [] for a in bare.data)


def test_type_filter(attributes, vendor):
    _color(attributes, vendor)
    attributes.create(vendor, CreateAttributeRequest(shop_id="shop-1", name="Size"))
    page = attributes.get_page(vendor, AttributeListQuery(type=AttributeType.SELECT))
    assert [a.name for a in page.data] == ["Size"]


def test_delete_blocked_while_assigned(attributes, products, vendor, kafka):
    color = _color(attributes, vendor)
    product = products.create(vendor, CreateProductRequest(
        shop_id="shop-1", name="Shirt", selling_price_cents=1500,
        attributes=[ProductAttributeInput(attribute_id=color.id, value="Black")],
    ))
    assert attributes.get(vendor, color.id).product_count == 1

    with pytest.raises(ConflictError, match="Cannot delete an attribute that is assigned to products"):
        attributes.delete(vendor, color.id)

    products.delete(vendor, product.id)
    attributes.delete(vendor, color.id)
    assert kafka.types()[-1] == "attribute.deleted"


def test_duplicate_attribute_slug_message(attributes, vendor):
    _color(attributes, vendor)
    with pytest.raises(DuplicateError, match="^An attribute with this slug already exists in this shop."):
        _color(attributes, vendor)
