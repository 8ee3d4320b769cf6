import pytest

from marketplace.utils.slug import generate_slug, resolve_slug
from shared.errors import ValidationError


@pytest.mark.parametrize("name, expected", [
    ("Electronics", "electronics"),
    ("  Smart Phones & Tablets ", "smart-phones-tablets"),
    ("Café Crème", "cafe-creme"),
    ("USB_C -- Hub", "usb-c-hub"),
    ("4K Webcam!", "4k-webcam"),
])
def test_generate_slug(name, expected):
    assert generate_slug(name) == expected


def test_generate_slug_is_deterministic():
    assert generate_slug("TechPro") == generate_slug("TechPro") == "techpro"


def test_generate_slug_rejects_names_without_slug_characters():
    with pytest.raises(ValidationError):
        generate_slug("!!!")


def test_resolve_slug_prefers_explicit_slug():
    assert resolve_slug("custom-slug", "Some Name") == "custom-slug"
    assert resolve_slug(None, "Some Name") == "some-name"
