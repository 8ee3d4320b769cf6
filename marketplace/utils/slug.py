"""Slug generation."""

import re
import unicodedata

from shared.errors import ValidationError

_UNSAFE = re.compile(r"[^a-z0-9\s_-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def generate_slug(name: str) -> str:
    """Deterministic slug: ascii-folded, lowercase, whitespace to hyphens, unsafe chars dropped.

    >>> generate_slug("  Smart Phones & Tablets ")
    'smart-phones-tablets'
    """
    folded = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    slug = _UNSAFE.sub("", folded.lower())
    slug = _SEPARATORS.sub("-", slug).strip("-")
    if not slug:
        raise ValidationError(f'Cannot derive a slug from "{name}". Please provide a slug.')
    return slug


def resolve_slug(slug, name: str) -> str:
    return slug or generate_slug(name)
