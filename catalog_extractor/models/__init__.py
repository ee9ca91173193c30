"""
Data models for catalog extraction.

This module contains the canonical schema every platform adapter produces.
"""

from .product import (
    DEFAULT_VARIANT_TITLE,
    Product,
    ProductVariant,
    build_variant_title,
    clean_image_url,
    normalize_tags,
)

__all__ = [
    'DEFAULT_VARIANT_TITLE',
    'Product',
    'ProductVariant',
    'build_variant_title',
    'clean_image_url',
    'normalize_tags',
]
