"""
Extraction run coordination.

Modules:
    catalog_extraction - CatalogExtraction run, ExtractionResult, store identifiers
"""

from .catalog_extraction import (
    CatalogExtraction,
    ExtractionResult,
    store_identifier,
)

__all__ = [
    'CatalogExtraction',
    'ExtractionResult',
    'store_identifier',
]
