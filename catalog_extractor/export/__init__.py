"""
Catalog export.

Modules:
    flattener       - One row per variant, generic and business layouts
    catalog_exporter - Workbook (.xlsx) and CSV writers, export filenames
"""

from .catalog_exporter import GENERIC_SHEET_TITLE, CatalogExporter, build_export_filename
from .flattener import (
    GENERIC_FIELDNAMES,
    SPECIALIZED_FIELDNAMES,
    flatten,
    list_and_promo_price,
)

__all__ = [
    'CatalogExporter',
    'GENERIC_FIELDNAMES',
    'GENERIC_SHEET_TITLE',
    'SPECIALIZED_FIELDNAMES',
    'build_export_filename',
    'flatten',
    'list_and_promo_price',
]
