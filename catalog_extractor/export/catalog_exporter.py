"""
Catalog Exporter

Writes flattened catalog rows to an Excel workbook (generic sheet plus
business sheet) or to a CSV file with the generic columns.
"""

import csv
import logging
import os
import re
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from ..models import Product
from .flattener import (
    DEFAULT_ORIGIN_CITY,
    GENERIC_FIELDNAMES,
    SPECIALIZED_FIELDNAMES,
    flatten,
)

logger = logging.getLogger(__name__)

GENERIC_SHEET_TITLE = 'Productos'

# Excel limits sheet titles to 31 characters
_MAX_SHEET_TITLE = 31


def build_export_filename(platform: str, store_identifier: str, extension: str) -> str:
    """
    Build an export filename.

    Example:
        >>> build_export_filename('shopify', 'shop.example.com', 'xlsx')
        'shopify-productos-shop.example.com.xlsx'
    """
    identifier = re.sub(r'[^\w.-]+', '-', store_identifier or '').strip('-') or 'export'
    return f"{platform}-productos-{identifier}.{extension.lstrip('.')}"


class CatalogExporter:
    """
    Exports canonical products to workbook and CSV files.

    Usage:
        exporter = CatalogExporter(business_name="Coppel")
        exporter.export_workbook(products, "output/shopify-productos-shop.xlsx")
        exporter.export_csv(products, "output/shopify-productos-shop.csv")
    """

    def __init__(self, business_name: str = 'Coppel', origin_city: str = DEFAULT_ORIGIN_CITY):
        """
        Initialize the exporter.

        Args:
            business_name: Name shown in the business sheet title
            origin_city: Value of the business layout's origin city column
        """
        self.business_name = business_name
        self.origin_city = origin_city

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'CatalogExporter':
        export_settings = settings.get('export') or {}
        return cls(
            business_name=export_settings.get('business_name', 'Coppel'),
            origin_city=export_settings.get('origin_city', DEFAULT_ORIGIN_CITY),
        )

    @property
    def business_sheet_title(self) -> str:
        return f"Formato {self.business_name}"[:_MAX_SHEET_TITLE]

    def flatten(self, products: List[Product]):
        return flatten(products, origin_city=self.origin_city)

    def build_workbook(self, products: List[Product]) -> Workbook:
        """Build the two-sheet workbook in memory."""
        generic_rows, specialized_rows = self.flatten(products)

        wb = Workbook()
        wb.remove(wb.active)
        _write_sheet(wb, GENERIC_SHEET_TITLE, GENERIC_FIELDNAMES, generic_rows)
        _write_sheet(wb, self.business_sheet_title, SPECIALIZED_FIELDNAMES, specialized_rows)
        return wb

    def export_workbook(self, products: List[Product], output_path: str) -> int:
        """
        Export products to an .xlsx workbook.

        Args:
            products: Products to export
            output_path: Output .xlsx file path

        Returns:
            Number of variant rows written per sheet
        """
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)

        wb = self.build_workbook(products)
        wb.save(output_path)
        row_count = wb[GENERIC_SHEET_TITLE].max_row - 1
        logger.info("Workbook written: %s (%d rows)", output_path, row_count)
        return row_count

    def export_csv(self, products: List[Product], output_path: str) -> int:
        """
        Export products to a CSV file with the generic columns.

        Args:
            products: Products to export
            output_path: Output CSV file path

        Returns:
            Number of rows written
        """
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)

        generic_rows, _ = self.flatten(products)

        # BOM so spreadsheet apps detect UTF-8
        with open(output_path, 'w', newline='', encoding='utf-8-sig') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=GENERIC_FIELDNAMES)
            writer.writeheader()
            writer.writerows(generic_rows)

        logger.info("CSV written: %s (%d rows)", output_path, len(generic_rows))
        return len(generic_rows)


def _write_sheet(wb: Workbook, title: str, fieldnames: List[str], rows: List[Dict[str, Any]]) -> None:
    ws = wb.create_sheet(title=title)
    ws.append(fieldnames)
    for row in rows:
        ws.append([_cell_value(row.get(name)) for name in fieldnames])


def _cell_value(value: Any) -> Any:
    """Drop control characters openpyxl refuses to store."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub('', value)
    return value
