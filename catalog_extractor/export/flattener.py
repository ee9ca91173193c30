"""
Row Flattener

Turns canonical products into one row per (product, variant) pair, in
two layouts: a generic catalog table and the business import table.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..common.text_utils import clean_html_description, to_proper_case
from ..models import Product, ProductVariant, clean_image_url

IMAGE_SLOTS = 8
DEFAULT_ORIGIN_CITY = 'México'

# Generic catalog columns
GENERIC_FIELDNAMES = [
    'ID Producto', 'Handle', 'Título Producto', 'Descripción', 'Vendedor',
    'Categoría', 'Tags', 'Publicado', 'Fecha Publicación', 'ID Variante',
    'Título Variante', 'SKU', 'Precio', 'Precio de Comparación', 'Disponible',
    'Opción 1', 'Opción 2', 'Opción 3', 'URLs de Imágenes',
]

# Business import template columns (exact template headers)
SPECIALIZED_FIELDNAMES = [
    'Categoría / Tipo de producto', 'SKU', 'Nombre del producto', 'UPC',
    'ID de producto - Variante',
    'Marca (Aquí va el dato que obtienes de vendedor)',
    'Modelo', 'Color', 'Descripción corta',
    'Descripción larga (esta seria de la descripción que ya descargas)',
    'Ciudad de origen', 'Material', 'Medidas', 'Peso del producto',
    'Código Variante (Aquí ira el código del producto)',
] + [f'Imagen {n}' for n in range(1, IMAGE_SLOTS + 1)] + [
    'SEO (Aquí iran las Tags)', 'Talla (Aquí iran las tallas)',
    'Disponible (Si/No)', 'Titulo de Variante', 'Precio Lista', 'Precio Promo',
]

Row = Dict[str, Any]


def _yes_no(value: bool) -> str:
    return 'Sí' if value else 'No'


def _image_urls(product: Product) -> List[str]:
    return [clean_image_url(url) for url in product.images]


def list_and_promo_price(variant: ProductVariant) -> Tuple[float, Any]:
    """
    Derive the business list/promotional price pair.

    The compare-at price is the list price only when it exceeds the
    selling price; the selling price is then the promotion. Otherwise
    the selling price is the list price and there is no promotion.

    Returns:
        (list_price, promo_price) with promo_price '' when there is none
    """
    price = float(variant.price)
    compare_at: Optional[float] = None
    if variant.compare_at_price is not None:
        compare_at = float(variant.compare_at_price)

    if compare_at is not None and compare_at > price:
        return compare_at, price
    return price, ''


def generic_row(product: Product, variant: ProductVariant) -> Row:
    """Generic catalog row: every canonical field of the pair."""
    return {
        'ID Producto': product.id,
        'Handle': product.handle,
        'Título Producto': product.title,
        'Descripción': product.body_html,
        'Vendedor': product.vendor,
        'Categoría': product.product_type,
        'Tags': ', '.join(product.tags),
        'Publicado': _yes_no(bool(product.published_at)),
        'Fecha Publicación': product.published_at,
        'ID Variante': variant.id,
        'Título Variante': variant.title,
        'SKU': variant.sku,
        'Precio': float(variant.price),
        'Precio de Comparación': (
            float(variant.compare_at_price) if variant.compare_at_price is not None else ''
        ),
        'Disponible': _yes_no(variant.available),
        'Opción 1': variant.option1,
        'Opción 2': variant.option2,
        'Opción 3': variant.option3,
        'URLs de Imágenes': ', '.join(_image_urls(product)),
    }


def specialized_row(
    product: Product,
    variant: ProductVariant,
    origin_city: str = DEFAULT_ORIGIN_CITY,
) -> Row:
    """Business import row: fixed template layout with derived pricing."""
    images = _image_urls(product)
    list_price, promo_price = list_and_promo_price(variant)

    row = {
        'Categoría / Tipo de producto': product.product_type,
        'SKU': variant.sku or '',
        'Nombre del producto': to_proper_case(product.title),
        'UPC': '',
        'ID de producto - Variante': variant.id,
        'Marca (Aquí va el dato que obtienes de vendedor)': product.vendor,
        'Modelo': '',
        'Color': variant.option2 or '',
        'Descripción corta': '',
        'Descripción larga (esta seria de la descripción que ya descargas)':
            clean_html_description(product.body_html),
        'Ciudad de origen': origin_city,
        'Material': '',
        'Medidas': '',
        'Peso del producto': '',
        'Código Variante (Aquí ira el código del producto)': product.id,
    }
    for slot in range(IMAGE_SLOTS):
        row[f'Imagen {slot + 1}'] = images[slot] if slot < len(images) else ''
    row.update({
        'SEO (Aquí iran las Tags)': ', '.join(product.tags),
        'Talla (Aquí iran las tallas)': variant.option1 or '',
        'Disponible (Si/No)': _yes_no(variant.available),
        'Titulo de Variante': variant.title,
        'Precio Lista': list_price,
        'Precio Promo': promo_price,
    })
    return row


def flatten(
    products: List[Product],
    origin_city: str = DEFAULT_ORIGIN_CITY,
) -> Tuple[List[Row], List[Row]]:
    """
    Flatten products into (generic_rows, specialized_rows).

    One row per variant in each table, in product then variant order.
    Products without variants contribute no rows.
    """
    generic_rows: List[Row] = []
    specialized_rows: List[Row] = []
    for product in products:
        for variant in product.variants:
            generic_rows.append(generic_row(product, variant))
            specialized_rows.append(specialized_row(product, variant, origin_city))
    return generic_rows, specialized_rows
