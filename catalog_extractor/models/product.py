"""
Canonical product data models.

Pure data classes shared by every platform adapter. Construction validates
and normalizes; nothing is mutated afterwards.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

DEFAULT_VARIANT_TITLE = "Default Title"

ProductId = Union[str, int]


def normalize_tags(tags: Union[str, Iterable[str], None]) -> List[str]:
    """
    Normalize tags to an ordered list of strings.

    Admin-style APIs return a comma-joined string, storefront APIs return
    a list. Both end up as trimmed, non-empty strings in source order.

    Example:
        >>> normalize_tags("summer, sale ,")
        ['summer', 'sale']
    """
    if not tags:
        return []
    if isinstance(tags, str):
        parts = tags.split(',')
    else:
        parts = [str(tag) for tag in tags if tag is not None]
    return [part.strip() for part in parts if part.strip()]


def clean_image_url(url: Optional[str]) -> str:
    """Strip tracking/query parameters from an image URL."""
    if not url:
        return ''
    return url.split('?', 1)[0]


def build_variant_title(options: Iterable[Optional[str]]) -> str:
    """Join up to three option values with ' / '."""
    values = [str(value) for value in list(options)[:3] if value]
    return ' / '.join(values) if values else DEFAULT_VARIANT_TITLE


def _parse_float(value: str, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} is not a valid number: {value!r}")


@dataclass
class ProductVariant:
    """A purchasable variant of a product."""
    id: ProductId
    title: str
    price: str
    compare_at_price: Optional[str] = None
    sku: str = ""
    available: bool = False
    option1: Optional[str] = None
    option2: Optional[str] = None
    option3: Optional[str] = None

    def __post_init__(self):
        """Validate prices after initialization."""
        self.price = str(self.price)
        if _parse_float(self.price, "price") < 0:
            raise ValueError(f"price must be non-negative: {self.price!r}")
        if self.compare_at_price is not None:
            self.compare_at_price = str(self.compare_at_price)
            _parse_float(self.compare_at_price, "compare_at_price")
        if self.sku is None:
            self.sku = ""

    @property
    def options(self) -> List[Optional[str]]:
        return [self.option1, self.option2, self.option3]


@dataclass
class Product:
    """
    Canonical product record.

    Every adapter maps its platform's payload into this shape. The
    identifier is kept as the source returned it (string or number).

    Field Groups:
    - Identity: id, title, handle
    - Content: body_html (raw markup), vendor, product_type
    - Lifecycle: created_at, published_at (None when unpublished)
    - Collections: tags, variants, images (absolute URLs, in source order)
    """
    id: ProductId
    title: str
    handle: str = ""
    body_html: str = ""
    vendor: str = ""
    product_type: str = ""
    created_at: str = ""
    published_at: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    variants: List[ProductVariant] = field(default_factory=list)
    images: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.tags = normalize_tags(self.tags)
        self.title = self.title or ""
        self.body_html = self.body_html or ""
        self.images = [url for url in self.images if url]
