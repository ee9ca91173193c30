"""Shared test fixtures."""

import pytest

from catalog_extractor.fetching import FetchResult
from catalog_extractor.models import Product, ProductVariant


class FakeFetcher:
    """Replays canned results in order and records every request."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    @property
    def urls(self):
        return [url for url, _ in self.calls]

    def fetch(self, url, headers=None):
        self.calls.append((url, headers))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if not isinstance(response, FetchResult):
            response = FetchResult(response)
        return response


@pytest.fixture
def make_fetcher():
    """Build a FakeFetcher from a list of bodies, FetchResults or exceptions."""
    return FakeFetcher


@pytest.fixture
def minimal_product():
    """A product with a single default variant."""
    return Product(
        id=1,
        title="Plain Tee",
        variants=[ProductVariant(id=11, title="Default Title", price="10.00")],
    )


@pytest.fixture
def full_product():
    """A fully populated product with two variants."""
    return Product(
        id=1001,
        title="CAMISA de algodón orgánico",
        handle="camisa-algodon",
        body_html="<p>Camisa fresca</p><p>100% algodón</p>",
        vendor="Marca Uno",
        product_type="Camisas",
        created_at="2024-01-10T10:00:00-06:00",
        published_at="2024-01-11T10:00:00-06:00",
        tags="verano, algodón",
        variants=[
            ProductVariant(
                id=2001, title="M / Azul", price="100.00", compare_at_price="150.00",
                sku="CAM-M-AZ", available=True, option1="M", option2="Azul",
            ),
            ProductVariant(
                id=2002, title="L / Azul", price="100.00", compare_at_price=None,
                sku="CAM-L-AZ", available=False, option1="L", option2="Azul",
            ),
        ],
        images=[
            "https://cdn.example.com/camisa-1.jpg?v=123",
            "https://cdn.example.com/camisa-2.jpg",
        ],
    )
