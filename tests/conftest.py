"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides sample products, an in-memory product source, a recording image
surface and the Flask test client.

==============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

import pytest
from flask.testing import FlaskClient

from application.carousel import CarouselArena
from application.image_resolver import ImageReferenceResolver
from application.variant_loader import VariantFallbackLoader
from core.entities import ProductRecord
from core.ports import ImageSurface, ProductSource
from infrastructure.config import CatalogConfig
from infrastructure.web.flask_app import create_app


PLACEHOLDER = "https://via.placeholder.com/600x450?text=FERJO"


def drive_url(file_id: str) -> str:
    return f"https://drive.google.com/file/d/{file_id}/view?usp=sharing"


# ============================================================================
# FAKES
# ============================================================================

@dataclass
class Attempt:
    card_id: str
    url: str
    on_load: Callable[[int, int], None]
    on_error: Callable[[], None]


class RecordingSurface(ImageSurface):
    """Records load attempts; tests decide when each one resolves."""

    def __init__(self):
        self.attempts: List[Attempt] = []
        self.placeholders: Dict[str, str] = {}

    def begin_load(self, card_id, url, on_load, on_error):
        self.attempts.append(Attempt(card_id, url, on_load, on_error))

    def show_placeholder(self, card_id, url):
        self.placeholders[card_id] = url

    @property
    def last(self) -> Attempt:
        return self.attempts[-1]


class StaticProductSource(ProductSource):
    def __init__(self, products: List[ProductRecord]):
        self.products = products
        self.calls = 0

    async def fetch_products(self) -> List[ProductRecord]:
        self.calls += 1
        return list(self.products)


# ============================================================================
# DATA FIXTURES
# ============================================================================

@pytest.fixture
def raw_products() -> List[dict]:
    return [
        {
            "nombre": "Martillo",
            "id_del_articulo": "A1",
            "upc_ean_isbn": "7401000000011",
            "categoria": "Herramientas",
            "precio_de_venta": 85.5,
            "cantidad": 5,
            "image_url": drive_url("martillo1"),
            "image_url_2": drive_url("martillo2"),
        },
        {
            "nombre": "Clavo",
            "id_del_articulo": "B2",
            "categoria": "Herramientas",
            "precio_de_venta": "0.25",
            "cantidad": 0,
        },
        {
            "nombre": "Juego de llaves",
            "id_del_articulo": "C3",
            "categoria": "Mecánica",
            "precio_de_venta": 1250,
            "moneda": "USD",
            "cantidad": 2,
            "status": "SIN_STOCK",
            "image_url": "https://example.com/llaves.jpg",
        },
    ]


@pytest.fixture
def products(raw_products) -> List[ProductRecord]:
    return [ProductRecord.from_raw(p) for p in raw_products]


# ============================================================================
# CAROUSEL FIXTURES
# ============================================================================

@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def loader(surface) -> VariantFallbackLoader:
    return VariantFallbackLoader(surface, PLACEHOLDER)


@pytest.fixture
def arena(loader) -> CarouselArena:
    arena = CarouselArena(ImageReferenceResolver(), loader)
    arena.reset()
    return arena


# ============================================================================
# APP FIXTURES
# ============================================================================

@pytest.fixture
def source(products) -> StaticProductSource:
    return StaticProductSource(products)


@pytest.fixture
def app(source):
    app = create_app(CatalogConfig(api_base="https://script.google.com/macros/s/XYZ/exec"), source=source)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app) -> FlaskClient:
    return app.test_client()
