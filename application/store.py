import logging
from typing import Iterable, List, Tuple
from core.entities import ProductRecord
from .filters import category_options

logger = logging.getLogger(__name__)


class ProductStore:
    """Lista autoritativa de productos: un solo escritor (la carga), muchos lectores."""

    def __init__(self):
        self._products: Tuple[ProductRecord, ...] = ()
        self._categories: List[str] = []
        self.loaded = False

    def load(self, products: Iterable[ProductRecord]) -> None:
        self._products = tuple(products)
        self._categories = category_options(self._products)
        self.loaded = True
        logger.info(f"Catálogo cargado: {len(self._products)} productos, {len(self._categories)} categorías")

    @property
    def products(self) -> Tuple[ProductRecord, ...]:
        return self._products

    @property
    def categories(self) -> List[str]:
        return list(self._categories)
