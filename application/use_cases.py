from typing import List, Optional
from core.entities import ProductRecord
from core.ports import ProductSource
from .filters import CatalogFilterEngine
from .store import ProductStore


class LoadCatalogUseCase:
    def __init__(self, source: ProductSource, store: ProductStore):
        self.source = source
        self.store = store

    async def execute(self) -> List[ProductRecord]:
        # ConfigurationError / NetworkOrFormatError se propagan: son fatales
        products = await self.source.fetch_products()
        self.store.load(products)
        return list(self.store.products)


class FilterCatalogUseCase:
    def __init__(self, store: ProductStore, engine: CatalogFilterEngine):
        self.store = store
        self.engine = engine

    def execute(self, query: Optional[str] = "", category: Optional[str] = None) -> List[ProductRecord]:
        return self.engine.apply(self.store.products, query, category)
