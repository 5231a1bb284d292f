from enum import Enum
from typing import Iterable, List, Optional, Sequence
from core.entities import FilterCriteria, NO_STOCK_STATUS, ProductRecord

# Valor del selector de categoría que equivale a "todas"
ANY = "any"


class OutOfStockPolicy(str, Enum):
    FLAG = "flag"        # se muestran marcados como sin stock
    EXCLUDE = "exclude"  # se quitan de los resultados filtrados


def is_out_of_stock(product: ProductRecord) -> bool:
    qty = product.quantity or 0
    return qty <= 0 or (product.status or "").lower() == NO_STOCK_STATUS


def category_options(products: Iterable[ProductRecord]) -> List[str]:
    """Categorías distintas, no vacías y recortadas, en orden lexicográfico."""
    return sorted({(p.category or "").strip() for p in products} - {""})


def _is_any(category: Optional[str]) -> bool:
    return not category or category == ANY


class CatalogFilterEngine:
    def __init__(self, out_of_stock_policy: OutOfStockPolicy = OutOfStockPolicy.FLAG):
        self.out_of_stock_policy = out_of_stock_policy

    def matches(self, product: ProductRecord, criteria: FilterCriteria) -> bool:
        q = criteria.query
        if q:
            hay = (
                q in (product.name or "").lower()
                or q in (product.code or "").lower()
                or q in (product.alt_code or "").lower()
            )
            if not hay:
                return False
        if not _is_any(criteria.category) and (product.category or "") != criteria.category:
            return False
        if self.out_of_stock_policy == OutOfStockPolicy.EXCLUDE and is_out_of_stock(product):
            return False
        return True

    def apply(self, products: Sequence[ProductRecord], query: Optional[str] = "",
              category: Optional[str] = None) -> List[ProductRecord]:
        criteria = FilterCriteria.build(query, category)
        return [p for p in products if self.matches(p, criteria)]
