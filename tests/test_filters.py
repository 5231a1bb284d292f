"""Tests for catalog filtering, category options and stock inference."""

import pytest

from application.filters import (
    ANY,
    CatalogFilterEngine,
    OutOfStockPolicy,
    category_options,
    is_out_of_stock,
)
from core.entities import ProductRecord


@pytest.fixture
def engine():
    return CatalogFilterEngine()


class TestCatalogFilterEngine:
    def test_empty_criteria_is_identity(self, engine, products):
        assert engine.apply(products, "", ANY) == products
        assert engine.apply(products, "", None) == products
        assert engine.apply(products, "   ", "") == products

    def test_substring_on_name(self, engine, products):
        result = engine.apply(products, "juego", ANY)
        assert [p.name for p in result] == ["Juego de llaves"]

    def test_query_is_trimmed_and_lowercased(self, engine, products):
        assert [p.name for p in engine.apply(products, "  MART ", ANY)] == ["Martillo"]

    def test_matches_primary_and_secondary_codes(self, engine, products):
        assert [p.name for p in engine.apply(products, "b2", ANY)] == ["Clavo"]
        assert [p.name for p in engine.apply(products, "740100", ANY)] == ["Martillo"]

    def test_category_is_exact_and_case_sensitive(self, engine, products):
        assert len(engine.apply(products, "", "Herramientas")) == 2
        assert engine.apply(products, "", "herramientas") == []

    def test_result_is_subset_and_source_untouched(self, engine, products):
        before = list(products)
        result = engine.apply(products, "a", "Herramientas")
        assert all(p in products for p in result)
        assert products == before

    def test_idempotent(self, engine, products):
        first = engine.apply(products, "l", "Herramientas")
        second = engine.apply(products, "l", "Herramientas")
        assert first == second
        assert engine.apply(first, "l", "Herramientas") == first

    def test_out_of_stock_flagged_not_excluded_by_default(self, engine, products):
        result = engine.apply(products, "", ANY)
        assert any(is_out_of_stock(p) for p in result)

    def test_exclude_policy(self, products):
        engine = CatalogFilterEngine(OutOfStockPolicy.EXCLUDE)
        assert [p.name for p in engine.apply(products, "", ANY)] == ["Martillo"]

    def test_missing_fields_never_fail(self, engine):
        empty = ProductRecord.from_raw({})
        assert engine.apply([empty], "x", ANY) == []
        assert engine.apply([empty], "", ANY) == [empty]


class TestCategoryOptions:
    def test_distinct_trimmed_sorted(self):
        products = [
            ProductRecord.from_raw({"categoria": c})
            for c in ["Pintura", " Herramientas ", "", "Herramientas", None, "Electricidad", "   "]
        ]
        assert category_options(products) == ["Electricidad", "Herramientas", "Pintura"]


class TestOutOfStock:
    @pytest.mark.parametrize("raw, expected", [
        ({"cantidad": 5}, False),
        ({"cantidad": 0}, True),
        ({"cantidad": -2}, True),
        ({}, True),
        ({"cantidad": "3"}, False),
        ({"cantidad": 5, "status": "sin_stock"}, True),
        ({"cantidad": 5, "status": "Sin_Stock"}, True),
        ({"cantidad": 5, "status": "activo"}, False),
        ({"cantidad": 5, "status": "sin stock"}, False),
    ])
    def test_predicate(self, raw, expected):
        assert is_out_of_stock(ProductRecord.from_raw(raw)) is expected


class TestEndToEnd:
    def test_martillo_clavo(self, engine):
        products = [
            ProductRecord.from_raw({"nombre": "Martillo", "id_del_articulo": "A1",
                                    "categoria": "Herramientas", "cantidad": 5}),
            ProductRecord.from_raw({"nombre": "Clavo", "id_del_articulo": "B2",
                                    "categoria": "Herramientas", "cantidad": 0}),
        ]
        assert engine.apply(products, "mart", ANY) == [products[0]]
        assert engine.apply(products, "", "Herramientas") == products
        assert is_out_of_stock(products[0]) is False
        assert is_out_of_stock(products[1]) is True
