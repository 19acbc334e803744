"""Catalog and invoice workflows over the JSON stores when writers overlap."""

import threading

import pytest

from stockbill.application.dto import LineItemSpec
from stockbill.application.issue_invoice import IssueInvoiceHandler
from stockbill.application.update_product import UpdateProductHandler
from stockbill.application.upsert_product import UpsertProductHandler
from stockbill.domain.exceptions import IssuanceFailedError
from stockbill.domain.model.product import Product
from stockbill.domain.model.value_objects import Money
from stockbill.infrastructure.persistence.json_invoice_repository import JsonInvoiceRepository
from stockbill.infrastructure.persistence.json_product_repository import JsonProductRepository


def _after_first_call(repo, method_names, action) -> None:
    """Run ``action`` once, right after the first of these repo methods returns."""
    fired = []
    for name in method_names:
        original = getattr(repo, name)

        def wrapper(*args, _original=original, **kwargs):
            result = _original(*args, **kwargs)
            if not fired:
                fired.append(True)
                action()
            return result

        setattr(repo, name, wrapper)


def _stocked(path, qty: int = 10) -> Product:
    p = Product.create(name="Paracetamol", price=Money.of("10"), quantity=qty)
    JsonProductRepository(path).add(p)
    return p


class TestOverlappingCatalogWrites:

    def test_restock_keeps_a_sale_made_meanwhile(self, tmp_path):
        path = tmp_path / "products.json"
        p = _stocked(path)
        repo = JsonProductRepository(path)
        _after_first_call(
            repo,
            ("get_by_name_variant", "get_by_id", "restock"),
            lambda: JsonProductRepository(path).decrement_quantity(p.id, 3),
        )

        UpsertProductHandler(repo).handle(name="Paracetamol", quantity=5, price="10")

        assert JsonProductRepository(path).get_by_id(p.id).quantity == 12

    def test_update_does_not_bring_back_a_deleted_product(self, tmp_path):
        path = tmp_path / "products.json"
        p = _stocked(path)
        repo = JsonProductRepository(path)
        _after_first_call(
            repo,
            ("get_by_id", "update"),
            lambda: JsonProductRepository(path).delete(p.id),
        )

        UpdateProductHandler(repo).handle(p.id, price="12")

        assert JsonProductRepository(path).list_all() == []

    def test_update_keeps_a_sale_made_meanwhile(self, tmp_path):
        path = tmp_path / "products.json"
        p = _stocked(path)
        repo = JsonProductRepository(path)
        _after_first_call(
            repo,
            ("get_by_id", "update"),
            lambda: JsonProductRepository(path).decrement_quantity(p.id, 4),
        )

        dto = UpdateProductHandler(repo).handle(p.id, price="12")

        stored = JsonProductRepository(path).get_by_id(p.id)
        assert dto.price == "₹12.00"
        assert (stored.quantity, stored.price) == (6, Money.of("12"))


class TestConcurrentStockChanges:

    def _run(self, workers) -> None:
        threads = [threading.Thread(target=w) for w in workers]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

    def test_parallel_decrements_are_all_applied(self, tmp_path):
        path = tmp_path / "products.json"
        p = _stocked(path, qty=100)

        def sell():
            repo = JsonProductRepository(path)
            for _ in range(5):
                repo.decrement_quantity(p.id, 1)

        self._run([sell for _ in range(8)])

        assert JsonProductRepository(path).get_by_id(p.id).quantity == 60

    def test_parallel_restocks_and_sales(self, tmp_path):
        path = tmp_path / "products.json"
        p = _stocked(path, qty=100)

        def sell():
            repo = JsonProductRepository(path)
            for _ in range(5):
                repo.decrement_quantity(p.id, 1)

        def restock():
            handler = UpsertProductHandler(JsonProductRepository(path))
            for _ in range(5):
                handler.handle(name="Paracetamol", quantity=2, price="10")

        self._run([sell, restock] * 4)

        assert JsonProductRepository(path).get_by_id(p.id).quantity == 120


class TestCorruptInvoiceStore:

    def _handler(self, tmp_path):
        products = tmp_path / "products.json"
        p = _stocked(products)
        handler = IssueInvoiceHandler(
            JsonInvoiceRepository(tmp_path / "invoices.json"),
            JsonProductRepository(products),
        )
        item = LineItemSpec(product_id=p.id, name=p.name, quantity=2, price="10", total="20")
        return handler, item, p

    def test_unparseable_store_fails_issuance(self, tmp_path):
        handler, item, p = self._handler(tmp_path)
        (tmp_path / "invoices.json").write_text("[{oops", encoding="utf-8")

        with pytest.raises(IssuanceFailedError, match="not valid JSON"):
            handler.handle("INV-001", "Asha", [item])
        assert JsonProductRepository(tmp_path / "products.json").get_by_id(p.id).quantity == 10

    def test_malformed_record_fails_issuance(self, tmp_path):
        handler, item, p = self._handler(tmp_path)
        (tmp_path / "invoices.json").write_text('[{"id": "x"}]', encoding="utf-8")

        with pytest.raises(IssuanceFailedError, match="Malformed invoice record"):
            handler.handle("INV-001", "Asha", [item])
        assert JsonProductRepository(tmp_path / "products.json").get_by_id(p.id).quantity == 10
