"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from stockbill.domain.exceptions import DuplicateKeyError
from stockbill.domain.model.product import Product, StockChange
from stockbill.domain.model.value_objects import Money, TaxRate
from stockbill.domain.repository.product_repository import SEARCH_LIMIT, ProductRepository
from stockbill.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._file.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_name_variant(self, name: str, variant: str) -> Product | None:
        for raw in self._file.load():
            if raw["name"] == name and raw["variant"] == variant:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        products = [self._to_domain(raw) for raw in reversed(self._file.load())]
        return sorted(products, key=lambda p: p.created_at, reverse=True)

    def search(self, text: str, limit: int = SEARCH_LIMIT) -> list[Product]:
        needle = text.lower()
        matches = [
            self._to_domain(raw)
            for raw in self._file.load()
            if needle in raw["name"].lower()
        ]
        return matches[:limit]

    def add(self, product: Product) -> None:
        with self._file.locked():
            records = self._file.load()
            self._check_unique(records, product)
            records.append(self._to_raw(product))
            self._file.persist(records)

    def restock(
        self,
        name: str,
        variant: str,
        quantity: int,
        price: Money,
        category: str | None = None,
        tax_rate: TaxRate | None = None,
    ) -> Product | None:
        with self._file.locked():
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["name"] == name and raw["variant"] == variant:
                    product = self._to_domain(raw)
                    product.restock(quantity, price, category=category, tax_rate=tax_rate)
                    records[i] = self._to_raw(product)
                    self._file.persist(records)
                    return product
            return None

    def update(self, product_id: str, **changes) -> Product | None:
        with self._file.locked():
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["id"] == product_id:
                    product = self._to_domain(raw)
                    product.apply_changes(**changes)
                    self._check_unique(records, product)
                    records[i] = self._to_raw(product)
                    self._file.persist(records)
                    return product
            return None

    def delete(self, product_id: str) -> bool:
        with self._file.locked():
            records = self._file.load()
            remaining = [raw for raw in records if raw["id"] != product_id]
            if len(remaining) == len(records):
                return False
            self._file.persist(remaining)
            return True

    def decrement_quantity(self, product_id: str, amount: int) -> StockChange | None:
        with self._file.locked():
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["id"] == product_id:
                    product = self._to_domain(raw)
                    change = product.decrement(amount)
                    records[i] = self._to_raw(product)
                    self._file.persist(records)
                    return change
            return None

    # --- Constraints ----------------------------------------------------------

    @staticmethod
    def _check_unique(records: list[dict], product: Product) -> None:
        for raw in records:
            if (
                raw["id"] != product.id
                and raw["name"] == product.name
                and raw["variant"] == product.variant
            ):
                raise DuplicateKeyError("product", f"{product.name} ({product.variant})")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "variant": product.variant,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "quantity": product.quantity,
            "category": product.category,
            "gst": product.tax_rate.value,
            "created_at": product.created_at.isoformat(),
            "updated_at": product.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            variant=raw.get("variant", "Standard"),
            price=Money(Decimal(raw["price"]), raw.get("currency", "INR")),
            quantity=raw["quantity"],
            category=raw.get("category", "General"),
            tax_rate=TaxRate(raw.get("gst", 18)),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw.get("updated_at", raw["created_at"])),
        )
