"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory)
live in the infrastructure layer and the test suite.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockbill.domain.model.product import Product, StockChange
from stockbill.domain.model.value_objects import Money, TaxRate

SEARCH_LIMIT = 10


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name_variant(self, name: str, variant: str) -> Product | None:
        """Return the product with exactly this (name, variant), or None."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product, most recently created first."""

    @abstractmethod
    def search(self, text: str, limit: int = SEARCH_LIMIT) -> list[Product]:
        """Case-insensitive substring match on product name, capped at ``limit``."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Insert a new product.

        Raises DuplicateKeyError if (name, variant) is already taken.
        """

    @abstractmethod
    def restock(
        self,
        name: str,
        variant: str,
        quantity: int,
        price: Money,
        category: str | None = None,
        tax_rate: TaxRate | None = None,
    ) -> Product | None:
        """Atomically merge a repeated add into the stored (name, variant).

        The quantity is added to the stored level, so sales recorded in the
        meantime are kept. Returns None when no such product exists.
        """

    @abstractmethod
    def update(
        self,
        product_id: str,
        *,
        name: str | None = None,
        variant: str | None = None,
        price: Money | None = None,
        quantity: int | None = None,
        category: str | None = None,
        tax_rate: TaxRate | None = None,
    ) -> Product | None:
        """Atomically overwrite only the supplied fields of a stored product.

        Returns None (and writes nothing) when the product does not exist.
        Raises DuplicateKeyError if the new (name, variant) collides with a
        different product.
        """

    @abstractmethod
    def delete(self, product_id: str) -> bool:
        """Remove a product. Returns False (and changes nothing) if absent."""

    @abstractmethod
    def decrement_quantity(self, product_id: str, amount: int) -> StockChange | None:
        """Atomically lower stock by ``amount``, never below zero.

        Returns None when the product does not exist.
        """
