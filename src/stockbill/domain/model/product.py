"""Product aggregate.

Products live independently of invoices. They have their own lifecycle:
stock is restocked and sold, prices change, products are removed from the
catalog. Invoices snapshot what they need, so none of these mutations
reach back into issued invoices.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from stockbill.domain.exceptions import ValidationError
from stockbill.domain.model.value_objects import Money, TaxRate

DEFAULT_VARIANT = "Standard"
DEFAULT_CATEGORY = "General"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _required(value: str | None, label: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"Product {label} is required")
    return value.strip()


def _stock_level(quantity: int) -> int:
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise ValidationError(
            f"Stock quantity must be an integer, got {type(quantity).__name__}"
        )
    if quantity < 0:
        raise ValidationError("Stock quantity cannot be negative")
    return quantity


@dataclass(frozen=True)
class StockChange:
    """Result of a stock decrement: the level before and after."""

    product_id: str
    product_name: str
    before: int
    after: int


@dataclass
class Product:
    """A product in the catalog.

    Identified by an opaque ``id``; the natural key is ``(name, variant)``
    which the repository keeps unique.
    """

    id: str
    name: str
    variant: str
    price: Money
    quantity: int
    category: str = DEFAULT_CATEGORY
    tax_rate: TaxRate = field(default_factory=TaxRate)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @property
    def key(self) -> tuple[str, str]:
        return self.name, self.variant

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        name: str,
        price: Money,
        quantity: int,
        variant: str = DEFAULT_VARIANT,
        category: str | None = None,
        tax_rate: TaxRate | None = None,
    ) -> Product:
        return Product(
            id=uuid.uuid4().hex,
            name=_required(name, "name"),
            variant=_required(variant, "variant"),
            price=price,
            quantity=_stock_level(quantity),
            category=(category or "").strip() or DEFAULT_CATEGORY,
            tax_rate=tax_rate or TaxRate(),
        )

    # --- Mutations ------------------------------------------------------------

    def restock(
        self,
        quantity: int,
        price: Money,
        category: str | None = None,
        tax_rate: TaxRate | None = None,
    ) -> None:
        """Merge a repeated add of the same (name, variant).

        Quantity is added to the stored level, price is replaced. Category
        and tax rate are replaced only when a new value is given.
        """
        self.quantity += _stock_level(quantity)
        self.price = price
        if category is not None and category.strip():
            self.category = category.strip()
        if tax_rate is not None:
            self.tax_rate = tax_rate
        self.updated_at = _now()

    def decrement(self, amount: int) -> StockChange:
        """Remove sold stock, clamping at zero.

        Selling more than is on hand is not rejected: the level simply
        bottoms out at 0.
        """
        if amount <= 0:
            raise ValidationError("Decrement amount must be positive")
        before = self.quantity
        self.quantity = max(0, before - amount)
        self.updated_at = _now()
        return StockChange(self.id, self.name, before, self.quantity)

    def apply_changes(
        self,
        *,
        name: str | None = None,
        variant: str | None = None,
        price: Money | None = None,
        quantity: int | None = None,
        category: str | None = None,
        tax_rate: TaxRate | None = None,
    ) -> None:
        """Overwrite only the supplied fields."""
        if name is not None:
            self.name = _required(name, "name")
        if variant is not None:
            self.variant = _required(variant, "variant")
        if price is not None:
            self.price = price
        if quantity is not None:
            self.quantity = _stock_level(quantity)
        if category is not None:
            self.category = category.strip() or DEFAULT_CATEGORY
        if tax_rate is not None:
            self.tax_rate = tax_rate
        self.updated_at = _now()
