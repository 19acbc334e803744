"""Invoice aggregate: the record produced by issuance.

An invoice owns its line items. Line items are snapshots taken at
issuance: they carry the product name, price and tax rate as they were,
and never look at the catalog again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from stockbill.domain.exceptions import ValidationError
from stockbill.domain.model.value_objects import (
    DEFAULT_TAX_RATE,
    Money,
    Quantity,
    TaxRate,
)

MAX_LINE_ITEMS = 100


@dataclass(frozen=True)
class Customer:
    name: str
    phone: str | None = None

    @staticmethod
    def of(name: str, phone: str | None = None) -> Customer:
        if not name or not name.strip():
            raise ValidationError("Customer name is required")
        phone = phone.strip() if phone else None
        return Customer(name=name.strip(), phone=phone or None)


@dataclass(frozen=True)
class InvoiceLineItem:
    """One sold product, frozen at issuance time.

    ``total`` is supplied by the caller rather than derived from
    ``unit_price * quantity``.
    """

    product_id: str | None
    product_name: str
    quantity: Quantity
    unit_price: Money
    total: Money
    tax_rate: TaxRate = field(default_factory=TaxRate)

    def __post_init__(self) -> None:
        if not self.product_name or not self.product_name.strip():
            raise ValidationError("Line item name is required")


@dataclass
class Invoice:
    """Aggregate root for sales invoices.

    Use ``Invoice.issue()`` for new invoices; it computes tax and totals.
    The ``__init__`` is kept simple so the repository can reconstitute
    stored invoices without recomputing anything.

    Invariant: ``grand_total == subtotal + tax`` where ``subtotal`` is the
    sum of line totals.
    """

    id: str | None
    serial_no: str
    invoice_number: str
    customer: Customer
    items: list[InvoiceLineItem]
    tax: Money
    grand_total: Money
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW invoices only) ---------------------------------

    @staticmethod
    def issue(
        invoice_number: str,
        serial_no: str,
        customer: Customer,
        items: list[InvoiceLineItem],
        tax_override: Money | None = None,
    ) -> Invoice:
        """Build a new invoice and compute its totals.

        Without an override the tax is a flat 18% of the subtotal. The
        per-line ``tax_rate`` values are carried along but not used here.
        """
        if not invoice_number or not invoice_number.strip():
            raise ValidationError("Invoice number is required")
        if not items:
            raise ValidationError("Invoice must contain at least one item")
        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per invoice")

        subtotal = Money.zero(items[0].total.currency)
        for item in items:
            subtotal = subtotal + item.total

        if tax_override is not None:
            tax = tax_override
        else:
            tax = subtotal.percent(DEFAULT_TAX_RATE)

        return Invoice(
            id=None,
            serial_no=serial_no,
            invoice_number=invoice_number.strip(),
            customer=customer,
            items=list(items),
            tax=tax,
            grand_total=subtotal + tax,
        )

    def renumber(self, invoice_number: str, serial_no: str) -> None:
        """Replace both identifiers after a uniqueness collision.

        Only valid before the invoice has been stored.
        """
        if self.id is not None:
            raise ValidationError(
                f"Invoice {self.invoice_number} is already stored and cannot be renumbered"
            )
        self.invoice_number = invoice_number
        self.serial_no = serial_no

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return self.grand_total - self.tax
