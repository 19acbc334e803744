"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LineItemSpec:
    """Input: one line of an invoice request.

    ``total`` is what the caller computed for the line; it is taken as-is.
    """

    name: str
    quantity: int
    price: str
    total: str
    product_id: str | None = None
    tax_rate: int | None = None


@dataclass(frozen=True)
class InvoiceLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str | None
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "₹10.00"
    tax_rate: int
    line_total: str


@dataclass(frozen=True)
class InvoiceDTO:
    """Output: a complete invoice as displayed to the user."""

    id: str
    serial_no: str
    invoice_number: str
    customer_name: str
    customer_phone: str | None
    items: list[InvoiceLineItemDTO]
    subtotal: str
    tax: str
    grand_total: str
    created_at: str
    stock_warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    variant: str
    price: str
    quantity: int
    category: str
    tax_rate: int
    created_at: str


@dataclass(frozen=True)
class UpsertResultDTO:
    product: ProductDTO
    created: bool


@dataclass(frozen=True)
class DeliveryReceiptDTO:
    invoice_id: str
    invoice_number: str
    chat_id: str
    document_path: str
