"""Domain -> DTO mapping shared by the invoice and product use cases."""

from __future__ import annotations

from stockbill.application.dto import InvoiceDTO, InvoiceLineItemDTO, ProductDTO
from stockbill.domain.model.invoice import Invoice
from stockbill.domain.model.product import Product

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


def invoice_to_dto(invoice: Invoice, stock_warnings: list[str] | None = None) -> InvoiceDTO:
    return InvoiceDTO(
        id=invoice.id,  # type: ignore[arg-type]
        serial_no=invoice.serial_no,
        invoice_number=invoice.invoice_number,
        customer_name=invoice.customer.name,
        customer_phone=invoice.customer.phone,
        items=[
            InvoiceLineItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                tax_rate=item.tax_rate.value,
                line_total=str(item.total),
            )
            for item in invoice.items
        ],
        subtotal=str(invoice.subtotal),
        tax=str(invoice.tax),
        grand_total=str(invoice.grand_total),
        created_at=invoice.created_at.strftime(TIMESTAMP_FORMAT),
        stock_warnings=list(stock_warnings or []),
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        variant=product.variant,
        price=str(product.price),
        quantity=product.quantity,
        category=product.category,
        tax_rate=product.tax_rate.value,
        created_at=product.created_at.strftime(TIMESTAMP_FORMAT),
    )
