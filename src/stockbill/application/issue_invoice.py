"""Application service: Issue Invoice use case.

Orchestrates the two phases of issuance:

1. Build the Invoice aggregate and persist it. A duplicate invoice number
   or serial gets exactly one retry with regenerated identifiers; if that
   fails too the whole call fails with IssuanceFailedError.
2. Lower catalog stock for each line item through the stock
   reconciliation service. Failures there are reported on the result,
   never raised, because the invoice is already committed.
"""

from __future__ import annotations

import logging

from stockbill.application.dto import InvoiceDTO, LineItemSpec
from stockbill.application.mappers import invoice_to_dto
from stockbill.domain.exceptions import DuplicateKeyError, IssuanceFailedError, StorageError
from stockbill.domain.model.invoice import Customer, Invoice, InvoiceLineItem
from stockbill.domain.model.value_objects import Money, Quantity, TaxRate
from stockbill.domain.repository.invoice_repository import InvoiceRepository
from stockbill.domain.repository.product_repository import ProductRepository
from stockbill.domain.service.invoice_numbering import InvoiceNumbering
from stockbill.domain.service.stock_reconciliation_service import (
    StockReconciliationService,
)

logger = logging.getLogger(__name__)


class IssueInvoiceHandler:

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        product_repo: ProductRepository,
        numbering: InvoiceNumbering | None = None,
    ) -> None:
        self._invoice_repo = invoice_repo
        self._product_repo = product_repo
        self._numbering = numbering or InvoiceNumbering()

    def handle(
        self,
        invoice_number: str,
        customer_name: str,
        items: list[LineItemSpec],
        customer_phone: str | None = None,
        tax_override: str | None = None,
    ) -> InvoiceDTO:
        """Issue a new invoice.

        Steps:
        1. Validate input into value objects (no side effects on failure).
        2. Compute subtotal, tax and grand total on the aggregate.
        3. Persist, renumbering once on a duplicate key.
        4. Decrement stock per line item, collecting warnings.
        """
        invoice = Invoice.issue(
            invoice_number=invoice_number,
            serial_no=self._numbering.serial(),
            customer=Customer.of(customer_name, customer_phone),
            items=[self._to_line_item(spec) for spec in items],
            tax_override=Money.of(tax_override) if tax_override is not None else None,
        )

        self._persist(invoice)
        logger.info(
            "Issued invoice %s (serial %s, id %s) for %s: grand total %s",
            invoice.invoice_number,
            invoice.serial_no,
            invoice.id,
            invoice.customer.name,
            invoice.grand_total,
        )

        adjustments = StockReconciliationService(self._product_repo).decrement_for_invoice(
            invoice
        )
        warnings = [adj.describe() for adj in adjustments if not adj.ok]

        return invoice_to_dto(invoice, stock_warnings=warnings)

    # --- Persistence with bounded retry ---------------------------------------

    def _persist(self, invoice: Invoice) -> None:
        try:
            self._invoice_repo.add(invoice)
            return
        except DuplicateKeyError as exc:
            original = invoice.invoice_number
            invoice.renumber(*self._numbering.regenerate())
            logger.warning(
                "%s while storing invoice %s; retrying as %s (serial %s)",
                exc,
                original,
                invoice.invoice_number,
                invoice.serial_no,
            )
        except (OSError, StorageError) as exc:
            logger.exception(
                "Storage error while storing invoice %s (serial %s)",
                invoice.invoice_number,
                invoice.serial_no,
            )
            raise IssuanceFailedError(
                f"Could not store invoice {invoice.invoice_number}: {exc}"
            ) from exc

        try:
            self._invoice_repo.add(invoice)
        except (DuplicateKeyError, OSError, StorageError) as exc:
            logger.error(
                "Retry failed for invoice %s (serial %s): %s",
                invoice.invoice_number,
                invoice.serial_no,
                exc,
            )
            raise IssuanceFailedError(
                f"Could not store invoice after renumbering to {invoice.invoice_number}: {exc}"
            ) from exc

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_line_item(spec: LineItemSpec) -> InvoiceLineItem:
        return InvoiceLineItem(
            product_id=spec.product_id or None,
            product_name=(spec.name or "").strip(),
            quantity=Quantity(spec.quantity),
            unit_price=Money.of(spec.price),
            total=Money.of(spec.total),
            tax_rate=TaxRate(spec.tax_rate) if spec.tax_rate is not None else TaxRate(),
        )
