"""Domain service: Stock Reconciliation.

After an invoice has been stored, the catalog's stock levels are lowered
by what was sold. There is no transaction spanning the invoice and the
products, so this runs as a second phase that cannot undo the first:

  Phase 1: the invoice is persisted (done by the caller, must succeed).
  Phase 2: each line item is decremented on its own. A missing product
            or a storage error on one line is logged and recorded, and
            the remaining lines are still processed.

Nothing here ever rejects a sale for lack of stock; levels clamp at zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from stockbill.domain.model.invoice import Invoice, InvoiceLineItem
from stockbill.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class AdjustmentStatus(Enum):
    DECREMENTED = "DECREMENTED"
    PRODUCT_MISSING = "PRODUCT_MISSING"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class StockAdjustment:
    product_id: str | None
    product_name: str
    requested: int
    status: AdjustmentStatus
    before: int | None = None
    after: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == AdjustmentStatus.DECREMENTED

    def describe(self) -> str:
        if self.status == AdjustmentStatus.DECREMENTED:
            return f"{self.product_name}: {self.before} -> {self.after}"
        if self.status == AdjustmentStatus.PRODUCT_MISSING:
            return f"{self.product_name}: product '{self.product_id}' not in catalog"
        if self.status == AdjustmentStatus.SKIPPED:
            return f"{self.product_name}: no catalog reference, stock not adjusted"
        return f"{self.product_name}: stock update failed ({self.error})"


class StockReconciliationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def decrement_for_invoice(self, invoice: Invoice) -> list[StockAdjustment]:
        """Lower stock for every line item and report each outcome."""
        return [self._decrement_line(invoice, line) for line in invoice.items]

    def _decrement_line(
        self, invoice: Invoice, line: InvoiceLineItem
    ) -> StockAdjustment:
        qty = line.quantity.value

        if line.product_id is None:
            logger.warning(
                "Invoice %s: line '%s' has no product reference, stock unchanged",
                invoice.invoice_number,
                line.product_name,
            )
            return StockAdjustment(None, line.product_name, qty, AdjustmentStatus.SKIPPED)

        try:
            change = self._product_repo.decrement_quantity(line.product_id, qty)
        except Exception as exc:
            # Best-effort: the invoice is already committed, so a failure
            # here is reported instead of raised.
            logger.exception(
                "Invoice %s: failed to decrement product %s by %d",
                invoice.invoice_number,
                line.product_id,
                qty,
            )
            return StockAdjustment(
                line.product_id,
                line.product_name,
                qty,
                AdjustmentStatus.FAILED,
                error=str(exc) or type(exc).__name__,
            )

        if change is None:
            logger.warning(
                "Invoice %s: product %s ('%s') not found, stock unchanged",
                invoice.invoice_number,
                line.product_id,
                line.product_name,
            )
            return StockAdjustment(
                line.product_id, line.product_name, qty, AdjustmentStatus.PRODUCT_MISSING
            )

        logger.info(
            "Invoice %s: %s stock %d -> %d",
            invoice.invoice_number,
            change.product_name,
            change.before,
            change.after,
        )
        return StockAdjustment(
            line.product_id,
            line.product_name,
            qty,
            AdjustmentStatus.DECREMENTED,
            before=change.before,
            after=change.after,
        )
