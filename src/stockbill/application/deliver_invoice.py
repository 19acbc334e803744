"""Application service: Deliver Invoice use case.

Sends a stored invoice to a customer's WhatsApp number in two steps: a
text summary, then the rendered PDF as an attachment. Delivery is a side
effect of an invoice that is already committed, so a failure here never
touches the invoice record; it is reported as DeliveryFailedError naming
the step that failed.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from stockbill.application.dto import DeliveryReceiptDTO
from stockbill.application.ports import InvoiceRenderer, MessagingError, MessagingGateway
from stockbill.domain.exceptions import (
    DeliveryFailedError,
    DeliveryStage,
    EntityNotFoundError,
    ValidationError,
)
from stockbill.domain.model.invoice import Invoice
from stockbill.domain.repository.invoice_repository import InvoiceRepository

logger = logging.getLogger(__name__)

CHAT_SUFFIX = "@c.us"
DATE_FORMAT = "%d/%m/%Y"

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


def chat_id_for(phone: str) -> str:
    """Turn a phone number into a messaging destination id."""
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        raise ValidationError("Phone number is required")
    return f"{digits}{CHAT_SUFFIX}"


def document_path(invoice_dir: Path, invoice: Invoice) -> Path:
    """Where the PDF for ``invoice`` is written: ``<dir>/<invoice number>.pdf``."""
    stem = _UNSAFE_FILENAME.sub("_", invoice.invoice_number).strip("._") or invoice.serial_no
    return Path(invoice_dir) / f"{stem}.pdf"


def format_invoice_message(invoice: Invoice) -> str:
    lines = [
        f"🧾 *Invoice: {invoice.invoice_number}*",
        f"👤 *Customer:* {invoice.customer.name}",
        f"📅 *Date:* {invoice.created_at.strftime(DATE_FORMAT)}",
        "",
    ]
    lines.extend(
        f"• {item.product_name} x {item.quantity} @ {item.unit_price} = {item.total}"
        for item in invoice.items
    )
    lines.extend(
        [
            "",
            f"🧮 *Subtotal:* {invoice.subtotal}",
            f"🧾 *GST:* {invoice.tax}",
            f"💰 *Grand Total:* {invoice.grand_total}",
            "",
            "🙏 Thank you for shopping with us!",
        ]
    )
    return "\n".join(lines)


class DeliverInvoiceHandler:

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        renderer: InvoiceRenderer,
        gateway: MessagingGateway,
        invoice_dir: Path,
    ) -> None:
        self._invoice_repo = invoice_repo
        self._renderer = renderer
        self._gateway = gateway
        self._invoice_dir = Path(invoice_dir)

    def handle(self, invoice_id: str, phone: str) -> DeliveryReceiptDTO:
        chat_id = chat_id_for(phone)
        if not invoice_id:
            raise ValidationError("Invoice ID is required")

        invoice = self._invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            raise EntityNotFoundError(f"Invoice '{invoice_id}' not found")

        self._send_summary(invoice, chat_id)
        path = self._render_document(invoice)
        self._send_document(invoice, chat_id, path)

        logger.info("Invoice %s delivered to %s", invoice.invoice_number, chat_id)
        return DeliveryReceiptDTO(
            invoice_id=invoice_id,
            invoice_number=invoice.invoice_number,
            chat_id=chat_id,
            document_path=str(path),
        )

    # --- Steps ----------------------------------------------------------------

    def _send_summary(self, invoice: Invoice, chat_id: str) -> None:
        try:
            self._gateway.send_text(chat_id, format_invoice_message(invoice))
        except MessagingError as exc:
            logger.error(
                "Text summary of invoice %s to %s failed: %s",
                invoice.invoice_number,
                chat_id,
                exc,
            )
            raise DeliveryFailedError(DeliveryStage.TEXT, str(exc)) from exc

    def _render_document(self, invoice: Invoice) -> Path:
        path = document_path(self._invoice_dir, invoice)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._renderer.render(invoice, path)
        except Exception as exc:
            logger.exception("Rendering invoice %s failed", invoice.invoice_number)
            raise DeliveryFailedError(
                DeliveryStage.DOCUMENT, f"rendering failed: {exc}"
            ) from exc

        if not path.exists() or path.stat().st_size == 0:
            logger.error(
                "Rendering invoice %s produced no document at %s",
                invoice.invoice_number,
                path,
            )
            raise DeliveryFailedError(DeliveryStage.DOCUMENT, "rendered document is empty")
        return path

    def _send_document(self, invoice: Invoice, chat_id: str, path: Path) -> None:
        try:
            self._gateway.send_document(
                chat_id, path, caption=f"Invoice {invoice.invoice_number}"
            )
        except MessagingError as exc:
            logger.error(
                "Sending PDF of invoice %s to %s failed: %s",
                invoice.invoice_number,
                chat_id,
                exc,
            )
            raise DeliveryFailedError(DeliveryStage.DOCUMENT, str(exc)) from exc
