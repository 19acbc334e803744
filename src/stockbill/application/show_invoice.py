"""Application service: Show Invoice use case (query)."""

from __future__ import annotations

from stockbill.application.dto import InvoiceDTO
from stockbill.application.mappers import invoice_to_dto
from stockbill.domain.exceptions import EntityNotFoundError
from stockbill.domain.repository.invoice_repository import InvoiceRepository


class ShowInvoiceHandler:

    def __init__(self, invoice_repo: InvoiceRepository) -> None:
        self._invoice_repo = invoice_repo

    def handle(self, invoice_id: str) -> InvoiceDTO:
        invoice = self._invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            raise EntityNotFoundError(f"Invoice '{invoice_id}' not found")
        return invoice_to_dto(invoice)
