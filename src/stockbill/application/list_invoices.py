"""Application service: List Invoices use case (query)."""

from __future__ import annotations

from stockbill.application.dto import InvoiceDTO
from stockbill.application.mappers import invoice_to_dto
from stockbill.domain.repository.invoice_repository import InvoiceRepository


class ListInvoicesHandler:

    def __init__(self, invoice_repo: InvoiceRepository) -> None:
        self._invoice_repo = invoice_repo

    def handle(self) -> list[InvoiceDTO]:
        """Invoice history, newest first."""
        return [invoice_to_dto(inv) for inv in self._invoice_repo.list_all()]
