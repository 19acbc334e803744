"""Application service: Search Invoices use case (query).

Matches the text against invoice numbers and customer names.
"""

from __future__ import annotations

from stockbill.application.dto import InvoiceDTO
from stockbill.application.mappers import invoice_to_dto
from stockbill.domain.repository.invoice_repository import InvoiceRepository


class SearchInvoicesHandler:

    def __init__(self, invoice_repo: InvoiceRepository) -> None:
        self._invoice_repo = invoice_repo

    def handle(self, text: str) -> list[InvoiceDTO]:
        text = (text or "").strip()
        if not text:
            invoices = self._invoice_repo.list_all()
        else:
            invoices = self._invoice_repo.search(text)
        return [invoice_to_dto(inv) for inv in invoices]
