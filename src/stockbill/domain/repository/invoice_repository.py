"""Abstract repository for Invoice aggregate.

Invoices are append-only: there is no save-over or delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockbill.domain.model.invoice import Invoice


class InvoiceRepository(ABC):

    @abstractmethod
    def add(self, invoice: Invoice) -> None:
        """Assign an ID to a new invoice and persist it.

        Raises DuplicateKeyError if the invoice number or serial is taken;
        nothing is written in that case and ``invoice.id`` stays None.
        """

    @abstractmethod
    def get_by_id(self, invoice_id: str) -> Invoice | None:
        """Return an invoice by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Invoice]:
        """Return every invoice, newest first."""

    @abstractmethod
    def search(self, text: str) -> list[Invoice]:
        """Case-insensitive match against invoice number or customer name."""
