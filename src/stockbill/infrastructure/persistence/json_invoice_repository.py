"""JSON-file-backed implementation of InvoiceRepository."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from stockbill.domain.exceptions import DuplicateKeyError, StorageError
from stockbill.domain.model.invoice import Customer, Invoice, InvoiceLineItem
from stockbill.domain.model.value_objects import Money, Quantity, TaxRate
from stockbill.domain.repository.invoice_repository import InvoiceRepository
from stockbill.infrastructure.persistence.json_file import JsonFile


class JsonInvoiceRepository(InvoiceRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- InvoiceRepository interface ------------------------------------------

    def add(self, invoice: Invoice) -> None:
        with self._file.locked():
            records = self._file.load()
            for raw in records:
                try:
                    number, serial = raw["invoice_number"], raw["serial_no"]
                except KeyError as exc:
                    raise StorageError(
                        f"Malformed invoice record in {self._file.path}: missing {exc}"
                    ) from exc
                if number == invoice.invoice_number:
                    raise DuplicateKeyError("invoice number", invoice.invoice_number)
                if serial == invoice.serial_no:
                    raise DuplicateKeyError("serial", invoice.serial_no)

            invoice_id = uuid.uuid4().hex
            records.append(self._to_raw(invoice, invoice_id))
            self._file.persist(records)
            invoice.id = invoice_id

    def get_by_id(self, invoice_id: str) -> Invoice | None:
        for raw in self._file.load():
            if raw["id"] == invoice_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Invoice]:
        return self._newest_first(self._file.load())

    def search(self, text: str) -> list[Invoice]:
        needle = text.lower()
        return self._newest_first(
            raw
            for raw in self._file.load()
            if needle in raw["invoice_number"].lower()
            or needle in raw["customer"]["name"].lower()
        )

    def _newest_first(self, records) -> list[Invoice]:
        invoices = [self._to_domain(raw) for raw in reversed(list(records))]
        return sorted(invoices, key=lambda inv: inv.created_at, reverse=True)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(invoice: Invoice, invoice_id: str) -> dict:
        return {
            "id": invoice_id,
            "serial_no": invoice.serial_no,
            "invoice_number": invoice.invoice_number,
            "customer": {
                "name": invoice.customer.name,
                "phone": invoice.customer.phone,
            },
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.product_name,
                    "quantity": item.quantity.value,
                    "price": str(item.unit_price.amount),
                    "gst": item.tax_rate.value,
                    "total": str(item.total.amount),
                }
                for item in invoice.items
            ],
            "gst": str(invoice.tax.amount),
            "grand_total": str(invoice.grand_total.amount),
            "currency": invoice.grand_total.currency,
            "created_at": invoice.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Invoice:
        currency = raw.get("currency", "INR")
        items = [
            InvoiceLineItem(
                product_id=i.get("product_id"),
                product_name=i["name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["price"]), currency),
                total=Money(Decimal(i["total"]), currency),
                tax_rate=TaxRate(i.get("gst", 18)),
            )
            for i in raw["items"]
        ]
        return Invoice(
            id=raw["id"],
            serial_no=raw["serial_no"],
            invoice_number=raw["invoice_number"],
            customer=Customer(raw["customer"]["name"], raw["customer"].get("phone")),
            items=items,
            tax=Money(Decimal(raw["gst"]), currency),
            grand_total=Money(Decimal(raw["grand_total"]), currency),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
