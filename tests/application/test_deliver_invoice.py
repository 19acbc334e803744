"""Integration tests for the DeliverInvoice use case."""

from datetime import datetime, timezone

import pytest

from stockbill.application.deliver_invoice import (
    DeliverInvoiceHandler,
    chat_id_for,
    document_path,
    format_invoice_message,
)
from stockbill.domain.exceptions import (
    DeliveryFailedError,
    DeliveryStage,
    EntityNotFoundError,
    ValidationError,
)
from stockbill.domain.model.invoice import Customer, Invoice, InvoiceLineItem
from stockbill.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeInvoiceRepository, FakeMessagingGateway, FakeRenderer


def _invoice(number: str = "INV-001") -> Invoice:
    item = InvoiceLineItem(
        product_id="p1",
        product_name="Paracetamol",
        quantity=Quantity(2),
        unit_price=Money.of("10"),
        total=Money.of("20"),
    )
    inv = Invoice.issue(number, "SN1", Customer.of("Asha", "919800000000"), [item])
    inv.created_at = datetime(2024, 3, 5, 10, 30, tzinfo=timezone.utc)
    return inv


def _setup(tmp_path, renderer=None, gateway=None):
    repo = FakeInvoiceRepository()
    invoice = _invoice()
    repo.add(invoice)
    renderer = renderer or FakeRenderer()
    gateway = gateway or FakeMessagingGateway()
    handler = DeliverInvoiceHandler(repo, renderer, gateway, tmp_path / "invoices")
    return handler, invoice, renderer, gateway


class TestDeliverInvoiceHappyPath:

    def test_sends_text_then_document(self, tmp_path):
        handler, invoice, renderer, gateway = _setup(tmp_path)

        receipt = handler.handle(invoice.id, "+91 98000 00000")

        assert receipt.chat_id == "919800000000@c.us"
        assert gateway.texts[0][0] == "919800000000@c.us"
        assert "Invoice: INV-001" in gateway.texts[0][1]
        assert gateway.documents == [("919800000000@c.us", tmp_path / "invoices" / "INV-001.pdf")]
        assert renderer.rendered == ["INV-001"]

    def test_overwrites_existing_document(self, tmp_path):
        handler, invoice, _, _ = _setup(tmp_path)
        target = tmp_path / "invoices" / "INV-001.pdf"
        target.parent.mkdir(parents=True)
        target.write_bytes(b"stale content that is longer than the new one")

        handler.handle(invoice.id, "919800000000")

        assert target.read_bytes() == b"%PDF-fake"


class TestDeliverInvoiceFailures:

    def test_missing_invoice(self, tmp_path):
        handler, _, _, gateway = _setup(tmp_path)
        with pytest.raises(EntityNotFoundError):
            handler.handle("nope", "919800000000")
        assert gateway.texts == []

    def test_blank_phone_rejected(self, tmp_path):
        handler, invoice, _, _ = _setup(tmp_path)
        with pytest.raises(ValidationError, match="Phone number is required"):
            handler.handle(invoice.id, " - ")

    def test_text_failure_reports_text_stage(self, tmp_path):
        handler, invoice, renderer, _ = _setup(tmp_path, gateway=FakeMessagingGateway(fail_text=True))

        with pytest.raises(DeliveryFailedError) as info:
            handler.handle(invoice.id, "919800000000")

        assert info.value.stage == DeliveryStage.TEXT
        assert renderer.rendered == []

    def test_render_failure_reports_document_stage(self, tmp_path):
        renderer = FakeRenderer(error=RuntimeError("font missing"))
        handler, invoice, _, gateway = _setup(tmp_path, renderer=renderer)

        with pytest.raises(DeliveryFailedError, match="font missing") as info:
            handler.handle(invoice.id, "919800000000")

        assert info.value.stage == DeliveryStage.DOCUMENT
        assert len(gateway.texts) == 1
        assert gateway.documents == []

    def test_empty_render_is_not_sent(self, tmp_path):
        handler, invoice, _, gateway = _setup(tmp_path, renderer=FakeRenderer(content=b""))

        with pytest.raises(DeliveryFailedError, match="empty") as info:
            handler.handle(invoice.id, "919800000000")

        assert info.value.stage == DeliveryStage.DOCUMENT
        assert gateway.documents == []

    def test_upload_failure_reports_document_stage(self, tmp_path):
        handler, invoice, _, _ = _setup(tmp_path, gateway=FakeMessagingGateway(fail_document=True))

        with pytest.raises(DeliveryFailedError, match="upload rejected") as info:
            handler.handle(invoice.id, "919800000000")

        assert info.value.stage == DeliveryStage.DOCUMENT

    def test_invoice_untouched_by_failed_delivery(self, tmp_path):
        handler, invoice, _, _ = _setup(tmp_path, gateway=FakeMessagingGateway(fail_document=True))
        before = (invoice.invoice_number, invoice.grand_total, len(invoice.items))

        with pytest.raises(DeliveryFailedError):
            handler.handle(invoice.id, "919800000000")

        stored = handler._invoice_repo.get_by_id(invoice.id)
        assert (stored.invoice_number, stored.grand_total, len(stored.items)) == before


class TestHelpers:

    def test_message_layout(self):
        text = format_invoice_message(_invoice())
        assert "👤 *Customer:* Asha" in text
        assert "📅 *Date:* 05/03/2024" in text
        assert "• Paracetamol x 2 @ ₹10.00 = ₹20.00" in text
        assert "🧮 *Subtotal:* ₹20.00" in text
        assert "🧾 *GST:* ₹3.60" in text
        assert "💰 *Grand Total:* ₹23.60" in text
        assert text.endswith("Thank you for shopping with us!")

    def test_chat_id_keeps_digits_only(self):
        assert chat_id_for("+91-98000 00000") == "919800000000@c.us"

    def test_document_path_sanitises_number(self, tmp_path):
        assert document_path(tmp_path, _invoice("INV/2024 #7")) == tmp_path / "INV_2024_7.pdf"
