"""A4 PDF rendering of invoices with reportlab.

The canvas is created in invariant mode, which pins the document id and
creation date, so the same invoice always renders to the same bytes. The
only date on the page is the invoice's own ``created_at``.
"""

from __future__ import annotations

from pathlib import Path

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from stockbill.application.ports import InvoiceRenderer, Sink
from stockbill.domain.model.invoice import Invoice
from stockbill.domain.model.value_objects import Money

W, H = A4
MARGIN = 50
ROW_HEIGHT = 18
FOOTER_SPACE = 90

COL_QTY = MARGIN + 300
COL_PRICE = MARGIN + 390
COL_TOTAL = W - MARGIN
NAME_WIDTH = 280

INK = HexColor("#333333")
RULE = HexColor("#CCCCCC")


def _amount(money: Money) -> str:
    # Base-14 fonts have no rupee glyph.
    prefix = "Rs." if money.currency == "INR" else money.currency
    return f"{prefix} {money.amount:.2f}"


class PdfInvoiceRenderer(InvoiceRenderer):

    def __init__(self, font: str = "Helvetica", bold_font: str = "Helvetica-Bold") -> None:
        self._font = font
        self._bold = bold_font

    def render(self, invoice: Invoice, sink: Sink) -> None:
        target = str(sink) if isinstance(sink, Path) else sink
        c = canvas.Canvas(target, pagesize=A4, invariant=1)
        c.setTitle(f"Invoice {invoice.invoice_number}")
        c.setAuthor("stockbill")

        y = self._draw_heading(c, invoice)
        y = self._draw_table_header(c, y)

        for item in invoice.items:
            if y < MARGIN + FOOTER_SPACE:
                c.showPage()
                y = self._draw_table_header(c, H - MARGIN)
            c.setFont(self._font, 10)
            c.drawString(MARGIN, y, self._fit(c, item.product_name, NAME_WIDTH))
            c.drawRightString(COL_QTY, y, str(item.quantity))
            c.drawRightString(COL_PRICE, y, _amount(item.unit_price))
            c.drawRightString(COL_TOTAL, y, _amount(item.total))
            y -= ROW_HEIGHT

        if y < MARGIN + FOOTER_SPACE:
            c.showPage()
            y = H - MARGIN
        self._draw_totals(c, invoice, y)

        c.showPage()
        c.save()

    # --- Sections -------------------------------------------------------------

    def _draw_heading(self, c: canvas.Canvas, invoice: Invoice) -> float:
        y = H - MARGIN
        c.setFillColor(INK)
        c.setFont(self._bold, 20)
        c.drawString(MARGIN, y, f"Invoice: {invoice.invoice_number}")
        y -= 30

        c.setFont(self._font, 11)
        details = [("Customer", invoice.customer.name)]
        if invoice.customer.phone:
            details.append(("Phone", invoice.customer.phone))
        details.append(("Date", invoice.created_at.strftime("%d/%m/%Y")))
        details.append(("Serial", invoice.serial_no))
        for label, value in details:
            c.setFont(self._bold, 11)
            c.drawString(MARGIN, y, f"{label}:")
            c.setFont(self._font, 11)
            c.drawString(MARGIN + 65, y, value)
            y -= 16
        return y - 14

    def _draw_table_header(self, c: canvas.Canvas, y: float) -> float:
        c.setFillColor(INK)
        c.setFont(self._bold, 10)
        c.drawString(MARGIN, y, "Item")
        c.drawRightString(COL_QTY, y, "Qty")
        c.drawRightString(COL_PRICE, y, "Price")
        c.drawRightString(COL_TOTAL, y, "Total")
        c.setStrokeColor(RULE)
        c.line(MARGIN, y - 6, W - MARGIN, y - 6)
        return y - ROW_HEIGHT - 4

    def _draw_totals(self, c: canvas.Canvas, invoice: Invoice, y: float) -> None:
        c.setStrokeColor(RULE)
        c.line(MARGIN, y + 8, W - MARGIN, y + 8)
        y -= 10
        rows = [
            ("Subtotal", invoice.subtotal, self._font),
            ("GST", invoice.tax, self._font),
            ("Grand Total", invoice.grand_total, self._bold),
        ]
        for label, money, font in rows:
            c.setFont(font, 11)
            c.drawRightString(COL_TOTAL, y, f"{label}: {_amount(money)}")
            y -= ROW_HEIGHT

    def _fit(self, c: canvas.Canvas, text: str, width: float) -> str:
        if c.stringWidth(text, self._font, 10) <= width:
            return text
        while text and c.stringWidth(text + "...", self._font, 10) > width:
            text = text[:-1]
        return text + "..."
