"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from stockbill.infrastructure.config import Settings
from stockbill.infrastructure.messaging.whatsapp_gateway import WhatsAppGateway
from stockbill.infrastructure.persistence.json_invoice_repository import (
    JsonInvoiceRepository,
)
from stockbill.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from stockbill.infrastructure.rendering.pdf_invoice_renderer import PdfInvoiceRenderer


def settings() -> Settings:
    return Settings.from_env()


def product_repository(config: Settings | None = None) -> JsonProductRepository:
    config = config or settings()
    return JsonProductRepository(config.products_file)


def invoice_repository(config: Settings | None = None) -> JsonInvoiceRepository:
    config = config or settings()
    return JsonInvoiceRepository(config.invoices_file)


def invoice_renderer() -> PdfInvoiceRenderer:
    return PdfInvoiceRenderer()


def messaging_gateway(config: Settings | None = None) -> WhatsAppGateway:
    """Open the process-wide messaging session. Callers must close it."""
    config = config or settings()
    return WhatsAppGateway(
        base_url=config.whatsapp_url,
        token=config.whatsapp_token,
        timeout=config.whatsapp_timeout,
    )
