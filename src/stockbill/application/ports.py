"""Outbound ports for rendering and messaging.

The delivery use case depends on these abstractions; the concrete PDF
renderer and WhatsApp client live in the infrastructure layer.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Union

from stockbill.domain.model.invoice import Invoice

Sink = Union[str, Path, BinaryIO]


class MessagingError(Exception):
    """The messaging transport rejected or failed to carry a message."""


class InvoiceRenderer(ABC):

    @abstractmethod
    def render(self, invoice: Invoice, sink: Sink) -> None:
        """Write the rendered document to ``sink``, replacing any content there."""

    def render_bytes(self, invoice: Invoice) -> bytes:
        buffer = io.BytesIO()
        self.render(invoice, buffer)
        return buffer.getvalue()


class MessagingGateway(ABC):

    @abstractmethod
    def send_text(self, chat_id: str, text: str) -> None:
        """Send a plain text message. Raises MessagingError on failure."""

    @abstractmethod
    def send_document(self, chat_id: str, path: Path, caption: str | None = None) -> None:
        """Send a file as an attachment. Raises MessagingError on failure."""

    def close(self) -> None:
        """Release the underlying transport session."""

    def __enter__(self) -> MessagingGateway:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
