"""WhatsApp delivery through an HTTP bridge.

The bridge (a whatsapp-web session exposed over HTTP) takes:

- ``POST /messages`` with JSON ``{"chatId": ..., "text": ...}``
- ``POST /media`` as multipart with ``chatId``, optional ``caption`` and
  the ``file`` part.

One gateway holds one ``requests.Session`` for the life of the process;
the composition root opens it and closes it on shutdown.
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from stockbill.application.ports import MessagingError, MessagingGateway

logger = logging.getLogger(__name__)

USER_AGENT = "stockbill/1.0"


class WhatsAppGateway(MessagingGateway):

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT})
        if token:
            self._session.headers.update({"Authorization": f"Bearer {token}"})

    def send_text(self, chat_id: str, text: str) -> None:
        self._post("/messages", json={"chatId": chat_id, "text": text})
        logger.debug("Text message sent to %s", chat_id)

    def send_document(self, chat_id: str, path: Path, caption: str | None = None) -> None:
        path = Path(path)
        data = {"chatId": chat_id}
        if caption:
            data["caption"] = caption
        try:
            with path.open("rb") as fh:
                self._post(
                    "/media",
                    data=data,
                    files={"file": (path.name, fh, "application/pdf")},
                )
        except OSError as exc:
            raise MessagingError(f"Cannot read attachment {path}: {exc}") from exc
        logger.debug("Document %s sent to %s", path.name, chat_id)

    def close(self) -> None:
        self._session.close()

    def _post(self, endpoint: str, **kwargs) -> dict:
        url = f"{self._base_url}{endpoint}"
        try:
            resp = self._session.post(url, timeout=self._timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise MessagingError(f"POST {endpoint} failed: {exc}") from exc
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}
