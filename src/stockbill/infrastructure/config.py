"""Runtime settings read from the environment (and a local ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    invoice_dir: Path
    whatsapp_url: str = "http://localhost:3000"
    whatsapp_token: str | None = None
    whatsapp_timeout: float = 15.0
    log_level: str = "WARNING"

    @property
    def products_file(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def invoices_file(self) -> Path:
        return self.data_dir / "invoices.json"

    @staticmethod
    def from_env() -> Settings:
        load_dotenv(find_dotenv(usecwd=True))
        data_dir = Path(os.getenv("STOCKBILL_DATA_DIR", "data"))
        invoice_dir = os.getenv("STOCKBILL_INVOICE_DIR")
        timeout = os.getenv("STOCKBILL_WHATSAPP_TIMEOUT", "15")
        try:
            whatsapp_timeout = float(timeout)
        except ValueError:
            raise ValueError(
                f"STOCKBILL_WHATSAPP_TIMEOUT must be a number of seconds, got {timeout!r}"
            ) from None
        return Settings(
            data_dir=data_dir,
            invoice_dir=Path(invoice_dir) if invoice_dir else data_dir / "invoices",
            whatsapp_url=os.getenv("STOCKBILL_WHATSAPP_URL", "http://localhost:3000"),
            whatsapp_token=os.getenv("STOCKBILL_WHATSAPP_TOKEN") or None,
            whatsapp_timeout=whatsapp_timeout,
            log_level=os.getenv("STOCKBILL_LOG_LEVEL", "WARNING").upper(),
        )
