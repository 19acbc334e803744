"""Domain service: invoice identifiers.

Serials are derived from the clock in epoch milliseconds. When a caller's
invoice number collides with a stored one, both identifiers are replaced
with a timestamp plus a random suffix.
"""

from __future__ import annotations

import random
import time
from typing import Callable


class InvoiceNumbering:

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        randint: Callable[[int, int], int] = random.randint,
    ) -> None:
        self._clock = clock
        self._randint = randint

    def serial(self) -> str:
        return f"SN{self._millis()}"

    def regenerate(self) -> tuple[str, str]:
        """Return a fresh ``(invoice_number, serial_no)`` pair."""
        stamp = f"{self._millis()}{self._randint(0, 999)}"
        return f"INV{stamp}", f"SN{stamp}"

    def _millis(self) -> int:
        return int(self._clock() * 1000)
