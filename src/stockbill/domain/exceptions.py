"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from enum import Enum


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class DuplicateKeyError(DomainException):
    """A uniqueness constraint was violated by the store."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"Duplicate {field}: '{value}'")
        self.field = field
        self.value = value


class StorageError(DomainException):
    """The backing store could not be read: unparseable file or malformed record."""


class IssuanceFailedError(DomainException):
    """An invoice could not be persisted, even after renumbering."""


class DeliveryStage(Enum):
    TEXT = "text"
    DOCUMENT = "document"


class DeliveryFailedError(DomainException):
    """Sending an invoice failed. ``stage`` says which half failed."""

    def __init__(self, stage: DeliveryStage, reason: str) -> None:
        super().__init__(f"Invoice delivery failed at {stage.value} stage: {reason}")
        self.stage = stage
        self.reason = reason
