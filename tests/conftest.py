import pytest

from stockbill.infrastructure.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _isolated_logging():
    # The CLI configures the package logger with propagate=False, which
    # would hide records from caplog in later tests.
    yield
    reset_logging()
