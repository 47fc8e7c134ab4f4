"""Unit tests for console formatting and logging setup."""

import logging

import pytest
from macctl.utils.formatting import configure_logging
from rich.logging import RichHandler


@pytest.fixture(autouse=True)
def restore_logging():
    """Restore the root logger after each test."""
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_default_level(self) -> None:
        """Without verbose only warnings are shown."""
        configure_logging()

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert any(isinstance(h, RichHandler) for h in root.handlers)

    def test_verbose(self) -> None:
        """Verbose enables debug records."""
        configure_logging(verbose=True)

        assert logging.getLogger().level == logging.DEBUG
