"""Tests for logging setup."""

import logging

import pytest

from chunav.utils.logging_config import resolve_level, setup_logging


@pytest.fixture
def root_logger():
    """Restore the root logger after a test rewires it."""
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    noisy = {name: logging.getLogger(name).level for name in ("aiosqlite", "sqlalchemy.engine")}

    yield root

    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    for name, noisy_level in noisy.items():
        logging.getLogger(name).setLevel(noisy_level)


class TestResolveLevel:
    """Tests for resolve_level."""

    @pytest.mark.parametrize(
        "level,expected",
        [
            ("info", logging.INFO),
            (" Debug ", logging.DEBUG),
            ("WARNING", logging.WARNING),
            (logging.ERROR, logging.ERROR),
        ],
    )
    def test_names_and_numbers(self, level, expected):
        assert resolve_level(level) == expected

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            resolve_level("loud")


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_lower_case_level(self, root_logger):
        setup_logging("debug")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_called_twice_keeps_one_handler(self, root_logger):
        setup_logging("info")
        setup_logging("error")

        assert root_logger.level == logging.ERROR
        assert len(root_logger.handlers) == 1
        assert logging.getLogger("aiosqlite").level == logging.ERROR
