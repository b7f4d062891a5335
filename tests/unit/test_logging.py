"""
Unit tests for CLI logging setup.
"""

import logging
import sys

import json_log_formatter
import pytest

from dbaas.docvault.config import Settings
from dbaas.docvault.main import TEXT_LOG_FORMAT, setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_text_format(self):
        handler = setup_logging(Settings(log_level="info", log_format="text"))
        root = logging.getLogger()
        assert root.handlers == [handler]
        assert root.level == logging.INFO
        assert handler.stream is sys.stderr
        assert handler.formatter._fmt == TEXT_LOG_FORMAT

    def test_json_format(self):
        handler = setup_logging(Settings(log_level="DEBUG", log_format="json"))
        assert isinstance(handler.formatter, json_log_formatter.JSONFormatter)
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self):
        setup_logging(Settings(log_level="chatty"))
        assert logging.getLogger().level == logging.WARNING
