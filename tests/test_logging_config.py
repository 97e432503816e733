"""Tests for logging_config.py utility functions."""

import os
import sys
import logging
from unittest.mock import patch

from listing_images.core.logging_config import setup_logger, get_logger, logger


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger_default_name(self):
        test_logger = setup_logger()
        assert test_logger.name == "listing-images"
        assert len(test_logger.handlers) == 1
        assert not test_logger.propagate

    def test_setup_logger_custom_level_by_parameter(self):
        test_logger = setup_logger(name="li-test-param-level", level="DEBUG")
        assert test_logger.level == logging.DEBUG

    def test_setup_logger_custom_level_by_env_var(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            test_logger = setup_logger(name="li-test-env-level")
            assert test_logger.level == logging.WARNING

    def test_setup_logger_invalid_level_defaults_to_info(self):
        test_logger = setup_logger(name="li-test-invalid", level="INVALID_LEVEL")
        assert test_logger.level == logging.INFO

    def test_setup_logger_structured_format(self):
        """Structured format carries file, line and function."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("LOG_FORMAT", None)
            test_logger = setup_logger(name="li-test-structured", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(filename)s" in format_string
        assert "%(lineno)d" in format_string
        assert "%(funcName)s" in format_string

    def test_setup_logger_env_format_override(self):
        with patch.dict(os.environ, {"LOG_FORMAT": "simple"}):
            test_logger = setup_logger(name="li-test-env-format", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(filename)s" not in format_string
        assert "%(message)s" in format_string

    def test_setup_logger_no_duplicate_handlers(self):
        first = setup_logger(name="li-test-no-duplicates")
        second = setup_logger(name="li-test-no-duplicates")
        assert first is second
        assert len(first.handlers) == 1

    def test_setup_logger_handler_uses_stdout(self):
        test_logger = setup_logger(name="li-test-stdout")
        assert test_logger.handlers[0].stream is sys.stdout


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_default_name(self):
        assert get_logger().name == "listing-images"

    def test_get_logger_returns_configured_logger(self):
        test_logger = get_logger(name="li-test-configured")
        assert len(test_logger.handlers) == 1
        assert not test_logger.propagate


def test_default_logger_configured():
    assert isinstance(logger, logging.Logger)
    assert logger.name == "listing-images"
    assert not logger.propagate
