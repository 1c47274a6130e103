"""
Tests for the logging utilities.

Tests cover:
- setup_logging() handler and level configuration
- Rotating file handlers when logging to files
- MetricsLogContext start/success/failure logging
"""

import logging
import logging.handlers
from unittest.mock import MagicMock, patch

import pytest

from habit_metrics.utils.logging import MetricsLogContext, get_metrics_logger, setup_logging


@pytest.fixture
def clean_logging_state():
    """Clean up logging state before and after each test."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers.copy()
    original_level = root_logger.level

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)

    yield

    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


def _console_handlers():
    return [
        h
        for h in logging.getLogger().handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


class TestSetupLogging:
    @pytest.mark.parametrize(
        "log_level,expected",
        [
            ("DEBUG", logging.DEBUG),
            ("WARNING", logging.WARNING),
            ("info", logging.INFO),
            ("nonsense", logging.INFO),
        ],
    )
    def test_console_level(self, clean_logging_state, log_level, expected):
        setup_logging(log_level=log_level, log_to_file=False)
        handlers = _console_handlers()
        assert len(handlers) == 1
        assert handlers[0].level == expected

    def test_no_file_handlers_without_log_to_file(self, clean_logging_state, tmp_path):
        setup_logging(log_to_file=False, logs_dir=tmp_path / "logs")
        root = logging.getLogger()
        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert not (tmp_path / "logs").exists()

    def test_file_handlers_created(self, clean_logging_state, tmp_path):
        logs_dir = tmp_path / "logs"
        setup_logging(log_to_file=True, logs_dir=logs_dir)

        rotating = [
            h
            for h in logging.getLogger().handlers
            if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert logs_dir.is_dir()
        assert len(rotating) == 2
        assert {h.level for h in rotating} == {logging.INFO, logging.ERROR}

    def test_repeated_setup_does_not_stack_handlers(self, clean_logging_state):
        setup_logging(log_to_file=False)
        setup_logging(log_to_file=False)
        assert len(_console_handlers()) == 1


class TestMetricsLogContext:
    def test_logs_start_and_success(self):
        logger = MagicMock()
        with patch("habit_metrics.utils.logging.get_metrics_logger", return_value=logger):
            with MetricsLogContext("completion_series", range="week"):
                pass

        logger.debug.assert_called_once()
        logger.info.assert_called_once()
        kwargs = logger.info.call_args.kwargs
        assert kwargs["operation"] == "completion_series"
        assert kwargs["range"] == "week"
        assert kwargs["processing_time_seconds"] >= 0
        logger.error.assert_not_called()

    def test_logs_failure_and_propagates(self):
        logger = MagicMock()
        with patch("habit_metrics.utils.logging.get_metrics_logger", return_value=logger):
            with pytest.raises(ValueError):
                with MetricsLogContext("streak_info"):
                    raise ValueError("bad input")

        logger.error.assert_called_once()
        kwargs = logger.error.call_args.kwargs
        assert kwargs["error_type"] == "ValueError"
        assert kwargs["error_message"] == "bad input"
        logger.info.assert_not_called()

    def test_default_logger_name(self):
        assert get_metrics_logger() is not None
