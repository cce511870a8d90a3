from __future__ import annotations

import logging
from io import StringIO
from unittest.mock import patch

import officebots.logging.init
from officebots.logging.init import LabeledFormatter, get_logger, log_summary, reset_logging, setup_logging


def _capture(logger: logging.Logger) -> StringIO:
    captured_output = StringIO()
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(captured_output)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    return captured_output


def test_setup_logging_creates_logger_with_labeled_formatter():
    reset_logging()
    logger = setup_logging()

    assert logger.name == "officebots"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert isinstance(handler.formatter, LabeledFormatter)
    assert logger.propagate is False


def test_logging_labeled_prefixes():
    """INFO|WARN|ERROR|SUMMARY prefixes."""
    logger = logging.getLogger("test_officebots")
    logger.setLevel(logging.INFO)
    logging.addLevelName(25, "SUMMARY")
    output = _capture(logger)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(25, "Test summary message")

    lines = output.getvalue().strip().split('\n')
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_get_logger_returns_configured_logger():
    setup_logger = setup_logging()
    assert get_logger() is setup_logger


def test_setup_logging_idempotent():
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert len(logger1.handlers) == 1


def test_setup_logging_debug_lowers_level():
    reset_logging()
    logger = setup_logging()
    setup_logging(debug=True)
    assert logger.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in logger.handlers)
    reset_logging()


def test_module_loggers_propagate_to_app_logger():
    reset_logging()
    logger = setup_logging()
    output = _capture(logger)
    logging.getLogger("officebots.services.bug_hunter").info("Don't bother anybody, it's the weekend...")
    assert output.getvalue().strip() == "INFO Don't bother anybody, it's the weekend..."
    reset_logging()


def test_summary_level_logging():
    logger = setup_logging()
    assert logging.getLevelName(25) == "SUMMARY"
    with patch.object(logger, '_log') as mock_log:
        logger.log(25, "job=bug-hunter posted=2 assigned=1 skipped=none")
        mock_log.assert_called_once()


def test_log_summary_convenience_function():
    reset_logging()
    logger = logging.getLogger("officebots")
    logger.setLevel(logging.INFO)
    output = _capture(logger)
    logger.propagate = False
    officebots.logging.init._logger = logger

    log_summary("job=bug-hunter posted=2 assigned=1 skipped=none")

    assert output.getvalue().strip() == "SUMMARY job=bug-hunter posted=2 assigned=1 skipped=none"
    reset_logging()
