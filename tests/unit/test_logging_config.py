"""Unit tests for logging setup."""

import logging
import os
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

import pytest

from termcanvas.logging_config import LOGGER_NAME, setup_logging

pytestmark = [pytest.mark.unit]


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_setup_logging_writes_to_rotating_file(tmp_path, clean_logger):
    log_path = tmp_path / "logs" / "termcanvas.log"

    with patch.dict(os.environ, {"TERMCANVAS_LOG_PATH": str(log_path)}):
        setup_logging("debug")
        setup_logging()

    assert len(clean_logger.handlers) == 1
    assert isinstance(clean_logger.handlers[0], RotatingFileHandler)
    assert clean_logger.level == logging.DEBUG
    assert clean_logger.propagate is False

    logging.getLogger("termcanvas.host").debug("hello %s", "file")
    clean_logger.handlers[0].flush()
    assert "termcanvas.host: hello file" in log_path.read_text(encoding="utf-8")


def test_unwritable_log_dir_falls_back_to_null_handler(tmp_path, clean_logger):
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    with patch.dict(os.environ, {"TERMCANVAS_LOG_PATH": str(blocker / "sub" / "x.log")}):
        setup_logging()

    assert isinstance(clean_logger.handlers[0], logging.NullHandler)
