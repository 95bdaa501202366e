"""
test_logging_utils.py
---------------------
Tests for configure_logging() and ColorFormatter.
"""

import logging

import pytest
from colorama import Fore

from rsr.logging_utils import ColorFormatter, configure_logging


@pytest.fixture
def scratch_logger_name():
    name = "rsr_test_logger"
    yield name
    logger = logging.getLogger(name)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


def test_color_formatter_marks_level():
    record = logging.LogRecord("rsr", logging.WARNING, __file__, 1, "spray %d", (3,), None)
    text = ColorFormatter(datefmt="%H:%M:%S").format(record)
    assert "[rsr]" in text
    assert Fore.YELLOW in text
    assert text.endswith("spray 3")


def test_configure_logging_file_handler(tmp_path, scratch_logger_name):
    path = configure_logging(logging.DEBUG, log_dir=tmp_path,
                             name=scratch_logger_name, run_prefix="unit")
    logger = logging.getLogger(scratch_logger_name)
    logger.debug("hello file")
    for h in logger.handlers:
        h.flush()

    assert path.parent == tmp_path
    assert path.name.startswith("unit_PID")
    assert "hello file" in path.read_text()


def test_configure_logging_console_only(scratch_logger_name):
    assert configure_logging(logging.INFO, log_dir=None, name=scratch_logger_name) is None
    logger = logging.getLogger(scratch_logger_name)
    assert len(logger.handlers) == 1


def test_reconfigure_replaces_handlers(tmp_path, scratch_logger_name):
    configure_logging(log_dir=tmp_path, name=scratch_logger_name)
    configure_logging(log_dir=tmp_path, name=scratch_logger_name)
    assert len(logging.getLogger(scratch_logger_name).handlers) == 2
