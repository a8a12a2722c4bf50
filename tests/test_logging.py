"""
Tests for the logging setup.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from certguard_api.app.core.logging_config import installed_handlers, setup_logging


@pytest.fixture
def bare_root():
    """Run with the service's handlers removed, restoring them afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = installed_handlers(root), root.level
    for handler in saved_handlers:
        root.removeHandler(handler)
    yield root
    for handler in installed_handlers(root):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_setup_is_idempotent(bare_root):
    setup_logging("DEBUG")
    setup_logging("DEBUG")
    assert len(installed_handlers(bare_root)) == 1
    assert bare_root.level == logging.DEBUG


def test_foreign_handlers_do_not_block_setup(bare_root):
    foreign = logging.NullHandler()
    bare_root.addHandler(foreign)
    setup_logging("INFO")
    assert foreign in bare_root.handlers
    assert len(installed_handlers(bare_root)) == 1
    bare_root.removeHandler(foreign)


def test_unknown_level_falls_back_to_info(bare_root):
    setup_logging("chatty")
    assert bare_root.level == logging.INFO


def test_rotating_log_file(bare_root, tmp_path):
    logfile = tmp_path / "logs" / "certguard.log"
    setup_logging("INFO", str(logfile), max_bytes=1024, backups=2)

    file_handlers = [h for h in installed_handlers(bare_root) if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 1024
    assert file_handlers[0].backupCount == 2

    logging.getLogger("certguard.test").info("certificate 7 shared")
    file_handlers[0].flush()
    assert "certificate 7 shared" in logfile.read_text(encoding="utf-8")


def test_server_loggers_propagate(bare_root):
    logging.getLogger("uvicorn.access").propagate = False
    setup_logging("INFO")
    assert logging.getLogger("uvicorn.access").propagate is True
