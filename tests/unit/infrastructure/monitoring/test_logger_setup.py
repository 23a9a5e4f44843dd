import logging

import pytest

from tagcache.infrastructure.monitoring.logger_setup import DEFAULT_LOG_LEVEL, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def test_level_name_is_accepted():
    setup_logging(log_level="debug")
    root_logger = logging.getLogger()
    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0], logging.StreamHandler)


def test_unknown_level_name_uses_default():
    setup_logging(log_level="chatty")
    assert logging.getLogger().level == DEFAULT_LOG_LEVEL


def test_file_handler_writes_messages(tmp_path):
    log_file = tmp_path / "tagcache.log"
    setup_logging(log_level=logging.INFO, log_file=str(log_file))

    logging.getLogger("tagcache.test").info("cache opened")

    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "cache opened" in log_file.read_text(encoding="utf-8")


def test_unwritable_log_file_keeps_console_handler(tmp_path):
    setup_logging(log_file=str(tmp_path / "missing" / "tagcache.log"))
    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
