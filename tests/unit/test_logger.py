"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           tests/unit/test_logger.py
Version:        1.0.0
Description:    Unit tests for the centralized logging system.
------------------------------------------------------------------------------
"""

import logging

from core.logger import get_logger, log_sql_query, set_component_level, setup_logging


def _flush():
    for handler in logging.getLogger("articleshelf").handlers:
        handler.flush()


def test_logger_singleton_root():
    """Verify that get_logger returns a child of the articleshelf root."""
    logger = get_logger("vault")
    assert logger.name == "articleshelf.vault"
    assert get_logger("articleshelf.db") is logging.getLogger("articleshelf.db")


def test_logging_to_file(tmp_path):
    """Verify that logs are correctly written to a file."""
    log_file = tmp_path / "logs" / "app.log"
    setup_logging(level="DEBUG", log_file=str(log_file))

    get_logger("test").debug("Logging to file test message")
    _flush()

    assert log_file.exists()
    assert "Logging to file test message" in log_file.read_text(encoding="utf-8")


def test_component_level_overrides(tmp_path):
    """Verify that specific components can have different log levels."""
    log_file = tmp_path / "component.log"
    setup_logging(level="INFO", log_file=str(log_file), component_levels={"vault": "DEBUG"})

    get_logger("vault").debug("VAULT DEBUG MESSAGE")
    get_logger("db").debug("DB DEBUG MESSAGE")
    _flush()

    content = log_file.read_text(encoding="utf-8")
    assert "VAULT DEBUG MESSAGE" in content
    assert "DB DEBUG MESSAGE" not in content


def test_setup_resets_previous_overrides(tmp_path):
    log_file = tmp_path / "reset.log"
    set_component_level("storage", "DEBUG")
    setup_logging(level="WARNING", log_file=str(log_file))

    get_logger("storage").debug("LEFTOVER DEBUG")
    _flush()

    assert "LEFTOVER DEBUG" not in log_file.read_text(encoding="utf-8")


def test_repeated_setup_does_not_duplicate_handlers(tmp_path):
    setup_logging(level="INFO", log_file=str(tmp_path / "a.log"))
    setup_logging(level="INFO", log_file=str(tmp_path / "b.log"))
    # stdout + file
    assert len(logging.getLogger("articleshelf").handlers) == 2


def test_unknown_component_level_is_ignored():
    logger = get_logger("paths")
    logger.setLevel(logging.INFO)
    set_component_level("paths", "LOUD")
    assert logger.level == logging.INFO


def test_sql_trace_at_debug(tmp_path):
    log_file = tmp_path / "sql.log"
    setup_logging(level="WARNING", log_file=str(log_file), component_levels={"db.sql": "DEBUG"})

    log_sql_query("SELECT *\n   FROM Article  WHERE id = ?", ("0001",), 1)
    _flush()

    content = log_file.read_text(encoding="utf-8")
    assert "SQL: SELECT * FROM Article WHERE id = ?" in content
    assert "PARAMS: ('0001',)" in content
    assert "RESULTS: 1" in content


def test_quiet_default_mode(tmp_path):
    """Verify that the system is quiet at Default level."""
    log_file = tmp_path / "quiet.log"
    setup_logging(level="WARNING", log_file=str(log_file))

    get_logger("core").info("THIS SHOULD NOT APPEAR")
    _flush()

    assert "THIS SHOULD NOT APPEAR" not in log_file.read_text(encoding="utf-8")


def test_unknown_application_level_falls_back_to_warning():
    setup_logging(level="CHATTY")
    assert logging.getLogger("articleshelf").level == logging.WARNING
