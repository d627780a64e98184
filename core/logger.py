"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/logger.py
Version:        1.0.0
Description:    Logging for ArticleShelf. Every module logs through a child of
                the 'articleshelf' logger ('db', 'vault', 'storage', ...), so
                one call configures console and file output for all of them
                and single components can be made louder or quieter.
------------------------------------------------------------------------------
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

APP_LOGGER_NAME = "articleshelf"

DEFAULT_FORMAT = "%(asctime)s [%(levelname).4s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level_from_name(name: str, fallback: Optional[int]) -> Optional[int]:
    value = getattr(logging, name.upper(), None)
    return value if isinstance(value, int) else fallback


def _component_loggers():
    prefix = APP_LOGGER_NAME + "."
    for name, item in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith(prefix) and isinstance(item, logging.Logger):
            yield item


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    component_levels: Optional[Dict[str, str]] = None
) -> None:
    """
    Configures the application logger. Safe to call again, e.g. after the
    user changed the log settings: old handlers are closed and earlier
    component overrides are dropped.

    Args:
        level: Level name for the whole application; unknown names mean WARNING.
        log_file: Optional log file, its folder is created when missing.
        component_levels: Per-component level names, e.g. {'db.sql': 'DEBUG'}.
    """
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(_level_from_name(level, logging.WARNING))

    formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_path), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    for component_logger in _component_loggers():
        component_logger.setLevel(logging.NOTSET)
    for component, component_level in (component_levels or {}).items():
        set_component_level(component, component_level)


def get_logger(name: str) -> logging.Logger:
    """Logger of a component; 'vault' becomes 'articleshelf.vault'."""
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def set_component_level(component: str, level: str) -> None:
    """
    Overrides the level of one component at runtime.
    Unknown level names leave the component unchanged.
    """
    numeric_level = _level_from_name(level, None)
    if numeric_level is None:
        return
    component_logger = get_logger(component)
    component_logger.setLevel(numeric_level)
    component_logger.propagate = True


def log_sql_query(query: str, params: Optional[tuple] = None, result_count: int = 0) -> None:
    """
    Traces a statement on 'articleshelf.db.sql' when that component runs at
    DEBUG. Whitespace in the statement is collapsed to one line.
    """
    sql_logger = get_logger("db.sql")
    if not sql_logger.isEnabledFor(logging.DEBUG):
        return
    parts = [f"SQL: {' '.join(query.split())}"]
    if params:
        parts.append(f"PARAMS: {params}")
    parts.append(f"RESULTS: {result_count}")
    sql_logger.debug(" | ".join(parts))
