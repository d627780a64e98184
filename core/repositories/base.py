"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/repositories/base.py
Version:        1.0.0
Description:    Base class for repository implementations. Provides shared
                access to the central database manager and connection handle.
------------------------------------------------------------------------------
"""

import sqlite3
from datetime import datetime

from core.database import DatabaseManager


class BaseRepository:
    """
    Abstract-style base repository providing shared database access.
    """

    def __init__(self, db_manager: DatabaseManager) -> None:
        """
        Initializes the repository with a database manager.

        Args:
            db_manager: The central database management instance.
        """
        self.db: DatabaseManager = db_manager

    @property
    def conn(self) -> sqlite3.Connection:
        """Dynamically retrieves the current connection handle from the DB manager."""
        return self.db.connection

    @staticmethod
    def now() -> str:
        """Timestamp format used for createdAt/updatedAt columns."""
        return datetime.now().isoformat(timespec="seconds")
