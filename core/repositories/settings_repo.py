"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/repositories/settings_repo.py
Version:        1.0.0
Description:    Access to the UserSettings singleton row, including the
                external mirror configuration read by the vault.
------------------------------------------------------------------------------
"""

import sqlite3
from typing import Optional, Tuple

from core.logger import get_logger
from core.models.settings import SETTINGS_COLUMNS, UserSettings, UserSettingsUpdate
from .base import BaseRepository

logger = get_logger("repo")


class SettingsRepository(BaseRepository):
    """
    The settings table holds at most one row. It is created with defaults on
    first read.
    """

    def get(self) -> UserSettings:
        with self.db.transaction() as conn:
            row = conn.execute("SELECT * FROM UserSettings ORDER BY id LIMIT 1").fetchone()
            if row is None:
                now = self.now()
                conn.execute(
                    "INSERT INTO UserSettings (theme, language, pdfViewer, fontSize, createdAt, updatedAt) "
                    "VALUES ('light', 'English', 'system', 14, ?, ?)",
                    (now, now),
                )
                logger.info("Created default user settings")
                row = conn.execute("SELECT * FROM UserSettings ORDER BY id LIMIT 1").fetchone()
        return self._from_row(row)

    def update(self, update: UserSettingsUpdate) -> UserSettings:
        """
        Writes only the fields present in the update.

        Returns:
            The settings after the write.
        """
        values = update.provided()
        current = self.get()
        if not values:
            return current

        assignments = [f"{SETTINGS_COLUMNS[name]} = ?" for name in values]
        params = [int(v) if isinstance(v, bool) else v for v in values.values()]
        assignments.append("updatedAt = ?")
        params.append(self.now())
        params.append(current.id)

        with self.db.transaction() as conn:
            conn.execute(f"UPDATE UserSettings SET {', '.join(assignments)} WHERE id = ?", params)
        logger.info(f"Updated user settings: {', '.join(values)}")
        return self.get()

    def get_external_mirror(self) -> Tuple[bool, str]:
        """(enabled, path) of the external mirror."""
        settings = self.get()
        return settings.use_external_storage, settings.external_storage_path

    def set_external_mirror(self, enabled: bool, path: str) -> UserSettings:
        return self.update(UserSettingsUpdate(use_external_storage=enabled, external_storage_path=path))

    def set_storage_path(self, path: Optional[str]) -> UserSettings:
        """Persists the custom storage root (shown to the user, not used for resolution)."""
        return self.update(UserSettingsUpdate(storage_path=path))

    @staticmethod
    def _from_row(row: sqlite3.Row) -> UserSettings:
        keys = row.keys()

        def value(column: str, default=None):
            return row[column] if column in keys and row[column] is not None else default

        return UserSettings(
            id=row["id"],
            theme=value("theme", "light"),
            language=value("language", "English"),
            pdf_viewer=value("pdfViewer", "system"),
            font_size=value("fontSize", 14),
            storage_path=value("storagePath"),
            external_storage_path=value("externalStoragePath", ""),
            use_external_storage=bool(value("useExternalStorage", 0)),
            created_at=value("createdAt"),
            updated_at=value("updatedAt"),
        )
