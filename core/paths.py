"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/paths.py
Version:        1.0.0
Description:    Resolves the primary storage root and its subdirectories from
                the run mode alone. The custom storage path persisted in user
                settings is deliberately not consulted here.
------------------------------------------------------------------------------
"""

import sys
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from core.config import AppConfig
from core.logger import get_logger
from core.models.types import DocumentKind

logger = get_logger("paths")

DATABASE_FILE_NAME = "articles.db"


class RunMode(str, Enum):
    DEV = "dev"
    PACKAGED = "packaged"


def detect_run_mode(config: Optional[AppConfig] = None) -> RunMode:
    """
    Determines the run mode: explicit override from the configuration,
    otherwise PACKAGED for frozen (bundled) interpreters and DEV for
    source checkouts.
    """
    override = config.get_run_mode() if config is not None else None
    if override:
        return RunMode(override)
    return RunMode.PACKAGED if getattr(sys, "frozen", False) else RunMode.DEV


class StoragePaths:
    """
    Layout below the storage root:

        <root>/database/articles.db
        <root>/pdfs/
        <root>/notes/
    """

    def __init__(
        self,
        run_mode: RunMode = RunMode.DEV,
        cwd: Optional[Union[str, Path]] = None,
        data_dir: Optional[Union[str, Path]] = None,
        config: Optional[AppConfig] = None,
    ) -> None:
        """
        Args:
            run_mode: DEV resolves below the working directory, PACKAGED to the
                per-user application data directory.
            cwd: Working directory for DEV (defaults to the process cwd).
            data_dir: Per-user data directory for PACKAGED (defaults to AppConfig).
            config: Configuration used to look up the data directory.
        """
        self.run_mode = RunMode(run_mode)
        self._cwd = Path(cwd) if cwd is not None else None
        self._data_dir = Path(data_dir) if data_dir is not None else None
        self._config = config

    @property
    def root(self) -> Path:
        if self.run_mode is RunMode.PACKAGED:
            if self._data_dir is None:
                self._data_dir = (self._config or AppConfig()).get_data_dir()
            return self._data_dir
        return (self._cwd or Path.cwd()) / "storage"

    @property
    def database(self) -> Path:
        return self.root / "database"

    @property
    def database_file(self) -> Path:
        return self.database / DATABASE_FILE_NAME

    @property
    def pdfs(self) -> Path:
        return self.root / DocumentKind.PDF.subdir

    @property
    def notes(self) -> Path:
        return self.root / DocumentKind.NOTE.subdir

    def subdir(self, kind: DocumentKind) -> Path:
        return self.root / kind.subdir

    def ensure_directories(self) -> List[Path]:
        """
        Creates the root and its three subdirectories if missing. Idempotent.

        Returns:
            The directories that had to be created.
        """
        created = []
        for directory in (self.root, self.database, self.pdfs, self.notes):
            if not directory.exists():
                directory.mkdir(parents=True, exist_ok=True)
                created.append(directory)
                logger.info(f"Created directory: {directory}")
        logger.info(f"Storage root: {self.root} (run mode: {self.run_mode.value})")
        return created
