"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/workers.py
Version:        1.0.0
Description:    Background threads for the long-running storage maintenance
                operations so the UI stays responsive. They are not
                cancellable; each ends with either 'finished' or 'failed'.
------------------------------------------------------------------------------
"""

from pathlib import Path
from typing import Union

from PyQt6.QtCore import QThread, pyqtSignal

from core.exceptions import ArticleShelfError
from core.logger import get_logger
from core.storage_admin import StorageAdmin
from core.vault import ArticleVault

logger = get_logger("workers")


class NamingMigrationWorker(QThread):
    """
    Renames legacy document files to the current naming scheme.
    """
    finished = pyqtSignal(object)  # MigrationReport
    failed = pyqtSignal(str)

    def __init__(self, vault: ArticleVault):
        super().__init__()
        self.vault = vault

    def run(self):
        try:
            report = self.vault.migrate_naming_scheme()
        except (ArticleShelfError, OSError) as e:
            logger.error(f"Naming migration failed: {e}")
            self.failed.emit(str(e))
            return
        self.finished.emit(report)


class RelocateWorker(QThread):
    """
    Copies the storage tree to a new root. The caller restarts afterwards.
    """
    finished = pyqtSignal(object)  # CopyReport
    failed = pyqtSignal(str)

    def __init__(self, admin: StorageAdmin, new_path: Union[str, Path]):
        super().__init__()
        self.admin = admin
        self.new_path = Path(new_path)

    def run(self):
        try:
            report = self.admin.relocate_root(self.new_path)
        except (ArticleShelfError, OSError) as e:
            logger.error(f"Relocation to {self.new_path} failed: {e}")
            self.failed.emit(str(e))
            return
        self.finished.emit(report)


class ExternalCopyWorker(QThread):
    """
    Seeds the external mirror with the existing documents.
    """
    finished = pyqtSignal(object)  # CopyReport
    failed = pyqtSignal(str)

    def __init__(self, admin: StorageAdmin, external_path: Union[str, Path]):
        super().__init__()
        self.admin = admin
        self.external_path = Path(external_path)

    def run(self):
        try:
            report = self.admin.copy_existing_to_external(self.external_path)
        except (ArticleShelfError, OSError) as e:
            logger.error(f"Copy to external storage {self.external_path} failed: {e}")
            self.failed.emit(str(e))
            return
        self.finished.emit(report)
