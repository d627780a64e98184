"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/storage_admin.py
Version:        1.0.0
Description:    Storage location administration: choosing and validating
                folders, relocating the primary root and configuring the
                external mirror.
------------------------------------------------------------------------------
"""

from pathlib import Path
from typing import Optional, Tuple, Union

from PyQt6.QtWidgets import QFileDialog, QWidget

from core.database import DatabaseManager
from core.exceptions import ArticleValidationError
from core.logger import get_logger
from core.models.reports import CopyReport
from core.models.types import DocumentKind
from core.repositories.settings_repo import SettingsRepository
from core.vault import ArticleVault

logger = get_logger("storage")

WRITE_TEST_FILE = ".write-test"


class StorageAdmin:
    """
    Operations behind the storage section of the settings dialog.
    """

    def __init__(self, db: DatabaseManager, settings_repo: SettingsRepository, vault: ArticleVault) -> None:
        self.db = db
        self.settings_repo = settings_repo
        self.vault = vault

    def current_root(self) -> Path:
        """
        Storage root to display: the persisted custom path if one was chosen,
        otherwise the root resolved for this run.
        """
        storage_path = self.settings_repo.get().storage_path
        if storage_path:
            return Path(storage_path)
        return self.vault.paths.root

    @staticmethod
    def ensure_writable(path: Union[str, Path]) -> Path:
        """
        Verifies a folder accepts new files by writing and deleting a test file.

        Raises:
            ArticleValidationError: The folder is missing or not writable.
        """
        folder = Path(path)
        test_file = folder / WRITE_TEST_FILE
        try:
            test_file.write_text("test")
            test_file.unlink()
        except OSError as e:
            logger.warning(f"Folder {folder} is not writable: {e}")
            raise ArticleValidationError(
                "Selected folder is not writable. Please choose another location."
            ) from e
        return folder

    def _reject_inside_root(self, path: Union[str, Path]) -> None:
        """Rejects destinations at or below the storage root."""
        root = self.vault.paths.root.resolve()
        if Path(path).resolve().is_relative_to(root):
            raise ArticleValidationError(
                f"{path} is inside the storage location {root}. Please choose another folder."
            )

    def _choose_folder(self, title: str, parent: Optional[QWidget]) -> Optional[Path]:
        selected = QFileDialog.getExistingDirectory(parent, title)
        if not selected:
            return None
        return self.ensure_writable(selected)

    def choose_new_root(self, parent: Optional[QWidget] = None) -> Optional[Path]:
        """
        Asks the user for a new storage location.

        Returns:
            The chosen writable folder, or None if the dialog was cancelled.
        """
        return self._choose_folder("Choose Storage Location", parent)

    def choose_external_path(self, parent: Optional[QWidget] = None) -> Optional[Path]:
        """Asks the user for an external mirror folder (None if cancelled)."""
        return self._choose_folder("Choose External Storage Folder", parent)

    def relocate_root(self, new_path: Union[str, Path]) -> CopyReport:
        """
        Copies database, PDFs and notes to a new root and records it in the
        settings. The running process keeps using the old root; the caller
        must block further writes and restart.

        Raises:
            ArticleValidationError: Target is at or inside the current root, or
                not writable.
        """
        target = Path(new_path)
        if target.resolve() == self.vault.paths.root.resolve():
            raise ArticleValidationError("The selected folder is already the storage location.")
        self._reject_inside_root(target)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArticleValidationError(f"Cannot create {target}: {e}") from e
        self.ensure_writable(target)

        logger.info(f"Migrating storage from {self.vault.paths.root} to {target}")
        self.db.checkpoint()
        report = self.vault.relocate_root(target)
        if report.success:
            self.settings_repo.set_storage_path(str(target))
            logger.info("Storage migration completed; restart required")
        else:
            logger.error(f"Storage migration finished with {len(report.errors)} errors; storage path not changed")
        return report

    def get_external_settings(self) -> Tuple[bool, str]:
        """(enabled, path) of the external mirror."""
        return self.settings_repo.get_external_mirror()

    def update_external_settings(self, enabled: bool, path: str) -> None:
        """
        Saves the mirror configuration. When enabling, the pdfs/ and notes/
        folders are created below the mirror path.
        """
        if enabled and not path:
            raise ArticleValidationError("An external storage folder is required to enable mirroring.")
        if enabled:
            self._reject_inside_root(path)
            try:
                for kind in DocumentKind:
                    (Path(path) / kind.subdir).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ArticleValidationError(f"Cannot use {path} as external storage: {e}") from e
        self.settings_repo.set_external_mirror(enabled, path or "")
        logger.info(f"External storage {'enabled' if enabled else 'disabled'}: {path or '-'}")

    def copy_existing_to_external(self, path: Union[str, Path]) -> CopyReport:
        """Copies all current documents into the mirror, keeping files already there."""
        self._reject_inside_root(path)
        return self.vault.copy_tree_to_external(path)
