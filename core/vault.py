"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/vault.py
Version:        1.0.0
Description:    Manages the article documents (PDFs and generated notes) on
                disk below the primary storage root, keeps the optional
                external mirror in sync and provides bulk maintenance
                (naming migration, mirror seeding, root relocation).
------------------------------------------------------------------------------
"""

import shutil
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from PyQt6.QtCore import QUrl
from PyQt6.QtGui import QDesktopServices

from core.exceptions import DocumentNotFoundError, StoreFailure
from core.logger import get_logger
from core.models.reports import CopyReport, MigrationReport
from core.models.types import DocumentKind
from core.paths import StoragePaths
from core.utils.naming import candidate_names, is_titled_name, legacy_base_name, make_file_base_name

if TYPE_CHECKING:
    from core.repositories.article_repo import ArticleRepository
    from core.repositories.settings_repo import SettingsRepository

logger = get_logger("vault")

DOCUMENT_SUBDIRS = ("pdfs", "notes")
ROOT_SUBDIRS = ("database", "pdfs", "notes")


class ArticleVault:
    """
    File store for article documents.

    Files are named "{id} - {title}.ext". Bare "{id}.ext" files from older
    installations and files named after an earlier title are still found.
    The primary copy is authoritative; the external mirror is best effort
    and never fails an operation.
    """

    def __init__(
        self,
        paths: StoragePaths,
        settings_repo: "SettingsRepository",
        article_repo: "ArticleRepository",
    ) -> None:
        """
        Args:
            paths: Resolved primary storage layout.
            settings_repo: Source of the external mirror configuration.
            article_repo: Source of article titles for name resolution.
        """
        self.paths = paths
        self.settings_repo = settings_repo
        self.article_repo = article_repo

    # --- Helpers ---

    def _mirror_root(self) -> Optional[Path]:
        """External mirror folder when mirroring is enabled, otherwise None."""
        try:
            enabled, path = self.settings_repo.get_external_mirror()
        except StoreFailure as e:
            logger.warning(f"Could not read external storage settings: {e}")
            return None
        if not enabled or not path:
            return None
        return Path(path)

    @staticmethod
    def _inside(path: Path, base: Path) -> bool:
        """Guards against names escaping their directory."""
        try:
            return path.resolve().is_relative_to(base.resolve())
        except (ValueError, OSError):
            return False

    def _candidates(self, base: Path, kind: DocumentKind, article_id: str, title: Optional[str]) -> List[Path]:
        """
        Paths an article's document may have below base: the current name,
        the legacy name, then files stored under an earlier title.
        """
        paths = []
        for name in candidate_names(article_id, title):
            path = base / f"{name}{kind.extension}"
            if self._inside(path, base):
                paths.append(path)

        if not base.is_dir():
            return paths
        try:
            entries = sorted(base.iterdir())
        except OSError as e:
            logger.warning(f"Could not list {base}: {e}")
            return paths
        for entry in entries:
            if entry not in paths and is_titled_name(entry.name, article_id, kind.extension):
                paths.append(entry)
        return paths

    # --- Single document operations ---

    def store(self, kind: DocumentKind, article_id: str, title: str, data: bytes) -> str:
        """
        Writes a document under the current naming scheme, replacing any file
        with the same name, and mirrors it when enabled.

        Args:
            kind: PDF or note.
            article_id: Owning article id.
            title: Article title used in the file name.
            data: File content.

        Returns:
            The stored file name (with extension).

        Raises:
            StoreFailure: The primary copy could not be written.
        """
        file_name = make_file_base_name(article_id, title) + kind.extension
        target_dir = self.paths.subdir(kind)
        target_path = target_dir / file_name
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            target_path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to store {kind.value} for article {article_id}: {e}")
            raise StoreFailure(f"Could not write {target_path}: {e}") from e
        logger.info(f"{kind.value.upper()} saved: {target_path}")

        self._mirror_file(target_path, kind)
        return file_name

    def _mirror_file(self, source: Path, kind: DocumentKind) -> Optional[Path]:
        mirror = self._mirror_root()
        if mirror is None:
            return None
        try:
            external_dir = mirror / kind.subdir
            external_dir.mkdir(parents=True, exist_ok=True)
            external_path = external_dir / source.name
            shutil.copy2(source, external_path)
            logger.info(f"Copied to external storage: {external_path}")
            return external_path
        except OSError as e:
            logger.warning(f"Error copying {source.name} to external storage: {e}")
            return None

    def locate(self, kind: DocumentKind, article_id: str) -> Optional[Path]:
        """
        Finds the document of an article, current naming scheme first.

        Returns:
            The existing path or None.
        """
        title = self.article_repo.get_title(article_id)
        for path in self._candidates(self.paths.subdir(kind), kind, article_id, title):
            if path.is_file():
                return path
        return None

    def read(self, kind: DocumentKind, article_id: str) -> Optional[bytes]:
        """Content of the located document, None if there is none."""
        path = self.locate(kind, article_id)
        if path is None:
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            raise StoreFailure(f"Could not read {path}: {e}") from e

    def open(self, kind: DocumentKind, article_id: str) -> Path:
        """
        Opens the document with the desktop's default application.

        Raises:
            DocumentNotFoundError: No file exists under either naming scheme.
            StoreFailure: The desktop refused to open the file.
        """
        path = self.locate(kind, article_id)
        if path is None:
            raise DocumentNotFoundError(article_id, kind.value)
        if not QDesktopServices.openUrl(QUrl.fromLocalFile(str(path))):
            raise StoreFailure(f"No application could open {path}")
        logger.debug(f"Opened {path}")
        return path

    def remove(self, article_id: str, title: Optional[str] = None) -> List[Path]:
        """
        Deletes the PDF and note of an article under every naming scheme,
        at the primary root and in the mirror. Missing files are ignored.

        Args:
            article_id: Article id.
            title: Title to derive the current name from; looked up when
                omitted. Files under any other "{id} - ..." name are
                removed as well.

        Returns:
            The paths that were deleted.

        Raises:
            StoreFailure: A primary file exists but could not be deleted.
                All other files are still processed first.
        """
        if title is None:
            title = self.article_repo.get_title(article_id)

        removed: List[Path] = []
        failures: List[str] = []
        mirror = self._mirror_root()

        for kind in DocumentKind:
            bases = [(self.paths.subdir(kind), True)]
            if mirror is not None:
                bases.append((mirror / kind.subdir, False))
            for base, primary in bases:
                for path in self._candidates(base, kind, article_id, title):
                    if not path.exists():
                        continue
                    try:
                        path.unlink()
                        removed.append(path)
                        logger.info(f"Deleted {path}")
                    except OSError as e:
                        if primary:
                            logger.error(f"Failed to delete {path}: {e}")
                            failures.append(f"{path}: {e}")
                        else:
                            logger.warning(f"Failed to delete external copy {path}: {e}")

        if failures:
            raise StoreFailure("; ".join(failures))
        return removed

    # --- Bulk maintenance ---

    def migrate_naming_scheme(self) -> MigrationReport:
        """
        Renames legacy '{id}.ext' files to '{id} - {title}.ext' at the primary
        root and in the mirror. A stray current-named file is replaced.
        Running it again finds nothing left to migrate.

        Returns:
            Counts per article and per kind, plus per-file errors.
        """
        articles = self.article_repo.list_ids_and_titles()
        report = MigrationReport(total_articles=len(articles))
        mirror = self._mirror_root()

        for article_id, title in articles:
            for kind in DocumentKind:
                old_name = legacy_base_name(article_id) + kind.extension
                new_name = make_file_base_name(article_id, title) + kind.extension
                if old_name == new_name:
                    continue

                primary_dir = self.paths.subdir(kind)
                try:
                    migrated = self._rename(primary_dir / old_name, primary_dir / new_name)
                except OSError as e:
                    report.errors.append(f"{kind.value.upper()} {article_id}: {e}")
                    logger.error(f"Migration of {old_name} failed: {e}")
                    migrated = False

                if migrated:
                    if kind is DocumentKind.PDF:
                        report.migrated_pdfs += 1
                    else:
                        report.migrated_notes += 1
                    report.per_article[article_id] = report.per_article.get(article_id, 0) + 1
                    logger.info(f"Migrated {kind.value.upper()}: {old_name} -> {new_name}")

                # The mirror may lag behind a primary renamed in an earlier run
                if mirror is not None:
                    external_dir = mirror / kind.subdir
                    try:
                        if self._rename(external_dir / old_name, external_dir / new_name):
                            logger.info(f"Migrated external {kind.value.upper()}: {old_name} -> {new_name}")
                    except OSError as e:
                        report.errors.append(f"External {kind.value.upper()} {article_id}: {e}")
                        logger.error(f"Migration of external {old_name} failed: {e}")

        logger.info(
            f"Naming migration finished: {report.migrated_pdfs} PDFs, "
            f"{report.migrated_notes} notes, {len(report.errors)} errors"
        )
        return report

    @staticmethod
    def _rename(old_path: Path, new_path: Path) -> bool:
        if not old_path.is_file():
            return False
        if new_path.exists():
            new_path.unlink()
        old_path.rename(new_path)
        return True

    def copy_tree_to_external(self, external_path: Union[str, Path]) -> CopyReport:
        """
        Seeds an external mirror with the existing PDFs and notes.
        Files already present at the destination are left alone.
        """
        report = CopyReport(source=self.paths.root, destination=Path(external_path))
        self._copy_tree(DOCUMENT_SUBDIRS, report, overwrite=False)
        logger.info(f"Copied {report.copied_count} files to external storage {external_path}")
        return report

    def relocate_root(self, new_path: Union[str, Path]) -> CopyReport:
        """
        Copies the whole primary tree (database, PDFs, notes) to a new root,
        overwriting files there. The current root stays untouched.
        """
        report = CopyReport(source=self.paths.root, destination=Path(new_path))
        self._copy_tree(ROOT_SUBDIRS, report, overwrite=True)
        logger.info(f"Copied storage from {report.source} to {report.destination}: {report.copied_count} files")
        return report

    def _copy_tree(self, subdirs: Sequence[str], report: CopyReport, overwrite: bool) -> None:
        for subdir in subdirs:
            src_dir = report.source / subdir
            dest_dir = report.destination / subdir
            try:
                dest_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                report.errors.append(f"{dest_dir}: {e}")
                logger.error(f"Could not create {dest_dir}: {e}")
                continue
            if not src_dir.exists():
                logger.debug(f"Source directory {src_dir} does not exist, skipping")
                continue
            self._copy_directory(src_dir, dest_dir, report, overwrite)

    def _copy_directory(self, src: Path, dest: Path, report: CopyReport, overwrite: bool) -> None:
        for entry in sorted(src.iterdir()):
            target = dest / entry.name
            try:
                if entry.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    self._copy_directory(entry, target, report, overwrite)
                elif target.exists() and not overwrite:
                    report.skipped.append(target)
                else:
                    shutil.copy2(entry, target)
                    report.copied.append(target)
            except OSError as e:
                report.errors.append(f"{entry}: {e}")
                logger.error(f"Failed to copy {entry}: {e}")
