"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/library.py
Version:        1.0.0
Description:    Facade wiring database, repositories, vault and storage
                administration for one library. This is the synchronous API
                the UI layer talks to.
------------------------------------------------------------------------------
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from core.database import DatabaseManager
from core.exceptions import ArticleNotFoundError, StoreFailure
from core.logger import get_logger
from core.models.article import Article, ArticleCreate, ArticleUpdate
from core.models.reports import MigrationReport
from core.models.settings import UserSettings, UserSettingsUpdate
from core.models.types import DocumentKind
from core.paths import StoragePaths
from core.repositories import ArticleRepository, EntityRepository, IdAllocator, SettingsRepository
from core.storage_admin import StorageAdmin
from core.vault import ArticleVault

logger = get_logger("core")


class ArticleLibrary:
    """
    One article library: a database plus its document folders.
    """

    def __init__(self, db: DatabaseManager, paths: StoragePaths) -> None:
        self.db = db
        self.paths = paths
        self.entities = EntityRepository(db)
        self.articles = ArticleRepository(db, entities=self.entities, allocator=IdAllocator(db))
        self.settings_repo = SettingsRepository(db)
        self.vault = ArticleVault(paths, self.settings_repo, self.articles)
        self.storage = StorageAdmin(db, self.settings_repo, self.vault)

    @classmethod
    def open(cls, paths: StoragePaths) -> "ArticleLibrary":
        """
        Creates the storage folders if needed and opens the database in them.

        Raises:
            StoreFailure: Folders or database could not be created/opened.
        """
        try:
            paths.ensure_directories()
        except OSError as e:
            logger.critical(f"Could not create storage directories below {paths.root}: {e}")
            raise StoreFailure(f"Could not create storage directories: {e}") from e
        db = DatabaseManager(str(paths.database_file))
        return cls(db, paths)

    def close(self) -> None:
        self.db.close()

    # --- Articles ---

    def create(self, payload: ArticleCreate) -> Article:
        return self.articles.create(payload)

    def get(self, article_id: str) -> Optional[Article]:
        return self.articles.get(article_id)

    def list(self) -> List[Article]:
        return self.articles.list()

    def update(self, article_id: str, payload: ArticleUpdate) -> Article:
        return self.articles.update(article_id, payload)

    def delete(self, article_id: str) -> bool:
        """
        Deletes an article and then its files. A file that cannot be removed
        is logged; the article stays deleted.

        Returns:
            True if the article existed.
        """
        title = self.articles.get_title(article_id)
        if title is None:
            return False
        deleted = self.articles.delete(article_id)
        try:
            self.vault.remove(article_id, title)
        except StoreFailure as e:
            logger.error(f"Article {article_id} deleted but files remain: {e}")
        return deleted

    # --- Files ---

    def _require(self, article_id: str) -> str:
        title = self.articles.get_title(article_id)
        if title is None:
            raise ArticleNotFoundError(article_id)
        return title

    def store_file(self, kind: DocumentKind, article_id: str, data: bytes) -> str:
        """
        Stores a PDF or note for an existing article, named after its
        stored title so later lookups find it. Save a title edit first.

        Returns:
            The stored file name.
        """
        title = self._require(article_id)
        return self.vault.store(kind, article_id, title, data)

    def locate_file(self, kind: DocumentKind, article_id: str) -> Optional[Path]:
        return self.vault.locate(kind, article_id)

    def open_file(self, kind: DocumentKind, article_id: str) -> Path:
        self._require(article_id)
        return self.vault.open(kind, article_id)

    def read_file(self, kind: DocumentKind, article_id: str) -> Optional[bytes]:
        return self.vault.read(kind, article_id)

    def migrate_naming_scheme(self) -> MigrationReport:
        return self.vault.migrate_naming_scheme()

    # --- Settings & maintenance ---

    def settings(self) -> UserSettings:
        return self.settings_repo.get()

    def update_settings(self, update: UserSettingsUpdate) -> UserSettings:
        return self.settings_repo.update(update)

    def statistics(self) -> Dict[str, Any]:
        return self.db.get_statistics()

    def optimize(self) -> None:
        self.db.optimize()
