"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/repositories/article_repo.py
Version:        1.0.0
Description:    Persistence of the article aggregate: the Article row plus
                its six entity link collections. Create and update run in a
                single transaction together with id allocation and linking.
------------------------------------------------------------------------------
"""

import sqlite3
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from core.exceptions import ArticleNotFoundError, DuplicateArticleError
from core.logger import get_logger, log_sql_query
from core.models.article import (
    OPTIONAL_TEXT_COLUMNS,
    SCALAR_COLUMNS,
    Article,
    ArticleCreate,
    ArticleUpdate,
)
from core.models.types import EntityKind
from core.utils.naming import make_file_base_name
from .base import BaseRepository
from .entity_repo import EntityRepository
from .id_allocator import IdAllocator

logger = get_logger("repo")


class ArticleRepository(BaseRepository):
    """
    Manages access to the 'Article' table and its junction tables.
    """

    def __init__(self, db_manager, entities: Optional[EntityRepository] = None,
                 allocator: Optional[IdAllocator] = None) -> None:
        super().__init__(db_manager)
        self.entities = entities or EntityRepository(db_manager)
        self.allocator = allocator or IdAllocator(db_manager)

    # --- Reads ---

    def get(self, article_id: str) -> Optional[Article]:
        """
        Assembles one article.

        Returns:
            The article, or None when the id is unknown.
        """
        row = self.db.fetch_one("SELECT * FROM Article WHERE id = ?", (article_id,))
        if row is None:
            return None
        return self._assemble(row)

    def list(self) -> List[Article]:
        """All articles, newest first. Domain sorting is up to the caller."""
        sql = "SELECT * FROM Article ORDER BY dateAdded DESC, id"
        rows = self.db.fetch_all(sql)
        log_sql_query(sql, None, len(rows))
        return [self._assemble(row) for row in rows]

    def exists(self, article_id: str) -> bool:
        return self.db.fetch_one("SELECT 1 FROM Article WHERE id = ?", (article_id,)) is not None

    def get_title(self, article_id: str) -> Optional[str]:
        row = self.db.fetch_one("SELECT title FROM Article WHERE id = ?", (article_id,))
        return row["title"] if row else None

    def list_ids_and_titles(self) -> List[Tuple[str, str]]:
        rows = self.db.fetch_all("SELECT id, title FROM Article ORDER BY id")
        return [(row["id"], row["title"]) for row in rows]

    def find_duplicate(self, title: str, authors: Iterable[str]) -> Optional[str]:
        """
        Looks for an article with exactly this title and the same set of
        author names, regardless of order.

        Returns:
            The id of the matching article or None.
        """
        wanted = {name for name in authors if name and name.strip()}
        rows = self.db.fetch_all("SELECT id FROM Article WHERE title = ?", (title,))
        for row in rows:
            linked = {ref.name for ref in self.entities.linked(EntityKind.AUTHOR, row["id"])}
            if linked == wanted:
                return row["id"]
        return None

    # --- Writes ---

    def create(self, payload: ArticleCreate) -> Article:
        """
        Inserts a new article with all its links.

        Args:
            payload: Validated create request.

        Returns:
            The stored article as read back from the database.

        Raises:
            DuplicateArticleError: Same title and author set already stored.
            StoreFailure: The database rejected the write; nothing was kept,
                including the allocated id.
        """
        now = self.now()
        with self.db.transaction() as conn:
            existing_id = self.find_duplicate(payload.title, payload.authors)
            if existing_id is not None:
                logger.info(f"Rejected duplicate article '{payload.title}' (matches {existing_id})")
                raise DuplicateArticleError(payload.title, existing_id)

            article_id = self.allocator.next_article_id()
            values: Dict[str, Any] = {
                "id": article_id,
                "dateAdded": date.today().isoformat(),
                "fileName": make_file_base_name(article_id, payload.title),
                "createdAt": now,
                "updatedAt": now,
            }
            for name, column in SCALAR_COLUMNS.items():
                values[column] = self._to_db(getattr(payload, name))

            columns = ", ".join(values)
            placeholders = ", ".join("?" for _ in values)
            conn.execute(f"INSERT INTO Article ({columns}) VALUES ({placeholders})", tuple(values.values()))

            for kind in EntityKind:
                names = payload.names(kind)
                if names:
                    self.entities.replace_links(kind, article_id, names)

        logger.info(f"Created article {article_id}: {payload.title}")
        return self.get(article_id)

    def update(self, article_id: str, payload: ArticleUpdate) -> Article:
        """
        Applies a partial update. Fields not provided keep their value;
        provided entity lists replace the existing links entirely. The
        update timestamp is refreshed even for an empty payload.

        Raises:
            ArticleNotFoundError: Unknown id.
            StoreFailure: The database rejected the write.
        """
        scalars = payload.provided_scalars()
        entity_lists = payload.provided_entities()

        with self.db.transaction() as conn:
            if not self.exists(article_id):
                raise ArticleNotFoundError(article_id)

            assignments = [f"{SCALAR_COLUMNS[name]} = ?" for name in scalars]
            params = [self._to_db(value) for value in scalars.values()]
            assignments.append("updatedAt = ?")
            params.append(self.now())
            params.append(article_id)
            conn.execute(f"UPDATE Article SET {', '.join(assignments)} WHERE id = ?", tuple(params))

            for kind, names in entity_lists.items():
                self.entities.replace_links(kind, article_id, names)

        logger.info(f"Updated article {article_id} ({', '.join([*scalars, *(k.field_name for k in entity_lists)]) or 'timestamp only'})")
        return self.get(article_id)

    def delete(self, article_id: str) -> bool:
        """
        Deletes the article row; links go with it through ON DELETE CASCADE.
        Stored files are not touched here.

        Returns:
            True if a row was deleted.
        """
        with self.db.transaction() as conn:
            cursor = conn.execute("DELETE FROM Article WHERE id = ?", (article_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted article {article_id}")
        return deleted

    # --- Mapping ---

    @staticmethod
    def _to_db(value: Any) -> Any:
        if isinstance(value, bool):
            return int(value)
        return value

    def _assemble(self, row: sqlite3.Row) -> Article:
        keys = row.keys()
        data: Dict[str, Any] = {
            "id": row["id"],
            "date_added": row["dateAdded"] or "",
            "file_name": row["fileName"],
            "created_at": row["createdAt"] if "createdAt" in keys else None,
            "updated_at": row["updatedAt"] if "updatedAt" in keys else None,
        }
        for name, column in SCALAR_COLUMNS.items():
            value = row[column]
            if value is None and name in OPTIONAL_TEXT_COLUMNS:
                value = ""
            data[name] = value
        data["read"] = bool(data["read"])
        data["favorite"] = bool(data["favorite"])
        data["num_pages"] = data["num_pages"] or 0
        data["rating"] = data["rating"] or 0

        for kind in EntityKind:
            data[kind.field_name] = self.entities.linked(kind, row["id"])
        return Article(**data)
