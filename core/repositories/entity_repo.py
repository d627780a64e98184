"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/repositories/entity_repo.py
Version:        1.0.0
Description:    Resolves classification names (authors, keywords, subjects,
                tags, universities, companies) to shared entity rows and
                maintains the article links. Entities are never deleted.
------------------------------------------------------------------------------
"""

import sqlite3
from typing import Iterable, List, Optional

from core.logger import get_logger, log_sql_query
from core.models.article import EntityRef
from core.models.types import EntityKind
from .base import BaseRepository

logger = get_logger("repo")


class EntityRepository(BaseRepository):
    """
    Get-or-create access to the six entity vocabularies. Name matching is
    exact and case-sensitive: "Smith" and "smith" are two authors.
    """

    def find(self, kind: EntityKind, name: str) -> Optional[EntityRef]:
        row = self.db.fetch_one(f"SELECT id, name FROM {kind.table} WHERE name = ?", (name,))
        if row is None:
            return None
        return EntityRef(id=row["id"], name=row["name"])

    def get_or_create(self, kind: EntityKind, name: str) -> EntityRef:
        """
        Returns the entity with exactly this name, creating it if absent.

        Args:
            kind: Vocabulary to resolve in.
            name: Entity name, stored verbatim.

        Returns:
            The existing or newly created entity.
        """
        with self.db.transaction() as conn:
            existing = self.find(kind, name)
            if existing is not None:
                return existing
            try:
                cursor = conn.execute(f"INSERT INTO {kind.table} (name) VALUES (?)", (name,))
                logger.debug(f"Created {kind.value} '{name}' (id {cursor.lastrowid})")
                return EntityRef(id=cursor.lastrowid, name=name)
            except sqlite3.IntegrityError:
                # Created concurrently between lookup and insert
                existing = self.find(kind, name)
                if existing is None:
                    raise
                return existing

    def link(self, kind: EntityKind, article_id: str, entity_id: int) -> None:
        """Links an entity to an article; linking twice is a no-op."""
        sql = f"INSERT OR IGNORE INTO {kind.junction_table} (articleId, {kind.junction_column}) VALUES (?, ?)"
        with self.db.transaction() as conn:
            conn.execute(sql, (article_id, entity_id))

    def replace_links(self, kind: EntityKind, article_id: str, names: Iterable[str]) -> List[EntityRef]:
        """
        Replaces all links of one kind for an article.

        Whitespace-only names are skipped; repeated names collapse into one
        link. An empty list removes every link of that kind.

        Returns:
            The entities now linked, in the order first named.
        """
        linked: List[EntityRef] = []
        seen = set()
        with self.db.transaction() as conn:
            conn.execute(f"DELETE FROM {kind.junction_table} WHERE articleId = ?", (article_id,))
            for name in names:
                if not name or not name.strip() or name in seen:
                    continue
                seen.add(name)
                ref = self.get_or_create(kind, name)
                self.link(kind, article_id, ref.id)
                linked.append(ref)
        return linked

    def linked(self, kind: EntityKind, article_id: str) -> List[EntityRef]:
        """Entities of one kind linked to an article, ordered by entity id."""
        sql = f"""
            SELECT e.id, e.name FROM {kind.table} e
            JOIN {kind.junction_table} j ON j.{kind.junction_column} = e.id
            WHERE j.articleId = ?
            ORDER BY e.id
        """
        rows = self.db.fetch_all(sql, (article_id,))
        log_sql_query(sql, (article_id,), len(rows))
        return [EntityRef(id=row["id"], name=row["name"]) for row in rows]

    def list_names(self, kind: EntityKind) -> List[str]:
        """All known names of one vocabulary, alphabetically (autocomplete source)."""
        rows = self.db.fetch_all(f"SELECT name FROM {kind.table} ORDER BY name")
        return [row["name"] for row in rows]
