"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/repositories/id_allocator.py
Version:        1.0.0
Description:    Allocates zero-padded, strictly increasing article ids from
                a persistent counter. Ids are never reused, even after the
                article holding the highest id is deleted.
------------------------------------------------------------------------------
"""

from core.database import ARTICLE_COUNTER
from core.logger import get_logger
from .base import BaseRepository

logger = get_logger("repo")

ID_WIDTH = 4


class IdAllocator(BaseRepository):
    """
    Hands out article ids ("0001", "0002", ...). Widths grow naturally
    past 9999 ("10000").
    """

    def next_article_id(self) -> str:
        """
        Consumes and returns the next id. Joins the caller's transaction when
        one is open, so a rolled back create does not burn the id.

        Raises:
            StoreFailure: The counter could not be read or written.
        """
        with self.db.transaction() as conn:
            self.db.seed_article_counter()
            row = conn.execute(
                "SELECT nextId FROM IdCounter WHERE name = ?", (ARTICLE_COUNTER,)
            ).fetchone()
            value = row["nextId"]
            conn.execute(
                "UPDATE IdCounter SET nextId = ? WHERE name = ?", (value + 1, ARTICLE_COUNTER)
            )
        article_id = str(value).zfill(ID_WIDTH)
        logger.debug(f"Allocated article id {article_id}")
        return article_id

    def peek(self) -> str:
        """Next id that would be allocated, without consuming it."""
        row = self.db.fetch_one("SELECT nextId FROM IdCounter WHERE name = ?", (ARTICLE_COUNTER,))
        if row is not None:
            return str(row["nextId"]).zfill(ID_WIDTH)
        max_row = self.db.fetch_one("SELECT MAX(CAST(id AS INTEGER)) FROM Article")
        return str((max_row[0] or 0) + 1).zfill(ID_WIDTH)
