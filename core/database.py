"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/database.py
Version:        1.0.0
Description:    Central database manager for SQLite persistence. Handles
                schema initialization, additive migrations, transactions
                and library-wide maintenance (statistics, VACUUM).
------------------------------------------------------------------------------
"""

import sqlite3
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from core.exceptions import StoreFailure
from core.logger import get_logger
from core.models.types import EntityKind

logger = get_logger("db")

ARTICLE_COUNTER = "article"

# (table, column, DDL type) applied when missing from an older database
ADDITIVE_COLUMNS = [
    ("UserSettings", "storagePath", "TEXT"),
    ("UserSettings", "externalStoragePath", "TEXT"),
    ("UserSettings", "useExternalStorage", "INTEGER NOT NULL DEFAULT 0"),
    ("Article", "updatedAt", "DATETIME"),
    ("Article", "createdAt", "DATETIME"),
]


class DatabaseManager:
    """
    Owns the single SQLite connection of the process and the schema.
    Repositories share it through BaseRepository.
    """

    def __init__(self, db_path: str = "articles.db") -> None:
        """
        Opens the database and brings the schema up to date.

        Args:
            db_path: Path to the SQLite database file or ':memory:'.

        Raises:
            StoreFailure: The database could not be opened or initialized.
        """
        self.db_path: str = str(db_path)
        self.connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._depth = 0
        self._connect()
        try:
            self.init_db()
        except StoreFailure as e:
            logger.critical(f"Failed to initialize schema at {self.db_path}: {e}")
            self.close()
            raise StoreFailure(f"Failed to initialize database: {e}") from e

    def _connect(self) -> None:
        """
        Establishes the connection and configures PRAGMAs.
        Transactions are managed explicitly, so the driver runs in autocommit mode.
        """
        try:
            # Workers (QThread) share the connection; access is serialized by _lock
            self.connection = sqlite3.connect(self.db_path, check_same_thread=False, isolation_level=None)
            self.connection.row_factory = sqlite3.Row
            self.connection.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self.connection.execute("PRAGMA journal_mode = WAL")
            logger.info(f"Connected to database at {self.db_path}")
        except sqlite3.Error as e:
            logger.critical(f"Failed to connect to database: {e}")
            raise StoreFailure(f"Failed to open database {self.db_path}: {e}") from e

    def init_db(self) -> None:
        """
        Creates all tables and indexes (idempotent), applies migrations and
        seeds the article id counter.
        """
        create_article_table = """
        CREATE TABLE IF NOT EXISTS Article (
            id TEXT NOT NULL PRIMARY KEY,
            title TEXT NOT NULL,
            abstract TEXT NOT NULL,
            conclusion TEXT,
            year INTEGER NOT NULL,
            date TEXT NOT NULL,
            dateAdded TEXT NOT NULL,
            journal TEXT,
            doi TEXT,
            language TEXT NOT NULL DEFAULT 'English',
            numPages INTEGER NOT NULL DEFAULT 0,
            researchQuestion TEXT,
            methodology TEXT,
            dataUsed TEXT,
            results TEXT,
            limitations TEXT,
            firstImp TEXT,
            notes TEXT,
            comment TEXT,
            rating INTEGER NOT NULL DEFAULT 0,
            read BOOLEAN NOT NULL DEFAULT 0,
            favorite BOOLEAN NOT NULL DEFAULT 0,
            fileName TEXT NOT NULL,
            createdAt DATETIME DEFAULT CURRENT_TIMESTAMP,
            updatedAt DATETIME
        );
        """

        create_settings_table = """
        CREATE TABLE IF NOT EXISTS UserSettings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            theme TEXT NOT NULL DEFAULT 'light',
            language TEXT NOT NULL DEFAULT 'English',
            pdfViewer TEXT NOT NULL DEFAULT 'system',
            fontSize INTEGER NOT NULL DEFAULT 14,
            createdAt DATETIME DEFAULT CURRENT_TIMESTAMP,
            updatedAt DATETIME
        );
        """

        create_counter_table = """
        CREATE TABLE IF NOT EXISTS IdCounter (
            name TEXT PRIMARY KEY,
            nextId INTEGER NOT NULL
        );
        """

        indexes = [
            "CREATE INDEX IF NOT EXISTS idx_article_year ON Article(year)",
            "CREATE INDEX IF NOT EXISTS idx_article_read ON Article(read)",
            "CREATE INDEX IF NOT EXISTS idx_article_favorite ON Article(favorite)",
            "CREATE INDEX IF NOT EXISTS idx_article_rating ON Article(rating)",
        ]

        if not self.connection:
            return

        with self.transaction():
            self.connection.execute(create_article_table)
            for kind in EntityKind:
                self.connection.execute(self._entity_table_sql(kind))
                self.connection.execute(self._junction_table_sql(kind))
            self.connection.execute(create_settings_table)
            self.connection.execute(create_counter_table)
            for index_sql in indexes:
                self.connection.execute(index_sql)

        self._migrate_schema()

        with self.transaction():
            self.seed_article_counter()

    @staticmethod
    def _entity_table_sql(kind: EntityKind) -> str:
        return f"""
        CREATE TABLE IF NOT EXISTS {kind.table} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL
        );
        """

    @staticmethod
    def _junction_table_sql(kind: EntityKind) -> str:
        # Entities outlive articles: only the article side cascades
        return f"""
        CREATE TABLE IF NOT EXISTS {kind.junction_table} (
            articleId TEXT NOT NULL,
            {kind.junction_column} INTEGER NOT NULL,
            PRIMARY KEY (articleId, {kind.junction_column}),
            FOREIGN KEY (articleId) REFERENCES Article(id) ON DELETE CASCADE ON UPDATE CASCADE,
            FOREIGN KEY ({kind.junction_column}) REFERENCES {kind.table}(id)
        );
        """

    def _migrate_schema(self) -> None:
        """
        Adds columns introduced after the first release. A failing step is
        logged and skipped; the application keeps running on the old shape.
        """
        if not self.connection:
            return

        for table, column, ddl in ADDITIVE_COLUMNS:
            if column in self.table_columns(table):
                continue
            logger.info(f"Migrating: adding '{column}' to {table}")
            try:
                with self.transaction():
                    self.connection.execute(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}")
            except StoreFailure as e:
                logger.warning(f"Migration of {table}.{column} skipped: {e}")

    def table_columns(self, table: str) -> List[str]:
        """Column names of a table, empty if the table does not exist."""
        if not self.connection:
            return []
        with self._lock:
            cursor = self.connection.execute(f"PRAGMA table_info({table})")
            return [row[1] for row in cursor.fetchall()]

    def seed_article_counter(self) -> None:
        """
        Creates the article id counter if missing, continuing after the
        highest numeric id already stored. Must run inside a transaction.
        """
        row = self.connection.execute(
            "SELECT nextId FROM IdCounter WHERE name = ?", (ARTICLE_COUNTER,)
        ).fetchone()
        if row is not None:
            return
        max_row = self.connection.execute("SELECT MAX(CAST(id AS INTEGER)) FROM Article").fetchone()
        next_id = (max_row[0] or 0) + 1
        self.connection.execute(
            "INSERT INTO IdCounter (name, nextId) VALUES (?, ?)", (ARTICLE_COUNTER, next_id)
        )
        logger.debug(f"Seeded article id counter at {next_id}")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Runs the block inside one write transaction (BEGIN IMMEDIATE).
        Nested use joins the outermost transaction; only the outermost block
        commits or rolls back.

        Raises:
            StoreFailure: Any sqlite3 error raised inside the block, after rollback.
        """
        if not self.connection:
            raise StoreFailure("Database connection is closed")

        with self._lock:
            outermost = self._depth == 0
            if outermost:
                try:
                    self.connection.execute("BEGIN IMMEDIATE")
                except sqlite3.Error as e:
                    raise StoreFailure(f"Could not begin transaction: {e}") from e
            self._depth += 1
            try:
                yield self.connection
            except BaseException as e:
                self._depth -= 1
                if outermost and self.connection.in_transaction:
                    self.connection.execute("ROLLBACK")
                if isinstance(e, sqlite3.Error):
                    raise StoreFailure(str(e)) from e
                raise
            else:
                self._depth -= 1
                if outermost:
                    try:
                        self.connection.execute("COMMIT")
                    except sqlite3.Error as e:
                        if self.connection.in_transaction:
                            self.connection.execute("ROLLBACK")
                        raise StoreFailure(f"Commit failed: {e}") from e

    def fetch_one(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        if not self.connection:
            raise StoreFailure("Database connection is closed")
        try:
            with self._lock:
                return self.connection.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise StoreFailure(str(e)) from e

    def fetch_all(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        if not self.connection:
            raise StoreFailure("Database connection is closed")
        try:
            with self._lock:
                return self.connection.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreFailure(str(e)) from e

    def get_statistics(self) -> Dict[str, Any]:
        """
        Library-wide counters.

        Returns:
            Counts of articles, of each entity vocabulary, of read and
            favourite articles, and the average rating (0.0 when empty).
        """
        stats: Dict[str, Any] = {
            "articles": self.fetch_one("SELECT COUNT(*) FROM Article")[0],
        }
        for kind in EntityKind:
            stats[kind.field_name] = self.fetch_one(f"SELECT COUNT(*) FROM {kind.table}")[0]
        stats["read"] = self.fetch_one("SELECT COUNT(*) FROM Article WHERE read = 1")[0]
        stats["favorites"] = self.fetch_one("SELECT COUNT(*) FROM Article WHERE favorite = 1")[0]
        avg = self.fetch_one("SELECT AVG(rating) FROM Article")[0]
        stats["average_rating"] = float(avg or 0)
        return stats

    def optimize(self) -> None:
        """Rebuilds the database file (VACUUM)."""
        if not self.connection:
            raise StoreFailure("Database connection is closed")
        try:
            with self._lock:
                self.connection.execute("VACUUM")
        except sqlite3.Error as e:
            logger.error(f"Error optimizing database: {e}")
            raise StoreFailure(str(e)) from e
        logger.info("Database optimized")

    def checkpoint(self) -> None:
        """Flushes the WAL into the main database file before it is copied."""
        if not self.connection or self.db_path == ":memory:":
            return
        try:
            with self._lock:
                self.connection.execute("PRAGMA wal_checkpoint(TRUNCATE)")
        except sqlite3.Error as e:
            logger.warning(f"WAL checkpoint failed: {e}")

    def close(self) -> None:
        """Safely closes the database connection."""
        if self.connection:
            self.connection.close()
            self.connection = None
