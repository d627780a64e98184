import os
import sqlite3

# Run Qt headless so the qapp fixture works without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QStandardPaths

from core.database import DatabaseManager
from core.library import ArticleLibrary
from core.models.article import ArticleCreate
from core.paths import RunMode, StoragePaths
from core.repositories import ArticleRepository, EntityRepository, IdAllocator, SettingsRepository
from core.vault import ArticleVault


@pytest.fixture(autouse=True, scope="session")
def isolated_standard_paths():
    """Keeps QStandardPaths lookups away from the real user directories."""
    QStandardPaths.setTestModeEnabled(True)
    yield
    QStandardPaths.setTestModeEnabled(False)


@pytest.fixture
def memory_db():
    db = DatabaseManager(":memory:")
    yield db
    db.close()


@pytest.fixture
def entity_repo(memory_db):
    return EntityRepository(memory_db)


@pytest.fixture
def allocator(memory_db):
    return IdAllocator(memory_db)


@pytest.fixture
def article_repo(memory_db, entity_repo, allocator):
    return ArticleRepository(memory_db, entities=entity_repo, allocator=allocator)


@pytest.fixture
def settings_repo(memory_db):
    return SettingsRepository(memory_db)


@pytest.fixture
def storage_paths(tmp_path):
    paths = StoragePaths(RunMode.DEV, cwd=tmp_path / "app")
    paths.ensure_directories()
    return paths


@pytest.fixture
def vault(storage_paths, settings_repo, article_repo):
    return ArticleVault(storage_paths, settings_repo, article_repo)


@pytest.fixture
def library(storage_paths):
    lib = ArticleLibrary.open(storage_paths)
    yield lib
    lib.close()


@pytest.fixture
def make_payload():
    """Factory for valid create payloads; keyword arguments override fields."""
    def _make(**overrides) -> ArticleCreate:
        data = {
            "title": "Foo Bar",
            "abstract": "An abstract.",
            "year": 2023,
            "date": "2023-05-01",
            "authors": ["A. Doe"],
        }
        data.update(overrides)
        return ArticleCreate(**data)
    return _make


@pytest.fixture
def insert_article_row():
    """Writes a bare Article row, bypassing the repositories."""
    def _insert(conn: sqlite3.Connection, article_id: str, title: str = "Raw") -> None:
        conn.execute(
            "INSERT INTO Article (id, title, abstract, year, date, dateAdded, fileName) "
            "VALUES (?, ?, 'x', 2020, '2020-01-01', '2020-01-01', ?)",
            (article_id, title, f"{article_id} - {title}"),
        )
    return _insert


def pytest_addoption(parser):
    parser.addoption(
        "--level2", action="store_true", default=False, help="run level 2 intensive integration tests"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--level2"):
        # --level2 given in cli: do not skip
        return
    skip_level2 = pytest.mark.skip(reason="need --level2 option to run")
    for item in items:
        if "level2" in item.keywords:
            item.add_marker(skip_level2)
