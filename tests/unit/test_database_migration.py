import logging
import sqlite3

import pytest

import core.database
from core.database import DatabaseManager

OLD_SCHEMA = """
CREATE TABLE Article (
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
    fileName TEXT NOT NULL
);
CREATE TABLE UserSettings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    theme TEXT NOT NULL DEFAULT 'light',
    language TEXT NOT NULL DEFAULT 'en',
    pdfViewer TEXT NOT NULL DEFAULT 'system',
    fontSize INTEGER NOT NULL DEFAULT 14,
    createdAt DATETIME DEFAULT CURRENT_TIMESTAMP,
    updatedAt DATETIME
);
INSERT INTO Article (id, title, abstract, year, date, dateAdded, fileName)
VALUES ('0007', 'Old paper', 'x', 2019, '2019-01-01', '2020-01-01', '0007');
INSERT INTO UserSettings (theme) VALUES ('dark');
"""


@pytest.fixture
def old_db_path(tmp_path):
    path = tmp_path / "articles.db"
    conn = sqlite3.connect(str(path))
    conn.executescript(OLD_SCHEMA)
    conn.commit()
    conn.close()
    return path


def test_adds_missing_columns(old_db_path):
    db = DatabaseManager(str(old_db_path))
    try:
        settings_cols = db.table_columns("UserSettings")
        assert {"storagePath", "externalStoragePath", "useExternalStorage"} <= set(settings_cols)
        assert {"createdAt", "updatedAt"} <= set(db.table_columns("Article"))
    finally:
        db.close()


def test_existing_data_survives_and_counter_continues(old_db_path):
    db = DatabaseManager(str(old_db_path))
    try:
        row = db.fetch_one("SELECT title FROM Article WHERE id = '0007'")
        assert row["title"] == "Old paper"
        counter = db.fetch_one("SELECT nextId FROM IdCounter WHERE name = 'article'")
        assert counter["nextId"] == 8
        settings = db.fetch_one("SELECT theme, useExternalStorage FROM UserSettings")
        assert settings["theme"] == "dark"
        assert settings["useExternalStorage"] == 0
    finally:
        db.close()


def test_migration_is_repeatable(old_db_path):
    DatabaseManager(str(old_db_path)).close()
    db = DatabaseManager(str(old_db_path))
    try:
        assert db.table_columns("Article").count("updatedAt") == 1
    finally:
        db.close()


def test_failing_migration_is_skipped(monkeypatch, caplog):
    monkeypatch.setattr(
        core.database, "ADDITIVE_COLUMNS",
        core.database.ADDITIVE_COLUMNS + [("NoSuchTable", "extra", "TEXT")],
    )
    caplog.set_level(logging.WARNING, logger="articleshelf")

    db = DatabaseManager(":memory:")
    try:
        assert "storagePath" in db.table_columns("UserSettings")
        assert any("NoSuchTable.extra skipped" in rec.getMessage() for rec in caplog.records)
    finally:
        db.close()
