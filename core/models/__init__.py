"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/models/__init__.py
Version:        1.0.0
Description:    Package initializer for core data models. Exports the article
                aggregate, request payloads, settings and reports.
------------------------------------------------------------------------------
"""

from .types import DocumentKind, EntityKind
from .article import Article, ArticleCreate, ArticleUpdate, EntityRef
from .settings import UserSettings, UserSettingsUpdate
from .reports import CopyReport, MigrationReport
