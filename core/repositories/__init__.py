"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/repositories/__init__.py
Version:        1.0.0
Description:    Package initializer for core repositories. Exports the
                article, entity, settings and id-allocation repositories.
------------------------------------------------------------------------------
"""

from .id_allocator import IdAllocator
from .entity_repo import EntityRepository
from .settings_repo import SettingsRepository
from .article_repo import ArticleRepository
