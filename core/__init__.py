"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/__init__.py
Version:        1.0.0
Description:    Core logic package for ArticleShelf. Contains persistence,
                document storage and storage administration modules.
------------------------------------------------------------------------------
"""
