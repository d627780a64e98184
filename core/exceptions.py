"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/exceptions.py
Version:        1.0.0
Description:    Error taxonomy shared by the repositories, the vault and the
                library facade. Mirror failures and per-item bulk failures
                are never raised; they are logged or reported instead.
------------------------------------------------------------------------------
"""

from typing import Optional


class ArticleShelfError(Exception):
    """Base class for all ArticleShelf errors."""
    pass


class ArticleValidationError(ArticleShelfError):
    """Raised when a request is rejected before anything is written."""
    pass


class DuplicateArticleError(ArticleValidationError):
    """Raised when an article with the same title and authors already exists."""

    def __init__(self, title: str, existing_id: Optional[str] = None) -> None:
        self.title = title
        self.existing_id = existing_id
        msg = "Article already exists with same title and authors"
        if existing_id:
            msg += f" (id {existing_id})"
        super().__init__(msg)


class ArticleNotFoundError(ArticleShelfError):
    """Raised when an operation targets an unknown article id."""

    def __init__(self, article_id: str, message: Optional[str] = None) -> None:
        self.article_id = article_id
        super().__init__(message or f"Article {article_id} not found")


class DocumentNotFoundError(ArticleNotFoundError):
    """Raised when no file of the requested kind exists for an article."""

    def __init__(self, article_id: str, kind: str) -> None:
        self.kind = kind
        super().__init__(article_id, f"{kind.upper()} not found for article {article_id}")


class StoreFailure(ArticleShelfError):
    """
    Raised when the relational store or the primary storage root fails.
    The underlying error is kept as __cause__ and its text in the message.
    """
    pass
