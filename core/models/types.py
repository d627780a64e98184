"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/models/types.py
Version:        1.0.0
Description:    Centralized enumeration and type definitions.
------------------------------------------------------------------------------
"""

from enum import Enum


class EntityKind(str, Enum):
    """The six shared classification vocabularies an article links to."""
    AUTHOR = "author"
    KEYWORD = "keyword"
    SUBJECT = "subject"
    TAG = "tag"
    UNIVERSITY = "university"
    COMPANY = "company"

    @property
    def table(self) -> str:
        """Entity table name, e.g. 'Author'."""
        return self.value.capitalize()

    @property
    def junction_table(self) -> str:
        """Junction table name, e.g. 'ArticleAuthor'."""
        return f"Article{self.table}"

    @property
    def junction_column(self) -> str:
        """Entity column inside the junction table, e.g. 'authorId'."""
        return f"{self.value}Id"

    @property
    def field_name(self) -> str:
        """Payload / aggregate attribute holding the names, e.g. 'authors'."""
        return _FIELD_NAMES[self]


_FIELD_NAMES = {
    EntityKind.AUTHOR: "authors",
    EntityKind.KEYWORD: "keywords",
    EntityKind.SUBJECT: "subjects",
    EntityKind.TAG: "tags",
    EntityKind.UNIVERSITY: "universities",
    EntityKind.COMPANY: "companies",
}


class DocumentKind(str, Enum):
    """Files that can be attached to an article."""
    PDF = "pdf"
    NOTE = "note"

    @property
    def subdir(self) -> str:
        return "pdfs" if self is DocumentKind.PDF else "notes"

    @property
    def extension(self) -> str:
        return ".pdf" if self is DocumentKind.PDF else ".docx"
