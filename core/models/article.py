"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/models/article.py
Version:        1.0.0
Description:    Domain models for the article aggregate and its request
                payloads. The update payload tracks which fields were
                actually provided so that "not provided" and "cleared" stay
                distinguishable.
------------------------------------------------------------------------------
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.models.types import EntityKind


# Optional free-text columns: snake_case attribute -> Article table column
OPTIONAL_TEXT_COLUMNS: Dict[str, str] = {
    "conclusion": "conclusion",
    "journal": "journal",
    "doi": "doi",
    "research_question": "researchQuestion",
    "methodology": "methodology",
    "data_used": "dataUsed",
    "results": "results",
    "limitations": "limitations",
    "first_imp": "firstImp",
    "notes": "notes",
    "comment": "comment",
}

# Every scalar an update may touch
SCALAR_COLUMNS: Dict[str, str] = {
    "title": "title",
    "abstract": "abstract",
    "year": "year",
    "date": "date",
    "language": "language",
    "num_pages": "numPages",
    "rating": "rating",
    "read": "read",
    "favorite": "favorite",
    **OPTIONAL_TEXT_COLUMNS,
}

REQUIRED_SCALARS = ("title", "abstract", "year", "date", "language", "rating", "read", "favorite", "num_pages")


class EntityRef(BaseModel):
    """A classification entity (author, keyword, ...) as linked to an article."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class Article(BaseModel):
    """
    The article aggregate: the Article row plus its six linked
    classification collections.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    title: str
    abstract: str
    year: int
    date: str
    date_added: str = ""
    language: str = "English"
    file_name: str

    conclusion: str = ""
    journal: str = ""
    doi: str = ""
    num_pages: int = 0
    research_question: str = ""
    methodology: str = ""
    data_used: str = ""
    results: str = ""
    limitations: str = ""
    first_imp: str = ""
    notes: str = ""
    comment: str = ""

    rating: int = Field(0, ge=0, le=5)
    read: bool = False
    favorite: bool = False

    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    authors: List[EntityRef] = Field(default_factory=list)
    keywords: List[EntityRef] = Field(default_factory=list)
    subjects: List[EntityRef] = Field(default_factory=list)
    tags: List[EntityRef] = Field(default_factory=list)
    universities: List[EntityRef] = Field(default_factory=list)
    companies: List[EntityRef] = Field(default_factory=list)

    def entities(self, kind: EntityKind) -> List[EntityRef]:
        """Linked entities of one kind."""
        return getattr(self, kind.field_name)

    def names(self, kind: EntityKind) -> List[str]:
        """Linked entity names of one kind."""
        return [ref.name for ref in self.entities(kind)]


class ArticleCreate(BaseModel):
    """Payload of a create request (the submitted form)."""
    model_config = ConfigDict(extra="forbid")

    title: str
    abstract: str
    year: int
    date: str
    language: str = "English"

    conclusion: str = ""
    journal: str = ""
    doi: str = ""
    num_pages: int = Field(0, ge=0)
    research_question: str = ""
    methodology: str = ""
    data_used: str = ""
    results: str = ""
    limitations: str = ""
    first_imp: str = ""
    notes: str = ""
    comment: str = ""

    rating: int = Field(0, ge=0, le=5)
    read: bool = False
    favorite: bool = False

    authors: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    subjects: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    universities: List[str] = Field(default_factory=list)
    companies: List[str] = Field(default_factory=list)

    @field_validator("title", "abstract", "date", "language")
    @classmethod
    def _not_blank(cls, value: str, info) -> str:
        if not value or not value.strip():
            raise ValueError(f"{info.field_name} is required")
        return value

    @field_validator(*OPTIONAL_TEXT_COLUMNS.keys(), mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def names(self, kind: EntityKind) -> List[str]:
        return getattr(self, kind.field_name)


class ArticleUpdate(BaseModel):
    """
    Partial update payload. A field takes part in the update only if it was
    passed explicitly (see ``model_fields_set``); passing ``None`` for an
    optional text field clears it, passing ``[]`` for an entity list removes
    all links of that kind.
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    abstract: Optional[str] = None
    year: Optional[int] = None
    date: Optional[str] = None
    language: Optional[str] = None

    conclusion: Optional[str] = None
    journal: Optional[str] = None
    doi: Optional[str] = None
    num_pages: Optional[int] = Field(None, ge=0)
    research_question: Optional[str] = None
    methodology: Optional[str] = None
    data_used: Optional[str] = None
    results: Optional[str] = None
    limitations: Optional[str] = None
    first_imp: Optional[str] = None
    notes: Optional[str] = None
    comment: Optional[str] = None

    rating: Optional[int] = Field(None, ge=0, le=5)
    read: Optional[bool] = None
    favorite: Optional[bool] = None

    authors: Optional[List[str]] = None
    keywords: Optional[List[str]] = None
    subjects: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    universities: Optional[List[str]] = None
    companies: Optional[List[str]] = None

    @model_validator(mode="after")
    def _required_not_cleared(self) -> "ArticleUpdate":
        for name in REQUIRED_SCALARS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        for name in ("title", "abstract", "date", "language"):
            value = getattr(self, name)
            if name in self.model_fields_set and not value.strip():
                raise ValueError(f"{name} is required")
        for kind in EntityKind:
            if kind.field_name in self.model_fields_set and getattr(self, kind.field_name) is None:
                raise ValueError(f"{kind.field_name} must be a list")
        return self

    def provided_scalars(self) -> Dict[str, Any]:
        """Provided scalar fields, with cleared optional text as ''."""
        values: Dict[str, Any] = {}
        for name in SCALAR_COLUMNS:
            if name in self.model_fields_set:
                value = getattr(self, name)
                if value is None and name in OPTIONAL_TEXT_COLUMNS:
                    value = ""
                values[name] = value
        return values

    def provided_entities(self) -> Dict[EntityKind, List[str]]:
        """Provided entity lists keyed by kind."""
        return {
            kind: getattr(self, kind.field_name)
            for kind in EntityKind
            if kind.field_name in self.model_fields_set
        }
