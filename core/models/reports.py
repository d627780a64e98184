"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/models/reports.py
Version:        1.0.0
Description:    Result containers for bulk file operations. Bulk operations
                process every item they can and list failures here instead
                of aborting on the first error.
------------------------------------------------------------------------------
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List


@dataclass
class MigrationReport:
    """
    Outcome of renaming legacy '{id}.ext' files to the '{id} - {title}.ext' scheme.
    """

    total_articles: int = 0
    migrated_pdfs: int = 0
    migrated_notes: int = 0
    per_article: Dict[str, int] = field(default_factory=dict)  # article id -> files renamed
    errors: List[str] = field(default_factory=list)

    @property
    def migrated_total(self) -> int:
        return self.migrated_pdfs + self.migrated_notes

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass
class CopyReport:
    """
    Outcome of a directory tree copy (external mirror seeding or root relocation).
    """

    source: Path
    destination: Path
    copied: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def copied_count(self) -> int:
        return len(self.copied)

    @property
    def success(self) -> bool:
        return not self.errors
