"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/note_data.py
Version:        1.0.0
Description:    Flattens an article into the placeholder map consumed by the
                note template renderer.
------------------------------------------------------------------------------
"""

from datetime import date
from typing import Dict, List, Optional

from core.models.article import Article, EntityRef
from core.utils.formatting import format_date, star_bar, yes_no


def _join(refs: List[EntityRef]) -> str:
    return ", ".join(ref.name for ref in refs)


def build_note_fields(article: Article, today: Optional[date] = None) -> Dict[str, str]:
    """
    Builds the template fields for one article. Every value is a string;
    missing values become ''.

    Args:
        article: The assembled article.
        today: Date printed as generation date (defaults to today).

    Returns:
        Placeholder name -> text.
    """
    rating = article.rating or 0
    return {
        "id": article.id,
        "display_id": f"{article.id} ⭐" if article.favorite else article.id,
        "title": article.title,
        "author": _join(article.authors),
        "year": str(article.year) if article.year else "",
        "date": article.date,
        "journal": article.journal,
        "doi": article.doi,
        "language": article.language,
        "num_pages": str(article.num_pages) if article.num_pages else "",
        "abstract": article.abstract,
        "conclusion": article.conclusion,
        "keywords": _join(article.keywords),
        "subjects": _join(article.subjects),
        "universities": _join(article.universities),
        "companies": _join(article.companies),
        "tags": _join(article.tags),
        "research_question": article.research_question,
        "methodology": article.methodology,
        "data_used": article.data_used,
        "results": article.results,
        "limitations": article.limitations,
        "first_imp": article.first_imp,
        "notes": article.notes,
        "comment": article.comment,
        "rating": str(rating),
        "rating_stars": star_bar(rating),
        "display_favorite": "⭐ Yes" if article.favorite else "❌ No",
        "display_read": "✅ Yes" if article.read else "❌ No",
        "favorite": yes_no(article.favorite),
        "read": yes_no(article.read),
        "file_name": article.file_name,
        "generated_date": format_date(today or date.today()),
        "date_added": format_date(article.created_at or article.date_added),
        "updated_at": format_date(article.updated_at),
    }
