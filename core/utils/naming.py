"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/utils/naming.py
Version:        1.0.0
Description:    File-base-name rules for stored documents. The current scheme
                is "{id} - {title}"; the legacy scheme is the bare id and is
                still recognized on lookup.
------------------------------------------------------------------------------
"""

import re
from typing import Callable, List, Optional

# Characters not allowed in Windows file names
FORBIDDEN_CHARS = re.compile(r'[<>:"/\\|?*]')
MAX_BASE_NAME_LENGTH = 200
SEPARATOR = " - "


def sanitize_title(title: str) -> str:
    """
    Makes a title usable inside a file name.
    Forbidden characters become '-', underscores become spaces.
    """
    clean = FORBIDDEN_CHARS.sub("-", title or "")
    return clean.replace("_", " ").strip()


def make_file_base_name(article_id: str, title: str) -> str:
    """
    Builds the current-scheme base name (without extension).

    Args:
        article_id: Zero-padded article id, e.g. '0042'.
        title: Article title, sanitized here.

    Returns:
        "{id} - {title}", cut to MAX_BASE_NAME_LENGTH characters.
    """
    base_name = f"{article_id}{SEPARATOR}{sanitize_title(title)}"
    if len(base_name) > MAX_BASE_NAME_LENGTH:
        return base_name[:MAX_BASE_NAME_LENGTH].strip()
    return base_name


def legacy_base_name(article_id: str) -> str:
    return article_id


# A candidate yields a base name or None when it does not apply (e.g. no title)
Candidate = Callable[[str, Optional[str]], Optional[str]]

CANDIDATES: List[Candidate] = [
    lambda article_id, title: make_file_base_name(article_id, title) if title else None,
    lambda article_id, title: legacy_base_name(article_id),
]


def candidate_names(article_id: str, title: Optional[str]) -> List[str]:
    """
    Base names to try for an article, current scheme first.
    Duplicates are dropped while keeping the order.
    """
    names: List[str] = []
    for candidate in CANDIDATES:
        name = candidate(article_id, title)
        if name and name not in names:
            names.append(name)
    return names


def is_titled_name(file_name: str, article_id: str, extension: str) -> bool:
    """
    True for "{id} - <any title>{extension}", e.g. a file stored before
    the title was edited. The separator keeps '0001' apart from '00010'.
    """
    prefix = f"{article_id}{SEPARATOR}"
    return (
        file_name.startswith(prefix)
        and file_name.endswith(extension)
        and len(file_name) > len(prefix) + len(extension)
    )
