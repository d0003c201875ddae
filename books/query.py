"""
MongoDB query building for the book search.
"""

import re
from typing import Any, Dict, Optional

from books.models import INT64_MAX, INT64_MIN
from books.storage import BookFilter

_LEADING_INTEGER = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_year(search: str) -> Optional[int]:
    """
    Read a publication year from the start of a search term.

    Parsing stops at the first non-digit, so ``"1965 edition"`` gives 1965.
    A term without leading ASCII digits, one that parses to zero, or one
    too large for a stored integer gives None.
    """
    match = _LEADING_INTEGER.match(search)
    if not match:
        return None
    year = int(match.group(1))
    if not INT64_MIN <= year <= INT64_MAX:
        return None
    return year or None


def build_search_query(criteria: BookFilter) -> Dict[str, Any]:
    """
    Build the filter document for a book search.

    A book matches when its status equals the requested one and its name or
    author contains the term (case-insensitive), or its year equals the term.
    The term is escaped so it is always matched literally.
    """
    pattern = re.escape(criteria.search)
    clauses = [
        {"bookName": {"$regex": pattern, "$options": "i"}},
        {"authorName": {"$regex": pattern, "$options": "i"}},
    ]

    year = parse_year(criteria.search)
    if year is not None:
        clauses.append({"publishedYear": year})

    return {"$or": clauses, "status": criteria.status.value}
