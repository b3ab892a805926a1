"""
Content processing helpers.

Pure functions over post, page and tag text. Nothing in this package touches
the database or the network, which keeps it directly unit-testable.

Modules:
- sanitization: HTML/text/slug/email/URL/filename cleaning
- analysis: reading time, excerpts, keyword extraction and tag auto-linking
- similarity: edit-distance scoring used to detect duplicate tags
- feeds: RSS 2.0 rendering
"""

from .analysis import derive_excerpt, extract_keywords, link_tags_in_content, reading_time
from .sanitization import (
    sanitize_email,
    sanitize_filename,
    sanitize_html,
    sanitize_slug,
    sanitize_text,
    sanitize_url,
    slugify,
    strip_tags,
)
from .similarity import find_duplicate_pairs, levenshtein, name_similarity

__all__ = [
    "derive_excerpt",
    "extract_keywords",
    "find_duplicate_pairs",
    "levenshtein",
    "link_tags_in_content",
    "name_similarity",
    "reading_time",
    "sanitize_email",
    "sanitize_filename",
    "sanitize_html",
    "sanitize_slug",
    "sanitize_text",
    "sanitize_url",
    "slugify",
    "strip_tags",
]
