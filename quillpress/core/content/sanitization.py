"""
Sanitization of user-supplied content.

Blog content arrives as HTML from a rich-text editor, while titles, names,
excerpts and slugs must be plain text. These helpers strip the constructs that
allow script execution from HTML and normalize the plain-text fields.

The HTML cleaner is a pattern-based filter: it removes script elements, inline
event handlers, ``javascript:`` URLs, non-image ``data:`` sources and
interactive/embedded elements, and leaves all other markup untouched.
"""

from __future__ import annotations

import os
import re
from typing import Optional
from urllib.parse import urlparse

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_QUOTED_HANDLER_RE = re.compile(r"\son\w+\s*=\s*[\"'][^\"']*[\"']", re.IGNORECASE)
_BARE_HANDLER_RE = re.compile(r"\son\w+\s*=\s*[^\s>]*", re.IGNORECASE)
_JS_HREF_RE = re.compile(r"href\s*=\s*[\"']javascript:[^\"']*[\"']", re.IGNORECASE)
_JS_SRC_RE = re.compile(r"src\s*=\s*[\"']javascript:[^\"']*[\"']", re.IGNORECASE)
_DATA_SRC_RE = re.compile(r"src\s*=\s*[\"']data:(?!image/)[^\"']*[\"']", re.IGNORECASE)

DANGEROUS_TAGS = ("iframe", "object", "embed", "form", "input", "button", "textarea", "select")
_DANGEROUS_TAG_RES = [
    re.compile(rf"<{tag}\b[^<]*(?:(?!</{tag}>)<[^<]*)*</{tag}>", re.IGNORECASE) for tag in DANGEROUS_TAGS
]

_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&(?:amp|lt|gt|quot|#39|nbsp);")
_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&nbsp;": " ",
}
_WHITESPACE_RE = re.compile(r"\s+")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

SLUG_MAX_LENGTH = 200
FILENAME_STEM_MAX_LENGTH = 50


def sanitize_html(html: Optional[str]) -> str:
    """Remove executable and embedded constructs from rich HTML content."""
    if not html:
        return ""

    sanitized = _SCRIPT_RE.sub("", html)
    sanitized = _QUOTED_HANDLER_RE.sub("", sanitized)
    sanitized = _BARE_HANDLER_RE.sub("", sanitized)
    sanitized = _JS_HREF_RE.sub('href="#"', sanitized)
    sanitized = _JS_SRC_RE.sub('src=""', sanitized)
    sanitized = _DATA_SRC_RE.sub('src=""', sanitized)
    for pattern in _DANGEROUS_TAG_RES:
        sanitized = pattern.sub("", sanitized)
    return sanitized


def strip_tags(html: Optional[str]) -> str:
    """Replace every tag with a space, leaving only the text content."""
    if not html:
        return ""
    return _TAG_RE.sub(" ", html)


def sanitize_text(text: Optional[str]) -> str:
    """Reduce input to a single line of plain text."""
    if not text:
        return ""
    sanitized = _TAG_RE.sub("", text)
    sanitized = _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0)], sanitized)
    return _WHITESPACE_RE.sub(" ", sanitized.strip())


def sanitize_slug(slug: Optional[str]) -> str:
    """Normalize a user-provided slug to ``[a-z0-9-]``."""
    if not slug:
        return ""
    normalized = re.sub(r"[^a-z0-9-]", "-", slug.lower().strip())
    normalized = re.sub(r"-+", "-", normalized).strip("-")
    return normalized[:SLUG_MAX_LENGTH]


def slugify(text: Optional[str]) -> str:
    """Derive a slug from a tag or category name.

    Word characters are kept as-is (including non-ASCII letters), punctuation is
    dropped and whitespace runs become single dashes.
    """
    if not text:
        return ""
    slug = re.sub(r"[^\w\s-]", "", text.strip().lower())
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug).strip("-")


def sanitize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    candidate = email.lower().strip()
    return candidate if _EMAIL_RE.match(candidate) else None


def sanitize_url(url: Optional[str]) -> Optional[str]:
    """Return the URL if it is an absolute http(s) URL, otherwise ``None``."""
    if not url:
        return None
    candidate = url.strip()
    parsed = urlparse(candidate)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        return None
    return candidate


def sanitize_filename(filename: Optional[str]) -> str:
    if not filename:
        return ""
    stem, ext = os.path.splitext(os.path.basename(filename))
    stem = re.sub(r"[^a-z0-9-_]", "-", stem.lower())
    stem = re.sub(r"-+", "-", stem)[:FILENAME_STEM_MAX_LENGTH]
    return f"{stem}{ext.lower()}"
