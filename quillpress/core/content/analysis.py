"""
Text analysis for posts.

Derives the values the CMS fills in automatically when an author saves a post:
reading time, a fallback excerpt, the keywords used for auto-tagging, and the
tag links inserted into the public rendering of a post.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable, List, Optional, Protocol

from .sanitization import sanitize_text, strip_tags

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160
DEFAULT_KEYWORD_LIMIT = 10
TITLE_WEIGHT = 3

STOP_WORDS = frozenset(
    {
        "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by", "from", "as",
        "is", "was", "are", "been", "be", "have", "has", "had", "do", "does", "did", "will", "would",
        "should", "could", "may", "might", "can", "this", "that", "these", "those", "a", "an",
    }
)

# ASCII word boundaries: accented letters split words instead of extending them.
_KEYWORD_RE = re.compile(r"\b[a-z]{2,}\b", re.ASCII)


class LinkableTag(Protocol):
    name: str
    slug: str


def reading_time(html: Optional[str]) -> int:
    """Estimated minutes to read the content at 200 words per minute."""
    word_count = len(strip_tags(html).split())
    return math.ceil(word_count / WORDS_PER_MINUTE)


def derive_excerpt(html: Optional[str], excerpt: Optional[str] = None) -> str:
    """Use the author's excerpt when given, else cut one from the content."""
    if excerpt:
        cleaned = sanitize_text(excerpt)
        if cleaned:
            return cleaned
    plain = " ".join(strip_tags(html).split())
    if not plain:
        return ""
    return plain[:EXCERPT_LENGTH] + "..."


def extract_keywords(content: Optional[str], title: Optional[str], limit: int = DEFAULT_KEYWORD_LIMIT) -> List[str]:
    """
    Rank the content's words as auto-tag candidates.

    Words are counted over the tag-stripped, lower-cased content with stop words
    removed. Words that also appear in the title count three times as much.
    Ties keep the order in which words first appear in the content.

    Args:
        content: Post HTML
        title: Post title
        limit: Maximum number of keywords to return

    Returns:
        Up to ``limit`` keywords, most relevant first
    """
    words = _KEYWORD_RE.findall(strip_tags(content).lower())
    frequency = Counter(word for word in words if word not in STOP_WORDS)

    for word in set((title or "").lower().split()):
        if frequency.get(word):
            frequency[word] *= TITLE_WEIGHT

    ranked = sorted(frequency.items(), key=lambda item: -item[1])
    return [word for word, _ in ranked[:limit]]


def link_tags_in_content(html: str, tags: Iterable[LinkableTag]) -> str:
    """
    Link the first mention of each tag name to the tag's archive.

    Matching is case-insensitive on whole words and skips text inside tag
    markup, so attribute values are never rewritten.
    """
    linked = html
    for tag in tags:
        if not tag.name or not tag.slug:
            continue
        pattern = re.compile(rf"(?![^<]*>)\b({re.escape(tag.name)})\b", re.IGNORECASE)
        linked = pattern.sub(
            lambda m, slug=tag.slug: f'<a href="/blog?tag={slug}" class="tag-link">{m.group(1)}</a>',
            linked,
            count=1,
        )
    return linked
