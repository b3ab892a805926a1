"""RSS 2.0 rendering for the public blog feed."""

from __future__ import annotations

import html
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, Optional, Protocol

from .sanitization import sanitize_text

FALLBACK_DESCRIPTION = "Read more..."


class FeedPost(Protocol):
    title: str
    slug: str
    excerpt: Optional[str]
    seo_description: Optional[str]
    created_at: datetime


def _rfc2822(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def _item(post: FeedPost, site_url: str) -> str:
    description = sanitize_text(post.seo_description or post.excerpt or FALLBACK_DESCRIPTION)
    link = f"{site_url}/blog/{post.slug}"
    return (
        "<item>"
        f"<title>{html.escape(sanitize_text(post.title))}</title>"
        f"<link>{html.escape(link)}</link>"
        f"<guid>{html.escape(link)}</guid>"
        f"<description>{html.escape(description)}</description>"
        f"<pubDate>{_rfc2822(post.created_at)}</pubDate>"
        "</item>"
    )


def render_rss(posts: Iterable[FeedPost], *, site_url: str, title: str, description: str) -> str:
    """Render ``posts`` as an RSS 2.0 document linking back to ``site_url``."""
    site_url = site_url.rstrip("/")
    items = "".join(_item(post, site_url) for post in posts)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0">'
        "<channel>"
        f"<title>{html.escape(title)}</title>"
        f"<link>{html.escape(site_url)}</link>"
        f"<description>{html.escape(description)}</description>"
        f"{items}"
        "</channel>"
        "</rss>"
    )
