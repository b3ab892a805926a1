"""Unit tests for RSS rendering."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from quillpress.core.content.feeds import render_rss


@dataclass
class FeedItem:
    title: str
    slug: str
    excerpt: Optional[str] = None
    seo_description: Optional[str] = None
    created_at: datetime = datetime(2024, 1, 2, 3, 4, 5)


class TestRenderRss:
    def test_channel_and_items(self):
        xml = render_rss(
            [FeedItem("First", "first", excerpt="Intro")],
            site_url="https://blog.example.com/",
            title="My Blog",
            description="Updates",
        )
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?><rss version="2.0"><channel>')
        assert "<title>My Blog</title>" in xml
        assert "<link>https://blog.example.com</link>" in xml
        assert "<link>https://blog.example.com/blog/first</link>" in xml
        assert "<guid>https://blog.example.com/blog/first</guid>" in xml
        assert "<description>Intro</description>" in xml

    def test_pub_date_is_rfc2822_gmt(self):
        xml = render_rss([FeedItem("A", "a")], site_url="https://x.io", title="t", description="d")
        assert "<pubDate>Tue, 02 Jan 2024 03:04:05 GMT</pubDate>" in xml

    def test_aware_dates_are_converted_to_utc(self):
        item = FeedItem("A", "a", created_at=datetime(2024, 1, 2, 5, 4, 5, tzinfo=timezone.utc))
        xml = render_rss([item], site_url="https://x.io", title="t", description="d")
        assert "05:04:05 GMT" in xml

    def test_description_prefers_seo_description(self):
        item = FeedItem("A", "a", excerpt="excerpt", seo_description="seo")
        assert "<description>seo</description>" in render_rss([item], site_url="u", title="t", description="d")

    def test_description_fallback(self):
        xml = render_rss([FeedItem("A", "a")], site_url="u", title="t", description="d")
        assert "<description>Read more...</description>" in xml

    def test_escapes_markup(self):
        item = FeedItem("Tom & <Jerry>", "tom", excerpt="a < b")
        xml = render_rss([item], site_url="u", title="Q&A", description="d")
        assert "<title>Q&amp;A</title>" in xml
        assert "<description>a &lt; b</description>" in xml

    def test_no_items(self):
        xml = render_rss([], site_url="u", title="t", description="d")
        assert "<item>" not in xml
        assert xml.endswith("</channel></rss>")
