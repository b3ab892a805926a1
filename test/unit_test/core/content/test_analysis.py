"""Unit tests for reading time, excerpts, keyword extraction and tag linking."""

from dataclasses import dataclass

from quillpress.core.content import derive_excerpt, extract_keywords, link_tags_in_content, reading_time


@dataclass
class FakeTag:
    name: str
    slug: str


class TestReadingTime:
    def test_rounds_up_to_whole_minutes(self):
        assert reading_time("<p>" + "word " * 201 + "</p>") == 2

    def test_short_content_takes_one_minute(self):
        assert reading_time("<p>hello</p>") == 1

    def test_empty_content(self):
        assert reading_time("") == 0
        assert reading_time(None) == 0


class TestDeriveExcerpt:
    def test_prefers_author_excerpt(self):
        assert derive_excerpt("<p>Body</p>", "  <i>Custom</i> summary ") == "Custom summary"

    def test_cuts_from_content(self):
        content = "<p>" + "a" * 200 + "</p>"
        assert derive_excerpt(content) == "a" * 160 + "..."

    def test_short_content_still_gets_ellipsis(self):
        assert derive_excerpt("<p>Short   text</p>") == "Short text..."

    def test_blank_excerpt_falls_back_to_content(self):
        assert derive_excerpt("<p>Body</p>", "<br>") == "Body..."

    def test_empty(self):
        assert derive_excerpt("", None) == ""


class TestExtractKeywords:
    def test_ranks_by_frequency_without_stop_words(self):
        content = "<p>The python and the python with asyncio</p>"
        assert extract_keywords(content, "") == ["python", "asyncio"]

    def test_title_words_weigh_triple(self):
        content = "<p>django django flask</p>"
        # flask: 1 * 3 = 3 beats django: 2
        assert extract_keywords(content, "Why Flask") == ["flask", "django"]

    def test_ties_keep_first_appearance_order(self):
        assert extract_keywords("<p>zeta alpha zeta alpha</p>", "") == ["zeta", "alpha"]

    def test_ignores_short_and_non_letter_tokens(self):
        assert extract_keywords("<p>a 42 x9 ok</p>", "") == ["ok"]

    def test_limit(self):
        content = " ".join(f"word{c}" for c in "abc") + " alpha beta gamma delta"
        assert len(extract_keywords(content, "", limit=2)) == 2

    def test_title_word_absent_from_content_is_not_added(self):
        assert extract_keywords("<p>rust</p>", "Learning Go") == ["rust"]


class TestLinkTagsInContent:
    def test_links_first_mention_only(self):
        html = "<p>Python is fun. Python is fast.</p>"
        linked = link_tags_in_content(html, [FakeTag("Python", "python")])
        assert linked.count('class="tag-link"') == 1
        assert '<a href="/blog?tag=python" class="tag-link">Python</a> is fun' in linked

    def test_case_insensitive_and_keeps_original_casing(self):
        linked = link_tags_in_content("<p>we use PYTHON</p>", [FakeTag("python", "python")])
        assert ">PYTHON</a>" in linked

    def test_does_not_rewrite_attribute_values(self):
        html = '<img alt="python logo"><p>python</p>'
        linked = link_tags_in_content(html, [FakeTag("python", "python")])
        assert '<img alt="python logo">' in linked
        assert '<p><a href="/blog?tag=python" class="tag-link">python</a></p>' in linked

    def test_whole_words_only(self):
        html = "<p>pythonic code</p>"
        assert link_tags_in_content(html, [FakeTag("python", "python")]) == html

    def test_skips_tags_without_name_or_slug(self):
        html = "<p>text</p>"
        assert link_tags_in_content(html, [FakeTag("", "x"), FakeTag("text", "")]) == html
