"""
Tests for title and link helpers.
"""
import pytest

from forum.utils.text_utils import extract_links, fancy_title, link_domain, sanitize_title, slug_for


class TestSlugFor:
    """Tests for slug_for."""

    def test_slug_for_title(self) -> None:
        assert slug_for("Hello World Topic") == "hello-world-topic"

    def test_slug_for_punctuation(self) -> None:
        assert slug_for("What's new in 2.0?") == "what-s-new-in-2-0"

    def test_slug_for_empty(self) -> None:
        assert slug_for("") == ""
        assert slug_for(None) == ""


class TestSanitizeTitle:
    """Tests for removing HTML from titles."""

    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Topic with <b>bold</b> text in its title", "Topic with bold text in its title"),
            ("Topic with <img src='something'> image in its title", "Topic with image in its title"),
            (
                "Topic with <script>alert('title')</script> script in its title",
                "Topic with script in its title",
            ),
        ],
    )
    def test_strips_html(self, title: str, expected: str) -> None:
        assert sanitize_title(title) == expected

    def test_keeps_plain_text(self) -> None:
        assert sanitize_title("Just a plain title") == "Just a plain title"

    def test_escaped_markup_stays_escaped(self) -> None:
        title = "Use &lt;b&gt; for bold text please"

        assert sanitize_title(title) == title
        assert sanitize_title(sanitize_title(title)) == title

    def test_stray_brackets_are_stable(self) -> None:
        once = sanitize_title("a < b and Q & A")

        assert once == "a &lt; b and Q & A"
        assert sanitize_title(once) == once


class TestFancyTitle:
    """Tests for typographic entities."""

    def test_quotes_and_dashes(self) -> None:
        title = "\"this topic\" -- has ``fancy stuff''"
        assert fancy_title(title) == "&ldquo;this topic&rdquo; &ndash; has &ldquo;fancy stuff&rdquo;"

    def test_ellipsis_and_apostrophe(self) -> None:
        assert fancy_title("wait... it's here") == "wait&hellip; it&rsquo;s here"

    def test_escapes_markup(self) -> None:
        assert fancy_title("a < b") == "a &lt; b"

    def test_keeps_existing_entities(self) -> None:
        assert fancy_title("a &lt; b & c") == "a &lt; b &amp; c"


class TestLinks:
    """Tests for link extraction."""

    def test_extract_links(self) -> None:
        raw = "See http://discourse.org, and https://example.com/page?id=1. Also http://discourse.org"
        assert extract_links(raw) == ["http://discourse.org", "https://example.com/page?id=1"]

    def test_extract_links_none(self) -> None:
        assert extract_links("no links here") == []
        assert extract_links(None) == []

    def test_link_domain(self) -> None:
        assert link_domain("https://Example.com:8080/path") == "example.com"
