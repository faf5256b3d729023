"""
Text utility functions.
"""
import re
from typing import List
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from slugify import slugify


LINK_PATTERN = re.compile(r"https?://[^\s<>\"'\)\]]+", re.IGNORECASE)
BARE_AMPERSAND = re.compile(r"&(?!#?\w+;)")


def slug_for(title: str) -> str:
    """
    Build a URL-safe slug for a title.

    Args:
        title: The title to slugify

    Returns:
        Lowercase, dash separated slug. Empty when nothing usable remains.
    """
    if not title:
        return ""
    return slugify(title, max_length=255, word_boundary=True)


def sanitize_title(title: str) -> str:
    """
    Remove all HTML from a title.

    Tags are dropped, script/style contents are removed entirely and runs of
    whitespace left behind are collapsed. Angle brackets that were escaped in
    the input stay escaped, so sanitizing a sanitized title changes nothing.

    Args:
        title: Raw title as typed by the user

    Returns:
        Plain text title
    """
    if not title:
        return title
    soup = BeautifulSoup(title, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    text = soup.get_text(separator=" ")
    text = text.replace("<", "&lt;").replace(">", "&gt;")
    return re.sub(r"\s+", " ", text).strip()


def fancy_title(title: str) -> str:
    """
    Replace plain typewriter punctuation with typographic HTML entities.

    Examples:
        '"quoted" -- text'  -> '&ldquo;quoted&rdquo; &ndash; text'
        "``quoted''"        -> '&ldquo;quoted&rdquo;'
    """
    if not title:
        return title

    # Entities already in the title are kept as they are
    text = BARE_AMPERSAND.sub("&amp;", title).replace("<", "&lt;").replace(">", "&gt;")
    text = text.replace("---", "&mdash;").replace("--", "&ndash;")
    text = text.replace("...", "&hellip;")
    text = text.replace("``", "&ldquo;").replace("''", "&rdquo;")

    # Opening quotes start the text or follow whitespace/opening brackets
    text = re.sub(r'(^|[\s(\[{])"', r"\1&ldquo;", text)
    text = text.replace('"', "&rdquo;")
    text = re.sub(r"(^|[\s(\[{])'", r"\1&lsquo;", text)
    text = text.replace("'", "&rsquo;")
    return text


def extract_links(raw: str) -> List[str]:
    """
    Find the http(s) links mentioned in a post.

    Args:
        raw: Post source text

    Returns:
        Unique urls in order of appearance
    """
    if not raw:
        return []
    links = []
    for match in LINK_PATTERN.finditer(raw):
        url = match.group(0).rstrip(".,;:!?")
        if url not in links:
            links.append(url)
    return links


def link_domain(url: str) -> str:
    """Host part of a url, lowercase."""
    return (urlparse(url).hostname or "").lower()
