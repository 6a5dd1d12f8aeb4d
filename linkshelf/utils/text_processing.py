"""
Text helpers for slugs, excerpts and public hashes.
"""

import re
import secrets
import unicodedata

from bs4 import BeautifulSoup

EXCERPT_LENGTH = 200
EXCERPT_END = "..."
HASH_BYTES = 5  # 10 hex characters


def slugify(text: str, separator: str = "-") -> str:
    """
    Convert a title into a URL slug.

    Accents are folded to ASCII, ``@`` reads as ``at``, every other run of
    non-alphanumeric characters becomes one separator, and the result is
    lowercase with no leading or trailing separator.

        >>> slugify("Hello, World!")
        'hello-world'
        >>> slugify("Café @ Night")
        'cafe-at-night'
    """
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    ascii_text = ascii_text.replace("@", f"{separator}at{separator}").lower()
    ascii_text = re.sub(r"[^a-z0-9\s_-]", "", ascii_text)
    slug = re.sub(r"[\s_-]+", separator, ascii_text)
    return slug.strip(separator)


def strip_tags(html: str) -> str:
    """Return the text content of an HTML fragment."""
    return BeautifulSoup(html, "html.parser").get_text()


def limit(text: str, length: int = EXCERPT_LENGTH, end: str = EXCERPT_END) -> str:
    """Truncate to ``length`` characters, appending ``end`` only when truncated."""
    if len(text) <= length:
        return text
    return text[:length].rstrip() + end


def make_excerpt(description: str | None) -> str | None:
    """Plain-text excerpt of a description, recomputed whenever it changes."""
    if not description:
        return None
    return limit(strip_tags(description))


def generate_hash() -> str:
    return secrets.token_hex(HASH_BYTES)
