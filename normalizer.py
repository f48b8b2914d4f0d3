"""Text folding helpers shared by the search core and result shaping."""

from __future__ import annotations

import re
import unicodedata

NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]+")
STYLE_PATTERN = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
SCRIPT_PATTERN = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")
TRAILING_PARTIAL_WORD = re.compile(r"\s+\S*$")
MOJIBAKE_MARKERS = re.compile(r"[ÃÂâ€]")


def normalize(text: str | None) -> str:
    """Fold text to lowercase ASCII words separated by single spaces."""
    if not text:
        return ""
    lowered = text.lower()
    decomposed = unicodedata.normalize("NFD", lowered)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    stripped = stripped.replace("ß", "ss")
    return NON_ALNUM_PATTERN.sub(" ", stripped).strip()


def strip_html(html: str | None) -> str:
    """Drop tags, inline styles and scripts, collapsing whitespace."""
    if not html:
        return ""
    text = STYLE_PATTERN.sub(" ", html)
    text = SCRIPT_PATTERN.sub(" ", text)
    text = TAG_PATTERN.sub(" ", text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def truncate_text(html_or_text: str | None, max_length: int) -> str:
    """Return plain text cut at a word boundary, with an ellipsis when shortened."""
    text = strip_html(html_or_text)
    if len(text) <= max_length:
        return text
    cut = TRAILING_PARTIAL_WORD.sub("", text[:max_length]).strip()
    return cut + "…"


def repair_mojibake(value: str) -> str:
    """Recover UTF-8 text that was decoded as Latin-1 upstream (``alvÃ¡szavar``)."""
    if not value or not MOJIBAKE_MARKERS.search(value):
        return value
    try:
        return value.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return value
