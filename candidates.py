"""Searchable records built from raw article and product rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from matcher import Haystack
from normalizer import truncate_text

CandidateType = Literal["post", "product"]

TITLE_FIELDS = ("title", "name", "post_title", "product_title")
ARTICLE_HAYSTACK_FIELDS = (
    "title",
    "post_title",
    "intro",
    "excerpt",
    "post_excerpt",
    "content",
    "post_content",
)
PRODUCT_HAYSTACK_FIELDS = (
    "name",
    "title",
    "post_title",
    "product_title",
    "short_description",
    "excerpt",
    "post_excerpt",
    "description",
    "content",
    "post_content",
)
ARTICLE_SUMMARY_FIELDS = ("excerpt", "intro", "content", "post_content")
PRODUCT_EXCERPT_FIELDS = ("excerpt", "post_excerpt", "short_description", "description", "post_content")
PRODUCT_SNIPPET_FIELDS = ("post_excerpt", "short_description", "excerpt", "description", "post_content")

EXCERPT_LENGTH = 220
SNIPPET_LENGTH = 1400


def _text(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    return value if isinstance(value, str) else ""


def first_text(row: Mapping[str, Any], keys: tuple[str, ...]) -> str:
    """Return the first non-blank string field among ``keys``."""
    for key in keys:
        value = _text(row, key)
        if value.strip():
            return value
    return ""


def build_haystack(row: Mapping[str, Any], keys: tuple[str, ...]) -> str:
    """Join the non-blank string fields in priority order; other types are skipped."""
    return "\n".join(value for value in (_text(row, key) for key in keys) if value.strip())


def pick_title(row: Mapping[str, Any]) -> str:
    return first_text(row, TITLE_FIELDS)


@dataclass(frozen=True)
class Candidate:
    """One article or product as seen by the ranker."""

    id: Any
    type: CandidateType
    title: str
    path: str | None
    haystack: str
    excerpt_source: str
    snippet_source: str
    row: Mapping[str, Any] = field(repr=False, compare=False)

    def normalized(self) -> Haystack:
        return Haystack.from_raw(self.haystack)

    @property
    def excerpt(self) -> str:
        return truncate_text(self.excerpt_source, EXCERPT_LENGTH)

    @property
    def snippet(self) -> str:
        return truncate_text(self.snippet_source, SNIPPET_LENGTH)


def _slug_path(row: Mapping[str, Any], prefix: str) -> str | None:
    slug = row.get("slug")
    if slug is None or slug == "":
        return None
    return f"{prefix}/{slug}"


def article_candidate(row: Mapping[str, Any]) -> Candidate:
    summary = first_text(row, ARTICLE_SUMMARY_FIELDS)
    return Candidate(
        id=row.get("id"),
        type="post",
        title=first_text(row, ("title", "post_title")),
        path=_slug_path(row, "/cikkek"),
        haystack=build_haystack(row, ARTICLE_HAYSTACK_FIELDS),
        excerpt_source=summary,
        snippet_source=summary,
        row=row,
    )


def product_candidate(row: Mapping[str, Any]) -> Candidate:
    return Candidate(
        id=row.get("id"),
        type="product",
        title=pick_title(row),
        path=_slug_path(row, "/termek"),
        haystack=build_haystack(row, PRODUCT_HAYSTACK_FIELDS),
        excerpt_source=first_text(row, PRODUCT_EXCERPT_FIELDS),
        snippet_source=first_text(row, PRODUCT_SNIPPET_FIELDS),
        row=row,
    )


def absolute_url(site_url: str, path: str | None) -> str | None:
    """Prefix a site-relative path with the site URL; absolute URLs pass through."""
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    separator = "" if path.startswith("/") else "/"
    return f"{site_url.rstrip('/')}{separator}{path}"
