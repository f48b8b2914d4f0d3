"""Loading of the language policy data (stop words, suffixes, synonyms, fallbacks)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from normalizer import normalize

DEFAULT_RULES_FILE = Path(__file__).resolve().parent / "hu_rules.yml"


@dataclass(frozen=True)
class FallbackCluster:
    """Topic substitution rule: trigger fragments and the queries to try instead."""

    name: str
    triggers: tuple[str, ...]
    queries: tuple[str, ...]


@dataclass(frozen=True)
class LanguageRules:
    """Immutable matching policy injected into the search core."""

    stop_words: frozenset[str] = frozenset()
    suffixes: tuple[str, ...] = ()
    adjective_suffixes: tuple[str, ...] = ()
    adjective_min_length: int = 5
    synonyms: dict[str, tuple[str, ...]] = field(default_factory=dict)
    fallback_clusters: tuple[FallbackCluster, ...] = ()
    broad_fallback: tuple[str, ...] = ()
    long_query_words: int = 8


def _string_list(raw: dict[str, Any], key: str, *, required: bool = True) -> list[str]:
    value = raw.get(key)
    if value is None and not required:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list")
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValueError(f"Each entry in '{key}' must be a non-empty string")
    return value


def _normalized_unique(values: list[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for value in values:
        folded = normalize(value)
        if folded:
            seen.setdefault(folded, None)
    return tuple(seen)


def _parse_synonyms(raw: dict[str, Any]) -> dict[str, tuple[str, ...]]:
    value = raw.get("synonyms") or {}
    if not isinstance(value, dict):
        raise ValueError("'synonyms' must be a mapping of word to list of words")

    synonyms: dict[str, tuple[str, ...]] = {}
    for key, words in value.items():
        if not isinstance(key, str) or not key.strip():
            raise ValueError("Each key in 'synonyms' must be a non-empty string")
        if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
            raise ValueError(f"'synonyms.{key}' must be a list of strings")
        synonyms[normalize(key)] = tuple(words)
    return synonyms


def _parse_clusters(raw: dict[str, Any]) -> tuple[FallbackCluster, ...]:
    value = raw.get("fallback_clusters") or []
    if not isinstance(value, list):
        raise ValueError("'fallback_clusters' must be a list")

    clusters: list[FallbackCluster] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, dict):
            raise ValueError(f"'fallback_clusters[{index}]' must be a mapping")
        name = entry.get("name", f"cluster-{index}")
        triggers = _string_list(entry, "triggers")
        queries = _string_list(entry, "queries")
        if not triggers or not queries:
            raise ValueError(f"'fallback_clusters[{index}]' needs triggers and queries")
        clusters.append(
            FallbackCluster(
                name=str(name),
                triggers=_normalized_unique(triggers),
                queries=tuple(queries),
            )
        )
    return tuple(clusters)


def parse_language_rules(raw: dict[str, Any]) -> LanguageRules:
    """Validate a raw mapping (as read from YAML) into ``LanguageRules``."""
    stop_words = _string_list(raw, "stop_words")
    suffixes = _string_list(raw, "suffixes")

    adjective_raw = raw.get("adjective_suffixes") or {}
    if not isinstance(adjective_raw, dict):
        raise ValueError("'adjective_suffixes' must be a mapping")
    adjective_endings = _string_list(adjective_raw, "endings", required=False)
    adjective_min_length = adjective_raw.get("min_length", 5)
    if not isinstance(adjective_min_length, int) or adjective_min_length < 1:
        raise ValueError("'adjective_suffixes.min_length' must be a positive integer")

    broad_fallback = _string_list(raw, "broad_fallback", required=False)
    long_query_words = raw.get("long_query_words", 8)
    if not isinstance(long_query_words, int) or long_query_words < 1:
        raise ValueError("'long_query_words' must be a positive integer")

    return LanguageRules(
        stop_words=frozenset(_normalized_unique(stop_words)),
        suffixes=_normalized_unique(suffixes),
        adjective_suffixes=_normalized_unique(adjective_endings),
        adjective_min_length=adjective_min_length,
        synonyms=_parse_synonyms(raw),
        fallback_clusters=_parse_clusters(raw),
        broad_fallback=tuple(broad_fallback),
        long_query_words=long_query_words,
    )


def load_language_rules(rules_path: Path = DEFAULT_RULES_FILE) -> LanguageRules:
    """Load and validate language rules from a YAML file."""
    if not rules_path.exists():
        raise FileNotFoundError(f"Language rules file not found: {rules_path}")

    with rules_path.open("r", encoding="utf-8") as file:
        raw: dict[str, Any] = yaml.safe_load(file) or {}

    if not isinstance(raw, dict):
        raise ValueError("Language rules file must contain a mapping")
    return parse_language_rules(raw)
