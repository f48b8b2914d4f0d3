"""Query tokenization with a pluggable stop-word set."""

from __future__ import annotations

from collections.abc import Collection

from normalizer import normalize

MIN_TOKEN_LENGTH = 3


def tokenize(query: str | None, stop_words: Collection[str] = frozenset()) -> list[str]:
    """Split a query into content tokens, dropping short and stop words.

    An empty result means the caller should fall back to plain substring matching.
    """
    return [
        token
        for token in normalize(query).split()
        if len(token) >= MIN_TOKEN_LENGTH and token not in stop_words
    ]
