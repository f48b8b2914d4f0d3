"""Decides whether a normalized haystack contains a query variant."""

from __future__ import annotations

from dataclasses import dataclass

from normalizer import normalize

COMMON_PREFIX_MIN = 5
REVERSE_PREFIX_MIN = 6
FUZZY_MIN_LENGTH = 4
SHORT_VARIANT_LENGTH = 6


@dataclass(frozen=True)
class Haystack:
    """Normalized candidate text and its whitespace tokens, computed once per candidate."""

    text: str
    tokens: tuple[str, ...]

    @classmethod
    def from_raw(cls, raw: str | None) -> "Haystack":
        text = normalize(raw)
        return cls(text=text, tokens=tuple(text.split()))


def common_prefix_length(left: str, right: str) -> int:
    limit = min(len(left), len(right))
    index = 0
    while index < limit and left[index] == right[index]:
        index += 1
    return index


def levenshtein_within(left: str, right: str, max_distance: int) -> bool:
    """Return True if the edit distance between the strings is at most ``max_distance``.

    Row-by-row dynamic programming that gives up as soon as every cell of the
    current row exceeds the bound.
    """
    if abs(len(left) - len(right)) > max_distance:
        return False

    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, start=1):
        current = [i] + [0] * len(right)
        row_min = i
        for j, right_char in enumerate(right, start=1):
            cost = 0 if left_char == right_char else 1
            value = min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            current[j] = value
            if value < row_min:
                row_min = value
        if row_min > max_distance:
            return False
        previous = current

    return previous[len(right)] <= max_distance


def fuzzy_token_match(variant: str, hay_tokens: tuple[str, ...]) -> bool:
    if len(variant) < FUZZY_MIN_LENGTH:
        return False

    max_distance = 1 if len(variant) <= SHORT_VARIANT_LENGTH else 2
    for token in hay_tokens:
        if abs(len(token) - len(variant)) > max_distance:
            continue
        if levenshtein_within(variant, token, max_distance):
            return True
    return False


def haystack_matches(haystack: Haystack, variant: str, fuzzy: bool = True) -> bool:
    """Match a variant against an already normalized haystack."""
    folded = normalize(variant)
    if not folded:
        return False

    if folded in haystack.text:
        return True

    for token in haystack.tokens:
        # energiaszint -> energiaszintedet
        if token.startswith(folded):
            return True
        # fej -> fejfajas
        if len(folded) >= REVERSE_PREFIX_MIN and folded.startswith(token):
            return True
        # növelése -> növelheted
        if common_prefix_length(token, folded) >= COMMON_PREFIX_MIN:
            return True

    return fuzzy and fuzzy_token_match(folded, haystack.tokens)


def token_matches(haystack_raw: str | None, variant: str | None, fuzzy: bool = True) -> bool:
    """Normalize both sides and match a single variant against a raw haystack."""
    return haystack_matches(Haystack.from_raw(haystack_raw), variant or "", fuzzy=fuzzy)
