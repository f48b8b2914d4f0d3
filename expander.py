"""Heuristic Hungarian stem and synonym expansion of query tokens."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from language_rules import LanguageRules
from normalizer import normalize

MIN_VARIANT_LENGTH = 3
MIN_STEM_LENGTH = 3
VOWEL_DROP_MIN_LENGTH = 5
LOOSE_DROP_MIN_LENGTH = 6


class Expander(Protocol):
    """Turns query tokens into the set of forms the matcher should look for."""

    def expand(self, tokens: Iterable[str]) -> set[str]:
        ...


class SuffixExpander:
    """Suffix-stripping expander driven by ``LanguageRules``.

    Over- and under-stemming are both tolerated; the scorer weights exact token
    hits above variant hits.
    """

    def __init__(self, rules: LanguageRules) -> None:
        self._rules = rules

    def stem_variants(self, token: str) -> set[str]:
        """Return the token plus every plausible suffix-stripped form of it."""
        word = normalize(token)
        if not word:
            return set()

        variants = {word}
        for suffix in self._rules.suffixes:
            if word.endswith(suffix) and len(word) - len(suffix) >= MIN_STEM_LENGTH:
                variants.add(word[: -len(suffix)])

        if len(word) > self._rules.adjective_min_length:
            for ending in self._rules.adjective_suffixes:
                if word.endswith(ending):
                    variants.add(word[: -len(ending)])

        for variant in list(variants):
            if variant[-1] in "ea" and len(variant) >= VOWEL_DROP_MIN_LENGTH:
                variants.add(variant[:-1])

        # coarse fallback for inflections the suffix list misses (borproblemak -> borproblem)
        for variant in list(variants):
            if len(variant) >= LOOSE_DROP_MIN_LENGTH:
                variants.add(variant[:-1])

        return {variant for variant in variants if len(variant) >= MIN_VARIANT_LENGTH}

    def synonyms_for(self, key: str) -> tuple[str, ...]:
        return self._rules.synonyms.get(key, ())

    def expand(self, tokens: Iterable[str]) -> set[str]:
        expanded: set[str] = set()
        for token in tokens:
            stems = self.stem_variants(token)
            expanded |= stems

            for key in {normalize(token)} | stems:
                for synonym in self.synonyms_for(key):
                    expanded |= self.stem_variants(synonym)

        return {variant for variant in expanded if len(variant) >= MIN_VARIANT_LENGTH}
