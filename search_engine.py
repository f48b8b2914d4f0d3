"""Fuzzy Hungarian search engine: scoring, admission and ranking over candidates."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from candidates import Candidate
from expander import Expander, SuffixExpander
from language_rules import LanguageRules
from matcher import Haystack, haystack_matches
from normalizer import normalize
from query_rewriter import candidate_queries
from tokenizer import tokenize

LOGGER = logging.getLogger("search_service.engine")

EXACT_TOKEN_POINTS = 3
VARIANT_TOKEN_POINTS = 2
PHRASE_BONUS = 2
TITLE_BONUS = 5
MULTI_TOKEN_MIN_SCORE = 3
SINGLE_TOKEN_MIN_SCORE = 1
MAX_REQUIRED_TOKEN_HITS = 2


@dataclass(frozen=True)
class PreparedQuery:
    """Query analyzed once per search: folded text, tokens and per-token variants."""

    raw: str
    normalized: str
    tokens: tuple[str, ...]
    variants: tuple[frozenset[str], ...]

    @property
    def min_score(self) -> int:
        return MULTI_TOKEN_MIN_SCORE if len(self.tokens) >= 2 else SINGLE_TOKEN_MIN_SCORE

    @property
    def required_hits(self) -> int:
        return min(MAX_REQUIRED_TOKEN_HITS, len(self.tokens))


@dataclass(frozen=True)
class MatchResult:
    """Relevance of one candidate for one query."""

    candidate: Candidate
    score: int
    is_match: bool


@dataclass(frozen=True)
class SearchOutcome:
    """Ranked hits per collection and the query that produced them."""

    query: str
    used_query: str
    articles: list[MatchResult]
    products: list[MatchResult]

    @property
    def total(self) -> int:
        return len(self.articles) + len(self.products)

    def merged(self, limit: int) -> list[MatchResult]:
        """Products first, then articles, capped at ``limit``."""
        return [*self.products, *self.articles][:limit]


class SearchEngine:
    """Linear-scan matcher over caller-supplied candidates.

    Holds only immutable rules, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        rules: LanguageRules,
        expander: Expander | None = None,
        fuzzy: bool = True,
    ) -> None:
        self._rules = rules
        self._expander = expander or SuffixExpander(rules)
        self._fuzzy = fuzzy

    @property
    def rules(self) -> LanguageRules:
        return self._rules

    def prepare(self, query: str | PreparedQuery) -> PreparedQuery:
        if isinstance(query, PreparedQuery):
            return query
        tokens = tuple(tokenize(query, self._rules.stop_words))
        return PreparedQuery(
            raw=query,
            normalized=normalize(query),
            tokens=tokens,
            variants=tuple(frozenset(self._expander.expand([token])) for token in tokens),
        )

    def _haystack(self, haystack: str | Haystack) -> Haystack:
        return haystack if isinstance(haystack, Haystack) else Haystack.from_raw(haystack)

    def _token_hits(self, haystack: Haystack, prepared: PreparedQuery) -> int:
        hits = 0
        for variants in prepared.variants:
            if any(haystack_matches(haystack, v, self._fuzzy) for v in variants):
                hits += 1
        return hits

    def _substring_only(self, haystack: Haystack, prepared: PreparedQuery) -> bool:
        # a query that folds to "" (punctuation only) would be contained in every haystack
        return bool(prepared.normalized) and prepared.normalized in haystack.text

    def matches_query(self, haystack: str | Haystack, query: str | PreparedQuery) -> bool:
        """Admit a haystack when enough distinct query tokens have a matching variant.

        One hit suffices for single-token queries, two for anything longer.
        Queries made only of short or stop words use plain substring containment.
        """
        hay = self._haystack(haystack)
        prepared = self.prepare(query)
        if not prepared.tokens:
            return self._substring_only(hay, prepared)
        return self._token_hits(hay, prepared) >= prepared.required_hits

    def score(self, haystack: str | Haystack, query: str | PreparedQuery) -> int:
        """Score 3 per exact token hit, 2 per variant-only hit, +2 for the whole phrase."""
        hay = self._haystack(haystack)
        prepared = self.prepare(query)
        if not prepared.tokens:
            return 1 if self._substring_only(hay, prepared) else 0

        total = 0
        for token, variants in zip(prepared.tokens, prepared.variants):
            if haystack_matches(hay, token, self._fuzzy):
                total += EXACT_TOKEN_POINTS
            elif any(haystack_matches(hay, v, self._fuzzy) for v in variants):
                total += VARIANT_TOKEN_POINTS

        if self._substring_only(hay, prepared):
            total += PHRASE_BONUS
        return total

    def title_bonus(self, title: str, query: str | PreparedQuery) -> int:
        prepared = self.prepare(query)
        # no bonus for a query that folds to ""
        if prepared.normalized and prepared.normalized in normalize(title):
            return TITLE_BONUS
        return 0

    def evaluate(self, candidate: Candidate, query: str | PreparedQuery) -> MatchResult:
        prepared = self.prepare(query)
        haystack = candidate.normalized()
        total = self.score(haystack, prepared) + self.title_bonus(candidate.title, prepared)
        admitted = self.matches_query(haystack, prepared) and total >= prepared.min_score
        return MatchResult(candidate=candidate, score=total, is_match=admitted)

    def rank(
        self,
        candidates: Iterable[Candidate],
        query: str | PreparedQuery,
        limit: int,
    ) -> list[MatchResult]:
        """Return admitted candidates, best first; ties keep input order."""
        prepared = self.prepare(query)
        admitted = [
            result
            for result in (self.evaluate(candidate, prepared) for candidate in candidates)
            if result.is_match
        ]
        admitted.sort(key=lambda result: result.score, reverse=True)
        return admitted[: max(0, limit)]

    def candidate_queries(self, query: str) -> list[str]:
        return candidate_queries(query, self._rules)

    def search(
        self,
        articles: list[Candidate],
        products: list[Candidate],
        query: str,
        limit: int,
        use_fallback: bool = True,
    ) -> SearchOutcome:
        """Rank both collections; on zero hits try the fallback queries in order."""
        outcome = SearchOutcome(
            query=query,
            used_query=query,
            articles=self.rank(articles, query, limit),
            products=self.rank(products, query, limit),
        )
        if outcome.total or not use_fallback:
            LOGGER.info("Query %r matched %d candidates", query, outcome.total)
            return outcome

        for fallback in self.candidate_queries(query):
            trimmed = fallback.strip()
            if not trimmed:
                continue
            LOGGER.debug("No hits for %r, trying fallback %r", query, trimmed)
            retry = SearchOutcome(
                query=query,
                used_query=trimmed,
                articles=self.rank(articles, trimmed, limit),
                products=self.rank(products, trimmed, limit),
            )
            if retry.total:
                LOGGER.info(
                    "Query %r had no hits, fallback %r matched %d candidates",
                    query,
                    trimmed,
                    retry.total,
                )
                return retry

        LOGGER.info("Query %r matched nothing, fallbacks exhausted", query)
        return outcome
