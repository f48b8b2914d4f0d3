"""Near-duplicate detection for topic ideas against recently published text."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from normalizer import normalize

MIN_SIMILARITY_TOKEN_LENGTH = 4
CONTAINMENT_SCORE = 0.99
DUPLICATE_THRESHOLD = 0.74


@dataclass(frozen=True)
class SimilarityHit:
    text: str
    score: float


def content_token_set(text: str) -> set[str]:
    return {token for token in normalize(text).split() if len(token) >= MIN_SIMILARITY_TOKEN_LENGTH}


def jaccard_similarity(left: set[str], right: set[str]) -> float:
    if not left or not right:
        return 0.0
    intersection = len(left & right)
    union = len(left) + len(right) - intersection
    return intersection / union if union else 0.0


def best_similarity_hit(candidate: str, corpus: Iterable[str]) -> SimilarityHit | None:
    """Return the corpus entry most similar to ``candidate``.

    Similarity is the Jaccard index of the word sets, raised to 0.99 when either
    normalized text contains the other.
    """
    folded = normalize(candidate)
    if not folded:
        return None
    candidate_tokens = content_token_set(folded)

    best: SimilarityHit | None = None
    for text in corpus:
        other = normalize(text)
        if not other:
            continue
        score = jaccard_similarity(candidate_tokens, content_token_set(other))
        if folded in other or other in folded:
            score = max(score, CONTAINMENT_SCORE)
        if best is None or score > best.score:
            best = SimilarityHit(text=text, score=score)
    return best


def is_duplicate(candidate: str, corpus: Iterable[str], threshold: float = DUPLICATE_THRESHOLD) -> bool:
    hit = best_similarity_hit(candidate, corpus)
    return hit is not None and hit.score >= threshold
