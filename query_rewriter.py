"""Topic substitution queries for searches that found nothing."""

from __future__ import annotations

from language_rules import FallbackCluster, LanguageRules
from normalizer import normalize


def matching_cluster(query: str, clusters: tuple[FallbackCluster, ...]) -> FallbackCluster | None:
    """Return the first cluster with a trigger contained in the normalized query."""
    folded = normalize(query)
    if not folded:
        return None
    for cluster in clusters:
        if any(trigger in folded for trigger in cluster.triggers):
            return cluster
    return None


def candidate_queries(query: str, rules: LanguageRules) -> list[str]:
    """List the replacement queries to try, in order, when ``query`` had no hits.

    An empty list means there is nothing sensible to try.
    """
    cluster = matching_cluster(query, rules.fallback_clusters)
    if cluster is not None:
        return list(cluster.queries)

    if len(query.split()) > rules.long_query_words:
        return list(rules.broad_fallback)

    return []
