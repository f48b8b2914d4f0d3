"""Runs sample searches against the configured corpus without starting the HTTP server."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from candidates import article_candidate, product_candidate
from config_loader import load_config
from corpus import build_corpus
from language_rules import load_language_rules
from search_engine import SearchEngine
from server import hit_payload
from similarity import best_similarity_hit, is_duplicate

LOGGER = logging.getLogger("search_service.demo")

DEMO_QUERIES = [
    "alvászavar",
    "fejfájás",
    "stresszes vagyok és nem alszom jól",
    "éhség és cukorfüggés",
]

DEMO_TOPICS = [
    "Az alvászavar természetes kezelése",
    "Fejfájás elleni tippek",
    "Magnézium és az idegrendszer",
]


def review_topics(topics: list[str], published_titles: list[str]) -> list[dict[str, object]]:
    """Flag topic ideas that repeat an already published title."""
    reviews: list[dict[str, object]] = []
    for topic in topics:
        hit = best_similarity_hit(topic, published_titles)
        reviews.append(
            {
                "topic": topic,
                "duplicate": is_duplicate(topic, published_titles),
                "closest": hit.text if hit else None,
                "score": round(hit.score, 2) if hit else 0.0,
            }
        )
    return reviews


def run_demo() -> None:
    """Search the demo queries and print the API payload for each."""
    base_dir = Path(__file__).resolve().parent
    config = load_config(base_dir / "config.yml")
    rules = load_language_rules(config.rules_file)

    corpus = build_corpus(config, LOGGER)
    articles = [article_candidate(row) for row in corpus.fetch_articles(config.max_rows)]
    products = [product_candidate(row) for row in corpus.fetch_products(config.max_rows)]
    LOGGER.info("Loaded %d articles and %d products", len(articles), len(products))

    engine = SearchEngine(rules, fuzzy=config.fuzzy_matching)
    for query in DEMO_QUERIES:
        outcome = engine.search(articles, products, query, limit=5)
        hits = outcome.merged(5)
        payload = {
            "query": outcome.used_query,
            "count": len(hits),
            "results": [hit_payload(item, config.site_url) for item in hits],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))

    for review in review_topics(DEMO_TOPICS, [item.title for item in articles]):
        print(json.dumps(review, ensure_ascii=False))


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_demo()


if __name__ == "__main__":
    main()
