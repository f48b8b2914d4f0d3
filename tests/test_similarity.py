import pytest

from main import review_topics
from similarity import best_similarity_hit, content_token_set, is_duplicate, jaccard_similarity


def test_content_token_set_keeps_long_words() -> None:
    assert content_token_set("Az alvás és a stressz kapcsolata") == {"alvas", "stressz", "kapcsolata"}


def test_jaccard_similarity() -> None:
    assert jaccard_similarity({"alvas", "stressz"}, {"alvas", "stressz"}) == 1.0
    assert jaccard_similarity({"alvas", "stressz"}, {"alvas", "fogyas"}) == pytest.approx(1 / 3)
    assert jaccard_similarity(set(), {"alvas"}) == 0.0


def test_best_similarity_hit_picks_closest_text() -> None:
    corpus = ["Fogyás tavasszal", "Alvás és stressz kapcsolata", ""]

    hit = best_similarity_hit("A stressz és az alvás kapcsolata", corpus)

    assert hit is not None
    assert hit.text == "Alvás és stressz kapcsolata"
    assert hit.score == 1.0


def test_best_similarity_hit_rewards_containment() -> None:
    hit = best_similarity_hit("Magnézium", ["A magnézium hatásai az idegrendszerre"])

    assert hit is not None
    assert hit.score == pytest.approx(0.99)


def test_best_similarity_hit_for_empty_candidate() -> None:
    assert best_similarity_hit("   ", ["bármi"]) is None
    assert best_similarity_hit("alvás", []) is None


def test_is_duplicate_threshold() -> None:
    recent = ["Így csökkentsd a stresszt természetesen"]

    assert is_duplicate("Így csökkentsd a stresszt természetesen!", recent)
    assert not is_duplicate("Tavaszi fáradtság ellen", recent)


def test_review_topics_flags_published_titles() -> None:
    published = ["Fejfájás elleni tippek", "Stressz és kortizol"]

    reviews = review_topics(["Fejfájás elleni tippek", "Magnézium és az idegrendszer"], published)

    assert reviews[0] == {"topic": "Fejfájás elleni tippek", "duplicate": True, "closest": "Fejfájás elleni tippek", "score": 1.0}
    assert reviews[1]["duplicate"] is False
    assert reviews[1]["score"] == 0.0
    assert review_topics(["Alvás"], [])[0]["closest"] is None
