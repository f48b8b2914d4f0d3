from pathlib import Path

import pytest

from language_rules import DEFAULT_RULES_FILE, load_language_rules


def test_default_rules_are_normalized() -> None:
    rules = load_language_rules()

    assert "hogy" in rules.stop_words
    assert "es" in rules.stop_words
    assert "rol" in rules.suffixes
    assert "ról" not in rules.suffixes
    assert "on" in rules.suffixes
    assert rules.suffixes.count("hoz") == 1
    assert rules.synonyms["torokfajas"][0] == "torok"
    assert rules.long_query_words == 8


def test_default_rules_keep_cluster_order() -> None:
    rules = load_language_rules(DEFAULT_RULES_FILE)

    names = [cluster.name for cluster in rules.fallback_clusters]
    assert names[:2] == ["hunger", "weight"]
    assert "ehseg" in rules.fallback_clusters[0].triggers
    assert rules.fallback_clusters[0].queries[0] == "éhség"


def test_load_rules_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_language_rules(tmp_path / "missing.yml")


def test_load_rules_requires_stop_words(tmp_path: Path) -> None:
    file = tmp_path / "rules.yml"
    file.write_text("suffixes:\n  - ok", encoding="utf-8")

    with pytest.raises(ValueError, match="stop_words"):
        load_language_rules(file)


def test_load_rules_rejects_non_string_suffix(tmp_path: Path) -> None:
    file = tmp_path / "rules.yml"
    file.write_text("stop_words: [a]\nsuffixes:\n  - on\n", encoding="utf-8")

    with pytest.raises(ValueError, match="suffixes"):
        load_language_rules(file)


def test_load_rules_rejects_cluster_without_queries(tmp_path: Path) -> None:
    file = tmp_path / "rules.yml"
    file.write_text(
        """
stop_words: [a]
suffixes: [ok]
fallback_clusters:
  - name: broken
    triggers: [alv]
    queries: []
""".strip(),
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="fallback_clusters"):
        load_language_rules(file)
