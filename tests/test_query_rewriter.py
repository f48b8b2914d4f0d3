from language_rules import FallbackCluster, LanguageRules, load_language_rules
from query_rewriter import candidate_queries, matching_cluster


def test_hunger_cluster() -> None:
    rules = load_language_rules()

    assert candidate_queries("éhség és cukorfüggés", rules) == [
        "éhség",
        "étvágy",
        "nassolás",
        "cukoréhség",
        "fogyás",
        "testsúly",
    ]
    assert candidate_queries("éhes vagyok", rules)[0] == "éhség"


def test_weight_cluster() -> None:
    rules = load_language_rules()

    assert candidate_queries("fogyni szeretnék", rules) == ["fogyás", "testsúly", "diéta", "anyagcsere"]


def test_first_matching_cluster_wins() -> None:
    rules = load_language_rules()

    queries = candidate_queries("stresszes vagyok és nem alszom jól", rules)

    assert queries[0] == "stressz"
    assert "alvás" not in queries


def test_headache_and_sleep_clusters() -> None:
    rules = load_language_rules()

    assert candidate_queries("fejem fáj", rules) == ["fejfájás", "migrén"]
    assert candidate_queries("rosszul alszom", rules) == ["alvás", "alvászavar", "pihenés"]


def test_long_query_gets_broad_fallback() -> None:
    rules = load_language_rules()
    query = "mit ajánlotok egy hosszú túrára a hegyekben ha kint vagyunk egész nap"

    assert candidate_queries(query, rules) == list(rules.broad_fallback)


def test_short_unrelated_query_has_no_fallback() -> None:
    rules = load_language_rules()

    assert candidate_queries("kvantumfizika", rules) == []
    assert candidate_queries("", rules) == []


def test_custom_rule_table() -> None:
    rules = LanguageRules(
        fallback_clusters=(
            FallbackCluster(name="tea", triggers=("tea",), queries=("gyógytea",)),
            FallbackCluster(name="any", triggers=("te",), queries=("egyéb",)),
        )
    )

    assert matching_cluster("Teázás", rules.fallback_clusters).name == "tea"
    assert candidate_queries("tejföl", rules) == ["egyéb"]
