from matcher import Haystack, common_prefix_length, levenshtein_within, token_matches


def test_substring_match_is_accent_insensitive() -> None:
    assert token_matches("Hogyan győzd le az alvászavart", "alvaszavar")
    assert token_matches("hogyan gyozd le az alvaszavart", "Alvászavar")


def test_haystack_token_prefix_match() -> None:
    assert token_matches("Növeld az energiaszintedet", "energiaszint")


def test_variant_starting_with_haystack_token() -> None:
    assert token_matches("Stressz és alvás", "stresszkezeles", fuzzy=False)


def test_short_haystack_token_matches_longer_variant() -> None:
    assert token_matches("az elso lepes", "azonnali", fuzzy=False)
    assert token_matches("egy fej dolog", "fejfajas", fuzzy=False)


def test_reverse_prefix_needs_six_character_variant() -> None:
    assert not token_matches("egy fej dolog", "fejes", fuzzy=False)


def test_common_prefix_match_handles_inflection_drift() -> None:
    assert token_matches("Így növelheted az energiádat", "növelése", fuzzy=False)


def test_fuzzy_match_tolerates_a_typo() -> None:
    assert token_matches("migrén ellen", "migrin")
    assert not token_matches("migrén ellen", "migrin", fuzzy=False)


def test_fuzzy_match_skips_short_variants() -> None:
    assert not token_matches("abd", "abc")


def test_empty_variant_never_matches() -> None:
    assert not token_matches("bármi", "")
    assert not token_matches("bármi", "!!!")
    assert not token_matches("", "fejfajas")


def test_levenshtein_within_bounds() -> None:
    assert levenshtein_within("kitten", "sitting", 3)
    assert not levenshtein_within("kitten", "sitting", 2)
    assert not levenshtein_within("abc", "abcdef", 2)
    assert levenshtein_within("same", "same", 0)


def test_common_prefix_length() -> None:
    assert common_prefix_length("novelese", "novelheted") == 5
    assert common_prefix_length("", "abc") == 0


def test_haystack_from_raw() -> None:
    haystack = Haystack.from_raw("Fejfájás\nelleni <b>tippek</b>")

    assert haystack.text == "fejfajas elleni b tippek b"
    assert haystack.tokens == ("fejfajas", "elleni", "b", "tippek", "b")
