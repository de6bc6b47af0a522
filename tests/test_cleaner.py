"""Tests for text cleaning helpers."""

from processing import DataCleaner, normalize_title, top_terms


def test_clean_unescapes_and_collapses_whitespace() -> None:
    assert DataCleaner().clean("  Ruto &amp; Raila\n\n meet   in Mombasa ") == "Ruto & Raila meet in Mombasa"


def test_clean_truncates_without_ellipsis() -> None:
    assert DataCleaner(max_length=10).clean("Parliament adjourned early") == "Parliament"


def test_normalize_title_ignores_case_and_punctuation() -> None:
    assert normalize_title("MPs back Finance Bill!") == normalize_title("mps back finance bill")


def test_top_terms_breaks_ties_by_first_appearance() -> None:
    ranked = top_terms(["levy housing levy", "housing budget", "budget"], top_k=2)

    assert ranked == [("levy", 2), ("housing", 2)]
