"""Tests for the selector-cascade extractor."""

from __future__ import annotations

from models import SourceCategory
from scrapers import HeuristicExtractor, QualityRules, SelectorCascade

from fakes import teaser_page


CASCADE = SelectorCascade(
    containers=(".does-not-exist", ".teaser"),
    titles=(".no-title", "h2"),
    contents=(".no-summary", "p.summary"),
)

FINANCE = (
    "Parliament passes the Finance Bill after long debate",
    "Members of parliament voted late on Tuesday to approve the contested finance bill amid protests.",
    "/politics/finance-bill",
)
IEBC = (
    "IEBC announces new voter registration drive",
    "The electoral commission said the drive targets young voters in all 47 counties ahead of the polls.",
    "https://www.iebc.or.ke/news/registration",
)


def _extract(html: str, rules: QualityRules | None = None):
    return HeuristicExtractor().extract(
        html,
        CASCADE,
        rules,
        source="Daily Nation",
        category=SourceCategory.NEWS,
        base_url="https://www.nation.co.ke/kenya/news",
    )


def test_extracts_items_with_first_matching_selectors() -> None:
    items = _extract(teaser_page([FINANCE, IEBC]))

    assert [item.title for item in items] == [FINANCE[0], IEBC[0]]
    assert items[0].content == FINANCE[1]
    assert items[0].source == "Daily Nation"
    assert items[0].category == SourceCategory.NEWS
    assert items[0].fetched_at.tzinfo is not None


def test_item_url_resolved_against_base_url() -> None:
    items = _extract(teaser_page([FINANCE, IEBC]))

    assert items[0].url == "https://www.nation.co.ke/politics/finance-bill"
    assert items[1].url == IEBC[2]


def test_boilerplate_never_accepted_as_title() -> None:
    html = teaser_page(
        [
            (
                "Subscribe to our newsletter for election updates",
                "Get the latest political news on the presidential election delivered to you daily.",
                "/subscribe",
            ),
            FINANCE,
        ]
    )
    items = _extract(html)

    assert [item.title for item in items] == [FINANCE[0]]
    assert all("subscribe" not in item.title.lower() for item in items)


def test_irrelevant_and_out_of_band_candidates_are_dropped() -> None:
    html = teaser_page(
        [
            (
                "Harambee Stars win friendly match in Nairobi",
                "The national football team beat their rivals two goals to nil at Kasarani stadium.",
                "/sports/stars",
            ),
            ("Budget", "Short title means this candidate misses the title band entirely here.", "/b"),
            ("Senate debates the housing levy", "Too short.", "/c"),
            FINANCE,
        ]
    )
    items = _extract(html)

    assert [item.title for item in items] == [FINANCE[0]]
    for item in items:
        assert 10 < len(item.title) < 150
        assert 20 < len(item.content) < 300


def test_duplicate_titles_within_a_page_are_collapsed() -> None:
    duplicate = (FINANCE[0].upper(), FINANCE[1], "/again")
    items = _extract(teaser_page([FINANCE, duplicate, IEBC]))

    assert len(items) == 2


def test_max_containers_bounds_the_scan() -> None:
    entries = [
        (f"County assembly {n} passes the devolution budget", FINANCE[1], f"/story/{n}")
        for n in range(6)
    ]
    items = _extract(teaser_page(entries), QualityRules(max_containers=2))

    assert len(items) == 2


def test_query_filter_requires_a_mention() -> None:
    items = _extract(teaser_page([FINANCE, IEBC]), QualityRules(query="voter"))

    assert [item.title for item in items] == [IEBC[0]]


def test_empty_relevance_vocabulary_disables_filter() -> None:
    sports = (
        "Harambee Stars win friendly match in Nairobi",
        "The national football team beat their rivals two goals to nil at Kasarani stadium.",
        "/sports/stars",
    )
    items = _extract(teaser_page([sports]), QualityRules(relevance_keywords=()))

    assert len(items) == 1


def test_no_matches_is_a_normal_empty_result() -> None:
    assert _extract("") == []
    assert _extract("<html><body><p>Nothing to see</p></body></html>") == []


def test_selector_cascade_from_strings_splits_and_strips() -> None:
    cascade = SelectorCascade.from_strings(".a, .b ,", "h2 a", ".summary, .excerpt")

    assert cascade.containers == (".a", ".b")
    assert cascade.titles == ("h2 a",)
    assert cascade.contents == (".summary", ".excerpt")
