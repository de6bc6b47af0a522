"""Tests for DataAggregator fan-out, merge and trending terms."""

from __future__ import annotations

import pytest

from aggregator import DataAggregator
from models import SourceCategory
from scrapers import PageScraper, SelectorCascade, SourceConfig
from utils.exceptions import FetchTimeoutError, NetworkError

from fakes import FakeFetcher, FakeScraper, make_item, teaser_page


CASCADE = SelectorCascade.from_strings(".teaser", "h2", "p.summary")


def _config(name: str, url: str = "", category: SourceCategory = SourceCategory.NEWS) -> SourceConfig:
    return SourceConfig(name=name, url=url or f"https://{name.lower()}.example/news", category=category, cascade=CASCADE)


@pytest.mark.asyncio
async def test_partial_source_failure_keeps_surviving_items() -> None:
    good = [
        make_item("Senate approves county revenue sharing formula", "Senators agreed on a new formula for sharing revenue among counties.", "Alpha"),
        make_item("President assents to housing levy amendments", "The president signed the amended housing bill into law on Monday.", "Alpha"),
    ]

    def behaviour(config):
        if config.name == "Alpha":
            return good
        if config.name == "Beta":
            return NetworkError("HTTP 503", source=config.url)
        return "hang"

    aggregator = DataAggregator(scraper=FakeScraper(behaviour), source_timeout_sec=0.05)
    context = await aggregator.aggregate([_config("Alpha"), _config("Beta"), _config("Gamma")])

    assert [item.title for item in context.items] == [item.title for item in good]
    reports = {report.name: report for report in context.source_reports}
    assert reports["Alpha"].ok and reports["Alpha"].item_count == 2
    assert not reports["Beta"].ok and "HTTP 503" in reports["Beta"].error
    assert not reports["Gamma"].ok


@pytest.mark.asyncio
async def test_total_failure_yields_empty_context() -> None:
    def behaviour(config):
        return FetchTimeoutError("timed out", source=config.url)

    aggregator = DataAggregator(scraper=FakeScraper(behaviour))
    context = await aggregator.aggregate([_config("Alpha"), _config("Beta")])

    assert context.is_empty
    assert context.trending_terms == []
    assert [report.ok for report in context.source_reports] == [False, False]


@pytest.mark.asyncio
async def test_no_sources_is_an_empty_context() -> None:
    context = await DataAggregator(scraper=FakeScraper(lambda c: [])).aggregate([])

    assert context.is_empty
    assert context.source_reports == []


@pytest.mark.asyncio
async def test_merge_dedupes_per_source_and_caps() -> None:
    title = "Cabinet secretary grilled over fertiliser subsidy"
    content = "Members of parliament questioned the minister over delayed subsidy payments."

    def behaviour(config):
        items = [make_item(title, content, config.name), make_item(title.upper(), content, config.name)]
        items += [make_item(f"{config.name} county budget story number {n}", content, config.name) for n in range(3)]
        return items

    aggregator = DataAggregator(scraper=FakeScraper(behaviour), max_items=5)
    context = await aggregator.aggregate([_config("Alpha"), _config("Beta")])

    assert len(context.items) == 5
    alpha_titles = [item.title for item in context.items if item.source == "Alpha"]
    assert alpha_titles.count(title) == 1
    assert title.upper() not in alpha_titles
    # configuration order is preserved
    assert context.items[0].source == "Alpha"


def test_trending_terms_rank_by_count_then_first_seen() -> None:
    items = [
        make_item("Finance bill debate continues", "budget protest budget parliament"),
        make_item("Protests over budget spread", "protest parliament budget"),
    ]
    terms = DataAggregator.trending_terms(items, top_k=3)

    assert [(t.term, t.count) for t in terms] == [("budget", 3), ("protest", 2), ("parliament", 2)]


def test_trending_terms_drop_stop_words_and_short_words() -> None:
    items = [make_item("Short words only here please", "the and for mps tax will have their been")]

    assert DataAggregator.trending_terms(items, top_k=10) == []


@pytest.mark.asyncio
async def test_aggregate_with_page_scraper_and_fake_fetcher() -> None:
    page = teaser_page(
        [
            (
                "Governors push for more devolved funds",
                "The council of governors asked the treasury to raise county allocations this year.",
                "/devolution",
            ),
        ]
    )
    fetcher = FakeFetcher(
        {
            "https://alpha.example/news": page,
            "https://beta.example/news": NetworkError("HTTP 500"),
        }
    )
    aggregator = DataAggregator(scraper=PageScraper(fetcher))
    context = await aggregator.aggregate(
        [_config("Alpha", "https://alpha.example/news"), _config("Beta", "https://beta.example/news")]
    )

    assert len(context.items) == 1
    assert context.items[0].url == "https://alpha.example/devolution"
    assert sorted(fetcher.calls) == ["https://alpha.example/news", "https://beta.example/news"]
    assert context.summary() == {"Alpha": 1, "total": 1}
