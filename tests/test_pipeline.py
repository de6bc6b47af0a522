"""End-to-end tests of produce_prediction with fake scraping and fake models."""

from __future__ import annotations

import json

import pytest

from aggregator import DataAggregator
from intelligence import FallbackSynthesizer, ModelGateway, PredictionPipeline, PromptBuilder, RetryPolicy
from models import KENYAN_COUNTIES, FallbackPolicy, ModelId, PipelineState as S
from utils.exceptions import InputValidationError, NetworkError

from fakes import FakeLLM, FakeScraper


def _pipeline(scraper: FakeScraper, backend: FakeLLM, seed: int = 11) -> PredictionPipeline:
    return PredictionPipeline(
        aggregator=DataAggregator(scraper=scraper, source_timeout_sec=0.5),
        gateway=ModelGateway(
            retry_policy=RetryPolicy(max_attempts=2, delay=0),
            request_timeout=1.0,
            backends={ModelId.DEEPSEEK_CHAT: backend},
        ),
        prompt_builder=PromptBuilder(context_chars=800, max_prompt_chars=6000),
        synthesizer=FallbackSynthesizer(FallbackPolicy(seed=seed)),
        model_id=ModelId.DEEPSEEK_CHAT,
    )


def _vote_answer(counties=KENYAN_COUNTIES, share: float = 55.0) -> str:
    regions = [{"name": name, "predicted_vote_share": share} for name in counties]
    return "```json\n" + json.dumps({"regions": regions, "analysis": "Competitive race."}) + "\n```"


@pytest.mark.asyncio
async def test_happy_path_reaches_done_through_validation(political_items) -> None:
    scraper = FakeScraper(lambda config: political_items if config.name == "Daily Nation" else [])
    backend = FakeLLM([_vote_answer()])

    outcome = await _pipeline(scraper, backend).produce_prediction(
        "vote_distribution", {"candidate": "Jane Wanjiku", "sentiment_score": 0.1}
    )

    assert outcome.source == "model"
    assert outcome.states == [S.INIT, S.SCRAPING, S.AGGREGATED, S.PROMPTED, S.MODEL_CALLED, S.VALIDATED, S.DONE]
    assert [r.name for r in outcome.result.regions] == list(KENYAN_COUNTIES)
    assert all(r.predicted_vote_share == 55.0 for r in outcome.result.regions)
    assert outcome.context_items == len(political_items)
    assert political_items[0].content[:40] in backend.calls[0]


@pytest.mark.asyncio
async def test_total_scrape_failure_falls_back_without_model_call() -> None:
    scraper = FakeScraper(lambda config: NetworkError("HTTP 503", source=config.url))
    backend = FakeLLM([_vote_answer()])

    outcome = await _pipeline(scraper, backend).produce_prediction(
        "vote_distribution", {"candidate": "Jane Wanjiku", "sentiment_score": 1.0}
    )

    assert outcome.source == "fallback"
    assert outcome.states == [S.INIT, S.SCRAPING, S.AGGREGATED, S.FALLBACK, S.DONE]
    assert outcome.reason.startswith("insufficient context")
    assert len(outcome.result.regions) == 47
    assert all(10 <= r.predicted_vote_share <= 90 for r in outcome.result.regions)
    assert backend.calls == []
    assert all(not report["ok"] for report in outcome.extra["sources"])


@pytest.mark.asyncio
async def test_model_failure_falls_back(political_items) -> None:
    scraper = FakeScraper(lambda config: political_items)
    backend = FakeLLM([ChildProcessError("unexpected")])

    outcome = await _pipeline(scraper, backend).produce_prediction(
        "sentiment", {"candidate": "Jane Wanjiku", "topic": "housing"}
    )

    assert outcome.source == "fallback"
    assert outcome.states == [S.INIT, S.SCRAPING, S.AGGREGATED, S.PROMPTED, S.FALLBACK, S.DONE]
    assert outcome.reason.startswith("model error")
    assert -1 <= outcome.result.sentiment_score <= 1


@pytest.mark.asyncio
async def test_invalid_answer_goes_through_invalid_state(political_items) -> None:
    scraper = FakeScraper(lambda config: political_items)
    backend = FakeLLM([_vote_answer(KENYAN_COUNTIES[:5])])

    outcome = await _pipeline(scraper, backend).produce_prediction(
        "vote_distribution", {"candidate": "Jane Wanjiku"}
    )

    assert outcome.source == "fallback"
    assert outcome.states[-3:] == [S.INVALID, S.FALLBACK, S.DONE]
    assert [r.name for r in outcome.result.regions] == list(KENYAN_COUNTIES)


@pytest.mark.asyncio
async def test_unparseable_answer_falls_back(political_items) -> None:
    scraper = FakeScraper(lambda config: political_items)
    backend = FakeLLM(["I am unable to provide predictions."])

    outcome = await _pipeline(scraper, backend).produce_prediction(
        "crisis_assessment", {"focus": "Nairobi"}
    )

    assert outcome.source == "fallback"
    assert S.INVALID in outcome.states
    assert outcome.result.urgency in ("LOW", "MEDIUM", "HIGH", "CRITICAL")


@pytest.mark.asyncio
async def test_fact_check_skips_scraping() -> None:
    scraper = FakeScraper(lambda config: [])
    answer = json.dumps(
        {"verdict": "Misleading", "confidence": 1.4, "explanation": "Figures are older than claimed."}
    )
    backend = FakeLLM([answer])

    outcome = await _pipeline(scraper, backend).produce_prediction(
        "fact_check", {"statement": "Inflation is at a record low"}
    )

    assert scraper.calls == []
    assert outcome.states == [S.INIT, S.AGGREGATED, S.PROMPTED, S.MODEL_CALLED, S.VALIDATED, S.DONE]
    assert outcome.result.verdict == "misleading"
    assert outcome.result.confidence == 1.0


@pytest.mark.asyncio
async def test_bad_input_raises_before_any_work() -> None:
    scraper = FakeScraper(lambda config: [])
    backend = FakeLLM(["unused"])
    pipeline = _pipeline(scraper, backend)

    with pytest.raises(InputValidationError):
        await pipeline.produce_prediction("horoscope", {})
    with pytest.raises(InputValidationError):
        await pipeline.produce_prediction("sentiment", {"candidate": "Jane Wanjiku"})
    with pytest.raises(InputValidationError):
        await pipeline.produce_prediction("fact_check", {"statement": "x"}, model_id="gpt-99")

    assert scraper.calls == []
    assert backend.calls == []


@pytest.mark.asyncio
async def test_fallback_is_reproducible_with_seed() -> None:
    scraper = FakeScraper(lambda config: [])
    params = {"candidate": "Jane Wanjiku", "sentiment_score": -0.4}
    pipeline = _pipeline(scraper, FakeLLM(["unused"]))

    first = await pipeline.produce_prediction("vote_distribution", params, seed=3)
    second = await pipeline.produce_prediction("vote_distribution", params, seed=3)

    assert first.source == second.source == "fallback"
    assert first.result == second.result


@pytest.mark.asyncio
async def test_repeated_fallbacks_on_one_pipeline_agree() -> None:
    scraper = FakeScraper(lambda config: [])
    params = {"candidate": "Jane Wanjiku", "sentiment_score": 0.2}
    pipeline = _pipeline(scraper, FakeLLM(["unused"]), seed=11)

    first = await pipeline.produce_prediction("vote_distribution", params)
    second = await pipeline.produce_prediction("vote_distribution", params)

    assert first.source == second.source == "fallback"
    assert first.result.model_dump_json() == second.result.model_dump_json()
