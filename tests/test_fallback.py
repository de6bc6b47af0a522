"""Tests for the synthetic fallback generator."""

from __future__ import annotations

import random

import pytest

from intelligence import FallbackSynthesizer
from intelligence.fallback import alert_level
from models import KENYAN_COUNTIES, AggregatedContext, FallbackPolicy

from fakes import make_item


def _synth(seed: int = 42) -> FallbackSynthesizer:
    return FallbackSynthesizer(FallbackPolicy(seed=seed))


def test_vote_distribution_is_deterministic_under_a_seed() -> None:
    first = _synth(7).vote_distribution("Jane Wanjiku", 0.3)
    second = _synth(7).vote_distribution("Jane Wanjiku", 0.3)

    assert first == second


def test_explicit_rng_overrides_policy_seed() -> None:
    a = FallbackSynthesizer(FallbackPolicy(seed=1), rng=random.Random(99)).vote_distribution("X", 0.0)
    b = FallbackSynthesizer(FallbackPolicy(seed=2), rng=random.Random(99)).vote_distribution("X", 0.0)

    assert a == b


def test_vote_distribution_covers_every_county_once() -> None:
    result = _synth().vote_distribution("Jane Wanjiku", 0.0)

    assert len(result.regions) == 47
    assert [r.name for r in result.regions] == list(KENYAN_COUNTIES)


@pytest.mark.parametrize("sentiment,low,high", [(1.0, 65.0, 85.0), (-1.0, 15.0, 35.0), (0.0, 40.0, 60.0)])
def test_vote_shares_stay_in_range(sentiment, low, high) -> None:
    policy = FallbackPolicy(seed=None)
    for seed in range(20):
        result = FallbackSynthesizer(policy, rng=random.Random(seed)).vote_distribution("X", sentiment)
        for region in result.regions:
            assert policy.clamp_min <= region.predicted_vote_share <= policy.clamp_max
            assert low <= region.predicted_vote_share <= high


def test_base_share_is_bounded() -> None:
    policy = FallbackPolicy(sentiment_weight=100)
    synth = FallbackSynthesizer(policy, rng=random.Random(0))

    assert synth.base_share(1.0) == 85.0
    assert synth.base_share(-1.0) == 15.0


@pytest.mark.parametrize("sentiment,word", [(0.5, "positive"), (-0.5, "challenging"), (0.1, "mixed")])
def test_vote_analysis_reflects_sentiment(sentiment, word) -> None:
    assert word in _synth().vote_distribution("Jane Wanjiku", sentiment).analysis


def test_sentiment_counts_context_keywords() -> None:
    context = AggregatedContext(
        items=[
            make_item("Leaders sign peace agreement in Nakuru", "The agreement brings peace after weeks of talks."),
            make_item("Clashes reported after rally", "Police said violence broke out in the county."),
        ]
    )
    result = _synth().sentiment("Jane Wanjiku", "security", context)

    # peace x2, agreement x2 vs violence x1
    assert result.sentiment_score == pytest.approx(0.6)
    assert result.positive_keywords == ["peace", "agreement"]
    assert result.negative_keywords == ["violence"]


def test_sentiment_without_signal_stays_neutral() -> None:
    for seed in range(10):
        result = _synth(seed).sentiment("Jane Wanjiku", "housing")
        assert -0.2 <= result.sentiment_score <= 0.2
        assert result.positive_keywords and result.negative_keywords


def test_fact_check_fallback_is_unverified() -> None:
    result = _synth().fact_check("The deficit halved last year")

    assert result.statement == "The deficit halved last year"
    assert result.verdict == "unverified"
    assert result.confidence == 0.5


def test_crisis_assessment_without_data_is_medium() -> None:
    result = _synth().crisis_assessment(None)

    assert result.urgency == "MEDIUM"
    assert result.immediate_actions == ["Continue monitoring", "Analyze trends"]


def test_crisis_assessment_escalates_with_threats() -> None:
    items = [
        make_item(f"Violence reported in town number {n}", "Residents described violence and a crisis in the area.")
        for n in range(5)
    ]
    result = _synth().crisis_assessment(AggregatedContext(items=items))

    assert result.urgency == "CRITICAL"
    assert result.hours_to_review == 1
    assert result.confidence == 0.7


def test_crisis_assessment_calm_coverage_is_low() -> None:
    items = [make_item("Parliament debates education funding", "Members held a calm dialogue on school funding.")]

    assert _synth().crisis_assessment(AggregatedContext(items=items)).urgency == "LOW"


@pytest.mark.parametrize(
    "threats,negative,expected",
    [(4, 80, "CRITICAL"), (2, 60, "HIGH"), (1, 0, "MEDIUM"), (0, 40, "MEDIUM"), (0, 10, "LOW")],
)
def test_alert_level_thresholds(threats, negative, expected) -> None:
    assert alert_level(threats, negative) == expected


def test_synthesize_dispatches_by_task_name() -> None:
    synth = _synth()

    assert len(synth.synthesize("vote_distribution", {"candidate": "X", "sentiment_score": 0.2}).regions) == 47
    assert synth.synthesize("fact_check", {"statement": "Claim"}).verdict == "unverified"
    with pytest.raises(KeyError):
        synth.synthesize("horoscope", {})


def test_synthesize_repeats_itself_under_a_seed() -> None:
    synth = _synth(7)
    params = {"candidate": "Jane Wanjiku", "sentiment_score": 0.3}

    first = synth.synthesize("vote_distribution", params)
    second = synth.synthesize("vote_distribution", params)

    assert first == second
    assert synth.synthesize("sentiment", {"candidate": "X", "topic": "jobs"}) == synth.synthesize(
        "sentiment", {"candidate": "X", "topic": "jobs"}
    )


def test_fork_rewinds_an_explicit_rng() -> None:
    synth = FallbackSynthesizer(FallbackPolicy(seed=None), rng=random.Random(5))
    synth.vote_distribution("X", 0.0)

    assert synth.fork().vote_distribution("X", 0.0) == synth.fork().vote_distribution("X", 0.0)
    assert synth.fork().vote_distribution("X", 0.0) == FallbackSynthesizer(
        FallbackPolicy(seed=None), rng=random.Random(5)
    ).vote_distribution("X", 0.0)


def test_unseeded_forks_draw_independently() -> None:
    synth = FallbackSynthesizer(FallbackPolicy(seed=None))

    assert synth.fork().vote_distribution("X", 0.0) != synth.fork().vote_distribution("X", 0.0)
