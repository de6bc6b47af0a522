"""Tests for PromptBuilder."""

from __future__ import annotations

import pytest

from intelligence import FieldKind, FieldSpec, OutputSchema, PromptBuilder
from intelligence.prompt_builder import NO_DATA_NOTE
from models import AggregatedContext, TrendingTerm
from utils.exceptions import PromptError


SCHEMA = OutputSchema(
    name="sentiment",
    fields=(
        FieldSpec("sentiment_score", FieldKind.NUMBER, minimum=-1, maximum=1),
        FieldSpec("summary", FieldKind.STRING),
        FieldSpec("positive_keywords", FieldKind.STRING_LIST, required=False, max_items=8, default=[]),
    ),
)
TEMPLATE = "Analyze sentiment for {candidate} on {topic}."
PARAMS = {"candidate": "Jane Wanjiku", "topic": "housing"}


def test_empty_context_uses_no_data_note_and_contract() -> None:
    prompt = PromptBuilder(context_chars=800, max_prompt_chars=6000).build(None, TEMPLATE, SCHEMA, PARAMS)

    assert NO_DATA_NOTE in prompt
    assert "Analyze sentiment for Jane Wanjiku on housing." in prompt
    assert '"sentiment_score": number in [-1, 1]' in prompt
    assert '"positive_keywords": array of strings (at most 8)  // optional' in prompt
    assert "JSON only" in prompt


def test_context_excerpt_is_bounded(political_items) -> None:
    context = AggregatedContext(items=political_items)
    builder = PromptBuilder(context_chars=60, max_prompt_chars=6000)
    prompt = builder.build(context, TEMPLATE, SCHEMA, PARAMS)

    joined = "\n".join(f"{item.source}: {item.content}" for item in political_items)
    assert joined[:60] in prompt
    assert joined[:61] not in prompt


def test_trending_terms_are_listed(political_items) -> None:
    context = AggregatedContext(
        items=political_items,
        trending_terms=[TrendingTerm(term="budget", count=4), TrendingTerm(term="levy", count=2)],
    )
    prompt = PromptBuilder(context_chars=800, max_prompt_chars=6000).build(context, TEMPLATE, SCHEMA, PARAMS)

    assert "TRENDING TOPICS: budget (4), levy (2)" in prompt


def test_build_is_deterministic(political_items) -> None:
    context = AggregatedContext(items=political_items)
    builder = PromptBuilder(context_chars=800, max_prompt_chars=6000)

    assert builder.build(context, TEMPLATE, SCHEMA, PARAMS) == builder.build(context, TEMPLATE, SCHEMA, PARAMS)


def test_missing_parameter_raises_prompt_error() -> None:
    with pytest.raises(PromptError):
        PromptBuilder(context_chars=800, max_prompt_chars=6000).build(None, TEMPLATE, SCHEMA, {"candidate": "X"})


def test_oversized_task_raises_prompt_error() -> None:
    with pytest.raises(PromptError):
        PromptBuilder(context_chars=800, max_prompt_chars=100).build(None, "x" * 200, SCHEMA, {})


def test_whole_prompt_respects_bound(political_items) -> None:
    context = AggregatedContext(items=political_items * 5)
    builder = PromptBuilder(context_chars=800, max_prompt_chars=700)
    prompt = builder.build(context, TEMPLATE, SCHEMA, PARAMS)

    assert len(prompt) <= 700
    assert prompt.endswith(SCHEMA.describe())
