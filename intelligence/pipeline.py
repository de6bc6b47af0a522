"""
Prediction Pipeline
scrape -> aggregate -> prompt -> model -> validate, with synthetic fallback
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from aggregator import DataAggregator
from models import (
    AggregatedContext,
    ModelId,
    ModelRequest,
    PipelineState,
    PredictionOutcome,
    PredictionResult,
)
from scrapers import default_sources
from utils.exceptions import InputValidationError, ModelError, PromptError

from .fallback import FallbackSynthesizer
from .gateway import ModelGateway
from .llm import resolve_model_id
from .prompt_builder import PromptBuilder
from .tasks import PredictionTask, get_task
from .validator import Invalid, ResponseValidator


logger = logging.getLogger(__name__)


class _Run:
    """Mutable bookkeeping of one invocation."""

    def __init__(self, task: PredictionTask):
        self.task = task
        self.states: List[PipelineState] = []
        self.context = AggregatedContext()
        self.model_id: Optional[ModelId] = None

    def enter(self, state: PipelineState) -> None:
        self.states.append(state)
        logger.debug(f"[{self.task.name}] -> {state.value}")


class PredictionPipeline:
    """
    End to end prediction.

    Every collaborator is injectable. Any failure after input validation
    ends in the fallback branch; only bad caller input raises.
    """

    def __init__(
        self,
        aggregator: Optional[DataAggregator] = None,
        gateway: Optional[ModelGateway] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        validator: Optional[ResponseValidator] = None,
        synthesizer: Optional[FallbackSynthesizer] = None,
        model_id: Union[ModelId, str, None] = None,
        min_context_items: int = 1,
    ):
        if model_id is None:
            from config import get_llm_settings
            model_id = get_llm_settings().default_model

        self.aggregator = aggregator or DataAggregator()
        self.gateway = gateway or ModelGateway()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.validator = validator or ResponseValidator()
        self.synthesizer = synthesizer or FallbackSynthesizer()
        self.model_id = resolve_model_id(model_id)
        self.min_context_items = max(0, int(min_context_items))

    async def produce_prediction(
        self,
        task_name: str,
        params: Union[Mapping[str, Any], BaseModel, None] = None,
        *,
        model_id: Union[ModelId, str, None] = None,
        skip_scraping: Optional[bool] = None,
        seed: Optional[int] = None,
    ) -> PredictionOutcome:
        """
        Run one prediction.

        Args:
            task_name: vote_distribution, sentiment, fact_check or crisis_assessment
            params: task parameters (validated against the task's params model)
            model_id: backend override for this call
            skip_scraping: skip live sources (defaults to the task's preference)
            seed: fixed fallback seed for this call

        Returns:
            PredictionOutcome whose result is always schema valid

        Raises:
            InputValidationError: unknown task or invalid params, before any work
        """
        task = get_task(task_name)
        parsed = task.parse_params(params)
        try:
            chosen_model = resolve_model_id(model_id) if model_id is not None else self.model_id
        except ValueError as e:
            raise InputValidationError(str(e))

        run = _Run(task)
        run.enter(PipelineState.INIT)
        run.model_id = chosen_model
        synthesizer = self._synthesizer_for(seed)
        skip = task.skip_scraping if skip_scraping is None else skip_scraping

        if not skip:
            run.enter(PipelineState.SCRAPING)
            configs = default_sources(task.categories, subject=task.subject(parsed))
            run.context = await self.aggregator.aggregate(configs)
        run.enter(PipelineState.AGGREGATED)

        if not skip and len(run.context.items) < self.min_context_items:
            return self._fallback(
                run, parsed, synthesizer,
                f"insufficient context ({len(run.context.items)} items)",
            )

        try:
            prompt = self.prompt_builder.build(run.context, task.template, task.schema, parsed.model_dump())
        except PromptError as e:
            return self._fallback(run, parsed, synthesizer, f"prompt error: {e.message}")
        run.enter(PipelineState.PROMPTED)

        request = ModelRequest(prompt=prompt, model_id=run.model_id, config=task.inference)
        try:
            raw_text = await self.gateway.generate(request)
        except ModelError as e:
            return self._fallback(run, parsed, synthesizer, f"model error: {e.message}")
        run.enter(PipelineState.MODEL_CALLED)

        result = self._interpret(task, raw_text, parsed, synthesizer)
        if isinstance(result, Invalid):
            run.enter(PipelineState.INVALID)
            return self._fallback(run, parsed, synthesizer, f"invalid response: {result.reason}")

        run.enter(PipelineState.VALIDATED)
        run.enter(PipelineState.DONE)
        logger.info(f"[{task.name}] answered by {run.model_id.value}")
        return self._outcome(run, result, "model")

    def _interpret(
        self,
        task: PredictionTask,
        raw_text: str,
        params: BaseModel,
        synthesizer: FallbackSynthesizer,
    ) -> Union[PredictionResult, Invalid]:
        checked = self.validator.validate(raw_text, task.schema)
        if isinstance(checked, Invalid):
            return checked
        try:
            return task.finalize(checked.data, params, synthesizer)
        except ValidationError as e:
            return Invalid(f"result does not fit {task.name}: {e.error_count()} errors")

    def _synthesizer_for(self, seed: Optional[int]) -> FallbackSynthesizer:
        if seed is None:
            return self.synthesizer.fork()
        policy = self.synthesizer.policy.model_copy(update={"seed": seed})
        return FallbackSynthesizer(policy)

    def _fallback(
        self,
        run: _Run,
        params: BaseModel,
        synthesizer: FallbackSynthesizer,
        reason: str,
    ) -> PredictionOutcome:
        logger.warning(f"[{run.task.name}] using fallback: {reason}")
        run.enter(PipelineState.FALLBACK)
        result = run.task.fallback(params, synthesizer, run.context)
        run.enter(PipelineState.DONE)
        return self._outcome(run, result, "fallback", reason)

    @staticmethod
    def _outcome(
        run: _Run,
        result: PredictionResult,
        source: str,
        reason: Optional[str] = None,
    ) -> PredictionOutcome:
        return PredictionOutcome(
            task=run.task.name,
            result=result,
            source=source,
            states=list(run.states),
            reason=reason,
            model_id=run.model_id,
            context_items=len(run.context.items),
            trending_terms=list(run.context.trending_terms),
            extra={
                "sources": [report.model_dump() for report in run.context.source_reports],
            },
        )

    async def aclose(self) -> None:
        await self.gateway.aclose()


async def produce_prediction(
    task_name: str,
    params: Union[Mapping[str, Any], BaseModel, None] = None,
    **kwargs,
) -> PredictionOutcome:
    """
    One-shot prediction with default collaborators.

    Keyword arguments go to `PredictionPipeline.produce_prediction`
    (model_id, skip_scraping, seed).
    """
    pipeline = PredictionPipeline()
    try:
        return await pipeline.produce_prediction(task_name, params, **kwargs)
    finally:
        await pipeline.aclose()
