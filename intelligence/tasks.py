"""
Prediction Tasks
What each prediction asks for, how its answer is shaped, and how it falls back
"""
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel, Field, ValidationError

from models import (
    KENYAN_COUNTIES,
    AggregatedContext,
    CrisisAssessment,
    FactCheckResult,
    InferenceConfig,
    PredictionResult,
    RegionShare,
    SentimentAnalysis,
    SourceCategory,
    VoteDistribution,
)
from utils.exceptions import InputValidationError

from .fallback import FallbackSynthesizer
from .schema import FieldKind, FieldSpec, OutputSchema
from .validator import Invalid


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Caller parameters
# ---------------------------------------------------------------------------

class VoteDistributionParams(BaseModel):
    candidate: str = Field(..., min_length=1, max_length=100)
    topic: str = Field(default="general election", min_length=1, max_length=200)
    sentiment_score: float = Field(default=0.0, ge=-1, le=1)


class SentimentParams(BaseModel):
    candidate: str = Field(..., min_length=1, max_length=100)
    topic: str = Field(..., min_length=1, max_length=200)


class FactCheckParams(BaseModel):
    statement: str = Field(..., min_length=1, max_length=1000)


class CrisisAssessmentParams(BaseModel):
    focus: str = Field(default="national politics", min_length=1, max_length=200)


# ---------------------------------------------------------------------------
# Task base
# ---------------------------------------------------------------------------

class PredictionTask(ABC):
    """
    One kind of prediction.

    Subclasses set the class attributes and implement `finalize` (validated
    JSON -> typed result) and `fallback` (synthetic result).
    """

    name: str = ""
    params_model: Type[BaseModel] = BaseModel
    categories: Tuple[SourceCategory, ...] = (SourceCategory.NEWS,)
    subject_param: Optional[str] = None
    skip_scraping: bool = False
    template: str = ""
    schema: OutputSchema = OutputSchema(name="empty")
    inference: InferenceConfig = InferenceConfig()

    def parse_params(self, raw: Union[Mapping[str, Any], BaseModel, None]) -> BaseModel:
        """Validate caller input; raises InputValidationError."""
        if isinstance(raw, self.params_model):
            return raw
        try:
            return self.params_model.model_validate(dict(raw or {}))
        except ValidationError as e:
            errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            raise InputValidationError(
                f"Invalid parameters for task '{self.name}'",
                {"errors": errors},
            )

    def subject(self, params: BaseModel) -> Optional[str]:
        if self.subject_param:
            return getattr(params, self.subject_param, None)
        return None

    @abstractmethod
    def finalize(
        self,
        data: Dict[str, Any],
        params: BaseModel,
        synthesizer: FallbackSynthesizer,
    ) -> Union[PredictionResult, Invalid]:
        pass

    @abstractmethod
    def fallback(
        self,
        params: BaseModel,
        synthesizer: FallbackSynthesizer,
        context: Optional[AggregatedContext] = None,
    ) -> PredictionResult:
        pass


def county_key(name: str) -> str:
    """Case and punctuation insensitive county name."""
    return re.sub(r"[^a-z0-9]", "", str(name).lower())


COUNTY_KEYS: Dict[str, str] = {county_key(c): c for c in KENYAN_COUNTIES}


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

class VoteDistributionTask(PredictionTask):
    name = "vote_distribution"
    params_model = VoteDistributionParams
    categories = (SourceCategory.NEWS, SourceCategory.SOCIAL)
    subject_param = "candidate"
    template = (
        "You are an expert political analyst specializing in Kenyan electoral predictions. "
        "Based on real-time data and sentiment analysis, predict the vote distribution for "
        "{candidate} across Kenya's 47 counties.\n\n"
        "CANDIDATE: {candidate}\n"
        "TOPIC: {topic}\n"
        "CURRENT SENTIMENT SCORE: {sentiment_score} (range: -1 to 1, where -1 is very negative, "
        "0 is neutral, 1 is very positive)\n\n"
        "Consider regional political dynamics (Mount Kenya, Coast, Western, Rift Valley, "
        "North Eastern), the urban and rural divide, economic issues and recent alliances.\n"
        "Include ALL 47 Kenyan counties with realistic vote share predictions (0-100). "
        "The analysis should be a 3-4 sentence summary of the overall prospects."
    )
    schema = OutputSchema(
        name="vote_distribution",
        fields=(
            FieldSpec(
                "regions",
                FieldKind.OBJECT_LIST,
                max_items=len(KENYAN_COUNTIES) * 2,
                item_fields=(
                    FieldSpec("name", FieldKind.STRING, description="county name"),
                    FieldSpec("predicted_vote_share", FieldKind.NUMBER, minimum=0, maximum=100),
                ),
                description="one entry per county",
            ),
            FieldSpec("analysis", FieldKind.STRING),
        ),
    )
    inference = InferenceConfig(temperature=0.3, max_tokens=3000)

    @property
    def min_counties(self) -> int:
        return math.ceil(len(KENYAN_COUNTIES) / 2)

    def finalize(self, data, params, synthesizer):
        shares: Dict[str, float] = {}
        for region in data["regions"]:
            county = COUNTY_KEYS.get(county_key(region["name"]))
            if county and county not in shares:
                shares[county] = region["predicted_vote_share"]

        if len(shares) < self.min_counties:
            return Invalid(f"only {len(shares)} of {len(KENYAN_COUNTIES)} counties recognised")

        missing = [c for c in KENYAN_COUNTIES if c not in shares]
        if missing:
            logger.info(f"Filling {len(missing)} counties the model omitted")
            base = synthesizer.base_share(params.sentiment_score)
            for county in missing:
                shares[county] = synthesizer.county_share(base)

        regions = [RegionShare(name=c, predicted_vote_share=round(shares[c], 1)) for c in KENYAN_COUNTIES]
        return VoteDistribution(regions=regions, analysis=data["analysis"])

    def fallback(self, params, synthesizer, context=None):
        return synthesizer.vote_distribution(params.candidate, params.sentiment_score)


class SentimentTask(PredictionTask):
    name = "sentiment"
    params_model = SentimentParams
    categories = (SourceCategory.NEWS, SourceCategory.SOCIAL)
    subject_param = "candidate"
    template = (
        "You are a sentiment analysis expert specializing in Kenyan politics. Analyze public "
        "sentiment for {candidate} on the topic \"{topic}\" based on the real-time data above.\n\n"
        "1. Give a sentiment score between -1 and 1 (-1.0 to -0.6 very negative, -0.6 to -0.2 "
        "moderately negative, -0.2 to 0.2 neutral or mixed, 0.2 to 0.6 moderately positive, "
        "0.6 to 1.0 very positive).\n"
        "2. Summarize the overall public sentiment and the factors driving it.\n"
        "3. Extract 5-8 keywords associated with positive sentiment.\n"
        "4. Extract 5-8 keywords associated with negative sentiment.\n"
        "Stay politically neutral and grounded in the data."
    )
    schema = OutputSchema(
        name="sentiment",
        fields=(
            FieldSpec("sentiment_score", FieldKind.NUMBER, minimum=-1, maximum=1),
            FieldSpec("summary", FieldKind.STRING),
            FieldSpec("positive_keywords", FieldKind.STRING_LIST, required=False, max_items=8, default=[]),
            FieldSpec("negative_keywords", FieldKind.STRING_LIST, required=False, max_items=8, default=[]),
        ),
    )
    inference = InferenceConfig(temperature=0.3, max_tokens=1000)

    def finalize(self, data, params, synthesizer):
        return SentimentAnalysis(
            sentiment_score=data["sentiment_score"],
            summary=data["summary"],
            positive_keywords=list(data["positive_keywords"] or []),
            negative_keywords=list(data["negative_keywords"] or []),
        )

    def fallback(self, params, synthesizer, context=None):
        return synthesizer.sentiment(params.candidate, params.topic, context)


class FactCheckTask(PredictionTask):
    name = "fact_check"
    params_model = FactCheckParams
    skip_scraping = True
    template = (
        "You are a fact-checker for Kenyan political statements. Analyze this statement.\n\n"
        "Statement: \"{statement}\"\n\n"
        "Guidelines:\n"
        "- Use \"true\" for factually accurate statements\n"
        "- Use \"false\" for demonstrably incorrect statements\n"
        "- Use \"misleading\" for partially true statements lacking context\n"
        "- Use \"unverified\" for claims that cannot be confirmed\n"
        "- Confidence should be 0.0-1.0\n"
        "- Focus on Kenyan political context"
    )
    schema = OutputSchema(
        name="fact_check",
        fields=(
            FieldSpec("statement", FieldKind.STRING, required=False),
            FieldSpec("verdict", FieldKind.ENUM, choices=("true", "false", "misleading", "unverified")),
            FieldSpec("confidence", FieldKind.NUMBER, minimum=0, maximum=1),
            FieldSpec("explanation", FieldKind.STRING),
            FieldSpec("context", FieldKind.STRING, required=False, default=""),
            FieldSpec("sources", FieldKind.STRING_LIST, required=False, default=[]),
            FieldSpec("related_claims", FieldKind.STRING_LIST, required=False, default=[]),
        ),
    )
    inference = InferenceConfig(temperature=0.1, max_tokens=800)

    def finalize(self, data, params, synthesizer):
        return FactCheckResult(
            statement=params.statement,
            verdict=data["verdict"],
            confidence=data["confidence"],
            explanation=data["explanation"],
            context=data["context"] or "",
            sources=list(data["sources"] or []),
            related_claims=list(data["related_claims"] or []),
        )

    def fallback(self, params, synthesizer, context=None):
        return synthesizer.fact_check(params.statement)


class CrisisAssessmentTask(PredictionTask):
    name = "crisis_assessment"
    params_model = CrisisAssessmentParams
    categories = (SourceCategory.NEWS, SourceCategory.GOVERNMENT)
    template = (
        "REAL-TIME CRISIS ANALYSIS FOR KENYA\n\n"
        "Focus: {focus}\n"
        "Assess the risk of political unrest from the recent coverage above. Rate urgency as "
        "LOW, MEDIUM, HIGH or CRITICAL, list immediate actions, name the area to prioritise "
        "for monitoring and say in how many hours the situation should be reviewed."
    )
    schema = OutputSchema(
        name="crisis_assessment",
        fields=(
            FieldSpec("urgency", FieldKind.ENUM, choices=("LOW", "MEDIUM", "HIGH", "CRITICAL")),
            FieldSpec("immediate_actions", FieldKind.STRING_LIST, required=False, max_items=5, default=[]),
            FieldSpec("monitoring_priority", FieldKind.STRING, required=False, default="Political developments"),
            FieldSpec("hours_to_review", FieldKind.INTEGER, required=False, minimum=1, maximum=72, default=2),
            FieldSpec("confidence", FieldKind.NUMBER, minimum=0, maximum=1),
            FieldSpec("summary", FieldKind.STRING),
        ),
    )
    inference = InferenceConfig(temperature=0.1, max_tokens=500)

    def finalize(self, data, params, synthesizer):
        return CrisisAssessment(
            urgency=data["urgency"],
            immediate_actions=list(data["immediate_actions"] or []),
            monitoring_priority=data["monitoring_priority"],
            hours_to_review=data["hours_to_review"],
            confidence=data["confidence"],
            summary=data["summary"],
        )

    def fallback(self, params, synthesizer, context=None):
        return synthesizer.crisis_assessment(context)


TASKS: Dict[str, PredictionTask] = {
    task.name: task
    for task in (VoteDistributionTask(), SentimentTask(), FactCheckTask(), CrisisAssessmentTask())
}


def get_task(name: str) -> PredictionTask:
    task = TASKS.get(str(name or "").strip().lower())
    if task is None:
        raise InputValidationError(
            f"Unknown task '{name}'",
            {"available": sorted(TASKS)},
        )
    return task
