"""
Data Models / Schemas
Shared data structures of one prediction invocation
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


KENYAN_COUNTIES = (
    "Mombasa", "Kwale", "Kilifi", "Tana River", "Lamu", "Taita-Taveta", "Garissa", "Wajir",
    "Mandera", "Marsabit", "Isiolo", "Meru", "Tharaka-Nithi", "Embu", "Kitui", "Machakos",
    "Makueni", "Nyandarua", "Nyeri", "Kirinyaga", "Muranga", "Kiambu", "Turkana", "West Pokot",
    "Samburu", "Trans Nzoia", "Uasin Gishu", "Elgeyo-Marakwet", "Nandi", "Baringo", "Laikipia",
    "Nakuru", "Narok", "Kajiado", "Kericho", "Bomet", "Kakamega", "Vihiga", "Bungoma", "Busia",
    "Siaya", "Kisumu", "Homa Bay", "Migori", "Kisii", "Nyamira", "Nairobi",
)


class SourceCategory(str, Enum):
    """Kind of page a source publishes"""
    NEWS = "news"
    GOVERNMENT = "government"
    SOCIAL = "social"


# ---------------------------------------------------------------------------
# Scraping
# ---------------------------------------------------------------------------

class ScrapedItem(BaseModel):
    """One article teaser extracted from a page"""
    title: str = Field(..., min_length=1, max_length=150, description="Headline")
    content: str = Field(..., min_length=1, max_length=300, description="Summary text")
    source: str = Field(..., description="Origin name, e.g. 'Daily Nation'")
    fetched_at: datetime = Field(default_factory=_utcnow, description="Extraction time")
    url: Optional[str] = Field(None, description="Article link")
    category: Optional[SourceCategory] = Field(None, description="Source category")


class TrendingTerm(BaseModel):
    """A content word and how often it appeared"""
    term: str
    count: int = Field(..., ge=1)


class SourceReport(BaseModel):
    """Outcome of one source task"""
    name: str
    ok: bool
    item_count: int = 0
    error: Optional[str] = None


class AggregatedContext(BaseModel):
    """Everything scraped during one invocation"""
    query: Optional[str] = Field(None, description="Optional keyword filter")
    items: List[ScrapedItem] = Field(default_factory=list)
    trending_terms: List[TrendingTerm] = Field(default_factory=list)
    source_reports: List[SourceReport] = Field(default_factory=list)
    collected_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def summary(self) -> Dict[str, int]:
        """Item counts per source"""
        counts: Dict[str, int] = {}
        for item in self.items:
            counts[item.source] = counts.get(item.source, 0) + 1
        counts["total"] = len(self.items)
        return counts


# ---------------------------------------------------------------------------
# Model calls
# ---------------------------------------------------------------------------

class ModelId(str, Enum):
    """Supported generative backends"""
    DEEPSEEK_CHAT = "deepseek-chat"
    DEEPSEEK_CODER = "deepseek-coder"
    DEEPSEEK_REASONER = "deepseek-reasoner"
    GEMINI_FLASH = "gemini-2.0-flash"
    GPT_4O_MINI = "gpt-4o-mini"
    CLAUDE_SONNET = "claude-3-5-sonnet"

    @property
    def provider(self) -> str:
        return MODEL_PROVIDERS[self]

    @property
    def api_model_name(self) -> str:
        return API_MODEL_NAMES.get(self, self.value)


MODEL_PROVIDERS: Dict[ModelId, str] = {
    ModelId.DEEPSEEK_CHAT: "deepseek",
    ModelId.DEEPSEEK_CODER: "deepseek",
    ModelId.DEEPSEEK_REASONER: "deepseek",
    ModelId.GEMINI_FLASH: "gemini",
    ModelId.GPT_4O_MINI: "openai",
    ModelId.CLAUDE_SONNET: "anthropic",
}

API_MODEL_NAMES: Dict[ModelId, str] = {
    ModelId.CLAUDE_SONNET: "claude-3-5-sonnet-20241022",
}


class InferenceConfig(BaseModel):
    """Sampling parameters for one completion"""
    model_config = ConfigDict(frozen=True)

    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, gt=0)


class ModelRequest(BaseModel):
    """A prompt addressed to one backend; immutable once built"""
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1)
    model_id: ModelId = ModelId.DEEPSEEK_CHAT
    config: InferenceConfig = Field(default_factory=InferenceConfig)


class ModelText(BaseModel):
    """Successful completion"""
    kind: Literal["text"] = "text"
    raw_text: str


class ModelFailure(BaseModel):
    """Terminal backend failure after retries"""
    kind: Literal["failure"] = "failure"
    error: str
    provider: Optional[str] = None
    transient: bool = False


ModelResponse = Union[ModelText, ModelFailure]


# ---------------------------------------------------------------------------
# Prediction results
# ---------------------------------------------------------------------------

class RegionShare(BaseModel):
    """Predicted vote share in one county"""
    name: str
    predicted_vote_share: float = Field(..., ge=0, le=100)


class VoteDistribution(BaseModel):
    """County level vote distribution for one candidate"""
    regions: List[RegionShare]
    analysis: str


class SentimentAnalysis(BaseModel):
    """Public sentiment toward a candidate on a topic"""
    sentiment_score: float = Field(..., ge=-1, le=1)
    summary: str
    positive_keywords: List[str] = Field(default_factory=list, max_length=8)
    negative_keywords: List[str] = Field(default_factory=list, max_length=8)


Verdict = Literal["true", "false", "misleading", "unverified"]


class FactCheckResult(BaseModel):
    """Verdict on a political statement"""
    statement: str
    verdict: Verdict
    confidence: float = Field(..., ge=0, le=1)
    explanation: str
    context: str = ""
    sources: List[str] = Field(default_factory=list)
    related_claims: List[str] = Field(default_factory=list)


Urgency = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]


class CrisisAssessment(BaseModel):
    """Real-time unrest assessment from recent coverage"""
    urgency: Urgency
    immediate_actions: List[str] = Field(default_factory=list)
    monitoring_priority: str
    hours_to_review: int = Field(..., ge=1, le=72)
    confidence: float = Field(..., ge=0, le=1)
    summary: str


PredictionResult = Union[VoteDistribution, SentimentAnalysis, FactCheckResult, CrisisAssessment]


class FallbackPolicy(BaseModel):
    """Clamp ranges, derivation constants and seed of the synthetic fallback"""
    model_config = ConfigDict(frozen=True)

    baseline: float = 50.0
    sentiment_weight: float = 25.0
    jitter: float = Field(default=10.0, ge=0)
    clamp_min: float = 10.0
    clamp_max: float = 90.0
    seed: Optional[int] = None


class PipelineState(str, Enum):
    """States of one invocation"""
    INIT = "INIT"
    SCRAPING = "SCRAPING"
    AGGREGATED = "AGGREGATED"
    PROMPTED = "PROMPTED"
    MODEL_CALLED = "MODEL_CALLED"
    VALIDATED = "VALIDATED"
    INVALID = "INVALID"
    FALLBACK = "FALLBACK"
    DONE = "DONE"


class PredictionOutcome(BaseModel):
    """What produce_prediction hands back to its caller"""
    task: str
    result: PredictionResult
    source: Literal["model", "fallback"]
    states: List[PipelineState] = Field(default_factory=list)
    reason: Optional[str] = Field(None, description="Why the fallback path was taken")
    model_id: Optional[ModelId] = None
    context_items: int = 0
    trending_terms: List[TrendingTerm] = Field(default_factory=list)
    completed_at: datetime = Field(default_factory=_utcnow)
    extra: Dict[str, Any] = Field(default_factory=dict)
