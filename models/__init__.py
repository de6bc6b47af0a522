"""
Data Models
"""
from .schemas import (
    KENYAN_COUNTIES,
    SourceCategory,
    ScrapedItem,
    TrendingTerm,
    SourceReport,
    AggregatedContext,
    ModelId,
    InferenceConfig,
    ModelRequest,
    ModelText,
    ModelFailure,
    ModelResponse,
    RegionShare,
    VoteDistribution,
    SentimentAnalysis,
    FactCheckResult,
    CrisisAssessment,
    PredictionResult,
    FallbackPolicy,
    PipelineState,
    PredictionOutcome,
)

__all__ = [
    "KENYAN_COUNTIES",
    "SourceCategory",
    "ScrapedItem",
    "TrendingTerm",
    "SourceReport",
    "AggregatedContext",
    "ModelId",
    "InferenceConfig",
    "ModelRequest",
    "ModelText",
    "ModelFailure",
    "ModelResponse",
    "RegionShare",
    "VoteDistribution",
    "SentimentAnalysis",
    "FactCheckResult",
    "CrisisAssessment",
    "PredictionResult",
    "FallbackPolicy",
    "PipelineState",
    "PredictionOutcome",
]
