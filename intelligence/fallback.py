"""
Fallback Synthesizer
Schema-valid synthetic results for when scraping or the model lets us down
"""
import logging
import random
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from models import (
    KENYAN_COUNTIES,
    AggregatedContext,
    CrisisAssessment,
    FactCheckResult,
    FallbackPolicy,
    PredictionResult,
    RegionShare,
    SentimentAnalysis,
    VoteDistribution,
)


logger = logging.getLogger(__name__)

BASE_SHARE_MIN = 15.0
BASE_SHARE_MAX = 85.0

POSITIVE_WORDS = (
    "good", "excellent", "great", "positive", "strong", "successful", "improvement",
    "better", "peace", "agreement", "cooperation", "dialogue", "resolution",
)
NEGATIVE_WORDS = (
    "bad", "terrible", "poor", "negative", "weak", "failed", "worse", "problem",
    "anger", "frustration", "violence", "conflict", "crisis",
)
THREAT_WORDS = (
    "breaking", "urgent", "emergency", "crisis", "violence", "clash",
    "protest", "riot", "unrest", "attack", "shooting", "killed",
)

DEFAULT_POSITIVE_KEYWORDS = ["leadership", "development", "progress", "unity", "reform"]
DEFAULT_NEGATIVE_KEYWORDS = ["concerns", "challenges", "criticism", "controversy", "opposition"]

FACT_CHECK_EXPLANATION = (
    "Unable to verify this statement with available information. "
    "Please check with official sources."
)
FACT_CHECK_CONTEXT = (
    "This statement requires verification from authoritative Kenyan political sources."
)
FACT_CHECK_SOURCES = ["Official Government Sources", "Credible News Outlets", "Verified Social Media"]
FACT_CHECK_RELATED = ["Political statements require verification", "Check multiple sources"]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _count_words(text: str, words: Iterable[str]) -> Dict[str, int]:
    lowered = text.lower()
    counts = {}
    for word in words:
        hits = len(re.findall(rf"\b{re.escape(word)}\b", lowered))
        if hits:
            counts[word] = hits
    return counts


def _context_texts(context: Optional[AggregatedContext]) -> List[str]:
    if context is None:
        return []
    return [f"{item.title} {item.content}" for item in context.items]


def outlook(sentiment_score: float) -> str:
    if sentiment_score > 0.2:
        return "positive"
    if sentiment_score < -0.2:
        return "challenging"
    return "mixed"


class FallbackSynthesizer:
    """
    Produce a result for any task without touching the network.

    All randomness comes from one `random.Random`, seeded from
    `policy.seed` unless an rng is passed. `fork()` hands out a fresh
    generator rewound to that starting point, so every `synthesize` call
    with the same seed and inputs gives the same output.
    """

    def __init__(self, policy: Optional[FallbackPolicy] = None, rng: Optional[random.Random] = None):
        if policy is None:
            from config import get_fallback_settings
            policy = FallbackPolicy(**get_fallback_settings().model_dump())
        self.policy = policy
        self.rng = rng or random.Random(policy.seed)
        reproducible = rng is not None or policy.seed is not None
        self._start_state = self.rng.getstate() if reproducible else None

    def fork(self) -> "FallbackSynthesizer":
        """Same policy, own generator; unseeded synthesizers fork unseeded."""
        rng = random.Random()
        if self._start_state is not None:
            rng.setstate(self._start_state)
        return FallbackSynthesizer(self.policy, rng)

    # ------------------------------------------------------------------
    # Vote distribution
    # ------------------------------------------------------------------

    def base_share(self, sentiment_score: float) -> float:
        p = self.policy
        return clamp(p.baseline + sentiment_score * p.sentiment_weight, BASE_SHARE_MIN, BASE_SHARE_MAX)

    def county_share(self, base: float) -> float:
        p = self.policy
        jittered = base + (self.rng.random() - 0.5) * 2 * p.jitter
        return round(clamp(jittered, p.clamp_min, p.clamp_max), 1)

    def vote_distribution(
        self,
        candidate: str,
        sentiment_score: float,
        counties: Sequence[str] = KENYAN_COUNTIES,
    ) -> VoteDistribution:
        base = self.base_share(sentiment_score)
        regions = [RegionShare(name=county, predicted_vote_share=self.county_share(base)) for county in counties]
        analysis = (
            f"Based on sentiment analysis (score: {sentiment_score:.2f}), {candidate} shows "
            f"{outlook(sentiment_score)} electoral prospects across Kenya's counties, with regional "
            f"variations expected due to local political dynamics and economic factors."
        )
        return VoteDistribution(regions=regions, analysis=analysis)

    # ------------------------------------------------------------------
    # Sentiment
    # ------------------------------------------------------------------

    def sentiment(
        self,
        candidate: str,
        topic: str,
        context: Optional[AggregatedContext] = None,
    ) -> SentimentAnalysis:
        text = " ".join(_context_texts(context))
        positive = _count_words(text, POSITIVE_WORDS)
        negative = _count_words(text, NEGATIVE_WORDS)
        pos_total, neg_total = sum(positive.values()), sum(negative.values())

        if pos_total + neg_total:
            score = (pos_total - neg_total) / (pos_total + neg_total)
        else:
            score = self.rng.uniform(-0.2, 0.2)
        score = round(clamp(score, -1.0, 1.0), 3)

        summary = (
            f"Analysis of {candidate} regarding {topic} shows {outlook(score)} public sentiment "
            f"with varying perspectives across different regions and demographics. Current "
            f"discussions reflect both support and criticism based on recent political "
            f"developments and policy positions."
        )
        return SentimentAnalysis(
            sentiment_score=score,
            summary=summary,
            positive_keywords=self._ranked(positive) or list(DEFAULT_POSITIVE_KEYWORDS),
            negative_keywords=self._ranked(negative) or list(DEFAULT_NEGATIVE_KEYWORDS),
        )

    @staticmethod
    def _ranked(counts: Dict[str, int], limit: int = 8) -> List[str]:
        return [w for w, _ in sorted(counts.items(), key=lambda pair: -pair[1])][:limit]

    # ------------------------------------------------------------------
    # Fact check
    # ------------------------------------------------------------------

    def fact_check(self, statement: str) -> FactCheckResult:
        return FactCheckResult(
            statement=statement,
            verdict="unverified",
            confidence=0.5,
            explanation=FACT_CHECK_EXPLANATION,
            context=FACT_CHECK_CONTEXT,
            sources=list(FACT_CHECK_SOURCES),
            related_claims=list(FACT_CHECK_RELATED),
        )

    # ------------------------------------------------------------------
    # Crisis assessment
    # ------------------------------------------------------------------

    def crisis_assessment(self, context: Optional[AggregatedContext] = None) -> CrisisAssessment:
        texts = _context_texts(context)
        if not texts:
            return CrisisAssessment(
                urgency="MEDIUM",
                immediate_actions=["Continue monitoring", "Analyze trends"],
                monitoring_priority="Political developments",
                hours_to_review=2,
                confidence=0.5,
                summary="Real-time monitoring active, no live data available for assessment",
            )

        threats = [t for t in texts if _count_words(t, THREAT_WORDS)]
        negative_items = sum(
            1 for t in texts
            if _count_words(t, NEGATIVE_WORDS) and not _count_words(t, POSITIVE_WORDS)
        )
        negative_pct = negative_items / len(texts) * 100
        urgency = alert_level(len(threats), negative_pct)

        hours = {"CRITICAL": 1, "HIGH": 1, "MEDIUM": 2, "LOW": 6}[urgency]
        if threats:
            summary = f"{len(threats)} of {len(texts)} recent items mention unrest or threats"
            actions = ["Verify reports of unrest", "Continue monitoring", "Analyze trends"]
        else:
            summary = "Real-time monitoring active, no immediate crisis detected"
            actions = ["Continue monitoring", "Analyze trends"]

        return CrisisAssessment(
            urgency=urgency,
            immediate_actions=actions,
            monitoring_priority="Political developments",
            hours_to_review=hours,
            confidence=0.7 if len(texts) >= 5 else 0.5,
            summary=summary,
        )

    # ------------------------------------------------------------------

    def synthesize(
        self,
        task: str,
        params: Mapping[str, Any],
        context: Optional[AggregatedContext] = None,
    ) -> PredictionResult:
        """Fallback result for a task name; never raises for a known task."""
        synth = self.fork()
        builders: Dict[str, Callable[[], PredictionResult]] = {
            "vote_distribution": lambda: synth.vote_distribution(
                params.get("candidate", "The candidate"),
                float(params.get("sentiment_score", 0.0)),
            ),
            "sentiment": lambda: synth.sentiment(
                params.get("candidate", "The candidate"),
                params.get("topic", "current issues"),
                context,
            ),
            "fact_check": lambda: synth.fact_check(params.get("statement", "")),
            "crisis_assessment": lambda: synth.crisis_assessment(context),
        }
        if task not in builders:
            raise KeyError(f"No fallback for task '{task}'")
        logger.debug(f"Synthesizing fallback for {task}")
        return builders[task]()


def alert_level(threat_count: int, negative_pct: float) -> str:
    if threat_count > 3 and negative_pct > 70:
        return "CRITICAL"
    if threat_count > 1 and negative_pct > 50:
        return "HIGH"
    if threat_count > 0 or negative_pct > 30:
        return "MEDIUM"
    return "LOW"
