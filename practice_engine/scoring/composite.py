"""
Composite Scorer.

Fuses the five criteria into a single score in [0, 1]:

    total = 0.25*difficulty + 0.30*concept + 0.20*history
          + 0.15*timing + 0.10*diversity

and attaches short human-readable reasons for every criterion that clears
its notable threshold. The reasons list is never empty.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional

from practice_engine.exceptions import ConfigurationError
from practice_engine.models import (
    CandidateQuestion,
    CriterionScores,
    QuestionScore,
    SelectionCriteria,
)
from practice_engine.progression.tables import ProgressionRegistry, default_registry
from practice_engine.repositories import HistoryStore
from practice_engine.scoring.concept import ConceptRelevanceScorer, covers_missing_concepts
from practice_engine.scoring.difficulty import DifficultyAlignmentScorer, DifficultyScale
from practice_engine.scoring.diversity import DiversityScorer
from practice_engine.scoring.history import SpacedRepetitionScorer, UserHistoryScorer
from practice_engine.telemetry import DegradationMonitor

CRITERIA = ("difficulty", "concept", "history", "timing", "diversity")

REASONS = {
    "difficulty": "Good difficulty match",
    "concept": "Covers missing concepts",
    "history": "Optimal for your learning path",
    "timing": "Perfect timing for review",
    "diversity": "Introduces new concepts",
}
FALLBACK_REASON = "Recommended for practice"

WEIGHT_SUM_TOLERANCE = 1e-6

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ScoringWeights:
    """Criterion weights; validated non-negative and summing to 1.0."""
    difficulty: float = 0.25
    concept: float = 0.30
    history: float = 0.20
    timing: float = 0.15
    diversity: float = 0.10

    def __post_init__(self):
        values = self.as_dict()
        negative = [name for name, value in values.items() if value < 0]
        if negative:
            raise ConfigurationError(f"Scoring weights must be non-negative: {', '.join(negative)}")
        total = sum(values.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ConfigurationError(f"Scoring weights must sum to 1.0, got {total:.6f}")

    @classmethod
    def from_mapping(cls, weights: Mapping[str, float]) -> "ScoringWeights":
        unknown = set(weights) - set(CRITERIA)
        if unknown:
            raise ConfigurationError(f"Unknown scoring criteria: {', '.join(sorted(unknown))}")
        return cls(**{name: float(value) for name, value in weights.items()})

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in CRITERIA}


@dataclass(frozen=True)
class NotableThresholds:
    """A criterion earns its reason when its score is strictly above these."""
    difficulty: float = 0.7
    concept: float = 0.7
    history: float = 0.6
    timing: float = 0.6
    diversity: float = 0.5

    @classmethod
    def from_mapping(cls, thresholds: Mapping[str, float]) -> "NotableThresholds":
        return cls(**{name: float(value) for name, value in thresholds.items() if name in CRITERIA})


class CompositeScorer:
    """
    Scores one candidate against one set of criteria.

    Holds no per-call state; one instance can score any number of
    candidates concurrently.
    """

    def __init__(
        self,
        history_store: HistoryStore,
        registry: Optional[ProgressionRegistry] = None,
        weights: Optional[ScoringWeights] = None,
        thresholds: Optional[NotableThresholds] = None,
        scale: Optional[DifficultyScale] = None,
        monitor: Optional[DegradationMonitor] = None,
        clock: Optional[Clock] = None,
    ):
        self.registry = registry or default_registry()
        self.weights = weights or ScoringWeights()
        self.thresholds = thresholds or NotableThresholds()
        self.monitor = monitor or DegradationMonitor()
        self.clock = clock or utc_now

        self.difficulty = DifficultyAlignmentScorer(self.registry, scale)
        self.concept = ConceptRelevanceScorer(self.registry)
        self.history = UserHistoryScorer(history_store, self.monitor)
        self.timing = SpacedRepetitionScorer(history_store, self.monitor)
        self.diversity = DiversityScorer()

    async def score_criteria(
        self,
        candidate: CandidateQuestion,
        criteria: SelectionCriteria,
        now: Optional[datetime] = None,
    ) -> CriterionScores:
        """Evaluate all five criteria; the two store lookups run concurrently."""
        now = now or self.clock()
        history_score, timing_score = await asyncio.gather(
            self.history.score(candidate, criteria, now),
            self.timing.score(candidate, criteria, now),
        )
        return CriterionScores(
            difficulty=self.difficulty.score(candidate, criteria),
            concept=self.concept.score(candidate, criteria),
            history=history_score,
            timing=timing_score,
            diversity=self.diversity.score(candidate, criteria),
        )

    async def score(
        self,
        candidate: CandidateQuestion,
        criteria: SelectionCriteria,
        now: Optional[datetime] = None,
    ) -> QuestionScore:
        scores = await self.score_criteria(candidate, criteria, now)
        return QuestionScore(
            question_id=candidate.id,
            title=candidate.title,
            difficulty=candidate.difficulty,
            platform=candidate.platform or criteria.platform,
            score=self.combine(scores),
            reasons=self.reasons(scores, covers_missing_concepts(candidate, criteria)),
            url=candidate.url,
            breakdown=scores,
        )

    def combine(self, scores: CriterionScores) -> float:
        """Weighted sum clamped to [0, 1]."""
        values = scores.as_dict()
        total = sum(values[name] * weight for name, weight in self.weights.as_dict().items())
        return max(0.0, min(1.0, total))

    def reasons(self, scores: CriterionScores, covers_missing: bool = False) -> tuple[str, ...]:
        """
        Reasons for every notable criterion, in criterion order.

        Covering any missing concept also earns the concept reason.
        """
        values = scores.as_dict()
        reasons = []
        for name in CRITERIA:
            notable = values[name] > getattr(self.thresholds, name)
            if name == "concept" and covers_missing:
                notable = True
            if notable:
                reasons.append(REASONS[name])
        return tuple(reasons) if reasons else (FALLBACK_REASON,)
