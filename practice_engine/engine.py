"""
Practice Engine facade.

Wires scorers, selector and learning-path builder from Settings and exposes
the two public operations outer layers consume:

- select_optimal_questions(criteria, candidates)
- get_learning_path(user_id, platform, target_difficulty, count)
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from practice_engine.config import Settings, get_settings
from practice_engine.models import CandidateQuestion, HistoryRecord, QuestionScore, SelectionCriteria
from practice_engine.progression.tables import ProgressionRegistry, load_registry
from practice_engine.repositories import CandidateRepository, HistoryStore
from practice_engine.scheduling.review_scheduler import ReviewScheduler, ReviewState
from practice_engine.scoring.composite import (
    Clock,
    CompositeScorer,
    NotableThresholds,
    ScoringWeights,
)
from practice_engine.scoring.difficulty import DifficultyScale
from practice_engine.selection.learning_path import LearningPathBuilder
from practice_engine.selection.selector import QuestionSelector
from practice_engine.telemetry import DegradationMonitor


class PracticeEngine:
    """Recommendation engine over a candidate repository and a history store."""

    def __init__(
        self,
        candidates: CandidateRepository,
        history: HistoryStore,
        settings: Optional[Settings] = None,
        registry: Optional[ProgressionRegistry] = None,
        monitor: Optional[DegradationMonitor] = None,
        clock: Optional[Clock] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or load_registry(self.settings.progression_file)
        self.monitor = monitor or DegradationMonitor()
        self.scale = DifficultyScale(self.registry.difficulty_ordinals)

        self.scorer = CompositeScorer(
            history_store=history,
            registry=self.registry,
            weights=ScoringWeights.from_mapping(self.settings.weight_map()),
            thresholds=NotableThresholds.from_mapping(self.settings.threshold_map()),
            scale=self.scale,
            monitor=self.monitor,
            clock=clock,
        )
        self.selector = QuestionSelector(
            self.scorer,
            default_limit=self.settings.default_result_limit,
            max_concurrency=self.settings.max_concurrency,
            monitor=self.monitor,
        )
        self.path_builder = LearningPathBuilder(
            self.selector,
            candidates,
            history,
            scale=self.scale,
            pool_limit=self.settings.learning_path_pool_limit,
            missing_sample_size=self.settings.missing_concept_sample_size,
            monitor=self.monitor,
        )
        self.scheduler = ReviewScheduler(self.settings.review_interval_preset)

    async def select_optimal_questions(
        self,
        criteria: SelectionCriteria,
        candidates: Sequence[CandidateQuestion],
        limit: Optional[int] = None,
    ) -> list[QuestionScore]:
        return await self.selector.select_optimal_questions(criteria, candidates, limit)

    async def get_learning_path(
        self,
        user_id: str,
        platform: str,
        target_difficulty: str,
        count: int = 10,
    ) -> list[QuestionScore]:
        return await self.path_builder.get_learning_path(user_id, platform, target_difficulty, count)

    def is_in_progression_path(
        self,
        platform: str,
        current_tier: str,
        target_tier: str,
        max_steps: Optional[int] = None,
    ) -> bool:
        """Whether ``target_tier`` is a sane step from ``current_tier`` on a platform."""
        progression = self.registry.for_platform(platform)
        if progression is None:
            return False
        steps = self.settings.reachability_max_steps if max_steps is None else max_steps
        return progression.graph.reachable(current_tier, target_tier, steps)

    def stats(self) -> dict:
        """Degradation counters and selection latency summary."""
        return {
            "degraded": self.monitor.snapshot(),
            "latency_ms": self.selector.latency_ms.as_dict(),
        }

    def schedule_review(
        self,
        record: HistoryRecord,
        quality: int,
        now: Optional[datetime] = None,
    ) -> ReviewState:
        """Next review state after the learner revisits a solved problem."""
        return self.scheduler.schedule(ReviewState.from_record(record), quality, now or self.scorer.clock())

    def record_review(
        self,
        record: HistoryRecord,
        quality: int,
        now: Optional[datetime] = None,
        time_taken: Optional[float] = None,
    ) -> HistoryRecord:
        """Apply a review to a record and append it to the record's review history."""
        return self.scheduler.record_review(record, quality, now or self.scorer.clock(), time_taken)
