"""
Learning-Path Builder.

Derives a learner's state from their history, then asks the selector for
the best next problems from a platform/difficulty-filtered pool:

1. Average difficulty -> Easy / Medium / Hard bucket
2. Union of all practised topics -> current topics
3. Topics of unsolved records (sampled) -> missing concepts
"""
from __future__ import annotations

from typing import Iterable, Optional

from loguru import logger

from practice_engine.models import (
    HistoryRecord,
    LearningStyle,
    QuestionScore,
    SelectionCriteria,
)
from practice_engine.repositories import CandidateRepository, HistoryStore
from practice_engine.scoring.difficulty import DifficultyScale
from practice_engine.selection.selector import QuestionSelector
from practice_engine.telemetry import DegradationMonitor

DEFAULT_LEVEL = "Medium"


def average_difficulty(records: Iterable[HistoryRecord], scale: DifficultyScale) -> str:
    """Bucket the mean ordinal: <1.5 Easy, <2.5 Medium, else Hard."""
    ordinals = [scale.ordinal(r.difficulty) for r in records]
    if not ordinals:
        return DEFAULT_LEVEL

    mean = sum(ordinals) / len(ordinals)
    if mean < 1.5:
        return "Easy"
    if mean < 2.5:
        return "Medium"
    return "Hard"


def extract_topics(records: Iterable[HistoryRecord]) -> tuple[str, ...]:
    """Unique topics across records, first-seen order."""
    topics: dict[str, None] = {}
    for record in records:
        for topic in record.topics:
            topics.setdefault(topic, None)
    return tuple(topics)


def identify_missing_concepts(records: Iterable[HistoryRecord], sample_size: int = 5) -> tuple[str, ...]:
    """Topics of the first ``sample_size`` records not yet solved."""
    unsolved = [r for r in records if not r.is_solved][:max(sample_size, 0)]
    return extract_topics(unsolved)


class LearningPathBuilder:
    """Builds selection criteria from history and delegates to the selector."""

    def __init__(
        self,
        selector: QuestionSelector,
        candidates: CandidateRepository,
        history: HistoryStore,
        scale: Optional[DifficultyScale] = None,
        pool_limit: int = 50,
        missing_sample_size: int = 5,
        monitor: Optional[DegradationMonitor] = None,
    ):
        self.selector = selector
        self.candidates = candidates
        self.history = history
        self.scale = scale or selector.scorer.difficulty.scale
        self.pool_limit = pool_limit
        self.missing_sample_size = missing_sample_size
        self.monitor = monitor or selector.monitor

    async def build_criteria(self, user_id: str, platform: str) -> SelectionCriteria:
        """Criteria derived from the user's full history."""
        try:
            records = await self.history.list_history(user_id)
        except Exception as e:
            self.monitor.record("history_list", e, user_id=user_id)
            records = []

        return SelectionCriteria(
            user_id=user_id,
            current_difficulty=average_difficulty(records, self.scale),
            topics=extract_topics(records),
            missing_concepts=identify_missing_concepts(records, self.missing_sample_size),
            platform=platform,
            learning_style=LearningStyle.PROGRESSIVE,
        )

    async def get_learning_path(
        self,
        user_id: str,
        platform: str,
        target_difficulty: str,
        count: int = 10,
    ) -> list[QuestionScore]:
        """
        Recommend the next ``count`` problems for a user.

        Raises:
            CandidatePoolUnavailableError: If the candidate repository fails
        """
        criteria = await self.build_criteria(user_id, platform)
        pool = await self.candidates.fetch_candidates(platform, target_difficulty, self.pool_limit)

        logger.info(
            f"Learning path for {user_id}: level={criteria.current_difficulty}, "
            f"{len(criteria.topics)} topics, {len(criteria.missing_concepts)} missing concepts, "
            f"{len(pool)} candidates"
        )
        return await self.selector.select_optimal_questions(criteria, pool, limit=count)
