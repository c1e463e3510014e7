"""
Question Selector.

Fans the composite scorer out over a candidate pool, then keeps the
positive scores, sorts them (stable, so equal scores keep input order) and
truncates to the requested cap.
"""
from __future__ import annotations

import asyncio
import time
from datetime import datetime
from typing import Optional, Sequence

from loguru import logger

from practice_engine.models import CandidateQuestion, QuestionScore, SelectionCriteria
from practice_engine.scoring.composite import CompositeScorer
from practice_engine.telemetry import DegradationMonitor, RunningStats

DEFAULT_LIMIT = 6


class QuestionSelector:
    """
    Rank candidates for a learner.

    A failure while scoring one candidate drops that candidate only; the
    rest of the batch is still ranked and returned.
    """

    def __init__(
        self,
        scorer: CompositeScorer,
        default_limit: int = DEFAULT_LIMIT,
        max_concurrency: int = 0,
        monitor: Optional[DegradationMonitor] = None,
    ):
        """
        Initialize the selector.

        Args:
            scorer: Composite scorer applied to each candidate
            default_limit: Cap used when a call passes no limit
            max_concurrency: Candidates scored at once (0 = all at once)
            monitor: Receives dropped-candidate events (defaults to the scorer's)
        """
        self.scorer = scorer
        self.default_limit = default_limit
        self.max_concurrency = max_concurrency
        self.monitor = monitor or scorer.monitor
        self.latency_ms = RunningStats()

    async def select_optimal_questions(
        self,
        criteria: SelectionCriteria,
        candidates: Sequence[CandidateQuestion],
        limit: Optional[int] = None,
    ) -> list[QuestionScore]:
        """
        Score every candidate and return the top ``limit`` by score.

        Args:
            criteria: Learner state for this call
            candidates: Candidate pool (read-only)
            limit: Maximum results (defaults to ``default_limit``)

        Returns:
            QuestionScores sorted by score descending
        """
        limit = self.default_limit if limit is None else limit
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        started = time.perf_counter()
        now = self.scorer.clock()
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None

        results = await asyncio.gather(
            *(self._score_one(candidate, criteria, now, semaphore) for candidate in candidates)
        )

        scored = [r for r in results if r is not None and r.score > 0]
        ranked = sorted(scored, key=lambda s: s.score, reverse=True)[:limit]

        elapsed_ms = (time.perf_counter() - started) * 1000
        self.latency_ms.add(elapsed_ms)
        logger.debug(
            f"Selected {len(ranked)}/{len(candidates)} candidates for user {criteria.user_id} "
            f"in {elapsed_ms:.1f}ms"
        )
        return ranked

    async def _score_one(
        self,
        candidate: CandidateQuestion,
        criteria: SelectionCriteria,
        now: datetime,
        semaphore: Optional[asyncio.Semaphore],
    ) -> Optional[QuestionScore]:
        try:
            if semaphore is None:
                return await self.scorer.score(candidate, criteria, now)
            async with semaphore:
                return await self.scorer.score(candidate, criteria, now)
        except Exception as e:
            logger.error(f"Scoring failed for candidate {candidate.id}: {e}")
            self.monitor.record("candidate", e, user_id=criteria.user_id, candidate_id=candidate.id)
            return None
