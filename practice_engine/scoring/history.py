"""
History-based scorers.

Both criteria read the external history store, so both share the same
failure policy: any lookup error is reported to the DegradationMonitor and
replaced by a neutral 0.5. A broken store can make a ranking less informed
but can never abort it.
"""
from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from practice_engine.models import (
    CandidateQuestion,
    HistoryRecord,
    HistoryStatus,
    SelectionCriteria,
    as_utc,
)
from practice_engine.repositories import HistoryStore
from practice_engine.telemetry import DegradationMonitor

NEUTRAL_SCORE = 0.5
SECONDS_PER_DAY = 86400


def whole_days(later: datetime, earlier: datetime) -> int:
    """Floor of the day difference ``later - earlier``."""
    return math.floor((as_utc(later) - as_utc(earlier)).total_seconds() / SECONDS_PER_DAY)


class _HistoryCriterion:
    """Shared lookup-with-fallback for history-backed criteria."""

    name = "history"

    def __init__(self, store: HistoryStore, monitor: Optional[DegradationMonitor] = None):
        self.store = store
        self.monitor = monitor or DegradationMonitor()

    async def score(
        self, candidate: CandidateQuestion, criteria: SelectionCriteria, now: datetime
    ) -> float:
        try:
            record = await self.store.get_history(criteria.user_id, candidate.id)
        except Exception as e:
            self.monitor.record(self.name, e, user_id=criteria.user_id, candidate_id=candidate.id)
            return NEUTRAL_SCORE
        return self.score_record(record, now)

    def score_record(self, record: Optional[HistoryRecord], now: datetime) -> float:
        raise NotImplementedError


class UserHistoryScorer(_HistoryCriterion):
    """
    Criterion 3: per-user solve history (default weight 0.20).

    Unseen problems are good for learning, unresolved attempts are strong
    retry candidates, and recently solved problems are pushed down.
    """

    name = "history"

    def score_record(self, record: Optional[HistoryRecord], now: datetime) -> float:
        if record is None:
            return 0.8

        if record.status == HistoryStatus.SOLVED:
            last = record.last_attempt_date or now
            days_since = whole_days(now, last)
            if days_since > 7:
                return 0.9
            if days_since > 3:
                return 0.7
            return 0.4

        if record.status == HistoryStatus.ATTEMPTED:
            return 0.85

        return 0.6


class SpacedRepetitionScorer(_HistoryCriterion):
    """
    Criterion 4: review due-timing (default weight 0.15).

    Only solved problems with a scheduled review carry a signal; everything
    else is neutral. Overdue or due today scores 1.0, then the score decays
    with distance to the review date, floored at 0.2.
    """

    name = "timing"

    def score_record(self, record: Optional[HistoryRecord], now: datetime) -> float:
        if record is None or not record.is_solved or record.next_review_date is None:
            return NEUTRAL_SCORE
        return self.score_days_until_review(whole_days(record.next_review_date, now))

    @staticmethod
    def score_days_until_review(days_until_review: int) -> float:
        if days_until_review <= 0:
            return 1.0
        if days_until_review <= 3:
            return 0.8
        if days_until_review <= 7:
            return 0.6
        return max(0.2, 1.0 - days_until_review * 0.05)
