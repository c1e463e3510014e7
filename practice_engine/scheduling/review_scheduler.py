"""
Review Scheduler.

Assigns the next review date after a learner revisits a solved problem.
An SM-2 style ladder of fixed intervals is walked on successful recall;
past the end of the ladder intervals grow geometrically, scaled by recall
quality. Failed recall steps back down the ladder.

The spaced-repetition timing scorer consumes the ``next_review_date``
produced here.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from practice_engine.models import HistoryRecord, HistoryStatus, ReviewEntry, as_utc, round_half_up

# =============================================================================
# CONSTANTS
# =============================================================================

INTERVAL_PRESETS: dict[str, tuple[int, ...]] = {
    "aggressive": (1, 2, 4, 7, 14, 21, 30, 60),
    "balanced": (1, 3, 7, 14, 30, 60, 90, 180),
    "relaxed": (2, 5, 10, 20, 40, 80, 120, 240),
}

# Recall quality (1-5)
QUALITY_AGAIN = 1    # Forgot completely
QUALITY_HARD = 2     # Partial recall
QUALITY_GOOD = 3     # Recalled with effort
QUALITY_EASY = 4     # Recalled comfortably
QUALITY_PERFECT = 5  # Instant recall

GROWTH_FACTOR = 2.5
PERFECT_BONUS = 1.2
RETAINED_REPETITIONS = 3
REVIEWABLE = (HistoryStatus.SOLVED.value, HistoryStatus.ATTEMPTED.value)


@dataclass(frozen=True)
class ReviewState:
    """Scheduling state for one (user, problem) pair."""
    repetition: int = 0
    interval: int = 0
    next_review_date: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: HistoryRecord) -> "ReviewState":
        return cls(
            repetition=record.repetition,
            interval=record.interval,
            next_review_date=record.next_review_date,
        )


class ReviewScheduler:
    """Ladder-based review interval scheduler."""

    def __init__(self, intervals: Sequence[int] | str = "balanced"):
        if isinstance(intervals, str):
            if intervals not in INTERVAL_PRESETS:
                raise ValueError(f"Unknown interval preset: {intervals}")
            intervals = INTERVAL_PRESETS[intervals]
        if not intervals or any(i <= 0 for i in intervals):
            raise ValueError("Interval ladder must be non-empty and positive")
        self.intervals = tuple(intervals)

    def next_interval(self, state: ReviewState, quality: int) -> tuple[int, int]:
        """
        Compute the new (repetition, interval) pair.

        Raises:
            ValueError: If quality is outside 1-5
        """
        if not QUALITY_AGAIN <= quality <= QUALITY_PERFECT:
            raise ValueError(f"quality must be within 1-5, got {quality}")

        ladder = self.intervals

        if quality >= QUALITY_GOOD:
            repetition = state.repetition + 1
            if repetition < len(ladder):
                interval = ladder[repetition]
            else:
                interval = round_half_up(state.interval * GROWTH_FACTOR * (quality / QUALITY_GOOD))
            if quality == QUALITY_PERFECT:
                interval = round_half_up(interval * PERFECT_BONUS)
        elif quality == QUALITY_AGAIN:
            repetition = 0
            interval = ladder[0]
        else:
            # Partial reset keeps half the progress
            repetition = state.repetition // 2
            interval = ladder[repetition] if repetition < len(ladder) else ladder[0]

        return repetition, max(interval, 1)

    def schedule(self, state: ReviewState, quality: int, now: datetime) -> ReviewState:
        """Apply one review and return the new state."""
        repetition, interval = self.next_interval(state, quality)
        return ReviewState(
            repetition=repetition,
            interval=interval,
            next_review_date=as_utc(now) + timedelta(days=interval),
        )

    def start(self, now: datetime) -> ReviewState:
        """Begin the review cycle for a freshly solved problem."""
        first = self.intervals[0]
        return ReviewState(repetition=0, interval=first, next_review_date=as_utc(now) + timedelta(days=first))

    def record_review(
        self,
        record: HistoryRecord,
        quality: int,
        now: datetime,
        time_taken: Optional[float] = None,
        tags: Sequence[str] = (),
    ) -> HistoryRecord:
        """
        Apply one review to a record and append it to the review history.

        Args:
            record: Current history record
            quality: Recall quality 1-5
            now: Review time
            time_taken: Minutes spent, if tracked
            tags: Free-form labels for the review

        Returns:
            A new HistoryRecord with updated scheduling fields
        """
        state = self.schedule(ReviewState.from_record(record), quality, now)
        entry = ReviewEntry(
            quality=quality,
            date=now,
            interval=state.interval,
            next_review_date=state.next_review_date,
            time_taken=time_taken,
            tags=tuple(tags),
        )
        return replace(
            record,
            repetition=state.repetition,
            interval=state.interval,
            next_review_date=state.next_review_date,
            reviews=record.reviews + (entry,),
        )

    def reset(self, record: HistoryRecord, now: datetime) -> HistoryRecord:
        """Start the review cycle over from the first rung; history is kept."""
        state = self.start(now)
        return replace(
            record,
            repetition=state.repetition,
            interval=state.interval,
            next_review_date=state.next_review_date,
        )


def mark_mastered(record: HistoryRecord) -> HistoryRecord:
    """Take a problem out of the review cycle."""
    return replace(record, status=HistoryStatus.SOLVED.value, next_review_date=None)


# =============================================================================
# Review queue helpers
# =============================================================================


def is_due(record: HistoryRecord, now: datetime) -> bool:
    """Due on or before today (day granularity, UTC)."""
    if record.next_review_date is None:
        return False
    return record.next_review_date.date() <= as_utc(now).date()


def due_reviews(records: Iterable[HistoryRecord], now: datetime, limit: int = 10) -> list[HistoryRecord]:
    """Due solved/attempted records, oldest review date first, then fewest repetitions."""
    due = [r for r in records if r.status in REVIEWABLE and is_due(r, now)]
    due.sort(key=lambda r: (r.next_review_date, r.repetition))
    return due[:max(limit, 0)]


def review_stats(records: Iterable[HistoryRecord], now: datetime) -> dict[str, float]:
    """Summary counts over solved/attempted records that are in the review cycle."""
    in_review = [r for r in records if r.status in REVIEWABLE and r.next_review_date is not None]
    total = len(in_review)

    active = [r.interval for r in in_review if r.interval > 0]
    average_interval = round_half_up(sum(active) / len(active)) if active else 0

    retained = sum(1 for r in in_review if r.repetition >= RETAINED_REPETITIONS)
    retention_rate = round(retained / total * 100, 2) if total else 0.0

    return {
        "total_reviews": total,
        "due_reviews": sum(1 for r in in_review if is_due(r, now)),
        "completed_reviews": sum(1 for r in in_review if r.repetition > 0),
        "average_interval": average_interval,
        "retention_rate": retention_rate,
    }


# =============================================================================
# Review analytics
# =============================================================================

TREND_WINDOW = 3
COMMON_TAG_LIMIT = 5
MAX_TIPS = 3
OVERDUE_ALERT_DAYS = 3
EARLY_REVIEW_DAYS = 2


def _one_decimal(value: float) -> float:
    return round_half_up(value * 10) / 10


def review_analytics(entries: Sequence[ReviewEntry]) -> dict:
    """
    Performance summary over one problem's review history.

    success_rate is the percentage of reviews with quality >= 3, streak the
    run of successful reviews ending at the latest one, and improvement the
    percentage change between the mean quality of the first and last three
    reviews (0 until six reviews exist).
    """
    if not entries:
        return {
            "total_reviews": 0,
            "average_quality": 0.0,
            "success_rate": 0.0,
            "average_time": 0,
            "streak": 0,
            "improvement": 0,
            "common_tags": [],
        }

    total = len(entries)
    average_quality = sum(e.quality for e in entries) / total
    success_rate = sum(1 for e in entries if e.successful) / total * 100

    timed = [e.time_taken for e in entries if e.time_taken]
    average_time = sum(timed) / len(timed) if timed else 0

    streak = 0
    for entry in reversed(entries):
        if not entry.successful:
            break
        streak += 1

    improvement = 0.0
    if total >= 2 * TREND_WINDOW:
        first = sum(e.quality for e in entries[:TREND_WINDOW]) / TREND_WINDOW
        last = sum(e.quality for e in entries[-TREND_WINDOW:]) / TREND_WINDOW
        improvement = (last - first) / first * 100

    tag_counts = Counter(tag for e in entries for tag in e.tags)

    return {
        "total_reviews": total,
        "average_quality": _one_decimal(average_quality),
        "success_rate": _one_decimal(success_rate),
        "average_time": round_half_up(average_time),
        "streak": streak,
        "improvement": round_half_up(improvement),
        "common_tags": [tag for tag, _ in tag_counts.most_common(COMMON_TAG_LIMIT)],
    }


@dataclass(frozen=True)
class ReviewPriority:
    """Whether and how urgently a problem should be reviewed."""
    should_review: bool
    priority: str  # high | medium | low
    reason: str
    tips: tuple[str, ...] = field(default=())


def review_priority(record: HistoryRecord, now: datetime) -> ReviewPriority:
    """Priority from days overdue (calendar days, UTC) plus tips from past reviews."""
    if record.next_review_date is None:
        return ReviewPriority(False, "low", "Not scheduled for review")

    days_overdue = (as_utc(now).date() - record.next_review_date.date()).days
    tips: list[str] = []

    if days_overdue > OVERDUE_ALERT_DAYS:
        priority, reason = "high", f"Overdue by {days_overdue} days"
        tips.append("Review as soon as possible to maintain retention")
    elif days_overdue >= 0:
        priority, reason = "high", "Due today"
        tips.append("Perfect timing for optimal retention")
    elif days_overdue >= -EARLY_REVIEW_DAYS:
        priority, reason = "medium", f"Due in {-days_overdue} days"
        tips.append("Can review early if you have time")
    else:
        priority, reason = "low", f"Not due yet ({-days_overdue} days)"

    analytics = review_analytics(record.reviews)
    if analytics["average_quality"] < QUALITY_GOOD:
        tips.append("Focus on understanding core concepts")
        tips.append("Consider breaking down the problem into smaller steps")
    elif analytics["average_quality"] >= QUALITY_EASY:
        tips.append("Keep up the momentum")

    if analytics["streak"] == 0:
        tips.append("Start a new success streak today")
    elif analytics["streak"] >= 3:
        tips.append(f"{analytics['streak']}-review success streak")

    if analytics["improvement"] < 0:
        tips.append("Review your notes from previous attempts")

    return ReviewPriority(
        should_review=days_overdue >= 0,
        priority=priority,
        reason=reason,
        tips=tuple(tips[:MAX_TIPS]),
    )
