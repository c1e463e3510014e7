"""
Scheduling: review intervals, due queues and review analytics.
"""

from practice_engine.scheduling.review_scheduler import (
    INTERVAL_PRESETS,
    ReviewPriority,
    ReviewScheduler,
    ReviewState,
    due_reviews,
    is_due,
    mark_mastered,
    review_analytics,
    review_priority,
    review_stats,
)

__all__ = [
    "INTERVAL_PRESETS",
    "ReviewPriority",
    "ReviewScheduler",
    "ReviewState",
    "due_reviews",
    "is_due",
    "mark_mastered",
    "review_analytics",
    "review_priority",
    "review_stats",
]
