"""
Unit tests for the review scheduler and review queue helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from practice_engine.scheduling import (
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
from practice_engine.models import ReviewEntry

REVIEWED_AT = datetime(2026, 3, 1, tzinfo=timezone.utc)


def entry(quality, time_taken=None, tags=()):
    return ReviewEntry(
        quality=quality,
        date=REVIEWED_AT,
        interval=1,
        next_review_date=REVIEWED_AT + timedelta(days=1),
        time_taken=time_taken,
        tags=tags,
    )


@pytest.fixture
def scheduler():
    return ReviewScheduler("balanced")


class TestLadder:
    def test_start(self, scheduler, now):
        state = scheduler.start(now)
        assert state.repetition == 0
        assert state.interval == 1
        assert state.next_review_date == now + timedelta(days=1)

    @pytest.mark.parametrize("repetition,quality,expected", [
        (0, 3, (1, 3)),
        (1, 4, (2, 7)),
        (2, 3, (3, 14)),
        (0, 5, (1, 4)),
        (3, 5, (4, 36)),
    ])
    def test_successful_recall_climbs(self, scheduler, repetition, quality, expected):
        state = ReviewState(repetition=repetition, interval=INTERVAL_PRESETS["balanced"][repetition])
        assert scheduler.next_interval(state, quality) == expected

    def test_past_ladder_grows_geometrically(self, scheduler):
        state = ReviewState(repetition=7, interval=180)
        assert scheduler.next_interval(state, 3) == (8, 450)
        assert scheduler.next_interval(state, 4) == (8, 600)

    def test_forgotten_resets(self, scheduler):
        state = ReviewState(repetition=5, interval=60)
        assert scheduler.next_interval(state, 1) == (0, 1)

    def test_partial_recall_halves_progress(self, scheduler):
        state = ReviewState(repetition=5, interval=60)
        assert scheduler.next_interval(state, 2) == (2, 7)

    def test_partial_recall_past_ladder(self, scheduler):
        state = ReviewState(repetition=20, interval=2000)
        assert scheduler.next_interval(state, 2) == (10, 1)

    @pytest.mark.parametrize("quality", [0, 6, -1])
    def test_quality_out_of_range(self, scheduler, quality):
        with pytest.raises(ValueError):
            scheduler.next_interval(ReviewState(), quality)

    def test_schedule_sets_next_date(self, scheduler, now):
        state = scheduler.schedule(ReviewState(repetition=1, interval=3), 3, now)
        assert state == ReviewState(repetition=2, interval=7, next_review_date=now + timedelta(days=7))

    def test_from_record(self, make_record, days_ahead):
        record = make_record("q1", repetition=2, interval=7, next_review_date=days_ahead(7))
        assert ReviewState.from_record(record) == ReviewState(2, 7, days_ahead(7))


class TestPresets:
    def test_named_presets(self):
        assert ReviewScheduler("aggressive").intervals[0] == 1
        assert ReviewScheduler("relaxed").intervals[0] == 2

    def test_custom_ladder(self):
        assert ReviewScheduler([2, 4, 8]).next_interval(ReviewState(repetition=1, interval=4), 3) == (2, 8)

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="preset"):
            ReviewScheduler("sleepy")

    @pytest.mark.parametrize("ladder", [[], [1, 0, 3]])
    def test_invalid_ladder(self, ladder):
        with pytest.raises(ValueError):
            ReviewScheduler(ladder)


class TestReviewQueue:
    def test_is_due_uses_calendar_day(self, make_record, now):
        later_today = make_record("q1", next_review_date=now + timedelta(hours=6))
        tomorrow = make_record("q2", next_review_date=now + timedelta(days=1))
        unscheduled = make_record("q3")

        assert is_due(later_today, now)
        assert not is_due(tomorrow, now)
        assert not is_due(unscheduled, now)

    def test_due_reviews_ordering_and_limit(self, make_record, days_ago, days_ahead, now):
        records = [
            make_record("recent", next_review_date=days_ago(1), repetition=2),
            make_record("oldest", next_review_date=days_ago(5), repetition=4),
            make_record("tie-low", next_review_date=days_ago(3), repetition=1),
            make_record("tie-high", next_review_date=days_ago(3), repetition=3),
            make_record("future", next_review_date=days_ahead(2)),
            make_record("unseen", status="unseen", next_review_date=days_ago(9)),
        ]

        queue = due_reviews(records, now)

        assert [r.candidate_id for r in queue] == ["oldest", "tie-low", "tie-high", "recent"]
        assert len(due_reviews(records, now, limit=2)) == 2

    def test_review_stats(self, make_record, days_ago, days_ahead, now):
        records = [
            make_record("a", next_review_date=days_ago(1), repetition=3, interval=14),
            make_record("b", next_review_date=days_ahead(3), repetition=1, interval=3),
            make_record("c", next_review_date=days_ahead(1), repetition=0, interval=1),
            make_record("d"),
        ]

        stats = review_stats(records, now)

        assert stats == {
            "total_reviews": 3,
            "due_reviews": 1,
            "completed_reviews": 2,
            "average_interval": 6,
            "retention_rate": 33.33,
        }

    def test_review_stats_empty(self, now):
        assert review_stats([], now) == {
            "total_reviews": 0,
            "due_reviews": 0,
            "completed_reviews": 0,
            "average_interval": 0,
            "retention_rate": 0.0,
        }

    def test_review_stats_ignores_unreviewable_records(self, make_record, days_ago, now):
        records = [
            make_record("solved", next_review_date=days_ago(1), repetition=1, interval=3),
            make_record("unseen", status="unseen", next_review_date=days_ago(2), interval=3),
        ]

        stats = review_stats(records, now)

        assert stats["total_reviews"] == 1
        assert stats["due_reviews"] == 1


class TestReviewHistory:
    def test_record_review_appends_entry(self, scheduler, make_record, now):
        record = make_record("q1", repetition=1, interval=3, reviews=(entry(3),))

        updated = scheduler.record_review(record, 4, now, time_taken=12, tags=["clean"])

        assert (updated.repetition, updated.interval) == (2, 7)
        assert updated.next_review_date == now + timedelta(days=7)
        assert len(updated.reviews) == 2
        latest = updated.reviews[-1]
        assert (latest.quality, latest.date, latest.interval) == (4, now, 7)
        assert latest.time_taken == 12
        assert latest.tags == ("clean",)
        assert record.reviews == (entry(3),)

    def test_average_and_last_quality(self, make_record):
        record = make_record("q1", reviews=(entry(3), entry(4), entry(4)))
        assert record.average_quality == 3.7
        assert record.last_review_quality == 4

    def test_no_reviews_yet(self, make_record):
        record = make_record("q1")
        assert record.average_quality is None
        assert record.last_review_quality is None

    def test_record_review_rejects_bad_quality(self, scheduler, make_record, now):
        with pytest.raises(ValueError):
            scheduler.record_review(make_record("q1"), 7, now)

    def test_reset_restarts_ladder_and_keeps_history(self, scheduler, make_record, days_ahead, now):
        record = make_record("q1", repetition=5, interval=60, next_review_date=days_ahead(60), reviews=(entry(5),))

        restarted = scheduler.reset(record, now)

        assert (restarted.repetition, restarted.interval) == (0, 1)
        assert restarted.next_review_date == now + timedelta(days=1)
        assert restarted.reviews == record.reviews

    def test_mark_mastered_leaves_review_cycle(self, make_record, days_ago, now):
        record = make_record("q1", status="attempted", next_review_date=days_ago(1), repetition=2)

        mastered = mark_mastered(record)

        assert mastered.is_solved
        assert mastered.next_review_date is None
        assert mastered.repetition == 2
        assert due_reviews([mastered], now) == []


class TestReviewAnalytics:
    def test_empty_history(self):
        assert review_analytics([]) == {
            "total_reviews": 0,
            "average_quality": 0.0,
            "success_rate": 0.0,
            "average_time": 0,
            "streak": 0,
            "improvement": 0,
            "common_tags": [],
        }

    def test_summary(self):
        entries = [entry(2, 10), entry(2), entry(3, 15), entry(4), entry(5), entry(4)]

        analytics = review_analytics(entries)

        assert analytics["total_reviews"] == 6
        assert analytics["average_quality"] == 3.3
        assert analytics["success_rate"] == 66.7
        assert analytics["average_time"] == 13
        assert analytics["streak"] == 4
        # first three average 7/3, last three 13/3
        assert analytics["improvement"] == 86

    def test_streak_broken_by_latest_failure(self):
        assert review_analytics([entry(5), entry(4), entry(2)])["streak"] == 0

    def test_improvement_needs_six_reviews(self):
        assert review_analytics([entry(1), entry(1), entry(5), entry(5), entry(5)])["improvement"] == 0

    def test_declining_quality(self):
        analytics = review_analytics([entry(5), entry(5), entry(5), entry(3), entry(3), entry(3)])
        assert analytics["improvement"] == -40

    def test_common_tags_by_frequency(self):
        entries = [
            entry(3, tags=["hint"]),
            entry(3, tags=["edge case", "hint"]),
            entry(3, tags=["hint", "edge case", "off by one"]),
        ]
        assert review_analytics(entries)["common_tags"] == ["hint", "edge case", "off by one"]

    def test_common_tags_limited(self):
        entries = [entry(3, tags=["a", "b", "c", "d", "e", "f"])]
        assert review_analytics(entries)["common_tags"] == ["a", "b", "c", "d", "e"]


class TestReviewPriority:
    def test_unscheduled(self, make_record, now):
        assert review_priority(make_record("q1"), now) == ReviewPriority(False, "low", "Not scheduled for review")

    @pytest.mark.parametrize("offset,expected", [
        (-5, (True, "high", "Overdue by 5 days")),
        (-3, (True, "high", "Due today")),
        (0, (True, "high", "Due today")),
        (1, (False, "medium", "Due in 1 days")),
        (2, (False, "medium", "Due in 2 days")),
        (5, (False, "low", "Not due yet (5 days)")),
    ])
    def test_priority_by_days_overdue(self, make_record, now, offset, expected):
        record = make_record("q1", next_review_date=now + timedelta(days=offset))
        advice = review_priority(record, now)
        assert (advice.should_review, advice.priority, advice.reason) == expected

    def test_later_the_same_day_is_due(self, make_record, now):
        record = make_record("q1", next_review_date=now + timedelta(hours=6))
        assert review_priority(record, now).reason == "Due today"

    def test_tips_capped_at_three(self, make_record, days_ago, now):
        advice = review_priority(make_record("q1", next_review_date=days_ago(5)), now)

        assert advice.tips == (
            "Review as soon as possible to maintain retention",
            "Focus on understanding core concepts",
            "Consider breaking down the problem into smaller steps",
        )

    def test_tips_for_strong_streak(self, make_record, now):
        record = make_record("q1", next_review_date=now, reviews=(entry(5), entry(4), entry(5)))

        assert review_priority(record, now).tips == (
            "Perfect timing for optimal retention",
            "Keep up the momentum",
            "3-review success streak",
        )

    def test_tips_for_declining_quality(self, make_record, days_ahead, now):
        reviews = (entry(5), entry(5), entry(5), entry(3), entry(3), entry(3))
        record = make_record("q1", next_review_date=days_ahead(10), reviews=reviews)

        assert review_priority(record, now).tips == (
            "Keep up the momentum",
            "6-review success streak",
            "Review your notes from previous attempts",
        )

    def test_tips_after_failed_review(self, make_record, days_ahead, now):
        record = make_record("q1", next_review_date=days_ahead(1), reviews=(entry(3), entry(2)))

        assert review_priority(record, now).tips == (
            "Can review early if you have time",
            "Focus on understanding core concepts",
            "Consider breaking down the problem into smaller steps",
        )
