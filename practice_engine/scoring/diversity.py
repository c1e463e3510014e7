"""
Diversity Bonus Scorer.

Rewards candidates that introduce tags outside the learner's current topics.
Overlap is never penalised; it just earns nothing.
"""
from __future__ import annotations

from practice_engine.models import CandidateQuestion, SelectionCriteria

NEW_TAGS_FOR_FULL_BONUS = 3


class DiversityScorer:
    """Criterion 5: exploration (default weight 0.10)."""

    name = "diversity"

    def score(self, candidate: CandidateQuestion, criteria: SelectionCriteria) -> float:
        topics = [topic.lower() for topic in criteria.topics]
        new_tags = sum(
            1 for tag in candidate.tags
            if not any(tag.lower() in topic for topic in topics)
        )
        return min(new_tags / NEW_TAGS_FOR_FULL_BONUS, 1.0)
