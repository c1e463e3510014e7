"""
Tag-relevance ranking.

Lightweight fallback when no learner is known: order candidates by how
many of the requested tags they carry. No history, no weights.
"""
from __future__ import annotations

from typing import Sequence

from practice_engine.models import CandidateQuestion


def tag_relevance(wanted_tags: Sequence[str], candidate_tags: Sequence[str]) -> float:
    """Share of wanted tags found (substring, case-insensitive); 0.5 when either side is empty."""
    if not wanted_tags or not candidate_tags:
        return 0.5

    lowered = [tag.lower() for tag in candidate_tags]
    matches = sum(1 for tag in wanted_tags if any(tag.lower() in c for c in lowered))
    return matches / max(len(wanted_tags), len(candidate_tags))


def rank_by_tag_relevance(
    candidates: Sequence[CandidateQuestion], wanted_tags: Sequence[str]
) -> list[CandidateQuestion]:
    """Candidates sorted by tag relevance, descending; ties keep input order."""
    return sorted(candidates, key=lambda c: tag_relevance(wanted_tags, c.tags), reverse=True)
