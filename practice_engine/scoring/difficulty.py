"""
Difficulty Alignment Scorer.

Rates how well a candidate's difficulty fits the learner's current level.
When the platform has a progression graph and the learner's tier is in it,
graph relations decide first; otherwise (or when no relation applies) the
labels are mapped onto an ordinal scale and scored by their distance.
"""
from __future__ import annotations

from typing import Mapping, Optional

from practice_engine.models import CandidateQuestion, LearningStyle, SelectionCriteria
from practice_engine.progression.tables import DIFFICULTY_ORDINALS, ProgressionRegistry


class DifficultyScale:
    """Label -> ordinal mapping; unknown labels land on the middle ordinal."""

    def __init__(self, ordinals: Optional[Mapping[str, int]] = None):
        self._ordinals = dict(ordinals if ordinals is not None else DIFFICULTY_ORDINALS)
        self._by_lower = {label.lower(): value for label, value in self._ordinals.items()}

        distinct = sorted(set(self._ordinals.values()))
        self.middle = distinct[len(distinct) // 2] if distinct else 0

    def ordinal(self, label: Optional[str]) -> int:
        if label is None:
            return self.middle
        label = str(label).strip()
        if label in self._ordinals:
            return self._ordinals[label]
        return self._by_lower.get(label.lower(), self.middle)

    def knows(self, label: str) -> bool:
        return str(label).strip().lower() in self._by_lower


def score_ordinal_delta(delta: int, style: LearningStyle) -> float:
    """
    Score the signed ordinal distance ``candidate - learner``.

    progressive: same level best, one step up next, one step down after.
    challenging: harder always wins (clamped to 1.0), easier decays fast.
    mixed: neighbouring levels beat the same level, far levels are middling.
    """
    distance = abs(delta)

    if style == LearningStyle.PROGRESSIVE:
        if delta == 0:
            return 1.0
        if delta == 1:
            return 0.8
        if delta == -1:
            return 0.6
        return max(0.0, 1.0 - distance * 0.2)

    if style == LearningStyle.CHALLENGING:
        if delta > 0:
            return min(1.0, 0.9 + delta * 0.05)
        if delta == 0:
            return 0.7
        return max(0.0, 0.5 - distance * 0.1)

    # mixed
    if distance == 0:
        return 0.8
    if distance == 1:
        return 0.9
    return 0.5


class DifficultyAlignmentScorer:
    """Criterion 1: difficulty progression (default weight 0.25)."""

    name = "difficulty"

    def __init__(self, registry: ProgressionRegistry, scale: Optional[DifficultyScale] = None):
        self.registry = registry
        self.scale = scale or DifficultyScale(registry.difficulty_ordinals)

    def score(self, candidate: CandidateQuestion, criteria: SelectionCriteria) -> float:
        graph_score = self._graph_score(candidate.difficulty, criteria)
        if graph_score is not None:
            return graph_score

        delta = self.scale.ordinal(candidate.difficulty) - self.scale.ordinal(criteria.current_difficulty)
        return score_ordinal_delta(delta, criteria.learning_style)

    def _graph_score(self, candidate_tier: str, criteria: SelectionCriteria) -> Optional[float]:
        """Graph-aware score, or None to fall through to the ordinal formula."""
        progression = self.registry.for_platform(criteria.platform)
        learner_tier = criteria.current_difficulty
        if progression is None or learner_tier not in progression.graph:
            return None

        graph = progression.graph
        style = criteria.learning_style

        if graph.is_next_step(learner_tier, candidate_tier):
            return 1.0 if style == LearningStyle.CHALLENGING else 0.95

        if candidate_tier == learner_tier:
            return 0.8 if style == LearningStyle.PROGRESSIVE else 0.6

        # Candidate leads back into the learner's tier: reinforcement loop
        if graph.is_next_step(candidate_tier, learner_tier):
            return 0.7

        return None
