"""
Scoring: the five criteria and their weighted composite.
"""

from practice_engine.scoring.composite import (
    FALLBACK_REASON,
    REASONS,
    CompositeScorer,
    NotableThresholds,
    ScoringWeights,
)
from practice_engine.scoring.concept import ConceptRelevanceScorer
from practice_engine.scoring.difficulty import (
    DifficultyAlignmentScorer,
    DifficultyScale,
    score_ordinal_delta,
)
from practice_engine.scoring.diversity import DiversityScorer
from practice_engine.scoring.history import SpacedRepetitionScorer, UserHistoryScorer

__all__ = [
    "CompositeScorer",
    "ScoringWeights",
    "NotableThresholds",
    "REASONS",
    "FALLBACK_REASON",
    "DifficultyAlignmentScorer",
    "DifficultyScale",
    "score_ordinal_delta",
    "ConceptRelevanceScorer",
    "UserHistoryScorer",
    "SpacedRepetitionScorer",
    "DiversityScorer",
]
