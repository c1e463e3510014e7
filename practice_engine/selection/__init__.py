"""
Selection: candidate ranking and learning-path orchestration.
"""

from practice_engine.selection.learning_path import (
    LearningPathBuilder,
    average_difficulty,
    extract_topics,
    identify_missing_concepts,
)
from practice_engine.selection.ranking import rank_by_tag_relevance, tag_relevance
from practice_engine.selection.selector import QuestionSelector

__all__ = [
    "QuestionSelector",
    "LearningPathBuilder",
    "average_difficulty",
    "extract_topics",
    "identify_missing_concepts",
    "rank_by_tag_relevance",
    "tag_relevance",
]
