"""
Practice Engine: ranks candidate practice problems for a learner.

Five criteria (difficulty progression, concept coverage, solve history,
review timing, diversity) are fused into one score per candidate; the
selector returns the top candidates with short reasons.
"""

from practice_engine.engine import PracticeEngine
from practice_engine.exceptions import (
    CandidatePoolUnavailableError,
    ConfigurationError,
    PracticeEngineError,
)
from practice_engine.models import (
    CandidateQuestion,
    HistoryRecord,
    HistoryStatus,
    LearningStyle,
    Platform,
    QuestionScore,
    ReviewEntry,
    SelectionCriteria,
)

__version__ = "1.0.0"

__all__ = [
    "PracticeEngine",
    "CandidateQuestion",
    "HistoryRecord",
    "HistoryStatus",
    "LearningStyle",
    "Platform",
    "QuestionScore",
    "ReviewEntry",
    "SelectionCriteria",
    "PracticeEngineError",
    "ConfigurationError",
    "CandidatePoolUnavailableError",
]
