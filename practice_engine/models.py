"""
Domain models for practice selection.

All models are immutable: candidates and history records are read-only
inputs for the duration of one selection call, and criteria are built
fresh per call.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Platform(str, Enum):
    """Known source systems for practice problems."""

    LEETCODE = "leetcode"
    CODEFORCES = "codeforces"
    ATCODER = "atcoder"


class LearningStyle(str, Enum):
    """Bias applied by the difficulty alignment scorer."""

    PROGRESSIVE = "progressive"  # Same level or one step up
    MIXED = "mixed"  # Neighbouring levels for variety
    CHALLENGING = "challenging"  # Harder is better


class HistoryStatus(str, Enum):
    """Per-user state of a candidate."""

    UNSEEN = "unseen"
    ATTEMPTED = "attempted"
    SOLVED = "solved"


def normalize_platform(platform: Platform | str | None) -> str:
    """Lower-cased platform key; unknown platforms pass through unchanged."""
    if platform is None:
        return ""
    if isinstance(platform, Platform):
        return platform.value
    return str(platform).strip().lower()


def _unique(values) -> tuple[str, ...]:
    """Drop blanks and case-insensitive duplicates, keeping the first spelling seen."""
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]

    seen: dict[str, str] = {}
    for value in values:
        text = str(value).strip() if value is not None else ""
        if text:
            seen.setdefault(text.casefold(), text)
    return tuple(seen.values())


def as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so day arithmetic never mixes kinds."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class CandidateQuestion:
    """A unit of practice content."""

    id: str
    title: str
    difficulty: str
    tags: tuple[str, ...] = ()
    platform: str = ""
    url: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "tags", _unique(self.tags))
        object.__setattr__(self, "platform", normalize_platform(self.platform))


@dataclass(frozen=True)
class SelectionCriteria:
    """Per-request selection input."""

    user_id: str
    current_difficulty: str
    topics: tuple[str, ...] = ()
    missing_concepts: tuple[str, ...] = ()
    platform: str = ""
    learning_style: LearningStyle = LearningStyle.PROGRESSIVE
    review_context: bool = False
    skill_level: Optional[int] = None  # 0-100, carried but not scored

    def __post_init__(self):
        object.__setattr__(self, "topics", _unique(self.topics))
        object.__setattr__(self, "missing_concepts", _unique(self.missing_concepts))
        object.__setattr__(self, "platform", normalize_platform(self.platform))
        object.__setattr__(self, "learning_style", LearningStyle(self.learning_style))
        if self.skill_level is not None and not 0 <= self.skill_level <= 100:
            raise ValueError(f"skill_level must be within 0-100, got {self.skill_level}")


@dataclass(frozen=True)
class ReviewEntry:
    """One review of a solved problem: recall quality and the interval it produced."""

    quality: int
    date: datetime
    interval: int
    next_review_date: datetime
    time_taken: Optional[float] = None  # minutes
    tags: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "date", as_utc(self.date))
        object.__setattr__(self, "next_review_date", as_utc(self.next_review_date))
        object.__setattr__(self, "tags", _unique(self.tags))

    @property
    def successful(self) -> bool:
        return self.quality >= 3


@dataclass(frozen=True)
class HistoryRecord:
    """
    A learner's state for one candidate, owned by the external history store.

    ``difficulty`` and ``topics`` are denormalised from the problem so the
    learning-path builder can aggregate without a second lookup.
    """

    user_id: str
    candidate_id: str
    status: str = HistoryStatus.UNSEEN.value
    last_attempt_date: Optional[datetime] = None
    next_review_date: Optional[datetime] = None
    difficulty: str = ""
    topics: tuple[str, ...] = ()
    repetition: int = 0
    interval: int = 0
    reviews: tuple[ReviewEntry, ...] = ()

    def __post_init__(self):
        status = self.status.value if isinstance(self.status, HistoryStatus) else str(self.status)
        object.__setattr__(self, "status", status.strip().lower())
        object.__setattr__(self, "topics", _unique(self.topics))
        object.__setattr__(self, "last_attempt_date", as_utc(self.last_attempt_date))
        object.__setattr__(self, "next_review_date", as_utc(self.next_review_date))
        object.__setattr__(self, "reviews", tuple(self.reviews or ()))

    @property
    def is_solved(self) -> bool:
        return self.status == HistoryStatus.SOLVED.value

    @property
    def average_quality(self) -> Optional[float]:
        """Mean review quality to one decimal, None before the first review."""
        if not self.reviews:
            return None
        mean = sum(r.quality for r in self.reviews) / len(self.reviews)
        return round_half_up(mean * 10) / 10

    @property
    def last_review_quality(self) -> Optional[int]:
        return self.reviews[-1].quality if self.reviews else None


@dataclass(frozen=True)
class CriterionScores:
    """Raw per-criterion scores behind one composite score."""

    difficulty: float
    concept: float
    history: float
    timing: float
    diversity: float

    def as_dict(self) -> dict[str, float]:
        return {
            "difficulty": self.difficulty,
            "concept": self.concept,
            "history": self.history,
            "timing": self.timing,
            "diversity": self.diversity,
        }


@dataclass(frozen=True)
class QuestionScore:
    """A ranked recommendation; score is always within [0, 1]."""

    question_id: str
    title: str
    difficulty: str
    platform: str
    score: float
    reasons: tuple[str, ...]
    url: Optional[str] = None
    breakdown: Optional[CriterionScores] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        """Plain representation for outer layers."""
        payload = {
            "questionId": self.question_id,
            "title": self.title,
            "difficulty": self.difficulty,
            "platform": self.platform,
            "score": self.score,
            "reasons": list(self.reasons),
            "url": self.url,
        }
        if self.breakdown is not None:
            payload["breakdown"] = self.breakdown.as_dict()
        return payload
