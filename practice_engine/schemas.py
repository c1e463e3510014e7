"""
Pydantic payload models for external records.

Collaborators hand us JSON-ish dicts (camelCase from the web tier, or
snake_case from Python callers). These models validate them and convert to
the immutable domain dataclasses.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from practice_engine.models import CandidateQuestion, HistoryRecord, HistoryStatus, ReviewEntry


class CandidatePayload(BaseModel):
    """A practice problem as served by the candidate repository."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Stable problem identifier")
    title: str = Field(..., description="Display title")
    difficulty: str = Field(..., description="Platform-specific difficulty label")
    tags: list[str] = Field(default_factory=list)
    platform: str = Field("", description="Source platform key")
    url: Optional[str] = None

    @field_validator("id", "difficulty", mode="before")
    @classmethod
    def _coerce_str(cls, value):
        # Ratings such as 1200 often arrive as numbers
        return str(value) if isinstance(value, (int, float)) else value

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value):
        # Missing tags are missing data, not an invalid row
        return [] if value is None else value

    def to_domain(self) -> CandidateQuestion:
        return CandidateQuestion(
            id=self.id,
            title=self.title,
            difficulty=self.difficulty,
            tags=tuple(self.tags),
            platform=self.platform,
            url=self.url,
        )


class ReviewEntryPayload(BaseModel):
    """One entry of a problem's review history."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    quality: int = Field(..., ge=1, le=5)
    date: datetime
    interval: int = Field(..., ge=0)
    next_review_date: datetime = Field(..., alias="nextReviewDate")
    time_taken: Optional[float] = Field(None, alias="timeTaken", ge=0)
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value):
        return [] if value is None else value

    def to_domain(self) -> ReviewEntry:
        return ReviewEntry(
            quality=self.quality,
            date=self.date,
            interval=self.interval,
            next_review_date=self.next_review_date,
            time_taken=self.time_taken,
            tags=tuple(self.tags),
        )


class HistoryPayload(BaseModel):
    """A learner's record for one problem."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(..., alias="userId")
    candidate_id: str = Field(..., alias="candidateId")
    status: str = HistoryStatus.UNSEEN.value
    last_attempt_date: Optional[datetime] = Field(None, alias="lastAttemptDate")
    next_review_date: Optional[datetime] = Field(None, alias="nextReviewDate")
    difficulty: str = ""
    topics: list[str] = Field(default_factory=list)
    repetition: int = Field(0, ge=0)
    interval: int = Field(0, ge=0)
    reviews: list[ReviewEntryPayload] = Field(default_factory=list, alias="reviewHistory")

    @field_validator("user_id", "candidate_id", "difficulty", mode="before")
    @classmethod
    def _coerce_str(cls, value):
        return str(value) if isinstance(value, (int, float)) else value

    @field_validator("topics", "reviews", mode="before")
    @classmethod
    def _null_lists(cls, value):
        return [] if value is None else value

    def to_domain(self) -> HistoryRecord:
        return HistoryRecord(
            user_id=self.user_id,
            candidate_id=self.candidate_id,
            status=self.status,
            last_attempt_date=self.last_attempt_date,
            next_review_date=self.next_review_date,
            difficulty=self.difficulty,
            topics=tuple(self.topics),
            repetition=self.repetition,
            interval=self.interval,
            reviews=tuple(r.to_domain() for r in self.reviews),
        )
