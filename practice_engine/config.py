"""
Configuration settings for the practice engine.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a PRACTICE_ENGINE_* environment variable.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

WEIGHT_SUM_TOLERANCE = 1e-6


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PRACTICE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Composite Scoring Weights (must sum to 1.0)
    # ========================================
    weight_difficulty: float = Field(
        default=0.25,
        ge=0.0,
        description="Weight of the difficulty alignment criterion",
    )
    weight_concept: float = Field(
        default=0.30,
        ge=0.0,
        description="Weight of the concept relevance criterion",
    )
    weight_history: float = Field(
        default=0.20,
        ge=0.0,
        description="Weight of the per-user solve history criterion",
    )
    weight_timing: float = Field(
        default=0.15,
        ge=0.0,
        description="Weight of the spaced-repetition timing criterion",
    )
    weight_diversity: float = Field(
        default=0.10,
        ge=0.0,
        description="Weight of the diversity bonus criterion",
    )

    # ========================================
    # Reason Thresholds
    # ========================================
    notable_difficulty: float = Field(default=0.7, ge=0.0, le=1.0)
    notable_concept: float = Field(default=0.7, ge=0.0, le=1.0)
    notable_history: float = Field(default=0.6, ge=0.0, le=1.0)
    notable_timing: float = Field(default=0.6, ge=0.0, le=1.0)
    notable_diversity: float = Field(default=0.5, ge=0.0, le=1.0)

    # ========================================
    # Selection
    # ========================================
    default_result_limit: int = Field(
        default=6,
        ge=0,
        description="Number of recommendations returned when no cap is given",
    )
    max_concurrency: int = Field(
        default=0,
        ge=0,
        description="Maximum candidates scored at once (0 = unbounded)",
    )
    reachability_max_steps: int = Field(
        default=3,
        ge=0,
        description="Default step bound for progression reachability queries",
    )

    # ========================================
    # Learning Path
    # ========================================
    learning_path_pool_limit: int = Field(
        default=50,
        ge=1,
        description="Candidates fetched from the repository for a learning path",
    )
    missing_concept_sample_size: int = Field(
        default=5,
        ge=0,
        description="Unsolved history records sampled for missing concepts",
    )

    # ========================================
    # Review Scheduling
    # ========================================
    review_interval_preset: Literal["aggressive", "balanced", "relaxed"] = Field(
        default="balanced",
        description="Interval ladder used by the review scheduler",
    )

    # ========================================
    # Data Tables
    # ========================================
    progression_file: str | None = Field(
        default=None,
        description="JSON file replacing the built-in progression tables",
    )

    @model_validator(mode="after")
    def _check_weights(self) -> "Settings":
        total = sum(self.weight_map().values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.6f}")
        return self

    def weight_map(self) -> dict[str, float]:
        """Get scoring weights keyed by criterion name."""
        return {
            "difficulty": self.weight_difficulty,
            "concept": self.weight_concept,
            "history": self.weight_history,
            "timing": self.weight_timing,
            "diversity": self.weight_diversity,
        }

    def threshold_map(self) -> dict[str, float]:
        """Get notable-reason thresholds keyed by criterion name."""
        return {
            "difficulty": self.notable_difficulty,
            "concept": self.notable_concept,
            "history": self.notable_history,
            "timing": self.notable_timing,
            "diversity": self.notable_diversity,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
