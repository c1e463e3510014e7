"""
Collaborator contracts: candidate repository and history store.

The engine reads through these two narrow interfaces only. In-memory and
JSON-file implementations back the CLI and the tests; production callers
plug in their own storage.
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger
from pydantic import ValidationError

from practice_engine.exceptions import CandidatePoolUnavailableError
from practice_engine.models import CandidateQuestion, HistoryRecord, normalize_platform
from practice_engine.schemas import CandidatePayload, HistoryPayload


class CandidateRepository(ABC):
    """Source of candidate questions."""

    @abstractmethod
    async def fetch_candidates(
        self, platform: str, difficulty: Optional[str], limit: int
    ) -> list[CandidateQuestion]:
        """
        Fetch up to ``limit`` candidates for a platform.

        May return fewer (or none). Raises CandidatePoolUnavailableError
        when the pool cannot be reached.
        """


class HistoryStore(ABC):
    """Read-only view of per-user solve history."""

    @abstractmethod
    async def get_history(self, user_id: str, candidate_id: str) -> Optional[HistoryRecord]:
        """Record for one (user, candidate) pair, or None if never seen."""

    @abstractmethod
    async def list_history(self, user_id: str) -> list[HistoryRecord]:
        """All records for a user."""


# =============================================================================
# In-memory implementations
# =============================================================================


class InMemoryCandidateRepository(CandidateRepository):
    """Candidate pool held in a list, filtered on each fetch."""

    def __init__(self, candidates: Iterable[CandidateQuestion] = ()):
        self._candidates = list(candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    async def fetch_candidates(
        self, platform: str, difficulty: Optional[str], limit: int
    ) -> list[CandidateQuestion]:
        platform = normalize_platform(platform)
        wanted = difficulty.strip().lower() if difficulty else None

        matches = [
            c for c in self._candidates
            if (not platform or c.platform == platform)
            and (wanted is None or c.difficulty.lower() == wanted)
        ]
        return matches[:max(limit, 0)]


class InMemoryHistoryStore(HistoryStore):
    """History keyed by (user_id, candidate_id)."""

    def __init__(self, records: Iterable[HistoryRecord] = ()):
        self._records: dict[tuple[str, str], HistoryRecord] = {}
        for record in records:
            self._records[(record.user_id, record.candidate_id)] = record

    async def get_history(self, user_id: str, candidate_id: str) -> Optional[HistoryRecord]:
        return self._records.get((user_id, candidate_id))

    async def list_history(self, user_id: str) -> list[HistoryRecord]:
        return [r for (uid, _), r in self._records.items() if uid == user_id]


# =============================================================================
# JSON file loaders
# =============================================================================


def _read_json_list(path: Path) -> list:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array")
    return data


def load_candidates(path: str | Path) -> InMemoryCandidateRepository:
    """
    Load a candidate pool from a JSON array.

    Raises:
        CandidatePoolUnavailableError: If the file is missing or malformed
    """
    path = Path(path)
    try:
        items = _read_json_list(path)
        candidates = [CandidatePayload.model_validate(item).to_domain() for item in items]
    except (OSError, ValueError, ValidationError) as e:
        raise CandidatePoolUnavailableError("", str(e), source=str(path)) from e

    logger.debug(f"Loaded {len(candidates)} candidates from {path}")
    return InMemoryCandidateRepository(candidates)


def load_history(path: str | Path | None) -> InMemoryHistoryStore:
    """
    Load history records from a JSON array.

    A missing path means an empty history. Malformed records are skipped
    with a warning so one bad row does not hide the rest.
    """
    if path is None:
        return InMemoryHistoryStore()

    path = Path(path)
    items = _read_json_list(path)

    records: list[HistoryRecord] = []
    for index, item in enumerate(items):
        try:
            records.append(HistoryPayload.model_validate(item).to_domain())
        except ValidationError as e:
            logger.warning(f"Skipping history record #{index} in {path}: {e.error_count()} errors")

    logger.debug(f"Loaded {len(records)} history records from {path}")
    return InMemoryHistoryStore(records)
