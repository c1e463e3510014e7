"""
Contest Progression Graph.

A static directed graph of difficulty tiers. Each tier lists the tiers a
learner naturally moves on to next plus a numeric difficulty weight. Cycles
are allowed; every traversal is step-bounded and visited-set pruned.

The concept map records where a concept typically first shows up
(problem letters within contest groups) so weak concepts can be steered to
the tiers that exercise them.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from practice_engine.exceptions import ConfigurationError


@dataclass(frozen=True)
class TierNode:
    """One tier in the progression graph."""
    next_tiers: tuple[str, ...]
    difficulty_weight: float


@dataclass(frozen=True)
class ConceptTiers:
    """Where a concept is usually met: problem letters and contest groups."""
    representative_tiers: tuple[str, ...]
    representative_groups: tuple[str, ...]

    def tier_ids(self) -> tuple[str, ...]:
        """Combined tier identifiers, e.g. ``ABC_C``."""
        return tuple(
            f"{group}_{tier}"
            for group in self.representative_groups
            for tier in self.representative_tiers
        )


class ProgressionGraph:
    """
    Immutable tier graph with reachability queries.

    Safe for unsynchronised concurrent reads.
    """

    def __init__(self, nodes: Mapping[str, TierNode]):
        self._nodes: dict[str, TierNode] = dict(nodes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> "ProgressionGraph":
        """
        Build a graph from plain data.

        Accepts ``{"ABC_A": {"next": ["ABC_B"], "difficulty": 1}}``; the keys
        ``next_tiers`` and ``difficulty_weight`` are accepted as aliases.
        """
        nodes: dict[str, TierNode] = {}
        for tier, spec in data.items():
            try:
                next_tiers = spec.get("next", spec.get("next_tiers", []))
                weight = spec.get("difficulty", spec.get("difficulty_weight"))
                if weight is None:
                    raise KeyError("difficulty")
                nodes[str(tier)] = TierNode(
                    next_tiers=tuple(str(t) for t in next_tiers),
                    difficulty_weight=float(weight),
                )
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid progression entry for tier '{tier}': {e}") from e
        return cls(nodes)

    def __contains__(self, tier: object) -> bool:
        return tier in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def tiers(self) -> tuple[str, ...]:
        return tuple(self._nodes)

    def node(self, tier: str) -> Optional[TierNode]:
        return self._nodes.get(tier)

    def next_tiers(self, tier: str) -> tuple[str, ...]:
        """Natural next steps from a tier (empty for unknown tiers)."""
        node = self._nodes.get(tier)
        return node.next_tiers if node else ()

    def difficulty_weight(self, tier: str) -> Optional[float]:
        node = self._nodes.get(tier)
        return node.difficulty_weight if node else None

    def is_next_step(self, from_tier: str, to_tier: str) -> bool:
        """True when ``to_tier`` is a direct successor of ``from_tier``."""
        return to_tier in self.next_tiers(from_tier)

    def reachable(self, from_tier: str, to_tier: str, max_steps: int = 3) -> bool:
        """
        Breadth-first search over ``next_tiers``.

        A tier always reaches itself in zero steps. Used both for scoring and
        for checking that a recommendation is a sane step rather than an
        arbitrary jump.

        Args:
            from_tier: Starting tier
            to_tier: Tier to look for
            max_steps: Maximum number of edges to follow

        Returns:
            True if ``to_tier`` is within ``max_steps`` edges
        """
        if max_steps < 0:
            return False

        visited: set[str] = set()
        queue: deque[tuple[str, int]] = deque([(from_tier, 0)])

        while queue:
            tier, steps = queue.popleft()
            if tier == to_tier:
                return True
            if steps >= max_steps or tier in visited:
                continue
            visited.add(tier)
            for nxt in self.next_tiers(tier):
                if nxt not in visited:
                    queue.append((nxt, steps + 1))

        return False


class ConceptTierMap:
    """Case-insensitive concept -> ConceptTiers lookup."""

    def __init__(self, concepts: Mapping[str, ConceptTiers]):
        self._concepts = dict(concepts)
        self._by_lower = {name.lower(): name for name in self._concepts}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> "ConceptTierMap":
        """Build from ``{"DP": {"letters": [...], "contests": [...]}}``."""
        concepts: dict[str, ConceptTiers] = {}
        for name, spec in data.items():
            try:
                letters = spec.get("letters", spec.get("representative_tiers", []))
                contests = spec.get("contests", spec.get("representative_groups", []))
                concepts[str(name)] = ConceptTiers(
                    representative_tiers=tuple(str(x) for x in letters),
                    representative_groups=tuple(str(x) for x in contests),
                )
            except (AttributeError, TypeError) as e:
                raise ConfigurationError(f"Invalid concept entry '{name}': {e}") from e
        return cls(concepts)

    def __contains__(self, concept: object) -> bool:
        return isinstance(concept, str) and concept.lower() in self._by_lower

    def __len__(self) -> int:
        return len(self._concepts)

    def lookup(self, concept: str) -> Optional[ConceptTiers]:
        """Tiers where a concept typically appears, or None if unmapped."""
        name = self._by_lower.get(concept.lower())
        return self._concepts[name] if name is not None else None
