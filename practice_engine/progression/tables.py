"""
Built-in progression tables and loaders.

Tables are plain data so new platforms and tiers can be added from a JSON
file without touching scoring code. JSON layout::

    {
      "difficulty_ordinals": {"Easy": 1, "Medium": 2, "Hard": 3},
      "platforms": {
        "atcoder": {
          "tiers": {"ABC_A": {"next": ["ABC_B"], "difficulty": 1}},
          "concepts": {"DP": {"letters": ["C"], "contests": ["ABC"]}}
        }
      }
    }
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from loguru import logger

from practice_engine.exceptions import ConfigurationError
from practice_engine.models import normalize_platform
from practice_engine.progression.graph import ConceptTierMap, ProgressionGraph

# =============================================================================
# DEFAULT TABLES
# =============================================================================

# AtCoder: ABC -> ARC -> AGC, problem letters A-F within each contest group
ATCODER_TIERS: dict[str, dict[str, Any]] = {
    "ABC_A": {"next": ["ABC_B", "ABC_C"], "difficulty": 1},
    "ABC_B": {"next": ["ABC_C", "ABC_D"], "difficulty": 1.5},
    "ABC_C": {"next": ["ABC_D", "ABC_E", "ARC_A"], "difficulty": 2},
    "ABC_D": {"next": ["ABC_E", "ABC_F", "ARC_B"], "difficulty": 2.5},
    "ABC_E": {"next": ["ABC_F", "ARC_A", "ARC_B"], "difficulty": 3},
    "ABC_F": {"next": ["ARC_A", "ARC_B", "ARC_C"], "difficulty": 3.5},
    "ARC_A": {"next": ["ARC_B", "ARC_C", "AGC_A"], "difficulty": 4},
    "ARC_B": {"next": ["ARC_C", "ARC_D", "AGC_B"], "difficulty": 4.5},
    "ARC_C": {"next": ["ARC_D", "ARC_E", "AGC_C"], "difficulty": 5},
    "ARC_D": {"next": ["ARC_E", "ARC_F", "AGC_D"], "difficulty": 5.5},
    "ARC_E": {"next": ["ARC_F", "AGC_A", "AGC_B"], "difficulty": 6},
    "ARC_F": {"next": ["AGC_A", "AGC_B", "AGC_C"], "difficulty": 6.5},
    "AGC_A": {"next": ["AGC_B", "AGC_C"], "difficulty": 7},
    "AGC_B": {"next": ["AGC_C", "AGC_D"], "difficulty": 7.5},
    "AGC_C": {"next": ["AGC_D", "AGC_E"], "difficulty": 8},
    "AGC_D": {"next": ["AGC_E", "AGC_F"], "difficulty": 8.5},
    "AGC_E": {"next": ["AGC_F"], "difficulty": 9},
    "AGC_F": {"next": [], "difficulty": 10},
}

ATCODER_CONCEPTS: dict[str, dict[str, list[str]]] = {
    "Implementation": {"letters": ["A", "B"], "contests": ["ABC"]},
    "Math": {"letters": ["B", "C", "D"], "contests": ["ABC", "ARC"]},
    "DP": {"letters": ["C", "D", "E"], "contests": ["ABC", "ARC", "AGC"]},
    "Graph": {"letters": ["D", "E", "F"], "contests": ["ARC", "AGC"]},
    "Advanced": {"letters": ["E", "F"], "contests": ["ARC", "AGC"]},
    "Greedy": {"letters": ["B", "C", "D"], "contests": ["ABC", "ARC"]},
    "BinarySearch": {"letters": ["C", "D", "E"], "contests": ["ABC", "ARC", "AGC"]},
    "Simulation": {"letters": ["A", "B", "C"], "contests": ["ABC"]},
}

# Shared label -> ordinal scale across platforms (1 = easiest)
DIFFICULTY_ORDINALS: dict[str, int] = {
    "Easy": 1,
    "Medium": 2,
    "Hard": 3,
    "800": 1,
    "1200": 2,
    "1600": 3,
    "ABC_A": 1,
    "ABC_C": 2,
    "ABC_E": 3,
}


# =============================================================================
# REGISTRY
# =============================================================================


@dataclass(frozen=True)
class PlatformProgression:
    """Graph and concept map for one platform."""
    graph: ProgressionGraph
    concepts: ConceptTierMap


@dataclass(frozen=True)
class ProgressionRegistry:
    """Platform key -> PlatformProgression, plus the shared ordinal table."""
    platforms: Mapping[str, PlatformProgression] = field(default_factory=dict)
    difficulty_ordinals: Mapping[str, int] = field(default_factory=lambda: dict(DIFFICULTY_ORDINALS))

    def for_platform(self, platform: str) -> Optional[PlatformProgression]:
        """Progression tables for a platform, or None when it has none."""
        return self.platforms.get(normalize_platform(platform))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProgressionRegistry":
        """Build a registry from the JSON layout described in the module docstring."""
        platforms: dict[str, PlatformProgression] = {}
        for name, spec in (data.get("platforms") or {}).items():
            if not isinstance(spec, Mapping):
                raise ConfigurationError(f"Platform '{name}' must map to an object")
            platforms[normalize_platform(name)] = PlatformProgression(
                graph=ProgressionGraph.from_mapping(spec.get("tiers") or {}),
                concepts=ConceptTierMap.from_mapping(spec.get("concepts") or {}),
            )

        ordinals = data.get("difficulty_ordinals") or DIFFICULTY_ORDINALS
        try:
            ordinals = {str(label): int(value) for label, value in ordinals.items()}
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid difficulty_ordinals table: {e}") from e

        return cls(platforms=platforms, difficulty_ordinals=ordinals)


def default_registry() -> ProgressionRegistry:
    """Registry built from the bundled tables."""
    return ProgressionRegistry(
        platforms={
            "atcoder": PlatformProgression(
                graph=ProgressionGraph.from_mapping(ATCODER_TIERS),
                concepts=ConceptTierMap.from_mapping(ATCODER_CONCEPTS),
            ),
        },
        difficulty_ordinals=dict(DIFFICULTY_ORDINALS),
    )


def load_registry(path: str | Path | None) -> ProgressionRegistry:
    """
    Load tables from a JSON file, falling back to the bundled defaults.

    Raises:
        ConfigurationError: If the file exists but cannot be parsed
    """
    if not path:
        return default_registry()

    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read progression file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Progression file {path} must contain a JSON object")

    registry = ProgressionRegistry.from_mapping(data)
    logger.info(
        f"Loaded progression tables from {path}: "
        f"{len(registry.platforms)} platforms, {len(registry.difficulty_ordinals)} difficulty labels"
    )
    return registry
