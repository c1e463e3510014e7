"""
Progression: tier graphs and concept maps per platform.
"""

from practice_engine.progression.graph import (
    ConceptTierMap,
    ConceptTiers,
    ProgressionGraph,
    TierNode,
)
from practice_engine.progression.tables import (
    PlatformProgression,
    ProgressionRegistry,
    default_registry,
    load_registry,
)

__all__ = [
    "ConceptTierMap",
    "ConceptTiers",
    "ProgressionGraph",
    "TierNode",
    "PlatformProgression",
    "ProgressionRegistry",
    "default_registry",
    "load_registry",
]
