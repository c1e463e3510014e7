"""
Concept Relevance Scorer.

Three sub-signals, each matched case-insensitively by substring
(concept inside tag):

1. Missing concepts covered   - fraction scaled to 0.4, weight 1.0
2. Current topics covered     - fraction scaled to 0.3, weight 0.6
3. Concept-tier alignment     - +0.2 per mapped missing concept, capped at
                                1.0, weight 0.3 (platforms with a concept map)
"""
from __future__ import annotations

from typing import Iterable

from practice_engine.models import CandidateQuestion, SelectionCriteria
from practice_engine.progression.graph import ConceptTierMap
from practice_engine.progression.tables import ProgressionRegistry

MISSING_SCALE = 0.4
TOPIC_SCALE = 0.3
ALIGNMENT_STEP = 0.2

PRIMARY_WEIGHT = 1.0
SECONDARY_WEIGHT = 0.6
TERTIARY_WEIGHT = 0.3

NO_TAGS_SCORE = 0.5


def tag_matches(term: str, tags: Iterable[str]) -> bool:
    """True if ``term`` occurs inside any tag, ignoring case."""
    needle = term.lower()
    return any(needle in tag.lower() for tag in tags)


def count_matches(terms: Iterable[str], tags: Iterable[str]) -> int:
    tags = tuple(tags)
    return sum(1 for term in terms if tag_matches(term, tags))


def covers_missing_concepts(candidate: CandidateQuestion, criteria: SelectionCriteria) -> bool:
    """Whether the candidate exercises at least one missing concept."""
    return count_matches(criteria.missing_concepts, candidate.tags) > 0


def concept_alignment_bonus(
    tags: Iterable[str], missing_concepts: Iterable[str], concepts: ConceptTierMap
) -> float:
    """+0.2 for each missing concept that is both mapped and tagged, capped at 1.0."""
    tags = tuple(tags)
    bonus = 0.0
    for concept in missing_concepts:
        if concept in concepts and tag_matches(concept, tags):
            bonus += ALIGNMENT_STEP
    return min(1.0, bonus)


class ConceptRelevanceScorer:
    """Criterion 2: topical / concept coverage (default weight 0.30)."""

    name = "concept"

    def __init__(self, registry: ProgressionRegistry):
        self.registry = registry

    def score(self, candidate: CandidateQuestion, criteria: SelectionCriteria) -> float:
        tags = candidate.tags
        if not tags:
            # No tags is missing data, not evidence of irrelevance
            return NO_TAGS_SCORE

        missing = criteria.missing_concepts
        topics = criteria.topics

        missing_fraction = count_matches(missing, tags) / max(len(missing), 1)
        total = min(1.0, missing_fraction * MISSING_SCALE) * PRIMARY_WEIGHT

        topic_fraction = count_matches(topics, tags) / max(len(topics), 1)
        total += min(1.0, topic_fraction * TOPIC_SCALE) * SECONDARY_WEIGHT

        progression = self.registry.for_platform(criteria.platform)
        if progression is not None and len(progression.concepts):
            total += concept_alignment_bonus(tags, missing, progression.concepts) * TERTIARY_WEIGHT

        return min(1.0, total)
