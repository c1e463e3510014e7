"""
Unit tests for ProgressionGraph, ConceptTierMap and the table loaders.
"""

import json

import pytest

from practice_engine.exceptions import ConfigurationError
from practice_engine.progression import (
    ConceptTierMap,
    ProgressionGraph,
    ProgressionRegistry,
    default_registry,
    load_registry,
)
from practice_engine.progression.tables import ATCODER_CONCEPTS, ATCODER_TIERS


@pytest.fixture
def atcoder():
    return ProgressionGraph.from_mapping(ATCODER_TIERS)


class TestReachability:
    def test_direct_successor_reachable_in_one_step(self, atcoder):
        assert atcoder.reachable("ABC_A", "ABC_B", max_steps=1) is True

    def test_multi_step_path_within_bound(self, atcoder):
        # ABC_C -> ARC_A -> AGC_A
        assert atcoder.reachable("ABC_C", "AGC_A", max_steps=2) is True

    def test_path_beyond_bound_not_reachable(self, atcoder):
        assert atcoder.reachable("ABC_A", "AGC_F", max_steps=3) is False

    def test_default_bound_is_three(self, atcoder):
        # ABC_A -> ABC_C -> ARC_A -> ARC_B
        assert atcoder.reachable("ABC_A", "ARC_B") is True
        assert atcoder.reachable("ABC_A", "ARC_D") is False

    def test_tier_reaches_itself_at_zero_steps(self, atcoder):
        assert atcoder.reachable("AGC_F", "AGC_F", max_steps=0) is True

    def test_terminal_tier_reaches_nothing_else(self, atcoder):
        assert atcoder.next_tiers("AGC_F") == ()
        for tier in atcoder.tiers:
            if tier != "AGC_F":
                assert atcoder.reachable("AGC_F", tier, max_steps=10) is False

    def test_backwards_not_reachable(self, atcoder):
        assert atcoder.reachable("ARC_A", "ABC_A", max_steps=10) is False

    def test_cycles_terminate(self):
        graph = ProgressionGraph.from_mapping({
            "A": {"next": ["B"], "difficulty": 1},
            "B": {"next": ["A"], "difficulty": 2},
        })
        assert graph.reachable("A", "B", max_steps=50) is True
        assert graph.reachable("A", "C", max_steps=50) is False

    def test_negative_bound_never_reachable(self, atcoder):
        assert atcoder.reachable("ABC_A", "ABC_A", max_steps=-1) is False

    def test_unknown_tier_has_no_successors(self, atcoder):
        assert atcoder.next_tiers("XYZ") == ()
        assert atcoder.reachable("XYZ", "ABC_A") is False


class TestGraphQueries:
    def test_difficulty_weight(self, atcoder):
        assert atcoder.difficulty_weight("ABC_B") == 1.5
        assert atcoder.difficulty_weight("nope") is None

    def test_is_next_step(self, atcoder):
        assert atcoder.is_next_step("ABC_C", "ARC_A") is True
        assert atcoder.is_next_step("ARC_A", "ABC_C") is False

    def test_membership_and_size(self, atcoder):
        assert "ARC_C" in atcoder
        assert "ARC_Z" not in atcoder
        assert len(atcoder) == 18

    def test_aliases_accepted(self):
        graph = ProgressionGraph.from_mapping({
            "T1": {"next_tiers": ["T2"], "difficulty_weight": 1},
            "T2": {"next_tiers": [], "difficulty_weight": 2},
        })
        assert graph.next_tiers("T1") == ("T2",)

    def test_missing_difficulty_rejected(self):
        with pytest.raises(ConfigurationError):
            ProgressionGraph.from_mapping({"T1": {"next": []}})


class TestConceptTierMap:
    def test_lookup_is_case_insensitive(self):
        concepts = ConceptTierMap.from_mapping(ATCODER_CONCEPTS)
        tiers = concepts.lookup("dp")
        assert tiers is not None
        assert tiers.representative_tiers == ("C", "D", "E")
        assert "binarysearch" in concepts

    def test_unmapped_concept(self):
        concepts = ConceptTierMap.from_mapping(ATCODER_CONCEPTS)
        assert concepts.lookup("Geometry") is None
        assert "Geometry" not in concepts

    def test_tier_ids_combine_groups_and_letters(self):
        concepts = ConceptTierMap.from_mapping(ATCODER_CONCEPTS)
        assert concepts.lookup("Implementation").tier_ids() == ("ABC_A", "ABC_B")


class TestRegistry:
    def test_default_registry_has_atcoder_only(self):
        registry = default_registry()
        assert registry.for_platform("AtCoder") is not None
        assert registry.for_platform("leetcode") is None

    def test_load_registry_without_path_uses_defaults(self):
        assert load_registry(None).for_platform("atcoder") is not None

    def test_load_registry_from_json(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({
            "difficulty_ordinals": {"Bronze": 1, "Silver": 2, "Gold": 3},
            "platforms": {
                "usaco": {
                    "tiers": {
                        "Bronze": {"next": ["Silver"], "difficulty": 1},
                        "Silver": {"next": ["Gold"], "difficulty": 2},
                        "Gold": {"next": [], "difficulty": 3},
                    },
                    "concepts": {"Prefix Sums": {"letters": ["Bronze"], "contests": ["USACO"]}},
                }
            },
        }))

        registry = load_registry(path)

        usaco = registry.for_platform("USACO")
        assert usaco.graph.reachable("Bronze", "Gold", 2) is True
        assert "prefix sums" in usaco.concepts
        assert registry.difficulty_ordinals["Gold"] == 3
        assert registry.for_platform("atcoder") is None

    def test_unreadable_file_raises_configuration_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_registry(path)

    def test_non_object_platform_rejected(self):
        with pytest.raises(ConfigurationError):
            ProgressionRegistry.from_mapping({"platforms": {"x": []}})
