"""
Unit tests for pattern detection.

Tests top-concept ranking and emergent pattern search.
"""

import pytest
from spreadgraph.knowledge import PatternDetector
from spreadgraph.network import ConceptGraph


def build_graph(activations, edges=(), bidirectional=True):
    graph = ConceptGraph()
    for concept_id, activation in activations.items():
        graph.add_concept(concept_id.upper(), concept_id=concept_id)
        graph.get_concept(concept_id).activation = activation
    for source, target in edges:
        graph.add_connection(source, target, 0.5, bidirectional)
    return graph


def member_sets(patterns):
    return [{c["id"] for c in p["concepts"]} for p in patterns]


class TestTopActivatedConcepts:
    """Test get_top_activated_concepts."""

    def test_sorted_and_filtered(self):
        """Test filtering by threshold and descending order."""
        graph = build_graph({"a": 0.2, "b": 0.9, "c": 0.75, "d": 0.8})
        detector = PatternDetector(graph, activation_threshold=0.7)

        top = detector.get_top_activated_concepts(10)

        assert [c["id"] for c in top] == ["b", "d", "c"]
        assert set(top[0]) == {"id", "label", "activation", "category"}

    def test_ties_broken_by_id(self):
        """Test that equal activations are ordered by ascending id."""
        graph = build_graph({"c2": 1.0, "x": 0.0, "c1": 1.0})
        detector = PatternDetector(graph)

        top = detector.get_top_activated_concepts(10, 0.5)

        assert [c["id"] for c in top] == ["c1", "c2"]

    def test_limit(self):
        """Test truncation to limit."""
        graph = build_graph({"a": 0.9, "b": 0.95, "c": 0.99})
        detector = PatternDetector(graph)

        assert [c["id"] for c in detector.get_top_activated_concepts(2)] == ["c", "b"]
        assert detector.get_top_activated_concepts(0) == []

    def test_threshold_inclusive(self):
        """Test that activation equal to the threshold counts as active."""
        graph = build_graph({"a": 0.7})

        assert len(PatternDetector(graph, 0.7).get_top_activated_concepts()) == 1


class TestEmergentPatterns:
    """Test identify_emergent_patterns."""

    def test_empty_active_set(self):
        """Test that no active concepts yields no patterns."""
        graph = build_graph({"a": 0.1, "b": 0.2}, [("a", "b")])

        assert PatternDetector(graph).identify_emergent_patterns() == []

    def test_two_components(self):
        """Test that two disconnected active clusters yield two patterns."""
        graph = build_graph(
            {"a": 0.9, "b": 0.8, "c": 0.95, "d": 0.9, "e": 0.1},
            [("a", "b"), ("c", "d"), ("b", "e"), ("e", "c")],
        )
        patterns = PatternDetector(graph).identify_emergent_patterns()

        assert member_sets(patterns) == [{"c", "d"}, {"a", "b"}]
        assert patterns[0]["average_activation"] == pytest.approx(0.925)
        assert patterns[1]["average_activation"] == pytest.approx(0.85)

    def test_singleton_pattern(self):
        """Test that an active concept with no active neighbours is its own pattern."""
        graph = build_graph({"a": 0.9, "b": 0.1}, [("a", "b")])
        patterns = PatternDetector(graph).identify_emergent_patterns()

        assert member_sets(patterns) == [{"a"}]

    def test_chain_is_one_pattern(self):
        """Test that transitively connected concepts form one pattern."""
        graph = build_graph({"a": 0.8, "b": 0.8, "c": 0.8, "d": 0.8},
                            [("a", "b"), ("b", "c"), ("c", "d")])
        patterns = PatternDetector(graph).identify_emergent_patterns()

        assert len(patterns) == 1
        assert [c["id"] for c in patterns[0]["concepts"]] == ["a", "b", "c", "d"]

    def test_directional_traversal(self):
        """Test that traversal follows outgoing edges only."""
        forward = build_graph({"a": 0.9, "b": 0.9}, [("a", "b")], bidirectional=False)
        assert member_sets(PatternDetector(forward).identify_emergent_patterns()) == [{"a", "b"}]

        backward = build_graph({"b": 0.9, "a": 0.9}, [("a", "b")], bidirectional=False)
        patterns = PatternDetector(backward).identify_emergent_patterns()
        assert sorted(len(p["concepts"]) for p in patterns) == [1, 1]

    def test_pattern_ids_unique(self):
        """Test that each pattern gets a fresh id."""
        graph = build_graph({"a": 0.9, "b": 0.9})
        patterns = PatternDetector(graph).identify_emergent_patterns()

        assert len({p["pattern_id"] for p in patterns}) == 2

    def test_equal_averages_ordered_by_member_id(self):
        """Test reproducible order for patterns with equal averages."""
        graph = build_graph({"z": 0.9, "m": 0.9, "a": 0.9})
        patterns = PatternDetector(graph).identify_emergent_patterns()

        assert [p["concepts"][0]["id"] for p in patterns] == ["a", "m", "z"]

    def test_explicit_threshold(self):
        """Test that an explicit threshold overrides the default."""
        graph = build_graph({"a": 0.6, "b": 0.6}, [("a", "b")])
        detector = PatternDetector(graph, activation_threshold=0.7)

        assert detector.identify_emergent_patterns() == []
        assert member_sets(detector.identify_emergent_patterns(0.5)) == [{"a", "b"}]


class TestSummary:
    """Test generate_summary."""

    def test_summary_fields(self):
        """Test that the summary aggregates rankings, patterns and size."""
        graph = build_graph({"a": 0.9, "b": 0.8, "c": 0.1}, [("a", "b")])
        summary = PatternDetector(graph).generate_summary(3, graph.size())

        assert summary["iteration_count"] == 3
        assert [c["id"] for c in summary["top_activated_concepts"]] == ["a", "b"]
        assert len(summary["emergent_patterns"]) == 1
        assert summary["network_size"] == {"concept_count": 3, "connection_count": 2}
