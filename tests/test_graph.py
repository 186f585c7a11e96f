"""
Unit tests for the concept graph.

Tests ConceptNode, ConceptGraph mutation invariants, and the compiled
edge table.
"""

import numpy as np
import pytest
from spreadgraph.exceptions import ConceptNotFoundError, IdCollisionError
from spreadgraph.network import ConceptGraph, ConceptNode


@pytest.fixture
def graph():
    g = ConceptGraph()
    for concept_id in ("a", "b", "c"):
        g.add_concept(concept_id.upper(), category="letters", concept_id=concept_id)
    return g


class TestConceptNode:
    """Test ConceptNode dataclass."""

    def test_defaults(self):
        """Test that a new node starts inactive with no edges."""
        node = ConceptNode(id="x", label="X")

        assert node.activation == 0.0
        assert node.previous_activation == 0.0
        assert node.connections == {}
        assert node.metadata == {}

    def test_update_activation_tracks_previous(self):
        """Test that updates shift the current value into previous_activation."""
        node = ConceptNode(id="x", label="X")
        node.update_activation(0.4)
        node.update_activation(0.9)

        assert node.previous_activation == 0.4
        assert node.activation == 0.9
        assert node.activation_delta == pytest.approx(0.5)

    def test_to_dict_is_a_copy(self):
        """Test that the serialized form does not expose live metadata."""
        node = ConceptNode(id="x", label="X", metadata={"k": 1})
        data = node.to_dict()
        data["metadata"]["k"] = 2

        assert node.metadata["k"] == 1
        assert data["connection_count"] == 0


class TestConcepts:
    """Test adding, getting and removing concepts."""

    def test_add_concept_generates_id(self):
        """Test that an omitted id is generated and unique."""
        g = ConceptGraph()
        first = g.add_concept("one")
        second = g.add_concept("two")

        assert first != second
        assert first in g and second in g

    def test_add_concept_with_explicit_id(self, graph):
        """Test that an explicit id is used as given."""
        node = graph.get_concept("a")

        assert node.label == "A"
        assert node.category == "letters"

    def test_id_collision(self):
        """Test that re-using an id raises IdCollisionError."""
        g = ConceptGraph()
        g.add_concept("x", None, "c1")

        with pytest.raises(IdCollisionError) as excinfo:
            g.add_concept("y", None, "c1")
        assert excinfo.value.concept_id == "c1"
        assert g.get_concept("c1").label == "x"

    def test_get_missing_concept(self, graph):
        """Test that unknown ids raise ConceptNotFoundError."""
        with pytest.raises(ConceptNotFoundError):
            graph.get_concept("missing")

    def test_remove_missing_concept(self, graph):
        """Test that removing an unknown id returns False."""
        assert graph.remove_concept("missing") is False
        assert len(graph) == 3

    def test_remove_cascades_inbound_edges(self, graph):
        """Test that no edge points at a removed concept."""
        graph.add_connection("a", "b", 0.5)
        graph.add_connection("c", "b", 0.7, bidirectional=False)

        assert graph.remove_concept("b") is True

        for node in graph:
            assert "b" not in node.connections
        assert graph.size() == {"concept_count": 2, "connection_count": 0}

    def test_remove_preserves_order_and_index(self, graph):
        """Test that removal keeps insertion order for remaining concepts."""
        graph.add_concept("D", concept_id="d")
        graph.remove_concept("b")

        assert graph.concept_ids() == ["a", "c", "d"]
        assert graph.index_of("c") == 1
        assert graph.index_of("d") == 2
        assert graph.get_concept("d").label == "D"

    def test_update_metadata(self, graph):
        """Test that metadata merges and is never touched otherwise."""
        graph.update_metadata("a", source="test")
        result = graph.update_metadata("a", score=3)

        assert result == {"source": "test", "score": 3}


class TestConnections:
    """Test adding and removing connections."""

    def test_weight_clamping(self, graph):
        """Test that out-of-range weights saturate into [0, 1]."""
        graph.add_connection("a", "b", -5)
        assert graph.get_concept("a").connections["b"] == 0.0

        graph.add_connection("a", "b", 5)
        assert graph.get_concept("a").connections["b"] == 1.0

    def test_bidirectional_sets_both(self, graph):
        """Test that bidirectional connections create two directed edges."""
        graph.add_connection("a", "b", 0.8)

        assert graph.get_concept("a").connections["b"] == 0.8
        assert graph.get_concept("b").connections["a"] == 0.8
        assert graph.size()["connection_count"] == 2

    def test_one_way_connection(self, graph):
        """Test that a one-way connection only sets source -> target."""
        graph.add_connection("a", "b", 0.8, bidirectional=False)

        assert "b" in graph.get_concept("a").connections
        assert "a" not in graph.get_concept("b").connections

    def test_readding_overwrites(self, graph):
        """Test that re-adding an edge overwrites rather than accumulates."""
        graph.add_connection("a", "b", 0.3)
        graph.add_connection("a", "b", 0.6)

        assert graph.get_concept("a").connections["b"] == 0.6
        assert graph.size()["connection_count"] == 2

    def test_connection_to_missing_concept(self, graph):
        """Test that a missing endpoint raises before any edge is added."""
        with pytest.raises(ConceptNotFoundError):
            graph.add_connection("a", "missing", 0.5)
        with pytest.raises(ConceptNotFoundError):
            graph.add_connection("missing", "a", 0.5)

        assert graph.size()["connection_count"] == 0

    def test_remove_missing_connection(self, graph):
        """Test that removing a non-existent edge returns False without error."""
        assert graph.remove_connection("a", "b") is False
        assert graph.remove_connection("missing", "other") is False

    def test_remove_connection_return_reflects_primary(self, graph):
        """Test that only the primary direction decides the return value."""
        graph.add_connection("b", "a", 0.5, bidirectional=False)

        assert graph.remove_connection("a", "b", bidirectional=True) is False
        assert "a" not in graph.get_concept("b").connections

    def test_remove_connection_one_way(self, graph):
        """Test that a one-way removal leaves the reverse edge."""
        graph.add_connection("a", "b", 0.5)

        assert graph.remove_connection("a", "b", bidirectional=False) is True
        assert "a" in graph.get_concept("b").connections


class TestCompiledEdges:
    """Test the compiled edge table used for aggregation."""

    def test_empty_graph(self):
        """Test that an empty graph compiles to empty arrays."""
        edges = ConceptGraph().compiled_edges()

        assert len(edges.sources) == 0
        assert len(edges.weights) == 0

    def test_edges_sorted_by_target_id(self, graph):
        """Test that edges within a source are ordered by target id."""
        graph.add_connection("a", "c", 0.3, bidirectional=False)
        graph.add_connection("a", "b", 0.2, bidirectional=False)

        edges = graph.compiled_edges()

        assert edges.sources.tolist() == [0, 0]
        assert edges.targets.tolist() == [graph.index_of("b"), graph.index_of("c")]
        assert np.allclose(edges.weights, [0.2, 0.3])

    def test_cache_invalidated_on_mutation(self, graph):
        """Test that topology changes rebuild the table."""
        graph.add_connection("a", "b", 0.5)
        before = graph.compiled_edges()
        assert graph.compiled_edges() is before

        graph.remove_concept("c")
        after = graph.compiled_edges()

        assert after is not before
        assert len(after.sources) == 2
        assert after.targets.max() < len(graph)


class TestActivationState:
    """Test activation vector access and commit."""

    def test_commit_is_whole_vector(self, graph):
        """Test that commit updates every node and shifts previous values."""
        graph.commit_activations([0.1, 0.2, 0.3])
        graph.commit_activations([0.4, 0.5, 0.6])

        assert np.allclose(graph.activation_vector(), [0.4, 0.5, 0.6])
        assert np.allclose(graph.previous_activation_vector(), [0.1, 0.2, 0.3])

    def test_commit_length_mismatch(self, graph):
        """Test that a wrong-length vector is rejected."""
        with pytest.raises(ValueError):
            graph.commit_activations([0.1])

    def test_reset(self, graph):
        """Test that reset zeroes activation and previous activation."""
        graph.commit_activations([0.1, 0.2, 0.3])
        graph.reset_activations()

        assert np.all(graph.activation_vector() == 0.0)
        assert np.all(graph.previous_activation_vector() == 0.0)

    def test_snapshot_rows(self, graph):
        """Test that snapshots carry id, label, category and activation."""
        rows = graph.snapshot()

        assert [r["id"] for r in rows] == ["a", "b", "c"]
        assert set(rows[0]) == {"id", "label", "category", "activation"}
