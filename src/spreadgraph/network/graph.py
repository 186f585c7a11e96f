"""
Concept Graph: mutable weighted directed graph of labeled concepts.

Nodes live in an insertion-ordered arena (dense list) with an id -> index
lookup. Edges are owned by their source node as a mapping of target id to
weight in [0, 1]. For per-round aggregation the edges are compiled into
parallel numpy arrays of (source index, target index, weight), cached until
the next topology change.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from spreadgraph.exceptions import ConceptNotFoundError, IdCollisionError
from spreadgraph.utils import clamp_weight


@dataclass
class ConceptNode:
    """
    A single concept in the network.

    Attributes:
        id: Unique identifier within the graph
        label: Human-readable label
        category: Optional grouping tag
        activation: Current activation value
        previous_activation: Activation before the most recent update
        metadata: Caller-managed data, never read by the engine
        connections: Outgoing edges, target id -> weight in [0, 1]
    """
    id: str
    label: str
    category: Optional[str] = None
    activation: float = 0.0
    previous_activation: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)
    connections: Dict[str, float] = field(default_factory=dict)

    def update_activation(self, value: float) -> None:
        self.previous_activation = self.activation
        self.activation = float(value)

    @property
    def activation_delta(self) -> float:
        """Absolute change from the previous activation."""
        return abs(self.activation - self.previous_activation)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'label': self.label,
            'category': self.category,
            'activation': self.activation,
            'connection_count': len(self.connections),
            'metadata': dict(self.metadata),
        }


class CompiledEdges(NamedTuple):
    """Index form of every live edge, grouped by source and sorted by target id."""
    sources: np.ndarray
    targets: np.ndarray
    weights: np.ndarray


class ConceptGraph:
    """
    Owns concept nodes and their weighted directed edges.

    Invariants:
        - Concept ids are unique.
        - An edge can only be created between two existing concepts.
        - Removing a concept deletes every edge pointing at it.

    Edges must be changed through add_connection/remove_connection so the
    compiled edge table stays current.
    """

    def __init__(self):
        self._nodes: List[ConceptNode] = []
        self._index: Dict[str, int] = {}
        self._compiled: Optional[CompiledEdges] = None

    # ------------------------------------------------------------------
    # Concepts
    # ------------------------------------------------------------------

    def add_concept(self, label: str, category: Optional[str] = None,
                    concept_id: Optional[str] = None) -> str:
        """
        Add a new concept with zero activation and no edges.

        Args:
            label: Human-readable label
            category: Optional grouping tag
            concept_id: Optional id (a uuid4 is generated if omitted)

        Returns:
            The concept id

        Raises:
            IdCollisionError: If concept_id is already present
        """
        if concept_id is None:
            concept_id = str(uuid.uuid4())
        if concept_id in self._index:
            raise IdCollisionError(concept_id)

        self._index[concept_id] = len(self._nodes)
        self._nodes.append(ConceptNode(id=concept_id, label=label, category=category))
        self._invalidate()
        logger.debug(f"Concept added: {concept_id} ({label})")
        return concept_id

    def remove_concept(self, concept_id: str) -> bool:
        """
        Remove a concept and every edge pointing at it.

        Returns:
            False if the concept did not exist, True otherwise
        """
        position = self._index.pop(concept_id, None)
        if position is None:
            return False

        del self._nodes[position]
        pruned = 0
        for node in self._nodes:
            if node.connections.pop(concept_id, None) is not None:
                pruned += 1
        # Compact: everything after the removed slot shifts down by one
        for i in range(position, len(self._nodes)):
            self._index[self._nodes[i].id] = i

        self._invalidate()
        logger.debug(f"Concept removed: {concept_id} (pruned {pruned} inbound edges)")
        return True

    def get_concept(self, concept_id: str) -> ConceptNode:
        """
        Get a concept by id.

        Raises:
            ConceptNotFoundError: If the concept does not exist
        """
        position = self._index.get(concept_id)
        if position is None:
            raise ConceptNotFoundError(concept_id)
        return self._nodes[position]

    def update_metadata(self, concept_id: str, **values: Any) -> Dict[str, Any]:
        """Merge values into a concept's metadata and return a copy of it."""
        node = self.get_concept(concept_id)
        node.metadata.update(values)
        return dict(node.metadata)

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def add_connection(self, source_id: str, target_id: str,
                       weight: float = 0.5, bidirectional: bool = True) -> float:
        """
        Set the edge source -> target (and target -> source if bidirectional).

        Weights are saturated into [0, 1]. Re-adding an existing edge
        overwrites its weight.

        Returns:
            The stored (clamped) weight

        Raises:
            ConceptNotFoundError: If either endpoint does not exist
        """
        source = self.get_concept(source_id)
        target = self.get_concept(target_id)
        safe_weight = clamp_weight(weight)

        source.connections[target_id] = safe_weight
        if bidirectional:
            target.connections[source_id] = safe_weight

        self._invalidate()
        logger.debug(
            f"Connection set: {source_id} {'<->' if bidirectional else '->'} "
            f"{target_id} (w={safe_weight:.3f})"
        )
        return safe_weight

    def remove_connection(self, source_id: str, target_id: str,
                          bidirectional: bool = True) -> bool:
        """
        Remove the edge source -> target (and the reverse if bidirectional).

        Missing concepts are tolerated.

        Returns:
            True iff the source -> target edge existed and was removed
        """
        removed = False
        source_pos = self._index.get(source_id)
        if source_pos is not None:
            removed = self._nodes[source_pos].connections.pop(target_id, None) is not None

        reverse_removed = False
        if bidirectional:
            target_pos = self._index.get(target_id)
            if target_pos is not None:
                reverse_removed = self._nodes[target_pos].connections.pop(source_id, None) is not None

        if removed or reverse_removed:
            self._invalidate()
        return removed

    # ------------------------------------------------------------------
    # Shape and iteration
    # ------------------------------------------------------------------

    def size(self) -> Dict[str, int]:
        """Concept count and directed edge count (a bidirectional pair counts twice)."""
        return {
            'concept_count': len(self._nodes),
            'connection_count': sum(len(node.connections) for node in self._nodes),
        }

    def concept_ids(self) -> List[str]:
        return [node.id for node in self._nodes]

    def index_of(self, concept_id: str) -> Optional[int]:
        return self._index.get(concept_id)

    def __contains__(self, concept_id) -> bool:
        return concept_id in self._index

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[ConceptNode]:
        return iter(self._nodes)

    # ------------------------------------------------------------------
    # Activation state
    # ------------------------------------------------------------------

    def activation_vector(self) -> np.ndarray:
        """Current activations in arena order."""
        return np.array([node.activation for node in self._nodes], dtype=float)

    def previous_activation_vector(self) -> np.ndarray:
        return np.array([node.previous_activation for node in self._nodes], dtype=float)

    def commit_activations(self, new_values: Sequence[float]) -> None:
        """
        Commit a whole activation vector at once.

        Each node's previous_activation becomes its current activation and
        activation becomes the new value.
        """
        if len(new_values) != len(self._nodes):
            raise ValueError(
                f"Expected {len(self._nodes)} activation values, got {len(new_values)}"
            )
        for node, value in zip(self._nodes, new_values):
            node.update_activation(value)

    def reset_activations(self) -> None:
        for node in self._nodes:
            node.activation = 0.0
            node.previous_activation = 0.0

    def snapshot(self) -> Tuple[Dict[str, Any], ...]:
        """Per-node (id, label, category, activation) rows in arena order."""
        return tuple(
            {
                'id': node.id,
                'label': node.label,
                'category': node.category,
                'activation': node.activation,
            }
            for node in self._nodes
        )

    # ------------------------------------------------------------------
    # Compiled edge table
    # ------------------------------------------------------------------

    def compiled_edges(self) -> CompiledEdges:
        """
        Edge table in index form for vectorized aggregation.

        Edges whose target no longer exists are skipped. Within a source,
        edges are ordered by target id so summation order does not depend
        on the order in which edges were added.
        """
        if self._compiled is None:
            sources: List[int] = []
            targets: List[int] = []
            weights: List[float] = []
            for i, node in enumerate(self._nodes):
                for target_id in sorted(node.connections):
                    j = self._index.get(target_id)
                    if j is None:
                        continue
                    sources.append(i)
                    targets.append(j)
                    weights.append(node.connections[target_id])
            self._compiled = CompiledEdges(
                sources=np.array(sources, dtype=np.intp),
                targets=np.array(targets, dtype=np.intp),
                weights=np.array(weights, dtype=float),
            )
        return self._compiled

    def _invalidate(self) -> None:
        self._compiled = None

    def __repr__(self):
        size = self.size()
        return (f"ConceptGraph(concepts={size['concept_count']}, "
                f"connections={size['connection_count']})")
