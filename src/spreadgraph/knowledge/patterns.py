"""
Pattern detection over the current activation state.

Ranks the most activated concepts and finds emergent patterns: clusters of
active concepts reachable from one another along active-to-active edges.
Traversal follows each concept's own outgoing edges, the same direction
used for aggregation during spreading, so clusters are only symmetric when
edges were added bidirectionally.
"""

import uuid
from collections import deque
from typing import Any, Dict, List, Optional, Set

from spreadgraph.network.graph import ConceptGraph, ConceptNode


def _concept_row(node: ConceptNode) -> Dict[str, Any]:
    return {
        'id': node.id,
        'label': node.label,
        'activation': node.activation,
        'category': node.category,
    }


class PatternDetector:
    """
    Post-hoc analysis of a ConceptGraph's activation state.

    Attributes:
        graph: The graph to analyse
        activation_threshold: Default threshold for "active"
    """

    def __init__(self, graph: ConceptGraph, activation_threshold: float = 0.7):
        self.graph = graph
        self.activation_threshold = activation_threshold

    def _threshold(self, threshold: Optional[float]) -> float:
        return self.activation_threshold if threshold is None else threshold

    def active_ids(self, threshold: Optional[float] = None) -> List[str]:
        """Ids of concepts at or above the threshold, in graph order."""
        cutoff = self._threshold(threshold)
        return [node.id for node in self.graph if node.activation >= cutoff]

    def get_top_activated_concepts(self, limit: int = 10,
                                   threshold: Optional[float] = None) -> List[Dict[str, Any]]:
        """
        Most activated concepts at or above the threshold.

        Sorted by activation descending; equal activations are ordered by
        ascending id so results are reproducible.

        Args:
            limit: Maximum number of concepts to return
            threshold: Minimum activation (configured default if None)

        Returns:
            List of {id, label, activation, category}
        """
        cutoff = self._threshold(threshold)
        active = [node for node in self.graph if node.activation >= cutoff]
        active.sort(key=lambda node: (-node.activation, node.id))
        return [_concept_row(node) for node in active[:max(limit, 0)]]

    def identify_emergent_patterns(self, threshold: Optional[float] = None) -> List[Dict[str, Any]]:
        """
        Clusters of connected active concepts.

        A breadth-first search is started from each unvisited active concept
        (in graph order) and follows outgoing edges into other active
        concepts. Each search yields one pattern.

        Args:
            threshold: Minimum activation (configured default if None)

        Returns:
            List of {pattern_id, concepts, average_activation}, sorted by
            average_activation descending (ties by smallest member id)
        """
        cutoff = self._threshold(threshold)
        graph = self.graph
        active: Set[str] = set(self.active_ids(cutoff))
        if not active:
            return []

        visited: Set[str] = set()
        patterns = []

        for node in graph:
            if node.id not in active or node.id in visited:
                continue

            members = []
            queue = deque([node.id])
            visited.add(node.id)
            while queue:
                current = graph.get_concept(queue.popleft())
                members.append(_concept_row(current))
                for target_id in current.connections:
                    if target_id in active and target_id not in visited:
                        visited.add(target_id)
                        queue.append(target_id)

            patterns.append({
                'pattern_id': str(uuid.uuid4()),
                'concepts': members,
                'average_activation': sum(m['activation'] for m in members) / len(members),
            })

        patterns.sort(key=lambda p: (-p['average_activation'],
                                     min(m['id'] for m in p['concepts'])))
        return patterns

    def generate_summary(self, iteration_count: int,
                         network_size: Dict[str, int]) -> Dict[str, Any]:
        """
        Aggregate view of the current state.

        Args:
            iteration_count: Rounds recorded since the last seed
            network_size: Result of ConceptGraph.size()

        Returns:
            dict: iteration_count, top_activated_concepts (top 5),
            emergent_patterns, network_size
        """
        return {
            'iteration_count': iteration_count,
            'top_activated_concepts': self.get_top_activated_concepts(5),
            'emergent_patterns': self.identify_emergent_patterns(),
            'network_size': dict(network_size),
        }
