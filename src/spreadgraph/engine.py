"""
Concept Network: main orchestrator for the activation-spreading system.

Composes the concept graph, the activation engine with its history, and the
pattern detector behind one object. Every method returns plain,
serializable data so a calling layer can expose it directly.
"""

import math
import numbers
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

import networkx as nx
from loguru import logger

from spreadgraph.config import ActivationParameters
from spreadgraph.dynamics import ActivationEngine, selection_from
from spreadgraph.dynamics.selection import Selection, UniformSelection
from spreadgraph.exceptions import ConceptNotFoundError, IdCollisionError, SpreadGraphError
from spreadgraph.knowledge import PatternDetector
from spreadgraph.network import ConceptGraph, HistoryRecorder
from spreadgraph.utils import compute_metrics


class ConceptNetwork:
    """
    Concept Activation Network.

    A caller builds the graph, seeds initial activation, spreads it for one
    round or until convergence, then asks for the top concepts and emergent
    patterns.

    Attributes:
        graph: ConceptGraph holding concepts and edges
        engine: ActivationEngine driving the graph
        detector: PatternDetector reading the graph
        history: HistoryRecorder of per-round snapshots
    """

    def __init__(self, parameters: Optional[ActivationParameters] = None):
        """
        Create an empty network.

        Args:
            parameters: Optional starting parameters (defaults otherwise)
        """
        parameters = parameters or ActivationParameters()
        self.graph = ConceptGraph()
        self.history = HistoryRecorder(parameters.history_limit)
        self.engine = ActivationEngine(self.graph, parameters, self.history)
        self.detector = PatternDetector(self.graph, parameters.activation_threshold)

    @classmethod
    def from_entries(cls, entries: Mapping,
                     parameters: Optional[ActivationParameters] = None) -> "ConceptNetwork":
        """Create a network and bulk-load it with add_concepts_from."""
        network = cls(parameters)
        network.add_concepts_from(entries)
        return network

    @property
    def parameters(self) -> ActivationParameters:
        return self.engine.parameters

    @property
    def iteration_count(self) -> int:
        return self.engine.iteration_count

    # ------------------------------------------------------------------
    # Concepts and connections
    # ------------------------------------------------------------------

    def add_concept(self, label: str, category: Optional[str] = None,
                    concept_id: Optional[str] = None) -> str:
        return self.graph.add_concept(label, category, concept_id)

    def remove_concept(self, concept_id: str) -> bool:
        return self.graph.remove_concept(concept_id)

    def get_concept(self, concept_id: str) -> Dict[str, Any]:
        return self.graph.get_concept(concept_id).to_dict()

    def update_metadata(self, concept_id: str, **values: Any) -> Dict[str, Any]:
        return self.graph.update_metadata(concept_id, **values)

    def add_connection(self, source_id: str, target_id: str,
                       weight: float = 0.5, bidirectional: bool = True) -> Dict[str, Any]:
        stored = self.graph.add_connection(source_id, target_id, weight, bidirectional)
        return {
            'source_id': source_id,
            'target_id': target_id,
            'weight': stored,
            'bidirectional': bidirectional,
        }

    def remove_connection(self, source_id: str, target_id: str,
                          bidirectional: bool = True) -> bool:
        return self.graph.remove_connection(source_id, target_id, bidirectional)

    def get_network_size(self) -> Dict[str, int]:
        return self.graph.size()

    def add_concepts_from(self, entries: Mapping) -> List[str]:
        """
        Bulk-load concepts and their connections.

        Entries map a concept id to {label, category?, connections?}, where
        connections is a list of {target_id, weight?}. All concepts are added
        before any connection, so connections may point at concepts later in
        the same batch. Connections are bidirectional.

        The whole batch is checked before anything is added, so a failing
        batch leaves the graph unchanged.

        Args:
            entries: Mapping of concept id -> entry

        Returns:
            Ids of the created concepts, in entry order

        Raises:
            IdCollisionError: If an entry id already exists in the graph
            ConceptNotFoundError: If a connection targets an unknown concept
            SpreadGraphError: If an entry or connection is malformed
        """
        if not isinstance(entries, Mapping):
            raise SpreadGraphError(
                f"Entries must be a mapping of concept id -> entry, got {type(entries).__name__}",
                context={'type': type(entries).__name__},
            )

        for concept_id, entry in entries.items():
            if not isinstance(entry, Mapping) or 'label' not in entry:
                raise SpreadGraphError(
                    f"Entry for {concept_id} must be a mapping with a label",
                    context={'concept_id': concept_id},
                )
            if concept_id in self.graph:
                raise IdCollisionError(concept_id)
            connections = entry.get('connections') or ()
            if not isinstance(connections, (list, tuple)):
                raise SpreadGraphError(
                    f"Connections for {concept_id} must be a list of connection entries",
                    context={'concept_id': concept_id},
                )
            for connection in connections:
                if not isinstance(connection, Mapping) or 'target_id' not in connection:
                    raise SpreadGraphError(
                        f"Connection from {concept_id} must be a mapping with a target_id",
                        context={'concept_id': concept_id},
                    )
                weight = connection.get('weight', 0.5)
                if isinstance(weight, bool) or not isinstance(weight, numbers.Real) \
                        or not math.isfinite(weight):
                    raise SpreadGraphError(
                        f"Connection weight from {concept_id} must be a finite number, got {weight!r}",
                        context={'concept_id': concept_id, 'weight': weight},
                    )
                target_id = connection['target_id']
                if target_id not in self.graph and target_id not in entries:
                    raise ConceptNotFoundError(target_id)

        created = []
        for concept_id, entry in entries.items():
            created.append(self.graph.add_concept(
                entry['label'], entry.get('category'), concept_id))

        connection_count = 0
        for concept_id, entry in entries.items():
            for connection in entry.get('connections') or ():
                self.graph.add_connection(
                    concept_id,
                    connection['target_id'],
                    connection.get('weight', 0.5),
                )
                connection_count += 1

        logger.debug(f"Bulk load: {len(created)} concepts, {connection_count} connections")
        return created

    # ------------------------------------------------------------------
    # Parameters and activation
    # ------------------------------------------------------------------

    def set_parameters(self, **overrides) -> Dict[str, Any]:
        """Merge overrides into the current parameters and return them."""
        parameters = self.engine.set_parameters(**overrides)
        self.detector.activation_threshold = parameters.activation_threshold
        return parameters.to_dict()

    def set_initial_activation(self, selection, value: float = 1.0) -> Dict[str, int]:
        """
        Seed initial activation.

        Args:
            selection: A selection variant, or a list of ids / mapping of
                id -> value resolved through selection_from
            value: Activation for a list of ids

        Returns:
            dict: requested and seeded concept counts
        """
        resolved: Selection = selection_from(selection)
        if isinstance(resolved, UniformSelection):
            requested = len(resolved.ids)
        else:
            requested = len(resolved.values)
        seeded = self.engine.set_initial_activation(resolved, value)
        return {'requested': requested, 'seeded': seeded}

    def spread_activation(self, decay_rate: Optional[float] = None) -> Dict[str, Any]:
        return self.engine.spread_activation(decay_rate)

    def run_until_convergence(self, max_iterations: Optional[int] = None,
                              convergence_threshold: Optional[float] = None,
                              decay_rate: Optional[float] = None) -> Dict[str, Any]:
        return self.engine.run_until_convergence(
            max_iterations=max_iterations,
            convergence_threshold=convergence_threshold,
            decay_rate=decay_rate,
        )

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def get_top_activated_concepts(self, limit: int = 10,
                                   threshold: Optional[float] = None) -> List[Dict[str, Any]]:
        return self.detector.get_top_activated_concepts(limit, threshold)

    def identify_emergent_patterns(self, threshold: Optional[float] = None) -> List[Dict[str, Any]]:
        return self.detector.identify_emergent_patterns(threshold)

    def generate_summary(self) -> Dict[str, Any]:
        return self.detector.generate_summary(self.engine.iteration_count, self.graph.size())

    def get_activation_history(self, start_round: int = 0, limit: int = 10) -> List[Dict[str, Any]]:
        return self.history.slice(start_round, limit)

    def get_state(self) -> Dict[str, Any]:
        """
        Get current network state.

        Returns:
            dict: parameters, size, metrics, iteration count and history length
        """
        parameters = self.engine.parameters
        return {
            'parameters': parameters.to_dict(),
            'network_size': self.graph.size(),
            'metrics': compute_metrics(self.graph, parameters.activation_threshold),
            'iteration_count': self.engine.iteration_count,
            'history_length': len(self.history),
        }

    def to_networkx(self) -> nx.DiGraph:
        """
        Export the network to a NetworkX directed graph.

        Nodes carry label, category, activation and metadata; edges carry weight.
        """
        G = nx.DiGraph()
        for node in self.graph:
            G.add_node(
                node.id,
                label=node.label,
                category=node.category,
                activation=node.activation,
                metadata=dict(node.metadata),
            )
        for node in self.graph:
            for target_id, weight in node.connections.items():
                if target_id in self.graph:
                    G.add_edge(node.id, target_id, weight=weight)
        return G

    def __repr__(self):
        size = self.graph.size()
        return (f"ConceptNetwork(concepts={size['concept_count']}, "
                f"connections={size['connection_count']}, "
                f"rounds={self.engine.iteration_count})")
