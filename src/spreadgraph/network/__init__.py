"""Concept graph and activation history."""

from spreadgraph.network.graph import CompiledEdges, ConceptGraph, ConceptNode
from spreadgraph.network.history import HistoryEntry, HistoryRecorder

__all__ = ["ConceptNode", "ConceptGraph", "CompiledEdges", "HistoryEntry", "HistoryRecorder"]
