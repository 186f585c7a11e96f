"""Update dynamics and the activation engine."""

from spreadgraph.dynamics.selection import (
    UniformSelection,
    WeightedSelection,
    selection_from
)
from spreadgraph.dynamics.spreading import ActivationEngine
from spreadgraph.dynamics.updates import aggregate_incoming, spread_step, total_delta

__all__ = [
    "ActivationEngine",
    "UniformSelection",
    "WeightedSelection",
    "selection_from",
    "aggregate_incoming",
    "spread_step",
    "total_delta"
]
