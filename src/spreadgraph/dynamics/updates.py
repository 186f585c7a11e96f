"""
Update dynamics for activation spreading.

One synchronous round computes, for every concept i:

incoming_i = Σ_{(i→j, w)} a_j · w          (over i's own outgoing edges)
a_i' = sigmoid(a_i · (1 - d) + incoming_i)

All a_i' are computed from the pre-round vector a, so the update is
order-independent. The round's total change is the L1 norm ||a' - a||₁.
"""

import numpy as np

from spreadgraph.network.graph import CompiledEdges
from spreadgraph.utils import sigmoid


def aggregate_incoming(activations: np.ndarray, edges: CompiledEdges) -> np.ndarray:
    """
    Weighted sum of target activations along each concept's outgoing edges.

    Args:
        activations: Shape (N,) - pre-round activations
        edges: Compiled edge table of the graph

    Returns:
        np.ndarray: Shape (N,) - incoming influence per concept
    """
    n = len(activations)
    if len(edges.sources) == 0:
        return np.zeros(n)
    # bincount accumulates in array order, which the edge table fixes per source
    return np.bincount(edges.sources,
                       weights=activations[edges.targets] * edges.weights,
                       minlength=n)


def spread_step(activations: np.ndarray, edges: CompiledEdges,
                decay_rate: float) -> np.ndarray:
    """
    Compute the next activation vector from a consistent snapshot.

    Args:
        activations: Shape (N,) - pre-round activations
        edges: Compiled edge table
        decay_rate: Fraction of activation lost this round

    Returns:
        np.ndarray: Shape (N,) - next activations, strictly inside (0, 1)
    """
    incoming = aggregate_incoming(activations, edges)
    decayed = activations * (1.0 - decay_rate)
    return sigmoid(decayed + incoming)


def total_delta(new_activations: np.ndarray, old_activations: np.ndarray) -> float:
    """
    Total activation change for convergence monitoring.

    Σ_i |a_i' - a_i|, not normalized by node count.
    """
    if len(new_activations) == 0:
        return 0.0
    return float(np.sum(np.abs(new_activations - old_activations)))
