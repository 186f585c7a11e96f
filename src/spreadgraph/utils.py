"""
Utility functions for the concept network.

Includes the squashing function, weight clamping, metrics computation,
and helpers for analysing activation history.
"""

import numpy as np
from typing import Dict, Iterable, List, Mapping, Tuple

# Largest double below 1.0 and smallest positive double: keeps sigmoid output
# strictly inside (0, 1) even where exp() saturates.
_UPPER = np.nextafter(1.0, 0.0)
_LOWER = np.nextafter(0.0, 1.0)


def sigmoid(x):
    """
    Numerically stable logistic function 1 / (1 + e^-x).

    Accepts scalars or arrays. Output lies strictly inside (0, 1) for any
    finite input.

    Args:
        x: Scalar or array of pre-activations

    Returns:
        float for scalar input, np.ndarray otherwise
    """
    arr = np.asarray(x, dtype=float)
    flat = np.atleast_1d(arr)
    out = np.empty_like(flat)

    pos = flat >= 0
    out[pos] = 1.0 / (1.0 + np.exp(-flat[pos]))
    exp_neg = np.exp(flat[~pos])
    out[~pos] = exp_neg / (1.0 + exp_neg)

    out = np.clip(out, _LOWER, _UPPER)
    if arr.ndim == 0:
        return float(out[0])
    return out.reshape(arr.shape)


def clamp_weight(weight: float) -> float:
    """Saturate an edge weight into [0, 1]."""
    return float(min(1.0, max(0.0, weight)))


def compute_metrics(graph, activation_threshold: float) -> Dict[str, float]:
    """
    Compute graph and activation metrics for monitoring.

    Metrics include:
    - density: directed edges / possible directed edges
    - mean_out_degree: average number of outgoing edges
    - mean_activation / max_activation: activation statistics
    - active_fraction: share of concepts at or above the threshold

    Args:
        graph: ConceptGraph to measure
        activation_threshold: Threshold for counting a concept as active

    Returns:
        dict: Computed metrics
    """
    size = graph.size()
    n = size['concept_count']
    e = size['connection_count']

    max_edges = n * (n - 1)
    density = e / max_edges if max_edges > 0 else 0.0
    mean_out_degree = e / n if n > 0 else 0.0

    activations = graph.activation_vector()
    if len(activations) == 0:
        return {
            'density': density,
            'mean_out_degree': mean_out_degree,
            'mean_activation': 0.0,
            'max_activation': 0.0,
            'active_fraction': 0.0,
        }

    return {
        'density': density,
        'mean_out_degree': mean_out_degree,
        'mean_activation': float(np.mean(activations)),
        'max_activation': float(np.max(activations)),
        'active_fraction': float(np.mean(activations >= activation_threshold)),
    }


def activation_trajectories(history: Iterable[Mapping]) -> Tuple[np.ndarray, List[str], np.ndarray]:
    """
    Convert history entries into a (rounds x concepts) activation matrix.

    Concepts are ordered by first appearance. A concept absent from a round
    (added later or removed earlier) is NaN in that row.

    Args:
        history: Entries as returned by HistoryRecorder.slice

    Returns:
        Tuple of (round_indices, concept_ids, matrix)
    """
    entries = list(history)
    ids: List[str] = []
    column: Dict[str, int] = {}
    for entry in entries:
        for row in entry['activations']:
            if row['id'] not in column:
                column[row['id']] = len(ids)
                ids.append(row['id'])

    matrix = np.full((len(entries), len(ids)), np.nan)
    for r, entry in enumerate(entries):
        for row in entry['activations']:
            matrix[r, column[row['id']]] = row['activation']

    rounds = np.array([entry['round'] for entry in entries], dtype=int)
    return rounds, ids, matrix
