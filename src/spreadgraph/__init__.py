"""
Spreadgraph: a Concept Activation Network

This package implements activation spreading over a weighted graph of
labeled concepts. Activation is propagated in discrete synchronous rounds:

    a_i' = sigmoid(a_i (1 - d) + Σ_j w_ij a_j)

until the total per-round change falls below a convergence threshold. The
settled state is then analysed for:
- Top activated concepts
- Emergent patterns: connected clusters of concepts above an activation threshold

The graph itself never learns: edge weights change only through explicit
mutation.
"""

__version__ = "0.1.0"

from spreadgraph.config import ActivationParameters
from spreadgraph.dynamics import UniformSelection, WeightedSelection
from spreadgraph.engine import ConceptNetwork
from spreadgraph.exceptions import (
    ConceptNotFoundError,
    ConfigurationError,
    IdCollisionError,
    InvalidSelectionError,
    SpreadGraphError,
)

__all__ = [
    "ConceptNetwork",
    "ActivationParameters",
    "UniformSelection",
    "WeightedSelection",
    "SpreadGraphError",
    "IdCollisionError",
    "ConceptNotFoundError",
    "InvalidSelectionError",
    "ConfigurationError",
]
