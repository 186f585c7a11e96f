"""
Selections for seeding initial activation.

A selection is either uniform (a list of ids, all set to the same value) or
weighted (an explicit id -> value mapping). Callers pick the variant; the
engine does not guess it from the shape of the input.
"""

import math
import numbers
from dataclasses import dataclass
from collections.abc import Iterable, Mapping
from typing import Dict, Tuple, Union

from spreadgraph.exceptions import InvalidSelectionError


@dataclass(frozen=True)
class UniformSelection:
    """Concept ids that all receive the same initial activation."""
    ids: Tuple[str, ...]

    def __init__(self, ids: Iterable[str]):
        if isinstance(ids, (str, bytes)) or not isinstance(ids, Iterable):
            raise InvalidSelectionError(
                f"UniformSelection expects a collection of ids, got {type(ids).__name__}",
                context={'type': type(ids).__name__},
            )
        object.__setattr__(self, 'ids', tuple(ids))


@dataclass(frozen=True)
class WeightedSelection:
    """Explicit per-concept initial activation values."""
    values: Dict[str, float]

    def __init__(self, values: Mapping[str, float]):
        if not isinstance(values, Mapping):
            raise InvalidSelectionError(
                f"WeightedSelection expects a mapping of id -> value, got {type(values).__name__}",
                context={'type': type(values).__name__},
            )
        checked = {}
        for concept_id, value in values.items():
            if isinstance(value, bool) or not isinstance(value, numbers.Real) \
                    or not math.isfinite(value):
                raise InvalidSelectionError(
                    f"Activation for {concept_id} must be a finite number, got {value!r}",
                    context={'concept_id': concept_id},
                )
            checked[concept_id] = float(value)
        object.__setattr__(self, 'values', checked)


Selection = Union[UniformSelection, WeightedSelection]


def selection_from(obj) -> Selection:
    """
    Resolve raw caller input into a selection variant.

    Lists, tuples and sets of ids become a UniformSelection; mappings become
    a WeightedSelection. Existing selections pass through unchanged.

    Raises:
        InvalidSelectionError: For strings, scalars and other shapes
    """
    if isinstance(obj, (UniformSelection, WeightedSelection)):
        return obj
    if isinstance(obj, Mapping):
        return WeightedSelection(obj)
    if isinstance(obj, (list, tuple, set, frozenset)):
        return UniformSelection(obj)
    raise InvalidSelectionError(
        f"Selection must be a list of ids or a mapping of id -> value, got {type(obj).__name__}",
        context={'type': type(obj).__name__},
    )
