"""
Activation Engine: seeding, synchronous spreading rounds, and the
convergence loop over a ConceptGraph.
"""

import math
import numbers
import time
from typing import Dict, Optional

from loguru import logger

from spreadgraph.config import (
    ActivationParameters,
    validate_convergence_threshold,
    validate_decay_rate,
    validate_max_iterations,
)
from spreadgraph.dynamics.selection import Selection, UniformSelection, WeightedSelection
from spreadgraph.dynamics.updates import spread_step, total_delta
from spreadgraph.exceptions import InvalidSelectionError
from spreadgraph.network.graph import ConceptGraph
from spreadgraph.network.history import HistoryRecorder


class ActivationEngine:
    """
    Drives activation over a graph it does not own.

    Every recorded state (the seeded state and each round after it) is
    appended to the history with a round index. iteration_count is the
    number of rounds recorded since the last seed.

    Attributes:
        graph: The ConceptGraph being driven
        parameters: Current ActivationParameters
        history: HistoryRecorder receiving per-round snapshots
        iteration_count: Rounds recorded since the last seed
    """

    def __init__(self, graph: ConceptGraph,
                 parameters: Optional[ActivationParameters] = None,
                 history: Optional[HistoryRecorder] = None):
        self.graph = graph
        self.parameters = parameters or ActivationParameters()
        if history is None:
            history = HistoryRecorder(self.parameters.history_limit)
        self.history = history
        self.iteration_count = 0

    def set_parameters(self, **overrides) -> ActivationParameters:
        """Merge overrides into the current parameters."""
        self.parameters = self.parameters.merged(**overrides)
        self.history.set_max_entries(self.parameters.history_limit)
        return self.parameters

    def set_initial_activation(self, selection: Selection, value: float = 1.0) -> int:
        """
        Reset all activations, seed the selected concepts, and restart history.

        Unknown ids are skipped.

        Args:
            selection: UniformSelection (each id set to value) or
                WeightedSelection (per-id values, value ignored)
            value: Activation for a UniformSelection

        Returns:
            Number of concepts actually seeded

        Raises:
            InvalidSelectionError: If selection is not a selection variant
        """
        if isinstance(selection, UniformSelection):
            if isinstance(value, bool) or not isinstance(value, numbers.Real) \
                    or not math.isfinite(value):
                raise InvalidSelectionError(
                    f"Activation value must be a finite number, got {value!r}",
                    context={'value': value},
                )
            seeds = {concept_id: float(value) for concept_id in selection.ids}
        elif isinstance(selection, WeightedSelection):
            seeds = dict(selection.values)
        else:
            raise InvalidSelectionError(
                f"Expected UniformSelection or WeightedSelection, got {type(selection).__name__}",
                context={'type': type(selection).__name__},
            )

        self.graph.reset_activations()
        seeded = 0
        for concept_id, activation in seeds.items():
            if concept_id in self.graph:
                self.graph.get_concept(concept_id).activation = activation
                seeded += 1

        self.history.clear()
        self.iteration_count = 0
        self._record_state()

        logger.debug(f"Initial activation set: {seeded}/{len(seeds)} concepts seeded")
        return seeded

    def spread_activation(self, decay_rate: Optional[float] = None) -> Dict:
        """
        Run one synchronous round of activation spreading.

        Args:
            decay_rate: Decay for this round (configured default if None)

        Returns:
            dict: round (index just recorded) and total_delta (L1 change)
        """
        d = self.parameters.decay_rate if decay_rate is None else validate_decay_rate(decay_rate)

        current = self.graph.activation_vector()
        new = spread_step(current, self.graph.compiled_edges(), d)
        self.graph.commit_activations(new)

        delta = total_delta(new, current)
        round_index = self._record_state()

        logger.debug(f"Round {round_index}: total_delta={delta:.6f} (decay={d})")
        return {
            'round': round_index,
            'total_delta': delta,
        }

    def run_until_convergence(self, max_iterations: Optional[int] = None,
                              convergence_threshold: Optional[float] = None,
                              decay_rate: Optional[float] = None) -> Dict:
        """
        Spread until the total change falls to the threshold or the cap is hit.

        Options left as None fall back to the configured parameters.

        Returns:
            dict: converged, iterations, final_delta
        """
        params = self.parameters
        max_iterations = validate_max_iterations(
            params.max_iterations if max_iterations is None else max_iterations)
        threshold = validate_convergence_threshold(
            params.convergence_threshold if convergence_threshold is None else convergence_threshold)
        decay = validate_decay_rate(
            params.decay_rate if decay_rate is None else decay_rate)

        iterations = 0
        delta = math.inf
        while iterations < max_iterations and delta > threshold:
            delta = self.spread_activation(decay)['total_delta']
            iterations += 1

        converged = delta <= threshold
        logger.info(
            f"Spreading {'converged' if converged else 'stopped'} after {iterations} "
            f"iteration(s), final_delta={delta:.6f}"
        )
        return {
            'converged': converged,
            'iterations': iterations,
            'final_delta': delta,
        }

    def _record_state(self) -> int:
        round_index = self.iteration_count
        self.history.record(round_index, time.time(), self.graph.snapshot())
        self.iteration_count += 1
        return round_index
