"""
Activation parameters for the concept network.

A single settings record shared by the activation engine and the pattern
detector. Updates merge into the current record instead of replacing it.
"""

import math
import numbers
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import load_dotenv

from spreadgraph.exceptions import ConfigurationError


ENV_PREFIX = "SPREADGRAPH_"


@dataclass(frozen=True)
class ActivationParameters:
    """
    Parameters for activation spreading and pattern detection.

    Attributes:
        activation_threshold: Minimum activation for a concept to count as active
        decay_rate: Fraction of activation lost per round, in [0, 1]
        max_iterations: Upper bound on rounds in run_until_convergence
        convergence_threshold: Total per-round change at or below which the network is stable
        history_limit: Maximum retained history entries (None = unbounded)
    """
    activation_threshold: float = 0.7
    decay_rate: float = 0.1
    max_iterations: int = 5
    convergence_threshold: float = 0.01
    history_limit: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.activation_threshold, bool) \
                or not isinstance(self.activation_threshold, numbers.Real) \
                or not math.isfinite(self.activation_threshold):
            raise ConfigurationError(
                f"activation_threshold must be a finite number, got {self.activation_threshold!r}",
                context={'activation_threshold': self.activation_threshold},
            )
        if self.history_limit is not None and (
                isinstance(self.history_limit, bool)
                or not isinstance(self.history_limit, numbers.Integral)
                or self.history_limit < 1):
            raise ConfigurationError(
                f"history_limit must be None or a positive integer, got {self.history_limit!r}",
                context={'history_limit': self.history_limit},
            )
        # Store plain Python scalars so numpy inputs serialize cleanly
        object.__setattr__(self, 'activation_threshold', float(self.activation_threshold))
        object.__setattr__(self, 'decay_rate', validate_decay_rate(self.decay_rate))
        object.__setattr__(self, 'max_iterations', validate_max_iterations(self.max_iterations))
        object.__setattr__(self, 'convergence_threshold',
                           validate_convergence_threshold(self.convergence_threshold))
        if self.history_limit is not None:
            object.__setattr__(self, 'history_limit', int(self.history_limit))

    def merged(self, **overrides) -> "ActivationParameters":
        """
        Return a new record with only the supplied keys replaced.

        Raises:
            ConfigurationError: For unknown keys or invalid values
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown activation parameter(s): {', '.join(unknown)}",
                context={'unknown': unknown},
            )
        values = self.to_dict()
        values.update(overrides)
        return ActivationParameters(**values)

    def to_dict(self) -> Dict[str, Union[float, int, None]]:
        return asdict(self)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX,
                 dotenv_path: Optional[Union[str, Path]] = None) -> "ActivationParameters":
        """
        Build parameters from environment variables.

        A .env file is loaded first (without overriding variables already set).
        Recognized variables are PREFIX + ACTIVATION_THRESHOLD, DECAY_RATE,
        MAX_ITERATIONS, CONVERGENCE_THRESHOLD and HISTORY_LIMIT.

        Args:
            prefix: Environment variable prefix
            dotenv_path: Optional explicit .env location

        Returns:
            ActivationParameters with defaults for anything unset
        """
        load_dotenv(dotenv_path=dotenv_path)

        parsers = {
            'activation_threshold': float,
            'decay_rate': float,
            'max_iterations': int,
            'convergence_threshold': float,
            'history_limit': int,
        }
        overrides = {}
        for name, parse in parsers.items():
            raw = os.getenv(prefix + name.upper())
            if raw is None or raw.strip() == "":
                continue
            try:
                overrides[name] = parse(raw)
            except ValueError as exc:
                raise ConfigurationError(
                    f"Invalid value for {prefix + name.upper()}: {raw!r}",
                    context={'variable': prefix + name.upper(), 'value': raw},
                ) from exc
        return cls(**overrides)


def validate_decay_rate(decay_rate: float) -> float:
    if isinstance(decay_rate, bool) or not isinstance(decay_rate, numbers.Real) \
            or not 0.0 <= decay_rate <= 1.0:
        raise ConfigurationError(
            f"decay_rate must be in [0, 1], got {decay_rate!r}",
            context={'decay_rate': decay_rate},
        )
    return float(decay_rate)


def validate_max_iterations(max_iterations: int) -> int:
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, numbers.Integral) \
            or max_iterations < 1:
        raise ConfigurationError(
            f"max_iterations must be a positive integer, got {max_iterations!r}",
            context={'max_iterations': max_iterations},
        )
    return int(max_iterations)


def validate_convergence_threshold(convergence_threshold: float) -> float:
    if isinstance(convergence_threshold, bool) \
            or not isinstance(convergence_threshold, numbers.Real) \
            or not convergence_threshold >= 0.0:
        raise ConfigurationError(
            f"convergence_threshold must be >= 0, got {convergence_threshold!r}",
            context={'convergence_threshold': convergence_threshold},
        )
    return float(convergence_threshold)
