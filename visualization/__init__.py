"""
Visualization tools for the concept network.

Provides static (matplotlib) views of activation spreading: per-concept
trajectories across rounds and the network coloured by activation.
"""

# Activation visualizations
from visualization.activation_plots import (
    plot_activation_history,
    plot_network_activation
)

__all__ = [
    'plot_activation_history',
    'plot_network_activation',
]
