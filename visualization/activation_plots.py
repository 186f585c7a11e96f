"""
Activation visualization for the concept network.

Plots activation trajectories over rounds and the network coloured by
current activation, with emergent patterns highlighted.
"""

import numpy as np
import matplotlib.pyplot as plt
import networkx as nx
from matplotlib.colors import LinearSegmentedColormap
from typing import Dict, List, Optional, Tuple

from spreadgraph.utils import activation_trajectories


# Cool blue to hot red, shared by all activation plots
_ACTIVATION_CMAP = LinearSegmentedColormap.from_list(
    'activation',
    ['#313695', '#4575b4', '#74add1', '#abd9e9',
     '#fee090', '#fdae61', '#f46d43', '#d73027', '#a50026']
)


def plot_activation_history(history: List[Dict],
                            threshold: Optional[float] = None,
                            max_concepts: int = 20,
                            title: str = "Activation Spreading",
                            figsize: Tuple[int, int] = (12, 6),
                            save_path: Optional[str] = None):
    """
    Plot per-concept activation across recorded rounds.

    Args:
        history: Entries from ConceptNetwork.get_activation_history
        threshold: Optional activation threshold drawn as a dashed line
        max_concepts: Only the concepts with the highest final activation are drawn
        title: Plot title
        figsize: Figure size
        save_path: Optional path to save figure

    Returns:
        matplotlib Figure
    """
    rounds, ids, matrix = activation_trajectories(history)

    fig, ax = plt.subplots(figsize=figsize)

    if len(ids) > 0:
        final = np.nan_to_num(matrix[-1], nan=-1.0)
        order = np.argsort(-final, kind='stable')[:max_concepts]
        colors = _ACTIVATION_CMAP(np.linspace(1, 0, max(len(order), 1)))
        for color, col in zip(colors, order):
            ax.plot(rounds, matrix[:, col], marker='o', markersize=3,
                    linewidth=1.5, color=color, label=ids[col])
        if len(order) <= 10:
            ax.legend(loc='best', fontsize=8)

    if threshold is not None:
        ax.axhline(threshold, color='gray', linestyle='--', linewidth=1,
                   label=f'threshold={threshold}')

    ax.set_xlabel('Round', fontsize=12)
    ax.set_ylabel('Activation', fontsize=12)
    ax.set_ylim(-0.05, 1.05)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    return fig


def plot_network_activation(network,
                            threshold: Optional[float] = None,
                            title: str = "Concept Network Activation",
                            figsize: Tuple[int, int] = (12, 10),
                            show_labels: bool = True,
                            save_path: Optional[str] = None):
    """
    Draw the network with nodes coloured by activation (matplotlib + networkx).

    Members of emergent patterns are outlined.

    Args:
        network: ConceptNetwork to draw
        threshold: Pattern threshold (network default if None)
        title: Plot title
        figsize: Figure size
        show_labels: Draw concept labels for small graphs
        save_path: Optional path to save figure

    Returns:
        matplotlib Figure
    """
    G = network.to_networkx()
    N = G.number_of_nodes()

    fig, ax = plt.subplots(figsize=figsize)

    if N > 0:
        pos = nx.spring_layout(G, k=2 / np.sqrt(N), iterations=50, seed=42)

        activations = [G.nodes[n]['activation'] for n in G.nodes()]
        in_pattern = {
            concept['id']
            for pattern in network.identify_emergent_patterns(threshold)
            for concept in pattern['concepts']
        }
        edge_colors = ['black' if n in in_pattern else 'none' for n in G.nodes()]

        nodes = nx.draw_networkx_nodes(G, pos, node_color=activations,
                                       cmap=_ACTIVATION_CMAP, vmin=0, vmax=1,
                                       node_size=300, edgecolors=edge_colors,
                                       linewidths=2, ax=ax)
        weights = [G.edges[e]['weight'] for e in G.edges()]
        nx.draw_networkx_edges(G, pos, width=[0.5 + 2.5 * w for w in weights],
                               alpha=0.4, arrows=True, ax=ax)

        if show_labels and N <= 50:
            labels = {n: G.nodes[n]['label'] for n in G.nodes()}
            nx.draw_networkx_labels(G, pos, labels=labels, font_size=8, ax=ax)

        cbar = plt.colorbar(nodes, ax=ax, shrink=0.8)
        cbar.set_label('Activation Level', fontsize=10)

        stats_text = (f"Concepts: {N}\nConnections: {G.number_of_edges()}\n"
                      f"In patterns: {len(in_pattern)}")
        ax.text(0.02, 0.98, stats_text, transform=ax.transAxes,
                fontsize=10, verticalalignment='top',
                bbox=dict(boxstyle='round', facecolor='white', alpha=0.8))

    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.axis('off')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    return fig
