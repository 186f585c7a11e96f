"""
Basic spreading experiment for the concept network.

Builds a clustered concept network, seeds part of one cluster, spreads
activation until convergence, and reports the top concepts and emergent
patterns. Optionally saves activation plots.
"""

import time
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))
sys.path.insert(0, str(Path(__file__).parent.parent))

from spreadgraph.generators import ClusteredNetworkGenerator


def run_basic_spreading(num_clusters: int = 4,
                        cluster_size: int = 6,
                        intra_weight: float = 0.8,
                        inter_probability: float = 0.05,
                        seed_cluster: int = 0,
                        max_iterations: int = 20,
                        convergence_threshold: float = 0.001,
                        decay_rate: float = 0.1,
                        random_seed: int = 42,
                        plot_dir: str = None,
                        verbose: bool = True):
    """
    Run the basic spreading experiment.

    Args:
        num_clusters: Number of concept clusters
        cluster_size: Concepts per cluster
        intra_weight: Edge weight inside clusters
        inter_probability: Probability of weak edges across clusters
        seed_cluster: Cluster whose concepts are seeded
        max_iterations: Iteration cap for convergence
        convergence_threshold: Total change at which spreading stops
        decay_rate: Per-round decay
        random_seed: Random seed for reproducibility
        plot_dir: Optional directory for saved figures
        verbose: Whether to print progress

    Returns:
        dict: Experiment results including convergence and summary
    """
    if verbose:
        print("=" * 70)
        print("CONCEPT NETWORK - Basic Spreading")
        print("=" * 70)
        print(f"  Clusters: {num_clusters} x {cluster_size}")
        print(f"  Intra weight: {intra_weight}, inter probability: {inter_probability}")
        print(f"  Decay rate: {decay_rate}")
        print(f"  Random seed: {random_seed}")
        print("=" * 70)

    start_time = time.time()

    generator = ClusteredNetworkGenerator(
        num_clusters=num_clusters,
        cluster_size=cluster_size,
        intra_weight=intra_weight,
        inter_probability=inter_probability,
        random_seed=random_seed
    )
    network = generator.build()
    network.set_parameters(
        max_iterations=max_iterations,
        convergence_threshold=convergence_threshold,
        decay_rate=decay_rate
    )

    if verbose:
        print(f"\n[1/3] Built {network}")

    seeded = generator.seed_cluster(network, seed_cluster, fraction=0.5)
    if verbose:
        print(f"[2/3] Seeded {seeded['seeded']} concepts in cluster {seed_cluster}")

    convergence = network.run_until_convergence()
    if verbose:
        status = "converged" if convergence['converged'] else "did not converge"
        print(f"[3/3] Spreading {status} after {convergence['iterations']} iterations "
              f"(final delta {convergence['final_delta']:.6f})")

    summary = network.generate_summary()
    elapsed = time.time() - start_time

    if verbose:
        print("\nTop activated concepts:")
        for concept in summary['top_activated_concepts']:
            print(f"  {concept['id']:<8} {concept['activation']:.4f}  ({concept['category']})")
        print(f"\nEmergent patterns: {len(summary['emergent_patterns'])}")
        for pattern in summary['emergent_patterns']:
            members = ", ".join(c['id'] for c in pattern['concepts'])
            print(f"  avg={pattern['average_activation']:.4f}: {members}")
        print(f"\nTotal time: {elapsed:.3f}s")

    if plot_dir:
        from visualization.activation_plots import plot_activation_history, plot_network_activation
        out = Path(plot_dir)
        out.mkdir(parents=True, exist_ok=True)
        history = network.get_activation_history(0, convergence['iterations'] + 1)
        plot_activation_history(history, threshold=network.parameters.activation_threshold,
                                save_path=str(out / 'activation_history.png'))
        plot_network_activation(network, save_path=str(out / 'network_activation.png'))
        if verbose:
            print(f"Plots saved to {out}")

    return {
        'convergence': convergence,
        'summary': summary,
        'state': network.get_state(),
        'elapsed': elapsed
    }


def main():
    """Main entry point for the basic spreading experiment."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Run concept network spreading experiment'
    )
    parser.add_argument('--clusters', type=int, default=4,
                        help='Number of clusters (default: 4)')
    parser.add_argument('--cluster-size', type=int, default=6,
                        help='Concepts per cluster (default: 6)')
    parser.add_argument('--decay', type=float, default=0.1,
                        help='Decay rate (default: 0.1)')
    parser.add_argument('--max-iterations', type=int, default=20,
                        help='Iteration cap (default: 20)')
    parser.add_argument('--seed', type=int, default=42,
                        help='Random seed (default: 42)')
    parser.add_argument('--plot-dir', type=str, default=None,
                        help='Directory to save plots')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Suppress output')

    args = parser.parse_args()

    return run_basic_spreading(
        num_clusters=args.clusters,
        cluster_size=args.cluster_size,
        decay_rate=args.decay,
        max_iterations=args.max_iterations,
        random_seed=args.seed,
        plot_dir=args.plot_dir,
        verbose=not args.quiet
    )


if __name__ == '__main__':
    main()
