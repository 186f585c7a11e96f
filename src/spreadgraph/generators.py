"""
Network generators for the concept network.

Provides synthetic concept graphs with thematic clusters, useful for
experiments, benchmarks and tests of pattern detection.
"""

import numpy as np
from typing import Dict, List, Optional

from spreadgraph.engine import ConceptNetwork


class ClusteredNetworkGenerator:
    """
    Generate concept networks with thematic clustering.

    Concepts are grouped into clusters. Every pair inside a cluster is
    connected bidirectionally with a strong weight; pairs across clusters
    are connected with a weak weight and a small probability.

    Attributes:
        num_clusters: Number of thematic clusters
        cluster_size: Concepts per cluster
        intra_weight: Weight of edges inside a cluster
        inter_probability: Chance of an edge between concepts of different clusters
        inter_weight: Weight of edges across clusters
    """

    def __init__(self, num_clusters: int = 3, cluster_size: int = 5,
                 intra_weight: float = 0.8, inter_probability: float = 0.05,
                 inter_weight: float = 0.1, random_seed: Optional[int] = None):
        """
        Initialize clustered network generator.

        Args:
            num_clusters: Number of distinct clusters
            cluster_size: Concepts per cluster
            intra_weight: Edge weight within a cluster
            inter_probability: Probability of an edge across clusters (0-1)
            inter_weight: Edge weight across clusters
            random_seed: Optional seed for reproducibility
        """
        self.num_clusters = num_clusters
        self.cluster_size = cluster_size
        self.intra_weight = intra_weight
        self.inter_probability = inter_probability
        self.inter_weight = inter_weight

        self.rng = np.random.RandomState(random_seed)

    def cluster_ids(self) -> List[List[str]]:
        """Concept ids per cluster, in the order build() creates them."""
        return [
            [f"c{cluster}-{member}" for member in range(self.cluster_size)]
            for cluster in range(self.num_clusters)
        ]

    def build(self, network: Optional[ConceptNetwork] = None) -> ConceptNetwork:
        """
        Populate a network (a fresh one if not given) with clustered concepts.

        Returns:
            The populated ConceptNetwork
        """
        if network is None:
            network = ConceptNetwork()

        clusters = self.cluster_ids()
        for cluster, ids in enumerate(clusters):
            for member, concept_id in enumerate(ids):
                network.add_concept(f"Cluster {cluster} / {member}",
                                    category=f"cluster-{cluster}",
                                    concept_id=concept_id)

        for ids in clusters:
            for i, source in enumerate(ids):
                for target in ids[i + 1:]:
                    network.add_connection(source, target, self.intra_weight)

        for a in range(self.num_clusters):
            for b in range(a + 1, self.num_clusters):
                for source in clusters[a]:
                    for target in clusters[b]:
                        if self.rng.rand() < self.inter_probability:
                            network.add_connection(source, target, self.inter_weight)

        return network

    def seed_cluster(self, network: ConceptNetwork, cluster: int,
                     fraction: float = 0.5, value: float = 1.0) -> Dict[str, int]:
        """
        Seed a random fraction of one cluster's concepts.

        Args:
            network: Network built by this generator
            cluster: Which cluster to seed
            fraction: Share of the cluster to activate (at least one concept)
            value: Initial activation

        Returns:
            Result of ConceptNetwork.set_initial_activation
        """
        ids = self.cluster_ids()[cluster]
        count = max(1, int(round(fraction * len(ids))))
        chosen = self.rng.choice(ids, size=count, replace=False)
        return network.set_initial_activation([str(c) for c in chosen], value)


def random_network(num_concepts: int, edge_probability: float = 0.1,
                   random_seed: Optional[int] = None,
                   bidirectional: bool = True) -> ConceptNetwork:
    """
    Create an Erdős–Rényi style concept network with uniform random weights.

    Args:
        num_concepts: Number of concepts
        edge_probability: Probability of each (unordered) pair being connected
        random_seed: Optional seed for reproducibility
        bidirectional: Whether edges are added in both directions

    Returns:
        ConceptNetwork with ids "n0" .. "n{num_concepts-1}"
    """
    rng = np.random.RandomState(random_seed)
    network = ConceptNetwork()
    ids = [f"n{i}" for i in range(num_concepts)]
    for concept_id in ids:
        network.add_concept(f"Concept {concept_id}", concept_id=concept_id)

    for i in range(num_concepts):
        for j in range(i + 1, num_concepts):
            if rng.rand() < edge_probability:
                network.add_connection(ids[i], ids[j], float(rng.uniform(0.0, 1.0)),
                                       bidirectional=bidirectional)
    return network
