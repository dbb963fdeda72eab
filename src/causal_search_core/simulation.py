"""
Simulation Module

Random graphs and linear Gaussian structural equation model data for
testing searches against a known truth.
"""

import logging
from typing import List, Optional

import numpy as np

from causal_search_core.config import Parameters
from causal_search_core.data import DataSet
from causal_search_core.graph import Graph, Node, NodeType

logger = logging.getLogger(__name__)


def _make_nodes(num_measures: int, num_latents: int) -> List[Node]:
    nodes = [Node(f"X{i + 1}") for i in range(num_measures)]
    nodes += [Node(f"L{i + 1}", NodeType.LATENT) for i in range(num_latents)]
    return nodes


def _rng(rng: Optional[np.random.RandomState]) -> np.random.RandomState:
    return rng if rng is not None else np.random.RandomState()


def erdos_renyi_dag(
    num_measures: int,
    edge_probability: float,
    num_latents: int = 0,
    rng: Optional[np.random.RandomState] = None
) -> Graph:
    """
    Generate an Erdős-Rényi random DAG.

    Exactly int(edge_probability * t) edges are placed, t = n(n-1)/2 with n
    counting measured and latent nodes. Edges point forward along a random
    order of the nodes, so the graph is acyclic.

    Args:
        num_measures: Number of measured nodes (X1, X2, ...)
        edge_probability: Fraction of the t possible edges to place
        num_latents: Number of latent nodes (L1, L2, ...)
        rng: Random state for reproducibility

    Returns:
        A DAG
    """
    if num_measures < 0 or num_latents < 0:
        raise ValueError("Node counts must be non-negative")
    if not 0 <= edge_probability <= 1:
        raise ValueError("edge_probability must be between 0 and 1")

    rng = _rng(rng)
    nodes = _make_nodes(num_measures, num_latents)
    n = len(nodes)
    num_edges = int(edge_probability * (n * (n - 1) // 2))

    order = rng.permutation(n)
    forward_pairs = [(order[i], order[j]) for i in range(n) for j in range(i + 1, n)]
    chosen = rng.choice(len(forward_pairs), size=num_edges, replace=False) if num_edges else []

    graph = Graph(nodes)
    for k in sorted(chosen):
        i, j = forward_pairs[k]
        graph.add_directed_edge(nodes[i], nodes[j])
    return graph


def random_cyclic_graph(
    num_nodes: int,
    num_edges: int,
    max_degree: int,
    prob_cycle: float,
    rng: Optional[np.random.RandomState] = None
) -> Graph:
    """
    Generate a random directed graph with cycles.

    A random DAG with up to num_edges edges (no node above max_degree) is
    built first; then, for each node with probability prob_cycle, an edge is
    added back to one of its non-adjacent proper ancestors, closing a
    directed cycle of length three or more.
    """
    if num_nodes < 2:
        raise ValueError("A cyclic graph needs at least two nodes")
    if not 0 <= prob_cycle <= 1:
        raise ValueError("prob_cycle must be between 0 and 1")

    rng = _rng(rng)
    nodes = _make_nodes(num_nodes, 0)
    graph = Graph(nodes)

    order = rng.permutation(num_nodes)
    forward_pairs = [(order[i], order[j]) for i in range(num_nodes) for j in range(i + 1, num_nodes)]
    for k in rng.permutation(len(forward_pairs)):
        if graph.get_num_edges() >= num_edges:
            break
        i, j = forward_pairs[k]
        if graph.get_degree(nodes[i]) < max_degree and graph.get_degree(nodes[j]) < max_degree:
            graph.add_directed_edge(nodes[i], nodes[j])

    paths = graph.paths()
    for node in nodes:
        if rng.uniform() >= prob_cycle or graph.get_degree(node) >= max_degree:
            continue
        candidates = [a for a in paths.get_ancestors(node)
                      if a != node and not graph.is_adjacent_to(a, node) and graph.get_degree(a) < max_degree]
        if candidates:
            ancestor = candidates[rng.randint(len(candidates))]
            graph.add_directed_edge(node, ancestor)

    return graph


def random_coefficients(graph: Graph, coef_low: float, coef_high: float,
                        rng: Optional[np.random.RandomState] = None) -> np.ndarray:
    """
    Weighted adjacency matrix B with B[i, j] the coefficient of i --> j.

    Magnitudes are uniform in [coef_low, coef_high] with a random sign,
    keeping weights away from 0 to avoid faithfulness violations.
    """
    rng = _rng(rng)
    weights = graph.to_adjacency_matrix().astype(float)
    edges = np.nonzero(weights)

    if len(edges[0]) > 0:
        signs = rng.choice([-1, 1], size=len(edges[0]))
        weights[edges] = rng.uniform(coef_low, coef_high, size=len(edges[0])) * signs

    return weights


def linear_gaussian_data(weights: np.ndarray, num_samples: int, noise_variance: float = 1.0,
                         rng: Optional[np.random.RandomState] = None) -> np.ndarray:
    """
    Sample X = X B + E, i.e. X = E (I - B)^-1, with Gaussian noise E.

    Works for cyclic B as long as I - B is invertible.
    """
    rng = _rng(rng)
    n = weights.shape[0]
    noise = rng.normal(0, np.sqrt(noise_variance), size=(num_samples, n))
    return noise @ np.linalg.inv(np.eye(n) - weights)


class LinearSemSimulation:
    """
    Linear Gaussian SEM simulation over random graphs.

    Each create_data call replaces the stored graphs and datasets with
    num_runs fresh ones. Latent variables are simulated but left out of the
    datasets.

    Args:
        cyclic: Simulate over random cyclic graphs instead of DAGs
        standardize: Scale each data column to zero mean and unit variance
    """

    def __init__(self, cyclic: bool = False, standardize: bool = True):
        self.cyclic = cyclic
        self.standardize = standardize
        self.graphs: List[Graph] = []
        self.datasets: List[DataSet] = []

    def _create_graph(self, parameters: Parameters, rng: np.random.RandomState) -> Graph:
        num_measures = parameters.get_int("num_measures")
        if self.cyclic:
            num_edges = int(parameters.get_float("avg_degree") * num_measures / 2)
            return random_cyclic_graph(num_measures, num_edges, parameters.get_int("max_degree"),
                                       parameters.get_float("prob_cycle"), rng)

        num_latents = parameters.get_int("num_latents")
        probability = parameters.get_float("edge_probability")
        if probability < 0:
            n = num_measures + num_latents
            probability = min(1.0, parameters.get_float("avg_degree") / (n - 1)) if n > 1 else 0.0
        return erdos_renyi_dag(num_measures, probability, num_latents, rng)

    def create_data(self, parameters: Parameters) -> None:
        seed = parameters.get_int("seed")
        rng = np.random.RandomState(seed) if seed >= 0 else np.random.RandomState()
        graphs, datasets = [], []

        for run in range(parameters.get_int("num_runs")):
            graph = self._create_graph(parameters, rng)
            weights = random_coefficients(graph, parameters.get_float("coef_low"),
                                          parameters.get_float("coef_high"), rng)
            data = linear_gaussian_data(weights, parameters.get_int("sample_size"),
                                        parameters.get_float("noise_variance"), rng)

            measured = [i for i, node in enumerate(graph.get_nodes()) if node.node_type == NodeType.MEASURED]
            data = data[:, measured]
            if self.standardize:
                data = (data - np.mean(data, axis=0)) / np.std(data, axis=0)

            names = [graph.get_nodes()[i].name for i in measured]
            graphs.append(graph)
            datasets.append(DataSet(data, names))
            logger.debug("Simulated run %d: %d edges, %d rows", run, graph.get_num_edges(), data.shape[0])

        self.graphs = graphs
        self.datasets = datasets

    def get_num_data_models(self) -> int:
        return len(self.datasets)

    def get_data_model(self, index: int) -> DataSet:
        return self.datasets[index]

    def get_true_graph(self, index: int) -> Graph:
        return self.graphs[index]
