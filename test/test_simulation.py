"""
Tests for simulation module.
"""

import pytest
import numpy as np
from causal_search_core.config import Parameters
from causal_search_core.graph import NodeType
from causal_search_core.simulation import (
    LinearSemSimulation, erdos_renyi_dag, linear_gaussian_data, random_coefficients, random_cyclic_graph
)


class TestGraphGeneration:
    """Test cases for random graph generation."""

    def test_erdos_renyi_edge_count(self):
        """Test that exactly int(p * n(n-1)/2) edges are placed"""
        graph = erdos_renyi_dag(10, 0.3, rng=np.random.RandomState(0))
        assert graph.get_num_nodes() == 10
        assert graph.get_num_edges() == int(0.3 * 45)
        assert graph.paths().is_acyclic()

    def test_erdos_renyi_latents(self):
        """Test latent node naming and typing"""
        graph = erdos_renyi_dag(4, 0.5, num_latents=2, rng=np.random.RandomState(0))
        latents = [n.name for n in graph.get_nodes() if n.node_type == NodeType.LATENT]
        assert latents == ["L1", "L2"]
        assert graph.get_num_edges() == int(0.5 * 15)

    def test_erdos_renyi_invalid(self):
        """Test argument validation"""
        with pytest.raises(ValueError):
            erdos_renyi_dag(5, 1.5)

    def test_cyclic_graph(self):
        """Test that cycles are closed and degrees are bounded"""
        graph = random_cyclic_graph(10, 12, 6, 1.0, np.random.RandomState(0))
        assert not graph.paths().is_acyclic()
        assert graph.get_degree() <= 6

    def test_cyclic_graph_without_cycles(self):
        """Test that prob_cycle 0 leaves a DAG"""
        graph = random_cyclic_graph(10, 12, 6, 0.0, np.random.RandomState(0))
        assert graph.paths().is_acyclic()
        assert graph.get_num_edges() == 12

    def test_coefficients(self):
        """Test coefficient magnitudes and support"""
        graph = erdos_renyi_dag(6, 0.5, rng=np.random.RandomState(1))
        weights = random_coefficients(graph, 0.5, 1.5, np.random.RandomState(1))
        nonzero = np.abs(weights[weights != 0])
        assert len(nonzero) == graph.get_num_edges()
        assert np.all((nonzero >= 0.5) & (nonzero <= 1.5))

    def test_linear_gaussian_data(self):
        """Test that data follows the structural equations"""
        weights = np.array([[0.0, 2.0], [0.0, 0.0]])
        data = linear_gaussian_data(weights, 5000, rng=np.random.RandomState(0))
        assert data.shape == (5000, 2)
        slope = np.cov(data.T)[0, 1] / np.var(data[:, 0], ddof=1)
        assert slope == pytest.approx(2.0, abs=0.1)


class TestLinearSemSimulation:
    """Test cases for the simulation wrapper."""

    def test_create_data(self):
        """Test data shapes, names and standardization"""
        simulation = LinearSemSimulation()
        simulation.create_data(Parameters(num_measures=5, sample_size=200, num_runs=2, seed=3))
        assert simulation.get_num_data_models() == 2
        data = simulation.get_data_model(0)
        assert data.matrix.shape == (200, 5)
        assert data.variable_names == simulation.get_true_graph(0).get_node_names()
        np.testing.assert_allclose(data.matrix.std(axis=0), 1.0)

    def test_latents_left_out(self):
        """Test that latent columns are not in the data"""
        simulation = LinearSemSimulation()
        simulation.create_data(Parameters(num_measures=4, num_latents=2, sample_size=50, seed=0))
        assert simulation.get_data_model(0).variable_names == ["X1", "X2", "X3", "X4"]
        assert simulation.get_true_graph(0).get_num_nodes() == 6

    def test_repeated_calls_replace(self):
        """Test that create_data replaces earlier results"""
        simulation = LinearSemSimulation(cyclic=True, standardize=False)
        simulation.create_data(Parameters(num_measures=6, num_runs=3, sample_size=20, seed=0))
        simulation.create_data(Parameters(num_measures=6, num_runs=1, sample_size=20, seed=1))
        assert simulation.get_num_data_models() == 1
        assert len(simulation.graphs) == 1

    def test_seed_reproducible(self):
        """Test that a seed fixes graphs and data"""
        first, second = LinearSemSimulation(), LinearSemSimulation()
        first.create_data(Parameters(num_measures=5, sample_size=30, seed=9))
        second.create_data(Parameters(num_measures=5, sample_size=30, seed=9))
        assert first.get_true_graph(0) == second.get_true_graph(0)
        np.testing.assert_array_equal(first.get_data_model(0).matrix, second.get_data_model(0).matrix)


if __name__ == "__main__":
    for test_class in (TestGraphGeneration, TestLinearSemSimulation):
        test_instance = test_class()
        for name in sorted(n for n in dir(test_instance) if n.startswith("test_")):
            print(f"Running {name}...")
            getattr(test_instance, name)()
            print("✓ Passed")

    print("\nAll tests passed! 🎉")
