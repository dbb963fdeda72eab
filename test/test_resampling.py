"""
Tests for resampling module.
"""

import threading

import pytest
import numpy as np
from causal_search_core.config import Parameters
from causal_search_core.data import DataSet
from causal_search_core.graph import Graph, Node
from causal_search_core.resampling import ResamplingSearch, get_shared_pool, in_shared_pool


def make_data(rows=50):
    rng = np.random.RandomState(0)
    return DataSet(rng.normal(size=(rows, 3)), ["A", "B", "C"])


def make_graph():
    a, b = Node("A"), Node("B")
    graph = Graph([a, b])
    graph.add_directed_edge(a, b)
    return graph


class FixedGraph:
    def __init__(self):
        self.row_counts = []
        self._lock = threading.Lock()

    def search(self, data, parameters, knowledge=None):
        with self._lock:
            self.row_counts.append(data.num_rows)
        return make_graph()


class Flaky:
    """Raises on every third call and returns None on the call after it."""

    def __init__(self):
        self.calls = 0
        self._lock = threading.Lock()

    def search(self, data, parameters, knowledge=None):
        with self._lock:
            call = self.calls
            self.calls += 1
        if call % 3 == 0:
            raise RuntimeError("search failed")
        if call % 3 == 1:
            return None
        return make_graph()


class KnowledgeEditor:
    def search(self, data, parameters, knowledge=None):
        knowledge.set_forbidden("A", "B")
        return make_graph()


class FirstRows:
    def search(self, data, parameters, knowledge=None):
        return data.matrix[0].copy()


class MultiData:
    def __init__(self):
        self.sizes = []
        self._lock = threading.Lock()

    def search(self, datasets, parameters, knowledge=None):
        with self._lock:
            self.sizes.append([d.num_rows for d in datasets])
        return make_graph()


class Nested:
    """Runs a resampling search of its own from inside a worker."""

    def search(self, data, parameters, knowledge=None):
        inner = ResamplingSearch(data, 2, FixedGraph(), Parameters(run_parallel=True))
        assert len(inner.search()) == 2
        return make_graph()


class TestResamplingSearch:
    """Test cases for resampled searches."""

    @pytest.mark.parametrize("run_parallel", [True, False])
    def test_collects_every_graph(self, run_parallel):
        """Test that N resamples give N graphs"""
        algorithm = FixedGraph()
        search = ResamplingSearch(make_data(), 10, algorithm, Parameters(run_parallel=run_parallel))
        graphs = search.search()
        assert len(graphs) == 10
        assert search.num_dropped == 0
        assert algorithm.row_counts == [50] * 10

    @pytest.mark.parametrize("run_parallel", [True, False])
    def test_failures_and_missing_graphs_counted(self, run_parallel):
        """Test exact accounting of failed and empty searches"""
        search = ResamplingSearch(make_data(), 10, Flaky(), Parameters(run_parallel=run_parallel))
        graphs = search.search()
        assert len(graphs) == 3
        assert search.num_failed == 4
        assert search.num_no_graph == 3
        assert search.num_dropped == 7

    def test_resample_size_and_original_dataset(self):
        """Test subsample size and the extra search on the full data"""
        algorithm = FixedGraph()
        parameters = Parameters(percent_resample_size=40, resampling_with_replacement=False,
                                add_original_dataset=True, run_parallel=False)
        graphs = ResamplingSearch(make_data(), 5, algorithm, parameters).search()
        assert len(graphs) == 6
        assert algorithm.row_counts == [20] * 5 + [50]

    def test_seeded_runs_reproducible(self):
        """Test that a seed fixes the draws, in parallel too"""
        parameters = Parameters(seed=42, run_parallel=True)
        first = ResamplingSearch(make_data(), 5, FirstRows(), parameters).search()
        second = ResamplingSearch(make_data(), 5, FirstRows(), parameters).search()
        for x, y in zip(first, second):
            np.testing.assert_array_equal(x, y)

    def test_private_knowledge(self):
        """Test that searches cannot change the caller's knowledge"""
        data = make_data()
        ResamplingSearch(data, 4, KnowledgeEditor(), Parameters()).search()
        assert not data.knowledge.is_forbidden("A", "B")

    def test_multiple_datasets(self):
        """Test that each resample perturbs every dataset"""
        algorithm = MultiData()
        search = ResamplingSearch([make_data(50), make_data(30)], 3, algorithm, Parameters())
        assert len(search.search()) == 3
        assert sorted(algorithm.sizes) == [[50, 30]] * 3

    def test_nested_searches_run_inline(self):
        """Test that a search on a worker thread does not wait on the pool"""
        graphs = ResamplingSearch(make_data(), 3, Nested(), Parameters(run_parallel=True)).search()
        assert len(graphs) == 3
        assert not in_shared_pool()
        assert get_shared_pool() is get_shared_pool()

    def test_invalid_arguments(self):
        """Test validation of counts and dataset lists"""
        with pytest.raises(ValueError):
            ResamplingSearch(make_data(), -1, FixedGraph())
        with pytest.raises(ValueError):
            ResamplingSearch([], 3, MultiData())

    def test_zero_resamples(self):
        """Test that zero resamples give no graphs"""
        assert ResamplingSearch(make_data(), 0, FixedGraph()).search() == []


if __name__ == "__main__":
    test_instance = TestResamplingSearch()
    for name in sorted(n for n in dir(test_instance) if n.startswith("test_")):
        print(f"Running {name}...")
        method = getattr(test_instance, name)
        if "run_parallel" in method.__code__.co_varnames:
            for run_parallel in (True, False):
                method(run_parallel)
        else:
            method()
        print("✓ Passed")

    print("\nAll tests passed! 🎉")
