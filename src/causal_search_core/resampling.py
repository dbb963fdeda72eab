"""
Resampling Module

Runs a search on many bootstrap samples or subsamples of the data, in
parallel on a process-wide worker pool, and collects the resulting graphs.
"""

import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Sequence, Union

import numpy as np
from tqdm import tqdm

from causal_search_core.config import Parameters
from causal_search_core.data import DataSet
from causal_search_core.graph import Graph
from causal_search_core.knowledge import Knowledge

logger = logging.getLogger(__name__)

_POOL_THREAD_PREFIX = "causal-search-worker"
_pool: Optional[ThreadPoolExecutor] = None
_pool_lock = threading.Lock()


def get_shared_pool() -> ThreadPoolExecutor:
    """The process-wide worker pool. Created on first use and never shut down."""
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = ThreadPoolExecutor(max_workers=min(os.cpu_count() or 1, 8),
                                       thread_name_prefix=_POOL_THREAD_PREFIX)
        return _pool


def in_shared_pool() -> bool:
    """True when called from one of the shared pool's worker threads."""
    return threading.current_thread().name.startswith(_POOL_THREAD_PREFIX)


class ResamplingSearch:
    """
    Repeats a search over perturbed copies of the data.

    Each resample has int(rows * percent_resample_size / 100) rows, drawn with
    replacement when resampling_with_replacement is set and without it
    otherwise. A seed >= 0 makes the draws reproducible. With a list of
    datasets, every resample perturbs each of them and the algorithm must be
    a multi-dataset algorithm.

    A search that raises is logged and left out; one that returns None is
    left out too. num_failed, num_no_graph and num_dropped report how many.

    Args:
        data: A dataset, or a list of datasets for multi-dataset algorithms
        number_resampling: Number of resampled searches
        algorithm: Object with search(data, parameters, knowledge)
        parameters: Resampling and algorithm parameters
        knowledge: Knowledge handed (as a private copy) to every search;
            defaults to the knowledge of the (first) dataset
    """

    def __init__(
        self,
        data: Union[DataSet, Sequence[DataSet]],
        number_resampling: int,
        algorithm,
        parameters: Optional[Parameters] = None,
        knowledge: Optional[Knowledge] = None
    ):
        if number_resampling < 0:
            raise ValueError(f"number_resampling must be non-negative, got {number_resampling}")

        if isinstance(data, DataSet):
            self.data: Optional[DataSet] = data
            self.datasets: Optional[List[DataSet]] = None
        else:
            self.data = None
            self.datasets = list(data)
            if not self.datasets:
                raise ValueError("At least one dataset is required")

        self.number_resampling = number_resampling
        self.algorithm = algorithm
        self.parameters = parameters if parameters is not None else Parameters()
        first = self.data if self.data is not None else self.datasets[0]
        self.knowledge = knowledge if knowledge is not None else first.knowledge

        self.graphs: List[Graph] = []
        self.num_no_graph = 0
        self.num_failed = 0
        self._lock = threading.Lock()

    @property
    def num_dropped(self) -> int:
        return self.num_no_graph + self.num_failed

    def _sample_size(self, dataset: DataSet) -> int:
        return int(dataset.num_rows * self.parameters.get_float("percent_resample_size") / 100.0)

    def _draw(self, dataset: DataSet, rng: np.random.RandomState) -> DataSet:
        size = self._sample_size(dataset)
        if self.parameters.get_bool("resampling_with_replacement"):
            return dataset.bootstrap_sample(size, rng)
        return dataset.resample_without_replacement(size, rng)

    def _make_tasks(self) -> list:
        """Draw every resample up front, in the calling thread, so seeded runs are reproducible."""
        seed = self.parameters.get_int("seed")
        rng = np.random.RandomState(seed) if seed >= 0 else np.random.RandomState()
        tasks = []

        if self.data is not None:
            for _ in range(self.number_resampling):
                tasks.append(self._draw(self.data, rng))
            if self.parameters.get_bool("add_original_dataset"):
                tasks.append(self.data.copy())
        else:
            for _ in range(self.number_resampling):
                tasks.append([self._draw(dataset, rng) for dataset in self.datasets])

        return tasks

    def _run_one(self, task_data, task_parameters: Parameters, knowledge: Knowledge) -> Optional[Graph]:
        return self.algorithm.search(task_data, task_parameters, knowledge)

    def search(self) -> List[Graph]:
        """Run every resampled search and return the graphs that came back."""
        with self._lock:
            verbose = self.parameters.get_bool("verbose")
            run_parallel = self.parameters.get_bool("run_parallel") and not in_shared_pool()

            # Searches run by the tasks must not resample again.
            task_parameters = self.parameters.copy(number_resampling=0)
            tasks = self._make_tasks()

            if verbose:
                logger.info("Running %d resampled searches (%s)", len(tasks),
                            "parallel" if run_parallel else "sequential")

            graphs: List[Graph] = []
            num_no_graph = 0
            num_failed = 0

            if run_parallel:
                pool = get_shared_pool()
                outcomes: List[Future] = [
                    pool.submit(self._run_one, task, task_parameters, self.knowledge.copy())
                    for task in tasks
                ]
            else:
                outcomes = tasks

            for i, outcome in enumerate(tqdm(outcomes, desc="Resampling", disable=not verbose)):
                try:
                    if run_parallel:
                        graph = outcome.result()
                    else:
                        graph = self._run_one(outcome, task_parameters, self.knowledge.copy())
                except Exception:
                    num_failed += 1
                    logger.warning("Resampled search %d failed; leaving it out", i, exc_info=True)
                    continue

                if graph is None:
                    num_no_graph += 1
                else:
                    graphs.append(graph)

            self.graphs = graphs
            self.num_no_graph = num_no_graph
            self.num_failed = num_failed

            if self.num_dropped:
                logger.info("%d of %d resampled searches produced no graph", self.num_dropped, len(tasks))

            return list(graphs)
