"""
Stability Module

StARS (Stability Approach to Regularization Selection): picks the value of
one algorithm parameter by how stable the adjacencies found on subsamples
are, then searches the full data with that value.
"""

import logging
from typing import List, Optional

import numpy as np

from causal_search_core.aggregation import edge_adjacency_frequencies
from causal_search_core.algorithms import Algorithm
from causal_search_core.config import Parameters
from causal_search_core.data import DataSet
from causal_search_core.graph import Graph
from causal_search_core.knowledge import Knowledge
from causal_search_core.resampling import get_shared_pool, in_shared_pool

logger = logging.getLogger(__name__)

LAMBDA_STEP = 0.5
LEAF_CHUNK = 1


def instability(graphs: List[Graph]) -> float:
    """Mean over node pairs of 2 * theta * (1 - theta), theta = adjacency frequency."""
    frequencies = edge_adjacency_frequencies(graphs)
    if not frequencies:
        return 0.0
    return float(np.mean([2 * theta * (1.0 - theta) for theta in frequencies.values()]))


class StARS(Algorithm):
    """
    Wraps an algorithm and tunes one of its numeric parameters.

    Lambda runs from low to high in steps of 0.5. For each value the
    algorithm is run on every subsample and the instability D is computed;
    the value with the largest D still below stars_cutoff wins. With
    log_scale the parameter is set to 10 ** lambda.

    Args:
        algorithm: Algorithm to tune
        parameter: Name of the parameter to tune (e.g. 'alpha')
        low: Smallest lambda
        high: Largest lambda
    """

    def __init__(self, algorithm: Algorithm, parameter: str, low: float, high: float):
        if low >= high:
            raise ValueError(f"low must be below high, got low={low}, high={high}")
        self.algorithm = algorithm
        self.parameter = parameter
        self.low = low
        self.high = high
        self.uses_knowledge = algorithm.uses_knowledge
        self.selected_value: Optional[float] = None
        self.instabilities: List[tuple] = []

    def lambdas(self) -> List[float]:
        steps = int(np.floor((self.high - self.low) / LAMBDA_STEP + 1e-9))
        return [self.low + LAMBDA_STEP * k for k in range(steps + 1)]

    @staticmethod
    def parameter_value(lam: float, parameters: Parameters) -> float:
        if parameters.get_bool("log_scale"):
            return round(10.0 ** lam, 9)
        return round(lam, 9)

    def _search_all(self, samples: List[DataSet], parameters: Parameters,
                    knowledge: Optional[Knowledge]) -> List[Graph]:
        """Run the algorithm on every sample by recursive range splitting."""
        graphs: List[Optional[Graph]] = [None] * len(samples)
        pool = get_shared_pool()

        def compute(start: int, stop: int) -> None:
            if stop - start <= LEAF_CHUNK or in_shared_pool():
                for s in range(start, stop):
                    task_knowledge = knowledge.copy() if knowledge is not None else None
                    graphs[s] = self.algorithm.search(samples[s], parameters, task_knowledge)
                return
            mid = (start + stop) // 2
            left = pool.submit(compute, start, mid)
            compute(mid, stop)
            left.result()

        compute(0, len(samples))
        return graphs

    def get_d(self, lam: float, samples: List[DataSet], parameters: Parameters,
              knowledge: Optional[Knowledge] = None) -> float:
        """Instability of the adjacencies found on samples with the parameter set from lam."""
        lam_parameters = parameters.copy(**{self.parameter: self.parameter_value(lam, parameters)})
        return instability(self._search_all(samples, lam_parameters, knowledge))

    def search(self, data: DataSet, parameters: Parameters, knowledge: Optional[Knowledge] = None) -> Graph:
        num_subsamples = parameters.get_int("num_subsamples")
        size = int(parameters.get_float("percent_subsample_size") / 100.0 * data.num_rows)
        cutoff = parameters.get_float("stars_cutoff")
        seed = parameters.get_int("seed")
        rng = np.random.RandomState(seed) if seed >= 0 else np.random.RandomState()

        samples = [data.resample_without_replacement(size, rng) for _ in range(num_subsamples)]

        max_d = float("-inf")
        best = None
        self.instabilities = []

        for lam in self.lambdas():
            d = self.get_d(lam, samples, parameters, knowledge)
            self.instabilities.append((lam, d))
            logger.info("lambda = %s D = %s", lam, d)
            if max_d < d < cutoff:
                max_d = d
                best = lam

        if best is None:
            logger.warning("No lambda in [%s, %s] is below the instability cutoff %s; using %s",
                           self.low, self.high, cutoff, self.low)
            best = self.low

        self.selected_value = self.parameter_value(best, parameters)
        logger.info("Selected %s = %s (D = %s)", self.parameter, self.selected_value, max_d)

        final_parameters = parameters.copy(**{self.parameter: self.selected_value})
        return self.algorithm.search(data, final_parameters, knowledge)

    def describe(self) -> str:
        return f"StARS for {self.algorithm.describe()} parameter = {self.parameter}"
