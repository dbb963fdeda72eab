"""
Algorithms Module

Search algorithms behind one calling convention,
search(data, parameters, knowledge=None) -> Graph, and an explicit registry
that maps names to them and checks their capabilities.
"""

import inspect
import logging
from typing import Callable, Dict, List, NamedTuple, Optional

import numpy as np
from causallearn.search.ConstraintBased.FCI import fci
from causallearn.search.ConstraintBased.PC import pc

from causal_search_core.config import Parameters
from causal_search_core.data import DataSet
from causal_search_core.exceptions import MissingCapability
from causal_search_core.graph import Graph
from causal_search_core.independence import CitIndependenceTest
from causal_search_core.knowledge import Knowledge
from causal_search_core.search import Pc

logger = logging.getLogger(__name__)

TEST_METHODS = ("fisherz", "chisq", "gsq", "kci", "mv_fisherz")


class Algorithm:
    """A search over one dataset."""

    uses_knowledge = False

    def search(self, data: DataSet, parameters: Parameters, knowledge: Optional[Knowledge] = None) -> Graph:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


class MultiDataAlgorithm:
    """A search over several datasets on the same variables."""

    uses_knowledge = False

    def search(self, datasets: List[DataSet], parameters: Parameters,
               knowledge: Optional[Knowledge] = None) -> Graph:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


def _check_test(test: Optional[str]) -> str:
    if test is None:
        raise MissingCapability("This algorithm needs an independence test")
    if test not in TEST_METHODS:
        raise ValueError(f"Unknown test: {test}. Use one of {', '.join(TEST_METHODS)}")
    return test


class PcAlgorithm(Algorithm):
    """PC with background knowledge, using causal-learn tests."""

    uses_knowledge = True

    def __init__(self, test: str = "fisherz", stable: bool = True):
        self.test = _check_test(test)
        self.stable = stable

    def search(self, data, parameters, knowledge=None):
        knowledge = knowledge if knowledge is not None else data.knowledge
        cit = CitIndependenceTest(data, self.test, parameters.get_float("alpha"))
        graph = Pc(cit, knowledge, parameters.get_int("depth"), self.stable).search()
        if parameters.get_bool("verbose"):
            logger.info("PC (%s) found %d edges", self.test, graph.get_num_edges())
        return graph


class CausalLearnPc(Algorithm):
    """causal-learn's own PC implementation."""

    def __init__(self, test: str = "fisherz", stable: bool = True):
        self.test = _check_test(test)
        self.stable = stable

    def search(self, data, parameters, knowledge=None):
        cg = pc(data.matrix, alpha=parameters.get_float("alpha"), indep_test=self.test,
                stable=self.stable, show_progress=False)
        return Graph.from_endpoint_matrix(cg.G.graph, data.variable_names)


class CausalLearnFci(Algorithm):
    """causal-learn's FCI; returns a PAG with circle endpoints."""

    def __init__(self, test: str = "fisherz"):
        self.test = _check_test(test)

    def search(self, data, parameters, knowledge=None):
        g, _ = fci(data.matrix, independence_test_method=self.test, alpha=parameters.get_float("alpha"),
                   depth=parameters.get_int("depth"), show_progress=False)
        return Graph.from_endpoint_matrix(g.graph, data.variable_names)


class PooledPcAlgorithm(MultiDataAlgorithm):
    """PC on the row-wise concatenation of several datasets."""

    uses_knowledge = True

    def __init__(self, test: str = "fisherz"):
        self.inner = PcAlgorithm(test)

    def search(self, datasets, parameters, knowledge=None):
        if not datasets:
            raise ValueError("At least one dataset is required")
        names = datasets[0].variable_names
        for dataset in datasets[1:]:
            if dataset.variable_names != names:
                raise ValueError("All datasets must have the same variables in the same order")
        pooled = DataSet(np.vstack([d.matrix for d in datasets]), names, datasets[0].knowledge.copy())
        return self.inner.search(pooled, parameters, knowledge)


class SingleGraphAlgorithm(Algorithm):
    """Returns a copy of a fixed graph, e.g. a known true graph, whatever the data."""

    def __init__(self, graph: Graph):
        self.graph = graph

    def search(self, data, parameters, knowledge=None):
        return self.graph.copy()


class AlgorithmSpec(NamedTuple):
    name: str
    factory: Callable[..., object]
    needs_test: bool
    needs_score: bool
    uses_knowledge: bool
    description: str


class AlgorithmRegistry:
    """
    Explicit name -> algorithm factory table.

    Factories of algorithms that need a test must accept a 'test' keyword,
    and those that need a score a 'score' keyword; register checks this.
    """

    def __init__(self):
        self._algorithms: Dict[str, AlgorithmSpec] = {}

    def register(
        self,
        name: str,
        factory: Callable[..., object],
        needs_test: bool = False,
        needs_score: bool = False,
        uses_knowledge: bool = False,
        description: str = ""
    ) -> None:
        if name in self._algorithms:
            raise ValueError(f"Algorithm already registered: {name}")
        parameters = inspect.signature(factory).parameters
        if needs_test and "test" not in parameters:
            raise MissingCapability(f"{name} needs a test but its factory takes no 'test' argument")
        if needs_score and "score" not in parameters:
            raise MissingCapability(f"{name} needs a score but its factory takes no 'score' argument")
        self._algorithms[name] = AlgorithmSpec(name, factory, needs_test, needs_score, uses_knowledge, description)

    def get_spec(self, name: str) -> AlgorithmSpec:
        if name not in self._algorithms:
            raise ValueError(f"Unknown algorithm: {name}. Use one of {', '.join(self.names())}")
        return self._algorithms[name]

    def names(self) -> List[str]:
        return sorted(self._algorithms)

    def create(self, name: str, test: Optional[str] = None, score: Optional[str] = None, **kwargs):
        """Build the named algorithm, checking that its test and score needs are met."""
        spec = self.get_spec(name)
        if spec.needs_test:
            if test is None:
                raise MissingCapability(f"{name} needs an independence test")
            kwargs["test"] = test
        if spec.needs_score:
            if score is None:
                raise MissingCapability(f"{name} needs a score")
            kwargs["score"] = score
        return spec.factory(**kwargs)


def default_registry() -> AlgorithmRegistry:
    """Registry holding the built-in algorithms."""
    registry = AlgorithmRegistry()
    registry.register("pc", PcAlgorithm, needs_test=True, uses_knowledge=True,
                      description="PC with background knowledge")
    registry.register("causallearn_pc", CausalLearnPc, needs_test=True,
                      description="causal-learn PC")
    registry.register("causallearn_fci", CausalLearnFci, needs_test=True,
                      description="causal-learn FCI (PAG output)")
    registry.register("pooled_pc", PooledPcAlgorithm, needs_test=True, uses_knowledge=True,
                      description="PC over several pooled datasets")
    return registry
