"""
Independence Module

Conditional independence tests used by the constraint-based searches.
"""

import math
from typing import List, NamedTuple, Sequence

import networkx as nx
from causallearn.utils.cit import CIT

from causal_search_core.data import DataSet
from causal_search_core.exceptions import UndefinedTestResult
from causal_search_core.graph import Graph, Node


class IndependenceResult(NamedTuple):
    x: Node
    y: Node
    z: tuple
    p_value: float
    independent: bool


class IndependenceTest:
    """Base class: subclasses implement check_independence."""

    alpha: float = 0.01

    def get_variables(self) -> List[Node]:
        raise NotImplementedError

    def check_independence(self, x: Node, y: Node, z: Sequence[Node]) -> IndependenceResult:
        raise NotImplementedError

    def is_independent(self, x: Node, y: Node, z: Sequence[Node] = ()) -> bool:
        return self.check_independence(x, y, z).independent

    def get_variable(self, name: str) -> Node:
        for node in self.get_variables():
            if node.name == name:
                return node
        raise ValueError(f"Unknown variable: {name}")


class CitIndependenceTest(IndependenceTest):
    """
    Wraps causal-learn's CIT over a DataSet.

    Args:
        data: Dataset to test on
        method: causal-learn test name ('fisherz', 'chisq', 'gsq', 'kci', ...)
        alpha: Significance level; x and y are judged independent if p > alpha
    """

    def __init__(self, data: DataSet, method: str = "fisherz", alpha: float = 0.01):
        self.data = data
        self.method = method
        self.alpha = alpha
        self._variables = [Node(name) for name in data.variable_names]
        self._index = {name: i for i, name in enumerate(data.variable_names)}
        self._cit = CIT(data.matrix, method)

    def get_variables(self) -> List[Node]:
        return list(self._variables)

    def get_p_value(self, x: Node, y: Node, z: Sequence[Node] = ()) -> float:
        p_value = self._cit(self._index[x.name], self._index[y.name], [self._index[n.name] for n in z])
        if p_value is None or math.isnan(p_value):
            raise UndefinedTestResult(f"Undefined p-value for {x} _||_ {y} | {list(z)}")
        return float(p_value)

    def check_independence(self, x: Node, y: Node, z: Sequence[Node]) -> IndependenceResult:
        p_value = self.get_p_value(x, y, z)
        return IndependenceResult(x, y, tuple(z), p_value, p_value > self.alpha)


class DSeparationTest(IndependenceTest):
    """Oracle test that answers from d-separation in a known DAG."""

    def __init__(self, graph: Graph):
        if not graph.paths().is_acyclic():
            raise ValueError("DSeparationTest requires an acyclic directed graph")
        self.graph = graph
        self._digraph = graph.to_networkx()

    def get_variables(self) -> List[Node]:
        return self.graph.get_nodes()

    def check_independence(self, x: Node, y: Node, z: Sequence[Node]) -> IndependenceResult:
        independent = nx.is_d_separator(self._digraph, {x.name}, {y.name}, {n.name for n in z})
        return IndependenceResult(x, y, tuple(z), 1.0 if independent else 0.0, independent)
