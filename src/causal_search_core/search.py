"""
Search Module

Knowledge-aware fast adjacency search (FAS) and the PC search built on it.
"""

import logging
from itertools import combinations
from typing import Dict, List, Optional, Set

from causal_search_core.graph import Graph, Node
from causal_search_core.graph_transforms import (
    SepsetMap, apply_meek_rules, orient_by_knowledge, orient_colliders
)
from causal_search_core.independence import IndependenceTest
from causal_search_core.knowledge import Knowledge

logger = logging.getLogger(__name__)


class Fas:
    """
    Fast adjacency search.

    Starts from the complete undirected graph and removes x - y as soon as
    some subset of the neighbours of x (or of y) of the current level size
    separates them. Pairs forbidden in both directions are removed up front;
    pairs the knowledge requires in either direction are never removed.

    Args:
        test: Independence test over the search variables
        knowledge: Optional background knowledge
        depth: Largest conditioning set size (-1 for unlimited)
        stable: Freeze adjacencies at the start of each level (PC-stable)
    """

    def __init__(self, test: IndependenceTest, knowledge: Optional[Knowledge] = None,
                 depth: int = -1, stable: bool = True):
        if depth < -1:
            raise ValueError(f"Depth must be -1 or non-negative, got {depth}")
        self.test = test
        self.knowledge = knowledge if knowledge is not None else Knowledge()
        self.depth = depth
        self.stable = stable
        self.sepsets = SepsetMap()
        self.num_tests = 0

    def search(self) -> Graph:
        nodes = self.test.get_variables()
        by_name = {n.name: n for n in nodes}
        adjacencies: Dict[str, Set[str]] = {n.name: set(by_name) - {n.name} for n in nodes}
        self.sepsets = SepsetMap()
        self.num_tests = 0

        for x, y in combinations(nodes, 2):
            if self.knowledge.is_forbidden(x.name, y.name) and self.knowledge.is_forbidden(y.name, x.name):
                adjacencies[x.name].discard(y.name)
                adjacencies[y.name].discard(x.name)
                self.sepsets.set(x, y, [])

        max_depth = self.depth if self.depth != -1 else len(nodes)
        level = -1

        while level < max_depth:
            level += 1
            frozen = {name: set(adj) for name, adj in adjacencies.items()} if self.stable else adjacencies

            if all(len(adj) - 1 < level for adj in frozen.values()):
                break

            for x, y in combinations(nodes, 2):
                if y.name not in adjacencies[x.name]:
                    continue
                if not self.knowledge.no_edge_required(x.name, y.name):
                    continue

                sepset = self._find_sepset(x, y, frozen[x.name], level, by_name)
                if sepset is None:
                    sepset = self._find_sepset(y, x, frozen[y.name], level, by_name)

                if sepset is not None:
                    adjacencies[x.name].discard(y.name)
                    adjacencies[y.name].discard(x.name)
                    self.sepsets.set(x, y, sepset)
                    logger.debug("Removed %s - %s given %s", x, y, sepset)

        graph = Graph(nodes)
        for x, y in combinations(nodes, 2):
            if y.name in adjacencies[x.name]:
                graph.add_undirected_edge(x, y)

        logger.debug("FAS finished with %d edges after %d tests", graph.get_num_edges(), self.num_tests)
        return graph

    def _find_sepset(self, x: Node, y: Node, adjacent: Set[str], level: int,
                     by_name: Dict[str, Node]) -> Optional[List[Node]]:
        neighbours = sorted(adjacent - {y.name})
        if len(neighbours) < level:
            return None

        for cond_set in combinations(neighbours, level):
            z = [by_name[name] for name in cond_set]
            self.num_tests += 1
            if self.test.is_independent(x, y, z):
                return z
        return None


class Pc:
    """PC search: FAS, then knowledge orientation, colliders from sepsets and Meek rules."""

    def __init__(self, test: IndependenceTest, knowledge: Optional[Knowledge] = None,
                 depth: int = -1, stable: bool = True):
        self.test = test
        self.knowledge = knowledge if knowledge is not None else Knowledge()
        self.depth = depth
        self.stable = stable
        self.sepsets: Optional[SepsetMap] = None

    def search(self) -> Graph:
        fas = Fas(self.test, self.knowledge, self.depth, self.stable)
        graph = fas.search()
        self.sepsets = fas.sepsets

        orient_by_knowledge(graph, self.knowledge)
        orient_colliders(graph, self.sepsets, self.knowledge)
        apply_meek_rules(graph, self.knowledge)

        return graph
