"""
Graph Transforms Module

Orientation steps shared by constraint-based searches and by the comparison
statistics: skeletons, knowledge orientation, collider orientation from
sepsets, Meek rules, and the CPDAG of a DAG.
"""

import logging
from itertools import combinations
from typing import Dict, FrozenSet, Iterable, List, Optional

from causal_search_core.graph import Endpoint, Graph, Node, is_undirected_edge
from causal_search_core.knowledge import Knowledge

logger = logging.getLogger(__name__)


class SepsetMap:
    """Separating sets found by an adjacency search, indexed by unordered node pair."""

    def __init__(self):
        self._sepsets: Dict[FrozenSet[str], List[Node]] = {}

    def set(self, x: Node, y: Node, sepset: Iterable[Node]) -> None:
        self._sepsets[frozenset([x.name, y.name])] = list(sepset)

    def get(self, x: Node, y: Node) -> Optional[List[Node]]:
        """Sepset of x and y, or None if they were never separated."""
        return self._sepsets.get(frozenset([x.name, y.name]))

    def __contains__(self, pair) -> bool:
        x, y = pair
        return frozenset([x.name, y.name]) in self._sepsets

    def __len__(self):
        return len(self._sepsets)


def undirected_skeleton(graph: Graph) -> Graph:
    """Same nodes, one undirected edge per adjacent pair."""
    skeleton = Graph(graph.get_nodes())
    for edge in graph.get_edges():
        if not skeleton.is_adjacent_to(edge.node1, edge.node2):
            skeleton.add_undirected_edge(edge.node1, edge.node2)
    return skeleton


def _orient(graph: Graph, x: Node, y: Node) -> None:
    graph.remove_edges(x, y)
    graph.add_directed_edge(graph.get_node(x.name), graph.get_node(y.name))


def _allows(knowledge: Optional[Knowledge], x: Node, y: Node) -> bool:
    """Whether knowledge permits orienting x --> y."""
    if knowledge is None:
        return True
    return not knowledge.is_forbidden(x.name, y.name) and not knowledge.is_required(y.name, x.name)


def _is_undirected(graph: Graph, x: Node, y: Node) -> bool:
    edge = graph.get_edge(x, y)
    return edge is not None and is_undirected_edge(edge)


def orient_by_knowledge(graph: Graph, knowledge: Knowledge) -> None:
    """
    Orient adjacencies the knowledge decides: a forbidden x --> y becomes
    y --> x, and a required x --> y becomes x --> y.
    """
    if knowledge is None or knowledge.is_empty():
        return

    for edge in graph.get_edges():
        x, y = edge.node1, edge.node2
        if knowledge.is_required(x.name, y.name):
            _orient(graph, x, y)
        elif knowledge.is_required(y.name, x.name):
            _orient(graph, y, x)
        elif knowledge.is_forbidden(x.name, y.name) and not knowledge.is_forbidden(y.name, x.name):
            _orient(graph, y, x)
        elif knowledge.is_forbidden(y.name, x.name) and not knowledge.is_forbidden(x.name, y.name):
            _orient(graph, x, y)


def orient_colliders(graph: Graph, sepsets: SepsetMap, knowledge: Optional[Knowledge] = None) -> None:
    """
    Orient every unshielded triple x - y - z with y outside sepset(x, z) as
    x --> y <-- z, unless that would put an arrowhead the knowledge rules out
    or an arrowhead already points away from y.
    """
    for y in graph.get_nodes():
        adjacent = graph.get_adjacent_nodes(y)
        for x, z in combinations(adjacent, 2):
            if graph.is_adjacent_to(x, z):
                continue
            sepset = sepsets.get(x, z)
            if sepset is None or y in sepset:
                continue
            if graph.get_endpoint(y, x) == Endpoint.ARROW or graph.get_endpoint(y, z) == Endpoint.ARROW:
                continue
            if not (_allows(knowledge, x, y) and _allows(knowledge, z, y)):
                continue

            graph.set_endpoint(x, y, Endpoint.ARROW)
            graph.set_endpoint(z, y, Endpoint.ARROW)
            logger.debug("Collider %s --> %s <-- %s", x, y, z)


def _meek_r1(graph: Graph, knowledge: Optional[Knowledge]) -> bool:
    # a --> b - c, a and c not adjacent  =>  b --> c
    for b in graph.get_nodes():
        for a in graph.get_parents(b):
            for c in graph.get_adjacent_nodes(b):
                if c == a or graph.is_adjacent_to(a, c) or not _is_undirected(graph, b, c):
                    continue
                if _allows(knowledge, b, c):
                    _orient(graph, b, c)
                    return True
    return False


def _meek_r2(graph: Graph, knowledge: Optional[Knowledge]) -> bool:
    # a --> b --> c, a - c  =>  a --> c
    for b in graph.get_nodes():
        for a in graph.get_parents(b):
            for c in graph.get_children(b):
                if c != a and _is_undirected(graph, a, c) and _allows(knowledge, a, c):
                    _orient(graph, a, c)
                    return True
    return False


def _meek_r3(graph: Graph, knowledge: Optional[Knowledge]) -> bool:
    # a - c --> b, a - d --> b, a - b, c and d not adjacent  =>  a --> b
    for b in graph.get_nodes():
        parents = graph.get_parents(b)
        for a in graph.get_adjacent_nodes(b):
            if not _is_undirected(graph, a, b):
                continue
            for c, d in combinations(parents, 2):
                if graph.is_adjacent_to(c, d):
                    continue
                if _is_undirected(graph, a, c) and _is_undirected(graph, a, d) and _allows(knowledge, a, b):
                    _orient(graph, a, b)
                    return True
    return False


def apply_meek_rules(graph: Graph, knowledge: Optional[Knowledge] = None) -> None:
    """Apply Meek rules R1-R3 until no undirected edge can be oriented."""
    changed = True
    while changed:
        changed = _meek_r1(graph, knowledge) or _meek_r2(graph, knowledge) or _meek_r3(graph, knowledge)


def cpdag_for_dag(dag: Graph) -> Graph:
    """
    The CPDAG (Markov equivalence class) of a DAG: its skeleton with the
    unshielded colliders oriented and Meek rules applied.
    """
    if not dag.paths().is_acyclic():
        raise ValueError("cpdag_for_dag requires an acyclic directed graph")

    cpdag = undirected_skeleton(dag)
    for y in dag.get_nodes():
        for x, z in combinations(dag.get_parents(y), 2):
            if not dag.is_adjacent_to(x, z):
                _orient(cpdag, x, y)
                _orient(cpdag, z, y)

    apply_meek_rules(cpdag)
    return cpdag
