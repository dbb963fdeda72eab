"""
Statistics Module

Comparison statistics between a true graph and an estimated graph, built on
the graph and path queries. Nodes of the two graphs are matched by name.
"""

import math
from typing import Dict, List, Optional, Sequence, Set, Tuple

from causal_search_core.data import DataSet
from causal_search_core.graph import (
    Endpoint, Graph, NodeType, get_directed_edge_head, get_directed_edge_tail,
    is_bidirected_edge, is_directed_edge
)
from causal_search_core.graph_transforms import cpdag_for_dag


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def _adjacencies(graph: Graph) -> Set[frozenset]:
    return {frozenset([e.node1.name, e.node2.name]) for e in graph.get_edges()}


def _arrowheads(graph: Graph) -> Set[Tuple[str, str]]:
    """(x, y) for every edge with an arrowhead at y."""
    arrows = set()
    for edge in graph.get_edges():
        if edge.endpoint2 == Endpoint.ARROW:
            arrows.add((edge.node1.name, edge.node2.name))
        if edge.endpoint1 == Endpoint.ARROW:
            arrows.add((edge.node2.name, edge.node1.name))
    return arrows


def _two_cycles(graph: Graph) -> Set[frozenset]:
    """Pairs joined by both x --> y and y --> x."""
    directed = {(get_directed_edge_tail(e).name, get_directed_edge_head(e).name)
                for e in graph.get_edges() if is_directed_edge(e)}
    return {frozenset(pair) for pair in directed if (pair[1], pair[0]) in directed}


def _reference_graph(true_graph: Graph) -> Graph:
    """CPDAG of the true graph; a cyclic true graph has none and is used as is."""
    if true_graph.paths().is_acyclic():
        return cpdag_for_dag(true_graph)
    return true_graph


class Statistic:
    """A number comparing an estimated graph to the true one."""

    abbreviation = ""
    description = ""

    def get_value(self, true_graph: Graph, est_graph: Graph, data: Optional[DataSet] = None) -> float:
        raise NotImplementedError

    def get_norm_value(self, value: float) -> float:
        """Value mapped into [0, 1] for plotting; the identity for ratios."""
        return value


class AdjacencyPrecision(Statistic):
    abbreviation = "AP"
    description = "Adjacency Precision"

    def get_value(self, true_graph, est_graph, data=None):
        true_adj, est_adj = _adjacencies(true_graph), _adjacencies(est_graph)
        return _ratio(len(true_adj & est_adj), len(est_adj))


class AdjacencyRecall(Statistic):
    abbreviation = "AR"
    description = "Adjacency Recall"

    def get_value(self, true_graph, est_graph, data=None):
        true_adj, est_adj = _adjacencies(true_graph), _adjacencies(est_graph)
        return _ratio(len(true_adj & est_adj), len(true_adj))


class ArrowheadPrecision(Statistic):
    abbreviation = "AHP"
    description = "Arrowhead Precision"

    def get_value(self, true_graph, est_graph, data=None):
        true_arrows, est_arrows = _arrowheads(true_graph), _arrowheads(est_graph)
        return _ratio(len(true_arrows & est_arrows), len(est_arrows))


class ArrowheadRecall(Statistic):
    abbreviation = "AHR"
    description = "Arrowhead Recall"

    def get_value(self, true_graph, est_graph, data=None):
        true_arrows, est_arrows = _arrowheads(true_graph), _arrowheads(est_graph)
        return _ratio(len(true_arrows & est_arrows), len(true_arrows))


class AncestorPrecision(Statistic):
    abbreviation = "Anc-Prec"
    description = "Proportion of X~~>Y in est for which X~~>Y in true"

    def get_value(self, true_graph, est_graph, data=None):
        true_paths, est_paths = true_graph.paths(), est_graph.paths()
        tp = fp = 0
        for x in est_graph.get_nodes():
            for y in est_graph.get_nodes():
                if est_paths.is_ancestor_of(x, y):
                    if true_paths.is_ancestor_of(x, y):
                        tp += 1
                    else:
                        fp += 1
        return _ratio(tp, tp + fp)


class AncestorRecall(Statistic):
    abbreviation = "Anc-Rec"
    description = "Proportion of X~~>Y in true for which X~~>Y in est"

    def get_value(self, true_graph, est_graph, data=None):
        true_paths, est_paths = true_graph.paths(), est_graph.paths()
        tp = fn = 0
        for x in est_graph.get_nodes():
            for y in est_graph.get_nodes():
                if true_paths.is_ancestor_of(x, y):
                    if est_paths.is_ancestor_of(x, y):
                        tp += 1
                    else:
                        fn += 1
        return _ratio(tp, tp + fn)


class NoSemidirectedPrecision(Statistic):
    abbreviation = "NoSemidirected-Prec"
    description = "Proportion of (X, Y) where if no semidirected path in est then also not in true"

    def get_value(self, true_graph, est_graph, data=None):
        reference_paths = _reference_graph(true_graph).paths()
        est_paths = est_graph.paths()
        tp = fp = 0
        for x in est_graph.get_nodes():
            for y in est_graph.get_nodes():
                if x == y:
                    continue
                if not est_paths.exists_semi_directed_path(x, y):
                    if not reference_paths.exists_semi_directed_path(x, y):
                        tp += 1
                    else:
                        fp += 1
        return _ratio(tp, tp + fp)


class NoSemidirectedRecall(Statistic):
    abbreviation = "NoSemidirected-Rec"
    description = "Proportion of (X, Y) where if no semidirected path in true then also not in est"

    def get_value(self, true_graph, est_graph, data=None):
        reference_paths = _reference_graph(true_graph).paths()
        est_paths = est_graph.paths()
        tp = fn = 0
        for x in true_graph.get_nodes():
            for y in true_graph.get_nodes():
                if x == y:
                    continue
                if not reference_paths.exists_semi_directed_path(x, y):
                    if not est_paths.exists_semi_directed_path(x, y):
                        tp += 1
                    else:
                        fn += 1
        return _ratio(tp, tp + fn)


def _directed_edges(graph: Graph):
    for edge in graph.get_edges():
        if is_directed_edge(edge):
            yield get_directed_edge_tail(edge), get_directed_edge_head(edge)


class NumDirectedEdgeReversed(Statistic):
    abbreviation = "#X->Y-Rev"
    description = "Number X-->Y for which Y~~>X in true"

    def get_value(self, true_graph, est_graph, data=None):
        paths = true_graph.paths()
        return sum(1 for x, y in _directed_edges(est_graph) if paths.is_ancestor_of(y, x))

    def get_norm_value(self, value):
        return math.tanh(value)


class NumDirectedEdgeAncestors(Statistic):
    abbreviation = "#X->Y-Anc"
    description = "Number X-->Y for which X~~>Y in true"

    def get_value(self, true_graph, est_graph, data=None):
        paths = true_graph.paths()
        return sum(1 for x, y in _directed_edges(est_graph) if paths.is_ancestor_of(x, y))

    def get_norm_value(self, value):
        return math.tanh(value)


class NumDefinitelyNotDirectedPaths(Statistic):
    abbreviation = "#X->Y-NotDir"
    description = "Number X-->Y in est with no semidirected path X to Y in the CPDAG of true (true itself if cyclic)"

    def get_value(self, true_graph, est_graph, data=None):
        paths = _reference_graph(true_graph).paths()
        return sum(1 for x, y in _directed_edges(est_graph) if not paths.exists_semi_directed_path(x, y))

    def get_norm_value(self, value):
        return math.tanh(value)


class ProportionSemidirectedPathsNotReversedTrue(Statistic):
    abbreviation = "semi(X,Y,true)==>!semi(Y,X,est)"
    description = "Proportion of semi(X, Y) in true graph for which there is no semi(Y, X) in estimated graph"

    def get_value(self, true_graph, est_graph, data=None):
        nodes = [n for n in est_graph.get_nodes() if n.node_type != NodeType.LATENT]
        true_paths, est_paths = true_graph.paths(), est_graph.paths()
        tp = fn = 0
        for x in nodes:
            for y in nodes:
                if x == y:
                    continue
                if true_paths.exists_semi_directed_path(x, y):
                    if not est_paths.exists_semi_directed_path(y, x):
                        tp += 1
                    else:
                        fn += 1
        return _ratio(tp, tp + fn)


class CommonAncestorTruePositiveBidirected(Statistic):
    abbreviation = "CATPB"
    description = "Common Ancestor True Positive Bidirected"

    def get_value(self, true_graph, est_graph, data=None):
        paths = true_graph.paths()
        return sum(1 for e in est_graph.get_edges()
                   if is_bidirected_edge(e) and paths.exists_common_ancestor(e.node1, e.node2))

    def get_norm_value(self, value):
        return math.tanh(value)


class TwoCycleTruePositive(Statistic):
    abbreviation = "2CTP"
    description = "2-cycle true positive"

    def get_value(self, true_graph, est_graph, data=None):
        return len(_two_cycles(est_graph) & _two_cycles(true_graph))

    def get_norm_value(self, value):
        return math.tanh(value)


class TwoCycleFalsePositive(Statistic):
    abbreviation = "2CFP"
    description = "2-cycle false positive"

    def get_value(self, true_graph, est_graph, data=None):
        return len(_two_cycles(est_graph) - _two_cycles(true_graph))

    def get_norm_value(self, value):
        return math.tanh(value)


class NumberOfEdgesEst(Statistic):
    abbreviation = "EdgesEst"
    description = "Number of Edges in the Estimated Graph"

    def get_value(self, true_graph, est_graph, data=None):
        return est_graph.get_num_edges()

    def get_norm_value(self, value):
        return math.tanh(value)


class AverageDegreeEst(Statistic):
    abbreviation = "AvgDegEst"
    description = "Average degree of the estimated graph"

    def get_value(self, true_graph, est_graph, data=None):
        return _ratio(2 * est_graph.get_num_edges(), est_graph.get_num_nodes())


ALL_STATISTICS: List[type] = [
    AdjacencyPrecision, AdjacencyRecall, ArrowheadPrecision, ArrowheadRecall,
    AncestorPrecision, AncestorRecall, NoSemidirectedPrecision, NoSemidirectedRecall,
    NumDirectedEdgeReversed, NumDirectedEdgeAncestors, NumDefinitelyNotDirectedPaths,
    ProportionSemidirectedPathsNotReversedTrue, CommonAncestorTruePositiveBidirected,
    TwoCycleTruePositive, TwoCycleFalsePositive, NumberOfEdgesEst, AverageDegreeEst,
]


def compare_graphs(
    true_graph: Graph,
    est_graph: Graph,
    statistics: Optional[Sequence[Statistic]] = None,
    data: Optional[DataSet] = None
) -> Dict[str, float]:
    """
    Compute comparison statistics for an estimated graph.

    Args:
        true_graph: Ground-truth graph
        est_graph: Estimated graph
        statistics: Statistics to compute (default: all of ALL_STATISTICS)
        data: Data the estimate was found from, for data-based statistics

    Returns:
        Dictionary from statistic abbreviation to value
    """
    if statistics is None:
        statistics = [cls() for cls in ALL_STATISTICS]
    return {s.abbreviation: s.get_value(true_graph, est_graph, data) for s in statistics}
