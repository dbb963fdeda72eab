"""
Aggregation Module

Turns the graphs of a resampling run into per-pair edge-type frequencies and
a consensus graph. Nodes are matched by name and every pair is keyed by its
names in sorted order, so the result does not depend on the order of the
graphs or of their nodes.
"""

from collections import Counter
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from causal_search_core.graph import Edge, Endpoint, Graph, Node


class EdgeType(Enum):
    """Edge kind for an ordered pair (x, y): mark at x, then mark at y."""
    nil = "nil"
    ta = "ta"  # x --> y
    at = "at"  # x <-- y
    ca = "ca"  # x o-> y
    ac = "ac"  # x <-o y
    cc = "cc"  # x o-o y
    aa = "aa"  # x <-> y
    tt = "tt"  # x --- y
    tc = "tc"  # x --o y
    ct = "ct"  # x o-- y


_LETTERS = {Endpoint.TAIL: "t", Endpoint.ARROW: "a", Endpoint.CIRCLE: "c"}
_MARKS = {letter: endpoint for endpoint, letter in _LETTERS.items()}
_TYPE_ORDER = {edge_type: i for i, edge_type in enumerate(EdgeType)}

ENSEMBLES = ("highest", "preserved", "majority")

Pair = Tuple[str, str]


class EdgeTypeProbability:
    """How often one edge type (with given properties) appeared between a pair."""

    def __init__(self, edge_type: EdgeType, probability: float, properties: Sequence[str] = ()):
        self.edge_type = edge_type
        self.probability = probability
        self.properties = list(properties)

    def __eq__(self, other):
        return (isinstance(other, EdgeTypeProbability) and self.edge_type == other.edge_type
                and self.probability == other.probability and self.properties == other.properties)

    def __repr__(self):
        props = f" {self.properties}" if self.properties else ""
        return f"[{self.edge_type.value}]:{self.probability:.4f}{props}"


def edge_type_of(edge: Edge, x: Node) -> EdgeType:
    """Type of edge read from x's side."""
    y = edge.get_distal_node(x)
    return EdgeType(_LETTERS[edge.get_endpoint(x)] + _LETTERS[edge.get_endpoint(y)])


def _node_names(graphs: Sequence[Graph]) -> List[str]:
    names = set()
    for graph in graphs:
        names.update(graph.get_node_names())
    return sorted(names)


def _pairs(names: List[str]) -> List[Pair]:
    return [(a, b) for i, a in enumerate(names) for b in names[i + 1:]]


def edge_type_frequencies(graphs: Sequence[Graph]) -> Dict[Pair, List[EdgeTypeProbability]]:
    """
    Edge-type frequencies for every pair of node names across graphs.

    Args:
        graphs: Graphs to aggregate (any number, any order)

    Returns:
        Dict from (name1, name2), name1 < name2, to the observed types with
        their frequencies, most frequent first. 'nil' counts graphs where
        the pair is not adjacent.
    """
    if not graphs:
        raise ValueError("Cannot aggregate an empty list of graphs")

    names = _node_names(graphs)
    counts: Dict[Pair, Counter] = {pair: Counter() for pair in _pairs(names)}

    for graph in graphs:
        seen = set()
        for edge in graph.get_edges():
            a, b = sorted([edge.node1.name, edge.node2.name])
            edge_type = edge_type_of(edge, edge.node1 if edge.node1.name == a else edge.node2)
            counts[(a, b)][(edge_type, tuple(sorted(edge.properties)))] += 1
            seen.add((a, b))
        for pair, counter in counts.items():
            if pair not in seen:
                counter[(EdgeType.nil, ())] += 1

    total = len(graphs)
    frequencies = {}
    for pair, counter in counts.items():
        entries = [EdgeTypeProbability(edge_type, count / total, props)
                   for (edge_type, props), count in counter.items()]
        entries.sort(key=lambda e: (-e.probability, _TYPE_ORDER[e.edge_type], e.properties))
        frequencies[pair] = entries
    return frequencies


def edge_adjacency_frequencies(graphs: Sequence[Graph]) -> Dict[Pair, float]:
    """Fraction of graphs in which each pair of names is adjacent."""
    if not graphs:
        raise ValueError("Cannot aggregate an empty list of graphs")

    names = _node_names(graphs)
    counts = {pair: 0 for pair in _pairs(names)}
    for graph in graphs:
        adjacent = {tuple(sorted([e.node1.name, e.node2.name])) for e in graph.get_edges()}
        for pair in adjacent:
            counts[pair] += 1
    return {pair: count / len(graphs) for pair, count in counts.items()}


def _choose(entries: List[EdgeTypeProbability], ensemble: str, threshold: float):
    non_nil = [e for e in entries if e.edge_type != EdgeType.nil]
    if not non_nil:
        return None

    if ensemble == "preserved":
        return non_nil[0]
    if ensemble == "highest":
        # entries are sorted with nil ahead of any type it ties with
        return None if entries[0].edge_type == EdgeType.nil else entries[0]
    # majority
    return non_nil[0] if non_nil[0].probability > threshold else None


def consensus_graph(graphs: Sequence[Graph], threshold: float = 0.5, ensemble: str = "highest") -> Graph:
    """
    Summary graph of a list of graphs.

    Each kept edge carries the pair's full frequency list in
    edge_type_probabilities.

    Args:
        graphs: Graphs to summarize
        threshold: Frequency a type must exceed under the 'majority' ensemble
        ensemble: 'highest' (most frequent type, no edge wins ties),
            'preserved' (most frequent type other than no edge) or
            'majority' (most frequent edge type, if above threshold)

    Returns:
        Graph over the union of the node names, in sorted order
    """
    if ensemble not in ENSEMBLES:
        raise ValueError(f"Unknown ensemble: {ensemble}. Use one of {', '.join(ENSEMBLES)}")

    frequencies = edge_type_frequencies(graphs)
    nodes = {name: Node(name) for name in _node_names(graphs)}
    consensus = Graph(nodes.values())

    for (a, b), entries in frequencies.items():
        chosen = _choose(entries, ensemble, threshold)
        if chosen is None:
            continue
        letters = chosen.edge_type.value
        edge = Edge(nodes[a], nodes[b], _MARKS[letters[0]], _MARKS[letters[1]])
        for prop in chosen.properties:
            edge.add_property(prop)
        edge.edge_type_probabilities = entries
        consensus.add_edge(edge)

    return consensus
