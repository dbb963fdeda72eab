"""
Graph Module

Edge-list graph with typed endpoints. Every search algorithm, knowledge check
and comparison statistic queries graphs through this module.
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set

import numpy as np
import networkx as nx


class Endpoint(Enum):
    """Edge-end marks. Values follow causal-learn's endpoint matrix encoding."""
    NULL = 0
    TAIL = -1
    ARROW = 1
    CIRCLE = 2


class NodeType(Enum):
    MEASURED = "measured"
    LATENT = "latent"
    ERROR = "error"
    SELECTION = "selection"


_LEFT_MARKS = {Endpoint.TAIL: "-", Endpoint.ARROW: "<", Endpoint.CIRCLE: "o"}
_RIGHT_MARKS = {Endpoint.TAIL: "-", Endpoint.ARROW: ">", Endpoint.CIRCLE: "o"}


class Node:
    """
    A graph variable. Identity is the name: two Node objects with the same
    name compare equal, so graphs built independently over the same variables
    can be compared directly.
    """

    def __init__(self, name: str, node_type: NodeType = NodeType.MEASURED,
                 center_x: int = -1, center_y: int = -1):
        if not name:
            raise ValueError("Node name must be a non-empty string")
        self.name = name
        self.node_type = node_type
        self.center_x = center_x
        self.center_y = center_y
        self.attributes: Dict[str, object] = {}

    def set_center(self, x: int, y: int) -> None:
        self.center_x = x
        self.center_y = y

    def copy(self) -> "Node":
        node = Node(self.name, self.node_type, self.center_x, self.center_y)
        node.attributes = dict(self.attributes)
        return node

    def __eq__(self, other):
        return isinstance(other, Node) and self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __lt__(self, other):
        return self.name < other.name

    def __repr__(self):
        return self.name


class Edge:
    """
    An edge between two distinct nodes with one endpoint mark per end.

    The semantic kind (directed, bidirected, ...) is derived from the pair of
    marks. Equality ignores storage order, so A --> B equals B <-- A.
    """

    def __init__(self, node1: Node, node2: Node, endpoint1: Endpoint, endpoint2: Endpoint):
        if node1 is None or node2 is None:
            raise ValueError("Edge nodes must not be None")
        if node1 == node2:
            raise ValueError(f"Self-loops are not allowed: {node1}")
        if endpoint1 == Endpoint.NULL or endpoint2 == Endpoint.NULL:
            raise ValueError("Edge endpoints must be TAIL, ARROW or CIRCLE")
        self.node1 = node1
        self.node2 = node2
        self.endpoint1 = endpoint1
        self.endpoint2 = endpoint2
        self.properties: List[str] = []
        self.edge_type_probabilities: list = []

    def get_endpoint(self, node: Node) -> Endpoint:
        """Mark at the given end of the edge."""
        if node == self.node1:
            return self.endpoint1
        if node == self.node2:
            return self.endpoint2
        raise ValueError(f"{node} is not an endpoint of {self}")

    def get_distal_node(self, node: Node) -> Node:
        if node == self.node1:
            return self.node2
        if node == self.node2:
            return self.node1
        raise ValueError(f"{node} is not an endpoint of {self}")

    def get_distal_endpoint(self, node: Node) -> Endpoint:
        return self.get_endpoint(self.get_distal_node(node))

    def points_towards(self, node: Node) -> bool:
        """True if the edge has an arrow at node and a tail or circle at the other end."""
        proximal = self.get_endpoint(node)
        distal = self.get_distal_endpoint(node)
        return proximal == Endpoint.ARROW and distal in (Endpoint.TAIL, Endpoint.CIRCLE)

    def is_directed(self) -> bool:
        return is_directed_edge(self)

    def reverse(self) -> "Edge":
        return Edge(self.node2, self.node1, self.endpoint2, self.endpoint1)

    def copy(self) -> "Edge":
        edge = Edge(self.node1, self.node2, self.endpoint1, self.endpoint2)
        edge.properties = list(self.properties)
        edge.edge_type_probabilities = list(self.edge_type_probabilities)
        return edge

    def add_property(self, prop: str) -> None:
        if prop not in self.properties:
            self.properties.append(prop)

    def _key(self):
        return frozenset([(self.node1.name, self.endpoint1), (self.node2.name, self.endpoint2)])

    def __eq__(self, other):
        return isinstance(other, Edge) and self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return f"{self.node1.name} {_LEFT_MARKS[self.endpoint1]}-{_RIGHT_MARKS[self.endpoint2]} {self.node2.name}"


class Triple:
    """An ordered triple x - y - z; equal to its reversal z - y - x."""

    def __init__(self, x: Node, y: Node, z: Node):
        self.x = x
        self.y = y
        self.z = z

    def _key(self):
        ends = tuple(sorted([self.x.name, self.z.name]))
        return ends[0], self.y.name, ends[1]

    def __eq__(self, other):
        return isinstance(other, Triple) and self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return f"<{self.x}, {self.y}, {self.z}>"


# Edge constructors and classifiers

def directed_edge(node1: Node, node2: Node) -> Edge:
    return Edge(node1, node2, Endpoint.TAIL, Endpoint.ARROW)


def undirected_edge(node1: Node, node2: Node) -> Edge:
    return Edge(node1, node2, Endpoint.TAIL, Endpoint.TAIL)


def nondirected_edge(node1: Node, node2: Node) -> Edge:
    return Edge(node1, node2, Endpoint.CIRCLE, Endpoint.CIRCLE)


def partially_oriented_edge(node1: Node, node2: Node) -> Edge:
    return Edge(node1, node2, Endpoint.CIRCLE, Endpoint.ARROW)


def bidirected_edge(node1: Node, node2: Node) -> Edge:
    return Edge(node1, node2, Endpoint.ARROW, Endpoint.ARROW)


def is_directed_edge(edge: Edge) -> bool:
    return {edge.endpoint1, edge.endpoint2} == {Endpoint.TAIL, Endpoint.ARROW}


def is_undirected_edge(edge: Edge) -> bool:
    return edge.endpoint1 == Endpoint.TAIL and edge.endpoint2 == Endpoint.TAIL


def is_nondirected_edge(edge: Edge) -> bool:
    return edge.endpoint1 == Endpoint.CIRCLE and edge.endpoint2 == Endpoint.CIRCLE


def is_partially_oriented_edge(edge: Edge) -> bool:
    return {edge.endpoint1, edge.endpoint2} == {Endpoint.CIRCLE, Endpoint.ARROW}


def is_bidirected_edge(edge: Edge) -> bool:
    return edge.endpoint1 == Endpoint.ARROW and edge.endpoint2 == Endpoint.ARROW


def get_directed_edge_tail(edge: Edge) -> Node:
    if not is_directed_edge(edge):
        raise ValueError(f"Not a directed edge: {edge}")
    return edge.node1 if edge.endpoint1 == Endpoint.TAIL else edge.node2


def get_directed_edge_head(edge: Edge) -> Node:
    if not is_directed_edge(edge):
        raise ValueError(f"Not a directed edge: {edge}")
    return edge.node2 if edge.endpoint2 == Endpoint.ARROW else edge.node1


def traverse_directed(node: Node, edge: Edge) -> Optional[Node]:
    """Node reached by following edge out of node as node --> other, else None."""
    if node == edge.node1 and edge.endpoint1 == Endpoint.TAIL and edge.endpoint2 == Endpoint.ARROW:
        return edge.node2
    if node == edge.node2 and edge.endpoint2 == Endpoint.TAIL and edge.endpoint1 == Endpoint.ARROW:
        return edge.node1
    return None


def traverse_semi_directed(node: Node, edge: Edge) -> Optional[Node]:
    """Node reached by leaving node through an end that is not an arrowhead, else None."""
    if node == edge.node1 and edge.endpoint1 in (Endpoint.TAIL, Endpoint.CIRCLE):
        return edge.node2
    if node == edge.node2 and edge.endpoint2 in (Endpoint.TAIL, Endpoint.CIRCLE):
        return edge.node1
    return None


class Graph:
    """
    Mutable graph stored as an edge list with per-node incidence lists.

    Nodes keep insertion order. Nodes are looked up by name, so any Node
    object carrying the right name can be used to query the graph.
    """

    def __init__(self, nodes: Optional[Iterable[Node]] = None):
        self._nodes: Dict[str, Node] = {}
        self._incident: Dict[str, List[Edge]] = {}
        # Insertion-ordered; values unused.
        self._edges: Dict[Edge, None] = {}
        self._underline_triples: Set[Triple] = set()
        self._dotted_underline_triples: Set[Triple] = set()
        self._ambiguous_triples: Set[Triple] = set()
        self.attributes: Dict[str, object] = {}

        for node in nodes or []:
            self.add_node(node)

    # Nodes

    def add_node(self, node: Node) -> bool:
        if node is None:
            raise ValueError("Cannot add a None node")
        if node.name in self._nodes:
            return False
        self._nodes[node.name] = node
        self._incident[node.name] = []
        return True

    def remove_node(self, node: Node) -> bool:
        if node.name not in self._nodes:
            return False
        for edge in list(self._incident[node.name]):
            self.remove_edge(edge)
        del self._nodes[node.name]
        del self._incident[node.name]
        self.remove_triples_not_in_graph()
        return True

    def remove_nodes(self, nodes: Iterable[Node]) -> bool:
        removed = False
        for node in list(nodes):
            removed = self.remove_node(node) or removed
        return removed

    def get_nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def get_node(self, name: str) -> Optional[Node]:
        return self._nodes.get(name)

    def get_node_names(self) -> List[str]:
        return list(self._nodes.keys())

    def contains_node(self, node: Node) -> bool:
        return node is not None and node.name in self._nodes

    def get_num_nodes(self) -> int:
        return len(self._nodes)

    def _own(self, node: Node) -> Node:
        own = self._nodes.get(node.name)
        if own is None:
            raise ValueError(f"Node {node} is not in the graph")
        return own

    # Edges

    def add_edge(self, edge: Edge) -> bool:
        """
        Add an edge whose endpoints are already in the graph.

        Returns False if an equal edge (same nodes, same marks) is present.
        Raises ValueError if either endpoint node is missing.
        """
        if edge.node1.name not in self._nodes or edge.node2.name not in self._nodes:
            raise ValueError(f"Edge {edge} references a node that is not in the graph")
        if edge in self._edges:
            return False
        self._edges[edge] = None
        self._incident[edge.node1.name].append(edge)
        self._incident[edge.node2.name].append(edge)
        return True

    def add_directed_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(directed_edge(node1, node2))

    def add_undirected_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(undirected_edge(node1, node2))

    def add_nondirected_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(nondirected_edge(node1, node2))

    def add_partially_oriented_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(partially_oriented_edge(node1, node2))

    def add_bidirected_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(bidirected_edge(node1, node2))

    def remove_edge(self, edge: Edge) -> bool:
        if edge not in self._edges:
            return False
        del self._edges[edge]
        for name in (edge.node1.name, edge.node2.name):
            incident = self._incident.get(name)
            if incident is not None:
                self._incident[name] = [e for e in incident if e != edge]
        return True

    def remove_edges(self, node1: Node, node2: Node) -> bool:
        """Remove every edge between node1 and node2."""
        removed = False
        for edge in self.get_edges_between(node1, node2):
            removed = self.remove_edge(edge) or removed
        return removed

    def get_edges(self, node: Optional[Node] = None) -> List[Edge]:
        if node is None:
            return list(self._edges)
        return list(self._incident.get(node.name, []))

    def get_edges_between(self, node1: Node, node2: Node) -> List[Edge]:
        return [e for e in self._incident.get(node1.name, []) if e.get_distal_node(node1) == node2]

    def get_edge(self, node1: Node, node2: Node) -> Optional[Edge]:
        edges = self.get_edges_between(node1, node2)
        return edges[0] if edges else None

    def get_directed_edge(self, node1: Node, node2: Node) -> Optional[Edge]:
        """The edge node1 --> node2, if present."""
        for edge in self.get_edges_between(node1, node2):
            if traverse_directed(node1, edge) == node2:
                return edge
        return None

    def contains_edge(self, edge: Edge) -> bool:
        return edge in self._edges

    def get_num_edges(self, node: Optional[Node] = None) -> int:
        if node is None:
            return len(self._edges)
        return len(self._incident.get(node.name, []))

    def get_endpoint(self, node1: Node, node2: Node) -> Optional[Endpoint]:
        """Mark at node2 on the edge node1 *-* node2, or None if not adjacent."""
        edge = self.get_edge(node1, node2)
        return None if edge is None else edge.get_endpoint(node2)

    def set_endpoint(self, node1: Node, node2: Node, endpoint: Endpoint) -> bool:
        """Replace the mark at node2 on the edge node1 *-* node2."""
        edge = self.get_edge(node1, node2)
        if edge is None:
            return False
        new_edge = Edge(self._own(node1), self._own(node2), edge.get_endpoint(node1), endpoint)
        new_edge.properties = list(edge.properties)
        self.remove_edge(edge)
        return self.add_edge(new_edge)

    # Adjacency

    def is_adjacent_to(self, node1: Node, node2: Node) -> bool:
        return self.get_edge(node1, node2) is not None

    def get_adjacent_nodes(self, node: Node) -> List[Node]:
        adjacent = []
        for edge in self._incident.get(node.name, []):
            other = self._nodes[edge.get_distal_node(node).name]
            if other not in adjacent:
                adjacent.append(other)
        return adjacent

    def get_parents(self, node: Node) -> List[Node]:
        parents = []
        for edge in self._incident.get(node.name, []):
            other = edge.get_distal_node(node)
            if edge.get_endpoint(other) == Endpoint.TAIL and edge.get_endpoint(node) == Endpoint.ARROW:
                parents.append(self._nodes[other.name])
        return parents

    def get_children(self, node: Node) -> List[Node]:
        children = []
        for edge in self._incident.get(node.name, []):
            other = edge.get_distal_node(node)
            if edge.get_endpoint(node) == Endpoint.TAIL and edge.get_endpoint(other) == Endpoint.ARROW:
                children.append(self._nodes[other.name])
        return children

    def get_nodes_into(self, node: Node, endpoint: Endpoint) -> List[Node]:
        """Nodes adjacent to node whose edge has the given mark at node."""
        return [self._nodes[e.get_distal_node(node).name] for e in self._incident.get(node.name, [])
                if e.get_endpoint(node) == endpoint]

    def get_nodes_out_to(self, node: Node, endpoint: Endpoint) -> List[Node]:
        """Nodes adjacent to node whose edge has the given mark at the far end."""
        return [self._nodes[e.get_distal_node(node).name] for e in self._incident.get(node.name, [])
                if e.get_distal_endpoint(node) == endpoint]

    def is_parent_of(self, node1: Node, node2: Node) -> bool:
        return self.get_directed_edge(node1, node2) is not None

    def is_child_of(self, node1: Node, node2: Node) -> bool:
        return self.get_directed_edge(node2, node1) is not None

    def get_indegree(self, node: Node) -> int:
        return len(self.get_parents(node))

    def get_outdegree(self, node: Node) -> int:
        return len(self.get_children(node))

    def get_degree(self, node: Optional[Node] = None) -> int:
        """Number of edges at node, or the maximum degree over the graph."""
        if node is not None:
            return self.get_num_edges(node)
        return max((self.get_num_edges(n) for n in self._nodes.values()), default=0)

    def is_exogenous(self, node: Node) -> bool:
        return self.get_indegree(node) == 0

    def is_def_collider(self, node1: Node, node2: Node, node3: Node) -> bool:
        return self.paths().is_def_collider(node1, node2, node3)

    def is_def_noncollider(self, node1: Node, node2: Node, node3: Node) -> bool:
        return self.paths().is_def_noncollider(node1, node2, node3)

    def paths(self):
        """Read-only path and ancestry queries over this graph."""
        from causal_search_core.paths import Paths
        return Paths(self)

    # Triples

    def _triple_in_graph(self, triple: Triple) -> bool:
        return (all(self.contains_node(n) for n in (triple.x, triple.y, triple.z))
                and self.is_adjacent_to(triple.x, triple.y)
                and self.is_adjacent_to(triple.y, triple.z))

    def _add_triple(self, triples: Set[Triple], x: Node, y: Node, z: Node) -> bool:
        triple = Triple(x, y, z)
        if not self._triple_in_graph(triple):
            return False
        triples.add(triple)
        return True

    def add_underline_triple(self, x: Node, y: Node, z: Node) -> bool:
        return self._add_triple(self._underline_triples, x, y, z)

    def add_dotted_underline_triple(self, x: Node, y: Node, z: Node) -> bool:
        return self._add_triple(self._dotted_underline_triples, x, y, z)

    def add_ambiguous_triple(self, x: Node, y: Node, z: Node) -> bool:
        return self._add_triple(self._ambiguous_triples, x, y, z)

    def remove_underline_triple(self, x: Node, y: Node, z: Node) -> None:
        self._underline_triples.discard(Triple(x, y, z))

    def remove_dotted_underline_triple(self, x: Node, y: Node, z: Node) -> None:
        self._dotted_underline_triples.discard(Triple(x, y, z))

    def remove_ambiguous_triple(self, x: Node, y: Node, z: Node) -> None:
        self._ambiguous_triples.discard(Triple(x, y, z))

    def is_underline_triple(self, x: Node, y: Node, z: Node) -> bool:
        return Triple(x, y, z) in self._underline_triples

    def is_dotted_underline_triple(self, x: Node, y: Node, z: Node) -> bool:
        return Triple(x, y, z) in self._dotted_underline_triples

    def is_ambiguous_triple(self, x: Node, y: Node, z: Node) -> bool:
        return Triple(x, y, z) in self._ambiguous_triples

    def get_underline_triples(self) -> Set[Triple]:
        return set(self._underline_triples)

    def get_dotted_underline_triples(self) -> Set[Triple]:
        return set(self._dotted_underline_triples)

    def get_ambiguous_triples(self) -> Set[Triple]:
        return set(self._ambiguous_triples)

    def remove_triples_not_in_graph(self) -> None:
        for triples in (self._underline_triples, self._dotted_underline_triples, self._ambiguous_triples):
            for triple in list(triples):
                if not self._triple_in_graph(triple):
                    triples.discard(triple)

    # Structure

    def subgraph(self, nodes: Iterable[Node]) -> "Graph":
        """Induced subgraph over the given nodes, keeping this graph's node order."""
        names = {n.name for n in nodes}
        sub = Graph(n for n in self._nodes.values() if n.name in names)
        for edge in self._edges:
            if edge.node1.name in names and edge.node2.name in names:
                sub.add_edge(edge.copy())
        for source, target in ((self._underline_triples, sub._underline_triples),
                               (self._dotted_underline_triples, sub._dotted_underline_triples),
                               (self._ambiguous_triples, sub._ambiguous_triples)):
            target.update(t for t in source if sub._triple_in_graph(t))
        return sub

    def transfer_nodes_and_edges(self, graph: "Graph") -> None:
        """
        Copy the nodes and edges of graph into this graph.

        The copied nodes start with empty attribute maps; attributes set on
        graph's nodes are not carried over.
        """
        if graph is None:
            raise ValueError("No graph was provided")
        for node in graph.get_nodes():
            copy = node.copy()
            copy.attributes.clear()
            self.add_node(copy)
        for edge in graph.get_edges():
            self.add_edge(self._rebind(edge))

    def transfer_attributes(self, graph: "Graph") -> None:
        self.attributes.update(graph.attributes)

    def replace_nodes(self, nodes: Iterable[Node]) -> "Graph":
        """
        Rebind this graph to the given node objects, matched by name, so that
        identity-sensitive callers see a single object per variable.
        """
        for node in nodes:
            if node.name in self._nodes:
                self._nodes[node.name] = node
        edges = list(self._edges)
        self._edges = {}
        self._incident = {name: [] for name in self._nodes}
        for edge in edges:
            self.add_edge(self._rebind(edge))
        return self

    def _rebind(self, edge: Edge) -> Edge:
        rebound = Edge(self._own(edge.node1), self._own(edge.node2), edge.endpoint1, edge.endpoint2)
        rebound.properties = list(edge.properties)
        rebound.edge_type_probabilities = list(edge.edge_type_probabilities)
        return rebound

    def clear(self) -> None:
        self.__init__()

    def copy(self) -> "Graph":
        graph = Graph(self._nodes.values())
        for edge in self._edges:
            graph.add_edge(edge.copy())
        graph._underline_triples = set(self._underline_triples)
        graph._dotted_underline_triples = set(self._dotted_underline_triples)
        graph._ambiguous_triples = set(self._ambiguous_triples)
        graph.attributes = dict(self.attributes)
        return graph

    def __eq__(self, other):
        if not isinstance(other, Graph):
            return False
        return set(self._nodes) == set(other._nodes) and self._edges.keys() == other._edges.keys()

    __hash__ = None

    def __str__(self):
        lines = ["Graph Nodes:", ";".join(self._nodes), "", "Graph Edges:"]
        order = {name: i for i, name in enumerate(self._nodes)}
        edges = sorted(self._edges, key=lambda e: (order[e.node1.name], order[e.node2.name]))
        lines.extend(f"{i}. {edge}" for i, edge in enumerate(edges, start=1))
        return "\n".join(lines) + "\n"

    # Interchange

    def to_endpoint_matrix(self, nodes: Optional[Sequence[Node]] = None) -> np.ndarray:
        """
        Encode the graph as causal-learn does: M[i, j] is the mark at node i on
        the edge between i and j (TAIL=-1, ARROW=1, CIRCLE=2, no edge 0).
        """
        nodes = list(nodes) if nodes is not None else self.get_nodes()
        index = {n.name: i for i, n in enumerate(nodes)}
        matrix = np.zeros((len(nodes), len(nodes)), dtype=int)
        for edge in self._edges:
            i, j = index[edge.node1.name], index[edge.node2.name]
            matrix[i, j] = edge.endpoint1.value
            matrix[j, i] = edge.endpoint2.value
        return matrix

    @classmethod
    def from_endpoint_matrix(cls, matrix: np.ndarray, names: Optional[Sequence[str]] = None) -> "Graph":
        n = matrix.shape[0]
        if matrix.shape != (n, n):
            raise ValueError(f"Endpoint matrix must be square, got {matrix.shape}")
        names = list(names) if names is not None else [f"X{i + 1}" for i in range(n)]
        if len(names) != n:
            raise ValueError(f"Expected {n} names, got {len(names)}")
        nodes = [Node(name) for name in names]
        graph = cls(nodes)
        for i in range(n):
            for j in range(i + 1, n):
                if matrix[i, j] == 0 and matrix[j, i] == 0:
                    continue
                graph.add_edge(Edge(nodes[i], nodes[j], Endpoint(int(matrix[i, j])), Endpoint(int(matrix[j, i]))))
        return graph

    @classmethod
    def from_adjacency_matrix(cls, adjacency: np.ndarray, names: Optional[Sequence[str]] = None) -> "Graph":
        """Directed graph from a matrix where a nonzero entry [i, j] means i --> j."""
        n = adjacency.shape[0]
        names = list(names) if names is not None else [f"X{i + 1}" for i in range(n)]
        nodes = [Node(name) for name in names]
        graph = cls(nodes)
        for i, j in zip(*np.nonzero(adjacency)):
            if i != j:
                graph.add_directed_edge(nodes[i], nodes[j])
        return graph

    def to_adjacency_matrix(self, nodes: Optional[Sequence[Node]] = None) -> np.ndarray:
        """Binary matrix with [i, j] = 1 when i --> j."""
        nodes = list(nodes) if nodes is not None else self.get_nodes()
        index = {n.name: i for i, n in enumerate(nodes)}
        adjacency = np.zeros((len(nodes), len(nodes)), dtype=int)
        for edge in self._edges:
            if is_directed_edge(edge):
                adjacency[index[get_directed_edge_tail(edge).name], index[get_directed_edge_head(edge).name]] = 1
        return adjacency

    def to_networkx(self) -> nx.DiGraph:
        """Directed networkx view of a graph whose edges are all directed."""
        digraph = nx.DiGraph()
        digraph.add_nodes_from(self._nodes)
        for edge in self._edges:
            if not is_directed_edge(edge):
                raise ValueError(f"Only directed graphs can be converted, found {edge}")
            digraph.add_edge(get_directed_edge_tail(edge).name, get_directed_edge_head(edge).name)
        return digraph
