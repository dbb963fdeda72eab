"""
Knowledge Graph Module

A graph view of a Knowledge object. Each edge stands for one forbidden or
required pair; adding or removing explicit edges edits the knowledge, while
edges implied by tiers or groups can only be shown, not created or deleted.
"""

from enum import Enum
from typing import Iterable, List, Optional

from causal_search_core.exceptions import UnsupportedGraphOperation
from causal_search_core.graph import Edge, Endpoint, Graph, Node
from causal_search_core.knowledge import Knowledge


class KnowledgeModelEdgeType(Enum):
    FORBIDDEN_EXPLICITLY = "forbidden explicitly"
    REQUIRED = "required"
    FORBIDDEN_BY_TIERS = "forbidden by tiers"
    FORBIDDEN_BY_GROUPS = "forbidden by groups"
    REQUIRED_BY_GROUPS = "required by groups"


_EXPLICIT_TYPES = (KnowledgeModelEdgeType.FORBIDDEN_EXPLICITLY, KnowledgeModelEdgeType.REQUIRED)


class KnowledgeModelEdge(Edge):
    """A directed edge from -> to tagged with the kind of knowledge it stands for."""

    def __init__(self, from_node: Node, to_node: Node, edge_type: KnowledgeModelEdgeType):
        super().__init__(from_node, to_node, Endpoint.TAIL, Endpoint.ARROW)
        self.edge_type = edge_type

    def copy(self) -> "KnowledgeModelEdge":
        return KnowledgeModelEdge(self.node1, self.node2, self.edge_type)

    def _key(self):
        return self.node1.name, self.node2.name, self.edge_type

    def __repr__(self):
        return f"{self.node1.name} --> {self.node2.name} ({self.edge_type.value})"


class KnowledgeGraph:
    """
    Owns a Graph and a Knowledge object and keeps them consistent.

    Only KnowledgeModelEdge instances are accepted. The orientation helpers
    of Graph make no sense here and raise UnsupportedGraphOperation.
    """

    def __init__(self, knowledge: Knowledge):
        if knowledge is None:
            raise ValueError("A knowledge object must be provided")
        self.knowledge = knowledge
        self._graph = Graph()

    def get_knowledge(self) -> Knowledge:
        return self.knowledge

    # Mutation

    def add_node(self, node: Node) -> bool:
        return self._graph.add_node(node)

    def remove_node(self, node: Node) -> bool:
        return self._graph.remove_node(node)

    def remove_nodes(self, nodes: Iterable[Node]) -> bool:
        return self._graph.remove_nodes(nodes)

    def add_edge(self, edge: KnowledgeModelEdge) -> bool:
        """
        Add a knowledge edge.

        Explicit edges are written through to the knowledge. Implied edges
        are only accepted when the knowledge already implies them; otherwise
        ValueError is raised.
        """
        if not isinstance(edge, KnowledgeModelEdge):
            return False

        source, target = edge.node1.name, edge.node2.name

        if edge.edge_type == KnowledgeModelEdgeType.FORBIDDEN_EXPLICITLY:
            self.knowledge.set_forbidden(source, target)
        elif edge.edge_type == KnowledgeModelEdgeType.REQUIRED:
            self.knowledge.set_required(source, target)
        elif edge.edge_type == KnowledgeModelEdgeType.FORBIDDEN_BY_TIERS:
            if not self.knowledge.is_forbidden_by_tiers(source, target):
                raise ValueError(f"Edge {source}-->{target} is not forbidden by tiers.")
        elif edge.edge_type == KnowledgeModelEdgeType.FORBIDDEN_BY_GROUPS:
            if not self.knowledge.is_forbidden_by_groups(source, target):
                raise ValueError(f"Edge {source}-->{target} is not forbidden by groups.")
        elif edge.edge_type == KnowledgeModelEdgeType.REQUIRED_BY_GROUPS:
            if not self.knowledge.is_required_by_groups(source, target):
                raise ValueError(f"Edge {source}-->{target} is not required by groups.")

        if self._graph.contains_edge(edge):
            return False
        return self._graph.add_edge(edge)

    def remove_edge(self, edge: KnowledgeModelEdge) -> bool:
        source, target = edge.node1.name, edge.node2.name

        if edge.edge_type == KnowledgeModelEdgeType.FORBIDDEN_EXPLICITLY:
            self.knowledge.remove_forbidden(source, target)
        elif edge.edge_type == KnowledgeModelEdgeType.REQUIRED:
            self.knowledge.remove_required(source, target)
        elif edge.edge_type == KnowledgeModelEdgeType.FORBIDDEN_BY_TIERS:
            raise ValueError("Edges forbidden by tiers are removed by editing the tiers.")
        else:
            raise ValueError("Edges implied by knowledge groups are removed by editing the groups.")

        return self._graph.remove_edge(edge)

    def remove_edges(self, edges: Iterable[KnowledgeModelEdge]) -> bool:
        removed = False
        for edge in list(edges):
            removed = self.remove_edge(edge) or removed
        return removed

    def sync_from_knowledge(self) -> None:
        """Rebuild the edges so that they show every pair the knowledge constrains."""
        for edge in self._graph.get_edges():
            self._graph.remove_edge(edge)

        for name in self.knowledge.get_variables():
            if not self._graph.get_node(name):
                self._graph.add_node(Node(name))

        explicit = set(self.knowledge.get_list_of_explicitly_forbidden_edges())
        for pair in self.knowledge.get_list_of_forbidden_edges():
            if pair in explicit:
                edge_type = KnowledgeModelEdgeType.FORBIDDEN_EXPLICITLY
            elif self.knowledge.is_forbidden_by_tiers(*pair):
                edge_type = KnowledgeModelEdgeType.FORBIDDEN_BY_TIERS
            else:
                edge_type = KnowledgeModelEdgeType.FORBIDDEN_BY_GROUPS
            self._add_pair(pair.from_name, pair.to_name, edge_type)

        explicit = set(self.knowledge.get_list_of_explicitly_required_edges())
        for pair in self.knowledge.get_list_of_required_edges():
            edge_type = (KnowledgeModelEdgeType.REQUIRED if pair in explicit
                         else KnowledgeModelEdgeType.REQUIRED_BY_GROUPS)
            self._add_pair(pair.from_name, pair.to_name, edge_type)

    def _add_pair(self, source: str, target: str, edge_type: KnowledgeModelEdgeType) -> None:
        node1, node2 = self._graph.get_node(source), self._graph.get_node(target)
        if node1 is not None and node2 is not None:
            self._graph.add_edge(KnowledgeModelEdge(node1, node2, edge_type))

    def clear(self) -> None:
        self._graph.clear()

    # Unsupported orientation helpers

    def add_directed_edge(self, node1: Node, node2: Node) -> bool:
        raise UnsupportedGraphOperation("Knowledge graphs only accept knowledge model edges")

    def add_undirected_edge(self, node1: Node, node2: Node) -> bool:
        raise UnsupportedGraphOperation("Knowledge graphs only accept knowledge model edges")

    def add_nondirected_edge(self, node1: Node, node2: Node) -> bool:
        raise UnsupportedGraphOperation("Knowledge graphs only accept knowledge model edges")

    def add_partially_oriented_edge(self, node1: Node, node2: Node) -> bool:
        raise UnsupportedGraphOperation("Knowledge graphs only accept knowledge model edges")

    def add_bidirected_edge(self, node1: Node, node2: Node) -> bool:
        raise UnsupportedGraphOperation("Knowledge graphs only accept knowledge model edges")

    def set_endpoint(self, node1: Node, node2: Node, endpoint: Endpoint) -> bool:
        raise UnsupportedGraphOperation("Knowledge edges are always directed")

    # Queries

    def get_nodes(self) -> List[Node]:
        return self._graph.get_nodes()

    def get_node(self, name: str) -> Optional[Node]:
        return self._graph.get_node(name)

    def get_node_names(self) -> List[str]:
        return self._graph.get_node_names()

    def contains_node(self, node: Node) -> bool:
        return self._graph.contains_node(node)

    def contains_edge(self, edge: Edge) -> bool:
        return self._graph.contains_edge(edge)

    def get_edges(self, node: Optional[Node] = None) -> List[Edge]:
        return self._graph.get_edges(node)

    def get_edges_between(self, node1: Node, node2: Node) -> List[Edge]:
        return self._graph.get_edges_between(node1, node2)

    def get_num_nodes(self) -> int:
        return self._graph.get_num_nodes()

    def get_num_edges(self, node: Optional[Node] = None) -> int:
        return self._graph.get_num_edges(node)

    def is_adjacent_to(self, node1: Node, node2: Node) -> bool:
        return self._graph.is_adjacent_to(node1, node2)

    def get_adjacent_nodes(self, node: Node) -> List[Node]:
        return self._graph.get_adjacent_nodes(node)

    def get_parents(self, node: Node) -> List[Node]:
        return self._graph.get_parents(node)

    def get_children(self, node: Node) -> List[Node]:
        return self._graph.get_children(node)

    def paths(self):
        return self._graph.paths()

    def __str__(self):
        return str(self._graph)
