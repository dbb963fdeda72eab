"""
Paths Module

Reachability and ancestry queries over a Graph. Every traversal keeps a
visited set, so queries terminate on graphs with directed or mixed cycles.
"""

from collections import deque
from typing import Iterable, List, Optional, Set, Union

import networkx as nx

from causal_search_core.graph import (
    Endpoint, Graph, Node, traverse_semi_directed
)


class Paths:
    """Path queries bound to one graph. The graph is never modified."""

    def __init__(self, graph: Graph):
        self.graph = graph

    # Ancestry

    def exists_directed_path_from_to(self, x: Node, y: Node) -> bool:
        """True if there is a directed path x --> ... --> y of length at least one."""
        visited: Set[Node] = set()
        queue = deque(self.graph.get_children(x))

        while queue:
            current = queue.popleft()
            if current == y:
                return True
            if current in visited:
                continue
            visited.add(current)
            queue.extend(c for c in self.graph.get_children(current) if c not in visited)

        return False

    def is_ancestor_of(self, x: Node, y: Node) -> bool:
        """
        True if x reaches y along a directed path.

        A node is its own ancestor only through a nontrivial directed cycle,
        so is_ancestor_of(x, x) is False on acyclic graphs.
        """
        return self.exists_directed_path_from_to(x, y)

    def is_descendent_of(self, x: Node, y: Node) -> bool:
        return self.exists_directed_path_from_to(y, x)

    def is_proper_ancestor_of(self, x: Node, y: Node) -> bool:
        return x != y and self.is_ancestor_of(x, y)

    def get_ancestors(self, nodes: Union[Node, Iterable[Node]]) -> List[Node]:
        """Reflexive ancestors: the given nodes plus everything with a directed path into them."""
        return self._closure(nodes, self.graph.get_parents)

    def get_descendants(self, nodes: Union[Node, Iterable[Node]]) -> List[Node]:
        """Reflexive descendants: the given nodes plus everything they reach by directed paths."""
        return self._closure(nodes, self.graph.get_children)

    def _closure(self, nodes, step) -> List[Node]:
        if isinstance(nodes, Node):
            nodes = [nodes]
        result: List[Node] = []
        seen: Set[Node] = set()
        queue = deque(nodes)

        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            result.append(current)
            queue.extend(n for n in step(current) if n not in seen)

        return result

    def exists_common_ancestor(self, x: Node, y: Node) -> bool:
        """True if some node (possibly x or y itself) is an ancestor of both."""
        ancestors_x = set(self.get_ancestors(x))
        return any(n in ancestors_x for n in self.get_ancestors(y))

    def exists_trek(self, x: Node, y: Node) -> bool:
        """A trek joins x and y exactly when they share a (reflexive) common ancestor."""
        return self.exists_common_ancestor(x, y)

    # Semi-directed paths

    def exists_semi_directed_path(self, x: Node, target: Union[Node, Iterable[Node]]) -> bool:
        """
        True if a semi-directed path leads from x into target.

        A step may leave a node through a tail or a circle, never through an
        arrowhead pointing back at it. The trivial path counts, so x in target
        returns True.
        """
        targets = {target} if isinstance(target, Node) else set(target)
        visited = {x}
        queue = deque([x])

        while queue:
            current = queue.popleft()
            if current in targets:
                return True
            for edge in self.graph.get_edges(current):
                nxt = traverse_semi_directed(current, edge)
                if nxt is None or nxt in visited:
                    continue
                visited.add(nxt)
                queue.append(nxt)

        return False

    # Local triple classification

    def is_def_collider(self, node1: Node, node2: Node, node3: Node) -> bool:
        """True if both edges at node2 carry an arrowhead at node2: node1 *-> node2 <-* node3."""
        edge1 = self.graph.get_edge(node1, node2)
        edge2 = self.graph.get_edge(node2, node3)
        if edge1 is None or edge2 is None:
            return False
        return edge1.get_endpoint(node2) == Endpoint.ARROW and edge2.get_endpoint(node2) == Endpoint.ARROW

    def is_def_noncollider(self, node1: Node, node2: Node, node3: Node) -> bool:
        """
        True if node2 is definitely not a collider on node1 - node2 - node3.

        Holds when one of the edges points out of node2 toward node1 or node3,
        when both marks at node2 are circles and node1, node3 are not adjacent,
        or when the triple is underlined.
        """
        circle12 = circle32 = False

        for edge in self.graph.get_edges(node2):
            other = edge.get_distal_node(node2)
            if other == node1:
                if edge.points_towards(node1):
                    return True
                if edge.get_endpoint(node2) == Endpoint.CIRCLE:
                    circle12 = True
            elif other == node3:
                if edge.points_towards(node3):
                    return True
                if edge.get_endpoint(node2) == Endpoint.CIRCLE:
                    circle32 = True

        if circle12 and circle32 and not self.graph.is_adjacent_to(node1, node3):
            return True

        return self.graph.is_underline_triple(node1, node2, node3)

    # Cycles and orders

    def exists_directed_cycle(self) -> bool:
        return any(self.exists_directed_path_from_to(node, node) for node in self.graph.get_nodes())

    def is_acyclic(self) -> bool:
        return not self.exists_directed_cycle()

    def get_valid_order(self, nodes: Optional[Iterable[Node]] = None) -> List[Node]:
        """
        Topological order of the given nodes (default: all) under the directed edges.

        Raises ValueError if the directed edges among them form a cycle.
        """
        nodes = list(nodes) if nodes is not None else self.graph.get_nodes()
        members = set(nodes)
        in_degree = {n: sum(1 for p in self.graph.get_parents(n) if p in members) for n in nodes}
        queue = deque(n for n in nodes if in_degree[n] == 0)
        order = []

        while queue:
            node = queue.popleft()
            order.append(node)
            for child in self.graph.get_children(node):
                if child not in members:
                    continue
                in_degree[child] -= 1
                if in_degree[child] == 0:
                    queue.append(child)

        if len(order) != len(nodes):
            raise ValueError("Graph has a directed cycle; no valid order exists")

        return order

    # Separation

    def is_d_separated(self, x: Node, y: Node, z: Iterable[Node]) -> bool:
        """d-separation of x and y given z in a DAG."""
        if not self.is_acyclic():
            raise ValueError("d-separation is only defined here for acyclic directed graphs")
        digraph = self.graph.to_networkx()
        return nx.is_d_separator(digraph, {x.name}, {y.name}, {n.name for n in z})

    def is_d_connected(self, x: Node, y: Node, z: Iterable[Node]) -> bool:
        return not self.is_d_separated(x, y, z)
