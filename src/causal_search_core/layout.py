"""
Layout Module

Places graph nodes on a 2-D canvas by setting their center coordinates.
"""

from typing import Dict, List

import numpy as np

from causal_search_core.graph import Graph, Node
from causal_search_core.knowledge import Knowledge

X_START = 50
Y_START = 50
X_SPACING = 90
Y_SPACING = 80


def _place_rows(rows: List[List[Node]]) -> None:
    for row_index, row in enumerate(rows):
        for col_index, node in enumerate(row):
            node.set_center(X_START + col_index * X_SPACING, Y_START + row_index * Y_SPACING)


def layout_by_knowledge(graph: Graph, knowledge: Knowledge) -> None:
    """One row per knowledge tier, in tier order; nodes in no tier go on a last row."""
    placed = set()
    rows = []

    for tier in range(knowledge.get_num_tiers()):
        row = [graph.get_node(name) for name in knowledge.get_tier(tier)]
        row = [node for node in row if node is not None and node.name not in placed]
        placed.update(node.name for node in row)
        if row:
            rows.append(row)

    rest = [node for node in graph.get_nodes() if node.name not in placed]
    if rest:
        rows.append(rest)

    _place_rows(rows)


def layout_by_causal_order(graph: Graph) -> None:
    """
    Rows by directed depth: a node sits one row below its deepest parent.

    Raises ValueError if the directed edges form a cycle.
    """
    depth: Dict[str, int] = {}
    for node in graph.paths().get_valid_order():
        parents = graph.get_parents(node)
        depth[node.name] = 1 + max((depth[p.name] for p in parents), default=-1)

    rows: List[List[Node]] = [[] for _ in range(max(depth.values(), default=-1) + 1)]
    for node in graph.get_nodes():
        rows[depth[node.name]].append(node)

    _place_rows(rows)


def circle_layout(graph: Graph, center_x: int = 200, center_y: int = 200, radius: int = 150) -> None:
    """Evenly spaced around a circle, in node order."""
    nodes = graph.get_nodes()
    for i, node in enumerate(nodes):
        angle = 2 * np.pi * i / len(nodes)
        node.set_center(int(round(center_x + radius * np.cos(angle))),
                        int(round(center_y + radius * np.sin(angle))))
