"""
Tests for aggregation module.
"""

import pytest
from causal_search_core.aggregation import (
    EdgeType, EdgeTypeProbability, consensus_graph, edge_adjacency_frequencies, edge_type_frequencies
)
from causal_search_core.graph import Graph, Node, directed_edge


def make_graph(edges, names="ABC"):
    nodes = {name: Node(name) for name in names}
    graph = Graph(nodes.values())
    for x, y in edges:
        graph.add_directed_edge(nodes[x], nodes[y])
    return graph


def make_graphs():
    return [
        make_graph([("A", "B"), ("B", "C")]),
        make_graph([("A", "B")]),
        make_graph([("B", "A"), ("B", "C")]),
    ]


class TestAggregation:
    """Test cases for edge frequencies and consensus graphs."""

    def test_edge_type_frequencies(self):
        """Test per-pair frequencies, most frequent first"""
        frequencies = edge_type_frequencies(make_graphs())
        assert frequencies[("A", "B")] == [
            EdgeTypeProbability(EdgeType.ta, 2 / 3),
            EdgeTypeProbability(EdgeType.at, 1 / 3),
        ]
        assert frequencies[("A", "C")] == [EdgeTypeProbability(EdgeType.nil, 1.0)]
        assert [e.edge_type for e in frequencies[("B", "C")]] == [EdgeType.ta, EdgeType.nil]

    def test_frequencies_do_not_depend_on_order(self):
        """Test that reordering graphs and nodes changes nothing"""
        graphs = make_graphs()
        reordered = [make_graph([("B", "C"), ("A", "B")], names="CBA"), graphs[2], graphs[1]]
        assert edge_type_frequencies(graphs) == edge_type_frequencies(reordered)

    def test_adjacency_frequencies(self):
        """Test how often each pair is adjacent"""
        adjacency = edge_adjacency_frequencies(make_graphs())
        assert adjacency[("A", "B")] == 1.0
        assert adjacency[("B", "C")] == pytest.approx(2 / 3)
        assert adjacency[("A", "C")] == 0.0

    def test_highest_ensemble(self):
        """Test the most frequent type wins"""
        consensus = consensus_graph(make_graphs())
        a, b, c = (consensus.get_node(name) for name in "ABC")
        assert consensus.contains_edge(directed_edge(a, b))
        assert consensus.contains_edge(directed_edge(b, c))
        assert consensus.get_num_edges() == 2
        probabilities = consensus.get_edge(a, b).edge_type_probabilities
        assert probabilities[0].edge_type == EdgeType.ta

    def test_preserved_ensemble(self):
        """Test that any observed edge is kept"""
        graphs = [make_graph([("A", "C")]), make_graph([]), make_graph([])]
        assert consensus_graph(graphs, ensemble="highest").get_num_edges() == 0
        preserved = consensus_graph(graphs, ensemble="preserved")
        assert preserved.contains_edge(directed_edge(preserved.get_node("A"), preserved.get_node("C")))

    def test_majority_ensemble(self):
        """Test the threshold on the most frequent edge type"""
        graphs = make_graphs()
        assert consensus_graph(graphs, threshold=0.5, ensemble="majority").get_num_edges() == 2
        assert consensus_graph(graphs, threshold=0.7, ensemble="majority").get_num_edges() == 0

    def test_union_of_nodes(self):
        """Test graphs over different node sets"""
        graphs = [make_graph([("A", "B")], names="AB"), make_graph([], names="BD")]
        consensus = consensus_graph(graphs, ensemble="preserved")
        assert consensus.get_node_names() == ["A", "B", "D"]

    def test_invalid_input(self):
        """Test empty lists and unknown ensembles"""
        with pytest.raises(ValueError):
            consensus_graph([])
        with pytest.raises(ValueError):
            consensus_graph(make_graphs(), ensemble="unanimous")


if __name__ == "__main__":
    test_instance = TestAggregation()
    for name in sorted(n for n in dir(test_instance) if n.startswith("test_")):
        print(f"Running {name}...")
        getattr(test_instance, name)()
        print("✓ Passed")

    print("\nAll tests passed! 🎉")
