"""
Tests for knowledge_graph module.
"""

import pytest
from causal_search_core.exceptions import UnsupportedGraphOperation
from causal_search_core.graph import Node
from causal_search_core.knowledge import Knowledge
from causal_search_core.knowledge_graph import KnowledgeGraph, KnowledgeModelEdge, KnowledgeModelEdgeType


def make_knowledge_graph():
    knowledge = Knowledge(["A", "B", "C"])
    knowledge.add_to_tier(0, "A")
    knowledge.add_to_tier(1, "B")
    graph = KnowledgeGraph(knowledge)
    nodes = {name: Node(name) for name in "ABC"}
    for node in nodes.values():
        graph.add_node(node)
    return graph, knowledge, nodes


class TestKnowledgeGraph:
    """Test cases for the knowledge graph view."""

    def test_explicit_edges_write_through(self):
        """Test that adding explicit edges edits the knowledge"""
        graph, knowledge, n = make_knowledge_graph()
        graph.add_edge(KnowledgeModelEdge(n["A"], n["C"], KnowledgeModelEdgeType.FORBIDDEN_EXPLICITLY))
        graph.add_edge(KnowledgeModelEdge(n["C"], n["B"], KnowledgeModelEdgeType.REQUIRED))
        assert knowledge.is_forbidden("A", "C")
        assert knowledge.is_required("C", "B")
        assert graph.get_num_edges() == 2

    def test_implied_edge_must_be_implied(self):
        """Test that tier edges are only accepted when the tiers forbid them"""
        graph, knowledge, n = make_knowledge_graph()
        assert graph.add_edge(KnowledgeModelEdge(n["B"], n["A"], KnowledgeModelEdgeType.FORBIDDEN_BY_TIERS))
        with pytest.raises(ValueError):
            graph.add_edge(KnowledgeModelEdge(n["A"], n["B"], KnowledgeModelEdgeType.FORBIDDEN_BY_TIERS))
        with pytest.raises(ValueError):
            graph.add_edge(KnowledgeModelEdge(n["A"], n["B"], KnowledgeModelEdgeType.REQUIRED_BY_GROUPS))

    def test_remove_explicit_edge(self):
        """Test that removing an explicit edge removes its rule"""
        graph, knowledge, n = make_knowledge_graph()
        edge = KnowledgeModelEdge(n["A"], n["C"], KnowledgeModelEdgeType.FORBIDDEN_EXPLICITLY)
        graph.add_edge(edge)
        assert graph.remove_edge(edge)
        assert not knowledge.is_forbidden("A", "C")
        assert graph.get_num_edges() == 0

    def test_remove_implied_edge_rejected(self):
        """Test that tier-implied edges cannot be removed through the graph"""
        graph, knowledge, n = make_knowledge_graph()
        edge = KnowledgeModelEdge(n["B"], n["A"], KnowledgeModelEdgeType.FORBIDDEN_BY_TIERS)
        graph.add_edge(edge)
        with pytest.raises(ValueError):
            graph.remove_edge(edge)
        assert knowledge.is_forbidden("B", "A")

    def test_orientation_helpers_unsupported(self):
        """Test that plain graph mutations are rejected"""
        graph, _, n = make_knowledge_graph()
        with pytest.raises(UnsupportedGraphOperation):
            graph.add_directed_edge(n["A"], n["B"])
        with pytest.raises(UnsupportedGraphOperation):
            graph.add_bidirected_edge(n["A"], n["B"])
        with pytest.raises(TypeError):
            graph.add_undirected_edge(n["A"], n["B"])

    def test_sync_from_knowledge(self):
        """Test rebuilding edges from the knowledge"""
        graph, knowledge, n = make_knowledge_graph()
        knowledge.set_forbidden("A", "C")
        knowledge.set_required("C", "B")
        graph.sync_from_knowledge()

        types = {(e.node1.name, e.node2.name): e.edge_type for e in graph.get_edges()}
        assert types == {
            ("A", "C"): KnowledgeModelEdgeType.FORBIDDEN_EXPLICITLY,
            ("B", "A"): KnowledgeModelEdgeType.FORBIDDEN_BY_TIERS,
            ("C", "B"): KnowledgeModelEdgeType.REQUIRED,
        }


if __name__ == "__main__":
    test_instance = TestKnowledgeGraph()
    for name in sorted(n for n in dir(test_instance) if n.startswith("test_")):
        print(f"Running {name}...")
        getattr(test_instance, name)()
        print("✓ Passed")

    print("\nAll tests passed! 🎉")
