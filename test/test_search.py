"""
Tests for search module.
"""

import pytest
from causal_search_core.graph import Graph, Node, directed_edge
from causal_search_core.graph_transforms import cpdag_for_dag
from causal_search_core.independence import DSeparationTest
from causal_search_core.knowledge import Knowledge
from causal_search_core.search import Fas, Pc


def make_collider_dag():
    nodes = {name: Node(name) for name in "ABCD"}
    dag = Graph(nodes.values())
    dag.add_directed_edge(nodes["A"], nodes["C"])
    dag.add_directed_edge(nodes["B"], nodes["C"])
    dag.add_directed_edge(nodes["C"], nodes["D"])
    return dag, nodes


class TestSearch:
    """Test cases for FAS and PC with a d-separation oracle."""

    def test_fas_recovers_skeleton(self):
        """Test that the oracle skeleton matches the DAG's adjacencies"""
        dag, n = make_collider_dag()
        fas = Fas(DSeparationTest(dag))
        skeleton = fas.search()
        assert skeleton.get_num_edges() == 3
        assert skeleton.is_adjacent_to(n["A"], n["C"])
        assert not skeleton.is_adjacent_to(n["A"], n["B"])
        assert fas.sepsets.get(n["A"], n["B"]) == []
        assert fas.sepsets.get(n["D"], n["A"]) == [n["C"]]
        assert fas.num_tests > 0

    def test_pc_recovers_cpdag(self):
        """Test that PC with an oracle returns the CPDAG of the true DAG"""
        dag, _ = make_collider_dag()
        result = Pc(DSeparationTest(dag)).search()
        assert result == cpdag_for_dag(dag)

    def test_depth_limits_conditioning(self):
        """Test that depth 0 only removes marginally independent pairs"""
        dag, n = make_collider_dag()
        skeleton = Fas(DSeparationTest(dag), depth=0).search()
        assert not skeleton.is_adjacent_to(n["A"], n["B"])
        assert skeleton.is_adjacent_to(n["A"], n["D"])

    def test_invalid_depth(self):
        """Test depth validation"""
        dag, _ = make_collider_dag()
        with pytest.raises(ValueError):
            Fas(DSeparationTest(dag), depth=-2)

    def test_forbidden_both_ways_removed(self):
        """Test that a pair forbidden in both directions is never adjacent"""
        dag, n = make_collider_dag()
        knowledge = Knowledge(["A", "B", "C", "D"])
        knowledge.set_forbidden("C", "D")
        knowledge.set_forbidden("D", "C")
        skeleton = Fas(DSeparationTest(dag), knowledge).search()
        assert not skeleton.is_adjacent_to(n["C"], n["D"])

    def test_required_edge_kept(self):
        """Test that a required pair survives and is oriented"""
        dag, n = make_collider_dag()
        knowledge = Knowledge(["A", "B", "C", "D"])
        knowledge.set_required("A", "B")
        result = Pc(DSeparationTest(dag), knowledge).search()
        assert result.contains_edge(directed_edge(n["A"], n["B"]))
        assert not knowledge.is_violated_by(result)


if __name__ == "__main__":
    test_instance = TestSearch()
    for name in sorted(n for n in dir(test_instance) if n.startswith("test_")):
        print(f"Running {name}...")
        getattr(test_instance, name)()
        print("✓ Passed")

    print("\nAll tests passed! 🎉")
