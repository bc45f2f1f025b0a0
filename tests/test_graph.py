"""Tests for the graph store: records, Graph, load, frame conversion."""

import numpy as np
import pandas as pd
import pytest

from wormnet.errors import InvalidGraphReference
from wormnet.graph import Node, Edge, Role, SynapseType, Graph, load, from_frames, to_frames


# ---------------------------------------------------------------------------
# Fixtures: a tiny synthetic connectome
# ---------------------------------------------------------------------------

def _neuron(node_id, role="Inter", pos=0.5, **extra):
    return Node(node_id, f"N{node_id}", f"C{node_id}", pos, role, extra=extra)


@pytest.fixture
def triangle():
    """Three neurons, a reciprocal pair, and a duplicate synapse.

    1 -> 2 (3, chemical), 2 -> 1 (1, chemical), 2 -> 3 (2, chemical),
    2 -> 3 (4, electrical).
    """
    nodes = [_neuron(1, "Sensory", 0.1, neurotransmitter="ACh"),
             _neuron(2, "Inter", 0.5),
             _neuron(3, "Motor", 0.9)]
    edges = [Edge(1, 2, "Chemical", 3),
             Edge(2, 1, "Chemical", 1),
             Edge(2, 3, "Chemical", 2),
             Edge(2, 3, "Electrical", 4)]
    return load(nodes, edges)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class TestNode:
    def test_role_coerced_from_string(self):
        assert _neuron(1, "Motor").role is Role.MOTOR

    def test_invalid_role(self):
        with pytest.raises(ValueError, match="role"):
            _neuron(1, "Glia")

    def test_soma_pos_out_of_range(self):
        with pytest.raises(ValueError, match="soma_pos"):
            _neuron(1, pos=1.5)

    def test_extension_attribute_lookup(self):
        node = _neuron(1, neurotransmitter="GABA")
        assert node.get("neurotransmitter") == "GABA"
        assert node.get("cell_class") == "C1"

    def test_missing_attribute(self):
        with pytest.raises(KeyError):
            _neuron(1).get("neurotransmitter")

    def test_extension_cannot_shadow_core_field(self):
        with pytest.raises(ValueError, match="core field"):
            Node(1, "A", "A", 0.1, "Inter", extra={"role": "Motor"})

    def test_extension_value_type_checked(self):
        with pytest.raises(ValueError, match="unsupported type"):
            _neuron(1, positions=[1, 2])

    def test_from_mapping_moves_unknown_keys_to_extra(self):
        node = Node.from_mapping({"id": "AVAL", "cell_name": "AVAL", "cell_class": "AVA",
                                  "soma_pos": 0.2, "role": "Inter",
                                  "neurotransmitter": "ACh"})
        assert node.extra["neurotransmitter"] == "ACh"
        assert node.role is Role.INTER

    def test_frozen(self):
        node = _neuron(1)
        with pytest.raises(AttributeError):
            node.soma_pos = 0.3


class TestEdge:
    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            Edge(1, 2, "Chemical", -1)

    def test_nan_weight_rejected(self):
        with pytest.raises(ValueError):
            Edge(1, 2, "Chemical", float("nan"))

    def test_synapse_type_coerced(self):
        assert Edge(1, 2, "Electrical", 1).synapse_type is SynapseType.ELECTRICAL

    def test_with_weight_keeps_everything_else(self):
        edge = Edge(1, 2, "Chemical", 1, extra={"note": "x"})
        heavier = edge.with_weight(7)
        assert heavier.weight == 7.0
        assert heavier.extra["note"] == "x"
        assert edge.weight == 1.0


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------

class TestLoad:
    def test_counts(self, triangle):
        assert triangle.n_nodes == 3
        assert triangle.n_edges == 4
        assert triangle.directed

    def test_unknown_endpoint_fails_fast(self):
        with pytest.raises(InvalidGraphReference) as excinfo:
            load([_neuron(1)], [Edge(1, 99, "Chemical", 1)])
        assert excinfo.value.node_id == 99

    def test_duplicate_node_id(self):
        with pytest.raises(ValueError, match="Duplicate"):
            load([_neuron(1), _neuron(1)], [])

    def test_accepts_mappings(self):
        graph = load(
            [{"id": 1, "cell_name": "A", "cell_class": "A", "soma_pos": 0.0, "role": "Sensory"},
             {"id": 2, "cell_name": "B", "cell_class": "B", "soma_pos": 1.0, "role": "Motor"}],
            [{"pre": 1, "post": 2, "synapse_type": "Chemical", "weight": 2}])
        assert graph.edge(0).weight == 2.0

    def test_undirected_graph(self):
        graph = Graph([_neuron(1), _neuron(2)], [Edge(1, 2, "Chemical", 1)], directed=False)
        assert not graph.directed
        assert 1 in graph
        assert repr(graph) == "<Graph undirected: 2 nodes, 1 edges>"


class TestAdjacency:
    def test_in_and_out_edges_are_distinct(self, triangle):
        assert triangle.out_edges(2) == (1, 2, 3)
        assert triangle.in_edges(2) == (0,)
        assert triangle.out_degree(2) == 3
        assert triangle.in_degree(2) == 1
        assert triangle.degree(2) == 4

    def test_successors_are_distinct(self, triangle):
        assert triangle.successors(2) == (1, 3)
        assert triangle.predecessors(3) == (2,)

    def test_unknown_node(self, triangle):
        with pytest.raises(KeyError):
            triangle.out_edges(42)

    def test_attribute_lookup(self, triangle):
        assert triangle.node_attribute(1, "neurotransmitter") == "ACh"
        assert triangle.node_attribute(3, "role") is Role.MOTOR
        assert triangle.edge_attribute(3, "synapse_type") is SynapseType.ELECTRICAL

    def test_unknown_edge(self, triangle):
        with pytest.raises(KeyError):
            triangle.edge(10)


class TestImmutability:
    def test_edges_are_a_tuple(self, triangle):
        assert isinstance(triangle.edges(), tuple)

    def test_derive_leaves_original(self, triangle):
        derived = triangle.derive(edges=triangle.edges()[:1])
        assert derived.n_edges == 1
        assert triangle.n_edges == 4
        assert derived.directed == triangle.directed


class TestWeightMatrix:
    def test_parallel_edges_summed(self, triangle):
        m = triangle.weight_matrix().toarray()
        i = triangle.index()
        assert m[i[2], i[3]] == 6.0
        assert m[i[3], i[2]] == 0.0

    def test_binary(self, triangle):
        m = triangle.weight_matrix(binary=True).toarray()
        assert m[0, 1] == 1.0

    def test_undirected_is_symmetric(self):
        graph = load([_neuron(1), _neuron(2)], [Edge(1, 2, "Chemical", 5)], directed=False)
        m = graph.weight_matrix().toarray()
        assert np.array_equal(m, m.T)
        assert m[0, 1] == 5.0


class TestNetworkxView:
    def test_parallel_edges_summed(self, triangle):
        view = triangle.to_networkx()
        assert view.is_directed()
        assert list(view.nodes) == [1, 2, 3]
        assert view[2][3]["weight"] == 6.0
        assert view[1][2]["weight"] == 3.0
        assert view[2][1]["weight"] == 1.0

    def test_undirected_projection_adds_reciprocal_weights(self, triangle):
        view = triangle.to_networkx(directed=False)
        assert not view.is_directed()
        assert view[1][2]["weight"] == 4.0
        assert view.number_of_edges() == 2

    def test_self_loops_left_out(self):
        graph = load([_neuron(1), _neuron(2)],
                     [Edge(1, 1, "Chemical", 2), Edge(1, 2, "Chemical", 1)])
        view = graph.to_networkx()
        assert view.number_of_nodes() == 2
        assert list(view.edges) == [(1, 2)]

    def test_undirected_graph_stays_undirected(self):
        graph = load([_neuron(1), _neuron(2)], [Edge(1, 2, "Chemical", 5)], directed=False)
        assert not graph.to_networkx(directed=True).is_directed()


class TestFrames:
    def test_round_trip_through_tables(self, triangle):
        nodes, edges = to_frames(triangle)
        assert list(nodes["role"]) == ["Sensory", "Inter", "Motor"]
        rebuilt = from_frames(nodes, edges)
        assert rebuilt.n_nodes == 3
        assert rebuilt.n_edges == 4
        assert rebuilt.node_attribute(1, "neurotransmitter") == "ACh"

    def test_missing_extension_values_dropped(self):
        nodes = pd.DataFrame({
            "id": [1, 2], "cell_name": ["A", "B"], "cell_class": ["A", "B"],
            "soma_pos": [0.1, 0.2], "role": ["Inter", "Inter"],
            "neurotransmitter": ["ACh", None],
        })
        edges = pd.DataFrame({"pre": [1], "post": [2],
                              "synapse_type": ["Chemical"], "weight": [3]})
        graph = from_frames(nodes, edges)
        assert "neurotransmitter" not in graph.node(2).extra
        assert graph.node(1).extra["neurotransmitter"] == "ACh"
