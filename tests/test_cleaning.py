"""Tests for the cleaning steps and the two analysis snapshots."""

import pytest

from wormnet.cleaning import (
    drop_electrical,
    simplify,
    drop_low_weight,
    remove_isolates,
    strip_attributes,
    full_chemical,
    reduced_chemical,
    build_snapshots,
    FULL_CHEMICAL,
    REDUCED_CHEMICAL,
)
from wormnet.config import AnalysisConfig
from wormnet.graph import Node, Edge, SynapseType, load


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _neuron(node_id, **extra):
    return Node(node_id, f"N{node_id}", f"C{node_id}", 0.1 * node_id, "Inter", extra=extra)


def _pairs(graph):
    return sorted((e.pre, e.post, e.weight) for e in graph.edges())


@pytest.fixture
def five_neurons():
    """Five neurons: a chemical chain, a gap junction and a self-loop.

    1 -> 2 (2, chemical), 2 -> 3 (1, chemical), 3 -> 4 (4, chemical),
    1 -> 3 (1, electrical), 5 -> 5 (1, chemical).
    """
    nodes = [_neuron(i, neurotransmitter="ACh") for i in range(1, 6)]
    edges = [
        Edge(1, 2, "Chemical", 2),
        Edge(2, 3, "Chemical", 1),
        Edge(3, 4, "Chemical", 4),
        Edge(1, 3, "Electrical", 1),
        Edge(5, 5, "Chemical", 1),
    ]
    return load(nodes, edges)


@pytest.fixture
def duplicates():
    """1 -> 2 twice (3 then 5), 2 -> 1 once (2), and a self-loop on 1."""
    nodes = [_neuron(1), _neuron(2)]
    edges = [
        Edge(1, 2, "Chemical", 3),
        Edge(1, 2, "Chemical", 5),
        Edge(2, 1, "Chemical", 2),
        Edge(1, 1, "Chemical", 9),
    ]
    return load(nodes, edges)


# ---------------------------------------------------------------------------
# Individual steps
# ---------------------------------------------------------------------------

class TestDropElectrical:
    def test_only_chemical_left(self, five_neurons):
        result = drop_electrical(five_neurons)
        assert all(e.synapse_type is SynapseType.CHEMICAL for e in result.edges())
        assert _pairs(result) == [(1, 2, 2.0), (2, 3, 1.0), (3, 4, 4.0), (5, 5, 1.0)]

    def test_idempotent(self, five_neurons):
        once = drop_electrical(five_neurons)
        twice = drop_electrical(once)
        assert _pairs(once) == _pairs(twice)

    def test_input_untouched(self, five_neurons):
        drop_electrical(five_neurons)
        assert five_neurons.n_edges == 5

    def test_keeps_all_nodes(self, five_neurons):
        assert drop_electrical(five_neurons).n_nodes == 5


class TestSimplify:
    def test_first_weight_wins(self, duplicates):
        result = simplify(duplicates)
        assert _pairs(result) == [(1, 2, 3.0), (2, 1, 2.0)]

    def test_sum_policy(self, duplicates):
        assert _pairs(simplify(duplicates, merge="sum")) == [(1, 2, 8.0), (2, 1, 2.0)]

    def test_max_policy(self, duplicates):
        assert _pairs(simplify(duplicates, merge="max")) == [(1, 2, 5.0), (2, 1, 2.0)]

    def test_unknown_policy(self, duplicates):
        with pytest.raises(ValueError, match="merge"):
            simplify(duplicates, merge="mean")

    def test_no_loops_no_parallel_edges(self, duplicates):
        result = simplify(duplicates)
        keys = [(e.pre, e.post) for e in result.edges()]
        assert len(keys) == len(set(keys))
        assert not any(e.is_loop for e in result.edges())

    def test_reciprocal_edges_are_not_parallel(self, duplicates):
        assert simplify(duplicates).n_edges == 2

    def test_undirected_collapses_both_orientations(self):
        graph = load([_neuron(1), _neuron(2)],
                     [Edge(1, 2, "Chemical", 3), Edge(2, 1, "Chemical", 4)],
                     directed=False)
        assert _pairs(simplify(graph)) == [(1, 2, 3.0)]


class TestDropLowWeight:
    def test_threshold_is_exclusive(self, five_neurons):
        result = drop_low_weight(drop_electrical(five_neurons), threshold=1)
        assert _pairs(result) == [(1, 2, 2.0), (3, 4, 4.0)]

    def test_zero_threshold_keeps_positive(self, five_neurons):
        assert drop_low_weight(five_neurons, threshold=0).n_edges == 5


class TestRemoveIsolates:
    def test_only_zero_degree_removed(self):
        graph = load([_neuron(i) for i in range(1, 6)],
                     [Edge(1, 2, "Chemical", 2), Edge(3, 4, "Chemical", 2)])
        result = remove_isolates(graph)
        # two disconnected components both survive
        assert sorted(result.node_ids()) == [1, 2, 3, 4]

    def test_every_remaining_node_has_degree(self, five_neurons):
        result = remove_isolates(drop_low_weight(five_neurons, threshold=1))
        assert all(result.degree(n) >= 1 for n in result.node_ids())


class TestStripAttributes:
    def test_drops_named_attribute(self, five_neurons):
        result = strip_attributes(five_neurons, ["neurotransmitter"])
        assert all("neurotransmitter" not in n.extra for n in result.nodes())
        assert five_neurons.node(1).extra["neurotransmitter"] == "ACh"

    def test_single_name(self, five_neurons):
        result = strip_attributes(five_neurons, "neurotransmitter")
        assert "neurotransmitter" not in result.node(2).extra

    def test_structure_unchanged(self, five_neurons):
        result = strip_attributes(five_neurons, ["neurotransmitter"])
        assert _pairs(result) == _pairs(five_neurons)

    def test_core_field_refused(self, five_neurons):
        with pytest.raises(ValueError, match="core"):
            strip_attributes(five_neurons, ["weight"])


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

class TestSnapshots:
    def test_full_chemical(self, five_neurons):
        full = full_chemical(five_neurons)
        assert _pairs(full) == [(1, 2, 2.0), (2, 3, 1.0), (3, 4, 4.0)]
        assert full.n_nodes == 5
        assert full.degree(5) == 0

    def test_reduced_chemical(self, five_neurons):
        reduced = reduced_chemical(full_chemical(five_neurons))
        assert sorted(reduced.node_ids()) == [1, 2, 3, 4]
        assert _pairs(reduced) == [(1, 2, 2.0), (3, 4, 4.0)]

    def test_build_snapshots_is_lazy(self, five_neurons):
        snaps = build_snapshots(five_neurons)
        assert set(snaps) == {FULL_CHEMICAL, REDUCED_CHEMICAL}
        assert not snaps[REDUCED_CHEMICAL].is_evaluated
        reduced = snaps[REDUCED_CHEMICAL].value
        assert reduced.n_nodes == 4
        assert reduced.n_edges == 2
        assert snaps[REDUCED_CHEMICAL].value is reduced

    def test_build_snapshots_strips_neurotransmitter(self, five_neurons):
        snaps = build_snapshots(five_neurons)
        full = snaps[FULL_CHEMICAL].value
        assert all("neurotransmitter" not in n.extra for n in full.nodes())

    def test_config_threshold_and_merge(self, five_neurons):
        config = AnalysisConfig(weight_threshold=2, merge_policy="sum")
        snaps = build_snapshots(five_neurons, config)
        assert _pairs(snaps[REDUCED_CHEMICAL].value) == [(3, 4, 4.0)]
        assert snaps[FULL_CHEMICAL].define()["params"] == {"merge": "sum"}

    def test_provenance(self, five_neurons):
        definition = build_snapshots(five_neurons)[REDUCED_CHEMICAL].define()
        assert definition["name"] == REDUCED_CHEMICAL
        assert definition["inputs"][0]["name"] == FULL_CHEMICAL
        assert definition["computation"].endswith("reduced_chemical")
