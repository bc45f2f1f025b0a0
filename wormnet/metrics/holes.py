"""Burt's structural-hole constraint.

Constraint measures how much a neuron's contacts are themselves tied to
each other. A neuron whose partners are all mutually connected is highly
constrained; a broker between otherwise separate partners is not.

With symmetrized weights a_ij + a_ji, the proportional tie strength is

    p_ij = (a_ij + a_ji) / sum_k (a_ik + a_ki),   k != i

and the constraint of i is

    c_i = sum_j (p_ij + sum_q p_iq p_qj)^2,   over j with p_ij > 0, q != i, j.

networkx computes the sum over the undirected projection. The measure
needs at least two distinct contacts; neurons with fewer get UNDEFINED
rather than a number.
"""

import networkx as nx

from wormnet.bench import evaluate_snapshots
from wormnet.errors import UNDEFINED
from wormnet.utils import get_logger

LOG = get_logger("metrics.holes")

MIN_TIES = 2
"""Distinct contacts a neuron needs for its constraint to be defined."""


def tie_graph(graph):
    """Undirected weighted ties between distinct neurons.

    Reciprocal synapses add up to one tie. Ties of zero total weight are
    not ties and are left out.
    """
    ties = graph.to_networkx(directed=False)
    ties.remove_edges_from([(u, v) for u, v, w in ties.edges(data="weight") if w <= 0])
    return ties


@evaluate_snapshots
def constraint(graph):
    """Structural-hole constraint of every neuron.

    Direction is ignored: the weights in both directions between two
    neurons are added.

    Returns
    -------
    dict
        node id -> float, or UNDEFINED for neurons with fewer than two
        distinct contacts.
    """
    ties = tie_graph(graph)
    defined = [n for n in graph.node_ids() if ties.degree(n) >= MIN_TIES]
    values = nx.constraint(ties, nodes=defined, weight="weight") if defined else {}

    result = {n: float(values[n]) if n in values else UNDEFINED
              for n in graph.node_ids()}
    n_undefined = graph.n_nodes - len(defined)
    if n_undefined:
        LOG.info("Constraint undefined for %d of %d neurons (fewer than %d contacts)",
                 n_undefined, graph.n_nodes, MIN_TIES)
    return result
