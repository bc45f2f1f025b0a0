"""Reachability and degree structure of a connectome.

Distances are unweighted hop counts along edge direction. Pairs of
neurons with no path between them are skipped rather than counted as
infinite or zero.
"""

import warnings

import numpy as np
import pandas as pd
from scipy.sparse import csgraph

from wormnet.bench import evaluate_snapshots
from wormnet.errors import EmptyGraphError, UnreachablePairSkipped
from wormnet.utils import get_logger

LOG = get_logger("metrics.topology")


@evaluate_snapshots
def path_lengths(graph):
    """Hop counts of all ordered pairs (u, v), u != v, that have a path.

    Parameters
    ----------
    graph : Graph

    Returns
    -------
    np.ndarray
        One entry per reachable ordered pair; empty if none is reachable.

    Raises
    ------
    EmptyGraphError
        If the graph has no nodes.

    Warns
    -----
    UnreachablePairSkipped
        Once, with the number of ordered pairs left out.
    """
    n = graph.n_nodes
    if n == 0:
        raise EmptyGraphError("Topology metrics need at least one node")

    hops = csgraph.shortest_path(graph.weight_matrix(binary=True),
                                 directed=graph.directed, unweighted=True)
    off_diagonal = ~np.eye(n, dtype=bool)
    reachable = np.isfinite(hops) & off_diagonal
    n_pairs = n * (n - 1)
    n_skipped = n_pairs - int(reachable.sum())
    if n_skipped:
        warnings.warn(
            UnreachablePairSkipped(
                f"{n_skipped} of {n_pairs} ordered pairs have no path "
                "and were left out"),
            stacklevel=2)
    return hops[reachable].astype(int)


@evaluate_snapshots
def average_distance(graph):
    """Mean shortest-path hop count over ordered pairs that have a path.

    Returns NaN if no pair of distinct nodes is connected.
    """
    lengths = path_lengths(graph)
    if lengths.size == 0:
        LOG.warning("No connected pair in %s; average distance is undefined", graph)
        return float("nan")
    value = float(lengths.mean())
    LOG.info("Average distance %.3f over %d reachable pairs", value, lengths.size)
    return value


@evaluate_snapshots
def diameter(graph):
    """Largest finite shortest-path hop count over ordered pairs; 0 if none."""
    lengths = path_lengths(graph)
    value = int(lengths.max()) if lengths.size else 0
    LOG.info("Diameter %d", value)
    return value


@evaluate_snapshots
def degrees(graph):
    """In/out degree and strength of every neuron.

    Returns
    -------
    pd.DataFrame
        Indexed by node id, columns in_degree, out_degree, degree,
        in_strength, out_strength (strength = summed synapse weight).
    """
    rows = []
    for node_id in graph.node_ids():
        incoming = graph.in_edges(node_id)
        outgoing = graph.out_edges(node_id)
        rows.append({
            "id": node_id,
            "in_degree": len(incoming),
            "out_degree": len(outgoing),
            "degree": len(incoming) + len(outgoing),
            "in_strength": sum(graph.edge(e).weight for e in incoming),
            "out_strength": sum(graph.edge(e).weight for e in outgoing),
        })
    columns = ["id", "in_degree", "out_degree", "degree",
               "in_strength", "out_strength"]
    return pd.DataFrame(rows, columns=columns).set_index("id")
