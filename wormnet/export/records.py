"""Flat node and edge records for an external network renderer.

Design principle: export only reads. Graph and metrics go in, plain
dicts come out, and nothing is written back.
"""

from typing import Dict

import numpy as np
import pandas as pd

from wormnet.bench import evaluate_snapshots
from wormnet.errors import is_undefined
from wormnet.graph import Role
from wormnet.utils import get_logger

LOG = get_logger("export")


# ---------------------------------------------------------------------------
# Color palette: one category per neuron role
# ---------------------------------------------------------------------------

ROLE_COLORS: Dict[Role, str] = {
    Role.SENSORY: "#FF5722",   # deep orange
    Role.MOTOR:   "#FFC107",   # amber
    Role.INTER:   "#3F51B5",   # indigo
}
"""Colors for neuron roles, chosen for perceptual distinctness."""


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

def _group_lookup(graph, group):
    if group is None:
        return lambda node: None
    if isinstance(group, str):
        return lambda node: node.get(group)
    assignment = getattr(group, "assignment", group)
    return lambda node: assignment.get(node.id)


@evaluate_snapshots
def node_records(graph, size=None, size_scale=1.0, group=None, label="cell_name"):
    """One record per neuron.

    Parameters
    ----------
    graph : Graph
    size : mapping, optional
        node id -> metric value (e.g. MetricSet.betweenness). A node's
        size is its value times size_scale, or None where the value is
        UNDEFINED or missing. Without a mapping every node gets
        size_scale.
    size_scale : float
        Multiplier applied to the metric.
    group : str, mapping or CommunityResult, optional
        A node attribute name (e.g. "cell_class"), or a community
        assignment.
    label : str
        Node attribute used as display label.

    Returns
    -------
    list of dict
        Keys id, label, color, size, group, level.
    """
    group_of = _group_lookup(graph, group)
    records = []
    n_unsized = 0
    for node in graph.nodes():
        if size is None:
            node_size = float(size_scale)
        else:
            value = size.get(node.id)
            if value is None or is_undefined(value):
                node_size = None
                n_unsized += 1
            else:
                node_size = float(value) * size_scale
        records.append({
            "id": node.id,
            "label": node.get(label),
            "color": ROLE_COLORS[node.role],
            "size": node_size,
            "group": group_of(node),
            "level": node.soma_pos,
        })
    if n_unsized:
        LOG.warning("%d of %d neurons have no defined size metric; size is None",
                    n_unsized, len(records))
    return records


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------

def highlight_threshold(weights, sigma=2.0):
    """mean + sigma * population standard deviation of weights; inf if empty."""
    weights = np.asarray(list(weights), dtype=float)
    if weights.size == 0:
        return float("inf")
    return float(weights.mean() + sigma * weights.std(ddof=0))


@evaluate_snapshots
def edge_records(graph, sigma=2.0):
    """One record per edge.

    An edge is highlighted iff its weight is strictly greater than
    highlight_threshold over the edges of this graph.

    Returns
    -------
    list of dict
        Keys from, to, width, highlight.
    """
    threshold = highlight_threshold((e.weight for e in graph.edges()), sigma)
    records = [{
        "from": edge.pre,
        "to": edge.post,
        "width": edge.weight,
        "highlight": bool(edge.weight > threshold),
    } for edge in graph.edges()]
    LOG.info("Exported %d edges, %d highlighted (weight > %.2f)",
             len(records), sum(r["highlight"] for r in records), threshold)
    return records


def to_frames(nodes, edges):
    """Node and edge records as DataFrames."""
    node_columns = ["id", "label", "color", "size", "group", "level"]
    edge_columns = ["from", "to", "width", "highlight"]
    return (pd.DataFrame(nodes, columns=node_columns),
            pd.DataFrame(edges, columns=edge_columns))
