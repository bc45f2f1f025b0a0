"""Per-neuron metric tables for downstream statistics.

Statistical summaries (group means, significance tests) are done
elsewhere. This module only joins the metric values with the neuron
annotations they will be grouped by.
"""

import pandas as pd

from wormnet.bench import evaluate_snapshots
from wormnet.errors import is_undefined
from wormnet.metrics.topology import degrees


@evaluate_snapshots
def metrics_table(graph, metrics, communities=None):
    """One row per neuron of graph with annotations and metrics.

    Parameters
    ----------
    graph : Graph
        Usually reducedChemical.
    metrics : MetricSet
    communities : CommunityResult or mapping, optional

    Returns
    -------
    pd.DataFrame
        Indexed by node id. Columns cell_name, cell_class, role,
        soma_pos, degree columns, betweenness, constraint and community.
        Undefined or missing values are pd.NA, never a number.
    """
    def _value(mapping, node_id):
        value = mapping.get(node_id)
        return pd.NA if value is None or is_undefined(value) else value

    assignment = getattr(communities, "assignment", communities) or {}
    rows = []
    for node in graph.nodes():
        rows.append({
            "id": node.id,
            "cell_name": node.cell_name,
            "cell_class": node.cell_class,
            "role": node.role.value,
            "soma_pos": node.soma_pos,
            "betweenness": _value(metrics.betweenness, node.id),
            "constraint": _value(metrics.constraint, node.id),
            "community": _value(assignment, node.id),
        })
    table = pd.DataFrame(rows, columns=[
        "id", "cell_name", "cell_class", "role", "soma_pos",
        "betweenness", "constraint", "community"]).set_index("id")
    table["betweenness"] = table["betweenness"].astype("Float64")
    table["constraint"] = table["constraint"].astype("Float64")
    table["community"] = table["community"].astype("Int64")
    table = table.join(degrees(graph))
    return table
