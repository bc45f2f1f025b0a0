"""Betweenness centrality of the neurons of a snapshot.

Shortest paths are unweighted hop counts. When several shortest paths
tie, each carries an equal fractional share, so no pair is counted more
than once. The computation is networkx's Brandes implementation over
the simple view of the graph (parallel edges merged, self-loops left
out), which leaves the set of shortest paths unchanged.
"""

import networkx as nx

from wormnet.bench import evaluate_snapshots
from wormnet.utils import get_logger

LOG = get_logger("metrics.centrality")


@evaluate_snapshots
def betweenness(graph, directed=True, normalized=True):
    """Betweenness centrality of every neuron.

    For node v, sums over pairs (s, t), s != v != t, with a path from s
    to t, the fraction of shortest s-t paths passing through v.

    Parameters
    ----------
    graph : Graph
    directed : bool
        Follow edge direction. Ignored (treated as False) when the graph
        itself is undirected.
    normalized : bool
        Divide by the number of pairs not involving v: (n-1)(n-2) when
        directed, (n-1)(n-2)/2 when undirected. Values then lie in [0, 1].
        Graphs of two or fewer neurons are left unscaled (all zero).

    Returns
    -------
    dict
        node id -> betweenness, in node order.
    """
    view = graph.to_networkx(directed=directed)
    scores = nx.betweenness_centrality(view, normalized=normalized, weight=None)
    result = {node_id: float(scores[node_id]) for node_id in graph.node_ids()}

    LOG.info("Betweenness over %d neurons (%s%s): max %.4f",
             graph.n_nodes, "directed" if view.is_directed() else "undirected",
             ", normalized" if normalized else "",
             max(result.values(), default=0.0))
    return result
