"""Undirected, weighted projection of a directed connectome."""

from wormnet.bench import evaluate_snapshots
from wormnet.graph import Graph, Edge
from wormnet.utils import get_logger

LOG = get_logger("community.projection")


@evaluate_snapshots
def symmetrize(graph):
    """Collapse each pair of neurons into one undirected edge.

    Reciprocal edges u->v (w1) and v->u (w2) become one edge of weight
    w1 + w2. A single direction keeps its weight. Parallel edges in the
    same direction are added too. Self-loops are dropped.

    Returns
    -------
    Graph
        Undirected, same nodes, one edge per connected pair, oriented
        from the lower to the higher node position.
    """
    index = graph.index()
    weights = {}
    kinds = {}
    for edge in graph.edges():
        if edge.is_loop:
            continue
        u, v = sorted((edge.pre, edge.post), key=index.__getitem__)
        weights[(u, v)] = weights.get((u, v), 0.0) + edge.weight
        kinds.setdefault((u, v), edge.synapse_type)

    edges = [Edge(u, v, kinds[(u, v)], w) for (u, v), w in weights.items()]
    projection = Graph(graph.nodes(), edges, directed=False)
    LOG.info("Undirected projection: %d directed edges -> %d undirected edges",
             graph.n_edges, projection.n_edges)
    return projection
