"""Pure cleaning steps: each takes a graph and returns a new one.

None of these functions touch their input. They accept either a Graph or
a Snapshot (see wormnet.bench), so they compose directly into derived
snapshots.
"""

from wormnet.bench import evaluate_snapshots
from wormnet.config import MERGE_POLICIES
from wormnet.graph import Node, Edge, SynapseType
from wormnet.utils import get_logger

LOG = get_logger("cleaning")


def _pct(after, before):
    return 100.0 * after / before if before else 100.0


@evaluate_snapshots
def drop_electrical(graph):
    """Keep only chemical synapses.

    Gap junctions are undirected and carry no contact count comparable
    to chemical synapses, so they are left out of the analysis.
    """
    kept = [e for e in graph.edges() if e.synapse_type is SynapseType.CHEMICAL]
    LOG.info("Chemical synapses only: %d -> %d edges (%.1f%% retained)",
             graph.n_edges, len(kept), _pct(len(kept), graph.n_edges))
    return graph.derive(edges=kept)


@evaluate_snapshots
def simplify(graph, merge="first"):
    """Remove self-loops and collapse same-direction parallel edges.

    Parameters
    ----------
    graph : Graph
    merge : str
        Weight of a collapsed edge: "first" keeps the weight of the first
        edge encountered in edge order and discards the others, "sum"
        adds all of them, "max" keeps the largest. The surviving edge
        keeps the synapse type and annotations of the first one.

    Returns
    -------
    Graph
        No self-loops, at most one edge per ordered pair (per unordered
        pair if the graph is undirected).
    """
    if merge not in MERGE_POLICIES:
        raise ValueError(f"merge must be one of {MERGE_POLICIES}, got {merge!r}")

    merged = {}
    n_loops = 0
    for edge in graph.edges():
        if edge.is_loop:
            n_loops += 1
            continue
        key = (edge.pre, edge.post) if graph.directed else frozenset((edge.pre, edge.post))
        seen = merged.get(key)
        if seen is None:
            merged[key] = edge
        elif merge == "sum":
            merged[key] = seen.with_weight(seen.weight + edge.weight)
        elif merge == "max" and edge.weight > seen.weight:
            merged[key] = seen.with_weight(edge.weight)

    n_parallel = graph.n_edges - n_loops - len(merged)
    LOG.info("Simplify (merge=%s): removed %d self-loops, collapsed %d parallel edges; "
             "%d -> %d edges", merge, n_loops, n_parallel, graph.n_edges, len(merged))
    return graph.derive(edges=list(merged.values()))


@evaluate_snapshots
def drop_low_weight(graph, threshold=1):
    """Remove edges with weight <= threshold.

    With the default threshold, single-contact synapses are dropped and
    only edges of two or more contacts remain.
    """
    kept = [e for e in graph.edges() if e.weight > threshold]
    LOG.info("Weight > %s: %d -> %d edges (%.1f%% retained)",
             threshold, graph.n_edges, len(kept), _pct(len(kept), graph.n_edges))
    return graph.derive(edges=kept)


@evaluate_snapshots
def remove_isolates(graph):
    """Remove nodes with no incident edge.

    Only zero-degree nodes go. Small components that still have edges
    stay, so this is not main-component extraction.
    """
    kept = [n for n in graph.nodes() if graph.degree(n.id) > 0]
    LOG.info("Removed %d isolated neurons: %d -> %d nodes",
             graph.n_nodes - len(kept), graph.n_nodes, len(kept))
    return graph.derive(nodes=kept)


@evaluate_snapshots
def strip_attributes(graph, names):
    """Drop named extension attributes from every node and edge.

    Parameters
    ----------
    graph : Graph
    names : str or iterable of str
        Attribute names. Names not present on a record are ignored.

    Raises
    ------
    ValueError
        If a name is a core field; those are always present.
    """
    names = {names} if isinstance(names, str) else set(names)
    core = set(Node.core_fields()) | set(Edge.core_fields())
    if names & core:
        raise ValueError(f"Cannot strip core fields: {sorted(names & core)}")
    nodes = [n.without(names) if names & set(n.extra) else n for n in graph.nodes()]
    edges = [e.without(names) if names & set(e.extra) else e for e in graph.edges()]
    LOG.info("Stripped attributes %s", sorted(names))
    return graph.derive(nodes=nodes, edges=edges)
