"""Community structure by greedy modularity maximization.

Clauset-Newman-Moore agglomeration over an undirected weighted graph:
every neuron starts alone, and the pair of adjacent communities whose
merge raises modularity the most is merged, until no merge helps. The
merge sequence is networkx's; this module records modularity after each
merge and keeps the best partition seen.

A merge must raise modularity by more than DQ_TOLERANCE to be taken, so
that rounding noise on a zero gain does not count as an improvement.

Ties between equally good merges are resolved by networkx, which takes
the smallest (u, v) pair of community keys, a community being keyed by
one of its member node ids. A run is therefore reproducible, and node
ids must be mutually orderable. On graphs with symmetric structure a
different (equally valid) tie rule would return a different partition.
"""

import warnings
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple

import networkx as nx
from networkx.algorithms.community.modularity_max import (
    _greedy_modularity_communities_generator,
)

from wormnet.bench import evaluate_snapshots
from wormnet.community.projection import symmetrize
from wormnet.errors import ModularityNonConvergence
from wormnet.utils import get_logger

LOG = get_logger("community")

DQ_TOLERANCE = 1e-12
"""Merges must raise modularity by more than this."""


@dataclass(frozen=True)
class CommunityResult:
    """A partition of neurons into communities.

    Attributes
    ----------
    assignment : mapping
        node id -> community id. Ids run 0..k-1 by decreasing community
        size and are only meaningful within one run.
    modularity : float
        Q of this partition.
    history : tuple of float
        Q before any merge, then after each merge.
    converged : bool
        False if no merge improved modularity at all.
    """
    assignment: Mapping[Any, int] = field(default_factory=dict)
    modularity: float = 0.0
    history: Tuple[float, ...] = ()
    converged: bool = True

    def __post_init__(self):
        object.__setattr__(self, "assignment", MappingProxyType(dict(self.assignment)))
        object.__setattr__(self, "history", tuple(self.history))

    @property
    def n_communities(self):
        return len(set(self.assignment.values()))

    def members(self):
        """community id -> list of node ids."""
        groups = {}
        for node_id, community in self.assignment.items():
            groups.setdefault(community, []).append(node_id)
        return dict(sorted(groups.items()))

    def sizes(self):
        """community id -> number of neurons."""
        return {c: len(m) for c, m in self.members().items()}


@evaluate_snapshots
def modularity(graph, assignment):
    """Weighted modularity Q of a partition.

    Q = (1/2m) sum_ij (A_ij - k_i k_j / 2m) [c_i == c_j], over the
    undirected projection of graph. An edgeless graph has Q = 0.

    Raises
    ------
    ValueError
        If assignment does not cover every node.
    """
    missing = [n for n in graph.node_ids() if n not in assignment]
    if missing:
        raise ValueError(f"{len(missing)} nodes have no community, e.g. {missing[0]!r}")

    view = graph.to_networkx(directed=False)
    if view.size(weight="weight") == 0:
        return 0.0
    groups = {}
    for node_id in graph.node_ids():
        groups.setdefault(assignment[node_id], set()).add(node_id)
    return float(nx.community.modularity(view, groups.values(), weight="weight"))


def _relabel(partition, node_ids):
    """Community ids 0..k-1 by decreasing size, then lowest member position."""
    position = {node_id: i for i, node_id in enumerate(node_ids)}
    ordered = sorted((sorted(members, key=position.__getitem__) for members in partition),
                     key=lambda members: (-len(members), position[members[0]]))
    community_of = {n: cid for cid, members in enumerate(ordered) for n in members}
    return {n: community_of[n] for n in node_ids}


def _singletons(node_ids, converged):
    return CommunityResult({n: i for i, n in enumerate(node_ids)}, 0.0, (0.0,), converged)


@evaluate_snapshots
def greedy_modularity(projection):
    """Partition an undirected weighted graph by greedy modularity merging.

    With e_ij the fraction of total edge weight between communities i
    and j (each direction counted once) and a_i the fraction of edge
    ends in i, merging i and j changes modularity by
    dQ = 2 (e_ij - a_i a_j). Each step merges the adjacent pair with the
    greatest dQ. Merging stops when no pair gives dQ > DQ_TOLERANCE or
    a single community is left. The partition with the highest Q seen
    along the way is returned.

    Parameters
    ----------
    projection : Graph
        Undirected graph, e.g. from symmetrize().

    Returns
    -------
    CommunityResult

    Warns
    -----
    ModularityNonConvergence
        If not even the first merge improves modularity; every neuron is
        then its own community.
    """
    if projection.directed:
        raise ValueError("greedy_modularity needs an undirected graph; "
                         "use detect_communities or symmetrize first")
    node_ids = projection.node_ids()
    n = len(node_ids)
    if n == 0:
        return CommunityResult({}, 0.0, (0.0,), True)

    view = projection.to_networkx()
    if view.size(weight="weight") == 0:
        warnings.warn(ModularityNonConvergence(
            f"No edges among {n} neurons; returning singleton communities"),
            stacklevel=2)
        return _singletons(node_ids, converged=False)

    steps = _greedy_modularity_communities_generator(view, weight="weight")
    partition = [set(c) for c in next(steps)]
    q = nx.community.modularity(view, partition, weight="weight")
    history = [q]
    best_q, best_partition = q, partition

    # the generator alternates: gain of the next merge, then the partition after it
    for dq in steps:
        if dq <= DQ_TOLERANCE:
            break
        partition = [set(c) for c in next(steps)]
        q = nx.community.modularity(view, partition, weight="weight")
        history.append(q)
        if q > best_q:
            best_q, best_partition = q, partition

    converged = len(history) > 1
    if not converged:
        warnings.warn(ModularityNonConvergence(
            f"No merge improves modularity among {n} neurons; "
            "returning singleton communities"), stacklevel=2)

    result = CommunityResult(_relabel(best_partition, node_ids), float(best_q),
                             history, converged)
    LOG.info("Greedy modularity: %d merges, %d communities, Q = %.4f",
             len(history) - 1, result.n_communities, best_q)
    return result


@evaluate_snapshots
def detect_communities(graph):
    """Communities of a directed connectome: symmetrize, then greedy_modularity."""
    return greedy_modularity(symmetrize(graph) if graph.directed else graph)
