"""Factology: structured factsheets for connectome snapshots.

A Factology gathers the Facts defined on it into a list or a table.
SnapshotFacts is the concrete factsheet for one cleaned snapshot, and
also the place where that snapshot's metrics are computed once and kept.
"""

from abc import ABC
from functools import cached_property

import numpy as np
import pandas as pd

from wormnet.community import detect_communities
from wormnet.errors import is_undefined
from wormnet.factology.fact import FACT_CATEGORIES, fact, structural, topological, connectomic
from wormnet.graph import Role
from wormnet.metrics import path_lengths, betweenness, constraint
from wormnet.utils import get_logger

LOG = get_logger("factology")


class Factology(ABC):
    """Abstract base: a collection of Facts about a subject.

    Subclasses define measurement methods decorated with @fact, and
    a category (@structural, @topological or @connectomic). The
    .collect() method gathers them, optionally only some categories.
    """

    def __init__(self, graph, target=None):
        """
        Parameters
        ----------
        graph : Graph
            The snapshot measured.
        target : str, optional
            Name of the snapshot (e.g., "reducedChemical").
        """
        self.graph = graph
        self.target = target
        self._structural_facts = []
        self._topological_facts = []
        self._connectomic_facts = []

    @classmethod
    def fact_methods(cls, categories=None):
        """List the methods decorated with @fact.

        Parameters
        ----------
        categories : iterable of str, optional
            Only methods registered under one of these categories.
            Default: every fact method.
        """
        names = [name for name in dir(cls)
                 if hasattr(getattr(cls, name, None), '__defines_a_fact__')]
        if categories is None:
            return names
        wanted = set(categories)
        unknown = wanted.difference(FACT_CATEGORIES)
        if unknown:
            raise ValueError(f"Unknown fact categories {sorted(unknown)}")
        return [name for name in names
                if getattr(getattr(cls, name), '__fact_type__', None) in wanted]

    def collect(self, mode="prod", categories=None):
        """Collect the defined facts.

        Parameters
        ----------
        mode : str
            "prod" raises on errors; "dev" tolerates and logs them.
        categories : iterable of str, optional
            Only facts of these categories; default all of them.

        Returns
        -------
        list of Fact
        """
        results = []
        for method_name in self.fact_methods(categories):
            try:
                results.append(getattr(self, method_name)())
            except Exception as e:
                if mode == "prod":
                    raise
                LOG.warning("Skipping fact '%s': %s", method_name, e)
        return results

    def collect_dicts(self, mode="prod", categories=None):
        """Collect facts as a list of dicts (for JSON/DataFrame export)."""
        return [f.to_dict() for f in self.collect(mode=mode, categories=categories)]

    def to_dataframe(self, mode="prod", categories=None):
        """Collect facts into a DataFrame, one row per fact."""
        frame = pd.DataFrame(self.collect_dicts(mode=mode, categories=categories))
        if self.target is not None:
            frame.insert(0, "snapshot", self.target)
        return frame


class SnapshotFacts(Factology):
    """Factsheet for one connectome snapshot.

    Metrics are computed on first use and kept for the life of the
    object; the snapshot itself never changes.
    """

    # -- cached computations ---------------------------------------------------

    @cached_property
    def path_lengths(self):
        return path_lengths(self.graph)

    @cached_property
    def betweenness(self):
        return betweenness(self.graph, directed=True, normalized=True)

    @cached_property
    def constraint(self):
        return constraint(self.graph)

    @cached_property
    def communities(self):
        return detect_communities(self.graph)

    # -- structural facts --------------------------------------------------------

    @structural
    @fact("Neuron count", "neurons")
    def neuron_count(self):
        """Number of neurons in the snapshot."""
        return self.graph.n_nodes

    @structural
    @fact("Synapse count", "edges")
    def synapse_count(self):
        """Number of edges in the snapshot."""
        return self.graph.n_edges

    @structural
    @fact("Total contacts", "contacts")
    def total_weight(self):
        """Sum of edge weights."""
        return float(sum(e.weight for e in self.graph.edges()))

    @structural
    @fact("Role breakdown", "neurons")
    def role_breakdown(self):
        """Neuron counts by role."""
        counts = {role.value: 0 for role in Role}
        for node in self.graph.nodes():
            counts[node.role.value] += 1
        return counts

    # -- topological facts -------------------------------------------------------

    @topological
    @fact("Average distance", "hops")
    def average_distance(self):
        """Mean shortest-path length over reachable ordered pairs."""
        lengths = self.path_lengths
        return float(lengths.mean()) if lengths.size else float("nan")

    @topological
    @fact("Diameter", "hops")
    def diameter(self):
        """Longest finite shortest path."""
        lengths = self.path_lengths
        return int(lengths.max()) if lengths.size else 0

    # -- connectomic facts -------------------------------------------------------

    @connectomic
    @fact("Mean betweenness", None)
    def mean_betweenness(self):
        """Mean normalized directed betweenness."""
        values = list(self.betweenness.values())
        return float(np.mean(values)) if values else float("nan")

    @connectomic
    @fact("Undefined constraint", "neurons")
    def undefined_constraint(self):
        """Neurons with fewer than two contacts, whose constraint is undefined."""
        return sum(1 for v in self.constraint.values() if is_undefined(v))

    @connectomic
    @fact("Community count", "communities")
    def community_count(self):
        """Number of communities found by greedy modularity."""
        return self.communities.n_communities

    @connectomic
    @fact("Modularity", None)
    def modularity(self):
        """Modularity Q of the greedy partition."""
        return self.communities.modularity
