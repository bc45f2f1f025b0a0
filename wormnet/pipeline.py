"""An analysis session over one loaded connectome.

Data flows one way:

    loaded Graph -> fullChemical -> reducedChemical
                        |                |
                  average distance   betweenness, constraint,
                  diameter           communities, export

Each stage is computed on first request and kept for the session.
"""

import pandas as pd

from wormnet.cleaning import FULL_CHEMICAL, REDUCED_CHEMICAL, build_snapshots
from wormnet.config import AnalysisConfig
from wormnet.export import node_records, edge_records, metrics_table
from wormnet.factology import SnapshotFacts
from wormnet.metrics import MetricSet, betweenness
from wormnet.utils import get_logger

LOG = get_logger("pipeline")

FACT_SCOPES = {
    FULL_CHEMICAL: ("structural", "topological"),
    REDUCED_CHEMICAL: ("structural", "connectomic"),
}
"""Fact categories reported for each snapshot."""


class Analysis:
    """Cleaned snapshots, metrics, communities and export for one connectome.

    Parameters
    ----------
    graph : Graph
        The connectome as loaded; never modified.
    config : AnalysisConfig, optional
    """

    def __init__(self, graph, config=None):
        self.graph = graph
        self.config = config or AnalysisConfig()
        self.snapshots = build_snapshots(graph, self.config)
        self._facts = {}
        self._metrics = None

    @classmethod
    def from_config(cls, graph, path):
        """Session configured from a YAML file."""
        return cls(graph, AnalysisConfig.from_yaml(path))

    @property
    def full_chemical(self):
        return self.snapshots[FULL_CHEMICAL].value

    @property
    def reduced_chemical(self):
        return self.snapshots[REDUCED_CHEMICAL].value

    def snapshot_facts(self, name):
        """The cached SnapshotFacts of a named snapshot."""
        if name not in self._facts:
            self._facts[name] = SnapshotFacts(self.snapshots[name].value, target=name)
        return self._facts[name]

    @property
    def metrics(self):
        """MetricSet: topology of fullChemical, centrality of reducedChemical."""
        if self._metrics is None:
            full = self.snapshot_facts(FULL_CHEMICAL)
            reduced = self.snapshot_facts(REDUCED_CHEMICAL)
            between = (reduced.betweenness if self.config.normalized
                       else betweenness(self.reduced_chemical, normalized=False))
            self._metrics = MetricSet(
                betweenness=between,
                constraint=reduced.constraint,
                average_distance=full.average_distance().value,
                diameter=full.diameter().value,
            )
            LOG.info("Metrics ready: average distance %.3f, diameter %d",
                     self._metrics.average_distance, self._metrics.diameter)
        return self._metrics

    @property
    def communities(self):
        """CommunityResult over the undirected projection of reducedChemical."""
        return self.snapshot_facts(REDUCED_CHEMICAL).communities

    def node_records(self):
        """Renderer node records for reducedChemical, sized and grouped per config."""
        config = self.config
        group = (self.communities if config.group_by == "community"
                 else config.group_by)
        return node_records(self.reduced_chemical,
                            size=self.metrics.node_metric(config.size_metric),
                            size_scale=config.size_scale,
                            group=group)

    def edge_records(self):
        """Renderer edge records for reducedChemical."""
        return edge_records(self.reduced_chemical, sigma=self.config.highlight_sigma)

    def metrics_table(self):
        """Per-neuron metrics of reducedChemical, for statistics."""
        return metrics_table(self.reduced_chemical, self.metrics, self.communities)

    def facts(self, mode="prod"):
        """Summary facts of both snapshots in one table.

        Each snapshot reports the categories of FACT_SCOPES: distances for
        fullChemical, centrality and communities for reducedChemical.
        """
        return pd.concat([self.snapshot_facts(name).to_dataframe(mode=mode, categories=scope)
                          for name, scope in FACT_SCOPES.items()],
                         ignore_index=True)

    def define(self):
        """Provenance: configuration and how each snapshot is derived."""
        return {
            "config": self.config.define(),
            "snapshots": {name: snap.define() for name, snap in self.snapshots.items()},
        }
