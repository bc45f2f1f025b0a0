"""The metrics of one analysis: per-neuron maps and per-graph scalars."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from wormnet.bench import evaluate_snapshots
from wormnet.errors import is_undefined
from wormnet.metrics.centrality import betweenness
from wormnet.metrics.holes import constraint
from wormnet.metrics.topology import path_lengths
from wormnet.utils import get_logger

LOG = get_logger("metrics")


@dataclass(frozen=True)
class MetricSet:
    """Computed metrics, never modified after construction.

    Attributes
    ----------
    betweenness : mapping
        node id -> normalized betweenness (reducedChemical).
    constraint : mapping
        node id -> constraint or UNDEFINED (reducedChemical).
    average_distance : float
        Mean hop count over reachable ordered pairs (fullChemical).
    diameter : int
        Largest finite hop count (fullChemical).
    """
    betweenness: Mapping[Any, float] = field(default_factory=dict)
    constraint: Mapping[Any, Any] = field(default_factory=dict)
    average_distance: float = float("nan")
    diameter: int = 0

    def __post_init__(self):
        object.__setattr__(self, "betweenness", MappingProxyType(dict(self.betweenness)))
        object.__setattr__(self, "constraint", MappingProxyType(dict(self.constraint)))

    def node_metric(self, name):
        """The per-neuron map called name ("betweenness" or "constraint")."""
        if name not in ("betweenness", "constraint"):
            raise KeyError(f"No per-neuron metric '{name}'")
        return getattr(self, name)

    def defined_constraint(self):
        """Constraint of the neurons for which it is defined."""
        return {k: v for k, v in self.constraint.items() if not is_undefined(v)}


@evaluate_snapshots
def compute_metrics(full, reduced, normalized=True):
    """Compute a MetricSet from the two cleaned snapshots.

    Parameters
    ----------
    full : Graph or Snapshot
        fullChemical, for average distance and diameter.
    reduced : Graph or Snapshot
        reducedChemical, for betweenness and constraint.
    normalized : bool
        Normalize betweenness.
    """
    lengths = path_lengths(full)
    metrics = MetricSet(
        betweenness=betweenness(reduced, directed=True, normalized=normalized),
        constraint=constraint(reduced),
        average_distance=float(lengths.mean()) if lengths.size else float("nan"),
        diameter=int(lengths.max()) if lengths.size else 0,
    )
    LOG.info("Metrics: average distance %.3f, diameter %d, %d neurons ranked",
             metrics.average_distance, metrics.diameter, len(metrics.betweenness))
    return metrics
