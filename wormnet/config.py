"""Configuration of a connectome analysis session.

One AnalysisConfig fixes every choice the pipeline makes: how duplicate
synapses are merged, which weak synapses are dropped, which annotations
are stripped as noise, and how metrics are projected for rendering.
It can be written by hand or read from a YAML file:

    weight_threshold: 1
    merge_policy: first
    size_metric: betweenness
    size_scale: 100
    group_by: community
"""

from dataclasses import dataclass, fields, asdict
from pathlib import Path

import yaml

from wormnet.utils import get_logger

LOG = get_logger("config")


MERGE_POLICIES = ("first", "sum", "max")
SIZE_METRICS = ("betweenness", "constraint")


@dataclass(frozen=True)
class AnalysisConfig:
    """Choices for one analysis session.

    Parameters
    ----------
    weight_threshold : float
        Synapses with weight <= this are dropped from reducedChemical.
    merge_policy : str
        How simplify merges same-direction duplicate synapses:
        "first" keeps the first weight seen, "sum" adds, "max" keeps
        the largest.
    strip_attributes : tuple of str
        Extension attributes removed before analysis.
    normalized : bool
        Normalize betweenness by (n-1)(n-2).
    size_metric : str
        Metric that sizes exported nodes.
    size_scale : float
        Multiplier applied to size_metric.
    group_by : str
        "community", or a node attribute name such as "cell_class".
    highlight_sigma : float
        Edges heavier than mean + highlight_sigma * std are highlighted.
    """

    weight_threshold: float = 1.0
    merge_policy: str = "first"
    strip_attributes: tuple = ("neurotransmitter",)
    normalized: bool = True
    size_metric: str = "betweenness"
    size_scale: float = 1.0
    group_by: str = "community"
    highlight_sigma: float = 2.0

    def __post_init__(self):
        if self.merge_policy not in MERGE_POLICIES:
            raise ValueError(
                f"merge_policy must be one of {MERGE_POLICIES}, got {self.merge_policy!r}")
        if self.size_metric not in SIZE_METRICS:
            raise ValueError(
                f"size_metric must be one of {SIZE_METRICS}, got {self.size_metric!r}")
        if self.weight_threshold < 0:
            raise ValueError("weight_threshold must be non-negative")
        if self.highlight_sigma < 0:
            raise ValueError("highlight_sigma must be non-negative")
        if isinstance(self.strip_attributes, str):
            object.__setattr__(self, "strip_attributes", (self.strip_attributes,))
        else:
            object.__setattr__(self, "strip_attributes", tuple(self.strip_attributes))

    @classmethod
    def from_dict(cls, data):
        """Build from a mapping, rejecting unknown keys."""
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path):
        """Read a configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration not found: {path}")
        LOG.info("Loading analysis configuration from %s", path)
        with open(path, "r") as f:
            return cls.from_dict(yaml.safe_load(f))

    def to_yaml(self, path):
        """Write this configuration to a YAML file."""
        data = self.define()
        with open(path, "w") as f:
            yaml.safe_dump(data, f, sort_keys=False)

    def define(self):
        """Plain-dict form, for provenance."""
        data = asdict(self)
        data["strip_attributes"] = list(self.strip_attributes)
        return data
