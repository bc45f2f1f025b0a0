"""metrics: topology, centrality and brokerage of a cleaned connectome."""

from .topology import path_lengths, average_distance, diameter, degrees
from .centrality import betweenness
from .holes import constraint, tie_graph
from .metricset import MetricSet, compute_metrics
