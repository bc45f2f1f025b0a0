"""export: project graph and metrics into records for rendering and statistics."""

from .records import (
    ROLE_COLORS,
    node_records,
    edge_records,
    highlight_threshold,
    to_frames,
)
from .tables import metrics_table
