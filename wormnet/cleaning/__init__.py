"""cleaning: derive analysis-ready snapshots from the loaded connectome.

Every step is a pure function from one graph to a new one.
"""

from .cleaner import (
    drop_electrical,
    simplify,
    drop_low_weight,
    remove_isolates,
    strip_attributes,
)
from .snapshots import (
    FULL_CHEMICAL,
    REDUCED_CHEMICAL,
    full_chemical,
    reduced_chemical,
    build_snapshots,
)
