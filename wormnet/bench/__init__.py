"""bench: Named graph snapshots for the analysis session.

The central abstraction: a Snapshot is a named, immutable graph. A
DerivedSnapshot computes itself lazily from its inputs and records how
it was made. The @evaluate_snapshots decorator lets analysis functions
accept either a raw Graph or a Snapshot transparently.
"""

from .snapshot import (
    Snapshot,
    DerivedSnapshot,
    evaluate_snapshots,
)
