"""factology: Structured measurements of connectome snapshots.

Every measurement is a Fact: a named, described, typed value. A Factology
is a collection of Facts about a subject (here, a cleaned snapshot).
"""

from .fact import Fact, fact, structural, topological, connectomic
from .factology import Factology, SnapshotFacts
