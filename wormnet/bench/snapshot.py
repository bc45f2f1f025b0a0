"""Named, lazy, immutable graph snapshots and the @evaluate_snapshots decorator.

A Snapshot is a named graph. A DerivedSnapshot knows which snapshots it
is computed from and how, computes itself on first access, and keeps the
result for the rest of the session. The @evaluate_snapshots decorator
lets analysis functions accept either a Graph or a Snapshot.
"""

from dataclasses import dataclass, field
from functools import wraps
from typing import Callable

from wormnet.utils import get_logger

LOG = get_logger("snapshot")


def _describe(value):
    """Node and edge counts of a graph, for provenance; None for other values."""
    if hasattr(value, "n_nodes") and hasattr(value, "n_edges"):
        return {"nodes": value.n_nodes, "edges": value.n_edges}
    return None


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

@dataclass
class Snapshot:
    """A named graph held in memory for the session.

    Parameters
    ----------
    name : str
        Name used downstream (e.g. "fullChemical").
    description : str, optional
        What this snapshot contains.
    """

    name: str
    description: str = None

    def define(self):
        """Serializable definition of this snapshot, for provenance.

        Once the snapshot holds a graph, its node and edge counts are
        included under "graph".
        """
        definition = {
            "class": type(self).__qualname__,
            "name": self.name,
            "description": self.description or "Not provided",
        }
        if self.is_evaluated and _describe(self._value) is not None:
            definition["graph"] = _describe(self._value)
        return definition

    @property
    def value(self):
        """The snapshot's graph."""
        if not self.is_evaluated:
            raise RuntimeError(
                f"Snapshot '{self.name}' holds no graph. "
                "Attach one with .with_data(graph), or use a DerivedSnapshot.")
        return self._value

    @property
    def is_evaluated(self):
        return "_value" in self.__dict__

    def with_data(self, graph):
        """Attach an in-memory graph, once. Returns self for chaining."""
        if self.is_evaluated:
            raise RuntimeError(f"Snapshot '{self.name}' already holds a graph")
        self._value = graph
        return self


# ---------------------------------------------------------------------------
# DerivedSnapshot
# ---------------------------------------------------------------------------

@dataclass
class DerivedSnapshot(Snapshot):
    """A snapshot computed from other snapshots or graphs.

    Parameters
    ----------
    inputs : list of Snapshot or Graph
        What this computation depends on, passed positionally.
    computation : callable
        Takes the input graphs and returns the derived graph.
    params : dict, optional
        Keyword arguments for the computation.
    """

    inputs: list = field(default_factory=list)
    computation: Callable = None
    params: dict = field(default_factory=dict)

    def generate(self):
        """Run the computation and keep its result."""
        if self.computation is None:
            raise ValueError(f"No computation defined for snapshot '{self.name}'")

        args = [inp.value if isinstance(inp, Snapshot) else inp for inp in self.inputs]
        self._value = self.computation(*args, **self.params)
        size = _describe(self._value)
        if size is not None:
            LOG.info("Snapshot '%s': %d nodes, %d edges",
                     self.name, size["nodes"], size["edges"])
        return self._value

    @property
    def value(self):
        """Computed on first access, then reused."""
        if self.is_evaluated:
            return self._value
        return self.generate()

    def define(self):
        definition = super().define()
        definition["inputs"] = [
            inp.define() if isinstance(inp, Snapshot) else repr(inp)
            for inp in self.inputs
        ]
        computation = self.computation
        definition["computation"] = (
            f"{computation.__module__}.{computation.__qualname__}"
            if hasattr(computation, "__qualname__") else str(computation))
        definition["params"] = dict(self.params)
        return definition


# ---------------------------------------------------------------------------
# @evaluate_snapshots
# ---------------------------------------------------------------------------

def evaluate_snapshots(method):
    """Decorator: replace Snapshot arguments with their graph before calling.

    Positional and keyword arguments are both unwrapped. Anything that is
    not a Snapshot passes through unchanged, so decorated functions
    accept plain graphs as well.
    """
    def _unwrap(arg):
        return arg.value if isinstance(arg, Snapshot) else arg

    @wraps(method)
    def wrapper(*args, **kwargs):
        return method(*map(_unwrap, args),
                      **{key: _unwrap(value) for key, value in kwargs.items()})

    return wrapper
