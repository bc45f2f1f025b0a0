"""Errors, warnings and sentinels raised by the wormnet core.

Malformed input fails fast with an exception. Conditions that concern a
single node or pair degrade gracefully: a warning for the whole call, or
the UNDEFINED sentinel in place of a value, so that a batch of metrics
never aborts because one neuron is pathological.
"""


class InvalidGraphReference(ValueError):
    """An edge names a node id that is not in the graph."""

    def __init__(self, node_id, edge=None):
        self.node_id = node_id
        self.edge = edge
        where = f" in edge {edge}" if edge is not None else ""
        super().__init__(f"Unknown node id {node_id!r}{where}")


class EmptyGraphError(ValueError):
    """A topology metric was requested on a graph with no nodes."""


class UnreachablePairSkipped(UserWarning):
    """Ordered node pairs without a path were left out of a topology metric."""


class ModularityNonConvergence(UserWarning):
    """No merge improves modularity, so every node stays a singleton."""


class UndefinedConstraint:
    """Marker for a node whose structural-hole constraint is undefined.

    Burt's constraint needs at least two distinct contacts. Nodes with
    fewer carry this marker instead of a number. There is exactly one
    instance, UNDEFINED, and it is falsy.
    """

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNDEFINED"

    def __bool__(self):
        return False

    def __reduce__(self):
        return (UndefinedConstraint, ())


UNDEFINED = UndefinedConstraint()


def is_undefined(value):
    """True if value is the UNDEFINED sentinel."""
    return value is UNDEFINED
