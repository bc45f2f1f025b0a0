"""Typed node and edge records of a neuronal wiring diagram.

Each record has fixed core fields that every neuron or synapse carries,
plus a small extension map for optional annotations such as the
neurotransmitter. Both are validated when the record is built and never
change afterwards.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from numbers import Real
from types import MappingProxyType
from typing import Any, Hashable, Mapping


class Role(Enum):
    """Functional role of a neuron."""
    SENSORY = "Sensory"
    MOTOR = "Motor"
    INTER = "Inter"


class SynapseType(Enum):
    """Kind of synaptic contact."""
    ELECTRICAL = "Electrical"
    CHEMICAL = "Chemical"


EXTRA_TYPES = (str, Real, Enum)
"""Value types allowed in a record's extension map."""

MAX_EXTRA = 16
"""Upper bound on the number of extension attributes per record."""


def _coerce_enum(enum_cls, value, what):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise ValueError(f"Invalid {what} {value!r}; expected one of {allowed}")


def _freeze_extra(extra, core_names):
    extra = dict(extra or {})
    if len(extra) > MAX_EXTRA:
        raise ValueError(
            f"Too many extension attributes ({len(extra)} > {MAX_EXTRA})")
    for key, value in extra.items():
        if not isinstance(key, str):
            raise ValueError(f"Attribute names must be strings, got {key!r}")
        if key in core_names:
            raise ValueError(f"'{key}' is a core field, not an extension attribute")
        if value is not None and not isinstance(value, EXTRA_TYPES):
            raise ValueError(
                f"Attribute '{key}' has unsupported type {type(value).__name__}")
    return MappingProxyType(extra)


class _Record:
    """Attribute lookup shared by nodes and edges."""

    @classmethod
    def core_fields(cls):
        return tuple(f.name for f in fields(cls) if f.name != "extra")

    def get(self, key):
        """Value of a core field or an extension attribute.

        Raises
        ------
        KeyError
            If the record has no attribute with that name.
        """
        if key in self.core_fields():
            return getattr(self, key)
        try:
            return self.extra[key]
        except KeyError:
            raise KeyError(f"{type(self).__name__} has no attribute '{key}'")

    def without(self, names):
        """A copy of this record with the named extension attributes removed."""
        kept = {k: v for k, v in self.extra.items() if k not in names}
        values = {name: getattr(self, name) for name in self.core_fields()}
        return type(self)(**values, extra=kept)


@dataclass(frozen=True)
class Node(_Record):
    """A neuron.

    Attributes
    ----------
    id : hashable
        Unique identifier.
    cell_name : str
        Neuron name (e.g. "AVAL").
    cell_class : str
        Neuron class grouping left/right homologues (e.g. "AVA").
    soma_pos : float
        Normalized cell body position along the body axis, in [0, 1].
    role : Role
        Sensory, motor or interneuron.
    extra : mapping
        Optional extension attributes, such as "neurotransmitter".
    """
    id: Hashable
    cell_name: str
    cell_class: str
    soma_pos: float
    role: Role
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.soma_pos, Real) or isinstance(self.soma_pos, bool):
            raise ValueError(f"Node {self.id!r}: soma_pos must be a real number")
        if not 0.0 <= self.soma_pos <= 1.0:
            raise ValueError(
                f"Node {self.id!r}: soma_pos {self.soma_pos} outside [0, 1]")
        object.__setattr__(self, "soma_pos", float(self.soma_pos))
        object.__setattr__(self, "role", _coerce_enum(Role, self.role, "role"))
        object.__setattr__(self, "cell_name", str(self.cell_name))
        object.__setattr__(self, "cell_class", str(self.cell_class))
        object.__setattr__(self, "extra",
                           _freeze_extra(self.extra, self.core_fields()))

    @classmethod
    def from_mapping(cls, data):
        """Build a Node from a flat mapping; unknown keys become extension attributes."""
        data = dict(data)
        core = {name: data.pop(name) for name in cls.core_fields() if name in data}
        extra = dict(data.pop("extra", None) or {})
        extra.update(data)
        return cls(**core, extra=extra)


@dataclass(frozen=True)
class Edge(_Record):
    """A synaptic connection from `pre` to `post`.

    The weight counts physical contacts and is never negative.
    """
    pre: Hashable
    post: Hashable
    synapse_type: SynapseType
    weight: float
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.weight, Real) or isinstance(self.weight, bool):
            raise ValueError(f"Edge {self.pre!r}->{self.post!r}: weight must be numeric")
        if not self.weight >= 0:
            raise ValueError(
                f"Edge {self.pre!r}->{self.post!r}: weight {self.weight} is not >= 0")
        object.__setattr__(self, "weight", float(self.weight))
        object.__setattr__(self, "synapse_type",
                           _coerce_enum(SynapseType, self.synapse_type, "synapse_type"))
        object.__setattr__(self, "extra",
                           _freeze_extra(self.extra, self.core_fields()))

    @property
    def is_loop(self):
        return self.pre == self.post

    def with_weight(self, weight):
        """A copy of this edge carrying a different weight."""
        return Edge(self.pre, self.post, self.synapse_type, weight, extra=self.extra)

    @classmethod
    def from_mapping(cls, data):
        """Build an Edge from a flat mapping; unknown keys become extension attributes."""
        data = dict(data)
        core = {name: data.pop(name) for name in cls.core_fields() if name in data}
        extra = dict(data.pop("extra", None) or {})
        extra.update(data)
        return cls(**core, extra=extra)
