"""Fact: one named, described measurement of a connectome snapshot.

A Fact carries its value together with a label, a human-readable name,
a description and a unit, so a collection of them can be tabulated
without losing what each number means.

Measurements are methods of a Factology. @fact turns a method's return
value into a Fact; @structural, @topological or @connectomic on top
files it under a category and computes it only once per instance.
"""

from collections import namedtuple
from functools import wraps

FACT_CATEGORIES = ("structural", "topological", "connectomic")


class Fact(namedtuple("Fact", ["label", "name", "description", "unit", "value"])):
    """A single measurement with its metadata.

    Fields
    ------
    label : str
        Machine-readable identifier, the name of the measuring method.
    name : str
        Human-readable name (e.g., "Diameter").
    description : str
        What was measured, taken from the method's docstring.
    unit : str or None
        Unit of measurement (e.g., "hops", "neurons", None).
    value : any
        The measured value.
    """

    def __str__(self):
        value = f"{self.value:.4g}" if isinstance(self.value, float) else self.value
        unit = f" {self.unit}" if self.unit else ""
        return f"{self.name}: {value}{unit}"

    def to_dict(self):
        """Plain dict, for tables and serialization."""
        return dict(self._asdict())


def fact(name, unit=None):
    """Decorator factory: wrap a method's return value as a Fact.

    Usage::

        @fact("Diameter", "hops")
        def diameter(self):
            '''Longest finite shortest path.'''
            return diameter(self.graph)

    Calling .diameter() then gives Fact("diameter", "Diameter",
    "Longest finite shortest path.", "hops", <value>).
    """
    def decorator(method):
        @wraps(method)
        def wrapper(self):
            return Fact(label=method.__name__,
                        name=name,
                        description=(method.__doc__ or "").strip(),
                        unit=unit,
                        value=method(self))
        wrapper.__defines_a_fact__ = True
        return wrapper
    return decorator


def _register(category):
    """Decorator for one fact category: cache per instance and record once."""
    if category not in FACT_CATEGORIES:
        raise ValueError(f"Unknown fact category {category!r}")

    def decorator(method):
        slot = f"_cached_{method.__name__}"

        @wraps(method)
        def wrapper(self):
            if slot not in self.__dict__:
                value = method(self)
                getattr(self, f"_{category}_facts").append(value)
                self.__dict__[slot] = value
            return self.__dict__[slot]

        wrapper.__defines_a_fact__ = True
        wrapper.__fact_type__ = category
        return wrapper
    return decorator


structural = _register("structural")
structural.__doc__ = """Register a fact as structural: counts of neurons, synapses, roles."""

topological = _register("topological")
topological.__doc__ = """Register a fact as topological: shortest-path distances."""

connectomic = _register("connectomic")
connectomic.__doc__ = """Register a fact as connectomic: centrality, structural holes, communities."""
