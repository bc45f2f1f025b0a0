"""graph: the immutable in-memory wiring diagram.

Typed neuron and synapse records, and the Graph that holds them.
"""

from .records import Node, Edge, Role, SynapseType
from .store import Graph, load, from_frames, to_frames
