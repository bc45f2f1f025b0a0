"""wormnet: Wiring diagram analysis of a nematode connectome.

Cleans a loaded neuron/synapse graph into analysis-ready snapshots and
computes topology, centrality, community and structural-hole metrics
over them, ready for rendering and statistics.

Subpackages:
    graph       Typed neuron/synapse records and the immutable Graph
    bench       Named lazy snapshots
    cleaning    Pure cleaning steps and the two analysis snapshots
    metrics     Distance, diameter, betweenness, constraint
    community   Undirected projection and greedy modularity
    export      Node/edge records and metric tables
    factology   Cached factsheets per snapshot
"""

__version__ = "0.1.0"
