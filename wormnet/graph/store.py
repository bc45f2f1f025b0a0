"""The in-memory wiring diagram: an immutable directed weighted multigraph.

A Graph is populated once from typed records handed over by an external
loader and is never mutated afterwards. Cleaning steps derive new graphs
from it instead (see wormnet.cleaning).
"""

from types import MappingProxyType

import networkx as nx
import numpy as np
import pandas as pd
from scipy import sparse

from wormnet.errors import InvalidGraphReference
from wormnet.graph.records import Node, Edge
from wormnet.utils import get_logger

LOG = get_logger("graph.store")


class Graph:
    """Nodes, an edge sequence that may hold duplicates, and a directedness flag.

    Edge ids are positions in the edge sequence. Adjacency is indexed in
    both directions so that in-degree and out-degree stay distinguishable.

    Parameters
    ----------
    nodes : iterable of Node or mapping
    edges : iterable of Edge or mapping
    directed : bool
    """

    def __init__(self, nodes, edges, directed=True):
        node_map = {}
        for node in nodes:
            if not isinstance(node, Node):
                node = Node.from_mapping(node)
            if node.id in node_map:
                raise ValueError(f"Duplicate node id {node.id!r}")
            node_map[node.id] = node

        out_adj = {node_id: [] for node_id in node_map}
        in_adj = {node_id: [] for node_id in node_map}
        edge_list = []
        for edge in edges:
            if not isinstance(edge, Edge):
                edge = Edge.from_mapping(edge)
            for end in (edge.pre, edge.post):
                if end not in node_map:
                    raise InvalidGraphReference(end, (edge.pre, edge.post))
            out_adj[edge.pre].append(len(edge_list))
            in_adj[edge.post].append(len(edge_list))
            edge_list.append(edge)

        self._nodes = MappingProxyType(node_map)
        self._edges = tuple(edge_list)
        self._out = MappingProxyType({k: tuple(v) for k, v in out_adj.items()})
        self._in = MappingProxyType({k: tuple(v) for k, v in in_adj.items()})
        self._directed = bool(directed)
        self._index = None

    @property
    def directed(self):
        return self._directed

    @property
    def n_nodes(self):
        return len(self._nodes)

    @property
    def n_edges(self):
        return len(self._edges)

    def __len__(self):
        return len(self._nodes)

    def __contains__(self, node_id):
        return node_id in self._nodes

    def __repr__(self):
        kind = "directed" if self._directed else "undirected"
        return f"<Graph {kind}: {self.n_nodes} nodes, {self.n_edges} edges>"

    # -- access ---------------------------------------------------------------

    def nodes(self):
        """All node records, in insertion order."""
        return tuple(self._nodes.values())

    def node_ids(self):
        return tuple(self._nodes)

    def edges(self):
        """All edge records; an edge's id is its position here."""
        return self._edges

    def node(self, node_id):
        try:
            return self._nodes[node_id]
        except KeyError:
            raise KeyError(f"No node with id {node_id!r}")

    def edge(self, edge_id):
        try:
            return self._edges[edge_id]
        except IndexError:
            raise KeyError(f"No edge with id {edge_id!r}")

    def out_edges(self, node_id):
        """Ids of edges leaving node_id."""
        self.node(node_id)
        return self._out[node_id]

    def in_edges(self, node_id):
        """Ids of edges arriving at node_id."""
        self.node(node_id)
        return self._in[node_id]

    def node_attribute(self, node_id, key):
        return self.node(node_id).get(key)

    def edge_attribute(self, edge_id, key):
        return self.edge(edge_id).get(key)

    def out_degree(self, node_id):
        return len(self.out_edges(node_id))

    def in_degree(self, node_id):
        return len(self.in_edges(node_id))

    def degree(self, node_id):
        """Total degree, in plus out; a self-loop counts twice."""
        return self.in_degree(node_id) + self.out_degree(node_id)

    def successors(self, node_id):
        """Distinct targets of edges leaving node_id, in edge order."""
        return tuple(dict.fromkeys(self._edges[e].post for e in self.out_edges(node_id)))

    def predecessors(self, node_id):
        """Distinct sources of edges arriving at node_id, in edge order."""
        return tuple(dict.fromkeys(self._edges[e].pre for e in self.in_edges(node_id)))

    # -- numerical views -----------------------------------------------------

    def index(self):
        """Mapping node id -> dense position [0, n_nodes)."""
        if self._index is None:
            self._index = MappingProxyType(
                {node_id: i for i, node_id in enumerate(self._nodes)})
        return self._index

    def weight_matrix(self, binary=False):
        """Sparse n x n adjacency, parallel edges summed.

        Entry (i, j) holds the total weight from node i to node j. An
        undirected graph yields a symmetric matrix. With binary=True each
        edge contributes 1 regardless of its weight.
        """
        n = self.n_nodes
        index = self.index()
        rows = np.fromiter((index[e.pre] for e in self._edges), dtype=int,
                           count=self.n_edges)
        cols = np.fromiter((index[e.post] for e in self._edges), dtype=int,
                           count=self.n_edges)
        if binary:
            data = np.ones(self.n_edges)
        else:
            data = np.fromiter((e.weight for e in self._edges), dtype=float,
                               count=self.n_edges)
        if not self._directed:
            loops = rows == cols
            rows, cols = (np.concatenate([rows, cols[~loops]]),
                          np.concatenate([cols, rows[~loops]]))
            data = np.concatenate([data, data[~loops]])
        matrix = sparse.coo_matrix((data, (rows, cols)), shape=(n, n))
        return matrix.tocsr()

    def to_networkx(self, directed=None):
        """A simple networkx graph over the same node ids.

        Parallel edges are summed into one edge with a "weight"
        attribute, and self-loops are left out. With directed=False a
        directed graph is projected: u->v and v->u add up to one
        undirected edge. directed=True on an undirected graph is
        ignored.

        Returns
        -------
        nx.DiGraph or nx.Graph
        """
        directed = self._directed if directed is None else (directed and self._directed)
        view = nx.DiGraph() if directed else nx.Graph()
        view.add_nodes_from(self._nodes)
        for edge in self._edges:
            if edge.is_loop:
                continue
            if view.has_edge(edge.pre, edge.post):
                view[edge.pre][edge.post]["weight"] += edge.weight
            else:
                view.add_edge(edge.pre, edge.post, weight=edge.weight)
        return view

    # -- derivation ------------------------------------------------------------

    def derive(self, nodes=None, edges=None):
        """A new Graph of the same directedness with replaced nodes and/or edges."""
        return Graph(self.nodes() if nodes is None else nodes,
                     self._edges if edges is None else edges,
                     directed=self._directed)


def load(nodes, edges, directed=True):
    """Populate a Graph from typed node and edge records.

    Parameters
    ----------
    nodes : iterable of Node or mapping
        Neurons. Mappings are converted with Node.from_mapping.
    edges : iterable of Edge or mapping
        Synapses. Mappings are converted with Edge.from_mapping.
    directed : bool
        Whether edges are directed.

    Returns
    -------
    Graph

    Raises
    ------
    InvalidGraphReference
        If an edge names a node id that is not among the nodes.
    """
    graph = Graph(nodes, edges, directed=directed)
    LOG.info("Loaded %d neurons, %d synapse records (%s)",
             graph.n_nodes, graph.n_edges,
             "directed" if graph.directed else "undirected")
    return graph


def from_frames(nodes, edges, directed=True):
    """Populate a Graph from node and edge tables.

    Parameters
    ----------
    nodes : pd.DataFrame
        One row per neuron, with columns id, cell_name, cell_class,
        soma_pos and role. Other columns become extension attributes;
        missing values there are dropped.
    edges : pd.DataFrame
        One row per synapse record, with columns pre, post, synapse_type
        and weight.

    Returns
    -------
    Graph
    """
    def _records(frame):
        for row in frame.to_dict(orient="records"):
            yield {k: v for k, v in row.items() if not _is_missing(v)}

    return load(_records(nodes), _records(edges), directed=directed)


def to_frames(graph):
    """The node and edge tables of a Graph.

    Returns
    -------
    tuple of pd.DataFrame
        (nodes, edges). Enumerated fields are rendered by value.
    """
    node_rows = []
    for node in graph.nodes():
        row = {"id": node.id, "cell_name": node.cell_name,
               "cell_class": node.cell_class, "soma_pos": node.soma_pos,
               "role": node.role.value}
        row.update(node.extra)
        node_rows.append(row)
    edge_rows = []
    for edge in graph.edges():
        row = {"pre": edge.pre, "post": edge.post,
               "synapse_type": edge.synapse_type.value, "weight": edge.weight}
        row.update(edge.extra)
        edge_rows.append(row)
    node_columns = ["id", "cell_name", "cell_class", "soma_pos", "role"]
    edge_columns = ["pre", "post", "synapse_type", "weight"]
    return (pd.DataFrame(node_rows, columns=None if node_rows else node_columns),
            pd.DataFrame(edge_rows, columns=None if edge_rows else edge_columns))


def _is_missing(value):
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
