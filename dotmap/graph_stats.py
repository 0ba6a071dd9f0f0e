"""
Diagram statistics computed with NetworkX.

The snapshot is loaded into an undirected ``nx.Graph`` (connections have no
direction; dot ``direction`` is only a heading) and summarized for the
statistics panel:

  {
    "dots": 4,
    "connections": 2,
    "groups": 2,          # connected components, isolated dots included
    "isolated": 1,        # dots without any connection
    "max_degree": 2
  }
"""

from typing import Any, Dict

import networkx as nx

from dotmap.models import Snapshot


def build_graph(snapshot: Snapshot) -> nx.Graph:
    """Load dots as nodes and connections as edges. Dangling edges are skipped."""
    G = nx.Graph()
    for dot in snapshot.dots:
        G.add_node(dot.id, x=dot.x, y=dot.y, direction=dot.direction, label=dot.label)
    for conn in snapshot.connections:
        if conn.source_id in G.nodes and conn.target_id in G.nodes:
            G.add_edge(conn.source_id, conn.target_id, id=conn.id, style=conn.style)
    return G


def diagram_stats(snapshot: Snapshot) -> Dict[str, Any]:
    G = build_graph(snapshot)
    degrees = [deg for _, deg in G.degree()]
    return {
        'dots': G.number_of_nodes(),
        'connections': G.number_of_edges(),
        'groups': nx.number_connected_components(G) if G.number_of_nodes() else 0,
        'isolated': nx.number_of_isolates(G),
        'max_degree': max(degrees) if degrees else 0,
    }


def neighbors(snapshot: Snapshot, dot_id: str) -> list:
    """Ids of dots connected to ``dot_id``, in connection order."""
    G = build_graph(snapshot)
    if dot_id not in G:
        return []
    return list(G.neighbors(dot_id))
