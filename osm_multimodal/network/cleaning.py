"""
Connectivity cleaning of the converted network.

Only the road part of the network (links allowing car or bus) is cleaned;
rail and other links are split off beforehand and merged back afterwards.
"""

import logging
from typing import Callable, Collection

import networkx as nx

logger = logging.getLogger(__name__)

ConnectivityReducer = Callable[[nx.MultiDiGraph], nx.MultiDiGraph]


def reduce_to_largest_strongly_connected_component(
    g: nx.MultiDiGraph,  #
) -> nx.MultiDiGraph:
    """
    Keep only the largest strongly connected component of g.

    Every node of the result can reach, and be reached from, every other
    node. Nodes and links outside the component are dropped.

    Parameters:
        g (nx.MultiDiGraph): The network to clean. It is not modified.

    Returns:
        nx.MultiDiGraph: A new graph holding the component with all node and
            link attributes. Empty if g is empty.
    """
    if g.number_of_nodes() == 0:
        return g.copy()

    largest = max(nx.strongly_connected_components(g), key=len)

    cleaned = g.subgraph(largest).copy()

    logger.info(
        f"Connectivity cleaning kept {cleaned.number_of_nodes()} of {g.number_of_nodes()} nodes "
        f"and {cleaned.number_of_edges()} of {g.number_of_edges()} links."
    )

    return cleaned


def filter_network_by_modes(
    g: nx.MultiDiGraph,  #
    modes: Collection[str],
    exclude: bool = False,
) -> nx.MultiDiGraph:
    """
    Copy the links of g that allow at least one of `modes` (or none of them,
    if exclude is True), together with their end nodes.

    Nodes without any selected link are not copied.
    """
    modes = set(modes)
    filtered = nx.MultiDiGraph(**g.graph)

    for u, v, key, data in g.edges(keys=True, data=True):
        shares_mode = not modes.isdisjoint(data["modes"])

        if shares_mode == exclude:
            continue

        for node in (u, v):
            if not filtered.has_node(node):
                filtered.add_node(node, **g.nodes[node])

        filtered.add_edge(u, v, key=key, **data)

    return filtered


def integrate_network(
    base: nx.MultiDiGraph,  #
    other: nx.MultiDiGraph,
) -> nx.MultiDiGraph:
    """
    Add the nodes and links of `other` that `base` does not have yet.

    NOTE: Mutates and returns base. Links are matched by (u, v, key).
    """
    for node, data in other.nodes(data=True):
        if not base.has_node(node):
            base.add_node(node, **data)

    for u, v, key, data in other.edges(keys=True, data=True):
        if not base.has_edge(u, v, key=key):
            base.add_edge(u, v, key=key, **data)

    return base
