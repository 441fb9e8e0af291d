import networkx as nx

from osm_multimodal.network.cleaning import (
    filter_network_by_modes,
    integrate_network,
    reduce_to_largest_strongly_connected_component,
)


def _network(edges):
    g = nx.MultiDiGraph(name="test")

    for u, v, key, modes in edges:
        for node in (u, v):
            g.add_node(node, x=float(node), y=0.0)
        g.add_edge(u, v, key=key, id=key, modes=frozenset(modes), length=1.0)

    return g


def test_largest_strongly_connected_component():
    g = _network(
        [
            (1, 2, 1, {"car"}),
            (2, 3, 2, {"car"}),
            (3, 1, 3, {"car"}),
            (3, 4, 4, {"car"}),
            (5, 6, 5, {"car"}),
            (6, 5, 6, {"car"}),
        ]
    )

    cleaned = reduce_to_largest_strongly_connected_component(g)

    assert set(cleaned.nodes) == {1, 2, 3}
    assert sorted(k for _, _, k in cleaned.edges(keys=True)) == [1, 2, 3]
    assert cleaned.nodes[2] == {"x": 2.0, "y": 0.0}
    # input untouched
    assert g.number_of_nodes() == 6


def test_reducing_an_empty_network():
    cleaned = reduce_to_largest_strongly_connected_component(nx.MultiDiGraph())

    assert cleaned.number_of_nodes() == 0


def test_filter_network_by_modes():
    g = _network(
        [
            (1, 2, 1, {"car"}),
            (2, 3, 2, {"bus", "pt"}),
            (3, 4, 3, {"rail"}),
        ]
    )

    road = filter_network_by_modes(g, {"car", "bus"})
    rest = filter_network_by_modes(g, {"car", "bus"}, exclude=True)

    assert set(road.nodes) == {1, 2, 3}
    assert sorted(k for _, _, k in road.edges(keys=True)) == [1, 2]
    assert set(rest.nodes) == {3, 4}
    assert [k for _, _, k in rest.edges(keys=True)] == [3]
    assert rest.nodes[4] == {"x": 4.0, "y": 0.0}
    assert road.graph == {"name": "test"}


def test_integrate_network_adds_only_missing_elements():
    base = _network([(1, 2, 1, {"car"})])
    other = _network([(1, 2, 1, {"rail"}), (2, 3, 5, {"rail"})])

    merged = integrate_network(base, other)

    assert merged is base
    assert set(merged.nodes) == {1, 2, 3}
    assert merged.edges[1, 2, 1]["modes"] == frozenset({"car"})
    assert merged.edges[2, 3, 5]["modes"] == frozenset({"rail"})
