from osm_multimodal.network.thinning import (
    absorb_chain_nodes,
    restore_loop_nodes,
    thin_network,
)
from osm_multimodal.network.usability import count_node_usage
from osm_multimodal.osm.model import Node


def _prepare(osm_data, report):
    count_node_usage(osm_data, report)
    return osm_data


def _used(osm_data):
    return {node_id for node_id, node in osm_data.nodes.items() if node.used}


def test_chain_collapses_to_endpoints(osm_chain, report):
    _prepare(osm_chain, report)

    thin_network(osm_chain, 500.0, report)

    assert _used(osm_chain) == {1, 3}


def test_length_bound_keeps_intermediate_node(build_osm_data, report):
    osm_data = build_osm_data(
        coords={1: (0, 0), 2: (300, 0), 3: (600, 0), 4: (900, 0)},
        ways=[(10, [1, 2, 3, 4], {"highway": "residential"})],
    )
    _prepare(osm_data, report)

    thin_network(osm_data, 500.0, report)

    # 300m folds into the first link, 600m would exceed the bound.
    assert _used(osm_data) == {1, 3, 4}


def test_junction_nodes_are_kept(build_osm_data, report):
    osm_data = build_osm_data(
        coords={1: (0, 0), 2: (100, 0), 3: (200, 0), 4: (100, 100)},
        ways=[
            (10, [1, 2, 3], {"highway": "residential"}),
            (11, [2, 4], {"highway": "residential"}),
        ],
    )
    _prepare(osm_data, report)

    thin_network(osm_data, 500.0, report)

    assert _used(osm_data) == {1, 2, 3, 4}


def test_thinning_never_adds_nodes(build_osm_data, report):
    osm_data = build_osm_data(
        coords={i: (i * 150.0, 0.0) for i in range(1, 9)},
        ways=[(10, list(range(1, 9)), {"highway": "residential"})],
    )
    _prepare(osm_data, report)
    before = _used(osm_data)

    thin_network(osm_data, 500.0, report)

    after = _used(osm_data)
    assert after <= before
    assert {1, 8} <= after


def test_closed_way_keeps_a_node_between_its_ends(build_osm_data, report):
    osm_data = build_osm_data(
        coords={1: (0, 0), 2: (100, 0), 3: (100, 100), 4: (0, 100)},
        ways=[(10, [1, 2, 3, 4, 1], {"highway": "residential"})],
    )
    _prepare(osm_data, report)

    thin_network(osm_data, 500.0, report)

    assert _used(osm_data) == {1, 3}


def test_restore_loop_nodes_uses_sqrt_spacing():
    nodes = [Node(id=i, x=0, y=0, used=False) for i in range(1, 10)]
    loop = [nodes[0]] + nodes[1:9] + [nodes[0]]  # 10 entries, first == last
    nodes[0].used = True

    restored = restore_loop_nodes(loop)

    # span 9 -> increment 3 -> positions 3 and 6
    assert restored == 2
    assert [n.id for n in loop if n.used] == [1, 4, 7, 1]


def test_node_with_no_ways_is_left_untouched(report):
    a = Node(id=1, x=0, y=0, used=True, way_count=2)
    b = Node(id=2, x=10, y=0, used=True, way_count=0)
    c = Node(id=3, x=20, y=0, used=True, way_count=2)

    absorb_chain_nodes([a, b, c], 500.0, report)

    assert b.used
    assert report.invalid_way_count_nodes == 1
