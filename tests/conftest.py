import logging
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from osm_multimodal.config import ConverterConfig
from osm_multimodal.network.relations import RelationModeIndex
from osm_multimodal.network.report import ConversionReport
from osm_multimodal.network.way_params import WayParamRegistry
from osm_multimodal.osm.model import Node, OsmData, Relation, RelationMember, Way


def _build_osm_data(
    coords: Dict[int, Tuple[float, float]],
    ways: Iterable[Tuple[int, List[int], Dict[str, str]]],
    relations: Optional[Iterable[Tuple[int, List[Tuple[int, str]], Dict[str, str]]]] = None,
) -> OsmData:
    """
    coords:    {node_id: (x, y)}
    ways:      [(way_id, [node_id, ...], tags)]
    relations: [(relation_id, [(ref_id, member_type), ...], tags)]
    """
    osm_data = OsmData()

    for node_id, (x, y) in coords.items():
        osm_data.nodes[node_id] = Node(id=node_id, x=x, y=y)

    for way_id, node_ids, tags in ways:
        osm_data.ways[way_id] = Way(id=way_id, nodes=list(node_ids), tags=dict(tags))

    for relation_id, members, tags in relations or []:
        osm_data.relations[relation_id] = Relation(
            id=relation_id,
            members=[RelationMember(ref_id=ref, type=t) for ref, t in members],
            tags=dict(tags),
        )

    return osm_data


@pytest.fixture
def build_osm_data():
    return _build_osm_data


@pytest.fixture
def default_config():
    return ConverterConfig()


@pytest.fixture
def default_registry(default_config):
    return WayParamRegistry(default_config.way_params)


@pytest.fixture
def empty_relation_index():
    return RelationModeIndex({})


@pytest.fixture
def report():
    return ConversionReport()


@pytest.fixture
def osm_chain(build_osm_data):
    """A -> B -> C along one residential way, 100m apart."""
    return build_osm_data(
        coords={1: (0.0, 0.0), 2: (100.0, 0.0), 3: (200.0, 0.0)},
        ways=[(10, [1, 2, 3], {"highway": "residential"})],
    )


@pytest.fixture(autouse=True)
def _debug_logging(caplog):
    caplog.set_level(logging.DEBUG)
