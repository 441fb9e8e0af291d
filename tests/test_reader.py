import json

import pytest

from osm_multimodal.exceptions import OsmDataError
from osm_multimodal.osm.reader import (
    load_osm_data_from_overpass_json,
    osm_data_from_elements,
)

ELEMENTS = [
    {"type": "node", "id": 1, "lat": 47.0, "lon": 8.0},
    {"type": "node", "id": 2, "lat": 47.001, "lon": 8.001, "tags": {"highway": "stop"}},
    {
        "type": "way",
        "id": 10,
        "nodes": [1, 2],
        "tags": {"highway": "residential", "lanes": 2},
    },
    {
        "type": "relation",
        "id": 100,
        "members": [
            {"type": "way", "ref": 10, "role": ""},
            {"type": "node", "ref": 1, "role": "stop"},
        ],
        "tags": {"type": "route", "route": "bus"},
    },
    {"type": "area", "id": 3600000001},
]


def test_osm_data_from_elements():
    osm_data = osm_data_from_elements(ELEMENTS)

    assert set(osm_data.nodes) == {1, 2}
    assert osm_data.nodes[1].x == 8.0
    assert osm_data.nodes[1].y == 47.0
    assert not osm_data.nodes[1].used

    way = osm_data.ways[10]
    assert way.nodes == [1, 2]
    assert way.tags == {"highway": "residential", "lanes": "2"}

    relation = osm_data.relations[100]
    assert [(m.ref_id, m.type, m.role) for m in relation.members] == [
        (10, "way", ""),
        (1, "node", "stop"),
    ]
    assert relation.tags["route"] == "bus"


def test_way_without_tags():
    osm_data = osm_data_from_elements([{"type": "way", "id": 10, "nodes": [1, 2]}])

    assert osm_data.ways[10].tags == {}


def test_malformed_element():
    element = {"type": "node", "id": 1, "lon": 8.0}

    with pytest.raises(OsmDataError) as excinfo:
        osm_data_from_elements([element])

    assert excinfo.value.element == element


def test_load_overpass_json(tmp_path):
    path = tmp_path / "extract.json"
    path.write_text(json.dumps({"version": 0.6, "elements": ELEMENTS}))

    osm_data = load_osm_data_from_overpass_json(path)

    assert len(osm_data.nodes) == 2
    assert len(osm_data.ways) == 1
    assert len(osm_data.relations) == 1


def test_load_overpass_json_without_elements(tmp_path):
    path = tmp_path / "extract.json"
    path.write_text(json.dumps({"remark": "runtime error"}))

    with pytest.raises(OsmDataError):
        load_osm_data_from_overpass_json(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_osm_data_from_overpass_json(tmp_path / "missing.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "extract.json"
    path.write_text("{not json")

    with pytest.raises(OsmDataError, match="Invalid JSON"):
        load_osm_data_from_overpass_json(path)
