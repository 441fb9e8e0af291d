import json

import pytest
from pydantic import ValidationError

from osm_multimodal.config import (
    ConverterConfig,
    OsmWayParams,
    default_way_params,
    load_converter_config,
)
from osm_multimodal.exceptions import ConfigurationError, OsmNetworkError

WAY_PARAMS = {
    "osm_key": "highway",
    "osm_value": "primary",
    "lanes": 2,
    "lane_capacity": 1500,
    "freespeed": 22.2,
    "freespeed_factor": 1.0,
    "oneway": False,
}


def test_defaults():
    config = ConverterConfig()

    assert config.max_link_length == 500.0
    assert not config.keep_paths
    assert not config.guess_free_speed
    assert not config.scale_max_speed
    assert config.output_coordinate_system is None
    assert config.way_params == default_way_params()


def test_non_positive_max_link_length():
    with pytest.raises(ValidationError):
        ConverterConfig(max_link_length=0)

    with pytest.raises(ConfigurationError) as excinfo:
        ConverterConfig.from_dict({"max_link_length": -1.0})

    assert excinfo.value.errors == ["max_link_length"]


def test_way_params_string_boolean_is_rejected():
    with pytest.raises(ConfigurationError) as excinfo:
        OsmWayParams.from_dict(dict(WAY_PARAMS, oneway="false"))

    assert excinfo.value.errors == ["oneway"]


@pytest.mark.parametrize("field", ["keep_paths", "guess_free_speed", "scale_max_speed"])
def test_config_string_flag_is_rejected(field):
    with pytest.raises(ConfigurationError) as excinfo:
        ConverterConfig.from_dict({field: "false"})

    assert excinfo.value.errors == [field]


@pytest.mark.parametrize("value", ["500", True, None])
def test_config_non_number_max_link_length_is_rejected(value):
    with pytest.raises(ConfigurationError) as excinfo:
        ConverterConfig.from_dict({"max_link_length": value})

    assert excinfo.value.errors == ["max_link_length"]


def test_way_params_string_number_is_rejected():
    with pytest.raises(ConfigurationError):
        OsmWayParams.from_dict(dict(WAY_PARAMS, lane_capacity="1500"))


def test_integer_numbers_are_accepted():
    config = ConverterConfig.from_dict({"max_link_length": 250})

    assert config.max_link_length == 250.0
    assert isinstance(config.max_link_length, float)


def test_way_params_from_dict():
    params = OsmWayParams.from_dict(WAY_PARAMS)

    assert params.osm_value == "primary"
    assert params.lanes == 2.0
    assert params.lane_capacity == 1500.0


def test_way_params_missing_fields():
    d = dict(WAY_PARAMS)
    del d["lanes"]
    del d["oneway"]

    with pytest.raises(ConfigurationError) as excinfo:
        OsmWayParams.from_dict(d)

    assert excinfo.value.errors == ["lanes", "oneway"]


def test_way_params_invalid_key():
    with pytest.raises(ConfigurationError):
        OsmWayParams.from_dict(dict(WAY_PARAMS, osm_key="waterway"))


def test_way_params_invalid_number():
    with pytest.raises(ConfigurationError):
        OsmWayParams.from_dict(dict(WAY_PARAMS, lanes="two"))


def test_config_from_dict_rejects_unknown_fields():
    with pytest.raises(ConfigurationError) as excinfo:
        ConverterConfig.from_dict({"max_link_length": 100, "colour": "red"})

    assert excinfo.value.errors == ["colour"]
    assert isinstance(excinfo.value, OsmNetworkError)


def test_load_converter_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "output_coordinate_system": "EPSG:2056",
                "max_link_length": 250.0,
                "guess_free_speed": True,
                "way_params": [WAY_PARAMS],
            }
        )
    )

    config = load_converter_config(path)

    assert config.output_coordinate_system == "EPSG:2056"
    assert config.max_link_length == 250.0
    assert config.guess_free_speed
    assert [p.osm_value for p in config.way_params] == ["primary"]


def test_config_dict_round_trip():
    config = ConverterConfig(keep_paths=True, max_link_length=42.0)

    d = config.to_dict()

    assert d["keep_paths"] is True
    assert ConverterConfig.from_dict(d) == config


def test_load_missing_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_converter_config(tmp_path / "missing.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError):
        load_converter_config(path)


def test_load_non_object_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[]")

    with pytest.raises(ConfigurationError):
        load_converter_config(path)
