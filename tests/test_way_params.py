from osm_multimodal.config import OsmWayParams
from osm_multimodal.network.way_params import WayParamRegistry


def _params(key, value, lanes=1.0):
    # model_construct skips validation so unsupported keys can reach the registry.
    return OsmWayParams.model_construct(
        osm_key=key,
        osm_value=value,
        lanes=lanes,
        lane_capacity=600.0,
        freespeed=10.0,
        freespeed_factor=1.0,
        oneway=False,
    )


def test_default_registry_has_roads_and_rail(default_registry):
    assert default_registry.is_known_highway("primary")
    assert default_registry.is_known_highway("residential")
    assert default_registry.is_known_railway("tram")
    assert not default_registry.is_known_highway("footway")
    assert not default_registry.is_known_railway("primary")


def test_last_write_wins():
    registry = WayParamRegistry(
        [_params("highway", "primary", lanes=1.0), _params("highway", "primary", lanes=3.0)]
    )

    assert registry.highway_params("primary").lanes == 3.0
    assert len(registry.highway) == 1


def test_other_keys_are_ignored():
    registry = WayParamRegistry([_params("waterway", "river"), _params("railway", "rail")])

    assert registry.highway == {}
    assert list(registry.railway) == ["rail"]


def test_lookups_accept_none(default_registry):
    assert default_registry.highway_params(None) is None
    assert default_registry.railway_params(None) is None
    assert not default_registry.is_known_highway(None)
    assert not default_registry.is_known_railway(None)
