from enum import Enum
from typing import List, Tuple


class OsmKey(str, Enum):
    """
    The OSM tag keys consulted during network conversion.

    NOTE: Enum members hash by name, not value. Use OsmKey.X.value when
          indexing a raw tags dict.
    """

    HIGHWAY = "highway"
    RAILWAY = "railway"
    ONEWAY = "oneway"
    JUNCTION = "junction"
    MAXSPEED = "maxspeed"
    LANES = "lanes"
    PSV = "psv"
    ROUTE = "route"


# Values of the highway/junction/route keys that conversion reacts to.
UNCLASSIFIED = "unclassified"
ROUNDABOUT = "roundabout"
TROLLEYBUS = "trolleybus"
BUS = "bus"

# Highway types that are physically two-lane even when tagged oneway.
MULTI_LANE_ONEWAY_HIGHWAYS = frozenset({"trunk", "primary", "secondary"})

ONEWAY_TRUE_VALUES = frozenset({"yes", "true", "1"})
ONEWAY_REVERSE_VALUE = "-1"
ONEWAY_FALSE_VALUE = "no"

# Transport modes assigned to synthesized links.
MODE_CAR = "car"
MODE_BUS = "bus"
MODE_PT = "pt"
MODE_UNKNOWN_STREET_TYPE = "unknownStreetType"

# Links carrying any of these modes form the road network that gets cleaned.
ROAD_MODES = frozenset({MODE_CAR, MODE_BUS})

KPH_PER_MPS = 3.6

DEFAULT_MAX_LINK_LENGTH_M = 500.0

# (osm_key, osm_value, lanes, freespeed [m/s], freespeed_factor, lane_capacity [veh/h], oneway)
DEFAULT_WAY_PARAMS: List[Tuple[str, str, float, float, float, float, bool]] = [
    # highway
    ("highway", "motorway", 2, 120 / KPH_PER_MPS, 1.0, 2000, True),
    ("highway", "motorway_link", 1, 80 / KPH_PER_MPS, 1.0, 1500, True),
    ("highway", "trunk", 1, 80 / KPH_PER_MPS, 1.0, 2000, False),
    ("highway", "trunk_link", 1, 50 / KPH_PER_MPS, 1.0, 1500, False),
    ("highway", "primary", 1, 80 / KPH_PER_MPS, 1.0, 1500, False),
    ("highway", "primary_link", 1, 60 / KPH_PER_MPS, 1.0, 1500, False),
    ("highway", "secondary", 1, 60 / KPH_PER_MPS, 1.0, 1000, False),
    ("highway", "secondary_link", 1, 60 / KPH_PER_MPS, 1.0, 1000, False),
    ("highway", "tertiary", 1, 45 / KPH_PER_MPS, 1.0, 600, False),
    ("highway", "tertiary_link", 1, 45 / KPH_PER_MPS, 1.0, 600, False),
    ("highway", "unclassified", 1, 45 / KPH_PER_MPS, 1.0, 600, False),
    ("highway", "residential", 1, 30 / KPH_PER_MPS, 1.0, 600, False),
    ("highway", "living_street", 1, 15 / KPH_PER_MPS, 1.0, 300, False),
    # railway
    ("railway", "rail", 1, 160 / KPH_PER_MPS, 1.0, 9999, False),
    ("railway", "tram", 1, 40 / KPH_PER_MPS, 1.0, 9999, True),
    ("railway", "light_rail", 1, 80 / KPH_PER_MPS, 1.0, 9999, False),
]
