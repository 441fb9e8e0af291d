"""
Converter configuration.

A ConverterConfig holds the ordered list of way parameter sets (the rule table
mapping highway/railway values to link defaults) plus the scalar flags that
steer thinning and attribute derivation. It can be built in code, from a dict,
or from a JSON file of the form:

    {
        "output_coordinate_system": "EPSG:2056",
        "max_link_length": 500.0,
        "keep_paths": false,
        "guess_free_speed": true,
        "scale_max_speed": false,
        "way_params": [
            {"osm_key": "highway", "osm_value": "primary", "lanes": 1,
             "lane_capacity": 1500, "freespeed": 22.22,
             "freespeed_factor": 1.0, "oneway": false}
        ]
    }

When "way_params" is omitted, DEFAULT_WAY_PARAMS is used.

Both models forbid unknown fields. Flags must be JSON booleans and numbers
must be JSON numbers; strings such as "false" or "500" are rejected.
"""

import json
import logging
import os
from os import PathLike
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    field_validator,
)

from .exceptions import ConfigurationError
from .osm.constants import DEFAULT_MAX_LINK_LENGTH_M, DEFAULT_WAY_PARAMS

logger = logging.getLogger(__name__)


def _require_number(value: Any) -> Any:
    # bool is an int subclass; "1" would be coerced in lax mode.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    return value


def _validation_error(
    message: str,  #
    e: ValidationError,
) -> ConfigurationError:
    errors = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
    return ConfigurationError(f"{message}: {e}", errors=errors)


class OsmWayParams(BaseModel):
    """
    Link defaults for ways tagged osm_key=osm_value.

    Attributes:
        osm_key: Either "highway" or "railway".
        osm_value: The tag value, e.g. "primary" or "tram".
        lanes: Default number of lanes.
        lane_capacity: Capacity per lane in vehicles/hour.
        freespeed: Default free speed in m/s.
        freespeed_factor: Multiplier applied to freespeed when scale_max_speed is set.
        oneway: Whether links are one-way by default.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    osm_key: Literal["highway", "railway"]
    osm_value: str
    lanes: float
    lane_capacity: float
    freespeed: float
    freespeed_factor: float
    oneway: StrictBool

    @field_validator(
        "lanes", "lane_capacity", "freespeed", "freespeed_factor", mode="before"
    )
    @classmethod
    def numbers_only(cls, v):
        return _require_number(v)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OsmWayParams":
        try:
            return cls.model_validate(d)
        except ValidationError as e:
            raise _validation_error("Invalid way parameter set", e) from e


def default_way_params() -> List[OsmWayParams]:
    return [
        OsmWayParams(
            osm_key=key,
            osm_value=value,
            lanes=lanes,
            lane_capacity=lane_capacity,
            freespeed=freespeed,
            freespeed_factor=freespeed_factor,
            oneway=oneway,
        )
        for (
            key,
            value,
            lanes,
            freespeed,
            freespeed_factor,
            lane_capacity,
            oneway,
        ) in DEFAULT_WAY_PARAMS
    ]


class ConverterConfig(BaseModel):
    """
    Parameters for converting OSM data into a multimodal network.

    Attributes:
        way_params: Ordered rule parameter sets. Later sets overwrite earlier
            ones with the same key and value.
        output_coordinate_system: Target CRS for node coordinates (anything
            pyproj.CRS accepts). None keeps source coordinates unchanged.
        max_link_length: Upper bound (meters) on the length absorbed into a
            single link by topology thinning. Must be > 0.
        keep_paths: If True, thinning is skipped and every way node becomes a vertex.
        guess_free_speed: If True, an unparseable maxspeed tag is retried using
            its first two characters (e.g. "50 km/h" -> 50).
        scale_max_speed: If True, freespeed is multiplied by the rule's freespeed_factor.
        roundtrip_dir: Directory for the temporary road network file written
            between the two cleaning passes. None uses the system temp dir.

    NOTE: Direct construction raises pydantic.ValidationError. from_dict and
          load_converter_config raise ConfigurationError.
    """

    model_config = ConfigDict(extra="forbid")

    way_params: List[OsmWayParams] = Field(default_factory=default_way_params)
    output_coordinate_system: Optional[str] = None
    max_link_length: float = DEFAULT_MAX_LINK_LENGTH_M
    keep_paths: StrictBool = False
    guess_free_speed: StrictBool = False
    scale_max_speed: StrictBool = False
    roundtrip_dir: Optional[str] = None

    @field_validator("max_link_length", mode="before")
    @classmethod
    def max_link_length_is_number(cls, v):
        return _require_number(v)

    @field_validator("max_link_length")
    @classmethod
    def max_link_length_is_positive(cls, v):
        if not v > 0:
            raise ValueError(f"max_link_length must be > 0, got {v}")
        return v

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ConverterConfig":
        try:
            return cls.model_validate(d)
        except ValidationError as e:
            raise _validation_error("Invalid converter config", e) from e

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


def load_converter_config(
    path: Union[str, PathLike],  #
) -> ConverterConfig:
    """
    Load a ConverterConfig from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file is not valid JSON or has invalid content.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Converter config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(d, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object.")

    config = ConverterConfig.from_dict(d)

    logger.debug(
        f"Loaded converter config from {path} with {len(config.way_params)} way parameter sets."
    )

    return config
