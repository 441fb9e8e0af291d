import logging
from typing import Dict, Iterable, Optional

from ..config import OsmWayParams
from ..osm.constants import OsmKey

logger = logging.getLogger(__name__)


class WayParamRegistry:
    """
    Lookup tables from highway/railway tag values to link defaults.

    Built once from the configured way parameter sets. A later parameter set
    with the same key and value overwrites an earlier one. Sets keyed on
    anything other than highway or railway are ignored.
    """

    def __init__(self, way_params: Iterable[OsmWayParams]):
        self.highway: Dict[str, OsmWayParams] = {}
        self.railway: Dict[str, OsmWayParams] = {}

        for params in way_params:
            if params.osm_key == OsmKey.HIGHWAY.value:
                self.highway[params.osm_value] = params
            elif params.osm_key == OsmKey.RAILWAY.value:
                self.railway[params.osm_value] = params
            else:
                logger.debug(
                    f"Ignoring way parameter set with key '{params.osm_key}'."
                )

        logger.debug(
            f"Way parameter registry: {len(self.highway)} highway types, "
            f"{len(self.railway)} railway types."
        )

    def highway_params(self, value: Optional[str]) -> Optional[OsmWayParams]:
        return self.highway.get(value) if value is not None else None

    def railway_params(self, value: Optional[str]) -> Optional[OsmWayParams]:
        return self.railway.get(value) if value is not None else None

    def is_known_highway(self, value: Optional[str]) -> bool:
        return value is not None and value in self.highway

    def is_known_railway(self, value: Optional[str]) -> bool:
        return value is not None and value in self.railway
