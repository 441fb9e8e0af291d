"""
Link synthesis.

Walks every usable way from kept node to kept node and turns each span into
one or two directed links of a networkx MultiDiGraph. Link attributes come
from the way's highway/railway parameters and are then overridden by the
way's own tags, in this order (later wins):

  1. way parameters for highway=* / railway=* (psv-only highways fall back
     to highway=unclassified)
  2. junction=roundabout forces oneway
  3. oneway=yes|true|1|-1|no
  4. oneway trunk/primary/secondary roads get at least two lanes
  5. maxspeed=* (km/h)
  6. lanes=*
  7. capacity = lanes * lane_capacity, optional freespeed scaling

Links are keyed in the graph by a 1-based sequential id.
"""

import logging
import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

import networkx as nx
from shapely import LineString
from tqdm import tqdm

from ..config import ConverterConfig, OsmWayParams
from ..osm.constants import (
    KPH_PER_MPS,
    MODE_BUS,
    MODE_CAR,
    MODE_PT,
    MODE_UNKNOWN_STREET_TYPE,
    MULTI_LANE_ONEWAY_HIGHWAYS,
    ONEWAY_FALSE_VALUE,
    ONEWAY_REVERSE_VALUE,
    ONEWAY_TRUE_VALUES,
    ROUNDABOUT,
    UNCLASSIFIED,
)
from ..osm.model import Node, OsmData, Way, WayTags, euclidean_distance
from .relations import RelationModeIndex
from .report import ConversionReport
from .way_params import WayParamRegistry

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*")


def parse_number(text: Optional[str]) -> Optional[float]:
    """Parse a decimal number tag value. Returns None if text is not a plain number."""
    if text is None or not _NUMBER_RE.fullmatch(text):
        return None

    return float(text)


@dataclass(frozen=True)
class LinkAttributes:
    lanes: float
    freespeed: float  # m/s
    capacity: float  # veh/h
    modes: FrozenSet[str]
    oneway: bool
    oneway_reverse: bool


class LinkSynthesizer:
    """
    Creates the links of the network from the usable ways of osm_data.

    One instance serves exactly one conversion: it owns the link id counter
    and writes unknown tag values into the conversion report.
    """

    def __init__(
        self,
        network: nx.MultiDiGraph,  #
        osm_data: OsmData,
        registry: WayParamRegistry,
        relation_index: RelationModeIndex,
        config: ConverterConfig,
        report: ConversionReport,
    ):
        self.network = network
        self.osm_data = osm_data
        self.registry = registry
        self.relation_index = relation_index
        self.config = config
        self.report = report
        self.next_link_id = 1

    # --------------- Attribute derivation -----------------------------

    def _base_params(self, tags: WayTags) -> Tuple[Optional[OsmWayParams], bool]:
        """Return the way parameters for the way's type and whether it is a bus-only link."""
        if tags.highway is not None:
            params = self.registry.highway_params(tags.highway)

            if params is not None:
                return params, False

            # Unknown highway types carrying psv=* are bus-only roads.
            if tags.is_psv:
                params = self.registry.highway_params(UNCLASSIFIED)

                if params is not None:
                    return params, True

            self.report.unknown_highways.add(tags.highway)
            return None, False

        if tags.railway is not None:
            params = self.registry.railway_params(tags.railway)

            if params is None:
                self.report.unknown_railways.add(tags.railway)

            return params, False

        self.report.unknown_ways.add(tags.describe())
        return None, False

    def _parse_maxspeed(self, way: Way, maxspeed: str) -> Optional[float]:
        freespeed_kph = parse_number(maxspeed)

        if freespeed_kph is None and self.config.guess_free_speed:
            # e.g. "50 km/h" or "30 mph" -> first two characters
            freespeed_kph = parse_number(maxspeed[:2])

        if freespeed_kph is not None:
            return freespeed_kph / KPH_PER_MPS

        if maxspeed not in self.report.unknown_maxspeed_tags:
            self.report.unknown_maxspeed_tags.add(maxspeed)
            logger.warning(
                f"Could not parse maxspeed tag '{maxspeed}' (way {way.id}). Ignoring it."
            )

        return None

    def _parse_lanes(self, way: Way, lanes_tag: str) -> Optional[float]:
        lanes = parse_number(lanes_tag)

        if lanes is None:
            if lanes_tag not in self.report.unknown_lanes_tags:
                self.report.unknown_lanes_tags.add(lanes_tag)
                logger.warning(
                    f"Could not parse lanes tag '{lanes_tag}' (way {way.id}). Ignoring it."
                )
            return None

        return lanes if lanes > 0 else None

    def _modes(self, way: Way, tags: WayTags, is_bus_only: bool) -> FrozenSet[str]:
        modes = set()

        if not is_bus_only and tags.highway is not None:
            modes.add(MODE_CAR)

        if is_bus_only:
            modes.add(MODE_BUS)
            modes.add(MODE_PT)

        if self.registry.is_known_railway(tags.railway):
            modes.add(tags.railway)

        modes |= self.relation_index.route_modes(way.id)

        if not modes:
            modes.add(MODE_UNKNOWN_STREET_TYPE)

        return frozenset(modes)

    def derive_link_attributes(self, way: Way) -> Optional[LinkAttributes]:
        """
        Derive the attributes shared by all links of a way.

        Returns:
            LinkAttributes, or None if the way's type has no way parameters.
            In that case the unknown type is recorded in the report.
        """
        tags = WayTags.from_tags(way.tags)

        params, is_bus_only = self._base_params(tags)

        if params is None:
            return None

        lanes = params.lanes
        lane_capacity = params.lane_capacity
        freespeed = params.freespeed
        oneway = params.oneway
        oneway_reverse = False

        if tags.junction == ROUNDABOUT:
            oneway = True

        if tags.oneway is not None:
            if tags.oneway in ONEWAY_TRUE_VALUES:
                oneway = True
            elif tags.oneway == ONEWAY_REVERSE_VALUE:
                oneway_reverse = True
                oneway = False
            elif tags.oneway == ONEWAY_FALSE_VALUE:
                oneway = False

        if (
            tags.highway is not None
            and tags.highway.lower() in MULTI_LANE_ONEWAY_HIGHWAYS
            and oneway
            and lanes == 1.0
        ):
            lanes = 2.0

        if tags.maxspeed is not None:
            maxspeed = self._parse_maxspeed(way, tags.maxspeed)

            if maxspeed is not None:
                freespeed = maxspeed

        if tags.lanes is not None:
            tag_lanes = self._parse_lanes(way, tags.lanes)

            if tag_lanes is not None:
                lanes = tag_lanes

        capacity = lanes * lane_capacity

        if self.config.scale_max_speed:
            freespeed = freespeed * params.freespeed_factor

        return LinkAttributes(
            lanes=lanes,
            freespeed=freespeed,
            capacity=capacity,
            modes=self._modes(way, tags, is_bus_only),
            oneway=oneway,
            oneway_reverse=oneway_reverse,
        )

    # --------------- Link emission ------------------------------------

    def _add_link(
        self,
        from_id: int,
        to_id: int,
        length: float,
        coords: List[Tuple[float, float]],
        attrs: LinkAttributes,
        way: Way,
    ) -> int:
        link_id = self.next_link_id
        self.next_link_id += 1

        self.network.add_edge(
            from_id,
            to_id,
            key=link_id,
            id=link_id,
            length=length,
            freespeed=attrs.freespeed,
            capacity=attrs.capacity,
            lanes=attrs.lanes,
            modes=attrs.modes,
            origid=str(way.id),
            geometry=LineString(coords),
        )

        return link_id

    def create_links(
        self,
        way: Way,  #
        from_node: Node,
        to_node: Node,
        length: float,
        coords: List[Tuple[float, float]],
        attrs: LinkAttributes,
    ) -> int:
        """
        Add the forward and/or reverse link for one span of a way.

        Returns:
            int: The number of links added (0, 1 or 2).
        """
        if not (
            self.network.has_node(from_node.id) and self.network.has_node(to_node.id)
        ):
            self.report.missing_link_endpoints += 1
            logger.warning(
                f"Link {from_node.id} -> {to_node.id} of way {way.id} skipped: "
                "endpoint is not a network node."
            )
            return 0

        num_added = 0

        if not attrs.oneway_reverse:
            self._add_link(from_node.id, to_node.id, length, coords, attrs, way)
            num_added += 1

        if not attrs.oneway:
            self._add_link(to_node.id, from_node.id, length, coords[::-1], attrs, way)
            num_added += 1

        return num_added

    def synthesize_way(self, way: Way) -> int:
        """
        Create the links for every span between consecutive kept nodes of a way.

        Consecutive repetitions of the same node are stepped over. The way's
        attributes are derived on its first span only, so ways that produce
        no span are never classified.

        Returns:
            int: The number of links added.
        """
        way_nodes = self.osm_data.way_nodes(way)

        if len(way_nodes) < 2 or not way_nodes[0].used:
            return 0

        attrs: Optional[LinkAttributes] = None
        num_added = 0

        from_node = way_nodes[0]
        last_to_node = from_node
        length = 0.0
        coords = [(from_node.x, from_node.y)]

        for to_node in way_nodes[1:]:
            if to_node.id == last_to_node.id:
                continue

            length += euclidean_distance(last_to_node, to_node)
            coords.append((to_node.x, to_node.y))

            if to_node.used:
                if attrs is None:
                    attrs = self.derive_link_attributes(way)

                    if attrs is None:
                        return 0

                num_added += self.create_links(
                    way, from_node, to_node, length, coords, attrs
                )

                from_node = to_node
                length = 0.0
                coords = [(to_node.x, to_node.y)]

            last_to_node = to_node

        return num_added

    def synthesize_all(self) -> int:
        num_links = 0

        for way in tqdm(self.osm_data.ways.values(), leave=False):
            num_links += self.synthesize_way(way)

        return num_links
