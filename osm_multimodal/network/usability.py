import logging

from tqdm import tqdm

from ..osm.constants import OsmKey
from ..osm.model import OsmData, Way
from .relations import RelationModeIndex
from .report import ConversionReport
from .way_params import WayParamRegistry

logger = logging.getLogger(__name__)


def is_usable_way(
    way: Way,  #
    osm_data: OsmData,
    registry: WayParamRegistry,
    relation_index: RelationModeIndex,
) -> bool:
    """
    A way is usable if it has a configured highway or railway type, or is a
    member of at least one relation, and both of its end nodes exist.
    """
    if len(way.nodes) < 2:
        return False

    is_convertible = (
        registry.is_known_highway(way.tags.get(OsmKey.HIGHWAY.value))
        or registry.is_known_railway(way.tags.get(OsmKey.RAILWAY.value))
        or way.id in relation_index
    )

    if not is_convertible:
        return False

    return way.nodes[0] in osm_data.nodes and way.nodes[-1] in osm_data.nodes


def remove_unusable_ways(
    osm_data: OsmData,  #
    registry: WayParamRegistry,
    relation_index: RelationModeIndex,
) -> int:
    """
    Flag every way as used/unused and delete the unused ones from osm_data.ways.

    Returns:
        int: The number of ways removed.
    """
    for way in osm_data.ways.values():
        way.used = is_usable_way(way, osm_data, registry, relation_index)

    unused_ids = [way_id for way_id, way in osm_data.ways.items() if not way.used]

    for way_id in unused_ids:
        del osm_data.ways[way_id]

    logger.info(
        f"Kept {len(osm_data.ways)} usable ways, removed {len(unused_ids)} unusable ways."
    )

    return len(unused_ids)


def count_node_usage(
    osm_data: OsmData,  #
    report: ConversionReport,
) -> None:
    """
    Mark every node on a usable way as used and count the ways through it.

    The first and last node of each way are counted one extra time, so a
    node with way_count == 1 is an interior node of exactly one way while
    way_count > 1 marks a junction or a way end.

    NOTE: Mutates the Node objects in osm_data.nodes.
    """
    nodes = osm_data.nodes

    for way in tqdm(osm_data.ways.values(), leave=False):
        # Usable ways always have both end nodes.
        nodes[way.nodes[0]].way_count += 1
        nodes[way.nodes[-1]].way_count += 1

        for node_id in way.nodes:
            node = nodes.get(node_id)

            if node is None:
                report.missing_way_nodes += 1
                logger.debug(f"Way {way.id} references missing node {node_id}.")
                continue

            node.used = True
            node.way_count += 1
