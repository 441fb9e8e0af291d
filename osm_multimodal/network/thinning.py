"""
Topology thinning.

Collapses chains of nodes that lie inside a single way (way_count == 1) into
longer links, so the network keeps only junctions, way ends and enough
intermediate nodes to keep every link within max_link_length.

Thinning runs in two passes:

  1. Absorb interior nodes while the length accumulated since the last kept
     node stays within the bound.
  2. Re-keep a sparse subset of nodes on any way whose retained nodes would
     otherwise produce a link that starts and ends at the same node.
"""

import logging
import math
from typing import List

from tqdm import tqdm

from ..osm.model import Node, OsmData, euclidean_distance
from .report import ConversionReport

logger = logging.getLogger(__name__)


def absorb_chain_nodes(
    way_nodes: List[Node],  #
    max_link_length: float,
    report: ConversionReport,
) -> None:
    """
    Mark interior nodes of a single way as unused while the link they would
    fold into stays within max_link_length.

    Nodes with way_count > 1 are never touched and reset the running length.
    An interior node that would push the running length over the bound is
    kept and starts a new length count.
    """
    length = 0.0
    last_node = way_nodes[0]

    for node in way_nodes[1:]:
        if node.way_count > 1:
            length = 0.0
            last_node = node
        elif node.way_count == 1:
            length += euclidean_distance(last_node, node)

            if length <= max_link_length:
                node.used = False
            else:
                length = 0.0

            last_node = node
        else:
            report.invalid_way_count_nodes += 1
            logger.warning(f"Way node {node.id} with less than 1 ways found.")


def restore_loop_nodes(
    way_nodes: List[Node],  #
) -> int:
    """
    Re-keep intermediate nodes where a way leaves a kept node and returns to
    it with nothing kept in between.

    Such a span would become a self-loop link. Roughly sqrt(span) evenly
    spaced nodes are marked used again, which breaks the loop while still
    thinning most of it.

    NOTE: Loops are detected by node id, not object identity.

    Returns:
        int: The number of nodes marked used again.
    """
    restored = 0

    prev_kept_idx = 0
    prev_kept_id = way_nodes[0].id

    for i in range(1, len(way_nodes)):
        node = way_nodes[i]

        if not node.used:
            continue

        if node.id == prev_kept_id:
            increment = math.sqrt(i - prev_kept_idx)
            j = prev_kept_idx + increment

            while j < i:
                intermediate = way_nodes[math.floor(j)]

                if not intermediate.used:
                    intermediate.used = True
                    restored += 1

                j += increment

        prev_kept_idx = i
        prev_kept_id = node.id

    return restored


def thin_network(
    osm_data: OsmData,  #
    max_link_length: float,
    report: ConversionReport,
) -> None:
    """
    Run both thinning passes over all usable ways in osm_data.

    Parameters:
        osm_data (OsmData): Source data after the usability filter and node
            usage counting. Node.used flags are updated in place.
        max_link_length (float): Upper bound, in the units of the node
            coordinates, on the length folded into one link.
        report (ConversionReport): Receives the count of nodes with
            way_count < 1.

    Notes:
        - Way end nodes have way_count >= 2 and are therefore always kept.
        - The loop pass starts only after the absorb pass has visited every way.
    """
    num_used_before = sum(1 for node in osm_data.nodes.values() if node.used)

    for way in tqdm(osm_data.ways.values(), leave=False):
        way_nodes = osm_data.way_nodes(way)

        if len(way_nodes) > 1:
            absorb_chain_nodes(way_nodes, max_link_length, report)

    restored = 0

    for way in tqdm(osm_data.ways.values(), leave=False):
        way_nodes = osm_data.way_nodes(way)

        if len(way_nodes) > 1:
            restored += restore_loop_nodes(way_nodes)

    num_used_after = sum(1 for node in osm_data.nodes.values() if node.used)

    logger.info(
        f"Thinning kept {num_used_after} of {num_used_before} way nodes "
        f"({restored} restored to preserve loops)."
    )
