import logging
from typing import Optional, TypedDict

import networkx as nx

from ..config import ConverterConfig
from ..exceptions import BrokenInvariantError
from ..osm.constants import ROAD_MODES
from ..osm.model import OsmData
from ..utils.logging import timer
from .cleaning import (
    ConnectivityReducer,
    filter_network_by_modes,
    integrate_network,
    reduce_to_largest_strongly_connected_component,
)
from .io import roundtrip_network
from .links import LinkSynthesizer
from .relations import RelationModeIndex
from .report import ConversionReport
from .thinning import thin_network
from .transform import CoordinateTransform, get_coordinate_transform, project_way_nodes
from .usability import count_node_usage, remove_unusable_ways
from .way_params import WayParamRegistry

logger = logging.getLogger(__name__)


class ConvertedNetworkData(TypedDict, total=True):
    g: nx.MultiDiGraph
    report: ConversionReport


def create_network_nodes(
    network: nx.MultiDiGraph,  #
    osm_data: OsmData,
) -> int:
    """Add every used node to the network, keyed by its OSM id with x/y attributes."""
    for node in osm_data.nodes.values():
        if node.used:
            network.add_node(node.id, x=node.x, y=node.y)

    return network.number_of_nodes()


def verify_links(
    network: nx.MultiDiGraph,  #
) -> None:
    """
    Check that every link has a non-empty mode set and a non-negative length.

    Raises:
        BrokenInvariantError: On the first link that violates either condition.
    """
    for u, v, key, data in network.edges(keys=True, data=True):
        if not data["modes"]:
            raise BrokenInvariantError(f"Link {key} ({u} -> {v}) has no modes.")

        if data["length"] < 0:
            raise BrokenInvariantError(
                f"Link {key} ({u} -> {v}) has negative length {data['length']}."
            )


def clean_road_network(
    network: nx.MultiDiGraph,  #
    reducer: ConnectivityReducer,
    roundtrip_dir: Optional[str] = None,
) -> nx.MultiDiGraph:
    """
    Run the connectivity reducer twice on the car/bus part of the network and
    merge the remaining links back in.

    Between the two passes the road network is written to disk and read back,
    so the second pass starts from a freshly built graph.

    Returns:
        nx.MultiDiGraph: The cleaned road network merged with all non-road links.

    Raises:
        NetworkRoundTripError: If the round trip fails.
    """
    road_network = filter_network_by_modes(network, ROAD_MODES)
    rest_network = filter_network_by_modes(network, ROAD_MODES, exclude=True)

    logger.info(
        f"Road network: {road_network.number_of_edges()} links, "
        f"other modes: {rest_network.number_of_edges()} links."
    )

    road_network = reducer(road_network)
    road_network = roundtrip_network(road_network, tmp_dir=roundtrip_dir)
    road_network = reducer(road_network)

    return integrate_network(road_network, rest_network)


# NOTE: Consumes osm_data. Its collections are empty when this returns.
def convert_osm_to_network(
    osm_data: OsmData,  #
    config: Optional[ConverterConfig] = None,
    reducer: ConnectivityReducer = reduce_to_largest_strongly_connected_component,
    transform: Optional[CoordinateTransform] = None,
) -> ConvertedNetworkData:
    """
    Convert parsed OSM data into a simplified multimodal MultiDiGraph.

    Pipeline:
      1. Build the highway/railway way parameter registry from config.
      2. Index which relations each way belongs to.
      3. Drop unusable ways and count how many usable ways touch each node.
      4. Project the coordinates of all way nodes into the output CRS.
      5. Thin the topology (unless config.keep_paths).
      6. Create a network node for every kept OSM node.
      7. Create links for every span between kept nodes.
      8. Release the OSM collections and log the conversion statistics.
      9. Clean the car/bus network with the connectivity reducer, round trip
         it through disk, clean it again and merge the other links back.

    Parameters:
        osm_data (OsmData): Source nodes, ways and relations. Mutated in place
            and cleared at the end.
        config (ConverterConfig, optional): Conversion parameters. Defaults to
            ConverterConfig().
        reducer (ConnectivityReducer): Removes disconnected parts of the road
            network. Defaults to keeping the largest strongly connected component.
        transform (CoordinateTransform, optional): (lon, lat) -> (x, y). If None,
            one is built from config.output_coordinate_system.

    Returns:
        dict: A dictionary containing:
            - 'g': The converted network. Nodes are keyed by OSM node id with
                   'x' and 'y'. Links are keyed by link id with 'id', 'length',
                   'freespeed', 'capacity', 'lanes', 'modes', 'origid' and 'geometry'.
            - 'report': The ConversionReport of unknown tag values and
                        skipped elements.

    Raises:
        BrokenInvariantError: If a synthesized link has no modes or a negative length.
        NetworkRoundTripError: If the road network round trip fails.
    """
    config = config or ConverterConfig()

    if transform is None:
        transform = get_coordinate_transform(config.output_coordinate_system)

    report = ConversionReport()
    network = nx.MultiDiGraph()

    registry = WayParamRegistry(config.way_params)

    with timer("Relation membership index", logger):
        relation_index = RelationModeIndex(osm_data.relations)

    with timer("Usability filter", logger):
        remove_unusable_ways(osm_data, registry, relation_index)
        count_node_usage(osm_data, report)

    with timer("Coordinate projection", logger):
        project_way_nodes(osm_data, transform)

    if not config.keep_paths:
        with timer("Topology thinning", logger):
            thin_network(osm_data, config.max_link_length, report)

    with timer("Link synthesis", logger):
        report.num_nodes = create_network_nodes(network, osm_data)

        synthesizer = LinkSynthesizer(
            network=network,
            osm_data=osm_data,
            registry=registry,
            relation_index=relation_index,
            config=config,
            report=report,
        )
        report.num_links = synthesizer.synthesize_all()

    verify_links(network)

    osm_data.clear()

    report.log_summary(logger)

    with timer("Road network cleaning", logger):
        network = clean_road_network(network, reducer, config.roundtrip_dir)

    logger.info(
        f"Final network: {network.number_of_nodes()} nodes, {network.number_of_edges()} links."
    )

    return {"g": network, "report": report}
