import os
from os import PathLike
from typing import Optional

import networkx as nx
from prefect import get_run_logger, task

from osm_multimodal.config import ConverterConfig, load_converter_config
from osm_multimodal.network.convert import ConvertedNetworkData, convert_osm_to_network
from osm_multimodal.network.io import write_network_pickle
from osm_multimodal.osm.model import OsmData
from osm_multimodal.osm.reader import load_osm_data_from_overpass_json


@task(name="Load OSM Data")
def load_osm_data_task(
    osm_json: PathLike,  #
) -> OsmData:
    """
    Prefect task to load an Overpass API JSON response into OsmData.

    Raises:
        FileNotFoundError: If the osm_json file does not exist.
        OsmDataError: If the file is not a usable Overpass response.
    """
    logger = get_run_logger()

    logger.info(f"Loading OSM data from {osm_json}")

    if not os.path.exists(osm_json):
        logger.error(f"Input OSM JSON file not found: {osm_json}")
        raise FileNotFoundError(f"Input OSM JSON file not found: {osm_json}")

    osm_data = load_osm_data_from_overpass_json(osm_json)

    logger.info(
        f"Loaded {len(osm_data.nodes)} nodes, {len(osm_data.ways)} ways "
        f"and {len(osm_data.relations)} relations"
    )

    return osm_data


@task(name="Load Converter Config")
def load_converter_config_task(
    config_json: Optional[PathLike] = None,  #
) -> ConverterConfig:
    """Load the converter config from config_json, or return the default config if None."""
    logger = get_run_logger()

    if config_json is None:
        logger.info("No converter config given. Using defaults.")
        return ConverterConfig()

    logger.info(f"Loading converter config from {config_json}")

    return load_converter_config(config_json)


@task(name="Convert OSM to Multimodal Network")
def convert_osm_network_task(
    osm_data: OsmData,  #
    config: Optional[ConverterConfig] = None,
) -> ConvertedNetworkData:
    """
    Prefect task wrapping osm_multimodal.network.convert.convert_osm_to_network.

    NOTE: osm_data is consumed by the conversion.

    Returns:
        dict: A dictionary containing:
            - 'g': The converted multimodal MultiDiGraph
            - 'report': The ConversionReport for the run

    Raises:
        NetworkRoundTripError: If the road network round trip fails.
    """
    logger = get_run_logger()

    logger.debug(f"Converting {len(osm_data.ways)} ways to a multimodal network...")

    try:
        converted = convert_osm_to_network(osm_data=osm_data, config=config)

    except Exception as e:
        logger.error(f"Failed to convert OSM data: {e}", exc_info=True)
        raise

    g = converted["g"]

    logger.info(
        f"Converted network has {g.number_of_nodes()} nodes and {g.number_of_edges()} links"
    )

    return converted


@task(name="Save Network")
def save_network_task(
    g: nx.MultiDiGraph,  #
    output_path: PathLike,
) -> str:
    """
    Prefect task to pickle the converted network to output_path.

    Parent directories are created as needed.

    Returns:
        str: The path the network was written to.
    """
    logger = get_run_logger()

    output_dir = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(output_dir, exist_ok=True)

    write_network_pickle(g, output_path)

    logger.info(f"Saved network to {output_path}")

    return str(output_path)
