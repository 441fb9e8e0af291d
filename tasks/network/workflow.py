# tasks/network/workflow.py

import argparse
import logging
import pathlib
from typing import Any, Dict, Optional

from prefect import flow, get_run_logger

from tasks.network.tasks import (
    convert_osm_network_task,
    load_converter_config_task,
    load_osm_data_task,
    save_network_task,
)

# --- Default Paths ---
THIS_DIR = pathlib.Path(__file__).parent.resolve()
DEFAULT_DATA_ROOT = THIS_DIR.parent.parent / "data"
DEFAULT_OUTPUT_DIR = DEFAULT_DATA_ROOT / "processed" / "networks"


@flow(name="OSM Multimodal Network Conversion Workflow", log_prints=True)
def network_conversion_flow(
    osm_json: str,
    output_path: Optional[str] = None,
    config_json: Optional[str] = None,
    verbose: bool = False,
) -> Dict[str, Any]:
    """
    Loads OSM data, converts it to a multimodal network and pickles the result.

    Args:
        osm_json: Path to an Overpass API JSON response.
        output_path: Where to write the network pickle. Defaults to
            data/processed/networks/<osm_json stem>.network.pickle
        config_json: Optional converter config JSON. Defaults are used if None.
        verbose: If True, enable DEBUG level logging.

    Returns:
        dict: A dictionary containing:
            - 'network_path': The path of the written network pickle
            - 'num_nodes': Nodes in the final network
            - 'num_links': Links in the final network
            - 'report': The ConversionReport of the run
    """
    # --- Logging Setup ---
    log_level = logging.DEBUG if verbose else logging.INFO
    logger = get_run_logger()
    logger.setLevel(log_level)
    logging.getLogger("prefect").setLevel(log_level)

    if output_path is None:
        stem = pathlib.Path(osm_json).stem
        output_path = str(DEFAULT_OUTPUT_DIR / f"{stem}.network.pickle")

    logger.info("--- Starting OSM Multimodal Network Conversion Workflow ---")
    logger.info(f"OSM JSON: {osm_json}")
    logger.info(f"Output: {output_path}")
    logger.debug(f"Converter config: {config_json}")

    config = load_converter_config_task(config_json=config_json)

    osm_data = load_osm_data_task(osm_json=osm_json)

    converted = convert_osm_network_task(osm_data=osm_data, config=config)

    g = converted["g"]

    network_path = save_network_task(g=g, output_path=output_path)

    logger.info("--- Workflow Finished Successfully ---")
    logger.info(f"Network: {network_path}")

    return {
        "network_path": network_path,
        "num_nodes": g.number_of_nodes(),
        "num_links": g.number_of_edges(),
        "report": converted["report"],
    }


# --- Command-Line Interface ---
if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Convert an Overpass OSM JSON extract into a multimodal network."
    )

    parser.add_argument(
        "--osm-json",
        type=str,
        required=True,
        help="Path to the Overpass API JSON response ([out:json]).",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help=f"Path of the output network pickle. Default: {DEFAULT_OUTPUT_DIR}/<osm-json stem>.network.pickle",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a converter config JSON file. Default: built-in way parameters.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG level) logging.",
    )

    args = parser.parse_args()

    # --- Basic Logging Config for Script ---
    init_log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=init_log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(
        logging.WARNING if not args.verbose else logging.DEBUG
    )

    logging.info(f"Running flow with CLI args: {vars(args)}")

    network_conversion_flow(
        osm_json=args.osm_json,
        output_path=args.output,
        config_json=args.config,
        verbose=args.verbose,
    )
