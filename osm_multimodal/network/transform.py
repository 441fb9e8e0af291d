import logging
from typing import Callable, Optional, Tuple

import pyproj
from tqdm import tqdm

from ..osm.model import OsmData

logger = logging.getLogger(__name__)

SOURCE_CRS = "EPSG:4326"

CoordinateTransform = Callable[[float, float], Tuple[float, float]]


def identity_transform(x: float, y: float) -> Tuple[float, float]:
    return x, y


def get_coordinate_transform(
    output_crs: Optional[str],  #
) -> CoordinateTransform:
    """
    Build a (lon, lat) -> (x, y) function projecting WGS84 into output_crs.

    Parameters:
        output_crs (str, optional): Any CRS definition pyproj understands,
            e.g. "EPSG:2056". If None, coordinates pass through unchanged.

    Returns:
        CoordinateTransform: A pure function of (lon, lat).

    Raises:
        pyproj.exceptions.CRSError: If output_crs is not a valid CRS.
    """
    if output_crs is None:
        return identity_transform

    # always_xy: OSM supplies (lon, lat); EPSG:4326's authority axis order is (lat, lon).
    transformer = pyproj.Transformer.from_crs(SOURCE_CRS, output_crs, always_xy=True)

    def transform(x: float, y: float) -> Tuple[float, float]:
        return transformer.transform(x, y)

    return transform


def project_way_nodes(
    osm_data: OsmData,  #
    transform: CoordinateTransform,
) -> int:
    """
    Replace the coordinates of every node on a usable way with their projection.

    Each node is transformed exactly once, so distances measured during
    thinning and link synthesis are in output CRS units.

    NOTE: Mutates the Node objects in osm_data.nodes. Run it after the
          usability filter and before thinning.

    Returns:
        int: The number of nodes projected.
    """
    if transform is identity_transform:
        return 0

    num_projected = 0

    for node in tqdm(osm_data.nodes.values(), leave=False):
        if not node.used:
            continue

        node.x, node.y = transform(node.x, node.y)
        num_projected += 1

    logger.debug(f"Projected {num_projected} way nodes.")

    return num_projected
