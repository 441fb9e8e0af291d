"""
Source graph provider for Overpass API JSON.

Reads the `elements` array returned by an Overpass `[out:json]` query into an
OsmData instance. Node coordinates are stored as x=lon, y=lat; projection to a
planar CRS happens during conversion.

See: https://wiki.openstreetmap.org/wiki/Overpass_API/Overpass_QL#JSON_(JavaScript_Object_Notation)
"""

import json
import logging
import os
from os import PathLike
from typing import Any, Dict, Iterable, Union

from ..exceptions import OsmDataError
from .model import Node, OsmData, Relation, RelationMember, Way

logger = logging.getLogger(__name__)


def _tags(element: Dict[str, Any]) -> Dict[str, str]:
    return {str(k): str(v) for k, v in (element.get("tags") or {}).items()}


def osm_data_from_elements(
    elements: Iterable[Dict[str, Any]],  #
) -> OsmData:
    """
    Build OsmData from Overpass-style element dicts.

    Parameters:
        elements (Iterable[dict]): Elements with a "type" of "node", "way" or
            "relation". Nodes need "id", "lat", "lon"; ways need "id" and
            "nodes"; relations need "id" and optionally "members".

    Returns:
        OsmData: The populated source graph.

    Raises:
        OsmDataError: If an element lacks a field required for its type.

    Notes:
        - Elements of any other type (e.g., "area") are skipped.
        - Ways with fewer than two node refs are kept here; the usability
          filter drops them during conversion.
    """
    osm_data = OsmData()
    skipped = 0

    for element in elements:
        element_type = element.get("type")

        try:
            if element_type == "node":
                node_id = int(element["id"])
                osm_data.nodes[node_id] = Node(
                    id=node_id,
                    x=float(element["lon"]),
                    y=float(element["lat"]),
                )
            elif element_type == "way":
                way_id = int(element["id"])
                osm_data.ways[way_id] = Way(
                    id=way_id,
                    nodes=[int(n) for n in element["nodes"]],
                    tags=_tags(element),
                )
            elif element_type == "relation":
                relation_id = int(element["id"])
                osm_data.relations[relation_id] = Relation(
                    id=relation_id,
                    members=[
                        RelationMember(
                            ref_id=int(m["ref"]),
                            role=m.get("role") or "",
                            type=m.get("type"),
                        )
                        for m in element.get("members") or []
                    ],
                    tags=_tags(element),
                )
            else:
                skipped += 1
        except (KeyError, TypeError, ValueError) as e:
            raise OsmDataError(
                f"Malformed OSM {element_type} element: {e}", element=element
            ) from e

    if skipped:
        logger.debug(f"Skipped {skipped} OSM elements of unsupported type.")

    logger.info(
        f"Loaded {len(osm_data.nodes)} nodes, {len(osm_data.ways)} ways, "
        f"{len(osm_data.relations)} relations."
    )

    return osm_data


def load_osm_data_from_overpass_json(
    path: Union[str, PathLike],  #
) -> OsmData:
    """
    Load an Overpass API JSON response from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        OsmDataError: If the file is not valid JSON, has no "elements" array, or
            an element is malformed.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"OSM JSON file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise OsmDataError(f"Invalid JSON in OSM file {path}: {e}") from e

    elements = payload.get("elements") if isinstance(payload, dict) else None

    if not isinstance(elements, list):
        raise OsmDataError(f'OSM JSON file has no "elements" array: {path}')

    return osm_data_from_elements(elements)
