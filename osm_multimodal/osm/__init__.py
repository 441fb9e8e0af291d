from .model import Node, OsmData, Relation, RelationMember, Way, WayTags
from .reader import load_osm_data_from_overpass_json, osm_data_from_elements

__all__ = [
    "Node",  #
    "OsmData",
    "Relation",
    "RelationMember",
    "Way",
    "WayTags",
    "load_osm_data_from_overpass_json",
    "osm_data_from_elements",
]
