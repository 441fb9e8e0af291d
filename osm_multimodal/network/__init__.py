from .cleaning import (
    filter_network_by_modes,
    integrate_network,
    reduce_to_largest_strongly_connected_component,
)
from .convert import ConvertedNetworkData, convert_osm_to_network
from .io import read_network_pickle, roundtrip_network, write_network_pickle
from .links import LinkAttributes, LinkSynthesizer
from .relations import RelationModeIndex
from .report import ConversionReport
from .transform import get_coordinate_transform
from .way_params import WayParamRegistry

__all__ = [
    "ConversionReport",  #
    "ConvertedNetworkData",
    "LinkAttributes",
    "LinkSynthesizer",
    "RelationModeIndex",
    "WayParamRegistry",
    "convert_osm_to_network",
    "filter_network_by_modes",
    "get_coordinate_transform",
    "integrate_network",
    "read_network_pickle",
    "reduce_to_largest_strongly_connected_component",
    "roundtrip_network",
    "write_network_pickle",
]
