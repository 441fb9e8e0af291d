from .config import ConverterConfig, OsmWayParams, load_converter_config
from .network.convert import ConvertedNetworkData, convert_osm_to_network

__all__ = [
    "ConvertedNetworkData",  #
    "ConverterConfig",
    "OsmWayParams",
    "convert_osm_to_network",
    "load_converter_config",
]
