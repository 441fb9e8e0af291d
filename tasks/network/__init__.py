# tasks/network/__init__.py

from .tasks import (
    convert_osm_network_task,
    load_converter_config_task,
    load_osm_data_task,
    save_network_task,
)

__all__ = [
    "load_osm_data_task",  #
    "load_converter_config_task",
    "convert_osm_network_task",
    "save_network_task",
]
