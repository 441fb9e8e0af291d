import logging
import os
import pickle
import tempfile
from os import PathLike
from typing import Optional, Union

import networkx as nx

from ..exceptions import NetworkRoundTripError

logger = logging.getLogger(__name__)


def write_network_pickle(
    g: nx.MultiDiGraph,  #
    path: Union[str, PathLike],
) -> None:
    with open(path, "wb") as f:
        pickle.dump(g, f, protocol=pickle.HIGHEST_PROTOCOL)


def read_network_pickle(
    path: Union[str, PathLike],  #
) -> nx.MultiDiGraph:
    with open(path, "rb") as f:
        g = pickle.load(f)

    if not isinstance(g, nx.MultiDiGraph):
        raise TypeError(f"Expected a MultiDiGraph in {path}, got {type(g)}")

    return g


def roundtrip_network(
    g: nx.MultiDiGraph,  #
    tmp_dir: Optional[Union[str, PathLike]] = None,
) -> nx.MultiDiGraph:
    """
    Write g to a temporary pickle file and read it back as a new graph.

    The returned graph shares no objects with g, so anything a connectivity
    reducer cached on g is gone.

    Parameters:
        g (nx.MultiDiGraph): The network to round trip.
        tmp_dir (PathLike, optional): Directory for the temporary file.
            Defaults to the system temp directory.

    Returns:
        nx.MultiDiGraph: The network as read back from disk.

    Raises:
        NetworkRoundTripError: If writing or reading the file fails. A failure
            to delete the temporary file is only logged.
    """
    try:
        fd, tmp_path = tempfile.mkstemp(
            prefix="tmp_network_", suffix=".pickle", dir=tmp_dir
        )
    except OSError as e:
        raise NetworkRoundTripError(
            f"Could not create temporary road network file in {tmp_dir}: {e}"
        ) from e

    os.close(fd)

    try:
        write_network_pickle(g, tmp_path)
        g_read = read_network_pickle(tmp_path)
    except (OSError, pickle.PickleError, EOFError, TypeError) as e:
        raise NetworkRoundTripError(
            f"Road network round trip through {tmp_path} failed: {e}", path=tmp_path
        ) from e
    finally:
        try:
            os.remove(tmp_path)
        except OSError as e:
            logger.info(f"Could not delete temporary road network file {tmp_path}: {e}")

    logger.debug(f"Round tripped road network through {tmp_path}")

    return g_read
