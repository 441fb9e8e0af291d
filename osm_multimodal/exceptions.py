from typing import Any, List, Optional

# --- Custom Exceptions ---


class OsmNetworkError(Exception):
    """Base exception for errors raised while building a multimodal network."""

    pass


class ConfigurationError(OsmNetworkError):
    """
    Raised when the converter configuration cannot be used.

    This covers malformed configuration files, way parameter sets with missing
    fields or an unsupported OSM key, and scalar settings outside their valid
    range (e.g., a non-positive max_link_length).
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        """
        Initializes the ConfigurationError.

        Args:
            message: The main error message.
            errors: A list of specific validation failures found.
        """
        super().__init__(message)
        self.errors = errors if errors else []


class OsmDataError(OsmNetworkError):
    """
    Raised when the source OSM data is structurally unusable,
    e.g., an element without an id or a way without a node list.
    """

    def __init__(self, message: str, element: Optional[Any] = None):
        super().__init__(message)
        self.element = element


class NetworkRoundTripError(OsmNetworkError):
    """
    Raised when writing or reading back the road network between the two
    connectivity reduction passes fails.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class BrokenInvariantError(OsmNetworkError):
    """
    Specific error indicating that a fundamental assumption about the
    converted network has been violated.
    """

    pass
