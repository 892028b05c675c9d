"""
Custom exceptions for the RestStop routing engine
"""

class RestStopError(Exception):
    """Base exception for the RestStop routing engine"""
    pass


class LocationNotFoundError(RestStopError):
    """Raised when an origin or destination cannot be geocoded"""

    def __init__(self, query: str, reason: str = ''):
        self.query = query
        message = f"Could not find a location for '{query}'. Please enter a more specific place name."
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidCoordinatesError(LocationNotFoundError):
    """Raised when literal coordinates are out of bounds"""
    pass


class InvalidIntervalError(RestStopError):
    """Raised when the rest-stop interval is not a positive number"""
    pass


class APIError(RestStopError):
    """Raised when external API calls fail"""
    pass


class GeocodingAPIError(APIError):
    """Raised when the geocoding service fails or returns a malformed body"""
    pass


class PathBackendError(APIError):
    """Raised when a walking-path backend fails or returns no usable route"""
    pass
