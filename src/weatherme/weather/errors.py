"""Error taxonomy shared by the relay service and its HTTP layer."""


class WeatherServiceError(Exception):
    """Base class for relay errors; carries the HTTP status it maps to."""
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(WeatherServiceError):
    """Raised when request parameters are missing or malformed."""
    status_code = 400


class NotFound(WeatherServiceError):
    """Raised when the provider has no data for a valid query."""
    status_code = 404


class Unauthorized(WeatherServiceError):
    """Raised when the provider rejects the server's API key."""
    status_code = 401


class UpstreamError(WeatherServiceError):
    """Raised on network errors or any other provider failure."""
    status_code = 500


class ConfigurationError(WeatherServiceError):
    """Raised when the relay is started without required configuration."""
    pass
