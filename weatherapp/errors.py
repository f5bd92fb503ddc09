"""Error taxonomy shared by the client, normalizer and orchestration layers."""


class WeatherAppError(Exception):
    """Base class for errors surfaced to the user as a message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedForecastError(WeatherAppError):
    """Raised when a forecast payload violates the expected shape."""


class ProviderError(WeatherAppError):
    """Raised when the weather provider fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PermissionDeniedError(WeatherAppError):
    """Raised when location access is refused. Recover by searching a city."""


class LocationUnavailableError(WeatherAppError):
    """Raised when a coordinate fix cannot be obtained."""
