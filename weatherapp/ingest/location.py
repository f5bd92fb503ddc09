"""Device location seam: permission request and coordinate fix."""

import logging
from typing import Protocol

from weatherapp.config.schema import LocationConfig
from weatherapp.errors import (
    LocationUnavailableError,
    PermissionDeniedError,
    WeatherAppError,
)
from weatherapp.models.common import Coordinates

logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    async def request_permission(self) -> bool: ...

    async def current_coordinates(self) -> Coordinates: ...


class StaticLocationProvider:
    """Location provider backed by fixed coordinates, e.g. from config."""

    def __init__(self, coords: Coordinates | None, granted: bool = True):
        self.coords = coords
        self.granted = granted

    @classmethod
    def from_config(cls, config: LocationConfig) -> "StaticLocationProvider":
        coords = None
        if config.latitude is not None and config.longitude is not None:
            coords = Coordinates(config.latitude, config.longitude)
        return cls(coords, granted=config.permission_granted)

    async def request_permission(self) -> bool:
        return self.granted

    async def current_coordinates(self) -> Coordinates:
        if self.coords is None:
            raise LocationUnavailableError("Failed to get current location")
        return self.coords


async def ensure_permission_and_get_location(provider: LocationProvider) -> Coordinates:
    """Request permission, then return the current coordinates.

    Raises PermissionDeniedError when access is refused; other provider
    failures surface as LocationUnavailableError.
    """
    try:
        granted = await provider.request_permission()
        if not granted:
            raise PermissionDeniedError(
                "Location permission denied. Search for a city or enable "
                "location access in settings."
            )
        return await provider.current_coordinates()
    except WeatherAppError:
        raise
    except Exception as e:
        logger.exception("Unexpected error while acquiring location")
        raise LocationUnavailableError("Unable to access location") from e
