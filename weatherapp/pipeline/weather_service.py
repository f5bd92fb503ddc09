"""Async orchestration: location -> provider fetch -> normalize -> view state."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from weatherapp.config.schema import ForecastConfig
from weatherapp.errors import ProviderError, WeatherAppError
from weatherapp.forecast.normalizer import normalize, parse_forecast_response
from weatherapp.forecast.outfit import recommend_outfit
from weatherapp.ingest.location import LocationProvider, ensure_permission_and_get_location
from weatherapp.ingest.openweather_client import OpenWeatherClient
from weatherapp.models.common import Coordinates, Timestamp, utc_now_ts
from weatherapp.models.forecast import ForecastView
from weatherapp.models.weather import (
    CitySuggestion,
    CurrentConditions,
    LocationInfo,
    OutfitRecommendation,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."


@dataclass(frozen=True)
class Dashboard:
    conditions: CurrentConditions
    location: LocationInfo
    forecast: ForecastView
    outfit: OutfitRecommendation


class WeatherService:
    def __init__(
        self,
        client: OpenWeatherClient,
        location_provider: LocationProvider,
        forecast_settings: ForecastConfig | None = None,
        clock: Callable[[], Timestamp] = utc_now_ts,
    ):
        self.client = client
        self.location_provider = location_provider
        self.forecast_settings = forecast_settings or ForecastConfig()
        self.clock = clock

    async def forecast_for(self, coords: Coordinates) -> ForecastView:
        """Fetch and normalize the forecast for a coordinate pair."""
        payload = await self.client.get_forecast_by_coords(coords.latitude, coords.longitude)
        raw = parse_forecast_response(payload)
        fs = self.forecast_settings
        view = normalize(
            raw,
            now=self.clock(),
            hourly_count=fs.hourly_count,
            daily_count=fs.daily_count,
            daily_headroom=fs.daily_headroom,
            fallback_icon=fs.fallback_icon,
        )
        logger.info(
            "Forecast for %s: %d hourly, %d daily",
            view.city_name or coords, len(view.hourly), len(view.daily),
        )
        return view

    async def current_location(self) -> Coordinates:
        return await ensure_permission_and_get_location(self.location_provider)

    async def current_location_weather(self) -> tuple[CurrentConditions, LocationInfo]:
        """Current conditions at the device location."""
        coords = await self.current_location()
        conditions = await self.client.get_weather_by_coords(coords.latitude, coords.longitude)
        location = LocationInfo(
            name=conditions.city_name,
            country=conditions.country,
            coords=coords,
        )
        return conditions, location

    async def city_weather(self, city_name: str) -> tuple[CurrentConditions, LocationInfo]:
        """Current conditions for a searched city."""
        name = city_name.strip()
        if not name:
            raise ProviderError("Please enter a city name")
        conditions = await self.client.get_weather_by_city(name)
        location = LocationInfo(
            name=conditions.city_name,
            country=conditions.country,
            coords=conditions.coords,
        )
        return conditions, location

    async def suggest_cities(self, query: str, limit: int | None = None) -> list[CitySuggestion]:
        """Autocomplete suggestions. Failures clear suggestions instead of raising."""
        if not query.strip():
            return []
        try:
            return await self.client.search_cities(query, limit)
        except WeatherAppError as e:
            logger.warning("City suggestions unavailable for %r: %s", query, e)
            return []

    async def dashboard(self, coords: Coordinates) -> Dashboard:
        """Current conditions, forecast and outfit for one location."""
        conditions, forecast = await asyncio.gather(
            self.client.get_weather_by_coords(coords.latitude, coords.longitude),
            self.forecast_for(coords),
        )
        location = LocationInfo(
            name=conditions.city_name or forecast.city_name,
            country=conditions.country,
            coords=coords,
        )
        outfit = recommend_outfit(conditions.temperature, conditions.condition_code)
        return Dashboard(conditions, location, forecast, outfit)


class RequestSequencer:
    """Hands out monotonic request ids and tracks the latest one issued."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, request_id: int) -> bool:
        return request_id == self._latest


class ViewState(Generic[T]):
    """Displayed state for one view: loading flag, last data, last error.

    Each refresh is tagged with a request id; a response whose id is no
    longer the latest issued is discarded, so a slow stale fetch never
    overwrites a newer result.
    """

    def __init__(self, name: str = "view") -> None:
        self.name = name
        self.sequencer = RequestSequencer()
        self.loading = False
        self.data: T | None = None
        self.error: str | None = None
        self.request_id = 0

    async def refresh(self, fetch: Callable[[], Awaitable[T]]) -> bool:
        """Run fetch and apply its outcome. Returns False if it was superseded."""
        request_id = self.sequencer.issue()
        self.loading = True
        try:
            result = await fetch()
        except WeatherAppError as e:
            if not self._accept(request_id):
                return False
            logger.error("%s refresh %d failed: %s", self.name, request_id, e)
            self.error = e.message
            return True
        except asyncio.CancelledError:
            if self.sequencer.is_current(request_id):
                self.loading = False
            raise
        except Exception:
            if self._accept(request_id):
                logger.exception("%s refresh %d crashed", self.name, request_id)
                self.error = UNEXPECTED_ERROR
            raise

        if not self._accept(request_id):
            return False
        self.data = result
        self.error = None
        return True

    def _accept(self, request_id: int) -> bool:
        if not self.sequencer.is_current(request_id):
            logger.info(
                "Discarding stale %s response %d (latest %d)",
                self.name, request_id, self.sequencer.latest,
            )
            return False
        self.loading = False
        self.request_id = request_id
        return True
