"""OpenWeather current weather, forecast and geocoding client.

Failures are reported once as ProviderError; there are no retries.
"""

import logging
from typing import Any

import httpx

from weatherapp.config.schema import ProviderConfig, SearchConfig
from weatherapp.errors import ProviderError
from weatherapp.models.common import Coordinates
from weatherapp.models.weather import CitySuggestion, CurrentConditions

logger = logging.getLogger(__name__)

USER_AGENT = "weatherapp/0.1.0"


class OpenWeatherClient:
    def __init__(
        self,
        settings: ProviderConfig,
        search: SearchConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings
        self.search = search or SearchConfig()
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(
            timeout=settings.timeout_seconds,
            headers={"User-Agent": USER_AGENT},
        )

    async def __aenter__(self) -> "OpenWeatherClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # --- Current weather ---

    async def get_weather_by_coords(self, lat: float, lon: float) -> CurrentConditions:
        """Fetch current conditions at a coordinate pair."""
        data = await self._get(
            f"{self.settings.base_url}/weather",
            {"lat": lat, "lon": lon},
            failure="Failed to fetch weather data",
            network_failure="Network error while fetching weather data",
            not_found="Location not found",
        )
        return parse_current_conditions(data)

    async def get_weather_by_city(self, city_name: str) -> CurrentConditions:
        """Fetch current conditions for a city name."""
        data = await self._get(
            f"{self.settings.base_url}/weather",
            {"q": city_name},
            failure="Failed to fetch weather data",
            network_failure="Network error while fetching weather data",
            not_found="City not found. Please check the spelling and try again.",
        )
        return parse_current_conditions(data)

    # --- Forecast ---

    async def get_forecast_by_coords(self, lat: float, lon: float) -> dict:
        """Fetch the raw 5-day / 3-hour forecast JSON."""
        return await self._get(
            f"{self.settings.base_url}/forecast",
            {"lat": lat, "lon": lon},
            failure="Failed to fetch forecast data",
            network_failure="Network error while fetching forecast data",
        )

    # --- Geocoding ---

    async def search_cities(self, query: str, limit: int | None = None) -> list[CitySuggestion]:
        """Search cities by name. Queries under the minimum length return []."""
        query = query.strip()
        if len(query) < self.search.min_query_length:
            return []
        data = await self._get(
            f"{self.settings.geocoding_base_url}/direct",
            {"q": query, "limit": limit or self.search.suggestion_limit},
            failure="Failed to fetch city suggestions",
            network_failure="Network error while searching cities",
            units=False,
        )
        if not isinstance(data, list):
            raise ProviderError("Unexpected city suggestion payload")
        try:
            return [
                CitySuggestion(
                    name=item["name"],
                    country=item.get("country", ""),
                    latitude=float(item["lat"]),
                    longitude=float(item["lon"]),
                    state=item.get("state"),
                )
                for item in data
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Unexpected city suggestion payload: {e}") from e

    async def _get(
        self,
        url: str,
        params: dict[str, Any],
        *,
        failure: str,
        network_failure: str,
        not_found: str | None = None,
        units: bool = True,
    ) -> Any:
        query = dict(params, appid=self.settings.api_key)
        if units:
            query["units"] = str(self.settings.units)
        try:
            resp = await self._client.get(url, params=query)
        except httpx.RequestError as e:
            logger.error("OpenWeather request failed: %s -> %s", url, e)
            raise ProviderError(network_failure) from e

        if resp.status_code == 404 and not_found is not None:
            logger.warning("OpenWeather 404 for %s", url)
            raise ProviderError(not_found, 404)
        if resp.status_code >= 400:
            logger.error("OpenWeather %d: %s", resp.status_code, url)
            raise ProviderError(failure, resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(f"{failure}: invalid JSON body") from e


def parse_current_conditions(data: Any) -> CurrentConditions:
    """Map a provider /weather JSON body onto CurrentConditions."""
    try:
        main = data["main"]
        weather = (data.get("weather") or [{}])[0]
        coord = data.get("coord") or {}
        sys_info = data.get("sys") or {}
        wind = data.get("wind") or {}
        return CurrentConditions(
            city_name=data.get("name", ""),
            country=sys_info.get("country", ""),
            coords=Coordinates(
                latitude=float(coord.get("lat", 0.0)),
                longitude=float(coord.get("lon", 0.0)),
            ),
            timestamp=int(data.get("dt", 0)),
            temperature=float(main["temp"]),
            feels_like=float(main.get("feels_like", main["temp"])),
            temp_min=float(main.get("temp_min", main["temp"])),
            temp_max=float(main.get("temp_max", main["temp"])),
            humidity=int(main.get("humidity", 0)),
            pressure=int(main.get("pressure", 0)),
            condition_code=weather.get("main", ""),
            description=weather.get("description", ""),
            icon_id=weather.get("icon", ""),
            wind_speed=float(wind.get("speed", 0.0)),
            wind_deg=int(wind.get("deg", 0)),
            cloudiness=int((data.get("clouds") or {}).get("all", 0)),
            visibility=int(data.get("visibility", 0)),
            sunrise=int(sys_info.get("sunrise", 0)),
            sunset=int(sys_info.get("sunset", 0)),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ProviderError(f"Unexpected weather payload: {e}") from e
