"""Tests for the async weather service and request sequencing."""

import asyncio
from unittest.mock import MagicMock

import pytest

from weatherapp.config.schema import ForecastConfig
from weatherapp.errors import MalformedForecastError, PermissionDeniedError, ProviderError
from weatherapp.ingest.location import StaticLocationProvider
from weatherapp.ingest.openweather_client import OpenWeatherClient, parse_current_conditions
from weatherapp.models.common import Coordinates
from weatherapp.pipeline.weather_service import (
    UNEXPECTED_ERROR,
    RequestSequencer,
    ViewState,
    WeatherService,
)

LONDON = Coordinates(51.5085, -0.1257)
JAN_2_0400 = 1704168000


def _service(mock_client, granted: bool = True, coords=LONDON, **kwargs) -> WeatherService:
    return WeatherService(
        mock_client,
        StaticLocationProvider(coords, granted=granted),
        clock=lambda: JAN_2_0400,
        **kwargs,
    )


@pytest.fixture
def mock_client(forecast_payload: dict, current_payload: dict):
    client = MagicMock(spec=OpenWeatherClient)
    client.get_forecast_by_coords.return_value = forecast_payload
    client.get_weather_by_coords.return_value = parse_current_conditions(current_payload)
    client.get_weather_by_city.return_value = parse_current_conditions(current_payload)
    return client


class TestForecastFor:
    def test_normalizes_with_injected_clock(self, mock_client):
        view = asyncio.run(_service(mock_client).forecast_for(LONDON))

        mock_client.get_forecast_by_coords.assert_called_once_with(51.5085, -0.1257)
        assert view.city_name == "London"
        assert len(view.hourly) == 5
        assert all(h.timestamp >= JAN_2_0400 for h in view.hourly)
        assert [d.calendar_date for d in view.daily][0] == "2024-01-01"

    def test_forecast_settings_applied(self, mock_client):
        service = _service(
            mock_client,
            forecast_settings=ForecastConfig(hourly_count=2, daily_count=1),
        )
        view = asyncio.run(service.forecast_for(LONDON))
        assert len(view.hourly) == 2
        assert len(view.daily) == 1

    def test_malformed_payload_propagates(self, mock_client):
        mock_client.get_forecast_by_coords.return_value = {"list": [], "city": {}}
        with pytest.raises(MalformedForecastError):
            asyncio.run(_service(mock_client).forecast_for(LONDON))

    def test_provider_error_propagates(self, mock_client):
        mock_client.get_forecast_by_coords.side_effect = ProviderError("down", 500)
        with pytest.raises(ProviderError):
            asyncio.run(_service(mock_client).forecast_for(LONDON))


class TestCurrentLocationWeather:
    def test_uses_device_coordinates(self, mock_client):
        device = Coordinates(51.0, -0.5)
        conditions, location = asyncio.run(
            _service(mock_client, coords=device).current_location_weather()
        )
        mock_client.get_weather_by_coords.assert_called_once_with(51.0, -0.5)
        assert location.name == "London"
        assert location.country == "GB"
        assert location.coords == device
        assert conditions.temperature == 12.4

    def test_permission_denied_skips_fetch(self, mock_client):
        with pytest.raises(PermissionDeniedError):
            asyncio.run(_service(mock_client, granted=False).current_location_weather())
        mock_client.get_weather_by_coords.assert_not_called()


class TestCityWeather:
    def test_location_from_response(self, mock_client):
        _, location = asyncio.run(_service(mock_client).city_weather("  London "))
        mock_client.get_weather_by_city.assert_called_once_with("London")
        assert location.coords == Coordinates(51.5085, -0.1257)

    def test_blank_name_rejected(self, mock_client):
        with pytest.raises(ProviderError, match="enter a city name"):
            asyncio.run(_service(mock_client).city_weather("   "))
        mock_client.get_weather_by_city.assert_not_called()


class TestSuggestCities:
    def test_passes_through(self, mock_client):
        mock_client.search_cities.return_value = ["sentinel"]
        result = asyncio.run(_service(mock_client).suggest_cities("Lon"))
        assert result == ["sentinel"]
        mock_client.search_cities.assert_called_once_with("Lon", None)

    def test_empty_query(self, mock_client):
        assert asyncio.run(_service(mock_client).suggest_cities("  ")) == []
        mock_client.search_cities.assert_not_called()

    def test_errors_cleared_not_raised(self, mock_client):
        mock_client.search_cities.side_effect = ProviderError("rate limited", 429)
        assert asyncio.run(_service(mock_client).suggest_cities("Lon")) == []


class TestDashboard:
    def test_combines_views(self, mock_client):
        dash = asyncio.run(_service(mock_client).dashboard(LONDON))
        assert dash.location.name == "London"
        assert dash.forecast.city_name == "London"
        # 12.4C with rain -> warm clothing with umbrella
        assert dash.outfit.category == "Warm clothing"
        assert "Umbrella" in dash.outfit.items

    def test_failure_propagates(self, mock_client):
        mock_client.get_weather_by_coords.side_effect = ProviderError("down", 502)
        with pytest.raises(ProviderError):
            asyncio.run(_service(mock_client).dashboard(LONDON))


class TestRequestSequencer:
    def test_monotonic(self):
        seq = RequestSequencer()
        assert seq.issue() == 1
        assert seq.issue() == 2
        assert seq.latest == 2

    def test_only_latest_is_current(self):
        seq = RequestSequencer()
        first = seq.issue()
        second = seq.issue()
        assert not seq.is_current(first)
        assert seq.is_current(second)


class TestViewState:
    def test_success(self):
        state: ViewState[str] = ViewState("forecast")

        async def fetch():
            return "fresh"

        applied = asyncio.run(state.refresh(fetch))
        assert applied is True
        assert state.data == "fresh"
        assert state.error is None
        assert state.loading is False
        assert state.request_id == 1

    def test_error_then_success_clears_error(self):
        state: ViewState[str] = ViewState("forecast")

        async def failing():
            raise ProviderError("Failed to fetch forecast data", 500)

        async def ok():
            return "data"

        asyncio.run(state.refresh(failing))
        assert state.error == "Failed to fetch forecast data"
        assert state.data is None
        assert state.loading is False

        asyncio.run(state.refresh(ok))
        assert state.error is None
        assert state.data == "data"

    def test_unexpected_exception_resets_loading(self):
        state: ViewState[str] = ViewState("forecast")

        async def broken():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(state.refresh(broken))
        assert state.loading is False
        assert state.error == UNEXPECTED_ERROR
        assert state.data is None
        assert state.request_id == 1

    def test_stale_slow_response_discarded(self):
        state: ViewState[str] = ViewState("forecast")

        async def scenario():
            release_slow = asyncio.Event()

            async def slow():
                await release_slow.wait()
                return "stale"

            async def fast():
                return "fresh"

            slow_task = asyncio.create_task(state.refresh(slow))
            await asyncio.sleep(0)
            fast_applied = await state.refresh(fast)
            release_slow.set()
            slow_applied = await slow_task
            return fast_applied, slow_applied

        fast_applied, slow_applied = asyncio.run(scenario())
        assert fast_applied is True
        assert slow_applied is False
        assert state.data == "fresh"
        assert state.request_id == 2
        assert state.loading is False

    def test_stale_error_discarded(self):
        state: ViewState[str] = ViewState("forecast")

        async def scenario():
            release_slow = asyncio.Event()

            async def slow_failure():
                await release_slow.wait()
                raise ProviderError("timeout")

            async def fast():
                return "fresh"

            slow_task = asyncio.create_task(state.refresh(slow_failure))
            await asyncio.sleep(0)
            await state.refresh(fast)
            release_slow.set()
            return await slow_task

        assert asyncio.run(scenario()) is False
        assert state.error is None
        assert state.data == "fresh"
