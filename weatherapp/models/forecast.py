"""Forecast data models: raw provider samples and the normalized view."""

from dataclasses import dataclass

from weatherapp.models.common import Timestamp


@dataclass(frozen=True)
class RawSample:
    timestamp: Timestamp | None
    temperature: float | None  # Celsius
    condition_code: str = ""
    description: str = ""
    icon_id: str | None = None


@dataclass(frozen=True)
class RawForecastResponse:
    city_suggested_name: str
    samples: tuple[RawSample, ...]


@dataclass(frozen=True)
class HourlyForecastEntry:
    timestamp: Timestamp
    temperature_rounded: int
    icon_id: str
    description: str


@dataclass(frozen=True)
class DailyForecastEntry:
    calendar_date: str  # YYYY-MM-DD, UTC
    temperature_min: int
    temperature_max: int
    representative_icon_id: str
    representative_description: str


@dataclass(frozen=True)
class ForecastView:
    city_name: str
    hourly: tuple[HourlyForecastEntry, ...]
    daily: tuple[DailyForecastEntry, ...]
