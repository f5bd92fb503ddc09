"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

from weatherapp.config import defaults


class Units(StrEnum):
    # Temperatures are Celsius end to end; only metric is accepted.
    METRIC = "metric"


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    base_url: str = defaults.OPENWEATHER_BASE_URL
    geocoding_base_url: str = defaults.GEOCODING_BASE_URL
    units: Units = Units.METRIC
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    hourly_count: int = Field(default=defaults.HOURLY_COUNT, ge=1)
    daily_count: int = Field(default=defaults.DAILY_COUNT, ge=1)
    daily_headroom: int = Field(default=defaults.DAILY_HEADROOM, ge=1)
    fallback_icon: str = defaults.FALLBACK_ICON

    @model_validator(mode="after")
    def _headroom_covers_daily(self) -> "ForecastConfig":
        if self.daily_headroom < self.daily_count:
            raise ValueError("daily_headroom must be >= daily_count")
        return self


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    min_query_length: int = Field(default=2, ge=1)
    suggestion_limit: int = Field(default=5, ge=1, le=5)


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    permission_granted: bool = True


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    icon_url_template: str = defaults.ICON_URL_TEMPLATE
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
        return value


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    forecast: ForecastConfig = ForecastConfig()
    search: SearchConfig = SearchConfig()
    location: LocationConfig = LocationConfig()
    display: DisplayConfig = DisplayConfig()
    log_level: LogLevel = LogLevel.WARNING
