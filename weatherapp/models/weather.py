"""Current conditions, location and geocoding models."""

from dataclasses import dataclass

from weatherapp.models.common import Coordinates, Timestamp


@dataclass(frozen=True)
class CurrentConditions:
    city_name: str
    country: str
    coords: Coordinates
    timestamp: Timestamp
    temperature: float
    feels_like: float
    temp_min: float
    temp_max: float
    humidity: int
    pressure: int
    condition_code: str  # e.g. "Rain", "Clear"
    description: str
    icon_id: str
    wind_speed: float = 0.0
    wind_deg: int = 0
    cloudiness: int = 0
    visibility: int = 0
    sunrise: Timestamp = 0
    sunset: Timestamp = 0


@dataclass(frozen=True)
class LocationInfo:
    name: str
    country: str
    coords: Coordinates


@dataclass(frozen=True)
class CitySuggestion:
    name: str
    country: str
    latitude: float
    longitude: float
    state: str | None = None

    @property
    def label(self) -> str:
        parts = [self.name]
        if self.state:
            parts.append(self.state)
        parts.append(self.country)
        return ", ".join(p for p in parts if p)


@dataclass(frozen=True)
class OutfitRecommendation:
    category: str
    items: tuple[str, ...]
    icon: str
