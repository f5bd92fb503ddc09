"""Output formatters for weather views."""

import json
from dataclasses import asdict
from datetime import UTC, datetime, tzinfo

from weatherapp.config.defaults import ICON_URL_TEMPLATE
from weatherapp.models.forecast import ForecastView
from weatherapp.models.weather import (
    CitySuggestion,
    CurrentConditions,
    LocationInfo,
    OutfitRecommendation,
)


def icon_url(icon_id: str, template: str = ICON_URL_TEMPLATE) -> str:
    """Resolve a provider icon code to its image URL."""
    return template.format(icon=icon_id)


def format_forecast_text(view: ForecastView, tz: tzinfo = UTC) -> str:
    """Plain text forecast: hourly cards then daily rows."""
    lines = [f"=== Forecast: {view.city_name or 'Unknown location'} ==="]
    lines.append("Hourly:")
    if not view.hourly:
        lines.append("  (no upcoming samples)")
    for h in view.hourly:
        when = datetime.fromtimestamp(h.timestamp, tz).strftime("%a %H:%M")
        lines.append(f"  {when}  {h.temperature_rounded:>4}°C  {h.description} [{h.icon_id}]")
    lines.append("Daily:")
    for d in view.daily:
        day = datetime.fromisoformat(d.calendar_date).strftime("%a %b %d")
        lines.append(
            f"  {day}  {d.temperature_min:>4}° / {d.temperature_max:>3}°  "
            f"{d.representative_description} [{d.representative_icon_id}]"
        )
    return "\n".join(lines)


def format_forecast_json(view: ForecastView, template: str = ICON_URL_TEMPLATE) -> str:
    """JSON forecast for programmatic consumption, icon URLs resolved."""
    data = asdict(view)
    for h in data["hourly"]:
        h["icon_url"] = icon_url(h["icon_id"], template)
    for d in data["daily"]:
        d["icon_url"] = icon_url(d["representative_icon_id"], template)
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_current_text(c: CurrentConditions, location: LocationInfo) -> str:
    place = ", ".join(p for p in (location.name, location.country) if p)
    return "\n".join([
        f"=== {place or 'Current location'} ===",
        f"{round(c.temperature)}°C (feels like {round(c.feels_like)}°C) | {c.description}",
        f"Low {round(c.temp_min)}° / High {round(c.temp_max)}°",
        f"Humidity: {c.humidity}% | Pressure: {c.pressure} hPa | "
        f"Wind: {c.wind_speed:.1f} m/s",
    ])


def format_current_json(c: CurrentConditions, location: LocationInfo) -> str:
    return json.dumps(
        {"location": asdict(location), "conditions": asdict(c)},
        indent=2,
        ensure_ascii=False,
    )


def format_outfit_text(rec: OutfitRecommendation) -> str:
    return f"{rec.icon} {rec.category}: {', '.join(rec.items)}"


def format_suggestions_text(suggestions: list[CitySuggestion]) -> str:
    if not suggestions:
        return "No matching cities"
    return "\n".join(
        f"  {s.label} ({s.latitude:.4f}, {s.longitude:.4f})" for s in suggestions
    )
