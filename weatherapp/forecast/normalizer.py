"""Forecast normalizer: raw 3-hour samples -> hourly and daily view.

The normalizer is a pure function of its inputs. The caller supplies
"now" so output is deterministic. Calendar dates are always taken in UTC,
independent of the machine's locale.
"""

import math
from collections import Counter
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from weatherapp.config.defaults import (
    DAILY_COUNT,
    DAILY_HEADROOM,
    FALLBACK_ICON,
    HOURLY_COUNT,
)
from weatherapp.errors import MalformedForecastError
from weatherapp.models.common import Timestamp
from weatherapp.models.forecast import (
    DailyForecastEntry,
    ForecastView,
    HourlyForecastEntry,
    RawForecastResponse,
    RawSample,
)


def normalize(
    raw: RawForecastResponse,
    now: Timestamp,
    *,
    hourly_count: int = HOURLY_COUNT,
    daily_count: int = DAILY_COUNT,
    daily_headroom: int = DAILY_HEADROOM,
    fallback_icon: str = FALLBACK_ICON,
) -> ForecastView:
    """Build a ForecastView from a raw provider response.

    Raises MalformedForecastError if there are no samples or any sample
    lacks a timestamp or temperature. No partial view is ever returned.
    """
    if not raw.samples:
        raise MalformedForecastError("no forecast samples")
    for index, sample in enumerate(raw.samples):
        _validate_sample(sample, index)

    return ForecastView(
        city_name=raw.city_suggested_name or "",
        hourly=_build_hourly(raw.samples, now, hourly_count, fallback_icon),
        daily=_build_daily(raw.samples, daily_count, daily_headroom, fallback_icon),
    )


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (10.5 -> 11, -10.5 -> -11)."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def utc_date_key(timestamp: Timestamp) -> str:
    """UTC calendar date (YYYY-MM-DD) of a Unix timestamp."""
    return datetime.fromtimestamp(timestamp, UTC).date().isoformat()


def parse_forecast_response(payload: Any) -> RawForecastResponse:
    """Map a provider /forecast JSON body onto RawForecastResponse.

    Missing dt or main.temp are carried as None so normalize() can report
    the offending field; nothing is defaulted here.
    """
    if not isinstance(payload, dict):
        raise MalformedForecastError("forecast payload is not an object")
    items = payload.get("list")
    if not isinstance(items, list):
        raise MalformedForecastError("forecast payload has no 'list' array")

    city = payload.get("city") or {}
    city_name = city.get("name", "") if isinstance(city, dict) else ""

    samples = tuple(_parse_sample(item, i) for i, item in enumerate(items))
    return RawForecastResponse(city_suggested_name=city_name or "", samples=samples)


def _parse_sample(item: Any, index: int) -> RawSample:
    if not isinstance(item, dict):
        raise MalformedForecastError(f"sample {index} is not an object")
    main = item.get("main") or {}
    if not isinstance(main, dict):
        raise MalformedForecastError(f"sample {index} has invalid 'main'")
    weather = item.get("weather") or []
    if not isinstance(weather, list):
        raise MalformedForecastError(f"sample {index} has invalid 'weather'")
    first = weather[0] if weather and isinstance(weather[0], dict) else {}
    return RawSample(
        timestamp=item.get("dt"),
        temperature=main.get("temp"),
        condition_code=first.get("main", "") or "",
        description=first.get("description", "") or "",
        icon_id=first.get("icon") or None,
    )


def _validate_sample(sample: RawSample, index: int) -> None:
    if sample.timestamp is None:
        raise MalformedForecastError(f"sample {index} missing field 'timestamp'")
    if sample.temperature is None:
        raise MalformedForecastError(f"sample {index} missing field 'temperature'")
    if isinstance(sample.timestamp, bool) or not isinstance(sample.timestamp, int):
        raise MalformedForecastError(f"sample {index} has invalid 'timestamp'")
    try:
        utc_date_key(sample.timestamp)
    except (ValueError, OverflowError, OSError) as e:
        raise MalformedForecastError(f"sample {index} has invalid 'timestamp'") from e
    if (
        isinstance(sample.temperature, bool)
        or not isinstance(sample.temperature, (int, float))
        or not math.isfinite(sample.temperature)
    ):
        raise MalformedForecastError(f"sample {index} has invalid 'temperature'")


def _build_hourly(
    samples: tuple[RawSample, ...],
    now: Timestamp,
    count: int,
    fallback_icon: str,
) -> tuple[HourlyForecastEntry, ...]:
    # Provider order is trusted; no re-sort.
    upcoming = [s for s in samples if s.timestamp >= now][:count]
    return tuple(
        HourlyForecastEntry(
            timestamp=s.timestamp,
            temperature_rounded=round_half_away_from_zero(s.temperature),
            icon_id=s.icon_id or fallback_icon,
            description=s.description,
        )
        for s in upcoming
    )


def _build_daily(
    samples: tuple[RawSample, ...],
    count: int,
    headroom: int,
    fallback_icon: str,
) -> tuple[DailyForecastEntry, ...]:
    grouped: dict[str, list[RawSample]] = {}
    for s in samples:
        grouped.setdefault(utc_date_key(s.timestamp), []).append(s)

    # ISO date strings sort in date order.
    dates = sorted(grouped)[:headroom][:count]

    daily = []
    for date in dates:
        group = grouped[date]
        temps = [s.temperature for s in group]
        daily.append(
            DailyForecastEntry(
                calendar_date=date,
                temperature_min=round_half_away_from_zero(min(temps)),
                temperature_max=round_half_away_from_zero(max(temps)),
                representative_icon_id=_representative_icon(group, fallback_icon),
                # Description always comes from the first sample, not the mode.
                representative_description=group[0].description,
            )
        )
    return tuple(daily)


def _representative_icon(group: list[RawSample], fallback_icon: str) -> str:
    """Most frequent icon; ties go to the first one encountered."""
    counts = Counter(s.icon_id or fallback_icon for s in group)
    return counts.most_common(1)[0][0]
