"""Common types and helpers shared across models."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TypeAlias

Timestamp: TypeAlias = int


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_ts() -> Timestamp:
    return int(utc_now().timestamp())
