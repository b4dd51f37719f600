"""
Deterministic per-region statistics over logged pain entries.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class PainEntry:
    """One logged body-map measurement."""

    region: str
    severity: float
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class DateRange:
    start: datetime
    end: datetime


@dataclass(frozen=True, slots=True)
class RegionStat:
    region: str
    period: str
    frequency: int
    median_score: float
    total_entries: int
    date_range: DateRange | None = None

    @property
    def has_entries(self) -> bool:
        return self.frequency > 0


PainDataMaps = Mapping[str, Sequence[PainEntry]]


def calculate_median(values: Sequence[float]) -> float:
    """Median of the given values; 0 for an empty sequence."""
    ordered = sorted(values)
    length = len(ordered)
    if length == 0:
        return 0.0
    middle = length // 2
    if length % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return float(ordered[middle])


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_score(value: float) -> str:
    """Render a score in its shortest form (7.0 -> "7", 6.5 -> "6.5")."""
    numeric = float(value)
    if numeric.is_integer():
        return str(int(numeric))
    return repr(numeric)


def summarize_region(period: str, maps: PainDataMaps, region: str) -> RegionStat:
    """
    Compute frequency, median severity, and covered date span for one region.

    Region matching is exact and case-sensitive. A period missing from ``maps``
    is treated as having no entries, which yields a zeroed result with no date
    range ("nothing logged", never "logged zero pain").
    """
    period_entries = maps.get(period) or ()
    matches = [entry for entry in period_entries if entry.region == region]

    if not matches:
        return RegionStat(
            region=region,
            period=period,
            frequency=0,
            median_score=0.0,
            total_entries=0,
        )

    timestamps = sorted(_as_utc(entry.timestamp) for entry in matches)
    return RegionStat(
        region=region,
        period=period,
        frequency=len(matches),
        median_score=calculate_median([entry.severity for entry in matches]),
        total_entries=len(matches),
        date_range=DateRange(start=timestamps[0], end=timestamps[-1]),
    )
