"""
Date helpers used by filtering, day bucketing and export naming.

All timestamps are normalised to timezone-aware UTC ``pd.Timestamp`` values;
naive inputs are interpreted as UTC. Calendar days are UTC days.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Union

import pandas as pd

TimestampLike = Union[pd.Timestamp, dt.datetime, dt.date, str]

ONE_DAY = pd.Timedelta(days=1)


def to_timestamp(value: TimestampLike) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    if ts is pd.NaT:
        raise ValueError(f"Cannot interpret {value!r} as a timestamp")
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[start, end]`` window.

    ``start <= end`` is not enforced; callers may build an inverted range and
    every consumer treats it as matching nothing.
    """

    start: pd.Timestamp
    end: pd.Timestamp

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", to_timestamp(self.start))
        object.__setattr__(self, "end", to_timestamp(self.end))

    @property
    def is_inverted(self) -> bool:
        return self.start > self.end


def floor_day(value: TimestampLike) -> pd.Timestamp:
    return to_timestamp(value).floor("D")


def is_within(value: TimestampLike, date_range: DateRange) -> bool:
    """Inclusive on both ends; an inverted range contains nothing."""
    if date_range.is_inverted:
        return False
    return date_range.start <= to_timestamp(value) <= date_range.end


def enumerate_days(date_range: DateRange) -> pd.DatetimeIndex:
    """Every calendar day from floor(start) to floor(end), inclusive."""
    if date_range.is_inverted:
        return pd.DatetimeIndex([], tz="UTC")
    return pd.date_range(floor_day(date_range.start), floor_day(date_range.end), freq="D")


def lookback_range(days: int, now: Optional[TimestampLike] = None) -> DateRange:
    end = to_timestamp(now) if now is not None else pd.Timestamp.now(tz="UTC")
    return DateRange(start=end - pd.Timedelta(days=days), end=end)


def utc_today() -> dt.date:
    return pd.Timestamp.now(tz="UTC").date()


def iso_date(value: TimestampLike) -> str:
    return to_timestamp(value).strftime("%Y-%m-%d")


def format_datetime(value: TimestampLike) -> str:
    ts = to_timestamp(value)
    return f"{ts:%b} {ts.day}, {ts:%Y %H:%M:%S}"


def format_day_label(value: TimestampLike) -> str:
    ts = to_timestamp(value)
    return f"{ts:%b} {ts.day}"
