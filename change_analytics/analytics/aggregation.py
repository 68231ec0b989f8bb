"""
Aggregations behind the dashboard charts: zero-filled day buckets with
per-authorization rankings, and ranked data-source summaries.

Counts are unsigned. The diverging daily chart draws removals below the axis;
``DayBucket.removed_sign`` tells the presentation layer which way to orient
them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from change_analytics.data.filters import filter_by_date_range
from change_analytics.data.frames import AuthorizationInput, EventInput, as_event_frame, authorization_index
from change_analytics.data.models import UNKNOWN_AUTHORIZATION, Action
from change_analytics.utils.time_utils import ONE_DAY, DateRange, enumerate_days

logger = logging.getLogger(__name__)

REMOVED_SIGN = -1
ADDED_SIGN = 1


@dataclass(frozen=True)
class AuthorizationCount:
    authorization_id: str
    display_name: str
    data_source_type: str
    count: int


@dataclass(frozen=True)
class DayBucket:
    day: pd.Timestamp
    added_count: int = 0
    removed_count: int = 0
    added_authorizations: Tuple[AuthorizationCount, ...] = field(default_factory=tuple)
    removed_authorizations: Tuple[AuthorizationCount, ...] = field(default_factory=tuple)
    added_sign: int = ADDED_SIGN
    removed_sign: int = REMOVED_SIGN

    @property
    def total(self) -> int:
        return self.added_count + self.removed_count


@dataclass(frozen=True)
class DataSourceSummary:
    data_source: str
    total: int
    added_count: int
    removed_count: int
    percentage_of_total: int


@dataclass(frozen=True)
class AuthorizationSummary:
    authorization_id: str
    display_name: str
    data_source_type: str
    workspace: str
    total: int
    added_count: int
    removed_count: int
    latest_change: pd.Timestamp


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _stable_rank(counts: pd.Series) -> pd.Series:
    # groupby(sort=False) yields first-seen order; a stable sort keeps it among ties
    return counts.sort_values(ascending=False, kind="stable")


def rank_authorizations(
    events: pd.DataFrame,
    index: Dict[str, Tuple[str, str]],
) -> Tuple[AuthorizationCount, ...]:
    """Group events by authorization, most changes first, ties in first-seen order."""
    if events.empty:
        return ()
    counts = _stable_rank(events.groupby("authorization_id", sort=False).size())
    fallback_types = events.groupby("authorization_id", sort=False)["data_source"].first()
    ranked = []
    for authorization_id, count in counts.items():
        name, source_type = index.get(authorization_id, (UNKNOWN_AUTHORIZATION, fallback_types[authorization_id]))
        ranked.append(
            AuthorizationCount(
                authorization_id=authorization_id,
                display_name=name,
                data_source_type=source_type,
                count=int(count),
            )
        )
    return tuple(ranked)


def top_with_remainder(ranked: Sequence[AuthorizationCount], limit: int = 5) -> Tuple[List[AuthorizationCount], int]:
    """Split a ranked list into the first ``limit`` entries and how many were left out."""
    head = list(ranked[:limit])
    return head, max(len(ranked) - limit, 0)


def aggregate_by_day(
    events: EventInput,
    date_range: DateRange,
    authorizations: Optional[AuthorizationInput] = None,
) -> List[DayBucket]:
    """
    One bucket per calendar day from floor(start) to floor(end), inclusive,
    including days without events. Events are assigned to the bucket whose
    ``[day, day + 1 day)`` window contains them.
    """
    days = enumerate_days(date_range)
    if len(days) == 0:
        return []

    df = as_event_frame(events)
    index = authorization_index(authorizations) if authorizations is not None else {}

    by_day: Dict[pd.Timestamp, pd.DataFrame] = {}
    if not df.empty:
        window = (df["occurred_at"] >= days[0]) & (df["occurred_at"] < days[-1] + ONE_DAY)
        working = df[window]
        if not working.empty:
            day_keys = working["occurred_at"].dt.floor("D")
            by_day = {day: group for day, group in working.groupby(day_keys, sort=False)}

    buckets: List[DayBucket] = []
    for day in days:
        day_events = by_day.get(day)
        if day_events is None:
            buckets.append(DayBucket(day=day))
            continue
        added = day_events[day_events["action"] == Action.ADDED.value]
        removed = day_events[day_events["action"] == Action.REMOVED.value]
        buckets.append(
            DayBucket(
                day=day,
                added_count=len(added),
                removed_count=len(removed),
                added_authorizations=rank_authorizations(added, index),
                removed_authorizations=rank_authorizations(removed, index),
            )
        )
    logger.debug("Aggregated %d events into %d day buckets", len(df), len(buckets))
    return buckets


def aggregate_by_data_source(events: EventInput, date_range: Optional[DateRange] = None) -> List[DataSourceSummary]:
    """Totals per data source within the range, largest first, ties in first-seen order."""
    df = filter_by_date_range(events, date_range)
    if df.empty:
        return []

    grand_total = len(df)
    grouped = df.groupby("data_source", sort=False)
    totals = _stable_rank(grouped.size())
    added = grouped["action"].agg(lambda s: int((s == Action.ADDED.value).sum()))

    summaries = []
    for data_source, total in totals.items():
        added_count = int(added[data_source])
        summaries.append(
            DataSourceSummary(
                data_source=data_source,
                total=int(total),
                added_count=added_count,
                removed_count=int(total) - added_count,
                percentage_of_total=round_half_up(100 * total / grand_total) if grand_total else 0,
            )
        )
    return summaries


def summarize_by_authorization(
    events: EventInput,
    authorizations: Optional[AuthorizationInput] = None,
) -> List[AuthorizationSummary]:
    """Per-authorization totals for digest views, largest first, ties in first-seen order."""
    df = as_event_frame(events)
    if df.empty:
        return []
    index = authorization_index(authorizations) if authorizations is not None else {}

    grouped = df.groupby("authorization_id", sort=False)
    totals = _stable_rank(grouped.size())
    firsts = grouped[["workspace", "data_source"]].first()
    latest = grouped["occurred_at"].max()
    added = grouped["action"].agg(lambda s: int((s == Action.ADDED.value).sum()))

    summaries = []
    for authorization_id, total in totals.items():
        name, source_type = index.get(
            authorization_id, (UNKNOWN_AUTHORIZATION, firsts.at[authorization_id, "data_source"])
        )
        added_count = int(added[authorization_id])
        summaries.append(
            AuthorizationSummary(
                authorization_id=authorization_id,
                display_name=name,
                data_source_type=source_type,
                workspace=firsts.at[authorization_id, "workspace"],
                total=int(total),
                added_count=added_count,
                removed_count=int(total) - added_count,
                latest_change=latest[authorization_id],
            )
        )
    return summaries


def day_buckets_frame(buckets: Sequence[DayBucket]) -> pd.DataFrame:
    """Flatten buckets for charting; counts stay unsigned."""
    return pd.DataFrame(
        [
            {
                "day": bucket.day,
                "added": bucket.added_count,
                "removed": bucket.removed_count,
                "total": bucket.total,
                "added_authorizations": len(bucket.added_authorizations),
                "removed_authorizations": len(bucket.removed_authorizations),
            }
            for bucket in buckets
        ],
        columns=["day", "added", "removed", "total", "added_authorizations", "removed_authorizations"],
    )


def data_source_frame(summaries: Sequence[DataSourceSummary]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Data Source": summary.data_source,
                "Total": summary.total,
                "Added": summary.added_count,
                "Removed": summary.removed_count,
                "Share": summary.percentage_of_total,
            }
            for summary in summaries
        ],
        columns=["Data Source", "Total", "Added", "Removed", "Share"],
    )
