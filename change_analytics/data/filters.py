"""
Filter utilities that apply dashboard filters to change-event and
authorization frames.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import pandas as pd

from change_analytics.data.frames import (
    AuthorizationInput,
    EventInput,
    as_authorization_frame,
    as_event_frame,
)
from change_analytics.data.models import ActionFilter, AuthorizationStatus
from change_analytics.utils.time_utils import DateRange, TimestampLike, lookback_range

logger = logging.getLogger(__name__)

ALL = "all"


@dataclass(frozen=True)
class EventFilters:
    date_range: Optional[DateRange] = None
    action: ActionFilter = ActionFilter.ALL
    search_term: Optional[str] = None
    authorization_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "action", ActionFilter(self.action))


DEFAULT_FILTERS = EventFilters()


@dataclass(frozen=True)
class AuthorizationFilters:
    workspace: str = ALL
    data_source_type: str = ALL
    status: str = ALL
    search_term: Optional[str] = None


DEFAULT_AUTHORIZATION_FILTERS = AuthorizationFilters()


def _empty_like(df: pd.DataFrame) -> pd.DataFrame:
    return df.iloc[0:0].reset_index(drop=True)


def _normalized_term(term: Optional[str]) -> str:
    return (term or "").strip().lower()


def _date_mask(occurred_at: pd.Series, date_range: DateRange) -> pd.Series:
    return (occurred_at >= date_range.start) & (occurred_at <= date_range.end)


def filter_by_date_range(events: EventInput, date_range: Optional[DateRange]) -> pd.DataFrame:
    """Keep events with ``start <= occurred_at <= end``; inverted ranges keep nothing."""
    df = as_event_frame(events)
    if date_range is None:
        return df.reset_index(drop=True)
    if date_range.is_inverted:
        logger.debug("Inverted date range %s > %s; returning no events", date_range.start, date_range.end)
        return _empty_like(df)
    if df.empty:
        return df.reset_index(drop=True)
    return df[_date_mask(df["occurred_at"], date_range)].reset_index(drop=True)


def _search_mask(df: pd.DataFrame, term: str) -> pd.Series:
    mask = df["subject_name"].astype(str).str.lower().str.contains(term, regex=False)
    mask |= df["id"].astype(str).str.lower().str.contains(term, regex=False)
    mask |= df["related_stream_names"].map(
        lambda names: any(term in str(name).lower() for name in names)
    ).astype(bool)
    return mask


def apply_event_filters(events: EventInput, filters: EventFilters = DEFAULT_FILTERS) -> pd.DataFrame:
    """
    Apply the selected filter values to an event frame.

    Returns a new frame in input order; the input is never modified.
    """
    df = as_event_frame(events)
    if filters.date_range is not None and filters.date_range.is_inverted:
        return _empty_like(df)
    if df.empty:
        return df.reset_index(drop=True)

    mask = pd.Series(True, index=df.index)
    if filters.date_range is not None:
        mask &= _date_mask(df["occurred_at"], filters.date_range)

    if filters.action is not ActionFilter.ALL:
        mask &= df["action"] == filters.action.value

    if filters.authorization_id:
        mask &= df["authorization_id"] == filters.authorization_id

    term = _normalized_term(filters.search_term)
    if term:
        mask &= _search_mask(df, term)

    filtered = df[mask].reset_index(drop=True)
    logger.debug("Event filters kept %d of %d rows", len(filtered), len(df))
    return filtered


def changes_for_authorization(events: EventInput, authorization_id: str) -> pd.DataFrame:
    return apply_event_filters(events, EventFilters(authorization_id=authorization_id))


def recent_changes(events: EventInput, days: int = 1, now: Optional[TimestampLike] = None) -> pd.DataFrame:
    """Changes that occurred within the last ``days`` days up to ``now``."""
    return filter_by_date_range(events, lookback_range(days, now))


def serialize_filters(filters: EventFilters) -> Dict[str, Any]:
    """
    Convert EventFilters to a JSON-serialisable dictionary to be stored in
    session_state or used for logging/debugging.
    """
    date_range = None
    if filters.date_range is not None:
        date_range = (filters.date_range.start.isoformat(), filters.date_range.end.isoformat())
    return {
        "date_range": date_range,
        "action": filters.action.value,
        "search_term": filters.search_term,
        "authorization_id": filters.authorization_id,
    }


def apply_authorization_filters(
    authorizations: AuthorizationInput,
    filters: AuthorizationFilters = DEFAULT_AUTHORIZATION_FILTERS,
) -> pd.DataFrame:
    df = as_authorization_frame(authorizations)
    if df.empty:
        return df.reset_index(drop=True)

    mask = pd.Series(True, index=df.index)
    if filters.workspace and filters.workspace.lower() != ALL:
        mask &= df["workspace"] == filters.workspace
    if filters.data_source_type and filters.data_source_type.lower() != ALL:
        mask &= df["data_source_type"] == filters.data_source_type
    if filters.status and filters.status.lower() != ALL:
        mask &= df["status"] == AuthorizationStatus(filters.status).value

    term = _normalized_term(filters.search_term)
    if term:
        text_mask = pd.Series(False, index=df.index)
        for col in ("name", "data_source_type", "workspace", "id"):
            text_mask |= df[col].astype(str).str.lower().str.contains(term, regex=False)
        mask &= text_mask

    return df[mask].reset_index(drop=True)
