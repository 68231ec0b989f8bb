"""
Stable sorting for change-event and authorization tables.

Every sort compares an explicit key and falls back to the input position, so
rows with equal keys keep their relative order in both directions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Union

import pandas as pd

from change_analytics.data.frames import AuthorizationInput, EventInput, as_authorization_frame, as_event_frame


class SortOrder(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    def flipped(self) -> "SortOrder":
        return SortOrder.DESCENDING if self is SortOrder.ASCENDING else SortOrder.ASCENDING


class SortField(str, Enum):
    OCCURRED_AT = "occurred_at"
    ACTION = "action"
    SUBJECT_NAME = "subject_name"
    ID = "id"


class AuthorizationSortField(str, Enum):
    NAME = "name"
    DATA_SOURCE_TYPE = "data_source_type"
    WORKSPACE = "workspace"
    CREATED_AT = "created_at"
    LAST_USED_AT = "last_used_at"
    STATUS = "status"


def _as_is(series: pd.Series) -> pd.Series:
    return series


def _casefold(series: pd.Series) -> pd.Series:
    return series.astype(str).str.lower()


def _never_used_first(series: pd.Series) -> pd.Series:
    # Never-used authorizations compare as the oldest possible timestamp
    return series.fillna(pd.Timestamp.min.tz_localize("UTC"))


EVENT_SORT_KEYS: Dict[SortField, Callable[[pd.Series], pd.Series]] = {
    SortField.OCCURRED_AT: _as_is,
    SortField.ACTION: _as_is,
    SortField.SUBJECT_NAME: _casefold,
    SortField.ID: _casefold,
}

AUTHORIZATION_SORT_KEYS: Dict[AuthorizationSortField, Callable[[pd.Series], pd.Series]] = {
    AuthorizationSortField.NAME: _casefold,
    AuthorizationSortField.DATA_SOURCE_TYPE: _as_is,
    AuthorizationSortField.WORKSPACE: _as_is,
    AuthorizationSortField.CREATED_AT: _as_is,
    AuthorizationSortField.LAST_USED_AT: _never_used_first,
    AuthorizationSortField.STATUS: _as_is,
}


@dataclass(frozen=True)
class SortState:
    field: SortField = SortField.OCCURRED_AT
    order: SortOrder = SortOrder.DESCENDING

    def __post_init__(self) -> None:
        object.__setattr__(self, "field", SortField(self.field))
        object.__setattr__(self, "order", SortOrder(self.order))

    def toggle(self, field: Union[SortField, str]) -> "SortState":
        """Same field flips the order; a new field starts descending."""
        field = SortField(field)
        if field is self.field:
            return SortState(field=field, order=self.order.flipped())
        return SortState(field=field, order=SortOrder.DESCENDING)


DEFAULT_SORT = SortState()


def _stable_sort(df: pd.DataFrame, column: str, key: Callable[[pd.Series], pd.Series], order: SortOrder) -> pd.DataFrame:
    if df.empty:
        return df.reset_index(drop=True)
    working = df.reset_index(drop=True)
    keys = pd.DataFrame({"_key": key(working[column]), "_position": range(len(working))})
    ordered = keys.sort_values(
        ["_key", "_position"],
        ascending=[order is SortOrder.ASCENDING, True],
        kind="stable",
    )
    return working.loc[ordered.index].reset_index(drop=True)


def sort_events(
    events: EventInput,
    field: Union[SortField, str] = SortField.OCCURRED_AT,
    order: Union[SortOrder, str] = SortOrder.DESCENDING,
) -> pd.DataFrame:
    field = SortField(field)
    return _stable_sort(as_event_frame(events), field.value, EVENT_SORT_KEYS[field], SortOrder(order))


def apply_sort(events: EventInput, state: SortState = DEFAULT_SORT) -> pd.DataFrame:
    return sort_events(events, state.field, state.order)


def sort_authorizations(
    authorizations: AuthorizationInput,
    field: Union[AuthorizationSortField, str] = AuthorizationSortField.CREATED_AT,
    order: Union[SortOrder, str] = SortOrder.DESCENDING,
) -> pd.DataFrame:
    field = AuthorizationSortField(field)
    return _stable_sort(
        as_authorization_frame(authorizations), field.value, AUTHORIZATION_SORT_KEYS[field], SortOrder(order)
    )
