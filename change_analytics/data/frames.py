"""
Conversion of record snapshots into the DataFrames the engine operates on.

Validation happens here, once per snapshot; downstream filtering and
aggregation assume well-formed frames.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

import pandas as pd

from change_analytics.data.models import (
    UNKNOWN_AUTHORIZATION,
    Authorization,
    ChangeEvent,
    RecordValidationError,
)

logger = logging.getLogger(__name__)

EVENT_COLUMNS: List[str] = [
    "id",
    "authorization_id",
    "subject_name",
    "action",
    "occurred_at",
    "workspace",
    "data_source",
    "related_stream_names",
    "related_stream_count",
    "subject_kind",
]

AUTHORIZATION_COLUMNS: List[str] = [
    "id",
    "name",
    "data_source_type",
    "workspace",
    "created_at",
    "last_used_at",
    "entity_count",
    "datastream_count",
    "status",
]

EventInput = Union[pd.DataFrame, Iterable[Union[ChangeEvent, Mapping[str, Any]]]]
AuthorizationInput = Union[pd.DataFrame, Iterable[Union[Authorization, Mapping[str, Any]]]]


def _coerce_event(item: Union[ChangeEvent, Mapping[str, Any]]) -> ChangeEvent:
    if isinstance(item, ChangeEvent):
        return item
    if isinstance(item, Mapping):
        return ChangeEvent.from_mapping(item)
    raise RecordValidationError(f"Expected a ChangeEvent or mapping, got {type(item).__name__}")


def _coerce_authorization(item: Union[Authorization, Mapping[str, Any]]) -> Authorization:
    if isinstance(item, Authorization):
        return item
    if isinstance(item, Mapping):
        return Authorization.from_mapping(item)
    raise RecordValidationError(f"Expected an Authorization or mapping, got {type(item).__name__}")


def events_frame(events: Iterable[Union[ChangeEvent, Mapping[str, Any]]]) -> pd.DataFrame:
    """Validate change events and lay them out as an event frame (input order kept)."""
    records = [_coerce_event(item) for item in events]
    seen: Dict[str, int] = {}
    for position, event in enumerate(records):
        if event.id in seen:
            raise RecordValidationError(
                f"ChangeEvent {event.id!r}: duplicate id at positions {seen[event.id]} and {position}"
            )
        seen[event.id] = position

    rows = [
        {
            "id": event.id,
            "authorization_id": event.authorization_id,
            "subject_name": event.subject_name,
            "action": event.action.value,
            "occurred_at": event.occurred_at,
            "workspace": event.workspace,
            "data_source": event.data_source,
            "related_stream_names": list(event.related_stream_names),
            "related_stream_count": event.related_stream_count,
            "subject_kind": event.subject_kind.value,
        }
        for event in records
    ]
    frame = pd.DataFrame(rows, columns=EVENT_COLUMNS)
    frame["occurred_at"] = pd.to_datetime(frame["occurred_at"], utc=True)
    frame["related_stream_count"] = frame["related_stream_count"].astype("int64")
    logger.debug("Built event frame with %d rows", len(frame))
    return frame


def authorizations_frame(authorizations: Iterable[Union[Authorization, Mapping[str, Any]]]) -> pd.DataFrame:
    records = [_coerce_authorization(item) for item in authorizations]
    rows = [
        {
            "id": auth.id,
            "name": auth.name,
            "data_source_type": auth.data_source_type,
            "workspace": auth.workspace,
            "created_at": auth.created_at,
            "last_used_at": auth.last_used_at,
            "entity_count": auth.entity_count,
            "datastream_count": auth.datastream_count,
            "status": auth.status.value,
        }
        for auth in records
    ]
    frame = pd.DataFrame(rows, columns=AUTHORIZATION_COLUMNS)
    frame["created_at"] = pd.to_datetime(frame["created_at"], utc=True)
    frame["last_used_at"] = pd.to_datetime(frame["last_used_at"], utc=True)
    for col in ("entity_count", "datastream_count"):
        frame[col] = frame[col].astype("int64")
    logger.debug("Built authorization frame with %d rows", len(frame))
    return frame


def _check_columns(frame: pd.DataFrame, required: List[str], kind: str) -> None:
    missing = [col for col in required if col not in frame.columns]
    if missing:
        raise RecordValidationError(f"{kind} frame is missing columns: {', '.join(missing)}")


def as_event_frame(events: EventInput) -> pd.DataFrame:
    """Accept either an existing event frame or a sequence of records."""
    if isinstance(events, pd.DataFrame):
        _check_columns(events, EVENT_COLUMNS, "Event")
        return events
    return events_frame(events)


def as_authorization_frame(authorizations: AuthorizationInput) -> pd.DataFrame:
    if isinstance(authorizations, pd.DataFrame):
        _check_columns(authorizations, AUTHORIZATION_COLUMNS, "Authorization")
        return authorizations
    return authorizations_frame(authorizations)


def authorization_index(authorizations: AuthorizationInput) -> Dict[str, Tuple[str, str]]:
    """Map authorization id -> (display name, data source type)."""
    frame = as_authorization_frame(authorizations)
    return {
        row.id: (row.name, row.data_source_type)
        for row in frame[["id", "name", "data_source_type"]].itertuples(index=False)
    }


def resolve_authorization_name(index: Mapping[str, Tuple[str, str]], authorization_id: str) -> str:
    entry = index.get(authorization_id)
    return entry[0] if entry else UNKNOWN_AUTHORIZATION
