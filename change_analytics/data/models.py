"""
Record types for change events and the authorizations they belong to.

Records validate themselves on construction so that a malformed snapshot
fails at ingestion with a descriptive error instead of producing silently
wrong aggregates further down.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Tuple

import pandas as pd

from change_analytics.utils.time_utils import DateRange, to_timestamp

__all__ = [
    "Action",
    "ActionFilter",
    "Authorization",
    "AuthorizationStatus",
    "ChangeEvent",
    "DateRange",
    "RecordValidationError",
    "SubjectKind",
    "UNKNOWN_AUTHORIZATION",
]

UNKNOWN_AUTHORIZATION = "Unknown Authorization"


class RecordValidationError(ValueError):
    """Raised when a supplied record violates the input contract."""


class Action(str, Enum):
    ADDED = "Added"
    REMOVED = "Removed"


class ActionFilter(str, Enum):
    ALL = "All"
    ADDED = "Added"
    REMOVED = "Removed"


class AuthorizationStatus(str, Enum):
    CONNECTED = "Connected"
    EXPIRED = "Expired"
    PENDING = "Pending"


class SubjectKind(str, Enum):
    PERMISSION = "permission"
    ENTITY = "entity"

    @property
    def label(self) -> str:
        return self.value.title()

    @property
    def plural_label(self) -> str:
        return "Entities" if self is SubjectKind.ENTITY else "Permissions"


def _require_text(record: str, name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise RecordValidationError(f"{record}: field '{name}' must be a non-empty string, got {value!r}")
    return value


def _require_enum(record: str, name: str, enum_cls, value: Any):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise RecordValidationError(
            f"{record}: field '{name}' must be one of {allowed}, got {value!r}"
        ) from None


def _require_timestamp(record: str, name: str, value: Any) -> pd.Timestamp:
    if value is None:
        raise RecordValidationError(f"{record}: field '{name}' is required")
    try:
        return to_timestamp(value)
    except (TypeError, ValueError) as exc:
        raise RecordValidationError(f"{record}: field '{name}' is not a timestamp ({exc})") from None


def _require_count(record: str, name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
        raise RecordValidationError(f"{record}: field '{name}' must be a non-negative integer, got {value!r}")
    return int(value)


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass(frozen=True)
class ChangeEvent:
    id: str
    authorization_id: str
    subject_name: str
    action: Action
    occurred_at: pd.Timestamp
    workspace: str
    data_source: str
    related_stream_names: Tuple[str, ...] = field(default_factory=tuple)
    subject_kind: SubjectKind = SubjectKind.PERMISSION

    def __post_init__(self) -> None:
        record = f"ChangeEvent {self.id!r}"
        _require_text(record, "id", self.id)
        _require_text(record, "authorization_id", self.authorization_id)
        _require_text(record, "subject_name", self.subject_name)
        _require_text(record, "workspace", self.workspace)
        _require_text(record, "data_source", self.data_source)
        object.__setattr__(self, "action", _require_enum(record, "action", Action, self.action))
        object.__setattr__(self, "subject_kind", _require_enum(record, "subject_kind", SubjectKind, self.subject_kind))
        object.__setattr__(self, "occurred_at", _require_timestamp(record, "occurred_at", self.occurred_at))

        names = self.related_stream_names
        if isinstance(names, str) or not isinstance(names, Sequence):
            raise RecordValidationError(f"{record}: field 'related_stream_names' must be a list of strings")
        if not all(isinstance(name, str) for name in names):
            raise RecordValidationError(f"{record}: every related stream name must be a string")
        object.__setattr__(self, "related_stream_names", tuple(names))

    @property
    def related_stream_count(self) -> int:
        return len(self.related_stream_names)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ChangeEvent":
        """Build an event from a plain mapping with snake_case or camelCase keys.

        A ``relatedStreamCount`` that disagrees with the supplied names is
        rejected rather than trusted.
        """
        names = _pick(data, "related_stream_names", "relatedStreamNames", "datastreamNames", default=())
        event = cls(
            id=_pick(data, "id"),
            authorization_id=_pick(data, "authorization_id", "authorizationId"),
            subject_name=_pick(data, "subject_name", "subjectName", "permissionName", "entityName"),
            action=_pick(data, "action"),
            occurred_at=_pick(data, "occurred_at", "occurredAt", "dateTime"),
            workspace=_pick(data, "workspace"),
            data_source=_pick(data, "data_source", "dataSource"),
            related_stream_names=names if names is not None else (),
            subject_kind=_pick(data, "subject_kind", "subjectKind", default=SubjectKind.PERMISSION),
        )
        declared = _pick(data, "related_stream_count", "relatedStreamCount", "usedInDatastreams")
        if declared is not None and declared != event.related_stream_count:
            raise RecordValidationError(
                f"ChangeEvent {event.id!r}: related stream count {declared!r} does not match "
                f"{event.related_stream_count} related stream names"
            )
        return event


@dataclass(frozen=True)
class Authorization:
    id: str
    name: str
    data_source_type: str
    workspace: str
    created_at: pd.Timestamp
    last_used_at: Optional[pd.Timestamp] = None
    entity_count: int = 0
    datastream_count: int = 0
    status: AuthorizationStatus = AuthorizationStatus.CONNECTED

    def __post_init__(self) -> None:
        record = f"Authorization {self.id!r}"
        _require_text(record, "id", self.id)
        _require_text(record, "name", self.name)
        _require_text(record, "data_source_type", self.data_source_type)
        _require_text(record, "workspace", self.workspace)
        object.__setattr__(self, "created_at", _require_timestamp(record, "created_at", self.created_at))
        if self.last_used_at is not None and pd.isna(self.last_used_at):
            object.__setattr__(self, "last_used_at", None)
        if self.last_used_at is not None:
            object.__setattr__(self, "last_used_at", _require_timestamp(record, "last_used_at", self.last_used_at))
        object.__setattr__(self, "entity_count", _require_count(record, "entity_count", self.entity_count))
        object.__setattr__(self, "datastream_count", _require_count(record, "datastream_count", self.datastream_count))
        object.__setattr__(self, "status", _require_enum(record, "status", AuthorizationStatus, self.status))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Authorization":
        return cls(
            id=_pick(data, "id"),
            name=_pick(data, "name"),
            data_source_type=_pick(data, "data_source_type", "dataSourceType", "type"),
            workspace=_pick(data, "workspace"),
            created_at=_pick(data, "created_at", "createdAt", "created"),
            last_used_at=_pick(data, "last_used_at", "lastUsedAt", "lastUsed"),
            entity_count=_pick(data, "entity_count", "entityCount", "entitiesCount", default=0),
            datastream_count=_pick(data, "datastream_count", "datastreamCount", "datastreamsCount", default=0),
            status=_pick(data, "status", default=AuthorizationStatus.CONNECTED),
        )
