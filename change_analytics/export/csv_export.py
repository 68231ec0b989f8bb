"""
CSV serialization of change events and authorizations.

Payloads are UTF-8 text prefixed with a byte-order mark so spreadsheet tools
pick the right encoding. Every text field is quoted and embedded quotes are
doubled (RFC 4180); counts stay unquoted.
"""

from __future__ import annotations

import csv
import datetime as dt
import logging
from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from change_analytics.data.filters import filter_by_date_range
from change_analytics.data.frames import (
    AuthorizationInput,
    EventInput,
    as_authorization_frame,
    as_event_frame,
    authorization_index,
    resolve_authorization_name,
)
from change_analytics.data.models import Action, SubjectKind
from change_analytics.analytics.sorting import SortField, SortOrder, sort_events
from change_analytics.utils.time_utils import DateRange, format_datetime, iso_date, utc_today

logger = logging.getLogger(__name__)

BOM = "\ufeff"
CSV_MIME_TYPE = "text/csv;charset=utf-8"
STREAM_NAME_SEPARATOR = ", "
NEVER_USED = "Never"

AUTHORIZATION_HEADERS: List[str] = [
    "Name",
    "Type",
    "Workspace",
    "Created",
    "Last Used",
    "Entities Count",
    "Datastreams Count",
    "Status",
]


@dataclass(frozen=True)
class ExportOptions:
    include_added: bool = True
    include_removed: bool = True
    date_range: Optional[DateRange] = None


@dataclass(frozen=True)
class CsvExport:
    text: str
    filename: str
    row_count: int = 0
    mime_type: str = CSV_MIME_TYPE

    def to_bytes(self) -> bytes:
        return self.text.encode("utf-8")


def change_headers(subject_kind: SubjectKind = SubjectKind.PERMISSION) -> List[str]:
    label = SubjectKind(subject_kind).label
    return [
        "Date & Time",
        "Action",
        f"{label} Name",
        f"{label} ID",
        "Authorization Name",
        "Workspace",
        "Data Source",
        "Used in Datastreams",
        "Datastream Names",
    ]


def _included_actions(options: ExportOptions) -> List[str]:
    actions = []
    if options.include_added:
        actions.append(Action.ADDED.value)
    if options.include_removed:
        actions.append(Action.REMOVED.value)
    return actions


def build_filename(
    options: ExportOptions,
    subject_kind: SubjectKind = SubjectKind.PERMISSION,
    today: Optional[dt.date] = None,
) -> str:
    """Deterministic name from the range bounds (or today) plus the included actions."""
    suffix_parts = [action.lower() for action in _included_actions(options)]
    suffix = f"_{'_'.join(suffix_parts)}" if suffix_parts else ""
    prefix = f"{SubjectKind(subject_kind).value}_changes"
    if options.date_range is not None:
        start = iso_date(options.date_range.start)
        end = iso_date(options.date_range.end)
        return f"{prefix}_{start}_to_{end}{suffix}.csv"
    day = today or utc_today()
    return f"{prefix}_{day.isoformat()}{suffix}.csv"


def _to_csv_text(frame: pd.DataFrame) -> str:
    body = frame.to_csv(
        index=False,
        quoting=csv.QUOTE_NONNUMERIC,
        doublequote=True,
        lineterminator="\n",
    )
    return BOM + body


def select_for_export(events: EventInput, options: ExportOptions) -> pd.DataFrame:
    """Rows an export with these options would contain, most recent first."""
    df = filter_by_date_range(events, options.date_range)
    df = df[df["action"].isin(_included_actions(options))]
    return sort_events(df, SortField.OCCURRED_AT, SortOrder.DESCENDING)


def export_changes_csv(
    events: EventInput,
    authorizations: AuthorizationInput,
    options: ExportOptions = ExportOptions(),
    subject_kind: SubjectKind = SubjectKind.PERMISSION,
    today: Optional[dt.date] = None,
) -> CsvExport:
    selected = select_for_export(as_event_frame(events), options)
    index = authorization_index(authorizations)
    headers = change_headers(subject_kind)

    rows = [
        [
            format_datetime(row.occurred_at),
            row.action,
            row.subject_name,
            row.id,
            resolve_authorization_name(index, row.authorization_id),
            row.workspace,
            row.data_source,
            int(row.related_stream_count),
            STREAM_NAME_SEPARATOR.join(row.related_stream_names),
        ]
        for row in selected.itertuples(index=False)
    ]
    frame = pd.DataFrame(rows, columns=headers)
    frame[headers[7]] = frame[headers[7]].astype("int64")

    export = CsvExport(
        text=_to_csv_text(frame),
        filename=build_filename(options, subject_kind, today),
        row_count=len(frame),
    )
    logger.debug("Exported %d change rows to %s", export.row_count, export.filename)
    return export


def export_authorizations_csv(
    authorizations: AuthorizationInput,
    today: Optional[dt.date] = None,
) -> CsvExport:
    df = as_authorization_frame(authorizations)
    rows = [
        [
            row.name,
            row.data_source_type,
            row.workspace,
            format_datetime(row.created_at),
            format_datetime(row.last_used_at) if pd.notna(row.last_used_at) else NEVER_USED,
            int(row.entity_count),
            int(row.datastream_count),
            row.status,
        ]
        for row in df.itertuples(index=False)
    ]
    frame = pd.DataFrame(rows, columns=AUTHORIZATION_HEADERS)
    for col in ("Entities Count", "Datastreams Count"):
        frame[col] = frame[col].astype("int64")
    day = today or utc_today()
    return CsvExport(
        text=_to_csv_text(frame),
        filename=f"authorizations_{day.isoformat()}.csv",
        row_count=len(frame),
    )
