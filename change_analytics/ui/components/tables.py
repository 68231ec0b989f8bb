"""
Reusable helpers for rendering change and authorization tables.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd
import streamlit as st

from change_analytics.data.frames import authorization_index, resolve_authorization_name
from change_analytics.data.models import Action, SubjectKind
from change_analytics.export.csv_export import STREAM_NAME_SEPARATOR, CsvExport, NEVER_USED
from change_analytics.utils.time_utils import format_datetime


def _highlight_action(val) -> str:
    if val == Action.ADDED.value:
        return "color: #2ca02c;"
    if val == Action.REMOVED.value:
        return "color: #d62728;"
    return ""


def change_table_view(
    rows: pd.DataFrame,
    authorizations: pd.DataFrame,
    subject_kind: SubjectKind = SubjectKind.PERMISSION,
) -> pd.DataFrame:
    """Display columns for a change-event frame; row order is kept."""
    label = SubjectKind(subject_kind).label
    index = authorization_index(authorizations)
    return pd.DataFrame(
        {
            "Date & Time": rows["occurred_at"].map(format_datetime),
            "Action": rows["action"],
            label: rows["subject_name"],
            "Authorization": rows["authorization_id"].map(lambda auth_id: resolve_authorization_name(index, auth_id)),
            "Workspace": rows["workspace"],
            "Data Source": rows["data_source"],
            "Datastreams": rows["related_stream_count"],
            "Datastream Names": rows["related_stream_names"].map(STREAM_NAME_SEPARATOR.join),
        }
    )


def authorization_table_view(authorizations: pd.DataFrame) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Name": authorizations["name"],
            "Type": authorizations["data_source_type"],
            "Workspace": authorizations["workspace"],
            "Created": authorizations["created_at"].map(format_datetime),
            "Last Used": authorizations["last_used_at"].map(
                lambda ts: format_datetime(ts) if pd.notna(ts) else NEVER_USED
            ),
            "Entities": authorizations["entity_count"],
            "Datastreams": authorizations["datastream_count"],
            "Status": authorizations["status"],
        }
    )


def render_table(
    df: pd.DataFrame,
    height: int = 400,
    export: Optional[CsvExport] = None,
    download_label: str = "Download CSV",
    key: Optional[str] = None,
) -> None:
    if df.empty:
        st.info("No rows match the current filters.")
        return

    dataframe_obj = df
    if "Action" in df.columns:
        dataframe_obj = df.style.map(_highlight_action, subset=["Action"])

    st.dataframe(
        dataframe_obj,
        use_container_width=True,
        height=height,
        hide_index=True,
    )

    if export is not None:
        st.download_button(
            download_label,
            data=export.to_bytes(),
            file_name=export.filename,
            mime=export.mime_type,
            key=key,
        )
