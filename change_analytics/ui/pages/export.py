from __future__ import annotations

import streamlit as st

from change_analytics.data.models import Action
from change_analytics.export.csv_export import ExportOptions, export_changes_csv, select_for_export
from change_analytics.ui.layout import custom_range
from change_analytics.ui.pages.context import PageContext


def render(context: PageContext) -> None:
    kind = context.subject_kind
    st.subheader(f"Export {kind.label} Changes")

    current = context.filters.date_range
    col_from, col_to = st.columns(2)
    with col_from:
        start = st.date_input(
            "From",
            value=current.start.date() if current is not None else None,
            key="ca_export_from",
        )
    with col_to:
        end = st.date_input(
            "To",
            value=current.end.date() if current is not None else None,
            key="ca_export_to",
        )

    col_added, col_removed = st.columns(2)
    with col_added:
        include_added = st.checkbox("Include added", value=True, key="ca_export_added")
    with col_removed:
        include_removed = st.checkbox("Include removed", value=True, key="ca_export_removed")

    date_range = custom_range(start, end) if start and end else None
    if date_range is not None and date_range.is_inverted:
        st.warning("From date is after To date; the export will be empty.")

    options = ExportOptions(
        include_added=include_added,
        include_removed=include_removed,
        date_range=date_range,
    )
    preview = select_for_export(context.events, options)
    added = int((preview["action"] == Action.ADDED.value).sum())
    removed = len(preview) - added
    st.caption(f"{len(preview):,} rows: {added:,} added, {removed:,} removed.")

    if not (include_added or include_removed):
        st.info("Select at least one action to export.")

    payload = export_changes_csv(context.events, context.authorizations, options, subject_kind=kind)
    st.download_button(
        "Download CSV",
        data=payload.to_bytes(),
        file_name=payload.filename,
        mime=payload.mime_type,
        disabled=payload.row_count == 0,
        key="ca_export_download",
    )
