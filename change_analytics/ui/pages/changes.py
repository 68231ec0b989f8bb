from __future__ import annotations

from dataclasses import replace

import streamlit as st

from change_analytics.analytics.sorting import DEFAULT_SORT, SortField, SortOrder, SortState
from change_analytics.data.models import ActionFilter
from change_analytics.engine import export, query
from change_analytics.ui.components.tables import change_table_view, render_table
from change_analytics.ui.pages.context import PageContext

SORT_STATE_KEY = "ca_changes_sort"

SORT_LABELS = {
    SortField.OCCURRED_AT: "Date & Time",
    SortField.ACTION: "Action",
    SortField.SUBJECT_NAME: "Name",
    SortField.ID: "ID",
}


def sort_label(label: str, field: SortField, state: SortState) -> str:
    if field is not state.field:
        return label
    return f"{label} ↓" if state.order is SortOrder.DESCENDING else f"{label} ↑"


def _toggle_sort(field: SortField) -> None:
    state: SortState = st.session_state.get(SORT_STATE_KEY, DEFAULT_SORT)
    st.session_state[SORT_STATE_KEY] = state.toggle(field)


def _sort_controls() -> SortState:
    # on_click callbacks run before the script reruns
    state: SortState = st.session_state.get(SORT_STATE_KEY, DEFAULT_SORT)
    cols = st.columns(len(SORT_LABELS))
    for col, (field, label) in zip(cols, SORT_LABELS.items()):
        with col:
            st.button(
                sort_label(label, field, state),
                key=f"ca_sort_{field.value}",
                on_click=_toggle_sort,
                args=(field,),
                use_container_width=True,
            )
    return state


def render(context: PageContext) -> None:
    kind = context.subject_kind
    st.subheader(f"{kind.label} Changes")

    col_search, col_action = st.columns([3, 1])
    with col_search:
        search = st.text_input(f"Search by {kind.value} name, ID or datastream", key="ca_changes_search")
    with col_action:
        action = st.selectbox("Action", [a.value for a in ActionFilter], key="ca_changes_action")

    filters = replace(context.filters, search_term=search, action=ActionFilter(action))
    sort = _sort_controls()

    result = query(context.events, context.authorizations, filters, sort)
    st.caption(f"Showing {result.row_count:,} of {len(context.events):,} changes.")

    render_table(
        change_table_view(result.rows, context.authorizations, kind),
        export=export(
            context.events,
            context.authorizations,
            filters,
            subject_kind=kind,
        ),
        key="ca_changes_download",
    )
