from __future__ import annotations

import streamlit as st

from change_analytics.analytics.sorting import AuthorizationSortField, SortOrder, sort_authorizations
from change_analytics.data.filters import ALL, AuthorizationFilters, apply_authorization_filters, changes_for_authorization
from change_analytics.data.models import AuthorizationStatus
from change_analytics.export.csv_export import export_authorizations_csv
from change_analytics.ui.components.tables import authorization_table_view, change_table_view, render_table
from change_analytics.ui.pages.context import PageContext

SORT_LABELS = {
    AuthorizationSortField.CREATED_AT: "Created",
    AuthorizationSortField.LAST_USED_AT: "Last Used",
    AuthorizationSortField.NAME: "Name",
    AuthorizationSortField.DATA_SOURCE_TYPE: "Type",
    AuthorizationSortField.WORKSPACE: "Workspace",
    AuthorizationSortField.STATUS: "Status",
}


def _options(values) -> list:
    return [ALL] + sorted(set(values))


def render(context: PageContext) -> None:
    st.subheader("Authorizations")
    authorizations = context.authorizations
    if authorizations.empty:
        st.info("No authorizations available.")
        return

    col_ws, col_type, col_status = st.columns(3)
    with col_ws:
        workspace = st.selectbox("Workspace", _options(authorizations["workspace"]), key="ca_auth_workspace")
    with col_type:
        source_type = st.selectbox("Type", _options(authorizations["data_source_type"]), key="ca_auth_type")
    with col_status:
        status = st.selectbox("Status", [ALL] + [s.value for s in AuthorizationStatus], key="ca_auth_status")

    col_search, col_sort, col_order = st.columns([3, 1, 1])
    with col_search:
        search = st.text_input("Search authorizations", key="ca_auth_search")
    with col_sort:
        sort_field = st.selectbox(
            "Sort by",
            list(SORT_LABELS),
            format_func=SORT_LABELS.get,
            key="ca_auth_sort",
        )
    with col_order:
        descending = st.toggle("Newest first", value=True, key="ca_auth_order")

    filters = AuthorizationFilters(
        workspace=workspace,
        data_source_type=source_type,
        status=status,
        search_term=search,
    )
    filtered = apply_authorization_filters(authorizations, filters)
    ordered = sort_authorizations(
        filtered,
        sort_field,
        SortOrder.DESCENDING if descending else SortOrder.ASCENDING,
    )
    st.caption(f"{len(ordered):,} of {len(authorizations):,} authorizations.")
    render_table(
        authorization_table_view(ordered),
        export=export_authorizations_csv(ordered),
        download_label="Export authorizations",
        key="ca_auth_download",
    )

    if ordered.empty:
        return
    names = dict(zip(ordered["id"], ordered["name"]))
    selected = st.selectbox(
        "Change history",
        list(names),
        format_func=names.get,
        key="ca_auth_detail",
    )
    history = changes_for_authorization(context.events, selected)
    render_table(change_table_view(history, authorizations, context.subject_kind), height=300)
