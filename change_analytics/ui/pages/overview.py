from __future__ import annotations

import streamlit as st

from change_analytics.analytics.aggregation import data_source_frame, summarize_by_authorization
from change_analytics.engine import query
from change_analytics.ui.components.charts import daily_changes_chart, data_source_chart, render_plotly
from change_analytics.ui.components.formatting import format_percent
from change_analytics.ui.components.kpi import KpiCard, render_kpi_cards
from change_analytics.ui.pages.context import PageContext


def render(context: PageContext) -> None:
    kind = context.subject_kind
    st.subheader(f"{kind.label} Changes Overview")

    result = query(context.events, context.authorizations, context.filters)
    if result.rows.empty:
        st.info(f"No {kind.plural_label.lower()} changed in the selected period.")
        return

    added = sum(bucket.added_count for bucket in result.day_buckets)
    removed = sum(bucket.removed_count for bucket in result.day_buckets)
    active_authorizations = result.rows["authorization_id"].nunique()
    render_kpi_cards(
        [
            KpiCard(f"{kind.plural_label} Added", value=added),
            KpiCard(f"{kind.plural_label} Removed", value=removed),
            KpiCard("Net Change", value=added - removed, delta=added - removed),
            KpiCard("Authorizations Affected", value=active_authorizations),
        ]
    )

    st.markdown("#### Daily changes")
    render_plotly(
        daily_changes_chart(result.day_buckets, top_n=context.settings.top_authorizations)
    )

    col_chart, col_table = st.columns([3, 2])
    with col_chart:
        st.markdown("#### Top data sources")
        render_plotly(data_source_chart(result.data_source_summaries))
    with col_table:
        st.markdown("#### Breakdown")
        breakdown = data_source_frame(result.data_source_summaries)
        breakdown["Share"] = breakdown["Share"].map(format_percent)
        st.dataframe(breakdown, use_container_width=True, hide_index=True)

    summaries = summarize_by_authorization(result.rows, context.authorizations)
    if summaries:
        busiest = summaries[0]
        st.caption(
            f"Most active authorization: {busiest.display_name} ({busiest.data_source_type}) "
            f"with {busiest.total} changes."
        )
