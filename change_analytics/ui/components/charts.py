"""
Plotly chart factory functions with consistent styling for the dashboard.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

import plotly.graph_objects as go
import streamlit as st

from change_analytics.analytics.aggregation import (
    AuthorizationCount,
    DataSourceSummary,
    DayBucket,
    top_with_remainder,
)
from change_analytics.config import DATA_SOURCE_META, FALLBACK_SOURCE_META, DataSourceMeta
from change_analytics.utils.time_utils import format_day_label

DEFAULT_TEMPLATE = "plotly_white"
ADDED_COLOR = "#2ca02c"
REMOVED_COLOR = "#d62728"


def _configure_layout(
    fig: go.Figure,
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    legend_title: Optional[str] = None,
) -> go.Figure:
    fig.update_layout(
        template=DEFAULT_TEMPLATE,
        title=title,
        legend_title=legend_title,
        margin=dict(l=40, r=20, t=60, b=40),
    )
    if yaxis_title:
        fig.update_yaxes(title=yaxis_title)
    fig.update_xaxes(showgrid=False)
    fig.update_yaxes(showgrid=True, zeroline=True)
    return fig


def render_plotly(fig: go.Figure) -> None:
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def source_meta_for(source: str, source_meta: Mapping[str, DataSourceMeta] = DATA_SOURCE_META) -> DataSourceMeta:
    return source_meta.get(source, FALLBACK_SOURCE_META)


def authorization_hover(
    day_label: str,
    action: str,
    total: int,
    ranked: Sequence[AuthorizationCount],
    top_n: int = 5,
) -> str:
    """Tooltip body: day, total, then the top authorizations and a remainder line."""
    lines = [f"<b>{day_label}</b>", f"{action}: {total}"]
    head, remaining = top_with_remainder(ranked, top_n)
    for entry in head:
        lines.append(f"{entry.display_name} ({entry.data_source_type}): {entry.count}")
    if remaining:
        lines.append(f"+{remaining} more authorizations")
    return "<br>".join(lines)


def daily_changes_chart(
    buckets: Sequence[DayBucket],
    title: Optional[str] = None,
    top_n: int = 5,
) -> go.Figure:
    """Diverging bar chart: additions above the axis, removals below."""
    labels: List[str] = [format_day_label(bucket.day) for bucket in buckets]
    days = [bucket.day for bucket in buckets]

    added_y = [bucket.added_sign * bucket.added_count for bucket in buckets]
    removed_y = [bucket.removed_sign * bucket.removed_count for bucket in buckets]
    added_hover = [
        authorization_hover(label, "Added", bucket.added_count, bucket.added_authorizations, top_n)
        for label, bucket in zip(labels, buckets)
    ]
    removed_hover = [
        authorization_hover(label, "Removed", bucket.removed_count, bucket.removed_authorizations, top_n)
        for label, bucket in zip(labels, buckets)
    ]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=days,
            y=added_y,
            name="Added",
            marker_color=ADDED_COLOR,
            hovertext=added_hover,
            hoverinfo="text",
        )
    )
    fig.add_trace(
        go.Bar(
            x=days,
            y=removed_y,
            name="Removed",
            marker_color=REMOVED_COLOR,
            hovertext=removed_hover,
            hoverinfo="text",
        )
    )
    fig.update_layout(barmode="relative", bargap=0.2)
    fig = _configure_layout(fig, title, yaxis_title="Changes")
    return fig


def data_source_chart(
    summaries: Sequence[DataSourceSummary],
    source_meta: Mapping[str, DataSourceMeta] = DATA_SOURCE_META,
    title: Optional[str] = None,
) -> go.Figure:
    metas = [source_meta_for(summary.data_source, source_meta) for summary in summaries]
    fig = go.Figure(
        go.Pie(
            labels=[summary.data_source for summary in summaries],
            values=[summary.total for summary in summaries],
            hole=0.55,
            sort=False,
            marker=dict(colors=[meta.color for meta in metas]),
            customdata=[
                [summary.added_count, summary.removed_count, summary.percentage_of_total]
                for summary in summaries
            ],
            hovertemplate=(
                "<b>%{label}</b><br>Total: %{value}<br>Added: %{customdata[0]}"
                "<br>Removed: %{customdata[1]}<br>Share: %{customdata[2]}%<extra></extra>"
            ),
            textinfo="none",
        )
    )
    fig = _configure_layout(fig, title, legend_title="Data Source")
    return fig
