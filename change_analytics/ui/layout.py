"""
Layout helpers for the Streamlit application (page setup, sidebar filters).
"""

from __future__ import annotations

import datetime as dt
from typing import Optional

import pandas as pd
import streamlit as st

from change_analytics.config import Settings
from change_analytics.data.filters import EventFilters
from change_analytics.utils.time_utils import DateRange, lookback_range

DATE_PRESETS = {
    "7D": 7,
    "30D": 30,
    "90D": 90,
}
CUSTOM_PRESET = "Custom"
ALL_AUTHORIZATIONS = "All authorizations"


def setup_page() -> None:
    """Set Streamlit page configuration."""
    st.set_page_config(
        page_title="Change Analytics",
        layout="wide",
        page_icon=":bar_chart:",
    )


def _default_preset(lookback_days: int) -> str:
    for label, days in DATE_PRESETS.items():
        if days == lookback_days:
            return label
    return CUSTOM_PRESET


def custom_range(start: dt.date, end: dt.date) -> DateRange:
    """Whole-day range from the start of ``start`` to the last instant of ``end``."""
    start_ts = pd.Timestamp(start).tz_localize("UTC")
    end_ts = pd.Timestamp(end).tz_localize("UTC") + pd.Timedelta(days=1) - pd.Timedelta(microseconds=1)
    return DateRange(start_ts, end_ts)


def _derive_date_range(settings: Settings, now: pd.Timestamp) -> DateRange:
    options = list(DATE_PRESETS) + [CUSTOM_PRESET]
    preset = st.sidebar.selectbox(
        "Date Preset",
        options,
        index=options.index(_default_preset(settings.lookback_days)),
        key="ca_date_preset",
        help="Choose a lookback window or select Custom to pick exact dates.",
    )
    if preset != CUSTOM_PRESET:
        return lookback_range(DATE_PRESETS[preset], now)

    default_start = (now - pd.Timedelta(days=settings.lookback_days)).date()
    col_start, col_end = st.sidebar.columns(2)
    with col_start:
        start_input = st.date_input("Start", value=default_start, key="ca_date_start")
    with col_end:
        end_input = st.date_input("End", value=now.date(), key="ca_date_end")

    if start_input > end_input:
        st.sidebar.warning("Start date is after End date; no changes will match.")
    return custom_range(start_input, end_input)


def _authorization_scope(authorizations: pd.DataFrame) -> Optional[str]:
    labels = {row.id: f"{row.name} ({row.workspace})" for row in authorizations.itertuples(index=False)}
    options = [ALL_AUTHORIZATIONS] + list(labels)
    choice = st.sidebar.selectbox(
        "Authorization",
        options,
        index=0,
        key="ca_authorization_scope",
        format_func=lambda value: labels.get(value, value),
    )
    return None if choice == ALL_AUTHORIZATIONS else choice


def sidebar_filters_ui(
    authorizations: pd.DataFrame,
    settings: Settings,
    now: Optional[pd.Timestamp] = None,
) -> EventFilters:
    """
    Render the sidebar controls and return the filters shared by every tab.
    """
    st.sidebar.header("Filters")
    now = now if now is not None else pd.Timestamp.now(tz="UTC")
    date_range = _derive_date_range(settings, now)
    authorization_id = _authorization_scope(authorizations)
    return EventFilters(date_range=date_range, authorization_id=authorization_id)
