import change_analytics.bootstrap_env  # must be first to set env/secrets
import logging

import streamlit as st

from change_analytics.config import TABS, load_settings
from change_analytics.data.filters import serialize_filters
from change_analytics.data.loader import load_data
from change_analytics.logging_config import configure_logging
from change_analytics.ui.layout import setup_page, sidebar_filters_ui
from change_analytics.ui.pages import authorizations, changes, export, overview
from change_analytics.ui.pages.context import PageContext

logger = logging.getLogger("change_analytics.app")

PAGE_RENDERERS = {
    "overview": overview.render,
    "changes": changes.render,
    "authorizations": authorizations.render,
    "export": export.render,
}


def main() -> None:
    setup_page()
    settings = load_settings()
    configure_logging(settings.log_level)
    st.title(f"{settings.subject_kind.label} Change Analytics")

    if st.sidebar.button("🔄 Refresh Data"):
        load_data.clear()  # type: ignore[attr-defined]

    events, authorizations_df = load_data(settings.seed, settings.event_count, settings.subject_kind.value)
    if events.empty:
        st.warning("No change events available.")
        return

    filters = sidebar_filters_ui(authorizations_df, settings)
    st.session_state["ca_active_filters"] = serialize_filters(filters)
    logger.debug("Active filters: %s", st.session_state["ca_active_filters"])

    context = PageContext(
        events=events,
        authorizations=authorizations_df,
        filters=filters,
        settings=settings,
    )

    tab_labels = [tab.label for tab in TABS]
    streamlit_tabs = st.tabs(tab_labels)

    for streamlit_tab, tab_config in zip(streamlit_tabs, TABS):
        renderer = PAGE_RENDERERS.get(tab_config.key)
        if renderer is None:
            continue
        with streamlit_tab:
            renderer(context)


if __name__ == "__main__":
    main()
