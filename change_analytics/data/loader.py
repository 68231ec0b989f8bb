"""
Cached data access for the dashboard.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import pandas as pd
import streamlit as st

from change_analytics.data.demo import generate_authorizations, generate_change_events
from change_analytics.data.frames import authorizations_frame, events_frame
from change_analytics.data.models import SubjectKind

logger = logging.getLogger(__name__)


@st.cache_data(show_spinner=False)
def load_data(
    seed: int = 42,
    event_count: int = 200,
    subject_kind: str = SubjectKind.PERMISSION.value,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Return (events frame, authorizations frame) for a seeded synthetic snapshot."""
    rng = np.random.default_rng(seed)
    now = pd.Timestamp.now(tz="UTC").floor("min")
    authorizations = generate_authorizations(rng, now)
    events = generate_change_events(authorizations, event_count, rng, now, SubjectKind(subject_kind))
    logger.info(
        "Loaded %d change events across %d authorizations (seed=%d)",
        len(events),
        len(authorizations),
        seed,
    )
    return events_frame(events), authorizations_frame(authorizations)
