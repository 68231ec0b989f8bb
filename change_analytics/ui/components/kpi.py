from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import streamlit as st

from change_analytics.ui.components.formatting import format_number, format_signed_count


@dataclass(frozen=True)
class KpiCard:
    label: str
    value: Optional[int] = None
    delta: Optional[int] = None

    @property
    def value_text(self) -> str:
        return format_number(self.value)

    @property
    def delta_text(self) -> Optional[str]:
        return None if self.delta is None else format_signed_count(self.delta)


def render_kpi_cards(cards: Sequence[KpiCard], columns: int = 4) -> None:
    """Change counts as a row of metrics; net changes carry a signed delta."""
    cards = list(cards)
    if not cards:
        st.info("No KPIs available for the current filters.")
        return

    columns = max(columns, 1)
    for idx in range(0, len(cards), columns):
        row_cards = cards[idx: idx + columns]
        for col, card in zip(st.columns(len(row_cards)), row_cards):
            with col:
                st.metric(label=card.label, value=card.value_text, delta=card.delta_text)
