"""
Utility helpers for formatting counts, signed deltas and percentages.
"""

from __future__ import annotations

from typing import Optional

PLACEHOLDER = "–"


def format_number(value: Optional[float], decimals: int = 0) -> str:
    if value is None:
        return PLACEHOLDER
    try:
        return f"{value:,.{decimals}f}"
    except (TypeError, ValueError):
        return PLACEHOLDER


def format_signed_count(value: Optional[int]) -> str:
    if value is None:
        return PLACEHOLDER
    try:
        return f"{int(value):+,d}"
    except (TypeError, ValueError):
        return PLACEHOLDER


def format_percent(value: Optional[float], decimals: int = 0) -> str:
    if value is None:
        return PLACEHOLDER
    try:
        return f"{value:.{decimals}f}%"
    except (TypeError, ValueError):
        return PLACEHOLDER
