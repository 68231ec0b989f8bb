"""
Application-wide configuration constants and helper utilities.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from change_analytics.data.models import SubjectKind


@dataclass(frozen=True)
class TabConfig:
    key: str
    label: str


# Ordered tab definitions for the dashboard
TABS: List[TabConfig] = [
    TabConfig("overview", "Overview"),
    TabConfig("changes", "Changes"),
    TabConfig("authorizations", "Authorizations"),
    TabConfig("export", "Export"),
]


@dataclass(frozen=True)
class DataSourceMeta:
    label: str
    color: str
    icon: str


FALLBACK_SOURCE_META = DataSourceMeta(label="Other", color="#6B7280", icon="🔗")

# Display metadata per data source type; passed into chart builders rather than read by the engine
DATA_SOURCE_META: Dict[str, DataSourceMeta] = {
    "Meta": DataSourceMeta("Meta", "#1877F2", "/logos/meta-symbol.svg"),
    "Google Ads": DataSourceMeta("Google Ads", "#4285F4", "/logos/google-ads-symbol.svg"),
    "Amazon Advertising": DataSourceMeta("Amazon Advertising", "#FF9900", "/logos/amazon-symbol.svg"),
    "Google Sheets": DataSourceMeta("Google Sheets", "#34A853", "/logos/google-sheets-symbol.svg"),
    "LinkedIn Ads": DataSourceMeta("LinkedIn Ads", "#0A66C2", "/logos/linkedin-symbol.svg"),
    "TikTok Ads": DataSourceMeta("TikTok Ads", "#000000", "/logos/tiktok-symbol.svg"),
    "Twitter Ads": DataSourceMeta("Twitter Ads", "#1DA1F2", "/logos/twitter-x-symbol.svg"),
}

ENV_PREFIX = "CHANGE_ANALYTICS_"


@dataclass(frozen=True)
class Settings:
    seed: int = 42
    event_count: int = 200
    lookback_days: int = 90
    top_authorizations: int = 5
    subject_kind: SubjectKind = SubjectKind.PERMISSION
    log_level: str = "INFO"


DEFAULT_SETTINGS = Settings()


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_subject_kind(name: str, default: SubjectKind) -> SubjectKind:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return SubjectKind(raw.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(kind.value for kind in SubjectKind)
        raise ValueError(f"{name} must be one of: {allowed}; got {raw!r}") from exc


def load_settings(defaults: Optional[Settings] = None) -> Settings:
    """Read dashboard settings from the environment.

    Call ``bootstrap_env.ensure_env()`` first when running under Streamlit so
    secrets and ``.env`` values are visible through ``os.environ``.
    """
    base = defaults or DEFAULT_SETTINGS
    return Settings(
        seed=_env_int(f"{ENV_PREFIX}SEED", base.seed),
        event_count=_env_int(f"{ENV_PREFIX}EVENT_COUNT", base.event_count),
        lookback_days=_env_int(f"{ENV_PREFIX}LOOKBACK_DAYS", base.lookback_days, minimum=1),
        top_authorizations=_env_int(f"{ENV_PREFIX}TOP_AUTHORIZATIONS", base.top_authorizations, minimum=1),
        subject_kind=_env_subject_kind(f"{ENV_PREFIX}SUBJECT_KIND", base.subject_kind),
        log_level=(os.getenv("LOG_LEVEL") or base.log_level).strip().upper(),
    )
