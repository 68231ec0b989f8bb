"""
Synthetic authorizations and change events for the demo dashboard.

Generation is driven entirely by a seeded ``numpy`` generator and an explicit
``now`` so the same seed always yields the same snapshot.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from change_analytics.data.models import Action, Authorization, AuthorizationStatus, ChangeEvent, SubjectKind
from change_analytics.utils.time_utils import TimestampLike, to_timestamp

logger = logging.getLogger(__name__)

WORKSPACES = [
    "SampleCompany-NA",
    "SampleCompany-EMEA",
    "SampleCompany-LATAM",
    "SampleCompany-APAC",
]

DATA_SOURCES = [
    "Meta",
    "Google Ads",
    "Amazon Advertising",
    "Google Sheets",
    "LinkedIn Ads",
    "TikTok Ads",
    "Twitter Ads",
]

DATASTREAM_NAMES: Dict[str, List[str]] = {
    "Amazon Advertising": [
        "Amazon_Campaigns_v2", "Amazon_Keywords_Daily", "Amazon_ProductAds_Performance",
        "Amazon_SponsoredBrands_Stats", "Amazon_DSP_Audiences", "Amazon_AttributionReports",
    ],
    "Google Ads": [
        "GoogleAds_CampaignStats", "GoogleAds_Keywords_Hourly", "GoogleAds_AdGroups_v1",
        "GoogleAds_SearchTerms", "GoogleAds_Extensions_Performance", "GoogleAds_Shopping_Data",
    ],
    "Meta": [
        "Meta_CampaignInsights", "Meta_AdSetPerformance", "Meta_CreativeStats",
        "Meta_AudienceInsights", "Meta_VideoMetrics", "Meta_ConversionData",
    ],
    "Google Sheets": [
        "GoogleSheets_MarketingBudget", "GoogleSheets_CampaignMapping", "GoogleSheets_KPIDashboard",
        "GoogleSheets_CostAllocation", "GoogleSheets_PerformanceTargets",
    ],
    "LinkedIn Ads": [
        "LinkedIn_CampaignAnalytics", "LinkedIn_SponsoredContent", "LinkedIn_TextAds_Performance",
        "LinkedIn_VideoAds_Stats", "LinkedIn_AudienceInsights",
    ],
    "TikTok Ads": [
        "TikTok_CampaignPerformance", "TikTok_AdGroupStats", "TikTok_CreativeInsights",
        "TikTok_AudienceData", "TikTok_ConversionTracking",
    ],
    "Twitter Ads": [
        "Twitter_CampaignMetrics", "Twitter_TweetEngagement", "Twitter_AudienceInsights",
        "Twitter_ConversionEvents", "Twitter_VideoMetrics",
    ],
}

PERMISSION_TYPES = [
    "Campaign Read Access",
    "Campaign Write Access",
    "Audience Data Access",
    "Conversion Tracking",
    "Reporting API Access",
    "Creative Management",
    "Budget Management",
    "Analytics Data",
    "User Management",
    "Account Settings",
]

ENTITY_TYPES = [
    "Ad Account",
    "Campaign",
    "Ad Group",
    "Audience",
    "Conversion Pixel",
    "Catalog",
    "Spreadsheet",
]

HISTORY_DAYS = 90
MAX_AUTHORIZATIONS = 20


def _slug(value: str) -> str:
    return "-".join(value.lower().split())


def _random_past(rng: np.random.Generator, now: pd.Timestamp, days: int) -> pd.Timestamp:
    seconds = int(rng.integers(0, days * 24 * 3600))
    return now - pd.Timedelta(seconds=seconds)


def generate_authorizations(
    rng: np.random.Generator,
    now: Optional[TimestampLike] = None,
) -> List[Authorization]:
    """One authorization per data source and workspace, capped at 20."""
    now_ts = to_timestamp(now) if now is not None else pd.Timestamp.now(tz="UTC")
    authorizations: List[Authorization] = []
    for source in DATA_SOURCES:
        for ws_index, workspace in enumerate(WORKSPACES):
            if len(authorizations) >= MAX_AUTHORIZATIONS:
                break
            region = workspace.split("-")[1]
            last_used = _random_past(rng, now_ts, 30) if rng.random() > 0.2 else None
            status = rng.choice(
                [s.value for s in AuthorizationStatus],
                p=[0.9, 0.05, 0.05],
            )
            authorizations.append(
                Authorization(
                    id=f"auth-{_slug(source)}-{ws_index + 1}",
                    name=f"{source} {region} Account",
                    data_source_type=source,
                    workspace=workspace,
                    created_at=_random_past(rng, now_ts, HISTORY_DAYS),
                    last_used_at=last_used,
                    entity_count=int(rng.integers(5, 31)),
                    datastream_count=int(rng.integers(2, 13)),
                    status=str(status),
                )
            )
    return authorizations


def _subject_name(rng: np.random.Generator, source: str, subject_kind: SubjectKind) -> str:
    types = ENTITY_TYPES if subject_kind is SubjectKind.ENTITY else PERMISSION_TYPES
    return f"{source} {types[int(rng.integers(0, len(types)))]} {int(rng.integers(0, 1000))}"


def generate_change_events(
    authorizations: List[Authorization],
    count: int = 200,
    rng: Optional[np.random.Generator] = None,
    now: Optional[TimestampLike] = None,
    subject_kind: SubjectKind = SubjectKind.PERMISSION,
) -> List[ChangeEvent]:
    """Random events over the last 90 days, most recent first."""
    if not authorizations or count <= 0:
        return []
    rng = rng if rng is not None else np.random.default_rng()
    now_ts = to_timestamp(now) if now is not None else pd.Timestamp.now(tz="UTC")
    subject_kind = SubjectKind(subject_kind)
    prefix = "ent" if subject_kind is SubjectKind.ENTITY else "perm"

    events: List[ChangeEvent] = []
    for i in range(count):
        auth = authorizations[int(rng.integers(0, len(authorizations)))]
        available = DATASTREAM_NAMES.get(auth.data_source_type, [])
        picks = int(rng.integers(1, 6))
        selected: List[str] = []
        for _ in range(picks if available else 0):
            name = available[int(rng.integers(0, len(available)))]
            if name not in selected:
                selected.append(name)

        events.append(
            ChangeEvent(
                id=f"{prefix}-{i + 1}",
                authorization_id=auth.id,
                subject_name=_subject_name(rng, auth.data_source_type, subject_kind),
                action=Action.ADDED if rng.random() < 0.6 else Action.REMOVED,
                occurred_at=_random_past(rng, now_ts, HISTORY_DAYS),
                workspace=auth.workspace,
                data_source=auth.data_source_type,
                related_stream_names=tuple(selected),
                subject_kind=subject_kind,
            )
        )

    events.sort(key=lambda event: event.occurred_at, reverse=True)
    logger.debug("Generated %d %s change events", len(events), subject_kind.value)
    return events
