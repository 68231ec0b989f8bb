"""
Shared fixtures for the change analytics test suite.

Every fixture is built on fixed UTC days so results never depend on the
wall clock.
"""

import datetime as dt

import pandas as pd
import pytest

from change_analytics.data.frames import authorizations_frame, events_frame
from change_analytics.data.models import Action, Authorization, AuthorizationStatus, ChangeEvent

DAY1 = pd.Timestamp("2025-01-01", tz="UTC")
DAY2 = DAY1 + pd.Timedelta(days=1)
DAY3 = DAY1 + pd.Timedelta(days=2)
TODAY = dt.date(2025, 1, 10)


def make_event(
    event_id,
    action,
    occurred_at,
    authorization_id="auth-meta-1",
    subject_name=None,
    data_source="Meta",
    workspace="SampleCompany-NA",
    streams=(),
):
    return ChangeEvent(
        id=event_id,
        authorization_id=authorization_id,
        subject_name=subject_name or f"Subject {event_id}",
        action=action,
        occurred_at=occurred_at,
        workspace=workspace,
        data_source=data_source,
        related_stream_names=tuple(streams),
    )


@pytest.fixture
def authorization_records():
    return [
        Authorization(
            id="auth-meta-1",
            name="Meta NA Account",
            data_source_type="Meta",
            workspace="SampleCompany-NA",
            created_at=pd.Timestamp("2024-12-01 08:00", tz="UTC"),
            last_used_at=None,
            entity_count=12,
            datastream_count=4,
            status=AuthorizationStatus.CONNECTED,
        ),
        Authorization(
            id="auth-google-ads-2",
            name="Google Ads EMEA Account",
            data_source_type="Google Ads",
            workspace="SampleCompany-EMEA",
            created_at=pd.Timestamp("2024-11-15 10:30", tz="UTC"),
            last_used_at=pd.Timestamp("2024-12-20 16:45", tz="UTC"),
            entity_count=7,
            datastream_count=2,
            status=AuthorizationStatus.EXPIRED,
        ),
    ]


@pytest.fixture
def event_records():
    """Added on Day1, Removed on Day1, Added on Day3."""
    return [
        make_event(
            "e1",
            Action.ADDED,
            DAY1 + pd.Timedelta(hours=10),
            subject_name="Meta Campaign Read Access 42",
            streams=["Meta_CampaignInsights"],
        ),
        make_event(
            "e2",
            Action.REMOVED,
            DAY1 + pd.Timedelta(hours=12),
            authorization_id="auth-google-ads-2",
            subject_name="Google Ads Budget Management 7",
            data_source="Google Ads",
            workspace="SampleCompany-EMEA",
            streams=["GoogleAds_CampaignStats", "GoogleAds_SearchTerms"],
        ),
        make_event(
            "e3",
            Action.ADDED,
            DAY3 + pd.Timedelta(hours=9, minutes=30),
            subject_name='Budget "Pro" Access, EU',
        ),
    ]


@pytest.fixture
def events(event_records):
    return events_frame(event_records)


@pytest.fixture
def authorizations(authorization_records):
    return authorizations_frame(authorization_records)
