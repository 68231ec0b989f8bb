"""Tests for change_analytics.analytics.aggregation."""

import pandas as pd

from change_analytics.analytics.aggregation import (
    REMOVED_SIGN,
    AuthorizationCount,
    aggregate_by_data_source,
    aggregate_by_day,
    data_source_frame,
    day_buckets_frame,
    rank_authorizations,
    round_half_up,
    summarize_by_authorization,
    top_with_remainder,
)
from change_analytics.data.frames import events_frame
from change_analytics.data.models import UNKNOWN_AUTHORIZATION, Action
from change_analytics.utils.time_utils import DateRange

from conftest import DAY1, DAY2, DAY3, make_event


class TestAggregateByDay:

    def test_three_day_scenario(self, events, authorizations):
        buckets = aggregate_by_day(events, DateRange(DAY1, DAY3), authorizations)
        assert [b.day for b in buckets] == [DAY1, DAY2, DAY3]
        assert [(b.added_count, b.removed_count) for b in buckets] == [(1, 1), (0, 0), (1, 0)]

    def test_counts_are_unsigned_with_orientation_flag(self, events):
        bucket = aggregate_by_day(events, DateRange(DAY1, DAY1))[0]
        assert bucket.removed_count == 1
        assert bucket.removed_sign == REMOVED_SIGN == -1
        assert bucket.total == 2

    def test_empty_days_are_zero_filled(self):
        buckets = aggregate_by_day(events_frame([]), DateRange(DAY1, DAY1 + pd.Timedelta(days=6)))
        assert len(buckets) == 7
        assert all(b.added_count == 0 and b.removed_count == 0 for b in buckets)
        assert all(b.added_authorizations == () for b in buckets)

    def test_inverted_range_yields_no_buckets(self, events):
        assert aggregate_by_day(events, DateRange(DAY1 + pd.Timedelta(days=4), DAY1)) == []

    def test_midnight_event_lands_in_its_own_day(self):
        frame = events_frame([make_event("m", Action.ADDED, DAY2)])
        buckets = aggregate_by_day(frame, DateRange(DAY1, DAY3))
        assert [b.added_count for b in buckets] == [0, 1, 0]

    def test_count_conservation(self, events):
        buckets = aggregate_by_day(events, DateRange(DAY1, DAY3))
        assert sum(b.added_count for b in buckets) == 2
        assert sum(b.removed_count for b in buckets) == 1

    def test_events_outside_range_are_ignored(self, events):
        buckets = aggregate_by_day(events, DateRange(DAY2, DAY3))
        assert [(b.added_count, b.removed_count) for b in buckets] == [(0, 0), (1, 0)]

    def test_authorizations_are_ranked_per_day(self, events, authorizations):
        day1 = aggregate_by_day(events, DateRange(DAY1, DAY1), authorizations)[0]
        assert day1.added_authorizations == (
            AuthorizationCount("auth-meta-1", "Meta NA Account", "Meta", 1),
        )
        assert day1.removed_authorizations[0].display_name == "Google Ads EMEA Account"

    def test_frame_adapter(self, events):
        frame = day_buckets_frame(aggregate_by_day(events, DateRange(DAY1, DAY3)))
        assert frame["added"].tolist() == [1, 0, 1]
        assert frame["removed"].tolist() == [1, 0, 0]
        assert frame["total"].tolist() == [2, 0, 1]


class TestRankAuthorizations:

    def test_ties_keep_first_seen_order(self):
        frame = events_frame(
            [
                make_event("1", Action.ADDED, DAY1, authorization_id="auth-b"),
                make_event("2", Action.ADDED, DAY1, authorization_id="auth-a"),
                make_event("3", Action.ADDED, DAY1, authorization_id="auth-c"),
                make_event("4", Action.ADDED, DAY1, authorization_id="auth-c"),
            ]
        )
        ranked = rank_authorizations(frame, {})
        assert [entry.authorization_id for entry in ranked] == ["auth-c", "auth-b", "auth-a"]
        assert [entry.count for entry in ranked] == [2, 1, 1]

    def test_unknown_authorization_uses_placeholder(self):
        frame = events_frame([make_event("1", Action.REMOVED, DAY1, authorization_id="auth-gone", data_source="TikTok Ads")])
        (entry,) = rank_authorizations(frame, {})
        assert entry.display_name == UNKNOWN_AUTHORIZATION
        assert entry.data_source_type == "TikTok Ads"

    def test_top_with_remainder(self):
        ranked = [AuthorizationCount(f"a{i}", f"A{i}", "Meta", 1) for i in range(7)]
        head, remaining = top_with_remainder(ranked, 5)
        assert [entry.authorization_id for entry in head] == ["a0", "a1", "a2", "a3", "a4"]
        assert remaining == 2
        assert top_with_remainder(ranked[:3], 5) == (ranked[:3], 0)


class TestAggregateByDataSource:

    def test_ranked_with_percentages(self, events):
        summaries = aggregate_by_data_source(events)
        assert [(s.data_source, s.total, s.percentage_of_total) for s in summaries] == [
            ("Meta", 2, 67),
            ("Google Ads", 1, 33),
        ]
        assert summaries[0].added_count == 2
        assert summaries[1].removed_count == 1

    def test_percentages_sum_close_to_100(self):
        frame = events_frame(
            [make_event(str(i), Action.ADDED, DAY1, data_source=source)
             for i, source in enumerate(["Meta", "Google Ads", "TikTok Ads"])]
        )
        total = sum(s.percentage_of_total for s in aggregate_by_data_source(frame))
        assert abs(total - 100) <= 3

    def test_date_range_restricts(self, events):
        summaries = aggregate_by_data_source(events, DateRange(DAY3, DAY3 + pd.Timedelta(days=1)))
        assert [(s.data_source, s.percentage_of_total) for s in summaries] == [("Meta", 100)]

    def test_empty(self, events):
        assert aggregate_by_data_source(events_frame([])) == []
        assert aggregate_by_data_source(events, DateRange(DAY3, DAY1)) == []
        assert data_source_frame([]).empty

    def test_round_half_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(0.5) == 1
        assert round_half_up(66.666) == 67
        assert round_half_up(33.333) == 33


class TestSummarizeByAuthorization:

    def test_totals_and_latest_change(self, events, authorizations):
        summaries = summarize_by_authorization(events, authorizations)
        assert [s.authorization_id for s in summaries] == ["auth-meta-1", "auth-google-ads-2"]
        meta = summaries[0]
        assert (meta.total, meta.added_count, meta.removed_count) == (2, 2, 0)
        assert meta.latest_change == DAY3 + pd.Timedelta(hours=9, minutes=30)
        assert meta.workspace == "SampleCompany-NA"

    def test_empty(self):
        assert summarize_by_authorization(events_frame([])) == []
