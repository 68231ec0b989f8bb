"""Tests for the query/export facade."""

import csv
import io

import pandas as pd

from change_analytics.analytics.sorting import SortField, SortOrder, SortState
from change_analytics.data.filters import EventFilters
from change_analytics.data.models import ActionFilter, SubjectKind
from change_analytics.engine import AggregationOptions, export, export_options_for, query
from change_analytics.export.csv_export import BOM
from change_analytics.utils.time_utils import DateRange

from conftest import DAY1, DAY2, DAY3, TODAY


class TestQuery:

    def test_rows_are_filtered_and_sorted(self, events, authorizations):
        result = query(
            events,
            authorizations,
            EventFilters(action=ActionFilter.ADDED),
            SortState(SortField.OCCURRED_AT, SortOrder.ASCENDING),
        )
        assert result.rows["id"].tolist() == ["e1", "e3"]
        assert result.row_count == 2

    def test_action_filter_does_not_blank_the_charts(self, events, authorizations):
        result = query(
            events,
            authorizations,
            EventFilters(date_range=DateRange(DAY1, DAY3), action=ActionFilter.REMOVED, search_term="google"),
        )
        assert result.rows["id"].tolist() == ["e2"]
        assert [(b.added_count, b.removed_count) for b in result.day_buckets] == [(1, 1), (0, 0), (1, 0)]
        assert [s.data_source for s in result.data_source_summaries] == ["Meta", "Google Ads"]

    def test_authorization_scope_applies_to_charts(self, events, authorizations):
        result = query(
            events,
            authorizations,
            EventFilters(date_range=DateRange(DAY1, DAY3), authorization_id="auth-google-ads-2"),
        )
        assert [(b.added_count, b.removed_count) for b in result.day_buckets] == [(0, 1), (0, 0), (0, 0)]
        assert [s.data_source for s in result.data_source_summaries] == ["Google Ads"]

    def test_aggregation_range_overrides_filter_range(self, events, authorizations):
        result = query(
            events,
            authorizations,
            EventFilters(date_range=DateRange(DAY1, DAY3 + pd.Timedelta(hours=23))),
            aggregation=AggregationOptions(date_range=DateRange(DAY2, DAY3)),
        )
        assert len(result.rows) == 3
        assert [b.day for b in result.day_buckets] == [DAY2, DAY3]

    def test_without_range_there_are_no_day_buckets(self, events, authorizations):
        result = query(events, authorizations)
        assert result.day_buckets == []
        assert sum(s.total for s in result.data_source_summaries) == 3

    def test_inverted_range(self, events, authorizations):
        result = query(events, authorizations, EventFilters(date_range=DateRange(DAY3, DAY1)))
        assert result.rows.empty
        assert result.day_buckets == []
        assert result.data_source_summaries == []


class TestExport:

    def test_flags_follow_action_filter(self):
        options = export_options_for(EventFilters(action=ActionFilter.REMOVED))
        assert (options.include_added, options.include_removed) == (False, True)
        options = export_options_for(EventFilters())
        assert (options.include_added, options.include_removed) == (True, True)

    def test_exports_the_table_rows(self, events, authorizations):
        payload = export(
            events,
            authorizations,
            EventFilters(action=ActionFilter.ADDED, search_term="budget"),
            subject_kind=SubjectKind.PERMISSION,
            today=TODAY,
        )
        assert payload.row_count == 1
        assert payload.filename == "permission_changes_2025-01-10_added.csv"
        assert "e3" in payload.text

    def test_range_in_filename(self, events, authorizations):
        payload = export(
            events,
            authorizations,
            EventFilters(date_range=DateRange(DAY1, DAY1 + pd.Timedelta(hours=23))),
            today=TODAY,
        )
        assert payload.filename == "permission_changes_2025-01-01_to_2025-01-01_added_removed.csv"
        assert payload.row_count == 2

    def test_rows_are_most_recent_first(self, event_records, authorizations):
        payload = export(list(reversed(event_records)), authorizations, today=TODAY)
        rows = list(csv.reader(io.StringIO(payload.text[len(BOM):])))[1:]
        assert [row[3] for row in rows] == ["e3", "e2", "e1"]
