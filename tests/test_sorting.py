"""Tests for change_analytics.analytics.sorting."""

import pandas as pd
import pytest

from change_analytics.analytics.sorting import (
    DEFAULT_SORT,
    AuthorizationSortField,
    SortField,
    SortOrder,
    SortState,
    apply_sort,
    sort_authorizations,
    sort_events,
)
from change_analytics.data.frames import events_frame
from change_analytics.data.models import Action

from conftest import DAY1, make_event


@pytest.fixture
def named_events():
    return events_frame(
        [
            make_event("n1", Action.ADDED, DAY1, subject_name="beta"),
            make_event("n2", Action.REMOVED, DAY1 + pd.Timedelta(hours=1), subject_name="Alpha"),
            make_event("n3", Action.ADDED, DAY1, subject_name="Beta"),
            make_event("n4", Action.REMOVED, DAY1 + pd.Timedelta(hours=2), subject_name="gamma"),
        ]
    )


def ids(frame):
    return frame["id"].tolist()


class TestSortEvents:

    def test_default_is_most_recent_first(self, events):
        assert ids(apply_sort(events)) == ["e3", "e2", "e1"]

    def test_case_insensitive_ascending_keeps_ties_in_order(self, named_events):
        assert ids(sort_events(named_events, SortField.SUBJECT_NAME, SortOrder.ASCENDING)) == ["n2", "n1", "n3", "n4"]

    def test_descending_keeps_ties_in_order(self, named_events):
        assert ids(sort_events(named_events, SortField.SUBJECT_NAME, SortOrder.DESCENDING)) == ["n4", "n1", "n3", "n2"]

    def test_equal_timestamps_are_stable(self, named_events):
        assert ids(sort_events(named_events, "occurred_at", "desc")) == ["n4", "n2", "n1", "n3"]
        assert ids(sort_events(named_events, "occurred_at", "asc")) == ["n1", "n3", "n2", "n4"]

    def test_sort_by_action(self, named_events):
        assert ids(sort_events(named_events, SortField.ACTION, SortOrder.ASCENDING)) == ["n1", "n3", "n2", "n4"]

    def test_unknown_field_raises(self, events):
        with pytest.raises(ValueError):
            sort_events(events, "authorization_name")

    def test_empty_frame(self):
        assert sort_events(events_frame([])).empty

    def test_input_is_not_modified(self, named_events):
        before = named_events.copy()
        sort_events(named_events, SortField.SUBJECT_NAME)
        pd.testing.assert_frame_equal(named_events, before)


class TestSortState:

    def test_default(self):
        assert DEFAULT_SORT == SortState(SortField.OCCURRED_AT, SortOrder.DESCENDING)

    def test_same_field_flips_order(self):
        state = DEFAULT_SORT.toggle(SortField.OCCURRED_AT)
        assert state.order is SortOrder.ASCENDING
        assert state.toggle("occurred_at").order is SortOrder.DESCENDING

    def test_new_field_starts_descending(self):
        state = SortState(SortField.OCCURRED_AT, SortOrder.ASCENDING).toggle(SortField.SUBJECT_NAME)
        assert state == SortState(SortField.SUBJECT_NAME, SortOrder.DESCENDING)


class TestSortAuthorizations:

    def test_never_used_sorts_as_oldest(self, authorizations):
        ordered = sort_authorizations(authorizations, AuthorizationSortField.LAST_USED_AT, SortOrder.ASCENDING)
        assert ordered["id"].tolist() == ["auth-meta-1", "auth-google-ads-2"]
        ordered = sort_authorizations(authorizations, AuthorizationSortField.LAST_USED_AT, SortOrder.DESCENDING)
        assert ordered["id"].tolist() == ["auth-google-ads-2", "auth-meta-1"]

    def test_by_name(self, authorizations):
        ordered = sort_authorizations(authorizations, "name", "asc")
        assert ordered["name"].tolist() == ["Google Ads EMEA Account", "Meta NA Account"]

    def test_default_is_newest_created_first(self, authorizations):
        assert sort_authorizations(authorizations)["id"].tolist() == ["auth-meta-1", "auth-google-ads-2"]
