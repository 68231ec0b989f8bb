"""Tests for the plotly figure builders."""

from change_analytics.analytics.aggregation import AuthorizationCount, aggregate_by_data_source, aggregate_by_day
from change_analytics.config import DATA_SOURCE_META, FALLBACK_SOURCE_META, DataSourceMeta
from change_analytics.ui.components.charts import authorization_hover, daily_changes_chart, data_source_chart
from change_analytics.utils.time_utils import DateRange

from conftest import DAY1, DAY3


class TestDailyChangesChart:

    def test_removals_are_drawn_below_the_axis(self, events, authorizations):
        fig = daily_changes_chart(aggregate_by_day(events, DateRange(DAY1, DAY3), authorizations))
        added, removed = fig.data
        assert list(added.y) == [1, 0, 1]
        assert list(removed.y) == [-1, 0, 0]
        assert fig.layout.barmode == "relative"

    def test_hover_lists_authorizations(self, events, authorizations):
        fig = daily_changes_chart(aggregate_by_day(events, DateRange(DAY1, DAY1), authorizations))
        assert "Meta NA Account (Meta): 1" in fig.data[0].hovertext[0]
        assert "Google Ads EMEA Account (Google Ads): 1" in fig.data[1].hovertext[0]


class TestAuthorizationHover:

    def test_remainder_line(self):
        ranked = [AuthorizationCount(f"a{i}", f"Auth {i}", "Meta", 7 - i) for i in range(7)]
        text = authorization_hover("Jan 1", "Added", 28, ranked, top_n=5)
        lines = text.split("<br>")
        assert lines[0] == "<b>Jan 1</b>"
        assert lines[1] == "Added: 28"
        assert len(lines) == 2 + 5 + 1
        assert lines[-1] == "+2 more authorizations"

    def test_no_remainder_line_when_everything_fits(self):
        ranked = [AuthorizationCount("a", "Auth", "Meta", 1)]
        assert "more" not in authorization_hover("Jan 1", "Removed", 1, ranked)


class TestDataSourceChart:

    def test_colors_come_from_injected_meta(self, events):
        summaries = aggregate_by_data_source(events)
        fig = data_source_chart(summaries)
        assert list(fig.data[0].labels) == ["Meta", "Google Ads"]
        assert list(fig.data[0].marker.colors) == [
            DATA_SOURCE_META["Meta"].color,
            DATA_SOURCE_META["Google Ads"].color,
        ]

    def test_unknown_sources_fall_back(self, events):
        custom = {"Meta": DataSourceMeta("Meta", "#123456", "m.svg")}
        fig = data_source_chart(aggregate_by_data_source(events), source_meta=custom)
        assert list(fig.data[0].marker.colors) == ["#123456", FALLBACK_SOURCE_META.color]
