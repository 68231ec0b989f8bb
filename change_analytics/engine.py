"""
Facade tying filter -> sort -> aggregate -> export into the calls the
dashboard pages make.

Table rows honour every filter. Chart aggregates only honour the aggregation
date range and the authorization scope, so filtering the table to a single
action never blanks out the other half of the diverging chart.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from change_analytics.analytics.aggregation import (
    DataSourceSummary,
    DayBucket,
    aggregate_by_data_source,
    aggregate_by_day,
)
from change_analytics.analytics.sorting import DEFAULT_SORT, SortState, apply_sort
from change_analytics.data.filters import DEFAULT_FILTERS, EventFilters, apply_event_filters
from change_analytics.data.frames import (
    AuthorizationInput,
    EventInput,
    as_authorization_frame,
    as_event_frame,
)
from change_analytics.data.models import ActionFilter, SubjectKind
from change_analytics.export.csv_export import CsvExport, ExportOptions, export_changes_csv
from change_analytics.utils.time_utils import DateRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregationOptions:
    """Chart settings; ``date_range`` falls back to the filter's date range."""

    date_range: Optional[DateRange] = None


@dataclass
class QueryResult:
    rows: pd.DataFrame
    day_buckets: List[DayBucket] = field(default_factory=list)
    data_source_summaries: List[DataSourceSummary] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def chart_filters(filters: EventFilters, aggregation: AggregationOptions) -> EventFilters:
    """Filters the chart aggregates see: date range and authorization scope only."""
    return EventFilters(
        date_range=aggregation.date_range or filters.date_range,
        authorization_id=filters.authorization_id,
    )


def query(
    events: EventInput,
    authorizations: AuthorizationInput,
    filters: EventFilters = DEFAULT_FILTERS,
    sort: SortState = DEFAULT_SORT,
    aggregation: AggregationOptions = AggregationOptions(),
) -> QueryResult:
    events_df = as_event_frame(events)
    authorizations_df = as_authorization_frame(authorizations)

    rows = apply_sort(apply_event_filters(events_df, filters), sort)

    scope = chart_filters(filters, aggregation)
    chart_events = apply_event_filters(events_df, EventFilters(authorization_id=scope.authorization_id))
    day_buckets: List[DayBucket] = []
    if scope.date_range is not None:
        day_buckets = aggregate_by_day(chart_events, scope.date_range, authorizations_df)
    summaries = aggregate_by_data_source(chart_events, scope.date_range)

    logger.debug(
        "Query returned %d rows, %d day buckets, %d data sources",
        len(rows),
        len(day_buckets),
        len(summaries),
    )
    return QueryResult(rows=rows, day_buckets=day_buckets, data_source_summaries=summaries)


def export_options_for(filters: EventFilters) -> ExportOptions:
    """Export flags that mirror the table's action filter and date range."""
    return ExportOptions(
        include_added=filters.action in (ActionFilter.ALL, ActionFilter.ADDED),
        include_removed=filters.action in (ActionFilter.ALL, ActionFilter.REMOVED),
        date_range=filters.date_range,
    )


def export(
    events: EventInput,
    authorizations: AuthorizationInput,
    filters: EventFilters = DEFAULT_FILTERS,
    options: Optional[ExportOptions] = None,
    subject_kind: SubjectKind = SubjectKind.PERMISSION,
    today: Optional[dt.date] = None,
) -> CsvExport:
    """Serialize the rows matching the table filters, always most recent first."""
    return export_changes_csv(
        apply_event_filters(events, filters),
        authorizations,
        options or export_options_for(filters),
        subject_kind=subject_kind,
        today=today,
    )
