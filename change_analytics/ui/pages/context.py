from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from change_analytics.config import Settings
from change_analytics.data.filters import EventFilters
from change_analytics.data.models import SubjectKind


@dataclass
class PageContext:
    events: pd.DataFrame
    authorizations: pd.DataFrame
    filters: EventFilters
    settings: Settings

    @property
    def subject_kind(self) -> SubjectKind:
        return self.settings.subject_kind
