"""Reports and export package."""

from debt_tracker.reports.categories import (
    LENDING_CATEGORY,
    UNCATEGORIZED,
    Categorizer,
    KeywordCategorizer,
    description_category,
)
from debt_tracker.reports.csv_export import (
    CSV_HEADER,
    SPLIT_GROUP_LABEL,
    export_csv,
    export_filename,
    format_amount,
)
from debt_tracker.reports.periods import filter_by_period, period_window
from debt_tracker.reports.summary import ReportBuilder

__all__ = [
    "CSV_HEADER",
    "Categorizer",
    "KeywordCategorizer",
    "LENDING_CATEGORY",
    "ReportBuilder",
    "SPLIT_GROUP_LABEL",
    "UNCATEGORIZED",
    "description_category",
    "export_csv",
    "export_filename",
    "filter_by_period",
    "format_amount",
    "period_window",
]
