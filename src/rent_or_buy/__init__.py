"""
Rent or Buy projection toolkit.

This package projects month-by-month cash flows for renting and for buying a
home, invests the difference for the renter, compares the net worth of both
paths year by year, and compresses long yearly series into short tables.
"""

from .compress import compress_series
from .formatting import format_currency, format_short_currency
from .inputs import Percent, make_inputs
from .model import (
    analyze,
    compare_paths,
    project_investment,
    project_ownership,
    project_rent,
)
from .schemas import (
    Analysis,
    ComparisonResult,
    DisplayRow,
    InvalidAssumptionsError,
    ProjectionInputs,
    SeriesResult,
    SingleYearRow,
    YearBucket,
    YearRangeRow,
)

__all__ = [
    "Analysis",
    "ComparisonResult",
    "DisplayRow",
    "InvalidAssumptionsError",
    "Percent",
    "ProjectionInputs",
    "SeriesResult",
    "SingleYearRow",
    "YearBucket",
    "YearRangeRow",
    "analyze",
    "compare_paths",
    "compress_series",
    "format_currency",
    "format_short_currency",
    "make_inputs",
    "project_investment",
    "project_ownership",
    "project_rent",
]
