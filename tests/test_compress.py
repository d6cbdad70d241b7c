from __future__ import annotations

import pytest

from rent_or_buy.compress import compress_series, group_sizes
from rent_or_buy.model import project_rent
from rent_or_buy.schemas import SingleYearRow, YearRangeRow


def _covered_years(rows):
    years = []
    for row in rows:
        if isinstance(row, SingleYearRow):
            years.append(row.year)
        else:
            years.extend(range(row.start_year, row.end_year + 1))
    return years


def test_short_series_is_returned_year_by_year(buckets):
    series = buckets([1_000, 2_000, 3_000])

    rows = compress_series(series, 5)

    assert rows == [
        SingleYearRow(year=2024, total=1_000, cumulative=1_000),
        SingleYearRow(year=2025, total=2_000, cumulative=3_000),
        SingleYearRow(year=2026, total=3_000, cumulative=6_000),
    ]


def test_series_equal_to_budget_is_not_merged(buckets):
    rows = compress_series(buckets([10] * 4), 4)

    assert all(isinstance(row, SingleYearRow) for row in rows)
    assert [row.label for row in rows] == ["2024", "2025", "2026", "2027"]


def test_ten_years_into_three_rows(buckets):
    series = buckets([float(i) for i in range(1, 11)])

    rows = compress_series(series, 3)

    assert [row.label for row in rows] == ["2024-2027", "2028-2030", "2031-2033"]
    assert [row.total for row in rows] == [10, 18, 27]
    assert [row.cumulative for row in rows] == [10, 28, 55]
    assert all(isinstance(row, YearRangeRow) for row in rows)


def test_remainder_goes_to_earliest_groups():
    assert group_sizes(10, 3) == [4, 3, 3]
    assert group_sizes(7, 5) == [2, 2, 1, 1, 1]
    assert group_sizes(12, 4) == [3, 3, 3, 3]
    assert group_sizes(3, 5) == [1, 1, 1]


def test_single_year_groups_are_not_ranges(buckets):
    rows = compress_series(buckets([100] * 7), 5)

    assert [type(row) for row in rows] == [
        YearRangeRow,
        YearRangeRow,
        SingleYearRow,
        SingleYearRow,
        SingleYearRow,
    ]
    assert ["-" in row.label for row in rows] == [True, True, False, False, False]


def test_one_row_budget_merges_everything(buckets):
    series = buckets([5, 6, 7, 8])

    (row,) = compress_series(series, 1)

    assert row == YearRangeRow(start_year=2024, end_year=2027, total=26, cumulative=26)


def test_one_row_budget_with_one_year(buckets):
    rows = compress_series(buckets([42]), 1)

    assert rows == [SingleYearRow(year=2024, total=42, cumulative=42)]


def test_empty_series_compresses_to_nothing():
    assert compress_series([], 3) == []


@pytest.mark.parametrize("max_rows", [0, -2])
def test_row_budget_must_be_positive(buckets, max_rows):
    with pytest.raises(ValueError):
        compress_series(buckets([1, 2]), max_rows)


@pytest.mark.parametrize("length", [1, 2, 5, 9, 10, 17, 30, 41])
@pytest.mark.parametrize("max_rows", [1, 2, 3, 4, 7, 10, 12])
def test_compression_preserves_totals_and_coverage(buckets, length, max_rows):
    series = buckets([1_000 + 37.5 * i for i in range(length)])
    total_paid = series[-1].cumulative_total

    rows = compress_series(series, max_rows)

    assert len(rows) == min(max_rows, length)
    assert sum(row.total for row in rows) == pytest.approx(total_paid)
    assert rows[-1].cumulative == total_paid
    assert _covered_years(rows) == [bucket.year for bucket in series]
    sizes = [len(_covered_years([row])) for row in rows]
    assert max(sizes) - min(sizes) <= 1
    assert sizes == sorted(sizes, reverse=True)


def test_compresses_a_rent_projection():
    series = project_rent(2_000, 2.5, 25, start_year=2025)

    rows = compress_series(series.years, 10)

    assert len(rows) == 10
    assert rows[0].label == "2025-2027"
    assert rows[-1].label == "2048-2049"
    assert rows[-1].cumulative == series.total_paid
    assert sum(row.total for row in rows) == pytest.approx(series.total_paid)
