from __future__ import annotations

import math
from typing import List, Sequence

from .schemas import DisplayRow, SingleYearRow, YearBucket, YearRangeRow


def group_sizes(count: int, max_rows: int) -> List[int]:
    """Split ``count`` years into at most ``max_rows`` near-equal groups.

    Sizes differ by at most one and the larger groups come first.
    """
    if count <= max_rows:
        return [1] * count
    size, remainder = divmod(count, max_rows)
    return [size + 1 if i < remainder else size for i in range(max_rows)]


def compress_series(
    years: Sequence[YearBucket], max_rows: int
) -> List[DisplayRow]:
    """
    Reduce a yearly series to at most ``max_rows`` display rows.

    Short series come back one row per year. Longer ones are cut into
    ``max_rows`` contiguous groups; each group's total is the sum of its
    years and its cumulative value is that of its last year, so totals
    survive compression. Range totals are exact sums (``math.fsum``) of the
    grouped year totals and series cumulatives are built the same way, so
    ``sum(row.total)`` matches ``total_paid`` to within double-precision
    rounding of the final addition.
    """
    if max_rows < 1:
        raise ValueError(f"max_rows must be at least 1, got {max_rows}")

    rows: List[DisplayRow] = []
    start = 0
    for size in group_sizes(len(years), max_rows):
        group = years[start : start + size]
        start += size
        first, last = group[0], group[-1]
        if size == 1:
            rows.append(
                SingleYearRow(
                    year=first.year,
                    total=first.year_total,
                    cumulative=first.cumulative_total,
                )
            )
        else:
            rows.append(
                YearRangeRow(
                    start_year=first.year,
                    end_year=last.year,
                    total=math.fsum(bucket.year_total for bucket in group),
                    cumulative=last.cumulative_total,
                )
            )
    return rows
