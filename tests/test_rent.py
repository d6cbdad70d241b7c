from __future__ import annotations

import math

import pytest

from rent_or_buy.model import monthly_rent_for_year, project_rent
from rent_or_buy.schemas import InvalidAssumptionsError


def test_rent_steps_up_once_per_year():
    series = project_rent(2000, 2.5, 3)

    assert series.years[0].year_total == 24000
    assert series.years[1].year_total == pytest.approx(24600)
    assert series.years[1].cumulative_total == pytest.approx(48600)
    assert series.total_paid == pytest.approx(24000 + 24600 + 25215)


def test_rent_is_flat_within_a_year():
    series = project_rent(2000, 2.5, 3)

    for bucket in series.years:
        assert len(bucket.months) == 12
        assert len(set(bucket.months)) == 1


def test_monthly_rent_for_year_compounds_from_base():
    assert monthly_rent_for_year(1000, 1, 2.5) == 1000
    assert monthly_rent_for_year(1000, 2, 2.5) == pytest.approx(1025)
    assert monthly_rent_for_year(1000, 3, 2.5) == pytest.approx(1050.625)
    assert monthly_rent_for_year(1000, 2, -2.5) == pytest.approx(975)


def test_year_labels_follow_start_year():
    series = project_rent(1500, 3, 4, start_year=2024)

    assert [bucket.year for bucket in series.years] == [2024, 2025, 2026, 2027]


def test_month_sums_and_cumulative_totals_agree():
    series = project_rent(1850, 3.2, 15)

    running = 0.0
    for bucket in series.years:
        assert sum(bucket.months) == pytest.approx(bucket.year_total)
        running += bucket.year_total
        assert bucket.cumulative_total == pytest.approx(running)
    assert sum(b.year_total for b in series.years) == pytest.approx(series.total_paid)
    assert len(series.entries) == 15 * 12


def test_non_negative_growth_never_lowers_rent():
    series = project_rent(1200, 1.5, 20)

    firsts = [bucket.months[0] for bucket in series.years]
    assert firsts == sorted(firsts)
    cumulatives = [bucket.cumulative_total for bucket in series.years]
    assert cumulatives == sorted(cumulatives)


def test_zero_rent_gives_all_zero_series():
    series = project_rent(0, 2.5, 5)

    assert series.total_paid == 0
    assert all(amount == 0 for amount in series.monthly_amounts())


@pytest.mark.parametrize("horizon", [0, -1, 121])
def test_horizon_outside_range_is_rejected(horizon):
    with pytest.raises(InvalidAssumptionsError) as excinfo:
        project_rent(2000, 2.5, horizon)

    assert "horizon_years" in excinfo.value.problems[0]


def test_anniversary_increase_splits_the_year():
    series = project_rent(1000, 10, 3, increase_month=7)

    year1, year2, year3 = series.years
    assert year1.months == (1000,) * 12
    assert year2.months[:6] == (1000,) * 6
    assert year2.months[6:] == pytest.approx((1100,) * 6)
    assert year2.year_total == pytest.approx(12600)
    assert year3.months[:6] == pytest.approx((1100,) * 6)
    assert year3.months[6:] == pytest.approx((1210,) * 6)


def test_anniversary_in_january_matches_default():
    january = project_rent(1000, 4, 5, increase_month=1)
    default = project_rent(1000, 4, 5)

    assert [b.year_total for b in january.years] == pytest.approx(
        [b.year_total for b in default.years]
    )


@pytest.mark.parametrize("month", [0, 13])
def test_invalid_increase_month_is_rejected(month):
    with pytest.raises(InvalidAssumptionsError):
        project_rent(1000, 4, 5, increase_month=month)


def test_cents_rounding():
    series = project_rent(1500.456, 2, 2, round_to="cents")

    assert series.years[0].months[0] == 1500.46
    assert series.years[0].year_total == 18005.52
    assert series.years[1].months[0] == 1530.47


def test_unknown_rounding_mode_is_rejected():
    with pytest.raises(ValueError):
        project_rent(1500, 2, 2, round_to="dollars")


def test_repeated_calls_are_identical():
    assert project_rent(2300, 3.7, 40) == project_rent(2300, 3.7, 40)


@pytest.mark.parametrize("month", [6.5, float("nan")])
def test_fractional_increase_month_is_rejected(month):
    with pytest.raises(InvalidAssumptionsError):
        project_rent(1000, 5, 3, increase_month=month)


def test_fractional_horizon_is_rejected():
    with pytest.raises(InvalidAssumptionsError):
        project_rent(1000, 5, 2.5)


@pytest.mark.parametrize(
    "rent, growth", [(float("nan"), 2.5), (1000, float("inf"))]
)
def test_non_finite_rent_inputs_are_rejected(rent, growth):
    with pytest.raises(InvalidAssumptionsError):
        project_rent(rent, growth, 3)


def test_cumulative_total_is_the_exact_sum_of_year_totals():
    series = project_rent(1_987.35, 3.3, 40)

    for index, bucket in enumerate(series.years):
        totals = [b.year_total for b in series.years[: index + 1]]
        assert bucket.cumulative_total == math.fsum(totals)
    assert series.total_paid == math.fsum(b.year_total for b in series.years)
