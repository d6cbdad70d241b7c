from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from .schemas import (
    MAX_HORIZON_YEARS,
    MONTHS_PER_YEAR,
    Analysis,
    AmortizationMonth,
    AmortizationSchedule,
    ComparisonResult,
    ComparisonYear,
    InvalidAssumptionsError,
    MonthlyEntry,
    OwnershipResult,
    ProjectionInputs,
    SeriesResult,
    YearBucket,
    is_whole_number,
)

logger = logging.getLogger(__name__)

ROUNDING_MODES = ("none", "cents")
_CENT = Decimal("0.01")


def analyze(inputs: ProjectionInputs, *, round_to: str = "none") -> Analysis:
    """Run every projection for ``inputs`` and line the two paths up by year."""
    rent = project_rent(
        inputs.monthly_rent,
        inputs.rent_growth_rate,
        inputs.horizon_years,
        start_year=inputs.start_year,
        increase_month=inputs.rent_increase_month,
        round_to=round_to,
    )
    ownership = project_ownership(inputs, round_to=round_to)
    investment = project_investment(
        inputs.upfront_cash,
        monthly_contributions(rent, ownership.series),
        inputs.investment_return,
        start_year=inputs.start_year,
        round_to=round_to,
    )
    comparison = compare_paths(rent, ownership, investment)

    logger.debug(
        "Analysed %d years: renting ends at %.2f, owning ends at %.2f",
        inputs.horizon_years,
        investment.total_paid,
        ownership.equity[-1],
    )
    return Analysis(
        inputs=inputs,
        rent=rent,
        ownership=ownership,
        investment=investment,
        comparison=comparison,
    )


def apply_rounding(value: float, round_to: str) -> float:
    if round_to == "cents":
        return float(Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP))
    return value


def _check_rounding(round_to: str) -> None:
    if round_to not in ROUNDING_MODES:
        raise ValueError(f"round_to must be one of {ROUNDING_MODES}, got {round_to!r}")


def _check_horizon(horizon_years: int) -> None:
    if not is_whole_number(horizon_years):
        raise InvalidAssumptionsError(
            [f"horizon_years must be a whole number, got {horizon_years}"]
        )
    if not 1 <= horizon_years <= MAX_HORIZON_YEARS:
        raise InvalidAssumptionsError(
            [
                f"horizon_years must be between 1 and {MAX_HORIZON_YEARS}, "
                f"got {horizon_years}"
            ]
        )


def _bucket_series(
    entries: Sequence[MonthlyEntry], start_year: int, round_to: str
) -> SeriesResult:
    years: List[YearBucket] = []
    year_totals: List[float] = []
    cumulative = 0.0
    for offset in range(0, len(entries), MONTHS_PER_YEAR):
        months = tuple(e.amount for e in entries[offset : offset + MONTHS_PER_YEAR])
        year_total = apply_rounding(math.fsum(months), round_to)
        year_totals.append(year_total)
        cumulative = apply_rounding(math.fsum(year_totals), round_to)
        years.append(
            YearBucket(
                year=start_year + offset // MONTHS_PER_YEAR,
                months=months,
                year_total=year_total,
                cumulative_total=cumulative,
            )
        )
    return SeriesResult(years=tuple(years), total_paid=cumulative, entries=tuple(entries))


# --- Rent -------------------------------------------------------------------


def monthly_rent_for_year(
    base_rent: float, year: int, annual_growth_rate: float, round_to: str = "none"
) -> float:
    """Flat monthly rent in effect during ``year`` (1-based), stepped once a year."""
    if year <= 1:
        return apply_rounding(base_rent, round_to)
    rent = base_rent * (1 + annual_growth_rate / 100.0) ** (year - 1)
    return apply_rounding(rent, round_to)


def project_rent(
    monthly_rent: float,
    annual_growth_rate: float,
    horizon_years: int,
    *,
    start_year: int = 1,
    increase_month: Optional[int] = None,
    round_to: str = "none",
) -> SeriesResult:
    """
    Project rent paid over the horizon.

    Rent steps up once per year and is flat across that year's 12 months.
    With ``increase_month`` set, the step lands on that month instead of
    January: earlier months of year N still pay year N-1's rent.
    """
    _check_horizon(horizon_years)
    _check_rounding(round_to)
    problems = [
        f"{name} must be a finite number, got {value}"
        for name, value in (
            ("monthly_rent", monthly_rent),
            ("annual_growth_rate", annual_growth_rate),
        )
        if not math.isfinite(value)
    ]
    if increase_month is not None and (
        not is_whole_number(increase_month) or not 1 <= increase_month <= 12
    ):
        problems.append(f"increase_month must be 1-12, got {increase_month}")
    if problems:
        raise InvalidAssumptionsError(problems)

    entries: List[MonthlyEntry] = []
    for year in range(1, horizon_years + 1):
        current = monthly_rent_for_year(monthly_rent, year, annual_growth_rate, round_to)
        if increase_month is None or year == 1:
            amounts = [current] * MONTHS_PER_YEAR
        else:
            previous = monthly_rent_for_year(
                monthly_rent, year - 1, annual_growth_rate, round_to
            )
            amounts = [previous] * (increase_month - 1) + [current] * (
                MONTHS_PER_YEAR - increase_month + 1
            )
        first_month = (year - 1) * MONTHS_PER_YEAR
        entries.extend(
            MonthlyEntry(month=first_month + i + 1, amount=amount)
            for i, amount in enumerate(amounts)
        )

    return _bucket_series(entries, start_year, round_to)


# --- Ownership --------------------------------------------------------------


def monthly_mortgage_payment(
    principal: float, annual_rate_pct: float, term_months: int
) -> float:
    """Level monthly payment that retires ``principal`` in ``term_months``."""
    if principal <= 0 or term_months <= 0:
        return 0.0
    monthly_rate = annual_to_monthly_rate(annual_rate_pct)
    if monthly_rate == 0:
        return principal / term_months
    discount = (1 + monthly_rate) ** (-term_months)
    return principal * monthly_rate / (1 - discount)


def annual_to_monthly_rate(annual_rate_pct: float) -> float:
    return annual_rate_pct / 100.0 / 12.0


def amortization_schedule(
    principal: float,
    annual_rate_pct: float,
    term_years: int,
    *,
    round_to: str = "none",
) -> AmortizationSchedule:
    """
    Month-by-month fixed-rate amortization over the full loan term.

    The last payment is sized to retire exactly the remaining balance, so
    any rounding drift is absorbed there and the closing balance is zero.
    """
    _check_rounding(round_to)
    problems: List[str] = []
    if not math.isfinite(principal) or principal < 0:
        problems.append(f"principal must be a non-negative number, got {principal}")
    if not math.isfinite(annual_rate_pct) or annual_rate_pct < 0:
        problems.append(
            f"annual_rate_pct must be a non-negative number, got {annual_rate_pct}"
        )
    if not is_whole_number(term_years) or term_years < 1:
        problems.append(
            f"term_years must be a whole number of at least 1, got {term_years}"
        )
    if problems:
        raise InvalidAssumptionsError(problems)

    term_months = term_years * MONTHS_PER_YEAR
    rate = annual_to_monthly_rate(annual_rate_pct)
    payment = apply_rounding(
        monthly_mortgage_payment(principal, annual_rate_pct, term_months), round_to
    )

    months: List[AmortizationMonth] = []
    balance = principal
    cumulative_principal = 0.0
    cumulative_interest = 0.0

    for index in range(1, term_months + 1):
        balance_start = balance
        interest = apply_rounding(balance_start * rate, round_to)
        if index == term_months or payment - interest >= balance_start:
            principal_paid = balance_start
            month_payment = apply_rounding(principal_paid + interest, round_to)
            balance = 0.0
        else:
            principal_paid = apply_rounding(payment - interest, round_to)
            month_payment = payment
            balance = apply_rounding(balance_start - principal_paid, round_to)

        cumulative_principal += principal_paid
        cumulative_interest += interest
        months.append(
            AmortizationMonth(
                index=index,
                year=(index - 1) // MONTHS_PER_YEAR + 1,
                month_in_year=(index - 1) % MONTHS_PER_YEAR + 1,
                payment=month_payment,
                interest=interest,
                principal=principal_paid,
                balance_start=balance_start,
                balance_end=balance,
                cumulative_principal=apply_rounding(cumulative_principal, round_to),
                cumulative_interest=apply_rounding(cumulative_interest, round_to),
            )
        )

    return AmortizationSchedule(
        monthly_payment=payment,
        total_principal_paid=apply_rounding(cumulative_principal, round_to),
        total_interest_paid=apply_rounding(cumulative_interest, round_to),
        months=tuple(months),
    )


def _recurring_costs_for_year(inputs: ProjectionInputs, year: int) -> float:
    growth = (1 + inputs.appreciation_rate / 100.0) ** (year - 1)
    tax = inputs.annual_property_tax
    if inputs.property_tax_tracks_value:
        tax *= growth
    maintenance = inputs.annual_maintenance
    if inputs.maintenance_tracks_value:
        maintenance *= growth
    return tax + inputs.annual_insurance + maintenance


def project_ownership(
    inputs: ProjectionInputs, *, round_to: str = "none"
) -> OwnershipResult:
    """
    Project the owner's monthly outflow, home value and equity.

    Costs entered as a percent of value follow the home value at the start of
    each year. Once the loan is paid off only recurring costs remain.
    """
    _check_rounding(round_to)
    schedule = amortization_schedule(
        inputs.loan_amount,
        inputs.mortgage_rate,
        inputs.mortgage_term_years,
        round_to=round_to,
    )
    logger.debug(
        "Amortizing %.2f over %d years at %.3f%%: payment %.2f",
        inputs.loan_amount,
        inputs.mortgage_term_years,
        inputs.mortgage_rate,
        schedule.monthly_payment,
    )

    entries: List[MonthlyEntry] = []
    home_values: List[float] = []
    balances: List[float] = []
    equity: List[float] = []
    appreciation = 1 + inputs.appreciation_rate / 100.0

    for year in range(1, inputs.horizon_years + 1):
        other = apply_rounding(
            _recurring_costs_for_year(inputs, year) / MONTHS_PER_YEAR, round_to
        )
        for month_in_year in range(1, MONTHS_PER_YEAR + 1):
            month = (year - 1) * MONTHS_PER_YEAR + month_in_year
            if month <= len(schedule.months):
                row = schedule.months[month - 1]
                payment, principal, interest = row.payment, row.principal, row.interest
                balance = row.balance_end
            else:
                payment = principal = interest = balance = 0.0
            entries.append(
                MonthlyEntry(
                    month=month,
                    amount=apply_rounding(payment + other, round_to),
                    principal=principal,
                    interest=interest,
                    other_costs=other,
                    balance=balance,
                )
            )

        home_value = apply_rounding(inputs.purchase_price * appreciation**year, round_to)
        remaining = schedule.balance_after(year * MONTHS_PER_YEAR)
        home_values.append(home_value)
        balances.append(remaining)
        equity.append(apply_rounding(home_value - remaining, round_to))

    return OwnershipResult(
        series=_bucket_series(entries, inputs.start_year, round_to),
        schedule=schedule,
        home_values=tuple(home_values),
        remaining_balances=tuple(balances),
        equity=tuple(equity),
        upfront_cash=inputs.upfront_cash,
    )


# --- Investment -------------------------------------------------------------


def monthly_contributions(rent: SeriesResult, ownership: SeriesResult) -> List[float]:
    """What the renter can invest each month: owning's outflow minus rent."""
    rent_amounts = rent.monthly_amounts()
    own_amounts = ownership.monthly_amounts()
    if len(rent_amounts) != len(own_amounts):
        raise ValueError(
            f"rent covers {len(rent_amounts)} months but ownership covers "
            f"{len(own_amounts)}"
        )
    return [own - paid for own, paid in zip(own_amounts, rent_amounts)]


def project_investment(
    initial_lump_sum: float,
    contributions: Sequence[float],
    annual_return_rate: float,
    *,
    start_year: int = 1,
    round_to: str = "none",
) -> SeriesResult:
    """
    Compound a portfolio monthly and report its value at each year end.

    Each month the balance grows first and then takes that month's
    contribution. Negative contributions are withdrawals and the balance is
    allowed to go below zero. Year buckets hold the monthly change in value
    (the first month includes the lump sum) so that ``cumulative_total`` is
    the year-end balance and ``total_paid`` the ending balance.
    """
    _check_rounding(round_to)
    if not contributions or len(contributions) % MONTHS_PER_YEAR:
        raise InvalidAssumptionsError(
            [
                "contributions must cover whole years, "
                f"got {len(contributions)} months"
            ]
        )
    _check_horizon(len(contributions) // MONTHS_PER_YEAR)

    rate = annual_return_rate / 100.0 / 12.0
    balance = initial_lump_sum
    previous_value = 0.0
    entries: List[MonthlyEntry] = []
    years: List[YearBucket] = []
    year_start_value = 0.0

    for month, contribution in enumerate(contributions, start=1):
        balance = apply_rounding(balance * (1 + rate) + contribution, round_to)
        entries.append(
            MonthlyEntry(month=month, amount=balance - previous_value, balance=balance)
        )
        previous_value = balance

        if month % MONTHS_PER_YEAR == 0:
            months = tuple(e.amount for e in entries[-MONTHS_PER_YEAR:])
            years.append(
                YearBucket(
                    year=start_year + month // MONTHS_PER_YEAR - 1,
                    months=months,
                    year_total=balance - year_start_value,
                    cumulative_total=balance,
                )
            )
            year_start_value = balance

    return SeriesResult(years=tuple(years), total_paid=balance, entries=tuple(entries))


# --- Comparison -------------------------------------------------------------


def compare_paths(
    rent: SeriesResult, ownership: OwnershipResult, investment: SeriesResult
) -> ComparisonResult:
    """
    Report, per year, what each path has cost and what it is worth.

    Renting is worth its invested portfolio; owning is worth its home equity.
    Owning's cost includes the cash paid up front at purchase.
    """
    own_years = ownership.series.years
    if not len(rent.years) == len(own_years) == len(investment.years):
        raise ValueError("rent, ownership and investment series cover different years")

    years = tuple(
        ComparisonYear(
            year=rent_year.year,
            rent_cost=rent_year.cumulative_total,
            own_cost=ownership.upfront_cash + own_year.cumulative_total,
            rent_net_worth=invest_year.cumulative_total,
            own_net_worth=equity,
        )
        for rent_year, own_year, invest_year, equity in zip(
            rent.years, own_years, investment.years, ownership.equity
        )
    )
    return ComparisonResult(years=years)
