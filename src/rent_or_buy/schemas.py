from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

MAX_HORIZON_YEARS = 120
MONTHS_PER_YEAR = 12


class InvalidAssumptionsError(ValueError):
    """Raised when a set of assumptions cannot be projected.

    ``problems`` holds one human-readable message per violated rule so callers
    can report every issue at once instead of fixing them one at a time.
    """

    def __init__(self, problems: List[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


@dataclass(frozen=True)
class ProjectionInputs:
    """Every assumption the projections need, already normalized to amounts.

    Rates are annual percentages (``2.5`` means 2.5 %). Costs that were entered
    as a percent of home value keep a ``*_tracks_value`` flag so they rise and
    fall with the home; fixed amounts stay flat.
    """

    monthly_rent: float
    rent_growth_rate: float
    purchase_price: float
    down_payment: float
    mortgage_rate: float
    mortgage_term_years: int
    horizon_years: int
    annual_property_tax: float = 0.0
    annual_insurance: float = 0.0  # insurance + HOA
    annual_maintenance: float = 0.0
    closing_costs: float = 0.0
    appreciation_rate: float = 0.0
    investment_return: float = 0.0
    property_tax_tracks_value: bool = False
    maintenance_tracks_value: bool = False
    start_year: int = 1
    rent_increase_month: Optional[int] = None

    def __post_init__(self) -> None:
        problems = validation_problems(self)
        if problems:
            raise InvalidAssumptionsError(problems)

    @property
    def loan_amount(self) -> float:
        return self.purchase_price - self.down_payment

    @property
    def upfront_cash(self) -> float:
        return self.down_payment + self.closing_costs

    @property
    def horizon_months(self) -> int:
        return self.horizon_years * MONTHS_PER_YEAR


def is_whole_number(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def validation_problems(inputs: ProjectionInputs) -> List[str]:
    problems: List[str] = []

    if not is_whole_number(inputs.horizon_years):
        problems.append(
            f"horizon_years must be a whole number, got {inputs.horizon_years}"
        )
    elif not 1 <= inputs.horizon_years <= MAX_HORIZON_YEARS:
        problems.append(
            f"horizon_years must be between 1 and {MAX_HORIZON_YEARS}, "
            f"got {inputs.horizon_years}"
        )
    if not is_whole_number(inputs.mortgage_term_years):
        problems.append(
            "mortgage_term_years must be a whole number, "
            f"got {inputs.mortgage_term_years}"
        )
    elif inputs.mortgage_term_years < 1:
        problems.append(
            f"mortgage_term_years must be at least 1, got {inputs.mortgage_term_years}"
        )
    if not is_whole_number(inputs.start_year):
        problems.append(f"start_year must be a whole number, got {inputs.start_year}")

    for name in (
        "monthly_rent",
        "purchase_price",
        "down_payment",
        "annual_property_tax",
        "annual_insurance",
        "annual_maintenance",
        "closing_costs",
        "mortgage_rate",
    ):
        value = getattr(inputs, name)
        if not math.isfinite(value):
            problems.append(f"{name} must be a finite number, got {value}")
        elif value < 0:
            problems.append(f"{name} must not be negative, got {value}")

    if (
        math.isfinite(inputs.down_payment)
        and math.isfinite(inputs.purchase_price)
        and inputs.down_payment > inputs.purchase_price
    ):
        problems.append(
            f"down_payment ({inputs.down_payment}) exceeds "
            f"purchase_price ({inputs.purchase_price})"
        )

    for name in (
        "rent_growth_rate",
        "appreciation_rate",
        "investment_return",
    ):
        value = getattr(inputs, name)
        if not math.isfinite(value):
            problems.append(f"{name} must be a finite number, got {value}")
        elif value <= -100:
            problems.append(f"{name} must be greater than -100%, got {value}")

    month = inputs.rent_increase_month
    if month is not None and (not is_whole_number(month) or not 1 <= month <= 12):
        problems.append(f"rent_increase_month must be 1-12, got {month}")

    return problems


@dataclass(frozen=True)
class MonthlyEntry:
    """One month of cash flow for a path.

    Rent entries only carry ``amount``. Ownership entries also split the
    outflow into mortgage principal, interest and other costs and report the
    loan balance after the payment.
    """

    month: int
    amount: float
    principal: Optional[float] = None
    interest: Optional[float] = None
    other_costs: Optional[float] = None
    balance: Optional[float] = None

    @property
    def year_index(self) -> int:
        return (self.month - 1) // MONTHS_PER_YEAR + 1


@dataclass(frozen=True)
class YearBucket:
    year: int
    months: Tuple[float, ...]
    year_total: float
    cumulative_total: float


@dataclass(frozen=True)
class SeriesResult:
    years: Tuple[YearBucket, ...]
    total_paid: float
    entries: Tuple[MonthlyEntry, ...] = ()

    def monthly_amounts(self) -> List[float]:
        return [amount for bucket in self.years for amount in bucket.months]


@dataclass(frozen=True)
class AmortizationMonth:
    index: int
    year: int
    month_in_year: int
    payment: float
    interest: float
    principal: float
    balance_start: float
    balance_end: float
    cumulative_principal: float
    cumulative_interest: float


@dataclass(frozen=True)
class AmortizationSchedule:
    monthly_payment: float
    total_principal_paid: float
    total_interest_paid: float
    months: Tuple[AmortizationMonth, ...]

    @property
    def total_paid(self) -> float:
        return self.total_principal_paid + self.total_interest_paid

    def balance_after(self, month: int) -> float:
        """Loan balance after ``month`` payments (zero once the loan is retired)."""
        if month <= 0:
            return self.months[0].balance_start if self.months else 0.0
        if month > len(self.months):
            return 0.0
        return self.months[month - 1].balance_end


@dataclass(frozen=True)
class OwnershipResult:
    series: SeriesResult
    schedule: AmortizationSchedule
    home_values: Tuple[float, ...]
    remaining_balances: Tuple[float, ...]
    equity: Tuple[float, ...]
    upfront_cash: float


@dataclass(frozen=True)
class ComparisonYear:
    year: int
    rent_cost: float
    own_cost: float
    rent_net_worth: float
    own_net_worth: float

    @property
    def leader(self) -> str:
        if self.own_net_worth > self.rent_net_worth:
            return "owning"
        if self.rent_net_worth > self.own_net_worth:
            return "renting"
        return "tie"


@dataclass(frozen=True)
class ComparisonResult:
    years: Tuple[ComparisonYear, ...] = field(default_factory=tuple)

    @property
    def final(self) -> Optional[ComparisonYear]:
        return self.years[-1] if self.years else None

    @property
    def better_option(self) -> str:
        final = self.final
        return final.leader if final is not None else "tie"

    @property
    def break_even_year(self) -> Optional[int]:
        for entry in self.years:
            if entry.own_net_worth >= entry.rent_net_worth:
                return entry.year
        return None


@dataclass(frozen=True)
class Analysis:
    inputs: ProjectionInputs
    rent: SeriesResult
    ownership: OwnershipResult
    investment: SeriesResult
    comparison: ComparisonResult


@dataclass(frozen=True)
class SingleYearRow:
    year: int
    total: float
    cumulative: float

    @property
    def label(self) -> str:
        return str(self.year)


@dataclass(frozen=True)
class YearRangeRow:
    start_year: int
    end_year: int
    total: float
    cumulative: float

    @property
    def label(self) -> str:
        return f"{self.start_year}-{self.end_year}"


DisplayRow = Union[SingleYearRow, YearRangeRow]
