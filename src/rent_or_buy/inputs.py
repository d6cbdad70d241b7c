from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .schemas import InvalidAssumptionsError, ProjectionInputs


@dataclass(frozen=True)
class Percent:
    """Marks a cost entered as a percentage of some base (price or home value)."""

    value: float


AmountOrPercent = Union[float, int, Percent]


def percent_of(base: float, pct: float) -> float:
    return base * pct / 100.0


def resolve_amount(value: AmountOrPercent, base: float) -> Tuple[float, bool]:
    """Return ``(amount, was_percent)`` for a field that may be a percent."""
    if isinstance(value, Percent):
        return percent_of(base, value.value), True
    return float(value), False


def make_inputs(
    *,
    monthly_rent: float,
    rent_growth_rate: float,
    purchase_price: float,
    down_payment: AmountOrPercent,
    mortgage_rate: float,
    mortgage_term_years: int,
    horizon_years: int,
    property_tax: AmountOrPercent = 0.0,
    annual_insurance: float = 0.0,
    maintenance: AmountOrPercent = 0.0,
    closing_costs: AmountOrPercent = 0.0,
    appreciation_rate: float = 0.0,
    investment_return: float = 0.0,
    start_year: int = 1,
    rent_increase_month: Optional[int] = None,
) -> ProjectionInputs:
    """
    Normalize form-style assumptions into a validated ``ProjectionInputs``.

    Down payment and closing costs given as ``Percent`` are taken from the
    purchase price. Property tax and maintenance given as ``Percent`` are
    converted to their first-year amount and flagged to follow the home value.
    """
    if isinstance(down_payment, Percent) and not 0 <= down_payment.value <= 100:
        raise InvalidAssumptionsError(
            [f"down payment percentage must be 0-100, got {down_payment.value}"]
        )

    down_amount, _ = resolve_amount(down_payment, purchase_price)
    closing_amount, _ = resolve_amount(closing_costs, purchase_price)
    tax_amount, tax_tracks = resolve_amount(property_tax, purchase_price)
    maintenance_amount, maintenance_tracks = resolve_amount(maintenance, purchase_price)

    return ProjectionInputs(
        monthly_rent=float(monthly_rent),
        rent_growth_rate=float(rent_growth_rate),
        purchase_price=float(purchase_price),
        down_payment=down_amount,
        mortgage_rate=float(mortgage_rate),
        mortgage_term_years=mortgage_term_years,
        horizon_years=horizon_years,
        annual_property_tax=tax_amount,
        annual_insurance=float(annual_insurance),
        annual_maintenance=maintenance_amount,
        closing_costs=closing_amount,
        appreciation_rate=float(appreciation_rate),
        investment_return=float(investment_return),
        property_tax_tracks_value=tax_tracks,
        maintenance_tracks_value=maintenance_tracks,
        start_year=start_year,
        rent_increase_month=rent_increase_month,
    )
