"""Shared fixtures for the projection tests."""

from __future__ import annotations

from typing import List

import pytest

from rent_or_buy.inputs import Percent, make_inputs
from rent_or_buy.schemas import ProjectionInputs, YearBucket


def make_buckets(totals: List[float], start_year: int = 2024) -> List[YearBucket]:
    """Build a yearly series with flat months from a list of yearly totals."""
    buckets = []
    cumulative = 0.0
    for offset, total in enumerate(totals):
        cumulative += total
        buckets.append(
            YearBucket(
                year=start_year + offset,
                months=tuple([total / 12] * 12),
                year_total=total,
                cumulative_total=cumulative,
            )
        )
    return buckets


@pytest.fixture
def buyer_inputs() -> ProjectionInputs:
    """A typical purchase: 20% down on 600k, 25-year mortgage, 30-year horizon."""
    return make_inputs(
        monthly_rent=2_000,
        rent_growth_rate=2.5,
        purchase_price=600_000,
        down_payment=Percent(20),
        mortgage_rate=5.5,
        mortgage_term_years=25,
        horizon_years=30,
        property_tax=4_500,
        annual_insurance=1_200,
        maintenance=Percent(1),
        closing_costs=Percent(1.5),
        appreciation_rate=3.0,
        investment_return=7.5,
        start_year=2024,
    )


@pytest.fixture
def buckets():
    return make_buckets
