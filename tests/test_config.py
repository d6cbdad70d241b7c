from __future__ import annotations

import logging

import pytest

from rent_or_buy.config import (
    CANADA,
    default_inputs,
    load_market,
    out_of_range_fields,
)
from rent_or_buy.inputs import make_inputs


def test_load_market_is_case_insensitive():
    assert load_market("Canada") is CANADA
    assert load_market("canada") is CANADA


def test_unknown_market_falls_back_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="rent_or_buy.config"):
        market = load_market("Narnia")

    assert market is CANADA
    assert "Narnia" in caplog.text


def test_field_lookup():
    rent = CANADA.field("rent", "monthly_rent")

    assert (rent.min, rent.max, rent.default) == (0, 10_000, 2_000)
    assert rent.contains(2_000)
    assert not rent.contains(10_001)
    assert CANADA.default("investment", "investment_return") == 7.5


@pytest.mark.parametrize("section, name", [("rent", "nope"), ("bogus", "monthly_rent")])
def test_unknown_field_raises(section, name):
    with pytest.raises(KeyError):
        CANADA.field(section, name)


def test_default_inputs_use_market_percentages():
    inputs = default_inputs(horizon_years=10, start_year=2024)

    assert inputs.purchase_price == 600_000
    assert inputs.down_payment == 120_000
    assert inputs.closing_costs == 9_000
    assert inputs.annual_property_tax == 4_500
    assert inputs.annual_maintenance == 6_000
    assert inputs.property_tax_tracks_value
    assert inputs.maintenance_tracks_value
    assert inputs.mortgage_term_years == 25
    assert inputs.start_year == 2024


def test_defaults_are_within_range():
    assert out_of_range_fields(default_inputs()) == []


def test_out_of_range_fields_are_reported(caplog):
    inputs = make_inputs(
        monthly_rent=12_000,
        rent_growth_rate=2.5,
        purchase_price=50_000,
        down_payment=10_000,
        mortgage_rate=5.5,
        mortgage_term_years=25,
        horizon_years=10,
    )

    with caplog.at_level(logging.WARNING, logger="rent_or_buy.config"):
        outside = out_of_range_fields(inputs)

    assert outside == ["monthly_rent", "purchase_price"]
    assert "purchase_price" in caplog.text
