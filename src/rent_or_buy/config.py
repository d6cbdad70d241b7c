"""
Market configuration: the allowed range and default for every assumption.

Ranges are advisory. They drive input defaults and warnings, while hard
validation lives with ``ProjectionInputs``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from .inputs import Percent, make_inputs
from .schemas import ProjectionInputs

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "Canada"
DEFAULT_HORIZON_YEARS = 25


@dataclass(frozen=True)
class FieldRange:
    min: float
    max: float
    default: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class MarketConfig:
    name: str
    rent: Dict[str, FieldRange]
    purchase: Dict[str, FieldRange]
    investment: Dict[str, FieldRange]

    def field(self, section: str, name: str) -> FieldRange:
        sections = {
            "rent": self.rent,
            "purchase": self.purchase,
            "investment": self.investment,
        }
        if section not in sections:
            raise KeyError(f"Unknown config section '{section}'")
        try:
            return sections[section][name]
        except KeyError as exc:
            raise KeyError(f"Field '{name}' not found in section '{section}'") from exc

    def default(self, section: str, name: str) -> float:
        return self.field(section, name).default


CANADA = MarketConfig(
    name="Canada",
    rent={
        "monthly_rent": FieldRange(0, 10_000, 2_000),
        "rent_increase_rate": FieldRange(0, 20, 2.5),
    },
    purchase={
        "purchase_price": FieldRange(100_000, 3_000_000, 600_000),
        "mortgage_rate": FieldRange(0, 15, 5.5),
        "mortgage_length": FieldRange(1, 40, 25),
        "down_payment_percentage": FieldRange(0, 100, 20),
        "down_payment_amount": FieldRange(0, 3_000_000, 120_000),
        "closing_costs_percentage": FieldRange(0, 5, 1.5),
        "closing_costs_amount": FieldRange(0, 100_000, 12_000),
        "property_tax_percentage": FieldRange(0, 5, 0.75),
        "property_tax_amount": FieldRange(0, 50_000, 4_500),
        "maintenance_percentage": FieldRange(0, 10, 1.0),
        "maintenance_amount": FieldRange(0, 100_000, 6_000),
        "asset_appreciation_rate": FieldRange(-5, 20, 3.0),
    },
    investment={
        "investment_return": FieldRange(-20, 100, 7.5),
    },
)

MARKETS: Dict[str, MarketConfig] = {CANADA.name.lower(): CANADA}


def load_market(country: str = DEFAULT_COUNTRY) -> MarketConfig:
    market = MARKETS.get((country or DEFAULT_COUNTRY).lower())
    if market is None:
        logger.warning(
            "Country %r is not supported, falling back to %s", country, DEFAULT_COUNTRY
        )
        return CANADA
    return market


def default_inputs(
    market: MarketConfig = CANADA,
    *,
    horizon_years: int = DEFAULT_HORIZON_YEARS,
    start_year: int = 1,
) -> ProjectionInputs:
    """Build a projection from the market's defaults, percentages where offered."""
    return make_inputs(
        monthly_rent=market.default("rent", "monthly_rent"),
        rent_growth_rate=market.default("rent", "rent_increase_rate"),
        purchase_price=market.default("purchase", "purchase_price"),
        down_payment=Percent(market.default("purchase", "down_payment_percentage")),
        mortgage_rate=market.default("purchase", "mortgage_rate"),
        mortgage_term_years=int(market.default("purchase", "mortgage_length")),
        horizon_years=horizon_years,
        property_tax=Percent(market.default("purchase", "property_tax_percentage")),
        maintenance=Percent(market.default("purchase", "maintenance_percentage")),
        closing_costs=Percent(market.default("purchase", "closing_costs_percentage")),
        appreciation_rate=market.default("purchase", "asset_appreciation_rate"),
        investment_return=market.default("investment", "investment_return"),
        start_year=start_year,
    )


def out_of_range_fields(
    inputs: ProjectionInputs, market: MarketConfig = CANADA
) -> List[str]:
    """Name every assumption that falls outside the market's usual range."""
    checks = [
        ("rent", "monthly_rent", inputs.monthly_rent),
        ("rent", "rent_increase_rate", inputs.rent_growth_rate),
        ("purchase", "purchase_price", inputs.purchase_price),
        ("purchase", "mortgage_rate", inputs.mortgage_rate),
        ("purchase", "mortgage_length", inputs.mortgage_term_years),
        ("purchase", "down_payment_amount", inputs.down_payment),
        ("purchase", "closing_costs_amount", inputs.closing_costs),
        ("purchase", "property_tax_amount", inputs.annual_property_tax),
        ("purchase", "maintenance_amount", inputs.annual_maintenance),
        ("purchase", "asset_appreciation_rate", inputs.appreciation_rate),
        ("investment", "investment_return", inputs.investment_return),
    ]
    outside = []
    for section, name, value in checks:
        bounds = market.field(section, name)
        if not bounds.contains(value):
            logger.warning(
                "%s=%s is outside the usual %s range [%s, %s]",
                name,
                value,
                market.name,
                bounds.min,
                bounds.max,
            )
            outside.append(name)
    return outside
