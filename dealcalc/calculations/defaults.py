"""
Default Assumption Tables

Immutable defaults for financing terms, the price solver, NOI estimation
and deal fees. Functions take these tables as explicit arguments; the
module-level instances hold the canonical values.

Units: rates and capital-structure shares are decimal fractions
(0.075 for 7.5%). The exceptions are `refi_ltv_percent` and
`max_estimated_cap_rate`, which are on a 0-100 scale.
"""

from dataclasses import dataclass, field
from typing import Tuple

from dealcalc.config import Settings


@dataclass(frozen=True)
class FinancingDefaults:
    """Loan terms and capital structure used when a caller omits them."""

    dscr_rate: float = 0.075
    dscr_term_years: float = 30
    seller_fi_rate: float = 0.0
    seller_fi_term_years: float = 30
    down_percent: float = 0.30
    dscr_ltv_percent: float = 0.70
    balloon_years: float = 7
    appreciation_rate: float = 0.045
    refi_ltv_percent: float = 75.0  # 0-100 scale


@dataclass(frozen=True)
class SolverDefaults:
    """Convergence knobs and price bounds for the COCR price solver."""

    max_iterations: int = 50
    tolerance: float = 0.001  # decimal COCR units, not percent
    adjustment_factor: float = 0.5
    seed_cap_rate: float = 0.08
    min_iteration_price: float = 1000.0
    minimum_solved_price: float = 10000.0
    max_price_multiplier: float = 50.0
    conservative_price_multiplier: float = 20.0
    target_cocr: float = 0.15


@dataclass(frozen=True)
class PropertyTypeDefaults:
    """Income assumptions per property category."""

    str_gross_income_multiplier: float = 0.10
    str_noi_margin: float = 0.55
    assisted_income_per_bedroom_monthly: float = 1500.0
    assisted_default_bedroom_count: int = 10
    max_estimated_cap_rate: float = 25.0  # 0-100 scale


@dataclass(frozen=True)
class BusinessDefaults:
    """Fee and transaction-cost assumptions."""

    assignment_fee_percent: float = 0.05
    net_to_buyer_percent: float = 0.10
    seller_agent_commission: float = 0.025
    closing_costs_percent: float = 0.0125
    hard_money_rate: float = 0.03

    @property
    def seller_cost_percents(self) -> Tuple[float, ...]:
        return (self.seller_agent_commission, self.closing_costs_percent)


@dataclass(frozen=True)
class EngineConfig:
    """All default tables bundled together."""

    financing: FinancingDefaults = field(default_factory=FinancingDefaults)
    solver: SolverDefaults = field(default_factory=SolverDefaults)
    property_types: PropertyTypeDefaults = field(default_factory=PropertyTypeDefaults)
    business: BusinessDefaults = field(default_factory=BusinessDefaults)

    @classmethod
    def from_settings(cls, settings: Settings) -> "EngineConfig":
        """Build an immutable config from environment-driven settings."""
        return cls(
            financing=FinancingDefaults(
                dscr_rate=settings.dscr_rate,
                dscr_term_years=settings.dscr_amortization_years,
                seller_fi_rate=settings.seller_fi_rate,
                seller_fi_term_years=settings.seller_fi_amortization_years,
                down_percent=settings.default_down_percent,
                dscr_ltv_percent=settings.default_dscr_ltv_percent,
                balloon_years=settings.balloon_years,
                appreciation_rate=settings.appreciation_rate,
                refi_ltv_percent=settings.refi_ltv_percent,
            ),
            solver=SolverDefaults(
                max_iterations=settings.max_iterations,
                tolerance=settings.tolerance,
                adjustment_factor=settings.adjustment_factor,
                seed_cap_rate=settings.seed_cap_rate,
                min_iteration_price=settings.min_iteration_price,
                minimum_solved_price=settings.minimum_solved_price,
                max_price_multiplier=settings.max_price_multiplier,
                conservative_price_multiplier=settings.conservative_price_multiplier,
                target_cocr=settings.target_cocr,
            ),
            property_types=PropertyTypeDefaults(
                str_gross_income_multiplier=settings.str_gross_income_multiplier,
                str_noi_margin=settings.str_noi_margin,
                assisted_income_per_bedroom_monthly=settings.assisted_income_per_bedroom_monthly,
                assisted_default_bedroom_count=settings.assisted_default_bedroom_count,
                max_estimated_cap_rate=settings.max_estimated_cap_rate,
            ),
            business=BusinessDefaults(
                assignment_fee_percent=settings.assignment_fee_percent,
                net_to_buyer_percent=settings.net_to_buyer_percent,
                seller_agent_commission=settings.seller_agent_commission,
                closing_costs_percent=settings.closing_costs_percent,
                hard_money_rate=settings.hard_money_rate,
            ),
        )


DEFAULT_FINANCING = FinancingDefaults()
DEFAULT_SOLVER = SolverDefaults()
DEFAULT_PROPERTY_TYPES = PropertyTypeDefaults()
DEFAULT_BUSINESS = BusinessDefaults()
DEFAULT_CONFIG = EngineConfig()
