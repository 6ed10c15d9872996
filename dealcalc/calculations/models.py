"""
Calculation Inputs and Results

Immutable value records passed into and returned from the engine.
Percent-named fields are decimal fractions unless noted otherwise.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from dealcalc.calculations.defaults import (
    DEFAULT_BUSINESS,
    DEFAULT_FINANCING,
    DEFAULT_SOLVER,
)
from dealcalc.calculations.errors import NonConvergenceError

logger = logging.getLogger(__name__)


class PropertyType(str, Enum):
    """Property categories with distinct income models."""

    MULTIFAMILY = "multifamily"
    SHORT_TERM_RENTAL = "str"
    ASSISTED_LIVING = "assisted"

    @classmethod
    def parse(cls, value) -> "PropertyType":
        """
        Resolve a type name, falling back to multifamily when unknown.

        Case, spaces, hyphens and underscores are ignored, so "str",
        "ShortTermRental" and "short_term_rental" all match.
        """
        if isinstance(value, cls):
            return value
        key = re.sub(r"[\s_\-]", "", str(value)).lower()
        try:
            return _PROPERTY_TYPE_ALIASES[key]
        except KeyError:
            logger.debug("Unknown property type %r, using multifamily", value)
            return cls.MULTIFAMILY


_PROPERTY_TYPE_ALIASES = {
    "multifamily": PropertyType.MULTIFAMILY,
    "str": PropertyType.SHORT_TERM_RENTAL,
    "shorttermrental": PropertyType.SHORT_TERM_RENTAL,
    "assisted": PropertyType.ASSISTED_LIVING,
    "assistedliving": PropertyType.ASSISTED_LIVING,
}


@dataclass(frozen=True)
class LoanTerms:
    """A fixed-rate, fully amortizing loan."""

    principal: float
    annual_rate: float
    term_years: float


@dataclass(frozen=True)
class BalloonSchedule:
    """A loan amortized over one horizon but due after a shorter one."""

    loan_amount: float
    annual_rate: float
    amortization_years: float
    balloon_years: float = DEFAULT_FINANCING.balloon_years


@dataclass(frozen=True)
class FinancingStructure:
    """
    Capital stack for a purchase.

    Seller financing is senior: the DSCR loan only covers
    max(0, dscr_ltv_percent - seller_fi_percent) of the price.
    """

    asking_price: float
    down_percent: float = DEFAULT_FINANCING.down_percent
    dscr_ltv_percent: float = DEFAULT_FINANCING.dscr_ltv_percent
    dscr_rate: float = DEFAULT_FINANCING.dscr_rate
    dscr_term_years: float = DEFAULT_FINANCING.dscr_term_years
    seller_fi_percent: float = 0.0
    seller_fi_rate: float = DEFAULT_FINANCING.seller_fi_rate
    seller_fi_term_years: float = DEFAULT_FINANCING.seller_fi_term_years

    @property
    def effective_dscr_percent(self) -> float:
        return max(0.0, self.dscr_ltv_percent - self.seller_fi_percent)


@dataclass(frozen=True)
class IncomeParams:
    """Per-call overrides for type-specific income inputs. None means default."""

    bedroom_count: Optional[int] = None
    gross_income_multiplier: Optional[float] = None
    noi_margin: Optional[float] = None
    income_per_bedroom_monthly: Optional[float] = None


@dataclass(frozen=True)
class PropertyIncomeProfile:
    """Inputs for NOI estimation."""

    asking_price: float
    cap_rate: float = 0.0
    property_type: PropertyType = PropertyType.MULTIFAMILY
    params: IncomeParams = field(default_factory=IncomeParams)


@dataclass(frozen=True)
class IterationConfig:
    """Convergence knobs for the price solver."""

    max_iterations: int = DEFAULT_SOLVER.max_iterations
    tolerance: float = DEFAULT_SOLVER.tolerance
    adjustment_factor: float = DEFAULT_SOLVER.adjustment_factor


@dataclass(frozen=True)
class COCRTarget:
    """Annual NOI and the cash-on-cash return (decimal) a price must yield."""

    noi: float
    target_cocr: float = DEFAULT_SOLVER.target_cocr
    iteration: IterationConfig = field(default_factory=IterationConfig)


@dataclass(frozen=True)
class SolverResult:
    """Outcome of the price solver, including whether tolerance was met."""

    price: float
    cocr: float  # decimal COCR at the returned price
    iterations: int
    converged: bool

    def raise_for_convergence(self) -> "SolverResult":
        if not self.converged:
            raise NonConvergenceError(
                f"stopped at COCR {self.cocr:.4f} after {self.iterations} iterations"
            )
        return self


@dataclass(frozen=True)
class RefinanceScenario:
    """
    Refinance at the end of the balloon period.

    `refi_ltv_percent` is on a 0-100 scale.
    """

    original_price: float
    dscr_loan_amount: float
    seller_fi_amount: float
    appreciation_rate: float = DEFAULT_FINANCING.appreciation_rate
    balloon_years: float = DEFAULT_FINANCING.balloon_years
    refi_ltv_percent: float = DEFAULT_FINANCING.refi_ltv_percent
    dscr_rate: float = DEFAULT_FINANCING.dscr_rate
    dscr_term_years: float = DEFAULT_FINANCING.dscr_term_years
    seller_fi_rate: float = DEFAULT_FINANCING.seller_fi_rate
    seller_fi_term_years: float = DEFAULT_FINANCING.seller_fi_term_years


@dataclass(frozen=True)
class NetToBuyerCosts:
    """
    Cost shares for the net-to-buyer calculation.

    `additional_cost_percent` applies only to the cash (non-financed)
    portion of the price.
    """

    buyer_cost_percent: float = DEFAULT_BUSINESS.net_to_buyer_percent
    seller_cost_percents: Tuple[float, ...] = DEFAULT_BUSINESS.seller_cost_percents
    additional_cost_percent: float = DEFAULT_BUSINESS.hard_money_rate
    dscr_ltv_percent: float = DEFAULT_FINANCING.dscr_ltv_percent


@dataclass(frozen=True)
class ListingInput:
    """A scraped listing, already parsed into numbers."""

    asking_price: float
    cap_rate: float = 0.0
    property_type: PropertyType = PropertyType.MULTIFAMILY
    bedroom_count: Optional[int] = None
    noi: Optional[float] = None  # use a known NOI instead of estimating one
    seller_fi_percent: float = 0.0
    listing_id: Optional[str] = None


@dataclass(frozen=True)
class DealMetrics:
    """Investment metrics for one listing."""

    listing_id: Optional[str]
    asking_price: float
    noi: float
    cap_rate: float
    cocr_percent: float
    dscr_payment: float
    seller_fi_payment: float
    monthly_cash_flow: float
    target_price: float
    target_price_converged: bool
    discount_to_target: float
    assignment_fee: float
    net_to_buyer: float
    cash_out_after_refi: float
