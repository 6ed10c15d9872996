"""
Cash-on-Cash Return Calculations

Computes COCR for a financing structure and solves the purchase price that
yields a target COCR.

The price solver is a damped multiplicative relaxation, not bisection or
Newton-Raphson: each step scales the price by (1 +/- |error| x factor).
COCR falls monotonically as price rises, so the iteration settles on the
target for ordinary inputs; the iteration cap bounds everything else.
"""

import logging
from typing import Optional

from dealcalc.calculations.amortization import calculate_payment
from dealcalc.calculations.defaults import (
    DEFAULT_FINANCING,
    DEFAULT_SOLVER,
    FinancingDefaults,
    SolverDefaults,
)
from dealcalc.calculations.errors import (
    DegenerateInputError,
    fail_soft,
    require_finite,
    require_non_negative,
)
from dealcalc.calculations.models import COCRTarget, FinancingStructure, SolverResult

logger = logging.getLogger(__name__)


@fail_soft(sentinel=0.0)
def compute_cocr(structure: FinancingStructure, noi: float) -> float:
    """
    Calculate cash-on-cash return for a financing structure.

    Seller financing is senior, so the DSCR loan is sized at
    max(0, dscr_ltv_percent - seller_fi_percent) of the price.

    Args:
        structure: Price, down payment and loan terms (shares as decimals)
        noi: Annual net operating income

    Returns:
        Annual COCR on a percent scale (e.g., 20.42 for 20.42%), or 0 when
        no cash is invested
    """
    asking_price = structure.asking_price
    require_finite(noi=noi)
    require_non_negative(
        asking_price=asking_price,
        down_percent=structure.down_percent,
        dscr_ltv_percent=structure.dscr_ltv_percent,
        seller_fi_percent=structure.seller_fi_percent,
    )

    cash_invested = asking_price * structure.down_percent
    if asking_price == 0 or cash_invested == 0:
        raise DegenerateInputError("no cash invested")

    dscr_loan_amount = asking_price * structure.effective_dscr_percent
    seller_fi_amount = asking_price * structure.seller_fi_percent

    dscr_annual_payment = (
        calculate_payment.strict(
            dscr_loan_amount, structure.dscr_rate, structure.dscr_term_years
        )
        * 12
    )
    seller_fi_annual_payment = (
        calculate_payment.strict(
            seller_fi_amount, structure.seller_fi_rate, structure.seller_fi_term_years
        )
        * 12
    )

    annual_cash_flow = noi - dscr_annual_payment - seller_fi_annual_payment

    return (annual_cash_flow / cash_invested) * 100


@fail_soft(sentinel=0.0)
def calculate_cocr_at_down_percent(
    asking_price: float,
    noi: float,
    down_percent: float,
    financing: Optional[FinancingDefaults] = None,
) -> float:
    """
    COCR (percent scale) when a DSCR loan covers everything but the down
    payment.

    Args:
        asking_price: Purchase price
        noi: Annual NOI
        down_percent: Down payment as decimal (0.30 for 30%)
        financing: DSCR loan terms
    """
    if financing is None:
        financing = DEFAULT_FINANCING
    require_non_negative(down_percent=down_percent)
    structure = FinancingStructure(
        asking_price=asking_price,
        down_percent=down_percent,
        dscr_ltv_percent=max(0.0, 1 - down_percent),
        dscr_rate=financing.dscr_rate,
        dscr_term_years=financing.dscr_term_years,
        seller_fi_percent=0.0,
    )
    return compute_cocr.strict(structure, noi)


def _dscr_only_cocr(price: float, noi: float, financing: FinancingDefaults) -> float:
    """Decimal COCR at `price` for the solver's DSCR-only structure."""
    cash_invested = price * financing.down_percent
    if cash_invested == 0:
        raise DegenerateInputError("no cash invested")

    dscr_loan_amount = price * financing.dscr_ltv_percent
    dscr_annual_payment = (
        calculate_payment.strict(
            dscr_loan_amount, financing.dscr_rate, financing.dscr_term_years
        )
        * 12
    )
    annual_cash_flow = noi - dscr_annual_payment

    return annual_cash_flow / cash_invested


def _solve(
    target: COCRTarget,
    financing: Optional[FinancingDefaults],
    solver: Optional[SolverDefaults],
) -> SolverResult:
    if financing is None:
        financing = DEFAULT_FINANCING
    if solver is None:
        solver = DEFAULT_SOLVER
    noi = target.noi
    target_cocr = target.target_cocr
    iteration = target.iteration

    require_finite(noi=noi, target_cocr=target_cocr)
    if noi <= 0:
        raise DegenerateInputError("NOI must be positive to solve a price")
    if iteration.max_iterations < 0 or iteration.tolerance < 0:
        raise DegenerateInputError("iteration budget and tolerance must be >= 0")

    price = noi / solver.seed_cap_rate
    ceiling = noi * solver.max_price_multiplier

    iterations = 0
    while iterations < iteration.max_iterations:
        current_cocr = _dscr_only_cocr(price, noi, financing)

        if abs(current_cocr - target_cocr) < iteration.tolerance:
            break

        error = current_cocr - target_cocr
        adjustment = error * iteration.adjustment_factor

        # COCR too high means the price is too low
        if error > 0:
            price *= 1 + abs(adjustment)
        else:
            price *= 1 - abs(adjustment)

        # Snap below the ceiling to avoid oscillating against it
        if price > ceiling:
            price = noi * solver.conservative_price_multiplier
        price = max(price, solver.min_iteration_price)

        iterations += 1

    price = max(price, solver.minimum_solved_price)

    final_cocr = _dscr_only_cocr(price, noi, financing)
    converged = abs(final_cocr - target_cocr) < iteration.tolerance
    if not converged:
        logger.debug(
            "COCR price solver stopped short of target %.4f (at %.4f, price %.2f)",
            target_cocr,
            final_cocr,
            price,
        )

    return SolverResult(
        price=price,
        cocr=final_cocr,
        iterations=iterations,
        converged=converged,
    )


@fail_soft(sentinel=0.0)
def solve_price_for_cocr(
    target: COCRTarget,
    financing: Optional[FinancingDefaults] = None,
    solver: Optional[SolverDefaults] = None,
) -> float:
    """
    Solve the purchase price that yields a target cash-on-cash return.

    Uses a DSCR-only structure (down payment plus DSCR loan, no seller
    financing). Starts from an 8% cap-rate seed and iterates until the COCR
    is within tolerance or the iteration budget is spent; the best estimate
    is returned either way. Use solve_price_for_cocr_detailed to find out
    whether the tolerance was met.

    Args:
        target: Annual NOI, target COCR as decimal (0.15 for 15%) and
            iteration knobs
        financing: Down payment share and DSCR loan terms
        solver: Seed and price bounds

    Returns:
        Price, never below `solver.minimum_solved_price`; 0 when NOI is not
        positive
    """
    return _solve(target, financing, solver).price


@fail_soft(sentinel=None)
def solve_price_for_cocr_detailed(
    target: COCRTarget,
    financing: Optional[FinancingDefaults] = None,
    solver: Optional[SolverDefaults] = None,
):
    """
    Same iteration as solve_price_for_cocr, reporting the COCR reached,
    the number of adjustment steps and whether tolerance was met.

    Returns:
        SolverResult, or None for degenerate input
    """
    return _solve(target, financing, solver)


@fail_soft(sentinel=0.0)
def calculate_cash_flow_yield(monthly_cash_flow: float, down_payment: float) -> float:
    """
    Annualized cash flow as a share of the down payment (decimal).

    Returns 0 for a zero down payment.
    """
    require_finite(monthly_cash_flow=monthly_cash_flow, down_payment=down_payment)
    if down_payment == 0:
        return 0.0
    return (monthly_cash_flow * 12) / down_payment
