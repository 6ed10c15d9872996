"""
Listing Analysis

Runs the full set of investment metrics for scraped listings. Batch
evaluation isolates failures per listing so one malformed record cannot
abort the rest.
"""

import logging
from typing import Iterable, List, Optional

from dealcalc.calculations.amortization import (
    calculate_dscr_payment,
    calculate_seller_fi_payment,
)
from dealcalc.calculations.deal import (
    calculate_assignment_fee,
    calculate_cash_flow,
    calculate_cash_out_after_refi,
    calculate_discount_from_price,
    calculate_net_to_buyer,
)
from dealcalc.calculations.defaults import DEFAULT_CONFIG, EngineConfig
from dealcalc.calculations.models import (
    COCRTarget,
    DealMetrics,
    FinancingStructure,
    IncomeParams,
    IterationConfig,
    ListingInput,
    NetToBuyerCosts,
    PropertyIncomeProfile,
    RefinanceScenario,
)
from dealcalc.calculations.noi import calculate_cap_rate, estimate_noi
from dealcalc.calculations.returns import compute_cocr, solve_price_for_cocr_detailed

logger = logging.getLogger(__name__)


def analyze_listing(
    listing: ListingInput, config: Optional[EngineConfig] = None
) -> DealMetrics:
    """
    Calculate investment metrics for a single listing.

    NOI comes from `listing.noi` when given, otherwise it is estimated from
    the property type. Debt payments and cash flow are monthly; COCR is on a
    percent scale; the target price is solved for `config.solver.target_cocr`.
    """
    if config is None:
        config = DEFAULT_CONFIG
    financing = config.financing
    solver = config.solver
    business = config.business
    asking_price = listing.asking_price

    if listing.noi is not None:
        noi = listing.noi
    else:
        noi = estimate_noi(
            PropertyIncomeProfile(
                asking_price=asking_price,
                cap_rate=listing.cap_rate,
                property_type=listing.property_type,
                params=IncomeParams(bedroom_count=listing.bedroom_count),
            ),
            config.property_types,
        )

    structure = FinancingStructure(
        asking_price=asking_price,
        down_percent=financing.down_percent,
        dscr_ltv_percent=financing.dscr_ltv_percent,
        dscr_rate=financing.dscr_rate,
        dscr_term_years=financing.dscr_term_years,
        seller_fi_percent=listing.seller_fi_percent,
        seller_fi_rate=financing.seller_fi_rate,
        seller_fi_term_years=financing.seller_fi_term_years,
    )
    effective_dscr_percent = structure.effective_dscr_percent

    dscr_payment = calculate_dscr_payment(asking_price, effective_dscr_percent, financing)
    seller_fi_payment = calculate_seller_fi_payment(
        asking_price, listing.seller_fi_percent, financing
    )

    solved = solve_price_for_cocr_detailed(
        COCRTarget(
            noi=noi,
            target_cocr=solver.target_cocr,
            iteration=IterationConfig(
                max_iterations=solver.max_iterations,
                tolerance=solver.tolerance,
                adjustment_factor=solver.adjustment_factor,
            ),
        ),
        financing,
        solver,
    )
    target_price = solved.price if solved is not None else 0.0

    refinance = RefinanceScenario(
        original_price=asking_price,
        dscr_loan_amount=asking_price * effective_dscr_percent,
        seller_fi_amount=asking_price * listing.seller_fi_percent,
        appreciation_rate=financing.appreciation_rate,
        balloon_years=financing.balloon_years,
        refi_ltv_percent=financing.refi_ltv_percent,
        dscr_rate=financing.dscr_rate,
        dscr_term_years=financing.dscr_term_years,
        seller_fi_rate=financing.seller_fi_rate,
        seller_fi_term_years=financing.seller_fi_term_years,
    )

    return DealMetrics(
        listing_id=listing.listing_id,
        asking_price=asking_price,
        noi=noi,
        cap_rate=calculate_cap_rate(noi, asking_price, config.property_types),
        cocr_percent=compute_cocr(structure, noi),
        dscr_payment=dscr_payment,
        seller_fi_payment=seller_fi_payment,
        monthly_cash_flow=calculate_cash_flow(noi / 12, dscr_payment, seller_fi_payment),
        target_price=target_price,
        target_price_converged=solved.converged if solved is not None else False,
        discount_to_target=calculate_discount_from_price(asking_price, target_price),
        assignment_fee=calculate_assignment_fee(
            asking_price, business.assignment_fee_percent * 100
        ),
        net_to_buyer=calculate_net_to_buyer(
            asking_price,
            NetToBuyerCosts(
                buyer_cost_percent=business.net_to_buyer_percent,
                seller_cost_percents=business.seller_cost_percents,
                additional_cost_percent=business.hard_money_rate,
                dscr_ltv_percent=financing.dscr_ltv_percent,
            ),
        ),
        cash_out_after_refi=calculate_cash_out_after_refi(refinance),
    )


def analyze_listings(
    listings: Iterable[ListingInput], config: Optional[EngineConfig] = None
) -> List[Optional[DealMetrics]]:
    """
    Analyze a batch of listings.

    Returns one entry per listing, in order; a listing that could not be
    analyzed yields None.
    """
    results = []
    for index, listing in enumerate(listings):
        try:
            results.append(analyze_listing(listing, config))
        except (ArithmeticError, AttributeError, TypeError, ValueError) as e:
            logger.warning(
                "Skipping listing %s (%s): %s",
                index,
                getattr(listing, "listing_id", None),
                e,
            )
            results.append(None)
    return results
