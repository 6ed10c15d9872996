"""
Deal Economics

Assignment fees, net proceeds, appreciation and refinance cash-out,
composed from the amortization math.
"""

from typing import Optional

from dealcalc.calculations.amortization import calculate_remaining_balance
from dealcalc.calculations.defaults import DEFAULT_BUSINESS, DEFAULT_FINANCING
from dealcalc.calculations.errors import fail_soft, require_finite, require_non_negative
from dealcalc.calculations.models import (
    BalloonSchedule,
    NetToBuyerCosts,
    RefinanceScenario,
)


@fail_soft(sentinel=0.0)
def calculate_assignment_fee(
    asking_price: float,
    fee_percent: float = DEFAULT_BUSINESS.assignment_fee_percent * 100,
) -> float:
    """
    Calculate the wholesaler's assignment fee.

    Args:
        asking_price: Contract price
        fee_percent: Fee on a percent scale (e.g., 3 for 3%)
    """
    require_non_negative(asking_price=asking_price, fee_percent=fee_percent)
    return asking_price * fee_percent / 100


@fail_soft(sentinel=0.0)
def calculate_net_to_buyer(
    asking_price: float, costs: Optional[NetToBuyerCosts] = None
) -> float:
    """
    Calculate the net amount to the buyer.

    net = P x buyer - P x sum(seller) - additional x (P - P x dscr_ltv)

    The additional cost is charged only on the cash portion of the price,
    the part not covered by the DSCR loan.

    Args:
        asking_price: Purchase price
        costs: Cost shares as decimals (defaults from business assumptions)
    """
    if costs is None:
        costs = NetToBuyerCosts()
    require_non_negative(
        asking_price=asking_price,
        buyer_cost_percent=costs.buyer_cost_percent,
        additional_cost_percent=costs.additional_cost_percent,
        dscr_ltv_percent=costs.dscr_ltv_percent,
    )
    seller_costs = 0.0
    for seller_cost_percent in costs.seller_cost_percents:
        require_non_negative(seller_cost_percent=seller_cost_percent)
        seller_costs += asking_price * seller_cost_percent

    cash_portion = asking_price - asking_price * costs.dscr_ltv_percent

    return (
        asking_price * costs.buyer_cost_percent
        - seller_costs
        - costs.additional_cost_percent * cash_portion
    )


@fail_soft(sentinel=0.0, echo_arg="current_value")
def calculate_appreciated_value(
    current_value: float,
    annual_rate: float = DEFAULT_FINANCING.appreciation_rate,
    years: float = DEFAULT_FINANCING.balloon_years,
) -> float:
    """
    Project a value forward with annual compounding.

    Returns `current_value` unchanged for a non-positive value, a negative
    rate or a negative number of years.
    """
    require_finite(current_value=current_value, annual_rate=annual_rate, years=years)
    if current_value <= 0 or annual_rate < 0 or years < 0:
        return current_value
    return current_value * (1 + annual_rate) ** years


@fail_soft(sentinel=0.0)
def calculate_cash_out_after_refi(scenario: RefinanceScenario) -> float:
    """
    Cash released by refinancing at the end of the balloon period.

    The appreciated value is refinanced at `refi_ltv_percent` (0-100
    scale) and both existing loans are paid off at their remaining
    balances. Negative results mean cash must be brought to the refinance.
    """
    require_finite(refi_ltv_percent=scenario.refi_ltv_percent)

    appreciated_value = calculate_appreciated_value(
        scenario.original_price, scenario.appreciation_rate, scenario.balloon_years
    )
    remaining_dscr = calculate_remaining_balance(
        BalloonSchedule(
            loan_amount=scenario.dscr_loan_amount,
            annual_rate=scenario.dscr_rate,
            amortization_years=scenario.dscr_term_years,
            balloon_years=scenario.balloon_years,
        )
    )
    remaining_seller_fi = calculate_remaining_balance(
        BalloonSchedule(
            loan_amount=scenario.seller_fi_amount,
            annual_rate=scenario.seller_fi_rate,
            amortization_years=scenario.seller_fi_term_years,
            balloon_years=scenario.balloon_years,
        )
    )

    new_loan_amount = appreciated_value * scenario.refi_ltv_percent / 100

    return new_loan_amount - (remaining_dscr + remaining_seller_fi)


@fail_soft(sentinel=0.0)
def calculate_cash_flow(
    period_noi: float, dscr_payment: float, other_debt_payment: float = 0.0
) -> float:
    """Cash flow for a period; all three inputs must share the same period."""
    require_finite(
        period_noi=period_noi,
        dscr_payment=dscr_payment,
        other_debt_payment=other_debt_payment,
    )
    return period_noi - dscr_payment - other_debt_payment


@fail_soft(sentinel=0.0)
def calculate_discount_from_price(asking_price: float, offer_price: float) -> float:
    """Discount of an offer from the asking price, as a decimal."""
    require_finite(asking_price=asking_price, offer_price=offer_price)
    if asking_price <= 0:
        return 0.0
    return (asking_price - offer_price) / asking_price


@fail_soft(sentinel=0.0)
def calculate_price_from_discount(asking_price: float, discount: float) -> float:
    """Offer price for a decimal discount off the asking price."""
    require_finite(asking_price=asking_price, discount=discount)
    if asking_price <= 0:
        return 0.0
    return asking_price * (1 - discount)
