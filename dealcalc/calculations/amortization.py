"""
Loan Amortization Calculations

Implements the fixed-rate payment (PMT) and the closed-form remaining
balance of a balloon loan, plus a month-by-month schedule up to the
balloon date.
"""

import math
from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

from dealcalc.calculations.defaults import DEFAULT_FINANCING, FinancingDefaults
from dealcalc.calculations.errors import (
    DegenerateInputError,
    fail_soft,
    require_finite,
    require_non_negative,
)
from dealcalc.calculations.models import BalloonSchedule, LoanTerms


@fail_soft(sentinel=0.0, allow_infinite=True)
def calculate_payment(
    principal: float, annual_rate: float, term_years: float
) -> float:
    """
    Calculate monthly loan payment.

    Matches Excel's PMT() function (sign flipped to positive).

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.075 for 7.5%)
        term_years: Amortization period in years (fractional years allowed)

    Returns:
        Monthly payment amount. A zero-length term with a positive principal
        returns +inf; callers are expected to guard against it.
    """
    require_non_negative(
        principal=principal, annual_rate=annual_rate, term_years=term_years
    )
    if principal == 0:
        return 0.0
    if term_years == 0:
        return math.inf

    num_payments = term_years * 12
    monthly_rate = annual_rate / 12
    growth = (1 + monthly_rate) ** num_payments

    # Rates too small to compound in float amortize straight-line
    if annual_rate == 0 or growth == 1:
        return principal / num_payments

    return principal * (monthly_rate * growth) / (growth - 1)


def calculate_loan_payment(loan: LoanTerms) -> float:
    """Monthly payment for a LoanTerms record (see calculate_payment)."""
    return calculate_payment(loan.principal, loan.annual_rate, loan.term_years)


@fail_soft(sentinel=0.0)
def calculate_remaining_balance(loan: BalloonSchedule) -> float:
    """
    Calculate the balance still owed when the balloon comes due.

    Uses the closed form
        L * ((1+r)^N - (1+r)^P) / ((1+r)^N - 1)
    with r the monthly rate, N the total number of payments and P the
    payments made before the balloon.

    Invalid loans (non-positive amount, amortization or balloon period, or a
    negative rate) have no balance and return 0.
    """
    principal = loan.loan_amount
    annual_rate = loan.annual_rate
    require_finite(
        loan_amount=principal,
        annual_rate=annual_rate,
        amortization_years=loan.amortization_years,
        balloon_years=loan.balloon_years,
    )
    if (
        principal <= 0
        or annual_rate < 0
        or loan.amortization_years <= 0
        or loan.balloon_years <= 0
    ):
        raise DegenerateInputError(f"invalid balloon loan: {loan!r}")

    if loan.balloon_years >= loan.amortization_years:
        return 0.0

    total_payments = loan.amortization_years * 12
    payments_made = loan.balloon_years * 12

    monthly_rate = annual_rate / 12
    total_growth = (1 + monthly_rate) ** total_payments
    paid_growth = (1 + monthly_rate) ** payments_made

    if annual_rate == 0 or total_growth == 1:
        return principal * (total_payments - payments_made) / total_payments

    balance = principal * (total_growth - paid_growth) / (total_growth - 1)

    return max(0.0, balance)


@fail_soft(sentinel=0.0)
def calculate_loan_constant(annual_rate: float, term_years: float) -> float:
    """Calculate loan constant (annual debt service / loan amount)."""
    return calculate_payment.strict(1.0, annual_rate, term_years) * 12


@fail_soft(sentinel=0.0)
def calculate_dscr_payment(
    asking_price: float,
    dscr_percent: Optional[float] = None,
    financing: Optional[FinancingDefaults] = None,
) -> float:
    """
    Monthly payment on the DSCR loan for a share of the price.

    Args:
        asking_price: Purchase price
        dscr_percent: DSCR loan share as decimal (defaults to financing LTV)
        financing: Loan terms to use
    """
    if financing is None:
        financing = DEFAULT_FINANCING
    if dscr_percent is None:
        dscr_percent = financing.dscr_ltv_percent
    require_non_negative(asking_price=asking_price, dscr_percent=dscr_percent)
    return calculate_payment.strict(
        asking_price * dscr_percent, financing.dscr_rate, financing.dscr_term_years
    )


@fail_soft(sentinel=0.0)
def calculate_seller_fi_payment(
    asking_price: float,
    seller_fi_percent: float,
    financing: Optional[FinancingDefaults] = None,
) -> float:
    """Monthly payment on the seller-financed share of the price."""
    if financing is None:
        financing = DEFAULT_FINANCING
    require_non_negative(
        asking_price=asking_price, seller_fi_percent=seller_fi_percent
    )
    return calculate_payment.strict(
        asking_price * seller_fi_percent,
        financing.seller_fi_rate,
        financing.seller_fi_term_years,
    )


def generate_balloon_schedule(
    loan: BalloonSchedule,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a monthly amortization schedule through the balloon date.

    The last row carries the balloon payoff in `balloon_payment`. Loans
    that calculate_remaining_balance treats as invalid produce an empty
    schedule.

    Args:
        loan: Loan amount, rate, amortization and balloon periods
        start_date: Date of first payment

    Returns:
        List of amortization rows
    """
    try:
        require_finite(
            loan_amount=loan.loan_amount,
            annual_rate=loan.annual_rate,
            amortization_years=loan.amortization_years,
            balloon_years=loan.balloon_years,
        )
    except DegenerateInputError:
        return []
    if (
        loan.loan_amount <= 0
        or loan.annual_rate < 0
        or loan.amortization_years <= 0
        or loan.balloon_years <= 0
    ):
        return []

    schedule = []
    balance = loan.loan_amount
    monthly_rate = loan.annual_rate / 12
    payment = calculate_payment(
        loan.loan_amount, loan.annual_rate, loan.amortization_years
    )
    total_months = int(round(min(loan.balloon_years, loan.amortization_years) * 12))

    if start_date is None:
        start_date = date.today()

    for period in range(1, total_months + 1):
        period_date = start_date + relativedelta(months=period - 1)

        interest = balance * monthly_rate
        principal_pmt = min(payment - interest, balance)
        ending_balance = max(0.0, balance - principal_pmt)

        # Remaining balance is due with the final scheduled payment
        balloon_payment = ending_balance if period == total_months else 0.0

        schedule.append(
            {
                "period": period,
                "date": period_date.isoformat(),
                "beginning_balance": round(balance, 2),
                "payment": round(principal_pmt + interest, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(ending_balance, 2),
                "balloon_payment": round(balloon_payment, 2),
            }
        )

        balance = ending_balance

        if balance == 0:
            break

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over the scheduled periods."""
    return sum(row["interest"] for row in schedule)
