"""
Known-Value Tests

Reference figures for the standard deal assumptions: 30% down, a 70% DSCR
loan at 7.5% over 30 years, 0% seller carry, 4.5% appreciation and a
7-year balloon refinanced at 75% LTV.
"""

import pytest

from dealcalc.calculations.amortization import (
    calculate_payment,
    calculate_remaining_balance,
)
from dealcalc.calculations.deal import (
    calculate_appreciated_value,
    calculate_cash_out_after_refi,
)
from dealcalc.calculations.models import (
    BalloonSchedule,
    COCRTarget,
    FinancingStructure,
    RefinanceScenario,
)
from dealcalc.calculations.returns import compute_cocr, solve_price_for_cocr


# =============================================================================
# BENCHMARK DATA
# =============================================================================

PAYMENTS = [
    # (principal, annual_rate, term_years, monthly_payment)
    (300000, 0.02, 30, 1108.8584),
    (280000, 0.075, 30, 1957.8006),
    (50000, 0.12, 5, 1112.2224),
    (950000, 0.075, 25, 7020.4162),
    (200000, 0.15, 2, 9697.3296),
    (100000, 0.50, 10, 4197.9698),
]

BALLOON_BALANCES = [
    # (loan_amount, annual_rate, amortization_years, balloon_years, balance)
    (500000, 0.075, 30, 5, 473087.18),
    (500000, 0.075, 30, 7, 459170.19),
    (500000, 0.075, 30, 8, 451391.30),
    (500000, 0.075, 30, 9, 443008.51),
    (350000, 0.075, 30, 7, 321419.14),
]

BENCHMARKS = {
    "appreciated_value": 680430.92,
    "cash_out_after_refi": 112237.38,
    "cocr_percent": 20.4220,
    "target_price_50k_noi": 483244.79,
}

CURRENCY_TOLERANCE = 0.01


class TestPaymentBenchmarks:
    """Monthly payments against reference values."""

    @pytest.mark.parametrize("principal,rate,years,expected", PAYMENTS)
    def test_payment(self, principal, rate, years, expected):
        """Test payment matches the reference to the cent."""
        assert abs(calculate_payment(principal, rate, years) - expected) < CURRENCY_TOLERANCE


class TestBalloonBenchmarks:
    """Balloon balances against reference values."""

    @pytest.mark.parametrize("amount,rate,amort,balloon,expected", BALLOON_BALANCES)
    def test_balance(self, amount, rate, amort, balloon, expected):
        """Test balloon balance matches the reference to the cent."""
        loan = BalloonSchedule(amount, rate, amort, balloon_years=balloon)
        assert abs(calculate_remaining_balance(loan) - expected) < CURRENCY_TOLERANCE


class TestDealBenchmarks:
    """End-to-end figures for a $500K purchase."""

    def test_appreciated_value(self):
        """Test 7-year appreciated value."""
        value = calculate_appreciated_value(500000)
        assert abs(value - BENCHMARKS["appreciated_value"]) < CURRENCY_TOLERANCE

    def test_cash_out_after_refi(self, refinance_scenario):
        """Test cash-out with $350K DSCR and $100K seller carry."""
        cash_out = calculate_cash_out_after_refi(refinance_scenario)
        assert abs(cash_out - BENCHMARKS["cash_out_after_refi"]) < CURRENCY_TOLERANCE

    def test_cocr(self):
        """Test COCR on $60K NOI."""
        cocr = compute_cocr(FinancingStructure(asking_price=500000), 60000)
        assert abs(cocr - BENCHMARKS["cocr_percent"]) < 0.001

    def test_target_price(self):
        """Test 15% target price on $50K NOI."""
        price = solve_price_for_cocr(COCRTarget(noi=50000))
        assert abs(price - BENCHMARKS["target_price_50k_noi"]) < 1.0


class TestRefinanceIdentity:
    """Refinance cash-out is new loan less both payoffs."""

    def test_identity(self):
        """Test cash-out decomposes into its parts."""
        scenario = RefinanceScenario(
            original_price=750000, dscr_loan_amount=450000, seller_fi_amount=150000
        )
        new_loan = calculate_appreciated_value(750000) * 0.75
        payoff = calculate_remaining_balance(
            BalloonSchedule(450000, 0.075, 30, 7)
        ) + calculate_remaining_balance(BalloonSchedule(150000, 0.0, 30, 7))
        assert calculate_cash_out_after_refi(scenario) == pytest.approx(new_loan - payoff)


class TestReferenceProperties:
    """Reference properties of the engine."""

    def test_zero_rate_payment(self):
        """Test 0% over 30 years."""
        assert abs(calculate_payment(120000, 0, 30) - 333.33) < CURRENCY_TOLERANCE

    def test_two_year_appreciation(self):
        """Test 5% over 2 years."""
        assert calculate_appreciated_value(500000, 0.05, 2) == pytest.approx(551250)

    def test_empty_refinance(self):
        """Test a refinance with nothing to refinance."""
        scenario = RefinanceScenario(
            original_price=0, dscr_loan_amount=0, seller_fi_amount=0
        )
        assert calculate_cash_out_after_refi(scenario) == 0.0
