"""
Real estate deal calculations: loan math, NOI estimation, cash-on-cash
return solving and deal economics for listing dashboards.
"""

from dealcalc.calculations.amortization import (
    calculate_dscr_payment,
    calculate_loan_constant,
    calculate_loan_payment,
    calculate_payment,
    calculate_remaining_balance,
    calculate_seller_fi_payment,
    generate_balloon_schedule,
)
from dealcalc.calculations.analysis import analyze_listing, analyze_listings
from dealcalc.calculations.deal import (
    calculate_appreciated_value,
    calculate_assignment_fee,
    calculate_cash_flow,
    calculate_cash_out_after_refi,
    calculate_discount_from_price,
    calculate_net_to_buyer,
    calculate_price_from_discount,
)
from dealcalc.calculations.defaults import EngineConfig
from dealcalc.calculations.models import (
    BalloonSchedule,
    COCRTarget,
    DealMetrics,
    FinancingStructure,
    IncomeParams,
    IterationConfig,
    ListingInput,
    LoanTerms,
    NetToBuyerCosts,
    PropertyIncomeProfile,
    PropertyType,
    RefinanceScenario,
    SolverResult,
)
from dealcalc.calculations.noi import calculate_cap_rate, estimate_noi
from dealcalc.calculations.returns import (
    calculate_cash_flow_yield,
    calculate_cocr_at_down_percent,
    compute_cocr,
    solve_price_for_cocr,
    solve_price_for_cocr_detailed,
)

from dealcalc.config import Settings, configure_logging, get_settings

__version__ = "0.1.0"
