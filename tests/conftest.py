"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dealcalc.calculations.defaults import EngineConfig
from dealcalc.calculations.models import FinancingStructure, RefinanceScenario


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def engine_config():
    """Canonical engine defaults."""
    return EngineConfig()


@pytest.fixture
def default_structure():
    """$500K purchase, 30% down, 70% DSCR at 7.5%/30yr, no seller financing."""
    return FinancingStructure(asking_price=500000)


@pytest.fixture
def refinance_scenario():
    """$500K purchase with a 70% DSCR loan and 20% 0% seller carry."""
    return RefinanceScenario(
        original_price=500000,
        dscr_loan_amount=350000,
        seller_fi_amount=100000,
    )
