"""
Financial Calculation Engine

Core calculation modules for real estate investment analysis.
All calculations are pure functions that return a defined sentinel
instead of raising on degenerate input.
"""

from dealcalc.calculations import amortization, noi, returns, deal, analysis

__all__ = ["amortization", "noi", "returns", "deal", "analysis"]
