"""
Engine configuration using Pydantic Settings.

Settings are only read when a caller asks for them; the calculation
functions never consult the environment on their own.
"""

import logging
import os
from functools import lru_cache
from typing import Any, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("DEALCALC_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """
    Engine defaults loaded from environment variables.

    Rates and shares are stored as decimals: a value above 1 is read as a
    percent ("7.5" and "7.5%" both become 0.075).

    `refi_ltv_percent` and `max_estimated_cap_rate` are stored on a 0-100
    scale: a value in (0, 1] is read as a fraction and multiplied by 100,
    anything above 1 is already a percent. So "0.75" and "75" both give
    75, "1" gives 100 and "1.5" gives 1.5.
    """

    # Logging
    log_level: str = "INFO"

    # DSCR loan terms
    dscr_rate: float = 0.075
    dscr_amortization_years: float = 30

    # Seller financing terms
    seller_fi_rate: float = 0.0
    seller_fi_amortization_years: float = 30

    # Capital structure
    default_down_percent: float = 0.30
    default_dscr_ltv_percent: float = 0.70

    # Refinance projection
    balloon_years: float = 7
    appreciation_rate: float = 0.045
    refi_ltv_percent: float = 75.0

    # Price solver convergence
    max_iterations: int = 50
    tolerance: float = 0.001
    adjustment_factor: float = 0.5
    target_cocr: float = 0.15

    # Price solver bounds
    seed_cap_rate: float = 0.08
    min_iteration_price: float = 1000.0
    minimum_solved_price: float = 10000.0
    max_price_multiplier: float = 50.0
    conservative_price_multiplier: float = 20.0

    # NOI estimation by property type
    str_gross_income_multiplier: float = 0.10
    str_noi_margin: float = 0.55
    assisted_income_per_bedroom_monthly: float = 1500.0
    assisted_default_bedroom_count: int = 10
    max_estimated_cap_rate: float = 25.0

    # Fees and transaction costs
    assignment_fee_percent: float = 0.05
    net_to_buyer_percent: float = 0.10
    seller_agent_commission: float = 0.025
    closing_costs_percent: float = 0.0125
    hard_money_rate: float = 0.03

    model_config = SettingsConfigDict(
        env_prefix="DEALCALC_",
        env_file=get_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "dscr_rate",
        "seller_fi_rate",
        "default_down_percent",
        "default_dscr_ltv_percent",
        "appreciation_rate",
        "target_cocr",
        "seed_cap_rate",
        "str_gross_income_multiplier",
        "str_noi_margin",
        "assignment_fee_percent",
        "net_to_buyer_percent",
        "seller_agent_commission",
        "closing_costs_percent",
        "hard_money_rate",
        mode="before",
    )
    @classmethod
    def _to_fraction(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except (TypeError, ValueError) as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if f > 1.0:
            f = f / 100.0
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator("refi_ltv_percent", "max_estimated_cap_rate", mode="before")
    @classmethod
    def _to_percent_scale(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        f = float(v)
        if 0 < f <= 1.0:
            f = f * 100.0
        if f < 0:
            raise ValueError("percent must be non-negative")
        return f

    @field_validator(
        "dscr_amortization_years",
        "seller_fi_amortization_years",
        "balloon_years",
        "max_iterations",
        "max_price_multiplier",
        "conservative_price_multiplier",
    )
    @classmethod
    def _positive(cls, v: Any) -> Any:
        if v <= 0:
            raise ValueError("value must be > 0")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Apply `log_level` to the package logger.

    Handlers are left to the host application.
    """
    settings = settings or get_settings()
    logger = logging.getLogger("dealcalc")
    logger.setLevel(settings.log_level.upper())
    return logger
