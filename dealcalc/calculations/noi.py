"""
NOI Estimation

Estimates annual Net Operating Income from listing data, dispatching on
property category:

- Multifamily: asking price x cap rate
- Short-term rental: asking price x gross income multiplier x NOI margin
- Assisted living: bedrooms x monthly income per bedroom x 12

Unknown categories use the multifamily formula.
"""

from typing import Optional

from dealcalc.calculations.defaults import DEFAULT_PROPERTY_TYPES, PropertyTypeDefaults
from dealcalc.calculations.errors import fail_soft, require_finite, require_non_negative
from dealcalc.calculations.models import PropertyIncomeProfile, PropertyType


def _pick(override: Optional[float], default: float) -> float:
    return default if override is None else override


def _multifamily_noi(profile: PropertyIncomeProfile) -> float:
    require_finite(asking_price=profile.asking_price, cap_rate=profile.cap_rate)
    return profile.asking_price * profile.cap_rate


def _short_term_rental_noi(
    profile: PropertyIncomeProfile, defaults: PropertyTypeDefaults
) -> float:
    gross_multiplier = _pick(
        profile.params.gross_income_multiplier, defaults.str_gross_income_multiplier
    )
    noi_margin = _pick(profile.params.noi_margin, defaults.str_noi_margin)
    require_non_negative(gross_income_multiplier=gross_multiplier, noi_margin=noi_margin)
    require_finite(asking_price=profile.asking_price)

    gross_income = profile.asking_price * gross_multiplier
    return gross_income * noi_margin


def _assisted_living_noi(
    profile: PropertyIncomeProfile, defaults: PropertyTypeDefaults
) -> float:
    # Income is driven by beds, not by price or cap rate
    bedrooms = _pick(profile.params.bedroom_count, defaults.assisted_default_bedroom_count)
    income_per_bedroom = _pick(
        profile.params.income_per_bedroom_monthly,
        defaults.assisted_income_per_bedroom_monthly,
    )
    require_non_negative(bedroom_count=bedrooms, income_per_bedroom=income_per_bedroom)
    return bedrooms * income_per_bedroom * 12


@fail_soft(sentinel=0.0)
def estimate_noi(
    profile: PropertyIncomeProfile,
    defaults: Optional[PropertyTypeDefaults] = None,
) -> float:
    """
    Estimate annual NOI for a property.

    Args:
        profile: Asking price, cap rate (decimal), property type and any
            per-call income overrides
        defaults: Property-type income assumptions

    Returns:
        Annual NOI, or 0 for unusable inputs
    """
    if defaults is None:
        defaults = DEFAULT_PROPERTY_TYPES
    property_type = PropertyType.parse(profile.property_type)

    if property_type is PropertyType.SHORT_TERM_RENTAL:
        return _short_term_rental_noi(profile, defaults)
    if property_type is PropertyType.ASSISTED_LIVING:
        return _assisted_living_noi(profile, defaults)
    return _multifamily_noi(profile)


@fail_soft(sentinel=0.0)
def calculate_cap_rate(
    noi: float,
    price: float,
    defaults: Optional[PropertyTypeDefaults] = None,
) -> float:
    """
    Calculate cap rate (NOI / price) as a decimal.

    Capped at `defaults.max_estimated_cap_rate` percent so that listings
    with a typo'd price do not report absurd yields.
    """
    if defaults is None:
        defaults = DEFAULT_PROPERTY_TYPES
    require_finite(noi=noi, price=price)
    if price <= 0:
        return 0.0
    cap_rate = noi / price
    return min(cap_rate, defaults.max_estimated_cap_rate / 100)
