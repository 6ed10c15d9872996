"""
Display Formatters

Render engine outputs for read-only display in dashboards, tooltips and
comparison pages. Nothing here feeds back into the calculations.

- format_currency / format_price_value: compact K/M notation ("$2.5M")
- format_percentage: percent-scale values ("7.5%"), truncated to 2 places
- format_input_display: en-US display of a stored field value
- parse_numeric_input / extract_numeric_value: back from display text
"""

import math
import re
from typing import Any

_LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_NON_NUMERIC = re.compile(r"[^0-9.\-]")

_SUFFIXES = {
    "percent": "%",
    "years": " yrs.",
    "months": " mos.",
}


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _leading_float(text: str) -> float:
    """Parse the leading number in `text`, 0 when there is none."""
    match = _LEADING_NUMBER.match(text)
    if not match:
        return 0.0
    try:
        value = float(match.group(1))
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def _strip_trailing_zeros(text: str) -> str:
    if "." not in text:
        return text
    return text.rstrip("0").rstrip(".")


def _format_number(num: float, min_fraction: int, max_fraction: int) -> str:
    """Comma-grouped number with between min and max fraction digits."""
    text = f"{abs(num):,.{max_fraction}f}"
    if max_fraction > 0:
        whole, fraction = text.split(".")
        fraction = fraction.rstrip("0").ljust(min_fraction, "0")
        text = f"{whole}.{fraction}" if fraction else whole
    return f"-{text}" if num < 0 else text


def format_currency(amount: Any, is_monthly: bool = False) -> str:
    """
    Format currency with K/M notation for compact display.

    Args:
        amount: The amount to format
        is_monthly: Show the full amount with commas (monthly payments)

    Returns:
        Formatted string (e.g., "$2.5M", "$125K", "$1,234"), or "N/A"
    """
    if not _is_number(amount):
        return "N/A"

    abs_amount = abs(amount)
    prefix = "-$" if amount < 0 else "$"

    if is_monthly:
        return f"{prefix}{abs_amount:,.0f}"
    if abs_amount >= 1_000_000:
        return f"{prefix}{_strip_trailing_zeros(f'{abs_amount / 1_000_000:.3f}')}M"
    if abs_amount >= 1000:
        return f"{prefix}{_strip_trailing_zeros(f'{abs_amount / 1000:.3f}')}K"
    return f"{prefix}{abs_amount:,.0f}"


def format_price_value(amount: Any) -> str:
    """
    Format a price with fixed precision: one decimal for millions, none for
    thousands (e.g., "$2.5M", "$125K").
    """
    if not _is_number(amount):
        return "N/A"

    abs_amount = abs(amount)
    prefix = "-$" if amount < 0 else "$"

    if abs_amount >= 1_000_000:
        return f"{prefix}{abs_amount / 1_000_000:.1f}M"
    if abs_amount >= 1000:
        return f"{prefix}{abs_amount / 1000:.0f}K"
    return f"{prefix}{abs_amount:,.0f}"


def format_percentage(percentage: Any) -> str:
    """
    Format a percent-scale value (7.5 for 7.5%).

    Decimals are truncated, not rounded, to two places and trailing zeros
    are dropped: 7.5 -> "7.5%", 12.349 -> "12.34%", 10.0 -> "10%".
    """
    if not _is_number(percentage):
        return "N/A"

    value = float(percentage)
    if value.is_integer() and abs(value) < 1e21:
        text = str(int(value))
    else:
        text = repr(value)
    if "e" in text:
        text = f"{value:.12f}"

    whole, _, fraction = text.partition(".")
    fraction = fraction[:2].rstrip("0")
    if fraction:
        return f"{whole}.{fraction}%"
    return f"{whole}%"


def safe_percentage(value: Any, fallback: float = 100.0) -> float:
    """Convert a decimal to percent scale, or return `fallback` if unusable."""
    if not _is_number(value):
        return fallback
    return round(value * 100, 10)


def format_input_display(value: Any, kind: str) -> Any:
    """
    Format a stored field value for display.

    Args:
        value: Number or numeric string
        kind: "currency", "percent", "years", "months" or "number"; any
            other kind returns `value` untouched

    Returns:
        Display string such as "$1,250", "7.5%", "30 yrs.", "12 mos."
    """
    num = float(value) if _is_number(value) else _leading_float(str(value))
    has_decimals = num % 1 != 0

    if kind == "currency":
        text = _format_number(num, 2 if has_decimals else 0, 2)
        return f"-${text[1:]}" if text.startswith("-") else f"${text}"

    if kind == "percent":
        if has_decimals and abs(num) >= 0.1:
            min_fraction = 1
        elif has_decimals:
            min_fraction = 3
        else:
            min_fraction = 0
        max_fraction = 3 if abs(num) < 1 else 2
        return _format_number(num, min_fraction, max_fraction) + _SUFFIXES[kind]

    if kind == "years":
        return _format_number(num, 1 if has_decimals else 0, 1) + _SUFFIXES[kind]

    if kind == "months":
        return _format_number(num, 0, 0) + _SUFFIXES[kind]

    if kind == "number":
        return _format_number(num, 2 if has_decimals else 0, 2)

    return value


def parse_numeric_input(value: Any) -> float:
    """Strip everything but digits, '.' and '-' and parse; 0 when empty."""
    if value is None:
        return 0.0
    return _leading_float(_NON_NUMERIC.sub("", str(value)))


def extract_numeric_value(formatted_value: Any, kind: str) -> float:
    """Reverse format_input_display for the given kind."""
    if not formatted_value:
        return 0.0

    cleaned = str(formatted_value)
    if kind == "currency":
        cleaned = re.sub(r"^\$\s*", "", cleaned).strip()
    elif kind == "percent":
        cleaned = re.sub(r"\s*%$", "", cleaned).strip()
    elif kind == "years":
        cleaned = re.sub(r"\s*yrs\.$", "", cleaned).strip()
    elif kind == "months":
        cleaned = re.sub(r"\s*mos\.$", "", cleaned).strip()

    return _leading_float(cleaned.replace(",", ""))
