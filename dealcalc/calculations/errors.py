"""
Calculation Errors

Every public calculation returns a defined sentinel instead of raising.
Internally the math raises `DegenerateInputError`; the `fail_soft`
decorator maps it (and any arithmetic error) to the function's sentinel.

The strict form of a wrapped function stays available as `func.strict`.
"""

import functools
import inspect
import logging
import math
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class CalculationError(ValueError):
    """Base class for calculation engine errors."""


class DegenerateInputError(CalculationError):
    """Input the formulas cannot use: non-finite, or negative where disallowed."""


class NonConvergenceError(CalculationError):
    """Iterative solver exhausted its budget without meeting tolerance."""


def require_finite(**values: Any) -> None:
    """Raise DegenerateInputError unless every value is a finite number."""
    for name, value in values.items():
        if value is None or isinstance(value, bool):
            raise DegenerateInputError(f"{name} is not a number: {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError) as err:
            raise DegenerateInputError(f"{name} is not a number: {value!r}") from err
        if not math.isfinite(number):
            raise DegenerateInputError(f"{name} must be finite, got {value!r}")


def require_non_negative(**values: float) -> None:
    """Raise DegenerateInputError if any value is negative."""
    require_finite(**values)
    for name, value in values.items():
        if value < 0:
            raise DegenerateInputError(f"{name} must be non-negative, got {value!r}")


def fail_soft(
    sentinel: float = 0.0,
    echo_arg: Optional[str] = None,
    allow_infinite: bool = False,
) -> Callable:
    """
    Map calculation failures to a sentinel return value.

    Args:
        sentinel: Value returned when the calculation fails
        echo_arg: If set, return the argument with this name unchanged
            instead of `sentinel` (identity-like functions)
        allow_infinite: Pass +/-inf results through rather than treating
            them as failures

    Returns:
        Decorator. The wrapped function exposes the undecorated one as
        `.strict`.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        def fallback(args: tuple, kwargs: dict, reason: str) -> Any:
            logger.debug("%s fell back to sentinel: %s", func.__name__, reason)
            if echo_arg is not None:
                try:
                    bound = signature.bind(*args, **kwargs)
                except TypeError:
                    return sentinel
                echoed = bound.arguments.get(echo_arg)
                if isinstance(echoed, (int, float)) and math.isfinite(echoed):
                    return echoed
            return sentinel

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except (ArithmeticError, AttributeError, TypeError, ValueError) as e:
                return fallback(args, kwargs, str(e))

            if isinstance(result, float):
                if math.isnan(result):
                    return fallback(args, kwargs, "result is NaN")
                if math.isinf(result) and not allow_infinite:
                    return fallback(args, kwargs, "result is infinite")
            return result

        wrapper.strict = func
        return wrapper

    return decorator
