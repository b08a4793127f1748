"""
Financial utility functions.

All monetary values use :class:`decimal.Decimal` so that round-up
arithmetic stays exact; values are only turned into floats at the
JSON boundary.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, Decimal, InvalidOperation, getcontext, localcontext


# ── Constants ────────────────────────────────────────────────────────────────

HUNDRED = Decimal("100")
ZERO = Decimal("0")


# ── Ceiling & remanent ───────────────────────────────────────────────────────

def compute_ceiling(amount: Decimal) -> Decimal:
    """
    Compute the smallest multiple of 100 that is >= *amount*.

    Examples
    --------
    >>> compute_ceiling(Decimal("150.75"))
    Decimal('200')
    >>> compute_ceiling(Decimal("200"))
    Decimal('200')
    >>> compute_ceiling(Decimal("-10"))
    Decimal('0')
    """
    with localcontext() as ctx:
        ctx.prec = _exact_precision(amount, HUNDRED)
        ceiling = (amount / HUNDRED).to_integral_value(rounding=ROUND_CEILING) * HUNDRED
    # ceil(-0.1) is -0; emit a plain zero instead
    return ceiling if ceiling else ZERO


def compute_remanent(ceiling: Decimal, amount: Decimal) -> Decimal:
    """
    Return ``ceiling - amount``, the round-up.  In ``[0, 100)`` for positive amounts.
    """
    with localcontext() as ctx:
        ctx.prec = _exact_precision(ceiling, amount)
        return ceiling - amount


def _exact_precision(*values: Decimal) -> int:
    """
    Digits needed to hold every value of *values* without rounding, from the
    highest integer digit down to the lowest fractional one, plus headroom
    for a carry.  Never below the default context precision.
    """
    highest = max(max(v.adjusted(), 0) for v in values)
    lowest = min(min(v.as_tuple().exponent, 0) for v in values)
    return max(highest - lowest + 3, getcontext().prec)


# ── Serialisation helpers ────────────────────────────────────────────────────

def decimal_to_float(value: Decimal) -> float:
    """Convert Decimal → float for JSON serialisation."""
    return float(value)


def to_decimal(value: int | float | str) -> Decimal:
    """
    Safely convert a raw JSON value to :class:`~decimal.Decimal`.

    Booleans, ``None`` and non-finite values (``NaN``, ``Infinity``) are
    rejected even though :class:`~decimal.Decimal` would accept some of them.

    Raises
    ------
    ValueError
        If *value* cannot be interpreted as a finite decimal number.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Cannot convert {value!r} to Decimal: not a number")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Cannot convert {value!r} to Decimal: {exc}") from exc
    if not result.is_finite():
        raise ValueError(f"Cannot convert {value!r} to Decimal: not finite")
    return result


def is_empty_number(value: Decimal) -> bool:
    """``True`` for the zero value, which the NON_EMPTY output policy omits."""
    return value == ZERO
