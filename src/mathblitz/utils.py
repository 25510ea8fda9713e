from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Union


# ------------------------------------------------------------
# CLAMP
# ------------------------------------------------------------
def clamp(x, min_val, max_val):
    """Clamp x to range [min_val, max_val]."""
    return max(min_val, min(x, max_val))


# ------------------------------------------------------------
# ROUNDING
# ------------------------------------------------------------
def to_decimal(value: Union[int, Fraction, Decimal]) -> Decimal:
    """Exact Decimal for ints/Decimals, 28-digit quotient for Fractions."""
    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)
    return Decimal(value)


def round_half_up(value, places: int = 0) -> Decimal:
    """
    Round half away from zero.

    ``value`` should be an int, Fraction or Decimal; floats are converted
    through ``repr`` so that 94.5 stays 94.5 and not its binary neighbour.
    """
    if isinstance(value, float):
        value = Decimal(repr(value))
    quantum = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def plain_number(value: Decimal) -> Union[int, float]:
    """Return int for integral decimals, float otherwise."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def format_number(value) -> str:
    """Human-readable number: no trailing '.0', no exponent."""
    if isinstance(value, Fraction):
        if value.denominator == 1:
            return str(value.numerator)
        value = to_decimal(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal):
        value = value.normalize()
        return format(value, "f")
    return str(value)
