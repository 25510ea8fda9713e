from fractions import Fraction
from typing import List, Optional, Sequence

import numpy as np

from mathblitz.levels import SYMBOL
from mathblitz.utils import format_number, plain_number, round_half_up


# --- helpers to sample rule values (range dict or list) ---
def pick_value(v, rng: np.random.Generator):
    """Pick either from list or from {min,max} dict."""
    if isinstance(v, dict):
        return int(rng.integers(v["min"], v["max"] + 1))
    if isinstance(v, (list, tuple)):
        return v[int(rng.integers(len(v)))]
    return v  # literal


def sample_operand(spec, rng: np.random.Generator) -> Fraction:
    value = Fraction(pick_value(spec, rng))
    if isinstance(spec, dict) and spec.get("decimal"):
        value /= spec["decimal"]
    return value


def sample_ops(ops: Sequence, rng: np.random.Generator) -> List[str]:
    return [pick_value(op, rng) for op in ops]


def enforce_bounds(res, minlimit=None, maxlimit=None):
    if minlimit is not None and res < minlimit:
        return False
    if maxlimit is not None and res > maxlimit:
        return False
    return True


def term_starts(ops: Sequence[str]) -> List[int]:
    """Operand index that opens the multiplicative term each operand belongs to."""
    starts = [0]
    for i, op in enumerate(ops, start=1):
        starts.append(i if op in ("addition", "subtraction") else starts[-1])
    return starts


def make_divisions_exact(operands: List[Fraction], ops: Sequence[str]) -> List[Fraction]:
    """
    Scale the first operand of every term by each divisor in that term, so
    the term's running value is always divisible when a ÷ is reached.
    """
    operands = list(operands)
    starts = term_starts(ops)
    for i, op in enumerate(ops, start=1):
        if op == "division":
            operands[starts[i]] *= operands[i]
    return operands


def postprocess_operands(operands: List[Fraction], ops: Sequence[str]) -> List[Fraction]:
    # a single subtraction never goes negative: larger operand first
    if list(ops) == ["subtraction"] and operands[0] < operands[1]:
        return [operands[1], operands[0]]
    return operands


def compute_value(operands: Sequence[Fraction], ops: Sequence[str]) -> Fraction:
    """
    Exact value of ``operands[0] ops[0] operands[1] ...`` with × and ÷
    binding tighter than + and −, evaluated left to right.

    Raises ZeroDivisionError on a zero divisor.
    """
    total = Fraction(0)
    sign = 1
    term = Fraction(operands[0])
    for op, x in zip(ops, operands[1:]):
        if op == "multiplication":
            term *= x
        elif op == "division":
            term /= x
        else:
            total += sign * term
            sign = 1 if op == "addition" else -1
            term = Fraction(x)
    return total + sign * term


def format_expression(operands: Sequence[Fraction], ops: Sequence[str]) -> str:
    parts = [format_number(operands[0])]
    for op, x in zip(ops, operands[1:]):
        parts.append(SYMBOL[op])
        parts.append(format_number(x))
    return " ".join(parts)


def compute_answer(value: Fraction, decimals: Optional[int] = None):
    """
    Final answer for a problem: the exact integer, or (when ``decimals`` is
    given) the value rounded half away from zero to that many places.
    Returns None if an integer was required and the value is not whole.
    """
    if decimals is None:
        if value.denominator != 1:
            return None
        return int(value)
    return plain_number(round_half_up(value, decimals))
