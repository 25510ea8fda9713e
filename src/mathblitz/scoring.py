from decimal import Decimal
from typing import Mapping, Optional

from mathblitz.utils import round_half_up

BASE_POINTS = 10
STEP_BONUS = Decimal("0.4")
STREAK_BONUS = Decimal("0.05")
STREAK_CAP = Decimal("1.5")


def step_multiplier(steps: int) -> Decimal:
    return 1 + (steps - 1) * STEP_BONUS


def streak_multiplier(streak: int) -> Decimal:
    """``streak`` is the streak value after the current correct answer."""
    return min(1 + streak * STREAK_BONUS, STREAK_CAP)


def points_for(difficulty: int, streak: int, steps_table: Optional[Mapping[int, int]] = None) -> int:
    """
    Points for one correct answer.

    round(10 * difficulty * stepMultiplier * streakMultiplier), computed on
    exact decimals and rounded half away from zero, so difficulty 5
    (3 steps) on a streak of 1 gives round(94.5) = 95.
    """
    steps = int((steps_table or {}).get(difficulty, 1))
    raw = BASE_POINTS * difficulty * step_multiplier(steps) * streak_multiplier(streak)
    return int(round_half_up(raw))


def accuracy(correct: int, total: int) -> float:
    """Percentage of correct answers; 100 before anything has been answered."""
    if total == 0:
        return 100.0
    return correct * 100 / total
