from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from mathblitz.utils import format_number

Number = Union[int, float]


# ------------------------------------------------------------
# PHASE
# ------------------------------------------------------------

class Phase(str, Enum):
    SELECTING_DIFFICULTY = "selecting_difficulty"
    PLAYING = "playing"
    FEEDBACK = "feedback"
    GAME_OVER = "game_over"


# ------------------------------------------------------------
# PROBLEM DATA MODEL
# ------------------------------------------------------------

@dataclass(frozen=True)
class Problem:
    expression: str  # e.g. "12 × 4 − 7"
    answer: Number
    difficulty: int = 1

    @property
    def display(self) -> str:
        return f"{self.expression} = ?"

    @property
    def solution(self) -> str:
        return f"{self.expression} = {format_number(self.answer)}"


# ------------------------------------------------------------
# ATTEMPT MODEL
# ------------------------------------------------------------

@dataclass(frozen=True)
class Attempt:
    problem: Problem
    user_answer: str  # raw keypad text
    is_correct: bool


# ------------------------------------------------------------
# ROUND STATE
# ------------------------------------------------------------

@dataclass(frozen=True)
class RoundState:
    """
    Everything the engine knows about the current round.

    Transitions in ``mathblitz.rounds`` never mutate a state; they return a
    new one. ``history`` is chronological (oldest attempt first).
    """
    difficulty: int = 1
    score: int = 0
    correct_count: int = 0
    total_count: int = 0
    streak: int = 0
    current_problem: Optional[Problem] = None
    pending_input: str = ""
    history: Tuple[Attempt, ...] = ()
    phase: Phase = Phase.SELECTING_DIFFICULTY
    feedback: Optional[bool] = None  # correctness of the last submission while in FEEDBACK

    @property
    def incorrect_count(self) -> int:
        return self.total_count - self.correct_count
