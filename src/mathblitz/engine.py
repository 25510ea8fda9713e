import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd

from mathblitz import rounds
from mathblitz.generator import QuestionGenerator, check_difficulty
from mathblitz.levels import DEFAULT_TABLE, LevelTable
from mathblitz.models import Attempt, Phase, Problem, RoundState
from mathblitz.scheduler import TickScheduler
from mathblitz.scoring import accuracy
from mathblitz.utils import format_number

logger = logging.getLogger(__name__)

# --- CONFIG ---
FEEDBACK_DELAY_MS = 400  # Feedback -> Playing
QUESTIONS_PER_ROUND = rounds.QUESTIONS_PER_ROUND


class RoundEngine:
    """
    Drill round state machine:

        SELECTING_DIFFICULTY -> PLAYING <-> FEEDBACK -> GAME_OVER

    The engine owns one RoundState, a question generator and a scheduler for
    the delayed FEEDBACK -> PLAYING step. Each new round bumps a round id and
    cancels the pending step, so a timer from an abandoned round can never
    touch the next one.

    Calls that make no sense in the current phase are ignored.
    """

    def __init__(self,
                 table: Optional[LevelTable] = None,
                 seed=None,
                 rng: Optional[np.random.Generator] = None,
                 generator=None,
                 scheduler=None,
                 questions_per_round: int = QUESTIONS_PER_ROUND,
                 feedback_delay_ms: float = FEEDBACK_DELAY_MS):
        self.table = table or DEFAULT_TABLE
        self.generator = generator or QuestionGenerator(self.table, seed=seed, rng=rng)
        self.scheduler = scheduler if scheduler is not None else TickScheduler()
        self.questions_per_round = int(questions_per_round)
        self.feedback_delay_ms = feedback_delay_ms

        self._state = RoundState()
        self._round_id = 0
        self._pending_advance = None

    # --------------------------------------------------------
    # ROUND CONTROL
    # --------------------------------------------------------
    def select_difficulty(self, level: int):
        level = check_difficulty(level)  # raises before anything changes
        self._begin(rounds.new_round(level))
        logger.info("Round started at difficulty %d", level)

    def restart(self):
        self._abandon_round()
        self._state = rounds.restart(self._state)

    def reset_level(self):
        self._begin(rounds.reset_level(self._state))
        logger.info("Round reset at difficulty %d", self._state.difficulty)

    def show_difficulty_selection(self):
        self._abandon_round()
        self._state = rounds.show_difficulty_selection(self._state)

    def _abandon_round(self):
        if self._pending_advance is not None:
            self._pending_advance.cancel()
            self._pending_advance = None
        self._round_id += 1

    def _begin(self, state: RoundState):
        # a GenerationError leaves the current round untouched
        state = self._issue_problem(state)
        self._abandon_round()
        self._state = state

    def _issue_problem(self, state: RoundState) -> RoundState:
        state = rounds.enter_playing(state, self.generator, self.questions_per_round)
        if state.phase == Phase.GAME_OVER:
            logger.info("Round over: score=%d accuracy=%.0f%%",
                        state.score, accuracy(state.correct_count, state.total_count))
        return state

    # --------------------------------------------------------
    # INPUT
    # --------------------------------------------------------
    def handle_input_key(self, key: str):
        """Single entry point for the keypad: "0"-"9", ".", "DEL", "AC", "RESULT"."""
        self._apply(rounds.press_key(self._state, key, self.table.steps), key)

    def append_digit(self, digit: str):
        self._apply(rounds.append_digit(self._state, digit), digit)

    def append_decimal_point(self):
        self._apply(rounds.append_decimal_point(self._state), ".")

    def backspace(self):
        self._apply(rounds.backspace(self._state), "DEL")

    def clear_input(self):
        self._apply(rounds.clear_input(self._state), "AC")

    def submit(self):
        self._apply(rounds.submit(self._state, self.table.steps), "RESULT")

    def _apply(self, new_state: RoundState, key: str):
        old_state = self._state
        if new_state is old_state:
            logger.debug("Ignored %r in phase %s", key, old_state.phase.value)
            return
        self._state = new_state
        if old_state.phase == Phase.PLAYING and new_state.phase == Phase.FEEDBACK:
            last = new_state.history[-1]
            logger.debug("Answer %r for %r: %s", last.user_answer, last.problem.expression,
                         "correct" if last.is_correct else "wrong")
            self._schedule_advance()

    def _schedule_advance(self):
        round_id = self._round_id

        def advance():
            if round_id != self._round_id:
                return
            self._pending_advance = None
            self._state = self._issue_problem(rounds.finish_feedback(self._state))

        self._pending_advance = self.scheduler.call_later(self.feedback_delay_ms / 1000.0, advance)

    # --------------------------------------------------------
    # TICK
    # --------------------------------------------------------
    def update(self, delta_sec: float):
        """Advance the built-in scheduler; a no-op for externally driven schedulers."""
        tick = getattr(self.scheduler, "update", None)
        if tick is not None:
            tick(delta_sec)

    # --------------------------------------------------------
    # OBSERVABLE STATE
    # --------------------------------------------------------
    @property
    def state(self) -> RoundState:
        """The current (immutable) round state."""
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def difficulty(self) -> int:
        return self._state.difficulty

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def streak(self) -> int:
        return self._state.streak

    @property
    def correct_count(self) -> int:
        return self._state.correct_count

    @property
    def total_count(self) -> int:
        return self._state.total_count

    @property
    def accuracy(self) -> float:
        return accuracy(self._state.correct_count, self._state.total_count)

    @property
    def current_problem(self) -> Optional[Problem]:
        return self._state.current_problem

    @property
    def pending_input(self) -> str:
        return self._state.pending_input

    @property
    def history(self) -> Tuple[Attempt, ...]:
        return self._state.history

    @property
    def feedback(self) -> Optional[bool]:
        return self._state.feedback

    @property
    def feedback_pending(self) -> bool:
        return self._pending_advance is not None

    def summary(self) -> Dict[str, Any]:
        s = self._state
        return {
            "difficulty": s.difficulty,
            "score": s.score,
            "accuracy": self.accuracy,
            "correct": s.correct_count,
            "incorrect": s.incorrect_count,
            "total": s.total_count,
            "questions_per_round": self.questions_per_round,
            "progress": s.total_count * 100 / self.questions_per_round,
            "streak": s.streak,
        }

    def history_frame(self) -> pd.DataFrame:
        """Attempt history, oldest first."""
        rows = [{
            "expression": a.problem.expression,
            "answer": format_number(a.problem.answer),
            "user_answer": a.user_answer,
            "is_correct": a.is_correct,
        } for a in self._state.history]
        return pd.DataFrame(rows, columns=["expression", "answer", "user_answer", "is_correct"])
