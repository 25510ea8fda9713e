"""
Round state transitions.

Every function takes a RoundState and returns the next one; calls that are
not valid in the current phase return the state unchanged. Problem
generation is passed in as a callable so the transitions stay free of
randomness.
"""
from dataclasses import replace
from typing import Callable, Mapping, Optional

from mathblitz.models import Attempt, Phase, Problem, RoundState
from mathblitz.scoring import points_for

# --- CONFIG ---
QUESTIONS_PER_ROUND = 20
DEFAULT_DIFFICULTY = 1
MAX_INPUT_LENGTH = 12

DIGITS = frozenset("0123456789")
INPUT_PHASES = (Phase.PLAYING, Phase.FEEDBACK)


# ------------------------------------------------------------
# ROUND LIFECYCLE
# ------------------------------------------------------------

def new_round(difficulty: int) -> RoundState:
    """Fresh counters at ``difficulty``, waiting for its first problem."""
    return RoundState(difficulty=difficulty, phase=Phase.PLAYING)


def restart(state: RoundState) -> RoundState:
    return RoundState(difficulty=DEFAULT_DIFFICULTY, phase=Phase.SELECTING_DIFFICULTY)


def reset_level(state: RoundState) -> RoundState:
    return new_round(state.difficulty)


def show_difficulty_selection(state: RoundState) -> RoundState:
    # the last difficulty is kept for display; everything else is dropped
    return RoundState(difficulty=state.difficulty, phase=Phase.SELECTING_DIFFICULTY)


def enter_playing(state: RoundState,
                  generate: Callable[[int], Problem],
                  questions_per_round: int = QUESTIONS_PER_ROUND) -> RoundState:
    """
    Issue the next problem, or end the round once the quota is used up.

    The quota is checked here, on the way back into PLAYING, so the last
    answer of a round still gets its FEEDBACK phase: for one feedback delay
    the state reads FEEDBACK with total_count == questions_per_round before
    it becomes GAME_OVER.
    """
    if state.phase != Phase.PLAYING or state.current_problem is not None:
        return state
    if state.total_count >= questions_per_round:
        return replace(state, phase=Phase.GAME_OVER, pending_input="", feedback=None)
    return replace(state, current_problem=generate(state.difficulty), pending_input="", feedback=None)


def finish_feedback(state: RoundState) -> RoundState:
    if state.phase != Phase.FEEDBACK:
        return state
    return replace(state, phase=Phase.PLAYING, current_problem=None, feedback=None)


# ------------------------------------------------------------
# ANSWER INPUT
# ------------------------------------------------------------

def append_digit(state: RoundState, digit: str) -> RoundState:
    if state.phase not in INPUT_PHASES or digit not in DIGITS:
        return state
    if len(state.pending_input) >= MAX_INPUT_LENGTH:
        return state
    return replace(state, pending_input=state.pending_input + digit)


def append_decimal_point(state: RoundState) -> RoundState:
    if state.phase not in INPUT_PHASES or "." in state.pending_input:
        return state
    if len(state.pending_input) >= MAX_INPUT_LENGTH - 1:
        return state
    # a bare "." is not a numeral
    return replace(state, pending_input=(state.pending_input or "0") + ".")


def backspace(state: RoundState) -> RoundState:
    if state.phase not in INPUT_PHASES:
        return state
    return replace(state, pending_input=state.pending_input[:-1])


def clear_input(state: RoundState) -> RoundState:
    if state.phase not in INPUT_PHASES:
        return state
    return replace(state, pending_input="")


def is_correct(problem: Problem, user_input: str) -> bool:
    return float(user_input) == problem.answer


def submit(state: RoundState, steps_table: Optional[Mapping[int, int]] = None) -> RoundState:
    """
    Score the pending input against the current problem and move to
    FEEDBACK. Outside PLAYING, or with nothing typed, nothing happens.
    """
    problem = state.current_problem
    if state.phase != Phase.PLAYING or not state.pending_input or problem is None:
        return state

    correct = is_correct(problem, state.pending_input)
    attempt = Attempt(problem=problem, user_answer=state.pending_input, is_correct=correct)

    if correct:
        streak = state.streak + 1
        score = state.score + points_for(state.difficulty, streak, steps_table)
        correct_count = state.correct_count + 1
    else:
        streak, score, correct_count = 0, state.score, state.correct_count

    return replace(
        state,
        score=score,
        correct_count=correct_count,
        total_count=state.total_count + 1,
        streak=streak,
        history=state.history + (attempt,),
        phase=Phase.FEEDBACK,
        feedback=correct,
    )


def press_key(state: RoundState, key: str, steps_table: Optional[Mapping[int, int]] = None) -> RoundState:
    """Keypad dispatch: "0"-"9", ".", "DEL", "AC", "RESULT". Unknown keys are ignored."""
    if key in DIGITS:
        return append_digit(state, key)
    if key == ".":
        return append_decimal_point(state)
    if key == "DEL":
        return backspace(state)
    if key == "AC":
        return clear_input(state)
    if key == "RESULT":
        return submit(state, steps_table)
    return state
