"""
Question generation.

``generate_problem`` maps a difficulty (1-25) to a Problem using the level
table. The answer is computed from the sampled operands and operations at
generation time; the expression string is only ever rendered, never parsed.
"""
import logging
from typing import Optional

import numpy as np

from mathblitz.calculations import (
    compute_answer,
    compute_value,
    enforce_bounds,
    format_expression,
    make_divisions_exact,
    pick_value,
    postprocess_operands,
    sample_operand,
    sample_ops,
)
from mathblitz.errors import GenerationError, InvalidDifficulty
from mathblitz.levels import DEFAULT_TABLE, MAX_DIFFICULTY, MIN_DIFFICULTY, LevelTable
from mathblitz.models import Problem

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 1000


def check_difficulty(difficulty) -> int:
    if isinstance(difficulty, bool) or not isinstance(difficulty, (int, np.integer)):
        raise InvalidDifficulty(difficulty, MIN_DIFFICULTY, MAX_DIFFICULTY)
    if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
        raise InvalidDifficulty(difficulty, MIN_DIFFICULTY, MAX_DIFFICULTY)
    return int(difficulty)


def generate_problem(difficulty: int,
                     table: Optional[LevelTable] = None,
                     rng: Optional[np.random.Generator] = None) -> Problem:
    difficulty = check_difficulty(difficulty)
    table = table or DEFAULT_TABLE
    rng = rng if rng is not None else np.random.default_rng()

    rule = table.rule_for(difficulty)
    decimals = table.decimals if table.rounds_answers(difficulty) else None

    for attempt in range(MAX_ATTEMPTS):
        form = pick_value(rule["forms"], rng)
        ops = sample_ops(form["ops"], rng)
        operands = [sample_operand(spec, rng) for spec in form["operands"]]

        if rule.get("exact"):
            operands = make_divisions_exact(operands, ops)
        operands = postprocess_operands(operands, ops)

        try:
            value = compute_value(operands, ops)
        except ZeroDivisionError:
            continue

        if not enforce_bounds(value, rule.get("minlimit"), rule.get("maxlimit")):
            continue

        answer = compute_answer(value, decimals)
        if answer is None:
            continue

        if attempt:
            logger.debug("Level %d: accepted problem after %d resamples", difficulty, attempt)
        return Problem(expression=format_expression(operands, ops), answer=answer, difficulty=difficulty)

    raise GenerationError(
        f"Level {difficulty}: no valid problem after {MAX_ATTEMPTS} attempts; check the rule's ranges and limits"
    )


class QuestionGenerator:
    """Seedable generator bound to one level table."""

    def __init__(self, table: Optional[LevelTable] = None, seed=None,
                 rng: Optional[np.random.Generator] = None):
        self.table = table or DEFAULT_TABLE
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def generate(self, difficulty: int) -> Problem:
        return generate_problem(difficulty, self.table, self.rng)

    __call__ = generate
