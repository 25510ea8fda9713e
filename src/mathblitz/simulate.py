from typing import Optional

import numpy as np
import pandas as pd

from mathblitz.engine import RoundEngine
from mathblitz.levels import LevelTable
from mathblitz.models import Phase
from mathblitz.utils import format_number


def wrong_answer_text(answer) -> str:
    return format_number(answer + 1)


def play_round(engine: RoundEngine, difficulty: int, p_correct: float, rng: np.random.Generator) -> dict:
    """
    Play one full round through the keypad, answering correctly with
    probability ``p_correct``. Returns the engine's round summary.
    """
    engine.select_difficulty(difficulty)
    delay_sec = engine.feedback_delay_ms / 1000.0

    while engine.phase != Phase.GAME_OVER:
        problem = engine.current_problem
        text = format_number(problem.answer) if rng.random() < p_correct else wrong_answer_text(problem.answer)
        for key in text:
            engine.handle_input_key(key)
        engine.handle_input_key("RESULT")
        engine.update(delay_sec)

    return engine.summary()


def simulate_rounds(difficulty: int,
                    p_correct: float,
                    n_rounds: int = 100,
                    seed: Optional[int] = None,
                    table: Optional[LevelTable] = None) -> pd.DataFrame:
    """
    returns
    DataFrame with one row per round:
    ['round','difficulty','score','accuracy','correct','incorrect','total','best_streak']
    """
    if not 0.0 <= p_correct <= 1.0:
        raise ValueError(f"p_correct must be in [0, 1], got {p_correct}")

    rng = np.random.default_rng(seed)
    engine = RoundEngine(table=table, rng=rng)

    results = []
    for i in range(n_rounds):
        summary = play_round(engine, difficulty, p_correct, rng)
        best, run = 0, 0
        for a in engine.history:
            run = run + 1 if a.is_correct else 0
            best = max(best, run)
        results.append({
            "round": i + 1,
            "difficulty": difficulty,
            "score": summary["score"],
            "accuracy": summary["accuracy"],
            "correct": summary["correct"],
            "incorrect": summary["incorrect"],
            "total": summary["total"],
            "best_streak": best,
        })
    return pd.DataFrame(results)
