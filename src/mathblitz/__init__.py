from mathblitz.engine import RoundEngine
from mathblitz.errors import GenerationError, InvalidDifficulty, MathBlitzError
from mathblitz.generator import QuestionGenerator, generate_problem
from mathblitz.levels import DEFAULT_TABLE, LevelTable
from mathblitz.models import Attempt, Phase, Problem, RoundState
from mathblitz.scoring import accuracy, points_for

__all__ = [
    "Attempt",
    "DEFAULT_TABLE",
    "GenerationError",
    "InvalidDifficulty",
    "LevelTable",
    "MathBlitzError",
    "Phase",
    "Problem",
    "QuestionGenerator",
    "RoundEngine",
    "RoundState",
    "accuracy",
    "generate_problem",
    "points_for",
]
