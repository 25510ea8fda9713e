class MathBlitzError(Exception):
    """Base class for errors raised by the drill engine."""


class InvalidDifficulty(MathBlitzError, ValueError):
    def __init__(self, difficulty, low: int = 1, high: int = 25):
        self.difficulty = difficulty
        super().__init__(f"Difficulty must be an integer in [{low}, {high}], got {difficulty!r}")


class GenerationError(MathBlitzError, RuntimeError):
    """A level rule could not produce a valid problem within the attempt budget."""
