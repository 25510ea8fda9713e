import ast
from fractions import Fraction

import pytest

from mathblitz.engine import RoundEngine
from mathblitz.models import Problem
from mathblitz.scheduler import TickScheduler
from mathblitz.utils import format_number

_BINOPS = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.Div: lambda a, b: a / b,
}


def evaluate_expression(expression: str) -> Fraction:
    """Exact value of a rendered expression using Python's own operator precedence."""
    source = expression.replace("×", "*").replace("÷", "/").replace("−", "-")

    def walk(node):
        if isinstance(node, ast.Expression):
            return walk(node.body)
        if isinstance(node, ast.BinOp) and type(node.op) in _BINOPS:
            return _BINOPS[type(node.op)](walk(node.left), walk(node.right))
        if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
            return Fraction(str(node.value))
        raise AssertionError(f"unexpected node in {expression!r}: {ast.dump(node)}")

    return walk(ast.parse(source, mode="eval"))


class FixedGenerator:
    """Hands out '<n> + 1' problems and counts how many were requested."""

    def __init__(self):
        self.calls = 0

    def __call__(self, difficulty):
        self.calls += 1
        return Problem(expression=f"{self.calls} + 1", answer=self.calls + 1, difficulty=difficulty)


def type_answer(engine, text):
    for key in text:
        engine.handle_input_key(key)
    engine.handle_input_key("RESULT")


def answer_correctly(engine):
    type_answer(engine, format_number(engine.current_problem.answer))


def answer_wrongly(engine):
    type_answer(engine, format_number(engine.current_problem.answer + 1))


@pytest.fixture
def scheduler():
    return TickScheduler()


@pytest.fixture
def fixed_generator():
    return FixedGenerator()


@pytest.fixture
def engine(fixed_generator, scheduler):
    return RoundEngine(generator=fixed_generator, scheduler=scheduler)


@pytest.fixture
def seeded_engine():
    return RoundEngine(seed=42)
