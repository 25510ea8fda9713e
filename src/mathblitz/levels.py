import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List

# --- CONFIG ---
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 25
PRECISION_THRESHOLD = 10  # answers are rounded from this difficulty upward
ANSWER_DECIMALS = 2

OPERATIONS = ("addition", "subtraction", "multiplication", "division")

SYMBOL = {
    "addition": "+",
    "subtraction": "−",
    "multiplication": "×",
    "division": "÷",
}


# ============================================================
# STEPS TABLE (1–25), used for scoring
# ============================================================

STEPS_BY_DIFFICULTY = {
    1: 1, 2: 1, 3: 2, 4: 2, 5: 3, 6: 3, 7: 3, 8: 4, 9: 4, 10: 5,
    11: 5, 12: 5, 13: 5, 14: 6, 15: 6, 16: 6, 17: 7, 18: 7, 19: 7, 20: 8,
    21: 8, 22: 9, 23: 9, 24: 10, 25: 11,
}


# ============================================================
# FULL LEVEL FUNCTION TABLE (1–25)
#
# A rule holds one or more forms; a form is a chain of operations with
# one operand spec per slot. Neither the shortest nor the longest chain
# of a tier is shorter than the tier below it.
# Operand specs: {"min","max"} is a range, a list is a choice set,
# "decimal": 10 divides the sampled value.
# "exact": True makes every division in the rule come out whole.
# ============================================================

ADD_SUB = ["addition", "subtraction"]

LEVEL_FUNCTIONS: Dict[int, Dict[str, Any]] = {
    1:  {"forms": [
            {"ops": ["addition"],    "operands": [{"min": 1, "max": 20}, {"min": 1, "max": 20}]},
            {"ops": ["subtraction"], "operands": [{"min": 1, "max": 20}, {"min": 1, "max": 20}]},
         ], "minlimit": 0},
    2:  {"forms": [
            {"ops": [ADD_SUB],          "operands": [{"min": 1, "max": 30}, {"min": 1, "max": 30}]},
            {"ops": ["multiplication"], "operands": [{"min": 2, "max": 10}, {"min": 2, "max": 10}]},
         ], "minlimit": 0},
    3:  {"forms": [
            {"ops": ["addition", "addition"], "operands": [{"min": 1, "max": 30}] * 3},
            {"ops": ["subtraction"],          "operands": [{"min": 10, "max": 99}, {"min": 1, "max": 50}]},
            {"ops": ["multiplication"],       "operands": [{"min": 2, "max": 12}, {"min": 2, "max": 12}]},
         ], "minlimit": 0},
    4:  {"forms": [
            {"ops": ["multiplication", ADD_SUB],
             "operands": [{"min": 2, "max": 10}, {"min": 2, "max": 10}, {"min": 1, "max": 30}]},
            {"ops": ["addition", "subtraction"], "operands": [{"min": 1, "max": 50}] * 3},
         ], "minlimit": 0},
    5:  {"forms": [
            {"ops": ["division", "addition"],
             "operands": [{"min": 2, "max": 12}, {"min": 2, "max": 10}, {"min": 1, "max": 30}]},
            {"ops": ["multiplication", ADD_SUB],
             "operands": [{"min": 2, "max": 12}, {"min": 2, "max": 12}, {"min": 1, "max": 50}]},
         ], "minlimit": 0, "exact": True},
    6:  {"forms": [
            {"ops": ["multiplication", "addition", "multiplication"], "operands": [{"min": 2, "max": 10}] * 4},
            {"ops": ["division", "addition"],
             "operands": [{"min": 2, "max": 12}, {"min": 2, "max": 10}, {"min": 1, "max": 50}]},
         ], "minlimit": 0, "exact": True},
    7:  {"forms": [
            {"ops": ["multiplication", "subtraction", "multiplication"], "operands": [{"min": 2, "max": 12}] * 4},
            {"ops": ["multiplication", ADD_SUB, ADD_SUB],
             "operands": [{"min": 2, "max": 12}, {"min": 2, "max": 12}, {"min": 1, "max": 50}, {"min": 1, "max": 50}]},
         ], "minlimit": 0},
    8:  {"forms": [
            {"ops": ["multiplication", "multiplication", ADD_SUB],
             "operands": [{"min": 2, "max": 9}] * 3 + [{"min": 1, "max": 50}]},
            {"ops": ["division", "multiplication", "addition"],
             "operands": [{"min": 2, "max": 12}, {"min": 2, "max": 9}, {"min": 2, "max": 9}, {"min": 1, "max": 50}]},
         ], "minlimit": 0, "exact": True},
    9:  {"forms": [
            {"ops": ["multiplication", "addition", "multiplication", "subtraction"],
             "operands": [{"min": 2, "max": 12}] * 4 + [{"min": 1, "max": 50}]},
            {"ops": ["division", "addition", "division"],
             "operands": [{"min": 2, "max": 12}, {"min": 2, "max": 9}, {"min": 2, "max": 12}, {"min": 2, "max": 9}]},
         ], "minlimit": 0, "exact": True},

    # --- answers rounded to 2 decimals from here on ---
    10: {"forms": [
            {"ops": ["division", "addition", "multiplication"],
             "operands": [{"min": 10, "max": 99}, {"min": 2, "max": 9}, {"min": 2, "max": 9}, {"min": 2, "max": 9}]},
            {"ops": ["multiplication", "addition", "division", "subtraction"],
             "operands": [{"min": 10, "max": 30}, {"min": 2, "max": 9}, {"min": 10, "max": 99}, {"min": 2, "max": 9},
                          {"min": 1, "max": 50}]},
         ], "minlimit": 0},
    11: {"forms": [
            {"ops": [ADD_SUB, ADD_SUB, "addition"],
             "operands": [{"min": 100, "max": 999, "decimal": 10}] + [{"min": 10, "max": 99, "decimal": 10}] * 3},
            {"ops": ["division", "addition", "division", "addition"],
             "operands": [{"min": 10, "max": 99}, {"min": 2, "max": 9}, {"min": 10, "max": 99}, {"min": 2, "max": 9},
                          {"min": 1, "max": 50}]},
         ], "minlimit": 0},
    12: {"forms": [
            {"ops": ["multiplication", "addition", "multiplication"],
             "operands": [{"min": 10, "max": 99, "decimal": 10}, {"min": 2, "max": 9}] * 2},
            {"ops": ["division", "subtraction", "multiplication", "addition"],
             "operands": [{"min": 50, "max": 199}, {"min": 2, "max": 9}, {"min": 2, "max": 9}, {"min": 2, "max": 9},
                          {"min": 1, "max": 50}]},
         ], "minlimit": 0},
    13: {"forms": [
            {"ops": ["multiplication", "division", "addition"],
             "operands": [{"min": 2, "max": 12}, {"min": 2, "max": 12}, {"min": 2, "max": 9}, {"min": 1, "max": 50}]},
            {"ops": ["multiplication", "addition", "multiplication", "subtraction"],
             "operands": [{"min": 10, "max": 99, "decimal": 10}, {"min": 2, "max": 9}] * 2 + [{"min": 1, "max": 20}]},
         ], "minlimit": 0},
    14: {"forms": [
            {"ops": ["multiplication", "multiplication", "addition"],
             "operands": [{"min": 11, "max": 25}, {"min": 11, "max": 25}, {"min": 2, "max": 9}, {"min": 1, "max": 99}]},
            {"ops": ["addition", "subtraction", "addition", "subtraction"],
             "operands": [{"min": 100, "max": 999, "decimal": 10}] * 5},
         ], "minlimit": 0},
    15: {"forms": [
            {"ops": ["multiplication", "addition", "multiplication", "subtraction"],
             "operands": [{"min": 11, "max": 20}] * 4 + [{"min": 1, "max": 99}]},
            {"ops": ["division", "multiplication", "addition", "division"],
             "operands": [{"min": 10, "max": 99}, {"min": 2, "max": 9}, {"min": 2, "max": 9}, {"min": 10, "max": 99},
                          {"min": 2, "max": 9}]},
         ], "minlimit": 0},
    16: {"forms": [
            {"ops": ["multiplication", "subtraction", "division", "addition"],
             "operands": [{"min": 11, "max": 20}, {"min": 2, "max": 12}, {"min": 10, "max": 99}, {"min": 2, "max": 9},
                          {"min": 1, "max": 50}]},
            {"ops": ["multiplication", "addition", "multiplication", "addition"],
             "operands": [{"min": 10, "max": 99, "decimal": 10}] * 4 + [{"min": 1, "max": 99}]},
         ], "minlimit": 0},
    17: {"forms": [
            {"ops": ["multiplication", "multiplication", "subtraction", "addition"],
             "operands": [{"min": 2, "max": 12}] * 3 + [{"min": 1, "max": 99}] * 2},
            {"ops": ["division", "addition", "division", "subtraction", "multiplication"],
             "operands": [{"min": 10, "max": 99}, {"min": 2, "max": 9}, {"min": 10, "max": 99}, {"min": 2, "max": 9},
                          {"min": 2, "max": 9}, {"min": 2, "max": 9}]},
         ], "minlimit": 0},
    18: {"forms": [
            {"ops": ["multiplication", "addition", "multiplication", "addition", "multiplication"],
             "operands": [{"min": 2, "max": 15}] * 6},
            {"ops": ["multiplication", "subtraction", "division", "addition"],
             "operands": [{"min": 10, "max": 99, "decimal": 10}, {"min": 2, "max": 12},
                          {"min": 10, "max": 99}, {"min": 2, "max": 9}, {"min": 1, "max": 99}]},
         ], "minlimit": 0},
    19: {"forms": [
            {"ops": ["multiplication", "division", "addition", "multiplication"],
             "operands": [{"min": 11, "max": 30}, {"min": 2, "max": 12}, {"min": 2, "max": 9}, {"min": 2, "max": 12},
                          {"min": 2, "max": 12}]},
            {"ops": ["addition", "multiplication", "subtraction", "division", "addition"],
             "operands": [{"min": 100, "max": 999, "decimal": 10}, {"min": 10, "max": 99, "decimal": 10},
                          {"min": 2, "max": 9}, {"min": 10, "max": 99}, {"min": 2, "max": 9}, {"min": 1, "max": 99}]},
         ], "minlimit": 0},
    20: {"forms": [
            {"ops": ["multiplication", "multiplication", "division", "addition"],
             "operands": [{"min": 2, "max": 15}] * 3 + [{"min": 2, "max": 9}, {"min": 1, "max": 99}]},
            {"ops": ["multiplication", "addition", "multiplication", "subtraction", "division"],
             "operands": [{"min": 10, "max": 99, "decimal": 10}] * 2 + [{"min": 10, "max": 99}, {"min": 2, "max": 9},
                                                                         {"min": 10, "max": 99}, {"min": 2, "max": 9}]},
         ], "minlimit": 0},
    21: {"forms": [
            {"ops": ["division", "addition", "multiplication", "subtraction", "multiplication"],
             "operands": [{"min": 100, "max": 999}, {"min": 2, "max": 19}, {"min": 2, "max": 12}, {"min": 2, "max": 12},
                          {"min": 2, "max": 9}, {"min": 2, "max": 9}]},
            {"ops": ["multiplication", "subtraction", "multiplication", "addition", "division"],
             "operands": [{"min": 11, "max": 30}] * 4 + [{"min": 100, "max": 999}, {"min": 2, "max": 19}]},
         ], "minlimit": 0},
    22: {"forms": [
            {"ops": ["multiplication", "addition", "multiplication", "subtraction", "division"],
             "operands": [{"min": 2, "max": 15}] * 4 + [{"min": 10, "max": 99}, {"min": 2, "max": 9}]},
            {"ops": ["multiplication", "multiplication", ADD_SUB, "multiplication", "addition"],
             "operands": [{"min": 10, "max": 99, "decimal": 10}] + [{"min": 2, "max": 9}] * 4 + [{"min": 1, "max": 99}]},
         ], "minlimit": 0},
    23: {"forms": [
            {"ops": ["multiplication", "division", "addition", "multiplication", "subtraction"],
             "operands": [{"min": 11, "max": 30}, {"min": 11, "max": 30}, {"min": 2, "max": 19},
                          {"min": 2, "max": 12}, {"min": 2, "max": 12}, {"min": 1, "max": 99}]},
            {"ops": ["division", "subtraction", "division", "addition", "multiplication", "addition"],
             "operands": [{"min": 100, "max": 999}, {"min": 2, "max": 19}, {"min": 10, "max": 99}, {"min": 2, "max": 19},
                          {"min": 2, "max": 12}, {"min": 2, "max": 12}, {"min": 1, "max": 99}]},
         ], "minlimit": 0},
    24: {"forms": [
            {"ops": ["multiplication", "multiplication", "addition", "division", "subtraction"],
             "operands": [{"min": 2, "max": 15}] * 3 + [{"min": 100, "max": 999}, {"min": 2, "max": 19},
                                                      {"min": 1, "max": 99}]},
            {"ops": ["multiplication", "subtraction", "multiplication", "addition", "division", "addition"],
             "operands": [{"min": 100, "max": 999, "decimal": 10}, {"min": 2, "max": 12},
                          {"min": 10, "max": 99, "decimal": 10}, {"min": 2, "max": 9},
                          {"min": 100, "max": 999}, {"min": 2, "max": 19}, {"min": 1, "max": 99}]},
         ], "minlimit": 0},
    25: {"forms": [
            {"ops": ["multiplication", "multiplication", "addition", "division", "subtraction", "multiplication"],
             "operands": [{"min": 2, "max": 19}] * 3 + [{"min": 100, "max": 999}, {"min": 2, "max": 19},
                                                      {"min": 2, "max": 15}, {"min": 2, "max": 15}]},
            {"ops": ["multiplication", "division", "addition", "multiplication", "subtraction", "addition"],
             "operands": [{"min": 100, "max": 999, "decimal": 10}, {"min": 11, "max": 30}, {"min": 2, "max": 19},
                          {"min": 10, "max": 99, "decimal": 10}, {"min": 11, "max": 30}, {"min": 1, "max": 99},
                          {"min": 1, "max": 99}]},
         ], "minlimit": 0},
}


# ------------------------------------------------------------
# LEVEL TABLE
# ------------------------------------------------------------

def _validate_operand(spec, where: str):
    if isinstance(spec, dict):
        if "min" not in spec or "max" not in spec:
            raise ValueError(f"{where}: range operand needs 'min' and 'max' (got {spec})")
        if spec["min"] > spec["max"]:
            raise ValueError(f"{where}: min > max in {spec}")
        if spec.get("decimal", 1) <= 0:
            raise ValueError(f"{where}: 'decimal' must be positive")
    elif isinstance(spec, (list, tuple)):
        if not spec:
            raise ValueError(f"{where}: empty choice list")
    else:
        raise ValueError(f"{where}: operand must be a range dict or a choice list (got {spec!r})")


def _validate_rule(difficulty: int, rule: Dict[str, Any]):
    forms = rule.get("forms")
    if not forms:
        raise ValueError(f"Level {difficulty}: rule has no forms")
    for i, form in enumerate(forms):
        where = f"Level {difficulty}, form {i}"
        ops, operands = form.get("ops", []), form.get("operands", [])
        if not ops:
            raise ValueError(f"{where}: form needs at least one operation")
        if len(operands) != len(ops) + 1:
            raise ValueError(f"{where}: expected {len(ops) + 1} operands, got {len(operands)}")
        for op in ops:
            choices = op if isinstance(op, (list, tuple)) else [op]
            unknown = [o for o in choices if o not in OPERATIONS]
            if unknown or not choices:
                raise ValueError(f"{where}: unknown operation(s) {unknown or op}")
        for spec in operands:
            _validate_operand(spec, where)


@dataclass
class LevelTable:
    """
    The tunable data behind generation and scoring.

    rules: difficulty -> generation rule (see LEVEL_FUNCTIONS)
    steps: difficulty -> step count used by the score multiplier
    """
    rules: Dict[int, Dict[str, Any]] = field(default_factory=lambda: copy.deepcopy(LEVEL_FUNCTIONS))
    steps: Dict[int, int] = field(default_factory=lambda: dict(STEPS_BY_DIFFICULTY))
    precision_threshold: int = PRECISION_THRESHOLD
    decimals: int = ANSWER_DECIMALS

    def __post_init__(self):
        missing = [d for d in self.difficulties if d not in self.rules]
        if missing:
            raise ValueError(f"Level table is missing rules for difficulties: {missing}")
        for d in self.difficulties:
            _validate_rule(d, self.rules[d])

    @property
    def difficulties(self) -> List[int]:
        return list(range(MIN_DIFFICULTY, MAX_DIFFICULTY + 1))

    def rule_for(self, difficulty: int) -> Dict[str, Any]:
        return self.rules[difficulty]

    def steps_for(self, difficulty: int) -> int:
        return int(self.steps.get(difficulty, 1))

    def rounds_answers(self, difficulty: int) -> bool:
        return difficulty >= self.precision_threshold


DEFAULT_TABLE = LevelTable()
