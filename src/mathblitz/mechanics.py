import ast
import os

import pandas as pd

from mathblitz.levels import ANSWER_DECIMALS, PRECISION_THRESHOLD, LevelTable

REQUIRED_COLUMNS = [
    "difficulty",
    "steps",
    "forms",
]

OPTIONAL_COLUMNS = [
    "minlimit",
    "maxlimit",
    "exact",
]


def _parse_forms(x, difficulty):
    """'forms' is stored as a string representation of a list of dicts."""
    if pd.isna(x) or x == "":
        raise ValueError(f"Level {difficulty}: empty 'forms' cell")
    try:
        forms = ast.literal_eval(x)
    except (ValueError, SyntaxError) as e:
        raise ValueError(f"Level {difficulty}: could not parse 'forms': {e}") from e
    if not isinstance(forms, list):
        raise ValueError(f"Level {difficulty}: 'forms' must be a list")
    return forms


def load_mechanics(csv_path: str,
                   precision_threshold: int = PRECISION_THRESHOLD,
                   decimals: int = ANSWER_DECIMALS) -> LevelTable:
    """
    Load a level table from CSV.

    Expected columns:
        difficulty, steps, forms
    Optional:
        minlimit, maxlimit, exact

    This function:
    - checks that the file exists
    - reads CSV
    - validates required columns
    - sorts by difficulty
    - builds (and so validates) a LevelTable
    """
    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"Mechanics CSV not found: {csv_path}")

    df = pd.read_csv(csv_path)

    # Validate columns
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Mechanics CSV is missing columns: {missing}")

    if df["difficulty"].duplicated().any():
        dupes = sorted(df.loc[df["difficulty"].duplicated(), "difficulty"].unique().tolist())
        raise ValueError(f"Mechanics CSV has duplicate difficulties: {dupes}")

    df = df.sort_values("difficulty").reset_index(drop=True)

    # Ensure types
    df["difficulty"] = df["difficulty"].astype(int)
    df["steps"] = pd.to_numeric(df["steps"], errors="coerce").fillna(1).astype(int)

    rules, steps = {}, {}
    for _, row in df.iterrows():
        d = int(row["difficulty"])
        rule = {"forms": _parse_forms(row["forms"], d)}
        for col in OPTIONAL_COLUMNS:
            if col in df.columns and pd.notna(row[col]):
                rule[col] = bool(row[col]) if col == "exact" else float(row[col])
        rules[d] = rule
        steps[d] = int(row["steps"])

    return LevelTable(rules=rules, steps=steps, precision_threshold=precision_threshold, decimals=decimals)
