#!/usr/bin/env python3
"""
Simulated players through full drill rounds.

Usage examples:
  python scripts/simulate_rounds.py --difficulty 5 --p-correct 0.8
  python scripts/simulate_rounds.py --difficulty 12 --p-correct 0.6 --rounds 500 --seed 7 --out sims.csv
"""
import argparse
import logging

from mathblitz.mechanics import load_mechanics
from mathblitz.simulate import simulate_rounds


def main():
    ap = argparse.ArgumentParser(description="Simulate drill rounds and summarise scores")
    ap.add_argument("--difficulty", type=int, required=True)
    ap.add_argument("--p-correct", type=float, default=0.8,
                    help="probability that the simulated player answers correctly")
    ap.add_argument("--rounds", type=int, default=100)
    ap.add_argument("--seed", type=int, default=1234)
    ap.add_argument("--mechanics", default=None, help="optional level table CSV")
    ap.add_argument("--out", default=None, help="write per-round results to this CSV")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    table = load_mechanics(args.mechanics) if args.mechanics else None
    df = simulate_rounds(args.difficulty, args.p_correct, n_rounds=args.rounds, seed=args.seed, table=table)

    print(df[["score", "accuracy", "best_streak"]].describe().round(2))
    if args.out:
        df.to_csv(args.out, index=False)
        print(f"✅ Results saved to: {args.out} (shape: {df.shape})")


if __name__ == "__main__":
    main()
