"""Diagnostic script to simulate wheel draws against a catalog."""

from __future__ import annotations

import argparse
from collections import Counter
from pathlib import Path
import random

from wheel_draw.config import CONFIG_PATH, DrawConfig, build_engine, load_config
from wheel_draw.engine import DrawEngine


TOLERANCE_PERCENT = 5.0


def tally_draws(engine: DrawEngine, draws: int) -> tuple[Counter[str], Counter[str]]:
    """Run ``draws`` requests and count selected candidates and awarded prizes."""

    candidates: Counter[str] = Counter()
    awarded: Counter[str] = Counter()
    for index in range(draws):
        outcome = engine.draw(f"SIM-{index}")
        if outcome.is_win:
            candidates[outcome.prize_id] += 1
            awarded[outcome.prize_id] += 1
        elif outcome.candidate_id is not None:
            candidates[outcome.candidate_id] += 1
        else:
            candidates[engine.consolation.id] += 1
    return candidates, awarded


def simulate_draws(config: DrawConfig, draws: int, seed: int | None) -> bool:
    """Print candidate odds and awarded stock; return ``True`` when odds are in tolerance."""

    rng = random.Random(seed) if seed is not None else random.Random()
    engine = build_engine(config, rng=rng)
    candidates, awarded = tally_draws(engine, draws)

    print(f"Simulated {draws} draws{' with seed ' + str(seed) if seed is not None else ''}.")
    print(f"Tolerance: ±{TOLERANCE_PERCENT:.1f}%")
    print()
    header = f"{'Prize':<12} {'Actual %':>10} {'Expected %':>12} {'Δ%':>8} {'Awarded':>9} {'Stock':>7} Status"
    print(header)
    print("-" * len(header))

    within_tolerance = True
    for prize in config.prizes:
        actual_pct = candidates[prize.id] / draws * 100 if draws else 0.0
        expected_pct = prize.probability * 100
        delta = actual_pct - expected_pct
        status = "OK" if abs(delta) <= TOLERANCE_PERCENT else "WARN"
        if status != "OK":
            within_tolerance = False
        print(
            f"{prize.id:<12} {actual_pct:>10.2f} {expected_pct:>12.2f} {delta:>8.2f} "
            f"{awarded[prize.id]:>9} {str(prize.quantity):>7} {status}"
        )

    print()
    if within_tolerance:
        print("All prize odds within tolerance.")
    else:
        print("One or more prizes deviated beyond tolerance.")
    return within_tolerance


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--draws",
        type=int,
        default=10000,
        help="Number of simulated draws to run (default: 10000).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Optional RNG seed for reproducibility.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_PATH,
        help="Catalog configuration file.",
    )
    args = parser.parse_args(argv)
    simulate_draws(load_config(args.config), args.draws, args.seed)


if __name__ == "__main__":
    main()
