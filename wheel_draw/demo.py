"""Concurrent demo run of the wheel draw."""

from __future__ import annotations

import argparse
import logging
import uuid
from collections import Counter
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, Optional

from .config import (
    CONFIG_PATH,
    DrawConfigError,
    build_engine,
    load_config,
    override_demo_config,
)
from .engine import (
    DrawEngine,
    PrizeStatus,
    ValidationError,
    configure_draw_log,
    remove_draw_log,
)
from .states import Outcome, OutcomeKind

LOGGER = logging.getLogger(__name__)


@dataclass
class DemoReport:
    """Summary of a demo run."""

    before: list[PrizeStatus]
    after: list[PrizeStatus]
    outcomes: list[Outcome] = field(default_factory=list)
    processed_count: int = 0

    @property
    def kind_counts(self) -> Counter[OutcomeKind]:
        return Counter(outcome.kind for outcome in self.outcomes)

    @property
    def wins_by_prize(self) -> Counter[str]:
        return Counter(outcome.prize_id for outcome in self.outcomes if outcome.is_win)


def new_request_id() -> str:
    return "REQ-" + uuid.uuid4().hex[:8]


def run_demo(
    engine: DrawEngine,
    *,
    draws: int = 100,
    workers: int = 10,
    duplicate_request_id: str = "REQ-DUPLICATE-123",
    duplicate_every: int = 20,
) -> DemoReport:
    """Submit ``draws`` unique requests plus repeated duplicates to a thread pool.

    Every ``duplicate_every``-th draw also submits ``duplicate_request_id``
    twice; only its first admission can produce a prize.
    """

    before = engine.get_current_prize_status()
    futures: list[Future[Outcome]] = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        for index in range(draws):
            futures.append(executor.submit(engine.draw, new_request_id()))
            if duplicate_every > 0 and index % duplicate_every == 0:
                LOGGER.debug("Submitting duplicate request %s", duplicate_request_id)
                futures.append(executor.submit(engine.draw, duplicate_request_id))
                futures.append(executor.submit(engine.draw, duplicate_request_id))

    return DemoReport(
        before=before,
        after=engine.get_current_prize_status(),
        outcomes=[future.result() for future in futures],
        processed_count=engine.processed_count,
    )


def _print_status(title: str, statuses: Iterable[PrizeStatus]) -> None:
    print(title)
    header = f"{'Prize':<12} {'Name':<28} {'Remaining':>10} {'Prob':>8}"
    print(header)
    print("-" * len(header))
    for status in statuses:
        remaining = f"{status.remaining}/{status.total}"
        print(f"{status.id:<12} {status.name:<28} {remaining:>10} {status.probability:>8.4f}")
    print()


def print_report(report: DemoReport) -> None:
    _print_status("Prize status before draws:", report.before)
    _print_status("Prize status after draws:", report.after)

    counts = report.kind_counts
    print(
        f"Won: {counts[OutcomeKind.WON]}  "
        f"Consolation: {counts[OutcomeKind.CONSOLATION]}  "
        f"Duplicate: {counts[OutcomeKind.DUPLICATE]}"
    )
    for prize_id, wins in sorted(report.wins_by_prize.items()):
        print(f"  {prize_id}: {wins}")
    print(f"Processed request ids: {report.processed_count}")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run a concurrent wheel draw demo.")
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_PATH,
        help=f"Path to configuration file (default: {CONFIG_PATH}).",
    )
    parser.add_argument("--draws", type=int, help="Override the number of unique draws.")
    parser.add_argument("--workers", type=int, help="Override the thread pool size.")
    parser.add_argument("--seed", type=int, help="Optional RNG seed.")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Append every draw outcome to this file.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args.config)
        demo = override_demo_config(
            config.demo, draws=args.draws, workers=args.workers, seed=args.seed
        )
        engine = build_engine(replace(config, demo=demo))
    except (DrawConfigError, ValidationError) as exc:
        raise SystemExit(f"Cannot start draw: {exc}") from exc

    handler = configure_draw_log(args.log_file) if args.log_file is not None else None
    try:
        report = run_demo(
            engine,
            draws=demo.draws,
            workers=demo.workers,
            duplicate_request_id=demo.duplicate_request_id,
            duplicate_every=demo.duplicate_every,
        )
    finally:
        if handler is not None:
            remove_draw_log(handler)
    print_report(report)


if __name__ == "__main__":
    main()
