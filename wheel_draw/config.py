"""Load prize catalogs and demo settings from YAML."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import yaml

from .engine import DEFAULT_TOLERANCE, DrawEngine
from .prizes import CONSOLATION_PRIZE, Prize, Quantity

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

_UNLIMITED_VALUES = {"unlimited", "infinite", "inf", "∞"}

LOGGER = logging.getLogger(__name__)


class DrawConfigError(RuntimeError):
    """Raised when the draw configuration is invalid."""


@dataclass(frozen=True)
class DemoConfig:
    """Settings for the concurrent demo run."""

    draws: int = 100
    workers: int = 10
    duplicate_request_id: str = "REQ-DUPLICATE-123"
    duplicate_every: int = 20
    seed: Optional[int] = None


@dataclass(frozen=True)
class DrawConfig:
    """Normalized draw configuration values."""

    prizes: tuple[Prize, ...]
    consolation: Prize = CONSOLATION_PRIZE
    tolerance: float = DEFAULT_TOLERANCE
    demo: DemoConfig = field(default_factory=DemoConfig)


def _parse_quantity(value, prize_id: str) -> Quantity:
    if value is None:
        return Quantity.unlimited()
    if isinstance(value, str) and value.strip().lower() in _UNLIMITED_VALUES:
        return Quantity.unlimited()
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise DrawConfigError(f"prizes.{prize_id}.quantity must be an integer or 'unlimited'.")
    try:
        return Quantity.finite(int(value))
    except (TypeError, ValueError) as exc:
        raise DrawConfigError(
            f"prizes.{prize_id}.quantity must be an integer or 'unlimited'."
        ) from exc


def _parse_prize_entry(entry, index: int) -> Prize:
    if not isinstance(entry, dict):
        raise DrawConfigError(f"prizes[{index}] must be a mapping.")

    missing = {"id", "name", "quantity", "probability"} - entry.keys()
    if missing:
        raise DrawConfigError(f"prizes[{index}] is missing keys: {', '.join(sorted(missing))}")

    prize_id = str(entry["id"])
    try:
        probability = float(entry["probability"])
    except (TypeError, ValueError) as exc:
        raise DrawConfigError(f"prizes.{prize_id}.probability must be numeric.") from exc

    return Prize(
        id=prize_id,
        name=str(entry["name"]),
        quantity=_parse_quantity(entry["quantity"], prize_id),
        probability=probability,
    )


def _parse_consolation(data) -> Prize:
    if data is None:
        return CONSOLATION_PRIZE
    if not isinstance(data, dict):
        raise DrawConfigError("consolation must be a mapping with 'id' and 'name' keys.")
    return Prize(
        id=str(data.get("id", CONSOLATION_PRIZE.id)),
        name=str(data.get("name", CONSOLATION_PRIZE.name)),
        quantity=Quantity.unlimited(),
        probability=0.0,
    )


def _check_demo_bounds(draws: int, workers: int) -> None:
    if draws < 0:
        raise DrawConfigError("demo.draws cannot be negative.")
    if workers <= 0:
        raise DrawConfigError("demo.workers must be greater than zero.")


def override_demo_config(
    demo: DemoConfig,
    *,
    draws: Optional[int] = None,
    workers: Optional[int] = None,
    seed: Optional[int] = None,
) -> DemoConfig:
    """Return ``demo`` with the given values replaced, checked like the file values."""

    updated = replace(
        demo,
        draws=demo.draws if draws is None else int(draws),
        workers=demo.workers if workers is None else int(workers),
        seed=demo.seed if seed is None else int(seed),
    )
    _check_demo_bounds(updated.draws, updated.workers)
    return updated


def _parse_demo_config(data) -> DemoConfig:
    if data is None:
        return DemoConfig()
    if not isinstance(data, dict):
        raise DrawConfigError("demo configuration must be a mapping.")

    defaults = DemoConfig()
    try:
        draws = int(data.get("draws", defaults.draws))
        workers = int(data.get("workers", defaults.workers))
        duplicate_every = int(data.get("duplicate_every", defaults.duplicate_every))
        seed_raw = data.get("seed")
        seed = int(seed_raw) if seed_raw is not None else None
    except (TypeError, ValueError) as exc:
        raise DrawConfigError("demo values must be integers.") from exc

    _check_demo_bounds(draws, workers)

    return DemoConfig(
        draws=draws,
        workers=workers,
        duplicate_request_id=str(data.get("duplicate_request_id", defaults.duplicate_request_id)),
        duplicate_every=max(0, duplicate_every),
        seed=seed,
    )


def parse_config(data: dict) -> DrawConfig:
    """Validate a configuration mapping that was already parsed from YAML."""

    if not isinstance(data, dict):
        raise DrawConfigError("Configuration root must be a mapping.")

    prizes_raw = data.get("prizes")
    if not isinstance(prizes_raw, list) or not prizes_raw:
        raise DrawConfigError("prizes must be a non-empty list.")

    consolation = _parse_consolation(data.get("consolation"))
    prizes = [_parse_prize_entry(entry, index) for index, entry in enumerate(prizes_raw)]

    try:
        tolerance = float(data.get("tolerance", DEFAULT_TOLERANCE))
    except (TypeError, ValueError) as exc:
        raise DrawConfigError("tolerance must be numeric.") from exc

    # The consolation entry soaks up whatever probability the prizes leave.
    if bool(data.get("fill_consolation", True)) and all(p.id != consolation.id for p in prizes):
        remainder = 1.0 - sum(p.probability for p in prizes)
        if remainder < -tolerance:
            raise DrawConfigError(
                f"Prize probabilities exceed 1.0 (sum={1.0 - remainder}); nothing left for consolation."
            )
        prizes.append(
            Prize(consolation.id, consolation.name, Quantity.unlimited(), max(0.0, remainder))
        )
        LOGGER.debug("Filled consolation %s with probability %.6f.", consolation.id, remainder)

    return DrawConfig(
        prizes=tuple(prizes),
        consolation=consolation,
        tolerance=tolerance,
        demo=_parse_demo_config(data.get("demo")),
    )


def load_config(config_path: Optional[Path] = None) -> DrawConfig:
    """Load the draw configuration from YAML and validate it."""

    raw_path = config_path or CONFIG_PATH
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = path.resolve()
    if not path.exists():
        raise DrawConfigError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise DrawConfigError(f"Config file is not valid YAML: {path}") from exc

    config = parse_config(data)
    LOGGER.info("Loaded %d prizes from %s", len(config.prizes), path)
    return config


def build_engine(config: DrawConfig, *, rng: Optional[random.Random] = None) -> DrawEngine:
    """Create a :class:`DrawEngine` from ``config``."""

    if rng is None and config.demo.seed is not None:
        rng = random.Random(config.demo.seed)
    return DrawEngine(
        config.prizes,
        consolation=config.consolation,
        rng=rng,
        tolerance=config.tolerance,
    )


__all__ = [
    "CONFIG_PATH",
    "DemoConfig",
    "DrawConfig",
    "DrawConfigError",
    "build_engine",
    "load_config",
    "override_demo_config",
    "parse_config",
]
