"""Weighted draw engine with exactly-once admission and race-free stock."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .admission import AdmissionStore, InMemoryAdmissionStore
from .prizes import CONSOLATION_PRIZE, Prize, PrizeStock, Quantity
from .states import Outcome

DEFAULT_TOLERANCE = 1e-9

LOGGER = logging.getLogger(__name__)
_DRAW_LOGGER = logging.getLogger("wheel_draw.draws")


class ValidationError(ValueError):
    """Raised when a prize catalog cannot back a draw engine."""


@dataclass(frozen=True)
class PrizeStatus:
    """Point-in-time view of one catalog entry."""

    id: str
    name: str
    probability: float
    total: Quantity
    remaining: Quantity

    def __str__(self) -> str:
        return f"{self.name} [{self.id}] remaining={self.remaining}/{self.total} p={self.probability}"


def configure_draw_log(path: Path, level: int = logging.INFO) -> logging.Handler:
    """Append draw outcomes to ``path`` and return the installed handler."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s | %(message)s"))
    _DRAW_LOGGER.setLevel(level)
    _DRAW_LOGGER.addHandler(handler)
    _DRAW_LOGGER.propagate = False
    return handler


def remove_draw_log(handler: logging.Handler) -> None:
    """Detach and close a handler installed by :func:`configure_draw_log`."""

    _DRAW_LOGGER.removeHandler(handler)
    handler.close()
    if not _DRAW_LOGGER.handlers:
        _DRAW_LOGGER.propagate = True


def log_draw_outcome(outcome: Outcome) -> None:
    """Record a single draw outcome."""

    if outcome.is_duplicate:
        _DRAW_LOGGER.info("%s | DUPLICATE | -", outcome.request_id)
    elif outcome.candidate_id is not None:
        _DRAW_LOGGER.info(
            "%s | SOLD_OUT | %s -> %s", outcome.request_id, outcome.candidate_id, outcome.prize_name
        )
    else:
        _DRAW_LOGGER.info("%s | %s | %s", outcome.request_id, outcome.kind.value, outcome.prize_name)


def _validate_catalog(prizes: list[Prize], consolation: Prize, tolerance: float) -> None:
    if not prizes:
        raise ValidationError("Prize list cannot be empty.")

    seen: set[str] = set()
    for prize in prizes:
        if prize.id in seen:
            raise ValidationError(f"Duplicate prize id: {prize.id}")
        seen.add(prize.id)
        if not 0.0 <= prize.probability <= 1.0:
            raise ValidationError(
                f"Probability of {prize.id} must be between 0.0 and 1.0, got {prize.probability}."
            )
        if not prize.quantity.is_unlimited and prize.quantity.amount < 0:
            raise ValidationError(f"Quantity of {prize.id} cannot be negative.")
        if prize.id == consolation.id and not prize.quantity.is_unlimited:
            raise ValidationError(f"Consolation prize {prize.id} must have unlimited quantity.")

    total = sum(prize.probability for prize in prizes)
    if abs(total - 1.0) > tolerance:
        raise ValidationError(f"Total probability of prizes must sum up to 1.0. Current sum: {total}")


class DrawEngine:
    """Draw prizes from a fixed catalog for concurrent callers.

    Each request id is admitted at most once. The admitted request picks a
    candidate by walking the catalog's cumulative probabilities, then tries
    to take one unit of its stock. An exhausted candidate degrades to the
    consolation prize instead of failing.
    """

    def __init__(
        self,
        prizes: Iterable[Prize],
        *,
        consolation: Prize = CONSOLATION_PRIZE,
        rng: Optional[random.Random] = None,
        admission: Optional[AdmissionStore] = None,
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> None:
        catalog = list(prizes) if prizes is not None else []
        _validate_catalog(catalog, consolation, tolerance)

        self._stocks: tuple[PrizeStock, ...] = tuple(PrizeStock(prize) for prize in catalog)
        # A catalog entry may carry the consolation id with its own name.
        self._consolation = next((p for p in catalog if p.id == consolation.id), consolation)
        self._rng = rng or random.Random()
        self._admission: AdmissionStore = admission if admission is not None else InMemoryAdmissionStore()
        LOGGER.info(
            "Draw engine ready with %d prizes (consolation=%s).", len(self._stocks), self._consolation.id
        )

    # ------------------------------------------------------------------
    # Catalog access
    # ------------------------------------------------------------------
    @property
    def prizes(self) -> tuple[Prize, ...]:
        return tuple(stock.prize for stock in self._stocks)

    @property
    def consolation(self) -> Prize:
        return self._consolation

    @property
    def processed_count(self) -> int:
        """Number of request ids admitted so far."""

        return len(self._admission)

    def get_current_prize_status(self) -> list[PrizeStatus]:
        """Return each prize with its remaining quantity as read right now.

        Every entry is read independently; the list as a whole is not a
        snapshot taken at a single instant.
        """

        return [
            PrizeStatus(
                id=stock.id,
                name=stock.name,
                probability=stock.probability,
                total=stock.prize.quantity,
                remaining=stock.remaining,
            )
            for stock in self._stocks
        ]

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def select_candidate(self, value: float) -> Optional[PrizeStock]:
        """Map ``value`` in ``[0, 1)`` onto the catalog's probability buckets.

        Returns ``None`` when rounding leaves ``value`` past the last bucket.
        """

        cumulative = 0.0
        for stock in self._stocks:
            cumulative += stock.probability
            if value < cumulative:
                return stock
        return None

    def draw(self, request_id: str) -> Outcome:
        """Run one draw for ``request_id``.

        A request id that was already admitted yields a duplicate outcome
        without touching any stock. Any string is accepted as an id, blank
        ones included.
        """

        if not self._admission.try_admit(request_id):
            outcome = Outcome.duplicate(request_id)
            log_draw_outcome(outcome)
            return outcome

        if not str(request_id).strip():
            LOGGER.warning("Admitted blank request id %r.", request_id)

        candidate = self.select_candidate(self._rng.random())
        if candidate is None or candidate.id == self._consolation.id:
            outcome = Outcome.consolation(request_id, self._consolation)
        elif candidate.try_decrement():
            outcome = Outcome.won(request_id, candidate.prize)
        else:
            outcome = Outcome.consolation(request_id, self._consolation, sold_out=candidate.prize)

        log_draw_outcome(outcome)
        return outcome


__all__ = [
    "DEFAULT_TOLERANCE",
    "DrawEngine",
    "PrizeStatus",
    "ValidationError",
    "configure_draw_log",
    "log_draw_outcome",
    "remove_draw_log",
]
