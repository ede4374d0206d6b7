"""Draw states and the outcome values returned to callers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional

from .prizes import Prize


class DrawState(str, Enum):
    """States a single draw request passes through."""

    NEW: Final[str] = "NEW"
    ADMITTED: Final[str] = "ADMITTED"
    SELECTED: Final[str] = "SELECTED"
    CONSOLATION: Final[str] = "CONSOLATION"
    AWARDED: Final[str] = "AWARDED"
    SOLD_OUT: Final[str] = "SOLD_OUT"
    REJECTED_DUPLICATE: Final[str] = "REJECTED_DUPLICATE"


class OutcomeKind(str, Enum):
    """What the caller receives from a draw."""

    WON: Final[str] = "WON"
    CONSOLATION: Final[str] = "CONSOLATION"
    DUPLICATE: Final[str] = "DUPLICATE"


@dataclass(frozen=True)
class Outcome:
    """Result of one draw request.

    ``state`` is the terminal state the request reached. For consolation
    outcomes ``prize_id`` and ``prize_name`` describe the consolation prize and
    ``candidate_id`` names the prize that was selected but had run out of stock,
    if any. Duplicates carry no prize at all.
    """

    kind: OutcomeKind
    state: DrawState
    request_id: str
    prize_id: Optional[str] = None
    prize_name: Optional[str] = None
    candidate_id: Optional[str] = None

    @classmethod
    def won(cls, request_id: str, prize: Prize) -> "Outcome":
        return cls(OutcomeKind.WON, DrawState.AWARDED, request_id, prize.id, prize.name)

    @classmethod
    def consolation(
        cls, request_id: str, prize: Prize, *, sold_out: Optional[Prize] = None
    ) -> "Outcome":
        if sold_out is not None:
            return cls(
                OutcomeKind.CONSOLATION,
                DrawState.SOLD_OUT,
                request_id,
                prize.id,
                prize.name,
                candidate_id=sold_out.id,
            )
        return cls(OutcomeKind.CONSOLATION, DrawState.CONSOLATION, request_id, prize.id, prize.name)

    @classmethod
    def duplicate(cls, request_id: str) -> "Outcome":
        return cls(OutcomeKind.DUPLICATE, DrawState.REJECTED_DUPLICATE, request_id)

    @property
    def is_win(self) -> bool:
        return self.kind is OutcomeKind.WON

    @property
    def is_consolation(self) -> bool:
        return self.kind is OutcomeKind.CONSOLATION

    @property
    def is_duplicate(self) -> bool:
        return self.kind is OutcomeKind.DUPLICATE


__all__ = ["DrawState", "Outcome", "OutcomeKind"]
