"""Prize definitions and thread-safe stock counters for the wheel draw."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Final


class QuantityKind(str, Enum):
    """Whether a prize has a countable stock."""

    FINITE: Final[str] = "FINITE"
    UNLIMITED: Final[str] = "UNLIMITED"


@dataclass(frozen=True)
class Quantity:
    """A prize quantity, either ``Finite(amount)`` or ``Unlimited``."""

    kind: QuantityKind
    amount: int = 0

    @classmethod
    def finite(cls, amount: int) -> "Quantity":
        return cls(QuantityKind.FINITE, int(amount))

    @classmethod
    def unlimited(cls) -> "Quantity":
        return cls(QuantityKind.UNLIMITED)

    @property
    def is_unlimited(self) -> bool:
        return self.kind is QuantityKind.UNLIMITED

    def __str__(self) -> str:
        return "∞" if self.is_unlimited else str(self.amount)


@dataclass(frozen=True)
class Prize:
    """Represent a single prize entry with its draw probability."""

    id: str
    name: str
    quantity: Quantity
    probability: float

    def __str__(self) -> str:
        return f"{self.name} [{self.id}] (qty={self.quantity}, p={self.probability})"


# Fallback outcome used when nothing else is won or available.
CONSOLATION_PRIZE: Final[Prize] = Prize(
    "THANK_YOU", "Thank you for playing", Quantity.unlimited(), 0.0
)


class AtomicInteger:
    """Integer cell offering an atomic compare-and-set."""

    def __init__(self, value: int = 0) -> None:
        self._value = int(value)
        self._lock = threading.Lock()

    def get(self) -> int:
        with self._lock:
            return self._value

    def compare_and_set(self, expected: int, new: int) -> bool:
        """Store ``new`` only if the current value still equals ``expected``."""

        with self._lock:
            if self._value != expected:
                return False
            self._value = new
            return True


class PrizeStock:
    """Remaining quantity of one prize, safe for concurrent draws."""

    def __init__(self, prize: Prize) -> None:
        self._prize = prize
        self._remaining = AtomicInteger(0 if prize.quantity.is_unlimited else prize.quantity.amount)

    @property
    def prize(self) -> Prize:
        return self._prize

    @property
    def id(self) -> str:
        return self._prize.id

    @property
    def name(self) -> str:
        return self._prize.name

    @property
    def probability(self) -> float:
        return self._prize.probability

    @property
    def is_unlimited(self) -> bool:
        return self._prize.quantity.is_unlimited

    @property
    def remaining(self) -> Quantity:
        if self.is_unlimited:
            return Quantity.unlimited()
        return Quantity.finite(self._remaining.get())

    def try_decrement(self) -> bool:
        """Take one unit of stock, returning ``False`` once it is exhausted."""

        if self.is_unlimited:
            return True
        while True:
            current = self._remaining.get()
            if current <= 0:
                return False
            if self._remaining.compare_and_set(current, current - 1):
                return True
            # Another draw changed the value between read and swap; reread.

    def __repr__(self) -> str:
        return f"PrizeStock(id={self.id!r}, remaining={self.remaining})"


__all__ = [
    "AtomicInteger",
    "CONSOLATION_PRIZE",
    "Prize",
    "PrizeStock",
    "Quantity",
    "QuantityKind",
]
