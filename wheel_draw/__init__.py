"""Weighted prize draw with exactly-once requests and race-free stock."""

from .admission import AdmissionStore, ExpiringAdmissionStore, InMemoryAdmissionStore
from .engine import DrawEngine, PrizeStatus, ValidationError
from .prizes import CONSOLATION_PRIZE, Prize, PrizeStock, Quantity, QuantityKind
from .states import DrawState, Outcome, OutcomeKind

__all__ = [
    "AdmissionStore",
    "CONSOLATION_PRIZE",
    "DrawEngine",
    "DrawState",
    "ExpiringAdmissionStore",
    "InMemoryAdmissionStore",
    "Outcome",
    "OutcomeKind",
    "Prize",
    "PrizeStatus",
    "PrizeStock",
    "Quantity",
    "QuantityKind",
    "ValidationError",
]
