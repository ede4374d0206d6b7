"""Request admission stores that let each draw request through exactly once."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class AdmissionStore(Protocol):
    """Claim request identifiers; a claimed id is refused afterwards."""

    def try_admit(self, request_id: str) -> bool:
        ...

    def __len__(self) -> int:
        ...

    def __contains__(self, request_id: object) -> bool:
        ...


class InMemoryAdmissionStore:
    """Unbounded in-process set of processed request ids.

    Claims are never released, so memory grows with every unique request.
    Long-running services should use :class:`ExpiringAdmissionStore` or an
    external store instead.
    """

    def __init__(self) -> None:
        self._claimed: set[str] = set()
        self._lock = threading.Lock()

    def try_admit(self, request_id: str) -> bool:
        with self._lock:
            if request_id in self._claimed:
                return False
            self._claimed.add(request_id)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._claimed)

    def __contains__(self, request_id: object) -> bool:
        with self._lock:
            return request_id in self._claimed


class ExpiringAdmissionStore:
    """Admission store bounded by age and, optionally, by size.

    A claim expires ``ttl`` seconds after it was made. When ``capacity`` is
    set, admitting a new id beyond it evicts the oldest claim. Expired or
    evicted ids are admitted again as if they were new.
    """

    def __init__(
        self,
        ttl: float,
        *,
        capacity: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be greater than zero.")
        if capacity is not None and capacity <= 0:
            raise ValueError("capacity must be a positive integer.")
        self._ttl = float(ttl)
        self._capacity = capacity
        self._clock = clock
        # Insertion order doubles as expiry order since the ttl is fixed.
        self._claimed: "OrderedDict[str, float]" = OrderedDict()
        self._lock = threading.Lock()

    def _purge(self, now: float) -> None:
        while self._claimed:
            oldest, claimed_at = next(iter(self._claimed.items()))
            if now - claimed_at < self._ttl:
                break
            del self._claimed[oldest]

    def try_admit(self, request_id: str) -> bool:
        with self._lock:
            now = self._clock()
            self._purge(now)
            if request_id in self._claimed:
                return False
            self._claimed[request_id] = now
            if self._capacity is not None:
                while len(self._claimed) > self._capacity:
                    self._claimed.popitem(last=False)
            return True

    def __len__(self) -> int:
        with self._lock:
            self._purge(self._clock())
            return len(self._claimed)

    def __contains__(self, request_id: object) -> bool:
        with self._lock:
            self._purge(self._clock())
            return request_id in self._claimed


__all__ = ["AdmissionStore", "ExpiringAdmissionStore", "InMemoryAdmissionStore"]
