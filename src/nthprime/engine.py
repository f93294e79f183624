# src/nthprime/engine.py
from __future__ import annotations

import numpy as np

from nthprime.registry import get_strategy, make_sieve
from nthprime.runtime import CFG
from nthprime.sieves.base import Sieve

DEFAULT_STRATEGY = "wheel"


class NthPrimeEngine:
    """
    Public entry point: picks a sieve strategy (explicit argument, then the
    active profile, then 'wheel') and answers nth_prime queries from it.

    Not thread-safe; give each thread its own engine.
    """

    def __init__(self, strategy: str | None = None, *, max_rank: int | None = None, basis=None):
        name = strategy or CFG("SIEVE.STRATEGY", None) or DEFAULT_STRATEGY
        cls = get_strategy(name)

        # A profile basis only applies to strategies that take one
        if basis is None and cls.takes_basis:
            basis = CFG("SIEVE.WHEEL_BASIS", None) or None
        if max_rank is None:
            max_rank = CFG("SIEVE.PRELOAD_RANK", None)

        self._sieve: Sieve = make_sieve(cls.name, max_rank=max_rank, basis=basis)

    def nth_prime(self, n: int) -> int:
        """Return the prime of 0-based rank n (n=0 returns 2)."""
        return self._sieve.nth_prime(n)

    @property
    def strategy(self) -> str:
        return self._sieve.name

    @property
    def sieve(self) -> Sieve:
        return self._sieve

    @property
    def regenerations(self) -> int:
        return self._sieve.regenerations

    @property
    def primes(self) -> np.ndarray:
        return self._sieve.primes_view()

    def __repr__(self) -> str:
        return f"NthPrimeEngine(strategy={self.strategy!r}, cached={len(self._sieve)})"


def nth_prime(n: int, strategy: str | None = None) -> int:
    """One-shot convenience; builds a fresh engine per call."""
    return NthPrimeEngine(strategy).nth_prime(n)
