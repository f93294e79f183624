# -----------------------------------------------------------------------------
#  base.py
#  Prime cache and the growth protocol shared by every sieve strategy
# -----------------------------------------------------------------------------

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from time import perf_counter

import numpy as np
from colorama import Fore, Style

from nthprime.bounds import upper_bound
from nthprime.runtime import current as _rt_current
from nthprime.utility import SieveConsistencyError, checked_mul, validate_rank


class PrimeCache:
    """
    Ordered primes found so far, rank -> value.
    Only ever replaced wholesale by a longer array with the same prefix.
    """

    def __init__(self):
        self._primes = np.empty(0, dtype=np.int64)
        self.regenerations = 0

    def __len__(self) -> int:
        return int(self._primes.size)

    def __getitem__(self, n: int) -> int:
        return int(self._primes[n])

    def replace(self, primes: np.ndarray) -> None:
        self._primes = primes
        self.regenerations += 1

    def view(self) -> np.ndarray:
        v = self._primes.view()
        v.flags.writeable = False
        return v


def _print_debug_regeneration(strategy: str, prime_count: int, bound: int, dt_ms: float) -> None:
    """Emit a single debug line with timing (to STDERR)."""
    tag = f"{Fore.CYAN}{Style.BRIGHT}{strategy:<6}{Style.RESET_ALL}"
    print(
        f"[debug] {tag} regenerate  count={prime_count:,}  bound={bound:,}  "
        f"{Style.DIM}{dt_ms:8.2f} ms{Style.RESET_ALL}",
        file=sys.stderr,
    )


class Sieve(ABC):
    """
    Answers nth_prime(n) from a PrimeCache, re-sieving from scratch with a
    larger bound whenever a rank beyond the cache is requested.
    """

    name = "abstract"
    description = ""
    takes_basis = False

    def __init__(self, max_rank: int | None = None):
        """
        max_rank: the largest rank expected to be needed; when given, the cache
        is populated up front. It never changes any result.
        """
        self._cache = PrimeCache()
        if max_rank is None:
            # Wait until first use to populate primes
            return
        self._preload(validate_rank(max_rank))

    def _preload(self, max_rank: int) -> None:
        self._regenerate(max_rank + 1)

    def nth_prime(self, n: int) -> int:
        """Return the prime of 0-based rank n (n=0 returns 2)."""
        return self._cached(validate_rank(n))

    def _cached(self, n: int) -> int:
        if n >= len(self._cache):
            # Doubling keeps increasing consecutive queries to O(log n) re-sieves
            self._regenerate(max(n + 1, checked_mul(len(self._cache), 2)))
        return self._cache[n]

    def _regenerate(self, prime_count: int) -> None:
        t0 = perf_counter()
        bound = upper_bound(prime_count)
        primes = self._find_primes(prime_count, bound)
        if primes.size < prime_count:
            raise SieveConsistencyError(prime_count, int(primes.size), bound, self.name)
        self._cache.replace(primes[:prime_count])
        if _rt_current().debug:
            _print_debug_regeneration(self.name, prime_count, bound, (perf_counter() - t0) * 1000.0)

    @abstractmethod
    def _find_primes(self, prime_count: int, bound: int) -> np.ndarray:
        """
        Return an int64 array holding at least the first prime_count primes,
        all of them <= bound. Returning fewer signals a sieve defect.
        """

    # --- introspection ---

    @property
    def regenerations(self) -> int:
        return self._cache.regenerations

    def __len__(self) -> int:
        return len(self._cache)

    def primes_view(self) -> np.ndarray:
        """Read-only view of the cached prefix."""
        return self._cache.view()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(cached={len(self._cache)})"
