# -----------------------------------------------------------------------------
#  plain.py
#  Sieve of Eratosthenes over every integer
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

import numpy as np

from nthprime.registry import strategy
from nthprime.sieves.base import Sieve


def flag_composites(max_value: int) -> np.ndarray:
    """
    Return flags where flags[v] is True iff v is composite, for 0 <= v <= max_value.
    Entries 0 and 1 are left False and must be skipped by callers.
    """
    flags = np.zeros(max_value + 1, dtype=bool)
    for i in range(2, isqrt(max_value) + 1):
        if flags[i]:
            continue
        # Everything below i*i is already flagged by smaller primes
        flags[i * i::i] = True
    return flags


@strategy("plain", "Sieve of Eratosthenes over every integer")
class PlainSieve(Sieve):

    def _find_primes(self, prime_count: int, bound: int) -> np.ndarray:
        flags = flag_composites(bound)
        primes = np.flatnonzero(~flags[2:])[:prime_count] + 2
        return primes.astype(np.int64)
