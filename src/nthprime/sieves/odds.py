# -----------------------------------------------------------------------------
#  odds.py
#  Sieve of Eratosthenes over odd integers only
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

import numpy as np

from nthprime.registry import strategy
from nthprime.sieves.base import Sieve


def flag_odd_composites(max_value: int) -> np.ndarray:
    """
    Return flags where flags[i] represents the odd integer 2*i + 1 and is True
    iff that integer is composite. Index 0 (the integer 1) is never flagged and
    must be skipped by callers.
    """
    flags = np.zeros((max_value + 1) // 2, dtype=bool)
    index_of_sqrt = isqrt(max_value) // 2

    for i in range(1, index_of_sqrt + 1):
        if flags[i]:
            # A composite cannot flag anything its factors have not already flagged
            continue

        value = 2 * i + 1
        # Odd multiples of value are 2*value apart, i.e. value apart in index space.
        flags[value * value // 2::value] = True

    return flags


@strategy("odds", "Sieve of Eratosthenes over odd integers (half the memory)")
class OddsOnlySieve(Sieve):

    def _find_primes(self, prime_count: int, bound: int) -> np.ndarray:
        # 2 is the only even prime and has no slot in the odd-only flags
        if prime_count == 1:
            return np.array([2], dtype=np.int64)

        flags = flag_odd_composites(bound)
        # Skip index 0, the integer 1
        indices = np.flatnonzero(~flags[1:])[:prime_count - 1] + 1
        odd = 2 * indices.astype(np.int64) + 1
        return np.concatenate((np.array([2], dtype=np.int64), odd))
