# -----------------------------------------------------------------------------
#  bounds.py
#  Upper bound for the value of the n-th prime
# -----------------------------------------------------------------------------

from __future__ import annotations

import math

from nthprime.utility import checked_add, checked_int

# The 12th prime. Every prime of rank < 12 is <= this value.
SMALL_BOUND = 37
FORMULA_MIN_COUNT = 12


def upper_bound(prime_count: int) -> int:
    """
    Return a value >= the prime of rank prime_count - 1 (0-based).

    p(m) < m (ln m + ln ln m - 1 + 1.8 ln ln m / ln m) for 1-indexed m >= 13,
    see https://t5k.org/howmany.html. The count is re-based to m = prime_count + 1,
    which makes the bound valid for the prime of rank prime_count as well.

    Raises BoundOverflowError when the count increment or the result does not
    fit a 64-bit integer.
    """
    if prime_count < FORMULA_MIN_COUNT:
        return SMALL_BOUND

    m = checked_add(prime_count, 1)
    log_m = math.log(m)
    log_log_m = math.log(log_m)
    return checked_int(m * (log_m + log_log_m - 1 + 1.8 * log_log_m / log_m))


def slack(prime_count: int, actual: int) -> float:
    """Relative over-estimate of upper_bound(prime_count) against the actual prime."""
    return (upper_bound(prime_count) - actual) / actual
