# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import math
import operator

# Every rank, bound and array size lives in the signed 64-bit domain.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Reserved sentinel, never a valid rank.
MAX_RANK = INT64_MAX


class UserInputError(Exception):
    pass


class RankError(UserInputError, ValueError):
    """Rank outside 0 <= n < MAX_RANK."""

    def __init__(self, rank: int, reason: str):
        super().__init__(f"rank {rank}: {reason}")
        self.rank = rank
        self.reason = reason


class BoundOverflowError(UserInputError, OverflowError):
    pass


class BasisError(UserInputError, ValueError):
    pass


class SieveConsistencyError(RuntimeError):
    """
    A sieve found fewer primes below its upper bound than the bound guarantees.
    This is a defect in the estimator/flagger pairing, never a user error.
    """

    def __init__(self, prime_count: int, found: int, upper_bound: int, strategy: str = "?"):
        super().__init__(
            f"[{strategy}] only {found} prime values were found but {prime_count} "
            f"were required (upper_bound: {upper_bound})"
        )
        self.prime_count = prime_count
        self.found = found
        self.upper_bound = upper_bound
        self.strategy = strategy


# --- Checked 64-bit arithmetic -----------------------------------------------

def _in_range(value: int, what: str) -> int:
    if value < INT64_MIN or value > INT64_MAX:
        raise BoundOverflowError(f"{what} overflows a 64-bit integer ({value})")
    return value


def checked_add(a: int, b: int) -> int:
    return _in_range(a + b, f"{a} + {b}")


def checked_mul(a: int, b: int) -> int:
    return _in_range(a * b, f"{a} * {b}")


def checked_int(x: float) -> int:
    """Truncate a float to int, refusing values a 64-bit integer cannot hold."""
    # 2.0**63 is exact in binary floating point; INT64_MAX is not.
    if not math.isfinite(x) or not (-(2.0**63) <= x < 2.0**63):
        raise BoundOverflowError(f"{x!r} overflows a 64-bit integer")
    return int(x)


def validate_rank(n) -> int:
    """Return n as a plain int, or raise RankError / TypeError."""
    n = operator.index(n)
    if n < 0:
        raise RankError(n, "must be 0 or greater")
    if n >= MAX_RANK:
        raise RankError(n, "cannot be the maximum rank")
    return n


def parse_rank(text: str) -> int:
    """Parse CLI input such as '1000', '1_000_000' or '1,000,000'."""
    s = text.strip().replace("_", "").replace(",", "")
    try:
        return int(s)
    except ValueError:
        raise UserInputError(f"Invalid input: '{text}' is not an integer rank.") from None


def parse_basis(text: str) -> tuple[int, ...]:
    parts = [p for p in text.replace(" ", "").split(",") if p]
    try:
        return tuple(int(p) for p in parts)
    except ValueError:
        raise UserInputError(f"Invalid input: basis '{text}' must be comma-separated integers.") from None


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out


def typename(v: object) -> str:
    return type(v).__name__
