# -----------------------------------------------------------------------------
#  wheel.py
#  Wheel factorization: sieve only the integers coprime to a small-prime basis
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

import numpy as np
from sympy import prime

from nthprime.registry import strategy
from nthprime.sieves.base import Sieve
from nthprime.utility import BasisError, checked_add, checked_mul, validate_rank

DEFAULT_BASIS = (2, 3, 5)


def validate_basis(basis) -> tuple[int, ...]:
    """
    The basis must be the first k primes in ascending order, k >= 1.
    """
    basis = tuple(int(p) for p in basis)
    if not basis:
        raise BasisError("Wheel basis cannot be empty.")
    expected = tuple(int(prime(i)) for i in range(1, len(basis) + 1))
    if basis != expected:
        raise BasisError(
            f"Wheel basis {list(basis)} must be the first {len(basis)} primes {list(expected)}."
        )
    return basis


class Wheel:
    """
    The integers coprime to the basis, laid out as a flat array.

    One turn of the wheel covers `modulus` consecutive integers and holds
    `period` candidates. The first turn is every integer in
    (max(basis), modulus + 1] coprime to the basis; turn t shifts each first-turn
    value by t * modulus, so

        value_of(i) = first_turn[i % period] + (i // period) * modulus

    Values of the form modulus + 1 close a turn, so the first turn never
    contains 1 and always ends at modulus + 1.
    """

    def __init__(self, basis=DEFAULT_BASIS):
        self.basis = validate_basis(basis)

        modulus = 1
        for p in self.basis:
            modulus = checked_mul(modulus, p)
        self.modulus = modulus

        # Flag composites of each basis prime in [0, modulus + 1]
        flags = np.zeros(modulus + 2, dtype=bool)
        for p in self.basis:
            flags[2 * p::p] = True
        candidates = np.flatnonzero(~flags)
        self.first_turn = candidates[candidates > self.basis[-1]].astype(np.int64)
        self.period = int(self.first_turn.size)

        # Gap to the next candidate; the last one wraps into the next turn
        wrap = self.first_turn[0] + modulus
        self.increments = np.diff(np.append(self.first_turn, wrap))

        # residue -> position in first_turn, -1 where not a candidate
        self._position = np.full(modulus + 2, -1, dtype=np.int64)
        self._position[self.first_turn] = np.arange(self.period, dtype=np.int64)

    def __repr__(self) -> str:
        return f"Wheel(basis={self.basis}, modulus={self.modulus}, period={self.period})"

    @property
    def first_candidate(self) -> int:
        return int(self.first_turn[0])

    # --- index <-> value ---

    def _decompose(self, value: int) -> tuple[int, int]:
        # residue lands in [2, modulus + 1], the range first_turn is drawn from
        turn = (value - 2) // self.modulus
        return turn, value - turn * self.modulus

    def value_of(self, index: int) -> int:
        turn, pos = divmod(index, self.period)
        return int(self.first_turn[pos]) + turn * self.modulus

    def values(self, indices: np.ndarray) -> np.ndarray:
        indices = np.asarray(indices, dtype=np.int64)
        return self.first_turn[indices % self.period] + (indices // self.period) * self.modulus

    def index_of(self, value: int) -> int:
        """Exact inverse of value_of; ValueError when value is not on the wheel."""
        if value < self.first_candidate:
            raise ValueError(f"{value} is below the first wheel candidate {self.first_candidate}")
        turn, residue = self._decompose(value)
        pos = int(self._position[residue])
        if pos < 0:
            raise ValueError(f"{value} shares a factor with the basis {self.basis}")
        return turn * self.period + pos

    def approximate_index(self, value: int) -> int:
        """
        Index of the greatest candidate <= value, or -1 when value is below the
        first candidate.
        """
        if value < self.first_candidate:
            return -1
        turn, residue = self._decompose(value)
        # pos == -1 resolves to the last candidate of the previous turn
        pos = int(np.searchsorted(self.first_turn, residue, side="right")) - 1
        return checked_add(checked_mul(turn, self.period), pos)

    def array_length(self, upper_bound: int) -> int:
        """Number of candidates <= upper_bound."""
        return self.approximate_index(upper_bound) + 1

    # --- sieving ---

    def flag_composites(self, upper_bound: int) -> np.ndarray:
        """
        Return flags over the candidates <= upper_bound, True iff composite.
        """
        length = self.array_length(upper_bound)
        flags = np.zeros(max(length, 0), dtype=bool)
        if length <= 0:
            return flags

        period = self.period
        increments = [int(g) for g in self.increments]
        last = self.approximate_index(isqrt(upper_bound))

        for i in range(last + 1):
            if flags[i]:
                continue

            p = self.value_of(i)
            # q + modulus moves p*q by `period` slots per factor of p
            stride = p * period
            q = p
            cursor = i % period
            for _ in range(period):
                start = self.index_of(p * q)
                if start >= length:
                    break
                flags[start::stride] = True
                q += increments[cursor]
                cursor = (cursor + 1) % period

        return flags


@strategy("wheel", "Wheel factorization over a small-prime basis", takes_basis=True)
class WheelSieve(Sieve):
    """
    Ranks inside the basis are answered from the basis alone; the wheel is
    built on the first query past it.
    """

    def __init__(self, basis=None, max_rank: int | None = None):
        self.basis = validate_basis(DEFAULT_BASIS if basis is None else basis)
        self._wheel: Wheel | None = None
        super().__init__(max_rank=max_rank)

    @property
    def wheel(self) -> Wheel:
        if self._wheel is None:
            self._wheel = Wheel(self.basis)
        return self._wheel

    def _preload(self, max_rank: int) -> None:
        if max_rank < len(self.basis):
            return
        super()._preload(max_rank)

    def nth_prime(self, n: int) -> int:
        n = validate_rank(n)
        if n < len(self.basis):
            return self.basis[n]
        return self._cached(n)

    def _find_primes(self, prime_count: int, bound: int) -> np.ndarray:
        wheel = self.wheel
        flags = wheel.flag_composites(bound)
        needed = prime_count - len(self.basis)
        indices = np.flatnonzero(~flags)[:needed]
        return np.concatenate((np.array(self.basis, dtype=np.int64), wheel.values(indices)))
