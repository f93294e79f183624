# tests/test_flaggers.py
"""Plain and odds-only composite flagging."""

from __future__ import annotations

import numpy as np
import pytest
from sympy import isprime

from nthprime.sieves.odds import flag_odd_composites
from nthprime.sieves.plain import flag_composites


@pytest.mark.parametrize("max_value", [9, 10])
def test_odd_flags_worked_example(max_value):
    flags = flag_odd_composites(max_value)
    # values 1, 3, 5, 7, 9; index 0 is never flagged
    assert flags.tolist() == [False, False, False, False, True]


@pytest.mark.parametrize("max_value", [9, 10])
def test_plain_flags_agree_on_worked_example(max_value):
    flags = flag_composites(max_value)
    assert [bool(flags[v]) for v in (3, 5, 7, 9)] == [False, False, False, True]
    assert not flags[1]


@pytest.mark.parametrize("max_value", [1, 2, 3, 9, 10, 11, 24, 25, 26, 100, 101, 961, 1000])
def test_odd_encoding_matches_plain(max_value):
    odds = flag_odd_composites(max_value)
    plain = flag_composites(max_value)[1::2]
    assert odds.size == (max_value + 1) // 2
    assert np.array_equal(odds, plain)


def test_plain_flags_match_primality():
    flags = flag_composites(5000)
    assert flags.size == 5001
    for v in range(2, 5001):
        assert bool(flags[v]) == (not isprime(v)), v


def test_odd_flags_match_primality():
    flags = flag_odd_composites(5001)
    for i in range(1, flags.size):
        v = 2 * i + 1
        assert bool(flags[i]) == (not isprime(v)), v


def test_squares_of_primes_are_flagged():
    flags = flag_odd_composites(10_000)
    for p in (3, 5, 7, 11, 97):
        assert flags[p * p // 2]
