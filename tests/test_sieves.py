# tests/test_sieves.py
"""
Tests for the three sieve strategies and their shared growth protocol.

Run: pytest -v            (ranks >= 10,000,000 are marked slow; add -m slow)
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from nthprime.sieves import OddsOnlySieve, PlainSieve, WheelSieve
from nthprime.utility import (
    MAX_RANK,
    BoundOverflowError,
    RankError,
    SieveConsistencyError,
)

STRATEGIES = [PlainSieve, OddsOnlySieve, WheelSieve]
STRATEGY_IDS = [cls.name for cls in STRATEGIES]

REFERENCE = [
    (0,   2),
    (1,   3),
    (2,   5),
    (19,  71),
    (99,  541),
    (500, 3581),
    (986, 7793),
    (2000, 17393),
    (1_000_000, 15485867),
    pytest.param(10_000_000, 179424691, marks=pytest.mark.slow),
    pytest.param(100_000_000, 2038074751, marks=pytest.mark.slow),
]


def _ref_id(case) -> str:
    values = case.values if hasattr(case, "values") else case
    return f"n{values[0]}"


REFERENCE_IDS = [_ref_id(c) for c in REFERENCE]


# ---------- reference table ---------------------------------------------------


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
@pytest.mark.parametrize("n,expected", REFERENCE, ids=REFERENCE_IDS)
def test_nth_prime_matches_reference(cls, n, expected):
    assert cls().nth_prime(n) == expected


@pytest.fixture(scope="module", params=STRATEGIES, ids=STRATEGY_IDS)
def shared(request):
    """One instance per strategy, reused across ranks so the cache grows."""
    return request.param()


@pytest.mark.parametrize("n,expected", [c for c in REFERENCE if not hasattr(c, "marks")][:8])
def test_shared_instance_answers_in_any_order(shared, n, expected):
    assert shared.nth_prime(n) == expected


def test_results_are_plain_ints():
    for cls in STRATEGIES:
        p = cls().nth_prime(50)
        assert type(p) is int
        assert p == 233


def test_strategies_agree_on_first_ten_thousand():
    plain, odds, wheel = PlainSieve(), OddsOnlySieve(), WheelSieve()
    wheel.nth_prime(9999)
    odds.nth_prime(9999)
    plain.nth_prime(9999)
    assert list(plain.primes_view()[:10000]) == list(odds.primes_view()[:10000])
    assert list(odds.primes_view()[:10000]) == list(wheel.primes_view()[:10000])


@pytest.mark.parametrize("basis", [(2,), (2, 3), (2, 3, 5, 7), (2, 3, 5, 7, 11)])
def test_wheel_bases_agree_with_default(basis):
    reference = OddsOnlySieve()
    wheel = WheelSieve(basis=basis)
    for n in (0, 1, len(basis) - 1, len(basis), len(basis) + 1, 57, 986, 2000):
        assert wheel.nth_prime(n) == reference.nth_prime(n), f"basis={basis} n={n}"


# ---------- errors -------------------------------------------------------------


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
@pytest.mark.parametrize("n", [-1, -10**20, MAX_RANK, MAX_RANK + 1])
def test_invalid_rank_raises(cls, n):
    with pytest.raises(RankError) as exc:
        cls().nth_prime(n)
    assert isinstance(exc.value, ValueError)
    assert exc.value.rank == n


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
def test_rank_just_below_sentinel_overflows(cls):
    with pytest.raises(BoundOverflowError) as exc:
        cls().nth_prime(MAX_RANK - 1)
    assert isinstance(exc.value, OverflowError)


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
def test_non_integral_rank_is_rejected(cls):
    with pytest.raises(TypeError):
        cls().nth_prime(3.0)


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
def test_constructor_validates_preload_rank(cls):
    with pytest.raises(RankError):
        cls(max_rank=-5)
    with pytest.raises(BoundOverflowError):
        cls(max_rank=MAX_RANK - 1)


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
def test_short_sieve_is_reported_not_recovered(monkeypatch, cls):
    # A bound that is far too small must surface as a consistency failure
    monkeypatch.setattr("nthprime.sieves.base.upper_bound", lambda count: 10)
    sieve = cls()
    with pytest.raises(SieveConsistencyError) as exc:
        sieve.nth_prime(20)
    err = exc.value
    assert err.prime_count == 21
    assert err.found == 4  # 2, 3, 5, 7
    assert err.upper_bound == 10
    assert len(sieve) == 0


def test_consistency_error_reports_found_count():
    err = SieveConsistencyError(prime_count=21, found=4, upper_bound=10, strategy="odds")
    assert "only 4 prime values" in str(err)
    assert "21 were required" in str(err)


# ---------- cache behaviour ------------------------------------------------------


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
def test_lazy_until_first_query(cls):
    sieve = cls()
    assert len(sieve) == 0
    assert sieve.regenerations == 0


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
def test_preload_populates_without_changing_results(cls):
    eager = cls(max_rank=1000)
    assert len(eager) >= 1001
    assert eager.regenerations == 1
    lazy = cls()
    for n in (0, 3, 17, 500, 1000):
        assert eager.nth_prime(n) == lazy.nth_prime(n)
    # everything requested was already there
    assert eager.regenerations == 1


def test_wheel_preload_inside_basis_builds_nothing():
    sieve = WheelSieve(max_rank=2)
    assert sieve.regenerations == 0
    assert sieve._wheel is None
    assert [sieve.nth_prime(n) for n in range(3)] == [2, 3, 5]
    assert sieve._wheel is None


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
def test_growth_doubles(cls):
    sieve = cls()
    sieve.nth_prime(99)
    assert len(sieve) == 100
    sieve.nth_prime(100)
    assert len(sieve) == 200
    sieve.nth_prime(1000)
    assert len(sieve) == 1001


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
def test_earlier_answers_never_change(cls):
    sieve = cls()
    ranks = [100, 50, 10, 100, 0, 7]
    first = [sieve.nth_prime(n) for n in ranks]
    sieve.nth_prime(20_000)
    again = [sieve.nth_prime(n) for n in ranks]
    assert first == again
    assert first[0] == first[3] == 547


@pytest.mark.parametrize("cls", STRATEGIES, ids=STRATEGY_IDS)
def test_increasing_queries_resieve_logarithmically(cls):
    N = 5000
    sieve = cls()
    for n in range(N):
        sieve.nth_prime(n)
    assert sieve.regenerations <= math.floor(math.log2(N)) + 2


def test_primes_view_is_read_only():
    sieve = OddsOnlySieve()
    sieve.nth_prime(10)
    view = sieve.primes_view()
    assert list(view[:5]) == [2, 3, 5, 7, 11]
    with pytest.raises(ValueError):
        view[0] = 4


def test_primes_view_shares_the_cache_without_copying():
    sieve = PlainSieve()
    sieve.nth_prime(50)
    view = sieve.primes_view()
    assert np.shares_memory(view, sieve._cache._primes)
    assert not view.flags.writeable
    # the cache itself stays writeable for the next regeneration
    assert sieve._cache._primes.flags.writeable
