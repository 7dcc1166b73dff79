import math

import flint

from kummer.integers import (
    SIEVE_SEGMENT,
    coprime_base,
    factor,
    is_perfect_power,
    primes,
    smallprimes,
    valuation,
    xgcd,
)


def test_smallprimes():
    assert smallprimes(30) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    assert list(primes(2, 1000)) == smallprimes(1000)


def test_primes_segments():
    # Intervals crossing segment boundaries
    lo, hi = 2 * SIEVE_SEGMENT - 100, 2 * SIEVE_SEGMENT + 100
    ps = list(primes(lo, hi))
    assert ps == [p for p in range(lo, hi) if flint.fmpz(p).is_prime()]
    stream = primes(SIEVE_SEGMENT - 20)
    assert [next(stream) for _ in range(4)] == [
        p for p in range(SIEVE_SEGMENT - 20, SIEVE_SEGMENT + 100) if flint.fmpz(p).is_prime()
    ][:4]


def test_primes_congruence():
    ps = list(primes(100, 200, modulus=12, residue=1))
    assert ps == [109, 157, 181, 193]


def test_factor():
    assert factor(360) == [(2, 3), (3, 2), (5, 1)]
    assert factor(-12) == [(2, 2), (3, 1)]
    assert factor(1) == []
    assert math.prod(l**e for l, e in factor(2**61 - 1)) == 2**61 - 1


def test_valuation():
    assert valuation(48, 2) == 4
    assert valuation(48, 5) == 0


def test_xgcd():
    for a, b in [(240, 46), (-7, 3), (0, 9), (17, 0)]:
        g, s, t = xgcd(a, b)
        assert g >= 0 and g == s * a + t * b
        assert a % g == 0 and b % g == 0


def test_coprime_base():
    ns = [30, 42, 2**5 * 7, 11]
    base = coprime_base(ns)
    assert base == [2, 3, 5, 7, 11]
    for n in ns:
        for l in base:
            while n % l == 0:
                n //= l
        assert n == 1


def test_perfect_power():
    assert is_perfect_power(3**10) == (10, 3)
    assert is_perfect_power(2**6 * 3**6) == (6, 6)
    assert is_perfect_power(1) == (1, 1)
    assert is_perfect_power(2**89 - 1) == (1, 2**89 - 1)
    assert is_perfect_power(10**40) == (40, 10)
