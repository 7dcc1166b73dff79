"""
Utility functions for integers.
"""

import math
from typing import Iterator

import numpy as np

import flint

# Width of the intervals sieved by primes()
SIEVE_SEGMENT = 1 << 16


def smallprimes(B: int) -> list[int]:
    """
    Primes less than B (sieve of Eratosthenes)
    """
    l = np.ones(max(B, 2), dtype=np.uint8)
    l[0:2] = 0
    for i in range(2, math.isqrt(B) + 1):
        if l[i]:
            l[i * i :: i] = 0
    return [int(_i) for _i in l[:B].nonzero()[0]]


def _sieve_segment(lo: int, hi: int) -> list[int]:
    l = np.ones(hi - lo, dtype=np.uint8)
    for q in smallprimes(math.isqrt(hi - 1) + 1):
        start = max(q * q, (lo + q - 1) // q * q)
        l[start - lo :: q] = 0
    return [lo + int(_i) for _i in l.nonzero()[0]]


def primes(
    start: int = 2, stop: int | None = None, modulus: int = 1, residue: int = 0
) -> Iterator[int]:
    """
    Stream of rational primes start <= p < stop, optionally restricted
    to p = residue (mod modulus). The stream is infinite if stop is None.

    >>> list(primes(2, 30))
    [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    >>> list(primes(2, 60, modulus=8, residue=1))
    [17, 41]
    """
    lo = max(start, 2)
    while stop is None or lo < stop:
        hi = lo + SIEVE_SEGMENT
        if stop is not None:
            hi = min(hi, stop)
        for p in _sieve_segment(lo, hi):
            if p % modulus == residue % modulus:
                yield p
        lo = hi


def factor(n: int | flint.fmpz) -> list[tuple[int, int]]:
    if abs(int(n)) <= 1:
        return []
    return [(int(l), int(e)) for l, e in flint.fmpz(abs(int(n))).factor()]


def valuation(x: int, p: int) -> int:
    if x == 0:
        # An approximation of infinity.
        return 0xFFFFFFFF
    v = 0
    while x % p == 0:
        v += 1
        x = x // p
    return v


def xgcd(a: int, b: int) -> tuple[int, int, int]:
    """
    Returns (g, s, t) such that g = gcd(a, b) = s*a + t*b and g >= 0

    >>> xgcd(12, 18)
    (6, -1, 1)
    >>> xgcd(0, -5)
    (5, 0, -1)
    """
    s0, s1, t0, t1 = 1, 0, 0, 1
    while b != 0:
        q, r = divmod(a, b)
        a, b = b, r
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    if a < 0:
        return -a, -s0, -t0
    return a, s0, t0


def coprime_base(ns: list[int]) -> list[int]:
    """
    Pairwise coprime integers > 1 such that each input is a product
    of powers of them.

    >>> coprime_base([12, 18])
    [2, 3]
    >>> coprime_base([6, 10, 15, 1, 0])
    [2, 3, 5]
    >>> coprime_base([4, 6])
    [2, 3]
    """
    base: list[int] = []
    todo = [abs(int(n)) for n in ns if abs(int(n)) > 1]
    while todo:
        a = todo.pop()
        if a == 1:
            continue
        for i, b in enumerate(base):
            g = math.gcd(a, b)
            if g == 1:
                continue
            base.pop(i)
            todo += [g, a // g, b // g]
            break
        else:
            base.append(a)
    return sorted(set(base))


def is_perfect_power(n: int) -> tuple[int, int]:
    """
    Returns (k, r) with n = r^k and k maximal.

    >>> is_perfect_power(64)
    (6, 2)
    >>> is_perfect_power(36)
    (2, 6)
    >>> is_perfect_power(12)
    (1, 12)
    """
    z = flint.fmpz(n)
    if n < 4 or not z.is_perfect_power():
        return 1, n
    for k in range(n.bit_length(), 1, -1):
        r = z.root(k)
        if r > 1 and r**k == z:
            return k, int(r)
    return 1, n
