import math

import flint
import pytest

from kummer.ideals import prime_decomposition
from kummer.nf import FacElem, quadratic_field, rationals
from kummer.reduction import compact_presentation, conjugates_log, reduce_mod_powers


def test_conjugates_log():
    K = quadratic_field(-1)
    i = K.gen()
    logs = conjugates_log(FacElem(K, {2 + i: 3, K(5): -1}))
    assert len(logs) == 2
    for x in logs:
        assert abs(float(x.mid()) - math.log(5) / 2) < 1e-9


def test_rational():
    Q = rationals()
    assert reduce_mod_powers(FacElem(Q, {Q(2): 5, Q(3): 2}), 2).evaluate() == 2
    assert reduce_mod_powers(Q(12), 2).evaluate() == 3
    assert reduce_mod_powers(Q(flint.fmpq(1, 2)), 3).evaluate() == 4
    assert reduce_mod_powers(Q(flint.fmpq(-27, 4)), 2).evaluate() == -3
    assert reduce_mod_powers(FacElem(Q), 5).evaluate() == 1
    with pytest.raises(ValueError):
        reduce_mod_powers(Q(0), 2)


def test_known_factorization():
    Q = rationals()
    primes = prime_decomposition(Q, 2) + prime_decomposition(Q, 3)
    assert reduce_mod_powers(Q(72), 2, primes).evaluate() == 2
    P2, P3 = primes
    assert reduce_mod_powers(Q(72), 2, {P2: 3, P3: 2}).evaluate() == 2


def test_principal_primes():
    K = quadratic_field(-1)
    i = K.gen()
    P1, _ = prime_decomposition(K, 5)
    a = FacElem(K, {K([2, 11]): 1})
    # 2+11i = (2+i)^3
    c = compact_presentation(a, 2, {P1: 3})
    assert c.evaluate() == a.evaluate()
    b = reduce_mod_powers(a, 2).evaluate()
    assert b.norm() == 5
    assert P1.valuation(b) == 1
    assert b.denominator() == 1
    assert (a.evaluate() / b) in [u * (2 + i) ** 2 for u in (1, -1, i, -i)]


def test_compact_presentation():
    K = quadratic_field(-1)
    i = K.gen()
    a = FacElem(K, {2 + i: 7, K(6): -3, (1 + 3 * i) / 2: 2})
    for n in (2, 3, 5):
        assert compact_presentation(a, n).evaluate() == a.evaluate()


def test_idempotent():
    Q = rationals()
    K = quadratic_field(-1)
    i = K.gen()
    cases = [
        (FacElem(Q, {Q(2): 5, Q(3): 2}), 2),
        (FacElem(Q, {Q(flint.fmpq(1, 2)): 1}), 3),
        (FacElem(K, {2 + i: 3}), 2),
        (FacElem(K, {2 + i: 7, 1 - i: 4, K(3): 5}), 4),
    ]
    for a, n in cases:
        b = reduce_mod_powers(a, n)
        c = reduce_mod_powers(b, n)
        assert b.evaluate() == c.evaluate()
