from contextlib import contextmanager

import pytest

from kummer import findgens
from kummer.extension import KummerExtension
from kummer.findgens import find_gens
from kummer.frobenius import canonical_frobenius
from kummer.ideals import prime_decomposition
from kummer.nf import FacElem, NumberField, cyclotomic_field, quadratic_field, rationals


@contextmanager
def check_frobenius():
    findgens.DEBUG_CHECK_FROBENIUS = True
    try:
        yield
    finally:
        findgens.DEBUG_CHECK_FROBENIUS = False


def test_gaussian_quartic():
    K = quadratic_field(-1)
    E = KummerExtension(4, [K(2)])
    primes, frobs = find_gens(E)
    P1, P2 = prime_decomposition(K, 5)
    assert primes == [P1]
    assert frobs == [E.group([3])]
    # The inert prime 3 has trivial Frobenius, both primes above 5
    # are computed from a single projection.
    assert len(E.frobenius_cache) == 3
    assert E.projection_count == 2

    assert find_gens(E) is find_gens(E)
    assert E.projection_count == 2


def test_coprime_to():
    K = quadratic_field(-1)
    E = KummerExtension(4, [K(2)])
    find_gens(E)
    primes, frobs = find_gens(E, coprime_to=5)
    assert [P.p for P in primes] == [13]
    assert frobs[0].order() == 4
    assert len(E.generating_primes) == 2


def test_elementary_group():
    Q = rationals()
    E = KummerExtension(2, [Q(2), Q(3), Q(5)])
    primes, frobs = find_gens(E)
    assert [P.p for P in primes] == [7, 11, 13]
    assert E.group.quotient(frobs).is_trivial()


def test_cyclic_cubic():
    K = cyclotomic_field(3)
    E = KummerExtension(3, [K(2)])
    primes, frobs = find_gens(E)
    # 2 is a bad prime and 5 is inert with trivial Frobenius
    assert [P.p for P in primes] == [7]
    assert frobs[0].order() == 3


def test_auxiliary():
    Q = rationals()
    E = KummerExtension(2, [Q(2)])
    primes, _ = find_gens(E, auxiliary=[FacElem.from_element(Q(3))])
    assert [P.p for P in primes] == [5]
    primes, _ = find_gens(E)
    assert [P.p for P in primes] == [3]


def test_exhausted_stream():
    K = quadratic_field(-1)
    E = KummerExtension(4, [K(2)])
    primes, frobs = find_gens(E, primes=[2, 3])
    assert primes == [] and frobs == []
    assert not E.generating_primes


def test_cubic_field():
    K = NumberField([-2, 0, 0, 1])
    x = K.gen()
    gens = [1 + x, 3 - x * x]
    E = KummerExtension(2, gens)
    with check_frobenius():
        primes, frobs = find_gens(E)
    assert len(primes) == 2
    assert E.group.quotient(frobs).is_trivial()
    # Frobenius elements do not depend on shared projections
    E2 = KummerExtension(2, gens)
    for P, z in zip(primes, frobs):
        assert canonical_frobenius(P, E2) == z


def test_wrong_order():
    Q = rationals()
    # 4 is a square: all Frobenius elements are trivial
    E = KummerExtension(2, [Q(4)])
    with pytest.raises(AssertionError, match=r"generator orders \[2\]"):
        find_gens(E)
    assert not E.generating_primes

    K = quadratic_field(-1)
    E = KummerExtension(4, [K(2), K(9)])
    with pytest.raises(AssertionError, match=r"generator orders \[4, 4\]"):
        find_gens(E)


def test_check_frobenius_reset():
    K = quadratic_field(-1)
    E = KummerExtension(4, [K(2)])
    with pytest.raises(RuntimeError):
        with check_frobenius():
            find_gens(E)
            raise RuntimeError
    assert not findgens.DEBUG_CHECK_FROBENIUS
