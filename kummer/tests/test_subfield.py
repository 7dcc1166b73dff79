import pytest

from kummer.extension import KummerExtension
from kummer.nf import FacElem, quadratic_field, rationals
from kummer.subfield import is_subfield


def test_biquadratic():
    Q = rationals()
    L = KummerExtension(2, [Q(2), Q(3)])

    fl, data = is_subfield(KummerExtension(2, [Q(6)]), L)
    assert fl
    ((rt, coords),) = data
    assert coords == [1, 1]
    assert rt.evaluate() == 1

    fl, data = is_subfield(KummerExtension(2, [Q(2), Q(8)]), L)
    assert fl
    assert [coords for _, coords in data] == [[1, 0], [1, 0]]
    assert [rt.evaluate() for rt, _ in data] == [1, 4]


def test_not_subfield():
    Q = rationals()
    L = KummerExtension(2, [Q(2), Q(3)])
    K = KummerExtension(2, [Q(5)])
    fl, data = is_subfield(K, L)
    assert not fl
    assert data == [(FacElem(Q), [0, 0])]


def test_round_trip():
    K = quadratic_field(-1)
    i = K.gen()
    L = KummerExtension([2, 4], [1 + i, K(3)])
    sub = KummerExtension(2, [K(3), (1 + i) * 9])
    fl, data = is_subfield(sub, L)
    assert fl
    # sqrt(3) = (3^(1/4))^2 and sqrt(9(1+i)) = 3 sqrt(1+i)
    assert [coords for _, coords in data] == [[0, 2], [1, 0]]
    assert data[0][0].evaluate() == 1
    assert data[1][0].evaluate() == 3**4


def test_different_exponents():
    K = quadratic_field(-1)
    L = KummerExtension(4, [K(2)])
    fl, data = is_subfield(KummerExtension(2, [K(2)]), L)
    assert fl
    ((rt, coords),) = data
    assert coords == [2]
    assert rt.evaluate() == 1

    with pytest.raises(ValueError):
        is_subfield(L, KummerExtension(2, [K(2)]))
    with pytest.raises(ValueError):
        is_subfield(KummerExtension(2, [rationals()(2)]), L)
