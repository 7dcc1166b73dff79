from kummer.abelian import AbelianGroup, hnf_transform, smith_form


def test_smith_form():
    diag, V = smith_form([[6, 4], [4, 6]], 2)
    assert diag == [2, 10]
    assert abs(V[0][0] * V[1][1] - V[0][1] * V[1][0]) == 1


def test_group():
    G = AbelianGroup([4, 6])
    assert G.order() == 24
    assert G.exponent() == 12
    assert G.snf() == [2, 12]
    assert not G.is_cyclic()
    assert AbelianGroup([3, 4]).is_cyclic()
    assert AbelianGroup([1, 5]).snf() == [5]

    x = G([3, 5])
    assert x + x == G([2, 4])
    assert x * 12 == G.identity()
    assert x * 4 == G([0, 2])
    assert (x - x).is_zero()
    assert x.order() == 12
    assert list(G[1]) == [0, 1]


def test_quotient():
    G = AbelianGroup([2, 2, 4])
    Q = G.quotient([G([1, 1, 0]), G([0, 0, 2])])
    assert Q.order() == 4
    assert Q.invariants == [2, 2]
    assert Q.is_trivial_image(G([1, 1, 2]))
    assert not Q.is_trivial_image(G([1, 0, 0]))
    assert Q.coordinates(G([1, 0, 0])) == Q.coordinates(G([0, 1, 0]))

    Q = G.quotient([G([1, 0, 0]), G([0, 1, 0]), G([0, 1, 1])])
    assert Q.is_trivial()
    assert Q.exponent() == 1


def test_solve():
    G = AbelianGroup([2, 4])
    xs = [G([1, 1]), G([0, 2])]
    t = G([1, 3])
    c = G.solve(xs, t)
    assert c is not None
    assert xs[0] * c[0] + xs[1] * c[1] == t
    assert G.solve(xs, G([0, 1])) is None
    assert G.solve([], G.identity()) == []


def test_trivial_quotient():
    # Generators whose pivots divide each other
    G = AbelianGroup([12])
    assert G.quotient([G([1]), G([1])]).is_trivial()
    assert G.quotient([G([3]), G([4])]).is_trivial()
    assert G.quotient([G([4]), G([6])]).invariants == [2]

    G = AbelianGroup([2, 2, 2])
    xs = [G([1, 0, 0]), G([1, 1, 0]), G([1, 1, 1]), G([0, 1, 1])]
    for k in range(1, len(xs) + 1):
        Q = G.quotient(xs[:k])
        assert Q.order() == 2 ** max(0, 3 - k)
    assert G.quotient(xs).is_trivial()


def test_quotient_coordinates():
    G = AbelianGroup([4, 6, 9])
    xs = [G([2, 3, 0]), G([0, 2, 3])]
    Q = G.quotient(xs)
    assert Q.invariants == [36]
    for x in xs:
        assert Q.is_trivial_image(x)
    a, b = G([1, 1, 1]), G([3, 5, 2])
    ca, cb, cab = Q.coordinates(a), Q.coordinates(b), Q.coordinates(a + b)
    assert cab == [(u + v) % d for u, v, d in zip(ca, cb, Q.invariants)]
    assert not Q.is_trivial_image(a)


def test_hnf_transform():
    rows = [[6, 4], [4, 6], [2, 2]]
    H, U = hnf_transform(rows, 2)
    assert H == [[2, 0], [0, 2], [0, 0]]
    for r in range(3):
        assert [sum(U[r][i] * rows[i][j] for i in range(3)) for j in range(2)] == H[r]
