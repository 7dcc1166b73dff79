"""
Finite abelian groups Z/d1 x ... x Z/dk and their quotients

Quotients by a set of elements are presented by their Smith normal form:
if A is the relation matrix (rows diag(d1..dk) and the coordinates of the
elements), we compute unimodular U, V such that U A V = D is diagonal.
Then x -> x V (mod D) is an isomorphism from the quotient to the product
of cyclic groups Z/Dii, and the invariant factors are the Dii > 1.

Hermite and Smith normal forms are computed by FLINT. The column transform V
is obtained by alternating row and column Hermite forms, where column
operations are read from the Hermite form of the transpose augmented by an
identity block.
"""

import math

import flint

from kummer.integers import xgcd


def _table(M: flint.fmpz_mat) -> list[list[int]]:
    return [[int(x) for x in row] for row in M.table()]


def hnf_transform(
    rows: list[list[int]], ncols: int
) -> tuple[list[list[int]], list[list[int]]]:
    """
    Hermite normal form H = U A and the unimodular transform U.

    >>> hnf_transform([[2, 1], [4, 3]], 2)
    ([[2, 0], [0, 1]], [[3, -1], [-2, 1]])
    """
    m = len(rows)
    aug = [list(r) + [int(i == j) for j in range(m)] for i, r in enumerate(rows)]
    H = _table(flint.fmpz_mat(aug).hnf())
    return [r[:ncols] for r in H], [r[ncols:] for r in H]


def _is_diagonal(A: list[list[int]]) -> bool:
    return all(x == 0 for i, r in enumerate(A) for j, x in enumerate(r) if i != j)


def smith_form(rows: list[list[int]], ncols: int) -> tuple[list[int], list[list[int]]]:
    """
    Diagonal of the Smith normal form of a matrix with full column rank
    and the column transform V.

    >>> smith_form([[4, 0], [0, 6]], 2)[0]
    [2, 12]
    >>> smith_form([[2, 4], [6, 8]], 2)[0]
    [2, 4]
    >>> smith_form([[1, 0], [1, 1], [0, 1]], 2)[0]
    [1, 1]
    """
    n = ncols
    V = [[int(i == j) for j in range(n)] for i in range(n)]
    if n == 0:
        return [], V
    A = _table(flint.fmpz_mat([list(r) for r in rows]).hnf())[:n]
    while not _is_diagonal(A):
        # Column operations: W A^T = H, so A W^T = H^T
        H, W = hnf_transform([list(c) for c in zip(*A)], n)
        V = [[sum(V[i][l] * W[j][l] for l in range(n)) for j in range(n)] for i in range(n)]
        A = [list(c) for c in zip(*H)]
        if _is_diagonal(A):
            break
        A = _table(flint.fmpz_mat(A).hnf())

    diag = [A[i][i] for i in range(n)]
    assert all(d > 0 for d in diag), "relation matrix must have full column rank"
    # U diag(a, b) V = diag(gcd, lcm) with V = [[1, -tb/g], [1, sa/g]]
    for i in range(n):
        for j in range(i + 1, n):
            a, b = diag[i], diag[j]
            if b % a == 0:
                continue
            g, s, t = xgcd(a, b)
            u, v = -t * b // g, s * a // g
            for r in V:
                r[i], r[j] = r[i] + r[j], u * r[i] + v * r[j]
            diag[i], diag[j] = g, a * b // g

    S = _table(flint.fmpz_mat([list(r) for r in rows]).snf())
    assert diag == [S[i][i] for i in range(n)]
    return diag, V


class AbelianGroup:
    """
    The group Z/d1 x ... x Z/dk (written additively)

    >>> G = AbelianGroup([2, 4, 6])
    >>> G.order(), G.exponent(), G.snf()
    (48, 12, [2, 2, 12])
    >>> G([3, 5, 7])
    GroupElement([1, 1, 1])
    """

    def __init__(self, orders: list[int]):
        orders = [int(d) for d in orders]
        if any(d < 1 for d in orders):
            raise ValueError(f"invalid relative orders {orders}")
        self.orders = orders
        self._snf = None

    def __repr__(self):
        return f"AbelianGroup({self.orders})"

    def __eq__(self, other):
        if not isinstance(other, AbelianGroup):
            return NotImplemented
        return self.orders == other.orders

    def __hash__(self):
        return hash(tuple(self.orders))

    def __call__(self, coeffs) -> "GroupElement":
        coeffs = [int(c) for c in coeffs]
        if len(coeffs) != len(self.orders):
            raise ValueError(f"expected {len(self.orders)} coordinates, got {coeffs}")
        return GroupElement(self, coeffs)

    def __getitem__(self, i: int) -> "GroupElement":
        return self([int(i == j) for j in range(self.ngens())])

    def ngens(self) -> int:
        return len(self.orders)

    def gens(self) -> list["GroupElement"]:
        return [self[i] for i in range(self.ngens())]

    def identity(self) -> "GroupElement":
        return self([0] * self.ngens())

    def order(self) -> int:
        return math.prod(self.orders)

    def exponent(self) -> int:
        return math.lcm(*self.orders) if self.orders else 1

    def snf(self) -> list[int]:
        if self._snf is None:
            self._snf = self.quotient([]).invariants
        return self._snf

    def is_cyclic(self) -> bool:
        return len(self.snf()) <= 1

    def relations(self) -> list[list[int]]:
        n = self.ngens()
        return [[d if i == j else 0 for j in range(n)] for i, d in enumerate(self.orders)]

    def quotient(self, elements: list["GroupElement"]) -> "Quotient":
        return Quotient(self, elements)

    def solve(
        self, elements: list["GroupElement"], target: "GroupElement"
    ) -> list[int] | None:
        """
        Integers c such that sum(c[i] * elements[i]) == target,
        or None if target is not in the subgroup generated by elements.

        >>> G = AbelianGroup([2, 2])
        >>> G.solve([G([1, 1]), G([0, 1])], G([1, 0]))
        [1, 1]
        >>> G.solve([G([1, 1])], G([1, 0])) is None
        True
        """
        k = len(elements)
        rows = [list(x.coeffs) for x in elements] + self.relations()
        H, U = hnf_transform(rows, self.ngens())
        pivots = [next(j for j, x in enumerate(r) if x) for r in H if any(r)]
        rem = list(target.coeffs)
        y = [0] * len(rows)
        for r, col in enumerate(pivots):
            q, rr = divmod(rem[col], H[r][col])
            if rr:
                return None
            y[r] = q
            rem = [a - q * b for a, b in zip(rem, H[r])]
        if any(rem):
            return None
        e = self.exponent()
        return [sum(y[r] * U[r][i] for r in range(len(rows))) % e for i in range(k)]


class GroupElement:
    __slots__ = ("group", "coeffs")

    def __init__(self, group: AbelianGroup, coeffs: list[int]):
        self.group = group
        self.coeffs = tuple(c % d for c, d in zip(coeffs, group.orders))

    def __repr__(self):
        return f"GroupElement({list(self.coeffs)})"

    def __getitem__(self, i: int) -> int:
        return self.coeffs[i]

    def __iter__(self):
        return iter(self.coeffs)

    def __len__(self):
        return len(self.coeffs)

    def __eq__(self, other):
        if not isinstance(other, GroupElement):
            return NotImplemented
        return self.group == other.group and self.coeffs == other.coeffs

    def __hash__(self):
        return hash(self.coeffs)

    def __add__(self, other: "GroupElement") -> "GroupElement":
        assert self.group == other.group
        return GroupElement(self.group, [a + b for a, b in zip(self.coeffs, other.coeffs)])

    def __neg__(self) -> "GroupElement":
        return GroupElement(self.group, [-a for a in self.coeffs])

    def __sub__(self, other: "GroupElement") -> "GroupElement":
        return self + (-other)

    def __mul__(self, k: int) -> "GroupElement":
        return GroupElement(self.group, [int(k) * a for a in self.coeffs])

    __rmul__ = __mul__

    def is_zero(self) -> bool:
        return not any(self.coeffs)

    def order(self) -> int:
        return math.lcm(1, *(d // math.gcd(d, a) for a, d in zip(self.coeffs, self.group.orders)))


class Quotient:
    """
    The quotient of a group by the subgroup generated by some elements,
    presented by its Smith normal form.

    >>> G = AbelianGroup([4, 4])
    >>> Q = G.quotient([G([2, 0])])
    >>> Q.invariants, Q.order()
    ([2, 4], 8)
    >>> Q.coordinates(G([2, 0]))
    [0, 0]
    """

    def __init__(self, group: AbelianGroup, elements: list[GroupElement]):
        self.group = group
        self.elements = list(elements)
        rows = group.relations() + [list(x.coeffs) for x in self.elements]
        diag, V = smith_form(rows, group.ngens())
        assert len(diag) == group.ngens()
        self._V = V
        self._idx = [j for j, d in enumerate(diag) if d != 1]
        self.invariants = [diag[j] for j in self._idx]

    def __repr__(self):
        return f"Quotient({self.invariants})"

    def order(self) -> int:
        return math.prod(self.invariants)

    def exponent(self) -> int:
        return self.invariants[-1] if self.invariants else 1

    def is_trivial(self) -> bool:
        return not self.invariants

    def coordinates(self, x: GroupElement) -> list[int]:
        """
        Coordinates of the image of x in the basis of cyclic factors
        """
        V = self._V
        n = len(x.coeffs)
        return [
            sum(x.coeffs[i] * V[i][j] for i in range(n)) % d
            for j, d in zip(self._idx, self.invariants)
        ]

    def is_trivial_image(self, x: GroupElement) -> bool:
        return not any(self.coordinates(x))
