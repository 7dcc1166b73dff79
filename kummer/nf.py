"""
Absolute number fields K = Q[x]/f(x) for a monic irreducible integer
polynomial f, their elements and factored elements.

Elements are stored as rational polynomials reduced modulo f. Norms and
inverses are computed from the matrix of multiplication by the element
in the power basis (1, x, ..., x^(d-1)).

Factored elements are formal products of bases with integer exponents:
they are never expanded unless explicitly requested, so that exponents
in the order of the field discriminant do not blow up coefficient sizes.
"""

import logging
import math

import flint

from kummer import integers

logger = logging.getLogger("field")


class NumberField:
    """
    A number field with a distinguished root of unity zeta of order
    zeta_order (by default -1 of order 2).
    """

    f: list[int]
    degree: int

    def __init__(self, f: list[int], zeta=None, zeta_order: int | None = None):
        f = [int(c) for c in f]
        if len(f) < 2 or f[-1] != 1:
            raise ValueError(f"defining polynomial {f} must be monic of degree >= 1")
        _, facs = flint.fmpz_poly(f).factor()
        if len(facs) != 1 or facs[0][1] != 1:
            raise ValueError(f"defining polynomial {f} is not irreducible")
        self.f = f
        self.degree = len(f) - 1
        self.poly = flint.fmpq_poly(f)
        self._disc = None
        self._roots = {}
        # Caches for prime ideals, see kummer.ideals
        self._decompositions = {}
        self._index_divisors = {}

        if zeta is None:
            self.zeta, self.zeta_order = self(-1), 2
        else:
            if zeta_order is None:
                raise ValueError("the order of the root of unity must be specified")
            self.zeta, self.zeta_order = self(zeta), int(zeta_order)
            if self.zeta_order < 1 or not (self.zeta**self.zeta_order).is_one():
                raise ValueError(f"{zeta} is not a root of unity of order {zeta_order}")
            for q, _ in integers.factor(self.zeta_order):
                if (self.zeta ** (self.zeta_order // q)).is_one():
                    raise ValueError(f"{zeta} is not a primitive root of unity of order {zeta_order}")
        logger.debug(
            f"Number field of degree {self.degree} defined by {f}, roots of unity of order {self.zeta_order}"
        )

    def __repr__(self):
        return f"NumberField({self.f})"

    def __call__(self, x) -> "NfElem":
        if isinstance(x, NfElem):
            if x.field is not self:
                raise ValueError("element belongs to another number field")
            return x
        if isinstance(x, flint.fmpq_poly):
            return NfElem(self, x % self.poly)
        if isinstance(x, str):
            x = [_parse_rational(s) for s in x.split(",")]
        if isinstance(x, (list, tuple)):
            return NfElem(self, flint.fmpq_poly(list(x)) % self.poly)
        if isinstance(x, (int, flint.fmpz, flint.fmpq)):
            return NfElem(self, flint.fmpq_poly([x]))
        raise TypeError(f"cannot convert {x!r} to a number field element")

    def gen(self) -> "NfElem":
        return self([0, 1])

    def one(self) -> "NfElem":
        return self(1)

    def torsion_generator(self) -> tuple["NfElem", int]:
        return self.zeta, self.zeta_order

    def discriminant(self) -> int:
        """
        Discriminant of f, computed as (-1)^(d(d-1)/2) N(f'(x))
        """
        if self._disc is None:
            d = self.degree
            df = self(self.poly.derivative())
            nrm = df.norm()
            assert nrm.q == 1
            sign = -1 if (d * (d - 1) // 2) % 2 else 1
            self._disc = sign * int(nrm.p)
        return self._disc

    def complex_roots(self, prec: int = 64) -> list[flint.acb]:
        """
        Complex roots of f (all of them, conjugate pairs included)
        """
        if prec not in self._roots:
            with flint.ctx.workprec(prec):
                roots = flint.fmpz_poly(self.f).complex_roots()
            self._roots[prec] = [r for r, _ in roots]
        return self._roots[prec]


def _parse_rational(s: str) -> flint.fmpq:
    num, _, den = s.strip().partition("/")
    return flint.fmpq(int(num), int(den or 1))


class NfElem:
    __slots__ = ("field", "poly")

    def __init__(self, field: NumberField, poly: flint.fmpq_poly):
        self.field = field
        self.poly = poly

    def coeffs(self) -> list[flint.fmpq]:
        c = self.poly.coeffs()
        return c + [flint.fmpq(0)] * (self.field.degree - len(c))

    def denominator(self) -> int:
        """
        Smallest positive integer d such that d*self has integer coefficients
        (a multiple of the denominator relative to the maximal order)
        """
        d = 1
        for c in self.poly.coeffs():
            d = math.lcm(d, int(c.q))
        return d

    def numerator(self) -> list[int]:
        d = self.denominator()
        return [int(c.p) * (d // int(c.q)) for c in self.coeffs()]

    def is_zero(self) -> bool:
        return self.poly.degree() < 0

    def is_one(self) -> bool:
        return self.poly == flint.fmpq_poly([1])

    def is_rational(self) -> bool:
        return self.poly.degree() <= 0

    def __eq__(self, other):
        if isinstance(other, NfElem):
            return self.field is other.field and self.poly == other.poly
        if isinstance(other, int):
            return self.poly == flint.fmpq_poly([other])
        return NotImplemented

    def __hash__(self):
        return hash(tuple((int(c.p), int(c.q)) for c in self.poly.coeffs()))

    def __repr__(self):
        return f"NfElem({self.poly})"

    def __str__(self):
        return str(self.poly)

    def _coerce(self, other) -> "NfElem":
        if isinstance(other, NfElem):
            if other.field is not self.field:
                raise ValueError("elements belong to different number fields")
            return other
        return self.field(other)

    def __add__(self, other):
        return NfElem(self.field, self.poly + self._coerce(other).poly)

    __radd__ = __add__

    def __neg__(self):
        return NfElem(self.field, -self.poly)

    def __sub__(self, other):
        return NfElem(self.field, self.poly - self._coerce(other).poly)

    def __rsub__(self, other):
        return NfElem(self.field, self._coerce(other).poly - self.poly)

    def __mul__(self, other):
        if isinstance(other, FacElem):
            return NotImplemented
        return NfElem(self.field, self.poly * self._coerce(other).poly % self.field.poly)

    __rmul__ = __mul__

    def __truediv__(self, other):
        return self * self._coerce(other).inverse()

    def __rtruediv__(self, other):
        return self._coerce(other) * self.inverse()

    def __pow__(self, e: int):
        e = int(e)
        if e < 0:
            return self.inverse() ** (-e)
        result = flint.fmpq_poly([1])
        x = self.poly
        fpoly = self.field.poly
        while e:
            if e & 1:
                result = result * x % fpoly
            e >>= 1
            if e:
                x = x * x % fpoly
        return NfElem(self.field, result)

    def mulmatrix(self) -> flint.fmpq_mat:
        """
        Matrix of x -> self*x in the power basis (columns are images of x^j)
        """
        d = self.field.degree
        cols = []
        y = self
        t = self.field.gen()
        for _ in range(d):
            cols.append(y.coeffs())
            y = y * t
        return flint.fmpq_mat(d, d, [cols[j][i] for i in range(d) for j in range(d)])

    def norm(self) -> flint.fmpq:
        if self.is_rational():
            return self.coeffs()[0] ** self.field.degree
        return self.mulmatrix().det()

    def inverse(self) -> "NfElem":
        if self.is_zero():
            raise ZeroDivisionError("inverse of zero in number field")
        if self.is_rational():
            return NfElem(self.field, flint.fmpq_poly([1 / self.coeffs()[0]]))
        d = self.field.degree
        e0 = flint.fmpq_mat(d, 1, [1] + [0] * (d - 1))
        sol = self.mulmatrix().solve(e0)
        return self.field(list(sol.entries()))

    def evaluate(self, z: flint.acb) -> flint.acb:
        """
        Value at a complex root z of the defining polynomial.
        """
        num = self.numerator()
        acc = flint.acb(0)
        for c in reversed(num):
            acc = acc * z + c
        return acc / self.denominator()


class FacElem:
    """
    A formal product of number field elements (bases) with integer exponents.

    Bases are merged when equal, and zero exponents are dropped.
    """

    __slots__ = ("field", "fac")

    def __init__(self, field: NumberField, fac: dict | None = None):
        self.field = field
        self.fac: dict[NfElem, int] = {}
        for b, e in (fac or {}).items():
            b = field(b)
            if b.is_zero():
                raise ValueError("zero base in factored element")
            e = self.fac.get(b, 0) + int(e)
            if e:
                self.fac[b] = e
            else:
                self.fac.pop(b, None)

    @classmethod
    def from_element(cls, x) -> "FacElem":
        if isinstance(x, FacElem):
            return x
        if isinstance(x, NfElem):
            return cls(x.field, {x: 1})
        raise TypeError(f"cannot convert {x!r} to a factored element")

    def items(self):
        return self.fac.items()

    def __len__(self):
        return len(self.fac)

    def __eq__(self, other):
        if not isinstance(other, FacElem):
            return NotImplemented
        return self.field is other.field and self.fac == other.fac

    def __hash__(self):
        return hash(frozenset(self.fac.items()))

    def __repr__(self):
        facs = " * ".join(f"({b})^{e}" for b, e in self.fac.items())
        return f"FacElem({facs or 1})"

    def __mul__(self, other):
        if isinstance(other, NfElem):
            other = FacElem.from_element(other)
        if not isinstance(other, FacElem):
            return NotImplemented
        if other.field is not self.field:
            raise ValueError("factored elements belong to different number fields")
        fac = dict(self.fac)
        for b, e in other.fac.items():
            fac[b] = fac.get(b, 0) + e
        return FacElem(self.field, fac)

    __rmul__ = __mul__

    def __pow__(self, e: int):
        e = int(e)
        if e == 0:
            return FacElem(self.field)
        return FacElem(self.field, {b: e * v for b, v in self.fac.items()})

    def inverse(self) -> "FacElem":
        return self ** (-1)

    def __truediv__(self, other):
        return self * FacElem.from_element(other).inverse()

    def is_trivial(self) -> bool:
        return not self.fac

    def evaluate(self) -> NfElem:
        result = self.field.one()
        for b, e in self.fac.items():
            result = result * b**e
        return result

    def norm(self) -> flint.fmpq:
        result = flint.fmpq(1)
        for b, e in self.fac.items():
            nb = b.norm()
            if e >= 0:
                result *= nb**e
            else:
                result /= nb ** (-e)
        return result

    def mod_exponents(self, n: int) -> "FacElem":
        """
        The same product with exponents reduced modulo n (the result is
        equal to self modulo n-th powers)
        """
        return FacElem(self.field, {b: e % n for b, e in self.fac.items()})


def facelem(x) -> FacElem:
    return FacElem.from_element(x)


def cyclotomic_field(m: int) -> NumberField:
    """
    Q(zeta_m) with zeta of order lcm(2, m) declared as root of unity.
    """
    phis = {}
    for d in range(1, m + 1):
        if m % d:
            continue
        p = flint.fmpz_poly([-1] + [0] * (d - 1) + [1])
        for k, phik in phis.items():
            if d % k == 0:
                p = p // phik
        phis[d] = p
    f = [int(c) for c in phis[m].coeffs()]
    if m % 2 == 0:
        return NumberField(f, [0, 1], m)
    # -x has order 2m
    return NumberField(f, [0, -1], 2 * m)


def quadratic_field(d: int) -> NumberField:
    """
    Q(sqrt(d)) defined by x^2 - d, with its full group of roots of unity.
    """
    if d == -1:
        return NumberField([1, 0, 1], [0, 1], 4)
    if d == -3:
        return NumberField([3, 0, 1], [flint.fmpq(1, 2), flint.fmpq(1, 2)], 6)
    return NumberField([-d, 0, 1])


def rationals() -> NumberField:
    return NumberField([0, 1])
