"""
Prime ideals of the equation order Z[x]/f and residue field maps

For a rational prime p which does not divide the index [O_K : Z[x]],
the Kummer-Dedekind theorem gives the prime ideals above p from the
factorization f = t1^e1 ... tk^ek modulo p: they are the ideals
(p, ti(x)) with ramification index ei and residue degree deg(ti).

The Dedekind criterion decides whether p divides the index. Index divisors
are still decomposed (the ideals are then primes of Z[x] only) but residue
maps and valuations at these primes are not reliable, and the Frobenius
computation rejects them.

Residue maps use word-sized arithmetic (flint.nmod) for small primes of
degree 1, flint.fmpz_mod for large primes of degree 1 and
flint.fq_default for larger residue degrees.
"""

import logging

import flint

from kummer import integers
from kummer.nf import FacElem, NfElem, NumberField

logger = logging.getLogger("field")

# Residue characteristics below this bound use word-sized arithmetic
WORD_BOUND = 2**63


class BadPrime(Exception):
    """
    The prime cannot be used to reduce the requested elements.
    """

    def __init__(self, prime, reason: str = ""):
        msg = f"bad prime {prime}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.prime = prime


def polyring(p: int):
    """
    Constructor of polynomials modulo p (from integer coefficient lists)
    """
    if p < WORD_BOUND:
        return lambda coeffs: flint.nmod_poly([int(c) % p for c in coeffs], p)
    return flint.fmpz_mod_poly_ctx(p)


def lift(poly) -> list[int]:
    return [int(poly[i]) for i in range(poly.degree() + 1)]


def is_index_divisor(K: NumberField, p: int) -> bool:
    """
    Dedekind criterion: write f = prod(ti^ei) mod p, g = prod(ti),
    h = prod(ti^(ei-1)) and F = (f - g h) / p. Then p divides the
    index of Z[x] if and only if gcd(F, g, h) is not constant modulo p.
    """
    if p in K._index_divisors:
        return K._index_divisors[p]
    if K.discriminant() % (p * p) != 0:
        result = False
    else:
        R = polyring(p)
        _, facs = R(K.f).factor()
        g, h = R([1]), R([1])
        for t, e in facs:
            g *= t
            h *= t ** (e - 1)
        F = flint.fmpz_poly(K.f) - flint.fmpz_poly(lift(g)) * flint.fmpz_poly(lift(h))
        Fp = [int(c) // p for c in F.coeffs()]
        common = R(Fp or [0]).gcd(g).gcd(h)
        result = common.degree() > 0
    if result:
        logger.debug(f"{p} divides the index of the equation order")
    K._index_divisors[p] = result
    return result


def prime_decomposition(K: NumberField, p: int) -> list["PrimeIdeal"]:
    if p not in K._decompositions:
        R = polyring(p)
        _, facs = R(K.f).factor()
        primes = [PrimeIdeal(K, p, lift(t), int(e)) for t, e in facs]
        primes.sort(key=lambda P: (P.degree, P.gen))
        K._decompositions[p] = primes
    return K._decompositions[p]


class PrimeIdeal:
    """
    The ideal (p, t(x)) of Z[x]/f where t is a monic irreducible factor
    of f modulo p (with coefficients in [0, p)).
    """

    def __init__(self, field: NumberField, p: int, gen: list[int], e: int):
        self.field = field
        self.p = p
        self.gen = gen
        self.e = e
        self.degree = len(gen) - 1
        self.norm = p**self.degree
        self._residue_map = None
        self._generator = None
        self._generator_done = False

    def __eq__(self, other):
        if not isinstance(other, PrimeIdeal):
            return NotImplemented
        return self.field is other.field and self.p == other.p and self.gen == other.gen

    def __hash__(self):
        return hash((self.p, tuple(self.gen)))

    def __repr__(self):
        return f"PrimeIdeal({self.p}, {self.gen})"

    def minimum(self) -> int:
        return self.p

    def is_ramified(self) -> bool:
        return self.e > 1

    def is_index_divisor(self) -> bool:
        return is_index_divisor(self.field, self.p)

    def residue_map(self) -> "ResidueMap":
        if self._residue_map is None:
            self._residue_map = ResidueMap(self)
        return self._residue_map

    def basis(self) -> list[list[int]]:
        """
        A Z-basis of the ideal in coordinates of the power basis:
        p, p x, ..., p x^(f-1), t, x t, ..., x^(d-f-1) t
        """
        d, f = self.field.degree, self.degree
        rows = [[0] * i + [self.p] + [0] * (d - i - 1) for i in range(f)]
        for i in range(d - f):
            rows.append([0] * i + self.gen + [0] * (d - f - i - 1))
        return rows

    def valuation(self, x) -> int:
        """
        Valuation of a nonzero element (or factored element) at this prime.

        Let beta be the lift of (f / t) mod p: it has valuation e-1 at P
        and valuation at least e at the other primes above p. Then y is in
        P iff y*beta is divisible by p, and v(y*beta/p) = v(y) - 1.
        """
        if isinstance(x, FacElem):
            return sum(e * self.valuation(b) for b, e in x.items())
        x = self.field(x)
        if x.is_zero():
            raise ValueError("valuation of zero")
        if self.is_index_divisor():
            raise NotImplementedError(f"valuation at index divisor {self.p}")
        p = self.p
        den = x.denominator()
        v = -self.e * integers.valuation(den, p)
        y = x * den
        beta = self._anti_uniformizer()
        invp = flint.fmpq(1, p)
        while True:
            z = y * beta
            if any(c % p for c in z.numerator()):
                return v
            y = z * invp
            v += 1

    def _anti_uniformizer(self) -> NfElem:
        R = polyring(self.p)
        return self.field(lift(R(self.field.f) // R(self.gen)))

    def small_generator(self) -> NfElem | None:
        """
        Look for a generator of the ideal among short vectors of its
        LLL-reduced basis. Returns None if the ideal does not look principal.
        """
        if self._generator_done:
            return self._generator
        self._generator_done = True
        K = self.field
        B = flint.fmpz_mat(self.basis()).lll()
        rows = B.table()
        candidates = list(rows)
        for i in range(len(rows)):
            for j in range(i):
                candidates.append([a + b for a, b in zip(rows[i], rows[j])])
                candidates.append([a - b for a, b in zip(rows[i], rows[j])])
        for v in candidates:
            x = K([int(c) for c in v])
            if x.is_zero():
                continue
            nx = x.norm()
            if nx == self.norm or nx == -self.norm:
                self._generator = x
                break
        return self._generator


def ideal_factorization(a: FacElem) -> dict[PrimeIdeal, int]:
    """
    Prime ideal factorization of a factored element, ignoring index divisors.
    """
    K = a.field
    ps = set()
    for b, _ in a.items():
        nb = b.norm()
        for x in (int(nb.p), int(nb.q), b.denominator()):
            ps.update(l for l, _ in integers.factor(x))
    result = {}
    for p in sorted(ps):
        if is_index_divisor(K, p):
            logger.warning(f"Ignoring index divisor {p} in ideal factorization")
            continue
        for P in prime_decomposition(K, p):
            v = P.valuation(a)
            if v:
                result[P] = v
    return result


class ResidueMap:
    """
    Reduction modulo a prime ideal P = (p, t(x)) of Z[x]/f.

    Reduction is split in two steps: a projection modulo p (numerator as a
    polynomial modulo p, denominator modulo p) which only depends on p and
    can be shared by all primes above p, and the reduction of that
    projection modulo t.
    """

    def __init__(self, P: PrimeIdeal):
        self.prime = P
        p = P.p
        self.p = p
        self.order = P.norm
        self.ring = polyring(p)
        self.modulus = self.ring(P.gen)
        if P.degree == 1:
            if p < WORD_BOUND:

                def scalar(v):
                    return flint.nmod(int(v) % p, p)

            else:
                ctx = flint.fmpz_mod_ctx(p)

                def scalar(v):
                    return ctx(int(v))

            self._scalar = scalar
            self._make = lambda coeffs: scalar(coeffs[0])
        else:
            ctx = flint.fq_default_ctx(
                p, P.degree, var="z", modulus=flint.fmpz_mod_poly_ctx(p)(P.gen)
            )
            self._scalar = lambda v: ctx(int(v))
            self._make = ctx
        self.one = self._scalar(1)

    def project(self, x: NfElem) -> tuple:
        return self.ring(x.numerator()), x.denominator() % self.p

    def project_facelem(self, a: FacElem) -> list[tuple]:
        return [self.project(b) for b, _ in a.items()]

    def image_projection(self, proj: tuple):
        num, den = proj
        if den == 0:
            raise BadPrime(self.prime, "denominator")
        r = lift(num % self.modulus)
        if not r:
            raise BadPrime(self.prime, "element vanishes")
        return self._make(r) / self._scalar(den)

    def image(self, x: NfElem):
        return self.image_projection(self.project(x))

    def image_facelem(self, a: FacElem, projections: list[tuple] | None = None):
        """
        Image of a factored element, with exponents reduced modulo
        the order of the multiplicative group. Raises BadPrime if
        any base is not a unit at P.
        """
        if projections is None:
            projections = self.project_facelem(a)
        q1 = self.order - 1
        result = self.one
        for proj, (_, e) in zip(projections, a.items()):
            result = result * self.image_projection(proj) ** (e % q1)
        return result
