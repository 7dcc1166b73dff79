"""
Kummer extensions of exponent n

A Kummer extension of a number field k containing the n-th roots of unity
is k(g1^(1/d1), ..., gr^(1/dr)) where each di divides n. Its automorphism
group is identified with Z/d1 x ... x Z/dr: the element (a1, ..., ar)
maps the root gi^(1/di) to zeta^(n/di * ai) gi^(1/di), where zeta is the
distinguished primitive n-th root of unity of k.

The extension object is immutable apart from caches (Frobenius elements,
generators reduced modulo their order, generating primes), which are
filled on first use and never invalidated.
"""

import logging
import math

from kummer.abelian import AbelianGroup
from kummer.ideals import polyring
from kummer.nf import FacElem, NfElem, NumberField

logger = logging.getLogger("frob")


class KummerExtension:
    n: int
    zeta: NfElem
    gens: list[FacElem]
    group: AbelianGroup

    def __init__(self, n: int | list[int], gens: list):
        if not gens:
            raise ValueError("a Kummer extension needs at least one generator")
        gens = [_as_facelem(g) for g in gens]
        k = gens[0].field
        if any(g.field is not k for g in gens):
            raise ValueError("generators belong to different number fields")

        if isinstance(n, int):
            orders = [n] * len(gens)
        else:
            orders = [int(d) for d in n]
            if len(orders) != len(gens):
                raise ValueError(f"expected {len(gens)} exponents, got {orders}")
            n = math.lcm(*orders)
        if n < 1 or any(d < 1 or n % d for d in orders):
            raise ValueError(f"invalid exponents {orders}")

        zeta, o = k.torsion_generator()
        if o % n != 0:
            raise ValueError(
                f"base field only has roots of unity of order {o}, cannot build exponent {n}"
            )
        self.n = n
        self.zeta = zeta ** (o // n)
        self.gens = gens
        self.group = AbelianGroup(orders)

        self.frobenius_cache = {}
        self.generating_primes = {}
        self.projection_count = 0
        self._reduced_gens = None

    def __repr__(self):
        return f"KummerExtension with structure {self.group.orders}"

    @property
    def base_field(self) -> NumberField:
        return self.gens[0].field

    @property
    def exponent(self) -> int:
        return self.group.exponent()

    @property
    def degree(self) -> int:
        return self.group.order()

    def order(self, i: int) -> int:
        """
        Order of the i-th generator (a divisor of n)
        """
        return self.group.orders[i]

    def is_cyclic(self) -> bool:
        return len(self.gens) == 1 or self.group.is_cyclic()

    def reduced_generators(self) -> list[FacElem]:
        """
        Generators with exponents reduced modulo their own order.
        """
        if self._reduced_gens is None:
            self._reduced_gens = [
                g.mod_exponents(d) for g, d in zip(self.gens, self.group.orders)
            ]
        return self._reduced_gens

    def project_generators(self, p: int) -> list[list[tuple]]:
        """
        Projections modulo p of the bases of the reduced generators
        (numerator polynomial, denominator residue). They only depend
        on p and are shared by all prime ideals above p.
        """
        R = polyring(p)
        self.projection_count += 1
        logger.debug(f"Projecting {len(self.gens)} generators modulo {p}")
        return [
            [(R(b.numerator()), b.denominator() % p) for b, _ in g.items()]
            for g in self.reduced_generators()
        ]

    def defining_polynomials(self) -> list[list[NfElem]]:
        """
        Relative defining polynomials t^di - gi (coefficients from the
        constant term), one per generator
        """
        k = self.base_field
        pols = []
        for g, d in zip(self.gens, self.group.orders):
            pols.append([-g.evaluate()] + [k(0)] * (d - 1) + [k.one()])
        return pols


def _as_facelem(g) -> FacElem:
    if isinstance(g, (FacElem, NfElem)):
        return FacElem.from_element(g)
    raise TypeError(f"cannot use {g!r} as a Kummer generator")


def kummer_extension(n: int | list[int], gens: list, field: NumberField | None = None):
    """
    Kummer extension of exponent n (or with per-generator orders n[i])
    generated by roots of gens. Plain integers, fractions or coefficient
    lists are accepted as generators if the base field is given.
    """
    if field is not None:
        gens = [g if isinstance(g, (FacElem, NfElem)) else field(g) for g in gens]
    return KummerExtension(n, gens)
