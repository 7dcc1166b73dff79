"""
Reduction of elements modulo n-th powers

Kummer generators are only defined up to n-th powers, and repeated
exponentiation makes their factored representation grow quickly.
reduce_mod_powers returns a small integral element b such that a/b is
an n-th power in the base field.

Sizes are estimated with logarithms of the absolute values of the
conjugates, computed in interval arithmetic (flint.arb) at low precision.
"""

import logging
import math

import flint

from kummer import integers
from kummer.ideals import PrimeIdeal, ideal_factorization
from kummer.nf import FacElem, NfElem

logger = logging.getLogger("reduce")

LOG_PRECISION = 64
MAX_LOG_PRECISION = 4096
# Principal prime ideals of residue degree up to this bound are
# divided out using a short generator.
GENERATOR_MAX_DEGREE = 2


def conjugates_log(a: FacElem, prec: int = LOG_PRECISION) -> list[flint.arb]:
    """
    Enclosures of log |s(a)| for all complex embeddings s of the base field.

    The precision is doubled until no factor has an absolute value
    whose enclosure contains zero.
    """
    a = FacElem.from_element(a)
    K = a.field
    while True:
        with flint.ctx.workprec(prec):
            logs = _conjugates_log(a, K.complex_roots(prec))
        if logs is not None:
            return logs
        if prec >= MAX_LOG_PRECISION:
            raise ValueError(f"unable to bound conjugates of {a} at precision {prec}")
        prec *= 2
        logger.debug(f"Increasing precision to {prec} bits")


def _conjugates_log(a: FacElem, roots: list[flint.acb]) -> list[flint.arb] | None:
    logs = []
    for z in roots:
        s = flint.arb(0)
        for b, e in a.items():
            v = abs(b.evaluate(z))
            if not v.lower() > 0:
                return None
            s += e * v.log()
        logs.append(s)
    return logs


def log_height(a: FacElem) -> float:
    """
    Upper bound for the largest |log |s(a)|| over complex embeddings
    """
    return max((float(abs(x).upper()) for x in conjugates_log(a)), default=0.0)


def _content(x: NfElem) -> flint.fmpq:
    num = x.numerator()
    g = 0
    for c in num:
        g = math.gcd(g, c)
    return flint.fmpq(g, x.denominator())


def compact_presentation(
    a: FacElem, n: int, decom: dict[PrimeIdeal, int] | None = None
) -> FacElem:
    """
    A factored element equal to a, where exponents that are not
    multiples of n only apply to small bases.

    Bases are split into their rational content (factored over the
    rational primes) and a primitive integral part. The product of
    primitive parts with exponents reduced modulo n is expanded, and
    for prime ideals listed in decom which have a short generator pi,
    the largest power pi^(n*k) dividing it is removed.
    """
    K = a.field
    if n < 1:
        raise ValueError(f"invalid exponent {n}")
    content = flint.fmpq(1)
    fac = {}
    alpha = K.one()
    for b, e in a.items():
        c = _content(b)
        prim = b / c
        content *= c**e if e >= 0 else 1 / c ** (-e)
        q, r = divmod(e, n)
        if q:
            fac[prim] = fac.get(prim, 0) + n * q
        alpha = alpha * prim**r

    # Contents are positive, signs stay in the primitive parts
    for l, v in integers.factor(int(content.p)):
        fac[K(l)] = fac.get(K(l), 0) + v
    for l, v in integers.factor(int(content.q)):
        fac[K(l)] = fac.get(K(l), 0) - v

    for P in decom or ():
        if P.degree > GENERATOR_MAX_DEGREE or P.is_index_divisor():
            continue
        w = P.valuation(alpha)
        m = n * (w // n)
        if m == 0:
            continue
        pi = P.small_generator()
        if pi is None:
            logger.debug(f"No small generator for {P}")
            continue
        logger.debug(f"Dividing by generator of {P} to the power {m}")
        alpha = alpha / pi**m
        fac[pi] = fac.get(pi, 0) + m

    if not alpha.is_one():
        fac[alpha] = fac.get(alpha, 0) + 1
    return FacElem(K, fac)


def reduce_mod_powers(a, n: int, primes=None) -> FacElem:
    """
    A small integral element b such that a/b is an n-th power.

    primes is an optional prime ideal factorization of a, either as
    a list of prime ideals or as a dictionary of valuations.
    """
    if isinstance(a, NfElem):
        if a.is_zero():
            raise ValueError("cannot reduce zero modulo powers")
        a = FacElem.from_element(a)
    K = a.field
    logger.debug(f"Reducing {a} modulo {n}-th powers")

    if isinstance(primes, dict):
        decom = primes
    elif primes is not None:
        vals = {P: P.valuation(a) for P in primes}
        decom = {P: v for P, v in vals.items() if v != 0}
    else:
        decom = None

    a1 = a.mod_exponents(n)
    bn = log_height(a)
    bn1 = log_height(a1)
    if bn1 < math.sqrt(bn):
        b = compact_presentation(a1, n)
    else:
        if decom is None:
            decom = ideal_factorization(a)
        b = compact_presentation(a, n, decom)

    b1 = K.one()
    for k, v in b.items():
        if v % n:
            b1 = b1 * k ** (v % n)
    d = b1.denominator()
    kd, d1 = integers.is_perfect_power(d)
    if kd > 1:
        d = d1 ** (kd // n + 1)
    # Not optimal, but integral
    b1 = b1 * d**n
    logger.debug(f"Reduced modulo {n}-th powers to {b1}")
    return FacElem.from_element(b1)
