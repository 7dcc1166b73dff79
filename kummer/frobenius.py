"""
Canonical Frobenius elements of Kummer extensions

Let K = k(g1^(1/d1), ..., gr^(1/dr)) and P a prime of k with N(P) = 1 mod n,
coprime to n and to the generators. Then Frob(P) maps the root
gi^(1/di) to gi^(1/di) ^ N(P), that is, to gi^((N(P)-1)/di) gi^(1/di).
The factor gi^((N(P)-1)/di) is a di-th root of unity modulo P: it is
zeta^(n/di * ai) and the coordinate ai is recovered by trial multiplication
in the residue field (di is a divisor of n and is usually small).
"""

import logging

from kummer.abelian import GroupElement
from kummer.extension import KummerExtension
from kummer.ideals import BadPrime, PrimeIdeal, ResidueMap
from kummer.nf import FacElem

logger = logging.getLogger("frob")


def canonical_frobenius(
    P: PrimeIdeal, K: KummerExtension, projections: list | None = None
) -> GroupElement:
    """
    Frobenius element of P in the automorphism group of K.

    The optional projections are the generators reduced modulo the
    residue characteristic (see KummerExtension.project_generators):
    callers iterating over conjugate primes compute them once.

    Raises BadPrime if P divides the index of the equation order
    or if a generator does not reduce to a unit modulo P.
    """
    if P.norm % K.n != 1:
        raise ValueError(f"norm of {P} is not 1 modulo {K.n}")
    if (z := K.frobenius_cache.get(P)) is not None:
        return z
    if P.is_index_divisor():
        # Residue maps of Z[x] and of the maximal order do not agree.
        raise BadPrime(P, "index divisor")
    if projections is None:
        projections = K.project_generators(P.p)
    aut = _compute_frob(K, P.residue_map(), projections)
    z = K.group(aut)
    K.frobenius_cache[P] = z
    logger.debug(f"Frobenius of {P} is {list(z)}")
    return z


def try_canonical_frobenius(
    P: PrimeIdeal, K: KummerExtension, projections: list | None = None
) -> GroupElement | BadPrime:
    """
    Same as canonical_frobenius, but a bad prime is returned instead
    of being raised.
    """
    try:
        return canonical_frobenius(P, K, projections)
    except BadPrime as e:
        logger.debug(f"Skipping {P}: {e}")
        return e


def _compute_frob(K: KummerExtension, rmap: ResidueMap, projections: list) -> list[int]:
    n = K.n
    # Inverse of zeta modulo P
    z_p = rmap.image(K.zeta) ** (n - 1)
    aut = []
    for j, (g, proj) in enumerate(zip(K.reduced_generators(), projections)):
        d = K.order(j)
        ex = (rmap.order - 1) // d
        mu = rmap.image_facelem(g, proj) ** ex
        aut.append(_discrete_log(mu, z_p ** (n // d), n, rmap.one))
    return aut


def _discrete_log(mu, z, bound: int, one) -> int:
    """
    Smallest i >= 0 such that mu * z^i == 1
    """
    i = 0
    while mu != one:
        i += 1
        assert i <= bound, "residue is not a root of unity of the expected order"
        mu = mu * z
    return i


def frobenius_exponent(P: PrimeIdeal, K: KummerExtension, g: FacElem) -> int:
    """
    Exponent i such that Frob(P) maps g^(1/n) to zeta^i g^(1/n),
    for an arbitrary element g (not one of the generators of K).

    The result is not cached.
    """
    n = K.n
    if P.norm % n != 1:
        raise ValueError(f"norm of {P} is not 1 modulo {n}")
    if P.is_index_divisor():
        raise BadPrime(P, "index divisor")
    rmap = P.residue_map()
    z_p = rmap.image(K.zeta) ** (n - 1)
    g = FacElem.from_element(g).mod_exponents(n)
    mu = rmap.image_facelem(g) ** ((P.norm - 1) // n)
    return _discrete_log(mu, z_p, n, rmap.one)
