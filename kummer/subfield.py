"""
Embeddings of Kummer extensions

Let K and L be Kummer extensions of the same base field k, with exponents
dividing n = exponent(L). For a generator g of K of order d, the root
g^(1/d) is the n-th root of h = g^(n/d), and Frob(P) acts on it by
multiplication by zeta^chi(P) where chi(P) is computed by frobenius_exponent.

If g^(1/d) belongs to L, it is b * prod(r_j^c_j) for some b in k, where
r_j = gen_j^(1/d_j) are the roots generating L. Then chi is the character
of Gal(L/k) given by chi(s) = sum(c_j * (n/d_j) * s_j) mod n. Its values on
the basis of Gal(L/k) are obtained from the generating primes of L,
which determines c. The candidate is then confirmed on additional primes.
"""

import logging
import math

from kummer import integers
from kummer.abelian import GroupElement
from kummer.extension import KummerExtension
from kummer.findgens import degree_threshold, find_gens, frobenii_above
from kummer.frobenius import frobenius_exponent
from kummer.ideals import PrimeIdeal, is_index_divisor
from kummer.nf import FacElem

logger = logging.getLogger("embed")

# Number of additional primes used to confirm an embedding
EMBEDDING_CHECKS = 16


def is_subfield(
    K: KummerExtension, L: KummerExtension
) -> tuple[bool, list[tuple[FacElem, list[int]]]]:
    """
    Decide whether K is a subfield of L.

    Returns (True, data) where data[i] = (rt, c) for the i-th generator g
    of K (of order d): c are coordinates with respect to the generators
    of L and rt = g^(n/d) / prod(gen_j^(c_j * n/d_j)) is an n-th power in
    the base field (n the exponent of L).

    If K is not a subfield of L, returns False and placeholder data.
    """
    if K.base_field is not L.base_field:
        raise ValueError("Kummer extensions have different base fields")
    if L.exponent % K.exponent != 0:
        raise ValueError(f"exponent {K.exponent} does not divide {L.exponent}")

    norms = []
    for g in K.gens + L.gens:
        nrm = g.norm()
        norms += [int(nrm.p), int(nrm.q)]
    norms.append(L.exponent)
    coprime_to = math.lcm(*integers.coprime_base(norms))
    logger.debug(f"Looking for primes coprime to {coprime_to}")

    lP, frobs = find_gens(L, coprime_to=coprime_to, auxiliary=K.gens)
    placeholder = (FacElem(L.base_field), [0] * len(L.gens))
    result = []
    for i, g in enumerate(K.gens):
        fl, coords, rt = find_embedding(L, g, K.order(i), lP, frobs, coprime_to)
        if not fl:
            logger.info(f"Generator {i} of {K} has no image in {L}")
            return False, [placeholder] * len(K.gens)
        result.append((rt, coords))
    logger.info(f"{K} embeds into {L}")
    return True, result


def find_embedding(
    L: KummerExtension,
    g: FacElem,
    d: int,
    primes: list[PrimeIdeal],
    frobenii: list[GroupElement],
    coprime_to: int = 1,
    checks: int | None = None,
) -> tuple[bool, list[int], FacElem]:
    """
    Try to express the d-th root of g in terms of the roots generating L,
    using the Frobenius elements of generating primes of L.

    Returns (True, coordinates, rt) or (False, zero coordinates, trivial element).
    """
    n = L.exponent
    if n % d != 0:
        raise ValueError(f"order {d} does not divide {n}")
    if checks is None:
        checks = EMBEDDING_CHECKS
    G = L.group
    h = FacElem.from_element(g) ** (n // d)
    failure = (False, [0] * G.ngens(), FacElem(L.base_field))

    chis = [frobenius_exponent(P, L, h) for P in primes]
    coords = []
    for j in range(G.ngens()):
        m = G.solve(frobenii, G[j])
        assert m is not None, "Frobenius elements do not generate the group"
        chi = sum(mi * ci for mi, ci in zip(m, chis)) % n
        step = n // L.order(j)
        if chi % step:
            logger.debug(f"Character value {chi} on generator {j} is not a multiple of {step}")
            return failure
        coords.append((chi // step) % L.order(j))

    def expected(z: GroupElement) -> int:
        return sum(c * (n // L.order(j)) * z[j] for j, c in enumerate(coords)) % n

    for P, z, chi in zip(primes, frobenii, chis):
        if expected(z) != chi:
            logger.debug(f"Inconsistent character values at {P}")
            return failure
    for P, z in _check_primes(L, coprime_to, set(primes), h, checks):
        chi = frobenius_exponent(P, L, h)
        if expected(z) != chi:
            logger.debug(f"Embedding candidate {coords} fails at {P}")
            return failure

    rt = h
    for gen, c, dj in zip(L.gens, coords, G.orders):
        rt = rt / gen ** (c * (n // dj))
    return True, coords, rt


def _check_primes(L: KummerExtension, coprime_to: int, skip: set, h: FacElem, count: int):
    k = L.base_field
    threshold = degree_threshold(k)
    found = 0
    for p in integers.primes():
        if found >= count:
            return
        if coprime_to % p == 0 or L.exponent % p == 0 or is_index_divisor(k, p):
            continue
        for P, z in frobenii_above(L, p, threshold, (h,)):
            if P in skip:
                continue
            yield P, z
            found += 1
            if found >= count:
                return
