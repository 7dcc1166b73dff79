"""
Search for prime ideals whose Frobenius elements generate
the automorphism group of a Kummer extension.

Candidate primes are scanned in increasing order. The state of the scan
is the list of accepted primes, their Frobenius elements and the quotient
of the automorphism group by the subgroup they generate. A Frobenius
element is accepted if it is nontrivial in the quotient and one of its
coordinates (in the Smith basis of the quotient) is invertible modulo the
corresponding invariant factor. The scan stops when the quotient is trivial.
"""

import logging
import math
from collections import namedtuple
from typing import Iterable, Iterator

from kummer import integers
from kummer.abelian import GroupElement
from kummer.extension import KummerExtension
from kummer.frobenius import _compute_frob, try_canonical_frobenius
from kummer.ideals import BadPrime, PrimeIdeal, is_index_divisor, prime_decomposition
from kummer.nf import FacElem, NumberField

logger = logging.getLogger("gens")

# Recompute each Frobenius element without shared projections
DEBUG_CHECK_FROBENIUS = False

# The scan fails after max(SEARCH_MIN_PRIMES, SEARCH_PRIMES_PER_ELEMENT * |G|)
# consecutive rational primes without a new generator.
SEARCH_MIN_PRIMES = 512
SEARCH_PRIMES_PER_ELEMENT = 64

SearchState = namedtuple("SearchState", ["primes", "frobenii", "quotient"])


def find_gens(
    K: KummerExtension,
    primes: Iterable[int] | None = None,
    coprime_to: int = 1,
    auxiliary: Iterable[FacElem] = (),
) -> tuple[list[PrimeIdeal], list[GroupElement]]:
    """
    Prime ideals of the base field whose Frobenius elements generate
    the automorphism group of K.

    primes: increasing stream of rational primes (all primes by default)
    coprime_to: rational primes dividing this integer are skipped
    auxiliary: factored elements which must be units at the selected primes

    The result is cached on K for each (coprime_to, auxiliary) pair.
    The scan fails with an AssertionError if too many consecutive primes
    bring no new generator, which happens when a generator has a smaller
    order than declared.
    """
    auxiliary = tuple(auxiliary)
    key = (int(coprime_to), auxiliary)
    if key in K.generating_primes:
        return K.generating_primes[key]

    k = K.base_field
    if primes is None:
        primes = integers.primes()
    threshold = degree_threshold(k)

    limit = max(SEARCH_MIN_PRIMES, SEARCH_PRIMES_PER_ELEMENT * K.group.order())
    unproductive = 0
    state = SearchState([], [], K.group.quotient([]))
    for p in primes:
        if state.quotient.is_trivial():
            break
        if coprime_to % p == 0 or K.n % p == 0 or is_index_divisor(k, p):
            continue
        before = len(state.primes)
        for P, z in frobenii_above(K, p, threshold, auxiliary):
            state = _step(state, P, z)
        unproductive = 0 if len(state.primes) > before else unproductive + 1
        assert unproductive < limit, (
            f"no new generator below p={p}, quotient invariants {state.quotient.invariants}: "
            f"generator orders {K.group.orders} may be larger than the actual orders"
        )
        logger.debug(f"After p={p}: quotient has invariants {state.quotient.invariants}")
    if not state.quotient.is_trivial():
        logger.warning(
            f"Prime stream exhausted, Frobenius elements generate a subgroup of index {state.quotient.order()}"
        )
        return state.primes, state.frobenii

    assert K.group.quotient(state.frobenii).is_trivial()
    logger.info(
        f"Found {len(state.primes)} generating primes for {K} (largest {state.primes[-1].p if state.primes else 1})"
    )
    result = (state.primes, state.frobenii)
    K.generating_primes[key] = result
    return result


def _step(state: SearchState, P: PrimeIdeal, z: GroupElement) -> SearchState:
    """
    Fold one Frobenius element into the search state.
    """
    Q = state.quotient
    coords = Q.coordinates(z)
    if not any(coords):
        return state
    # Some coordinate must be invertible for the quotient to shrink cleanly
    if all(math.gcd(c, d) != 1 for c, d in zip(coords, Q.invariants)):
        return state
    frobenii = state.frobenii + [z]
    logger.debug(f"Accepting {P} with Frobenius {list(z)}")
    return SearchState(state.primes + [P], frobenii, Q.group.quotient(frobenii))


def frobenii_above(
    K: KummerExtension, p: int, threshold: int, auxiliary: tuple = ()
) -> Iterator[tuple[PrimeIdeal, GroupElement]]:
    """
    Frobenius elements of the usable prime ideals above p, computed
    from a single projection of the generators modulo p.

    A prime is usable if its residue degree is below the threshold,
    its norm is 1 modulo n and it is not a bad prime for the generators
    or the auxiliary elements.
    """
    usable = [
        P
        for P in prime_decomposition(K.base_field, p)
        if P.degree < threshold and P.norm % K.n == 1
    ]
    projections = None
    for P in usable:
        if projections is None and P not in K.frobenius_cache:
            projections = K.project_generators(p)
        z = try_canonical_frobenius(P, K, projections)
        if isinstance(z, BadPrime):
            continue
        if auxiliary and not _units_at(P, auxiliary):
            continue
        if DEBUG_CHECK_FROBENIUS:
            aut = _compute_frob(K, P.residue_map(), K.project_generators(p))
            assert K.group(aut) == z, f"inconsistent Frobenius at {P}"
        yield P, z


def _units_at(P: PrimeIdeal, elements: tuple) -> bool:
    rmap = P.residue_map()
    for a in elements:
        try:
            rmap.image_facelem(a)
        except BadPrime:
            logger.debug(f"Skipping {P}: auxiliary element is not a unit")
            return False
    return True


def degree_threshold(k: NumberField) -> int:
    """
    Prime ideals of residue degree at least this bound are not used.
    """
    return max(k.degree // 5, 5)
