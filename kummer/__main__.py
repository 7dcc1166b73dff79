import argparse
import logging

from kummer import integers
from kummer.extension import KummerExtension
from kummer.findgens import degree_threshold, find_gens, frobenii_above
from kummer.ideals import is_index_divisor
from kummer.nf import NfElem, NumberField, cyclotomic_field
from kummer.reduction import reduce_mod_powers
from kummer.subfield import is_subfield
import kummer.logging


def main():
    argp = argparse.ArgumentParser(prog="kummer")
    argp.add_argument("-v", "--verbose", action="store_true")

    field_args = argp.add_argument_group("Base field options")
    field_args.add_argument(
        "--field",
        default="0,1",
        help="Coefficients of the monic defining polynomial (constant term first)",
    )
    field_args.add_argument(
        "--cyclotomic", type=int, help="Use the cyclotomic field of order ARG"
    )
    field_args.add_argument("--zeta", help="Root of unity of the base field")
    field_args.add_argument("--zeta-order", type=int, help="Order of the root of unity")

    kummer_args = argp.add_argument_group("Kummer extension options")
    kummer_args.add_argument("-n", type=int, default=2, help="Exponent of the extension")
    kummer_args.add_argument(
        "--bound", type=int, default=100, help="Bound for rational primes (frobenius)"
    )
    kummer_args.add_argument(
        "--sub", nargs="+", default=[], help="Generators of the subextension (subfield)"
    )
    kummer_args.add_argument(
        "--gens", nargs="+", default=[], help="Generators of the extension (subfield)"
    )

    argp.add_argument("METHOD", choices=("frobenius", "gens", "subfield", "reduce"))
    argp.add_argument(
        "ARGS",
        nargs="*",
        type=str,
        help="Elements as comma separated coefficients (1,0,2/3 is 1+2/3 x^2)",
    )
    args = argp.parse_args()

    # Logger names should have length <= 6 (field, frob, gens, embed, reduce)
    level = logging.DEBUG if args.verbose else logging.INFO
    kummer.logging.setup(level)
    main_impl(args)


def base_field(args) -> NumberField:
    if args.cyclotomic:
        return cyclotomic_field(args.cyclotomic)
    f = [int(c) for c in args.field.split(",")]
    return NumberField(f, args.zeta, args.zeta_order)


def format_elem(x: NfElem) -> str:
    return ",".join(str(c) for c in x.coeffs())


def main_impl(args):
    logger = logging.getLogger("main")
    k = base_field(args)
    zeta, o = k.torsion_generator()
    logger.info(f"Base field {k} of degree {k.degree}, roots of unity of order {o}")

    match args.METHOD:
        case "frobenius":
            E = KummerExtension(args.n, [k(g) for g in args.ARGS])
            threshold = degree_threshold(k)
            for p in integers.primes(2, args.bound):
                if E.n % p == 0 or is_index_divisor(k, p):
                    continue
                for P, z in frobenii_above(E, p, threshold):
                    print(P.p, ",".join(str(c) for c in P.gen), *z)
            logger.info(
                f"Computed {len(E.frobenius_cache)} Frobenius elements with {E.projection_count} projections"
            )
        case "gens":
            E = KummerExtension(args.n, [k(g) for g in args.ARGS])
            primes, frobs = find_gens(E)
            for P, z in zip(primes, frobs):
                print(P.p, ",".join(str(c) for c in P.gen), *z)
        case "subfield":
            if not args.sub or not args.gens:
                raise ValueError("subfield requires --sub and --gens")
            K = KummerExtension(args.n, [k(g) for g in args.sub])
            L = KummerExtension(args.n, [k(g) for g in args.gens])
            fl, data = is_subfield(K, L)
            print(fl)
            if fl:
                for rt, coords in data:
                    print(*coords, format_elem(rt.evaluate()))
        case "reduce":
            for s in args.ARGS:
                b = reduce_mod_powers(k(s), args.n)
                print(format_elem(b.evaluate()))
        case _:
            raise NotImplementedError


if __name__ == "__main__":
    main()
