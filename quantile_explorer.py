#!/usr/bin/env python3
"""
Command-line explorer for discrete distributions.

Usage:
    python quantile_explorer.py --family binomial --param n=10 --param p=0.5 --pmf 5 --cdf 5 --quantile 0.623
    python quantile_explorer.py --family poisson --param lam=4 --interval 4 6 --table
"""

import argparse
import logging
import sys

from discrete_dist_api import make_distribution, tabulate, DistKind, InvalidArgumentError, ConvergenceError

logger = logging.getLogger("quantile_explorer")

def _parse_param(text: str):
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=value, got {text!r}")
    try:
        number = int(value)
    except ValueError:
        try:
            number = float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"value of {name!r} is not a number: {value!r}") from None
    return name.strip(), number

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Evaluate PMF, CDF and quantiles of a discrete distribution.")
    parser.add_argument("--family", required=True,
                        help="binomial, poisson, geometric, pascal or hypergeometric")
    parser.add_argument("--param", action="append", type=_parse_param, default=[], metavar="NAME=VALUE",
                        help="distribution parameter (repeatable), e.g. n=10")
    parser.add_argument("--pmf", type=int, action="append", default=[], metavar="X", help="print P(X = x)")
    parser.add_argument("--cdf", type=int, action="append", default=[], metavar="X", help="print P(X <= x)")
    parser.add_argument("--interval", type=int, nargs=2, action="append", default=[], metavar=("X0", "X1"),
                        help="print P(x0 <= X <= x1)")
    parser.add_argument("--quantile", type=float, action="append", default=[], metavar="P",
                        help="print the smallest x with P(X <= x) >= p")
    parser.add_argument("--table", action="store_true", help="print the PMF/CDF table")
    parser.add_argument("--beta", type=float, default=1e-12, help="tail mass trimmed from tables")
    parser.add_argument("-v", "--verbose", action="store_true", help="log search details")
    return parser

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        dist = make_distribution(args.family, **dict(args.param))
        logger.info("distribution: %r (support %s)", dist, dist.support)
        for x in args.pmf:
            print(f"P(X = {x}) = {dist.probability(x):.10g}")
        for x in args.cdf:
            print(f"P(X <= {x}) = {dist.cumulative_probability(x):.10g}")
        for x0, x1 in args.interval:
            print(f"P({x0} <= X <= {x1}) = {dist.cumulative_probability(x0, x1):.10g}")
        for p in args.quantile:
            print(f"quantile({p}) = {dist.inverse_cumulative_probability(p)}")
        if args.table:
            pmf = tabulate(dist, DistKind.PMF, args.beta)
            cdf = tabulate(dist, DistKind.CDF, args.beta)
            print(f"{'x':>8} {'pmf':>14} {'cdf':>14}")
            for x, m, F in zip(pmf.x, pmf.vals, cdf.vals):
                print(f"{int(x):>8d} {m:>14.8g} {F:>14.8g}")
            print(f"tail mass: -inf {pmf.p_neg_inf:.3e}, +inf {pmf.p_pos_inf:.3e}")
    except (InvalidArgumentError, ConvergenceError) as e:
        logger.error("%s", e)
        return 2
    return 0

if __name__ == "__main__":
    sys.exit(main())
