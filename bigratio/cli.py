#!/usr/bin/env python3
"""Evaluate exact rational expressions from the command line."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import Settings, load_settings
from .errors import RationalError
from .rational import RationalNumber, json_default, rationalize

logger = logging.getLogger(__name__)


def nilakantha_pi(terms: int) -> RationalNumber:
    """Approximate pi with *terms* terms of the Nilakantha series.

    ``3 + 4/(2*3*4) - 4/(4*5*6) + 4/(6*7*8) - ...`` summed exactly.
    """
    value = RationalNumber(3)
    n = 2
    for index in range(terms):
        term = (4, n * (n + 1) * (n + 2))
        if index % 2 == 0:
            value = value.add(term)
        else:
            value = value.subtract(term)
        n += 2
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bigratio",
        description="Exact rational arithmetic with decimal rendering.",
    )
    parser.add_argument("--parfile", dest="parfile", help="TOML file with default settings")
    parser.add_argument("--precision", type=int, help="Fraction digits to print")
    parser.add_argument(
        "--max-iterations",
        dest="max_iterations",
        type=int,
        help="Newton updates allowed when a root has no exact value",
    )
    parser.add_argument(
        "--max-denominator",
        dest="max_denominator",
        type=int,
        help="Bound the denominator of intermediate root iterates",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="Print a value as decimal, fraction and JSON")
    show.add_argument("value", help="Decimal string or numerator/denominator")

    root = subparsers.add_parser("root", help="Print the DEGREE-th root of VALUE")
    root.add_argument("value")
    root.add_argument("degree")

    power = subparsers.add_parser("power", help="Print BASE raised to EXPONENT")
    power.add_argument("base")
    power.add_argument("exponent")

    pi = subparsers.add_parser("pi", help="Approximate pi with the Nilakantha series")
    pi.add_argument("--terms", type=int, help="Number of series terms")

    return parser


def parse_argument(text: str) -> RationalNumber:
    """Accept ``"n/d"`` as well as decimal strings."""
    if "/" in text:
        return RationalNumber.from_json(text)
    return rationalize(text)


def resolve_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.parfile) if args.parfile else Settings()
    return settings.merged(
        precision=args.precision,
        max_iterations=args.max_iterations,
        max_denominator=args.max_denominator,
        terms=getattr(args, "terms", None),
    )


def run(args: argparse.Namespace) -> List[str]:
    settings = resolve_settings(args)
    logger.debug("Running %s with %s", args.command, settings)

    if args.command == "show":
        value = parse_argument(args.value)
        return [
            f"decimal:  {value.to_string(settings.precision)}",
            f"fraction: {value.to_json()}",
            f"json:     {json.dumps(value, default=json_default)}",
        ]

    if args.command == "root":
        result = parse_argument(args.value).root(
            parse_argument(args.degree),
            settings.max_iterations,
            settings.max_denominator,
        )
    elif args.command == "power":
        result = parse_argument(args.base).power(
            parse_argument(args.exponent),
            settings.max_iterations,
            settings.max_denominator,
        )
    else:
        logger.info("Summing %d Nilakantha terms", settings.terms)
        result = nilakantha_pi(settings.terms)
        return [result.to_fixed(settings.precision)]

    return [result.to_string(settings.precision)]


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        lines = run(args)
    except (RationalError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
