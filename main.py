#!/usr/bin/env python3
"""
ArrayFactors: factored representation of multidimensional arrays

Command-line front end for building and materializing array factors.

Usage:
    # Materialize factors given on the command line
    python main.py materialize --factors "[[1,2,3],[4,5]]"
    python main.py materialize --factors "[[1,2,3],[[4,5],[6,7]]]" --dims "[1,[0,2]]"

    # Run demos
    python main.py demo --example shared

    # Show info
    python main.py info
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

import numpy as np

from arrayfactors import ArrayFactors, ArrayFactorsError, __version__

logger = logging.getLogger("arrayfactors.cli")


def parse_factors_string(factors_str: str) -> List[np.ndarray]:
    """Parse factor specification: '[[1,2,3],[[4,5],[6,7]]]' (JSON list of arrays)"""
    data = json.loads(factors_str)
    if not isinstance(data, list):
        raise ValueError("--factors must be a JSON list of (nested) lists")
    return [np.array(f) for f in data]


def parse_dims_string(dims_str: Optional[str]) -> Optional[List[Any]]:
    """Parse ownership specification: '[1,[0,2]]' (JSON list of ints or int lists)"""
    if dims_str is None:
        return None
    data = json.loads(dims_str)
    if not isinstance(data, list):
        raise ValueError("--dims must be a JSON list")
    return data


def cmd_materialize(args):
    """Execute the materialize command."""
    try:
        factors = parse_factors_string(args.factors)
        dims = parse_dims_string(args.dims)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        print(f"Error: {e}")
        return 1

    try:
        af = ArrayFactors(factors, dims)
    except ArrayFactorsError as e:
        print(f"Error: {e}")
        return 1

    print(af)
    print(f"\nSize: {af.size}")
    print(f"Element type: {af.dtype}")
    print(f"\nArray:")
    print(af.to_array())
    return 0


def demo_outer():
    """Demo: outer product of three vectors"""
    print("=" * 60)
    print("Demo: Outer Product")
    print("=" * 60)

    a = np.array([1, 2, 3])
    b = np.array([4, 5])
    c = np.array([6, 7])
    af = ArrayFactors([a, b, c])

    print()
    print(af)
    M = af.to_array()
    print(f"\nMaterialized {M.shape} array, dtype {M.dtype}")

    M_brute = np.einsum("i,j,k->ijk", a, b, c)
    match = bool(np.array_equal(M, M_brute))
    print(f"\nVerification (einsum): match = {match}")
    return match


def demo_shared():
    """Demo: multidimensional factor owning non-contiguous dimensions"""
    print("=" * 60)
    print("Demo: Non-contiguous Ownership")
    print("=" * 60)

    A = np.array([1, 2, 3])
    B = np.array([[4, 5], [6, 7]])
    af = ArrayFactors([A, B], [1, [0, 2]])

    print()
    print(af)
    M = af.to_array()
    print(f"\nMaterialized {M.shape} array")

    M_brute = np.zeros(af.size, dtype=af.dtype)
    for i in range(af.size[0]):
        for j in range(af.size[1]):
            for k in range(af.size[2]):
                M_brute[i, j, k] = B[i, k] * A[j]
    match = bool(np.array_equal(M, M_brute))
    print(f"\nVerification (brute force): match = {match}")
    return match


def demo_mixed():
    """Demo: integer and floating factors promote to floating"""
    print("=" * 60)
    print("Demo: Type Promotion")
    print("=" * 60)

    a = np.array([1, 2, 3], dtype=np.int64)
    b = np.array([0.5, 0.25])
    af = ArrayFactors([a, b])

    print()
    print(af)
    M = af.to_array()
    print(f"\nElement type: {M.dtype}")

    match = M.dtype == np.float64 and bool(np.allclose(M, np.outer(a, b)))
    print(f"\nVerification (np.outer): match = {match}")
    return match


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "outer": demo_outer,
        "shared": demo_shared,
        "mixed": demo_mixed,
    }

    names = list(demos) if args.example == "all" else [args.example]
    results = []
    for name in names:
        try:
            passed = demos[name]()
        except ArrayFactorsError as e:
            print(f"Error in {name}: {e}")
            passed = False
        results.append((name, passed))
        print()

    print("=" * 60)
    print("Summary")
    print("=" * 60)
    all_passed = True
    for name, passed in results:
        status = "PASS" if passed else "FAIL"
        print(f"  {name}: {status}")
        if not passed:
            all_passed = False
    return 0 if all_passed else 1


def cmd_info(args):
    """Display system information."""
    print(f"ArrayFactors v{__version__}")
    print("Factored representation of multidimensional arrays")
    print()
    print("An array is stored as factors whose broadcast product reconstructs it.")
    print("Each factor owns any subset of the array's dimensions.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arrayfactors",
        description="ArrayFactors: factored representation of multidimensional arrays",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Outer product of two vectors
  arrayfactors materialize --factors "[[1,2,3],[4,5]]"

  # Factor 1 owns dimension 1, factor 2 owns dimensions 0 and 2
  arrayfactors materialize --factors "[[1,2,3],[[4,5],[6,7]]]" --dims "[1,[0,2]]"

  # Run demos
  arrayfactors demo --example all
"""
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"ArrayFactors {__version__}"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Materialize command
    mat_parser = subparsers.add_parser("materialize", help="Build factors and print the dense array")
    mat_parser.add_argument("--factors", "-f", type=str, required=True, help="Factors: JSON list of arrays")
    mat_parser.add_argument("--dims", "-d", type=str, help="Owned dimensions per factor: JSON list")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-e",
        choices=["outer", "shared", "mixed", "all"],
        default="all",
        help="Which example to run (default: all)"
    )

    # Info command
    subparsers.add_parser("info", help="Show system information")

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(name)s %(levelname)s: %(message)s")
    logger.debug("command: %s", args.command)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "materialize":
        return cmd_materialize(args)
    elif args.command == "demo":
        return cmd_demo(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
