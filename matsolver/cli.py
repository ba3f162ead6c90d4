"""
MatSolver Command Line Interface

Usage:
    python main.py EXPRESSION -m NAME=ROWS [-m NAME=ROWS ...]
    python main.py --op {transpose,inverse,determinant,rank} -m NAME=ROWS
    python main.py --solve M N P -m M=... -m N=... -m P=...

Matrices are written row by row: values separated by commas, rows by
semicolons.

Examples:
    python main.py "A + B" -m "A=1,2;3,4" -m "B=5,6;7,8"
    python main.py "3A^t - B^2" -m "A=1,2;3,4" -m "B=5,6;7,8"
    python main.py --op inverse -m "A=1,2;3,4"
    python main.py --solve M N P -m "M=1,0;0,1" -m "N=1,1;1,1" -m "P=2,2;2,2"
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from matsolver import engine
from matsolver.errors import InvalidOperation, MatrixError
from matsolver.export import build_plain_text
from matsolver.matrix import Matrix

logger = logging.getLogger(__name__)


def parse_matrix(arg: str) -> Matrix:
    """Parse ``NAME=1,2;3,4`` into a ``Matrix``."""
    name, sep, body = arg.partition("=")
    name = name.strip()
    if not sep or not name or not body.strip():
        raise InvalidOperation(
            f"Matrix must be written as NAME=1,2;3,4 (got '{arg}')."
        )
    rows = []
    for row in body.split(";"):
        try:
            rows.append([float(v) for v in row.split(",")])
        except ValueError:
            raise InvalidOperation(f"Matrix {name} has a non-numeric value in row '{row.strip()}'.")
    return Matrix.from_rows(name, rows)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="matsolver",
        description="Evaluate matrix expressions step by step.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "expression", nargs="?",
        help='Expression to evaluate, e.g. "3A^t - B^2"',
    )
    parser.add_argument(
        "-m", "--matrix", action="append", default=[], metavar="NAME=ROWS",
        help="Named matrix, rows separated by ';' and values by ','",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--op", choices=[op.value.lower() for op in engine.BASIC_OPS],
        help="Apply a basic operation to the first matrix",
    )
    mode.add_argument(
        "--solve", nargs=3, metavar=("M", "N", "P"),
        help="Solve M·X + N = P using the named matrices",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print the full result as JSON instead of text",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    return parser


def run(args: argparse.Namespace) -> dict:
    """Dispatch parsed arguments to the engine and return the result dict."""
    matrices = [parse_matrix(arg) for arg in args.matrix]
    context = {m.name: m for m in matrices}

    if args.solve:
        missing = [name for name in args.solve if name not in context]
        if missing:
            raise InvalidOperation(f"Matrix not found: {', '.join(missing)}")
        m, n, p = (context[name] for name in args.solve)
        return engine.build_equation_result(m, n, p)
    if args.op:
        return engine.build_basic_op_result(matrices, args.op.upper())
    if not args.expression:
        raise InvalidOperation("Give an expression, --op or --solve.")
    return engine.build_expression_result(args.expression, matrices)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = run(args)
    except MatrixError as e:
        logger.debug("Request rejected: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print(build_plain_text(result))
    return 0
