""" Public entry points of the matrix expression engine."""

"""
Three operations are exposed to collaborators (the CLI, the HTTP backend,
any UI):

  - ``evaluate_expression("3A^t - B^2", matrices)``
  - ``calculate_basic_op(matrices, OperationType.INVERSE)``
  - ``solve_equation(M, N, P)``  for  ``M·X + N = P``

Each returns ``(Matrix, steps)`` or raises a ``MatrixError``.  The
``build_*_result`` helpers wrap the same calls into the trail-format dict
used for display and export (given, steps, result, summary).
"""

import logging
import time
from datetime import datetime
from enum import Enum

import numpy as np

from matsolver import equation, kernel
from matsolver.config import DEFAULT_RESULT_NAME, EQUATION_RESULT_NAME
from matsolver.errors import EmptyExpression, InvalidOperation
from matsolver.evaluator import Scalar, evaluate
from matsolver.kernel import matrix_step
from matsolver.matrix import Matrix, as_context
from matsolver.parser import to_postfix
from matsolver.tokenizer import tokenize

logger = logging.getLogger(__name__)


class OperationType(str, Enum):
    ADD = "ADD"
    SUBTRACT = "SUBTRACT"
    MULTIPLY = "MULTIPLY"
    SCALAR_MULT = "SCALAR_MULT"
    EXPRESSION = "EXPRESSION"
    TRANSPOSE = "TRANSPOSE"
    INVERSE = "INVERSE"
    DETERMINANT = "DETERMINANT"
    RANK = "RANK"
    POWER = "POWER"
    EQUATION = "EQUATION"


BASIC_OPS = (
    OperationType.TRANSPOSE,
    OperationType.INVERSE,
    OperationType.DETERMINANT,
    OperationType.RANK,
)


# ── Core API ────────────────────────────────────────────────────────────

def evaluate_expression(expression: str, matrices) -> tuple:
    """Evaluate an algebraic expression over named matrices.

    *matrices* is a list of ``Matrix`` or a ``name -> grid`` mapping.
    A scalar result is returned as a 1x1 matrix.
    """
    if not expression or not expression.strip():
        raise EmptyExpression()

    context = as_context(matrices)
    tokens = tokenize(expression)
    postfix = to_postfix(tokens)
    logger.debug("Evaluating %r as %d postfix tokens", expression, len(postfix))
    value, steps = evaluate(postfix, context)

    if isinstance(value, Scalar):
        return Matrix(DEFAULT_RESULT_NAME, [[kernel.clean(value.value)]]), steps
    return Matrix(DEFAULT_RESULT_NAME, value.grid), steps


def calculate_basic_op(matrices, op) -> tuple:
    """Apply a single-operand operation to the first of *matrices*.

    Determinant and rank are returned as 1x1 matrices.
    """
    matrices = list(as_context(matrices).values())
    if not matrices:
        raise InvalidOperation("No matrix was given for the operation.")
    try:
        op = OperationType(op)
    except ValueError:
        raise InvalidOperation(f"Unknown operation: {op}")

    target = matrices[0]
    logger.debug("Basic operation %s on %s (%dx%d)",
                 op.value, target.name, target.rows, target.cols)

    if op == OperationType.DETERMINANT:
        value, steps = kernel.determinant(target.data)
        return Matrix(DEFAULT_RESULT_NAME, [[value]]), steps
    if op == OperationType.RANK:
        value, steps = kernel.rank(target.data)
        return Matrix(DEFAULT_RESULT_NAME, [[float(value)]]), steps
    if op == OperationType.INVERSE:
        result, steps = kernel.inverse(target.data, label=target.name)
        steps.append(matrix_step(f"{target.name}⁻¹", result))
        return Matrix(DEFAULT_RESULT_NAME, result), steps
    if op == OperationType.TRANSPOSE:
        result, steps = kernel.transpose(target.data)
        steps.append(matrix_step(f"{target.name}^t", result))
        return Matrix(DEFAULT_RESULT_NAME, result), steps
    raise InvalidOperation(
        f"Operation {op.value} is not a basic operation; use an expression instead."
    )


def solve_equation(m: Matrix, n: Matrix, p: Matrix) -> tuple:
    """Solve ``M·X + N = P`` and return ``(X, steps)``."""
    logger.debug("Solving %s·X + %s = %s", m.name, n.name, p.name)
    x, steps = equation.solve(m, n, p)
    return Matrix(EQUATION_RESULT_NAME, x), steps


# ── Trail-format results ────────────────────────────────────────────────

def _given(matrices) -> dict:
    return {
        name: {"rows": m.rows, "cols": m.cols, "data": m.to_list()}
        for name, m in matrices.items()
    }


def _summary(steps: list, t_start: float) -> dict:
    runtime_ms = round((time.perf_counter() - t_start) * 1000, 2)
    return {
        "runtime_ms": runtime_ms,
        "total_steps": len(steps),
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "library": f"NumPy {np.__version__}",
    }


def _result_block(result: Matrix) -> dict:
    return {
        "name": result.name,
        "rows": result.rows,
        "cols": result.cols,
        "data": result.to_list(),
    }


def build_expression_result(expression: str, matrices) -> dict:
    """Evaluate *expression* and return a display-ready result dict."""
    t_start = time.perf_counter()
    context = as_context(matrices)
    result, steps = evaluate_expression(expression, context)
    return {
        "title": f"Expression: {expression.strip()}",
        "operation": OperationType.EXPRESSION.value,
        "expression": expression.strip(),
        "given": _given(context),
        "result": _result_block(result),
        "steps": steps,
        "summary": _summary(steps, t_start),
    }


def build_basic_op_result(matrices, op) -> dict:
    """Run a basic operation and return a display-ready result dict."""
    t_start = time.perf_counter()
    context = as_context(matrices)
    result, steps = calculate_basic_op(context, op)
    op = OperationType(op)
    target = next(iter(context))
    titles = {
        OperationType.DETERMINANT: f"Determinant |{target}|",
        OperationType.RANK: f"Rank of {target}",
        OperationType.INVERSE: f"Inverse of {target}",
        OperationType.TRANSPOSE: f"Transpose of {target}",
    }
    return {
        "title": titles[op],
        "operation": op.value,
        "expression": None,
        "given": _given({target: context[target]}),
        "result": _result_block(result),
        "steps": steps,
        "summary": _summary(steps, t_start),
    }


def build_equation_result(m: Matrix, n: Matrix, p: Matrix) -> dict:
    """Solve ``M·X + N = P`` and return a display-ready result dict."""
    t_start = time.perf_counter()
    result, steps = solve_equation(m, n, p)
    return {
        "title": f"Equation {m.name}·X + {n.name} = {p.name}",
        "operation": OperationType.EQUATION.value,
        "expression": f"{m.name}·X + {n.name} = {p.name}",
        "given": _given({m.name: m, n.name: n, p.name: p}),
        "result": _result_block(result),
        "steps": steps,
        "summary": _summary(steps, t_start),
    }
