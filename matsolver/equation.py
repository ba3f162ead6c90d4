"""
Solver for the matrix equation ``M·X + N = P``.

The unknown is isolated as ``X = M⁻¹·(P - N)`` in three fixed stages.
Each stage's failure is re-raised as a stage-specific error.
"""

import logging

from matsolver import kernel
from matsolver.errors import DimensionMismatch, InvalidOperation, SingularMatrix
from matsolver.kernel import matrix_step, text_step

logger = logging.getLogger(__name__)


def solve(m, n, p) -> tuple:
    """Solve ``M·X + N = P`` for ``X``.

    *m*, *n*, *p* are ``Matrix`` objects.  Returns ``(X grid, steps)``.
    """
    steps = [
        text_step(f"Goal: solve for X in {m.name}·X + {n.name} = {p.name}"),
        text_step(f"Isolate X: X = ({m.name})⁻¹ · ({p.name} - {n.name})"),
    ]

    # 1. R = P - N
    try:
        rhs, sub_steps = kernel.subtract(p.data, n.data)
    except DimensionMismatch as e:
        logger.debug("Equation stage 1 failed: %s", e)
        raise DimensionMismatch(
            f"{p.name} - {n.name}", e.expected, e.actual,
            message=(
                f"Error in {p.name} - {n.name}: incompatible dimensions "
                f"{p.rows}x{p.cols} vs {n.rows}x{n.cols}."
            ),
        ) from e
    steps.append(text_step(f"1. Compute R = {p.name} - {n.name}"))
    steps.extend(sub_steps)

    # 2. M⁻¹
    try:
        inv_m, sub_steps = kernel.inverse(m.data, label=m.name)
    except (SingularMatrix, InvalidOperation) as e:
        logger.debug("Equation stage 2 failed: %s", e)
        raise SingularMatrix(
            m.name, message=f"The matrix {m.name} has no inverse.",
        ) from e
    steps.append(text_step(f"2. Compute the inverse of {m.name}"))
    steps.extend(sub_steps)
    steps.append(matrix_step(f"Inverse ({m.name})⁻¹", inv_m))

    # 3. X = M⁻¹ · R
    try:
        x, sub_steps = kernel.multiply(inv_m, rhs)
    except DimensionMismatch as e:
        logger.debug("Equation stage 3 failed: %s", e)
        raise DimensionMismatch(
            "final multiplication", e.expected, e.actual,
            message=(
                f"Error in the final multiplication ({m.name})⁻¹ · R: "
                f"incompatible dimensions {e.expected[0]}x{e.expected[1]} "
                f"vs {e.actual[0]}x{e.actual[1]}."
            ),
        ) from e
    steps.append(text_step(f"3. Multiply ({m.name})⁻¹ · R"))
    steps.extend(sub_steps)
    steps.append(matrix_step("Result X", x))

    return x, steps
