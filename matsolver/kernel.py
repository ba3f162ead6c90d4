"""Linear algebra kernel with step-by-step narration."""

"""
Every routine copies its operands into fresh NumPy arrays before doing any
work, so the caller's grids are never modified, even when a routine fails
halfway through an elimination.  Each routine returns ``(result, steps)``
where *steps* is a list of trace entries:

  - ``{"type": "text", "value": str}``
  - ``{"type": "matrix", "title": str, "data": [[float | str, ...], ...]}``
"""

import math
from decimal import ROUND_HALF_UP, Decimal

import numpy as np

from matsolver.config import DECIMALS, DISPLAY_DECIMALS, EPSILON
from matsolver.errors import (
    DimensionMismatch, InvalidOperation, NotSquare, SingularMatrix,
    UnsupportedPower,
)
from matsolver.matrix import Matrix


# ── Trace entries ───────────────────────────────────────────────────────

def text_step(value: str) -> dict:
    return {"type": "text", "value": value}


def matrix_step(title: str, data) -> dict:
    if isinstance(data, np.ndarray):
        data = data.tolist()
    return {"type": "matrix", "title": title, "data": [list(row) for row in data]}


# ── Number formatting ───────────────────────────────────────────────────

def fmt_num(value: float, max_decimals: int = DISPLAY_DECIMALS) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    """
    if abs(value - round(value)) < 1e-12:
        return str(int(round(value)))
    formatted = f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")
    return formatted


def _literal(value: float) -> str:
    """Render a cell exactly as entered, for the symbolic 'before' views."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _signed(value: float) -> str:
    """Wrap negative right-hand operands in parentheses: ``3 - (-2)``."""
    return _literal(value) if value >= 0 else f"({_literal(value)})"


def _dims(shape) -> str:
    return f"{shape[0]}x{shape[1]}"


_QUANTUM = Decimal(1).scaleb(-DECIMALS)


def _round_half_up(value: float) -> float:
    """Round to DECIMALS places, ties away from zero.

    ``Decimal(float)`` is exact, so the tie test sees the stored binary value
    rather than its shortest repr (``1.00005`` is just above the tie).
    """
    # Floats at or beyond 2**52 are already whole numbers
    if not math.isfinite(value) or abs(value) >= 2 ** 52:
        return value
    return float(Decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def clean(value):
    """Snap values within EPSILON of an integer to it, else round to DECIMALS.

    Works on scalars (returns ``float``) and on arrays (returns a new array).
    """
    arr = np.asarray(value, dtype=float)
    nearest = np.round(arr)
    rounded = np.vectorize(_round_half_up, otypes=[float])(arr)
    out = np.where(np.abs(arr - nearest) < EPSILON, nearest, rounded)
    # Adding 0.0 turns -0.0 into 0.0
    out = out + 0.0
    if out.ndim == 0:
        return float(out)
    return out


def _as_array(grid) -> np.ndarray:
    """Copy *grid* into a new 2-D float array."""
    if isinstance(grid, Matrix):
        grid = grid.data
    arr = np.array(grid, dtype=float)
    if arr.ndim != 2 or arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InvalidOperation("A matrix must be a non-empty rectangular grid.")
    return arr


def _find_pivot(m: np.ndarray, col: int, start: int):
    """First row at or below *start* whose entry in *col* is usable as a pivot."""
    for r in range(start, m.shape[0]):
        if abs(m[r, col]) >= EPSILON:
            return r
    return None


# ── Elementwise operations ──────────────────────────────────────────────

def add(a, b):
    """Elementwise ``a + b``."""
    return _elementwise(a, b, "+", "addition", "Sum result")


def subtract(a, b):
    """Elementwise ``a - b``."""
    return _elementwise(a, b, "-", "subtraction", "Difference result")


def _elementwise(a, b, symbol: str, operation: str, title: str):
    a, b = _as_array(a), _as_array(b)
    if a.shape != b.shape:
        raise DimensionMismatch(operation, a.shape, b.shape)

    result = clean(a + b if symbol == "+" else a - b)
    # Literal per-cell text such as "6 - 0" or "2 + (-3)"; never rounded.
    symbolic = [
        [f"{_literal(x)} {symbol} {_signed(y)}" for x, y in zip(row_a, row_b)]
        for row_a, row_b in zip(a.tolist(), b.tolist())
    ]
    steps = [
        matrix_step("Operation", symbolic),
        matrix_step(title, result),
    ]
    return result, steps


def scalar_multiply(a, k: float):
    """Multiply every element of *a* by the scalar *k*."""
    a = _as_array(a)
    result = clean(a * float(k))
    steps = [
        text_step(f"Multiply every element by {fmt_num(float(k))}:"),
        matrix_step(f"Scalar {fmt_num(float(k))}", result),
    ]
    return result, steps


def transpose(a):
    """Swap rows and columns."""
    a = _as_array(a)
    result = a.T.copy()
    steps = [
        text_step(
            f"Transpose: rows become columns "
            f"({_dims(a.shape)} -> {_dims(result.shape)})"
        ),
    ]
    return result, steps


# ── Products ────────────────────────────────────────────────────────────

def multiply(a, b):
    """Matrix product ``a · b``.

    Records the dot-product expansion of the top-left cell as an example.
    """
    a, b = _as_array(a), _as_array(b)
    r1, c1 = a.shape
    r2, c2 = b.shape
    if c1 != r2:
        raise DimensionMismatch(
            "multiplication", a.shape, b.shape,
            message=f"Incompatible dimensions: {r1}x{c1} vs {r2}x{c2}",
        )

    result = clean(a @ b)
    parts = [f"({_literal(a[0, k])}·{_literal(b[k, 0])})" for k in range(c1)]
    example = (
        f"Example C[1,1] = Row 1 · Col 1 = {' + '.join(parts)} "
        f"= {fmt_num(float(result[0, 0]))}"
    )
    steps = [
        text_step(f"Multiplication: ({r1}x{c1}) · ({r2}x{c2}) -> ({r1}x{c2})"),
        text_step(example),
    ]
    return result, steps


def power(a, exponent):
    """Raise a square matrix to a positive integer power.

    Uses binary exponentiation: the result starts as the identity and the
    base is squared once per exponent bit.
    """
    a = _as_array(a)
    n = a.shape[0]
    if a.shape[0] != a.shape[1]:
        raise NotSquare("Matrix power", a.shape)
    if isinstance(exponent, bool) or not float(exponent).is_integer() or exponent < 1:
        raise UnsupportedPower(
            f"The exponent must be a positive integer, got {exponent}."
        )
    exponent = int(exponent)

    steps = [text_step(f"Computing power ^{exponent} by repeated squaring "
                       f"(exponent in binary: {exponent:b})")]
    result = np.eye(n)
    base = a.copy()
    base_power = 1
    accumulated = 0
    p = exponent
    while p > 0:
        if p % 2 == 1:
            result, _ = multiply(result, base)
            accumulated += base_power
            steps.append(text_step(
                f"Bit set: multiply the result by M^{base_power} "
                f"(result is now M^{accumulated})"
            ))
        if p > 1:
            base, _ = multiply(base, base)
            base_power *= 2
        p //= 2

    steps.append(matrix_step(f"Power result ^{exponent}", result))
    return result, steps


# ── Elimination-based routines ──────────────────────────────────────────

def determinant(a):
    """Determinant of a square matrix.

    1x1 and 2x2 are computed directly; larger matrices are reduced to upper
    triangular form with partial pivoting, tracking the number of row swaps.
    """
    m = _as_array(a)
    n = m.shape[0]
    if m.shape[0] != m.shape[1]:
        raise NotSquare("Determinant", m.shape)
    steps = [text_step(f"Determinant of a {n}x{n} matrix.")]

    if n == 1:
        return clean(m[0, 0]), steps
    if n == 2:
        value = clean(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])
        steps.append(text_step(
            f"Formula ad - bc: ({_literal(m[0, 0])}·{_literal(m[1, 1])}) - "
            f"({_literal(m[0, 1])}·{_literal(m[1, 0])}) = {fmt_num(value)}"
        ))
        return value, steps

    swaps = 0
    for i in range(n):
        pivot = _find_pivot(m, i, i)
        if pivot is None:
            steps.append(text_step(
                f"Column {i + 1} has no non-zero pivot: the determinant is 0."
            ))
            return 0.0, steps
        if pivot != i:
            m[[i, pivot]] = m[[pivot, i]]
            swaps += 1
            steps.append(text_step(
                f"Pivoting: swap R{i + 1} <-> R{pivot + 1} (sign changes)"
            ))
        for j in range(i + 1, n):
            if abs(m[j, i]) > EPSILON:
                factor = m[j, i] / m[i, i]
                m[j, i:] -= factor * m[i, i:]

    diagonal = np.diag(m)
    value = clean(np.prod(diagonal) * (-1) ** swaps)
    steps.append(matrix_step("Upper triangular form", clean(m)))
    steps.append(text_step(
        f"Triangularization complete. Det = "
        f"{'-' if swaps % 2 else ''}({' · '.join(fmt_num(float(d), DECIMALS) for d in diagonal)}) "
        f"= {fmt_num(value)}"
    ))
    return value, steps


def inverse(a, label: str = "matrix"):
    """Inverse of a square matrix by Gauss-Jordan elimination on ``[A | I]``."""
    a = _as_array(a)
    n = a.shape[0]
    if a.shape[0] != a.shape[1]:
        raise NotSquare("Inverse", a.shape)

    steps = [text_step("Gauss-Jordan method on the augmented matrix [A | I].")]
    m = np.hstack([a, np.eye(n)])

    for i in range(n):
        pivot = _find_pivot(m, i, i)
        if pivot is None:
            raise SingularMatrix(label)
        if pivot != i:
            m[[i, pivot]] = m[[pivot, i]]
            steps.append(text_step(f"Pivoting: swap R{i + 1} <-> R{pivot + 1}"))

        pivot_val = m[i, i]
        if abs(pivot_val - 1) > EPSILON:
            m[i] /= pivot_val
            steps.append(text_step(
                f"Normalize R{i + 1}: divide by {fmt_num(float(pivot_val), DECIMALS)}"
            ))

        for k in range(n):
            if k != i and abs(m[k, i]) > EPSILON:
                m[k] -= m[k, i] * m[i]

    result = clean(m[:, n:])
    steps.append(text_step("The left block is now I; the right block is the inverse."))
    return result, steps


def rank(a):
    """Rank by row reduction, tracking which columns already hold a pivot."""
    m = _as_array(a)
    rows, cols = m.shape
    steps = [text_step("Rank by Gaussian elimination.")]
    visited = [False] * cols
    value = 0

    for r in range(rows):
        pivot_col = None
        for c in range(cols):
            if not visited[c] and abs(m[r, c]) > EPSILON:
                pivot_col = c
                break
        if pivot_col is None:
            steps.append(text_step(f"R{r + 1} has no new pivot (dependent row)."))
            continue
        visited[pivot_col] = True
        value += 1
        m[r] /= m[r, pivot_col]
        for i in range(rows):
            if i != r:
                m[i] -= m[i, pivot_col] * m[r]
        steps.append(text_step(f"Pivot found in R{r + 1}, column {pivot_col + 1}."))

    steps.append(matrix_step("Reduced form", clean(m)))
    steps.append(text_step(f"Rank = {value}"))
    return value, steps
