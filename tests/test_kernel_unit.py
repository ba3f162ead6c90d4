"""Tests for the linear algebra kernel."""

import math

import numpy as np
import pytest
import sympy

from matsolver import kernel
from matsolver.errors import (
    DimensionMismatch, InvalidOperation, NotSquare, SingularMatrix,
    UnsupportedPower,
)
from matsolver.matrix import identity, zeros

A = [[1, 2], [3, 4]]
B = [[5, 6], [7, 8]]

# Integer 4x4 matrix used to cross-check against SymPy's exact arithmetic.
M4 = [[2, -1, 0, 3], [1, 3, 2, -2], [0, 1, 4, 1], [5, 0, -1, 2]]


def _texts(steps):
    return [s["value"] for s in steps if s["type"] == "text"]


# ── clean / fmt_num helpers ─────────────────────────────────────────────

class TestClean:
    def test_snaps_to_integer(self):
        assert kernel.clean(2.00000000001) == 2.0

    def test_rounds_to_four_decimals(self):
        assert kernel.clean(1.23456) == 1.2346

    @pytest.mark.parametrize("value,expected", [
        (0.03125, 0.0313),
        (-0.03125, -0.0313),
        (1.00005, 1.0001),
        (0.00005, 0.0001),
    ])
    def test_ties_round_away_from_zero(self, value, expected):
        assert kernel.clean(value) == expected

    def test_ties_in_arrays(self):
        out = kernel.clean(np.array([[0.03125, 0.09375]]))
        assert out.tolist() == [[0.0313, 0.0938]]

    def test_large_values_pass_through(self):
        assert kernel.clean(1e30) == 1e30

    def test_negative_zero_becomes_zero(self):
        value = kernel.clean(-1e-12)
        assert value == 0.0
        assert math.copysign(1, value) == 1

    def test_arrays(self):
        out = kernel.clean(np.array([[0.1 + 0.2, 2.999999999999]]))
        assert out.tolist() == [[0.3, 3.0]]


def test_fmt_num() -> None:
    assert kernel.fmt_num(7.0) == "7"
    assert kernel.fmt_num(2.5) == "2.5"
    assert kernel.fmt_num(-0.5) == "-0.5"


# ── add / subtract ──────────────────────────────────────────────────────

class TestElementwise:
    def test_add(self):
        result, _ = kernel.add(A, B)
        assert result.tolist() == [[6, 8], [10, 12]]

    def test_add_commutes(self):
        ab, _ = kernel.add(A, B)
        ba, _ = kernel.add(B, A)
        assert ab.tolist() == ba.tolist()

    def test_subtract(self):
        result, _ = kernel.subtract(B, A)
        assert result.tolist() == [[4, 4], [4, 4]]

    def test_symbolic_snapshot_keeps_literal_text(self):
        _, steps = kernel.add([[0.123456, 1]], [[1, -3]])
        before, after = steps
        assert before["title"] == "Operation"
        assert before["data"] == [["0.123456 + 1", "1 + (-3)"]]
        assert after["data"] == [[1.1235, -2.0]]

    def test_subtract_symbolic_text(self):
        _, steps = kernel.subtract(A, [[5, -6], [7, 8]])
        assert steps[0]["data"][0] == ["1 - 5", "2 - (-6)"]

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatch) as info:
            kernel.add(A, [[1, 2, 3], [4, 5, 6]])
        assert info.value.expected == (2, 2)
        assert info.value.actual == (2, 3)
        assert "2x2 vs 2x3" in str(info.value)


def test_scalar_multiply() -> None:
    result, steps = kernel.scalar_multiply(A, 3)
    assert result.tolist() == [[3, 6], [9, 12]]
    assert steps[-1]["type"] == "matrix"


def test_transpose_twice_is_identity() -> None:
    grid = [[1, 2, 3], [4, 5, 6]]
    once, _ = kernel.transpose(grid)
    assert once.shape == (3, 2)
    twice, _ = kernel.transpose(once)
    assert twice.tolist() == grid


# ── multiply / power ────────────────────────────────────────────────────

class TestMultiply:
    def test_product(self):
        result, _ = kernel.multiply(A, B)
        assert result.tolist() == [[19, 22], [43, 50]]

    def test_records_top_left_expansion(self):
        _, steps = kernel.multiply(A, B)
        texts = _texts(steps)
        assert texts[0] == "Multiplication: (2x2) · (2x2) -> (2x2)"
        assert texts[1] == "Example C[1,1] = Row 1 · Col 1 = (1·5) + (2·7) = 19"

    def test_non_square_shapes(self):
        result, _ = kernel.multiply([[1, 2, 3]], [[1], [2], [3]])
        assert result.tolist() == [[14]]

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatch, match="2x3 vs 2x3"):
            kernel.multiply([[1, 2, 3], [4, 5, 6]], [[1, 2, 3], [4, 5, 6]])


class TestPower:
    def test_power_one_is_identity_operation(self):
        result, _ = kernel.power(A, 1)
        assert result.tolist() == A

    def test_power_two_matches_multiply(self):
        squared, _ = kernel.power(A, 2)
        product, _ = kernel.multiply(A, A)
        assert squared.tolist() == product.tolist()

    def test_matches_numpy(self):
        result, steps = kernel.power(A, 5)
        expected = np.linalg.matrix_power(np.array(A), 5)
        assert result.tolist() == expected.tolist()
        assert steps[-1]["title"] == "Power result ^5"

    def test_integral_float_exponent(self):
        result, _ = kernel.power(A, 2.0)
        assert result.tolist() == [[7, 10], [15, 22]]

    @pytest.mark.parametrize("exponent", [0, -1, 1.5])
    def test_invalid_exponent(self, exponent):
        with pytest.raises(UnsupportedPower):
            kernel.power(A, exponent)

    def test_non_square(self):
        with pytest.raises(NotSquare):
            kernel.power([[1, 2, 3]], 2)


# ── determinant ─────────────────────────────────────────────────────────

class TestDeterminant:
    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5])
    def test_identity(self, n):
        value, _ = kernel.determinant(identity(n))
        assert value == 1

    def test_two_by_two(self):
        value, steps = kernel.determinant(A)
        assert value == -2
        assert "Formula ad - bc" in _texts(steps)[1]

    def test_pivot_swap_flips_sign(self):
        grid = [[0, 1, 2], [1, 0, 3], [4, -3, 8]]
        value, steps = kernel.determinant(grid)
        assert value == -2
        assert any("swap R1 <-> R2" in t for t in _texts(steps))

    def test_zero_pivot_column(self):
        value, steps = kernel.determinant([[1, 2, 3], [2, 4, 6], [1, 1, 1]])
        assert value == 0
        assert "determinant is 0" in _texts(steps)[-1]

    def test_matches_sympy(self):
        value, _ = kernel.determinant(M4)
        assert value == pytest.approx(float(sympy.Matrix(M4).det()), abs=1e-6)

    def test_non_square(self):
        with pytest.raises(NotSquare):
            kernel.determinant([[1, 2, 3], [4, 5, 6]])
        # NotSquare is one of the InvalidOperation errors
        with pytest.raises(InvalidOperation):
            kernel.determinant([[1, 2]])

    def test_input_is_not_modified(self):
        grid = [[0, 1, 2], [1, 0, 3], [4, -3, 8]]
        snapshot = [row[:] for row in grid]
        kernel.determinant(grid)
        assert grid == snapshot


# ── inverse ─────────────────────────────────────────────────────────────

class TestInverse:
    def test_two_by_two(self):
        result, _ = kernel.inverse(A)
        assert result.tolist() == [[-2, 1], [1.5, -0.5]]

    @pytest.mark.parametrize("grid", [
        [[2, 1], [1, 1]],
        [[4, 7], [2, 6]],
        [[1, 2, 3], [0, 1, 4], [5, 6, 0]],
        [[0, 1], [1, 0]],
    ])
    def test_inverse_times_matrix_is_identity(self, grid):
        inv, _ = kernel.inverse(grid)
        product = inv @ np.array(grid, dtype=float)
        assert np.allclose(product, np.eye(len(grid)), atol=1e-6)

    def test_matches_sympy(self):
        result, _ = kernel.inverse(M4)
        expected = np.array(sympy.Matrix(M4).inv().tolist(), dtype=float)
        assert np.allclose(result, expected, atol=1e-4)

    def test_swap_is_narrated(self):
        _, steps = kernel.inverse([[0, 1], [1, 0]])
        assert "Pivoting: swap R1 <-> R2" in _texts(steps)

    def test_singular(self):
        with pytest.raises(SingularMatrix) as info:
            kernel.inverse([[1, 2], [2, 4]], label="S")
        assert info.value.label == "S"
        assert "S" in str(info.value)

    def test_singular_leaves_input_untouched(self):
        grid = [[1, 2, 3], [2, 4, 6], [1, 1, 1]]
        snapshot = [row[:] for row in grid]
        with pytest.raises(SingularMatrix):
            kernel.inverse(grid)
        assert grid == snapshot

    def test_non_square(self):
        with pytest.raises(NotSquare):
            kernel.inverse([[1, 2, 3], [4, 5, 6]])


# ── rank ────────────────────────────────────────────────────────────────

class TestRank:
    @pytest.mark.parametrize("n", [1, 2, 3, 4])
    def test_identity(self, n):
        value, _ = kernel.rank(identity(n))
        assert value == n

    @pytest.mark.parametrize("n", [1, 2, 3])
    def test_zero_matrix(self, n):
        value, _ = kernel.rank(zeros(n, n))
        assert value == 0

    def test_dependent_rows(self):
        value, steps = kernel.rank([[1, 2, 3], [2, 4, 6]])
        assert value == 1
        assert any("no new pivot" in t for t in _texts(steps))

    def test_tall_matrix(self):
        value, _ = kernel.rank([[1, 2], [3, 4], [5, 6]])
        assert value == 2

    def test_matches_sympy(self):
        grid = [[1, 2, 3, 4], [2, 4, 6, 8], [0, 1, 1, 0], [1, 3, 4, 4]]
        value, _ = kernel.rank(grid)
        assert value == sympy.Matrix(grid).rank()
