"""
Postfix stack machine that evaluates an RPN token list against a set of
named matrices and records a step trace along the way.
"""

from dataclasses import dataclass

import numpy as np

from matsolver import kernel
from matsolver.errors import (
    InvalidExpression, InvalidOperation, StackUnderflow, UnknownIdentifier,
    UnsupportedOperandKind, UnsupportedPower,
)
from matsolver.kernel import fmt_num, matrix_step, text_step
from matsolver.tokenizer import Identifier, Number, Operator, TRANSPOSE


@dataclass(frozen=True)
class Scalar:
    value: float


@dataclass(frozen=True, eq=False)
class MatrixValue:
    """A matrix on the evaluation stack.

    ``label`` is display text for the trace (``"(A + B)"``, ``"A^t"``) and
    never takes part in the arithmetic.
    """

    grid: np.ndarray
    label: str


StackValue = Scalar | MatrixValue

_OPERATION_NAMES = {"+": "Addition", "-": "Subtraction"}
_VERBS = {"+": "Adding", "-": "Subtracting"}


def _kind(value) -> str:
    return "matrix" if isinstance(value, MatrixValue) else "scalar"


def evaluate(postfix, matrices) -> tuple:
    """Run *postfix* against *matrices* (``name -> Matrix``).

    Returns ``(StackValue, steps)``.
    """
    stack = []
    steps = []

    def pop(operator: str):
        if not stack:
            raise StackUnderflow(operator)
        return stack.pop()

    for token in postfix:
        if isinstance(token, Number):
            stack.append(Scalar(token.value))
        elif isinstance(token, Identifier):
            matrix = matrices.get(token.name)
            if matrix is None:
                raise UnknownIdentifier(token.name)
            stack.append(MatrixValue(matrix.to_array(), matrix.name))
        elif isinstance(token, Operator):
            if token.arity == 1:
                operand = pop(token.symbol)
                stack.append(_apply_unary(token.symbol, operand, steps))
            else:
                right = pop(token.symbol)
                left = pop(token.symbol)
                stack.append(_apply_binary(token.symbol, left, right, steps))
        else:
            raise InvalidExpression(f"Unexpected token in postfix input: {token!r}")

    if len(stack) != 1:
        raise InvalidExpression(
            "Invalid expression: check for missing operators or operands."
        )
    return stack[0], steps


def _apply_unary(symbol: str, operand, steps: list):
    if symbol != TRANSPOSE:
        raise InvalidOperation(f"Unknown unary operator '{symbol}'.")
    if not isinstance(operand, MatrixValue):
        raise UnsupportedOperandKind("Transpose only applies to matrices.")
    result, _ = kernel.transpose(operand.grid)
    label = f"{operand.label}^t"
    steps.append(text_step(f"Computing the transpose of {operand.label}"))
    steps.append(matrix_step(label, result))
    return MatrixValue(result, label)


def _apply_binary(symbol: str, left, right, steps: list):
    if symbol in ("+", "-"):
        return _add_or_subtract(symbol, left, right, steps)
    if symbol == "*":
        return _multiply(left, right, steps)
    if symbol == "/":
        return _divide(left, right, steps)
    if symbol == "^":
        return _power(left, right, steps)
    raise InvalidOperation(f"Unknown operator '{symbol}'.")


def _add_or_subtract(symbol: str, left, right, steps: list):
    if not (isinstance(left, MatrixValue) and isinstance(right, MatrixValue)):
        raise UnsupportedOperandKind(
            f"{_OPERATION_NAMES[symbol]} is only defined between two matrices "
            f"(got {_kind(left)} {symbol} {_kind(right)})."
        )
    routine = kernel.add if symbol == "+" else kernel.subtract
    result, sub_steps = routine(left.grid, right.grid)
    label = f"({left.label} {symbol} {right.label})"
    steps.append(text_step(f"{_VERBS[symbol]} matrices: {left.label} {symbol} {right.label}"))
    steps.extend(sub_steps)
    return MatrixValue(result, label)


def _multiply(left, right, steps: list):
    if isinstance(left, Scalar) and isinstance(right, Scalar):
        value = left.value * right.value
        steps.append(text_step(
            f"Multiplying scalars: {fmt_num(left.value)} · {fmt_num(right.value)} "
            f"= {fmt_num(value)}"
        ))
        return Scalar(value)

    if isinstance(left, Scalar) or isinstance(right, Scalar):
        scalar, matrix = (left, right) if isinstance(left, Scalar) else (right, left)
        result, _ = kernel.scalar_multiply(matrix.grid, scalar.value)
        label = f"{fmt_num(scalar.value)}{matrix.label}"
        steps.append(text_step(
            f"Scalar multiplication: {fmt_num(scalar.value)} · {matrix.label}"
        ))
        steps.append(matrix_step(label, result))
        return MatrixValue(result, label)

    result, sub_steps = kernel.multiply(left.grid, right.grid)
    label = f"{left.label}·{right.label}"
    steps.append(text_step(f"Multiplying matrices: {left.label} · {right.label}"))
    steps.extend(sub_steps)
    steps.append(matrix_step(label, result))
    return MatrixValue(result, label)


def _divide(left, right, steps: list):
    if not isinstance(right, Scalar):
        raise UnsupportedOperandKind(
            "Division is only defined by a scalar; use an inverse for matrices."
        )
    if right.value == 0:
        raise InvalidOperation("Division by zero.")

    if isinstance(left, Scalar):
        value = left.value / right.value
        steps.append(text_step(
            f"Dividing scalars: {fmt_num(left.value)} / {fmt_num(right.value)} "
            f"= {fmt_num(value)}"
        ))
        return Scalar(value)

    result, _ = kernel.scalar_multiply(left.grid, 1.0 / right.value)
    label = f"{left.label}/{fmt_num(right.value)}"
    steps.append(text_step(
        f"Dividing every element of {left.label} by {fmt_num(right.value)}"
    ))
    steps.append(matrix_step(label, result))
    return MatrixValue(result, label)


def _power(left, right, steps: list):
    if not (isinstance(left, MatrixValue) and isinstance(right, Scalar)):
        raise UnsupportedPower(
            f"Power is only supported as matrix ^ positive integer "
            f"(got {_kind(left)} ^ {_kind(right)})."
        )
    if not float(right.value).is_integer() or right.value < 1:
        raise UnsupportedPower(
            f"The exponent must be a positive integer, got {fmt_num(right.value)}."
        )
    exponent = int(right.value)
    result, sub_steps = kernel.power(left.grid, exponent)
    label = f"{left.label}^{exponent}"
    steps.extend(sub_steps)
    return MatrixValue(result, label)
