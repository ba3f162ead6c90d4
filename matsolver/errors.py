"""
MatSolver — error taxonomy.

Every failure the engine reports is a ``MatrixError``.  The base class
derives from ``ValueError`` so callers that already treat bad user input
as a ``ValueError`` keep working unchanged.
"""


def _dims(shape) -> str:
    """Render a ``(rows, cols)`` pair as ``RxC``."""
    rows, cols = shape
    return f"{rows}x{cols}"


class MatrixError(ValueError):
    """Base class for every error raised by the engine."""


# ── Parsing ─────────────────────────────────────────────────────────────

class ParseError(MatrixError):
    """The expression text could not be turned into a computation."""


class UnexpectedCharacter(ParseError):
    def __init__(self, char: str, position: int | None = None):
        self.char = char
        self.position = position
        where = f" at position {position + 1}" if position is not None else ""
        super().__init__(f"Unexpected character: '{char}'{where}")


class InvalidExpression(ParseError):
    def __init__(self, message: str = "Invalid expression."):
        super().__init__(message)


class UnknownIdentifier(ParseError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Matrix "{name}" not found.')


class EmptyExpression(ParseError):
    def __init__(self):
        super().__init__("Expression is empty.")


# ── Evaluation ──────────────────────────────────────────────────────────

class StackUnderflow(MatrixError):
    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(
            f"Operator '{operator}' is missing an operand. "
            "Check the expression for a dangling operator."
        )


class DimensionMismatch(MatrixError):
    def __init__(self, operation: str, expected, actual, message: str | None = None):
        self.operation = operation
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        if message is None:
            message = (
                f"Incompatible dimensions for {operation}: "
                f"{_dims(self.expected)} vs {_dims(self.actual)}"
            )
        super().__init__(message)


class SingularMatrix(MatrixError):
    def __init__(self, label: str = "matrix", message: str | None = None):
        self.label = label
        if message is None:
            message = f"The matrix {label} is singular and has no inverse."
        super().__init__(message)


class InvalidOperation(MatrixError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class UnsupportedOperandKind(InvalidOperation):
    """An operator was applied to a scalar/matrix combination it does not accept."""


class UnsupportedPower(InvalidOperation):
    """Only a square matrix raised to a positive integer is supported."""


class NotSquare(InvalidOperation):
    def __init__(self, operation: str, shape):
        self.operation = operation
        self.shape = tuple(shape)
        super().__init__(
            f"{operation} requires a square matrix, got {_dims(self.shape)}."
        )
