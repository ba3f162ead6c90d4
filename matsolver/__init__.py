"""
MatSolver — step-by-step matrix expression engine.
"""

from matsolver.engine import (
    OperationType,
    build_basic_op_result,
    build_equation_result,
    build_expression_result,
    calculate_basic_op,
    evaluate_expression,
    solve_equation,
)
from matsolver.errors import (
    DimensionMismatch,
    EmptyExpression,
    InvalidExpression,
    InvalidOperation,
    MatrixError,
    NotSquare,
    ParseError,
    SingularMatrix,
    StackUnderflow,
    UnexpectedCharacter,
    UnknownIdentifier,
    UnsupportedOperandKind,
    UnsupportedPower,
)
from matsolver.matrix import Matrix, identity, zeros

__version__ = "1.0.0"
