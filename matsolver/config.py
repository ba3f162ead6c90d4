"""
MatSolver — numeric and display constants shared by the engine.
"""

# Tolerance for zero / pivot tests and for snapping results to integers.
EPSILON = 1e-10

# Decimal places kept in every computed result grid.
DECIMALS = 4

# Precision used when numbers are rendered into step text.
DISPLAY_DECIMALS = 10

DEFAULT_RESULT_NAME = "R"
EQUATION_RESULT_NAME = "X"
