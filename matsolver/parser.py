"""
Shunting-yard reordering of infix tokens into postfix (RPN) order.
"""

from matsolver.tokenizer import Identifier, LeftParen, Number, Operator, RightParen


def to_postfix(tokens) -> list:
    """Return *tokens* in postfix order, honouring precedence and parentheses.

    Parentheses are handled permissively: a ``)`` with no matching ``(`` is
    ignored, and a ``(`` still open at the end of input is dropped.
    """
    output = []
    operators = []

    for token in tokens:
        if isinstance(token, (Number, Identifier)):
            output.append(token)
        elif isinstance(token, Operator):
            while (
                operators
                and isinstance(operators[-1], Operator)
                and operators[-1].precedence >= token.precedence
            ):
                output.append(operators.pop())
            operators.append(token)
        elif isinstance(token, LeftParen):
            operators.append(token)
        elif isinstance(token, RightParen):
            while operators and not isinstance(operators[-1], LeftParen):
                output.append(operators.pop())
            if operators:
                operators.pop()
        else:
            raise TypeError(f"Unknown token: {token!r}")

    while operators:
        top = operators.pop()
        if isinstance(top, Operator):
            output.append(top)
    return output
