"""
Tokenizer for matrix expressions such as ``3A^t - B^2`` or ``2(A + B)'``.
"""

from dataclasses import dataclass

from matsolver.errors import ParseError, UnexpectedCharacter

TRANSPOSE = "'"

# Higher binds tighter.  Transpose is postfix and takes a single operand.
PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 3, TRANSPOSE: 4}


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class Operator:
    symbol: str
    arity: int = 2

    @property
    def precedence(self) -> int:
        return PRECEDENCE[self.symbol]


@dataclass(frozen=True)
class LeftParen:
    pass


@dataclass(frozen=True)
class RightParen:
    pass


Token = Number | Identifier | Operator | LeftParen | RightParen

MULTIPLY = Operator("*", 2)
TRANSPOSE_OP = Operator(TRANSPOSE, 1)

_BINARY = {"+", "-", "*", "/"}
_MULTIPLY_ALIASES = {"·", "."}


def _is_ident_start(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


def _skip_spaces(expr: str, i: int) -> int:
    while i < len(expr) and expr[i].isspace():
        i += 1
    return i


def tokenize(expr: str) -> list:
    """Split *expr* into a flat list of tokens.

    A number directly followed by a matrix name or ``(`` gets an implicit
    multiplication (``3A`` -> ``3 * A``).  ``^t`` / ``^T`` and ``'`` both
    spell transpose.
    """
    tokens = []
    i = 0
    n = len(expr)

    while i < n:
        ch = expr[i]

        if ch.isspace():
            i += 1
            continue

        if ch.isascii() and ch.isdigit():
            j = i
            while j < n and expr[j].isascii() and (expr[j].isdigit() or expr[j] == "."):
                j += 1
            text = expr[i:j]
            if text.count(".") > 1:
                raise ParseError(f"Malformed number: '{text}'")
            tokens.append(Number(float(text)))
            i = j
            nxt = _skip_spaces(expr, i)
            if nxt < n and (_is_ident_start(expr[nxt]) or expr[nxt] == "("):
                tokens.append(MULTIPLY)
            continue

        if _is_ident_start(ch):
            j = i + 1
            while j < n and _is_ident_char(expr[j]):
                j += 1
            tokens.append(Identifier(expr[i:j]))
            i = j
            continue

        if ch in _MULTIPLY_ALIASES:
            tokens.append(MULTIPLY)
        elif ch in _BINARY:
            tokens.append(Operator(ch, 2))
        elif ch == "^":
            nxt = _skip_spaces(expr, i + 1)
            if nxt < n and expr[nxt] in ("t", "T"):
                tokens.append(TRANSPOSE_OP)
                i = nxt
            else:
                tokens.append(Operator("^", 2))
        elif ch == "(":
            tokens.append(LeftParen())
        elif ch == ")":
            tokens.append(RightParen())
        elif ch == TRANSPOSE:
            tokens.append(TRANSPOSE_OP)
        else:
            raise UnexpectedCharacter(ch, i)
        i += 1

    return tokens
