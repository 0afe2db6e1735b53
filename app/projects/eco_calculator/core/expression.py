"""
Arithmetic expression evaluation for the calculator keypad.

Recursive-descent parser over decimal numbers and the four binary
operators, with optional unary signs:

    expr  := term (('+' | '-') term)*
    term  := unary (('*' | '/') unary)*
    unary := ('+' | '-') unary | NUMBER

Nothing is ever handed to eval(); anything outside the grammar is an
ExpressionError.
"""
import math
from decimal import Decimal

OPERATORS = "+-*/"
DIGITS = "0123456789"


class ExpressionError(ValueError):
    """Raised when an expression is malformed or has no finite value."""

    pass


def _tokenize(expression: str) -> list[str]:
    """Split an expression into number and operator tokens."""
    tokens = []
    i = 0
    n = len(expression)
    while i < n:
        ch = expression[i]
        if ch.isspace():
            i += 1
            continue
        if ch in OPERATORS:
            tokens.append(ch)
            i += 1
            continue
        if ch in DIGITS or ch == ".":
            start = i
            seen_dot = False
            while i < n and (expression[i] in DIGITS or expression[i] == "."):
                if expression[i] == ".":
                    if seen_dot:
                        raise ExpressionError(f"Malformed number at position {i}")
                    seen_dot = True
                i += 1
            number = expression[start:i]
            if number == ".":
                raise ExpressionError(f"Malformed number at position {start}")
            tokens.append(number)
            continue
        raise ExpressionError(f"Unexpected character {ch!r} at position {i}")
    return tokens


class _Parser:
    def __init__(self, tokens: list[str]):
        self.tokens = tokens
        self.pos = 0

    def _peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self):
        token = self._peek()
        if token is None:
            raise ExpressionError("Unexpected end of expression")
        self.pos += 1
        return token

    def parse(self) -> float:
        value = self._expr()
        if self._peek() is not None:
            raise ExpressionError(f"Unexpected token {self._peek()!r}")
        return value

    def _expr(self) -> float:
        value = self._term()
        while self._peek() in ("+", "-"):
            op = self._next()
            rhs = self._term()
            value = value + rhs if op == "+" else value - rhs
        return value

    def _term(self) -> float:
        value = self._unary()
        while self._peek() in ("*", "/"):
            op = self._next()
            rhs = self._unary()
            if op == "*":
                value = value * rhs
            else:
                if rhs == 0:
                    raise ExpressionError("Division by zero")
                value = value / rhs
        return value

    def _unary(self) -> float:
        token = self._next()
        if token == "-":
            return -self._unary()
        if token == "+":
            return self._unary()
        if token in OPERATORS:
            raise ExpressionError(f"Unexpected operator {token!r}")
        return float(token)


def evaluate_expression(expression: str) -> float:
    """
    Evaluate a basic arithmetic expression.

    Args:
        expression: e.g. "2+2", "7.5*-2", ".5/4"

    Returns:
        The finite float value

    Raises:
        ExpressionError: empty or malformed expression, division by zero,
            or a result that overflows to infinity
    """
    if expression is None or not expression.strip():
        raise ExpressionError("Empty expression")

    value = _Parser(_tokenize(expression)).parse()
    if not math.isfinite(value):
        raise ExpressionError("Result is not a finite number")
    # Normalise -0.0
    return value + 0.0


def format_number(value: float) -> str:
    """
    Display form of a result, always in plain decimal notation so it can be
    fed back into the keypad expression: 4.0 -> '4', 1e16 -> '10000000000000000',
    1e-07 -> '0.0000001'.
    """
    if value == 0:
        return "0"
    # repr gives the shortest round-tripping digits; Decimal drops the exponent
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
