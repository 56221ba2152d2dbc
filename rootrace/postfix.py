"""Conversion of infix expressions in one variable ``x`` to postfix form, and their evaluation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterable, Sequence

_OPERATORS = "+-*/^"
_DIGITS = "0123456789"
_PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 3}


class TokenType(Enum):
    """Kind of a postfix token."""

    OPERAND = auto()
    OPERATOR = auto()
    VARIABLE = auto()


@dataclass(frozen=True)
class Token:
    """One postfix token: a number, an operator character or the variable ``x``."""

    kind: TokenType
    value: float | str | None = None


class ExpressionError(ValueError):
    """The infix expression cannot be converted."""


class EvaluationError(ArithmeticError):
    """A postfix expression cannot be evaluated."""


class _State(Enum):
    EXPECT_OPERAND = auto()
    AFTER_OPERAND = auto()
    AFTER_CLOSE = auto()


def is_operator(c: str) -> bool:
    """Return True if ``c`` is one of the binary operators ``+ - * / ^``."""
    return len(c) == 1 and c in _OPERATORS


def precedence(op: str) -> int:
    """Return the binding strength of an operator; anything else has 0."""
    return _PRECEDENCE.get(op, 0)


def _starts_operand(ch: str) -> bool:
    return ch in _DIGITS or ch == "." or ch == "x"


def _read_operand(expression: str, pos: int) -> tuple[Token, int]:
    """Read a number or the variable starting at ``pos``; return it and the next position."""
    if expression[pos] == "x":
        return Token(TokenType.VARIABLE), pos + 1

    operand = 0.0
    in_fraction = False
    divisor = 1.0
    while pos < len(expression) and (expression[pos] in _DIGITS or expression[pos] == "."):
        ch = expression[pos]
        if ch == ".":
            in_fraction = True
        elif not in_fraction:
            operand = operand * 10 + int(ch)
        else:
            divisor *= 10
            operand = operand + int(ch) / divisor
        pos += 1
    return Token(TokenType.OPERAND, operand), pos


def infix_to_postfix(expression: str) -> list[Token]:
    """Convert an infix expression to a list of postfix tokens.

    Operators of equal precedence, ``^`` included, associate to the left.
    Unmatched parentheses are tolerated; any other malformed input raises
    :class:`ExpressionError`.
    """
    output: list[Token] = []
    stack: list[str] = []
    state = _State.EXPECT_OPERAND
    pos = 0

    def fail(ch: str, at: int) -> ExpressionError:
        return ExpressionError(f"invalid input {ch!r} at position {at} in {expression!r}")

    while pos < len(expression):
        ch = expression[pos]
        if _starts_operand(ch):
            if state is _State.AFTER_OPERAND:
                raise fail(ch, pos)
            token, pos = _read_operand(expression, pos)
            output.append(token)
            state = _State.AFTER_OPERAND
        elif is_operator(ch):
            while stack and precedence(stack[-1]) >= precedence(ch):
                output.append(Token(TokenType.OPERATOR, stack.pop()))
            stack.append(ch)
            pos += 1
            state = _State.EXPECT_OPERAND
        elif ch == "(":
            if state is not _State.EXPECT_OPERAND:
                raise fail(ch, pos)
            stack.append(ch)
            pos += 1
        elif ch == ")":
            if state is _State.EXPECT_OPERAND:
                raise fail(ch, pos)
            while stack and stack[-1] != "(":
                output.append(Token(TokenType.OPERATOR, stack.pop()))
            if stack:
                stack.pop()
            pos += 1
            state = _State.AFTER_CLOSE
        else:
            raise fail(ch, pos)

    while stack:
        op = stack.pop()
        if op != "(":
            output.append(Token(TokenType.OPERATOR, op))
    return output


def _power(a: float, b: float) -> float:
    """Raise ``a`` to ``b``, yielding inf or nan where the result is out of range."""
    try:
        return math.pow(a, b)
    except OverflowError:
        odd_exponent = b.is_integer() and int(b) % 2 == 1
        return -math.inf if a < 0 and odd_exponent else math.inf
    except ValueError:
        if a == 0 and b < 0:
            return math.inf
        return math.nan


def _divide(a: float, b: float) -> float:
    if b == 0:
        raise EvaluationError("division by zero")
    return a / b


_APPLY: dict[str, Callable[[float, float], float]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
    "^": _power,
}


def evaluate_postfix(tokens: Iterable[Token], x: float) -> float:
    """Evaluate postfix tokens with the variable set to ``x``."""
    stack: list[float] = []
    for token in tokens:
        if token.kind is TokenType.OPERAND:
            stack.append(float(token.value))
        elif token.kind is TokenType.VARIABLE:
            stack.append(float(x))
        else:
            if len(stack) < 2:
                raise EvaluationError("missing operand")
            b = stack.pop()
            a = stack.pop()
            apply = _APPLY.get(token.value)
            if apply is None:
                raise EvaluationError(f"invalid operator {token.value!r}")
            stack.append(apply(a, b))
    if len(stack) != 1:
        raise EvaluationError("malformed expression")
    return stack[0]


def _format_token(token: Token) -> str:
    if token.kind is TokenType.OPERAND:
        return f"{token.value:.2f}"
    if token.kind is TokenType.VARIABLE:
        return "x"
    return str(token.value)


def format_tokens(tokens: Sequence[Token]) -> str:
    """Render postfix tokens separated by spaces, numbers with two decimals."""
    return " ".join(_format_token(token) for token in tokens)