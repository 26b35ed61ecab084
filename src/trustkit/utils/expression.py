"""Evaluator for the arithmetic TTL expressions used in configuration.

Expressions are runs of decimal digits separated by ``+ - * /`` and optional
spaces, e.g. ``"15 * 24 * 60 * 60"``. Parentheses are not supported; ``*``
and ``/`` bind tighter than ``+`` and ``-`` by way of a pending-terms stack.
"""

from __future__ import annotations

import typing as t

from trustkit.errors import ConfigurationError

_DIGITS = "0123456789"
_OPERATORS = "+-*/"


def _truncating_div(dividend: int, divisor: int) -> int:
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend >= 0) == (divisor > 0) else -quotient


def _apply(terms: t.List[int], operator: str, operand: int, expression: str) -> None:
    if operator == "+":
        terms.append(operand)
    elif operator == "-":
        terms.append(-operand)
    elif operator == "*":
        terms.append(terms.pop() * operand)
    else:
        if operand == 0:
            raise ConfigurationError("division by zero in TTL expression", {"expression": expression})
        terms.append(_truncating_div(terms.pop(), operand))


def evaluate(expression: t.Optional[str]) -> int:
    """Evaluate ``expression`` and return the integer total.

    Raises ConfigurationError for empty or malformed input and for division by zero.
    """
    if expression is None or not expression.strip():
        raise ConfigurationError("TTL expression cannot be empty")

    terms: t.List[int] = []
    operand = 0
    has_operand = False
    pending = "+"

    for position, char in enumerate(expression):
        if char in _DIGITS:
            operand = operand * 10 + (ord(char) - ord("0"))
            has_operand = True
        elif char == " ":
            continue
        elif char in _OPERATORS:
            if not has_operand:
                raise ConfigurationError(
                    f"operator {char!r} at position {position} has no left operand",
                    {"expression": expression},
                )
            _apply(terms, pending, operand, expression)
            pending = char
            operand = 0
            has_operand = False
        else:
            raise ConfigurationError(
                f"unexpected character {char!r} at position {position}",
                {"expression": expression},
            )

    if not has_operand:
        raise ConfigurationError("TTL expression ends with an operator", {"expression": expression})
    _apply(terms, pending, operand, expression)
    return sum(terms)
