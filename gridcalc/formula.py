"""Parsing of cell names and formulas, and evaluation of operators and range functions."""

from __future__ import annotations

import math
import re
from collections.abc import Callable

from gridcalc.cells import Coord

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
MAX_COL = 18278

OPERATORS = "+-*/"
OP_CODES = {"+": 1, "-": 2, "*": 3, "/": 5}
RANGE_FUNCTIONS = ("SUM", "AVG", "MIN", "MAX", "STDEV")

_CELL_RE = re.compile(r"([A-Z]{1,3})([1-9][0-9]*)")
_RANGE_RE = re.compile(r"([A-Z]+)\(\s*([A-Z0-9]+)\s*:\s*([A-Z0-9]+)\s*\)")


def _checked(value: int) -> int | None:
    return value if INT_MIN <= value <= INT_MAX else None


def cell_name_to_coord(name: str) -> Coord | None:
    """Turn a cell name such as "B3" into ``(column, row)``, both 1-based.

    Returns None when the text is not a cell name.
    """
    match = _CELL_RE.fullmatch(name.strip())
    if match is None:
        return None
    letters, digits = match.groups()
    col = 0
    for ch in letters:
        col = col * 26 + (ord(ch) - ord("A") + 1)
    row = int(digits)
    if col > MAX_COL or row > 0xFFFF:
        return None
    return col, row


def split_binary(expr: str) -> tuple[str, str, str] | None:
    """Split ``expr`` at its first arithmetic operator.

    A sign in the first position belongs to the left operand, so "-5" is not
    a binary expression. Returns ``(operator, lhs, rhs)`` or None.
    """
    expr = expr.strip()
    for pos, ch in enumerate(expr):
        if pos > 0 and ch in OPERATORS:
            lhs, rhs = expr[:pos].strip(), expr[pos + 1 :].strip()
            if not lhs or not rhs:
                return None
            return ch, lhs, rhs
    return None


def parse_range(expr: str) -> tuple[str, Coord, Coord] | None:
    """Parse a range call such as "SUM(A1:B3)" into ``(function, start, end)``."""
    match = _RANGE_RE.fullmatch(expr.strip())
    if match is None:
        return None
    func, first, second = match.groups()
    if func not in RANGE_FUNCTIONS:
        return None
    start = cell_name_to_coord(first)
    end = cell_name_to_coord(second)
    if start is None or end is None:
        return None
    return func, start, end


def eval_binary(op: int, a: int, b: int) -> int | None:
    """Apply operator ``op`` (1 add, 2 subtract, 3 multiply, 5 divide) to two integers.

    Division truncates toward zero. Returns None on division by zero, on a
    result outside the 32-bit range, or for an unknown operator.
    """
    if op == 1:
        return _checked(a + b)
    if op == 2:
        return _checked(a - b)
    if op == 3:
        return _checked(a * b)
    if op == 5:
        if b == 0:
            return None
        quotient = abs(a) // abs(b)
        return _checked(quotient if (a < 0) == (b < 0) else -quotient)
    return None


def eval_range(
    func: str,
    start: Coord,
    end: Coord,
    get_val: Callable[[Coord], int | None],
) -> int | None:
    """Evaluate a range function over the rectangle from ``start`` to ``end``.

    ``get_val`` gives a cell's value or None for an error cell; any error
    in the range makes the result None, as does an unknown function.
    """
    values = []
    for col in range(start[0], end[0] + 1):
        for row in range(start[1], end[1] + 1):
            value = get_val((col, row))
            if value is None:
                return None
            values.append(value)
    if not values:
        return None

    total = sum(values)
    count = len(values)
    if func == "SUM":
        return _checked(total)
    if func == "AVG":
        quotient = abs(total) // count
        return _checked(quotient if total >= 0 else -quotient)
    if func == "MIN":
        return min(values)
    if func == "MAX":
        return max(values)
    if func == "STDEV":
        mean = total / count
        variance = sum((v - mean) ** 2 for v in values) / count
        return _checked(round(math.sqrt(variance)))
    return None