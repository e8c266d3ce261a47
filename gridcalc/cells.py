"""Cell values, coordinate helpers and spreadsheet errors."""

from __future__ import annotations

from dataclasses import dataclass

Coord = tuple[int, int]


class SpreadsheetError(Exception):
    """Base class for errors raised while editing a spreadsheet."""

    code: int = 0


class InvalidCellError(SpreadsheetError):
    """The target cell lies outside the sheet."""

    code = 1


class UnrecognizedCommandError(SpreadsheetError):
    """The expression could not be understood."""

    code = 3


class CyclicDependencyError(SpreadsheetError):
    """The expression would create a circular reference."""

    code = 4


@dataclass(frozen=True)
class Cell:
    """The content of one cell: an integer value, or an error when ``value`` is None."""

    value: int | None = 0

    @classmethod
    def err(cls) -> Cell:
        """Return a cell in the error state."""
        return cls(None)

    @property
    def is_err(self) -> bool:
        return self.value is None

    def __str__(self) -> str:
        return "ERR" if self.value is None else str(self.value)


def col_to_letter(n: int) -> str:
    """Convert a 1-based column index to its letter name (1 -> "A", 27 -> "AA")."""
    letters = []
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))


def is_within_range(cell: Coord, start: Coord, end: Coord) -> bool:
    """Tell whether ``cell`` lies inside the rectangle spanned by ``start`` and ``end``.

    The corners may be given in either order.
    """
    col, row = cell
    (c1, r1), (c2, r2) = start, end
    return min(c1, c2) <= col <= max(c1, c2) and min(r1, r2) <= row <= max(r1, r2)