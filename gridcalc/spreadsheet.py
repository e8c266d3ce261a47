"""A grid of integer cells whose formulas track dependencies and recalculate."""

from __future__ import annotations

import re
import sys
import time
from collections.abc import Iterator
from typing import TextIO

from gridcalc.cells import (
    Cell,
    Coord,
    CyclicDependencyError,
    InvalidCellError,
    SpreadsheetError,
    UnrecognizedCommandError,
    col_to_letter,
    is_within_range,
)
from gridcalc.formula import (
    INT_MAX,
    INT_MIN,
    OP_CODES,
    cell_name_to_coord,
    eval_binary,
    eval_range,
    parse_range,
    split_binary,
)

_INT_RE = re.compile(r"[+-]?[0-9]+")

NormalDeps = tuple[str, set[Coord]]
RangeDeps = tuple[str, Coord, Coord]


class _ArithmeticFailure(SpreadsheetError):
    """A binary operation on two values could not produce a result."""

    code = 5


def _parse_int(text: str) -> int | None:
    if _INT_RE.fullmatch(text) is None:
        return None
    value = int(text)
    return value if INT_MIN <= value <= INT_MAX else None


def _sleep(seconds: int) -> None:
    if seconds > 0:
        time.sleep(seconds)


class Spreadsheet:
    """A sheet of ``rows`` by ``cols`` integer cells addressed as ``(column, row)``.

    Row and column 0 exist but are never shown; cell names start at A1 = (1, 1).
    """

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols
        self.parents_normal: dict[Coord, set[Coord]] = {}
        self.child_normal: dict[Coord, NormalDeps] = {}
        self.child_range: dict[Coord, RangeDeps] = {}
        self._cells: dict[Coord, Cell] = {}

    def _in_bounds(self, coord: Coord) -> bool:
        col, row = coord
        return 0 <= row <= self.rows and 0 <= col <= self.cols

    def _cell(self, coord: Coord) -> Cell:
        return self._cells.get(coord, Cell())

    def get_val(self, coord: Coord) -> int | None:
        """Return the value of a cell, or None if it holds an error or is outside the sheet."""
        if not self._in_bounds(coord):
            return None
        return self._cell(coord).value

    def _restore(
        self,
        coord: Coord,
        old_normal: NormalDeps | None,
        old_range: RangeDeps | None,
        removed_parents: list[Coord],
    ) -> None:
        if old_normal is not None:
            self.child_normal[coord] = old_normal
        if old_range is not None:
            self.child_range[coord] = old_range
        for parent in removed_parents:
            self.parents_normal.setdefault(parent, set()).add(coord)

    def _add_normal_refs(self, coord: Coord, expr: str, refs: set[Coord]) -> None:
        for ref in refs:
            self.parents_normal.setdefault(ref, set()).add(coord)
        self.child_normal[coord] = (expr, refs)

    def _drop_normal_refs(self, coord: Coord, refs: set[Coord]) -> None:
        for ref in refs:
            self.parents_normal.setdefault(ref, set()).discard(coord)
        self.child_normal.pop(coord, None)

    def _operand(self, text: str) -> Cell:
        ref = cell_name_to_coord(text)
        if ref is not None:
            value = self.get_val(ref)
            return Cell.err() if value is None else Cell(value)
        value = _parse_int(text)
        if value is None:
            raise UnrecognizedCommandError(f"invalid operand: {text!r}")
        return Cell(value)

    def set_cell(self, coord: Coord, expr: str) -> None:
        """Store ``expr`` in the cell at ``coord`` and recalculate everything that depends on it.

        Accepts integer literals, cell names, binary operations such as "A1+2",
        range functions such as "SUM(A1:B3)" and "SLEEP(n)" or "SLEEP(A1)".

        Raises InvalidCellError for a cell outside the sheet,
        UnrecognizedCommandError for an expression that cannot be understood,
        CyclicDependencyError when the expression would create a cycle, and a
        SpreadsheetError with code 5 when arithmetic cannot produce a value.
        """
        if not self._in_bounds(coord):
            raise InvalidCellError(f"cell {coord} is outside the sheet")

        old_value = self._cell(coord)
        old_normal = self.child_normal.pop(coord, None)
        old_range = self.child_range.pop(coord, None)
        removed_parents = [
            parent for parent, deps in self.parents_normal.items() if coord in deps
        ]
        for parent in removed_parents:
            self.parents_normal[parent].discard(coord)

        def restore() -> None:
            self._restore(coord, old_normal, old_range, removed_parents)

        expr = expr.strip()

        if expr.startswith("SLEEP(") and expr.endswith(")"):
            arg = expr[6:-1]
            if ":" in arg:
                restore()
                raise UnrecognizedCommandError("SLEEP does not accept a range")
            seconds = _parse_int(arg)
            if seconds is not None:
                _sleep(seconds)
                self._cells[coord] = Cell(seconds)
                self.recalc_dependents(coord)
                return
            ref = cell_name_to_coord(arg)
            if ref is not None:
                self._add_normal_refs(coord, expr, {ref})
                if self.has_cycle_from(coord):
                    self._drop_normal_refs(coord, {ref})
                    restore()
                    raise CyclicDependencyError(f"{expr!r} creates a cycle")
                value = self.get_val(ref)
                if value is None:
                    self._cells[coord] = Cell.err()
                else:
                    _sleep(value)
                    self._cells[coord] = Cell(value)
                self.recalc_dependents(coord)
                return

        binary = split_binary(expr)
        if binary is not None:
            op_char, lhs, rhs = binary
            op = OP_CODES.get(op_char)
            if op is None:
                raise UnrecognizedCommandError(f"unknown operator {op_char!r}")
            a = self._operand(lhs)
            b = self._operand(rhs)
            if (op == 5 and b == Cell(0)) or a.is_err or b.is_err:
                new_cell = Cell.err()
            else:
                result = eval_binary(op, a.value, b.value)
                if result is None:
                    raise _ArithmeticFailure(f"cannot evaluate {expr!r}")
                new_cell = Cell(result)
            refs = {ref for ref in map(cell_name_to_coord, (lhs, rhs)) if ref is not None}
            self._add_normal_refs(coord, expr, refs)
            if self.has_cycle_from(coord):
                self._drop_normal_refs(coord, refs)
                restore()
                self._cells[coord] = old_value
                raise CyclicDependencyError(f"{expr!r} creates a cycle")
            self._cells[coord] = new_cell
            self.recalc_dependents(coord)
            return

        ranged = parse_range(expr)
        if ranged is not None:
            func, start, end = ranged
            if (
                start[0] > end[0]
                or start[1] > end[1]
                or not self._in_bounds(start)
                or not self._in_bounds(end)
            ):
                raise UnrecognizedCommandError(f"invalid range in {expr!r}")
            self.child_range[coord] = (expr, start, end)
            if self.has_cycle_from(coord):
                self.child_range.pop(coord, None)
                restore()
                self._cells[coord] = old_value
                raise CyclicDependencyError(f"{expr!r} creates a cycle")
            value = eval_range(func, start, end, self.get_val)
            self._cells[coord] = Cell.err() if value is None else Cell(value)
            self.recalc_dependents(coord)
            return

        ref = cell_name_to_coord(expr)
        if ref is not None:
            self._add_normal_refs(coord, expr, {ref})
            if self.has_cycle_from(coord):
                self._drop_normal_refs(coord, {ref})
                restore()
                self._cells[coord] = old_value
                raise CyclicDependencyError(f"{expr!r} creates a cycle")
            value = self.get_val(ref)
            self._cells[coord] = Cell.err() if value is None else Cell(value)
            self.recalc_dependents(coord)
            return

        literal = _parse_int(expr)
        if literal is not None:
            self._cells[coord] = Cell(literal)
            self.recalc_dependents(coord)
            return

        restore()
        raise UnrecognizedCommandError(f"unrecognized expression {expr!r}")

    def _dependents(self, cell: Coord) -> Iterator[Coord]:
        yield from self.parents_normal.get(cell, ())
        for range_cell, (_, start, end) in list(self.child_range.items()):
            if is_within_range(cell, start, end):
                yield range_cell

    def _references(self, cell: Coord) -> Iterator[Coord]:
        normal = self.child_normal.get(cell)
        if normal is not None:
            yield from normal[1]
        ranged = self.child_range.get(cell)
        if ranged is not None:
            _, start, end = ranged
            for col in range(start[0], end[0] + 1):
                for row in range(start[1], end[1] + 1):
                    yield col, row

    def _reevaluate(self, cur: Coord) -> Cell | None:
        """Compute a cell's value from its stored formula; None leaves it unchanged."""
        normal = self.child_normal.get(cur)
        if normal is not None:
            formula = normal[0]
            if formula.startswith("SLEEP(") and formula.endswith(")"):
                arg = formula[6:-1]
                seconds = _parse_int(arg)
                if seconds is not None:
                    _sleep(seconds)
                    return Cell(seconds)
                ref = cell_name_to_coord(arg)
                if ref is None:
                    return Cell.err()
                value = self.get_val(ref)
                if value is None:
                    return Cell.err()
                _sleep(value)
                return Cell(value)

            binary = split_binary(formula)
            if binary is not None:
                op_char, lhs, rhs = binary
                op = OP_CODES.get(op_char)
                if op is None:
                    return None
                a, b = (
                    self.get_val(ref) if (ref := cell_name_to_coord(side)) is not None
                    else _parse_int(side)
                    for side in (lhs, rhs)
                )
                if op == 5 and b == 0:
                    return Cell.err()
                if a is None or b is None:
                    return Cell.err()
                result = eval_binary(op, a, b)
                return Cell.err() if result is None else Cell(result)

            ref = cell_name_to_coord(formula)
            if ref is not None:
                value = self.get_val(ref)
                return Cell.err() if value is None else Cell(value)

            literal = _parse_int(formula)
            return None if literal is None else Cell(literal)

        ranged = self.child_range.get(cur)
        if ranged is not None:
            formula, start, end = ranged
            func = formula.partition("(")[0] if "(" in formula else ""
            value = eval_range(func, start, end, self.get_val)
            return Cell.err() if value is None else Cell(value)
        return None

    def recalc_dependents(self, start: Coord) -> None:
        """Recompute every cell that depends, directly or not, on ``start``.

        Cells are evaluated in topological order; ``start`` itself is left as is.
        """
        affected: list[Coord] = []
        seen: set[Coord] = set()
        queue = [start]
        while queue:
            cell = queue.pop()
            if cell in seen:
                continue
            seen.add(cell)
            affected.append(cell)
            queue.extend(dep for dep in self._dependents(cell) if dep not in seen)

        visited: set[Coord] = set()
        visiting: set[Coord] = set()
        order: list[Coord] = []

        def enter(cell: Coord, stack: list[tuple[Coord, Iterator[Coord]]]) -> None:
            if cell in visited or cell in visiting:
                return
            visiting.add(cell)
            stack.append((cell, self._dependents(cell)))

        for root in affected:
            stack: list[tuple[Coord, Iterator[Coord]]] = []
            enter(root, stack)
            while stack:
                cell, successors = stack[-1]
                for successor in successors:
                    if successor not in visited and successor not in visiting:
                        enter(successor, stack)
                        break
                else:
                    stack.pop()
                    visiting.discard(cell)
                    visited.add(cell)
                    order.append(cell)

        for cur in reversed(order):
            if cur == start:
                continue
            new_cell = self._reevaluate(cur)
            if new_cell is not None:
                self._cells[cur] = new_cell

    def display_to(
        self,
        writer: TextIO,
        start_row: int,
        start_col: int,
        max_rows: int,
        max_cols: int,
    ) -> None:
        """Write a window of the sheet as a table to ``writer``."""
        columns = range(start_col + 1, min(start_col + max_cols, self.cols) + 1)
        rows = range(start_row + 1, min(start_row + max_rows, self.rows) + 1)
        header = "".join(f"{col_to_letter(c):>8}" for c in columns)
        writer.write(f"    {header}\n")
        for r in rows:
            line = "".join(f"{str(self._cell((c, r))):>8}" for c in columns)
            writer.write(f"{r:>3} {line}\n")

    def display(self, start_row: int, start_col: int, max_rows: int, max_cols: int) -> None:
        """Print a window of the sheet to standard output."""
        self.display_to(sys.stdout, start_row, start_col, max_rows, max_cols)

    def has_cycle_from(self, start_cell: Coord) -> bool:
        """Tell whether a circular reference is reachable from ``start_cell``."""
        visited = {start_cell}
        path = {start_cell}
        stack = [(start_cell, self._references(start_cell))]
        while stack:
            cell, refs = stack[-1]
            for ref in refs:
                if ref not in visited:
                    visited.add(ref)
                    path.add(ref)
                    stack.append((ref, self._references(ref)))
                    break
                if ref in path:
                    return True
            else:
                path.discard(cell)
                stack.pop()
        return False