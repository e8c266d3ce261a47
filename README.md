# gridcalc

A small spreadsheet engine working on 32-bit whole numbers. Cells hold
literals, references to other cells, binary expressions, range functions or
`SLEEP`. Dependent cells recalculate automatically and circular references
are refused.

## Install

```
pip install .
```

## Use

Coordinates are `(column, row)` tuples; cell names start at `A1 = (1, 1)`.
A sheet made with `Spreadsheet(rows, cols)` accepts rows `0..rows` and
columns `0..cols`; row and column 0 are never shown in tables.

```python
import sys

from gridcalc.spreadsheet import Spreadsheet
from gridcalc.cells import CyclicDependencyError

sheet = Spreadsheet(10, 10)
sheet.set_cell((1, 1), "5")          # A1 = 5
sheet.set_cell((2, 2), "A1*2")       # B2 = 10
sheet.set_cell((3, 3), "SUM(A1:B2)") # C3 = 15

sheet.set_cell((1, 1), "7")
print(sheet.get_val((3, 3)))         # 21

try:
    sheet.set_cell((1, 1), "C3")
except CyclicDependencyError:
    print("cycle refused; A1 keeps its value")

sheet.display_to(sys.stdout, 0, 0, 5, 5)
```

`display_to(writer, start_row, start_col, max_rows, max_cols)` writes a
table with column letters and row numbers, each cell right-aligned in eight
characters; `display(...)` does the same to standard output.
`has_cycle_from(coord)` tells whether a circular reference is reachable from
a cell, and `recalc_dependents(coord)` recomputes everything depending on it.

### Expressions

- Literals: `42`, `-7`
- References: `B3` (one to three letters, column at most 18278)
- Binary operations with `+`, `-`, `*`, `/` on literals or references:
  `A1+2`, `B2/C3`; division truncates toward zero
- Range functions over a rectangle, written top-left first: `SUM`, `AVG`
  (truncated toward zero), `MIN`, `MAX`, `STDEV` (population deviation,
  rounded), e.g. `MAX(A1:C4)`
- `SLEEP(n)` or `SLEEP(A1)`: waits that many seconds if positive, then takes
  the value

A cell that divides by zero, or refers to a cell in error or outside the
sheet, becomes an error cell; `get_val` returns `None` for it and the table
shows `ERR`.

### Lower-level helpers

- `gridcalc.cells`: `Cell` (with `Cell.err()`), `col_to_letter`,
  `is_within_range`
- `gridcalc.formula`: `cell_name_to_coord`, `split_binary`, `parse_range`,
  `eval_binary`, `eval_range`

### Errors

`set_cell` raises a subclass of `SpreadsheetError`, each with a numeric
`code`:

- `InvalidCellError` (1) – the target cell is outside the sheet
- `UnrecognizedCommandError` (3) – the expression cannot be understood, or a
  range is reversed or outside the sheet
- `CyclicDependencyError` (4) – the formula would create a circular
  reference; the cell's value and dependencies are left as they were
- a `SpreadsheetError` with code 5 – a binary operation's result does not fit
  in 32 bits

## What it does not do

The package is a library only: it has no command-line program, no
interactive screen, and no saving or loading of sheets to files.

## Tests

```
pip install .[test]
pytest
```