import pytest

from gridcalc.cells import (
    Cell,
    CyclicDependencyError,
    InvalidCellError,
    SpreadsheetError,
    UnrecognizedCommandError,
    col_to_letter,
    is_within_range,
)


@pytest.mark.parametrize(
    "n, expected",
    [
        (1, "A"),
        (26, "Z"),
        (27, "AA"),
        (52, "AZ"),
        (53, "BA"),
        (702, "ZZ"),
        (703, "AAA"),
        (18278, "ZZZ"),
    ],
)
def test_col_to_letter(n, expected):
    assert col_to_letter(n) == expected


def test_col_to_letter_zero_is_empty():
    assert col_to_letter(0) == ""


def test_is_within_range_inside():
    assert is_within_range((2, 2), (1, 1), (3, 3))


def test_is_within_range_edges():
    assert is_within_range((1, 1), (1, 1), (3, 3))
    assert is_within_range((3, 3), (1, 1), (3, 3))


def test_is_within_range_outside():
    assert not is_within_range((4, 4), (1, 1), (3, 3))
    assert not is_within_range((2, 4), (1, 1), (3, 3))
    assert not is_within_range((0, 2), (1, 1), (3, 3))


def test_is_within_range_reversed_corners():
    assert is_within_range((2, 2), (3, 3), (1, 1))
    assert is_within_range((1, 3), (3, 1), (1, 3))


def test_new_cell_is_zero():
    cell = Cell()
    assert cell == Cell(0)
    assert cell.value == 0
    assert not cell.is_err


def test_err_cell():
    cell = Cell.err()
    assert cell.is_err
    assert cell.value is None
    assert cell == Cell.err()
    assert cell != Cell(0)


def test_cell_str():
    assert str(Cell(42)) == "42"
    assert str(Cell(-7)) == "-7"
    assert str(Cell.err()) == "ERR"


@pytest.mark.parametrize(
    "exc", [InvalidCellError, UnrecognizedCommandError, CyclicDependencyError]
)
def test_errors_share_base(exc):
    err = exc("boom")
    assert isinstance(err, SpreadsheetError)
    assert isinstance(err, Exception)
    assert err.args == ("boom",)