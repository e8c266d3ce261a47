import pytest

from gridcalc.formula import (
    cell_name_to_coord,
    eval_binary,
    eval_range,
    parse_range,
    split_binary,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("A1", (1, 1)),
        ("D4", (4, 4)),
        ("E5", (5, 5)),
        ("Z99", (26, 99)),
        ("AA1", (27, 1)),
        ("ZZZ999", (18278, 999)),
    ],
)
def test_cell_name_to_coord_valid(name, expected):
    assert cell_name_to_coord(name) == expected


@pytest.mark.parametrize("name", ["abc", "xyz", "42", "A", "A0", "1A", "", "AAAA1", "A1:B2"])
def test_cell_name_to_coord_invalid(name):
    assert cell_name_to_coord(name) is None


def test_split_binary_operators():
    assert split_binary("A1+B2") == ("+", "A1", "B2")
    assert split_binary("B2-A1") == ("-", "B2", "A1")
    assert split_binary("A1*B2") == ("*", "A1", "B2")
    assert split_binary("10/0") == ("/", "10", "0")
    assert split_binary("5+A1") == ("+", "5", "A1")


def test_split_binary_leading_sign_is_not_operator():
    assert split_binary("-123") is None
    assert split_binary("-5+3") == ("+", "-5", "3")


def test_split_binary_rejects_non_binary():
    assert split_binary("42") is None
    assert split_binary("A1") is None
    assert split_binary("SUM(A1:B2)") is None
    assert split_binary("5%10") is None


def test_parse_range():
    assert parse_range("SUM(A1:C2)") == ("SUM", (1, 1), (3, 2))
    assert parse_range("AVG(A1:C2)") == ("AVG", (1, 1), (3, 2))
    assert parse_range("MAX(E5:E5)") == ("MAX", (5, 5), (5, 5))
    assert parse_range("SUM(C2:A1)") == ("SUM", (3, 2), (1, 1))


def test_parse_range_rejects_invalid():
    assert parse_range("INVALID(A1:B2)") is None
    assert parse_range("SUM(A1)") is None
    assert parse_range("A1+B2") is None
    assert parse_range("SLEEP(A1:B2)") is None


def test_eval_binary():
    assert eval_binary(1, 5, 10) == 15
    assert eval_binary(2, 10, 5) == 5
    assert eval_binary(3, 5, 10) == 50
    assert eval_binary(5, 10, 5) == 2
    assert eval_binary(5, 35, 3) == 11


def test_eval_binary_truncates_toward_zero():
    assert eval_binary(5, -7, 2) == -3
    assert eval_binary(5, 7, -2) == -3


def test_eval_binary_failures():
    assert eval_binary(5, 10, 0) is None
    assert eval_binary(4, 1, 2) is None
    assert eval_binary(1, 2**31 - 1, 1) is None


GRID = {(1, 1): 10, (2, 1): 20, (3, 1): 30, (1, 2): 40, (2, 2): 50, (3, 2): 60}


@pytest.mark.parametrize(
    "func, expected",
    [("SUM", 210), ("AVG", 35), ("MIN", 10), ("MAX", 60)],
)
def test_eval_range_functions(func, expected):
    assert eval_range(func, (1, 1), (3, 2), GRID.get) == expected


def test_eval_range_stdev_constant():
    assert eval_range("STDEV", (1, 1), (1, 3), lambda c: 7) == 0


def test_eval_range_error_propagates():
    assert eval_range("SUM", (1, 1), (1, 1), lambda c: None) is None


def test_eval_range_unknown_function():
    assert eval_range("FOO", (1, 1), (3, 2), GRID.get) is None


def test_eval_range_visits_every_cell():
    seen = []

    def get_val(coord):
        seen.append(coord)
        return 1

    assert eval_range("SUM", (1, 1), (2, 3), get_val) == 6
    assert sorted(seen) == [(1, 1), (1, 2), (1, 3), (2, 1), (2, 2), (2, 3)]