import string

import pytest

from rttbench.randgen import random_matrices, random_string


def test_random_matrices_shape():
    a, b = random_matrices(5, 100)
    for m in (a, b):
        assert len(m) == 5
        assert all(len(row) == 5 for row in m)


def test_random_matrices_values_in_range():
    a, b = random_matrices(10, 7)
    values = [v for m in (a, b) for row in m for v in row]
    assert all(0 <= v < 7 for v in values)


def test_max_value_one_gives_zeros():
    a, b = random_matrices(3, 1)
    assert a == [[0] * 3] * 3
    assert b == [[0] * 3] * 3


def test_zero_dimension_gives_empty_matrices():
    assert random_matrices(0, 10) == ([], [])


def test_non_positive_max_value_raises():
    with pytest.raises(ValueError):
        random_matrices(2, 0)


def test_random_string_is_hex_of_requested_length():
    text = random_string(16)
    assert len(text) == 16
    assert set(text) <= set(string.hexdigits.lower())


def test_random_string_odd_length_rounds_down():
    assert len(random_string(7)) == 6


def test_random_string_zero_length_is_empty():
    assert random_string(0) == ""


def test_random_string_negative_raises():
    with pytest.raises(ValueError):
        random_string(-2)