"""Integer matrix multiplication used by every benchmark server."""

from __future__ import annotations

from collections.abc import Sequence

Matrix = list[list[int]]

_INT32_SPAN = 1 << 32
_INT32_HALF = 1 << 31


def _check_shapes(a: Sequence[Sequence[int]], b: Sequence[Sequence[int]]) -> None:
    if not a or not b:
        raise ValueError("matrices must not be empty")
    if len(a[0]) != len(b):
        raise ValueError(
            f"cannot multiply: left matrix has {len(a[0])} columns, "
            f"right matrix has {len(b)} rows"
        )


def multiply(a: Sequence[Sequence[int]], b: Sequence[Sequence[int]]) -> Matrix:
    """Return the product of two integer matrices.

    Raises ValueError when a matrix is empty or the inner dimensions differ.
    """
    _check_shapes(a, b)
    columns = list(zip(*b))
    return [[sum(x * y for x, y in zip(row, col)) for col in columns] for row in a]


def _wrap_int32(value: int) -> int:
    return (value + _INT32_HALF) % _INT32_SPAN - _INT32_HALF


def multiply32(a: Sequence[Sequence[int]], b: Sequence[Sequence[int]]) -> Matrix:
    """Return the product of two matrices using signed 32-bit wrapping arithmetic."""
    return [[_wrap_int32(value) for value in row] for row in multiply(a, b)]