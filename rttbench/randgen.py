"""Random inputs for the benchmarks."""

from __future__ import annotations

import random
import secrets


def random_matrices(dim: int, max_value: int) -> tuple[list[list[int]], list[list[int]]]:
    """Return two ``dim`` x ``dim`` matrices with entries in ``[0, max_value)``."""
    if max_value <= 0:
        raise ValueError("max_value must be positive")
    if dim < 0:
        raise ValueError("dim must not be negative")

    def _matrix() -> list[list[int]]:
        return [[random.randrange(max_value) for _ in range(dim)] for _ in range(dim)]

    return _matrix(), _matrix()


def random_string(length: int) -> str:
    """Return a random hexadecimal string built from ``length // 2`` random bytes."""
    if length < 0:
        raise ValueError("length must not be negative")
    return secrets.token_hex(length // 2)