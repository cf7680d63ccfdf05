"""Append-only files of round-trip times, one value in milliseconds per line."""

from __future__ import annotations

import os


def write_rtt_value(path: str | os.PathLike[str], elapsed_ms: float) -> None:
    """Append one round-trip time to ``path``, creating the file if needed."""
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(f"{elapsed_ms:f}\n")


def read_rtt_values(path: str | os.PathLike[str]) -> list[float]:
    """Read every round-trip time from ``path``.

    Raises ValueError for a line that is not a number.
    """
    values: list[float] = []
    with open(path, encoding="utf-8", newline="") as handle:
        for number, raw in enumerate(handle, start=1):
            line = raw.removesuffix("\n").removesuffix("\r")
            if not line or line != line.strip():
                raise ValueError(f"line {number}: invalid number {line!r}")
            try:
                values.append(float(line))
            except ValueError as exc:
                raise ValueError(f"line {number}: invalid number {line!r}") from exc
    return values