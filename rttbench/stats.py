"""Summary statistics for round-trip time samples."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass


def average(values: Sequence[float]) -> float:
    """Arithmetic mean; 0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def variance(values: Sequence[float], mean: float) -> float:
    """Population variance around ``mean``; NaN for an empty sequence."""
    if not values:
        return math.nan
    return sum((v - mean) ** 2 for v in values) / len(values)


def standard_deviation(values: Sequence[float], mean: float) -> float:
    """Population standard deviation around ``mean``."""
    return math.sqrt(variance(values, mean))


def median(values: Sequence[float]) -> float:
    """Median of the values; the input is left untouched."""
    if not values:
        raise ValueError("median of an empty sequence")
    ordered = sorted(values)
    middle, odd = divmod(len(ordered), 2)
    if odd:
        return ordered[middle]
    return (ordered[middle - 1] + ordered[middle]) / 2.0


@dataclass(frozen=True)
class Summary:
    """Mean, spread and median of a set of samples."""

    average: float
    variance: float
    standard_deviation: float
    median: float


def summarize(values: Sequence[float]) -> Summary:
    """Compute every statistic at once."""
    mean = average(values)
    var = variance(values, mean)
    return Summary(
        average=mean,
        variance=var,
        standard_deviation=math.sqrt(var),
        median=median(values),
    )


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


def format_stats(values: Sequence[float]) -> str:
    """Render mean, standard deviation and median as report lines in milliseconds."""
    summary = summarize(values)
    rows = [
        ("Média:", summary.average),
        ("Desvio padrão:", summary.standard_deviation),
        ("Mediana:", summary.median),
    ]
    width = max(len(label) for label, _ in rows)
    return "\n".join(
        f"{label.ljust(width)} {_format_number(value)} ms" for label, value in rows
    )