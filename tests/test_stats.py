import math

import pytest

from rttbench.stats import (
    Summary,
    average,
    format_stats,
    median,
    standard_deviation,
    summarize,
    variance,
)


def test_average_of_empty_is_zero():
    assert average([]) == 0


def test_average_of_constant_values_is_that_value():
    assert average([4.25, 4.25, 4.25]) == 4.25


def test_average_lies_between_min_and_max():
    values = [1.0, 9.0, 3.5, 7.25]
    assert min(values) <= average(values) <= max(values)


def test_variance_of_constant_values_is_zero():
    values = [3.0, 3.0, 3.0, 3.0]
    assert variance(values, average(values)) == 0


def test_variance_of_empty_is_nan():
    result = variance([], 0.0)
    assert str(result) == "nan"


def test_variance_is_non_negative():
    values = [1.0, 5.0, 2.0, 8.0]
    assert variance(values, average(values)) >= 0


def test_standard_deviation_is_square_root_of_variance():
    values = [2.0, 4.0, 4.0, 5.0, 7.0]
    mean = average(values)
    assert standard_deviation(values, mean) == pytest.approx(
        math.sqrt(variance(values, mean))
    )


def test_median_odd_length_is_middle_value():
    assert median([3.0, 1.0, 2.0]) == 2.0


def test_median_even_length_averages_middle_pair():
    assert median([4.0, 1.0, 3.0, 2.0]) == 2.5


def test_median_does_not_reorder_input():
    values = [5.0, 1.0, 3.0]
    median(values)
    assert values == [5.0, 1.0, 3.0]


def test_median_of_empty_raises():
    with pytest.raises(ValueError):
        median([])


def test_summarize_agrees_with_individual_functions():
    values = [1.5, 2.5, 9.0, 4.0]
    summary = summarize(values)
    mean = average(values)
    assert summary == Summary(
        average=mean,
        variance=variance(values, mean),
        standard_deviation=standard_deviation(values, mean),
        median=median(values),
    )


def test_format_stats_lines():
    lines = format_stats([2.0, 2.0]).splitlines()
    assert lines == [
        "Média:         2 ms",
        "Desvio padrão: 0 ms",
        "Mediana:       2 ms",
    ]


def test_format_stats_shows_fraction():
    text = format_stats([1.25])
    assert "1.25 ms" in text