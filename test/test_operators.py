from functools import reduce

import pytest

from fis.operators import fuzzy_and, fuzzy_and_all, fuzzy_or, fuzzy_or_all


@pytest.mark.parametrize(
    "a,b",
    [
        (0.3, 0.8),
        (0.8, 0.3),
        (0.0, 1.0),
        (0.5, 0.5),
    ],
)
def test_binary_operators_are_min_and_max(a, b):
    assert fuzzy_and(a, b) == min(a, b)
    assert fuzzy_or(a, b) == max(a, b)


@pytest.mark.parametrize(
    "values",
    [
        [0.7],
        [0.2, 0.9],
        [0.4, 0.1, 0.8, 0.6],
        (v / 10 for v in range(10, 0, -1)),
    ],
)
def test_nary_reductions_agree_with_binary_fold(values):
    values = list(values)
    assert fuzzy_and_all(values) == reduce(fuzzy_and, values)
    assert fuzzy_or_all(values) == reduce(fuzzy_or, values)


def test_nary_accepts_generators():
    assert fuzzy_and_all(x / 4 for x in (4, 1, 3)) == pytest.approx(0.25)
    assert fuzzy_or_all(x / 4 for x in (0, 1, 3)) == pytest.approx(0.75)


@pytest.mark.parametrize("op", [fuzzy_and_all, fuzzy_or_all])
def test_nary_rejects_empty_sequence(op):
    with pytest.raises(ValueError):
        op([])
