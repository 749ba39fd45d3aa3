"""
Fuzzy AND (minimum) and fuzzy OR (maximum) combinators.

Both are offered as a binary form, used by the rule engine to fold a rule's
antecedent left to right, and as an n-ary reduction over a non-empty
iterable of degrees.
"""

from typing import Iterable


def fuzzy_and(a: float, b: float) -> float:
    """Fuzzy AND of two membership degrees (minimum)."""
    return min(a, b)


def fuzzy_or(a: float, b: float) -> float:
    """Fuzzy OR of two membership degrees (maximum)."""
    return max(a, b)


def fuzzy_and_all(values: Iterable[float]) -> float:
    """
    Fuzzy AND over a sequence of degrees.

    Raises:
        ValueError: If ``values`` is empty.
    """
    it = iter(values)
    try:
        acc = float(next(it))
    except StopIteration:
        raise ValueError("fuzzy_and_all() requires at least one degree") from None
    for v in it:
        acc = fuzzy_and(acc, float(v))
    return acc


def fuzzy_or_all(values: Iterable[float]) -> float:
    """
    Fuzzy OR over a sequence of degrees.

    Raises:
        ValueError: If ``values`` is empty.
    """
    it = iter(values)
    try:
        acc = float(next(it))
    except StopIteration:
        raise ValueError("fuzzy_or_all() requires at least one degree") from None
    for v in it:
        acc = fuzzy_or(acc, float(v))
    return acc
