"""
Fuzzy set model: a named set with a membership-function kind and parameters.

Input sets cache their most recent fuzzified degree; output sets are only
aggregation keys for the rule engine. Whether a set is an input or an output
is decided by the loader from a configurable naming convention.
"""

import logging
import math
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from fis import membership
from fis.diagnostics import DEFINITION, Diagnostic

fuzzy_set_log = logging.getLogger("fuzzy_set")


class MFKind(Enum):
    """Supported membership-function shapes: (file keyword, arity, label)."""

    TRIANGULAR = ("TRIANG", 3, "Triangular")
    TRAPEZOIDAL = ("TRAP", 4, "Trapezoidal")
    SATURATION = ("SAT", 2, "Saturation")
    GAUSSIAN = ("GAUSS", 2, "Gaussian")

    def __init__(self, keyword: str, arity: int, label: str):
        self.keyword = keyword
        self.arity = arity
        self.label = label

    @classmethod
    def from_keyword(cls, keyword: str) -> "MFKind":
        for kind in cls:
            if kind.keyword == keyword.upper():
                return kind
        raise KeyError(f"Unknown membership function kind '{keyword}'")


class FuzzySet:
    """
    A fuzzy set with a membership function.

    Attributes:
        name (str): Unique set name, also the key used in rules.
        kind (MFKind): Membership-function shape.
        params (Tuple[float, ...]): Shape parameters, in file order.
        line (int | None): Source line in the definitions file, if any.
    """

    def __init__(self, name: str, kind: MFKind, params: Sequence[float], line=None):
        self.name = name
        self.kind = kind
        self.params: Tuple[float, ...] = tuple(float(p) for p in params)
        self.line = line
        self.diagnostics: List[Diagnostic] = self.validate()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.kind.keyword}, {list(self.params)})"

    @property
    def mf_label(self) -> str:
        return self.kind.label

    @property
    def is_valid(self) -> bool:
        return not self.diagnostics

    def validate(self) -> List[Diagnostic]:
        """
        Checks the parameters against the requirements of the shape.

        Returns:
            List[Diagnostic]: Definition diagnostics; empty if the set is usable.
        """
        problems = []
        p = self.params
        if not all(math.isfinite(v) for v in p):
            problems.append(f"parameters must be finite numbers, got {list(p)}")
        elif len(p) != self.kind.arity:
            problems.append(
                f"{self.kind.keyword} needs {self.kind.arity} parameters, got {len(p)}"
            )
        elif self.kind is MFKind.TRIANGULAR and not p[0] <= p[1] <= p[2]:
            problems.append(f"triangle bounds must satisfy left <= center <= right, got {list(p)}")
        elif self.kind is MFKind.TRAPEZOIDAL and not p[0] <= p[1] <= p[2] <= p[3]:
            problems.append(f"trapezoid bounds must be non-decreasing, got {list(p)}")
        elif self.kind is MFKind.GAUSSIAN and p[1] <= 0:
            problems.append(f"gaussian width must be > 0, got {p[1]}")
        return [
            Diagnostic(DEFINITION, f"set '{self.name}': {msg}", self.name, self.line)
            for msg in problems
        ]

    def evaluate(self, x: float) -> float:
        """
        Degree of membership of ``x`` in this set.

        An invalid set evaluates to 0.0 and logs a warning instead of raising.
        """
        if self.diagnostics:
            fuzzy_set_log.warning(
                "Set '%s' has invalid %s parameters %s; degree forced to 0.",
                self.name, self.kind.label, list(self.params),
            )
            return 0.0

        p = self.params
        if self.kind is MFKind.TRIANGULAR:
            return membership.triangular(p[0], p[1], p[2], x)
        elif self.kind is MFKind.TRAPEZOIDAL:
            return membership.trapezoidal(p[0], p[1], p[2], p[3], x)
        elif self.kind is MFKind.SATURATION:
            return membership.saturation(p[0], p[1], x)
        elif self.kind is MFKind.GAUSSIAN:
            return membership.gaussian(p[0], p[1], x)
        raise AssertionError(f"Unhandled membership function kind {self.kind}")


class InputFuzzySet(FuzzySet):
    """Input set; remembers the degree computed by the last fuzzify() call."""

    def __init__(self, name: str, kind: MFKind, params: Sequence[float], line=None):
        super().__init__(name, kind, params, line)
        self.membership_values: Dict[str, float] = {}

    def fuzzify(self, x: float) -> float:
        degree = self.evaluate(x)
        self.membership_values[self.name] = degree
        fuzzy_set_log.debug("Fuzzified %s(%.3f) = %.3f", self.name, x, degree)
        return degree


class OutputFuzzySet(FuzzySet):
    """Output set; inference only uses its name as an aggregation key."""
