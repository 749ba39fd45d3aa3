"""
Validation diagnostics and the errors raised for them in strict mode.

Loading and inference never stop on a bad definition or rule. Problems are
collected as Diagnostic records and logged; in strict mode the caller turns
them into one of the FISValidationError subclasses below.
"""

from dataclasses import dataclass
from typing import List, Optional

DEFINITION = "definition"
RULE_GRAMMAR = "rule-grammar"
UNKNOWN_REFERENCE = "unknown-reference"


@dataclass(frozen=True)
class Diagnostic:
    """
    One configuration problem found while loading or evaluating.

    Attributes:
        category (str): DEFINITION, RULE_GRAMMAR or UNKNOWN_REFERENCE.
        message (str): Human-readable description.
        subject (str): Fuzzy-set name or rule text the problem refers to.
        line (Optional[int]): 1-based source line, when known.
    """

    category: str
    message: str
    subject: str = ""
    line: Optional[int] = None

    def __str__(self) -> str:
        where = f"line {self.line}: " if self.line is not None else ""
        return f"[{self.category}] {where}{self.message}"


class FISValidationError(ValueError):
    """Raised in strict mode when diagnostics of one category were collected."""

    category = ""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        lines = "\n  ".join(str(d) for d in self.diagnostics)
        super().__init__(f"{len(self.diagnostics)} {self.category} error(s):\n  {lines}")


class DefinitionError(FISValidationError):
    category = DEFINITION


class RuleGrammarError(FISValidationError):
    category = RULE_GRAMMAR


class UnknownReferenceError(FISValidationError):
    category = UNKNOWN_REFERENCE


_ERRORS = {
    DEFINITION: DefinitionError,
    RULE_GRAMMAR: RuleGrammarError,
    UNKNOWN_REFERENCE: UnknownReferenceError,
}


def raise_for(diagnostics: List[Diagnostic], category: str) -> None:
    """Raises the strict-mode error for ``category`` if any diagnostic matches."""
    matching = [d for d in diagnostics if d.category == category]
    if matching:
        raise _ERRORS[category](matching)
