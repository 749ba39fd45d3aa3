"""
Evaluates the fuzzy rule base with Mamdani max-aggregation.

Rules are plain text lines of the form

    IF <set> [(AND|OR) <set>]* THEN <output_set>

with case-insensitive keywords. Each rule's antecedent is folded strictly left
to right with fuzzy AND (min) and fuzzy OR (max), so ``A AND B OR C`` means
``((A and B) or C)``. The degrees of all rules concluding the same output set
are then combined with max.

The engine never prints. It returns an InferenceResult holding the output
degrees, a per-rule trace and the diagnostics collected along the way.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from fis.diagnostics import (
    RULE_GRAMMAR,
    UNKNOWN_REFERENCE,
    Diagnostic,
    raise_for,
)
from fis.operators import fuzzy_and, fuzzy_or
from utils.logger import set_rule_index

rule_engine_log = logging.getLogger("rule_engine")
firing_log = logging.getLogger("rule_firing")

AND = "AND"
OR = "OR"
_IF = "IF"
_THEN = "THEN"
_OPERATORS = (AND, OR)
_KEYWORDS = (_IF, _THEN, AND, OR)


@dataclass(frozen=True)
class Rule:
    """One line of the rules file."""

    text: str
    line: Optional[int] = None


@dataclass(frozen=True)
class ParsedRule:
    """
    A rule split into its antecedent terms and consequent.

    Attributes:
        rule (Rule): The source rule.
        terms (Tuple[Tuple[Optional[str], str], ...]): (operator, set name)
            pairs; the operator is None for the first term, else AND or OR.
        consequent (str): Output set name after THEN.
    """

    rule: Rule
    terms: Tuple[Tuple[Optional[str], str], ...]
    consequent: str

    @property
    def set_names(self) -> List[str]:
        return [name for _, name in self.terms]


@dataclass(frozen=True)
class TraceStep:
    """One antecedent term as it was folded into the accumulator."""

    operator: Optional[str]
    name: str
    degree: Optional[float]
    accumulator: Optional[float]
    skipped: bool = False


@dataclass
class RuleFiring:
    """Evaluation record of a single rule."""

    index: int
    rule: Rule
    consequent: str
    degree: Optional[float]
    steps: List[TraceStep] = field(default_factory=list)

    @property
    def contributed(self) -> bool:
        return self.degree is not None


@dataclass
class InferenceResult:
    """
    Attributes:
        outputs (Dict[str, float]): Output set -> aggregated degree, in order
            of first appearance as a consequent.
        firings (List[RuleFiring]): One record per well-formed rule.
        diagnostics (List[Diagnostic]): Grammar and reference problems.
    """

    outputs: Dict[str, float] = field(default_factory=dict)
    firings: List[RuleFiring] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def parse_rule(rule: Rule) -> ParsedRule:
    """
    Splits a rule into terms and consequent.

    Raises:
        ValueError: If the rule does not follow the grammar.
    """
    words = rule.text.split()
    if not words or words[0].upper() != _IF:
        raise ValueError("rule must start with IF")

    then_idx = next((i for i, w in enumerate(words) if w.upper() == _THEN), None)
    if then_idx is None:
        raise ValueError("rule is missing THEN")

    antecedent = words[1:then_idx]
    consequent = words[then_idx + 1:]
    if not antecedent:
        raise ValueError("rule has an empty antecedent")
    if len(consequent) != 1 or consequent[0].upper() in _KEYWORDS:
        raise ValueError("expected exactly one output set name after THEN")

    terms: List[Tuple[Optional[str], str]] = []
    operator: Optional[str] = None
    expect_term = True
    for word in antecedent:
        upper = word.upper()
        if upper in _OPERATORS:
            if expect_term:
                raise ValueError(f"unexpected operator '{word}'")
            operator = upper
            expect_term = True
        elif upper == _IF:
            raise ValueError("unexpected IF inside the antecedent")
        else:
            if not expect_term:
                raise ValueError(f"missing AND/OR before '{word}'")
            terms.append((operator, word))
            operator = None
            expect_term = False
    if expect_term:
        raise ValueError("antecedent ends with an operator")

    return ParsedRule(rule, tuple(terms), consequent[0])


def _unknown_input(name: str, rule: Rule) -> Diagnostic:
    # shared by validate() and _fire() so the run does not report a name twice
    return Diagnostic(UNKNOWN_REFERENCE, f"unknown input set '{name}'", rule.text, rule.line)


class RuleEngine:
    """
    Mamdani rule engine.

    Rules are parsed once at construction. Malformed rules are reported as
    rule-grammar diagnostics and take no part in inference.

    Attributes:
        rules (List[Rule]): The rule base, in insertion order.
        parsed (List[Tuple[int, ParsedRule]]): Well-formed rules with their
            index in ``rules``.
        strict (bool): Reject the rule base instead of skipping bad rules.
        diagnostics (List[Diagnostic]): Grammar diagnostics found at parse time.
    """

    def __init__(self, rules: Sequence[Rule], strict: bool = False):
        self.rules = list(rules)
        self.strict = strict
        self.parsed: List[Tuple[int, ParsedRule]] = []
        self.diagnostics: List[Diagnostic] = []

        for i, rule in enumerate(self.rules):
            try:
                self.parsed.append((i, parse_rule(rule)))
            except ValueError as exc:
                diag = Diagnostic(RULE_GRAMMAR, f"{exc}: '{rule.text.strip()}'", rule.text, rule.line)
                rule_engine_log.warning("%s", diag)
                self.diagnostics.append(diag)

        rule_engine_log.info(
            "Rule Engine initialized with %d rules (%d malformed).",
            len(self.rules), len(self.rules) - len(self.parsed),
        )

    def validate(
        self, input_names: Iterable[str], output_names: Optional[Iterable[str]] = None
    ) -> List[Diagnostic]:
        """
        Checks every set referenced by the rules against the known sets.

        Args:
            input_names (Iterable[str]): Sets that may appear in antecedents.
            output_names (Optional[Iterable[str]]): Sets that may appear as
                consequents. Consequents are not checked when omitted.

        Returns:
            List[Diagnostic]: One unknown-reference diagnostic per bad name.
        """
        inputs = set(input_names)
        outputs = set(output_names) if output_names is not None else None
        problems = []
        for _, parsed in self.parsed:
            rule = parsed.rule
            for name in parsed.set_names:
                if name not in inputs:
                    problems.append(_unknown_input(name, rule))
            if outputs is not None and parsed.consequent not in outputs:
                problems.append(
                    Diagnostic(
                        UNKNOWN_REFERENCE,
                        f"unknown output set '{parsed.consequent}'",
                        rule.text,
                        rule.line,
                    )
                )
        return problems

    def _fire(self, index: int, parsed: ParsedRule, input_degrees: Dict[str, float],
              diagnostics: List[Diagnostic]) -> RuleFiring:
        accumulator: Optional[float] = None
        pending: Optional[str] = None
        steps: List[TraceStep] = []

        for operator, name in parsed.terms:
            if operator is not None:
                pending = operator
            if name not in input_degrees:
                # the unknown term is dropped together with its operator
                diag = _unknown_input(name, parsed.rule)
                rule_engine_log.warning("%s; term skipped", diag)
                diagnostics.append(diag)
                steps.append(TraceStep(operator, name, None, accumulator, skipped=True))
                pending = None
                continue

            degree = float(input_degrees[name])
            if accumulator is None:
                accumulator = degree
            elif pending == AND:
                accumulator = fuzzy_and(accumulator, degree)
            else:
                accumulator = fuzzy_or(accumulator, degree)
            pending = None
            steps.append(TraceStep(operator, name, degree, accumulator))

        return RuleFiring(index, parsed.rule, parsed.consequent, accumulator, steps)

    def infer_mamdani(self, input_degrees: Dict[str, float]) -> InferenceResult:
        """
        Evaluates all rules and aggregates their degrees per output set.

        Args:
            input_degrees (Dict[str, float]): Input set name -> membership degree.

        Returns:
            InferenceResult: Output degrees, per-rule trace and diagnostics.

        Raises:
            RuleGrammarError: In strict mode, if any rule is malformed.
            UnknownReferenceError: In strict mode, if a rule names a set
                absent from ``input_degrees``.
        """
        if self.strict:
            raise_for(self.diagnostics, RULE_GRAMMAR)
            raise_for(self.validate(input_degrees.keys()), UNKNOWN_REFERENCE)

        result = InferenceResult(diagnostics=list(self.diagnostics))
        try:
            for index, parsed in self.parsed:
                set_rule_index(index, parsed.rule.line)
                firing = self._fire(index, parsed, input_degrees, result.diagnostics)
                result.firings.append(firing)
                if not firing.contributed:
                    firing_log.debug("Rule# %d contributes nothing (no known terms)", index)
                    continue

                firing_log.debug("Rule# %d %s W= %.3f", index, firing.consequent, firing.degree)
                previous = result.outputs.get(firing.consequent)
                result.outputs[firing.consequent] = (
                    firing.degree if previous is None else fuzzy_or(previous, firing.degree)
                )
        finally:
            set_rule_index(-1)

        rounded = {k: round(v, 3) for k, v in result.outputs.items()}
        rule_engine_log.info("Aggregated outputs: %s", rounded)
        return result
# End of rule_engine.py
