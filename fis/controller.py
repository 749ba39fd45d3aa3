"""
Orchestrates the fuzzy inference system (FIS) operations.

This module ties the Fuzzifier and the RuleEngine together: crisp channel
values are fuzzified through the input sets, and the resulting degrees are
run through the Mamdani rule base. It is the single entry point used by
main.py and the tests. It does not read files; the loader package builds
its inputs.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from fis.diagnostics import (
    DEFINITION,
    RULE_GRAMMAR,
    UNKNOWN_REFERENCE,
    Diagnostic,
    raise_for,
)
from fis.fuzzifier import Fuzzifier
from fis.fuzzy_set import InputFuzzySet, OutputFuzzySet
from fis.rule_engine import InferenceResult, Rule, RuleEngine

controller_log = logging.getLogger("controller")


@dataclass
class FISRun:
    """Everything one evaluation produced, for the display layer."""

    crisp_values: Dict[str, float]
    input_degrees: Dict[str, float]
    result: InferenceResult
    setup_diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def outputs(self) -> Dict[str, float]:
        return self.result.outputs

    @property
    def diagnostics(self) -> List[Diagnostic]:
        seen = set()
        merged = []
        for diag in self.setup_diagnostics + self.result.diagnostics:
            if diag not in seen:
                seen.add(diag)
                merged.append(diag)
        return merged


class FISController:
    """
    The main fuzzy inference class.

    Attributes:
        input_sets (List[InputFuzzySet]): Loaded input sets.
        output_sets (List[OutputFuzzySet]): Loaded output sets.
        fuzzifier (Fuzzifier): Routes channel values to input sets.
        rule_engine (RuleEngine): Mamdani rule engine.
        strict (bool): Fail on the first category of diagnostics found.
        diagnostics (List[Diagnostic]): Problems found while setting up.
    """

    def __init__(
        self,
        input_sets: Sequence[InputFuzzySet],
        output_sets: Sequence[OutputFuzzySet],
        rules: Sequence[Rule],
        routing: Dict[str, List[str]],
        strict: bool = False,
        load_diagnostics: Sequence[Diagnostic] = (),
    ):
        """
        Args:
            input_sets: Input fuzzy sets.
            output_sets: Output fuzzy sets.
            rules: Rule base, in file order.
            routing: Channel name -> name substrings (see Fuzzifier).
            strict: Raise instead of degrading on configuration problems.
            load_diagnostics: Definition diagnostics reported by the loader.

        Raises:
            DefinitionError: Strict mode, bad definitions or unrouted sets.
            RuleGrammarError: Strict mode, malformed rules.
            UnknownReferenceError: Strict mode, rules naming unknown sets.
        """
        self.input_sets = list(input_sets)
        self.output_sets = list(output_sets)
        self.strict = strict

        self.fuzzifier = Fuzzifier(self.input_sets, routing)
        self.rule_engine = RuleEngine(rules, strict=strict)

        references = self.rule_engine.validate(
            (s.name for s in self.input_sets), (s.name for s in self.output_sets)
        )
        for diag in references:
            controller_log.warning("%s", diag)

        self.diagnostics: List[Diagnostic] = (
            list(load_diagnostics)
            + self.fuzzifier.diagnostics
            + self.rule_engine.diagnostics
            + references
        )

        if strict:
            for category in (DEFINITION, RULE_GRAMMAR, UNKNOWN_REFERENCE):
                raise_for(self.diagnostics, category)

        controller_log.info(
            "FIS Controller initialized: %d input sets, %d output sets, %d rules.",
            len(self.input_sets), len(self.output_sets), len(self.rule_engine.rules),
        )

    def evaluate(self, crisp_values: Dict[str, float]) -> FISRun:
        """
        Executes one full fuzzify -> infer cycle.

        Args:
            crisp_values (Dict[str, float]): Channel name -> crisp value.

        Returns:
            FISRun: Input degrees, aggregated output degrees and trace.
        """
        controller_log.debug("--- FIS Run Start (inputs= %s) ---", crisp_values)

        extra = set(crisp_values) - set(self.fuzzifier.sets_by_channel)
        if extra:
            controller_log.warning("Ignoring values for unknown channels: %s", sorted(extra))

        input_degrees = self.fuzzifier.fuzzify_all(crisp_values)
        result = self.rule_engine.infer_mamdani(input_degrees)

        controller_log.debug("--- FIS Run End (outputs= %s) ---", result.outputs)
        return FISRun(dict(crisp_values), input_degrees, result, list(self.diagnostics))
