"""
Reads fuzzy-set definitions from a flat text file.

One set per line, whitespace separated:

    <name> <TRIANG|TRAP|SAT|GAUSS> <p1> [<p2> [<p3> [<p4>]]]

Blank lines, '#' comments and lines without a usable '<name> <kind> <p1>'
prefix are skipped silently. Everything else that is wrong with a line
(unknown kind, non-numeric or missing parameters, invalid shape) is reported
as a definition diagnostic. Sets whose name contains the output marker become
OutputFuzzySets, all others InputFuzzySets.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from fis.diagnostics import DEFINITION, Diagnostic
from fis.fuzzy_set import FuzzySet, InputFuzzySet, MFKind, OutputFuzzySet

loader_log = logging.getLogger("loader")

DEFAULT_OUTPUT_MARKER = "Tip"


@dataclass
class FuzzyDefinitions:
    input_sets: List[InputFuzzySet] = field(default_factory=list)
    output_sets: List[OutputFuzzySet] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def all_sets(self) -> List[FuzzySet]:
        return [*self.input_sets, *self.output_sets]


def _to_float(token: str) -> Optional[float]:
    try:
        return float(token)
    except ValueError:
        return None


def is_output_set(name: str, output_marker: str = DEFAULT_OUTPUT_MARKER) -> bool:
    return output_marker in name


def parse_definitions(source: str, output_marker: str = DEFAULT_OUTPUT_MARKER) -> FuzzyDefinitions:
    """
    Parses the text of a definitions file.

    Args:
        source (str): File contents.
        output_marker (str): Substring that marks a set name as an output set.

    Returns:
        FuzzyDefinitions: Input and output sets in file order, plus diagnostics.
    """
    defs = FuzzyDefinitions()
    seen = set()

    for lineno, raw in enumerate(source.splitlines(), 1):
        tokens = raw.split("#", 1)[0].split()
        if len(tokens) < 3 or _to_float(tokens[2]) is None:
            if tokens:
                loader_log.debug("line %d skipped: %r", lineno, raw)
            continue

        name, keyword = tokens[0], tokens[1]
        try:
            kind = MFKind.from_keyword(keyword)
        except KeyError as exc:
            defs.diagnostics.append(Diagnostic(DEFINITION, str(exc.args[0]), name, lineno))
            continue

        params = []
        for tok in tokens[2:]:
            value = _to_float(tok)
            if value is None:
                defs.diagnostics.append(
                    Diagnostic(DEFINITION, f"set '{name}': non-numeric parameter '{tok}'", name, lineno)
                )
                break
            params.append(value)

        if name in seen:
            defs.diagnostics.append(
                Diagnostic(DEFINITION, f"duplicate set '{name}'; later definition ignored", name, lineno)
            )
            continue
        seen.add(name)

        if is_output_set(name, output_marker):
            fset = OutputFuzzySet(name, kind, params, line=lineno)
            defs.output_sets.append(fset)
        else:
            fset = InputFuzzySet(name, kind, params, line=lineno)
            defs.input_sets.append(fset)
        defs.diagnostics.extend(fset.diagnostics)

    for diag in defs.diagnostics:
        loader_log.warning("%s", diag)
    loader_log.info(
        "Loaded %d input and %d output fuzzy sets (%d diagnostics).",
        len(defs.input_sets), len(defs.output_sets), len(defs.diagnostics),
    )
    return defs


def load_definitions(path: str, output_marker: str = DEFAULT_OUTPUT_MARKER) -> FuzzyDefinitions:
    """
    Reads and parses a definitions file.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, "r", encoding="utf-8") as f:
        source = f.read()
    loader_log.info("Reading fuzzy set definitions from '%s'.", path)
    return parse_definitions(source, output_marker)
