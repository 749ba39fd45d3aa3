"""
Renders a fuzzy inference run for the console.

Three formats are supported:
    text  human-readable listing of sets, degrees, rules and outputs
    kv    one 'key=value' line per fact, easy to grep or diff
    json  a single JSON document
"""

import json
import logging
from typing import Any, Dict, List, Sequence

from fis.controller import FISRun
from fis.fuzzy_set import FuzzySet
from fis.rule_engine import Rule
from utils.rule_trace import format_rule_trace

report_log = logging.getLogger("report")

FORMATS = ("text", "kv", "json")


def _describe(fset: FuzzySet) -> str:
    params = ", ".join(f"{p:g}" for p in fset.params)
    return f"{fset.name} ({fset.mf_label}: {params})"


def render_text(
    input_sets: Sequence[FuzzySet],
    output_sets: Sequence[FuzzySet],
    rules: Sequence[Rule],
    run: FISRun,
    trace: bool = False,
) -> str:
    lines: List[str] = ["Input fuzzy sets:"]
    lines += [f"[input] {_describe(s)}" for s in input_sets]
    lines += ["", "Output fuzzy sets:"]
    lines += [f"[output] {_describe(s)}" for s in output_sets]

    lines += ["", "Crisp inputs:"]
    lines += [f"{name} = {value:g}" for name, value in run.crisp_values.items()]

    lines += ["", "Fuzzy membership values:"]
    lines += [f"{name} -> {degree:.4f}" for name, degree in run.input_degrees.items()]

    lines += ["", "Read rules:"]
    lines += [rule.text for rule in rules]

    if trace:
        lines += ["", "Rule trace:"]
        lines += format_rule_trace(run.result.firings)

    lines += ["", "Output membership values:"]
    if run.outputs:
        lines += [f"{name}: {degree:.4f}" for name, degree in run.outputs.items()]
    else:
        lines.append("(no rule contributed)")

    if run.diagnostics:
        lines += ["", f"Diagnostics ({len(run.diagnostics)}):"]
        lines += [str(d) for d in run.diagnostics]

    lines += ["", "Fuzzy logic system processed all inputs successfully."]
    return "\n".join(lines)


def run_to_dict(run: FISRun) -> Dict[str, Any]:
    return {
        "inputs": dict(run.crisp_values),
        "input_degrees": dict(run.input_degrees),
        "outputs": dict(run.outputs),
        "rules": [
            {
                "index": f.index,
                "text": f.rule.text,
                "consequent": f.consequent,
                "degree": f.degree,
            }
            for f in run.result.firings
        ],
        "diagnostics": [
            {"category": d.category, "message": d.message, "line": d.line}
            for d in run.diagnostics
        ],
    }


def render_kv(run: FISRun) -> str:
    lines = [f"input.{k}={v:g}" for k, v in run.crisp_values.items()]
    lines += [f"degree.{k}={v:.6g}" for k, v in run.input_degrees.items()]
    lines += [f"output.{k}={v:.6g}" for k, v in run.outputs.items()]
    lines.append(f"diagnostics={len(run.diagnostics)}")
    return "\n".join(lines)


def render_json(run: FISRun) -> str:
    return json.dumps(run_to_dict(run), indent=2)


def render(fmt: str, input_sets, output_sets, rules, run: FISRun, trace: bool = False) -> str:
    """Renders ``run`` in one of FORMATS."""
    report_log.debug("Rendering run as %s", fmt)
    if fmt == "text":
        return render_text(input_sets, output_sets, rules, run, trace=trace)
    elif fmt == "kv":
        return render_kv(run)
    elif fmt == "json":
        return render_json(run)
    raise ValueError(f"Unknown output format '{fmt}', expected one of {FORMATS}")
