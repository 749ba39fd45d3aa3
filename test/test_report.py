import json

import pytest

from conftest import TIPPING_DEFINITIONS, TIPPING_ROUTING, TIPPING_RULES
from fis.controller import FISController
from loader.definitions import parse_definitions
from loader.rules import parse_rules
from utils.report import render, render_kv, render_text, run_to_dict
from utils.rule_trace import format_rule_trace


@pytest.fixture
def tipping():
    defs = parse_definitions(TIPPING_DEFINITIONS)
    rules = parse_rules(TIPPING_RULES + "IF Ghost_Food THEN Low_Tip\n")
    controller = FISController(defs.input_sets, defs.output_sets, rules, TIPPING_ROUTING)
    run = controller.evaluate({"service": 40, "food": 60})
    return defs, rules, run


def test_render_text_lists_everything(tipping):
    defs, rules, run = tipping
    text = render_text(defs.input_sets, defs.output_sets, rules, run)
    assert "[input] Good_Service (Triangular: 20, 50, 80)" in text
    assert "[output] High_Tip (Trapezoidal: 15, 20, 25, 30)" in text
    assert "service = 40" in text
    assert "Good_Service -> 0.6667" in text
    assert "IF Good_Service AND Good_Food THEN Medium_Tip" in text
    assert "Medium_Tip: 0.6667" in text
    assert "[unknown-reference]" in text
    assert "Rule trace:" not in text
    assert text.endswith("Fuzzy logic system processed all inputs successfully.")


def test_render_text_sections_in_order(tipping):
    defs, rules, run = tipping
    text = render_text(defs.input_sets, defs.output_sets, rules, run)
    headings = [
        "Input fuzzy sets:",
        "Output fuzzy sets:",
        "Fuzzy membership values:",
        "Read rules:",
        "Output membership values:",
    ]
    positions = [text.index(h) for h in headings]
    assert positions == sorted(positions)


def test_render_text_with_trace(tipping):
    defs, rules, run = tipping
    text = render_text(defs.input_sets, defs.output_sets, rules, run, trace=True)
    assert "Rule trace:" in text
    assert "R2: IF Good_Service AND Good_Food THEN Medium_Tip" in text


def test_format_rule_trace(tipping):
    _, _, run = tipping
    lines = format_rule_trace(run.result.firings)
    assert lines[0] == "R0: IF Poor_Service OR Bad_Food THEN Low_Tip"
    assert lines[1].split() == ["IF", "Poor_Service", "mu=0.333", "acc=0.333"]
    assert lines[2].split() == ["OR", "Bad_Food", "mu=0.000", "acc=0.333"]
    assert lines[3].strip() == "THEN Low_Tip <- 0.333"
    assert "(unknown, skipped)" in lines[-2]
    assert lines[-1].strip() == "THEN Low_Tip <- (no contribution)"


def test_render_kv(tipping):
    _, _, run = tipping
    lines = render_kv(run).splitlines()
    assert "input.service=40" in lines
    assert "degree.Good_Food=1" in lines
    assert "output.Medium_Tip=0.666667" in lines
    assert lines[-1] == "diagnostics=1"


def test_render_json_round_trips(tipping):
    _, _, run = tipping
    doc = json.loads(render("json", [], [], [], run))
    assert doc == json.loads(json.dumps(run_to_dict(run)))
    assert doc["outputs"]["Low_Tip"] == pytest.approx(1 / 3)
    assert doc["rules"][-1]["degree"] is None
    assert {d["category"] for d in doc["diagnostics"]} == {"unknown-reference"}


def test_render_unknown_format(tipping):
    _, _, run = tipping
    with pytest.raises(ValueError):
        render("xml", [], [], [], run)
