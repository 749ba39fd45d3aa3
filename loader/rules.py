"""Reads the rule base: one rule per line, blank lines and '#' comments skipped."""

import logging
from typing import List

from fis.rule_engine import Rule

loader_log = logging.getLogger("loader")


def parse_rules(source: str) -> List[Rule]:
    rules = []
    for lineno, raw in enumerate(source.splitlines(), 1):
        text = raw.strip()
        if not text or text.startswith("#"):
            continue
        rules.append(Rule(text, lineno))
    loader_log.info("Loaded %d rules.", len(rules))
    return rules


def load_rules(path: str) -> List[Rule]:
    with open(path, "r", encoding="utf-8") as f:
        source = f.read()
    loader_log.info("Reading rules from '%s'.", path)
    return parse_rules(source)
