# test/conftest.py
import logging

import pytest

from utils.logger import LOGGER_NAMES

TIPPING_DEFINITIONS = """\
# name          kind    parameters
Poor_Service    SAT     20 50
Good_Service    TRIANG  20 50 80
Great_Service   SAT     80 50
Bad_Food        TRAP    0 0 20 50
Good_Food       TRIANG  30 60 90
Delicious_Food  GAUSS   100 200
Low_Tip         TRIANG  0 5 10
Medium_Tip      TRIANG  5 12.5 20
High_Tip        TRAP    15 20 25 30
"""

TIPPING_RULES = """\
IF Poor_Service OR Bad_Food THEN Low_Tip
IF Good_Service THEN Medium_Tip
IF Good_Service AND Good_Food THEN Medium_Tip
IF Great_Service OR Delicious_Food THEN High_Tip
IF Great_Service AND Good_Food OR Delicious_Food THEN High_Tip
"""

TIPPING_ROUTING = {
    "service": ["Service", "waiting_time"],
    "food": ["Food", "price"],
}


@pytest.fixture(autouse=True)
def _reset_loggers():
    """setup_logging() detaches the component loggers; put them back for caplog."""
    yield
    for name in LOGGER_NAMES:
        log = logging.getLogger(name)
        for h in list(log.handlers):
            log.removeHandler(h)
            h.close()
        log.propagate = True
        log.setLevel(logging.NOTSET)


@pytest.fixture
def tipping_files(tmp_path):
    """Writes the tipping definitions and rules; returns (definitions, rules) paths."""
    defs = tmp_path / "variables.txt"
    rules = tmp_path / "rules.txt"
    defs.write_text(TIPPING_DEFINITIONS, encoding="utf-8")
    rules.write_text(TIPPING_RULES, encoding="utf-8")
    return defs, rules


@pytest.fixture
def make_config(tmp_path, tipping_files):
    """
    Build a fis_config.toml in tmp_path.
    Usage:
        path = make_config(strict=True, definitions="other.txt")
    """
    def _builder(strict=False, definitions=None, rules=None, service=40.0, food=60.0):
        defs_path, rules_path = tipping_files
        cfg = tmp_path / "fis_config.toml"
        cfg.write_text(
            "\n".join(
                [
                    "[files]",
                    f'DEFINITIONS_PATH = "{definitions or defs_path.name}"',
                    f'RULES_PATH = "{rules or rules_path.name}"',
                    "[classification]",
                    'OUTPUT_MARKER = "Tip"',
                    "[validation]",
                    f"STRICT = {'true' if strict else 'false'}",
                    "[logging]",
                    f'LOG_DIR = "{(tmp_path / "logs").as_posix()}"',
                    'CONSOLE_LEVEL = "WARNING"',
                    "[[channels]]",
                    'name = "service"',
                    f"value = {service}",
                    'match = ["Service", "waiting_time"]',
                    "[[channels]]",
                    'name = "food"',
                    f"value = {food}",
                    'match = ["Food", "price"]',
                ]
            ),
            encoding="utf-8",
        )
        return cfg

    return _builder
