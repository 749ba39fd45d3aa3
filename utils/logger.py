# logger.py
import os, glob, logging
from contextvars import ContextVar
from typing import Optional

# (index in the rule base, line in the rules file) of the rule under evaluation
_RULE_AT = ContextVar("rule_at", default=(-1, None))

LOGGER_NAMES = [
    "main",
    "controller",
    "fuzzifier",
    "fuzzy_set",
    "rule_engine",
    "rule_firing",
    "loader",
    "report",
    "profiler",
]

LOG_FORMAT = "%(rule)04d | %(rule_line)5s | %(levelname)s | %(name)s | %(message)s"


def set_rule_index(i: int, line: Optional[int] = None) -> None:
    """
    Tags subsequent log records with the rule being evaluated.

    Args:
        i (int): Index of the rule in the rule base; -1 outside evaluation.
        line (int | None): Line of the rule in the rules file, when known.
    """
    _RULE_AT.set((int(i), line))


def current_rule():
    """Returns (index, line) of the rule under evaluation."""
    return _RULE_AT.get()


class RuleIndexFilter(logging.Filter):
    def filter(self, record):
        # ensure every record has .rule and .rule_line
        index, line = _RULE_AT.get()
        record.rule = index
        record.rule_line = f"L{line}" if line is not None else "-"
        return True


def setup_logging(
    log_dir: str = "logs",
    overwrite: bool = True,
    log_level: int = logging.DEBUG,
    console_level: int = logging.INFO,
    cleanup_rotated: bool = True,
) -> None:
    """
    One log file per component logger in ``log_dir``; console output for "main".

    Every record starts with the index of the rule under evaluation (-1
    outside rule evaluation) and its line in the rules file ("-" when the
    rule was not read from a file), so a warning in fuzzy_set.log or
    rule_firing.log can be traced back to the rule that caused it.

    Args:
        log_dir (str): Directory for the ``<logger>.log`` files.
        overwrite (bool): Truncate existing log files instead of appending.
        log_level (int): Level of the component loggers and their files.
        console_level (int): Level of the console handler on "main".
        cleanup_rotated (bool): Delete ``*.log.*`` leftovers in ``log_dir``.
    """
    os.makedirs(log_dir, exist_ok=True)
    if cleanup_rotated:
        for path in glob.glob(os.path.join(log_dir, "*.log.*")):
            os.remove(path)

    fmt = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    console.setLevel(console_level)
    console.addFilter(RuleIndexFilter())

    mode = "w" if overwrite else "a"
    for name in LOGGER_NAMES:
        log = logging.getLogger(name)
        log.setLevel(log_level)
        log.propagate = False
        for h in list(log.handlers):
            log.removeHandler(h)
            h.close()

        fh = logging.FileHandler(os.path.join(log_dir, f"{name}.log"), mode=mode, encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(log_level)
        fh.addFilter(RuleIndexFilter())
        log.addHandler(fh)

    logging.getLogger("main").addHandler(console)
    logging.getLogger("main").info(
        "Logging system initialized (%d component logs in '%s').", len(LOGGER_NAMES), log_dir
    )
