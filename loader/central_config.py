# loader/central_config.py
"""
==================
Unified configuration loader for the fuzzy inference runner.

Reads config/fis_config.toml and turns it into an FISConfig dataclass so the
rest of the project never touches the TOML layout.

Layout
------
    [files]
    DEFINITIONS_PATH = "../data/variables.txt"   # relative to this file
    RULES_PATH       = "../data/rules.txt"

    [classification]
    OUTPUT_MARKER = "Tip"        # set names containing it are output sets

    [validation]
    STRICT = false               # true: configuration problems are fatal

    [logging]
    LOG_DIR = "logs"             # relative to the working directory
    LOG_LEVEL = "DEBUG"
    CONSOLE_LEVEL = "INFO"

    [[channels]]
    name  = "service"
    value = 40.0
    match = ["Service", "waiting_time"]

Every key is optional; missing keys fall back to the defaults of FISConfig.
TOML parsing is done via Python's built-in `tomllib` module.
"""
import logging
import math
import os
import tomllib
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loader.definitions import DEFAULT_OUTPUT_MARKER

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "config", "fis_config.toml"
)


@dataclass
class FISConfig:
    definitions_path: Optional[str] = None
    rules_path: Optional[str] = None
    output_marker: str = DEFAULT_OUTPUT_MARKER
    strict: bool = False
    crisp_values: Dict[str, float] = field(default_factory=dict)
    routing: Dict[str, List[str]] = field(default_factory=dict)
    log_dir: str = "logs"
    log_level: int = logging.DEBUG
    console_level: int = logging.INFO


# ------------------------------------------------------------
# Load TOML
# ------------------------------------------------------------
def _load_toml(path: str) -> dict:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _level(value, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value}")
    return level


def _resolve(base_dir: str, path: Optional[str]) -> Optional[str]:
    if path is None or os.path.isabs(path):
        return path
    return os.path.normpath(os.path.join(base_dir, path))


# ------------------------------------------------------------
# Main loader
# ------------------------------------------------------------
def load_fis_config(path: str = DEFAULT_CONFIG_PATH) -> FISConfig:
    """
    Builds and returns the run configuration.

    Raises:
        OSError: If the file cannot be read.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
        ValueError: If a channel entry or log level is invalid.
    """
    cfg = _load_toml(path)
    base_dir = os.path.dirname(os.path.abspath(path))

    files = cfg.get("files", {})
    log_cfg = cfg.get("logging", {})

    config = FISConfig(
        definitions_path=_resolve(base_dir, files.get("DEFINITIONS_PATH")),
        rules_path=_resolve(base_dir, files.get("RULES_PATH")),
        output_marker=str(cfg.get("classification", {}).get("OUTPUT_MARKER", DEFAULT_OUTPUT_MARKER)),
        strict=bool(cfg.get("validation", {}).get("STRICT", False)),
        log_dir=str(log_cfg.get("LOG_DIR", "logs")),
        log_level=_level(log_cfg.get("LOG_LEVEL"), logging.DEBUG),
        console_level=_level(log_cfg.get("CONSOLE_LEVEL"), logging.INFO),
    )

    # ------------------------------------------------------------
    # Input channels
    # ------------------------------------------------------------
    for ch in cfg.get("channels", []):
        if "name" not in ch:
            raise ValueError(f"Channel entry without a name: {ch}")
        name = str(ch["name"])
        config.routing[name] = [str(s) for s in ch.get("match", [])]
        if "value" in ch:
            value = float(ch["value"])
            if not math.isfinite(value):
                raise ValueError(f"Channel '{name}' value must be finite, got {value}")
            config.crisp_values[name] = value

    return config
