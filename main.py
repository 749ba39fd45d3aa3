"""
Main entry point for the fuzzy inference runner.

Loads the run configuration (config/fis_config.toml), reads the fuzzy-set
definitions and the rule base, fuzzifies the crisp channel values, runs
Mamdani inference and prints the result.

Exit codes:
    0  success
    1  a configuration, definitions or rules file could not be read
    2  malformed definitions (strict mode)
    3  malformed rules or unknown set references (strict mode)
    4  invalid run configuration (bad TOML, missing or non-finite crisp value)
"""

import argparse
import logging
import math
import os
import sys
import tomllib
from contextlib import nullcontext

from fis.controller import FISController
from fis.diagnostics import DefinitionError, RuleGrammarError, UnknownReferenceError
from loader.central_config import DEFAULT_CONFIG_PATH, load_fis_config
from loader.definitions import load_definitions
from loader.rules import load_rules
from utils.logger import setup_logging
from utils.profiler import CodeProfiler
from utils.report import FORMATS, render

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_BAD_DEFINITIONS = 2
EXIT_BAD_RULES = 3
EXIT_BAD_CONFIG = 4

main_log = logging.getLogger("main")


def parse_channel_value(s: str):
    """'service=40' -> ('service', 40.0)"""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"Invalid input '{s}' (expected 'channel=value').")
    name, value = (t.strip() for t in s.split("=", 1))
    if not name:
        raise argparse.ArgumentTypeError(f"Empty channel name in '{s}'.")
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Value for '{name}' is not a number: '{value}'.") from None
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"Value for '{name}' must be finite: '{value}'.")
    return name, number


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="fis-run",
        description="Evaluate a Mamdani fuzzy inference problem from a definitions and a rules file.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to fis_config.toml")
    ap.add_argument("--definitions", help="Fuzzy-set definitions file (overrides config)")
    ap.add_argument("--rules", help="Rules file (overrides config)")
    ap.add_argument(
        "--input", "-i", dest="inputs", action="append", type=parse_channel_value, default=[],
        metavar="CHANNEL=VALUE", help="Crisp value for an input channel; repeatable",
    )
    ap.add_argument("--strict", action="store_true", default=None,
                    help="Treat configuration problems as fatal (overrides config)")
    ap.add_argument("--format", choices=FORMATS, default="text", help="Output format")
    ap.add_argument("--trace", action="store_true", help="Include the per-rule trace (text format)")
    ap.add_argument("--plot", metavar="DIR", help="Save membership and rule plots into DIR")
    ap.add_argument("--profile", action="store_true", help="Log the run time of each stage")
    return ap


def run(args) -> int:
    try:
        config = load_fis_config(args.config)
    except OSError as e:
        setup_logging()
        main_log.critical("Cannot read configuration '%s': %s", args.config, e)
        return EXIT_IO_ERROR
    except (tomllib.TOMLDecodeError, ValueError) as e:
        setup_logging()
        main_log.critical("Invalid configuration '%s': %s", args.config, e)
        return EXIT_BAD_CONFIG

    setup_logging(config.log_dir, log_level=config.log_level, console_level=config.console_level)
    main_log.info("Configuration file '%s' loaded.", args.config)

    definitions_path = args.definitions or config.definitions_path
    rules_path = args.rules or config.rules_path
    strict = config.strict if args.strict is None else args.strict
    crisp_values = dict(config.crisp_values)
    crisp_values.update(dict(args.inputs))
    for name in crisp_values:
        # a channel given only on the command line matches on its own name
        config.routing.setdefault(name, [])

    if not definitions_path or not rules_path:
        main_log.critical("Both a definitions file and a rules file are required.")
        return EXIT_BAD_CONFIG

    try:
        with CodeProfiler("Load knowledge files") if args.profile else nullcontext():
            definitions = load_definitions(definitions_path, config.output_marker)
            rules = load_rules(rules_path)
    except OSError as e:
        main_log.critical("Cannot read input file: %s", e)
        return EXIT_IO_ERROR

    try:
        controller = FISController(
            definitions.input_sets,
            definitions.output_sets,
            rules,
            config.routing,
            strict=strict,
            load_diagnostics=definitions.diagnostics,
        )
    except DefinitionError as e:
        main_log.critical("Malformed definitions in '%s': %s", definitions_path, e)
        return EXIT_BAD_DEFINITIONS
    except (RuleGrammarError, UnknownReferenceError) as e:
        main_log.critical("Malformed rules in '%s': %s", rules_path, e)
        return EXIT_BAD_RULES

    try:
        with CodeProfiler("Inference", items=len(rules), unit="rule") if args.profile else nullcontext():
            fis_run = controller.evaluate(crisp_values)
    except (KeyError, ValueError) as e:
        # missing or non-finite crisp value
        main_log.critical("Invalid run configuration: %s", e.args[0])
        return EXIT_BAD_CONFIG

    print(render(args.format, definitions.input_sets, definitions.output_sets, rules,
                 fis_run, trace=args.trace))

    if args.plot:
        from utils.plot_membership_shapes import plot_channels, plot_membership_functions
        from utils.rule_trace import plot_rule_contributions

        os.makedirs(args.plot, exist_ok=True)
        saved = plot_channels(controller.fuzzifier.sets_by_channel, fis_run.crisp_values,
                              fis_run.input_degrees, save=True, output_dir=args.plot)
        if definitions.output_sets:
            saved.append(plot_membership_functions(definitions.output_sets, "outputs",
                                                   save=True, output_dir=args.plot))
        rules_png = os.path.join(args.plot, "rule_contributions.png")
        plot_rule_contributions(fis_run.result.firings, fis_run.crisp_values, save_path=rules_png)
        saved.append(rules_png)
        main_log.info("Saved plots: %s", ", ".join(saved))

    main_log.info("Application finished.")
    return EXIT_OK


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
