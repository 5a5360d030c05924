"""Command-line entry point for srclint."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import LintConfig, load_config
from .engine import Linter
from .errors import ConfigError
from .registry import RuleRegistry, build_registry, filter_registry
from .result import DiagnosticSink, LintReport, format_summary
from .tier import Tier

logger = logging.getLogger("srclint")

CONFIG_ERROR_EXIT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srclint",
        description="Report style, convention and syntax issues in Python source files.",
    )
    parser.add_argument(
        "sources",
        nargs="*",
        metavar="sourcefile",
        help="Files or directories to lint (reads standard input when omitted).",
    )
    parser.add_argument(
        "-d",
        "--disable",
        dest="disabled_rules",
        action="append",
        default=[],
        metavar="RULE",
        help="Disable a rule by name, e.g. style:linelen (repeatable).",
    )
    parser.add_argument(
        "-D",
        "--disable-category",
        dest="disabled_categories",
        action="append",
        default=[],
        metavar="CATEGORY",
        help="Disable every rule in a category, e.g. todo (repeatable).",
    )
    parser.add_argument(
        "-l",
        "--list",
        dest="list_rules",
        action="store_true",
        help="List enabled rules and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print verbose output to standard error.",
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config_path",
        default=None,
        help="Path to a YAML configuration file (defaults to ./.srclint.yml if present).",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (text streams one line per diagnostic).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        default=None,
        help="Write the JSON report to this path instead of standard output.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"srclint v{__version__}",
        help="Display version information and exit.",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("srclint: %(message)s"))
    logger.handlers[:] = [handler]
    logger.propagate = False
    logger.setLevel(logging.INFO if verbose else logging.WARNING)


def prepare_registry(args: argparse.Namespace, config: LintConfig) -> RuleRegistry:
    registry = build_registry(config.options)
    return filter_registry(
        registry,
        disabled_names=[*config.disabled_rules, *args.disabled_rules],
        disabled_categories=[*config.disabled_categories, *args.disabled_categories],
    )


def write_output(report: LintReport, output_path: Optional[str], report_format: str) -> None:
    if report_format != "json":
        return
    payload = json.dumps(report.to_dict(), indent=2)
    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload + "\n", encoding="utf-8")
        logger.info("Report written to %s", output_path)
    else:
        print(payload)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(Path(args.config_path) if args.config_path else None)
    except ConfigError as exc:
        logger.error("%s", exc)
        return CONFIG_ERROR_EXIT
    registry = prepare_registry(args, config)

    if args.list_rules:
        for name in registry.names():
            print(name)
        return 0

    counts = registry.counts()
    logger.info(
        "Beginning lint with %d stateless, %d stateful, and %d parsing rules",
        counts[Tier.STATELESS],
        counts[Tier.STATEFUL],
        counts[Tier.PARSING],
    )
    if args.output_path and args.format == "text":
        logger.warning("Ignoring --out %s: it only applies to --format json", args.output_path)
    sink = DiagnosticSink.to_stdout() if args.format == "text" else DiagnosticSink()
    report = Linter(registry, sink).run(args.sources)
    write_output(report, args.output_path, args.format)
    logger.info("%s", format_summary(report))
    return report.exit_code()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
