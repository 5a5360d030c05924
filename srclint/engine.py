"""Linter orchestrator: run every rule tier over each source unit in one pass."""

from __future__ import annotations

import ast
import logging
import re
import sys
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .errors import FileReadError, ParseError
from .registry import RuleRegistry
from .result import PARSER_RULE, Diagnostic, DiagnosticSink, LintReport
from .tier import Tier
from .utils import iter_source_paths, read_source, read_stream

logger = logging.getLogger(__name__)

STDIN_NAME = "stdin"
LOCATOR_PATTERN = re.compile(r"^:?(\d+):(\d+):\s?(.*)$", re.DOTALL)


def split_lines(content: str) -> List[str]:
    """Split on line feeds only; empty content has no lines."""

    if not content:
        return []
    return content.split("\n")


@dataclass
class SourceUnit:
    """A named piece of source text."""

    name: str
    content: str

    @property
    def lines(self) -> List[str]:
        return split_lines(self.content)


@dataclass
class ParseResult:
    """Either a syntax tree or the error that prevented building one."""

    tree: Optional[ast.Module] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_source(unit: SourceUnit) -> ParseResult:
    """Parse the whole content of ``unit`` with the interpreter's own parser."""

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            tree = ast.parse(unit.content, filename=unit.name)
    except SyntaxError as exc:
        location = unit.name
        if exc.lineno:
            location = f"{location}:{exc.lineno}:{exc.offset or 1}"
        return ParseResult(error=ParseError(f"{location}: {exc.msg}"))
    except ValueError as exc:
        return ParseResult(error=ParseError(f"{unit.name}: {exc}"))
    except (RecursionError, MemoryError):
        return ParseResult(error=ParseError(f"{unit.name}: too deeply nested to parse"))
    return ParseResult(tree=tree)


def split_locator(message: str) -> tuple[Optional[int], Optional[int], str]:
    """Split a leading ``line:col:`` locator off a parsing-rule message."""

    match = LOCATOR_PATTERN.match(message)
    if match is None:
        return None, None, message
    return int(match.group(1)), int(match.group(2)), match.group(3)


class Linter:
    """Feed source units through the stateless, stateful and parsing tiers.

    Diagnostics go to ``sink`` as soon as they are produced. Rules run in
    sorted name order within each tier so repeated runs render identically.
    """

    def __init__(self, registry: RuleRegistry, sink: Optional[DiagnosticSink] = None) -> None:
        self.registry = registry
        self.sink = sink if sink is not None else DiagnosticSink()

    @property
    def report(self) -> LintReport:
        return self.sink.report

    def _emit(self, unit: SourceUnit, rule: str, message: str, tier: Tier, line: Optional[int] = None) -> None:
        self.sink(Diagnostic(source=unit.name, rule=rule, message=message, tier=tier, line=line))

    def lint_source(self, unit: SourceUnit) -> None:
        """Run every tier over one source unit."""

        stateless = sorted(self.registry.stateless.items())
        stateful = sorted(self.registry.stateful.items())

        for _, rule in stateful:
            rule.reset()

        # Stateful rules must see every line exactly once, in order.
        for index, line in enumerate(unit.lines):
            for name, rule in stateless:
                message, matched = rule.lint(line)
                if matched:
                    self._emit(unit, name, message, Tier.STATELESS, index + 1)
            for name, rule in stateful:
                message, matched = rule.lint(line, index)
                if matched:
                    self._emit(unit, name, message, Tier.STATEFUL, index + 1)

        for name, rule in stateful:
            message, matched = rule.done()
            if matched:
                self._emit(unit, name, message, Tier.STATEFUL)

        result = parse_source(unit)
        if not result.ok:
            self._emit(unit, PARSER_RULE, result.error.description, Tier.PARSER)
        self._run_parsing_tier(unit, result)
        self.report.add_linted()

    def _run_parsing_tier(self, unit: SourceUnit, result: ParseResult) -> None:
        for name, rule in sorted(self.registry.parsing.items()):
            rule.init(result.tree)
            for message in rule.findings():
                line, column, text = split_locator(message)
                self.sink(
                    Diagnostic(
                        source=unit.name,
                        rule=name,
                        message=text,
                        tier=Tier.PARSING,
                        line=line,
                        column=column,
                    )
                )

    def lint_file(self, path: Path) -> bool:
        """Lint one file; return False if it could not be read."""

        try:
            content = read_source(path)
        except FileReadError as exc:
            logger.error("couldn't lint file: %s (%s)", exc.source, exc.reason)
            self.report.add_failure(exc.source)
            return False
        self.lint_source(SourceUnit(name=str(path), content=content))
        return True

    def lint_stream(self, stream: TextIO, name: str = STDIN_NAME) -> None:
        """Lint a whole text stream; read failures propagate to the caller."""

        self.lint_source(SourceUnit(name=name, content=read_stream(stream, name)))

    def run(self, paths: Iterable[str], stdin: Optional[TextIO] = None) -> LintReport:
        """Lint ``paths`` in order, or standard input when none are given."""

        paths = list(paths)
        if not paths:
            try:
                self.lint_stream(stdin if stdin is not None else sys.stdin)
            except FileReadError as exc:
                logger.error("couldn't read standard input: %s", exc.reason)
                self.report.add_failure(exc.source)
            return self.report
        for path in iter_source_paths(paths):
            self.lint_file(path)
        return self.report
