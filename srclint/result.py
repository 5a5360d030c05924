"""Core result data structures for the linter."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, TextIO, Tuple

from .tier import Tier

PARSER_RULE = "parser"


@dataclass
class Diagnostic:
    """Capture a single finding reported by a rule."""

    source: str
    rule: str
    message: str
    tier: Tier
    line: Optional[int] = None
    column: Optional[int] = None

    def render(self) -> str:
        """Return the one-line text form of the diagnostic."""

        if self.tier is Tier.PARSER:
            return f"{self.message} (in {PARSER_RULE})"
        if self.column is not None:
            return f"{self.source}:{self.line}:{self.column} {self.rule}: {self.message}"
        if self.line is not None and self.tier.is_line_scoped:
            return f"{self.source}:{self.line}|{self.rule}: {self.message}"
        return f"{self.source}|{self.rule}: {self.message}"

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["tier"] = self.tier.value
        return data


@dataclass
class Summary:
    """Aggregate counts over a lint run."""

    files_linted: int = 0
    files_failed: int = 0
    by_rule: Dict[str, int] = field(default_factory=dict)

    def increment(self, rule: str) -> None:
        self.by_rule[rule] = self.by_rule.get(rule, 0) + 1

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["diagnostics"] = self.total
        return data

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return rule/count pairs, most frequent first."""

        return sorted(self.by_rule.items(), key=lambda item: (-item[1], item[0]))

    @property
    def total(self) -> int:
        return sum(self.by_rule.values())


@dataclass
class LintReport:
    """Bundle run summary, diagnostics and unreadable sources."""

    summary: Summary = field(default_factory=Summary)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failed

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        self.summary.increment(diagnostic.rule)
        self.diagnostics.append(diagnostic)

    def add_linted(self) -> None:
        self.summary.files_linted += 1

    def add_failure(self, source: str) -> None:
        self.summary.files_failed += 1
        self.failed.append(source)

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": self.summary.to_dict(),
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
            "failed": list(self.failed),
            "passed": self.passed,
        }

    def exit_code(self) -> int:
        return 0 if self.passed else 1


class DiagnosticSink:
    """Record diagnostics in a report and optionally stream their text form."""

    def __init__(self, report: Optional[LintReport] = None, stream: Optional[TextIO] = None) -> None:
        self.report = report if report is not None else LintReport()
        self._stream = stream

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.report.add_diagnostic(diagnostic)
        if self._stream is not None:
            self._stream.write(diagnostic.render() + "\n")

    @classmethod
    def to_stdout(cls) -> "DiagnosticSink":
        return cls(stream=sys.stdout)


def format_summary(report: LintReport, max_rules: int = 5) -> str:
    """Create a short human-readable summary of a run."""

    summary = report.summary
    lines: List[str] = [
        f"Linted {summary.files_linted} file(s), "
        f"{summary.files_failed} unreadable, {summary.total} diagnostic(s)"
    ]
    for rule, count in summary.as_rows()[:max_rules]:
        lines.append(f"  {rule:<28} {count:>5}")
    return "\n".join(lines)
