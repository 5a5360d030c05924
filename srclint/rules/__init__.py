"""Rule capability contracts for the three lint tiers."""

from __future__ import annotations

import ast
from typing import Iterator, Optional, Protocol, Tuple

Verdict = Tuple[str, bool]
NO_MATCH: Verdict = ("", False)


class StatelessRule(Protocol):
    """A line-scoped check with no memory between lines."""

    def lint(self, line: str) -> Verdict:
        """Return ``(message, matched)`` for a single line."""


class StatefulRule(Protocol):
    """A file-scoped check that accumulates state across lines."""

    def reset(self) -> None:
        """Clear internal state before the first line of a file."""

    def lint(self, line: str, index: int) -> Verdict:
        """Observe the line at 0-based ``index`` and optionally report on it."""

    def done(self) -> Verdict:
        """Return the whole-file verdict once every line has been seen."""


class ParsingRule(Protocol):
    """A check over the syntax tree of a whole file."""

    def init(self, tree: Optional[ast.Module]) -> None:
        """Accept the parse result; ``tree`` is None when parsing failed."""

    def findings(self) -> Iterator[str]:
        """Yield messages lazily; a message may begin with a ``line:col:`` locator."""


def locate(node: ast.AST, message: str) -> str:
    """Prefix ``message`` with the 1-based line and column of ``node``."""

    line = getattr(node, "lineno", 0)
    column = getattr(node, "col_offset", 0) + 1
    return f"{line}:{column}: {message}"
