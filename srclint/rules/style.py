"""Layout and formatting checks."""

from __future__ import annotations

import ast
from typing import Dict, Iterator, Optional

from srclint.tier import Tier

from . import NO_MATCH, Verdict, locate

DEFAULT_MAX_LINE_LENGTH = 79
DEFAULT_MAX_FILE_LINES = 1000


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


# ----------------------------------------------------------------------
# Stateless rules
# ----------------------------------------------------------------------
class LineLengthRule:
    """Flag lines longer than ``max_length`` characters."""

    def __init__(self, max_length: int = DEFAULT_MAX_LINE_LENGTH) -> None:
        self.max_length = max_length

    def lint(self, line: str) -> Verdict:
        length = len(_strip_cr(line))
        if length > self.max_length:
            return f"line is {length} characters long (max {self.max_length})", True
        return NO_MATCH


class TabsRule:
    def lint(self, line: str) -> Verdict:
        if "\t" in line:
            return "line contains a tab character", True
        return NO_MATCH


class TrailingWhitespaceRule:
    def lint(self, line: str) -> Verdict:
        text = _strip_cr(line)
        if text != text.rstrip():
            return "trailing whitespace", True
        return NO_MATCH


class SemicolonRule:
    """Flag statements terminated by a semicolon."""

    def lint(self, line: str) -> Verdict:
        code = _strip_cr(line).split("#", 1)[0].rstrip()
        if code.endswith(";"):
            return "statement ends with a semicolon", True
        return NO_MATCH


# ----------------------------------------------------------------------
# Stateful rules
# ----------------------------------------------------------------------
class FilesizeRule:
    """Report files with more than ``max_lines`` lines."""

    def __init__(self, max_lines: int = DEFAULT_MAX_FILE_LINES) -> None:
        self.max_lines = max_lines
        self._count = 0
        self._last: Optional[str] = None

    def reset(self) -> None:
        self._count = 0
        self._last = None

    def lint(self, line: str, index: int) -> Verdict:
        self._count += 1
        self._last = line
        return NO_MATCH

    def done(self) -> Verdict:
        # The empty segment after a final line feed is not a line of its own.
        total = self._count - 1 if self._last == "" else self._count
        if total > self.max_lines:
            return f"file is {total} lines long (max {self.max_lines})", True
        return NO_MATCH


class TrailingNewlineRule:
    """Require exactly one line feed at the end of a non-empty file."""

    def __init__(self) -> None:
        self._last: Optional[str] = None
        self._previous: Optional[str] = None

    def reset(self) -> None:
        self._last = None
        self._previous = None

    def lint(self, line: str, index: int) -> Verdict:
        self._previous, self._last = self._last, line
        return NO_MATCH

    def done(self) -> Verdict:
        if self._last is None:
            return NO_MATCH
        if self._last != "":
            return "file does not end with a newline", True
        if self._previous is not None and _strip_cr(self._previous).strip() == "":
            return "file ends with blank lines", True
        return NO_MATCH


# ----------------------------------------------------------------------
# Parsing rules
# ----------------------------------------------------------------------
class UncleanImportRule:
    """Flag wildcard imports and several modules imported in one statement."""

    def __init__(self) -> None:
        self._tree: Optional[ast.Module] = None

    def init(self, tree: Optional[ast.Module]) -> None:
        self._tree = tree

    def findings(self) -> Iterator[str]:
        if self._tree is None:
            return
        imports = [node for node in ast.walk(self._tree) if isinstance(node, (ast.Import, ast.ImportFrom))]
        imports.sort(key=lambda node: (node.lineno, node.col_offset))
        for node in imports:
            if isinstance(node, ast.Import) and len(node.names) > 1:
                modules = ", ".join(alias.name for alias in node.names)
                yield locate(node, f"multiple modules imported in one statement ({modules})")
            elif isinstance(node, ast.ImportFrom) and any(alias.name == "*" for alias in node.names):
                module = "." * node.level + (node.module or "")
                yield locate(node, f"wildcard import from {module}")


def get_rules(options: Optional[dict] = None) -> Dict[Tier, dict]:
    options = options or {}
    linelen = options.get("style:linelen", {})
    filesize = options.get("style:filesize", {})
    return {
        Tier.STATELESS: {
            "style:linelen": LineLengthRule(int(linelen.get("max", DEFAULT_MAX_LINE_LENGTH))),
            "style:tabs": TabsRule(),
            "style:trailingwhitespace": TrailingWhitespaceRule(),
            "style:semicolon": SemicolonRule(),
        },
        Tier.STATEFUL: {
            "style:filesize": FilesizeRule(int(filesize.get("max", DEFAULT_MAX_FILE_LINES))),
            "style:trailingnewline": TrailingNewlineRule(),
        },
        Tier.PARSING: {
            "style:uncleanimports": UncleanImportRule(),
        },
    }
