"""Checks that need the whole syntax tree."""

from __future__ import annotations

import ast
import warnings
from typing import Dict, Iterator, Optional

from srclint.tier import Tier

from . import locate

DEPRECATED_MODULES = {
    "imp": "use importlib",
    "asyncore": "use asyncio",
    "asynchat": "use asyncio",
    "distutils": "use setuptools or sysconfig",
}


class ValidParseRule:
    """Report compile-time errors that the parser itself accepts.

    ``ast.parse`` only checks grammar; constructs such as ``return`` outside a
    function or ``nonlocal`` at module level are rejected later, when the tree
    is compiled to bytecode.
    """

    def __init__(self) -> None:
        self._tree: Optional[ast.Module] = None

    def init(self, tree: Optional[ast.Module]) -> None:
        self._tree = tree

    def findings(self) -> Iterator[str]:
        if self._tree is None:
            return
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore")
                compile(self._tree, "<srclint>", "exec", dont_inherit=True)
        except SyntaxError as exc:
            if exc.lineno:
                yield f"{exc.lineno}:{exc.offset or 1}: {exc.msg}"
            else:
                yield exc.msg
        except RecursionError:
            yield "too deeply nested to compile"


class DeprecatedModuleRule:
    """Flag imports of a module scheduled for removal."""

    def __init__(self, module: str, reason: str) -> None:
        self.module = module
        self.reason = reason
        self._tree: Optional[ast.Module] = None

    def init(self, tree: Optional[ast.Module]) -> None:
        self._tree = tree

    def _matches(self, name: Optional[str]) -> bool:
        return bool(name) and (name == self.module or name.startswith(self.module + "."))

    def findings(self) -> Iterator[str]:
        if self._tree is None:
            return
        nodes = []
        for node in ast.walk(self._tree):
            if isinstance(node, ast.Import) and any(self._matches(alias.name) for alias in node.names):
                nodes.append(node)
            elif isinstance(node, ast.ImportFrom) and node.level == 0 and self._matches(node.module):
                nodes.append(node)
        nodes.sort(key=lambda node: (node.lineno, node.col_offset))
        for node in nodes:
            yield locate(node, f"import of deprecated module {self.module} ({self.reason})")


def get_rules(options: Optional[dict] = None) -> Dict[Tier, dict]:
    parsing: Dict[str, object] = {"syntax:validparse": ValidParseRule()}
    for module, reason in DEPRECATED_MODULES.items():
        parsing[f"deprecated:{module}"] = DeprecatedModuleRule(module, reason)
    return {Tier.PARSING: parsing}
