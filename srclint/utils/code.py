"""Source path helper utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Generator, Iterable


def iter_source_paths(paths: Iterable[str], extensions: tuple[str, ...] = (".py",)) -> Generator[Path, None, None]:
    """Yield each argument in order, expanding directories to their source files.

    Files inside a directory are yielded in sorted order. Arguments that are not
    directories are yielded unchanged, whether or not they exist.
    """

    for raw in paths:
        path = Path(raw)
        if not path.is_dir():
            yield path
            continue
        for child in sorted(path.rglob("*")):
            if child.suffix in extensions and child.is_file():
                yield child
