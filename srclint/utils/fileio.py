"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, TextIO

import yaml

from srclint.errors import ConfigError, FileReadError


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def read_source(path: Path) -> str:
    """Return the file contents as UTF-8 text without newline translation."""

    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError as exc:
        raise FileReadError(str(path), "no such file") from exc
    except IsADirectoryError as exc:
        raise FileReadError(str(path), "is a directory") from exc
    except UnicodeDecodeError as exc:
        raise FileReadError(str(path), f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise FileReadError(str(path), exc.strerror or str(exc)) from exc


def read_stream(stream: TextIO, name: str) -> str:
    """Read a whole text stream, reporting failures as :class:`FileReadError`."""

    try:
        return stream.read()
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise FileReadError(name, str(exc)) from exc
