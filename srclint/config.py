"""Load the optional YAML configuration file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ConfigError
from .utils import read_yaml_file

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".srclint.yml"
KNOWN_KEYS = {"disable", "disable_categories", "options"}


@dataclass
class LintConfig:
    """Settings read from the configuration file."""

    disabled_rules: List[str] = field(default_factory=list)
    disabled_categories: List[str] = field(default_factory=list)
    options: Dict[str, Dict[str, int]] = field(default_factory=dict)


def _string_list(data: Dict[str, Any], key: str, path: Path) -> List[str]:
    value = data.get(key, [])
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{path}: '{key}' must be a list of strings")
    return list(value)


def _rule_options(data: Dict[str, Any], path: Path) -> Dict[str, Dict[str, int]]:
    raw = data.get("options") or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: 'options' must be a mapping of rule name to settings")
    options: Dict[str, Dict[str, int]] = {}
    for rule, settings in raw.items():
        if not isinstance(settings, dict):
            raise ConfigError(f"{path}: options for {rule} must be a mapping")
        for key, value in settings.items():
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{path}: {rule}.{key} must be a non-negative integer")
        options[str(rule)] = dict(settings)
    return options


def load_config(path: Optional[Path] = None) -> LintConfig:
    """Read ``path``, or ``.srclint.yml`` in the working directory if present.

    An explicitly given path must exist; the default file is optional.
    """

    explicit = path is not None
    config_path = path if path is not None else Path(CONFIG_FILENAME)
    if explicit and not config_path.exists():
        raise ConfigError(f"{config_path}: configuration file not found")
    data = read_yaml_file(config_path)
    if data is None:
        return LintConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: configuration must be a mapping")
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown configuration keys in %s: %s", config_path, ", ".join(map(str, unknown)))
    logger.info("Loaded configuration from %s", config_path)
    return LintConfig(
        disabled_rules=_string_list(data, "disable", config_path),
        disabled_categories=_string_list(data, "disable_categories", config_path),
        options=_rule_options(data, config_path),
    )
