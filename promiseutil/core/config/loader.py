"""Load promiseutil configuration from YAML."""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from promiseutil.core.config.models import Config

_ENV_REF = re.compile(r"\$\{([^}]+)\}")


def substitute_env(data: Any, source: str = "<config>") -> Any:
    """Replace ${VAR} references in every string of a loaded YAML document.

    Args:
        data: Parsed YAML (nested dicts, lists and scalars).
        source: Label for error messages, usually the file path.

    Returns:
        A copy of `data` with references replaced by environment values.

    Raises:
        ValueError: If a referenced variable is not set.
    """
    missing: set[str] = set()

    def lookup(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in os.environ:
            missing.add(name)
            return match.group(0)
        return os.environ[name]

    def walk(node: Any) -> Any:
        if isinstance(node, dict):
            return {key: walk(value) for key, value in node.items()}
        if isinstance(node, list):
            return [walk(item) for item in node]
        if isinstance(node, str):
            return _ENV_REF.sub(lookup, node)
        return node

    result = walk(data)
    if missing:
        raise ValueError(f"Unset environment variable(s) in {source}: {', '.join(sorted(missing))}")
    return result


def load_config(path: Path | str) -> Config:
    """Load queue and logging options from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If an environment variable reference cannot be resolved.
        yaml.YAMLError: If the YAML is malformed.
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    return Config(**substitute_env(data, source=str(config_path)))
