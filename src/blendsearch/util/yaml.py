import os
import re
from pathlib import Path
from typing import Any, cast

import structlog
import yaml  # type: ignore[import-untyped]

logger = structlog.get_logger()

_ENV_PATTERN = re.compile(r"\$\(([^)]+)\)")


def _resolve_env_vars(
    value: Any,
    required_vars: set[str] | None = None,
) -> Any:
    """Recursively resolve ``$(VAR)`` placeholders to environment variables.

    Variables listed in *required_vars* raise :class:`ValueError` when unset;
    any other missing variable resolves to an empty string.
    """

    def _replace(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.getenv(var_name)
        if env_value is None and required_vars and var_name in required_vars:
            msg = f"Missing required environment variable: {var_name}"
            raise ValueError(msg)
        return env_value if env_value is not None else ""

    match value:
        case str():
            return _ENV_PATTERN.sub(_replace, value)
        case dict():
            return {k: _resolve_env_vars(v, required_vars) for k, v in value.items()}
        case list():
            return [_resolve_env_vars(item, required_vars) for item in value]
        case _:
            return value


def load_yaml_config(
    config_path: Path,
    defaults: dict[str, Any] | None = None,
    required_vars: set[str] | None = None,
) -> dict[str, Any]:
    """Load a YAML config mapping and resolve ``$(VAR)`` placeholders.

    Args:
        config_path: Path to the YAML file.
        defaults: Returned when the file does not exist.
        required_vars: Environment variables that must be set.

    Raises:
        ValueError: When the document is not a mapping or a required
            variable is missing.
    """
    if not config_path.exists():
        logger.warning("config_not_found", path=str(config_path))
        return defaults or {}

    raw = load_yaml_data(config_path) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    resolved: dict[str, Any] = cast(dict[str, Any], _resolve_env_vars(raw, required_vars))
    return resolved


def load_yaml_data(path: Path) -> Any:
    """Parse a YAML (or JSON) document without placeholder resolution."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)
