"""Configuration loader for the SD-WAN deployment orchestrator.

Builds the :class:`OrchestratorConfig` for a run from three layers, lowest
precedence first: built-in defaults, environment variables (optionally
seeded from a ``.env`` file in the project root) and CLI overrides.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from sdwan_deploy.config import defaults
from sdwan_deploy.lib.errors import ConfigError
from sdwan_deploy.lib.logging_config import get_logger
from sdwan_deploy.models.config import Operation, OrchestratorConfig

logger = get_logger(__name__)

# Environment variable to field name mapping
ENV_VAR_MAP = {
    "operation": "DEPLOY_MODE",
    "skip_validation": "SKIP_VALIDATION",
    "force": "FORCE_DEPLOY",
    "dry_run": "DRY_RUN",
    "verbose": "VERBOSE",
    "project_root": "SDWAN_PROJECT_ROOT",
    "settle_interval": "SETTLE_INTERVAL",
}

_BOOL_FIELDS = ("skip_validation", "force", "dry_run", "verbose")
_TRUE_VALUES = ("true", "1", "yes", "on")


def _parse_env_value(field_name: str, value: str) -> Any:
    """Parse environment variable value to appropriate type.

    Args:
        field_name: Name of the field (used to determine type)
        value: String value from environment variable

    Returns:
        Parsed value in correct type

    Raises:
        ValueError: If value cannot be parsed
    """
    if field_name in _BOOL_FIELDS:
        return value.strip().lower() in _TRUE_VALUES
    if field_name == "settle_interval":
        return float(value)
    if field_name == "operation":
        return Operation(value.strip().lower())
    if field_name == "project_root":
        return Path(value).expanduser()
    return value


def _get_env_value(field_name: str, env_vars: Mapping[str, str]) -> Any | None:
    """Get environment variable value for a field.

    Unparseable values are ignored with a warning so that a stray variable
    in the operator's shell does not prevent the run.

    Args:
        field_name: Name of field to get
        env_vars: Environment variables mapping

    Returns:
        Parsed value or None if not set or invalid
    """
    env_var_name = ENV_VAR_MAP.get(field_name)
    if not env_var_name or env_var_name not in env_vars:
        return None

    raw = env_vars[env_var_name]
    try:
        return _parse_env_value(field_name, raw)
    except ValueError:
        logger.warning(f"Ignoring invalid value for {env_var_name}: {raw!r}")
        return None


def load_env_file(project_root: Path) -> bool:
    """Load ``<project_root>/.env`` into the process environment.

    Variables already present in the environment are left untouched.

    Returns:
        True if a .env file was found and loaded
    """
    env_file = project_root / ".env"
    if not env_file.is_file():
        return False
    logger.debug(f"Loading environment from {env_file}")
    return load_dotenv(env_file, override=False)


def generate_run_id(now: datetime | None = None) -> str:
    """Return a run identifier such as ``20240131_154500``."""
    return (now or datetime.now()).strftime(defaults.RUN_ID_FORMAT)


def _format_validation_errors(exc: PydanticValidationError) -> str:
    messages = []
    for error in exc.errors():
        loc = ".".join(str(item) for item in error.get("loc", ())) or "config"
        messages.append(f"{loc}: {error.get('msg', 'invalid value')}")
    return "; ".join(messages)


def load_config(
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
    run_id: str | None = None,
) -> OrchestratorConfig:
    """Build the orchestrator configuration for a run.

    Args:
        overrides: Values from the command line. ``None`` values are ignored
            so that unset flags fall through to the environment.
        env: Environment mapping (defaults to ``os.environ``)
        run_id: Explicit run identifier (defaults to the current time)

    Returns:
        Validated, immutable configuration

    Raises:
        ConfigError: If the project root does not exist or a value is invalid
    """
    env_vars: Mapping[str, str] = os.environ if env is None else env
    cli_values = {k: v for k, v in (overrides or {}).items() if v is not None}

    values: dict[str, Any] = {}
    for field_name in ENV_VAR_MAP:
        env_value = _get_env_value(field_name, env_vars)
        if env_value is not None:
            values[field_name] = env_value
    values.update(cli_values)

    project_root = Path(values.get("project_root") or Path.cwd()).resolve()
    if not project_root.is_dir():
        raise ConfigError(
            field="project_root",
            message=f"Project root does not exist: {project_root}",
        )
    values["project_root"] = project_root

    # Deploy-only never validates.
    if values.get("operation") == Operation.DEPLOY:
        values["skip_validation"] = True

    values["run_id"] = run_id or generate_run_id()

    try:
        return OrchestratorConfig(**values)
    except PydanticValidationError as exc:
        raise ConfigError(
            field="config", message=_format_validation_errors(exc)
        ) from exc


def load_deployment_vars(path: Path) -> dict[str, Any]:
    """Read the deployment vars YAML file.

    Args:
        path: Path to ``vars/deployment_config.yml``

    Returns:
        Parsed mapping, empty if the file is missing or empty

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping
    """
    if not path.is_file():
        return {}

    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(
            field=str(path), message=f"Invalid YAML syntax: {exc}"
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(field=str(path), message=f"Cannot read file: {exc}") from exc

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(
            field=str(path), message="Deployment vars must be a YAML mapping"
        )
    return content
