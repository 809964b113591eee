"""Plugin configuration.

Defaults deploy the hackday treeline app. An optional ``.cf-treeline.yml``
in the app directory can override them:

    treeline:
      app_name: my-app
      cache_service:
        instance_name: my-redis
      log_level: INFO

``CF_TREELINE_LOG_LEVEL`` sets the log level when the file does not.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from cf_treeline._exceptions import ConfigurationError
from cf_treeline._types import BackingService, NpmPackage

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".cf-treeline.yml"
LOG_LEVEL_ENV_VAR = "CF_TREELINE_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_DEFAULT_NPM_PACKAGES = (
    NpmPackage("connect-redis", "1.4.5"),
    NpmPackage("sails-postgresql"),
    NpmPackage("socket.io-redis"),
)


@dataclass(frozen=True)
class TreelineSubsystem:
    """Configuration for the treeline cf plugin."""

    options_scope = "treeline"

    command_name: str = "treeline"
    tool: str = "treeline"
    app_name: str = "hackday-nc"
    node_env: str = "development"
    cache_service: BackingService = BackingService(
        instance_name="hackday-rediscloud",
        offering="rediscloud",
        plan="30mb",
    )
    database_service: BackingService = BackingService(
        instance_name="hackday-elephantsql",
        offering="elephantsql",
        plan="turtle",
    )
    npm_packages: tuple[NpmPackage, ...] = _DEFAULT_NPM_PACKAGES
    log_level: str = "WARNING"

    @property
    def backing_services(self) -> tuple[BackingService, ...]:
        """Services the app needs, in provisioning order."""
        return (self.cache_service, self.database_service)


_STRING_OPTIONS = ("command_name", "tool", "app_name", "node_env", "log_level")
_SERVICE_OPTIONS = ("cache_service", "database_service")


def _require_string(value: Any, option: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(
            f"Expected a non-empty string, got {value!r}",
            field=option,
        )
    return value


def _parse_service(value: Any, default: BackingService, option: str) -> BackingService:
    if not isinstance(value, dict):
        raise ConfigurationError(
            f"Expected a mapping with instance_name/offering/plan, got {value!r}",
            field=option,
        )
    allowed = {"instance_name", "offering", "plan"}
    unknown = sorted(set(value) - allowed)
    if unknown:
        raise ConfigurationError(
            f"Unknown keys: {', '.join(map(str, unknown))}",
            field=option,
        )
    overrides = {
        key: _require_string(val, f"{option}.{key}") for key, val in value.items()
    }
    return replace(default, **overrides)


def _parse_packages(value: Any) -> tuple[NpmPackage, ...]:
    if not isinstance(value, list):
        raise ConfigurationError(
            f"Expected a list of package specs, got {value!r}",
            field="npm_packages",
        )
    return tuple(
        NpmPackage.parse(_require_string(spec, "npm_packages")) for spec in value
    )


def subsystem_from_dict(data: Mapping[str, Any]) -> TreelineSubsystem:
    """Build a subsystem from the ``treeline:`` mapping of a config file.

    Raises:
        ConfigurationError: On unknown options or wrongly typed values.
    """
    defaults = TreelineSubsystem()
    known = {f.name for f in fields(TreelineSubsystem)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown options: {', '.join(map(str, unknown))}",
            field=TreelineSubsystem.options_scope,
        )

    overrides: dict[str, Any] = {}
    for option, value in data.items():
        if option in _STRING_OPTIONS:
            overrides[option] = _require_string(value, option)
        elif option in _SERVICE_OPTIONS:
            overrides[option] = _parse_service(
                value, getattr(defaults, option), option
            )
        elif option == "npm_packages":
            overrides[option] = _parse_packages(value)

    if "log_level" in overrides:
        overrides["log_level"] = _validate_log_level(overrides["log_level"])

    return replace(defaults, **overrides)


def _validate_log_level(level: str) -> str:
    normalized = level.strip().upper()
    if normalized not in _LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level {level!r}. Valid levels: {', '.join(_LOG_LEVELS)}",
            field="log_level",
        )
    return normalized


def load_subsystem(
    path: str | Path = DEFAULT_CONFIG_PATH,
    environ: Optional[Mapping[str, str]] = None,
) -> TreelineSubsystem:
    """Load configuration: file option > environment variable > default.

    A missing file means all defaults.

    Raises:
        ConfigurationError: If the file is unreadable, not YAML, or invalid.
    """
    environ = os.environ if environ is None else environ
    config_path = Path(path)

    data: dict[str, Any] = {}
    if config_path.is_file():
        try:
            raw = yaml.safe_load(config_path.read_text())
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Could not read {config_path}: {exc}") from exc

        if raw is not None:
            if not isinstance(raw, dict):
                raise ConfigurationError(f"{config_path} must contain a mapping")
            section = raw.get(TreelineSubsystem.options_scope) or {}
            if not isinstance(section, dict):
                raise ConfigurationError(
                    "Expected a mapping of options",
                    field=TreelineSubsystem.options_scope,
                )
            data = section
        logger.debug("Loaded plugin options from %s", config_path)

    subsystem = subsystem_from_dict(data)

    env_level = environ.get(LOG_LEVEL_ENV_VAR)
    if "log_level" not in data and env_level:
        subsystem = replace(subsystem, log_level=_validate_log_level(env_level))

    return subsystem
