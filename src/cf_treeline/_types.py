"""Domain types for the treeline cf plugin."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import yaml


@dataclass(frozen=True)
class Invocation:
    """Arguments handed to the plugin by the cf host.

    Element 0 is the top-level command name, element 1 the subcommand.
    """

    args: tuple[str, ...]

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "Invocation":
        return cls(args=tuple(args))

    @property
    def command(self) -> Optional[str]:
        return self.args[0] if self.args else None

    @property
    def subcommand(self) -> Optional[str]:
        return self.args[1] if len(self.args) > 1 else None

    @property
    def tail(self) -> tuple[str, ...]:
        """Everything after the top-level command name."""
        return self.args[1:]


@dataclass(frozen=True)
class ServiceDescriptor:
    """A service instance as reported by the platform."""

    name: str
    plan: str = ""
    application_names: tuple[str, ...] = ()

    def is_bound_to(self, app_name: str) -> bool:
        return app_name in self.application_names


@dataclass(frozen=True)
class BackingService:
    """A service instance the deployed app needs."""

    instance_name: str
    offering: str
    plan: str

    def create_args(self) -> tuple[str, ...]:
        return ("cs", self.offering, self.plan, self.instance_name)

    def bind_args(self, app_name: str) -> tuple[str, ...]:
        return ("bs", app_name, self.instance_name)


@dataclass(frozen=True)
class NpmPackage:
    """An npm dependency, optionally pinned to an exact version."""

    name: str
    version: Optional[str] = None

    @classmethod
    def parse(cls, spec: str) -> "NpmPackage":
        # Scoped packages start with "@", so only split on a later one
        head, sep, version = spec[1:].rpartition("@")
        if not sep:
            return cls(name=spec)
        return cls(name=spec[0] + head, version=version or None)

    def to_spec(self) -> str:
        if self.version:
            return f"{self.name}@{self.version}"
        return self.name


@dataclass(frozen=True)
class VersionType:
    """Major.minor.build version triple as cf reports plugin versions."""

    major: int
    minor: int
    build: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}"

    def to_dict(self) -> dict[str, int]:
        return {"Major": self.major, "Minor": self.minor, "Build": self.build}


@dataclass(frozen=True)
class PluginCommand:
    """A command the plugin registers with the host."""

    name: str
    help_text: str
    usage: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"Name": self.name, "HelpText": self.help_text}
        if self.usage:
            result["UsageDetails"] = {"Usage": self.usage}
        return result


@dataclass(frozen=True)
class PluginMetadata:
    """What the plugin tells the host about itself at install time."""

    name: str
    version: VersionType
    min_cli_version: VersionType
    commands: tuple[PluginCommand, ...] = field(default_factory=tuple)

    @property
    def command_names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.commands)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the host's metadata field names."""
        return {
            "Name": self.name,
            "Version": self.version.to_dict(),
            "MinCliVersion": self.min_cli_version.to_dict(),
            "Commands": [c.to_dict() for c in self.commands],
        }

    def to_yaml(self) -> str:
        return yaml.dump(
            self.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
