"""Shared fixtures: a recording stand-in for the cf host connection."""

from __future__ import annotations

from typing import Optional

import pytest

from cf_treeline._exceptions import PlatformCommandError
from cf_treeline._types import ServiceDescriptor


class FakeConnection:
    """Records cf calls; fails any call whose first argument is in ``fail_on``."""

    def __init__(
        self,
        services: Optional[list[ServiceDescriptor]] = None,
        fail_on: tuple[str, ...] = (),
    ):
        self.services = list(services or [])
        self.fail_on = fail_on
        self.calls: list[tuple[str, ...]] = []

    def cli_command(self, *args: str) -> list[str]:
        self.calls.append(args)
        if args and args[0] in self.fail_on:
            raise PlatformCommandError(args, returncode=1, output=f"FAILED {args[0]}")
        return []

    def cli_command_without_terminal_output(self, *args: str) -> list[str]:
        return self.cli_command(*args)

    def get_services(self) -> list[ServiceDescriptor]:
        self.calls.append(("services",))
        if "services" in self.fail_on:
            raise PlatformCommandError(("services",), returncode=1, output="FAILED services")
        return list(self.services)

    def commands(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def provisioned_services() -> list[ServiceDescriptor]:
    """Both backing services already exist and are bound to the app."""
    return [
        ServiceDescriptor("hackday-rediscloud", "30mb", ("hackday-nc",)),
        ServiceDescriptor("hackday-elephantsql", "turtle", ("other-app", "hackday-nc")),
    ]


@pytest.fixture
def make_connection():
    """Build a FakeConnection with given services and failing commands."""
    return FakeConnection
