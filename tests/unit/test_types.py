"""Tests for treeline plugin domain types."""

from __future__ import annotations

import pytest
import yaml

from cf_treeline._types import (
    BackingService,
    Invocation,
    NpmPackage,
    PluginCommand,
    PluginMetadata,
    ServiceDescriptor,
    VersionType,
)


class TestInvocation:
    """Test Invocation accessors."""

    def test_command_and_subcommand(self):
        inv = Invocation.from_args(["treeline", "deploy"])
        assert inv.command == "treeline"
        assert inv.subcommand == "deploy"
        assert inv.tail == ("deploy",)

    def test_tail_keeps_all_trailing_args(self):
        inv = Invocation.from_args(["treeline", "generate", "model", "--force"])
        assert inv.tail == ("generate", "model", "--force")

    def test_command_only(self):
        inv = Invocation.from_args(["treeline"])
        assert inv.subcommand is None
        assert inv.tail == ()

    def test_empty(self):
        inv = Invocation.from_args([])
        assert inv.command is None
        assert inv.subcommand is None

    def test_immutable(self):
        inv = Invocation.from_args(["treeline"])
        with pytest.raises(AttributeError):
            inv.args = ("other",)  # type: ignore[misc]


class TestServiceDescriptor:
    def test_bound(self):
        svc = ServiceDescriptor("db", "turtle", ("web", "worker"))
        assert svc.is_bound_to("web")
        assert not svc.is_bound_to("api")

    def test_defaults_unbound(self):
        assert not ServiceDescriptor("db").is_bound_to("web")


class TestBackingService:
    def test_create_args(self):
        svc = BackingService("hackday-rediscloud", "rediscloud", "30mb")
        assert svc.create_args() == ("cs", "rediscloud", "30mb", "hackday-rediscloud")

    def test_bind_args(self):
        svc = BackingService("hackday-elephantsql", "elephantsql", "turtle")
        assert svc.bind_args("hackday-nc") == ("bs", "hackday-nc", "hackday-elephantsql")


class TestNpmPackage:
    @pytest.mark.parametrize(
        "spec, name, version",
        [
            ("connect-redis@1.4.5", "connect-redis", "1.4.5"),
            ("sails-postgresql", "sails-postgresql", None),
            ("@scope/pkg", "@scope/pkg", None),
            ("@scope/pkg@2.0.0", "@scope/pkg", "2.0.0"),
        ],
    )
    def test_parse(self, spec: str, name: str, version: str | None):
        pkg = NpmPackage.parse(spec)
        assert pkg.name == name
        assert pkg.version == version
        assert pkg.to_spec() == spec

    def test_pinned_spec(self):
        assert NpmPackage("connect-redis", "1.4.5").to_spec() == "connect-redis@1.4.5"


class TestPluginMetadata:
    def _metadata(self) -> PluginMetadata:
        return PluginMetadata(
            name="TreelineCli",
            version=VersionType(1, 0, 0),
            min_cli_version=VersionType(6, 7, 0),
            commands=(PluginCommand("treeline", "help", usage="treeline\n   cf treeline"),),
        )

    def test_version_str(self):
        assert str(VersionType(6, 7, 0)) == "6.7.0"

    def test_command_names(self):
        assert self._metadata().command_names == ("treeline",)

    def test_to_dict(self):
        data = self._metadata().to_dict()
        assert data["Name"] == "TreelineCli"
        assert data["Version"] == {"Major": 1, "Minor": 0, "Build": 0}
        assert data["MinCliVersion"] == {"Major": 6, "Minor": 7, "Build": 0}
        assert data["Commands"] == [{
            "Name": "treeline",
            "HelpText": "help",
            "UsageDetails": {"Usage": "treeline\n   cf treeline"},
        }]

    def test_usage_omitted_when_empty(self):
        assert "UsageDetails" not in PluginCommand("x", "help").to_dict()

    def test_to_yaml_round_trips(self):
        metadata = self._metadata()
        assert yaml.safe_load(metadata.to_yaml()) == metadata.to_dict()

    def test_yaml_preserves_key_order(self):
        text = self._metadata().to_yaml()
        assert text.index("Name:") < text.index("Version:") < text.index("Commands:")
