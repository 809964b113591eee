"""Tests for npm installs (subprocess mocked)."""

from __future__ import annotations

import io
import subprocess
from unittest.mock import call, patch

import pytest

from cf_treeline._console import Console
from cf_treeline._exceptions import PackageInstallError
from cf_treeline._types import NpmPackage
from cf_treeline.rules.packages import install_package, install_packages, npm_install_args
from cf_treeline.subsystem import TreelineSubsystem

PACKAGES = TreelineSubsystem().npm_packages


@pytest.fixture
def console() -> Console:
    return Console(stdout=io.StringIO())


class TestNpmInstallArgs:
    def test_pinned(self):
        assert npm_install_args(NpmPackage("connect-redis", "1.4.5")) == [
            "npm", "install", "connect-redis@1.4.5", "--save", "--save-exact",
        ]

    def test_unpinned(self):
        assert npm_install_args(NpmPackage("socket.io-redis")) == [
            "npm", "install", "socket.io-redis", "--save", "--save-exact",
        ]


class TestInstallPackage:
    @patch("cf_treeline.rules.packages.subprocess.run")
    def test_checked_run(self, mock_run):
        install_package(NpmPackage("sails-postgresql"))
        mock_run.assert_called_once_with(
            ["npm", "install", "sails-postgresql", "--save", "--save-exact"],
            check=True,
        )

    @patch("cf_treeline.rules.packages.subprocess.run")
    def test_npm_missing(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory: 'npm'")
        with pytest.raises(PackageInstallError) as excinfo:
            install_package(NpmPackage("sails-postgresql"))
        assert excinfo.value.package == "sails-postgresql"


class TestInstallPackages:
    """Test install_packages()."""

    @patch("cf_treeline.rules.packages.subprocess.run")
    def test_installs_all_in_order(self, mock_run, console):
        result = install_packages(PACKAGES, console)

        assert mock_run.call_args_list == [
            call(["npm", "install", "connect-redis@1.4.5", "--save", "--save-exact"], check=True),
            call(["npm", "install", "sails-postgresql", "--save", "--save-exact"], check=True),
            call(["npm", "install", "socket.io-redis", "--save", "--save-exact"], check=True),
        ]
        assert result.success
        assert result.installed == PACKAGES

    @patch("cf_treeline.rules.packages.subprocess.run")
    def test_continues_past_failure(self, mock_run, console):
        failure = subprocess.CalledProcessError(1, ["npm"])
        mock_run.side_effect = [None, failure, None]

        result = install_packages(PACKAGES, console)

        assert mock_run.call_count == 3
        assert not result.success
        assert [f.package for f in result.failures] == ["sails-postgresql"]
        assert [p.name for p in result.installed] == ["connect-redis", "socket.io-redis"]
        assert console.stdout.getvalue().startswith("Error installing npm packages ")

    @patch("cf_treeline.rules.packages.subprocess.run")
    def test_every_install_failing_still_returns(self, mock_run, console):
        mock_run.side_effect = OSError("npm not found")
        result = install_packages(PACKAGES, console)

        assert len(result.failures) == 3
        assert console.stdout.getvalue().count("Error installing npm packages npm not found") == 3
