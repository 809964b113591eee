"""Connection to the cf host for issuing platform commands.

``CliConnection`` is the surface the plugin needs from the host: run a cf
command (with or without echoing its output) and list services.
``CfCliConnection`` implements it by running the ``cf`` binary.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

from cf_treeline._console import Console
from cf_treeline._exceptions import PlatformCommandError
from cf_treeline._services import parse_services_output
from cf_treeline._types import ServiceDescriptor

logger = logging.getLogger(__name__)


class CliConnection(Protocol):
    """Platform commands available to a plugin."""

    def cli_command(self, *args: str) -> list[str]:
        """Run a cf command, showing its output. Returns the output lines."""
        ...

    def cli_command_without_terminal_output(self, *args: str) -> list[str]:
        """Run a cf command silently. Returns the output lines."""
        ...

    def get_services(self) -> list[ServiceDescriptor]:
        """List service instances in the targeted space."""
        ...


class CfCliConnection:
    """Runs platform commands through the ``cf`` executable."""

    def __init__(self, cf_path: str = "cf", console: Console | None = None):
        self.cf_path = cf_path
        self.console = console or Console()

    def _run_captured(self, args: tuple[str, ...]) -> subprocess.CompletedProcess:
        logger.debug("Running cf %s", " ".join(args))
        try:
            result = subprocess.run(
                [self.cf_path, *args],
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            raise PlatformCommandError(args, output=str(exc)) from exc

        if result.returncode != 0:
            # cf reports failures on stdout ("FAILED" plus the reason)
            output = result.stdout.strip() or result.stderr.strip()
            raise PlatformCommandError(
                args,
                returncode=result.returncode,
                output=output,
            )
        return result

    def cli_command(self, *args: str) -> list[str]:
        """Run cf, echoing each output line as it arrives."""
        logger.debug("Running cf %s", " ".join(args))
        try:
            proc = subprocess.Popen(
                [self.cf_path, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as exc:
            raise PlatformCommandError(args, output=str(exc)) from exc

        lines: list[str] = []
        with proc:
            for line in proc.stdout:
                self.console.write_stdout(line)
                lines.append(line.rstrip("\n"))
        returncode = proc.wait()

        if returncode != 0:
            raise PlatformCommandError(
                args,
                returncode=returncode,
                output="\n".join(lines).strip(),
            )
        return lines

    def cli_command_without_terminal_output(self, *args: str) -> list[str]:
        return self._run_captured(args).stdout.splitlines()

    def get_services(self) -> list[ServiceDescriptor]:
        lines = self.cli_command_without_terminal_output("services")
        services = parse_services_output(lines)
        logger.info("Found %d service instance(s)", len(services))
        return services
