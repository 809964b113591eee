"""cf CLI plugin registration for treeline.

The ``cf-treeline`` console script follows the cf plugin binary contract:
it is started with ``SendMetadata`` to describe itself, and otherwise with
the command line the user typed after ``cf``:

    cf-treeline treeline config-pws    write cf config, link .cfignore, npm installs
    cf-treeline treeline deploy        push, provision redis + postgres, start
    cf-treeline treeline <anything>    run `treeline <anything>`

Platform calls go through the ``cf`` executable on PATH, so the current
``cf target`` applies. ``.cf-treeline.yml`` in the app directory overrides
the defaults; see ``cf_treeline.subsystem``.
"""

from __future__ import annotations

import logging
import shutil
import sys
from typing import Optional, Sequence

from cf_treeline._connection import CfCliConnection, CliConnection
from cf_treeline._console import Console
from cf_treeline._exceptions import ToolNotFoundError, TreelineError
from cf_treeline._types import (
    Invocation,
    PluginCommand,
    PluginMetadata,
    VersionType,
)
from cf_treeline.goals import config_pws as config_pws_goal
from cf_treeline.goals import deploy as deploy_goal
from cf_treeline.goals.passthrough import run_passthrough
from cf_treeline.subsystem import TreelineSubsystem, load_subsystem

logger = logging.getLogger(__name__)

PLUGIN_NAME = "TreelineCli"
PLUGIN_VERSION = VersionType(1, 0, 0)
MIN_CLI_VERSION = VersionType(6, 7, 0)

METADATA_ARG = "SendMetadata"


class TreelinePlugin:
    """The ``treeline`` command the cf host routes to this plugin."""

    def __init__(
        self,
        subsystem: Optional[TreelineSubsystem] = None,
        console: Optional[Console] = None,
    ):
        self.subsystem = subsystem or TreelineSubsystem()
        self.console = console or Console()

    def get_metadata(self) -> PluginMetadata:
        name = self.subsystem.command_name
        usage = "\n   ".join([
            name,
            f"cf {name} {config_pws_goal.NAME}",
            f"cf {name} {deploy_goal.NAME}",
            f"cf {name} <{self.subsystem.tool} args>",
        ])
        return PluginMetadata(
            name=PLUGIN_NAME,
            version=PLUGIN_VERSION,
            min_cli_version=MIN_CLI_VERSION,
            commands=(
                PluginCommand(
                    name=name,
                    help_text=f"Run {self.subsystem.tool} commands and deploy "
                    f"{self.subsystem.tool} apps to Cloud Foundry",
                    usage=usage,
                ),
            ),
        )

    def run(self, connection: CliConnection, args: Sequence[str]) -> int:
        """Handle one invocation and return the process exit code (0 or 1).

        Fatal errors are printed here; nothing below this method exits.
        """
        invocation = Invocation.from_args(args)
        if invocation.command != self.subsystem.command_name:
            logger.debug("Ignoring command %r", invocation.command)
            return 0

        try:
            self._dispatch(connection, invocation)
        except TreelineError as exc:
            logger.debug("%s failed: %r", invocation.subcommand, exc)
            self.console.print_stdout(str(exc))
            return 1
        return 0

    def _dispatch(self, connection: CliConnection, invocation: Invocation) -> None:
        tool_path = shutil.which(self.subsystem.tool)
        if tool_path is None:
            raise ToolNotFoundError(self.subsystem.tool)

        if invocation.subcommand == config_pws_goal.NAME:
            config_pws_goal.run_config_pws(self.console, self.subsystem)
        elif invocation.subcommand == deploy_goal.NAME:
            deploy_goal.run_deploy(connection, self.subsystem)
        else:
            run_passthrough(tool_path, invocation.tail)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Plugin binary entry point, as started by the cf host."""
    args = list(sys.argv[1:] if argv is None else argv)
    console = Console()

    if not args:
        console.print_stdout("This cf CLI plugin is not intended to be run on its own")
        return 1

    try:
        subsystem = load_subsystem()
    except TreelineError as exc:
        # A broken file can't name the command, so only the default one fails
        if args[0] not in (METADATA_ARG, TreelineSubsystem().command_name):
            logger.debug("Ignoring command %r: %s", args[0], exc)
            return 0
        console.print_stdout(str(exc))
        return 1

    configure_logging(subsystem.log_level)
    plugin = TreelinePlugin(subsystem, console)

    if args[0] == METADATA_ARG:
        console.write_stdout(plugin.get_metadata().to_yaml())
        return 0

    return plugin.run(CfCliConnection(console=console), args)


if __name__ == "__main__":
    sys.exit(main())
