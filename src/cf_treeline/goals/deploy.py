"""deploy goal: push the app, provision its services and start it."""

from __future__ import annotations

import logging

from cf_treeline._connection import CliConnection
from cf_treeline.rules.provision import (
    ProvisionRequest,
    ProvisionResult,
    provision_services,
)
from cf_treeline.subsystem import TreelineSubsystem

logger = logging.getLogger(__name__)

NAME = "deploy"


def run_deploy(
    connection: CliConnection,
    subsystem: TreelineSubsystem,
) -> ProvisionResult:
    """Push, set NODE_ENV, provision services, start.

    Each call must succeed before the next is issued. Nothing is rolled
    back on failure: an app pushed but not started stays that way.

    Raises:
        PlatformCommandError: From the first failing cf call.
    """
    app = subsystem.app_name

    connection.cli_command("push", app, "--no-start")
    connection.cli_command("set-env", app, "NODE_ENV", subsystem.node_env)

    result = provision_services(
        ProvisionRequest(app_name=app, services=subsystem.backing_services),
        connection,
    )

    connection.cli_command("start", app)
    logger.info("Deployed %s (%d provisioning step(s))", app, len(result.steps))
    return result
