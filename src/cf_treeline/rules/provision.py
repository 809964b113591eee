"""Provision rule: make sure backing services exist and are bound."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cf_treeline._connection import CliConnection
from cf_treeline._services import (
    ProvisioningStep,
    ServiceStatus,
    plan_provisioning,
    scan_services,
)
from cf_treeline._types import BackingService

logger = logging.getLogger(__name__)


# =============================================================================
# Request / Result types
# =============================================================================


@dataclass(frozen=True)
class ProvisionRequest:
    """Services an app needs bound to it."""

    app_name: str
    services: tuple[BackingService, ...]


@dataclass(frozen=True)
class ProvisionResult:
    """What was found on the platform and which steps were issued."""

    statuses: tuple[ServiceStatus, ...]
    steps: tuple[ProvisioningStep, ...]


# =============================================================================
# Rules
# =============================================================================


def provision_services(
    request: ProvisionRequest,
    connection: CliConnection,
) -> ProvisionResult:
    """Create missing services and bind unbound ones.

    Issues no create or bind call for services that already exist and are
    bound, so running it twice is safe.

    Raises:
        PlatformCommandError: If listing, creating or binding fails. Steps
            already issued are not undone.
    """
    services = connection.get_services()
    statuses = scan_services(services, request.services, request.app_name)
    steps = plan_provisioning(statuses, request.app_name)

    if not steps:
        logger.info("All services already provisioned for %s", request.app_name)

    issued: list[ProvisioningStep] = []
    for step in steps:
        logger.info("%s %s", step.kind.value, step.service.instance_name)
        connection.cli_command(*step.args)
        issued.append(step)

    return ProvisionResult(statuses=tuple(statuses), steps=tuple(issued))
