"""Pure service provisioning logic (no subprocess or platform access).

Parses the ``cf services`` table and works out which create/bind calls
are still needed for the deployed app. Output looks like::

    Getting services in org acme / space dev as dev@example.com...
    OK

    name                  service       plan    bound apps    last operation
    hackday-rediscloud    rediscloud    30mb    hackday-nc    create succeeded

Newer cf releases call the second column ``offering``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from cf_treeline._types import BackingService, ServiceDescriptor

_NAME_COLUMN = "name"
_PLAN_COLUMN = "plan"
_BOUND_APPS_COLUMN = "bound apps"

# Header labels in the order cf prints them; multi-word labels come first
# so "bound apps" is not split.
_KNOWN_COLUMNS = (
    "bound apps",
    "last operation",
    "upgrade available",
    "name",
    "service",
    "offering",
    "plan",
    "broker",
)


class StepKind(str, Enum):
    """Kind of platform mutation."""

    CREATE = "create"
    BIND = "bind"


@dataclass(frozen=True)
class ProvisioningStep:
    """One cf call needed to bring a service to the desired state."""

    kind: StepKind
    service: BackingService
    args: tuple[str, ...]


@dataclass(frozen=True)
class ServiceStatus:
    """Whether a wanted service exists and is bound to the target app."""

    service: BackingService
    found: bool = False
    bound: bool = False


def _column_starts(header: str) -> list[tuple[str, int]]:
    """Locate each known column label in the header line."""
    starts: list[tuple[str, int]] = []
    lowered = header.lower()
    taken: set[int] = set()
    for label in _KNOWN_COLUMNS:
        index = lowered.find(label)
        while index != -1:
            span = set(range(index, index + len(label)))
            if not span & taken:
                break
            index = lowered.find(label, index + 1)
        if index == -1:
            continue
        taken.update(range(index, index + len(label)))
        starts.append((label, index))
    starts.sort(key=lambda item: item[1])
    return starts


def _is_header(line: str) -> bool:
    fields = line.split()
    return bool(fields) and fields[0].lower() == _NAME_COLUMN


def parse_services_output(lines: Iterable[str]) -> list[ServiceDescriptor]:
    """Parse ``cf services`` output into service descriptors.

    Column boundaries come from the header positions since empty cells
    (no bound apps, no plan) leave nothing to split on.

    Args:
        lines: Output lines of ``cf services``.

    Returns:
        Descriptors in listing order. Empty when no services exist.
    """
    services: list[ServiceDescriptor] = []
    columns: list[tuple[str, int]] | None = None

    for line in lines:
        if columns is None:
            if _is_header(line):
                columns = _column_starts(line)
            continue
        if not line.strip():
            continue

        cells: dict[str, str] = {}
        for position, (label, start) in enumerate(columns):
            end = columns[position + 1][1] if position + 1 < len(columns) else None
            cells[label] = line[start:end].strip()

        name = cells.get(_NAME_COLUMN, "")
        if not name:
            continue
        bound = cells.get(_BOUND_APPS_COLUMN, "")
        services.append(ServiceDescriptor(
            name=name,
            plan=cells.get(_PLAN_COLUMN, ""),
            application_names=tuple(
                app.strip() for app in bound.split(",") if app.strip()
            ),
        ))

    return services


def scan_services(
    services: Sequence[ServiceDescriptor],
    wanted: Sequence[BackingService],
    app_name: str,
) -> list[ServiceStatus]:
    """Record, for each wanted service, whether it exists and is bound."""
    found: dict[str, bool] = {w.instance_name: False for w in wanted}
    bound: dict[str, bool] = {w.instance_name: False for w in wanted}

    for descriptor in services:
        if descriptor.name not in found:
            continue
        found[descriptor.name] = True
        if descriptor.is_bound_to(app_name):
            bound[descriptor.name] = True

    return [
        ServiceStatus(
            service=w,
            found=found[w.instance_name],
            bound=bound[w.instance_name],
        )
        for w in wanted
    ]


def plan_provisioning(
    statuses: Sequence[ServiceStatus],
    app_name: str,
) -> list[ProvisioningStep]:
    """Create missing services and bind unbound ones, service by service.

    Returns an empty list when everything is already provisioned.
    """
    steps: list[ProvisioningStep] = []
    for status in statuses:
        if not status.found:
            steps.append(ProvisioningStep(
                kind=StepKind.CREATE,
                service=status.service,
                args=status.service.create_args(),
            ))
        if not status.bound:
            steps.append(ProvisioningStep(
                kind=StepKind.BIND,
                service=status.service,
                args=status.service.bind_args(app_name),
            ))
    return steps
