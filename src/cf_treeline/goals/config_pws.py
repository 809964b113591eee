"""config-pws goal: prepare a treeline app for Pivotal Web Services."""

from __future__ import annotations

import logging
from pathlib import Path

from cf_treeline._config_templates import build_config_files
from cf_treeline._console import Console
from cf_treeline.rules.packages import NpmInstallResult, install_packages
from cf_treeline.rules.workspace import link_ignore_file, write_config_files
from cf_treeline.subsystem import TreelineSubsystem

logger = logging.getLogger(__name__)

NAME = "config-pws"


def run_config_pws(
    console: Console,
    subsystem: TreelineSubsystem,
    root: Path | None = None,
) -> NpmInstallResult:
    """Write config files, link .cfignore, then install npm packages.

    npm failures are reported but do not fail the goal.

    Raises:
        ConfigWriteError: If a config file cannot be written.
        IgnoreLinkError: If .cfignore cannot be linked.
    """
    files = build_config_files(
        database_label=subsystem.database_service.offering,
        cache_label=subsystem.cache_service.offering,
    )
    write_config_files(files, console, root=root)
    link_ignore_file(root)

    result = install_packages(subsystem.npm_packages, console)
    logger.info(
        "config-pws done: %d package(s) installed, %d failed",
        len(result.installed),
        len(result.failures),
    )
    return result
