"""Package rule: install the npm modules the cf runtime config needs."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Sequence

from cf_treeline._console import Console
from cf_treeline._exceptions import PackageInstallError
from cf_treeline._types import NpmPackage

logger = logging.getLogger(__name__)


# =============================================================================
# Request / Result types
# =============================================================================


@dataclass(frozen=True)
class NpmInstallResult:
    """Which packages installed and which failed."""

    installed: tuple[NpmPackage, ...] = ()
    failures: tuple[PackageInstallError, ...] = ()

    @property
    def success(self) -> bool:
        return not self.failures


# =============================================================================
# Rules
# =============================================================================


def npm_install_args(package: NpmPackage) -> list[str]:
    return ["npm", "install", package.to_spec(), "--save", "--save-exact"]


def install_package(package: NpmPackage) -> None:
    """Install one package, saving the exact version to package.json.

    Raises:
        PackageInstallError: If npm cannot be run or exits nonzero.
    """
    args = npm_install_args(package)
    logger.debug("Running %s", " ".join(args))
    try:
        # stdout is inherited
        subprocess.run(args, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise PackageInstallError(package.to_spec(), exc) from exc


def install_packages(
    packages: Sequence[NpmPackage],
    console: Console,
) -> NpmInstallResult:
    """Install every package, carrying on past individual failures.

    Failures are printed and collected, never raised.
    """
    installed: list[NpmPackage] = []
    failures: list[PackageInstallError] = []
    for package in packages:
        try:
            install_package(package)
        except PackageInstallError as exc:
            console.print_stdout(str(exc))
            failures.append(exc)
            continue
        installed.append(package)

    if failures:
        logger.warning(
            "%d of %d npm install(s) failed: %s",
            len(failures),
            len(packages),
            ", ".join(f.package for f in failures),
        )
    return NpmInstallResult(installed=tuple(installed), failures=tuple(failures))
