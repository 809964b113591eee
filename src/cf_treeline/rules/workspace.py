"""Workspace rule: write runtime config and link the cf ignore file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from cf_treeline._config_templates import ConfigFile
from cf_treeline._console import Console
from cf_treeline._exceptions import ConfigWriteError, IgnoreLinkError

logger = logging.getLogger(__name__)

CFIGNORE_PATH = ".cfignore"
GITIGNORE_PATH = ".gitignore"


# =============================================================================
# Request / Result types
# =============================================================================


@dataclass(frozen=True)
class IgnoreLinkResult:
    """Outcome of linking .cfignore."""

    link: str
    target: str
    created: bool


# =============================================================================
# Rules
# =============================================================================


def write_config_files(
    files: Sequence[ConfigFile],
    console: Console,
    root: Path | None = None,
) -> list[Path]:
    """Write each config file, replacing whatever is there.

    Raises:
        ConfigWriteError: On the first file that cannot be written.
    """
    base = root or Path.cwd()
    written: list[Path] = []
    for config in files:
        path = base / config.relative_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(config.content)
        except OSError as exc:
            raise ConfigWriteError(config.relative_path, exc) from exc
        console.print_stdout(f"Updated {config.relative_path}")
        written.append(path)
    return written


def link_ignore_file(
    root: Path | None = None,
    *,
    link: str = CFIGNORE_PATH,
    target: str = GITIGNORE_PATH,
) -> IgnoreLinkResult:
    """Point .cfignore at .gitignore unless .cfignore already exists.

    A dangling .cfignore link counts as existing and is left alone.

    Raises:
        IgnoreLinkError: If the symlink cannot be created.
    """
    base = root or Path.cwd()
    link_path = base / link

    if os.path.lexists(link_path):
        logger.debug("%s already exists, not linking", link_path)
        return IgnoreLinkResult(link=link, target=target, created=False)

    try:
        # Target is relative to the link's directory
        os.symlink(target, link_path)
    except OSError as exc:
        raise IgnoreLinkError(link, target, exc) from exc

    logger.info("Linked %s -> %s", link_path, target)
    return IgnoreLinkResult(link=link, target=target, created=True)
