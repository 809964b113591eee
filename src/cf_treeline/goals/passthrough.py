"""Passthrough goal: hand every other subcommand to the treeline CLI."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from cf_treeline._exceptions import PassthroughError

logger = logging.getLogger(__name__)


def run_passthrough(tool_path: str, args: Sequence[str]) -> int:
    """Run ``tool_path`` with ``args``, sharing this process's stdio.

    Ctrl-C reaches the child as well; the child is waited for before
    the interruption is reported.

    Returns:
        The child's exit status, which is always 0 here.

    Raises:
        PassthroughError: If the tool cannot be started, is interrupted
            or exits nonzero.
    """
    command = [tool_path, *args]
    logger.debug("Running %s", " ".join(command))

    try:
        process = subprocess.Popen(command)
    except OSError as exc:
        raise PassthroughError(f"Error starting command {exc}") from exc

    try:
        returncode = process.wait()
    except KeyboardInterrupt:
        returncode = process.wait()
        logger.debug("Interrupted, %s exited with %s", tool_path, returncode)
        raise PassthroughError("Error running command interrupted") from None

    if returncode != 0:
        raise PassthroughError(f"Error running command exit status {returncode}")
    return returncode
