"""User-facing output for plugin commands."""

from __future__ import annotations

import sys
from typing import Optional, TextIO


class Console:
    """Prints messages for the person running ``cf treeline``.

    The stream is resolved at print time so pytest's capture and
    ``contextlib.redirect_stdout`` see the output. Fatal messages go to
    stdout like cf's own; diagnostics go through ``logging`` instead.
    """

    def __init__(self, stdout: Optional[TextIO] = None):
        self._stdout = stdout

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def print_stdout(self, message: str) -> None:
        print(message, file=self.stdout, flush=True)

    def write_stdout(self, text: str) -> None:
        """Write text as-is, for relaying another command's output."""
        self.stdout.write(text)
        self.stdout.flush()
