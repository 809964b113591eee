"""Exception hierarchy for the treeline cf plugin."""

from __future__ import annotations

from typing import Sequence


class TreelineError(Exception):
    """Base for all treeline plugin errors."""


class ToolNotFoundError(TreelineError):
    """The delegated executable is not on the search path."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"Please install {tool} using 'npm install -g {tool}'")


class ConfigWriteError(TreelineError):
    """A generated config file could not be written."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Error writing configuration {cause}")


class IgnoreLinkError(TreelineError):
    """The platform ignore file could not be linked."""

    def __init__(self, link: str, target: str, cause: BaseException):
        self.link = link
        self.target = target
        self.cause = cause
        super().__init__(f"Could not link {link} to {target} {cause}")


class PlatformCommandError(TreelineError):
    """A cf command failed."""

    def __init__(
        self,
        args: Sequence[str],
        *,
        returncode: int | None = None,
        output: str = "",
    ):
        self.args_list = tuple(args)
        self.returncode = returncode
        self.output = output
        command = " ".join(self.args_list)
        if output:
            message = output
        elif returncode is not None:
            message = f"cf {command} exited with status {returncode}"
        else:
            message = f"cf {command} failed"
        super().__init__(message)


class PackageInstallError(TreelineError):
    """An npm package could not be installed."""

    def __init__(self, package: str, cause: BaseException):
        self.package = package
        self.cause = cause
        super().__init__(f"Error installing npm packages {cause}")


class PassthroughError(TreelineError):
    """The delegated executable could not be started or exited nonzero."""


class ConfigurationError(TreelineError):
    """Plugin configuration file failed validation."""

    def __init__(self, message: str, *, field: str | None = None):
        self.field = field
        prefix = f"[{field}] " if field else ""
        super().__init__(f"{prefix}{message}")
