"""Exception hierarchy for prtkpkg.

Library code raises these; only :mod:`prtkpkg.cli` turns them into process
exit codes.
"""

from __future__ import annotations


class PrtkPkgError(Exception):
    """Base class for every fatal build failure."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class ConfigurationError(PrtkPkgError):
    """A required setting or CLI argument is missing."""


class ResourceNotFoundError(PrtkPkgError):
    """An input file, the licensing tool or a build artifact is missing."""


class ExtractionError(PrtkPkgError):
    """A value could not be read from the prov file or tool metadata."""


class ExternalToolError(PrtkPkgError):
    """An external command exited with a non-zero status."""

    def __init__(self, tool: str, returncode: int, output: str = "") -> None:
        message = f"{tool} failed with exit status {returncode}"
        if output:
            message = f"{message}:\n{output.rstrip()}"
        # Exit statuses outside 1..255 are not representable by the shell.
        super().__init__(message, exit_code=returncode if 0 < returncode < 256 else 1)
        self.tool = tool
        self.returncode = returncode


__all__ = [
    "PrtkPkgError",
    "ConfigurationError",
    "ResourceNotFoundError",
    "ExtractionError",
    "ExternalToolError",
]
