from __future__ import annotations


class DotbootError(Exception):
    """Base class for bootstrap failures."""


class ToolNotFoundError(DotbootError):
    """A binary the current batch depends on is not on PATH."""

    def __init__(self, tool: str, message: str | None = None):
        self.tool = tool
        super().__init__(message or f"required tool '{tool}' not found on PATH")


class InstallError(DotbootError):
    """An install action could not complete."""


class ConfigError(DotbootError, ValueError):
    """Invalid value in the bootstrap configuration."""
