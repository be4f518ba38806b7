"""Error types raised across the resolve / reconcile / execute pipeline."""

from __future__ import annotations


class SyncError(Exception):
    """Base class for all runtime-sync failures."""


class ResolutionError(SyncError):
    """The release catalog was unreachable or a mandatory tier was undeterminable."""


class InstallationError(SyncError):
    """An install primitive failed; the run must stop immediately."""


class RemovalError(SyncError):
    """An uninstall primitive failed or its target could not be located.

    Non-fatal: the executor logs it and continues with the next removal.
    """


class EnvironmentConfigurationError(SyncError):
    """The shell profile could not be determined or written."""


class ToolUnavailableError(SyncError):
    """A required external tool (nvm, bash, dotnet-install.sh) is missing."""
