"""Clients for the external version-manager primitives (nvm, dotnet-install.sh)."""

from .nvm import NvmClient
from .dotnet import DotnetClient, detect_platform

__all__ = ["NvmClient", "DotnetClient", "detect_platform"]
