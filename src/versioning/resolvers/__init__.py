"""Version resolvers for the supported runtimes."""

from .base import VersionResolver
from .node import NodeVersionResolver
from .dotnet import DotnetVersionResolver

__all__ = [
    "VersionResolver",
    "NodeVersionResolver",
    "DotnetVersionResolver",
]
