"""nvm client: install, uninstall and default-switch primitives for Node.js.

nvm is a shell function, so every call sources ``$NVM_DIR/nvm.sh`` inside a
fresh bash process.
"""
from __future__ import annotations

import logging
import os
import shlex
from typing import List, Optional, Tuple

from common.errors import ToolUnavailableError
from common.subprocess_utils import CommandResult, run_bash
from constants import Constants
from versioning.models import InstalledVersion, Version
from versioning.parser import first_version, parse_version_names

logger = logging.getLogger(__name__)


class NvmClient:
    """Run nvm commands against a given NVM_DIR."""

    def __init__(self, nvm_dir: str):
        self.nvm_dir = os.path.expanduser(nvm_dir)

    @property
    def script_path(self) -> str:
        return os.path.join(self.nvm_dir, "nvm.sh")

    @property
    def versions_dir(self) -> str:
        return os.path.join(self.nvm_dir, "versions", "node")

    def _run(self, *commands: str) -> CommandResult:
        """Source nvm.sh and run the given shell commands joined with &&."""
        script = " && ".join([f"\\. {shlex.quote(self.script_path)}", *commands])
        return run_bash(script, env={Constants.ENV_NVM_DIR: self.nvm_dir})

    @staticmethod
    def _nvm(*args: str) -> str:
        return "nvm " + " ".join(shlex.quote(a) for a in args)

    def check(self) -> str:
        """Verify nvm is usable and return its version string.

        Raises:
            ToolUnavailableError: If nvm.sh is missing or nvm does not run.
        """
        if not os.path.isfile(self.script_path) or os.path.getsize(self.script_path) == 0:
            raise ToolUnavailableError(
                f"NVM script not found at {self.script_path}. {Constants.NVM_INSTALL_HINT}"
            )
        result = self._run(self._nvm("--version"))
        if not result.ok:
            raise ToolUnavailableError(
                f"NVM command not available after initialization: {result.tail()}"
            )
        return result.stdout.strip()

    def list_installed(self) -> List[InstalledVersion]:
        """Installed Node.js versions, read from ``$NVM_DIR/versions/node``."""
        try:
            names = [
                name for name in os.listdir(self.versions_dir)
                if os.path.isdir(os.path.join(self.versions_dir, name))
            ]
        except FileNotFoundError:
            return []
        parsed = parse_version_names(names)
        return [
            InstalledVersion(version=version, paths=(os.path.join(self.versions_dir, name),))
            for version, name in sorted(parsed.items())
        ]

    def install(self, version: Version) -> CommandResult:
        """``nvm install <version> --latest-npm``."""
        return self._run(self._nvm("install", _node_tag(version), "--latest-npm"))

    def uninstall(self, version: Version) -> CommandResult:
        """``nvm uninstall <version>``."""
        return self._run(self._nvm("uninstall", _node_tag(version)))

    def set_default(self, version: Version) -> CommandResult:
        """``nvm alias default <version>``."""
        return self._run(self._nvm("alias", "default", _node_tag(version)))

    def active_versions(self) -> Tuple[Optional[Version], str]:
        """Switch to the default alias and report (node version, npm version)."""
        result = self._run(
            self._nvm("use", "default") + " >/dev/null",
            "node --version",
            "npm --version",
        )
        if not result.ok:
            return None, ""
        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        node = first_version(lines[0]) if lines else None
        npm = lines[1] if len(lines) > 1 else ""
        return node, npm


def _node_tag(version: Version) -> str:
    """nvm's spelling of a version: always with the leading ``v``."""
    text = str(version)
    return text if text.startswith("v") else f"v{text}"
