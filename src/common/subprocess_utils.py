"""Thin wrapper around subprocess for the external version-manager primitives.

Every call to an external tool (nvm via bash, dotnet, dotnet-install.sh,
sudo) goes through run_command so tests can patch a single seam.
"""
from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

# Exit status shells use for "command not found"
COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def tail(self, lines: int = 5) -> str:
        """Last few lines of combined output, for error messages."""
        text = (self.stderr or self.stdout or "").strip()
        return "\n".join(text.splitlines()[-lines:])


def run_command(
    argv: Sequence[str],
    *,
    env: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> CommandResult:
    """Run a command to completion and capture its output.

    Args:
        argv: Command and arguments.
        env: Extra environment variables layered over os.environ.
        timeout: Optional timeout in seconds; None waits indefinitely.

    Returns:
        CommandResult; a missing executable maps to return code 127.
    """
    merged_env = os.environ.copy()
    if env:
        merged_env.update(env)
    cmd: List[str] = list(argv)
    logger.debug("Running command: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=merged_env,
            check=False,
        )
    except FileNotFoundError:
        return CommandResult(COMMAND_NOT_FOUND, "", f"{cmd[0]}: command not found")
    except subprocess.TimeoutExpired:
        return CommandResult(1, "", f"{cmd[0]}: timed out after {timeout}s")
    return CommandResult(result.returncode, result.stdout or "", result.stderr or "")


def run_bash(script: str, *, env: Optional[Dict[str, str]] = None) -> CommandResult:
    """Run a bash snippet; used for shell functions such as nvm."""
    return run_command(["bash", "-c", script], env=env)
