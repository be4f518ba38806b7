""".NET SDK client: install through dotnet-install.sh, list and remove SDKs."""
from __future__ import annotations

import logging
import os
import platform
import shutil
import stat
import tempfile
from typing import List, Optional

from common.errors import InstallationError, RemovalError, ToolUnavailableError
from common.http_client import download_file
from common.subprocess_utils import CommandResult, run_command
from constants import Constants
from versioning.models import InstalledVersion, Version
from versioning.parser import parse_list_sdks, parse_version_names

logger = logging.getLogger(__name__)

_OS_NAMES = {
    "linux": "linux",
    "darwin": "osx",
}
_ARCH_NAMES = {
    "x86_64": "x64",
    "amd64": "x64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "armv7l": "arm",
}


def detect_platform(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """Return the dotnet-install platform string, e.g. ``linux-x64``.

    Raises:
        InstallationError: For operating systems or architectures the
            install script does not support (including Windows).
    """
    system = (system or platform.system()).lower()
    machine = (machine or platform.machine()).lower()
    if system.startswith(("cygwin", "mingw", "msys", "windows")):
        os_name = "win"
    else:
        os_name = _OS_NAMES.get(system)
    if os_name is None:
        raise InstallationError(f"Unsupported operating system: {system}")
    arch = _ARCH_NAMES.get(machine)
    if arch is None:
        raise InstallationError(f"Unsupported architecture: {machine}")
    return f"{os_name}-{arch}"


class DotnetClient:
    """Manage SDKs below a dotnet root directory."""

    def __init__(self, dotnet_root: str, install_script_url: Optional[str] = None):
        self.dotnet_root = os.path.abspath(os.path.expanduser(dotnet_root))
        self.install_script_url = install_script_url or Constants.DOTNET_INSTALL_SCRIPT_URL
        self._script_path: Optional[str] = None

    @property
    def sdk_dir(self) -> str:
        return os.path.join(self.dotnet_root, "sdk")

    @property
    def managed_executable(self) -> str:
        return os.path.join(self.dotnet_root, "dotnet")

    def active_executable(self) -> Optional[str]:
        """The ``dotnet`` found on PATH, if any."""
        return shutil.which("dotnet")

    def is_managed_path(self, path: str) -> bool:
        """True when ``path`` lives below the managed dotnet root."""
        real = os.path.realpath(path)
        root = os.path.realpath(self.dotnet_root)
        return real == root or real.startswith(root + os.sep)

    def list_sdks(self, executable: str) -> List[InstalledVersion]:
        """SDKs reported by ``<executable> --list-sdks``."""
        result = run_command([executable, "--list-sdks"])
        if not result.ok:
            return []
        return [
            InstalledVersion(version=version, paths=(os.path.join(base, str(version)),))
            for version, base in parse_list_sdks(result.stdout)
        ]

    def list_managed_sdks(self) -> List[InstalledVersion]:
        """SDK directories below ``$DOTNET_ROOT/sdk``."""
        try:
            names = [
                name for name in os.listdir(self.sdk_dir)
                if os.path.isdir(os.path.join(self.sdk_dir, name))
            ]
        except FileNotFoundError:
            return []
        return [
            InstalledVersion(version=version, paths=(os.path.join(self.sdk_dir, name),))
            for version, name in sorted(parse_version_names(names).items())
        ]

    def list_installed(self) -> List[InstalledVersion]:
        """SDKs from the active dotnet on PATH plus the managed root."""
        found: List[InstalledVersion] = []
        active = self.active_executable()
        if active:
            found.extend(self.list_sdks(active))
        found.extend(self.list_managed_sdks())
        return found

    def runtime_version(self, executable: Optional[str] = None) -> str:
        """``dotnet --version`` of the given (or active) executable."""
        exe = executable or self.active_executable()
        if not exe:
            return ""
        result = run_command([exe, "--version"])
        return result.stdout.strip() if result.ok else ""

    def prepare_installer(self) -> str:
        """Download dotnet-install.sh once per run and return its path.

        Raises:
            ToolUnavailableError: If the script cannot be downloaded.
        """
        if self._script_path and os.path.isfile(self._script_path):
            return self._script_path
        fd, path = tempfile.mkstemp(prefix="dotnet-install-", suffix=".sh")
        os.close(fd)
        ok, error = download_file(self.install_script_url, path)
        if not ok:
            os.unlink(path)
            raise ToolUnavailableError(f"Could not download dotnet-install.sh: {error}")
        os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR)
        self._script_path = path
        return path

    def cleanup_installer(self) -> None:
        """Delete the downloaded install script, if any."""
        if self._script_path and os.path.exists(self._script_path):
            os.unlink(self._script_path)
        self._script_path = None

    def install(self, version: Version) -> CommandResult:
        """Install one SDK version into the managed root.

        Raises:
            InstallationError: On unsupported platforms or a failed install.
        """
        target = detect_platform()
        if target.startswith("win-"):
            raise InstallationError(
                "Windows installation not implemented. Please use the official installer."
            )
        script = self.prepare_installer()
        os.makedirs(self.dotnet_root, exist_ok=True)
        channel = f"{version.major}.{version.minor}"
        result = run_command([
            "bash", script,
            "--version", str(version),
            "--install-dir", self.dotnet_root,
            "--no-path",
            "--channel", channel,
        ])
        if not result.ok:
            raise InstallationError(f"Failed to install .NET {version}: {result.tail()}")
        return result

    def remove(self, installed: InstalledVersion) -> List[str]:
        """Delete every location of an installed SDK.

        Returns:
            The paths that were removed.

        Raises:
            RemovalError: If no location could be removed.
        """
        removed: List[str] = []
        failures: List[str] = []
        for path in installed.paths:
            if not os.path.isdir(path):
                continue
            try:
                shutil.rmtree(path)
                removed.append(path)
            except PermissionError:
                result = run_command(["sudo", "-n", "rm", "-rf", path])
                if result.ok:
                    logger.debug("Removed %s with sudo", path)
                    removed.append(path)
                else:
                    failures.append(f"{path}: permission denied")
            except OSError as exc:
                failures.append(f"{path}: {exc}")
        if not removed:
            detail = "; ".join(failures) if failures else "no install location found"
            raise RemovalError(f"Could not locate or remove .NET SDK {installed.version} ({detail})")
        return removed
