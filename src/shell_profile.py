"""Persist the managed .NET root on PATH through the user's shell profile.

Exactly one marker-guarded block is ever appended; the marker's presence is
the only idempotence check.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from common.errors import EnvironmentConfigurationError
from common.logging_utils import progress, success
from constants import Constants
from managers.dotnet import DotnetClient

logger = logging.getLogger(__name__)


def _expand(path: str, home: str) -> str:
    if path.startswith("~"):
        return os.path.join(home, path[2:]) if path.startswith("~/") else home
    return path


def detect_shell_profile(
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[str] = None,
    candidates: Optional[Sequence[str]] = None,
) -> str:
    """Pick the profile file for the user's interactive shell.

    zsh -> ~/.zshrc; bash -> ~/.bash_profile when it exists, else ~/.bashrc;
    otherwise the first existing candidate, else ~/.profile.
    """
    env = os.environ if environ is None else environ
    home = home or os.path.expanduser("~")
    shell = env.get("SHELL", "")
    shell_name = os.path.basename(shell)

    if env.get("ZSH_VERSION") or shell_name == "zsh":
        return os.path.join(home, ".zshrc")
    if env.get("BASH_VERSION") or shell_name == "bash":
        bash_profile = os.path.join(home, ".bash_profile")
        if os.path.isfile(bash_profile):
            return bash_profile
        return os.path.join(home, ".bashrc")

    for candidate in candidates or Constants.PROFILE_CANDIDATES:
        path = _expand(candidate, home)
        if os.path.isfile(path):
            return path
    return _expand(Constants.PROFILE_FALLBACK, home)


def export_block(dotnet_root: str, home: Optional[str] = None) -> str:
    """The lines appended to the profile, marker first."""
    home = home or os.path.expanduser("~")
    default_root = os.path.join(home, ".dotnet")
    if os.path.normpath(dotnet_root) == os.path.normpath(default_root):
        root_expr = "$HOME/.dotnet"
    else:
        root_expr = dotnet_root
    return (
        f"\n{Constants.PROFILE_MARKER}\n"
        f'export DOTNET_ROOT="{root_expr}"\n'
        f'export PATH="{root_expr}:$PATH"\n'
    )


def manual_instructions(dotnet_root: str) -> str:
    return f'export PATH="{dotnet_root}:$PATH"'


def has_marker(profile_path: str) -> bool:
    """True when the profile already contains the runtime-sync block."""
    try:
        with open(profile_path, "r", encoding="utf-8", errors="replace") as fh:
            return Constants.PROFILE_MARKER in fh.read()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise EnvironmentConfigurationError(f"Cannot read {profile_path}: {exc}") from exc


def append_export_block(profile_path: str, dotnet_root: str, home: Optional[str] = None) -> bool:
    """Append the PATH block unless the marker is already present.

    Returns:
        True when the file was written, False when it was already configured.

    Raises:
        EnvironmentConfigurationError: If the profile cannot be written.
    """
    if has_marker(profile_path):
        return False
    try:
        with open(profile_path, "a", encoding="utf-8") as fh:
            fh.write(export_block(dotnet_root, home))
    except OSError as exc:
        raise EnvironmentConfigurationError(f"Cannot write {profile_path}: {exc}") from exc
    return True


@dataclass
class EnvironmentConfigurator:
    """Make the managed dotnet root discoverable in current and future shells."""

    client: DotnetClient
    dry_run: bool = False
    update_profile: bool = True
    environ: Optional[Mapping[str, str]] = None
    home: Optional[str] = None
    # dotnet on PATH before the managed root was prepended
    _foreign: Optional[str] = field(default=None, init=False, repr=False)

    @property
    def dotnet_root(self) -> str:
        return self.client.dotnet_root

    def _foreign_dotnet(self) -> Optional[str]:
        """A dotnet on PATH that does not belong to the managed root."""
        active = self.client.active_executable()
        if active and not self.client.is_managed_path(active):
            return active
        return None

    def configure(self) -> Optional[str]:
        """Run the configuration step.

        Returns:
            The profile path that was written, or None when nothing was written.
        """
        progress(logger, "Setting up .NET environment...")
        # Must be captured before PATH is changed below.
        self._foreign = self._foreign_dotnet()
        if self.dry_run:
            self._describe_dry_run()
            return None

        self._update_process_environment()

        if not self.update_profile:
            logger.info("Skipping shell profile update due to --no-profile-update flag")
            logger.info(
                "You'll need to manually add: %s to your shell profile",
                manual_instructions(self.dotnet_root),
            )
            return None

        if self._foreign:
            logger.info(".NET CLI already available in PATH: %s", self._foreign)
            logger.info("Skipping shell profile update (using system installation)")
            return None

        try:
            return self._update_profile()
        except EnvironmentConfigurationError as exc:
            logger.warning("%s", exc)
            logger.info(
                "Please manually add: %s to your shell profile",
                manual_instructions(self.dotnet_root),
            )
            return None

    def _describe_dry_run(self) -> None:
        logger.info("DRY RUN: Would set up .NET environment variables")
        logger.info("DRY RUN: Would add %s to PATH", self.dotnet_root)
        if not self.update_profile:
            logger.info("DRY RUN: Would skip shell profile update (--no-profile-update)")
            return
        if self._foreign:
            logger.info(
                "DRY RUN: Would skip shell profile update (.NET already available at %s)",
                self._foreign,
            )
        else:
            logger.info("DRY RUN: Would update shell profile for persistent PATH")

    def _update_process_environment(self) -> None:
        path = os.environ.get("PATH", "")
        if self.dotnet_root not in path.split(os.pathsep):
            os.environ["PATH"] = os.pathsep.join([self.dotnet_root, path]) if path else self.dotnet_root
            success(logger, "Added %s to PATH", self.dotnet_root)
        os.environ[Constants.ENV_DOTNET_ROOT] = self.dotnet_root

    def _update_profile(self) -> Optional[str]:
        profile = detect_shell_profile(self.environ, self.home)
        if has_marker(profile):
            logger.info(".NET PATH already configured in %s", profile)
            return None
        progress(logger, "Updating shell profile: %s", profile)
        append_export_block(profile, self.dotnet_root, self.home)
        success(logger, "Updated %s with .NET PATH", profile)
        logger.info("Changes will take effect in new shell sessions")
        return profile

    def report_installations(self) -> None:
        """Describe the active dotnet and warn when managed SDKs are shadowed.

        After ``configure()`` the managed root leads this process's PATH, so the
        dotnet that was active before it is the one the user's shells will run.
        """
        active = self._foreign or self.client.active_executable()
        if not active:
            logger.warning(
                ".NET CLI not found in PATH. You may need to restart your shell "
                "or add %s to your PATH manually.", self.dotnet_root
            )
            return
        success(logger, ".NET CLI is available: %s", self.client.runtime_version(active) or active)
        logger.info("Currently active SDKs (from %s):", active)
        for sdk in self.client.list_sdks(active):
            logger.info("  %s", sdk.version)

        if self.client.is_managed_path(active):
            return
        managed = self.client.list_managed_sdks()
        if not managed:
            return
        logger.warning("Additional .NET SDKs installed by this tool (in %s):", self.dotnet_root)
        for sdk in managed:
            logger.warning("  %s", sdk.version)
        logger.warning("These versions are available but not currently active due to PATH precedence.")
        logger.info("Your system is using: %s", active)
        logger.info("To use the managed versions instead, adjust PATH priority: %s",
                    manual_instructions(self.dotnet_root))
        logger.info("Or run a specific one directly: %s --version", self.client.managed_executable)
