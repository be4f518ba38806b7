"""Apply a reconciliation plan through the external install/uninstall primitives.

Installs run first and fail fast; removals are best effort. In dry-run mode
every action is only described.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from common.errors import InstallationError, RemovalError
from common.logging_utils import progress, success
from managers.dotnet import DotnetClient
from managers.nvm import NvmClient
from versioning.models import ReconciliationPlan, Removal, RemovalReason, Version

if TYPE_CHECKING:
    from shell_profile import EnvironmentConfigurator

logger = logging.getLogger(__name__)


@dataclass
class ExecutionReport:
    """What the executor did (or, in dry-run mode, would have done)."""

    dry_run: bool = False
    installed: List[Version] = field(default_factory=list)
    removed: List[Version] = field(default_factory=list)
    removal_failures: List[str] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.removal_failures)


class PlanExecutor(ABC):
    """Template for executing a plan: install phase, post-install hook, removal phase."""

    label = "runtime"

    def __init__(self, dry_run: bool = False, cleanup: bool = True):
        self.dry_run = dry_run
        self.cleanup = cleanup

    def execute(self, plan: ReconciliationPlan) -> ExecutionReport:
        """Run the plan.

        Raises:
            InstallationError: On the first failed install; nothing after it runs.
        """
        report = ExecutionReport(dry_run=self.dry_run)
        self._install_phase(plan, report)
        self.after_install(plan, report)
        if self.cleanup:
            self._removal_phase(plan, report)
        else:
            logger.info("Skipping cleanup due to --no-cleanup flag")
        return report

    def _install_phase(self, plan: ReconciliationPlan, report: ExecutionReport) -> None:
        total = len(plan.install)
        if not total:
            success(logger, "All supported %s versions are already installed", self.label)
            return
        progress(logger, "Installing %d supported version(s)...", total)
        for index, version in enumerate(plan.install, start=1):
            progress(logger, "[%d/%d] Installing %s %s...", index, total, self.label, version)
            if self.dry_run:
                logger.info("DRY RUN: Would install %s %s", self.label, version)
                continue
            self.install_one(version)
            success(logger, "Successfully installed %s %s", self.label, version)
            report.installed.append(version)

    def _removal_phase(self, plan: ReconciliationPlan, report: ExecutionReport) -> None:
        progress(logger, "Cleaning up unsupported %s versions...", self.label)
        if not plan.remove:
            success(logger, "No unsupported versions found")
            return
        for removal in plan.remove:
            logger.warning("Found %s", describe_removal(removal))
            if self.dry_run:
                logger.info("DRY RUN: Would uninstall %s %s", self.label, removal.version)
                continue
            try:
                self.remove_one(removal)
            except RemovalError as exc:
                logger.error("%s", exc)
                report.removal_failures.append(str(exc))
                continue
            success(logger, "Uninstalled %s %s", self.label, removal.version)
            report.removed.append(removal.version)
        if self.dry_run:
            return
        logger.info("Processed %d unsupported version(s)", len(plan.remove))
        if report.removed:
            success(logger, "Successfully removed %d %s version(s)", len(report.removed), self.label)
        else:
            logger.warning("No versions were successfully removed")

    def after_install(self, plan: ReconciliationPlan, report: ExecutionReport) -> None:
        """Hook between the install and removal phases."""

    @abstractmethod
    def install_one(self, version: Version) -> None:
        """Install a single version; raise InstallationError on failure."""

    @abstractmethod
    def remove_one(self, removal: Removal) -> None:
        """Remove a single version; raise RemovalError on failure."""


def describe_removal(removal: Removal) -> str:
    """One-line description of why a version is being removed."""
    if removal.reason == RemovalReason.SUPERSEDED and removal.keeping is not None:
        return f"older patch version: {removal.version} (keeping latest: {removal.keeping})"
    return f"unsupported version: {removal.version}"


class NodeExecutor(PlanExecutor):
    """Execute a Node.js plan through nvm, then switch the default alias."""

    label = "Node.js"

    def __init__(self, nvm: NvmClient, default_version: Version, dry_run: bool = False):
        super().__init__(dry_run=dry_run, cleanup=True)
        self.nvm = nvm
        self.default_version = default_version

    def install_one(self, version: Version) -> None:
        result = self.nvm.install(version)
        if not result.ok:
            raise InstallationError(f"Failed to install {version}: {result.tail()}")

    def remove_one(self, removal: Removal) -> None:
        result = self.nvm.uninstall(removal.version)
        if not result.ok:
            raise RemovalError(f"Failed to uninstall {removal.version}: {result.tail()}")

    def after_install(self, plan: ReconciliationPlan, report: ExecutionReport) -> None:
        """Alias the default to the Active LTS provider and verify the switch."""
        target = plan.target_for(self.default_version)
        progress(logger, "Setting Active LTS (%s) as default version...", target)
        if self.dry_run:
            logger.info("DRY RUN: Would set %s as default", target)
            logger.info("DRY RUN: Would switch to default version")
            return
        result = self.nvm.set_default(target)
        if not result.ok:
            raise InstallationError(f"Failed to set default version: {result.tail()}")
        active, npm_version = self.nvm.active_versions()
        if active != target:
            raise InstallationError(
                f"Default switch did not take effect: expected {target}, got {active or 'nothing'}"
            )
        success(logger, "Set %s as default and switched to it", target)
        logger.info("Current Node.js version: %s", active)
        if npm_version:
            logger.info("Current npm version: %s", npm_version)


class DotnetExecutor(PlanExecutor):
    """Execute a .NET plan through dotnet-install.sh and directory removal."""

    label = ".NET SDK"

    def __init__(
        self,
        client: DotnetClient,
        dry_run: bool = False,
        cleanup: bool = True,
        configurator: Optional["EnvironmentConfigurator"] = None,
    ):
        super().__init__(dry_run=dry_run, cleanup=cleanup)
        self.client = client
        self.configurator = configurator

    def execute(self, plan: ReconciliationPlan) -> ExecutionReport:
        try:
            return super().execute(plan)
        finally:
            self.client.cleanup_installer()

    def after_install(self, plan: ReconciliationPlan, report: ExecutionReport) -> None:
        """Put the managed root on PATH before anything is removed."""
        if self.configurator is None:
            return
        self.configurator.configure()
        if not self.dry_run:
            self.configurator.report_installations()

    def install_one(self, version: Version) -> None:
        self.client.install(version)

    def remove_one(self, removal: Removal) -> None:
        for path in self.client.remove(removal.installed):
            logger.debug("Removed %s", path)
