"""node-sync: keep nvm-managed Node.js versions in line with the supported set."""

import logging

from cli_config import SyncSettings
from common.logging_utils import progress, success
from constants import ExitCodes
from executor import NodeExecutor
from managers.nvm import NvmClient
from versioning.models import ResolvedVersions
from versioning.reconcile import plan_node
from versioning.resolvers import NodeVersionResolver

logger = logging.getLogger(__name__)


def report_supported(resolved: ResolvedVersions) -> None:
    """Log the supported set with tier labels, highest version first."""
    labels = resolved.labels()
    logger.info("Supported Node.js versions:")
    for version in sorted(resolved.supported, reverse=True):
        logger.info("  %s (%s)", version, labels.get(version, "supported"))
    logger.info("Active LTS (%s) will be set as default", resolved.primary)


def run_node_sync(settings: SyncSettings, nvm=None, resolver=None) -> int:
    """Resolve, reconcile and apply the Node.js supported set.

    Raises:
        SyncError: Any fatal resolution, tooling or installation failure.
    """
    if settings.dry_run:
        logger.info("Running in DRY RUN mode - no changes will be made")
    progress(logger, "Syncing NVM with all officially supported Node.js versions...")

    nvm = nvm or NvmClient(settings.nvm_dir)
    progress(logger, "Initializing NVM...")
    nvm_version = nvm.check()
    success(logger, "NVM initialized successfully (version %s)", nvm_version)

    resolver = resolver or NodeVersionResolver(settings.node_index_url)
    progress(logger, "Fetching supported Node.js versions...")
    resolved = resolver.resolve()
    report_supported(resolved)

    installed = nvm.list_installed()
    if installed:
        logger.info("Currently installed: %s", ", ".join(str(item.version) for item in installed))
    else:
        logger.info("No Node.js versions currently installed")

    plan = plan_node(resolved, installed)
    if plan.is_empty:
        success(logger, "Installed Node.js versions already match the supported set")
    for wanted, provider in plan.targets:
        if wanted != provider:
            logger.info("Compatible version %s already installed (provides %s)", provider, wanted)

    report = NodeExecutor(nvm, resolved.primary, dry_run=settings.dry_run).execute(plan)

    if report.has_warnings:
        logger.warning("Completed with %d removal failure(s)", len(report.removal_failures))
    success(logger, "NVM is now synced with all officially supported Node.js versions!")
    logger.info("Log file: %s", settings.log_file)
    return ExitCodes.SUCCESS.value
