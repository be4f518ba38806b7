"""dotnet-sync: keep .NET SDKs in line with the supported channels."""

import logging

from cli_config import SyncSettings
from common.logging_utils import progress, success
from constants import Constants, ExitCodes
from executor import DotnetExecutor, ExecutionReport
from managers.dotnet import DotnetClient
from shell_profile import EnvironmentConfigurator, manual_instructions
from versioning.models import ResolvedVersions
from versioning.reconcile import plan_dotnet
from versioning.resolvers import DotnetVersionResolver

logger = logging.getLogger(__name__)


def report_supported(resolved: ResolvedVersions) -> None:
    labels = resolved.labels()
    logger.info("Supported .NET versions:")
    for version in sorted(resolved.supported, reverse=True):
        logger.info("  %s (%s)", version, labels.get(version, "supported"))


def report_remaining(client: DotnetClient, report: ExecutionReport) -> None:
    """After a live cleanup, list what is left or point at the uninstall docs."""
    if report.removed:
        logger.info("Remaining installed SDKs:")
        for item in client.list_installed():
            logger.info("  %s [%s]", item.version, ", ".join(item.paths))
    elif report.removal_failures:
        logger.info("You may need to manually clean up using: %s", Constants.DOTNET_UNINSTALL_DOCS_URL)


def next_steps(settings: SyncSettings) -> None:
    logger.info("")
    logger.info("🔧 Next steps:")
    if settings.update_profile:
        logger.info("1. Shell profile updated automatically; open a new shell to pick it up")
    else:
        logger.info("1. Add to your shell profile: %s", manual_instructions(settings.dotnet_root))
    logger.info("2. Verify installation: dotnet --version")
    logger.info("3. List installed SDKs: dotnet --list-sdks")


def run_dotnet_sync(settings: SyncSettings, client=None, resolver=None, configurator=None) -> int:
    """Resolve, reconcile and apply the .NET supported set.

    Raises:
        SyncError: Any fatal resolution or installation failure.
    """
    if settings.dry_run:
        logger.info("Running in DRY RUN mode - no changes will be made")
    progress(logger, "Syncing system with all officially supported .NET versions...")
    logger.info("Installation directory: %s", settings.dotnet_root)

    client = client or DotnetClient(settings.dotnet_root, settings.install_script_url)
    resolver = resolver or DotnetVersionResolver(settings.releases_index_url)
    progress(logger, "Fetching supported .NET versions...")
    resolved = resolver.resolve()
    report_supported(resolved)

    installed = client.list_installed()
    plan = plan_dotnet(resolved, installed)
    if plan.is_empty:
        success(logger, "Installed .NET SDKs already match the supported set")
    for wanted, provider in plan.targets:
        if wanted in plan.install:
            continue
        if provider == wanted:
            logger.info(".NET %s is already installed", wanted)
        else:
            logger.info("Compatible .NET %s already installed (satisfies %s)", provider, wanted)

    configurator = configurator or EnvironmentConfigurator(
        client, dry_run=settings.dry_run, update_profile=settings.update_profile
    )
    executor = DotnetExecutor(
        client,
        dry_run=settings.dry_run,
        cleanup=settings.cleanup,
        configurator=configurator,
    )
    report = executor.execute(plan)
    if not settings.dry_run and settings.cleanup:
        report_remaining(client, report)

    if report.has_warnings:
        logger.warning("Completed with %d removal failure(s)", len(report.removal_failures))
    success(logger, "System is now synced with all officially supported .NET versions!")
    logger.info("Log file: %s", settings.log_file)
    if not settings.dry_run:
        next_steps(settings)
    return ExitCodes.SUCCESS.value
