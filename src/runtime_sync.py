"""runtime-sync: entry points for node-sync, dotnet-sync and ``runtime-sync <tool>``.

The entry point owns the process exit status. Fatal ``SyncError`` subclasses
become exit 1; the final status is always written to the log file, even for
failures nobody anticipated.
"""

import logging
import sys

from args import parse_args
from cli_config import build_settings
from cli_dotnet import run_dotnet_sync
from cli_node import run_node_sync
from common.errors import SyncError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled, log_to_file
from constants import Constants, ExitCodes, Tools

logger = logging.getLogger(__name__)

RUNNERS = {
    Tools.NODE.value: run_node_sync,
    Tools.DOTNET.value: run_dotnet_sync,
}


def run(args) -> int:
    """Run one sync from parsed arguments and return the exit code."""
    settings = build_settings(args)
    try:
        configure_logging(settings.log_file, quiet=settings.quiet, level=settings.log_level)
    except OSError as exc:
        sys.stderr.write(f"❌ Cannot open log file {settings.log_file}: {exc}\n")
        return ExitCodes.FAILURE.value

    for warning in settings.warnings:
        logger.warning("%s", warning)

    command = Constants.TOOL_COMMANDS[settings.tool]
    log_to_file(logger, "=== Starting %s v%s ===", command, Constants.PROGRAM_VERSION)
    if is_debug_enabled(logger):
        logger.debug(
            "Settings resolved",
            extra=extra_context(
                event="function_entry",
                component="cli",
                tool=settings.tool,
                config=settings.config_path,
                dry_run=settings.dry_run,
            ),
        )

    code = ExitCodes.FAILURE.value
    try:
        code = RUNNERS[settings.tool](settings)
    except SyncError as exc:
        logger.error("%s", exc)
    except KeyboardInterrupt:
        logger.error("Interrupted")
    except Exception:  # pylint: disable=broad-exception-caught
        logger.exception("Unexpected error")
    finally:
        if code != ExitCodes.SUCCESS.value:
            logger.error("Sync failed with exit code %d", code)
            logger.error("Check the log file at: %s", settings.log_file)
        else:
            log_to_file(logger, "=== Completed %s v%s ===", command, Constants.PROGRAM_VERSION)
    return code


def main(argv=None):
    """``runtime-sync node|dotnet [options]``."""
    sys.exit(run(parse_args(argv)))


def node_main(argv=None):
    """``node-sync [options]``."""
    sys.exit(run(parse_args(argv, tool=Tools.NODE.value)))


def dotnet_main(argv=None):
    """``dotnet-sync [options]``."""
    sys.exit(run(parse_args(argv, tool=Tools.DOTNET.value)))


if __name__ == "__main__":
    main()
