"""Argument parsing for the runtime sync tools."""

import argparse
import sys

from constants import Constants, ExitCodes, Tools


class SyncArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit 1 with a one-line hint."""

    def error(self, message):
        sys.stderr.write(f"❌ {message}\n")
        sys.stderr.write("Use --help for usage information\n")
        sys.exit(ExitCodes.FAILURE.value)


_EPILOGS = {
    Tools.NODE.value: """\
examples:
  %(prog)s                  # Standard sync
  %(prog)s --dry-run        # Preview changes
  %(prog)s --quiet          # Minimal output

Only even-numbered majors are installed; odd majors never become LTS.
""",
    Tools.DOTNET.value: """\
examples:
  %(prog)s                      # Standard sync with cleanup and profile update
  %(prog)s --dry-run            # Preview changes
  %(prog)s --no-cleanup         # Install only, no cleanup
  %(prog)s --no-profile-update  # Don't modify shell profile
  %(prog)s --quiet              # Minimal output

supported versions:
  Current: latest release of the active STS channel
  LTS:     latest SDK of every active or maintenance LTS channel
""",
}


def _version_text(tool: str) -> str:
    return (
        f"{Constants.TOOL_COMMANDS[tool]} v{Constants.PROGRAM_VERSION}\n"
        f"{Constants.TOOL_TITLES[tool]}\n"
        f"{Constants.LICENSE_LINE}"
    )


def add_tool_arguments(parser, tool):
    """Register the options shared by both tools plus the tool-specific ones."""
    parser.add_argument("-v", "--version",
                        action="version",
                        version=_version_text(tool),
                        help="Show version information and exit")
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Suppress non-error output",
                        action="store_true")
    parser.add_argument("--dry-run",
                        dest="DRY_RUN",
                        help="Show what would be done without making changes",
                        action="store_true")
    parser.add_argument("--log-file",
                        dest="LOG_FILE",
                        help=f"Log file location (default: {Constants.DEFAULT_LOG_FILES[tool]})",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Console logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help=f"Path to YAML configuration file (default: {Constants.DEFAULT_CONFIG_FILE})",
                        action="store",
                        type=str)

    if tool == Tools.DOTNET.value:
        parser.add_argument("--no-cleanup",
                            dest="NO_CLEANUP",
                            help="Skip automatic removal of unsupported versions",
                            action="store_true")
        parser.add_argument("--no-profile-update",
                            dest="NO_PROFILE_UPDATE",
                            help="Skip updating shell profile (manual PATH setup required)",
                            action="store_true")
        parser.add_argument("--dotnet-root",
                            dest="DOTNET_ROOT",
                            help=f"Custom .NET installation directory (default: {Constants.DEFAULT_DOTNET_ROOT})",
                            action="store",
                            type=str)
    parser.set_defaults(action=tool)
    return parser


def build_tool_parser(tool, prog=None):
    """Parser for a standalone tool command (node-sync / dotnet-sync)."""
    parser = SyncArgumentParser(
        prog=prog or Constants.TOOL_COMMANDS[tool],
        description=f"{Constants.TOOL_TITLES[tool]} - keep installed versions in line "
                    "with the officially supported ones.",
        epilog=_EPILOGS[tool],
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    return add_tool_arguments(parser, tool)


def build_parser():
    """Parser for ``runtime-sync <tool> [options]``."""
    parser = SyncArgumentParser(
        prog=Constants.PROGRAM_NAME,
        description="Sync installed Node.js and .NET versions with the officially supported ones.",
    )
    parser.add_argument("--version",
                        action="version",
                        version=f"{Constants.PROGRAM_NAME} v{Constants.PROGRAM_VERSION}")
    subparsers = parser.add_subparsers(dest="action", metavar="{node,dotnet}")
    subparsers.required = True
    for tool in Constants.SUPPORTED_TOOLS:
        sub = subparsers.add_parser(
            tool,
            help=Constants.TOOL_TITLES[tool],
            description=Constants.TOOL_TITLES[tool],
            epilog=_EPILOGS[tool],
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        add_tool_arguments(sub, tool)
    return parser


def parse_args(argv=None, tool=None):
    """Parse CLI arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).
        tool: Parse as the standalone command for this tool instead of
            the ``runtime-sync`` subcommand form.
    """
    if tool is not None:
        return build_tool_parser(tool).parse_args(argv)
    return build_parser().parse_args(argv)
