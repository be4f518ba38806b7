"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1


class Tools(Enum):
    """Runtimes the program can synchronize.

    Args:
        Enum (string): Tool identifiers, also used as CLI subcommands.
    """

    NODE = "node"
    DOTNET = "dotnet"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROGRAM_NAME = "runtime-sync"
    PROGRAM_VERSION = "1.0.0"
    LICENSE_LINE = "Licensed under MIT License"
    SUPPORTED_TOOLS = [Tools.NODE.value, Tools.DOTNET.value]
    TOOL_TITLES = {
        Tools.NODE.value: "Node.js Version Manager Sync Tool",
        Tools.DOTNET.value: ".NET Version Manager Sync Tool",
    }
    TOOL_COMMANDS = {
        Tools.NODE.value: "node-sync",
        Tools.DOTNET.value: "dotnet-sync",
    }

    # Logging
    LOG_FORMAT = "%(asctime)s - %(levelname)s: %(message)s"
    LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
    DEFAULT_LOG_FILES = {
        Tools.NODE.value: "~/.nvm-sync.log",
        Tools.DOTNET.value: "~/.dotnet-sync.log",
    }
    ENV_LOG_LEVEL = "RUNTIME_SYNC_LOG_LEVEL"
    ENV_LOG_FILE = "RUNTIME_SYNC_LOG_FILE"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    # Configuration file
    ENV_CONFIG = "RUNTIME_SYNC_CONFIG"
    DEFAULT_CONFIG_FILE = "~/.config/runtime-sync/config.yml"

    # HTTP
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    USER_AGENT = f"{PROGRAM_NAME}/{PROGRAM_VERSION}"

    # Node.js / nvm
    ENV_NVM_DIR = "NVM_DIR"
    DEFAULT_NVM_DIR = "~/.nvm"
    ENV_NODE_MIRROR = "NVM_NODEJS_ORG_MIRROR"
    NODE_DIST_URL = "https://nodejs.org/dist"
    NODE_INDEX_FILE = "index.json"
    NVM_INSTALL_HINT = "Please install NVM first: https://github.com/nvm-sh/nvm"

    # .NET
    ENV_DOTNET_ROOT = "DOTNET_ROOT"
    DEFAULT_DOTNET_ROOT = "~/.dotnet"
    DOTNET_RELEASES_INDEX_URL = (
        "https://builds.dotnet.microsoft.com/dotnet/release-metadata/releases-index.json"
    )
    DOTNET_INSTALL_SCRIPT_URL = "https://dot.net/v1/dotnet-install.sh"
    DOTNET_UNINSTALL_DOCS_URL = (
        "https://docs.microsoft.com/en-us/dotnet/core/additional-tools/uninstall-tool"
    )
    DOTNET_SUPPORTED_PHASES_LTS = ("active", "maintenance")
    DOTNET_SUPPORTED_PHASES_STS = ("active",)

    # Shell profile
    PROFILE_MARKER = "# Added by runtime-sync (dotnet)"
    PROFILE_CANDIDATES = ["~/.zshrc", "~/.bash_profile", "~/.bashrc", "~/.profile"]
    PROFILE_FALLBACK = "~/.profile"
