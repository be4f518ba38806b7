"""Runtime settings: CLI flags layered over environment, YAML config and defaults.

Precedence is CLI flag > environment variable > config file > built-in
default. Problems with the config file never abort a run; they are collected
as warnings and logged once logging is configured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from constants import Constants, Tools


@dataclass
class SyncSettings:  # pylint: disable=too-many-instance-attributes
    """Everything a sync run needs, resolved once at startup."""

    tool: str
    dry_run: bool = False
    quiet: bool = False
    log_file: str = ""
    log_level: Optional[str] = None
    config_path: Optional[str] = None
    # Node.js
    nvm_dir: str = ""
    node_index_url: Optional[str] = None
    # .NET
    dotnet_root: str = ""
    releases_index_url: Optional[str] = None
    install_script_url: Optional[str] = None
    cleanup: bool = True
    update_profile: bool = True
    warnings: List[str] = field(default_factory=list)


def load_config_file(path: Optional[str], explicit: bool = False) -> Tuple[Dict[str, Any], List[str]]:
    """Load a YAML config file.

    Args:
        path: File path; ``~`` is expanded.
        explicit: Whether the user asked for this file (missing file is then a warning).

    Returns:
        Tuple of (config dict, warnings).
    """
    if not path:
        return {}, []
    full = os.path.expanduser(path)
    if not os.path.isfile(full):
        return {}, ([f"Config file not found: {full}"] if explicit else [])
    try:
        with open(full, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        return {}, [f"Failed to load config {full}: {exc}"]
    if data is None:
        return {}, []
    if not isinstance(data, dict):
        return {}, [f"Ignoring config {full}: top level must be a mapping"]
    return data, []


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = config.get(name)
    return value if isinstance(value, dict) else {}


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def apply_http_overrides(config: Mapping[str, Any], warnings: List[str]) -> None:
    """Apply ``http.timeout`` / ``http.retries`` from the config file to Constants."""
    http = _section(config, "http")
    try:
        if http.get("timeout") is not None:
            Constants.REQUEST_TIMEOUT = float(http["timeout"])
        if http.get("retries") is not None:
            Constants.HTTP_RETRY_MAX = max(1, int(http["retries"]))
    except (TypeError, ValueError) as exc:
        warnings.append(f"Ignoring invalid http settings in config: {exc}")


def build_settings(args: Any, environ: Optional[Mapping[str, str]] = None) -> SyncSettings:
    """Resolve settings for the tool named by ``args.action``."""
    env = os.environ if environ is None else environ
    tool = args.action

    explicit_config = getattr(args, "CONFIG", None) or env.get(Constants.ENV_CONFIG)
    config_path = explicit_config or Constants.DEFAULT_CONFIG_FILE
    config, warnings = load_config_file(config_path, explicit=bool(explicit_config))
    apply_http_overrides(config, warnings)
    section = _section(config, tool)

    log_file = _first(
        getattr(args, "LOG_FILE", None),
        env.get(Constants.ENV_LOG_FILE),
        section.get("log_file"),
        Constants.DEFAULT_LOG_FILES[tool],
    )

    settings = SyncSettings(
        tool=tool,
        dry_run=bool(getattr(args, "DRY_RUN", False)),
        quiet=bool(getattr(args, "QUIET", False)),
        log_file=os.path.expanduser(str(log_file)),
        log_level=getattr(args, "LOG_LEVEL", None),
        config_path=os.path.expanduser(config_path) if config else None,
        warnings=warnings,
    )

    if tool == Tools.NODE.value:
        settings.nvm_dir = os.path.expanduser(str(_first(
            env.get(Constants.ENV_NVM_DIR),
            section.get("nvm_dir"),
            Constants.DEFAULT_NVM_DIR,
        )))
        settings.node_index_url = section.get("index_url")
    else:
        settings.dotnet_root = os.path.abspath(os.path.expanduser(str(_first(
            getattr(args, "DOTNET_ROOT", None),
            env.get(Constants.ENV_DOTNET_ROOT),
            section.get("dotnet_root"),
            Constants.DEFAULT_DOTNET_ROOT,
        ))))
        settings.releases_index_url = section.get("releases_index_url")
        settings.install_script_url = section.get("install_script_url")
        settings.cleanup = not getattr(args, "NO_CLEANUP", False)
        settings.update_profile = not getattr(args, "NO_PROFILE_UPDATE", False)

    return settings
