"""Parsing of upstream release documents and local tool output into models.

Everything that touches raw JSON or CLI text lives here so the resolution
and reconciliation policies only ever see typed values.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from constants import Constants

from .models import CatalogEntry, SupportTier, Version

logger = logging.getLogger(__name__)

# "8.0.412 [/usr/share/dotnet/sdk]"
_LIST_SDKS_LINE = re.compile(r"^\s*(\S+)\s+\[(.+)\]\s*$")


def parse_node_index(document: Any) -> List[CatalogEntry]:
    """Turn the Node.js distribution ``index.json`` into catalog entries.

    Entries whose ``lts`` field is a codename string are LTS releases;
    ``lts: false`` marks a Current-line release. Unparsable versions and
    prereleases are skipped.
    """
    if not isinstance(document, list):
        return []
    entries: List[CatalogEntry] = []
    for item in document:
        if not isinstance(item, dict):
            continue
        version = Version.parse(str(item.get("version", "")))
        if version is None or version.is_prerelease:
            continue
        lts = item.get("lts")
        codename = lts if isinstance(lts, str) and lts else None
        tier = SupportTier.LTS if codename else SupportTier.CURRENT
        entries.append(CatalogEntry(version=version, tier=tier, lts_codename=codename))
    return entries


def _dotnet_tier(release_type: str, support_phase: str) -> SupportTier:
    if support_phase in ("eol",):
        return SupportTier.EOL
    if support_phase in ("preview", "go-live"):
        return SupportTier.PREVIEW
    if release_type == "lts":
        return SupportTier.LTS
    return SupportTier.STS


def parse_dotnet_releases_index(document: Any) -> Tuple[List[CatalogEntry], List[str]]:
    """Turn Microsoft's ``releases-index.json`` into catalog entries.

    One entry per channel, carrying the channel's ``latest-sdk``.

    Returns:
        Tuple of (entries, channels_without_a_usable_sdk). The second list
        names channels whose ``latest-sdk`` is missing or unparsable.
    """
    if not isinstance(document, dict):
        return [], []
    channels = document.get("releases-index")
    if not isinstance(channels, list):
        return [], []

    entries: List[CatalogEntry] = []
    broken: List[str] = []
    for channel in channels:
        if not isinstance(channel, dict):
            continue
        name = str(channel.get("channel-version", "")).strip()
        release_type = str(channel.get("release-type", "")).strip().lower()
        phase = str(channel.get("support-phase", "")).strip().lower()
        tier = _dotnet_tier(release_type, phase)
        version = Version.parse(str(channel.get("latest-sdk", "") or ""))
        if version is None:
            # only a supported LTS channel going missing is worth reporting
            if tier == SupportTier.LTS and phase in Constants.DOTNET_SUPPORTED_PHASES_LTS:
                broken.append(name or "<unnamed>")
            else:
                logger.debug("Skipping channel %s without a usable latest-sdk", name)
            continue
        if version.is_prerelease and tier not in (SupportTier.EOL,):
            tier = SupportTier.PREVIEW
        entries.append(
            CatalogEntry(
                version=version,
                tier=tier,
                channel=name or None,
                support_phase=phase or None,
            )
        )
    return entries, broken


def parse_list_sdks(output: str) -> List[Tuple[Version, str]]:
    """Parse ``dotnet --list-sdks`` output into (version, sdk_base_dir) pairs."""
    results: List[Tuple[Version, str]] = []
    for line in (output or "").splitlines():
        m = _LIST_SDKS_LINE.match(line)
        if not m:
            continue
        version = Version.parse(m.group(1))
        if version is None:
            logger.debug("Ignoring unparsable SDK line: %s", line)
            continue
        results.append((version, m.group(2).strip()))
    return results


def parse_version_names(names: Iterable[str]) -> Dict[Version, str]:
    """Map directory names that look like versions to their parsed Version."""
    out: Dict[Version, str] = {}
    for name in names:
        version = Version.parse(name)
        if version is not None:
            out[version] = name
    return out


def first_version(text: str) -> Optional[Version]:
    """Extract the first version-looking token from command output."""
    m = re.search(r"v?\d+\.\d+\.\d+(?:-[0-9A-Za-z.\-]+)?", text or "")
    return Version.parse(m.group(0)) if m else None
