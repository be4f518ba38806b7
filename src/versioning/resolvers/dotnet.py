""".NET SDK version resolver using Microsoft's release-metadata index."""

import logging
from typing import List, Optional

from common.errors import ResolutionError
from common.http_client import get_json
from constants import Constants, Tools

from ..models import CatalogEntry, ResolvedVersions, SupportTier, Version
from ..parser import parse_dotnet_releases_index
from .base import VersionResolver

logger = logging.getLogger(__name__)


class DotnetVersionResolver(VersionResolver):
    """Resolver for .NET SDKs: the active STS channel plus all supported LTS channels."""

    @property
    def tool(self) -> Tools:
        """Return the .NET tool."""
        return Tools.DOTNET

    def default_catalog_url(self) -> str:
        return Constants.DOTNET_RELEASES_INDEX_URL

    def fetch_catalog(self) -> List[CatalogEntry]:
        """Fetch ``releases-index.json`` and parse one entry per channel."""
        status_code, _, data = get_json(self.catalog_url)
        if status_code != 200 or data is None:
            raise ResolutionError(
                f"Failed to fetch .NET releases information from {self.catalog_url} "
                f"(status {status_code})"
            )
        entries, broken = parse_dotnet_releases_index(data)
        for channel in broken:
            logger.warning("No usable latest SDK for .NET channel %s, skipping", channel)
        if not entries:
            raise ResolutionError(".NET releases index contained no usable channels")
        return entries

    def pick(self, catalog: List[CatalogEntry]) -> ResolvedVersions:
        """Select Current (active STS) and the LTS set (active or maintenance)."""
        current = self._pick_current(catalog)
        if current is None:
            raise ResolutionError("Failed to determine the current .NET version")

        lts = self._pick_lts(catalog)
        if not lts:
            logger.warning("No supported .NET LTS channel found")

        tiers = [(current, SupportTier.CURRENT)] + [(v, SupportTier.LTS) for v in lts]
        supported = tuple(sorted({version for version, _ in tiers}))
        return ResolvedVersions(supported=supported, primary=current, tiers=tuple(tiers))

    def _pick_current(self, catalog: List[CatalogEntry]) -> Optional[Version]:
        """Latest SDK of the newest STS channel in active support."""
        sts = [
            entry.version
            for entry in catalog
            if entry.tier == SupportTier.STS
            and entry.support_phase in Constants.DOTNET_SUPPORTED_PHASES_STS
            and not entry.version.is_prerelease
        ]
        return max(sts) if sts else None

    def _pick_lts(self, catalog: List[CatalogEntry]) -> List[Version]:
        """Latest SDK of every LTS channel in active or maintenance support."""
        found = set()
        for entry in catalog:
            if entry.tier != SupportTier.LTS:
                continue
            if entry.support_phase not in Constants.DOTNET_SUPPORTED_PHASES_LTS:
                continue
            if entry.version.is_prerelease:
                continue
            found.add(entry.version)
        return sorted(found)
