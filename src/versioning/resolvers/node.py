"""Node.js version resolver: Current, Active LTS and Maintenance LTS."""

import logging
import os
from typing import List, Optional

from common.errors import ResolutionError
from common.http_client import get_json
from constants import Constants, Tools

from ..models import CatalogEntry, ResolvedVersions, SupportTier, Version
from ..parser import parse_node_index
from .base import VersionResolver

logger = logging.getLogger(__name__)


class NodeVersionResolver(VersionResolver):
    """Resolver for Node.js releases published in the distribution index.

    Only even-numbered majors are ever considered stable; odd majors are
    development lines that never become LTS.
    """

    @property
    def tool(self) -> Tools:
        """Return the Node.js tool."""
        return Tools.NODE

    def default_catalog_url(self) -> str:
        """Distribution index, honoring nvm's mirror variable."""
        base = os.environ.get(Constants.ENV_NODE_MIRROR) or Constants.NODE_DIST_URL
        return f"{base.rstrip('/')}/{Constants.NODE_INDEX_FILE}"

    def fetch_catalog(self) -> List[CatalogEntry]:
        """Fetch the distribution index and parse it into catalog entries."""
        status_code, _, data = get_json(self.catalog_url)
        if status_code != 200 or data is None:
            raise ResolutionError(
                f"Failed to fetch Node.js release index from {self.catalog_url} "
                f"(status {status_code})"
            )
        entries = parse_node_index(data)
        if not entries:
            raise ResolutionError("Node.js release index contained no usable versions")
        return entries

    def pick(self, catalog: List[CatalogEntry]) -> ResolvedVersions:
        """Select Current, Active LTS and Maintenance LTS from the catalog."""
        current = self._pick_current(catalog)
        if current is None:
            raise ResolutionError("Failed to determine the current Node.js version")

        active_lts = self._pick_active_lts(catalog)
        if active_lts is None:
            raise ResolutionError("Failed to determine the Active LTS Node.js version")

        maintenance_lts = self._pick_maintenance_lts(catalog)
        if maintenance_lts is None:
            logger.debug("No Maintenance LTS line found, skipping")

        tiers = [
            (current, SupportTier.CURRENT),
            (active_lts, SupportTier.ACTIVE_LTS),
        ]
        if maintenance_lts is not None:
            tiers.append((maintenance_lts, SupportTier.MAINTENANCE_LTS))

        supported = tuple(sorted({version for version, _ in tiers}))
        return ResolvedVersions(supported=supported, primary=active_lts, tiers=tuple(tiers))

    def _pick_current(self, catalog: List[CatalogEntry]) -> Optional[Version]:
        """Greatest even-major release; odd majors are never Current."""
        if not catalog:
            return None
        newest = max(entry.version for entry in catalog)
        even = [entry.version for entry in catalog if entry.version.is_even_major]
        if not even:
            return None
        current = max(even)
        if not newest.is_even_major:
            logger.warning(
                "Newest release %s is odd-numbered (unstable), using latest even-numbered version %s",
                newest,
                current,
            )
        return current

    def _pick_active_lts(self, catalog: List[CatalogEntry]) -> Optional[Version]:
        """Greatest LTS-marked release."""
        lts = [entry.version for entry in catalog if entry.is_lts]
        return max(lts) if lts else None

    def _pick_maintenance_lts(self, catalog: List[CatalogEntry]) -> Optional[Version]:
        """Greatest LTS release of the second-most-recent LTS major."""
        lts = [entry.version for entry in catalog if entry.is_lts]
        majors = sorted({version.major for version in lts})
        if len(majors) < 2:
            return None
        maintenance_major = majors[-2]
        candidates = [version for version in lts if version.major == maintenance_major]
        return max(candidates) if candidates else None
