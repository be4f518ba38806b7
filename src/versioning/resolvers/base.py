"""Abstract base for runtime version resolvers."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from constants import Tools

from ..models import CatalogEntry, ResolvedVersions

logger = logging.getLogger(__name__)


class VersionResolver(ABC):
    """Fetch a release catalog and reduce it to the supported set.

    Subclasses implement the network fetch and the tool-specific policy;
    ``pick`` must stay a pure function of the catalog.
    """

    def __init__(self, catalog_url: Optional[str] = None):
        self.catalog_url = catalog_url or self.default_catalog_url()

    @property
    @abstractmethod
    def tool(self) -> Tools:
        """Runtime this resolver serves."""

    @abstractmethod
    def default_catalog_url(self) -> str:
        """Upstream release-metadata URL used when none is configured."""

    @abstractmethod
    def fetch_catalog(self) -> List[CatalogEntry]:
        """Fetch and parse the upstream catalog.

        Raises:
            ResolutionError: If the catalog cannot be fetched or decoded.
        """

    @abstractmethod
    def pick(self, catalog: List[CatalogEntry]) -> ResolvedVersions:
        """Apply the support policy to a catalog.

        Raises:
            ResolutionError: If a mandatory tier cannot be determined.
        """

    def resolve(self) -> ResolvedVersions:
        """Fetch the catalog and apply the policy."""
        logger.debug("Resolving supported %s versions from %s", self.tool.value, self.catalog_url)
        return self.pick(self.fetch_catalog())
