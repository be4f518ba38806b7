"""Data models for release catalogs, installed versions and reconciliation plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Dict, Optional, Tuple

import semantic_version


class SupportTier(Enum):
    """Support tier of a catalog entry or a resolved version."""
    CURRENT = "current"
    ACTIVE_LTS = "active-lts"
    MAINTENANCE_LTS = "maintenance-lts"
    LTS = "lts"
    STS = "sts"
    EOL = "eol"
    PREVIEW = "preview"


class RemovalReason(Enum):
    """Why an installed version ended up on the remove-list."""
    UNSUPPORTED = "unsupported"
    SUPERSEDED = "superseded"


@total_ordering
@dataclass(frozen=True)
class Version:
    """A major.minor.patch version with an optional prerelease tag."""

    major: int
    minor: int
    patch: int
    prerelease: str = ""
    prefix: str = field(default="", compare=False)

    @classmethod
    def parse(cls, text: str) -> Optional["Version"]:
        """Parse '20.17.1', 'v20.17.1' or '10.0.100-preview.6'; None if invalid."""
        if not isinstance(text, str):
            return None
        raw = text.strip()
        prefix = ""
        if raw[:1] in ("v", "V"):
            prefix, raw = "v", raw[1:]
        try:
            parsed = semantic_version.Version(raw)
        except ValueError:
            return None
        return cls(
            major=parsed.major,
            minor=parsed.minor,
            patch=parsed.patch,
            prerelease=".".join(parsed.prerelease),
            prefix=prefix,
        )

    @property
    def release_line(self) -> Tuple[int, int]:
        """The major.minor release line this version belongs to."""
        return self.major, self.minor

    @property
    def is_even_major(self) -> bool:
        return self.major % 2 == 0

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def sort_key(self) -> Tuple[int, int, int, int, str]:
        # A prerelease sorts before the release it precedes
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, self.prerelease)

    def same_line(self, other: "Version") -> bool:
        return self.release_line == other.release_line

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        core = f"{self.prefix}{self.major}.{self.minor}.{self.patch}"
        return f"{core}-{self.prerelease}" if self.prerelease else core


@dataclass(frozen=True)
class CatalogEntry:
    """One upstream release, annotated with its support tier."""
    version: Version
    tier: SupportTier
    lts_codename: Optional[str] = None
    channel: Optional[str] = None
    support_phase: Optional[str] = None

    @property
    def is_lts(self) -> bool:
        return self.tier in (SupportTier.LTS, SupportTier.ACTIVE_LTS, SupportTier.MAINTENANCE_LTS)


@dataclass(frozen=True)
class ResolvedVersions:
    """Resolution outcome: the supported set and the primary/default version."""
    supported: Tuple[Version, ...]
    primary: Version
    tiers: Tuple[Tuple[Version, SupportTier], ...] = ()

    def tier_of(self, version: Version) -> Optional[SupportTier]:
        """Return the first tier recorded for a version."""
        for candidate, tier in self.tiers:
            if candidate == version:
                return tier
        return None

    def labels(self) -> Dict[Version, str]:
        """Human-readable tier labels per supported version."""
        out: Dict[Version, str] = {}
        for version in self.supported:
            tier = self.tier_of(version)
            if tier is not None:
                out[version] = _TIER_LABELS.get(tier, tier.value)
        return out


_TIER_LABELS = {
    SupportTier.CURRENT: "Current",
    SupportTier.ACTIVE_LTS: "Active LTS",
    SupportTier.MAINTENANCE_LTS: "Maintenance LTS",
    SupportTier.LTS: "LTS",
    SupportTier.STS: "STS",
}


@dataclass(frozen=True)
class InstalledVersion:
    """A locally installed version and the locations that hold it."""
    version: Version
    paths: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Removal:
    """A remove-list entry."""
    installed: InstalledVersion
    reason: RemovalReason
    keeping: Optional[Version] = None

    @property
    def version(self) -> Version:
        return self.installed.version


@dataclass(frozen=True)
class ReconciliationPlan:
    """Install and remove actions that bring local state to the supported set.

    ``targets`` pairs every supported version with the local version that will
    provide it once the plan has run.
    """
    install: Tuple[Version, ...]
    remove: Tuple[Removal, ...]
    targets: Tuple[Tuple[Version, Version], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.install and not self.remove

    def target_for(self, supported: Version) -> Version:
        """Local version providing a supported version (itself when installed fresh)."""
        for wanted, provider in self.targets:
            if wanted == supported:
                return provider
        return supported
