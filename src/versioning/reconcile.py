"""Reconciliation of the supported set against locally installed versions.

Both planners are pure functions: identical inputs give identical plans, and
the output is sorted no matter how the installed listing was enumerated.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from .models import (
    InstalledVersion,
    ReconciliationPlan,
    Removal,
    RemovalReason,
    ResolvedVersions,
    Version,
)


def merge_installed(installed: Iterable[InstalledVersion]) -> List[InstalledVersion]:
    """Collapse duplicate versions found in several locations into one entry."""
    paths: Dict[Version, List[str]] = {}
    for item in installed:
        bucket = paths.setdefault(item.version, [])
        for path in item.paths:
            if path not in bucket:
                bucket.append(path)
    return [InstalledVersion(version=v, paths=tuple(sorted(p))) for v, p in sorted(paths.items())]


def _best_compatible(
    wanted: Version,
    installed: List[InstalledVersion],
    same_line: bool,
) -> Optional[Version]:
    """Installed version satisfying ``wanted``: exact match first, else the highest newer one.

    Compatible means same major (or same major.minor when ``same_line``) and
    not older than ``wanted``.
    """
    versions = [item.version for item in installed]
    if wanted in versions:
        return wanted
    candidates = [
        v for v in versions
        if (v.same_line(wanted) if same_line else v.major == wanted.major)
        and v >= wanted
    ]
    return max(candidates) if candidates else None


def _install_and_targets(
    resolved: ResolvedVersions,
    installed: List[InstalledVersion],
    same_line: bool,
) -> Tuple[Tuple[Version, ...], Tuple[Tuple[Version, Version], ...]]:
    install: List[Version] = []
    targets: List[Tuple[Version, Version]] = []
    for wanted in sorted(set(resolved.supported)):
        provider = _best_compatible(wanted, installed, same_line)
        if provider is None:
            install.append(wanted)
            targets.append((wanted, wanted))
        else:
            targets.append((wanted, provider))
    return tuple(install), tuple(targets)


def plan_node(
    resolved: ResolvedVersions,
    installed: Iterable[InstalledVersion],
) -> ReconciliationPlan:
    """Plan Node.js installs and removals.

    Every installed version that is not exactly supported is removed, except
    a newer local release that already provides a supported major.
    """
    local = merge_installed(installed)
    install, targets = _install_and_targets(resolved, local, same_line=False)
    keep = {provider for _, provider in targets}
    supported = set(resolved.supported)

    remove = tuple(
        Removal(installed=item, reason=RemovalReason.UNSUPPORTED)
        for item in local
        if item.version not in supported and item.version not in keep
    )
    return ReconciliationPlan(install=install, remove=remove, targets=targets)


def plan_dotnet(
    resolved: ResolvedVersions,
    installed: Iterable[InstalledVersion],
) -> ReconciliationPlan:
    """Plan .NET SDK installs and removals.

    Removal runs in two phases: whole major.minor lines that are no longer
    supported go first; within supported lines every patch below the highest
    installed one is superseded. The highest installed patch of a supported
    line is always kept.
    """
    local = merge_installed(installed)
    install, targets = _install_and_targets(resolved, local, same_line=True)
    supported_lines = {version.release_line for version in resolved.supported}

    by_line: Dict[Tuple[int, int], List[InstalledVersion]] = defaultdict(list)
    for item in local:
        by_line[item.version.release_line].append(item)

    remove: List[Removal] = []
    for line in sorted(by_line):
        items = by_line[line]
        if line not in supported_lines:
            remove.extend(Removal(installed=item, reason=RemovalReason.UNSUPPORTED) for item in items)
            continue
        highest = max(item.version for item in items)
        remove.extend(
            Removal(installed=item, reason=RemovalReason.SUPERSEDED, keeping=highest)
            for item in items
            if item.version != highest
        )

    remove.sort(key=lambda removal: removal.version)
    return ReconciliationPlan(install=install, remove=tuple(remove), targets=targets)
