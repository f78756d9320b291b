"""Removal simulation — how many top owners can leave before most files are orphaned."""

from typing import Callable, Optional

from busfactor.analysis.authorship import rank_contributors
from busfactor.models import ContributorDOA, FileOwnership, RemovalResult


def count_ownerless(file_ownership: FileOwnership, removed: set[str]) -> int:
    """Files whose owner was removed or who never had one."""
    return sum(1 for owner in file_ownership.values() if owner is None or owner in removed)


def ownerless_ratio(file_ownership: FileOwnership, removed: set[str]) -> Optional[float]:
    """Share of ownerless files, or None when there are no files."""
    total = len(file_ownership)
    if total == 0:
        return None
    return count_ownerless(file_ownership, removed) / total


def simulate_removal(
    doa: ContributorDOA,
    file_ownership: FileOwnership,
    threshold: float = 0.5,
    on_status: Optional[Callable[[str], None]] = None,
) -> RemovalResult:
    """Remove contributors by descending DOA until the ownerless ratio exceeds ``threshold``.

    Only a ratio strictly greater than the threshold stops the loop. If
    every contributor is removed without crossing it, the bus factor is
    the number of ranked contributors.
    """
    status = on_status or (lambda _: None)
    total_files = len(file_ownership)
    if total_files == 0:
        return RemovalResult(bus_factor=0, removed_contributors=[], ownerless_ratio=None)

    removed: list[str] = []
    removed_set: set[str] = set()
    ratio = ownerless_ratio(file_ownership, removed_set)

    for author, entry in rank_contributors(doa):
        removed.append(author)
        removed_set.add(author)
        ownerless = count_ownerless(file_ownership, removed_set)
        ratio = ownerless / total_files

        status(f"Removed: {author} (DOA: {entry.doa * 100:.1f}%)")
        status(f"  → Ownerless files: {ownerless}/{total_files} ({ratio * 100:.1f}%)")

        if ratio > threshold:
            status(f"Threshold exceeded! Bus Factor = {len(removed)}")
            break

    return RemovalResult(
        bus_factor=len(removed),
        removed_contributors=removed,
        ownerless_ratio=ratio,
    )
