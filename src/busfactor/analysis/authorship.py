"""Degree-of-Authorship (DOA) aggregation."""

from typing import Optional

from busfactor.models import ContributorDOA, ContributorOwnership, FileAuthorship, FileOwnership


def compute_doa(
    file_ownership: FileOwnership,
    weighted_authorship: Optional[FileAuthorship] = None,
) -> ContributorDOA:
    """Compute each contributor's share of dominantly owned files.

    Files without an owner still count toward the denominator. When
    ``weighted_authorship`` is given (time-weighted method) every
    contributor with positive weighted lines gets an entry, owner or
    not, together with the sum of their weighted lines across all files.
    """
    total_files = len(file_ownership)
    if total_files == 0:
        return {}

    owned: dict[str, int] = {}
    contributions: dict[str, float] = {}

    if weighted_authorship is None:
        for owner in file_ownership.values():
            if owner is not None:
                owned[owner] = owned.get(owner, 0) + 1
    else:
        for file, authors in weighted_authorship.items():
            for author, weighted_lines in authors.items():
                if weighted_lines <= 0:
                    continue
                owned.setdefault(author, 0)
                contributions[author] = contributions.get(author, 0.0) + weighted_lines
                if file_ownership.get(file) == author:
                    owned[author] += 1

    ranking: ContributorDOA = {}
    for author, files_owned in owned.items():
        recent = contributions.get(author) if weighted_authorship is not None else None
        ranking[author] = ContributorOwnership(
            doa=files_owned / total_files,
            files_owned=files_owned,
            recent_contributions=recent,
            # Lifetime totals are not tracked separately yet
            total_contributions=recent,
        )
    return ranking


def rank_contributors(doa: ContributorDOA) -> list[tuple[str, ContributorOwnership]]:
    """Sort by descending DOA; ties keep the mapping's insertion order."""
    return sorted(doa.items(), key=lambda item: -item[1].doa)
