"""Ownership resolution — the dominant contributor of each file."""

from typing import Optional

from busfactor.models import FileAuthorship, FileOwnership


def resolve_owner(authors: dict[str, float]) -> Optional[str]:
    """Return the contributor with the strictly largest line count.

    Contributors are scanned in the order they were first observed for
    the file, so on an exact tie the first one seen wins. A file with no
    lines at all has no owner.
    """
    total = sum(authors.values())
    if total <= 0:
        return None

    owner: Optional[str] = None
    best = 0.0
    for author, lines in authors.items():
        if lines > best:
            best = lines
            owner = author
    return owner


def resolve_ownership(file_authorship: FileAuthorship) -> FileOwnership:
    """Build a fresh file -> owner map from per-file line counts."""
    return {file: resolve_owner(authors) for file, authors in file_authorship.items()}
