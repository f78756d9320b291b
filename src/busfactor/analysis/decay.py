"""Knowledge decay — down-weight line ownership by time since last touch."""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from busfactor.models import CommitRecord, FileAuthorship, as_utc

# Applied when a contributor has no commit on the file inside the window
MAX_DECAY = 0.01

SECONDS_PER_DAY = 24 * 60 * 60


def decay_factor(last_touch: datetime, now: datetime, decay_rate: float) -> float:
    """exp(-rate * elapsed_days / 365), clamped to 1.0 for future timestamps."""
    elapsed_days = (as_utc(now) - as_utc(last_touch)).total_seconds() / SECONDS_PER_DAY
    if elapsed_days < 0:
        elapsed_days = 0.0
    return math.exp(-decay_rate * elapsed_days / 365)


def latest_touch(
    commits: list[CommitRecord],
    author: str,
    since: Optional[datetime] = None,
) -> Optional[datetime]:
    """Most recent timestamp among ``author``'s commits at or after ``since``, if any."""
    cutoff = as_utc(since) if since is not None else None
    stamps = [
        c.timestamp
        for c in commits
        if c.author == author and (cutoff is None or c.timestamp >= cutoff)
    ]
    return max(stamps) if stamps else None


def history_cutoff(now: datetime, window_days: int) -> datetime:
    """Start of the lookback window ending at ``now``."""
    return as_utc(now) - timedelta(days=window_days)


def apply_decay(
    file_authorship: FileAuthorship,
    commit_history: dict[str, list[CommitRecord]],
    decay_rate: float,
    current_time: Optional[datetime] = None,
    window_days: Optional[int] = None,
) -> FileAuthorship:
    """Return a new authorship map with every line count time-weighted.

    Files missing from ``commit_history`` are treated as having no
    commits, so all of their contributors get the maximum decay. With
    ``window_days`` set, records older than the window are ignored.
    Naive datetimes are taken to be UTC.
    """
    now = as_utc(current_time) if current_time is not None else datetime.now(timezone.utc)
    since = history_cutoff(now, window_days) if window_days is not None else None
    weighted: FileAuthorship = {}

    for file, authors in file_authorship.items():
        commits = commit_history.get(file) or []
        weighted_authors: dict[str, float] = {}
        for author, lines in authors.items():
            last = latest_touch(commits, author, since)
            if last is None:
                weighted_authors[author] = lines * MAX_DECAY
            else:
                weighted_authors[author] = lines * decay_factor(last, now, decay_rate)
        weighted[file] = weighted_authors

    return weighted
