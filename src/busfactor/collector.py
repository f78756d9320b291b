"""Authorship collection from a local git working copy.

Produces the per-file blame line counts and the per-file commit history
that the bus factor methods consume. A failure on one file is recorded
and that file is kept with empty data; it never aborts the whole run.
"""

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Union

import git  # GitPython

from busfactor.analysis.decay import history_cutoff
from busfactor.models import AuthorshipData, CommitRecord


class AuthorshipCollector:
    """Extracts blame and log data from one repository."""

    def __init__(
        self,
        repo_path: Union[str, Path],
        on_status: Optional[Callable[[str], None]] = None,
        on_progress: Optional[Callable[[int, int, str], None]] = None,
    ) -> None:
        self.repo_path = Path(repo_path)
        self.repo = git.Repo(str(self.repo_path))
        self._on_status = on_status or (lambda _: None)
        self._on_progress = on_progress or (lambda *_: None)

    def _status(self, msg: str) -> None:
        self._on_status(msg)

    def _record_error(self, errors: list[str], path: str, exc: Exception) -> None:
        message = f'Could not analyze "{path}": {exc}'
        errors.append(message)
        self._status(f"⚠ {message}")

    # ── Blame ─────────────────────────────────────────────────────────────

    def list_files(self) -> list[str]:
        """Tracked files at HEAD."""
        output = self.repo.git.ls_files()
        return [f for f in output.splitlines() if f.strip()]

    def file_authorship(self, path: str, errors: Optional[list[str]] = None) -> dict[str, int]:
        """Lines per author in the current version of ``path``."""
        counts: dict[str, int] = {}
        try:
            for commit, lines in self.repo.blame("HEAD", path) or []:
                author = commit.author.name or commit.author.email or "unknown"
                counts[author] = counts.get(author, 0) + len(lines)
        except (git.exc.GitError, ValueError) as exc:
            if errors is not None:
                self._record_error(errors, path, exc)
            return {}
        return counts

    def collect(self, repository_url: Optional[str] = None) -> AuthorshipData:
        """Blame every tracked file."""
        self._status("Starting authorship analysis …")
        started = time.monotonic()

        files = self.list_files()
        self._status(f"Found {len(files)} files to analyze")

        errors: list[str] = []
        file_authorship: dict[str, dict[str, int]] = {}
        skipped = 0
        for processed, path in enumerate(files, start=1):
            self._on_progress(processed, len(files), path)
            authors = self.file_authorship(path, errors)
            if not authors:
                skipped += 1
            file_authorship[path] = authors

        data = AuthorshipData(
            file_authorship=file_authorship,
            repo_path=str(self.repo_path),
            repository_url=repository_url,
            errors=errors,
        )
        elapsed = time.monotonic() - started
        self._status(
            f"Authorship analysis complete: {len(files)} files, {skipped} skipped, "
            f"{len(data.total_authorship)} contributors in {elapsed:.1f}s"
        )
        return data

    # ── Log ───────────────────────────────────────────────────────────────

    def commit_history(self, path: str, since: datetime) -> list[CommitRecord]:
        """Commits touching ``path`` authored after ``since``, newest first."""
        return [
            CommitRecord(
                author=c.author.name or c.author.email or "unknown",
                timestamp=datetime.fromtimestamp(c.authored_date, tz=timezone.utc),
                revision=c.hexsha,
            )
            for c in self.repo.iter_commits(paths=path, since=since.isoformat())
        ]

    def collect_history(
        self,
        files: list[str],
        window_days: int,
        current_time: Optional[datetime] = None,
        errors: Optional[list[str]] = None,
    ) -> dict[str, list[CommitRecord]]:
        """Per-file commit history inside the lookback window.

        Files whose log cannot be read map to an empty list.
        """
        now = current_time or datetime.now(timezone.utc)
        since = history_cutoff(now, window_days)
        self._status(f"Fetching commit history since {since:%Y-%m-%d} …")

        history: dict[str, list[CommitRecord]] = {}
        for processed, path in enumerate(files, start=1):
            self._on_progress(processed, len(files), path)
            try:
                history[path] = self.commit_history(path, since)
            except (git.exc.GitError, ValueError) as exc:
                if errors is not None:
                    self._record_error(errors, path, exc)
                history[path] = []
        return history
