"""Analysis engine.

Orchestrates working-copy acquisition, blame/log collection and the bus
factor calculation to produce a complete AnalysisRun.
"""

import asyncio
import os
from datetime import datetime, timezone
from typing import Callable, Optional

from busfactor.calculator import BusFactorCalculator
from busfactor.cloner import RepoCloner
from busfactor.collector import AuthorshipCollector
from busfactor.models import AnalysisConfig, AnalysisRun


class Analyzer:
    """End-to-end bus factor analysis of one repository."""

    def __init__(
        self,
        token: Optional[str] = None,
        config: Optional[AnalysisConfig] = None,
        on_status: Optional[Callable[[str], None]] = None,
        on_progress: Optional[Callable[[int, int, str], None]] = None,
    ) -> None:
        self.token = token or os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN") or None
        self.config = config or AnalysisConfig.from_env()
        self._on_status = on_status or (lambda _: None)
        self._on_progress = on_progress or (lambda *_: None)
        self._cloner = RepoCloner(token=self.token)
        self._calculator = BusFactorCalculator(on_status=self._status)

    # ── Status helper ─────────────────────────────────────────────────────

    def _status(self, msg: str) -> None:
        self._on_status(msg)

    @property
    def available_methods(self) -> list[str]:
        return self._calculator.list_available_methods()

    async def close(self) -> None:
        """Tear down resources."""
        self._cloner.cleanup()

    # ── Full analysis ─────────────────────────────────────────────────────

    async def analyze(
        self,
        target: str,
        method: str = "abf",
        current_time: Optional[datetime] = None,
    ) -> AnalysisRun:
        """Run the entire analysis pipeline for a URL or local path."""
        # Fail fast before any cloning
        strategy = self._calculator.get_method(method)
        now = current_time or datetime.now(timezone.utc)

        # 1. Working copy
        self._status("Preparing working copy …")
        repo_path = await asyncio.to_thread(self._cloner.acquire, target)

        # 2. Blame
        collector = AuthorshipCollector(
            repo_path, on_status=self._status, on_progress=self._on_progress
        )
        data = await asyncio.to_thread(collector.collect, target)

        # 3. Commit history (time-weighted methods only)
        history = None
        if strategy.requires_history:
            history = await asyncio.to_thread(
                collector.collect_history,
                list(data.file_authorship),
                self.config.window_days,
                now,
                data.errors,
            )

        # 4. Bus factor
        report = self._calculator.calculate(
            method, data, history=history, config=self.config, current_time=now
        )

        self._status("Done!")
        return AnalysisRun(target=target, method=method, report=report)
