"""Bus factor calculation methods and the registry that dispatches between them.

Two methods are registered out of the box:

* ``abf`` — Avelino et al. authorship-based factor: raw blame line counts.
* ``jbf`` — Jabrayilzade et al. time-weighted factor: line counts decayed
  by the time since each contributor last touched the file.

Both share the removal simulator; a new method only needs to provide
ownership, ranking and report texts.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from busfactor.analysis.authorship import compute_doa, rank_contributors
from busfactor.analysis.decay import apply_decay
from busfactor.analysis.ownership import resolve_ownership
from busfactor.analysis.removal import simulate_removal
from busfactor.analysis.report import InterpretationTexts, build_report
from busfactor.models import (
    AnalysisConfig,
    AnalysisMetadata,
    AuthorshipData,
    CommitRecord,
    ContributorDOA,
    ContributorOwnership,
    FileAuthorship,
    FileOwnership,
    RemovalResult,
    Report,
    RiskLevel,
    as_utc,
)

CommitHistory = dict[str, list[CommitRecord]]


class UnknownMethodError(ValueError):
    """Raised when a calculation method name is not registered."""

    def __init__(self, method: str, available: list[str]) -> None:
        self.method = method
        self.available = available
        super().__init__(
            f"Unknown bus factor calculation method: {method} "
            f"(available: {', '.join(available)})"
        )


class BusFactorMethod:
    """Base strategy. Subclasses decide ownership, ranking and report texts."""

    name = ""
    label = ""
    description = ""
    requires_history = False
    interpretations: InterpretationTexts = {}

    def compute_ownership(
        self,
        file_authorship: FileAuthorship,
        history: Optional[CommitHistory],
        config: AnalysisConfig,
        current_time: datetime,
    ) -> tuple[FileOwnership, Optional[FileAuthorship]]:
        """Return the ownership map and, if used, the weighted authorship behind it."""
        raise NotImplementedError

    def compute_ranking(
        self,
        file_ownership: FileOwnership,
        weighted_authorship: Optional[FileAuthorship],
    ) -> ContributorDOA:
        raise NotImplementedError

    def simulate_removal(
        self,
        doa: ContributorDOA,
        file_ownership: FileOwnership,
        config: AnalysisConfig,
        on_status: Callable[[str], None],
    ) -> RemovalResult:
        return simulate_removal(doa, file_ownership, config.threshold, on_status=on_status)

    def metadata(self, config: AnalysisConfig, current_time: datetime) -> Optional[AnalysisMetadata]:
        return None

    def build_report(
        self,
        data: AuthorshipData,
        removal: RemovalResult,
        ranking: list[tuple[str, ContributorOwnership]],
        file_ownership: FileOwnership,
        weighted_authorship: Optional[FileAuthorship],
        config: AnalysisConfig,
        current_time: datetime,
    ) -> Report:
        return build_report(
            data,
            removal,
            ranking,
            file_ownership,
            method=self.label,
            description=self.description,
            threshold=config.threshold,
            texts=self.interpretations,
            weighted_authorship=weighted_authorship,
            metadata=self.metadata(config, current_time),
        )


class StandardMethod(BusFactorMethod):
    """Ownership straight from blame line counts."""

    name = "abf"
    label = "Avelino et al. - ABF (Authorship-Based Factor)"
    description = (
        "Iteratively removes developers with highest Degree of Authorship "
        "until >50% of files have no owner"
    )
    interpretations = {
        RiskLevel.critical: (
            "Project has a bus factor of {bus_factor}. The loss of a single developer "
            "would severely impact the project.",
            "Urgent action needed to distribute knowledge and ownership across more team members.",
        ),
        RiskLevel.high: (
            "Project has a bus factor of {bus_factor}. Very few developers hold critical knowledge.",
            "Consider implementing pair programming, code reviews, and documentation "
            "to spread knowledge.",
        ),
        RiskLevel.moderate: (
            "Project has a bus factor of {bus_factor}. Knowledge is somewhat concentrated.",
            "Continue efforts to involve more developers in different parts of the codebase.",
        ),
        RiskLevel.low: (
            "Project has a bus factor of {bus_factor}. Knowledge is well distributed.",
            "Maintain current practices for knowledge sharing and collaboration.",
        ),
    }

    def compute_ownership(
        self,
        file_authorship: FileAuthorship,
        history: Optional[CommitHistory],
        config: AnalysisConfig,
        current_time: datetime,
    ) -> tuple[FileOwnership, Optional[FileAuthorship]]:
        return resolve_ownership(file_authorship), None

    def compute_ranking(
        self,
        file_ownership: FileOwnership,
        weighted_authorship: Optional[FileAuthorship],
    ) -> ContributorDOA:
        return compute_doa(file_ownership)


class TimeWeightedMethod(BusFactorMethod):
    """Ownership from line counts decayed by time since each contributor's last touch."""

    name = "jbf"
    label = "Jabrayilzade et al. - JBF (Time-Weighted Bus Factor)"
    description = "Advanced method using knowledge decay and time-weighted contributions"
    requires_history = True
    interpretations = {
        RiskLevel.critical: (
            "Project has a bus factor of {bus_factor}. Recent knowledge is concentrated "
            "in a single developer.",
            "Urgent action needed. Implement immediate knowledge transfer sessions "
            "and pair programming.",
        ),
        RiskLevel.high: (
            "Project has a bus factor of {bus_factor}. Very few developers hold current "
            "project knowledge.",
            "Prioritize knowledge sharing through code reviews, documentation, "
            "and rotating responsibilities.",
        ),
        RiskLevel.moderate: (
            "Project has a bus factor of {bus_factor}. Knowledge distribution could be improved.",
            "Continue promoting cross-team collaboration and regular knowledge sharing sessions.",
        ),
        RiskLevel.low: (
            "Project has a bus factor of {bus_factor}. Current knowledge is well distributed.",
            "Maintain current practices and monitor for changes in contribution patterns.",
        ),
    }

    def compute_ownership(
        self,
        file_authorship: FileAuthorship,
        history: Optional[CommitHistory],
        config: AnalysisConfig,
        current_time: datetime,
    ) -> tuple[FileOwnership, Optional[FileAuthorship]]:
        weighted = apply_decay(
            file_authorship,
            history or {},
            config.decay_rate,
            current_time,
            window_days=config.window_days,
        )
        return resolve_ownership(weighted), weighted

    def compute_ranking(
        self,
        file_ownership: FileOwnership,
        weighted_authorship: Optional[FileAuthorship],
    ) -> ContributorDOA:
        return compute_doa(file_ownership, weighted_authorship or {})

    def metadata(self, config: AnalysisConfig, current_time: datetime) -> AnalysisMetadata:
        return AnalysisMetadata(
            decay_rate=config.decay_rate,
            time_window_days=config.window_days,
            analysis_date=current_time.isoformat(),
        )


class BusFactorCalculator:
    """Dispatches an analysis to a registered method."""

    def __init__(self, on_status: Optional[Callable[[str], None]] = None) -> None:
        self._on_status = on_status or (lambda _: None)
        self._methods: dict[str, BusFactorMethod] = {}
        self.register(StandardMethod())
        self.register(TimeWeightedMethod())

    def _status(self, msg: str) -> None:
        self._on_status(msg)

    def register(self, method: BusFactorMethod) -> None:
        self._methods[method.name] = method

    def list_available_methods(self) -> list[str]:
        return list(self._methods)

    def get_method(self, name: str) -> BusFactorMethod:
        try:
            return self._methods[name]
        except KeyError:
            raise UnknownMethodError(name, self.list_available_methods()) from None

    def calculate(
        self,
        method: str,
        data: AuthorshipData,
        history: Optional[CommitHistory] = None,
        config: Optional[AnalysisConfig] = None,
        current_time: Optional[datetime] = None,
    ) -> Report:
        """Run the full ownership → ranking → removal → report pipeline."""
        strategy = self.get_method(method)
        config = config or AnalysisConfig()
        now = as_utc(current_time) if current_time is not None else datetime.now(timezone.utc)

        self._status(f"Running bus factor calculation with method: {strategy.name.upper()}")
        if strategy.requires_history:
            self._status(f"Using knowledge decay with {config.window_days} day window")

        self._status("Step 1: Determining file ownership …")
        file_ownership, weighted = strategy.compute_ownership(
            data.file_authorship, history, config, now
        )

        self._status("Step 2: Calculating Degree of Authorship (DOA) …")
        doa = strategy.compute_ranking(file_ownership, weighted)

        self._status("Step 3: Iteratively removing authors …")
        removal = strategy.simulate_removal(doa, file_ownership, config, self._status)

        return strategy.build_report(
            data,
            removal,
            rank_contributors(doa),
            file_ownership,
            weighted,
            config,
            now,
        )


def run_standard_analysis(
    file_authorship: FileAuthorship,
    config: Optional[AnalysisConfig] = None,
    errors: Optional[list[str]] = None,
) -> Report:
    """Bus factor from raw line counts."""
    data = AuthorshipData(file_authorship=file_authorship, errors=errors or [])
    return BusFactorCalculator().calculate("abf", data, config=config)


def run_time_weighted_analysis(
    file_authorship: FileAuthorship,
    history: CommitHistory,
    config: Optional[AnalysisConfig] = None,
    current_time: Optional[datetime] = None,
    errors: Optional[list[str]] = None,
) -> Report:
    """Bus factor from decayed line counts."""
    data = AuthorshipData(file_authorship=file_authorship, errors=errors or [])
    return BusFactorCalculator().calculate(
        "jbf", data, history=history, config=config, current_time=current_time
    )
