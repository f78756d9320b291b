"""Report building — turn a removal simulation into the published report shape."""

from typing import Optional

from busfactor.models import (
    AnalysisInfo,
    AnalysisMetadata,
    AuthorshipData,
    ContributorOwnership,
    FileAuthorship,
    FileAuthorshipShare,
    FileOwnership,
    Interpretation,
    RemovalResult,
    Report,
    ReportSummary,
    RiskLevel,
    TopContributor,
)

TOP_CONTRIBUTORS = 10

# risk -> (message, recommendation); "{bus_factor}" is substituted
InterpretationTexts = dict[RiskLevel, tuple[str, str]]


def risk_level(bus_factor: int) -> RiskLevel:
    """Fixed bus factor -> risk lookup; 0 (empty input) falls into HIGH."""
    if bus_factor == 1:
        return RiskLevel.critical
    elif bus_factor <= 2:
        return RiskLevel.high
    elif bus_factor <= 4:
        return RiskLevel.moderate
    return RiskLevel.low


def interpret_results(bus_factor: int, texts: InterpretationTexts) -> Interpretation:
    risk = risk_level(bus_factor)
    message, recommendation = texts[risk]
    return Interpretation(
        risk=risk,
        message=message.format(bus_factor=bus_factor),
        recommendation=recommendation.format(bus_factor=bus_factor),
    )


def _percent(part: float, total: float) -> str:
    return f"{part / total * 100:.2f}" if total > 0 else "0.00"


def build_file_authorship_map(
    file_authorship: FileAuthorship,
    weighted_authorship: Optional[FileAuthorship] = None,
) -> dict[str, dict[str, FileAuthorshipShare]]:
    """Per-file contributor shares, with weighted shares when decay was applied."""
    shares: dict[str, dict[str, FileAuthorshipShare]] = {}
    for file, authors in file_authorship.items():
        total = sum(authors.values())
        weighted = (weighted_authorship or {}).get(file, {})
        weighted_total = sum(weighted.values())

        shares[file] = {}
        for author, lines in authors.items():
            share = FileAuthorshipShare(lines=lines, percentage=_percent(lines, total))
            if weighted_authorship is not None:
                weighted_lines = weighted.get(author, 0.0)
                share.weighted_lines = f"{weighted_lines:.2f}"
                share.weighted_percentage = _percent(weighted_lines, weighted_total)
            shares[file][author] = share
    return shares


def build_top_contributors(
    ranking: list[tuple[str, ContributorOwnership]],
    total_files: int,
    limit: int = TOP_CONTRIBUTORS,
) -> list[TopContributor]:
    top: list[TopContributor] = []
    for author, entry in ranking[:limit]:
        contributor = TopContributor(
            author=author,
            degree_of_authorship=f"{entry.doa * 100:.2f}%",
            files_owned=round(entry.doa * total_files),
        )
        if entry.recent_contributions is not None:
            contributor.recent_activity_score = f"{entry.recent_contributions:.0f}"
        top.append(contributor)
    return top


def build_report(
    data: AuthorshipData,
    removal: RemovalResult,
    ranking: list[tuple[str, ContributorOwnership]],
    file_ownership: FileOwnership,
    *,
    method: str,
    description: str,
    threshold: float,
    texts: InterpretationTexts,
    weighted_authorship: Optional[FileAuthorship] = None,
    metadata: Optional[AnalysisMetadata] = None,
) -> Report:
    """Assemble the report. Pure: nothing is printed or stored."""
    total_files = data.total_files
    return Report(
        repository_url=data.repository_url,
        summary=ReportSummary(
            bus_factor=removal.bus_factor,
            total_files=total_files,
            total_contributors=len(data.total_authorship),
            critical_contributors=list(removal.removed_contributors),
            filtered_files=len(data.filtered_files),
            ignore_extensions=list(data.ignore_extensions),
        ),
        analysis=AnalysisInfo(
            method=method,
            description=description,
            final_ownerless_ratio=removal.ownerless_ratio,
            threshold=threshold,
            metadata=metadata,
        ),
        top_contributors=build_top_contributors(ranking, total_files),
        file_ownership=dict(file_ownership),
        file_authorship_map=build_file_authorship_map(data.file_authorship, weighted_authorship),
        interpretation=interpret_results(removal.bus_factor, texts),
        errors=list(data.errors),
    )
