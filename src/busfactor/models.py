"""Data models for busfactor-analyzer."""

import os
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Blame counts are ints, decayed counts are floats
LineCount = Union[int, float]

# file path -> contributor -> line count
FileAuthorship = dict[str, dict[str, LineCount]]

# file path -> dominant contributor, or None when nobody holds a plurality
FileOwnership = dict[str, Optional[str]]


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values pass through unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ── Configuration ─────────────────────────────────────────────────────────

class AnalysisConfig(BaseModel):
    """Tunable parameters for one analysis run."""

    model_config = ConfigDict(frozen=True)

    decay_rate: float = Field(default=0.5, ge=0)
    window_days: int = Field(default=548, gt=0)  # ~1.5 years
    threshold: float = Field(default=0.5, ge=0, le=1)

    @classmethod
    def from_env(cls) -> "AnalysisConfig":
        """Build a config, letting BUSFACTOR_* environment variables override defaults."""
        env_map = {
            "decay_rate": "BUSFACTOR_DECAY_RATE",
            "window_days": "BUSFACTOR_WINDOW_DAYS",
            "threshold": "BUSFACTOR_THRESHOLD",
        }
        values = {
            field: os.environ[var]
            for field, var in env_map.items()
            if os.environ.get(var, "").strip()
        }
        return cls(**values)


# ── Collaborator input ────────────────────────────────────────────────────

class CommitRecord(BaseModel):
    """One historical touch of a file by a contributor."""

    author: str
    timestamp: datetime
    revision: str = ""

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class AuthorshipData(BaseModel):
    """Per-line authorship gathered from a working copy."""

    file_authorship: FileAuthorship = Field(default_factory=dict)
    repo_path: Optional[str] = None
    repository_url: Optional[str] = None
    errors: list[str] = Field(default_factory=list)
    filtered_files: list[str] = Field(default_factory=list)
    ignore_extensions: list[str] = Field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.file_authorship)

    @property
    def total_authorship(self) -> dict[str, float]:
        """Lines per contributor across every file (contributors with no lines omitted)."""
        totals: dict[str, float] = {}
        for authors in self.file_authorship.values():
            for author, lines in authors.items():
                if lines > 0:
                    totals[author] = totals.get(author, 0) + lines
        return totals


# ── Intermediate results ──────────────────────────────────────────────────

class ContributorOwnership(BaseModel):
    """Degree-of-Authorship entry for one contributor."""

    doa: float = Field(default=0.0, ge=0, le=1)
    files_owned: int = Field(default=0, ge=0)
    # Only populated by the time-weighted method
    recent_contributions: Optional[float] = None
    total_contributions: Optional[float] = None


ContributorDOA = dict[str, ContributorOwnership]


class RemovalResult(BaseModel):
    """Outcome of the iterative contributor-removal simulation."""

    bus_factor: int = Field(default=0, ge=0)
    removed_contributors: list[str] = Field(default_factory=list)
    # None when there are no files: the ratio 0/0 is undefined
    ownerless_ratio: Optional[float] = None


# ── Report ────────────────────────────────────────────────────────────────

class RiskLevel(str, Enum):
    """Qualitative risk derived from the bus factor."""

    critical = "CRITICAL"
    high = "HIGH"
    moderate = "MODERATE"
    low = "LOW"


class ReportModel(BaseModel):
    """Base for report sections: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportSummary(ReportModel):
    bus_factor: int = 0
    total_files: int = 0
    total_contributors: int = 0
    critical_contributors: list[str] = Field(default_factory=list)
    filtered_files: int = 0
    ignore_extensions: list[str] = Field(default_factory=list)


class AnalysisMetadata(ReportModel):
    decay_rate: float
    time_window_days: int
    analysis_date: str


class AnalysisInfo(ReportModel):
    method: str
    description: str
    final_ownerless_ratio: Optional[float] = None
    threshold: float = 0.5
    metadata: Optional[AnalysisMetadata] = None


class TopContributor(ReportModel):
    author: str
    degree_of_authorship: str  # e.g. "37.50%"
    files_owned: int = 0
    recent_activity_score: Optional[str] = None


class FileAuthorshipShare(ReportModel):
    """One contributor's share of one file."""

    lines: LineCount = 0
    percentage: str = "0.00"
    weighted_lines: Optional[str] = None
    weighted_percentage: Optional[str] = None


class Interpretation(ReportModel):
    risk: RiskLevel
    message: str
    recommendation: str


class Report(ReportModel):
    """Complete bus factor report for one analysis run."""

    repository_url: Optional[str] = None
    summary: ReportSummary
    analysis: AnalysisInfo
    top_contributors: list[TopContributor] = Field(default_factory=list)
    file_ownership: FileOwnership = Field(default_factory=dict)
    file_authorship_map: dict[str, dict[str, FileAuthorshipShare]] = Field(default_factory=dict)
    interpretation: Interpretation
    errors: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialise using the camelCase field names of the report contract."""
        return self.model_dump(by_alias=True, mode="json")

    def to_json(self, indent: Optional[int] = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


class AnalysisRun(BaseModel):
    """A finished analysis as shown by the UI."""

    target: str
    method: str
    generated_at: datetime = Field(default_factory=datetime.now)
    report: Report
