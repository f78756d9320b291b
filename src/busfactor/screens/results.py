"""Results screen — tabbed view of the bus factor report."""

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Label,
    Markdown,
    Static,
    TabbedContent,
    TabPane,
)

from busfactor.models import AnalysisRun, RiskLevel

RISK_ICONS = {
    RiskLevel.critical: "🔴",
    RiskLevel.high: "🟠",
    RiskLevel.moderate: "🔵",
    RiskLevel.low: "🟢",
}


def format_ratio(ratio: float | None) -> str:
    """Percentage for display; an undefined ratio is shown as n/a."""
    if ratio is None:
        return "n/a"
    return f"{ratio * 100:.2f}%"


class ResultsScreen(Screen):
    """Main results display."""

    CSS = """
    ResultsScreen {
        layout: vertical;
    }
    #results-header {
        height: 3;
        background: $primary;
        color: $text;
        text-align: center;
        padding: 1 2;
        text-style: bold;
    }
    .section-title {
        text-style: bold;
        margin: 1 0;
        color: $secondary;
    }
    .insight-card {
        border: round $primary-lighten-2;
        padding: 1 2;
        margin: 1 0;
        background: $surface;
        height: auto;
    }
    #contributors-table, #ownership-table {
        height: auto;
        max-height: 30;
        margin: 1 0;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("b", "go_back", "Back"),
    ]

    def __init__(self, result: AnalysisRun, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.result = result

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static(
            f"  🚌  {self.result.target}  ·  {self.result.method.upper()}  ",
            id="results-header",
        )

        with TabbedContent("📊 Summary", "👥 Contributors", "📁 File Ownership", "⚠ Errors"):
            with TabPane("📊 Summary"):
                yield from self._compose_summary()
            with TabPane("👥 Contributors"):
                yield from self._compose_contributors()
            with TabPane("📁 File Ownership"):
                yield from self._compose_ownership()
            with TabPane("⚠ Errors"):
                yield from self._compose_errors()

        yield Footer()

    # ── Summary tab ───────────────────────────────────────────────────────

    def _compose_summary(self) -> ComposeResult:
        report = self.result.report
        s = report.summary
        interp = report.interpretation
        with VerticalScroll():
            yield Static("SUMMARY", classes="section-title")
            yield Label(
                f"Bus Factor: {s.bus_factor}  ·  "
                f"Files: {s.total_files}  ·  "
                f"Contributors: {s.total_contributors}"
            )
            yield Label(
                f"Critical Contributors: {', '.join(s.critical_contributors) or '—'}"
            )

            yield Static("RISK ASSESSMENT", classes="section-title")
            icon = RISK_ICONS.get(interp.risk, "⚪")
            with Vertical(classes="insight-card"):
                yield Markdown(
                    f"**Risk Level:** {icon} {interp.risk.value}\n\n"
                    f"{interp.message}\n\n"
                    f"_{interp.recommendation}_"
                )

            a = report.analysis
            md = (
                f"**Method:** {a.method}\n\n"
                f"{a.description}\n\n"
                f"Ownerless files ratio: {format_ratio(a.final_ownerless_ratio)} "
                f"(threshold {a.threshold * 100:.0f}%)"
            )
            if a.metadata:
                md += (
                    f"\n\nDecay rate: {a.metadata.decay_rate}  ·  "
                    f"Window: {a.metadata.time_window_days} days"
                )
            yield Static("ANALYSIS", classes="section-title")
            yield Markdown(md)

    # ── Contributors tab ──────────────────────────────────────────────────

    def _compose_contributors(self) -> ComposeResult:
        top = self.result.report.top_contributors
        with VerticalScroll():
            yield Static("TOP CONTRIBUTORS (by Degree of Authorship)", classes="section-title")
            if not top:
                yield Markdown("> _No contributor owns any file._")
                return
            weighted = any(c.recent_activity_score is not None for c in top)
            table = DataTable(id="contributors-table")
            columns = ["#", "Contributor", "DOA", "Files Owned"]
            if weighted:
                columns.append("Recent Activity")
            table.add_columns(*columns)
            for i, c in enumerate(top, start=1):
                row = [str(i), c.author, c.degree_of_authorship, f"~{c.files_owned}"]
                if weighted:
                    row.append(c.recent_activity_score or "0")
                table.add_row(*row)
            yield table

    # ── File ownership tab ────────────────────────────────────────────────

    def _compose_ownership(self) -> ComposeResult:
        ownership = self.result.report.file_ownership
        with VerticalScroll():
            yield Static("FILE OWNERSHIP", classes="section-title")
            if not ownership:
                yield Markdown("> _No files analyzed._")
                return
            table = DataTable(id="ownership-table")
            table.add_columns("File", "Owner")
            for file, owner in sorted(ownership.items()):
                table.add_row(file, owner or "—")
            yield table

    # ── Errors tab ────────────────────────────────────────────────────────

    def _compose_errors(self) -> ComposeResult:
        errors = self.result.report.errors
        with VerticalScroll():
            yield Static("COLLECTION ERRORS", classes="section-title")
            if not errors:
                yield Markdown("> _No errors._")
                return
            yield Markdown("\n".join(f"- {e}" for e in errors[:200]))

    # ── Actions ───────────────────────────────────────────────────────────

    def action_go_back(self) -> None:
        self.app.pop_screen()
