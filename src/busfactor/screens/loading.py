"""Loading screen — blame/log progress while an analysis runs."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Footer, Header, Label, ProgressBar, Static

# Longest file path shown next to the counter
MAX_PATH = 50


def short_path(path: str, limit: int = MAX_PATH) -> str:
    return path if len(path) <= limit else path[:limit] + "…"


class LoadingScreen(Screen):
    """Shows the latest status line and the file currently being read."""

    BINDINGS = [
        ("b", "go_back", "Back"),
    ]

    CSS = """
    LoadingScreen {
        align: center middle;
    }
    #job {
        width: 80;
        height: auto;
        padding: 1 3;
        border: heavy $accent;
        background: $panel;
    }
    #job-title {
        text-style: bold;
        color: $accent;
    }
    #job-target {
        color: $text-muted;
        margin-bottom: 1;
    }
    #status-label {
        height: 1;
    }
    #file-row {
        height: 1;
        margin-top: 1;
    }
    #file-counter {
        width: 14;
        text-style: bold;
        color: $warning;
    }
    #file-name {
        width: 1fr;
        color: $text-muted;
    }
    #hint-label {
        margin-top: 1;
        text-style: italic;
    }
    """

    def __init__(self, target: str = "", method: str = "", **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.repo_target = target
        self.method_name = method

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="job"):
            yield Static(f"🚌  Bus factor · {self.method_name.upper() or '…'}", id="job-title")
            yield Label(self.repo_target, id="job-target", markup=False)
            yield Label("Preparing …", id="status-label", markup=False)
            yield ProgressBar(total=100, show_eta=False, id="progress-bar")
            with Horizontal(id="file-row"):
                yield Label("", id="file-counter", markup=False)
                yield Label("", id="file-name", markup=False)
            yield Label("", id="hint-label")
        yield Footer()

    def update_status(self, message: str, progress: int | None = None) -> None:
        """Show ``message`` and, when given, move the bar to ``progress`` percent."""
        try:
            self.query_one("#status-label", Label).update(message)
            if progress is not None:
                self.query_one("#progress-bar", ProgressBar).update(progress=progress)
        except NoMatches:
            pass  # screen already dismissed

    def update_progress(self, processed: int, total: int, path: str, progress: int) -> None:
        try:
            self.query_one("#file-counter", Label).update(f"[{processed}/{total}]")
            self.query_one("#file-name", Label).update(short_path(path))
            self.query_one("#progress-bar", ProgressBar).update(progress=progress)
        except NoMatches:
            pass

    def set_phase(self, phase: str) -> None:
        try:
            self.query_one("#hint-label", Label).update(phase)
        except NoMatches:
            pass

    def action_go_back(self) -> None:
        """Return to the home screen."""
        self.app.pop_screen()
