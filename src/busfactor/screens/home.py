"""Home screen — repository input and method selection."""

from textual import on
from textual.app import ComposeResult
from textual.containers import Center, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Label, Select, Static


class HomeScreen(Screen):
    """Initial screen to collect the repository and calculation method."""

    CSS = """
    HomeScreen {
        align: center middle;
    }
    #home-container {
        width: 72;
        height: auto;
        padding: 1 4;
        border: round $primary;
        background: $surface;
    }
    #title-art {
        text-align: center;
        color: $accent;
        margin-bottom: 0;
    }
    #subtitle {
        text-align: center;
        color: $text-muted;
        margin-bottom: 2;
    }
    .field-label {
        margin-top: 1;
        color: $text;
    }
    #repo-input {
        margin-bottom: 1;
    }
    #start-btn {
        margin-top: 2;
        width: 100%;
    }
    #error-label {
        color: $error;
        text-align: center;
        margin-top: 1;
    }
    """

    TITLE_ART = """

  ╭──────────────────────────────────────────────────────╮
  │                                                      │
  │   ┏┓ ╻ ╻┏━┓   ┏━╸┏━┓┏━╸╺┳╸┏━┓┏━┓                      │
  │   ┣┻┓┃ ┃┗━┓   ┣╸ ┣━┫┃   ┃ ┃ ┃┣┳┛                      │
  │   ┗━┛┗━┛┗━┛   ╹  ╹ ╹┗━╸ ╹ ┗━┛╹┗╸                      │
  │                                                      │
  │    How many developers can your project lose?        │
  ╰──────────────────────────────────────────────────────╯
"""

    METHOD_OPTIONS = [
        ("ABF — authorship-based", "abf"),
        ("JBF — time-weighted (knowledge decay)", "jbf"),
    ]

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Center():
            with Vertical(id="home-container"):
                yield Static(self.TITLE_ART, id="title-art")
                yield Static(
                    "Ownership · Knowledge Decay · Risk",
                    id="subtitle",
                )
                yield Label("Repository (git URL or local path):", classes="field-label")
                yield Input(
                    placeholder="e.g. https://github.com/expressjs/express.git",
                    id="repo-input",
                )
                yield Label("Method:", classes="field-label")
                yield Select(
                    self.METHOD_OPTIONS,
                    value="abf",
                    id="method-select",
                )
                yield Button("▶  Start Analysis", id="start-btn", variant="primary")
                yield Label("", id="error-label")
        yield Footer()

    def on_mount(self) -> None:
        """Focus the repo input on screen mount so paste works immediately."""
        self.query_one("#repo-input", Input).focus()

    @on(Button.Pressed, "#start-btn")
    def start_analysis(self) -> None:
        repo_input = self.query_one("#repo-input", Input)
        method_select = self.query_one("#method-select", Select)
        error_label = self.query_one("#error-label", Label)

        target = repo_input.value.strip()
        if not target:
            error_label.update("⚠  Enter a repository URL or a local path")
            return

        method = method_select.value
        if method is Select.BLANK:
            method = "abf"

        self.app.run_analysis(target, str(method))  # type: ignore[attr-defined]

    @on(Input.Submitted, "#repo-input")
    def submit_on_enter(self) -> None:
        self.start_analysis()
