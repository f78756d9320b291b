"""Main Textual TUI application for busfactor-analyzer."""

import git
from pydantic import ValidationError
from textual.app import App

from busfactor.analyzer import Analyzer
from busfactor.calculator import UnknownMethodError
from busfactor.models import AnalysisRun
from busfactor.screens.home import HomeScreen
from busfactor.screens.loading import LoadingScreen
from busfactor.screens.results import ResultsScreen


class BusFactorApp(App):
    """TUI application for repository bus factor analysis."""

    TITLE = "Bus Factor Analyzer"
    SUB_TITLE = "Ownership · Knowledge Decay · Risk"

    CSS = """
    Screen {
        background: $background;
    }
    """

    SCREENS = {
        "home": HomeScreen,
    }

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def on_mount(self) -> None:
        self.push_screen(HomeScreen())

    def run_analysis(self, target: str, method: str) -> None:
        """Kick off the analysis — called from HomeScreen."""
        loading = LoadingScreen(target, method)
        self.push_screen(loading)

        async def _do_work() -> None:
            def on_status(msg: str) -> None:
                self.call_from_thread(loading.update_status, msg, None)

            def on_progress(processed: int, total: int, path: str) -> None:
                pct = int(processed / total * 100) if total else 100
                self.call_from_thread(loading.update_progress, processed, total, path, pct)

            try:
                analyzer = Analyzer(on_status=on_status, on_progress=on_progress)
            except ValidationError as e:
                self.call_from_thread(
                    loading.update_status, f"❌ Invalid configuration: {e}", None
                )
                self.call_from_thread(self._show_error_back_button)
                return

            try:
                run = await analyzer.analyze(target, method)
                self.call_from_thread(loading.update_status, "Complete!", 100)
                self.call_from_thread(self._show_results, run)
            except UnknownMethodError as e:
                self.call_from_thread(loading.update_status, f"❌ {e}", None)
                self.call_from_thread(self._show_error_back_button)
            except git.exc.GitCommandError as e:
                self.call_from_thread(
                    loading.update_status,
                    f"❌ Could not clone '{target}'. Check the URL and your access "
                    f"(git exited with status {e.status}).",
                    None,
                )
                self.call_from_thread(self._show_error_back_button)
            except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
                self.call_from_thread(
                    loading.update_status,
                    f"❌ '{target}' is not a git repository.",
                    None,
                )
                self.call_from_thread(self._show_error_back_button)
            except Exception as e:
                self.call_from_thread(
                    loading.update_status,
                    f"❌ Unexpected error: {e}",
                    None,
                )
                self.call_from_thread(self._show_error_back_button)
            finally:
                await analyzer.close()

        self.run_worker(_do_work(), thread=True)

    def _show_results(self, run: AnalysisRun) -> None:
        """Replace loading screen with results."""
        self.pop_screen()  # Remove loading
        self.push_screen(ResultsScreen(run))

    def _show_error_back_button(self) -> None:
        """Add a back-button hint to the loading screen on error."""
        loading = self.screen
        if isinstance(loading, LoadingScreen):
            loading.set_phase("Press [b]  b  [/b] to go back and try again.")
