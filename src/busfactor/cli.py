"""CLI entry point for busfactor-analyzer.

With no command the TUI is launched; ``abf`` and ``jbf`` run one analysis
headless and print the report.
"""

import asyncio
import json
from typing import NoReturn

import git
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from busfactor.models import Report, RiskLevel

app = typer.Typer(
    name="busfactor",
    help="Bus factor analyzer for git repositories",
    add_completion=False,
)

# Status goes to stderr so stdout carries only the report
console = Console(stderr=True)

RISK_STYLES = {
    RiskLevel.critical: "bold red",
    RiskLevel.high: "bold yellow",
    RiskLevel.moderate: "bold blue",
    RiskLevel.low: "bold green",
}


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    from dotenv import load_dotenv

    load_dotenv()  # Load .env file (e.g. GITHUB_TOKEN, BUSFACTOR_DECAY_RATE)

    if ctx.invoked_subcommand is not None:
        return

    from busfactor.app import BusFactorApp

    BusFactorApp().run()


def display_report(report: Report, summary_only: bool = False) -> None:
    """Human-readable report on stdout."""
    out = Console()
    s = report.summary
    out.print("\n[bold blue]📊 Analysis Results[/bold blue]\n")
    out.print("[bold]Summary:[/bold]")
    out.print(f"  Bus Factor: [bold yellow]{s.bus_factor}[/bold yellow]")
    out.print(f"  Total Files: {s.total_files}")
    out.print(f"  Total Contributors: {s.total_contributors}")
    out.print(f"  Critical Contributors: {escape(', '.join(s.critical_contributors))}\n")
    if summary_only:
        return

    interp = report.interpretation
    out.print("[bold]Risk Assessment:[/bold]")
    out.print(f"  Risk Level: [{RISK_STYLES[interp.risk]}]{interp.risk.value}[/]")
    out.print(f"  {escape(interp.message)}\n")

    out.print("[bold]Top Contributors (by Degree of Authorship):[/bold]")
    for i, c in enumerate(report.top_contributors, start=1):
        out.print(f"  {i}. {escape(c.author)}")
        out.print(f"     DOA: {c.degree_of_authorship} (owns ~{c.files_owned} files)")

    ratio = report.analysis.final_ownerless_ratio
    out.print(f"\n[dim]Analysis Method: {escape(report.analysis.method)}[/dim]")
    out.print(
        "[dim]Ownerless Files Ratio: "
        f"{'n/a' if ratio is None else f'{ratio * 100:.2f}%'}[/dim]\n"
    )


def _fail(message: str, json_output: bool, quiet: bool) -> NoReturn:
    if json_output and quiet:
        typer.echo(json.dumps({"error": message}))
    else:
        console.print(f"[red]❌ Error:[/red] {escape(message)}")
    raise typer.Exit(1)


def _analyze(target: str, method: str, json_output: bool, quiet: bool, summary: bool) -> None:
    from busfactor.analyzer import Analyzer

    def on_status(msg: str) -> None:
        if not quiet:
            console.print(msg, markup=False, highlight=False)

    async def _run() -> Report:
        analyzer = Analyzer(on_status=on_status)
        try:
            run = await analyzer.analyze(target, method)
        finally:
            await analyzer.close()
        return run.report

    if not quiet:
        console.print("\n[bold blue]🚌 Bus Factor Analyzer[/bold blue]\n")

    try:
        report = asyncio.run(_run())
    except ValidationError as e:
        _fail(f"Invalid configuration: {e}", json_output, quiet)
    except git.exc.GitCommandError as e:
        _fail(
            f"Could not clone '{target}'. Check the URL and your access "
            f"(git exited with status {e.status}).",
            json_output,
            quiet,
        )
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
        _fail(f"'{target}' is not a git repository.", json_output, quiet)

    if json_output:
        typer.echo(report.to_json(indent=None if quiet else 2))
    elif quiet:
        typer.echo(report.summary.bus_factor)
    else:
        display_report(report, summary_only=summary)


def _command(method: str, help_text: str) -> None:
    @app.command(method, help=help_text)
    def _cmd(
        repo: str = typer.Argument(..., help="Repository URL or local path"),
        json_output: bool = typer.Option(False, "--json", "-j", help="Output results as JSON"),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Output only the bus factor value"),
        summary: bool = typer.Option(False, "--summary", "-s", help="Show only summary information"),
    ) -> None:
        _analyze(repo, method, json_output, quiet, summary)


_command("abf", "Analyze bus factor using the ABF (Authorship-Based Factor) method")
_command("jbf", "Analyze bus factor using the JBF (time-weighted) method")


def main() -> None:
    """Launch the TUI, or run a headless analysis when a method is given."""
    app()


if __name__ == "__main__":
    main()
