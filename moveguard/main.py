from __future__ import annotations

"""
Typer CLI entry point and orchestration of the analysis commands.

- `scan`: security findings for every .move file under the sources directory
- `gas profile|analyze|optimize`: per-function gas estimates, statistics
  over them, and ranked optimization suggestions
- `coverage`: heuristic test coverage as text, JSON or HTML

Each command builds a Config from its options, loads the corpus through
traversal + context, runs one analysis component and hands the result to
the reporting layer. Read failures abort the command with exit code 1.
"""

import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console

from moveguard.config import Config, get_default_config
from moveguard.context import SourceUnit, load_corpus
from moveguard.coverage.estimator import CoverageEstimator
from moveguard.gas.estimator import GasCostEstimator, filter_estimates, summarize_estimates
from moveguard.gas.optimizations import OptimizationAdvisor
from moveguard.reporting import console as console_report
from moveguard.reporting import export
from moveguard.rules.engine import SecurityRuleEngine
from moveguard.traversal import find_move_files

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

app = typer.Typer(help="MoveGuard - heuristic security, gas and coverage analysis for Sui Move packages.")

GAS_ACTIONS = ("profile", "analyze", "optimize")
COVERAGE_FORMATS = ("text", "json", "html")


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging once: DEBUG to stderr with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"moveguard {__version__}")
        raise typer.Exit()


@app.callback()
def cli(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    setup_logging(verbose)


def _build_config(**kwargs) -> Config:
    try:
        return get_default_config(**kwargs)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load_sources(config: Config) -> List[SourceUnit]:
    """Enumerate and read every Move file under config.source_dir; exit 1 on I/O failure."""
    try:
        return load_corpus(find_move_files(config.source_dir))
    except OSError as exc:
        _fail(exc)


def _fail(exc: Exception) -> NoReturn:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def scan(
    level: str = typer.Option("standard", "--level", "-l", help="Scan level (basic, standard, strict)."),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format (text, json)."),
    sources: Path = typer.Option(Path("sources"), "--sources", help="Directory holding .move sources."),
) -> None:
    """Security scan Move code with line-pattern rules."""
    config = _build_config(strictness=level, source_dir=sources, output_format=output_format)
    corpus = _load_sources(config)

    engine = SecurityRuleEngine(config.rules)
    logger.debug(
        "Enabled rules at %s: %s",
        config.strictness.value,
        [rule.id for rule in engine.active_rules(config.strictness)],
    )
    findings = engine.scan(corpus, config.strictness)

    if config.output_format == "json":
        typer.echo(export.dumps(export.scan_report(findings)))
    else:
        console_report.print_findings(findings, Console())


@app.command()
def gas(
    action: str = typer.Argument(..., help="Action (profile, analyze, optimize)."),
    function: Optional[str] = typer.Option(None, "--function", "-f", help="Only profile functions containing this name."),
    sources: Path = typer.Option(Path("sources"), "--sources", help="Directory holding .move sources."),
) -> None:
    """Estimate gas usage and suggest optimizations."""
    if action not in GAS_ACTIONS:
        raise typer.BadParameter(f"Unknown action: {action}. Available actions: {', '.join(GAS_ACTIONS)}")

    config = _build_config(source_dir=sources)
    corpus = _load_sources(config)
    console = Console()

    if action == "optimize":
        console_report.print_optimizations(OptimizationAdvisor().advise(corpus), console)
        return

    estimates = GasCostEstimator().estimate(corpus)
    if action == "profile":
        console_report.print_gas_profile(filter_estimates(estimates, function), console)
    else:
        console_report.print_gas_summary(summarize_estimates(estimates), console)


@app.command()
def coverage(
    output_format: str = typer.Option("html", "--format", "-f", help="Output format (html, text, json)."),
    output: Path = typer.Option(Path("./coverage"), "--output", "-o", help="Output directory for json/html."),
    sources: Path = typer.Option(Path("sources"), "--sources", help="Directory holding .move sources."),
    tests: Path = typer.Option(Path("tests"), "--tests", help="Directory holding .move tests."),
) -> None:
    """Estimate test coverage from source/test file pairing."""
    if output_format not in COVERAGE_FORMATS:
        raise typer.BadParameter(
            f"Unknown coverage format: {output_format} (expected one of: {', '.join(COVERAGE_FORMATS)})"
        )

    config = _build_config(source_dir=sources, test_dir=tests)
    try:
        report = CoverageEstimator(config.source_dir, config.test_dir).estimate()
        if output_format == "html":
            target = export.write_coverage_html(report, output)
        elif output_format == "json":
            target = export.write_coverage_json(report, output)
        else:
            console_report.print_coverage(report, Console())
            return
    except OSError as exc:
        _fail(exc)

    console_report.success(Console(), f"{output_format.upper()} report generated: {target}")


def main() -> None:
    """Entry point for `python -m moveguard.main` and the `moveguard` script."""
    app()


if __name__ == "__main__":
    main()
