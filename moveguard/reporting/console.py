# Rich console output: format scan, gas and coverage results for terminal display.

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from moveguard.findings.models import (
    CoverageReport,
    Finding,
    GasEstimate,
    GasSummary,
    OptimizationSuggestion,
    Severity,
)
from moveguard.gas.optimizations import total_savings
from moveguard.rules.engine import count_by_severity, has_blocking_findings

# Severity → Rich style
SEVERITY_STYLE = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "bold bright_red",
    Severity.MEDIUM: "bold yellow",
    Severity.LOW: "bold blue",
    Severity.INFO: "bold cyan",
}

SEVERITY_LABEL = {
    Severity.CRITICAL: "critical issues",
    Severity.HIGH: "high severity issues",
    Severity.MEDIUM: "medium severity issues",
    Severity.LOW: "low severity issues",
    Severity.INFO: "informational",
}

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: Severity) -> str:
    return SEVERITY_STYLE.get(severity, DEFAULT_SEVERITY_STYLE)


def _coverage_style(percentage: float) -> str:
    if percentage >= 90.0:
        return "green"
    if percentage >= 70.0:
        return "yellow"
    return "red"


def success(console: Console, message: str) -> None:
    console.print(f"[bold green]✓[/bold green] {message}")


def info(console: Console, message: str) -> None:
    console.print(f"[bold blue]ℹ[/bold blue] {message}")


def warning(console: Console, message: str) -> None:
    console.print(f"[bold yellow]⚠[/bold yellow] {message}")


def print_findings(findings: Sequence[Finding], console: Optional[Console] = None) -> None:
    """
    Print a security scan report: per-severity summary counts, then every
    finding in discovery order, then a closing verdict.
    """
    console = console or Console()

    console.print()
    console.print(Panel("[bold]Security Scan Report[/bold]", box=box.ROUNDED, border_style="blue"))

    console.print("[bold]Summary:[/bold]")
    counts = count_by_severity(findings)
    for severity, count in counts.items():
        if count > 0:
            console.print(f"  [{_severity_style(severity)}]{count}[/] {SEVERITY_LABEL[severity]}")
    if not findings:
        console.print("  [green]No issues found.[/green]")
    console.print()

    for number, f in enumerate(findings, start=1):
        console.print(f"[bold]Issue #{number}[/bold]")
        console.print("  Severity: ", Text(f.severity.value, style=_severity_style(f.severity)), sep="")
        console.print("  Title: ", Text(f.title, style="bold"), sep="")
        console.print("  Location: ", Text(str(f.location), style="dim"), sep="")
        console.print(f"  Description: {f.description}", markup=False)
        console.print("  Recommendation: ", Text(f.recommendation, style="green"), sep="")
        console.print()

    if has_blocking_findings(findings):
        warning(console, "Critical or high severity issues found! Please review before deployment.")
    else:
        success(console, "No critical security issues found")


def print_gas_profile(estimates: Sequence[GasEstimate], console: Optional[Console] = None) -> None:
    console = console or Console()

    table = Table(title="Gas Usage Profile", header_style="bold magenta", box=box.SIMPLE_HEAD)
    table.add_column("Function", style="cyan")
    table.add_column("Total Gas", justify="right", style="yellow")
    table.add_column("Storage", justify="right", style="green")
    table.add_column("Computation", justify="right", style="blue")

    for e in estimates:
        table.add_row(e.function, f"{e.total} gas", f"{e.storage} gas", f"{e.computation} gas")

    console.print()
    console.print(table)
    info(console, "Tip: Use 'moveguard gas optimize' for optimization suggestions")


def print_gas_summary(summary: GasSummary, console: Optional[Console] = None) -> None:
    console = console or Console()

    if summary.total_functions == 0:
        warning(console, "No Move functions found in sources")
        return

    console.print()
    console.print("[bold]Gas Analysis Report[/bold]")
    console.print()
    console.print("[bold]Statistics:[/bold]")
    console.print(f"  Total functions analyzed: [cyan]{summary.total_functions}[/cyan]")
    console.print(f"  Average gas per function: [yellow]{summary.average_total} gas[/yellow]")
    if summary.highest is not None:
        console.print(f"  Highest gas usage: [red]{summary.highest.total} gas ({summary.highest.function})[/red]")
    if summary.lowest is not None:
        console.print(f"  Lowest gas usage: [green]{summary.lowest.total} gas ({summary.lowest.function})[/green]")
    console.print()

    if summary.hot_spots:
        console.print("[bold]Hot Spots:[/bold]")
        for number, spot in enumerate(summary.hot_spots, start=1):
            console.print(f"  {number}. [red]{spot.function}[/red] - {spot.reason}")
        console.print()

    if summary.efficient:
        console.print("[bold]Efficient Functions:[/bold]")
        for e in summary.efficient:
            console.print(f"  • [green]{e.function}[/green] - {e.total} gas")
        console.print()


def print_optimizations(suggestions: Sequence[OptimizationSuggestion], console: Optional[Console] = None) -> None:
    console = console or Console()

    if not suggestions:
        success(console, "No obvious optimization opportunities found!")
        console.print()
        info(console, "Your code appears to be well-optimized.")
        return

    console.print()
    console.print("[bold]Gas Optimization Suggestions:[/bold]")
    console.print()
    for number, s in enumerate(suggestions, start=1):
        console.print(Text(f"{number}. {s.title}", style="bold yellow"))
        console.print(f"   Location: {s.location}", markup=False)
        console.print(f"   Current: {s.current_description}", markup=False)
        console.print(f"   Suggestion: {s.recommendation}", markup=False)
        console.print(f"   Potential savings: ~{s.estimated_savings} gas per call")
        console.print()

    success(console, f"Total potential savings: ~{total_savings(suggestions)} gas per transaction")


def print_coverage(report: CoverageReport, console: Optional[Console] = None) -> None:
    console = console or Console()

    console.print()
    console.print(Panel("[bold]Test Coverage Report[/bold]", box=box.ROUNDED, border_style="blue"))
    console.print("[bold]Overall Coverage:[/bold]")
    console.print(
        f"  Lines: [green]{report.lines_covered} / {report.lines_total}[/green] ({report.line_percentage:.1f}%)"
    )
    console.print(
        f"  Functions: [green]{report.functions_covered} / {report.functions_total}[/green] "
        f"({report.function_percentage:.1f}%)"
    )

    table = Table(title="Coverage by Module", header_style="bold cyan", box=box.SIMPLE_HEAD)
    table.add_column("Module", style="cyan")
    table.add_column("Lines", justify="right")
    table.add_column("Functions", justify="right", style="green")

    for module in report.modules:
        line_pct = module.line_percentage
        table.add_row(
            _display_path(module.path),
            Text(f"{line_pct:.1f}%", style=_coverage_style(line_pct)),
            f"{module.function_percentage:.1f}%",
        )

    console.print()
    console.print(table)
    success(console, "Coverage report generated")
    info(console, "Tip: Aim for >80% coverage for production code")


def _display_path(path: str | Path) -> str:
    """Return a forward-slash display path."""
    return str(path).replace("\\", "/")
