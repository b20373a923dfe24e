# cmdguard/safety/preview.py
"""
Rendering of command analyses for the terminal.
"""
from typing import Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cmdguard.context.environment import EnvProfile
from cmdguard.safety.classifier import classify_command
from cmdguard.safety.models import CommandAnalysis, SafetyLevel

# Safety level color mapping
LEVEL_COLORS = {
    SafetyLevel.SAFE: "green",
    SafetyLevel.CAUTION: "yellow",
    SafetyLevel.DANGEROUS: "bright_red",
    SafetyLevel.CRITICAL: "red",
}


def format_analysis(analysis: CommandAnalysis, env: Optional[EnvProfile] = None) -> Panel:
    """
    Format a command analysis into a rich Panel.

    Args:
        analysis: The analysis to show.
        env: Environment snapshot to mention, if any.

    Returns:
        A Panel ready to print.
    """
    color = LEVEL_COLORS[analysis.safety_level]

    summary = Table.grid(padding=(0, 2))
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Command", Text(analysis.command))
    summary.add_row("Operation", analysis.operation.value)
    summary.add_row("Safety Level", Text(analysis.safety_level.label, style=f"bold {color}"))
    if env is not None:
        summary.add_row("Environment", env.summary())

    parts = [summary]

    if analysis.affected_files:
        files = Table(title="Affected Files", show_header=False, box=None)
        files.add_column(style="dim")
        files.add_column()
        files.add_column()
        for i, path in enumerate(analysis.affected_files, start=1):
            mark = Text("✓", style="green") if path.exists() else Text("✗", style="red")
            files.add_row(str(i), mark, str(path))
        parts.append(files)

    if analysis.warnings:
        warnings = Text()
        for warning in analysis.warnings:
            warnings.append(f"• {warning}\n", style=color)
        parts.append(Text("Warnings", style="bold"))
        parts.append(warnings)

    return Panel(Group(*parts), title="Command Analysis", border_style=color, expand=False)


def preview_command_impact(command: str, console: Optional[Console] = None,
                           env: Optional[EnvProfile] = None) -> CommandAnalysis:
    """Classify a command and print its analysis."""
    console = console or Console()
    analysis = classify_command(command)
    console.print(format_analysis(analysis, env))
    return analysis
