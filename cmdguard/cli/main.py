# cmdguard/cli/main.py
"""
Main command-line interface for cmdguard.
"""
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from cmdguard import __version__
from cmdguard.cli import backups
from cmdguard.config import config_manager
from cmdguard.context.environment import detect_environment
from cmdguard.execution.backup import BackupError
from cmdguard.safety.gate import SafetyGate
from cmdguard.safety.classifier import classify_command
from cmdguard.safety.preview import format_analysis
from cmdguard.utils.logging import setup_logging, get_logger

# Create the app
app = typer.Typer(help="cmdguard: check shell commands and back up what they touch")
app.add_typer(backups.app, name="backups")
logger = get_logger(__name__)
console = Console()


def version_callback(value: bool):
    """Display version information and exit."""
    if value:
        console.print(f"cmdguard version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(
        False, "--debug", "-d", help="Enable debug mode"
    ),
    version: bool = typer.Option(
        False, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    backup_dir: Optional[Path] = typer.Option(
        None, "--backup-dir", help="Backup root directory (overrides configuration)"
    ),
):
    """cmdguard: check shell commands and back up what they touch"""
    config_manager.load_config()
    if debug:
        config_manager.config.debug = True
    if backup_dir is not None:
        config_manager.config.backup.backup_dir = backup_dir

    # Configure logging
    setup_logging(debug=config_manager.config.debug)


def _build_gate() -> SafetyGate:
    backup_config = config_manager.config.backup
    return SafetyGate(
        backups.get_backup_manager(),
        env_provider=detect_environment,
        keep_count=backup_config.keep_count if backup_config.auto_cleanup else None,
    )


@app.command(context_settings={"ignore_unknown_options": True})
def analyze(
    command: List[str] = typer.Argument(..., help="The shell command to analyze."),
):
    """Classify a command and show the files it would affect."""
    full_command = " ".join(command)
    analysis = classify_command(full_command)
    console.print(format_analysis(analysis, detect_environment()))


@app.command(context_settings={"ignore_unknown_options": True})
def protect(
    command: List[str] = typer.Argument(..., help="The shell command about to be executed."),
):
    """Back up the files a command would affect, if it needs a backup."""
    full_command = " ".join(command)

    try:
        gate = _build_gate()
        decision = gate.protect(full_command)
    except BackupError as e:
        logger.error(f"Backup failed for '{full_command}': {e}")
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        console.print("[bold red]Do not run the command: its files could not be backed up.[/bold red]")
        sys.exit(1)

    console.print(format_analysis(decision.analysis, gate.environment))

    if decision.backup is not None:
        console.print(
            f"[green]✓ Backed up {len(decision.backup.files)} file(s) as {decision.backup.id}[/green]"
        )
        console.print(f"  Restore with: [blue]cmdguard backups restore {decision.backup.id}[/blue]")
    else:
        console.print("[dim]No backup needed.[/dim]")


@app.command()
def env():
    """Show the detected environment."""
    profile = detect_environment()
    console.print(escape(profile.to_prompt_context()))
