# cmdguard/cli/backups.py
"""
CLI commands for managing backups.
"""
import sys
from typing import NoReturn, Optional

import typer
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from cmdguard.config import config_manager
from cmdguard.execution.backup import (
    BackupEntry, BackupError, BackupIntegrityError, BackupManager,
)
from cmdguard.utils.logging import get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(help="List, restore and prune backups")


def get_backup_manager() -> BackupManager:
    """Build a backup manager for the configured backup root."""
    return BackupManager(config_manager.config.backup.backup_dir)


def fail(message: str) -> NoReturn:
    """Report an error and exit with a non-zero status."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    sys.exit(1)


def _entry_panel(entry: BackupEntry) -> Panel:
    table = Table(show_header=True, box=None)
    table.add_column("Original", style="cyan")
    table.add_column("Backup copy", style="white")
    table.add_column("SHA-256", style="dim")
    for f in entry.files:
        table.add_row(str(f.original_path), str(f.backup_path), f.file_hash[:16])

    header = (
        f"[bold]ID:[/bold] {entry.id}\n"
        f"[bold]Created:[/bold] {entry.timestamp}\n"
        f"[bold]Command:[/bold] {escape(entry.command)}\n"
        f"[bold]Files:[/bold] {len(entry.files)}"
    )
    return Panel(Group(header, table), title=escape(entry.description), expand=False)


@app.command("list", help="List backups, most recent first")
def list_backups(
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum number of backups to show"),
):
    """List backups."""
    try:
        entries = get_backup_manager().list_backups()
    except BackupError as e:
        fail(str(e))

    if not entries:
        console.print("[yellow]No backups found.[/yellow]")
        return

    table = Table(title="Backups")
    table.add_column("ID", style="cyan")
    table.add_column("Timestamp", style="green")
    table.add_column("Files", style="blue", justify="right")
    table.add_column("Command", style="white")

    for entry in entries[:limit]:
        table.add_row(entry.id, entry.timestamp, str(len(entry.files)), escape(entry.command))

    console.print(table)

    if len(entries) > limit:
        console.print(f"[dim]... and {len(entries) - limit} more[/dim]")

    console.print("\n[bold]Use the following command to restore a backup:[/bold]")
    console.print("  [blue]cmdguard backups restore <ID>[/blue]")


@app.command("show", help="Show the details of one backup")
def show_backup(
    backup_id: str = typer.Argument(..., help="ID of the backup"),
):
    """Show one backup."""
    try:
        entry = get_backup_manager().get_backup_entry(backup_id)
    except BackupError as e:
        fail(str(e))

    console.print(_entry_panel(entry))


@app.command("restore", help="Restore the files of a backup")
def restore_backup(
    backup_id: str = typer.Argument(..., help="ID of the backup to restore"),
    verify: Optional[bool] = typer.Option(
        None, "--verify/--no-verify", help="Check content digests before restoring"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
):
    """Restore a backup over the original files."""
    if verify is None:
        verify = config_manager.config.backup.verify_on_restore

    try:
        manager = get_backup_manager()
        entry = manager.get_backup_entry(backup_id)
        if not force:
            console.print(_entry_panel(entry))
            if not Confirm.ask("Overwrite the original files with this backup?", default=False):
                console.print("[yellow]Restore cancelled.[/yellow]")
                return

        restored = manager.restore_backup(backup_id, verify=verify)
    except BackupIntegrityError as e:
        fail(f"{e}. Nothing was restored.")
    except BackupError as e:
        fail(str(e))

    for path in restored:
        console.print(f"[green]✓[/green] Restored: {path}")
    missing = len(entry.files) - len(restored)
    if missing:
        console.print(f"[yellow]⚠ {missing} backup file(s) were missing and skipped.[/yellow]")
    console.print(f"[green]✓ Backup {backup_id} restored successfully[/green]")


@app.command("verify", help="Check a backup's copies against their digests")
def verify_backup(
    backup_id: str = typer.Argument(..., help="ID of the backup to check"),
):
    """Verify a backup."""
    try:
        damaged = get_backup_manager().verify_backup(backup_id)
    except BackupError as e:
        fail(str(e))

    if not damaged:
        console.print(f"[green]✓ All files of backup {backup_id} are intact[/green]")
        return

    for f in damaged:
        console.print(f"[red]✗[/red] {f.backup_path} (original: {f.original_path})")
    fail(f"{len(damaged)} file(s) of backup {backup_id} are missing or altered")


@app.command("delete", help="Delete a backup")
def delete_backup(
    backup_id: str = typer.Argument(..., help="ID of the backup to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
):
    """Delete a backup and its files."""
    try:
        manager = get_backup_manager()
        manager.get_backup_entry(backup_id)
        if not force and not Confirm.ask(f"Delete backup {backup_id}?", default=False):
            console.print("[yellow]Delete cancelled.[/yellow]")
            return
        manager.delete_backup(backup_id)
    except BackupError as e:
        fail(str(e))

    console.print(f"[green]✓ Backup {backup_id} deleted[/green]")


@app.command("cleanup", help="Delete the oldest backups beyond a count")
def cleanup_backups(
    keep: Optional[int] = typer.Option(None, "--keep", "-k", min=0, help="Number of backups to keep"),
):
    """Prune old backups."""
    if keep is None:
        keep = config_manager.config.backup.keep_count

    try:
        deleted = get_backup_manager().cleanup_old_backups(keep)
    except BackupError as e:
        fail(str(e))

    console.print(f"[green]✓ Cleaned up {len(deleted)} old backup(s)[/green]")
