"""Command-line interface for running the archiver and inspecting its output."""

import time
from typing import Optional
from pathlib import Path
from datetime import datetime

import typer
from pydantic import ValidationError
from rich.table import Table
from rich.console import Console

from logarchive.archive import (
    run_archive,
    ArchiveRequest,
    ArchiveResult,
    ArchiveError,
)
from logarchive.archive.errors import CONFIGURATION_ERRORS
from logarchive.archive.retention import list_bundles
from logarchive.archive.run_log import read_run_records
from logarchive.cli import configure_logging
from logarchive.core.config import settings
from logarchive.core.settings import RUN_LOG_NAME, SECONDS_PER_DAY

app = typer.Typer(help="Archive aging log files and inspect existing bundles")
console = Console()

EXIT_CONFIG_ERROR = 1
EXIT_WRITE_ERROR = 2


def exit_code_for(error: ArchiveError) -> int:
    return EXIT_CONFIG_ERROR if isinstance(error, CONFIGURATION_ERRORS) else EXIT_WRITE_ERROR


def print_result(result: ArchiveResult) -> None:
    """Print the end-of-run summary."""
    if result.bundle_path:
        console.print(f"[bold]Archive:[/bold] {result.bundle_path}")
    else:
        console.print("[yellow]Nothing to archive.[/yellow]")
    console.print(f"[bold]Files archived:[/bold] {result.file_count}")
    console.print(f"[bold]Bytes written:[/bold] {result.bytes_written}")
    if result.deleted_original_count:
        console.print(f"[bold]Originals deleted:[/bold] {result.deleted_original_count}")
    console.print(f"[bold]Expired bundles pruned:[/bold] {result.pruned_archive_count}")
    if result.run_log_path:
        console.print(f"[bold]Run log:[/bold] {result.run_log_path}")
    for warning in result.warnings:
        console.print(f"[bold yellow]Warning:[/bold yellow] {warning}")


def run_request(request: ArchiveRequest) -> ArchiveResult:
    """Run one archival pass and print its summary. ArchiveError propagates."""
    result = run_archive(request)
    print_result(result)
    return result


@app.command("run")
def run_command(
    log_dir: Optional[Path] = typer.Option(
        settings.log_dir, "--log-dir", help="Source log directory (e.g. /var/log)"
    ),
    dest: Optional[Path] = typer.Option(
        settings.dest_dir, "--dest", help="Destination for bundles (default: <log-dir>-archives)"
    ),
    days_logs: int = typer.Option(
        settings.days_logs, "--days-logs", min=0, help="Archive files older than N days"
    ),
    days_backups: int = typer.Option(
        settings.days_backups, "--days-backups", min=0, help="Delete bundles older than N days"
    ),
    delete_originals: bool = typer.Option(
        settings.delete_originals, "--delete-originals/--keep-originals",
        help="Delete the archived originals after the bundle is committed"
    ),
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level"),
):
    """Archive files older than N days into a timestamped .tar.gz bundle."""
    try:
        configure_logging(log_level)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    if log_dir is None:
        console.print("[bold red]Error:[/bold red] --log-dir is required (or set LOGARCHIVE_LOG_DIR)")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    try:
        request = ArchiveRequest(
            source_dir=log_dir,
            dest_dir=dest,
            retain_logs_days=days_logs,
            retain_archives_days=days_backups,
            delete_originals=delete_originals,
        )
    except ValidationError as e:
        console.print(f"[bold red]Invalid options:[/bold red] {e}")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    try:
        run_request(request)
    except ArchiveError as e:
        console.print(f"[bold red]Error ({e.kind}):[/bold red] {e}")
        raise typer.Exit(exit_code_for(e))


@app.command("bundles")
def list_bundles_command(
    dest: Path = typer.Argument(..., help="Destination directory holding the bundles"),
):
    """List committed bundles with their size and age."""
    bundles = list_bundles(dest)
    if not bundles:
        console.print(f"No bundles found in {dest}")
        return

    now = time.time()
    table = Table(title=f"Bundles in {dest}")
    table.add_column("Bundle", style="cyan")
    table.add_column("Size (bytes)", justify="right", style="magenta")
    table.add_column("Modified", style="green")
    table.add_column("Age (days)", justify="right", style="yellow")

    for bundle in bundles:
        st = bundle.stat()
        table.add_row(
            bundle.name,
            str(st.st_size),
            datetime.fromtimestamp(st.st_mtime).strftime('%Y-%m-%d %H:%M:%S'),
            f"{(now - st.st_mtime) / SECONDS_PER_DAY:.1f}",
        )

    console.print(table)


@app.command("history")
def history_command(
    dest: Path = typer.Argument(..., help="Destination directory holding archive.log"),
    limit: int = typer.Option(10, "--limit", "-n", help="Number of runs to show"),
):
    """Show the most recent runs recorded in the destination's run log."""
    records = read_run_records(dest / RUN_LOG_NAME)
    if not records:
        console.print(f"No runs recorded in {dest / RUN_LOG_NAME}")
        return

    table = Table(title=f"Recent runs for {dest}")
    table.add_column("Time", style="green")
    table.add_column("Source")
    table.add_column("Bundle", style="cyan")
    table.add_column("Files", justify="right", style="magenta")
    table.add_column("Bytes", justify="right")
    table.add_column("Delete originals", style="yellow")

    for record in records[-limit:]:
        table.add_row(
            record.timestamp.strftime('%Y-%m-%d %H:%M:%S'),
            str(record.source_dir),
            record.bundle_path.name if record.bundle_path else "-",
            str(record.file_count),
            str(record.size_bytes),
            "yes" if record.delete_originals else "no",
        )

    console.print(table)

    if len(records) > limit:
        console.print(f"\nShowing {limit} of {len(records)} runs. Use --limit to show more.")
