"""
Crontab integration.

Installs a daily line that invokes ``logarchive archive run`` with a fixed set
of options. The archiver itself has no idea how it was triggered.
"""

import sys
import shlex
import shutil
import logging
import subprocess
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from logarchive.archive import ArchiveRequest
from logarchive.core.config import settings

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(help="Schedule the archiver with cron")


class CrontabError(Exception):
    """Raised when the crontab executable is missing or rejects the update."""


def archiver_executable() -> str:
    """Absolute path of the installed ``logarchive`` script, falling back to argv[0]."""
    found = shutil.which("logarchive")
    if found:
        return found
    return str(Path(sys.argv[0]).resolve())


def build_cron_line(request: ArchiveRequest, hour: int, minute: int, executable: Optional[str] = None) -> str:
    """
    Render the crontab entry that runs ``request`` daily at hour:minute.

    Paths are written absolute because cron starts jobs from the home directory.
    """
    command = [
        executable or archiver_executable(),
        "archive", "run",
        "--log-dir", str(Path(request.source_dir).expanduser().resolve()),
    ]
    if request.dest_dir is not None:
        command += ["--dest", str(Path(request.dest_dir).expanduser().resolve())]
    command += [
        "--days-logs", str(request.retain_logs_days),
        "--days-backups", str(request.retain_archives_days),
        "--delete-originals" if request.delete_originals else "--keep-originals",
    ]
    return f"{minute} {hour} * * * " + " ".join(shlex.quote(part) for part in command)


def read_crontab() -> List[str]:
    """Current user's crontab lines; an absent crontab is empty."""
    if shutil.which("crontab") is None:
        raise CrontabError("crontab executable not found")
    proc = subprocess.run(["crontab", "-l"], capture_output=True, text=True)
    if proc.returncode != 0:
        # `crontab -l` exits non-zero when the user has no crontab yet
        return []
    return proc.stdout.splitlines()


def install_cron_line(line: str) -> bool:
    """
    Append ``line`` to the user's crontab.

    Returns:
        False if an identical line was already installed, True otherwise
    """
    current = read_crontab()
    if line in current:
        return False

    content = "\n".join(current + [line]) + "\n"
    proc = subprocess.run(["crontab", "-"], input=content, capture_output=True, text=True)
    if proc.returncode != 0:
        raise CrontabError(proc.stderr.strip() or "crontab rejected the new entry")
    logger.info(f"Installed cron entry: {line}")
    return True


@app.command("install")
def install_command(
    log_dir: Path = typer.Option(settings.default_menu_dir(), "--log-dir", help="Source log directory"),
    dest: Optional[Path] = typer.Option(settings.dest_dir, "--dest", help="Destination for bundles"),
    days_logs: int = typer.Option(settings.days_logs, "--days-logs", min=0),
    days_backups: int = typer.Option(settings.days_backups, "--days-backups", min=0),
    delete_originals: bool = typer.Option(
        True, "--delete-originals/--keep-originals", help="Delete archived originals on each run"
    ),
    hour: int = typer.Option(settings.cron_hour, "--hour", min=0, max=23),
    minute: int = typer.Option(settings.cron_minute, "--minute", min=0, max=59),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the entry without installing it"),
):
    """Add a daily archiver run to the current user's crontab."""
    request = ArchiveRequest(
        source_dir=log_dir,
        dest_dir=dest,
        retain_logs_days=days_logs,
        retain_archives_days=days_backups,
        delete_originals=delete_originals,
    )
    line = build_cron_line(request, hour, minute)

    if dry_run:
        console.print(line, soft_wrap=True)
        return

    try:
        added = install_cron_line(line)
    except (CrontabError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if added:
        console.print("[green]Cron job added:[/green]")
    else:
        console.print("[yellow]Cron job already present:[/yellow]")
    console.print(f"  {line}", soft_wrap=True)


@app.command("show")
def show_command():
    """Show crontab entries that invoke the archiver."""
    try:
        lines = [line for line in read_crontab() if "logarchive" in line]
    except CrontabError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not lines:
        console.print("No archiver entries in crontab.")
        return
    for line in lines:
        console.print(line, soft_wrap=True)
