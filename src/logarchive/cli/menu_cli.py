"""
Interactive, menu-driven front end.

The menu only accumulates choices in a RequestBuilder; every "run" builds a
fresh, immutable ArchiveRequest and hands it to the archiver.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt, IntPrompt, Confirm

from logarchive.archive import ArchiveRequest, ArchiveError
from logarchive.cli.archive_cli import run_request
from logarchive.cli.cron_cli import build_cron_line, install_cron_line, CrontabError
from logarchive.core.config import settings

logger = logging.getLogger(__name__)
console = Console()


class RequestBuilder:
    """Mutable menu state that produces ArchiveRequest values."""

    def __init__(self, days_logs: int, days_backups: int, delete_originals: bool = True):
        self.log_dir: Optional[Path] = None
        self.days_logs = days_logs
        self.days_backups = days_backups
        # The interactive flow deletes originals unless toggled off
        self.delete_originals = delete_originals

    def set_log_dir(self, value: str) -> bool:
        path = Path(value).expanduser()
        if not path.is_dir():
            self.log_dir = None
            return False
        self.log_dir = path
        return True

    def toggle_delete(self) -> bool:
        self.delete_originals = not self.delete_originals
        return self.delete_originals

    def build(self, log_dir: Optional[Path] = None) -> ArchiveRequest:
        source = log_dir or self.log_dir
        if source is None:
            raise ValueError("Log directory is not set")
        return ArchiveRequest(
            source_dir=source,
            retain_logs_days=self.days_logs,
            retain_archives_days=self.days_backups,
            delete_originals=self.delete_originals,
        )


def _ask_days(prompt: str, default: int) -> int:
    while True:
        value = IntPrompt.ask(prompt, default=default, console=console)
        if value >= 0:
            return value
        console.print("[bold red]Please enter a non-negative number.[/bold red]")


def _print_menu(builder: RequestBuilder) -> None:
    console.print("")
    console.print("[bold]==== Log Archive Tool ====[/bold]")
    console.print(f"1. Specify Log Directory          (current: {builder.log_dir or settings.default_menu_dir()})")
    console.print(f"2. Days to Keep Logs              (current: {builder.days_logs})")
    console.print(f"3. Days to Keep Backup Archives   (current: {builder.days_backups})")
    console.print(f"4. Toggle Delete Originals        (current: {str(builder.delete_originals).lower()})")
    console.print("5. Run Archiving Process")
    console.print(f"6. Setup Daily Cron ({settings.cron_hour:02d}:{settings.cron_minute:02d})")
    console.print("7. Exit")
    console.print("")


def _setup_cron(builder: RequestBuilder) -> None:
    if builder.log_dir is None:
        console.print(f"Tip: set log directory first (option 1). Using default: {settings.default_menu_dir()}")
    request = builder.build(log_dir=builder.log_dir or settings.default_menu_dir())

    when = f"{settings.cron_hour:02d}:{settings.cron_minute:02d}"
    if not Confirm.ask(f"Add the archiver to cron for daily execution at {when}?", console=console):
        console.print("Cron job not added.")
        return

    line = build_cron_line(request, settings.cron_hour, settings.cron_minute)
    try:
        added = install_cron_line(line)
    except (CrontabError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        return
    console.print("Cron job added:" if added else "Cron job already present:")
    console.print(f"  {line}", soft_wrap=True)


def interactive_menu():
    """Configure and run the archiver from an interactive menu."""
    builder = RequestBuilder(days_logs=settings.days_logs, days_backups=settings.days_backups)

    while True:
        _print_menu(builder)
        choice = Prompt.ask("Choose an option [1-7]", console=console)

        if choice == "1":
            value = Prompt.ask(
                "Enter the log directory",
                default=str(builder.log_dir or settings.default_menu_dir()),
                console=console,
            )
            if builder.set_log_dir(value):
                console.print(f"Log directory set to {builder.log_dir}")
            else:
                console.print("[bold red]Error:[/bold red] Log directory does not exist.")
        elif choice == "2":
            builder.days_logs = _ask_days("How many days of logs to keep before archiving?", builder.days_logs)
            console.print(f"Will archive files older than {builder.days_logs} days.")
        elif choice == "3":
            builder.days_backups = _ask_days("How many days of archives to keep?", builder.days_backups)
            console.print(f"Will delete bundles older than {builder.days_backups} days.")
        elif choice == "4":
            console.print(f"Delete originals set to: {str(builder.toggle_delete()).lower()}")
        elif choice == "5":
            if builder.log_dir is None:
                console.print("[bold red]Error:[/bold red] Log directory is not set. Please set it first.")
                continue
            try:
                run_request(builder.build())
            except ArchiveError as e:
                console.print(f"[bold red]Error ({e.kind}):[/bold red] {e}")
        elif choice == "6":
            _setup_cron(builder)
        elif choice == "7":
            console.print("Exiting...")
            break
        else:
            console.print("[bold red]Invalid option. Choose 1-7.[/bold red]")
