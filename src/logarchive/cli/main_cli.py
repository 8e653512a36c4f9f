"""
Top-level CLI that aggregates sub-apps from archive_cli and cron_cli.
"""

import logging
import typer
from logarchive.cli.archive_cli import app as archive_app
from logarchive.cli.cron_cli import app as cron_app
from logarchive.cli.menu_cli import interactive_menu


logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(name)s - %(message)s"
)

main_app = typer.Typer(help="logarchive CLI")

# Add subcommands as Typer sub-apps:
main_app.add_typer(archive_app, name="archive")
main_app.add_typer(cron_app, name="cron")
main_app.command("menu")(interactive_menu)


def main():
    main_app()

if __name__ == "__main__":
    main()
