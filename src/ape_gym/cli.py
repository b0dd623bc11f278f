#!/usr/bin/env python3
"""
Ape Gym CLI.

Runs the API server and the database chores around it.

Usage:
    apegym serve --port 4000      # Run the API with uvicorn
    apegym migrate                # Create/migrate the database and show the result
    apegym seed --admin           # Seed the admin account and default templates
    apegym leaderboard            # Print the current leaderboard
"""

import argparse
import logging
import sys
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .config import get_settings
from .db.database import GymDatabase
from .db.seed import seed_admin, seed_workout_templates
from .exceptions import ApeGymError
from .services.challenge_service import ChallengeService
from .utils.log_sanitizer import install_log_sanitizer

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    install_log_sanitizer()


def open_database(db_path: Optional[str]) -> GymDatabase:
    try:
        return GymDatabase(db_path)
    except ApeGymError as e:
        console.print(f"[red]Could not open database: {e.message}[/red]")
        sys.exit(1)


def cmd_serve(args):
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ape_gym.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def cmd_migrate(args):
    """Create the schema and apply migrations."""
    db = open_database(args.db)

    table = Table(title=f"Migrations ({db.db_path})", box=box.ROUNDED)
    table.add_column("Migration", style="cyan")
    table.add_column("Columns added")
    table.add_column("Tables rebuilt")

    for result in db.migration_results:
        table.add_row(
            result["migration"],
            ", ".join(result["columns_added"]) or "-",
            ", ".join(result["tables_rebuilt"]) or "-",
        )

    console.print(table)
    console.print(f"Tables: {', '.join(db.list_tables())}")
    console.print("[green]Database is up to date.[/green]")


def cmd_seed(args):
    """Seed the admin account and the default workout templates."""
    settings = get_settings()
    db = open_database(args.db)

    if args.admin:
        email = args.email or settings.seed_admin_email
        password = args.password or settings.seed_admin_password
        admin = seed_admin(db, email, password)
        if admin:
            console.print(f"[green]Admin created:[/green] {admin.email}")
        else:
            console.print(f"[yellow]Admin {email} already exists.[/yellow]")

    created = seed_workout_templates(db)
    if created:
        for title in created:
            console.print(f"[green]Template created:[/green] {title}")
    else:
        console.print("[yellow]No templates created (already present or no admin yet).[/yellow]")


def cmd_leaderboard(args):
    """Print the leaderboard for the configured window."""
    settings = get_settings()
    db = open_database(args.db)
    entries = ChallengeService(db).leaderboard()

    table = Table(
        title=f"Leaderboard (last {settings.leaderboard_window_days} days)",
        box=box.ROUNDED,
    )
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Email")
    table.add_column("Points", justify="right", style="green")

    for position, entry in enumerate(entries, start=1):
        table.add_row(str(position), entry.name, entry.email, str(entry.points))

    console.print(table)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Ape Gym - coaching API for gyms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  apegym serve --port 4000
  apegym migrate --db ./data.sqlite
  apegym seed --admin --email admin@example.com --password secret123
  apegym leaderboard
        """,
    )
    parser.add_argument("--db", help="SQLite file (defaults to DB_PATH)")

    # Also accepted after the command; SUPPRESS keeps a top-level --db when it is omitted there
    db_parent = argparse.ArgumentParser(add_help=False)
    db_parent.add_argument("--db", default=argparse.SUPPRESS, help="SQLite file (defaults to DB_PATH)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_p = subparsers.add_parser("serve", help="Run the API server")
    serve_p.add_argument("--host", help="Bind address (defaults to API_HOST)")
    serve_p.add_argument("--port", type=int, help="Port (defaults to API_PORT)")
    serve_p.add_argument("--reload", action="store_true", help="Reload on code changes")

    subparsers.add_parser("migrate", parents=[db_parent], help="Create and migrate the database")

    seed_p = subparsers.add_parser("seed", parents=[db_parent], help="Seed admin account and default templates")
    seed_p.add_argument("--admin", action="store_true", help="Also create the admin account")
    seed_p.add_argument("--email", help="Admin email (defaults to SEED_ADMIN_EMAIL)")
    seed_p.add_argument("--password", help="Admin password (defaults to SEED_ADMIN_PASSWORD)")

    subparsers.add_parser("leaderboard", parents=[db_parent], help="Show the current leaderboard")

    args = parser.parse_args()
    configure_logging(get_settings().log_level)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "migrate":
        cmd_migrate(args)
    elif args.command == "seed":
        cmd_seed(args)
    elif args.command == "leaderboard":
        cmd_leaderboard(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
