"""CLI for groupsplit."""

import sys
from pathlib import Path

import typer

from .config import load_settings
from .settle.calculator import verify_split_totals
from .settle.cli import app as settle_app
from .settle.cli import console, resolve_snapshot_path, setup_logging
from .snapshot import load_snapshot

app = typer.Typer(
    name="groupsplit",
    help="Group expense balances and settle-up suggestions",
)

app.add_typer(settle_app, name="settle", help="Balances and settlement suggestions")


@app.command()
def check(
    snapshot: Path | None = typer.Argument(
        None, help="Group snapshot JSON file (default: GROUPSPLIT_SNAPSHOT_PATH)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Report expenses whose participant shares don't add up to the total."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        group = load_snapshot(resolve_snapshot_path(snapshot, settings))

        mismatched = verify_split_totals(group.expenses)
        if not mismatched:
            console.print(
                f"[green]✓ All {len(group.expenses)} expenses add up[/green]"
            )
            return

        console.print(
            f"[yellow]{len(mismatched)} expenses have shares that don't add up:"
            f"[/yellow]"
        )
        for expense_id in mismatched:
            console.print(f"  - {expense_id}")
        sys.exit(1)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    app()
