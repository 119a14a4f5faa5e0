"""CLI commands for group balances and settlement suggestions."""

import logging
import sys
from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..config import Settings, load_settings
from ..exceptions import ConfigurationError
from ..models import GroupReport, GroupSnapshot
from ..snapshot import load_snapshot
from .calculator import is_settled
from .optimizer import apply_suggestions
from .service import SettlementService
from .ui import select_member_interactive

app = typer.Typer(
    name="settle",
    help="Show group balances and suggest payments to settle up",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def resolve_snapshot_path(snapshot: Path | None, settings: Settings) -> Path:
    """Use the given snapshot path, falling back to GROUPSPLIT_SNAPSHOT_PATH."""
    path = snapshot or settings.snapshot_path
    if path is None:
        raise ConfigurationError(
            "No snapshot file given. Pass a path or set GROUPSPLIT_SNAPSHOT_PATH."
        )
    return path


def _load(snapshot: Path | None) -> tuple[SettlementService, GroupSnapshot]:
    """Load settings and the group snapshot, and create the service."""
    settings = load_settings()
    group = load_snapshot(resolve_snapshot_path(snapshot, settings))
    return SettlementService(settings), group


def format_money(amount: Decimal, use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    The spaces ensure decimal points align in tables.
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            formatted = f"($[red]{abs_amount:,.2f}[/red])"
        else:
            formatted = f"(${abs_amount:,.2f})"
    else:
        if use_color:
            formatted = f" [green]${abs_amount:,.2f}[/green] "
        else:
            formatted = f" ${abs_amount:,.2f} "
    return formatted


def describe_balance(amount: Decimal) -> str:
    """Plain-language status of a balance."""
    if is_settled(amount):
        return "Settled up"
    if amount > 0:
        return f"Is owed ${amount:,.2f}"
    return f"Owes ${abs(amount):,.2f}"


def display_balances(
    service: SettlementService, group: GroupSnapshot, report: GroupReport
):
    """Display member balances in a table."""
    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Member", style="cyan", width=30)
    table.add_column("Balance", justify="right", width=14)
    table.add_column("Status", style="dim")

    for balance in sorted(report.balances, key=lambda b: b.amount, reverse=True):
        table.add_row(
            service.get_member_name(group, balance.user_id),
            format_money(balance.amount),
            describe_balance(balance.amount),
        )

    console.print(table)


def display_suggestions(report: GroupReport):
    """Display suggested payments and verify they settle the group."""
    if not report.suggestions:
        console.print("\n[bold green]All settled up![/bold green]")
        console.print("[dim]No payments needed. Everyone is even with the group.[/dim]")
        return

    table = Table(
        title="Suggested Payments", show_header=True, header_style="bold magenta"
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("From", style="red", width=25)
    table.add_column("To", style="green", width=25)
    table.add_column("Amount", justify="right", width=12)

    for idx, suggestion in enumerate(report.suggestions, start=1):
        table.add_row(
            str(idx),
            suggestion.from_name,
            suggestion.to_name,
            format_money(suggestion.amount, use_color=False),
        )

    console.print(table)

    console.print()
    console.print("[bold]Summary:[/bold]")
    console.print(f"  Total debt to settle: {format_money(report.total_debt)}")
    console.print(f"  Suggested payments: {len(report.suggestions)}")

    remaining = apply_suggestions(report.balances, report.suggestions)
    unsettled = {uid: amt for uid, amt in remaining.items() if not is_settled(amt)}
    if not unsettled:
        console.print("  [green]✓ Payments settle every balance[/green]")
    else:
        console.print(
            f"  [red]✗ {len(unsettled)} balances remain unsettled "
            f"(balances do not net to zero)[/red]"
        )


@app.command()
def balances(
    snapshot: Path | None = typer.Argument(
        None, help="Group snapshot JSON file (default: GROUPSPLIT_SNAPSHOT_PATH)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show each member's net balance.

    Positive balances are owed money by the group, negative balances owe
    money to the group.
    """
    setup_logging(verbose)

    try:
        service, group = _load(snapshot)
        report = service.build_report(group)

        if not report.balances:
            console.print("[yellow]No expenses in this group yet.[/yellow]")
            return

        display_balances(service, group, report)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def suggest(
    snapshot: Path | None = typer.Argument(
        None, help="Group snapshot JSON file (default: GROUPSPLIT_SNAPSHOT_PATH)"
    ),
    sort_by_magnitude: bool | None = typer.Option(
        None,
        "--sort-by-magnitude/--input-order",
        help="Match the largest debts first (default: GROUPSPLIT_SORT_BY_MAGNITUDE)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Suggest payments that settle every balance.

    Debtors are matched greedily with creditors, which keeps the number of
    payments low without guaranteeing the minimum.
    """
    setup_logging(verbose)

    try:
        service, group = _load(snapshot)
        report = service.build_report(group, sort_by_magnitude=sort_by_magnitude)

        display_suggestions(report)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def summary(
    snapshot: Path | None = typer.Argument(
        None, help="Group snapshot JSON file (default: GROUPSPLIT_SNAPSHOT_PATH)"
    ),
    member: str | None = typer.Option(
        None, "--member", "-m", help="Member ID (prompts if omitted)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show what one member is owed and owes."""
    setup_logging(verbose)

    try:
        service, group = _load(snapshot)

        member_id = member or select_member_interactive(group.members)
        if member_id is None:
            console.print("[yellow]No member selected.[/yellow]")
            return

        result = service.member_summary(group, member_id)

        console.print(f"\n[bold]{service.get_member_name(group, member_id)}[/bold]")
        console.print(f"  Balance: {format_money(result.total_balance)}")
        console.print(f"  Owed to you: {format_money(result.total_owed)}")
        console.print(f"  You owe: {format_money(result.total_owing)}")
        console.print(f"  [dim]{describe_balance(result.total_balance)}[/dim]")

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)
