# src/vaultgraph/cli/app.py
"""Command-line interface for vaultgraph.

This module provides a thin Typer wrapper around the commands layer.
Each command:
1. Parses args (via Typer)
2. Calls commands module functions
3. Renders results with Rich
"""

from __future__ import annotations

import logging
from typing import NoReturn

try:
    import typer
    from rich.console import Console
    from rich.logging import RichHandler
    from rich.panel import Panel
    from rich.table import Table
except ImportError as e:
    raise SystemExit(
        "CLI requires additional dependencies.\nInstall with: pip install vaultgraph[cli]"
    ) from e

from vaultgraph import __version__
from vaultgraph.commands import activity, atom, claims, config_cmd, positions, redeem, triple
from vaultgraph.config import load_env_file

app = typer.Typer(
    name="vaultgraph",
    help="vaultgraph - read a semantic-triple knowledge graph and value its vaults.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"vaultgraph {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route vaultgraph logs through Rich; debug level with --verbose."""
    logger = logging.getLogger("vaultgraph")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show debug logs (requests, pagination, degraded lookups).",
    ),
) -> None:
    """vaultgraph - knowledge graph reader."""
    load_env_file()
    configure_logging(verbose)


def _fail(error: str | None, plain: bool) -> NoReturn:
    if plain:
        console.print(f"Error: {error}")
    else:
        console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


ENDPOINT_OPTION = typer.Option(
    None,
    "--endpoint",
    "-e",
    help="Query service endpoint (default: from config)",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config file",
)
PLAIN_OPTION = typer.Option(
    False,
    "--plain",
    help="Plain output (no colors/formatting)",
)


@app.command(name="positions")
def positions_cmd(
    account: str = typer.Argument(..., help="Account address"),
    endpoint: str = ENDPOINT_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """List an account's active positions with their net redeemable value."""
    result = positions.positions(account, config_path=config_file, endpoint=endpoint)

    if not result.success:
        _fail(result.error, plain)

    if not result.positions:
        console.print("No active positions.")
        raise typer.Exit(0)

    def value_of(value: str | None) -> str:
        if not result.valuation_enabled:
            return "-"
        return value or "unavailable"

    if plain:
        for p in result.positions:
            console.print(
                f"{p.term_id}\t{p.stance}\t{p.shares}\t{value_of(p.value)}\t{p.label}",
                highlight=False,
            )
        return

    table = Table(title=f"Positions of {account} ({len(result.positions)})")
    table.add_column("Term", style="dim", overflow="fold")
    table.add_column("Claim", style="cyan")
    table.add_column("Side")
    table.add_column("Shares", justify="right")
    table.add_column("Value", style="green", justify="right")

    for p in result.positions:
        side = {"For": "[green]For[/green]", "Against": "[red]Against[/red]"}.get(p.stance, "-")
        table.add_row(p.term_id, p.label, side, str(p.shares), value_of(p.value))

    console.print(table)


@app.command(name="activity")
def activity_cmd(
    account: str = typer.Argument(..., help="Account address"),
    limit: int = typer.Option(
        None,
        "--limit",
        "-n",
        help="Show only the most recent N records",
    ),
    endpoint: str = ENDPOINT_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Show an account's deposits and redemptions, newest first."""
    result = activity.activity(account, config_path=config_file, endpoint=endpoint, limit=limit)

    if not result.success:
        _fail(result.error, plain)

    if not result.activities:
        console.print("No activity.")
        raise typer.Exit(0)

    if plain:
        for a in result.activities:
            console.print(
                f"{a.created_at}\t{a.kind}\t{a.shares}\t{a.assets}\t{a.label}", highlight=False
            )
        return

    table = Table(title=f"Activity of {account} ({len(result.activities)})")
    table.add_column("Date", style="dim")
    table.add_column("Type")
    table.add_column("Claim", style="cyan")
    table.add_column("Shares", justify="right")
    table.add_column("Assets", style="green", justify="right")

    for a in result.activities:
        kind = "[green]deposit[/green]" if a.kind == "deposit" else "[yellow]redemption[/yellow]"
        table.add_row(a.created_at, kind, a.label, str(a.shares), a.assets)

    console.print(table)


@app.command(name="atom")
def atom_cmd(
    atom_id: str = typer.Argument(..., help="Atom id"),
    endpoint: str = ENDPOINT_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Show one atom with its market cap and description."""
    result = atom.atom(atom_id, config_path=config_file, endpoint=endpoint)

    if not result.success:
        _fail(result.error, plain)

    if not result.found:
        console.print(f"Atom not found: {atom_id}")
        raise typer.Exit(1)

    fields = [
        ("Label", result.label or "(none)"),
        ("Type", result.type or "(none)"),
        ("Creator", result.creator_id or "(unknown)"),
        ("Market cap", result.market_cap or "(unknown)"),
    ]
    if result.emoji:
        fields.insert(1, ("Emoji", result.emoji))

    if plain:
        console.print(f"Atom {result.atom_id}", highlight=False)
        for name, value in fields:
            console.print(f"  {name}: {value}", highlight=False)
        if result.description:
            console.print(f"  Description: {result.description}", highlight=False)
        return

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for name, value in fields:
        table.add_row(name, value)
    console.print(Panel(table, title=f"Atom {result.atom_id}", expand=False))
    if result.description:
        console.print(Panel(result.description, title="Description", expand=False))


@app.command(name="triple")
def triple_cmd(
    triple_id: str = typer.Argument(..., help="Triple (term) id"),
    account: str = typer.Option(
        None,
        "--account",
        "-a",
        help="Also show whether this account stakes for or against",
    ),
    endpoint: str = ENDPOINT_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Show one claim with its for/against position counts."""
    result = triple.triple(
        triple_id, account_id=account, config_path=config_file, endpoint=endpoint
    )

    if not result.success:
        _fail(result.error, plain)

    if not result.found or result.claim is None:
        console.print(f"Triple not found: {triple_id}")
        raise typer.Exit(1)

    claim = result.claim
    stance = None
    if result.account_id is not None:
        if not result.has_position:
            stance = "no position"
        else:
            stance = "for" if result.is_for else "against"

    if plain:
        console.print(f"{claim.subject} {claim.predicate} {claim.object}", highlight=False)
        console.print(f"  For: {claim.for_count}  Against: {claim.against_count}")
        if claim.market_cap:
            console.print(f"  Market cap: {claim.market_cap}", highlight=False)
        if stance:
            console.print(f"  {result.account_id}: {stance}", highlight=False)
        return

    console.print(
        f"[bold cyan]{claim.subject}[/bold cyan] [dim]{claim.predicate}[/dim] "
        f"[bold cyan]{claim.object}[/bold cyan]"
    )
    console.print(
        f"  [green]For: {claim.for_count}[/green]  [red]Against: {claim.against_count}[/red]"
    )
    if claim.market_cap:
        console.print(f"  Market cap: {claim.market_cap}")
    if stance:
        console.print(f"  [dim]{result.account_id}:[/dim] {stance}")


@app.command(name="claims")
def claims_cmd(
    subject: str = typer.Argument(..., help="Subject atom id (or account with --by-account)"),
    by_account: bool = typer.Option(
        False,
        "--by-account",
        help="List triples created by an account instead",
    ),
    endpoint: str = ENDPOINT_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """List claims about a subject with for/against position counts."""
    result = claims.claims(
        subject, config_path=config_file, endpoint=endpoint, by_account=by_account
    )

    if not result.success:
        _fail(result.error, plain)

    if not result.claims:
        console.print("No claims.")
        raise typer.Exit(0)

    if plain:
        for c in result.claims:
            console.print(
                f"{c.triple_id}\t{c.predicate}\t{c.object}\t{c.for_count}\t{c.against_count}",
                highlight=False,
            )
        return

    table = Table(title=f"Claims ({len(result.claims)})")
    table.add_column("Subject", style="cyan")
    table.add_column("Predicate", style="dim")
    table.add_column("Object", style="cyan")
    table.add_column("For", style="green", justify="right")
    table.add_column("Against", style="red", justify="right")

    for c in result.claims:
        table.add_row(c.subject, c.predicate, c.object, str(c.for_count), str(c.against_count))

    console.print(table)


@app.command(name="redeem-preview")
def redeem_preview_cmd(
    term_id: str = typer.Argument(..., help="Term id"),
    shares: int = typer.Argument(..., help="Shares to redeem (wei)"),
    curve: int = typer.Option(
        None,
        "--curve",
        help="Bonding curve id (default: from settings)",
    ),
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Preview the assets received for redeeming shares, after exit and protocol fees."""
    result = redeem.preview(term_id, shares, curve_id=curve, config_path=config_file)

    if not result.success:
        _fail(result.error, plain)

    rows = [
        ("Gross", result.gross_assets),
        ("Exit fee", result.exit_fee),
        ("Protocol fee", result.protocol_fee),
        ("Net", result.net_assets),
    ]

    if plain:
        for name, value in rows:
            console.print(f"{name}: {value}", highlight=False)
        return

    table = Table(title=f"Redeem {result.shares} shares (curve {result.curve_id})")
    table.add_column("", style="cyan")
    table.add_column("Amount", justify="right")
    for name, value in rows:
        table.add_row(name, value, style="bold green" if name == "Net" else None)
    console.print(table)


@app.command(name="redeem-shares")
def redeem_shares_cmd(
    term_id: str = typer.Argument(..., help="Term id"),
    amount: str = typer.Argument(..., help="Net amount to receive, in units (e.g. 1.5)"),
    max_shares: int = typer.Argument(..., help="Shares held; the result never exceeds it"),
    curve: int = typer.Option(
        None,
        "--curve",
        help="Bonding curve id (default: from settings)",
    ),
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Compute the shares to redeem to receive an amount after fees."""
    result = redeem.shares_for(
        term_id, amount, max_shares, curve_id=curve, config_path=config_file
    )

    if not result.success:
        _fail(result.error, plain)

    if plain:
        console.print(str(result.shares))
        return

    console.print(
        f"Redeem [bold green]{result.shares}[/bold green] shares to receive {result.target}"
    )
    if result.full_holding:
        console.print("[yellow]This uses your whole holding.[/yellow]")


@app.command(name="config")
def config_cmd_handler(
    config_file: str = CONFIG_OPTION,
) -> None:
    """Show current configuration settings."""
    result = config_cmd.config(config_path=config_file)

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    table = Table(title="vaultgraph Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source", style="dim")

    for setting in result.settings:
        table.add_row(setting.name, setting.value, setting.source)

    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    if result.config_path:
        console.print(f"\n[dim]Config file: {result.config_path}[/dim]")
    else:
        console.print("\n[dim]No config file found. Using env vars / defaults.[/dim]")

    console.print("\n[dim]Precedence: env var > yaml settings > default[/dim]")
