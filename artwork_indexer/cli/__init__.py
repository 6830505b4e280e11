"""
Command Line Interface for the Artwork Indexer.
"""

from pathlib import Path
from typing import Dict, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..chain import ContractReader, NullContractReader, Web3ContractReader
from ..config import get_settings
from ..data.models.events import load_events
from ..db.base import drop_database, get_database_url, get_session_local, init_database
from ..db.models import AccountModel, ArtworkModel, BidLogModel
from ..db.services import SqlEntityStore
from ..dispatcher import DispatchStats, EventDispatcher
from ..logging_config import configure_logging
from ..metadata import IpfsClient, MetadataResolver
from ..reconciler import ArtworkReconciler
from ..store import EntityStore, InMemoryEntityStore

app = typer.Typer(help="Artwork Indexer - reconcile NFT contract events into artwork state")
console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Log level (default: from config)"),
    log_format: Optional[str] = typer.Option(None, help="json or console (default: from config)"),
):
    """Configure logging for every command."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level, log_format or settings.log_format)


@app.command()
def init_db(
    database_url: Optional[str] = typer.Option(None, help="Database URL (default: from config)"),
):
    """Create the artwork, account and bid tables."""
    init_database(database_url)
    console.print(f"✅ Database initialized at {get_database_url(database_url)}")


@app.command()
def drop_db(
    database_url: Optional[str] = typer.Option(None, help="Database URL (default: from config)"),
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt"),
):
    """Drop all indexer tables."""
    if not yes:
        typer.confirm("Drop all artwork, account and bid tables?", abort=True)
    drop_database(database_url)
    console.print("🗑️ Database tables dropped")


def _build_reader(rpc_url: Optional[str]) -> ContractReader:
    if rpc_url:
        return Web3ContractReader(rpc_url)
    console.print("⚠️ No RPC URL configured; minted artworks will be marked broken")
    return NullContractReader()


def _run(store: EntityStore, reader: ContractReader, resolver: MetadataResolver, events_file: Path) -> DispatchStats:
    dispatcher = EventDispatcher(ArtworkReconciler(store, reader, resolver))
    with events_file.open("r", encoding="utf-8") as fh:
        return dispatcher.dispatch(load_events(fh))


def _print_summary(stats: DispatchStats, totals: Dict[str, int]) -> None:
    table = Table(title="Replay Summary", show_header=True, header_style="bold magenta")
    table.add_column("Event", style="cyan")
    table.add_column("Applied", style="green")
    table.add_column("Skipped", style="yellow")

    for event_type in sorted(set(stats.handled) | set(stats.skipped)):
        table.add_row(
            event_type,
            str(stats.handled.get(event_type, 0)),
            str(stats.skipped.get(event_type, 0)),
        )

    console.print(table)
    console.print(
        f"Artworks: {totals['artworks']}  Accounts: {totals['accounts']}  Bids: {totals['bid_logs']}"
    )


@app.command()
def replay(
    events_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON Lines file of contract events"),
    database_url: Optional[str] = typer.Option(None, help="Database URL (default: from config)"),
    rpc_url: Optional[str] = typer.Option(None, help="JSON-RPC endpoint for tokenURI reads (default: from config)"),
    gateway_url: Optional[str] = typer.Option(None, help="IPFS gateway (default: from config)"),
    dry_run: bool = typer.Option(False, help="Use an in-memory store; nothing is persisted"),
):
    """Replay recorded contract events into the entity store."""
    settings = get_settings()
    gateway = gateway_url or settings.ipfs_gateway_url
    reader = _build_reader(rpc_url or settings.rpc_url)

    rprint(Panel.fit(f"🧾 Replaying {events_file.name}", style="bold blue"))

    with IpfsClient(gateway, timeout=settings.ipfs_timeout_seconds) as ipfs:
        resolver = MetadataResolver(ipfs, gateway)
        try:
            if dry_run:
                store = InMemoryEntityStore()
                stats = _run(store, reader, resolver, events_file)
                totals = {
                    "artworks": len(store.all(ArtworkModel)),
                    "accounts": len(store.all(AccountModel)),
                    "bid_logs": len(store.all(BidLogModel)),
                }
            else:
                init_database(database_url)
                session = get_session_local(database_url)()
                try:
                    store = SqlEntityStore(session)
                    stats = _run(store, reader, resolver, events_file)
                    totals = store.counts()
                finally:
                    session.close()
        except ValueError as e:
            console.print(f"❌ Replay stopped: {e}")
            raise typer.Exit(code=1)

    _print_summary(stats, totals)


if __name__ == "__main__":
    app()
