"""CLI for Club Ladder."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Annotated, TypeVar

import pydantic
import structlog
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from club_ladder import __version__
from club_ladder.core.config import ClubConfig, load_config
from club_ladder.core.errors import ClubLadderError, ConfigurationError
from club_ladder.ladder import (
    LadderMatch,
    LadderPlayer,
    format_player_stats,
    get_challenge_status,
)
from club_ladder.services import ClubStore, LadderService

T = TypeVar("T")

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="club-ladder",
    help="Club Ladder - challenge players, book courts and report ladder results",
    add_completion=False,
)
console = Console()

ConfigOption = Annotated[
    Path | None, typer.Option("--config", "-c", help="Path to club config YAML file")
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")]
LadderOption = Annotated[
    str | None, typer.Option("--ladder", "-l", help="Ladder id (default: active ladder)")
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"club-ladder v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Club Ladder CLI."""


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _load_club_config(config_path: Path | None) -> ClubConfig:
    if config_path is None:
        return ClubConfig()
    try:
        return load_config(config_path)
    except pydantic.ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {config_path}: {e.error_count()} error(s)",
            str(e),
        ) from e


def _execute(
    config_path: Path | None,
    verbose: bool,
    action: Callable[[LadderService], Awaitable[T]],
) -> T:
    """Run an async action against a fresh store, mapping errors to exit codes."""
    _configure_logging(verbose)
    try:
        config = _load_club_config(config_path)

        async def _run() -> T:
            store = ClubStore(config.storage)
            try:
                return await action(LadderService(store, config))
            finally:
                await store.close()

        return asyncio.run(_run())

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except ClubLadderError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e


def _parse_start(value: str) -> datetime:
    try:
        start = datetime.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"Not an ISO-8601 datetime: {value}") from e
    return start if start.tzinfo else start.replace(tzinfo=UTC)


def _standings_table(
    title: str,
    ladder: list[LadderPlayer],
    viewer_id: str | None,
    max_distance: int,
) -> Table:
    table = Table(title=escape(title))
    table.add_column("#", justify="right")
    table.add_column("Player")
    table.add_column("W–L", justify="center")
    if viewer_id:
        table.add_column("Challenge")

    for rank, player in enumerate(ladder, start=1):
        name = escape(player.name)
        if player.id == viewer_id:
            name = f"[bold]{name}[/bold]"
        row = [str(rank), name, format_player_stats(player)]
        if viewer_id:
            status = get_challenge_status(ladder, viewer_id, player.id, max_distance=max_distance)
            row.append("[green]yes[/green]" if status.eligible else "")
        table.add_row(*row)
    return table


def _matches_table(matches: list[LadderMatch], names: dict[str, str]) -> Table:
    table = Table(title="Ladder matches")
    table.add_column("Booking")
    table.add_column("Start")
    table.add_column("Players")
    table.add_column("Status")
    table.add_column("Winner")
    table.add_column("Comment")

    for match in matches:
        player_a = escape(names.get(match.player_a_id, match.player_a_id))
        player_b = escape(names.get(match.player_b_id, match.player_b_id))
        winner = escape(names.get(match.winner_id, match.winner_id)) if match.winner_id else ""
        table.add_row(
            match.id,
            match.booking_start or "",
            f"{player_a} vs {player_b}",
            match.status,
            winner,
            escape(match.comment or ""),
        )
    return table


@app.command("add-user")
def add_user(
    uid: Annotated[str, typer.Argument(help="User id")],
    email: Annotated[str, typer.Argument(help="Email address")],
    name: Annotated[str | None, typer.Option("--name", help="Display name")] = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Register a club member."""

    async def _action(service: LadderService) -> None:
        user = await service.store.users.create_user(uid, email, name)
        console.print(f"[green]Added user[/green] {escape(user.uid)} ({escape(user.email)})")

    _execute(config_path, verbose, _action)


@app.command("create-ladder")
def create_ladder(
    name: Annotated[str, typer.Argument(help="Ladder name, e.g. 'Stegen 2026'")],
    year: Annotated[int | None, typer.Option("--year", help="Season year")] = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a new active ladder season."""
    season = year or datetime.now(UTC).year

    async def _action(service: LadderService) -> None:
        start_date = datetime(season, 1, 1, tzinfo=UTC).isoformat()
        ladder = await service.store.ladders.create_ladder(name, season, start_date)
        console.print(f"[green]Created ladder[/green] {escape(ladder.name)} ({ladder.id})")

    _execute(config_path, verbose, _action)


@app.command("archive-ladder")
def archive_ladder(
    ladder_id: Annotated[str, typer.Argument(help="Ladder id")],
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Archive a ladder season."""

    async def _action(service: LadderService) -> None:
        ladder = await service.store.ladders.archive_ladder(ladder_id)
        console.print(f"Archived {escape(ladder.name)}")

    _execute(config_path, verbose, _action)


@app.command()
def join(
    uid: Annotated[str, typer.Argument(help="User id")],
    ladder_id: LadderOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Join a ladder."""

    async def _action(service: LadderService) -> None:
        ladder = await service.join(uid, ladder_id)
        console.print(f"[green]{escape(uid)} joined {escape(ladder.name)}[/green]")

    _execute(config_path, verbose, _action)


@app.command()
def leave(
    uid: Annotated[str, typer.Argument(help="User id")],
    ladder_id: LadderOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Leave a ladder."""

    async def _action(service: LadderService) -> None:
        ladder = await service.leave(uid, ladder_id)
        console.print(f"{escape(uid)} left {escape(ladder.name)}")

    _execute(config_path, verbose, _action)


@app.command()
def standings(
    ladder_id: LadderOption = None,
    viewer: Annotated[
        str | None, typer.Option("--as", help="Show challenge options for this user")
    ] = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show the ladder standings."""

    async def _action(service: LadderService) -> None:
        ladder = await service.resolve_ladder(ladder_id)
        session_user = await service.session_user(viewer) if viewer else None
        players = await service.standings(ladder, session_user)
        console.print(
            _standings_table(
                ladder.name,
                players,
                viewer,
                service.config.ladder.max_challenge_distance,
            )
        )

    _execute(config_path, verbose, _action)


@app.command()
def challenge(
    uid: Annotated[str, typer.Argument(help="Challenging user id")],
    opponent: Annotated[str, typer.Argument(help="Challenged user id")],
    start: Annotated[str, typer.Option("--start", help="Slot start, ISO-8601")],
    minutes: Annotated[
        int | None, typer.Option("--minutes", help="Slot length (default from config)")
    ] = None,
    ladder_id: LadderOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Challenge a higher-ranked player and book the court."""
    start_at = _parse_start(start)

    async def _action(service: LadderService) -> None:
        end_at = start_at + timedelta(minutes=minutes) if minutes else None
        match = await service.challenge(uid, opponent, start_at, end_at, ladder_id)
        console.print(f"[green]Match booked[/green] {match.id} at {match.booking_start}")

    _execute(config_path, verbose, _action)


@app.command()
def report(
    booking_id: Annotated[str, typer.Argument(help="Match booking id")],
    winner: Annotated[str, typer.Argument(help="Winning user id")],
    comment: Annotated[str | None, typer.Option("--comment", help="Match comment")] = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Report the winner of a planned match."""

    async def _action(service: LadderService) -> None:
        ladder = await service.report_result(booking_id, winner, comment)
        console.print("[green]Result reported and ladder updated.[/green]")
        console.print(
            _standings_table(
                "Standings", ladder, None, service.config.ladder.max_challenge_distance
            )
        )

    _execute(config_path, verbose, _action)


@app.command()
def cancel(
    booking_id: Annotated[str, typer.Argument(help="Match booking id")],
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Cancel a planned match and free the court."""

    async def _action(service: LadderService) -> None:
        await service.cancel_match(booking_id)
        console.print("Match cancelled and booking removed.")

    _execute(config_path, verbose, _action)


@app.command()
def matches(
    ladder_id: LadderOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List ladder matches, newest first."""

    async def _action(service: LadderService) -> None:
        ladder = await service.resolve_ladder(ladder_id)
        players = await service.standings(ladder)
        ladder_matches = await service.matches(ladder.id)
        names = {player.id: player.name for player in players}
        console.print(_matches_table(ladder_matches, names))

    _execute(config_path, verbose, _action)


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to config YAML file")],
) -> None:
    """Validate a configuration file.

    Args:
        config_path: Path to YAML configuration file.
    """
    try:
        config = _load_club_config(config_path)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Club: {config.club_name}")
        console.print(f"  Database: {config.storage.database_path}")
        console.print(f"  Max challenge distance: {config.ladder.max_challenge_distance}")
        console.print(f"  Collation locale: {config.ladder.collation_locale}")
        console.print(f"  Slot minutes: {config.booking.slot_minutes}")

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]Club Ladder[/bold]")
    console.print(f"Version: {__version__}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Start a season and join it")
    console.print('  club-ladder create-ladder "Stegen 2026"')
    console.print("  club-ladder join anna\n")

    console.print("  # See who you may challenge")
    console.print("  club-ladder standings --as anna\n")

    console.print("  # Challenge and book a court")
    console.print("  club-ladder challenge anna bertil --start 2026-05-01T18:00\n")

    console.print("  # Report the result")
    console.print("  club-ladder report <booking-id> anna --comment '6-4 6-3'\n")

    console.print("  # Validate config")
    console.print("  club-ladder validate club.yaml")


if __name__ == "__main__":
    app()
