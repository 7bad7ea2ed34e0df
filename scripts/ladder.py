#!/usr/bin/env python3
"""Ping-pong ladder commands: players, match submission, standings and audits."""

from __future__ import annotations

import sys
import uuid
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.common import Player
from domain.config_base import select_system_config
from domain.errors import LadderError
from domain.ledger import MatchLedger, StreakPolicy
from domain.ratings.config import LadderSystemConfig, load_ladder_system_configs
from domain.replay import find_drift, repair_operations, sort_matches
from domain.standings import build_standings, describe_match, display_streak, rating_history
from logging_config import setup_logging
from repositories.ledger_repository import SqlLedgerStore, ensure_ladder_schema
from repositories.maintenance import backfill_starting_ratings, seed_players

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings" / "ladder"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Ping-pong ladder jobs.",
)

DbUrlOption = Annotated[
    str,
    typer.Option(
        "--db-url",
        envvar="LADDER_DB_URL",
        help="Database URL. Defaults to the local pingpong_ladder postgres instance.",
    ),
]
ConfigDirOption = Annotated[
    Path,
    typer.Option(
        "--config-dir",
        envvar="LADDER_CONFIG_DIR",
        help="Directory of rating-system TOML files.",
    ),
]
SystemOption = Annotated[
    str | None,
    typer.Option(
        "--system",
        envvar="LADDER_SYSTEM",
        help="Rating system name to use (defaults to the first config found).",
    ),
]
StreakPolicyOption = Annotated[
    StreakPolicy,
    typer.Option(
        "--streak-policy",
        help="How streaks are rebuilt when a match is removed (history, unwind).",
    ),
]


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", envvar="LOG_LEVEL", help="DEBUG, INFO, WARNING, ..."),
    ] = None,
) -> None:
    setup_logging(log_level)


def _open_store(db_url: str) -> SqlLedgerStore:
    engine = create_db_engine(db_url)
    ensure_ladder_schema(engine)
    return SqlLedgerStore(create_session_factory(engine))


def _load_configs(config_dir: Path) -> list[LadderSystemConfig]:
    try:
        return load_ladder_system_configs(config_dir)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config-dir") from exc


def _load_system(config_dir: Path, system_name: str | None) -> LadderSystemConfig:
    configs = _load_configs(config_dir)
    try:
        return select_system_config(configs, system_name)
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0]), param_hint="--system") from exc


def _build_ledger(
    db_url: str,
    config_dir: Path,
    system_name: str | None,
    streak_policy: StreakPolicy,
) -> MatchLedger:
    system = _load_system(config_dir, system_name)
    return MatchLedger(
        _open_store(db_url),
        system.parameters,
        rating_system=system.name,
        streak_policy=streak_policy,
    )


def _fail(exc: LadderError) -> typer.Exit:
    typer.echo(f"error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command("init-db")
def init_db(db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Create the players and matches tables."""
    ensure_ladder_schema(create_db_engine(db_url))
    typer.echo("schema ready")


@app.command("add-player")
def add_player(
    name: Annotated[str, typer.Argument(help="Display name.")],
    rating: Annotated[
        float | None,
        typer.Option("--rating", help="Starting rating (defaults to the system's initial rating)."),
    ] = None,
    player_id: Annotated[str | None, typer.Option("--id", help="Explicit player id.")] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    system_name: SystemOption = None,
) -> None:
    """Register a new player."""
    starting_rating = rating
    if starting_rating is None:
        starting_rating = _load_system(config_dir, system_name).parameters.initial_rating

    player = Player(
        id=player_id or uuid.uuid4().hex,
        name=name,
        rating=starting_rating,
        starting_rating=starting_rating,
    )
    try:
        _open_store(db_url).add_player(player)
    except LadderError as exc:
        raise _fail(exc) from exc
    typer.echo(f"added player_id={player.id} name={player.name} rating={player.rating:g}")


@app.command()
def seed(db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Insert the demo roster (run once)."""
    try:
        players = seed_players(_open_store(db_url))
    except LadderError as exc:
        raise _fail(exc) from exc
    for player in players:
        typer.echo(f"player_id={player.id} name={player.name} rating={player.rating:g}")


@app.command("backfill-starting-ratings")
def backfill(
    default_rating: Annotated[
        float,
        typer.Option("--default-rating", help="Starting rating for names not in the known list."),
    ] = 1000.0,
    db_url: DbUrlOption = DEFAULT_DB_URL,
) -> None:
    """Fill in starting ratings for players created before the column existed."""
    engine = create_db_engine(db_url)
    ensure_ladder_schema(engine)
    updated = backfill_starting_ratings(create_session_factory(engine), default_rating=default_rating)
    if updated:
        typer.echo(f"updated_players={updated}")
    else:
        typer.echo("no players needed migration")


@app.command()
def submit(
    player_a_id: Annotated[str, typer.Argument(help="Player A id.")],
    player_b_id: Annotated[str, typer.Argument(help="Player B id.")],
    score_a: Annotated[int, typer.Argument(help="Player A score.")],
    score_b: Annotated[int, typer.Argument(help="Player B score.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    system_name: SystemOption = None,
    streak_policy: StreakPolicyOption = StreakPolicy.HISTORY,
) -> None:
    """Record a match and update both players."""
    ledger = _build_ledger(db_url, config_dir, system_name, streak_policy)
    try:
        result = ledger.apply(player_a_id, player_b_id, score_a, score_b)
    except LadderError as exc:
        raise _fail(exc) from exc
    typer.echo(
        f"{result.winner_name} def {result.loser_name} "
        f"(+/-{result.rating_change}) match_id={result.match_id}"
    )


@app.command()
def delete(
    match_id: Annotated[str, typer.Argument(help="Match id to remove.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    system_name: SystemOption = None,
    streak_policy: StreakPolicyOption = StreakPolicy.HISTORY,
) -> None:
    """Delete a match and reverse its effect on both players."""
    ledger = _build_ledger(db_url, config_dir, system_name, streak_policy)
    try:
        ledger.reverse(match_id)
    except LadderError as exc:
        raise _fail(exc) from exc
    typer.echo(f"deleted match_id={match_id}")


@app.command()
def edit(
    match_id: Annotated[str, typer.Argument(help="Match id to replace.")],
    player_a_id: Annotated[str, typer.Argument(help="New player A id.")],
    player_b_id: Annotated[str, typer.Argument(help="New player B id.")],
    score_a: Annotated[int, typer.Argument(help="New player A score.")],
    score_b: Annotated[int, typer.Argument(help="New player B score.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    system_name: SystemOption = None,
    streak_policy: StreakPolicyOption = StreakPolicy.HISTORY,
) -> None:
    """Replace a match with corrected players or scores."""
    ledger = _build_ledger(db_url, config_dir, system_name, streak_policy)
    try:
        result = ledger.edit(match_id, player_a_id, player_b_id, score_a, score_b)
    except LadderError as exc:
        raise _fail(exc) from exc
    typer.echo(
        f"{result.winner_name} def {result.loser_name} "
        f"(+/-{result.rating_change}) match_id={result.match_id} replaces={match_id}"
    )


@app.command()
def standings(db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Print the ladder ordered by rating."""
    rows = build_standings(_open_store(db_url).list_players())
    if not rows:
        typer.echo("no players")
        return

    typer.echo(f"{'#':>3}  {'name':<16} {'rating':>6} {'W':>4} {'L':>4} {'win%':>5} {'pts/g':>6} streak")
    for row in rows:
        typer.echo(
            f"{row.rank:>3}  {row.name:<16} {row.rating:>6} {row.wins:>4} {row.losses:>4} "
            f"{row.win_rate:>4}% {row.points_per_game:>6.1f} {row.streak}"
        )


@app.command()
def players(db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Dump raw player records, including ids and starting ratings."""
    for player in _open_store(db_url).list_players():
        starting = "NOT SET" if player.starting_rating is None else f"{player.starting_rating:g}"
        typer.echo(
            f"player_id={player.id} name={player.name} rating={player.rating:.3f} "
            f"starting_rating={starting} games_played={player.games_played} "
            f"streak={display_streak(player.streak)} version={player.version}"
        )


@app.command()
def history(
    player_id: Annotated[
        str | None,
        typer.Argument(help="Only show this player's matches and rating trajectory."),
    ] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
) -> None:
    """Print match history, newest first, or one player's rating trajectory."""
    store = _open_store(db_url)
    if player_id is None:
        for match in reversed(store.list_matches()):
            typer.echo(f"{match.created_at:%Y-%m-%d %H:%M} {match.id} {describe_match(match)}")
        return

    player = store.get_player(player_id)
    if player is None:
        typer.echo(f"error: player '{player_id}' not found", err=True)
        raise typer.Exit(code=1)

    for point in rating_history(player, store.list_player_matches(player_id)):
        if point.match_id is None:
            typer.echo(f"start rating={point.rating:.0f}")
            continue
        typer.echo(
            f"{point.created_at:%Y-%m-%d %H:%M} vs {point.opponent_name} "
            f"change={point.rating_change:+.0f} rating={point.rating:.0f}"
        )


@app.command()
def verify(
    repair: Annotated[
        bool,
        typer.Option("--repair", help="Overwrite drifted players with replayed values."),
    ] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
) -> None:
    """Replay every stored match and report players whose aggregates drifted."""
    store = _open_store(db_url)
    all_players = store.list_players()
    matches = sort_matches(store.list_matches())

    drift = find_drift(all_players, matches)
    if not drift:
        typer.echo(f"ok players={len(all_players)} matches={len(matches)}")
        return

    for item in drift:
        typer.echo(
            f"drift player={item.player_name} field={item.field} "
            f"stored={item.stored} expected={item.expected}"
        )

    if not repair:
        raise typer.Exit(code=1)

    operations = repair_operations(all_players, matches)
    try:
        store.atomic_write(operations)
    except LadderError as exc:
        raise _fail(exc) from exc
    typer.echo(f"repaired_players={len(operations)}")


@app.command("list-systems")
def list_systems(config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR) -> None:
    """Print every rating system found in the config directory."""
    for system in _load_configs(config_dir):
        params = ", ".join(f"{key}={value}" for key, value in system.as_config_json().items())
        typer.echo(f"{system.name} ({system.file_path.name}) {params}")


if __name__ == "__main__":
    app()
