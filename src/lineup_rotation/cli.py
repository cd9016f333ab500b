"""Lineup rotation CLI using Typer."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

app = typer.Typer(help="Substitution scheduling for fair playing time")


def _console() -> Console:
    # Resolved per call so output follows the current stdout (CliRunner swaps it)
    return Console()


def _split_ids(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(',') if part.strip()]


def _squad_entry(entry: Any) -> Any:
    """Map a squad-file entry onto SquadPlayer fields."""
    if isinstance(entry, dict) and 'id' in entry and 'player_id' not in entry:
        entry = dict(entry)
        entry['player_id'] = entry.pop('id')
    return entry


def _load_squad_file(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"Error: cannot read squad file {path}: {e}", err=True)
        raise typer.Exit(1)
    if not isinstance(data, dict):
        typer.echo(f"Error: squad file {path} must contain a JSON object", err=True)
        raise typer.Exit(1)
    return data


@app.callback()
def main_callback(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Override LOG_LEVEL (e.g. DEBUG)")] = None,
):
    """Configure logging before any command runs."""
    from .rotation_logging import configure_logging

    configure_logging(level=log_level)


@app.command()
def plan(
    field: Annotated[str, typer.Option(help="Comma-separated starting field player ids")] = "",
    bench: Annotated[str, typer.Option(help="Comma-separated starting bench player ids")] = "",
    minutes_per_half: Annotated[Optional[int], typer.Option("--minutes-per-half", help="Minutes in each half")] = None,
    max_subs: Annotated[Optional[int], typer.Option("--max-subs", help="Maximum simultaneous substitutions")] = None,
    squad_file: Annotated[Optional[Path], typer.Option("--squad-file", help="JSON squad description")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full plan as JSON")] = False,
    no_balance: Annotated[bool, typer.Option("--no-balance", help="Skip the corrective balancing round")] = False,
):
    """Plan substitutions for one match."""
    from .config import get_settings
    from .models import SquadSnapshot
    from .pipelines import plan_substitutions

    settings = get_settings()

    if squad_file is not None:
        data = _load_squad_file(squad_file)
        field_players = [_squad_entry(e) for e in data.get('field', [])]
        bench_players = [_squad_entry(e) for e in data.get('bench', [])]
        minutes_per_half = minutes_per_half if minutes_per_half is not None else data.get('minutes_per_half')
        max_subs = max_subs if max_subs is not None else data.get('max_simultaneous_subs')
    else:
        field_players = _split_ids(field)
        bench_players = _split_ids(bench)

    if not field_players:
        typer.echo("Error: provide --field or --squad-file", err=True)
        raise typer.Exit(1)

    if minutes_per_half is None:
        minutes_per_half = settings.DEFAULT_MINUTES_PER_HALF
    if max_subs is None:
        max_subs = settings.DEFAULT_MAX_SIMULTANEOUS_SUBS

    try:
        snapshot = SquadSnapshot.from_halves(field_players, bench_players, minutes_per_half, max_subs)
    except ValidationError as e:
        typer.echo(f"Error: invalid squad: {e}", err=True)
        raise typer.Exit(1)

    result = plan_substitutions(
        snapshot,
        tolerance=settings.BALANCE_TOLERANCE,
        apply_balancing=settings.ENABLE_BALANCING and not no_balance,
    )

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        _print_plan(result, snapshot, minutes_per_half)

    if not result.is_feasible:
        typer.echo(f"Error: {result.error_message}", err=True)
        raise typer.Exit(1)


@app.command("min-rounds")
def min_rounds(
    players: Annotated[int, typer.Option("--players", help="Total squad size")],
    on_field: Annotated[int, typer.Option("--on-field", help="Players on the field at once")],
    minutes: Annotated[int, typer.Option("--minutes", help="Total match minutes")],
    max_subs: Annotated[int, typer.Option("--max-subs", help="Maximum substitutions per round")],
    locked_on: Annotated[Optional[int], typer.Option("--locked-on", help="Players who never leave the field")] = None,
    locked_off: Annotated[Optional[int], typer.Option("--locked-off", help="Players who never enter the field")] = None,
):
    """Report the minimum rotation rounds for a squad shape."""
    from .errors import InvariantViolationError
    from .scheduling import compute_min_rounds

    try:
        result = compute_min_rounds(
            total_players=players,
            on_field=on_field,
            game_minutes=minutes,
            max_subs_per_round=max_subs,
            locked_on_field_count=locked_on,
            locked_off_field_count=locked_off,
        )
    except InvariantViolationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    details = result.details
    table = Table(show_header=True, header_style="bold blue")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("total_players", str(details.total_players))
    table.add_row("on_field", str(details.on_field))
    table.add_row("bench_size", str(details.bench_size))
    table.add_row("game_minutes", f"{details.game_minutes:g}")
    table.add_row("max_subs_per_round", str(details.max_subs_per_round))
    table.add_row("target_minutes_per_player", f"{details.target_minutes_per_player:.2f}")
    table.add_row("min_rounds", str(result.min_rounds))
    table.add_row("stint_minutes", f"{result.stint_minutes:.2f}")
    table.add_row("is_feasible", str(result.is_feasible))
    _console().print(table)

    if not result.is_feasible:
        typer.echo(f"Error: {result.error_message}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Minimum rounds: {result.min_rounds}")


def _print_plan(result, snapshot, minutes_per_half: int) -> None:
    """Print the schedule, projections and comparison table."""
    from .utils.clock import format_half_time, format_time

    console = _console()
    names = snapshot.player_names

    if result.is_feasible:
        console.print(
            f"\n[bold green]Recommended: {result.recommended_num_subs or 0} simultaneous subs, "
            f"{len(result.events)} substitutions[/bold green]"
        )
        schedule = Table(show_header=True, header_style="bold blue", title="Schedule")
        schedule.add_column("Round", justify="right")
        schedule.add_column("Time")
        schedule.add_column("Off", style="red")
        schedule.add_column("On", style="green")
        schedule.add_column("Balancing")
        for event in result.events:
            schedule.add_row(
                str(event.round_number),
                format_half_time(event.match_time_minutes, minutes_per_half),
                names.get(event.field_player_id_out, event.field_player_id_out),
                names.get(event.bench_player_id_in, event.bench_player_id_in),
                "yes" if event.is_balancing_round else "",
            )
        console.print(schedule)

    projections = Table(show_header=True, header_style="bold blue", title="Projected playing time")
    projections.add_column("Player", style="cyan")
    projections.add_column("Minutes", justify="right")
    projections.add_column("Off field", justify="right")
    projections.add_column("Starts", justify="center")
    for projection in result.projected_game_time:
        projections.add_row(
            projection.player_name,
            format_time(projection.total_minutes),
            format_time(projection.total_off_field_time),
            "field" if projection.is_starting_on_field else "bench",
        )
    console.print(projections)

    if result.combinations:
        comparison = Table(show_header=True, header_style="bold blue", title="Combinations")
        comparison.add_column("Subs", justify="right")
        comparison.add_column("Rounds", justify="right")
        comparison.add_column("Interval", justify="right")
        comparison.add_column("Variance", justify="right")
        comparison.add_column("Range", justify="right")
        comparison.add_column("Pick", justify="center")
        for combination in result.combinations:
            comparison.add_row(
                str(combination.num_subs),
                str(combination.min_rounds),
                format_time(combination.round_interval),
                f"{combination.variance:.2f}",
                f"{combination.minutes_range:.2f}",
                "*" if combination.is_recommended else "",
            )
        console.print(comparison)

    if result.validation is not None:
        for error in result.validation.errors:
            console.print(f"[red]{error}[/red]")
        for warning in result.validation.warnings:
            console.print(f"[yellow]{warning}[/yellow]")


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
