#!/usr/bin/env python3
"""
CLI for playing Cricket Pro Engine hand cricket in the terminal
"""
import asyncio
import logging
import random
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from app.commentary.service import CommentaryService
from app.config import settings
from app.engine.ball_resolver import LEGAL_SHOTS
from app.engine.deliveries import DeliveryGenerator
from app.engine.innings import Innings
from app.engine.match_engine import Decision, MatchConfig, MatchEngine, Stage, TossCall

console = Console()


def build_engine(seed: Optional[int], overs: int, wickets: int, offline: bool, delay: float) -> MatchEngine:
    config = MatchConfig(max_overs=overs, max_wickets=wickets, balls_per_over=settings.BALLS_PER_OVER)
    commentary = CommentaryService() if offline else CommentaryService.from_settings()
    if seed is not None:
        return MatchEngine(
            config=config,
            deliveries=DeliveryGenerator.seeded(seed),
            commentary=commentary,
            rng=random.Random(seed),
            transition_delay=delay,
        )
    return MatchEngine(config=config, commentary=commentary, transition_delay=delay)


@click.group()
@click.option("--verbose", is_flag=True, help="Show engine debug logging")
def cli(verbose: bool):
    """Cricket Pro Engine - two-innings hand cricket"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.option("--seed", type=int, default=None, help="Seed for reproducible matches")
@click.option("--overs", default=settings.MAX_OVERS, show_default=True, help="Overs per innings")
@click.option("--wickets", default=settings.MAX_WICKETS, show_default=True, help="Wickets before all out")
@click.option("--offline", is_flag=True, help="Skip the commentary service")
def play(seed: Optional[int], overs: int, wickets: int, offline: bool):
    """Play a match against the computer"""
    engine = build_engine(seed, overs, wickets, offline, delay=1.0)
    asyncio.run(_play(engine))


async def _play(engine: MatchEngine):
    console.print(Panel(f"[bold green]{engine.commentary_line}[/bold green]"))

    call = click.prompt("Heads or Tails?", type=click.Choice(["Heads", "Tails"], case_sensitive=False))
    toss = engine.toss(TossCall(call.capitalize()))
    console.print(f"The coin shows [bold]{toss.coin.value}[/bold]. {engine.commentary_line}")

    if toss.user_won:
        decision = click.prompt("Bat or Bowl?", type=click.Choice(["Bat", "Bowl"], case_sensitive=False))
        engine.choose(Decision(decision.capitalize()))
        console.print(engine.commentary_line)

    await _play_innings(engine)
    await engine.settle()
    console.print(Panel(f"[yellow]{engine.commentary_line}[/yellow]"))

    click.pause("Press any key to start the chase...")
    engine.start_second_innings()
    console.print(engine.commentary_line)

    await _play_innings(engine)
    with console.status("Waiting for the result..."):
        await engine.settle()
    _print_result(engine)


async def _play_innings(engine: MatchEngine):
    shot_choice = click.Choice([str(s) for s in LEGAL_SHOTS])
    while not engine.active_innings.is_complete:
        if engine.is_free_hit:
            console.print("[bold red]FREE HIT![/bold red]")
        role = "Your shot" if engine.is_user_batting else "Your delivery"
        shot = int(click.prompt(role, type=shot_choice))

        outcome = await engine.play_ball(shot)
        style = "red" if outcome.ball.is_wicket else "cyan"
        console.print(
            f"[{style}]{outcome.record.display}[/{style}] "
            f"computer: {outcome.ball.opposing_value} | {engine.last_ball_summary} | "
            f"[bold]{outcome.innings.score_display}[/bold] ({outcome.innings.overs_display})"
        )
        console.print(f"  [italic]{outcome.record.commentary}[/italic]")
        if outcome.innings.target is not None and not outcome.innings.is_complete:
            console.print(
                f"  Need {outcome.innings.runs_required} from {outcome.innings.balls_remaining} balls"
            )
    _print_scorecard(engine.active_innings)


@cli.command()
@click.option("--seed", type=int, default=None, help="Seed for reproducible matches")
@click.option("--overs", default=settings.MAX_OVERS, show_default=True, help="Overs per innings")
@click.option("--wickets", default=settings.MAX_WICKETS, show_default=True, help="Wickets before all out")
@click.option("--matches", default=1, help="Number of matches to simulate")
def simulate(seed: Optional[int], overs: int, wickets: int, matches: int):
    """Auto-play matches with random shots (offline commentary)"""
    asyncio.run(_simulate(seed, overs, wickets, matches))


async def _simulate(seed: Optional[int], overs: int, wickets: int, matches: int):
    shot_rng = random.Random(seed)
    wins = {}
    for i in range(matches):
        engine = build_engine(None if seed is None else seed + i, overs, wickets, offline=True, delay=0)
        engine.toss(shot_rng.choice(list(TossCall)))
        if engine.stage == Stage.TOSS:
            engine.choose(shot_rng.choice(list(Decision)))

        for _ in range(2):
            while not engine.active_innings.is_complete:
                await engine.play_ball(shot_rng.choice(LEGAL_SHOTS))
            await engine.settle()
            if engine.stage == Stage.INNINGS_BREAK:
                if matches == 1:
                    _print_scorecard(engine.state.innings1)
                engine.start_second_innings()

        if matches == 1:
            _print_scorecard(engine.state.innings2)
            _print_result(engine)
        wins[engine.result.winner_label] = wins.get(engine.result.winner_label, 0) + 1

    if matches > 1:
        table = Table(title=f"Results ({matches} matches)")
        table.add_column("Winner", style="cyan")
        table.add_column("Matches", justify="right")
        for label, count in sorted(wins.items(), key=lambda x: -x[1]):
            table.add_row(label, str(count))
        console.print(table)


def _print_scorecard(innings: Innings):
    """Print ball-by-ball scorecard"""
    table = Table(title=f"{innings.batting_team.value} {innings.score_display} ({innings.overs_display} ov)")
    table.add_column("Ball", style="cyan")
    table.add_column("Shot", justify="right")
    table.add_column("Outcome")
    table.add_column("Runs", justify="right")
    table.add_column("Commentary")

    for record in innings.history:
        table.add_row(
            record.display,
            "-" if record.shot is None else str(record.shot),
            record.outcome_string,
            str(record.runs),
            record.commentary,
        )

    console.print(table)
    console.print(f"Extras: {innings.extras}  Run rate: {innings.run_rate:.2f}")


def _print_result(engine: MatchEngine):
    result = engine.result
    innings1, innings2 = engine.state.innings1, engine.state.innings2
    console.print(Panel("[bold]Match Result[/bold]"))
    console.print(f"[cyan]{innings1.batting_team.value}:[/cyan] {innings1.score_display} ({innings1.overs_display} overs)")
    console.print(f"[magenta]{innings2.batting_team.value}:[/magenta] {innings2.score_display} ({innings2.overs_display} overs)")
    if result.is_tie:
        console.print(f"\n[bold yellow]{result.margin}[/bold yellow]")
    else:
        console.print(f"\n[bold green]Winner: {result.winner_label.upper()}[/bold green]")
        console.print(f"[bold]Margin: {result.margin}[/bold]")
    console.print(f"[italic]{result.summary}[/italic]")


if __name__ == "__main__":
    cli()
