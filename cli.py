#!/usr/bin/env python3
"""
CLI for running and inspecting Crease scoring
"""
import logging

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from app.auth.utils import create_access_token
from app.config import settings
from app.database import init_db, get_session
from app.engine.aggregator import Scorecard
from app.engine.errors import ScoringError
from app.engine.match_engine import MatchEngine
from app.models import Player, Team

console = Console()

DEMO_SQUADS = {
    ("Harbour Hawks", "HH"): [
        "A. Mehta", "J. Carter", "S. Iyer", "T. Walsh", "R. Kapoor", "D. Singh",
        "M. Brooks", "K. Rao", "P. Evans", "N. Das", "L. Grant",
    ],
    ("Valley Vipers", "VV"): [
        "B. Shah", "C. Moore", "V. Nair", "G. Hughes", "H. Patel", "O. Reid",
        "F. Khan", "E. Price", "I. Joshi", "W. Lane", "Y. Bose",
    ],
}


@click.group()
def cli():
    """Crease - Live Cricket Scoring"""
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.option("--overs", default=2, help="Overs per innings for the demo match")
def seed_demo(overs: int):
    """Create two demo teams of 11 and a short match between them"""
    init_db()
    session = get_session()
    try:
        teams = []
        for (name, short_name), players in DEMO_SQUADS.items():
            team = Team(name=name, short_name=short_name)
            team.players = [Player(name=player_name) for player_name in players]
            session.add(team)
            teams.append(team)
        session.commit()

        engine = MatchEngine(session)
        match = engine.create_match(teams[0].id, teams[1].id, overs_limit=overs, venue="Demo Ground")

        table = Table(title=f"Match {match.id}: {teams[0].name} vs {teams[1].name} ({overs} overs)")
        table.add_column("ID", justify="right")
        table.add_column(teams[0].name, style="cyan")
        table.add_column("ID", justify="right")
        table.add_column(teams[1].name, style="magenta")
        for home, away in zip(teams[0].players, teams[1].players):
            table.add_row(str(home.id), home.name, str(away.id), away.name)
        console.print(table)
        console.print(f"[green]Demo match {match.id} scheduled.[/green]")
    finally:
        session.close()


@cli.command()
@click.argument("match_id", type=int)
def scorecard(match_id: int):
    """Print batting and bowling cards for a match"""
    session = get_session()
    try:
        engine = MatchEngine(session)
        try:
            view = engine.get_state(match_id)
            cards = engine.scorecards(match_id)
        except ScoringError as exc:
            console.print(f"[red]{exc.detail}[/red]")
            raise SystemExit(1)

        match = view.match
        console.print(Panel(f"[bold]{match.team1.name} vs {match.team2.name}[/bold] ({match.status.value})"))
        if not cards:
            console.print("[yellow]No deliveries recorded yet.[/yellow]")
        for card in cards:
            console.print(f"\n[bold]Innings {card.innings_no}:[/bold] "
                          f"{card.totals.runs}/{card.totals.wickets} ({card.totals.overs_display} overs)")
            _print_scorecard(card, {p.id: p.name for p in session.query(Player).all()})
        if match.result_summary:
            console.print(f"\n[bold green]{match.result_summary}[/bold green]")
    finally:
        session.close()


def _print_scorecard(card: Scorecard, names: dict[int, str]):
    """Print innings scorecard"""
    # Batting
    bat_table = Table(title="Batting")
    bat_table.add_column("Batter", style="cyan")
    bat_table.add_column("Dismissal")
    bat_table.add_column("R", justify="right")
    bat_table.add_column("B", justify="right")
    bat_table.add_column("4s", justify="right")
    bat_table.add_column("6s", justify="right")
    bat_table.add_column("SR", justify="right")

    for bi in card.batting:
        dismissal = bi.dismissal.value if bi.is_out else "not out"
        bat_table.add_row(
            names.get(bi.player_id, str(bi.player_id)),
            dismissal,
            str(bi.runs),
            str(bi.balls),
            str(bi.fours),
            str(bi.sixes),
            f"{bi.strike_rate:.1f}",
        )

    console.print(bat_table)

    extras = ", ".join(f"{extra_type.value} {runs}" for extra_type, runs in card.totals.extras.items() if runs)
    console.print(f"Extras: {card.totals.total_extras}" + (f" ({extras})" if extras else ""))

    # Bowling
    bowl_table = Table(title="Bowling")
    bowl_table.add_column("Bowler", style="magenta")
    bowl_table.add_column("O", justify="right")
    bowl_table.add_column("R", justify="right")
    bowl_table.add_column("W", justify="right")
    bowl_table.add_column("Econ", justify="right")

    for spell in card.bowling:
        bowl_table.add_row(
            names.get(spell.player_id, str(spell.player_id)),
            spell.overs_display,
            str(spell.runs_conceded),
            str(spell.wickets),
            f"{spell.economy:.1f}",
        )

    console.print(bowl_table)


@cli.command()
@click.argument("match_id", type=int)
def verify(match_id: int):
    """Re-fold the event log and compare it with the stored scores"""
    session = get_session()
    try:
        problems = MatchEngine(session).verify_snapshots(match_id)
    except ScoringError as exc:
        console.print(f"[red]{exc.detail}[/red]")
        raise SystemExit(1)
    finally:
        session.close()

    if problems:
        for problem in problems:
            console.print(f"[red]{problem}[/red]")
        raise SystemExit(1)
    console.print(f"[green]Match {match_id}: snapshots match the event log.[/green]")


@cli.command()
@click.argument("match_id", type=int)
@click.confirmation_option(prompt="This deletes every recorded delivery. Continue?")
def reset(match_id: int):
    """Delete all deliveries and return a match to scheduled"""
    session = get_session()
    try:
        MatchEngine(session).reset_match(match_id)
    except ScoringError as exc:
        console.print(f"[red]{exc.detail}[/red]")
        raise SystemExit(1)
    finally:
        session.close()
    console.print(f"[green]Match {match_id} reset.[/green]")


@cli.command()
@click.option("--scorer-id", default=1, help="Scorer id to embed in the token")
def issue_token(scorer_id: int):
    """Print a scorer bearer token"""
    token = create_access_token(scorer_id)
    console.print(f"[dim]Valid for {settings.ACCESS_TOKEN_EXPIRE_MINUTES} minutes[/dim]")
    click.echo(token)


if __name__ == "__main__":
    cli()
