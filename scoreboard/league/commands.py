import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError
import logging

from scoreboard import db
from scoreboard.errors import ConcurrentUpdate
from scoreboard.league import services
from scoreboard.league.core.clock import ClockPoller

logger = logging.getLogger(__name__)

@click.group(name='league')
def league_cli():
    """League and game clock commands."""
    pass

@league_cli.command('run-clock')
@click.option('--game-id', type=int, default=None, help='Game to run (defaults to the current active game)')
@click.option('--max-ticks', type=int, default=None, help='Stop after this many ticks')
@with_appcontext
def run_clock_command(game_id, max_ticks):
    """Count a running game clock down once per second until it stops."""
    game = services.resolve_game(game_id)
    game_id = game.id
    if not game.clock_running:
        click.echo(f"Clock for game {game_id} is not running.")
        return

    def step():
        try:
            return services.clock_poll_step(game_id)
        finally:
            # Each tick reads fresh state
            db.session.remove()

    click.echo(f"Running clock for game {game_id}...")
    poller = ClockPoller(
        step,
        retry_on=(SQLAlchemyError, ConcurrentUpdate),
        interval=current_app.config['CLOCK_POLL_INTERVAL'],
        max_ticks=max_ticks,
    )
    poller.run()
    logger.info(f"Clock poller for game {game_id} finished")

    game = services.resolve_game(game_id)
    click.echo(f"Clock at {game.time_remaining}s after {poller.ticks} ticks "
               f"({poller.failures} failed). Running: {game.clock_running}")

@league_cli.command('standings')
@with_appcontext
def standings_command():
    """Print the league standings table."""
    rows = services.standings()
    if not rows:
        click.echo("No teams yet.")
        return

    click.echo(f"{'#':>3}  {'Team':<24}{'W':>4}{'L':>4}{'PCT':>7}{'DIFF':>7}{'PPG':>7}{'PAG':>7}")
    for row in rows:
        click.echo(
            f"{row['rank']:>3}  {row['teamName']:<24}{row['wins']:>4}{row['losses']:>4}"
            f"{row['winPct']:>7}{row['pointDiff']:>7}{row['ppg']:>7}{row['pag']:>7}"
        )
