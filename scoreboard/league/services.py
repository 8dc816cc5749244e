"""
League services: game lookup, locked state transitions, rosters and reports.

Every control action is a single read-modify-write on one game row: the row
is selected FOR UPDATE, the transition engine computes a patch, and the
version column turns any remaining lost update into a retryable error.
"""
import logging
from contextlib import contextmanager

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from scoreboard import db
from scoreboard.errors import ConcurrentUpdate, InvalidOperation, NotFound, Unauthorized, ValidationError
from scoreboard.gonzo_cup.core.advancement import advance_winner
from scoreboard.gonzo_cup.models import BracketSlot
from scoreboard.league.core import transitions
from scoreboard.league.core.aggregation import aggregate_player_stats, compute_standings
from scoreboard.league.core.constants import GameStatus
from scoreboard.league.core.display import winning_team_id
from scoreboard.league.models import Game, GamePlayer, Player, Team
from scoreboard.utils.logging import log_activity

logger = logging.getLogger(__name__)


def get_or_404(model, ident, message):
    obj = db.session.get(model, ident)
    if obj is None:
        raise NotFound(message)
    return obj


# ---------------------------------------------------------------------------
# Game lookup
# ---------------------------------------------------------------------------

def current_game_query():
    """Active games, most recently created first."""
    return Game.query.filter_by(status=GameStatus.active).order_by(Game.created_at.desc(), Game.id.desc())


def resolve_game(game_id=None, lock=False):
    """
    The game addressed by ``game_id``, or the current active game when no id
    is given. The current-game fallback is a convenience for single-game use;
    tournament play always passes an explicit id.
    """
    if game_id is not None:
        game = db.session.get(Game, game_id, with_for_update=lock)
        if game is None:
            raise NotFound("Game not found")
        return game

    query = current_game_query()
    if lock:
        query = query.with_for_update()
    game = query.first()
    if game is None:
        raise NotFound("No active game")
    return game


@contextmanager
def locked_game(game_id=None):
    """Lock one game row for a transition and commit (or roll back) on exit."""
    game = resolve_game(game_id, lock=True)
    try:
        yield game
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        logger.warning(f"Concurrent update detected on game {game_id}")
        raise ConcurrentUpdate("Game was updated concurrently, retry")
    except Exception:
        db.session.rollback()
        raise


def run_transition(game_id, transition, *args, **kwargs):
    with locked_game(game_id) as game:
        game.apply(transition(game.to_state(), *args, **kwargs))
    return game


def _on_completed(game, winner_id):
    """Runs once, on the active -> completed edge, inside the game's transaction."""
    log_activity('league', 'Game Completed',
                 f"Game {game.id} completed {game.home_score}-{game.away_score}.",
                 commit=False)
    if not game.is_tournament:
        return
    if winner_id is None:
        logger.warning(f"Tournament game {game.id} ended tied; no winner advanced")
        return
    advance_winner(game, winner_id)


def _game_player_on_side(game, side, game_player_id):
    gp = db.session.get(GamePlayer, game_player_id)
    if gp is None or gp.game_id != game.id or gp.team_id != game.team_id_for(side):
        raise NotFound("Game player not found")
    return gp


# ---------------------------------------------------------------------------
# Control actions
# ---------------------------------------------------------------------------

def record_score(team, points, game_player_id=None, game_id=None):
    transitions.check_side(team)
    with locked_game(game_id) as game:
        if game_player_id is not None:
            gp = _game_player_on_side(game, team, game_player_id)
            gp.points = transitions.clamp(gp.points + points)

        updates, winner_id = transitions.score(game.to_state(), team, points)
        game.apply(updates)
        if winner_id is not None:
            logger.info(f"Elam target {game.target_score} reached in game {game.id}")
            _on_completed(game, winner_id)
    return game


def record_foul(team, count=1, game_player_id=None, game_id=None):
    transitions.check_side(team)
    with locked_game(game_id) as game:
        if game_player_id is not None:
            gp = _game_player_on_side(game, team, game_player_id)
            gp.fouls = transitions.clamp(gp.fouls + count)
        game.apply(transitions.foul(game.to_state(), team, count))
    return game


def toggle_clock(game_id=None):
    return run_transition(game_id, transitions.toggle_clock)


def set_clock(time_remaining, pause=True, game_id=None):
    return run_transition(game_id, transitions.set_clock, time_remaining, pause=pause)


def reset_clock(game_id=None):
    return run_transition(game_id, transitions.reset_clock)


def change_period(direction, game_id=None):
    return run_transition(game_id, transitions.change_period, direction)


def toggle_possession(game_id=None):
    return run_transition(game_id, transitions.toggle_possession)


def adjust_timeout(team, action, game_id=None):
    return run_transition(game_id, transitions.adjust_timeout, team, action)


def swap_teams(game_id=None):
    return run_transition(game_id, transitions.swap_teams)


def activate_elam(target_score=None, game_id=None):
    return run_transition(game_id, transitions.activate_elam, target_score)


def deactivate_elam(game_id=None):
    return run_transition(game_id, transitions.deactivate_elam)


def end_game(game_id=None):
    with locked_game(game_id) as game:
        was_completed = game.is_completed
        game.apply(transitions.end_game(game.to_state()))
        if not was_completed:
            _on_completed(game, winning_team_id(game))
    return game


def clock_poll_step(game_id):
    """
    One poller tick: decrement a running clock, or stop it once it is at zero.
    Returns True while the clock keeps running.
    """
    with locked_game(game_id) as game:
        if not game.clock_running:
            return False
        state = game.to_state()
        if game.time_remaining > 0:
            game.apply(transitions.tick_clock(state))
            return True
        game.apply(transitions.toggle_clock(state))
        return False


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------

def create_game(home_team_id, away_team_id, is_tournament=False, commit=True):
    """Create a game and copy both rosters into GamePlayer rows."""
    if home_team_id == away_team_id:
        raise ValidationError("A team cannot play against itself")
    home_team = get_or_404(Team, home_team_id, "Home team not found")
    away_team = get_or_404(Team, away_team_id, "Away team not found")

    game = Game(**transitions.new_game_state(home_team.id, away_team.id, is_tournament))
    db.session.add(game)
    db.session.flush()

    for team in (home_team, away_team):
        for player in team.players:
            db.session.add(GamePlayer(
                game_id=game.id,
                team_id=team.id,
                linked_player_id=player.id,
                name=player.name,
                number=player.number,
            ))

    kind = 'Tournament game' if is_tournament else 'Game'
    log_activity('league', 'Game Created',
                 f"{kind} {game.id} started: {home_team.name} vs {away_team.name}.",
                 commit=False)
    if commit:
        db.session.commit()
    return game


def list_games(status=None, is_tournament=None):
    query = Game.query
    if status is not None:
        try:
            query = query.filter_by(status=GameStatus(status))
        except ValueError:
            raise ValidationError(f"Unknown game status: {status}")
    if is_tournament is not None:
        query = query.filter_by(is_tournament=is_tournament)
    return query.order_by(Game.created_at.desc(), Game.id.desc()).all()


def delete_game(game_id, pin):
    if pin != current_app.config['DELETE_PIN']:
        raise Unauthorized("Invalid PIN")
    game = get_or_404(Game, game_id, "Game not found")

    # Bracket slots keep their teams but lose the link to the deleted game
    BracketSlot.query.filter_by(game_id=game.id).update({'game_id': None})
    description = f"Game {game.id} deleted ({game.home_score}-{game.away_score})."
    db.session.delete(game)
    log_activity('league', 'Game Deleted', description, commit=False)
    db.session.commit()


# ---------------------------------------------------------------------------
# Teams and rosters
# ---------------------------------------------------------------------------

def create_team(name):
    team = Team(name=name)
    db.session.add(team)
    db.session.commit()
    return team


def delete_team(team_id):
    """Delete a team and its roster. Teams with game history cannot be deleted."""
    team = get_or_404(Team, team_id, "Team not found")

    games_with_team = Game.query.filter(
        (Game.home_team_id == team_id) | (Game.away_team_id == team_id)
    ).first()
    if games_with_team:
        raise InvalidOperation(f'Cannot delete "{team.name}" - it is used in existing games')

    BracketSlot.query.filter_by(team_id=team_id).update({'team_id': None})
    db.session.delete(team)
    db.session.commit()


def create_player(team_id, name, number=None):
    get_or_404(Team, team_id, "Team not found")
    player = Player(team_id=team_id, name=name, number=number)
    db.session.add(player)
    db.session.commit()
    return player


def update_player(player_id, changes):
    player = get_or_404(Player, player_id, "Player not found")
    for field in ('name', 'number', 'points', 'fouls'):
        if field in changes:
            setattr(player, field, changes[field])
    player.points = transitions.clamp(player.points)
    player.fouls = transitions.clamp(player.fouls)
    db.session.commit()
    return player


def delete_player(player_id):
    player = get_or_404(Player, player_id, "Player not found")
    db.session.delete(player)
    db.session.commit()


def game_players_for_side(game_id, side):
    transitions.check_side(side)
    game = get_or_404(Game, game_id, "Game not found")
    return GamePlayer.query.filter_by(game_id=game.id, team_id=game.team_id_for(side)) \
        .order_by(GamePlayer.id).all()


def add_game_player(game_id, team_id, name, number=None, linked_player_id=None):
    """Add a player to a game in progress; without a linked roster player it is a substitute."""
    game = get_or_404(Game, game_id, "Game not found")
    if team_id not in (game.home_team_id, game.away_team_id):
        raise ValidationError("Invalid team for this game")
    gp = GamePlayer(
        game_id=game.id,
        team_id=team_id,
        linked_player_id=linked_player_id,
        name=name,
        number=number,
    )
    db.session.add(gp)
    db.session.commit()
    return gp


def update_game_player_stats(game_player_id, points, fouls):
    gp = get_or_404(GamePlayer, game_player_id, "Game player not found")
    gp.points = transitions.clamp(points)
    gp.fouls = transitions.clamp(fouls)
    db.session.commit()
    return gp


def set_game_player_missing(game_player_id, missing):
    gp = get_or_404(GamePlayer, game_player_id, "Game player not found")
    gp.missing = missing
    db.session.commit()
    return gp


def delete_game_player(game_player_id):
    gp = get_or_404(GamePlayer, game_player_id, "Game player not found")
    db.session.delete(gp)
    db.session.commit()


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def completed_games(is_tournament):
    return Game.query.filter_by(status=GameStatus.completed, is_tournament=is_tournament).all()


def player_stats(is_tournament=False):
    """Season (or tournament) player totals; league and tournament pools never mix."""
    game_ids = [game.id for game in completed_games(is_tournament)]
    if not game_ids:
        return []
    game_players = GamePlayer.query.filter(GamePlayer.game_id.in_(game_ids)).all()
    return aggregate_player_stats(game_players)


def standings():
    teams = Team.query.order_by(Team.name).all()
    return compute_standings(teams, completed_games(is_tournament=False))
