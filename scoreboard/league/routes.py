"""
League Routes: teams, rosters, games, control actions and reports
"""
from flask import Blueprint, jsonify, request

from scoreboard.errors import ValidationError
from scoreboard.forms import json_payload
from scoreboard.league import services
from scoreboard.league.core.display import scoreboard_view
from scoreboard.league.forms import (
    ClockUpdateForm,
    CreateGameForm,
    ElamForm,
    FoulForm,
    GameForm,
    GamePlayerForm,
    GamePlayerStatsForm,
    PeriodForm,
    PlayerForm,
    PlayerUpdateForm,
    ScoreForm,
    TeamForm,
    TimeoutForm,
)
from scoreboard.league.models import Team

league_bp = Blueprint("league", __name__)


# ---------------------------------------------------------------------------
# Teams and players
# ---------------------------------------------------------------------------

@league_bp.route('/teams', methods=['POST'])
def create_team():
    form = TeamForm.load(json_payload())
    team = services.create_team(form.name.data.strip())
    return jsonify(team.to_dict())


@league_bp.route('/teams', methods=['GET'])
def list_teams():
    teams = Team.query.order_by(Team.name).all()
    return jsonify([t.to_dict() for t in teams])


@league_bp.route('/teams/<int:team_id>', methods=['GET'])
def get_team(team_id):
    team = services.get_or_404(Team, team_id, "Team not found")
    return jsonify(team.to_dict())


@league_bp.route('/teams/<int:team_id>', methods=['DELETE'])
def delete_team(team_id):
    services.delete_team(team_id)
    return jsonify({'success': True})


@league_bp.route('/players/<int:team_id>', methods=['GET'])
def team_roster(team_id):
    team = services.get_or_404(Team, team_id, "Team not found")
    return jsonify([p.to_dict() for p in team.players])


@league_bp.route('/players', methods=['POST'])
def create_player():
    form = PlayerForm.load(json_payload())
    player = services.create_player(form.team_id.data, form.name.data.strip(), form.number.data)
    return jsonify(player.to_dict())


@league_bp.route('/players/<int:player_id>', methods=['PATCH'])
def update_player(player_id):
    data = json_payload()
    form = PlayerUpdateForm.load(data)

    changes = {}
    for field in form:
        if field.name in data:
            changes[field.name] = field.data
    if 'name' in changes:
        if not changes['name'] or not changes['name'].strip():
            raise ValidationError("Name: This field is required.")
        changes['name'] = changes['name'].strip()
    for counter in ('points', 'fouls'):
        if counter in changes and changes[counter] is None:
            raise ValidationError(f"{counter.capitalize()}: This field is required.")

    player = services.update_player(player_id, changes)
    return jsonify(player.to_dict())


@league_bp.route('/players/<int:player_id>', methods=['DELETE'])
def delete_player(player_id):
    services.delete_player(player_id)
    return jsonify({'success': True})


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------

@league_bp.route('/game', methods=['POST'])
def create_game():
    form = CreateGameForm.load(json_payload())
    game = services.create_game(form.home_team_id.data, form.away_team_id.data,
                                is_tournament=form.is_tournament.data)
    return jsonify(game.to_dict())


@league_bp.route('/games', methods=['GET'])
def list_games():
    games = services.list_games(status=request.args.get('status'))
    return jsonify([g.to_dict() for g in games])


@league_bp.route('/game/current', methods=['GET'])
def current_game():
    return jsonify(services.resolve_game().to_dict())


@league_bp.route('/game/<int:game_id>', methods=['GET'])
def get_game(game_id):
    return jsonify(services.resolve_game(game_id).to_dict())


@league_bp.route('/game/<int:game_id>/stats', methods=['GET'])
def game_stats(game_id):
    game = services.resolve_game(game_id)
    return jsonify([gp.to_dict() for gp in game.game_players])


@league_bp.route('/game/<int:game_id>/display', methods=['GET'])
def game_display(game_id):
    """Game state plus derived clock, period label and bonus indicators"""
    return jsonify(scoreboard_view(services.resolve_game(game_id)))


@league_bp.route('/games/<int:game_id>', methods=['DELETE'])
def delete_game(game_id):
    services.delete_game(game_id, json_payload().get('pin'))
    return jsonify({'success': True})


@league_bp.route('/games/<int:game_id>/players/<side>', methods=['GET'])
def game_players_for_side(game_id, side):
    game_players = services.game_players_for_side(game_id, side)
    return jsonify([gp.to_dict() for gp in game_players])


@league_bp.route('/games/<int:game_id>/players', methods=['POST'])
def add_game_player(game_id):
    """Add a mid-game substitute (or a late roster player when linkedPlayerId is given)"""
    form = GamePlayerForm.load(json_payload())
    gp = services.add_game_player(
        game_id,
        form.team_id.data,
        form.name.data.strip(),
        number=form.number.data,
        linked_player_id=form.linked_player_id.data,
    )
    return jsonify(gp.to_dict())


@league_bp.route('/game-players/<int:game_player_id>/stats', methods=['PATCH'])
def update_game_player_stats(game_player_id):
    form = GamePlayerStatsForm.load(json_payload())
    gp = services.update_game_player_stats(game_player_id, form.points.data, form.fouls.data)
    return jsonify(gp.to_dict())


@league_bp.route('/game-players/<int:game_player_id>/missing', methods=['PATCH'])
def set_game_player_missing(game_player_id):
    missing = json_payload().get('missing')
    if not isinstance(missing, bool):
        raise ValidationError("Missing must be a boolean")
    gp = services.set_game_player_missing(game_player_id, missing)
    return jsonify(gp.to_dict())


@league_bp.route('/game-players/<int:game_player_id>', methods=['DELETE'])
def delete_game_player(game_player_id):
    services.delete_game_player(game_player_id)
    return jsonify({'success': True})


# ---------------------------------------------------------------------------
# Control actions
# ---------------------------------------------------------------------------

@league_bp.route('/game/score', methods=['POST'])
def score():
    form = ScoreForm.load(json_payload())
    game = services.record_score(form.team.data, form.points.data,
                                 game_player_id=form.game_player_id.data,
                                 game_id=form.game_id.data)
    return jsonify(game.to_dict())


@league_bp.route('/game/foul', methods=['POST'])
def foul():
    form = FoulForm.load(json_payload())
    game = services.record_foul(form.team.data, form.count.data,
                                game_player_id=form.game_player_id.data,
                                game_id=form.game_id.data)
    return jsonify(game.to_dict())


@league_bp.route('/game/clock/toggle', methods=['POST'])
def toggle_clock():
    form = GameForm.load(json_payload())
    return jsonify(services.toggle_clock(game_id=form.game_id.data).to_dict())


@league_bp.route('/game/clock/update', methods=['POST'])
def update_clock():
    data = json_payload()
    form = ClockUpdateForm.load(data)
    pause = data.get('pauseClock', True)
    if not isinstance(pause, bool):
        raise ValidationError("pauseClock must be a boolean")
    game = services.set_clock(form.time_remaining.data, pause=pause, game_id=form.game_id.data)
    return jsonify(game.to_dict())


@league_bp.route('/game/clock/reset', methods=['POST'])
def reset_clock():
    form = GameForm.load(json_payload())
    return jsonify(services.reset_clock(game_id=form.game_id.data).to_dict())


@league_bp.route('/game/period', methods=['POST'])
def change_period():
    form = PeriodForm.load(json_payload())
    game = services.change_period(form.direction.data, game_id=form.game_id.data)
    return jsonify(game.to_dict())


@league_bp.route('/game/possession/toggle', methods=['POST'])
def toggle_possession():
    form = GameForm.load(json_payload())
    return jsonify(services.toggle_possession(game_id=form.game_id.data).to_dict())


@league_bp.route('/game/timeout', methods=['POST'])
def timeout():
    form = TimeoutForm.load(json_payload())
    game = services.adjust_timeout(form.team.data, form.action.data, game_id=form.game_id.data)
    return jsonify(game.to_dict())


@league_bp.route('/game/swap-teams', methods=['POST'])
def swap_teams():
    form = GameForm.load(json_payload())
    return jsonify(services.swap_teams(game_id=form.game_id.data).to_dict())


@league_bp.route('/game/elam/activate', methods=['POST'])
def activate_elam():
    form = ElamForm.load(json_payload())
    game = services.activate_elam(form.target_score.data, game_id=form.game_id.data)
    return jsonify(game.to_dict())


@league_bp.route('/game/elam/deactivate', methods=['POST'])
def deactivate_elam():
    form = GameForm.load(json_payload())
    return jsonify(services.deactivate_elam(game_id=form.game_id.data).to_dict())


@league_bp.route('/game/end', methods=['POST'])
def end_game():
    form = GameForm.load(json_payload())
    return jsonify(services.end_game(game_id=form.game_id.data).to_dict())


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@league_bp.route('/player-stats', methods=['GET'])
def player_stats():
    return jsonify(services.player_stats(is_tournament=False))


@league_bp.route('/standings', methods=['GET'])
def standings():
    return jsonify(services.standings())
