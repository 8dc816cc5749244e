"""
Gonzo Cup Routes
"""
from flask import Blueprint, jsonify

from scoreboard.forms import json_payload
from scoreboard.gonzo_cup import services
from scoreboard.gonzo_cup.forms import BracketInitForm, MatchGameForm, SlotUpdateForm
from scoreboard.league import services as league_services

gonzo_cup_bp = Blueprint("gonzo_cup", __name__)


@gonzo_cup_bp.route('/bracket', methods=['GET'])
def get_bracket():
    """All slots plus the bracket tree (omitted when the bracket is malformed)"""
    return jsonify(services.bracket_state())


@gonzo_cup_bp.route('/bracket/init', methods=['POST'])
def init_bracket():
    """Seed the bracket from East and West divisions of four teams each"""
    form = BracketInitForm.load(json_payload())
    slots = services.init_bracket(form.east.data, form.west.data)
    return jsonify({'success': True, 'slots': [s.to_dict() for s in slots]})


@gonzo_cup_bp.route('/bracket', methods=['DELETE'])
def reset_bracket():
    services.reset_bracket()
    return jsonify({'success': True, 'message': 'Bracket reset successfully'})


@gonzo_cup_bp.route('/bracket/<int:slot_id>', methods=['PATCH'])
def update_slot(slot_id):
    """Assign a team, game or scheduled time; explicit nulls clear the field"""
    data = json_payload()
    form = SlotUpdateForm.load(data)
    changes = {}
    for attr, field in (('team_id', form.team_id), ('game_id', form.game_id),
                        ('scheduled_time', form.scheduled_time)):
        if field.name in data:
            changes[attr] = field.data
    slot = services.update_slot(slot_id, changes)
    return jsonify(slot.to_dict())


@gonzo_cup_bp.route('/bracket/<int:position>/game', methods=['POST'])
def create_match_game(position):
    form = MatchGameForm.load(json_payload())
    game = services.create_match_game(position, form.round.data)
    return jsonify(game.to_dict())


@gonzo_cup_bp.route('/games', methods=['GET'])
def tournament_games():
    games = league_services.list_games(is_tournament=True)
    return jsonify([g.to_dict() for g in games])


@gonzo_cup_bp.route('/stats', methods=['GET'])
def tournament_stats():
    return jsonify(league_services.player_stats(is_tournament=True))
