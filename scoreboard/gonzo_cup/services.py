"""
Gonzo Cup services: seeding, slot edits, match games and the bracket view.
"""
import logging

from scoreboard import db
from scoreboard.errors import InvalidOperation, NotFound
from scoreboard.gonzo_cup.core.bracket import (
    bracket_layout,
    bracket_view,
    find_match,
    is_malformed,
)
from scoreboard.gonzo_cup.models import BracketSlot
from scoreboard.league import services as league_services
from scoreboard.league.models import Game, Team
from scoreboard.utils.logging import log_activity

logger = logging.getLogger(__name__)


def all_slots():
    return BracketSlot.query.order_by(BracketSlot.round.desc(), BracketSlot.position).all()


def init_bracket(east, west):
    """Replace the bracket with a freshly seeded one (E1v4, E2v3, W1v4, W2v3)."""
    layout = bracket_layout(east, west)
    for team_id in list(east) + list(west):
        league_services.get_or_404(Team, team_id, f"Team {team_id} not found")

    BracketSlot.query.delete()

    # Layout is final-first, so every next slot exists before its feeders
    created = {}
    for entry in layout:
        next_slot = None
        if entry['next_position'] is not None:
            next_slot = created[(entry['round'] - 1, entry['next_position'])]
        slot = BracketSlot(
            round=entry['round'],
            position=entry['position'],
            team_id=entry['team_id'],
            is_top_slot=entry['is_top_slot'],
            next_slot_id=next_slot.id if next_slot else None,
        )
        db.session.add(slot)
        db.session.flush()
        created[(slot.round, slot.position)] = slot

    log_activity('gonzo_cup', 'Bracket Initialized',
                 f"Bracket seeded. East: {list(east)}, West: {list(west)}.",
                 commit=False)
    db.session.commit()
    logger.info(f"Gonzo Cup bracket initialized with {len(created)} slots")
    return all_slots()


def reset_bracket():
    deleted = BracketSlot.query.delete()
    log_activity('gonzo_cup', 'Bracket Reset', f"Bracket reset; {deleted} slots deleted.", commit=False)
    db.session.commit()
    return deleted


def update_slot(slot_id, changes):
    """Manual edit of a slot. Keys present in ``changes`` are set, None clears."""
    slot = league_services.get_or_404(BracketSlot, slot_id, "Bracket slot not found")

    if changes.get('team_id') is not None:
        league_services.get_or_404(Team, changes['team_id'], "Team not found")
    if changes.get('game_id') is not None:
        league_services.get_or_404(Game, changes['game_id'], "Game not found")

    for field in ('team_id', 'game_id', 'scheduled_time'):
        if field in changes:
            setattr(slot, field, changes[field])
    db.session.commit()
    return slot


def create_match_game(position, round_number):
    """Start the tournament game for match ``position`` of ``round_number``."""
    slots = all_slots()
    if not slots:
        raise NotFound("Bracket has not been initialized")
    if is_malformed(slots):
        raise InvalidOperation("Bracket is malformed; reset it before creating games")

    top, bottom = find_match(slots, round_number, position)
    if top is None or bottom is None:
        raise NotFound("Bracket match not found")
    if top.team_id is None or bottom.team_id is None:
        raise InvalidOperation("Both teams must be assigned before creating a game")
    if top.game_id is not None and db.session.get(Game, top.game_id) is not None:
        raise InvalidOperation("A game already exists for this match")

    game = league_services.create_game(top.team_id, bottom.team_id, is_tournament=True, commit=False)
    top.game_id = game.id
    db.session.commit()
    logger.info(f"Created tournament game {game.id} for round {round_number} match {position}")
    return game


def bracket_state():
    """Slots plus the render-ready view; a malformed bracket has no rounds."""
    slots = all_slots()
    game_ids = {slot.game_id for slot in slots if slot.game_id is not None}
    games = Game.query.filter(Game.id.in_(game_ids)).all() if game_ids else []
    team_names = {team.id: team.name for team in Team.query.all()}

    view = bracket_view(slots, {game.id: game for game in games}, team_names)
    if view['malformed']:
        logger.warning("Gonzo Cup bracket is malformed; reset required")
    view['slots'] = [slot.to_dict() for slot in slots]
    return view
