"""
Move the winner of a completed tournament game into the next bracket slot.
"""
import logging

from scoreboard import db
from scoreboard.gonzo_cup.core.bracket import is_malformed
from scoreboard.gonzo_cup.models import BracketSlot
from scoreboard.utils.logging import log_activity

logger = logging.getLogger(__name__)


def advance_winner(game, winning_team_id):
    """
    Write ``winning_team_id`` into the slot fed by the slot linked to ``game``.

    Single level only: call it once per completed tournament game. Runs inside
    the caller's transaction and does not commit. Returns the updated slot, or
    None when nothing advanced (game not in the bracket, final, or a
    malformed bracket).
    """
    slot = BracketSlot.query.filter_by(game_id=game.id).first()
    if slot is None:
        logger.info(f"Tournament game {game.id} is not linked to a bracket slot")
        return None

    slots = BracketSlot.query.all()
    if is_malformed(slots):
        logger.error(f"Bracket is malformed; not advancing winner of game {game.id}")
        log_activity('gonzo_cup', 'Advancement Skipped',
                     f"Bracket is malformed; winner of game {game.id} was not advanced.",
                     commit=False)
        return None

    if slot.next_slot_id is None:
        logger.info(f"Team {winning_team_id} won the final (game {game.id})")
        log_activity('gonzo_cup', 'Champion', f"Team {winning_team_id} won the Gonzo Cup final.",
                     commit=False)
        return None

    next_slot = db.session.get(BracketSlot, slot.next_slot_id)
    next_slot.team_id = winning_team_id
    logger.info(f"Advanced team {winning_team_id} to round {next_slot.round} position {next_slot.position}")
    log_activity('gonzo_cup', 'Winner Advanced',
                 f"Team {winning_team_id} advanced from game {game.id} to round {next_slot.round} "
                 f"slot {next_slot.position}.",
                 commit=False)
    return next_slot
