"""
Gonzo Cup bracket structure.

Eight teams, two divisions of four, single elimination:

    round 3 (quarterfinals)  E1-E4  E2-E3  W1-W4  W2-W3
    round 2 (semifinals)     East semi     West semi
    round 1 (final)          East champion vs West champion

Slots come in pairs: positions 2k and 2k+1 of a round form one match and both
point their next_slot_id at position k of the round below. The functions in
this module only look at slot/game attributes and never query the database.
"""
import enum
from collections import Counter

from scoreboard.errors import InvalidOperation
from scoreboard.league.core.display import winning_team_id

FINAL = 1
SEMIFINAL = 2
QUARTERFINAL = 3

ROUND_NAMES = {
    QUARTERFINAL: 'Quarterfinals',
    SEMIFINAL: 'Semifinals',
    FINAL: 'Final',
}

# Slots per round in a well-formed bracket
EXPECTED_SHAPE = {QUARTERFINAL: 8, SEMIFINAL: 4, FINAL: 2}

DIVISION_SIZE = 4

# Seeds (0-indexed) in quarterfinal slot order: 1v4 then 2v3
DIVISION_SEED_ORDER = (0, 3, 1, 2)


class MatchState(enum.Enum):
    unpaired = "unpaired"
    paired = "paired"
    in_progress = "in_progress"
    resolved = "resolved"


def validate_divisions(east, west):
    if len(east) != DIVISION_SIZE or len(west) != DIVISION_SIZE:
        raise InvalidOperation("Exactly 4 teams required for each division (East and West)")
    if len(set(east) | set(west)) != 2 * DIVISION_SIZE:
        raise InvalidOperation("A team can only be seeded once in the bracket")


def next_position(position):
    return position // 2


def bracket_layout(east, west):
    """
    Slot definitions for a freshly seeded bracket, final first.

    Each entry has ``round``, ``position``, ``team_id``, ``is_top_slot`` and
    ``next_position`` (position in the round below, None for the final).
    Seeding stays inside each division: E1v4, E2v3, W1v4, W2v3.
    """
    validate_divisions(east, west)
    seeded = [east[i] for i in DIVISION_SEED_ORDER] + [west[i] for i in DIVISION_SEED_ORDER]

    layout = []
    for round_number in (FINAL, SEMIFINAL, QUARTERFINAL):
        for position in range(EXPECTED_SHAPE[round_number]):
            layout.append({
                'round': round_number,
                'position': position,
                'team_id': seeded[position] if round_number == QUARTERFINAL else None,
                'is_top_slot': position % 2 == 0,
                'next_position': None if round_number == FINAL else next_position(position),
            })
    return layout


def is_malformed(slots):
    """
    True when an existing bracket does not have the 8/4/2 shape or its
    next_slot_id wiring is broken. An empty bracket is not malformed.
    """
    if not slots:
        return False

    counts = Counter(slot.round for slot in slots)
    if dict(counts) != EXPECTED_SHAPE:
        return True

    for round_number, expected in EXPECTED_SHAPE.items():
        positions = sorted(slot.position for slot in slots if slot.round == round_number)
        if positions != list(range(expected)):
            return True

    by_id = {slot.id: slot for slot in slots}
    feeders = Counter()
    for slot in slots:
        if slot.round == FINAL:
            if slot.next_slot_id is not None:
                return True
            continue
        target = by_id.get(slot.next_slot_id)
        if target is None or target.round != slot.round - 1:
            return True
        feeders[target.id] += 1

    return any(feeders[slot.id] != 2 for slot in slots if slot.round != QUARTERFINAL)


def slots_in_round(slots, round_number):
    return sorted((s for s in slots if s.round == round_number), key=lambda s: s.position)


def match_pairs(slots, round_number):
    """(top, bottom) slot pairs of a round, in match order."""
    ordered = slots_in_round(slots, round_number)
    return [(ordered[i], ordered[i + 1]) for i in range(0, len(ordered) - 1, 2)]


def find_match(slots, round_number, match_position):
    """Top and bottom slot of match ``match_position`` (slots 2k and 2k+1)."""
    by_position = {s.position: s for s in slots if s.round == round_number}
    top = by_position.get(match_position * 2)
    bottom = by_position.get(match_position * 2 + 1)
    return top, bottom


def match_game(top, bottom, games_by_id):
    """The game linked to a match; it is bound to the top slot."""
    for slot in (top, bottom):
        if slot.game_id is not None and slot.game_id in games_by_id:
            return games_by_id[slot.game_id]
    return None


def match_state(top, bottom, game):
    if game is not None:
        return MatchState.resolved if game.is_completed else MatchState.in_progress
    if top.team_id is not None and bottom.team_id is not None:
        return MatchState.paired
    return MatchState.unpaired


def pending_matchup(slots, slot):
    """
    Team ids of the match that will fill an empty ``slot``, when both feeding
    slots already have teams. Derived by following next_slot_id backwards.
    """
    if slot.team_id is not None:
        return None
    feeders = sorted((s for s in slots if s.next_slot_id == slot.id), key=lambda s: s.position)
    if len(feeders) != 2 or any(f.team_id is None for f in feeders):
        return None
    return [f.team_id for f in feeders]


def _slot_view(slots, slot, team_names):
    return {
        'slotId': slot.id,
        'position': slot.position,
        'teamId': slot.team_id,
        'teamName': team_names.get(slot.team_id, 'TBD') if slot.team_id is not None else 'TBD',
        'scheduledTime': slot.scheduled_time,
        'pending': pending_matchup(slots, slot),
    }


def bracket_view(slots, games_by_id, team_names):
    """
    Render-ready bracket: rounds of matches with their state and winner.

    A malformed bracket yields ``rounds=None`` so nothing tries to draw it.
    """
    if is_malformed(slots):
        return {'malformed': True, 'rounds': None, 'champion': None}
    if not slots:
        return {'malformed': False, 'rounds': [], 'champion': None}

    rounds = []
    champion = None
    for round_number in (QUARTERFINAL, SEMIFINAL, FINAL):
        matches = []
        for index, (top, bottom) in enumerate(match_pairs(slots, round_number)):
            game = match_game(top, bottom, games_by_id)
            state = match_state(top, bottom, game)
            winner = winning_team_id(game) if game is not None else None
            if round_number == FINAL and state == MatchState.resolved:
                champion = winner
            matches.append({
                'position': index,
                'state': state.value,
                'gameId': game.id if game is not None else None,
                'homeScore': game.home_score if game is not None else None,
                'awayScore': game.away_score if game is not None else None,
                'winnerTeamId': winner,
                'scheduledTime': top.scheduled_time,
                'top': _slot_view(slots, top, team_names),
                'bottom': _slot_view(slots, bottom, team_names),
            })
        rounds.append({
            'round': round_number,
            'name': ROUND_NAMES[round_number],
            'matches': matches,
        })

    return {'malformed': False, 'rounds': rounds, 'champion': champion}
