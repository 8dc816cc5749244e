"""
Game transition engine.

Every function takes a game state (a dict of Game column values, see
``Game.to_state``) and returns only the fields that change. Nothing here
touches the database; the services layer locks the row, applies the patch
and commits.
"""
from scoreboard.errors import InvalidOperation, ValidationError
from scoreboard.league.core.constants import (
    AWAY,
    DEFAULT_TIMEOUTS,
    ELAM_TARGET_MARGIN,
    HOME,
    NEXT_PERIOD,
    PERIOD_LENGTH_SECONDS,
    PREVIOUS_PERIOD,
    SIDES,
    TIMEOUT_ADD,
    TIMEOUT_SUBTRACT,
    GameStatus,
)

# Paired home/away fields exchanged by swap_teams
_PAIRED_FIELDS = ('team_id', 'score', 'fouls', 'timeouts')


def new_game_state(home_team_id, away_team_id, is_tournament=False):
    """State of a game that has just been created."""
    return {
        'home_team_id': home_team_id,
        'away_team_id': away_team_id,
        'home_score': 0,
        'away_score': 0,
        'period': 1,
        'time_remaining': PERIOD_LENGTH_SECONDS,
        'possession': HOME,
        'home_timeouts': DEFAULT_TIMEOUTS,
        'away_timeouts': DEFAULT_TIMEOUTS,
        'home_fouls': 0,
        'away_fouls': 0,
        'elam_ending_active': False,
        'target_score': None,
        'clock_running': False,
        'status': GameStatus.active,
        'is_tournament': is_tournament,
    }


def apply_updates(state, updates):
    next_state = dict(state)
    next_state.update(updates)
    return next_state


def check_side(team):
    if team not in SIDES:
        raise ValidationError(f"Team must be '{HOME}' or '{AWAY}'")
    return team


def other_side(team):
    return AWAY if team == HOME else HOME


def clamp(value):
    return max(0, value)


def score(state, team, delta):
    """
    Add ``delta`` points to ``team`` (negative for corrections), floor 0.

    Returns ``(updates, winning_team_id)``. The winner is only set when this
    score ends an active tournament game by reaching the Elam target.
    """
    check_side(team)
    key = f'{team}_score'
    updates = {key: clamp(state[key] + delta)}

    winning_team_id = None
    target = state.get('target_score')
    if (state.get('is_tournament') and state.get('elam_ending_active') and target
            and state.get('status') == GameStatus.active):
        next_state = apply_updates(state, updates)
        if next_state['home_score'] >= target or next_state['away_score'] >= target:
            updates['status'] = GameStatus.completed
            updates['clock_running'] = False
            winner = HOME if next_state['home_score'] >= target else AWAY
            winning_team_id = state[f'{winner}_team_id']

    return updates, winning_team_id


def foul(state, team, delta=1):
    check_side(team)
    key = f'{team}_fouls'
    return {key: clamp(state[key] + delta)}


def toggle_clock(state):
    return {'clock_running': not state['clock_running']}


def set_clock(state, seconds, pause=True):
    """Set the clock. An explicit set pauses it; ticks pass ``pause=False``."""
    updates = {'time_remaining': clamp(seconds)}
    if pause:
        updates['clock_running'] = False
    return updates


def tick_clock(state):
    # Reaching zero does not stop the clock; the poller toggles it off
    return set_clock(state, state['time_remaining'] - 1, pause=False)


def reset_clock(state):
    return {'time_remaining': PERIOD_LENGTH_SECONDS, 'clock_running': False}


def change_period(state, direction):
    """Move to the next/previous period. Team fouls reset on every ``next``."""
    if direction == NEXT_PERIOD:
        return {'period': state['period'] + 1, 'home_fouls': 0, 'away_fouls': 0}
    if direction == PREVIOUS_PERIOD:
        return {'period': max(1, state['period'] - 1)}
    raise ValidationError(f"Direction must be '{NEXT_PERIOD}' or '{PREVIOUS_PERIOD}'")


def toggle_possession(state):
    return {'possession': other_side(state['possession'])}


def adjust_timeout(state, team, action=TIMEOUT_SUBTRACT):
    check_side(team)
    key = f'{team}_timeouts'
    if action == TIMEOUT_ADD:
        return {key: state[key] + 1}
    if action == TIMEOUT_SUBTRACT:
        if state[key] <= 0:
            raise InvalidOperation(f"No timeouts remaining for {team} team")
        return {key: state[key] - 1}
    raise ValidationError("Invalid timeout operation")


def swap_teams(state):
    """Exchange every home/away paired field and flip possession."""
    updates = {}
    for field in _PAIRED_FIELDS:
        updates[f'home_{field}'] = state[f'away_{field}']
        updates[f'away_{field}'] = state[f'home_{field}']
    updates['possession'] = other_side(state['possession'])
    return updates


def activate_elam(state, target_score=None):
    """
    Turn on the Elam Ending; the target replaces the clock, so it pauses.

    The target must be above the leading score so that the first team to reach
    it is also the team ahead.
    """
    leading = max(state['home_score'], state['away_score'])
    if not target_score:
        target_score = leading + ELAM_TARGET_MARGIN
    elif target_score <= leading:
        raise InvalidOperation(f"Target score must be above the leading score ({leading})")
    return {
        'elam_ending_active': True,
        'target_score': target_score,
        'clock_running': False,
    }


def deactivate_elam(state):
    return {
        'elam_ending_active': False,
        'target_score': None,
        'clock_running': False,
    }


def end_game(state):
    return {'status': GameStatus.completed, 'clock_running': False}
