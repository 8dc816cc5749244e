"""
Read-side derivations for the scoreboard displays. Nothing here is stored.
"""
from scoreboard.league.core.constants import (
    AWAY,
    BONUS_FOULS,
    DOUBLE_BONUS_FOULS,
    HOME,
    GameStatus,
)


def format_clock(seconds):
    """1200 -> '20:00', 65 -> '1:05'"""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes}:{secs:02d}"


def period_label(period):
    """Halves are H1/H2, everything after is overtime (OT1, OT2, ...)."""
    if period == 1:
        return "H1"
    if period == 2:
        return "H2"
    return f"OT{period - 2}"


def bonus_status(opponent_fouls):
    """A team shooting against ``opponent_fouls`` is in the bonus at 6 and double bonus at 9."""
    if opponent_fouls >= DOUBLE_BONUS_FOULS:
        return "bonus+"
    if opponent_fouls >= BONUS_FOULS:
        return "bonus"
    return None


def short_player_name(full_name):
    parts = full_name.strip().split(' ')
    if len(parts) < 2:
        return full_name
    return f"{parts[0][0]}. {' '.join(parts[1:])}"


def winning_side(home_score, away_score):
    if home_score > away_score:
        return HOME
    if away_score > home_score:
        return AWAY
    return None


def winning_team_id(game):
    """Winner of a completed game, or None while it is live or tied."""
    if game.status != GameStatus.completed:
        return None
    side = winning_side(game.home_score, game.away_score)
    if side is None:
        return None
    return game.home_team_id if side == HOME else game.away_team_id


def scoreboard_view(game):
    """Game payload plus the derived fields every display needs."""
    data = game.to_dict()
    data.update({
        'homeTeamName': game.home_team.name if game.home_team else None,
        'awayTeamName': game.away_team.name if game.away_team else None,
        'clock': format_clock(game.time_remaining),
        'periodLabel': period_label(game.period),
        'homeBonus': bonus_status(game.away_fouls),
        'awayBonus': bonus_status(game.home_fouls),
        'winnerTeamId': winning_team_id(game),
    })
    return data
