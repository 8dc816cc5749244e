"""
Season aggregation: player statistics and team standings.

Both folds take already-filtered rows (completed league games, or completed
tournament games) so the two pools are never mixed here.
"""
from scoreboard.league.core.display import winning_side
from scoreboard.league.core.constants import AWAY, HOME


def format_average(total, count, places=1):
    if count == 0:
        return f"{0:.{places}f}"
    return f"{total / count:.{places}f}"


def format_win_pct(wins, games_played):
    if games_played == 0:
        return '.000'
    return f"{wins / games_played:.3f}"


def aggregate_player_stats(game_players):
    """
    Fold GamePlayer rows into per-player season totals.

    Substitutes (no linked roster player) and players marked missing do not
    count, so they add neither points nor games played.
    """
    stats = {}
    for gp in game_players:
        if gp.linked_player_id is None or gp.missing:
            continue
        entry = stats.setdefault(gp.linked_player_id, {
            'playerId': gp.linked_player_id,
            'teamId': gp.team_id,
            'name': gp.name,
            'number': gp.number,
            'totalPoints': 0,
            'totalFouls': 0,
            'gamesPlayed': 0,
        })
        entry['totalPoints'] += gp.points
        entry['totalFouls'] += gp.fouls
        entry['gamesPlayed'] += 1

    results = list(stats.values())
    for entry in results:
        entry['avgPoints'] = format_average(entry['totalPoints'], entry['gamesPlayed'])
    results.sort(key=lambda e: (-e['totalPoints'], e['name'].lower()))
    return results


def _win_fraction(row):
    if row['gamesPlayed'] == 0:
        return 0.0
    return round(row['wins'] / row['gamesPlayed'], 3)


def _avg_point_diff(row):
    if row['gamesPlayed'] == 0:
        return 0.0
    return row['pointDiff'] / row['gamesPlayed']


def standings_sort_key(row):
    """Win percentage, then average point differential, then team name."""
    return (-_win_fraction(row), -_avg_point_diff(row), row['teamName'].lower())


def assign_ranks(rows):
    """Rows with equal win percentage share a rank; the next distinct rank skips."""
    previous = None
    for index, row in enumerate(rows):
        fraction = _win_fraction(row)
        if previous is not None and fraction == _win_fraction(previous):
            row['rank'] = previous['rank']
        else:
            row['rank'] = index + 1
        previous = row
    return rows


def compute_standings(teams, games):
    """
    Build the standings table for ``teams`` from completed ``games``.

    Every team appears, including teams that have not played. Games whose
    teams are not in ``teams`` are ignored. Exact ties count as neither a
    win nor a loss.
    """
    table = {}
    for team in teams:
        table[team.id] = {
            'teamId': team.id,
            'teamName': team.name,
            'wins': 0,
            'losses': 0,
            'pointsFor': 0,
            'pointsAgainst': 0,
            'gamesPlayed': 0,
        }

    for game in games:
        home = table.get(game.home_team_id)
        away = table.get(game.away_team_id)
        if home is None or away is None:
            continue

        home['gamesPlayed'] += 1
        away['gamesPlayed'] += 1
        home['pointsFor'] += game.home_score
        home['pointsAgainst'] += game.away_score
        away['pointsFor'] += game.away_score
        away['pointsAgainst'] += game.home_score

        side = winning_side(game.home_score, game.away_score)
        if side == HOME:
            home['wins'] += 1
            away['losses'] += 1
        elif side == AWAY:
            away['wins'] += 1
            home['losses'] += 1

    rows = list(table.values())
    for row in rows:
        played = row['gamesPlayed']
        row['winPct'] = format_win_pct(row['wins'], played)
        row['pointDiff'] = row['pointsFor'] - row['pointsAgainst']
        row['ppg'] = format_average(row['pointsFor'], played)
        row['pag'] = format_average(row['pointsAgainst'], played)

    rows.sort(key=standings_sort_key)
    return assign_ranks(rows)
