"""
League Models
"""
import time

from scoreboard import db
from scoreboard.league.core.constants import (
    DEFAULT_TIMEOUTS,
    HOME,
    PERIOD_LENGTH_SECONDS,
    GameStatus,
)


def _unix_now():
    return int(time.time())


class Team(db.Model):
    """Team model; deleting a team deletes its roster"""
    __tablename__ = 'teams'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)

    players = db.relationship('Player', backref='team', lazy=True, cascade='all, delete-orphan',
                              order_by='Player.id')

    def to_dict(self):
        return {'id': self.id, 'name': self.name}

    def __repr__(self):
        return f'<Team {self.name}>'


class Player(db.Model):
    """Roster player. Counters here are edited by hand, not by games."""
    __tablename__ = 'players'

    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    number = db.Column(db.Integer, nullable=True)
    points = db.Column(db.Integer, nullable=False, default=0)
    fouls = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'teamId': self.team_id,
            'name': self.name,
            'number': self.number,
            'points': self.points,
            'fouls': self.fouls,
        }

    def __repr__(self):
        return f'<Player {self.name} (#{self.number})>'


class Game(db.Model):
    """Live game state mutated by the control panel"""
    __tablename__ = 'games'

    id = db.Column(db.Integer, primary_key=True)
    home_team_id = db.Column(db.Integer, db.ForeignKey('teams.id'), nullable=False)
    away_team_id = db.Column(db.Integer, db.ForeignKey('teams.id'), nullable=False)
    home_score = db.Column(db.Integer, nullable=False, default=0)
    away_score = db.Column(db.Integer, nullable=False, default=0)
    period = db.Column(db.Integer, nullable=False, default=1)  # 1-2 halves, 3+ overtime
    time_remaining = db.Column(db.Integer, nullable=False, default=PERIOD_LENGTH_SECONDS)
    possession = db.Column(db.String(4), nullable=False, default=HOME)
    home_timeouts = db.Column(db.Integer, nullable=False, default=DEFAULT_TIMEOUTS)
    away_timeouts = db.Column(db.Integer, nullable=False, default=DEFAULT_TIMEOUTS)
    home_fouls = db.Column(db.Integer, nullable=False, default=0)
    away_fouls = db.Column(db.Integer, nullable=False, default=0)
    elam_ending_active = db.Column(db.Boolean, nullable=False, default=False)
    target_score = db.Column(db.Integer, nullable=True)
    clock_running = db.Column(db.Boolean, nullable=False, default=False)
    status = db.Column(db.Enum(GameStatus), nullable=False, default=GameStatus.active)
    is_tournament = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.Integer, nullable=False, default=_unix_now)
    version = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}
    # Current-game lookup: newest active game
    __table_args__ = (db.Index('ix_games_status_created_at', 'status', 'created_at'),)

    # Relationships
    home_team = db.relationship('Team', foreign_keys=[home_team_id])
    away_team = db.relationship('Team', foreign_keys=[away_team_id])
    game_players = db.relationship('GamePlayer', backref='game', lazy=True, cascade='all, delete-orphan',
                                   order_by='GamePlayer.id')

    STATE_FIELDS = (
        'home_team_id', 'away_team_id', 'home_score', 'away_score', 'period',
        'time_remaining', 'possession', 'home_timeouts', 'away_timeouts',
        'home_fouls', 'away_fouls', 'elam_ending_active', 'target_score',
        'clock_running', 'status', 'is_tournament',
    )

    @property
    def is_completed(self):
        return self.status == GameStatus.completed

    def team_id_for(self, side):
        return self.home_team_id if side == HOME else self.away_team_id

    def to_state(self):
        """Snapshot of the fields the transition engine works on."""
        return {field: getattr(self, field) for field in self.STATE_FIELDS}

    def apply(self, updates):
        for field, value in updates.items():
            if field not in self.STATE_FIELDS:
                raise KeyError(f"Unknown game field: {field}")
            setattr(self, field, value)

    def to_dict(self):
        return {
            'id': self.id,
            'homeTeamId': self.home_team_id,
            'awayTeamId': self.away_team_id,
            'homeScore': self.home_score,
            'awayScore': self.away_score,
            'period': self.period,
            'timeRemaining': self.time_remaining,
            'possession': self.possession,
            'homeTimeouts': self.home_timeouts,
            'awayTimeouts': self.away_timeouts,
            'homeFouls': self.home_fouls,
            'awayFouls': self.away_fouls,
            'elamEndingActive': self.elam_ending_active,
            'targetScore': self.target_score,
            'clockRunning': self.clock_running,
            'status': self.status.value,
            'isTournament': self.is_tournament,
            'createdAt': self.created_at,
        }

    def __repr__(self):
        return f'<Game {self.id} {self.home_score}-{self.away_score} ({self.status.value})>'


class GamePlayer(db.Model):
    """Per-game snapshot of a roster player, or a substitute when linked_player_id is null"""
    __tablename__ = 'game_players'

    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('games.id', ondelete='CASCADE'), nullable=False)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id'), nullable=False)
    # Plain reference, not a foreign key: roster edits never rewrite game history
    linked_player_id = db.Column(db.Integer, nullable=True, index=True)
    name = db.Column(db.String(100), nullable=False)
    number = db.Column(db.Integer, nullable=True)
    points = db.Column(db.Integer, nullable=False, default=0)
    fouls = db.Column(db.Integer, nullable=False, default=0)
    missing = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            'id': self.id,
            'gameId': self.game_id,
            'teamId': self.team_id,
            'linkedPlayerId': self.linked_player_id,
            'name': self.name,
            'number': self.number,
            'points': self.points,
            'fouls': self.fouls,
            'missing': self.missing,
        }

    def __repr__(self):
        return f'<GamePlayer {self.name} game={self.game_id}>'
