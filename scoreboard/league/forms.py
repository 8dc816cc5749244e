from wtforms import BooleanField, IntegerField, SelectField, StringField
from wtforms.validators import AnyOf, DataRequired, InputRequired, Length, NumberRange, Optional

from scoreboard.forms import ApiForm
from scoreboard.league.core.constants import (
    NEXT_PERIOD,
    PREVIOUS_PERIOD,
    SIDES,
    TIMEOUT_ADD,
    TIMEOUT_SUBTRACT,
)

SIDE_MESSAGE = "must be 'home' or 'away'"


class TeamForm(ApiForm):
    name = StringField('Team name', validators=[DataRequired(), Length(max=100)])


class PlayerForm(ApiForm):
    team_id = IntegerField('Team', name='teamId', validators=[InputRequired()])
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    number = IntegerField('Number', validators=[Optional(), NumberRange(min=0)])


class PlayerUpdateForm(ApiForm):
    name = StringField('Name', validators=[Optional(), Length(max=100)])
    number = IntegerField('Number', validators=[Optional(), NumberRange(min=0)])
    points = IntegerField('Points', validators=[Optional(), NumberRange(min=0)])
    fouls = IntegerField('Fouls', validators=[Optional(), NumberRange(min=0)])


class CreateGameForm(ApiForm):
    home_team_id = IntegerField('Home team', name='homeTeamId', validators=[InputRequired()])
    away_team_id = IntegerField('Away team', name='awayTeamId', validators=[InputRequired()])
    is_tournament = BooleanField('Tournament', name='isTournament')


class GameForm(ApiForm):
    """Control actions address a game explicitly or fall back to the current one."""
    game_id = IntegerField('Game', name='gameId', validators=[Optional()])


class ScoreForm(GameForm):
    team = StringField('Team', validators=[InputRequired(), AnyOf(SIDES, message=SIDE_MESSAGE)])
    points = IntegerField('Points', validators=[InputRequired()])
    game_player_id = IntegerField('Game player', name='gamePlayerId', validators=[Optional()])


class FoulForm(GameForm):
    team = StringField('Team', validators=[InputRequired(), AnyOf(SIDES, message=SIDE_MESSAGE)])
    count = IntegerField('Count', default=1, validators=[Optional()])
    game_player_id = IntegerField('Game player', name='gamePlayerId', validators=[Optional()])


class ClockUpdateForm(GameForm):
    time_remaining = IntegerField('Time remaining', name='timeRemaining', validators=[InputRequired()])


class PeriodForm(GameForm):
    direction = SelectField('Direction', choices=[(NEXT_PERIOD, NEXT_PERIOD), (PREVIOUS_PERIOD, PREVIOUS_PERIOD)],
                            validators=[InputRequired()])


class TimeoutForm(GameForm):
    team = StringField('Team', validators=[InputRequired(), AnyOf(SIDES, message=SIDE_MESSAGE)])
    action = SelectField('Action', choices=[(TIMEOUT_ADD, TIMEOUT_ADD), (TIMEOUT_SUBTRACT, TIMEOUT_SUBTRACT)],
                         default=TIMEOUT_SUBTRACT)


class ElamForm(GameForm):
    target_score = IntegerField('Target score', name='targetScore', validators=[Optional(), NumberRange(min=1)])


class GamePlayerForm(ApiForm):
    team_id = IntegerField('Team', name='teamId', validators=[InputRequired()])
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    number = IntegerField('Number', validators=[Optional(), NumberRange(min=0)])
    linked_player_id = IntegerField('Linked player', name='linkedPlayerId', validators=[Optional()])


class GamePlayerStatsForm(ApiForm):
    points = IntegerField('Points', validators=[InputRequired()])
    fouls = IntegerField('Fouls', validators=[InputRequired()])
