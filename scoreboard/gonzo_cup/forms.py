from wtforms import FieldList, IntegerField, StringField
from wtforms.validators import InputRequired, Length, NumberRange, Optional

from scoreboard.forms import ApiForm
from scoreboard.gonzo_cup.core.bracket import FINAL, QUARTERFINAL


class BracketInitForm(ApiForm):
    # Seeds 1-4 in order; the count is checked when the bracket is laid out
    east = FieldList(IntegerField('Team', validators=[InputRequired()]), label='East')
    west = FieldList(IntegerField('Team', validators=[InputRequired()]), label='West')


class SlotUpdateForm(ApiForm):
    team_id = IntegerField('Team', name='teamId', validators=[Optional()])
    game_id = IntegerField('Game', name='gameId', validators=[Optional()])
    scheduled_time = StringField('Scheduled time', name='scheduledTime', validators=[Optional(), Length(max=50)])


class MatchGameForm(ApiForm):
    round = IntegerField('Round', validators=[InputRequired(), NumberRange(min=FINAL, max=QUARTERFINAL)])
