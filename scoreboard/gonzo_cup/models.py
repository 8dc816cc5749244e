"""
Gonzo Cup Models
"""
from scoreboard import db


class BracketSlot(db.Model):
    """One side of a bracket match; the winner moves into next_slot"""
    __tablename__ = 'bracket_slots'

    id = db.Column(db.Integer, primary_key=True)
    round = db.Column(db.Integer, nullable=False)  # 1=final, 2=semifinal, 3=quarterfinal
    position = db.Column(db.Integer, nullable=False)  # 0-indexed within the round
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True)
    game_id = db.Column(db.Integer, db.ForeignKey('games.id', ondelete='SET NULL'), nullable=True)
    next_slot_id = db.Column(db.Integer, db.ForeignKey('bracket_slots.id'), nullable=True)
    is_top_slot = db.Column(db.Boolean, nullable=False, default=True)  # feeds home (top) or away
    scheduled_time = db.Column(db.String(50), nullable=True)  # free text, e.g. "Sat 2pm"

    team = db.relationship('Team')
    game = db.relationship('Game')

    def to_dict(self):
        return {
            'id': self.id,
            'round': self.round,
            'position': self.position,
            'teamId': self.team_id,
            'gameId': self.game_id,
            'nextSlotId': self.next_slot_id,
            'isTopSlot': self.is_top_slot,
            'scheduledTime': self.scheduled_time,
        }

    def __repr__(self):
        return f'<BracketSlot r{self.round}p{self.position} team={self.team_id}>'
