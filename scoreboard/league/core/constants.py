"""
Game constants shared by the models, the transition engine and the displays.
"""
import enum

HOME = 'home'
AWAY = 'away'
SIDES = (HOME, AWAY)

# One period (half) is 20:00
PERIOD_LENGTH_SECONDS = 1200
DEFAULT_TIMEOUTS = 3

# Elam Ending target = leading score + margin unless the operator supplies one
ELAM_TARGET_MARGIN = 8

# Opponent team fouls that put a team in the bonus / double bonus
BONUS_FOULS = 6
DOUBLE_BONUS_FOULS = 9

NEXT_PERIOD = 'next'
PREVIOUS_PERIOD = 'prev'

TIMEOUT_ADD = 'add'
TIMEOUT_SUBTRACT = 'subtract'


class GameStatus(enum.Enum):
    active = "active"
    completed = "completed"
