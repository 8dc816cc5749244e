"""
Error taxonomy shared by the scoreboard services and routes.

Services raise these; the app-level handler turns them into
``{"error": message}`` JSON responses with the matching status code.
"""
from flask import jsonify


class ScoreboardError(Exception):
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFound(ScoreboardError):
    """No such game, slot, team or player."""
    status_code = 404


class InvalidOperation(ScoreboardError):
    """The action is well-formed but not allowed in the current state."""
    status_code = 400


class ConcurrentUpdate(InvalidOperation):
    """Another writer changed the game first; the action can be retried."""


class ValidationError(ScoreboardError):
    """The request payload has the wrong shape."""
    status_code = 400


class Unauthorized(ScoreboardError):
    status_code = 401


def register_error_handlers(app):
    @app.errorhandler(ScoreboardError)
    def handle_scoreboard_error(error):
        return jsonify({'error': error.message}), error.status_code
