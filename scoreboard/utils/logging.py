"""
Logging utilities for recording scoreboard activity.
"""

from scoreboard.models import LogEntry
from scoreboard import db


def log_activity(project, category, description, commit=True):
    """
    Record a lifecycle event (game created, bracket reset, ...) in the activity log.

    Args:
        project (str): Area of the app ('league' or 'gonzo_cup')
        category (str): Short event label, e.g. 'Game Completed'
        description (str): Human-readable description
        commit (bool): Commit the session immediately. Pass False when the
                       entry should be part of a larger transaction.
    """
    log_entry = LogEntry(
        project=project,
        category=category,
        description=description
    )
    db.session.add(log_entry)
    if commit:
        db.session.commit()
    return log_entry
