import os

DATABASE_URL = os.getenv("DATABASE_URL", "").replace("postgres://", "postgresql://", 1)
SQLALCHEMY_DATABASE_URI = DATABASE_URL

SECRET_KEY = os.getenv("SECRET_KEY")

# PIN required to delete a game from the history
DELETE_PIN = os.getenv("DELETE_PIN", "1324")

# Seconds between clock poller ticks
CLOCK_POLL_INTERVAL = float(os.getenv("CLOCK_POLL_INTERVAL", "1"))

# JSON API only; forms are validated without CSRF tokens
WTF_CSRF_ENABLED = False
