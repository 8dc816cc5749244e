from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from dotenv import load_dotenv
import os
import logging

load_dotenv()

db = SQLAlchemy()
migrate = Migrate()

def create_app(test_config=None):
    # Validate required environment variables
    if test_config is None:
        required_vars = ['DATABASE_URL', 'SECRET_KEY']
        for var in required_vars:
            if not os.getenv(var):
                raise ValueError(f"Required environment variable {var} is not set")

    app = Flask(__name__)
    app.config.from_object('scoreboard.config')
    if test_config is not None:
        app.config.update(test_config)

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Register blueprints
    from scoreboard.league.routes import league_bp
    from scoreboard.gonzo_cup.routes import gonzo_cup_bp

    app.register_blueprint(league_bp, url_prefix='/api')
    app.register_blueprint(gonzo_cup_bp, url_prefix='/api/gonzo-cup')

    # CLI commands
    from scoreboard.league.commands import league_cli
    from scoreboard.gonzo_cup.commands import gonzo_cup_cli

    app.cli.add_command(league_cli)
    app.cli.add_command(gonzo_cup_cli)

    # Import models to ensure they're known to Flask-SQLAlchemy
    from scoreboard.models import LogEntry
    from scoreboard.league.models import Team, Player, Game, GamePlayer
    from scoreboard.gonzo_cup.models import BracketSlot

    from scoreboard.errors import register_error_handlers
    register_error_handlers(app)

    return app
