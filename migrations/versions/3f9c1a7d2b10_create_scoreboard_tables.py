"""Create scoreboard, roster, bracket and activity log tables

Revision ID: 3f9c1a7d2b10
Revises:
Create Date: 2026-10-19 18:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1a7d2b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "log_entry",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("project", sa.String(length=50), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("number", sa.Integer(), nullable=True),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fouls", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "games",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("home_team_id", sa.Integer(), nullable=False),
        sa.Column("away_team_id", sa.Integer(), nullable=False),
        sa.Column("home_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("away_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("period", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("time_remaining", sa.Integer(), nullable=False, server_default="1200"),
        sa.Column("possession", sa.String(length=4), nullable=False, server_default="home"),
        sa.Column("home_timeouts", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("away_timeouts", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("home_fouls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("away_fouls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("elam_ending_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("target_score", sa.Integer(), nullable=True),
        sa.Column("clock_running", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "status",
            sa.Enum("active", "completed", name="gamestatus"),
            nullable=False,
            server_default="active",
        ),
        sa.Column("is_tournament", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["home_team_id"], ["teams.id"]),
        sa.ForeignKeyConstraint(["away_team_id"], ["teams.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    # Current-game lookup: newest active game
    op.create_index("ix_games_status_created_at", "games", ["status", "created_at"])

    op.create_table(
        "game_players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column("linked_player_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("number", sa.Integer(), nullable=True),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fouls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("missing", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_game_players_linked_player_id", "game_players", ["linked_player_id"])

    op.create_table(
        "bracket_slots",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("round", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("game_id", sa.Integer(), nullable=True),
        sa.Column("next_slot_id", sa.Integer(), nullable=True),
        sa.Column("is_top_slot", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("scheduled_time", sa.String(length=50), nullable=True),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["next_slot_id"], ["bracket_slots.id"]),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade():
    op.drop_table("bracket_slots")
    op.drop_index("ix_game_players_linked_player_id", table_name="game_players")
    op.drop_table("game_players")
    op.drop_index("ix_games_status_created_at", table_name="games")
    op.drop_table("games")
    op.execute("DROP TYPE IF EXISTS gamestatus")
    op.drop_table("players")
    op.drop_table("teams")
    op.drop_table("log_entry")
