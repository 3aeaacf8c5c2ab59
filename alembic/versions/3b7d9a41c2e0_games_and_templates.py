"""users, game templates and games

Revision ID: 3b7d9a41c2e0
Revises:
Create Date: 2026-10-19 10:12:40.114205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from gamehub.db.sql import template_rows


# revision identifiers, used by Alembic.
revision: str = '3b7d9a41c2e0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="STUDENT"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    )

    templates = op.create_table(
        "game_templates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("slug", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.String(128), nullable=False),
    )

    op.create_table(
        "games",
        sa.Column("id", sa.String(36), primary_key=True, comment="uuid4"),
        sa.Column(
            "game_template_id",
            sa.Integer(),
            sa.ForeignKey("game_templates.id"),
            nullable=False,
        ),
        sa.Column(
            "creator_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.String(256), nullable=True),
        sa.Column("thumbnail_image", sa.String(512), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "game_json",
            sa.JSON(),
            nullable=False,
            comment="dataset, shape depends on the template slug",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.UniqueConstraint("game_template_id", "name", name="uq_games_template_name"),
    )

    op.create_index("ix_games_game_template_id", "games", ["game_template_id"])
    op.create_index("ix_games_creator_id", "games", ["creator_id"])

    op.bulk_insert(
        templates,
        [{"slug": slug, "name": name} for slug, name in template_rows()],
    )


def downgrade() -> None:
    op.drop_index("ix_games_creator_id", table_name="games")
    op.drop_index("ix_games_game_template_id", table_name="games")
    op.drop_table("games")
    op.drop_table("game_templates")
    op.drop_table("users")
