from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, DateTime, Boolean, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from gamehub.models.base import Base


class GameTemplate(Base):
    __tablename__ = "game_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)


class Game(Base):
    __tablename__ = "games"

    # uuid4 string, generated by the service before uploads start
    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    game_template_id: Mapped[int] = mapped_column(
        ForeignKey("game_templates.id"),
        nullable=False,
        index=True,
    )
    creator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    thumbnail_image: Mapped[str] = mapped_column(String(512), nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # type-specific dataset, shape depends on the template slug
    game_json: Mapped[dict] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    game_template: Mapped["GameTemplate"] = relationship(lazy="joined")

    __table_args__ = (
        UniqueConstraint("game_template_id", "name", name="uq_games_template_name"),
    )
