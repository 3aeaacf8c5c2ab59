from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gamehub.core.errors import NotFoundError, ValidationError
from gamehub.models.game import Game, GameTemplate


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameRecord:
    id: str
    template_id: int
    template_slug: str
    creator_id: int
    name: str
    description: Optional[str]
    thumbnail_path: str
    is_published: bool
    dataset: dict[str, Any]


class GameRecordGateway(Protocol):
    async def create(self, fields: dict[str, Any]) -> str:
        ...

    async def find_by_id(self, game_id: str) -> Optional[GameRecord]:
        ...

    async def update(self, game_id: str, fields: dict[str, Any]) -> GameRecord:
        ...

    async def find_by_name_and_template(self, name: str, template_slug: str) -> Optional[GameRecord]:
        ...

    async def find_template_id(self, slug: str) -> Optional[int]:
        ...


# GameRecord field -> games column
_COLUMNS = {
    "id": "id",
    "template_id": "game_template_id",
    "creator_id": "creator_id",
    "name": "name",
    "description": "description",
    "thumbnail_path": "thumbnail_image",
    "is_published": "is_published",
    "dataset": "game_json",
}


def _to_record(game: Game) -> GameRecord:
    return GameRecord(
        id=game.id,
        template_id=game.game_template_id,
        template_slug=game.game_template.slug,
        creator_id=game.creator_id,
        name=game.name,
        description=game.description,
        thumbnail_path=game.thumbnail_image,
        is_published=game.is_published,
        dataset=game.game_json,
    )


class SqlGameRecords:
    """games / game_templates access on top of an AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, fields: dict[str, Any]) -> str:
        game = Game(**{_COLUMNS[k]: v for k, v in fields.items()})
        self.session.add(game)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            # uq_games_template_name catches what the pre-check raced past
            raise ValidationError("Game name already used", details={"field": "name"}) from e
        logger.info("Created game %s", game.id)
        return game.id

    async def _get(self, game_id: str) -> Optional[Game]:
        return await self.session.scalar(select(Game).where(Game.id == game_id))

    async def find_by_id(self, game_id: str) -> Optional[GameRecord]:
        game = await self._get(game_id)
        return _to_record(game) if game else None

    async def update(self, game_id: str, fields: dict[str, Any]) -> GameRecord:
        game = await self._get(game_id)
        if not game:
            raise NotFoundError(f"Game {game_id} not found")

        for k, v in fields.items():
            setattr(game, _COLUMNS[k], v)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ValidationError("Game name already used", details={"field": "name"}) from e
        return _to_record(game)

    async def find_by_name_and_template(self, name: str, template_slug: str) -> Optional[GameRecord]:
        game = await self.session.scalar(
            select(Game)
            .join(GameTemplate, Game.game_template_id == GameTemplate.id)
            .where(Game.name == name, GameTemplate.slug == template_slug)
            .limit(1)
        )
        return _to_record(game) if game else None

    async def find_template_id(self, slug: str) -> Optional[int]:
        return await self.session.scalar(
            select(GameTemplate.id).where(GameTemplate.slug == slug)
        )
