from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Optional

from gamehub.core.errors import ForbiddenError, InternalError, NotFoundError, ValidationError
from gamehub.core.storage import FileStorage, StoredFile
from gamehub.schemas.datasets import parse_dataset
from gamehub.schemas.speed_sorting import (
    SPEED_SORTING_SLUG,
    CreateSpeedSortingIn,
    GameCreatedOut,
    GameUpdatedOut,
    SpeedSortingPlayOut,
    UpdateSpeedSortingIn,
)
from gamehub.services.authorization import authorize_update
from gamehub.services.dataset_assembler import assemble_speed_sorting_dataset, replace_dataset
from gamehub.services.game_records import GameRecord, GameRecordGateway
from gamehub.services.play_config import resolve_play_config


logger = logging.getLogger(__name__)


def game_prefix(game_id: str) -> str:
    return f"game/{SPEED_SORTING_SLUG}/{game_id}"


async def ensure_name_not_duplicate(records: GameRecordGateway, name: str) -> None:
    # not atomic with the insert; the unique constraint is the backstop
    existing = await records.find_by_name_and_template(name, SPEED_SORTING_SLUG)
    if existing:
        raise ValidationError("Game name already used", details={"field": "name"})


async def get_template_id(records: GameRecordGateway) -> int:
    template_id = await records.find_template_id(SPEED_SORTING_SLUG)
    if template_id is None:
        logger.error("Game template %r is missing", SPEED_SORTING_SLUG)
        raise InternalError("Speed Sorting game template not found")
    return template_id


async def load_speed_sorting(records: GameRecordGateway, game_id: str) -> GameRecord:
    game = await records.find_by_id(game_id)
    if not game:
        logger.warning("Speed sorting game %s not found", game_id)
        raise NotFoundError("Speed Sorting game not found", details={"game_id": game_id})
    if game.template_slug != SPEED_SORTING_SLUG:
        raise ValidationError(
            "Game is not a Speed Sorting template",
            details={"game_id": game_id, "template": game.template_slug},
        )
    return game


async def create_speed_sorting(
    data: CreateSpeedSortingIn,
    thumbnail: StoredFile,
    user_id: int,
    *,
    records: GameRecordGateway,
    storage: FileStorage,
) -> GameCreatedOut:
    await ensure_name_not_duplicate(records, data.name)

    game_id = str(uuid.uuid4())
    template_id = await get_template_id(records)

    thumbnail_path = await storage.upload(game_prefix(game_id), thumbnail)

    dataset = await assemble_speed_sorting_dataset(
        data.categories,
        data.items,
        game_id,
        storage,
        show_score_at_end=data.show_score_at_end,
    )

    new_id = await records.create(
        {
            "id": game_id,
            "template_id": template_id,
            "creator_id": user_id,
            "name": data.name,
            "description": data.description,
            "thumbnail_path": thumbnail_path,
            "is_published": data.is_publish_immediately,
            "dataset": dataset.to_json(),
        }
    )
    logger.info("User %s created speed sorting game %s", user_id, new_id)
    return GameCreatedOut(id=new_id)


async def update_speed_sorting(
    game_id: str,
    data: UpdateSpeedSortingIn,
    thumbnail: Optional[StoredFile],
    user: Any,
    *,
    records: GameRecordGateway,
    storage: FileStorage,
) -> GameUpdatedOut:
    existing = await load_speed_sorting(records, game_id)
    authorize_update(existing, user)

    fields: dict[str, Any] = {
        "name": data.name if data.name is not None else existing.name,
        "description": data.description if data.description is not None else existing.description,
        "is_published": data.is_publish if data.is_publish is not None else existing.is_published,
        "thumbnail_path": existing.thumbnail_path,
    }

    if thumbnail is not None:
        fields["thumbnail_path"] = await storage.upload(game_prefix(game_id), thumbnail)

    show_score = data.show_score_at_end
    if show_score is None:
        show_score = existing.dataset.get("show_score_at_end")

    dataset = await replace_dataset(data.categories, data.items, game_id, storage, show_score)
    if dataset is not None:
        fields["dataset"] = dataset.to_json()
    elif data.show_score_at_end is not None:
        # flag-only change, categories/items stay exactly as stored
        fields["dataset"] = {**existing.dataset, "show_score_at_end": data.show_score_at_end}

    updated = await records.update(game_id, fields)
    logger.info(
        "User %s updated speed sorting game %s (dataset replaced: %s)",
        user.id, game_id, dataset is not None,
    )
    return GameUpdatedOut(id=updated.id, game_json=updated.dataset)


async def get_speed_sorting_for_play(
    game_id: str,
    raw_config: Mapping[str, Any],
    *,
    records: GameRecordGateway,
) -> SpeedSortingPlayOut:
    game = await load_speed_sorting(records, game_id)
    if not game.is_published:
        logger.warning("Play requested for unpublished game %s", game_id)
        raise ForbiddenError("Game is not published", details={"game_id": game_id})

    config = resolve_play_config(raw_config)
    dataset = parse_dataset(game.template_slug, game.dataset)

    return SpeedSortingPlayOut(
        id=game.id,
        name=game.name,
        description=game.description,
        thumbnail_path=game.thumbnail_path,
        config=config,
        categories=dataset.categories,
        items=dataset.items,
    )
