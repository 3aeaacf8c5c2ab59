from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gamehub.api.deps import get_game_records
from gamehub.core.errors import ValidationError
from gamehub.core.security import get_current_user
from gamehub.core.storage import FileStorage, StoredFile, get_storage
from gamehub.models.user import User
from gamehub.schemas.speed_sorting import (
    SPEED_SORTING_SLUG,
    CreateSpeedSortingIn,
    GameCreatedOut,
    GameUpdatedOut,
    SpeedSortingPlayOut,
    UpdateSpeedSortingIn,
)
from gamehub.services import speed_sorting as service
from gamehub.services.game_records import GameRecordGateway


router = APIRouter(prefix=f"/{SPEED_SORTING_SLUG}", tags=["speed-sorting"])


def _parse_form(model: type[BaseModel], form: dict[str, Any]) -> Any:
    # unset form fields must not override model defaults
    data = {k: v for k, v in form.items() if v is not None}
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        fields = sorted({".".join(str(p) for p in e["loc"]) for e in errors})
        raise ValidationError(f"Invalid fields: {', '.join(fields)}", details=errors) from exc


async def _read_thumbnail(upload: UploadFile) -> StoredFile:
    media_type = upload.content_type or ""
    if not media_type.startswith("image/"):
        raise ValidationError(
            "thumbnail_image must be an image",
            details={"field": "thumbnail_image", "media_type": media_type},
        )
    content = await upload.read()
    if not content:
        raise ValidationError("thumbnail_image is empty", details={"field": "thumbnail_image"})
    return StoredFile(content=content, filename=upload.filename or "thumbnail", media_type=media_type)


@router.post("", response_model=GameCreatedOut, status_code=status.HTTP_201_CREATED)
async def create_speed_sorting(
    name: str = Form(...),
    categories: str = Form(..., description="JSON array of {name}"),
    items: str = Form(..., description="JSON array of {value, category_index, type?}"),
    thumbnail_image: UploadFile = File(...),
    description: Optional[str] = Form(None),
    is_publish_immediately: Optional[str] = Form(None),
    show_score_at_end: Optional[str] = Form(None),
    user: User = Depends(get_current_user),
    records: GameRecordGateway = Depends(get_game_records),
    storage: FileStorage = Depends(get_storage),
):
    data = _parse_form(
        CreateSpeedSortingIn,
        {
            "name": name,
            "description": description,
            "is_publish_immediately": is_publish_immediately,
            "show_score_at_end": show_score_at_end,
            "categories": categories,
            "items": items,
        },
    )
    thumbnail = await _read_thumbnail(thumbnail_image)

    return await service.create_speed_sorting(
        data, thumbnail, user.id, records=records, storage=storage
    )


@router.patch("/{game_id}", response_model=GameUpdatedOut)
async def update_speed_sorting(
    game_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail_image: Optional[UploadFile] = File(None),
    is_publish: Optional[str] = Form(None),
    show_score_at_end: Optional[str] = Form(None),
    categories: Optional[str] = Form(None),
    items: Optional[str] = Form(None),
    user: User = Depends(get_current_user),
    records: GameRecordGateway = Depends(get_game_records),
    storage: FileStorage = Depends(get_storage),
):
    data = _parse_form(
        UpdateSpeedSortingIn,
        {
            "name": name,
            "description": description,
            "is_publish": is_publish,
            "show_score_at_end": show_score_at_end,
            "categories": categories,
            "items": items,
        },
    )
    thumbnail = await _read_thumbnail(thumbnail_image) if thumbnail_image is not None else None

    return await service.update_speed_sorting(
        game_id, data, thumbnail, user, records=records, storage=storage
    )


@router.post("/{game_id}/play", response_model=SpeedSortingPlayOut)
async def play_speed_sorting(
    game_id: str,
    config: dict[str, Any] = Body(...),
    records: GameRecordGateway = Depends(get_game_records),
):
    return await service.get_speed_sorting_for_play(game_id, config, records=records)
