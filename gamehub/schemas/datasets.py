"""
Dataset models keyed by template slug.

games.game_json is one opaque JSON blob for every game type; each slug owns
the model that validates its own shape.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gamehub.core.errors import InternalError
from gamehub.schemas.speed_sorting import SPEED_SORTING_SLUG, SpeedSortingDataset


DATASET_MODELS: dict[str, type[BaseModel]] = {
    SPEED_SORTING_SLUG: SpeedSortingDataset,
}


def parse_dataset(template_slug: str, game_json: Any) -> BaseModel:
    model = DATASET_MODELS.get(template_slug)
    if model is None:
        raise InternalError(f"No dataset model registered for template {template_slug!r}")
    try:
        return model.model_validate(game_json)
    except PydanticValidationError as exc:
        # stored payload no longer matches its schema
        raise InternalError(
            f"Stored {template_slug} dataset is corrupt",
            details=exc.errors(include_url=False, include_context=False),
        ) from exc
