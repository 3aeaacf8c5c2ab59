from __future__ import annotations

import json
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


SPEED_SORTING_SLUG = "speed-sorting"

TimerMode = Literal["NONE", "COUNT_UP", "COUNT_DOWN"]

DEFAULT_COUNT_DOWN_SECONDS = 60


def _json_string_to_object(value: Any) -> Any:
    # multipart forms carry categories/items as JSON text
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f"must be a JSON array ({exc.msg})") from exc
    return value


# ---------- raw input ----------

class CategoryIn(BaseModel):
    name: str = Field(..., max_length=128)

    model_config = ConfigDict(str_strip_whitespace=True)


class ItemIn(BaseModel):
    value: str
    category_index: int = Field(..., ge=0)
    type: Optional[Literal["text", "file"]] = None


class CreateSpeedSortingIn(BaseModel):
    name: str = Field(..., max_length=128)
    description: Optional[str] = Field(default=None, max_length=256)
    is_publish_immediately: bool = False
    show_score_at_end: Optional[bool] = None

    categories: list[CategoryIn] = Field(..., min_length=2, max_length=20)
    items: list[ItemIn] = Field(..., min_length=1, max_length=1000)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("categories", "items", mode="before")
    @classmethod
    def decode_json_lists(cls, v: Any) -> Any:
        return _json_string_to_object(v)


class UpdateSpeedSortingIn(BaseModel):
    name: Optional[str] = Field(default=None, max_length=128)
    description: Optional[str] = Field(default=None, max_length=256)
    is_publish: Optional[bool] = None
    show_score_at_end: Optional[bool] = None

    # when present, categories and items REPLACE the stored dataset together
    categories: Optional[list[CategoryIn]] = Field(default=None, min_length=2, max_length=20)
    items: Optional[list[ItemIn]] = Field(default=None, min_length=1, max_length=1000)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("categories", "items", mode="before")
    @classmethod
    def decode_json_lists(cls, v: Any) -> Any:
        return _json_string_to_object(v)


# ---------- stored dataset ----------

class Category(BaseModel):
    id: str
    name: str


class Item(BaseModel):
    id: str
    text: str
    category_id: str


class SpeedSortingDataset(BaseModel):
    categories: list[Category] = Field(..., min_length=2, max_length=20)
    items: list[Item] = Field(..., min_length=1, max_length=1000)
    show_score_at_end: Optional[bool] = None

    @model_validator(mode="after")
    def items_reference_known_categories(self) -> "SpeedSortingDataset":
        known = {c.id for c in self.categories}
        for pos, item in enumerate(self.items, start=1):
            if item.category_id not in known:
                raise ValueError(
                    f"item no. {pos} references unknown category {item.category_id!r}"
                )
        return self

    def to_json(self) -> dict[str, Any]:
        """Shape persisted in games.game_json."""
        return self.model_dump(exclude_none=True)


# ---------- play ----------

class PlayConfigIn(BaseModel):
    timer_mode: TimerMode
    timer_duration: Optional[int] = Field(default=None, gt=0, le=3600)
    speed: int = Field(..., ge=100, le=1000)
    lives: int = Field(..., ge=0, le=10)

    @field_validator("timer_duration")
    @classmethod
    def duration_only_with_count_down(cls, v: Optional[int], info: ValidationInfo) -> Optional[int]:
        # timer_mode is declared first, so it is already in info.data when valid
        if v is not None and info.data.get("timer_mode") != "COUNT_DOWN":
            raise ValueError("must be null/undefined when timer_mode is not COUNT_DOWN")
        return v


class PlayConfig(BaseModel):
    timer_mode: TimerMode
    timer_duration: Optional[int]
    speed: int
    lives: int


# ---------- responses ----------

class GameCreatedOut(BaseModel):
    id: str


class GameUpdatedOut(BaseModel):
    id: str
    game_json: dict[str, Any]


class SpeedSortingPlayOut(BaseModel):
    id: str
    name: str
    description: Optional[str]
    thumbnail_path: str
    config: PlayConfig
    categories: list[Category]
    items: list[Item]
