from __future__ import annotations

import logging
from typing import Optional, Sequence

from gamehub.core.errors import ValidationError
from gamehub.core.storage import FileStorage, StoredFile
from gamehub.schemas.speed_sorting import (
    SPEED_SORTING_SLUG,
    Category,
    CategoryIn,
    Item,
    ItemIn,
    SpeedSortingDataset,
)
from gamehub.services.item_classifier import FileItem, classify_item


logger = logging.getLogger(__name__)

MIN_CATEGORIES, MAX_CATEGORIES = 2, 20
MIN_ITEMS, MAX_ITEMS = 1, 1000


def items_prefix(game_id: str) -> str:
    return f"game/{SPEED_SORTING_SLUG}/{game_id}/items"


def build_categories(raw_categories: Sequence[CategoryIn]) -> list[Category]:
    # ids are positional: reordering categories regenerates every id
    return [Category(id=f"cat-{i}", name=c.name) for i, c in enumerate(raw_categories)]


async def assemble_speed_sorting_dataset(
    raw_categories: Sequence[CategoryIn],
    raw_items: Sequence[ItemIn],
    game_id: str,
    storage: FileStorage,
    show_score_at_end: Optional[bool] = None,
) -> SpeedSortingDataset:
    """
    Turn submitted categories/items into the stored dataset.

    File items are uploaded one by one under game/speed-sorting/<id>/items and
    replaced by the returned storage path. Uploads that already happened are
    not rolled back if a later item fails.
    """
    if not MIN_CATEGORIES <= len(raw_categories) <= MAX_CATEGORIES:
        raise ValidationError(
            f"categories must contain {MIN_CATEGORIES}-{MAX_CATEGORIES} entries",
            details={"field": "categories", "count": len(raw_categories)},
        )
    if not MIN_ITEMS <= len(raw_items) <= MAX_ITEMS:
        raise ValidationError(
            f"items must contain {MIN_ITEMS}-{MAX_ITEMS} entries",
            details={"field": "items", "count": len(raw_items)},
        )

    categories = build_categories(raw_categories)

    items: list[Item] = []
    uploaded = 0
    for index, raw in enumerate(raw_items):
        if not 0 <= raw.category_index < len(categories):
            raise ValidationError(
                f"Invalid category_index at item no. {index + 1}",
                details={"field": f"items[{index}].category_index", "value": raw.category_index},
            )
        category = categories[raw.category_index]

        classified = classify_item(raw.value, index, raw.type)
        if isinstance(classified, FileItem):
            text = await storage.upload(
                items_prefix(game_id),
                StoredFile(
                    content=classified.content,
                    filename=classified.filename,
                    media_type=classified.media_type,
                ),
            )
            uploaded += 1
        else:
            text = classified.text

        items.append(Item(id=f"item-{index}", text=text, category_id=category.id))

    logger.info(
        "Assembled speed-sorting dataset for game %s: %d categories, %d items (%d uploaded)",
        game_id, len(categories), len(items), uploaded,
    )
    return SpeedSortingDataset(
        categories=categories,
        items=items,
        show_score_at_end=show_score_at_end,
    )


async def replace_dataset(
    raw_categories: Optional[Sequence[CategoryIn]],
    raw_items: Optional[Sequence[ItemIn]],
    game_id: str,
    storage: FileStorage,
    show_score_at_end: Optional[bool] = None,
) -> Optional[SpeedSortingDataset]:
    """All-or-nothing dataset replacement; None when neither part was sent."""
    if raw_categories is None and raw_items is None:
        return None
    if raw_categories is None or raw_items is None:
        raise ValidationError(
            "categories and items must both be provided when updating dataset",
            details={"field": "items" if raw_items is None else "categories"},
        )
    return await assemble_speed_sorting_dataset(
        raw_categories, raw_items, game_id, storage, show_score_at_end
    )
