from __future__ import annotations

import logging
from typing import Any

from gamehub.core.errors import ForbiddenError
from gamehub.models.user import ADMIN_ROLE


logger = logging.getLogger(__name__)


def authorize_update(record: Any, user: Any) -> None:
    """Only the creator or an admin may mutate an existing game."""
    if user.id == record.creator_id or user.role == ADMIN_ROLE:
        return

    logger.warning("User %s denied update of game %s", user.id, record.id)
    raise ForbiddenError(
        "You are not allowed to update this game",
        details={"game_id": record.id},
    )
