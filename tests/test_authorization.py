from __future__ import annotations

import pytest

from gamehub.core.errors import ForbiddenError
from gamehub.services.authorization import authorize_update


def test_creator_may_update(stored_game, creator) -> None:
    authorize_update(stored_game, creator)


def test_admin_may_update_any_game(stored_game, admin) -> None:
    authorize_update(stored_game, admin)


def test_other_users_are_forbidden(stored_game, stranger) -> None:
    with pytest.raises(ForbiddenError) as exc:
        authorize_update(stored_game, stranger)

    assert exc.value.status_code == 403
    assert exc.value.details == {"game_id": stored_game.id}
