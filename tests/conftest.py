"""Shared stub collaborators for the gamehub test-suite."""

from __future__ import annotations

import base64
import copy
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from jose import jwt

from gamehub.core.config import settings
from gamehub.core.errors import StorageError
from gamehub.core.storage import StoredFile
from gamehub.models.user import ADMIN_ROLE, User
from gamehub.services.game_records import GameRecord


PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-body"
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


def make_token(sub: str, minutes: int = 60) -> str:
    """Sign a bearer token the way the login service issues them."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode({"sub": sub, "exp": expire}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


class StubStorage:
    """Records uploads and returns deterministic paths."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.uploads: list[tuple[str, StoredFile]] = []
        self._fail_on = fail_on

    async def upload(self, destination_prefix: str, file: StoredFile) -> str:
        if self._fail_on is not None and file.filename == self._fail_on:
            raise StorageError(f"Failed to store {file.filename}")
        self.uploads.append((destination_prefix, file))
        return f"{destination_prefix}/{file.filename}"


class InMemoryGameRecords:
    """Dict-backed stand-in for SqlGameRecords."""

    def __init__(self, templates: dict[str, int] | None = None) -> None:
        self.templates = {"speed-sorting": 1, "quiz": 2} if templates is None else templates
        self.rows: dict[str, GameRecord] = {}
        self.writes: list[tuple[str, str, dict[str, Any]]] = []

    def _slug_for(self, template_id: int) -> str:
        return next(slug for slug, tid in self.templates.items() if tid == template_id)

    def add(self, **fields: Any) -> GameRecord:
        record = GameRecord(template_slug=self._slug_for(fields["template_id"]), **fields)
        self.rows[record.id] = record
        return record

    async def create(self, fields: dict[str, Any]) -> str:
        self.writes.append(("create", fields["id"], fields))
        self.add(**copy.deepcopy(fields))
        return fields["id"]

    async def find_by_id(self, game_id: str) -> GameRecord | None:
        return self.rows.get(game_id)

    async def update(self, game_id: str, fields: dict[str, Any]) -> GameRecord:
        self.writes.append(("update", game_id, fields))
        record = replace(self.rows[game_id], **copy.deepcopy(fields))
        self.rows[game_id] = record
        return record

    async def find_by_name_and_template(self, name: str, template_slug: str) -> GameRecord | None:
        for record in self.rows.values():
            if record.name == name and record.template_slug == template_slug:
                return record
        return None

    async def find_template_id(self, slug: str) -> int | None:
        return self.templates.get(slug)


STORED_DATASET = {
    "categories": [{"id": "cat-0", "name": "Fruit"}, {"id": "cat-1", "name": "Vegetable"}],
    "items": [
        {"id": "item-0", "text": "apple", "category_id": "cat-0"},
        {"id": "item-1", "text": "carrot", "category_id": "cat-1"},
    ],
}


@pytest.fixture
def storage() -> StubStorage:
    return StubStorage()


@pytest.fixture
def records() -> InMemoryGameRecords:
    return InMemoryGameRecords()


@pytest.fixture
def creator() -> User:
    return User(id=7, username="maker", role="STUDENT")


@pytest.fixture
def stranger() -> User:
    return User(id=99, username="someone", role="STUDENT")


@pytest.fixture
def admin() -> User:
    return User(id=1, username="root", role=ADMIN_ROLE)


@pytest.fixture
def stored_game(records: InMemoryGameRecords, creator: User) -> GameRecord:
    return records.add(
        id="game-1",
        template_id=1,
        creator_id=creator.id,
        name="Fruit or veg",
        description="Sort the produce",
        thumbnail_path="game/speed-sorting/game-1/thumb.png",
        is_published=True,
        dataset=copy.deepcopy(STORED_DATASET),
    )
