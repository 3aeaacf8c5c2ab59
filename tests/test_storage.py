from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import pytest

from gamehub.core import storage as storage_module
from gamehub.core.errors import StorageError
from gamehub.core.storage import HttpFileStorage, LocalFileStorage, StoredFile, get_storage


FILE = StoredFile(content=b"\x89PNG", filename="item-0.png", media_type="image/png")


def test_local_storage_writes_under_prefix(tmp_path: Path) -> None:
    backend = LocalFileStorage(tmp_path)

    path = asyncio.run(backend.upload("game/speed-sorting/g-1/items", FILE))

    assert path.startswith("game/speed-sorting/g-1/items/")
    assert path.endswith("-item-0.png")
    assert (tmp_path / path).read_bytes() == b"\x89PNG"


def test_local_storage_paths_are_unique_per_upload(tmp_path: Path) -> None:
    backend = LocalFileStorage(tmp_path)

    first = asyncio.run(backend.upload("p", FILE))
    second = asyncio.run(backend.upload("p", FILE))

    assert first != second


def test_local_storage_rejects_parent_traversal(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        asyncio.run(LocalFileStorage(tmp_path).upload("../outside", FILE))


def test_local_storage_wraps_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "blocked"
    blocker.write_text("a file, not a directory")

    with pytest.raises(StorageError):
        asyncio.run(LocalFileStorage(blocker).upload("p", FILE))


def test_http_storage_posts_multipart_and_returns_path() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"path": "game/speed-sorting/g-1/items/abc.png"})

    backend = HttpFileStorage("http://files.test/", transport=httpx.MockTransport(handler))

    path = asyncio.run(backend.upload("/game/speed-sorting/g-1/items", FILE))

    assert path == "game/speed-sorting/g-1/items/abc.png"
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "http://files.test/files"
    body = request.content
    assert b'name="prefix"' in body
    assert b"game/speed-sorting/g-1/items" in body
    assert b'filename="item-0.png"' in body


def test_http_storage_error_status_becomes_storage_error() -> None:
    backend = HttpFileStorage(
        "http://files.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )

    with pytest.raises(StorageError):
        asyncio.run(backend.upload("p", FILE))


def test_http_storage_unexpected_reply_becomes_storage_error() -> None:
    backend = HttpFileStorage(
        "http://files.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"url": "x"})),
    )

    with pytest.raises(StorageError):
        asyncio.run(backend.upload("p", FILE))


def test_backend_is_selected_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(storage_module.settings, "STORAGE_BACKEND", "http")
    assert isinstance(get_storage(), HttpFileStorage)

    monkeypatch.setattr(storage_module.settings, "STORAGE_BACKEND", "local")
    assert isinstance(get_storage(), LocalFileStorage)
