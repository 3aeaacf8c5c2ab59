"""
File storage used for thumbnails and binary speed-sorting items.

Two backends:
- local: files under STORAGE_ROOT, paths returned relative to it
- http:  remote file service, POST <STORAGE_URL>/files -> {"path": ...}
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol

import httpx

from gamehub.core.config import settings
from gamehub.core.errors import StorageError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    content: bytes
    filename: str
    media_type: str = "application/octet-stream"


class FileStorage(Protocol):
    async def upload(self, destination_prefix: str, file: StoredFile) -> str:
        ...


def _clean_prefix(prefix: str) -> PurePosixPath:
    p = PurePosixPath(prefix.strip("/"))
    if ".." in p.parts:
        raise StorageError(f"Invalid storage prefix: {prefix!r}")
    return p


class LocalFileStorage:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _write(self, target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

    async def upload(self, destination_prefix: str, file: StoredFile) -> str:
        name = PurePosixPath(file.filename).name or "file.bin"
        rel = _clean_prefix(destination_prefix) / f"{uuid.uuid4().hex}-{name}"
        try:
            await asyncio.to_thread(self._write, self.root / rel, file.content)
        except OSError as e:
            logger.error("Local upload to %s failed: %s", rel, e)
            raise StorageError(f"Failed to store {file.filename}") from e

        logger.info("Stored %s (%d bytes)", rel, len(file.content))
        return rel.as_posix()


class HttpFileStorage:
    def __init__(self, base_url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def upload(self, destination_prefix: str, file: StoredFile) -> str:
        prefix = _clean_prefix(destination_prefix).as_posix()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as c:
                r = await c.post(
                    f"{self.base_url}/files",
                    data={"prefix": prefix},
                    files={"file": (file.filename, file.content, file.media_type)},
                )
                r.raise_for_status()
                path = r.json()["path"]
        except httpx.HTTPError as e:
            logger.error("Remote upload of %s to %s failed: %s", file.filename, prefix, e)
            raise StorageError(f"Failed to store {file.filename}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"File service returned an unexpected reply for {file.filename}") from e

        logger.info("Stored %s via file service", path)
        return path


def get_storage() -> FileStorage:
    """FastAPI dependency: storage backend selected by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "http":
        return HttpFileStorage(settings.STORAGE_URL, timeout=settings.STORAGE_TIMEOUT)
    return LocalFileStorage(settings.STORAGE_ROOT)
