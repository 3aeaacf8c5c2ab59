"""
Decide whether a submitted speed-sorting item is inline text or an
encoded binary payload (plain base64 or a ``data:<mime>;base64,`` URL).

The explicit ``type`` tag wins; the base64 shape test is only consulted
when the tag is missing. A tag that contradicts the payload shape is
rejected instead of silently picking one side.
"""
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional, Union

from gamehub.core.errors import ValidationError


BASE64_RE = re.compile(r"^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?$")
DATA_URL_RE = re.compile(r"^data:([^;,]*);base64,(.*)$", re.DOTALL)

DEFAULT_MEDIA_TYPE = "application/octet-stream"

MIME_TO_EXT = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "application/pdf": "pdf",
}


@dataclass(frozen=True)
class TextItem:
    text: str


@dataclass(frozen=True)
class FileItem:
    content: bytes
    filename: str
    media_type: str


ClassifiedItem = Union[TextItem, FileItem]


def split_data_url(value: str) -> tuple[Optional[str], str]:
    """Return (media type or None, base64 segment)."""
    match = DATA_URL_RE.match(value)
    if match:
        return match.group(1) or None, match.group(2)
    # no data: prefix, the whole string is the candidate payload
    return None, value


def is_base64_payload(value: object) -> bool:
    if not value or not isinstance(value, str):
        return False
    _, raw = split_data_url(value)
    if not raw or len(raw) % 4 != 0:
        return False
    return BASE64_RE.match(raw) is not None


def is_data_url(value: object) -> bool:
    return isinstance(value, str) and DATA_URL_RE.match(value) is not None


def extension_for(media_type: Optional[str]) -> str:
    if not media_type:
        return "bin"
    return MIME_TO_EXT.get(media_type.lower(), "bin")


def classify_item(value: str, index: int, declared_type: Optional[str] = None) -> ClassifiedItem:
    """Classify the item at zero-based ``index`` of the submitted items."""
    # a data: URL is always a file submission, whatever its payload looks like
    looks_binary = is_data_url(value) or is_base64_payload(value)
    position = index + 1

    if declared_type == "file" and not looks_binary:
        raise ValidationError(
            f"Item no. {position} marked as file but no file data provided",
            details={"field": f"items[{index}].value"},
        )
    if declared_type == "text" and looks_binary:
        raise ValidationError(
            f"Item no. {position} marked as text but its value is a base64 payload",
            details={"field": f"items[{index}].type"},
        )

    if not looks_binary:
        return TextItem(text=value)

    media_type, raw = split_data_url(value)
    if not raw:
        raise ValidationError(
            f"Item no. {position} has an empty file payload",
            details={"field": f"items[{index}].value"},
        )
    try:
        content = base64.b64decode(raw, validate=True)
    except binascii.Error as exc:
        raise ValidationError(
            f"Item no. {position} has an undecodable file payload",
            details={"field": f"items[{index}].value"},
        ) from exc

    return FileItem(
        content=content,
        filename=f"item-{index}.{extension_for(media_type)}",
        media_type=media_type or DEFAULT_MEDIA_TYPE,
    )
