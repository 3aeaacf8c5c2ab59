from __future__ import annotations

import base64

import pytest

from gamehub.core.errors import ValidationError
from gamehub.services.item_classifier import (
    FileItem,
    TextItem,
    classify_item,
    extension_for,
    is_base64_payload,
    is_data_url,
)

from conftest import PNG_BYTES, PNG_DATA_URL


@pytest.mark.parametrize(
    "value",
    [
        PNG_DATA_URL,
        base64.b64encode(b"raw bytes!").decode(),
        "data:application/pdf;base64,JVBERi0=",
    ],
)
def test_base64_payloads_are_detected(value: str) -> None:
    assert is_base64_payload(value)


@pytest.mark.parametrize(
    "value",
    ["", None, 42, "hello world", "abc", "YWJjZA=", "data:image/png;base64,abc", "Banana!!"],
)
def test_non_payloads_are_rejected(value: object) -> None:
    assert not is_base64_payload(value)


def test_data_url_becomes_file_item_with_extension() -> None:
    result = classify_item(PNG_DATA_URL, 3)

    assert isinstance(result, FileItem)
    assert result.content == PNG_BYTES
    assert result.filename == "item-3.png"
    assert result.media_type == "image/png"


def test_bare_base64_defaults_to_bin_and_octet_stream() -> None:
    raw = base64.b64encode(b"\x00\x01\x02").decode()

    result = classify_item(raw, 0)

    assert result == FileItem(content=b"\x00\x01\x02", filename="item-0.bin", media_type="application/octet-stream")


@pytest.mark.parametrize(
    ("media_type", "ext"),
    [
        ("image/png", "png"),
        ("image/jpeg", "jpg"),
        ("image/jpg", "jpg"),
        ("image/webp", "webp"),
        ("image/gif", "gif"),
        ("application/pdf", "pdf"),
        ("audio/mpeg", "bin"),
        (None, "bin"),
    ],
)
def test_extension_table(media_type: str | None, ext: str) -> None:
    assert extension_for(media_type) == ext


def test_plain_text_passes_through_unchanged() -> None:
    assert classify_item("  Tomato ", 0) == TextItem(text="  Tomato ")
    assert classify_item("Tomato", 0, "text") == TextItem(text="Tomato")


def test_declared_file_without_payload_is_rejected() -> None:
    with pytest.raises(ValidationError) as exc:
        classify_item("not a payload", 4, "file")

    assert "Item no. 5" in exc.value.message
    assert exc.value.details == {"field": "items[4].value"}


def test_declared_file_with_empty_value_is_rejected() -> None:
    with pytest.raises(ValidationError):
        classify_item("", 0, "file")


def test_text_tag_contradicting_payload_shape_is_rejected() -> None:
    # "abcd" is valid base64; the explicit tag and the shape disagree
    with pytest.raises(ValidationError) as exc:
        classify_item("abcd", 1, "text")

    assert "Item no. 2" in exc.value.message


def test_declared_file_with_payload_is_file() -> None:
    result = classify_item(PNG_DATA_URL, 0, "file")

    assert isinstance(result, FileItem)


def test_data_url_with_empty_payload_is_rejected() -> None:
    assert is_data_url("data:image/png;base64,")

    with pytest.raises(ValidationError) as exc:
        classify_item("data:image/png;base64,", 2)

    assert exc.value.message == "Item no. 3 has an empty file payload"
    assert exc.value.details == {"field": "items[2].value"}


def test_data_url_without_media_type_is_bin_file() -> None:
    result = classify_item("data:;base64,AAAA", 0)

    assert result == FileItem(content=b"\x00\x00\x00", filename="item-0.bin", media_type="application/octet-stream")


def test_data_url_with_broken_payload_is_rejected() -> None:
    with pytest.raises(ValidationError) as exc:
        classify_item("data:image/png;base64,abc", 0)

    assert "undecodable" in exc.value.message


def test_text_tag_on_empty_data_url_is_rejected() -> None:
    with pytest.raises(ValidationError) as exc:
        classify_item("data:image/png;base64,", 0, "text")

    assert exc.value.details == {"field": "items[0].type"}
