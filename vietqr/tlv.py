"""Utility helpers to build and parse EMV-style TLV payloads."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

from .services.errors import ValueTooLong

MAX_VALUE_LENGTH = 99

TLVValue = Union[str, int, None, Sequence["TLVItem"]]


@dataclass(frozen=True)
class TLVItem:
    """A single field; ``value`` is either terminal text or nested items."""

    tag: str
    value: TLVValue

    @property
    def is_composite(self) -> bool:
        return isinstance(self.value, (list, tuple))

    def serialize(self) -> str:
        if self.is_composite:
            return format_tlv(self.tag, build_tlv(self.value))  # type: ignore[arg-type]
        return format_tlv(self.tag, self.value)  # type: ignore[arg-type]


def format_tlv(tag: str, value: str | int | None) -> str:
    """Format ``tag + LL + value``; absent or empty values yield ``""``.

    Raises ``ValueTooLong`` when the value needs more than two length digits.
    """

    if len(tag) != 2 or not (tag.isascii() and tag.isdigit()):
        raise ValueError(f"TLV tag must be two ASCII digits, got {tag!r}")
    if value is None:
        return ""
    text = str(value)
    if not text:
        return ""
    if len(text) > MAX_VALUE_LENGTH:
        raise ValueTooLong(tag, len(text))
    return f"{tag}{len(text):02d}{text}"


def build_tlv(items: Iterable[TLVItem]) -> str:
    """Serialize iterable of TLV items into EMV string."""

    return "".join(item.serialize() for item in items)


def parse_tlv(payload: str) -> Iterator[TLVItem]:
    """Parse TLV payload string into TLV items."""

    idx = 0
    total = len(payload)
    while idx + 4 <= total:
        tag = payload[idx : idx + 2]
        raw_length = payload[idx + 2 : idx + 4]
        if not raw_length.isdigit():
            raise ValueError(f"Invalid TLV length {raw_length!r} for tag {tag}")
        length = int(raw_length)
        value_start = idx + 4
        value_end = value_start + length
        if value_end > total:
            raise ValueError("Invalid TLV length exceeds payload")
        value = payload[value_start:value_end]
        yield TLVItem(tag=tag, value=value)
        idx = value_end
    if idx != total:
        raise ValueError("Dangling TLV data detected")
