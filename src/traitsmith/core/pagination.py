"""Codec for the pagination header trailing every fragment script.

The header is a one-line JSON comment such as::

    //{"start":57,"fragment_lengths":[330,338]}

``start`` is the offset of the first crate entry in the serialized payload and
each length covers one crate sub-list, contiguous with the previous one. Every
sub-list after the first carries the separating comma at its head.
"""

from __future__ import annotations

from collections.abc import Mapping, Sized
import json
from typing import Any

from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import MalformedFragment, PaginationOverrun
from .models import PaginationHeader


HEADER_PREFIX = "//"


def _require_offset(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedFragment(f"Pagination {label} must be an integer, got {value!r}.")
    if value < 0:
        raise MalformedFragment(f"Pagination {label} must not be negative, got {value}.")
    return value


def decode_header(raw: str | bytes | Mapping[str, Any]) -> PaginationHeader:
    """Parse a pagination header from its comment text or a decoded mapping."""
    if isinstance(raw, Mapping):
        data: Any = raw
    else:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        text = text.strip()
        if text.startswith(HEADER_PREFIX):
            text = text[len(HEADER_PREFIX) :].strip()
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedFragment(f"Invalid pagination header: {exc.msg}.") from exc

    if not isinstance(data, Mapping):
        raise MalformedFragment("Pagination header must be a JSON object.")
    if "start" not in data or "fragment_lengths" not in data:
        raise MalformedFragment("Pagination header requires 'start' and 'fragment_lengths'.")

    start = _require_offset(data["start"], "start")
    lengths = data["fragment_lengths"]
    if isinstance(lengths, (str, bytes)) or not isinstance(lengths, (list, tuple)):
        raise MalformedFragment("Pagination 'fragment_lengths' must be a list of integers.")
    return PaginationHeader(
        start=start,
        fragment_lengths=tuple(_require_offset(length, "length") for length in lengths),
    )


def encode_header(header: PaginationHeader, *, prefix: bool = False) -> str:
    """Serialize ``header`` to the compact JSON form used in fragment scripts."""
    text = json.dumps(
        {"start": header.start, "fragment_lengths": list(header.fragment_lengths)},
        separators=(",", ":"),
    )
    return f"{HEADER_PREFIX}{text}" if prefix else text


def slice_by_offsets(payload: Sized, header: PaginationHeader) -> list[range]:
    """Return one contiguous range per crate sub-list, in header order.

    Bytes left after the last range are padding. Raises ``PaginationOverrun``
    when the lengths reach past the end of ``payload``.
    """
    size = len(payload)
    if header.end > size:
        raise PaginationOverrun(header.end, size)

    ranges: list[range] = []
    cursor = header.start
    for length in header.fragment_lengths:
        ranges.append(range(cursor, cursor + length))
        cursor += length
    return ranges


def split_payload(
    payload: Sized,
    header: PaginationHeader,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> list[range]:
    """Lenient ``slice_by_offsets`` falling back to one unsplit range on overrun."""
    try:
        return slice_by_offsets(payload, header)
    except PaginationOverrun as exc:
        (emitter or NullEmitter()).warning(str(exc), exc)
        size = len(payload)
        return [range(min(header.start, size), size)]


__all__ = [
    "HEADER_PREFIX",
    "decode_header",
    "encode_header",
    "slice_by_offsets",
    "split_payload",
]
