"""Decoding of per-trait fragment payloads into ``TraitFragment`` objects."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import json
import re
from typing import Any

from .exceptions import MalformedFragment
from .models import ImplementorDescriptor, PaginationHeader, TraitFragment
from .pagination import decode_header


ENTRIES_MARKER = "Object.fromEntries("
_HEADER_RE = re.compile(r"^\s*//\s*(\{.*\})\s*$", re.MULTILINE)
_DECODER = json.JSONDecoder()


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _decode_path(raw: Any, *, crate: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not _is_sequence(raw) or not all(isinstance(token, str) for token in raw):
        raise MalformedFragment(f"Implementor path for crate '{crate}' must be a list of strings.")
    return tuple(raw)


def _decode_descriptor(crate: str, raw: Any) -> ImplementorDescriptor:
    if isinstance(raw, str):
        return ImplementorDescriptor(crate=crate, markup=raw)

    if isinstance(raw, Mapping):
        markup = raw.get("markup")
        owner = raw.get("crate") or crate
        if not isinstance(markup, str) or not isinstance(owner, str):
            raise MalformedFragment(f"Implementor entry for crate '{crate}' lacks markup.")
        return ImplementorDescriptor(
            crate=owner,
            markup=markup,
            path=_decode_path(raw.get("path"), crate=crate),
            synthetic=bool(raw.get("synthetic", False)),
        )

    # Tuple form: [markup] or [markup, synthetic_flag, [path tokens...]].
    if _is_sequence(raw) and raw and isinstance(raw[0], str):
        synthetic = bool(raw[1]) if len(raw) > 1 else False
        path = _decode_path(raw[2], crate=crate) if len(raw) > 2 else ()
        return ImplementorDescriptor(crate=crate, markup=raw[0], path=path, synthetic=synthetic)

    raise MalformedFragment(f"Unsupported implementor entry for crate '{crate}': {raw!r}.")


def decode_crate_entry(entry: Any) -> tuple[str, tuple[ImplementorDescriptor, ...]]:
    """Decode one ``[crate_name, implementors]`` pair."""
    if not _is_sequence(entry) or len(entry) != 2:
        raise MalformedFragment(f"Crate entry must be a [name, implementors] pair: {entry!r}.")
    crate, implementors = entry
    if not isinstance(crate, str) or not crate:
        raise MalformedFragment("Crate name must be a non-empty string.")
    if not _is_sequence(implementors):
        raise MalformedFragment(f"Implementors of crate '{crate}' must be a list.")
    return crate, tuple(_decode_descriptor(crate, raw) for raw in implementors)


def decode_fragment(trait_id: str, entries: Any, header: PaginationHeader) -> TraitFragment:
    """Validate ``entries`` against ``header`` and build the trait fragment.

    Decoding is pure. ``MalformedFragment`` is raised when the header does not
    describe exactly one length per crate, when a length is negative, or when
    an entry has the wrong shape.
    """
    if not _is_sequence(entries):
        raise MalformedFragment(
            "Fragment payload must be a list of crate entries.", trait_id=trait_id
        )
    if header.start < 0 or any(length < 0 for length in header.fragment_lengths):
        raise MalformedFragment("Pagination header holds negative offsets.", trait_id=trait_id)
    if len(header.fragment_lengths) != len(entries):
        raise MalformedFragment(
            f"Pagination header lists {len(header.fragment_lengths)} length(s) "
            f"for {len(entries)} crate(s).",
            trait_id=trait_id,
        )

    crates: dict[str, tuple[ImplementorDescriptor, ...]] = {}
    for entry in entries:
        try:
            crate, descriptors = decode_crate_entry(entry)
        except MalformedFragment as exc:
            raise MalformedFragment(str(exc), trait_id=trait_id) from exc
        if crate in crates:
            raise MalformedFragment(f"Crate '{crate}' listed twice.", trait_id=trait_id)
        crates[crate] = descriptors
    return TraitFragment(trait_id=trait_id, crates=crates)


def extract_header(text: str) -> PaginationHeader:
    """Return the pagination header trailing a fragment script."""
    matches = list(_HEADER_RE.finditer(text))
    if not matches:
        raise MalformedFragment("Fragment script has no pagination header.")
    return decode_header(matches[-1].group(1))


def parse_fragment_script(text: str) -> tuple[list[Any], PaginationHeader]:
    """Extract the crate entries and the trailing header from a fragment script."""
    header = extract_header(text)

    index = text.find(ENTRIES_MARKER)
    if index < 0:
        raise MalformedFragment("Fragment script does not declare its implementors.")
    try:
        entries, _ = _DECODER.raw_decode(text, index + len(ENTRIES_MARKER))
    except json.JSONDecodeError as exc:
        raise MalformedFragment(f"Implementor list is not valid JSON: {exc.msg}.") from exc
    if not isinstance(entries, list):
        raise MalformedFragment("Implementor list must be an array.")
    return entries, header


def read_fragment_script(trait_id: str, text: str) -> tuple[TraitFragment, PaginationHeader]:
    """Parse and decode a whole fragment script."""
    try:
        entries, header = parse_fragment_script(text)
    except MalformedFragment as exc:
        raise MalformedFragment(str(exc), trait_id=trait_id) from exc
    return decode_fragment(trait_id, entries, header), header


def peek_crate_name(chunk: str | bytes) -> str:
    """Return the crate name heading a sub-list without decoding its implementors."""
    text = chunk.decode("utf-8") if isinstance(chunk, bytes) else chunk
    index = text.find("[")
    if index < 0:
        raise MalformedFragment("Crate slice does not start a crate entry.")
    try:
        name, _ = _DECODER.raw_decode(text, index + 1)
    except json.JSONDecodeError as exc:
        raise MalformedFragment(f"Crate slice has no crate name: {exc.msg}.") from exc
    if not isinstance(name, str) or not name:
        raise MalformedFragment("Crate name must be a non-empty string.")
    return name


def decode_crate_slice(chunk: str | bytes) -> tuple[str, tuple[ImplementorDescriptor, ...]]:
    """Decode a single crate sub-list cut out with the pagination header."""
    text = chunk.decode("utf-8") if isinstance(chunk, bytes) else chunk
    text = text.strip()
    if text.startswith(","):
        text = text[1:].lstrip()
    try:
        entry = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedFragment(f"Crate slice is not valid JSON: {exc.msg}.") from exc
    return decode_crate_entry(entry)


__all__ = [
    "ENTRIES_MARKER",
    "decode_crate_entry",
    "decode_crate_slice",
    "decode_fragment",
    "extract_header",
    "parse_fragment_script",
    "peek_crate_name",
    "read_fragment_script",
]
