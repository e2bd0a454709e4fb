from __future__ import annotations

from pathlib import Path

import pytest

from traitsmith.core.exceptions import MalformedFragment, PaginationOverrun
from traitsmith.core.models import PaginationHeader
from traitsmith.core.pagination import (
    decode_header,
    encode_header,
    slice_by_offsets,
    split_payload,
)
from traitsmith.ui.cli.diagnostics import CliEmitter
from traitsmith.ui.cli.state import set_cli_state


FIXTURES = Path(__file__).parent / "fixtures" / "docs" / "trait.impl"


def test_decode_header_from_comment_line() -> None:
    header = decode_header('//{"start":57,"fragment_lengths":[330,338]}')
    assert header == PaginationHeader(start=57, fragment_lengths=(330, 338))
    assert header.total == 668
    assert header.end == 725


def test_decode_header_accepts_bytes_and_mappings() -> None:
    assert decode_header(b'{"start":3,"fragment_lengths":[]}') == PaginationHeader(3, ())
    assert decode_header({"start": 1, "fragment_lengths": [2]}) == PaginationHeader(1, (2,))


@pytest.mark.parametrize(
    "raw",
    [
        "//{start:57}",
        '{"start":57}',
        '{"fragment_lengths":[1]}',
        '{"start":-1,"fragment_lengths":[1]}',
        '{"start":0,"fragment_lengths":[4,-2]}',
        '{"start":0,"fragment_lengths":"12"}',
        '{"start":true,"fragment_lengths":[1]}',
        '{"start":0,"fragment_lengths":[1.5]}',
        "[57, [1]]",
    ],
)
def test_decode_header_rejects_invalid_headers(raw: str) -> None:
    with pytest.raises(MalformedFragment):
        decode_header(raw)


def test_encode_header_is_compact() -> None:
    header = PaginationHeader(start=57, fragment_lengths=(636, 460))
    assert encode_header(header) == '{"start":57,"fragment_lengths":[636,460]}'
    assert encode_header(header, prefix=True).startswith('//{"start"')
    assert decode_header(encode_header(header)) == header
    assert decode_header(encode_header(header, prefix=True)) == header


def test_slice_by_offsets_matches_rustdoc_fragment() -> None:
    payload = (FIXTURES / "core" / "hash" / "trait.BuildHasher.js").read_bytes()
    header = PaginationHeader(start=57, fragment_lengths=(330, 338))

    ranges = slice_by_offsets(payload, header)

    assert [len(span) for span in ranges] == [330, 338]
    assert ranges[0].start == 57
    assert payload[ranges[0].start : ranges[0].stop].startswith(b'["buck2_util",')
    assert payload[ranges[1].start : ranges[1].stop].startswith(b',["starlark_map",')
    assert payload[ranges[1].stop :].startswith(b"]);")


def test_slice_by_offsets_partitions_without_gaps() -> None:
    payload = "abcdefghij"
    header = PaginationHeader(start=2, fragment_lengths=(3, 0, 5))

    ranges = slice_by_offsets(payload, header)

    assert ranges == [range(2, 5), range(5, 5), range(5, 10)]
    assert "".join(payload[span.start : span.stop] for span in ranges) == payload[2:]


def test_trailing_bytes_are_padding() -> None:
    ranges = slice_by_offsets(b"0123456789", PaginationHeader(start=1, fragment_lengths=(2, 2)))
    assert ranges == [range(1, 3), range(3, 5)]


def test_overrun_raises() -> None:
    with pytest.raises(PaginationOverrun) as excinfo:
        slice_by_offsets("short", PaginationHeader(start=2, fragment_lengths=(2, 4)))
    assert excinfo.value.required == 8
    assert excinfo.value.available == 5


def test_split_payload_falls_back_to_single_range() -> None:
    state = set_cli_state(verbosity=0, debug=False)
    emitter = CliEmitter(state=state)

    ranges = split_payload("0123456789", PaginationHeader(4, (5, 5)), emitter=emitter)

    assert ranges == [range(4, 10)]


def test_split_payload_without_overrun_is_exact() -> None:
    assert split_payload("0123456789", PaginationHeader(0, (4, 6))) == [range(0, 4), range(4, 10)]
