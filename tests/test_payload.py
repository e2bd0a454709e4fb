from __future__ import annotations

from pathlib import Path

import pytest

from traitsmith.core.exceptions import MalformedFragment
from traitsmith.core.models import ImplementorDescriptor, PaginationHeader
from traitsmith.core.payload import (
    decode_crate_slice,
    decode_fragment,
    parse_fragment_script,
    peek_crate_name,
    read_fragment_script,
)


FIXTURES = Path(__file__).parent / "fixtures" / "docs" / "trait.impl"


def test_decode_fragment_accepts_mapping_descriptors() -> None:
    entries = [["crateA", [{"crate": "crateA", "markup": "<i>impl1</i>"}]]]
    fragment = decode_fragment("demo::Trait", entries, PaginationHeader(10, (5,)))

    assert fragment.trait_id == "demo::Trait"
    assert fragment.markup_for("crateA") == ["<i>impl1</i>"]
    assert fragment.crates["crateA"][0] == ImplementorDescriptor("crateA", "<i>impl1</i>")


def test_decode_fragment_accepts_rustdoc_tuples() -> None:
    entries = [
        ["alpha", [["impl Foo for A"], ["impl Foo for B", 1, ["alpha::B"]]]],
        ["beta", []],
    ]
    fragment = decode_fragment("demo::Foo", entries, PaginationHeader(57, (10, 20)))

    first, second = fragment.crates["alpha"]
    assert first.synthetic is False and first.path == ()
    assert second.synthetic is True and second.path == ("alpha::B",)
    assert fragment.crates["beta"] == ()
    assert len(fragment) == 2
    assert fragment.implementor_count == 2


def test_length_count_mismatch_is_malformed() -> None:
    entries = [["a", [["impl X for A"]]], ["b", [["impl X for B"]]]]
    with pytest.raises(MalformedFragment) as excinfo:
        decode_fragment("demo::X", entries, PaginationHeader(57, (12,)))
    assert excinfo.value.trait_id == "demo::X"
    assert "1 length(s) for 2 crate(s)" in str(excinfo.value)


def test_negative_length_is_malformed() -> None:
    with pytest.raises(MalformedFragment):
        decode_fragment("demo::X", [["a", []]], PaginationHeader(57, (-1,)))


@pytest.mark.parametrize(
    "entries",
    [
        [["", []]],
        [[None, []]],
        [["a", "not a list"]],
        [["a"]],
        [["a", [42]]],
        [["a", [["impl", 1, "not-a-list"]]]],
        [["a", [{"crate": "a"}]]],
    ],
)
def test_bad_entries_are_malformed(entries: list) -> None:
    with pytest.raises(MalformedFragment):
        decode_fragment("demo::X", entries, PaginationHeader(0, (1,) * len(entries)))


def test_duplicate_crate_is_malformed() -> None:
    entries = [["a", []], ["a", []]]
    with pytest.raises(MalformedFragment):
        decode_fragment("demo::X", entries, PaginationHeader(0, (1, 1)))


def test_parse_fragment_script_reads_rustdoc_output() -> None:
    text = (FIXTURES / "ref_cast" / "trait.RefCast.js").read_text(encoding="utf-8")

    entries, header = parse_fragment_script(text)

    assert [entry[0] for entry in entries] == ["dice_examples", "strong_hash"]
    assert header == PaginationHeader(57, (636, 460))


def test_read_fragment_script_builds_descriptors() -> None:
    text = (FIXTURES / "core" / "marker" / "trait.Sized.js").read_text(encoding="utf-8")

    fragment, header = read_fragment_script("core::marker::Sized", text)

    assert header.fragment_lengths == (1091,)
    descriptors = fragment.crates["starlark"]
    assert len(descriptors) == 3
    assert all(descriptor.synthetic for descriptor in descriptors)
    assert descriptors[1].path == ("starlark::values::types::list::refs::ListRef",)


def test_read_fragment_script_requires_header() -> None:
    script = 'var implementors = Object.fromEntries([["a",[["impl"]]]]);\n'
    with pytest.raises(MalformedFragment) as excinfo:
        read_fragment_script("demo::X", script)
    assert excinfo.value.trait_id == "demo::X"


def test_read_fragment_script_requires_entries() -> None:
    with pytest.raises(MalformedFragment):
        read_fragment_script("demo::X", '//{"start":0,"fragment_lengths":[]}\n')


def test_decode_crate_slice_strips_separator() -> None:
    crate, descriptors = decode_crate_slice(b',["beta",[["impl X for B"]]]')
    assert crate == "beta"
    assert descriptors[0].markup == "impl X for B"
    assert peek_crate_name(',["beta",[') == "beta"


def test_peek_crate_name_rejects_garbage() -> None:
    with pytest.raises(MalformedFragment):
        peek_crate_name("no entry here")
