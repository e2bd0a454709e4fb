"""Value objects describing trait fragments and their pagination headers."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from bs4 import BeautifulSoup


@dataclass(frozen=True, slots=True)
class ImplementorDescriptor:
    """One rendered implementor entry contributed by a crate."""

    crate: str
    markup: str
    path: tuple[str, ...] = ()
    synthetic: bool = False

    @property
    def text(self) -> str:
        """Return the markup stripped to plain text."""
        soup = BeautifulSoup(self.markup, "html.parser")
        return " ".join(soup.get_text().split())


@dataclass(frozen=True, slots=True)
class TraitFragment:
    """Implementors of a single trait grouped by the crate declaring them.

    Crate keys are unique; their order carries no meaning, so two fragments
    compare equal whenever they hold the same crates and descriptors.
    """

    trait_id: str
    crates: Mapping[str, tuple[ImplementorDescriptor, ...]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.crates)

    def __contains__(self, crate: object) -> bool:
        return crate in self.crates

    def iter_implementors(self) -> Iterator[ImplementorDescriptor]:
        """Yield every descriptor, crate by crate."""
        for descriptors in self.crates.values():
            yield from descriptors

    def markup_for(self, crate: str) -> list[str]:
        """Return the rendered markup registered for ``crate``."""
        return [descriptor.markup for descriptor in self.crates.get(crate, ())]

    @property
    def implementor_count(self) -> int:
        return sum(len(descriptors) for descriptors in self.crates.values())


@dataclass(frozen=True, slots=True)
class PaginationHeader:
    """Offset table locating each crate's sub-list inside a fragment payload."""

    start: int
    fragment_lengths: tuple[int, ...] = ()

    @property
    def total(self) -> int:
        return sum(self.fragment_lengths)

    @property
    def end(self) -> int:
        """Return the offset right after the last crate sub-list."""
        return self.start + self.total


__all__ = ["ImplementorDescriptor", "PaginationHeader", "TraitFragment"]
