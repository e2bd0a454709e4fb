"""Consumer-side helpers turning registered fragments into display-ready lists."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
import re

from bs4 import BeautifulSoup

from .models import ImplementorDescriptor, TraitFragment


_EXTERNAL_HREF = re.compile(r"^(?:[a-z+]+:)?//", re.IGNORECASE)


def rebase_links(markup: str, root_path: str) -> str:
    """Prefix relative ``href`` attributes in ``markup`` with ``root_path``."""
    if not root_path or "href" not in markup:
        return markup
    soup = BeautifulSoup(markup, "html.parser")
    changed = False
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if not href or href.startswith("#") or _EXTERNAL_HREF.match(href):
            continue
        anchor["href"] = f"{root_path}{href}"
        changed = True
    return str(soup) if changed else markup


@dataclass(slots=True)
class TraitIndex:
    """Implementors of one trait split the way the documentation page shows them."""

    trait_id: str
    implementors: list[ImplementorDescriptor] = field(default_factory=list)
    synthetic_implementors: list[ImplementorDescriptor] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.implementors) + len(self.synthetic_implementors)


def build_trait_index(
    fragment: TraitFragment,
    *,
    root_path: str = "",
    inlined_types: Iterable[str] = (),
) -> TraitIndex:
    """Group the implementors of ``fragment`` for display.

    Crates are visited in name order. A synthetic implementor is dropped when
    one of its path tokens names a type that is already shown, either listed in
    ``inlined_types`` or contributed by an earlier synthetic implementor.
    """
    seen = set(inlined_types)
    index = TraitIndex(trait_id=fragment.trait_id)
    for crate in sorted(fragment.crates):
        for descriptor in fragment.crates[crate]:
            if descriptor.synthetic:
                if any(token in seen for token in descriptor.path):
                    continue
                seen.update(descriptor.path)
                target = index.synthetic_implementors
            else:
                target = index.implementors
            markup = rebase_links(descriptor.markup, root_path)
            if markup != descriptor.markup:
                descriptor = replace(descriptor, markup=markup)
            target.append(descriptor)
    return index


def build_index(
    traits: Mapping[str, TraitFragment],
    *,
    root_path: str = "",
) -> dict[str, TraitIndex]:
    """Build a ``TraitIndex`` for every registered trait."""
    return {
        trait_id: build_trait_index(fragment, root_path=root_path)
        for trait_id, fragment in sorted(traits.items())
    }


__all__ = ["TraitIndex", "build_index", "build_trait_index", "rebase_links"]
