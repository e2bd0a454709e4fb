"""Discovery and registration of fragment scripts from a documentation tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
import logging
from pathlib import Path, PurePosixPath

from .config import IndexConfig
from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import ConfigError, MalformedFragment, PaginationOverrun
from .models import ImplementorDescriptor
from .pagination import slice_by_offsets
from .payload import (
    decode_crate_slice,
    extract_header,
    peek_crate_name,
    read_fragment_script,
)
from .registry import RegistryContext, get_context


logger = logging.getLogger(__name__)

FRAGMENT_SUFFIX = ".js"
DEFAULT_FRAGMENT_DIR = "trait.impl"


def trait_id_from_path(path: str | Path) -> str:
    """Derive the trait identifier from a fragment path relative to its root.

    ``core/hash/trait.BuildHasher.js`` becomes ``core::hash::BuildHasher``.
    """
    relative = PurePosixPath(Path(path).as_posix())
    name = relative.name
    if name.endswith(FRAGMENT_SUFFIX):
        name = name[: -len(FRAGMENT_SUFFIX)]
    _kind, separator, item = name.partition(".")
    if not separator or not item:
        raise MalformedFragment(f"Unexpected fragment file name '{relative.name}'.")
    return "::".join([*relative.parent.parts, item])


def iter_fragment_files(root: Path) -> list[Path]:
    """Return the fragment scripts found below ``root`` in a stable order."""
    if not root.is_dir():
        return []
    return sorted(path for path in root.rglob(f"*{FRAGMENT_SUFFIX}") if path.is_file())


@dataclass(slots=True)
class LoadReport:
    """Outcome of a ``load_fragments`` run."""

    loaded: list[str] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.skipped


def load_fragments(
    config: IndexConfig,
    *,
    context: RegistryContext | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> LoadReport:
    """Decode every fragment under the configured root and register it.

    A malformed or unreadable fragment is skipped and reported, leaving the others intact,
    unless ``config.strict`` is set.
    """
    if context is None:
        context = get_context()
    if emitter is None:
        emitter = context.emitter
    root = config.fragment_root
    if not root.is_dir():
        raise ConfigError(f"Fragment directory '{root}' does not exist.")

    report = LoadReport()
    for path in iter_fragment_files(root):
        relative = path.relative_to(root)
        trait_id: str | None = None
        try:
            trait_id = trait_id_from_path(relative)
            text = path.read_text(encoding="utf-8")
            fragment, _header = read_fragment_script(trait_id, text)
        except (MalformedFragment, UnicodeDecodeError, OSError) as exc:
            if config.strict:
                raise
            key = trait_id or relative.as_posix()
            report.skipped[key] = str(exc)
            emitter.warning(f"Skipping fragment '{relative.as_posix()}': {exc}", exc)
            emitter.event("fragment_skipped", {"trait": key, "reason": str(exc)})
            continue

        logger.debug("Registering %s (%d crate(s))", trait_id, len(fragment))
        context.register(trait_id, fragment)
        report.loaded.append(trait_id)

    if config.initialize:
        context.initialize()
    emitter.event(
        "fragments_loaded", {"loaded": len(report.loaded), "skipped": len(report.skipped)}
    )
    return report


def trait_id_for_file(path: str | Path, *, root: str | Path | None = None) -> str:
    """Derive the trait identifier of a fragment file given by any path.

    Without ``root`` the path is taken relative to its innermost
    ``trait.impl`` directory, falling back to the bare file name.
    """
    fragment_path = Path(path)
    if root is not None:
        return trait_id_from_path(fragment_path.relative_to(root))
    parts = fragment_path.parts
    if DEFAULT_FRAGMENT_DIR in parts[:-1]:
        index = len(parts) - 1 - parts[::-1].index(DEFAULT_FRAGMENT_DIR)
        return trait_id_from_path(PurePosixPath(*parts[index + 1 :]))
    return trait_id_from_path(fragment_path.name)


def iter_crate_slices(
    path: str | Path,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> Iterator[tuple[str, range]]:
    """Yield ``(crate, byte_range)`` pairs described by a fragment's header.

    Only the crate names are decoded. When the header overruns the payload
    nothing can be located reliably: the overrun is reported and a single
    range covering the whole remainder is yielded under an empty crate name.
    """
    data = Path(path).read_bytes()
    header = extract_header(data.decode("utf-8"))
    try:
        ranges = slice_by_offsets(data, header)
    except PaginationOverrun as exc:
        (emitter or NullEmitter()).warning(str(exc), exc)
        yield "", range(min(header.start, len(data)), len(data))
        return
    for span in ranges:
        yield peek_crate_name(data[span.start : span.stop]), span


def read_crate_implementors(
    path: str | Path,
    crate: str,
    *,
    root: str | Path | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> tuple[ImplementorDescriptor, ...]:
    """Decode only the implementors ``crate`` contributes to a fragment file."""
    fragment_path = Path(path)
    data = fragment_path.read_bytes()
    for name, span in iter_crate_slices(fragment_path, emitter=emitter):
        if not name:
            # Unsplit fallback: decode the whole script instead.
            trait_id = trait_id_for_file(fragment_path, root=root)
            fragment, _header = read_fragment_script(trait_id, data.decode("utf-8"))
            return fragment.crates.get(crate, ())
        if name == crate:
            _name, descriptors = decode_crate_slice(data[span.start : span.stop])
            return descriptors
    return ()


__all__ = [
    "DEFAULT_FRAGMENT_DIR",
    "FRAGMENT_SUFFIX",
    "LoadReport",
    "iter_crate_slices",
    "iter_fragment_files",
    "load_fragments",
    "read_crate_implementors",
    "trait_id_for_file",
    "trait_id_from_path",
]
