"""Commands inspecting the implementor fragments of a documentation tree."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from rich import box
from rich.table import Table
import typer

from traitsmith.core.config import IndexConfig, load_config
from traitsmith.core.exceptions import TraitIndexError
from traitsmith.core.index import build_trait_index
from traitsmith.core.loader import iter_crate_slices, load_fragments
from traitsmith.core.pagination import encode_header
from traitsmith.core.payload import extract_header
from traitsmith.core.registry import RegistryContext

from .._options import (
    ConfigOption,
    DocsRootArgument,
    FragmentArgument,
    FragmentDirOption,
    StrictOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state


def _resolve_config(
    docs_root: Path,
    config_path: Path | None,
    fragment_dir: str | None,
    strict: bool,
) -> IndexConfig:
    overrides: dict[str, object] = {"docs_root": docs_root}
    if fragment_dir:
        overrides["fragment_dir"] = fragment_dir
    if strict:
        overrides["strict"] = True
    if config_path is not None:
        return load_config(config_path, **overrides)
    return IndexConfig.model_validate(overrides)


def _load_context(config: IndexConfig) -> RegistryContext:
    """Load every fragment into a private context and initialise it."""
    emitter = CliEmitter()
    context = RegistryContext(emitter=emitter)
    load_fragments(config.model_copy(update={"initialize": True}), context=context)
    return context


def traits(
    docs_root: DocsRootArgument,
    config_path: ConfigOption = None,
    fragment_dir: FragmentDirOption = "",
    strict: StrictOption = False,
) -> None:
    """List every trait with the number of implementing crates and impls."""
    try:
        config = _resolve_config(docs_root, config_path, fragment_dir, strict)
        context = _load_context(config)
    except TraitIndexError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    table = Table(
        title="Implementor Index",
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    table.add_column("Trait", style="magenta")
    table.add_column("Crates", justify="right")
    table.add_column("Implementors", justify="right")

    snapshot = context.snapshot()
    if not snapshot:
        table.add_row("-", "-", "-")
    for trait_id in sorted(snapshot):
        fragment = snapshot[trait_id]
        table.add_row(trait_id, str(len(fragment)), str(fragment.implementor_count))

    state = get_cli_state()
    state.console.print(table)
    if state.skipped:
        typer.echo(f"Skipped {len(state.skipped)} fragment(s): {', '.join(state.skipped)}")


def show(
    docs_root: DocsRootArgument,
    trait: Annotated[
        str,
        typer.Argument(metavar="TRAIT", help="Trait identifier, e.g. 'core::hash::Hasher'."),
    ],
    crate: Annotated[
        str | None,
        typer.Option("--crate", help="Only list implementors declared by this crate."),
    ] = None,
    config_path: ConfigOption = None,
    fragment_dir: FragmentDirOption = "",
) -> None:
    """Print the implementors of TRAIT as plain text."""
    try:
        config = _resolve_config(docs_root, config_path, fragment_dir, False)
        context = _load_context(config)
    except TraitIndexError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    fragment = context.get(trait)
    if fragment is None:
        emit_error(f"Trait '{trait}' has no registered implementors.")
        raise typer.Exit(code=1)

    index = build_trait_index(fragment, root_path=config.root_path)
    implementors = [item for item in index.implementors if crate in (None, item.crate)]
    synthetic = [item for item in index.synthetic_implementors if crate in (None, item.crate)]

    typer.echo(f"{trait}:")
    for item in implementors:
        typer.echo(f"  [{item.crate}] {item.text}")
    if synthetic:
        typer.echo("Auto implementors:")
        for item in synthetic:
            typer.echo(f"  [{item.crate}] {item.text}")
    if not implementors and not synthetic:
        typer.echo("  - (none)")


def header(fragment: FragmentArgument) -> None:
    """Decode the pagination header of FRAGMENT and show each crate's range."""
    emitter = CliEmitter()
    try:
        decoded = extract_header(fragment.read_text(encoding="utf-8"))
        slices = list(iter_crate_slices(fragment, emitter=emitter))
    except TraitIndexError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    typer.echo(encode_header(decoded))
    for crate, span in slices:
        label = crate or "(unsplit)"
        typer.echo(f"  {label}: {span.start}..{span.stop} ({len(span)} bytes)")


__all__ = ["header", "show", "traits"]
