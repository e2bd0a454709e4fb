"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
DIAGNOSTICS_PANEL = "Diagnostics"

DocsRootArgument = Annotated[
    Path,
    typer.Argument(
        metavar="DOCS_ROOT",
        help="Root of the generated documentation site (holding 'trait.impl').",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
]

FragmentArgument = Annotated[
    Path,
    typer.Argument(
        metavar="FRAGMENT",
        help="Fragment script such as 'trait.impl/core/hash/trait.Hasher.js'.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML configuration file overriding the index settings.",
        exists=True,
        dir_okay=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

FragmentDirOption = Annotated[
    str,
    typer.Option(
        "--fragment-dir",
        help="Directory below DOCS_ROOT that holds the fragment scripts.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

StrictOption = Annotated[
    bool,
    typer.Option(
        "--strict",
        help="Abort on the first malformed fragment instead of skipping it.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]


__all__ = [
    "ConfigOption",
    "DebugOption",
    "DocsRootArgument",
    "FragmentArgument",
    "FragmentDirOption",
    "StrictOption",
    "VerboseOption",
]
