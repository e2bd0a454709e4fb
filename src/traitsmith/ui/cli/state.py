"""Per-invocation state shared by the CLI commands."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING

import click


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "set_cli_state",
]


@dataclass(slots=True)
class CLIState:
    """Verbosity, traceback display, and fragments skipped while loading."""

    verbosity: int = 0
    show_tracebacks: bool = False
    skipped: list[str] = field(default_factory=list, init=False)
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Return a stdout console bound to the current ``sys.stdout``."""
        from rich.console import Console

        if self._console is None or self._console.file is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        """Return a stderr console bound to the current ``sys.stderr``."""
        from rich.console import Console

        if self._err_console is None or self._err_console.file is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("traitsmith_cli_state", default=None)


def get_cli_state(ctx: click.Context | None = None, *, create: bool = True) -> CLIState:
    """Return the state stored on the active Click context, or the fallback one."""
    if ctx is None:
        ctx = click.get_current_context(silent=True)

    if ctx is not None:
        state = ctx.find_object(CLIState)
        if state is None and create:
            state = ctx.ensure_object(CLIState)
        if state is not None:
            _STATE_VAR.set(state)
            return state

    fallback = _STATE_VAR.get(None)
    if fallback is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        fallback = CLIState()
        _STATE_VAR.set(fallback)
    return fallback


def set_cli_state(
    *,
    ctx: click.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Update the CLI state, returning the current instance."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def _render(level: str, message: str, exception: BaseException | None) -> None:
    from rich.text import Text

    state = get_cli_state()
    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        text.append(f"\ntype: {type(exception).__name__}", style=style)
        cause = exception.__cause__
        if cause is not None and state.verbosity >= 2:
            text.append(f"\ncaused by: {type(cause).__name__}: {cause}", style=style)
    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    """Print a warning to stderr, with exception details when verbose."""
    _render("warning", message, exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    """Print an error to stderr, with exception details when verbose."""
    _render("error", message, exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks should be displayed."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
