"""Diagnostic emitter rendering loader and registry events on the console."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from traitsmith.core.diagnostics import format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state


class CliEmitter:
    """Print warnings and errors to stderr and summaries when verbose.

    Skipped fragments are remembered on the CLI state so commands can mention
    them once the registry is built.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state if state is not None else get_cli_state()
        self.debug_enabled = self._state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        if name == "fragment_skipped":
            self._state.skipped.append(str(payload.get("trait") or "<unknown>"))
        if self._state.verbosity < 1:
            return
        message = format_event_message(name, payload)
        if message:
            self._state.console.print(message, markup=False, highlight=False)


__all__ = ["CliEmitter"]
