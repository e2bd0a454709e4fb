from __future__ import annotations

import logging

import pytest

from traitsmith.core.diagnostics import LoggingEmitter, NullEmitter, format_event_message
from traitsmith.core.exceptions import DuplicateRegistration
from traitsmith.ui.cli.diagnostics import CliEmitter
from traitsmith.ui.cli.state import CLIState, set_cli_state


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("nothing to see")
        emitter.error("still quiet")
    assert not caplog.records
    emitter.event("ignored", {"value": 1})
    assert emitter.debug_enabled is False


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.INFO):
        emitter.error("boom")
        emitter.warning("dup", DuplicateRegistration("demo::X"))
        emitter.event("registry_initialized", {"drained": 2})
    messages = [record.message for record in caplog.records]
    assert "boom" in messages
    assert "dup" in messages
    assert "Registry ready (2 pending fragments drained)" in messages


def test_format_event_message() -> None:
    assert format_event_message("registry_initialized", {"drained": 1}) == (
        "Registry ready (1 pending fragment drained)"
    )
    assert format_event_message("fragment_skipped", {"trait": "a::B", "reason": "bad"}) == (
        "Skipped fragment a::B: bad"
    )
    assert format_event_message("unknown", {}) is None


def test_cli_emitter_renders_warnings_and_errors(capsys: pytest.CaptureFixture[str]) -> None:
    state = set_cli_state(verbosity=0, debug=False)
    emitter = CliEmitter(state=state)

    emitter.warning("Heads up", exc=None)
    emitter.error("Boom", exc=DuplicateRegistration("demo::X"))

    captured = capsys.readouterr()
    assert "Heads up" in captured.err
    assert "Boom" in captured.err
    assert "DuplicateRegistration" not in captured.err


def test_cli_emitter_tracks_skipped_fragments(capsys: pytest.CaptureFixture[str]) -> None:
    state = CLIState(verbosity=1)
    emitter = CliEmitter(state=state)

    emitter.event("fragment_skipped", {"trait": "core::hash::Hasher", "reason": "bad header"})
    emitter.event("registry_initialized", {"drained": 4})
    emitter.event("custom", {"flag": True})

    assert state.skipped == ["core::hash::Hasher"]
    output = capsys.readouterr().out
    assert "Skipped fragment core::hash::Hasher: bad header" in output
    assert "Registry ready (4 pending fragments drained)" in output


def test_cli_emitter_is_quiet_by_default(capsys: pytest.CaptureFixture[str]) -> None:
    state = CLIState()
    CliEmitter(state=state).event("fragment_skipped", {"trait": "a::B"})

    assert state.skipped == ["a::B"]
    assert capsys.readouterr().out == ""
