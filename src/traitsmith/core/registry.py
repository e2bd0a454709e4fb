"""Process-wide registry aggregating trait fragments in any arrival order.

A context starts in the *pending* phase: fragments registered there wait in
the pending buffer. ``initialize`` switches the context to the *ready* phase
exactly once, draining the buffer into the registry. Registrations made after
that land directly in the registry, so the final state does not depend on
whether a fragment arrived before or after initialisation.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from threading import Lock

from .diagnostics import DiagnosticEmitter, LoggingEmitter
from .exceptions import DuplicateRegistration, TraitIndexError
from .models import TraitFragment


@dataclass(slots=True)
class PendingState:
    """Fragments registered before the registry exists."""

    fragments: dict[str, TraitFragment] = field(default_factory=dict)


@dataclass(slots=True)
class ReadyState:
    """Initialised registry mapping trait identifiers to their fragments."""

    traits: dict[str, TraitFragment] = field(default_factory=dict)


class RegistryContext:
    """Registry and pending buffer guarded by a single lock."""

    def __init__(self, *, emitter: DiagnosticEmitter | None = None) -> None:
        self.emitter: DiagnosticEmitter = emitter if emitter is not None else LoggingEmitter()
        self._state: PendingState | ReadyState = PendingState()
        self._lock = Lock()

    @property
    def is_ready(self) -> bool:
        with self._lock:
            return isinstance(self._state, ReadyState)

    def register(self, trait_id: str, fragment: TraitFragment) -> None:
        """Store ``fragment`` under ``trait_id``; the latest registration wins."""
        if not trait_id:
            raise TraitIndexError("Trait identifier must not be empty.")
        with self._lock:
            state = self._state
            if isinstance(state, ReadyState):
                target, pending = state.traits, False
            else:
                target, pending = state.fragments, True
            duplicate = trait_id in target
            target[trait_id] = fragment

        if duplicate:
            exc = DuplicateRegistration(trait_id, pending=pending)
            self.emitter.warning(str(exc), exc)

    def initialize(self) -> bool:
        """Create the registry and drain pending fragments into it.

        Returns ``True`` when this call performed the transition and ``False``
        when the registry was already initialised.
        """
        with self._lock:
            state = self._state
            if isinstance(state, ReadyState):
                return False
            ready = ReadyState()
            # The registry is empty at this point, so draining cannot collide.
            ready.traits.update(state.fragments)
            drained = len(state.fragments)
            state.fragments.clear()
            self._state = ready

        self.emitter.event("registry_initialized", {"drained": drained})
        return True

    def pending(self) -> dict[str, TraitFragment]:
        """Return a copy of the pending buffer, empty once initialised."""
        with self._lock:
            state = self._state
            if isinstance(state, PendingState):
                return dict(state.fragments)
            return {}

    def snapshot(self) -> dict[str, TraitFragment]:
        """Return a shallow copy of the initialised registry."""
        with self._lock:
            state = self._state
            if not isinstance(state, ReadyState):
                raise TraitIndexError("Registry has not been initialised.")
            return dict(state.traits)

    def get(self, trait_id: str) -> TraitFragment | None:
        """Return the fragment registered for ``trait_id`` when ready."""
        with self._lock:
            state = self._state
            if isinstance(state, ReadyState):
                return state.traits.get(trait_id)
            return None

    def __contains__(self, trait_id: object) -> bool:
        with self._lock:
            state = self._state
            return isinstance(state, ReadyState) and trait_id in state.traits

    def __len__(self) -> int:
        with self._lock:
            state = self._state
            return len(state.traits) if isinstance(state, ReadyState) else 0

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            state = self._state
            keys = sorted(state.traits) if isinstance(state, ReadyState) else []
        yield from keys


_CONTEXT = RegistryContext()
_CONTEXT_LOCK = Lock()


def get_context() -> RegistryContext:
    """Return the process-wide registry context."""
    with _CONTEXT_LOCK:
        return _CONTEXT


def reset_context(*, emitter: DiagnosticEmitter | None = None) -> RegistryContext:
    """Replace the process-wide context with a fresh pending one."""
    global _CONTEXT
    with _CONTEXT_LOCK:
        _CONTEXT = RegistryContext(emitter=emitter)
        return _CONTEXT


def register(trait_id: str, fragment: TraitFragment) -> None:
    """Register ``fragment`` with the process-wide context."""
    get_context().register(trait_id, fragment)


def initialize_registry() -> bool:
    """Initialise the process-wide registry, draining pending fragments."""
    return get_context().initialize()


def registry_snapshot(context: RegistryContext | None = None) -> Mapping[str, TraitFragment]:
    """Return the traits held by ``context`` (default: the process-wide one)."""
    if context is None:
        context = get_context()
    return context.snapshot()


__all__ = [
    "PendingState",
    "ReadyState",
    "RegistryContext",
    "get_context",
    "initialize_registry",
    "register",
    "registry_snapshot",
    "reset_context",
]
