"""Custom exception hierarchy for the implementor index."""

from __future__ import annotations


class TraitIndexError(RuntimeError):
    """Base exception for implementor index failures."""


class MalformedFragment(TraitIndexError):
    """Raised when a fragment payload disagrees with its pagination header."""

    def __init__(self, message: str, *, trait_id: str | None = None) -> None:
        if trait_id:
            message = f"{trait_id}: {message}"
        super().__init__(message)
        self.trait_id = trait_id


class DuplicateRegistration(TraitIndexError):
    """Reported when a trait identifier registers more than once."""

    def __init__(self, trait_id: str, *, pending: bool = False) -> None:
        where = "pending buffer" if pending else "registry"
        super().__init__(f"Trait '{trait_id}' registered twice ({where}); keeping the latest.")
        self.trait_id = trait_id
        self.pending = pending


class PaginationOverrun(TraitIndexError):
    """Raised when the fragment lengths reach past the end of the payload."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"Pagination header requires {required} characters but payload holds {available}."
        )
        self.required = required
        self.available = available


class ConfigError(TraitIndexError):
    """Raised when the index configuration cannot be loaded."""


__all__ = [
    "ConfigError",
    "DuplicateRegistration",
    "MalformedFragment",
    "PaginationOverrun",
    "TraitIndexError",
]
