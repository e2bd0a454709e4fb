"""CLI command implementations exposed via `traitsmith.ui.cli`."""

from __future__ import annotations

from .inspect import header, show, traits


__all__ = ["header", "show", "traits"]
