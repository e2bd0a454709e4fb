"""Primary public API for traitsmith."""

from __future__ import annotations

from traitsmith.core import (
    ConfigError,
    DuplicateRegistration,
    ImplementorDescriptor,
    IndexConfig,
    LoadReport,
    MalformedFragment,
    PaginationHeader,
    PaginationOverrun,
    RegistryContext,
    TraitFragment,
    TraitIndex,
    TraitIndexError,
    build_index,
    build_trait_index,
    decode_fragment,
    decode_header,
    encode_header,
    get_context,
    initialize_registry,
    load_config,
    load_fragments,
    read_crate_implementors,
    read_fragment_script,
    register,
    reset_context,
    slice_by_offsets,
)
from traitsmith.version import get_version


__version__ = get_version()

__all__ = [
    "ConfigError",
    "DuplicateRegistration",
    "ImplementorDescriptor",
    "IndexConfig",
    "LoadReport",
    "MalformedFragment",
    "PaginationHeader",
    "PaginationOverrun",
    "RegistryContext",
    "TraitFragment",
    "TraitIndex",
    "TraitIndexError",
    "__version__",
    "build_index",
    "build_trait_index",
    "decode_fragment",
    "decode_header",
    "encode_header",
    "get_context",
    "initialize_registry",
    "load_config",
    "load_fragments",
    "read_crate_implementors",
    "read_fragment_script",
    "register",
    "reset_context",
    "slice_by_offsets",
]
