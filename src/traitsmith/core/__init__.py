"""Core building blocks of the implementor index."""

from __future__ import annotations

from .config import IndexConfig, load_config
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    ConfigError,
    DuplicateRegistration,
    MalformedFragment,
    PaginationOverrun,
    TraitIndexError,
)
from .index import TraitIndex, build_index, build_trait_index, rebase_links
from .loader import (
    LoadReport,
    iter_crate_slices,
    iter_fragment_files,
    load_fragments,
    read_crate_implementors,
    trait_id_for_file,
    trait_id_from_path,
)
from .models import ImplementorDescriptor, PaginationHeader, TraitFragment
from .pagination import decode_header, encode_header, slice_by_offsets, split_payload
from .payload import (
    decode_crate_slice,
    decode_fragment,
    parse_fragment_script,
    read_fragment_script,
)
from .registry import (
    RegistryContext,
    get_context,
    initialize_registry,
    register,
    registry_snapshot,
    reset_context,
)


__all__ = [
    "ConfigError",
    "DiagnosticEmitter",
    "DuplicateRegistration",
    "ImplementorDescriptor",
    "IndexConfig",
    "LoadReport",
    "LoggingEmitter",
    "MalformedFragment",
    "NullEmitter",
    "PaginationHeader",
    "PaginationOverrun",
    "RegistryContext",
    "TraitFragment",
    "TraitIndex",
    "TraitIndexError",
    "build_index",
    "build_trait_index",
    "decode_crate_slice",
    "decode_fragment",
    "decode_header",
    "encode_header",
    "get_context",
    "initialize_registry",
    "iter_crate_slices",
    "iter_fragment_files",
    "load_config",
    "load_fragments",
    "parse_fragment_script",
    "read_crate_implementors",
    "read_fragment_script",
    "rebase_links",
    "register",
    "registry_snapshot",
    "reset_context",
    "slice_by_offsets",
    "split_payload",
    "trait_id_for_file",
    "trait_id_from_path",
]
