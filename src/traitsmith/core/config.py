"""Configuration model used by the fragment loader.

IndexConfig

`docs_root` (`Path`)
: Root of the generated documentation site, i.e. the directory holding the
  `trait.impl` tree.

`fragment_dir` (`str`)
: Directory below `docs_root` containing the per-trait fragment scripts.

`root_path` (`str`)
: Prefix applied to relative links found in implementor markup when building
  the consumer index. Mirrors the page-relative root of the documentation site.

`strict` (`bool`)
: Raise on the first malformed fragment instead of skipping it.

`initialize` (`bool`)
: Initialise the registry once every fragment has been registered.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigError


class IndexConfig(BaseModel):
    """Settings controlling how fragments are discovered and registered."""

    model_config = ConfigDict(extra="forbid")

    docs_root: Path
    fragment_dir: str = Field(default="trait.impl", description="Fragment directory")
    root_path: str = Field(default="", description="Prefix for relative links")
    strict: bool = False
    initialize: bool = True

    @field_validator("fragment_dir")
    @classmethod
    def _check_fragment_dir(cls, value: str) -> str:
        value = value.strip().strip("/")
        if not value:
            raise ValueError("fragment_dir must not be empty")
        return value

    @property
    def fragment_root(self) -> Path:
        return self.docs_root / self.fragment_dir


def load_config(path: str | Path, **overrides: Any) -> IndexConfig:
    """Load an ``IndexConfig`` from a YAML file.

    A relative ``docs_root`` is resolved against the directory holding the
    configuration file.
    """
    config_path = Path(path)
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration '{config_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in '{config_path}': {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration '{config_path}' must be a mapping.")

    data = {**raw, **overrides}
    try:
        config = IndexConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration '{config_path}': {exc}") from exc

    if not config.docs_root.is_absolute():
        config = config.model_copy(
            update={"docs_root": (config_path.parent / config.docs_root).resolve()}
        )
    return config


__all__ = ["IndexConfig", "load_config"]
